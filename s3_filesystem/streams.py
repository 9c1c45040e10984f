from __future__ import annotations
"""Sequential, append-based upload of a byte stream."""
import logging
from typing import Any

from .client import ObjectStoreClient
from .errors import InvalidStreamProvided, ObjectStoreError, UnableToWriteFile
from .models import WriteOptions

LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 1_000_000


def is_readable_stream(contents: Any) -> bool:
    if isinstance(contents, (bytes, bytearray, str)):
        return False
    if not callable(getattr(contents, "read", None)):
        return False
    if getattr(contents, "closed", False):
        return False
    readable = getattr(contents, "readable", None)
    if callable(readable):
        return bool(readable())
    return True


def _read_chunk(contents: Any, chunk_size: int, path: str) -> bytes:
    """Read until ``chunk_size`` bytes are gathered or the source is exhausted."""

    parts = []
    remaining = chunk_size
    while remaining > 0:
        try:
            data = contents.read(remaining)
        except OSError as exc:
            raise UnableToWriteFile.at_location(path, f"read failed: {exc}", exc) from exc
        if data is None:
            raise UnableToWriteFile.at_location(path, "read would block on a non-blocking source")
        if isinstance(data, str):
            # offsets are byte positions; text streams cannot honour them
            raise InvalidStreamProvided.for_location(path)
        if not data:
            break
        parts.append(bytes(data))
        remaining -= len(data)
    return b"".join(parts)


def write_stream(
    client: ObjectStoreClient,
    path: str,
    contents: Any,
    options: WriteOptions | None = None,
    *,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    """Append ``contents`` to ``path`` in ``chunk_size`` pieces.

    Chunk ``i`` lands at offset ``i * chunk_size``. The first failing append
    aborts the upload and leaves whatever was already appended in place.
    Returns the number of chunks written; the source is closed on success.
    """

    if not is_readable_stream(contents):
        raise InvalidStreamProvided.for_location(path)

    index = 0
    while True:
        chunk = _read_chunk(contents, chunk_size, path)
        if not chunk:
            break
        position = index * chunk_size
        try:
            client.append_object(path, chunk, position, options)
        except ObjectStoreError as exc:
            LOGGER.exception("Append of chunk %d at offset %d failed for '%s'", index, position, path)
            raise UnableToWriteFile.at_location(path, exc.message, exc) from exc
        index += 1

    contents.close()
    LOGGER.debug("Wrote %d chunk(s) to '%s'", index, path)
    return index
