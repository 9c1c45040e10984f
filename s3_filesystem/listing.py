from __future__ import annotations
"""Directory listing over a flat, delimiter-grouped key namespace."""
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
import logging
from typing import Iterator, Optional, Union

from .client import ObjectStoreClient
from .models import DirectoryAttributes, FileAttributes, ListPage, StorageAttributes

LOGGER = logging.getLogger(__name__)

LIST_MAX_KEYS = 1000
DELIMITER = "/"


def to_timestamp(value: Optional[Union[str, datetime]]) -> Optional[int]:
    """Convert a store timestamp (ISO-8601, RFC 1123 or datetime) to epoch seconds."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        moment = value
    else:
        text = value.strip()
        try:
            moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            moment = parsedate_to_datetime(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


def list_contents(
    client: ObjectStoreClient,
    path: str,
    deep: bool = False,
    *,
    max_keys: int = LIST_MAX_KEYS,
) -> Iterator[StorageAttributes]:
    """Yield the entries below ``path`` one page at a time.

    Sub-directories are yielded before the files of the page they appear in.
    With ``deep`` each sub-directory is expanded depth-first right after its
    own entry. Missing and empty directories both produce nothing.
    """

    directory = path.rstrip("\\/")
    prefix = directory + DELIMITER
    marker = ""
    while True:
        LOGGER.debug("Listing prefix '%s' from marker '%s'", prefix, marker)
        page = client.list_page(
            prefix=prefix,
            delimiter=DELIMITER,
            marker=marker,
            max_keys=max_keys,
        )
        marker = page.next_marker
        yield from _directories(client, page, deep, max_keys)
        yield from _files(page, prefix)
        if marker == "":
            break


def _directories(
    client: ObjectStoreClient, page: ListPage, deep: bool, max_keys: int
) -> Iterator[StorageAttributes]:
    for sub_prefix in page.prefixes:
        yield DirectoryAttributes(sub_prefix)
        if deep:
            yield from list_contents(client, sub_prefix, deep, max_keys=max_keys)


def _files(page: ListPage, prefix: str) -> Iterator[FileAttributes]:
    for summary in page.objects:
        # zero-byte object named after the directory itself
        if summary.size == 0 and summary.key == prefix:
            continue
        yield FileAttributes(
            summary.key,
            file_size=summary.size,
            last_modified=to_timestamp(summary.last_modified),
        )
