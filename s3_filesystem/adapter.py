from __future__ import annotations
"""Filesystem-style facade over a single object store bucket."""
from datetime import datetime, timezone
import io
import logging
from typing import Any, BinaryIO, Callable, Iterator, Mapping, Protocol, Union

from .client import Boto3ObjectStoreClient, ObjectStoreClient
from .errors import (
    ObjectStoreError,
    UnableToCopyFile,
    UnableToCreateDirectory,
    UnableToDeleteDirectory,
    UnableToDeleteFile,
    UnableToGenerateTemporaryUrl,
    UnableToMoveFile,
    UnableToReadFile,
    UnableToRetrieveMetadata,
    UnableToSetVisibility,
    UnableToWriteFile,
)
from .listing import LIST_MAX_KEYS, list_contents, to_timestamp
from .models import FileAttributes, StorageAttributes, Visibility, WriteOptions
from .settings import AdapterSettings
from .streams import CHUNK_SIZE, write_stream

LOGGER = logging.getLogger(__name__)

WriteConfig = Union[WriteOptions, Mapping[str, Any], None]

PUBLIC_READ_ACL = "public-read"
PRIVATE_ACL = "private"


class FilesystemAdapter(Protocol):
    """Operations every filesystem backend provides."""

    def file_exists(self, path: str) -> bool: ...

    def directory_exists(self, path: str) -> bool: ...

    def write(self, path: str, contents: bytes, config: WriteConfig = None) -> None: ...

    def write_stream(self, path: str, contents: BinaryIO, config: WriteConfig = None) -> None: ...

    def read(self, path: str) -> bytes: ...

    def read_stream(self, path: str) -> BinaryIO: ...

    def delete(self, path: str) -> None: ...

    def delete_directory(self, path: str) -> None: ...

    def create_directory(self, path: str, config: WriteConfig = None) -> None: ...

    def set_visibility(self, path: str, visibility: str) -> None: ...

    def visibility(self, path: str) -> FileAttributes: ...

    def mime_type(self, path: str) -> FileAttributes: ...

    def last_modified(self, path: str) -> FileAttributes: ...

    def file_size(self, path: str) -> FileAttributes: ...

    def list_contents(self, path: str, deep: bool = False) -> Iterator[StorageAttributes]: ...

    def move(self, source: str, destination: str, config: WriteConfig = None) -> None: ...

    def copy(self, source: str, destination: str, config: WriteConfig = None) -> None: ...


class TemporaryUrlGenerator(Protocol):
    def temporary_url(self, path: str, expires_at: datetime, config: WriteConfig = None) -> str: ...


class S3FilesystemAdapter:
    """Exposes one bucket through :class:`FilesystemAdapter` and :class:`TemporaryUrlGenerator`.

    Store failures are re-raised as the matching :mod:`s3_filesystem.errors`
    type with the store message preserved as ``reason``.
    """

    def __init__(
        self,
        bucket: str,
        client: ObjectStoreClient,
        *,
        list_max_keys: int = LIST_MAX_KEYS,
        stream_chunk_size: int = CHUNK_SIZE,
    ):
        self._bucket = bucket
        self._client = client
        self._list_max_keys = list_max_keys
        self._stream_chunk_size = stream_chunk_size

    @classmethod
    def from_settings(
        cls,
        settings: AdapterSettings,
        *,
        client_factory: Callable[..., object] | None = None,
    ) -> "S3FilesystemAdapter":
        client = Boto3ObjectStoreClient(
            settings.bucket,
            endpoint_url=settings.endpoint_url,
            region_name=settings.region_name,
            addressing_style=settings.addressing_style,
            signature_version=settings.signature_version,
            client_factory=client_factory,
        )
        return cls(
            settings.bucket,
            client,
            list_max_keys=settings.list_max_keys,
            stream_chunk_size=settings.stream_chunk_size,
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def client(self) -> ObjectStoreClient:
        return self._client

    def file_exists(self, path: str) -> bool:
        return self._client.object_exists(path)

    def directory_exists(self, path: str) -> bool:
        # Same key probe as files; prefix-only directories report False.
        return self.file_exists(path)

    def write(self, path: str, contents: bytes, config: WriteConfig = None) -> None:
        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        try:
            self._client.put_object(path, contents, WriteOptions.from_config(config))
        except ObjectStoreError as exc:
            LOGGER.exception("Write failed for '%s'", path)
            raise UnableToWriteFile.at_location(path, exc.message, exc) from exc

    def write_stream(self, path: str, contents: BinaryIO, config: WriteConfig = None) -> None:
        write_stream(
            self._client,
            path,
            contents,
            WriteOptions.from_config(config),
            chunk_size=self._stream_chunk_size,
        )

    def read(self, path: str) -> bytes:
        try:
            return self._client.get_object(path)
        except ObjectStoreError as exc:
            LOGGER.exception("Read failed for '%s'", path)
            raise UnableToReadFile.from_location(path, exc.message, exc) from exc

    def read_stream(self, path: str) -> BinaryIO:
        stream = io.BytesIO(self.read(path))
        stream.seek(0)
        return stream

    def delete(self, path: str) -> None:
        try:
            self._client.delete_object(path)
        except ObjectStoreError as exc:
            LOGGER.exception("Delete failed for '%s'", path)
            raise UnableToDeleteFile.at_location(path, exc.message, exc) from exc

    def delete_directory(self, path: str) -> None:
        keys: list[str] = []
        try:
            keys = [entry.path for entry in self.list_contents(path, True)]
            if not keys:
                LOGGER.debug("Nothing to delete under '%s'", path)
                return
            self._client.delete_objects(keys)
        except ObjectStoreError as exc:
            LOGGER.exception("Deleting directory '%s' failed after listing %d key(s)", path, len(keys))
            raise UnableToDeleteDirectory.at_location(path, exc.message, exc) from exc
        LOGGER.debug("Deleted %d key(s) under '%s'", len(keys), path)

    def create_directory(self, path: str, config: WriteConfig = None) -> None:
        try:
            self._client.create_directory_placeholder(path)
        except ObjectStoreError as exc:
            LOGGER.exception("Create directory failed for '%s'", path)
            raise UnableToCreateDirectory.at_location(path, exc.message, exc) from exc

    def set_visibility(self, path: str, visibility: str) -> None:
        acl = PUBLIC_READ_ACL if visibility == Visibility.PUBLIC else PRIVATE_ACL
        try:
            self._client.put_object_acl(path, acl)
        except ObjectStoreError as exc:
            LOGGER.exception("Set visibility failed for '%s'", path)
            raise UnableToSetVisibility.at_location(path, exc.message, exc) from exc

    def visibility(self, path: str) -> FileAttributes:
        """Return the object's ACL as reported by the store (e.g. ``public-read``)."""

        try:
            acl = self._client.get_object_acl(path)
        except ObjectStoreError as exc:
            LOGGER.exception("Visibility lookup failed for '%s'", path)
            raise UnableToRetrieveMetadata.visibility(path, exc.message, exc) from exc
        return FileAttributes(path, visibility=acl)

    def mime_type(self, path: str) -> FileAttributes:
        return self.get_metadata(path)

    def last_modified(self, path: str) -> FileAttributes:
        return self.get_metadata(path)

    def file_size(self, path: str) -> FileAttributes:
        return self.get_metadata(path)

    def get_metadata(self, path: str) -> FileAttributes:
        """Fetch size, modification time and mime type in one request."""

        try:
            meta = self._client.get_object_meta(path)
        except ObjectStoreError as exc:
            LOGGER.exception("Metadata lookup failed for '%s'", path)
            raise UnableToRetrieveMetadata.mime_type(path, exc.message, exc) from exc
        return FileAttributes(
            path,
            file_size=meta.content_length,
            last_modified=to_timestamp(meta.last_modified),
            mime_type=meta.content_type,
        )

    def list_contents(self, path: str, deep: bool = False) -> Iterator[StorageAttributes]:
        return list_contents(self._client, path, deep, max_keys=self._list_max_keys)

    def move(self, source: str, destination: str, config: WriteConfig = None) -> None:
        try:
            self._client.copy_object(source, destination)
            self._client.delete_object(source)
        except ObjectStoreError as exc:
            LOGGER.exception("Move failed from '%s' to '%s'", source, destination)
            raise UnableToMoveFile.from_location_to(source, destination, exc.message, exc) from exc

    def copy(self, source: str, destination: str, config: WriteConfig = None) -> None:
        try:
            self._client.copy_object(source, destination)
        except ObjectStoreError as exc:
            LOGGER.exception("Copy failed from '%s' to '%s'", source, destination)
            raise UnableToCopyFile.from_location_to(source, destination, exc.message, exc) from exc

    def temporary_url(self, path: str, expires_at: datetime, config: WriteConfig = None) -> str:
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        try:
            return self._client.generate_presigned_url(path, int(expires_at.timestamp()))
        except ObjectStoreError as exc:
            LOGGER.exception("Temporary url generation failed for '%s'", path)
            raise UnableToGenerateTemporaryUrl.due_to_error(path, exc.message, exc) from exc
