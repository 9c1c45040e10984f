from __future__ import annotations
"""Data models describing filesystem entries and object store records."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Union


class Visibility:
    """Visibility values accepted by :meth:`S3FilesystemAdapter.set_visibility`."""

    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class FileAttributes:
    """A file entry, or the metadata of a single object."""

    path: str
    file_size: Optional[int] = None
    visibility: Optional[str] = None
    last_modified: Optional[int] = None
    mime_type: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return True

    @property
    def is_dir(self) -> bool:
        return False


@dataclass(frozen=True)
class DirectoryAttributes:
    """A directory entry produced by a listing."""

    path: str

    @property
    def is_file(self) -> bool:
        return False

    @property
    def is_dir(self) -> bool:
        return True


StorageAttributes = Union[FileAttributes, DirectoryAttributes]


@dataclass(frozen=True)
class WriteOptions:
    """Options forwarded to the object store on writes.

    Only these three fields ever reach the store; anything else present in a
    generic configuration mapping is dropped by :meth:`from_config`.
    """

    headers: Optional[dict[str, str]] = None
    content_type: Optional[str] = None
    check_md5: Optional[bool] = None

    OPTION_KEYS = ("headers", "content_type", "check_md5")

    @classmethod
    def from_config(cls, config: "WriteOptions | Mapping[str, Any] | None") -> "WriteOptions":
        if config is None:
            return cls()
        if isinstance(config, WriteOptions):
            return config
        values = {}
        for key in cls.OPTION_KEYS:
            value = config.get(key)
            if value:
                values[key] = value
        return cls(**values)

    def is_empty(self) -> bool:
        return not (self.headers or self.content_type or self.check_md5)


@dataclass(frozen=True)
class ObjectMeta:
    """Raw metadata returned by a single HEAD request."""

    content_length: Optional[int] = None
    last_modified: Optional[Union[str, datetime]] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class ObjectSummary:
    """One object returned in a listing page."""

    key: str
    size: int = 0
    last_modified: Optional[Union[str, datetime]] = None


@dataclass
class ListPage:
    """A single page of a prefix/delimiter listing."""

    objects: list[ObjectSummary] = field(default_factory=list)
    prefixes: list[str] = field(default_factory=list)
    next_marker: str = ""
