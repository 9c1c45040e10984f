"""Filesystem-style access to a single S3 bucket."""

from .adapter import FilesystemAdapter, S3FilesystemAdapter, TemporaryUrlGenerator
from .client import Boto3ObjectStoreClient, ObjectStoreClient
from .errors import (
    FilesystemException,
    FilesystemOperationFailed,
    InvalidStreamProvided,
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
from .models import DirectoryAttributes, FileAttributes, Visibility, WriteOptions
from .settings import AdapterSettings, SettingsStorage

__all__ = [
    "AdapterSettings",
    "Boto3ObjectStoreClient",
    "DirectoryAttributes",
    "FileAttributes",
    "FilesystemAdapter",
    "FilesystemException",
    "FilesystemOperationFailed",
    "InvalidStreamProvided",
    "ObjectStoreClient",
    "ObjectStoreError",
    "S3FilesystemAdapter",
    "SettingsStorage",
    "TemporaryUrlGenerator",
    "UnableToCopyFile",
    "UnableToCreateDirectory",
    "UnableToDeleteDirectory",
    "UnableToDeleteFile",
    "UnableToGenerateTemporaryUrl",
    "UnableToMoveFile",
    "UnableToReadFile",
    "UnableToRetrieveMetadata",
    "UnableToSetVisibility",
    "UnableToWriteFile",
    "Visibility",
    "WriteOptions",
]
