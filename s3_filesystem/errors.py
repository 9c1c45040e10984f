from __future__ import annotations
"""Exception hierarchy raised by the filesystem adapter."""
from typing import Optional


class FilesystemException(Exception):
    """Base class for every error raised by :mod:`s3_filesystem`."""


class ObjectStoreError(RuntimeError):
    """Raised by object store clients when the underlying service call fails."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class FilesystemOperationFailed(FilesystemException):
    """An adapter operation failed; carries the operation, location and reason."""

    OPERATION_WRITE = "WRITE"
    OPERATION_READ = "READ"
    OPERATION_DELETE = "DELETE"
    OPERATION_DELETE_DIRECTORY = "DELETE_DIRECTORY"
    OPERATION_CREATE_DIRECTORY = "CREATE_DIRECTORY"
    OPERATION_SET_VISIBILITY = "SET_VISIBILITY"
    OPERATION_RETRIEVE_METADATA = "RETRIEVE_METADATA"
    OPERATION_MOVE = "MOVE"
    OPERATION_COPY = "COPY"

    operation = ""

    def __init__(self, message: str, *, location: str = "", reason: str = ""):
        super().__init__(message)
        self.location = location
        self.reason = reason

    @classmethod
    def _build(
        cls,
        message: str,
        *,
        location: str,
        reason: str,
        previous: Optional[BaseException],
    ):
        if reason:
            message = f"{message}: {reason}"
        error = cls(message, location=location, reason=reason)
        if previous is not None:
            error.__cause__ = previous
        return error


class UnableToWriteFile(FilesystemOperationFailed):
    operation = FilesystemOperationFailed.OPERATION_WRITE

    @classmethod
    def at_location(cls, location: str, reason: str = "", previous: BaseException | None = None):
        return cls._build(
            f"Unable to write file at location: {location}",
            location=location,
            reason=reason,
            previous=previous,
        )


class InvalidStreamProvided(UnableToWriteFile):
    """Raised when ``write_stream`` is handed something that is not a readable stream."""

    @classmethod
    def for_location(cls, location: str):
        return cls.at_location(location, "The contents is invalid resource.")


class UnableToReadFile(FilesystemOperationFailed):
    operation = FilesystemOperationFailed.OPERATION_READ

    @classmethod
    def from_location(cls, location: str, reason: str = "", previous: BaseException | None = None):
        return cls._build(
            f"Unable to read file from location: {location}",
            location=location,
            reason=reason,
            previous=previous,
        )


class UnableToGenerateTemporaryUrl(UnableToReadFile):
    @classmethod
    def due_to_error(cls, location: str, reason: str = "", previous: BaseException | None = None):
        return cls._build(
            f"Unable to generate temporary url for file at location: {location}",
            location=location,
            reason=reason,
            previous=previous,
        )


class UnableToDeleteFile(FilesystemOperationFailed):
    operation = FilesystemOperationFailed.OPERATION_DELETE

    @classmethod
    def at_location(cls, location: str, reason: str = "", previous: BaseException | None = None):
        return cls._build(
            f"Unable to delete file located at: {location}",
            location=location,
            reason=reason,
            previous=previous,
        )


class UnableToDeleteDirectory(UnableToDeleteFile):
    operation = FilesystemOperationFailed.OPERATION_DELETE_DIRECTORY

    @classmethod
    def at_location(cls, location: str, reason: str = "", previous: BaseException | None = None):
        return cls._build(
            f"Unable to delete directory located at: {location}",
            location=location,
            reason=reason,
            previous=previous,
        )


class UnableToCreateDirectory(FilesystemOperationFailed):
    operation = FilesystemOperationFailed.OPERATION_CREATE_DIRECTORY

    @classmethod
    def at_location(cls, location: str, reason: str = "", previous: BaseException | None = None):
        return cls._build(
            f"Unable to create a directory at {location}",
            location=location,
            reason=reason,
            previous=previous,
        )


class UnableToSetVisibility(FilesystemOperationFailed):
    operation = FilesystemOperationFailed.OPERATION_SET_VISIBILITY

    @classmethod
    def at_location(cls, location: str, reason: str = "", previous: BaseException | None = None):
        return cls._build(
            f"Unable to set visibility for file {location}",
            location=location,
            reason=reason,
            previous=previous,
        )


class UnableToRetrieveMetadata(FilesystemOperationFailed):
    operation = FilesystemOperationFailed.OPERATION_RETRIEVE_METADATA

    def __init__(self, message: str, *, location: str = "", reason: str = "", metadata_type: str = ""):
        super().__init__(message, location=location, reason=reason)
        self.metadata_type = metadata_type

    @classmethod
    def create(
        cls,
        location: str,
        metadata_type: str,
        reason: str = "",
        previous: BaseException | None = None,
    ):
        error = cls._build(
            f"Unable to retrieve the {metadata_type} for file at location: {location}",
            location=location,
            reason=reason,
            previous=previous,
        )
        error.metadata_type = metadata_type
        return error

    @classmethod
    def visibility(cls, location: str, reason: str = "", previous: BaseException | None = None):
        return cls.create(location, "visibility", reason, previous)

    @classmethod
    def mime_type(cls, location: str, reason: str = "", previous: BaseException | None = None):
        return cls.create(location, "mime_type", reason, previous)

    @classmethod
    def last_modified(cls, location: str, reason: str = "", previous: BaseException | None = None):
        return cls.create(location, "last_modified", reason, previous)

    @classmethod
    def file_size(cls, location: str, reason: str = "", previous: BaseException | None = None):
        return cls.create(location, "file_size", reason, previous)


class _TransferFailure(FilesystemOperationFailed):
    def __init__(self, message: str, *, source: str = "", destination: str = "", reason: str = ""):
        super().__init__(message, location=source, reason=reason)
        self.source = source
        self.destination = destination

    @classmethod
    def _build_transfer(
        cls,
        verb: str,
        source: str,
        destination: str,
        reason: str,
        previous: Optional[BaseException],
    ):
        message = f"Unable to {verb} file from {source} to {destination}"
        if reason:
            message = f"{message}: {reason}"
        error = cls(message, source=source, destination=destination, reason=reason)
        if previous is not None:
            error.__cause__ = previous
        return error


class UnableToMoveFile(_TransferFailure):
    operation = FilesystemOperationFailed.OPERATION_MOVE

    @classmethod
    def from_location_to(
        cls,
        source: str,
        destination: str,
        reason: str = "",
        previous: BaseException | None = None,
    ):
        return cls._build_transfer("move", source, destination, reason, previous)


class UnableToCopyFile(_TransferFailure):
    operation = FilesystemOperationFailed.OPERATION_COPY

    @classmethod
    def from_location_to(
        cls,
        source: str,
        destination: str,
        reason: str = "",
        previous: BaseException | None = None,
    ):
        return cls._build_transfer("copy", source, destination, reason, previous)
