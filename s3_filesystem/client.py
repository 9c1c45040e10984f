from __future__ import annotations
"""Object store client capability and its boto3 implementation."""
import base64
from contextlib import contextmanager
import hashlib
import logging
import time
from typing import Callable, Iterator, Protocol, Sequence

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .errors import ObjectStoreError
from .models import ListPage, ObjectMeta, ObjectSummary, WriteOptions

LOGGER = logging.getLogger(__name__)

DELETE_BATCH_SIZE = 1000
NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})
ALL_USERS_URI = "http://acs.amazonaws.com/groups/global/AllUsers"
USER_METADATA_PREFIX = "x-amz-meta-"
HEADER_PARAMS = {
    "cache-control": "CacheControl",
    "content-disposition": "ContentDisposition",
    "content-encoding": "ContentEncoding",
    "content-language": "ContentLanguage",
    "content-type": "ContentType",
    "expires": "Expires",
    "x-amz-acl": "ACL",
    "x-amz-storage-class": "StorageClass",
    "x-amz-server-side-encryption": "ServerSideEncryption",
    "x-amz-website-redirect-location": "WebsiteRedirectLocation",
    "x-amz-tagging": "Tagging",
}


class ObjectStoreClient(Protocol):
    """Narrow set of object store calls the adapter relies on.

    Every method acts on the single bucket the client was built for and
    raises :class:`ObjectStoreError` when the store rejects the call.
    """

    def object_exists(self, key: str) -> bool: ...

    def put_object(self, key: str, data: bytes, options: WriteOptions | None = None) -> None: ...

    def append_object(
        self, key: str, data: bytes, position: int, options: WriteOptions | None = None
    ) -> None: ...

    def get_object(self, key: str) -> bytes: ...

    def delete_object(self, key: str) -> None: ...

    def delete_objects(self, keys: Sequence[str]) -> None: ...

    def create_directory_placeholder(self, key: str) -> None: ...

    def put_object_acl(self, key: str, acl: str) -> None: ...

    def get_object_acl(self, key: str) -> str: ...

    def get_object_meta(self, key: str) -> ObjectMeta: ...

    def list_page(
        self, *, prefix: str, delimiter: str = "/", marker: str = "", max_keys: int = 1000
    ) -> ListPage: ...

    def copy_object(self, source_key: str, destination_key: str) -> None: ...

    def generate_presigned_url(self, key: str, expires_at: int) -> str: ...


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def _translate(exc: ClientError | BotoCoreError) -> ObjectStoreError:
    if isinstance(exc, ClientError):
        message = exc.response.get("Error", {}).get("Message") or str(exc)
        return ObjectStoreError(message, code=_error_code(exc) or None)
    return ObjectStoreError(str(exc))


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except (ClientError, BotoCoreError) as exc:
        error = _translate(exc)
        LOGGER.debug("%s failed: %s", action, error.message)
        raise error from exc


def canned_acl_from_grants(grants: Sequence[dict]) -> str:
    """Collapse an object's grant list into the matching canned ACL name."""

    public_permissions = {
        grant.get("Permission")
        for grant in grants
        if grant.get("Grantee", {}).get("URI") == ALL_USERS_URI
    }
    if "FULL_CONTROL" in public_permissions or {"READ", "WRITE"} <= public_permissions:
        return "public-read-write"
    if "READ" in public_permissions:
        return "public-read"
    return "private"


def headers_to_params(headers: dict[str, str]) -> dict:
    """Map raw request headers onto the matching ``put_object`` parameters.

    ``x-amz-meta-*`` headers become user metadata with the prefix stripped.
    Headers boto3 has no parameter for are dropped with a warning.
    """

    params: dict = {}
    metadata: dict[str, str] = {}
    for name, value in headers.items():
        lowered = name.strip().lower()
        if lowered.startswith(USER_METADATA_PREFIX):
            metadata[lowered[len(USER_METADATA_PREFIX):]] = value
        elif lowered in HEADER_PARAMS:
            params[HEADER_PARAMS[lowered]] = value
        else:
            LOGGER.warning("Dropping unsupported request header '%s'", name)
    if metadata:
        params["Metadata"] = metadata
    return params


class Boto3ObjectStoreClient:
    """:class:`ObjectStoreClient` backed by a boto3 S3 client for one bucket."""

    def __init__(
        self,
        bucket: str,
        *,
        endpoint_url: str | None = None,
        region_name: str | None = None,
        addressing_style: str = "auto",
        signature_version: str = "s3v4",
        client_factory: Callable[..., object] | None = None,
        clock: Callable[[], float] = time.time,
    ):
        if not bucket:
            raise ValueError("bucket must not be empty")
        self._bucket = bucket
        self._clock = clock
        factory = client_factory or boto3.client
        config = Config(
            signature_version=signature_version,
            s3={"addressing_style": addressing_style},
        )
        self._client = factory(
            "s3",
            endpoint_url=endpoint_url,
            region_name=region_name,
            config=config,
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    def object_exists(self, key: str) -> bool:
        try:
            self._client.head_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) in NOT_FOUND_CODES:
                return False
            raise _translate(exc) from exc
        except BotoCoreError as exc:
            raise _translate(exc) from exc
        return True

    def put_object(self, key: str, data: bytes, options: WriteOptions | None = None) -> None:
        params = self._write_params(key, data, options)
        with _store_errors("PutObject"):
            self._client.put_object(**params)

    def append_object(
        self, key: str, data: bytes, position: int, options: WriteOptions | None = None
    ) -> None:
        params = self._write_params(key, data, options)
        params["WriteOffsetBytes"] = int(position)
        with _store_errors("AppendObject"):
            self._client.put_object(**params)

    def get_object(self, key: str) -> bytes:
        with _store_errors("GetObject"):
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            return response["Body"].read()

    def delete_object(self, key: str) -> None:
        with _store_errors("DeleteObject"):
            self._client.delete_object(Bucket=self._bucket, Key=key)

    def delete_objects(self, keys: Sequence[str]) -> None:
        keys = list(keys)
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            batch = keys[start:start + DELETE_BATCH_SIZE]
            with _store_errors("DeleteObjects"):
                response = self._client.delete_objects(
                    Bucket=self._bucket,
                    Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
                )
            errors = response.get("Errors") or []
            if errors:
                first = errors[0]
                raise ObjectStoreError(
                    first.get("Message") or f"Failed to delete {first.get('Key')}",
                    code=first.get("Code"),
                )

    def create_directory_placeholder(self, key: str) -> None:
        with _store_errors("PutObject"):
            self._client.put_object(Bucket=self._bucket, Key=key, Body=b"")

    def put_object_acl(self, key: str, acl: str) -> None:
        with _store_errors("PutObjectAcl"):
            self._client.put_object_acl(Bucket=self._bucket, Key=key, ACL=acl)

    def get_object_acl(self, key: str) -> str:
        with _store_errors("GetObjectAcl"):
            response = self._client.get_object_acl(Bucket=self._bucket, Key=key)
        return canned_acl_from_grants(response.get("Grants", []))

    def get_object_meta(self, key: str) -> ObjectMeta:
        with _store_errors("HeadObject"):
            response = self._client.head_object(Bucket=self._bucket, Key=key)
        size = response.get("ContentLength")
        return ObjectMeta(
            content_length=int(size) if size is not None else None,
            last_modified=response.get("LastModified"),
            content_type=response.get("ContentType"),
        )

    def list_page(
        self, *, prefix: str, delimiter: str = "/", marker: str = "", max_keys: int = 1000
    ) -> ListPage:
        list_params = {"Bucket": self._bucket, "MaxKeys": max_keys, "Prefix": prefix}
        if delimiter:
            list_params["Delimiter"] = delimiter
        if marker:
            list_params["Marker"] = marker

        with _store_errors("ListObjects"):
            response = self._client.list_objects(**list_params)

        objects = [
            ObjectSummary(
                key=obj["Key"],
                size=int(obj.get("Size", 0)),
                last_modified=obj.get("LastModified"),
            )
            for obj in response.get("Contents", [])
        ]
        prefixes = [common["Prefix"] for common in response.get("CommonPrefixes", [])]

        next_marker = ""
        if response.get("IsTruncated", False):
            # NextMarker is only returned when a delimiter is set.
            next_marker = response.get("NextMarker") or ""
            if not next_marker:
                candidates = [obj.key for obj in objects] + prefixes
                next_marker = max(candidates) if candidates else ""
        return ListPage(objects=objects, prefixes=prefixes, next_marker=next_marker)

    def copy_object(self, source_key: str, destination_key: str) -> None:
        with _store_errors("CopyObject"):
            self._client.copy_object(
                Bucket=self._bucket,
                Key=destination_key,
                CopySource={"Bucket": self._bucket, "Key": source_key},
            )

    def generate_presigned_url(self, key: str, expires_at: int) -> str:
        expires_in = int(expires_at - self._clock())
        if expires_in <= 0:
            raise ObjectStoreError("expiry time must be in the future")
        with _store_errors("GeneratePresignedUrl"):
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=expires_in,
            )

    def _write_params(self, key: str, data: bytes, options: WriteOptions | None) -> dict:
        params: dict = {"Bucket": self._bucket, "Key": key, "Body": data}
        if options is None or options.is_empty():
            return params
        if options.headers:
            params.update(headers_to_params(options.headers))
        if options.content_type:
            params["ContentType"] = options.content_type
        if options.check_md5:
            digest = hashlib.md5(data).digest()
            params["ContentMD5"] = base64.b64encode(digest).decode("ascii")
        return params
