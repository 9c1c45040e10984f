from __future__ import annotations
"""Adapter settings and their JSON persistence."""

from dataclasses import asdict, dataclass
import json
import logging
from pathlib import Path
from typing import Any

LOGGER = logging.getLogger(__name__)

DEFAULT_LIST_MAX_KEYS = 1000
DEFAULT_STREAM_CHUNK_SIZE = 1_000_000
ADDRESSING_STYLES = ("auto", "path", "virtual")


@dataclass
class AdapterSettings:
    """Connection and tuning settings for :class:`S3FilesystemAdapter`.

    Credentials are deliberately absent: boto3 resolves them from its usual
    chain (environment, shared config, instance role).
    """

    bucket: str = ""
    endpoint_url: str | None = None
    region_name: str | None = None
    addressing_style: str = "auto"
    signature_version: str = "s3v4"
    list_max_keys: int = DEFAULT_LIST_MAX_KEYS
    stream_chunk_size: int = DEFAULT_STREAM_CHUNK_SIZE


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number <= 0:
        return default
    return number


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class SettingsStorage:
    """JSON-backed persistence for :class:`AdapterSettings`."""

    def __init__(self, storage_path: str | Path | None = None):
        if storage_path is None:
            storage_path = Path.home() / ".s3_filesystem.json"
        self._path = Path(storage_path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AdapterSettings:
        if not self._path.exists():
            return AdapterSettings()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            LOGGER.warning("Ignoring unreadable settings file %s", self._path)
            return AdapterSettings()
        if not isinstance(data, dict):
            return AdapterSettings()

        bucket = data.get("bucket", "")
        addressing_style = data.get("addressing_style", AdapterSettings.addressing_style)
        if addressing_style not in ADDRESSING_STYLES:
            addressing_style = AdapterSettings.addressing_style
        signature_version = _optional_str(data.get("signature_version")) or AdapterSettings.signature_version
        return AdapterSettings(
            bucket=bucket.strip() if isinstance(bucket, str) else "",
            endpoint_url=_optional_str(data.get("endpoint_url")),
            region_name=_optional_str(data.get("region_name")),
            addressing_style=addressing_style,
            signature_version=signature_version,
            list_max_keys=_positive_int(data.get("list_max_keys"), AdapterSettings.list_max_keys),
            stream_chunk_size=_positive_int(
                data.get("stream_chunk_size"), AdapterSettings.stream_chunk_size
            ),
        )

    def save(self, settings: AdapterSettings) -> None:
        payload = asdict(settings)
        payload["list_max_keys"] = max(int(settings.list_max_keys), 1)
        payload["stream_chunk_size"] = max(int(settings.stream_chunk_size), 1)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
