import json
import tempfile
import unittest
from pathlib import Path

from s3_filesystem.adapter import S3FilesystemAdapter
from s3_filesystem.settings import AdapterSettings, SettingsStorage


class SettingsStorageTests(unittest.TestCase):
    def test_load_returns_defaults_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            storage = SettingsStorage(path)

            settings = storage.load()

            self.assertEqual(AdapterSettings(), settings)
            self.assertEqual(1000, settings.list_max_keys)
            self.assertEqual(1_000_000, settings.stream_chunk_size)

    def test_load_returns_defaults_when_unreadable(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            path.write_text("{not json", encoding="utf-8")

            self.assertEqual(AdapterSettings(), SettingsStorage(path).load())

    def test_load_reads_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            payload = {
                "bucket": "assets",
                "endpoint_url": "https://oss.example.com",
                "region_name": "eu-west-1",
                "addressing_style": "path",
                "list_max_keys": 250,
                "stream_chunk_size": 4096,
            }
            path.write_text(json.dumps(payload), encoding="utf-8")

            settings = SettingsStorage(path).load()

            self.assertEqual("assets", settings.bucket)
            self.assertEqual("https://oss.example.com", settings.endpoint_url)
            self.assertEqual("eu-west-1", settings.region_name)
            self.assertEqual("path", settings.addressing_style)
            self.assertEqual("s3v4", settings.signature_version)
            self.assertEqual(250, settings.list_max_keys)
            self.assertEqual(4096, settings.stream_chunk_size)

    def test_load_sanitizes_invalid_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            payload = {
                "bucket": 123,
                "endpoint_url": "  ",
                "addressing_style": "sideways",
                "signature_version": None,
                "list_max_keys": "nope",
                "stream_chunk_size": -5,
            }
            path.write_text(json.dumps(payload), encoding="utf-8")

            settings = SettingsStorage(path).load()

            self.assertEqual("", settings.bucket)
            self.assertIsNone(settings.endpoint_url)
            self.assertEqual(AdapterSettings.addressing_style, settings.addressing_style)
            self.assertEqual(AdapterSettings.signature_version, settings.signature_version)
            self.assertEqual(AdapterSettings.list_max_keys, settings.list_max_keys)
            self.assertEqual(AdapterSettings.stream_chunk_size, settings.stream_chunk_size)

    def test_save_sanitizes_minimum_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "settings.json"
            storage = SettingsStorage(path)

            storage.save(AdapterSettings(bucket="assets", list_max_keys=0, stream_chunk_size=-1))

            saved = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual("assets", saved["bucket"])
            self.assertEqual(1, saved["list_max_keys"])
            self.assertEqual(1, saved["stream_chunk_size"])
            self.assertEqual(storage.load(), AdapterSettings(bucket="assets", list_max_keys=1, stream_chunk_size=1))


class AdapterFromSettingsTests(unittest.TestCase):
    def test_builds_client_once_with_settings(self):
        created = []

        def factory(*args, **kwargs):
            created.append(kwargs)
            return object()

        settings = AdapterSettings(bucket="assets", endpoint_url="https://oss.example.com", list_max_keys=10)

        adapter = S3FilesystemAdapter.from_settings(settings, client_factory=factory)

        self.assertEqual("assets", adapter.bucket)
        self.assertEqual(1, len(created))
        self.assertEqual("https://oss.example.com", created[0]["endpoint_url"])
        self.assertEqual("assets", adapter.client.bucket)


if __name__ == "__main__":
    unittest.main()
