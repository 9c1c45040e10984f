import io
import unittest

from s3_filesystem.errors import InvalidStreamProvided, ObjectStoreError, UnableToWriteFile
from s3_filesystem.models import WriteOptions
from s3_filesystem.streams import CHUNK_SIZE, is_readable_stream, write_stream

from tests.fake_store import FakeObjectStoreClient


class WriteStreamTests(unittest.TestCase):
    def test_small_source_is_a_single_append_at_offset_zero(self):
        client = FakeObjectStoreClient()
        source = io.BytesIO(b"A" * 1024 * 100)

        chunks = write_stream(client, "foo/bar.md", source)

        self.assertEqual(1, chunks)
        appends = client.calls_to("append_object")
        self.assertEqual(1, len(appends))
        self.assertEqual(("foo/bar.md", b"A" * 1024 * 100, 0, None), appends[0])
        self.assertTrue(source.closed)

    def test_chunks_are_appended_at_increasing_offsets(self):
        client = FakeObjectStoreClient()
        payload = bytes(range(256)) * 10
        options = WriteOptions(content_type="application/octet-stream")

        chunks = write_stream(client, "blob.bin", io.BytesIO(payload), options, chunk_size=1000)

        self.assertEqual(3, chunks)
        self.assertEqual(
            [0, 1000, 2000],
            [call[2] for call in client.calls_to("append_object")],
        )
        self.assertTrue(all(call[3] is options for call in client.calls_to("append_object")))
        self.assertEqual(payload, client.objects["blob.bin"])

    def test_default_chunk_size_is_one_million_bytes(self):
        client = FakeObjectStoreClient()

        write_stream(client, "big.bin", io.BytesIO(b"x" * (CHUNK_SIZE + 1)))

        self.assertEqual(1_000_000, CHUNK_SIZE)
        self.assertEqual(
            [(0, CHUNK_SIZE), (CHUNK_SIZE, 1)],
            [(call[2], len(call[1])) for call in client.calls_to("append_object")],
        )

    def test_short_reads_are_gathered_into_full_chunks(self):
        class TrickleReader(io.RawIOBase):
            def __init__(self, payload, step):
                self._payload = payload
                self._step = step

            def readable(self):
                return True

            def readinto(self, buffer):
                size = min(len(buffer), self._step, len(self._payload))
                buffer[:size] = self._payload[:size]
                self._payload = self._payload[size:]
                return size

        client = FakeObjectStoreClient()
        payload = bytes(range(25))

        chunks = write_stream(client, "blob.bin", TrickleReader(payload, step=4), chunk_size=10)

        self.assertEqual(3, chunks)
        self.assertEqual(
            [(0, 10), (10, 10), (20, 5)],
            [(call[2], len(call[1])) for call in client.calls_to("append_object")],
        )
        self.assertEqual(payload, client.objects["blob.bin"])

    def test_non_blocking_source_without_data_is_write_failure(self):
        class WouldBlock(io.RawIOBase):
            def readable(self):
                return True

            def readinto(self, buffer):
                return None

        client = FakeObjectStoreClient()

        with self.assertRaises(UnableToWriteFile):
            write_stream(client, "blob.bin", WouldBlock())

        self.assertEqual([], client.calls_to("append_object"))

    def test_empty_source_performs_no_append(self):
        client = FakeObjectStoreClient()

        self.assertEqual(0, write_stream(client, "empty.bin", io.BytesIO(b"")))
        self.assertEqual([], client.calls_to("append_object"))

    def test_store_failure_aborts_with_store_message(self):
        message = "The specified bucket does not exist."
        client = FakeObjectStoreClient(
            errors={"append_object": ObjectStoreError(message, code="NoSuchBucket")}
        )

        with self.assertRaises(UnableToWriteFile) as ctx:
            write_stream(client, "foo/bar.md", io.BytesIO(b"A" * 1024 * 100))

        self.assertEqual(message, ctx.exception.reason)
        self.assertIn(message, str(ctx.exception))
        self.assertEqual("foo/bar.md", ctx.exception.location)
        self.assertEqual(1, len(client.calls_to("append_object")))

    def test_failure_mid_stream_leaves_earlier_chunks(self):
        client = FakeObjectStoreClient()
        client.objects["part.bin"] = b""
        original_append = client.append_object

        def flaky_append(key, data, position, options=None):
            if position == 10:
                raise ObjectStoreError("connection reset")
            original_append(key, data, position, options)

        client.append_object = flaky_append

        with self.assertRaises(UnableToWriteFile):
            write_stream(client, "part.bin", io.BytesIO(b"0123456789abcdefghij"), chunk_size=10)

        self.assertEqual(b"0123456789", client.objects["part.bin"])

    def test_rejects_non_stream_contents(self):
        client = FakeObjectStoreClient()

        for contents in ("invalid resource", b"raw bytes", None, 42):
            with self.assertRaises(InvalidStreamProvided) as ctx:
                write_stream(client, "foo/bar.md", contents)
            self.assertEqual("The contents is invalid resource.", ctx.exception.reason)

        self.assertEqual([], client.calls)

    def test_rejects_text_streams(self):
        client = FakeObjectStoreClient()

        with self.assertRaises(InvalidStreamProvided):
            write_stream(client, "foo/bar.md", io.StringIO("text"))

        self.assertEqual([], client.calls_to("append_object"))

    def test_invalid_stream_is_a_write_failure(self):
        self.assertTrue(issubclass(InvalidStreamProvided, UnableToWriteFile))


class IsReadableStreamTests(unittest.TestCase):
    def test_closed_stream_is_not_readable(self):
        stream = io.BytesIO(b"data")
        stream.close()

        self.assertFalse(is_readable_stream(stream))

    def test_write_only_stream_is_not_readable(self):
        class WriteOnly(io.RawIOBase):
            def writable(self):
                return True

        self.assertFalse(is_readable_stream(WriteOnly()))

    def test_binary_stream_is_readable(self):
        self.assertTrue(is_readable_stream(io.BytesIO(b"data")))


if __name__ == "__main__":
    unittest.main()
