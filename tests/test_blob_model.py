from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from firebase_crud.storage.blob_model import DEFAULT_CONTENT_TYPE, StorageModel
from tests.fakes import FakeBucket


class StorageModelTest(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.bucket = FakeBucket()
        self.model = StorageModel(bucket=self.bucket, signed_url_ttl_seconds=600)

    async def test_upload_bytes_and_exists(self) -> None:
        uploaded = await self.model.upload("avatars/ada.png", b"\x89PNG")
        exists = await self.model.exists("avatars/ada.png")
        absent = await self.model.exists("avatars/bob.png")

        self.assertEqual(uploaded, (True, "avatars/ada.png"))
        self.assertEqual(self.bucket.objects["avatars/ada.png"], (b"\x89PNG", "image/png"))
        self.assertEqual(exists, (True, True))
        self.assertEqual(absent, (True, False))

    async def test_upload_unknown_type_defaults_to_octet_stream(self) -> None:
        await self.model.upload("raw/blob", "text")

        self.assertEqual(self.bucket.objects["raw/blob"], (b"text", DEFAULT_CONTENT_TYPE))

    async def test_upload_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            source = Path(tmpdir) / "report.txt"
            source.write_text("hello", encoding="utf-8")

            outcome = await self.model.upload_file("reports/today.txt", source)

        self.assertEqual(outcome, (True, "reports/today.txt"))
        self.assertEqual(self.bucket.objects["reports/today.txt"], (b"hello", "text/plain"))

    async def test_upload_missing_file_fails(self) -> None:
        outcome = await self.model.upload_file("reports/none.txt", "/does/not/exist.txt")

        self.assertFalse(outcome.ok)
        self.assertIn("File not found", outcome.payload)

    async def test_download_url_uses_ttl(self) -> None:
        default = await self.model.get_download_url("avatars/ada.png")
        custom = await self.model.get_download_url("avatars/ada.png", expires_in_seconds=60)

        self.assertEqual(default, (True, "https://storage.test/demo-bucket/avatars/ada.png?expires=600&v=v4"))
        self.assertTrue(custom.payload.endswith("expires=60&v=v4"))

    async def test_delete(self) -> None:
        await self.model.upload("tmp/a.txt", b"a")

        deleted = await self.model.delete("tmp/a.txt")
        again = await self.model.delete("tmp/a.txt")

        self.assertEqual(deleted, (True, True))
        self.assertFalse(again.ok)
        self.assertIn("No such object", again.payload)


if __name__ == "__main__":
    unittest.main()
