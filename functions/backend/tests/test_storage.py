import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

from backend.storage import FirebaseBlobStore, InMemoryBlobStore
from shared.types import ObjectRef

REF = ObjectRef(bucket="friendlychat.appspot.com", path="uid/msg1/cat.png")


class InMemoryBlobStoreTests(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.local_path = os.path.join(self.temp_dir, "cat.png")

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_download_writes_stored_bytes(self):
        store = InMemoryBlobStore()
        store.put(REF, b"image-bytes")

        self.assertEqual(store.download_to_file(REF, self.local_path), self.local_path)
        with open(self.local_path, "rb") as f:
            self.assertEqual(f.read(), b"image-bytes")

    def test_download_missing_object(self):
        with self.assertRaises(FileNotFoundError):
            InMemoryBlobStore().download_to_file(REF, self.local_path)
        self.assertFalse(os.path.exists(self.local_path))

    def test_upload_overwrites_object(self):
        store = InMemoryBlobStore()
        store.put(REF, b"original")
        with open(self.local_path, "wb") as f:
            f.write(b"blurred")

        store.upload_file(self.local_path, REF)

        self.assertEqual(store.get(REF), b"blurred")


class FirebaseBlobStoreTests(unittest.TestCase):
    @patch("backend.storage.storage")
    def test_download_uses_event_bucket(self, mock_storage):
        blob = mock_storage.bucket.return_value.blob.return_value

        FirebaseBlobStore().download_to_file(REF, "/tmp/cat.png")

        mock_storage.bucket.assert_called_once_with(
            "friendlychat.appspot.com", app=None
        )
        mock_storage.bucket.return_value.blob.assert_called_once_with("uid/msg1/cat.png")
        blob.download_to_filename.assert_called_once_with("/tmp/cat.png")

    @patch("backend.storage.storage")
    def test_upload_overwrites_same_path(self, mock_storage):
        blob = mock_storage.bucket.return_value.blob.return_value

        FirebaseBlobStore().upload_file("/tmp/cat.png", REF)

        mock_storage.bucket.return_value.blob.assert_called_once_with("uid/msg1/cat.png")
        blob.upload_from_filename.assert_called_once_with("/tmp/cat.png")


if __name__ == "__main__":
    unittest.main()
