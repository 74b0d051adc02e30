import unittest
from unittest.mock import MagicMock

from backend.db import (
    DocumentNotFoundError,
    FirestoreDocumentStore,
    InMemoryDocumentStore,
    StoredDocument,
)


class InMemoryDocumentStoreTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDocumentStore()

    def test_add_and_get(self):
        doc_id = self.db.add("messages", {"name": "Ada"})
        self.assertEqual(self.db.get("messages", doc_id), {"name": "Ada"})
        self.assertIsNone(self.db.get("messages", "missing"))

    def test_update_merges_fields(self):
        self.db.set("messages", "msg1", {"name": "Ada", "moderated": False})
        self.db.update("messages", "msg1", {"moderated": True})
        self.assertEqual(
            self.db.get("messages", "msg1"), {"name": "Ada", "moderated": True}
        )

    def test_update_missing_document_raises(self):
        with self.assertRaises(DocumentNotFoundError):
            self.db.update("messages", "missing", {"moderated": True})

    def test_delete_and_list_all(self):
        self.db.set("fcmTokens", "A", {})
        self.db.set("fcmTokens", "B", {})
        self.db.delete("fcmTokens", "A")
        self.db.delete("fcmTokens", "never-existed")
        self.assertEqual(self.db.list_all("fcmTokens"), [StoredDocument("B", {})])


class FirestoreDocumentStoreTests(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.db = FirestoreDocumentStore(client=self.client)

    def test_add_returns_new_document_id(self):
        doc_ref = MagicMock()
        doc_ref.id = "new-id"
        self.client.collection.return_value.add.return_value = (None, doc_ref)

        self.assertEqual(self.db.add("messages", {"text": "hi"}), "new-id")
        self.client.collection.assert_called_once_with("messages")
        self.client.collection.return_value.add.assert_called_once_with({"text": "hi"})

    def test_get_missing_document(self):
        snapshot = MagicMock()
        snapshot.exists = False
        self.client.collection.return_value.document.return_value.get.return_value = (
            snapshot
        )

        self.assertIsNone(self.db.get("messages", "msg1"))

    def test_update_and_delete(self):
        document = self.client.collection.return_value.document.return_value

        self.db.update("messages", "msg1", {"moderated": True})
        self.db.delete("fcmTokens", "A")

        document.update.assert_called_once_with({"moderated": True})
        document.delete.assert_called_once_with()

    def test_list_all_streams_collection(self):
        first, second = MagicMock(), MagicMock()
        first.id, second.id = "A", "B"
        first.to_dict.return_value = {}
        second.to_dict.return_value = None
        self.client.collection.return_value.stream.return_value = iter([first, second])

        self.assertEqual(
            self.db.list_all("fcmTokens"),
            [StoredDocument("A", {}), StoredDocument("B", {})],
        )


if __name__ == "__main__":
    unittest.main()
