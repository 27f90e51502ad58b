import unittest
import uuid
from datetime import datetime, timedelta, timezone

from google.api_core import exceptions
from google.cloud.firestore_v1 import Query

from blog_backend.db import PostFields
from blog_backend.errors import BackendError
from blog_backend.firestore_db import FirestoreDbClient


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, store, doc_id):
        self.store = store
        self.id = doc_id

    def get(self):
        if self.store.fail_with:
            raise self.store.fail_with
        return FakeSnapshot(self.id, self.store.docs.get(self.id))

    def set(self, data):
        self.store.docs[self.id] = dict(data)

    def update(self, data):
        if self.id not in self.store.docs:
            raise exceptions.NotFound(f"No document to update: {self.id}")
        self.store.docs[self.id].update(data)

    def delete(self):
        self.store.docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, store, order=None, limit=None):
        self.store = store
        self.order = order
        self._limit = limit

    def order_by(self, field, direction=Query.ASCENDING):
        return FakeQuery(self.store, (field, direction), self._limit)

    def limit(self, count):
        return FakeQuery(self.store, self.order, count)

    def stream(self):
        if self.store.fail_with:
            raise self.store.fail_with
        items = list(self.store.docs.items())
        if self.order:
            field, direction = self.order
            items.sort(key=lambda item: item[1][field], reverse=direction == Query.DESCENDING)
        if self._limit is not None:
            items = items[: self._limit]
        return iter(FakeSnapshot(doc_id, data) for doc_id, data in items)


class FakeCollection(FakeQuery):
    def document(self, doc_id=None):
        return FakeDocument(self.store, doc_id or uuid.uuid4().hex[:20])


class FakeFirestore:
    """Just enough of the Firestore client surface for FirestoreDbClient."""

    def __init__(self):
        self.docs = {}
        self.fail_with = None
        self.collections = []

    def collection(self, name):
        self.collections.append(name)
        return FakeCollection(self)


class FirestoreDbClientTests(unittest.TestCase):
    def setUp(self):
        self.fake = FakeFirestore()
        self.db = FirestoreDbClient(client=self.fake, collection="blog_posts")

    def test_create_stores_native_timestamp(self):
        post = self.db.create_post(PostFields.build("T", "C"))
        self.assertIsInstance(post.id, str)
        self.assertEqual(post.author, "Anonymous")
        stored = self.fake.docs[post.id]
        self.assertIsInstance(stored["created_at"], datetime)
        self.assertEqual(stored["imageUrl"], None)
        self.assertIn("blog_posts", self.fake.collections)

    def test_get_roundtrips_fields(self):
        post = self.db.create_post(
            PostFields.build("T", "C", author="Ada", image_url="https://x.test/a.png")
        )
        fetched = self.db.get_post(post.id)
        self.assertEqual(fetched, post)
        self.assertIsNone(self.db.get_post("missing"))
        self.assertIsNone(self.db.get_post("nested/path"))

    def test_update_and_delete(self):
        post = self.db.create_post(PostFields.build("T", "C", author="Ada"))
        updated = self.db.update_post(post.id, PostFields.build("T2", "C2"))
        self.assertEqual(updated.title, "T2")
        self.assertEqual(updated.author, "Anonymous")
        self.assertEqual(updated.created_at, post.created_at)
        self.assertIsNone(self.db.update_post("missing", PostFields.build("x", "y")))

        self.assertTrue(self.db.delete_post(post.id))
        self.assertFalse(self.db.delete_post(post.id))
        self.assertIsNone(self.db.get_post(post.id))

    def test_list_orders_newest_first(self):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        stamps = iter([base + timedelta(minutes=10), base, base + timedelta(minutes=20)])
        self.db.clock = lambda: next(stamps)
        for title in ("ten", "zero", "twenty"):
            self.db.create_post(PostFields.build(title, "C"))
        self.assertEqual(
            [post.title for post in self.db.list_posts()], ["twenty", "ten", "zero"]
        )

    def test_api_errors_become_backend_errors(self):
        self.fake.fail_with = exceptions.ServiceUnavailable("firestore down")
        with self.assertRaises(BackendError):
            self.db.list_posts()
        with self.assertRaises(BackendError):
            self.db.get_post("abc")
        with self.assertRaises(BackendError):
            self.db.ping()

    def test_reserved_document_ids_are_unknown_posts(self):
        # Any call reaching the fake would raise.
        self.fake.fail_with = exceptions.InvalidArgument("bad document id")
        for post_id in (".", "..", "__reserved__", "x" * 1501):
            self.assertIsNone(self.db.get_post(post_id))
            self.assertIsNone(self.db.update_post(post_id, PostFields.build("x", "y")))
            self.assertFalse(self.db.delete_post(post_id))

    def test_ping(self):
        self.assertTrue(self.db.ping())


if __name__ == "__main__":
    unittest.main()
