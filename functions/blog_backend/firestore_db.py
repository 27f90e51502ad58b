"""
Firestore-backed post storage.

Documents live in a single collection keyed by auto-generated ids. The
creation timestamp is stored as a native Firestore timestamp and converted
back to an aware datetime on read.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions
from google.cloud.firestore_v1 import Query

from blog_backend.db import (
    DEFAULT_AUTHOR,
    Clock,
    PostFields,
    PostId,
    PostRecord,
    ensure_utc,
    utc_now,
)
from blog_backend.errors import BackendError

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "myblog"
MAX_DOCUMENT_ID_BYTES = 1500


def is_valid_document_id(key: str) -> bool:
    """Firestore rejects these ids server-side; treat them as unknown posts."""
    if not key or key in (".", "..") or "/" in key:
        return False
    if key.startswith("__") and key.endswith("__"):
        return False
    return len(key.encode("utf-8")) <= MAX_DOCUMENT_ID_BYTES


def _initialize_client(credentials_json: Optional[str]):
    try:
        app = firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        if credentials_json:
            cred = credentials.Certificate(json.loads(credentials_json))
        else:
            # Falls back to Application Default Credentials.
            cred = credentials.ApplicationDefault()
        app = firebase_admin.initialize_app(cred, name=FIREBASE_APP_NAME)
        logger.info("Initialised Firebase app %s", FIREBASE_APP_NAME)
    return firestore.client(app)


class FirestoreDbClient:
    """Document-store implementation on top of a Firestore client."""

    def __init__(
        self,
        client: Any = None,
        collection: str = "posts",
        credentials_json: Optional[str] = None,
        clock: Clock = utc_now,
    ):
        self.client = client if client is not None else _initialize_client(credentials_json)
        self.collection_name = collection
        self.clock = clock

    @property
    def collection(self):
        return self.client.collection(self.collection_name)

    def _to_record(self, snapshot) -> PostRecord:
        data = snapshot.to_dict() or {}
        return PostRecord(
            id=snapshot.id,
            title=data.get("title", ""),
            content=data.get("content", ""),
            author=data.get("author") or DEFAULT_AUTHOR,
            image_url=data.get("imageUrl"),
            created_at=ensure_utc(data["created_at"]),
        )

    def _document(self, post_id: PostId):
        key = str(post_id)
        if not is_valid_document_id(key):
            return None
        return self.collection.document(key)

    def list_posts(self) -> list[PostRecord]:
        try:
            query = self.collection.order_by("created_at", direction=Query.DESCENDING)
            return [self._to_record(snapshot) for snapshot in query.stream()]
        except exceptions.GoogleAPICallError as exc:
            raise BackendError(str(exc)) from exc

    def get_post(self, post_id: PostId) -> Optional[PostRecord]:
        doc_ref = self._document(post_id)
        if doc_ref is None:
            return None
        try:
            snapshot = doc_ref.get()
        except exceptions.GoogleAPICallError as exc:
            raise BackendError(str(exc)) from exc
        return self._to_record(snapshot) if snapshot.exists else None

    def create_post(self, fields: PostFields) -> PostRecord:
        data = {
            "title": fields.title,
            "content": fields.content,
            "author": fields.author,
            "imageUrl": fields.image_url,
            "created_at": self.clock(),
        }
        try:
            doc_ref = self.collection.document()
            doc_ref.set(data)
        except exceptions.GoogleAPICallError as exc:
            raise BackendError(str(exc)) from exc
        return PostRecord(
            id=doc_ref.id,
            title=fields.title,
            content=fields.content,
            author=fields.author,
            image_url=fields.image_url,
            created_at=ensure_utc(data["created_at"]),
        )

    def update_post(self, post_id: PostId, fields: PostFields) -> Optional[PostRecord]:
        doc_ref = self._document(post_id)
        if doc_ref is None:
            return None
        try:
            if not doc_ref.get().exists:
                return None
            doc_ref.update(
                {
                    "title": fields.title,
                    "content": fields.content,
                    "author": fields.author,
                    "imageUrl": fields.image_url,
                }
            )
            return self._to_record(doc_ref.get())
        except exceptions.NotFound:
            # Deleted between the existence check and the write.
            return None
        except exceptions.GoogleAPICallError as exc:
            raise BackendError(str(exc)) from exc

    def delete_post(self, post_id: PostId) -> bool:
        doc_ref = self._document(post_id)
        if doc_ref is None:
            return False
        try:
            if not doc_ref.get().exists:
                return False
            doc_ref.delete()
            return True
        except exceptions.GoogleAPICallError as exc:
            raise BackendError(str(exc)) from exc

    def ping(self) -> str:
        try:
            list(self.collection.limit(1).stream())
        except exceptions.GoogleAPICallError as exc:
            raise BackendError(str(exc)) from exc
        return self.clock().isoformat()
