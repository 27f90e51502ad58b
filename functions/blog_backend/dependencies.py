"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from fastapi import Request

from blog_backend.config import (
    BACKEND_FIRESTORE,
    BACKEND_SQL,
    Settings,
)
from blog_backend.db import DbClient, InMemoryDbClient, SqlDbClient

logger = logging.getLogger(__name__)


def build_db_client(settings: Settings) -> DbClient:
    """Construct the storage backend selected by settings."""
    backend = settings.resolved_backend()
    if backend == BACKEND_SQL:
        database_url = settings.resolved_database_url()
        if not database_url:
            raise ValueError(
                "DATABASE_URL or DB_NAME must be configured to use the SQL backend."
            )
        logger.info("Using SQL storage backend")
        return SqlDbClient(database_url)
    if backend == BACKEND_FIRESTORE:
        # Imported lazily so the Firebase SDK is only loaded when selected.
        from blog_backend.firestore_db import FirestoreDbClient

        logger.info(
            "Using Firestore storage backend (collection=%s)",
            settings.firestore_collection,
        )
        return FirestoreDbClient(
            collection=settings.firestore_collection,
            credentials_json=settings.firebase_service_account,
        )
    logger.info("Using in-memory storage backend; data is not persisted")
    return InMemoryDbClient()


def get_db_client(request: Request) -> DbClient:
    """Return the storage client owned by the running application."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Storage client is not configured")
    return db
