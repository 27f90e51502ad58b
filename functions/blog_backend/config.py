"""
Configuration and settings for the blog backend.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

PUBLIC_DIR = Path(__file__).resolve().parent / "public"

BACKEND_MEMORY = "memory"
BACKEND_SQL = "sql"
BACKEND_FIRESTORE = "firestore"
SUPPORTED_BACKENDS = (BACKEND_MEMORY, BACKEND_SQL, BACKEND_FIRESTORE)


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="")

    # One of "memory", "sql", "firestore". Unset picks sql when a database
    # is configured and memory otherwise.
    storage_backend: Optional[str] = Field(
        default=None, validation_alias="BLOG_STORAGE_BACKEND"
    )

    # Relational database (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(default=None)
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432)
    db_user: str = Field(default="postgres")
    db_password: str = Field(default="")
    db_name: Optional[str] = Field(default=None)

    # Firestore
    firebase_service_account: Optional[str] = Field(default=None)
    firestore_collection: str = Field(default="posts")

    # HTTP surface
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    static_dir: str = Field(default=str(PUBLIC_DIR))

    # Development toggles
    seed_sample_posts: bool = Field(
        default=False, validation_alias="BLOG_SEED_SAMPLE_POSTS"
    )
    log_level: str = Field(default="INFO")

    def resolved_database_url(self) -> Optional[str]:
        """Return DATABASE_URL, or a Postgres URL built from the DB_* parts."""
        if self.database_url:
            return self.database_url
        if not self.db_name:
            return None
        url = URL.create(
            "postgresql+psycopg2",
            username=self.db_user or None,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)

    def resolved_backend(self) -> str:
        backend = (self.storage_backend or "").strip().lower()
        if not backend:
            return BACKEND_SQL if self.resolved_database_url() else BACKEND_MEMORY
        if backend not in SUPPORTED_BACKENDS:
            raise ValueError(
                f"Unsupported storage backend {backend!r}; "
                f"expected one of {', '.join(SUPPORTED_BACKENDS)}"
            )
        return backend


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
