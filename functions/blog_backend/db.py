"""
Storage abstraction for posts: SQL (Postgres/SQLite) and an in-memory implementation.

The Firestore variant lives in ``blog_backend.firestore_db``. All variants
satisfy ``DbClient`` and receive fully defaulted ``PostFields`` from the HTTP
layer, so updates are a full replace everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, Union

from sqlalchemy import Column, DateTime, Integer, String, Text, create_engine, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from blog_backend.errors import BackendError

DEFAULT_AUTHOR = "Anonymous"

PostId = Union[int, str]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


MAX_INT_ID = 2**63 - 1


def parse_int_id(post_id: PostId) -> Optional[int]:
    """Canonical decimal ids only ("1", not "01" or "+1"), within BIGINT range."""
    if isinstance(post_id, bool):
        return None
    if isinstance(post_id, int):
        value = post_id
    elif isinstance(post_id, str) and post_id.isascii() and post_id.isdigit():
        if post_id != "0" and post_id.startswith("0"):
            return None
        value = int(post_id)
    else:
        return None
    if not 0 < value <= MAX_INT_ID:
        return None
    return value


@dataclass(frozen=True)
class PostFields:
    """Mutable post fields, already defaulted."""

    title: str
    content: str
    author: str = DEFAULT_AUTHOR
    image_url: Optional[str] = None

    @classmethod
    def build(
        cls,
        title: str,
        content: str,
        author: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> "PostFields":
        return cls(
            title=title,
            content=content,
            author=author or DEFAULT_AUTHOR,
            image_url=image_url or None,
        )


@dataclass
class PostRecord:
    id: PostId
    title: str
    content: str
    author: str
    image_url: Optional[str]
    created_at: datetime


def sort_newest_first(posts: list[PostRecord]) -> list[PostRecord]:
    return sorted(
        posts,
        key=lambda post: (ensure_utc(post.created_at), str(post.id).zfill(20)),
        reverse=True,
    )


class DbClient(Protocol):
    """Interface every storage backend implements."""

    def list_posts(self) -> list[PostRecord]:
        ...

    def get_post(self, post_id: PostId) -> Optional[PostRecord]:
        ...

    def create_post(self, fields: PostFields) -> PostRecord:
        ...

    def update_post(self, post_id: PostId, fields: PostFields) -> Optional[PostRecord]:
        ...

    def delete_post(self, post_id: PostId) -> bool:
        ...

    def ping(self) -> str:
        ...


class InMemoryDbClient:
    """
    Process-local store for development and tests.

    Not persistent and not locked: concurrent writers may race on the id
    counter. Each application instance owns its own client.
    """

    def __init__(self, clock: Clock = utc_now):
        self.clock = clock
        self.posts: list[PostRecord] = []
        self.next_id = 1

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.posts.clear()
        self.next_id = 1

    def _find(self, post_id: PostId) -> Optional[PostRecord]:
        target = parse_int_id(post_id)
        if target is None:
            return None
        for post in self.posts:
            if post.id == target:
                return post
        return None

    def list_posts(self) -> list[PostRecord]:
        return [replace(post) for post in sort_newest_first(self.posts)]

    def get_post(self, post_id: PostId) -> Optional[PostRecord]:
        post = self._find(post_id)
        return replace(post) if post else None

    def create_post(self, fields: PostFields) -> PostRecord:
        record = PostRecord(
            id=self.next_id,
            title=fields.title,
            content=fields.content,
            author=fields.author,
            image_url=fields.image_url,
            created_at=self.clock(),
        )
        self.next_id += 1
        self.posts.append(record)
        return replace(record)

    def update_post(self, post_id: PostId, fields: PostFields) -> Optional[PostRecord]:
        post = self._find(post_id)
        if not post:
            return None
        post.title = fields.title
        post.content = fields.content
        post.author = fields.author
        post.image_url = fields.image_url
        return replace(post)

    def delete_post(self, post_id: PostId) -> bool:
        post = self._find(post_id)
        if not post:
            return False
        self.posts.remove(post)
        return True

    def ping(self) -> str:
        return self.clock().isoformat()


class SqlDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str, clock: Clock = utc_now):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDbClient")
        self.clock = clock
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise BackendError(f"Failed to initialise posts table: {exc}") from exc

    def _to_record(self, row: "PostRow") -> PostRecord:
        return PostRecord(
            id=row.id,
            title=row.title,
            content=row.content,
            author=row.author,
            image_url=row.image_url,
            created_at=ensure_utc(row.created_at),
        )

    def list_posts(self) -> list[PostRecord]:
        try:
            with self.Session() as session:
                stmt = select(PostRow).order_by(
                    PostRow.created_at.desc(), PostRow.id.desc()
                )
                return [self._to_record(row) for row in session.execute(stmt).scalars()]
        except SQLAlchemyError as exc:
            raise BackendError(str(exc)) from exc

    def get_post(self, post_id: PostId) -> Optional[PostRecord]:
        key = parse_int_id(post_id)
        if key is None:
            return None
        try:
            with self.Session() as session:
                row = session.get(PostRow, key)
                return self._to_record(row) if row else None
        except SQLAlchemyError as exc:
            raise BackendError(str(exc)) from exc

    def create_post(self, fields: PostFields) -> PostRecord:
        try:
            with self.Session() as session:
                row = PostRow(
                    title=fields.title,
                    content=fields.content,
                    author=fields.author,
                    image_url=fields.image_url,
                    created_at=self.clock(),
                )
                session.add(row)
                session.commit()
                session.refresh(row)
                return self._to_record(row)
        except SQLAlchemyError as exc:
            raise BackendError(str(exc)) from exc

    def update_post(self, post_id: PostId, fields: PostFields) -> Optional[PostRecord]:
        key = parse_int_id(post_id)
        if key is None:
            return None
        try:
            with self.Session() as session:
                row = session.get(PostRow, key)
                if not row:
                    return None
                row.title = fields.title
                row.content = fields.content
                row.author = fields.author
                row.image_url = fields.image_url
                session.commit()
                session.refresh(row)
                return self._to_record(row)
        except SQLAlchemyError as exc:
            raise BackendError(str(exc)) from exc

    def delete_post(self, post_id: PostId) -> bool:
        key = parse_int_id(post_id)
        if key is None:
            return False
        try:
            with self.Session() as session:
                row = session.get(PostRow, key)
                if not row:
                    return False
                session.delete(row)
                session.commit()
                return True
        except SQLAlchemyError as exc:
            raise BackendError(str(exc)) from exc

    def ping(self) -> str:
        try:
            with self.engine.connect() as conn:
                return str(conn.execute(text("SELECT CURRENT_TIMESTAMP")).scalar())
        except SQLAlchemyError as exc:
            raise BackendError(str(exc)) from exc


Base = declarative_base()


class PostRow(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    author = Column(String(255), nullable=False, default=DEFAULT_AUTHOR)
    image_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
