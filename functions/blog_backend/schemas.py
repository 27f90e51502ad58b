"""
Pydantic schemas for the posts API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from blog_backend.db import PostFields, PostRecord, ensure_utc


class PostPayload(BaseModel):
    """Body of POST/PUT /posts. Unknown keys (id, created_at) are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    def is_complete(self) -> bool:
        return bool(self.title) and bool(self.content)

    def to_fields(self) -> PostFields:
        return PostFields.build(
            title=self.title or "",
            content=self.content or "",
            author=self.author,
            image_url=self.image_url,
        )


class PostResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Union[int, str]
    title: str
    content: str
    author: str
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    created_at: datetime

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        return ensure_utc(value).isoformat()

    @classmethod
    def from_record(cls, record: PostRecord) -> "PostResponse":
        return cls(
            id=record.id,
            title=record.title,
            content=record.content,
            author=record.author,
            image_url=record.image_url,
            created_at=record.created_at,
        )


class ErrorResponse(BaseModel):
    error: str
