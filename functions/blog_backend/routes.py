"""
HTTP routes for the posts resource.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response
from fastapi.responses import PlainTextResponse

from blog_backend.db import DbClient
from blog_backend.dependencies import get_db_client
from blog_backend.errors import BackendError, NotFoundError, ValidationError
from blog_backend.schemas import ErrorResponse, PostPayload, PostResponse

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _require_title_and_content(payload: PostPayload, message: str) -> None:
    if not payload.is_complete():
        raise ValidationError(message)


@router.get("/posts", response_model=list[PostResponse], responses=ERROR_RESPONSES)
def list_posts(db: DbClient = Depends(get_db_client)):
    try:
        posts = db.list_posts()
    except BackendError as exc:
        logger.exception("Failed to list posts")
        raise BackendError("Failed to retrieve posts") from exc
    return [PostResponse.from_record(post) for post in posts]


@router.get("/posts/{post_id}", response_model=PostResponse, responses=ERROR_RESPONSES)
def get_post(post_id: str, db: DbClient = Depends(get_db_client)):
    try:
        post = db.get_post(post_id)
    except BackendError as exc:
        logger.exception("Error fetching single post %s", post_id)
        raise BackendError("Failed to retrieve post") from exc
    if not post:
        raise NotFoundError("Post not found")
    return PostResponse.from_record(post)


@router.post(
    "/posts",
    response_model=PostResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
)
def create_post(payload: PostPayload, db: DbClient = Depends(get_db_client)):
    _require_title_and_content(payload, "Title and content are required")
    try:
        post = db.create_post(payload.to_fields())
    except BackendError as exc:
        logger.exception("Error creating post")
        raise BackendError("Failed to create post") from exc
    logger.info("Created post %s", post.id)
    return PostResponse.from_record(post)


@router.put("/posts/{post_id}", response_model=PostResponse, responses=ERROR_RESPONSES)
def update_post(
    post_id: str, payload: PostPayload, db: DbClient = Depends(get_db_client)
):
    _require_title_and_content(payload, "Title and content are required for update")
    try:
        post = db.update_post(post_id, payload.to_fields())
    except BackendError as exc:
        logger.exception("Error updating post %s", post_id)
        raise BackendError("Failed to update post") from exc
    if not post:
        raise NotFoundError("Post not found for update")
    logger.info("Updated post %s", post.id)
    return PostResponse.from_record(post)


@router.delete("/posts/{post_id}", status_code=204, responses=ERROR_RESPONSES)
def delete_post(post_id: str, db: DbClient = Depends(get_db_client)):
    try:
        deleted = db.delete_post(post_id)
    except BackendError as exc:
        logger.exception("Error deleting post %s", post_id)
        raise BackendError("Failed to delete post") from exc
    if not deleted:
        raise NotFoundError("Post not found for deletion")
    logger.info("Deleted post %s", post_id)
    return Response(status_code=204)


@router.get("/test-db", response_class=PlainTextResponse)
def test_db(db: DbClient = Depends(get_db_client)):
    """Connectivity check for the configured storage backend."""
    try:
        now = db.ping()
    except BackendError:
        logger.exception("Database connection check failed")
        return PlainTextResponse("Database connection error", status_code=500)
    return f"Database connection successful. Current time from DB: {now}"
