"""
Error taxonomy shared by the storage adapters and the HTTP layer.
"""

from __future__ import annotations


class BlogError(Exception):
    """Base exception for the blog backend."""


class ValidationError(BlogError):
    """Raised when a request is missing a required field (HTTP 400)."""


class NotFoundError(BlogError):
    """Raised when a post id does not exist (HTTP 404)."""


class BackendError(BlogError):
    """Raised when the storage engine is unreachable or an operation failed (HTTP 500)."""
