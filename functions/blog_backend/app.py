"""
FastAPI application entry point for the blog backend.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog_backend.config import Settings, get_settings
from blog_backend.db import DbClient
from blog_backend.dependencies import build_db_client
from blog_backend.errors import BackendError, BlogError, NotFoundError, ValidationError
from blog_backend.pages import router as pages_router
from blog_backend.routes import router
from blog_backend.seed import seed_sample_posts

logger = logging.getLogger(__name__)


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        {"error": str(exc.detail)},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    BackendError: 500,
}


async def _blog_error_handler(request: Request, exc: BlogError):
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 500
    )
    return JSONResponse({"error": str(exc)}, status_code=status_code)


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse({"error": f"Invalid request body: {message}"}, status_code=400)


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def create_app(
    settings: Optional[Settings] = None, db: Optional[DbClient] = None
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="myblog API", version="0.1.0")
    app.state.settings = settings
    app.state.db = db if db is not None else build_db_client(settings)

    if settings.seed_sample_posts and not app.state.db.list_posts():
        seed_sample_posts(app.state.db)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(BlogError, _blog_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(router, prefix=settings.api_prefix)
    app.include_router(pages_router)

    # Mounted last: "/" would otherwise shadow the API routes.
    if os.path.isdir(settings.static_dir):
        app.mount(
            "/", StaticFiles(directory=settings.static_dir, html=True), name="static"
        )
    else:
        logger.warning("Static directory %s not found; client not served", settings.static_dir)
    return app


app = create_app()
