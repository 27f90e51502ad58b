"""
HTML entry page for the browser client.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

router = APIRouter(tags=["pages"])
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(request: Request):
    # The client reads its API base from the page, so it follows api_prefix.
    prefix = request.app.state.settings.api_prefix.rstrip("/")
    return templates.TemplateResponse(
        request, "index.html", {"api_url": f"{prefix}/posts"}
    )
