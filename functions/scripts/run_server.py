"""
CLI helper to run the blog API with uvicorn.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import uvicorn

from blog_backend.config import SUPPORTED_BACKENDS


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the blog API server")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Bind address")
    parser.add_argument("-p", "--port", type=int, default=5000, help="Bind port")
    parser.add_argument(
        "-b",
        "--backend",
        choices=SUPPORTED_BACKENDS,
        default=None,
        help="Override BLOG_STORAGE_BACKEND",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Insert sample posts when the store is empty",
    )
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")

    # The app reads its settings from the environment when uvicorn imports it.
    if args.backend:
        os.environ["BLOG_STORAGE_BACKEND"] = args.backend
    if args.seed:
        os.environ["BLOG_SEED_SAMPLE_POSTS"] = "true"

    uvicorn.run(
        "blog_backend.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
