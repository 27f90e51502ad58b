"""
Insert the sample posts into the configured storage backend.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from blog_backend.config import BACKEND_MEMORY, SUPPORTED_BACKENDS, get_settings
from blog_backend.dependencies import build_db_client
from blog_backend.errors import BackendError
from blog_backend.seed import seed_sample_posts

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed sample blog posts")
    parser.add_argument(
        "-b",
        "--backend",
        choices=SUPPORTED_BACKENDS,
        default=None,
        help="Override BLOG_STORAGE_BACKEND",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Seed even when the store already holds posts",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")

    settings = get_settings()
    if args.backend:
        settings = settings.model_copy(update={"storage_backend": args.backend})
    if settings.resolved_backend() == BACKEND_MEMORY:
        logger.warning("In-memory backend selected; seeded posts vanish when this script exits")
    db = build_db_client(settings)

    try:
        if db.list_posts() and not args.force:
            logger.info("Store already has posts; use --force to seed anyway")
            return 0
        created = seed_sample_posts(db)
    except BackendError as exc:
        logger.error("Seeding failed: %s", exc)
        return 1
    for post in created:
        logger.info("Created post %s: %s", post.id, post.title)
    return 0


if __name__ == "__main__":
    sys.exit(main())
