"""
Sample posts for local development.
"""

from __future__ import annotations

import logging

from blog_backend.db import DbClient, PostFields, PostRecord

logger = logging.getLogger(__name__)

SAMPLE_POSTS = [
    PostFields(
        title="The Future of Web Development",
        author="Tech Guru",
        content=(
            "The next generation of web applications will heavily rely on edge "
            "computing and serverless architectures. This allows for "
            "lightning-fast deployment and scaling. This is a much longer body "
            "of text to simulate a full blog post, ensuring that the single post "
            "view has more content than the homepage preview. We can discuss "
            "more complex topics like WebAssembly, advanced state management, "
            "and the rise of server-side rendering frameworks. This extra "
            "content helps demonstrate why a 'Continue reading...' link is "
            "necessary."
        ),
        image_url="https://placehold.co/800x450/4f46e5/ffffff?text=Future+Web",
    ),
    PostFields(
        title="A Deep Dive into Tailwind CSS",
        author="Style Master",
        content=(
            "Tailwind CSS is a utility-first CSS framework that has "
            "revolutionized how developers approach styling. Its class-based "
            "approach speeds up development immensely. For example, instead of "
            "writing custom CSS, you use utility classes like `p-4`, "
            "`bg-blue-500`, and `shadow-lg`. This greatly improves development "
            "speed and maintains consistency across large projects. We will "
            "explore how to configure themes and use custom plugins in future "
            "posts. This extended content serves as a good example for the full "
            "post view."
        ),
        image_url="https://placehold.co/800x450/10b981/ffffff?text=Tailwind+CSS",
    ),
]


def seed_sample_posts(db: DbClient) -> list[PostRecord]:
    """Insert SAMPLE_POSTS, oldest first, so the last sample lists on top."""
    created = [db.create_post(fields) for fields in SAMPLE_POSTS]
    logger.info("Seeded %d sample posts", len(created))
    return created
