"""
Backend package for the blog API.

This package provides a FastAPI application serving a posts resource over
interchangeable storage backends (SQL, in-memory, Firestore), plus the static
browser client that consumes it.
"""
