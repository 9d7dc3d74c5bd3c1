"""HTTP service mode for repocontext."""

from .app import create_app

__all__ = ["create_app"]
