"""Helpers for repository ids and human-readable names."""

from __future__ import annotations

import re

_SLUG_INVALID = re.compile(r"[^a-z0-9_-]+")
_WORD_SEPARATORS = re.compile(r"[-_\s]+")


def normalize_repo_id(repo_id: str) -> str:
    return repo_id.strip().lower()


def slugify(value: str) -> str:
    slug = _SLUG_INVALID.sub("-", value.strip().lower()).strip("-")
    return slug or "repository"


def capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


def title_case(value: str) -> str:
    """Convert ``hello-world`` style names into ``Hello World``."""
    return " ".join(part[:1].upper() + part[1:].lower() for part in _WORD_SEPARATORS.split(value) if part)


__all__ = ["capitalize", "normalize_repo_id", "slugify", "title_case"]
