"""Heuristic tables driving module detection.

The tables are plain data so that new repository conventions can be added
through configuration rather than by editing the detection passes.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional, Sequence, Tuple

DEFAULT_LANGUAGES: Dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".pyi": "python",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".kt": "kotlin",
    ".rb": "ruby",
    ".php": "php",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".hpp": "cpp",
    ".cc": "cpp",
    ".cs": "csharp",
    ".swift": "swift",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "scss",
    ".less": "less",
    ".md": "markdown",
    ".json": "json",
    ".yml": "yaml",
    ".yaml": "yaml",
    ".toml": "toml",
    ".sh": "shell",
    ".bash": "shell",
}

DEFAULT_IGNORED_DIRS: Tuple[str, ...] = (
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "venv",
    ".venv",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    "build",
    "dist",
    "target",
)

DEFAULT_STATIC_SITE_DIRS: Tuple[str, ...] = ("docs", "website", "gh-pages", "static")
DEFAULT_UTILITY_DIRS: Tuple[str, ...] = ("scripts", "examples", "tools", "config", "utils")

DEFAULT_WEB_DEPENDENCIES: Tuple[str, ...] = (
    "react",
    "vue",
    "svelte",
    "@angular/core",
    "preact",
    "solid-js",
)
DEFAULT_SERVICE_DEPENDENCIES: Tuple[str, ...] = (
    "express",
    "fastify",
    "koa",
    "@nestjs/core",
    "@hapi/hapi",
)
DEFAULT_PYTHON_SERVICE_DEPENDENCIES: Tuple[str, ...] = (
    "fastapi",
    "flask",
    "django",
    "aiohttp",
    "tornado",
    "starlette",
)

PYTHON_MANIFESTS: Tuple[str, ...] = ("requirements.txt", "setup.py", "pyproject.toml")


@dataclass(frozen=True)
class HeuristicTables:
    """Name lists and lookup tables consulted by the detection passes."""

    languages: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_LANGUAGES))
    ignored_dirs: Tuple[str, ...] = DEFAULT_IGNORED_DIRS
    static_site_dirs: Tuple[str, ...] = DEFAULT_STATIC_SITE_DIRS
    utility_dirs: Tuple[str, ...] = DEFAULT_UTILITY_DIRS
    web_dependencies: Tuple[str, ...] = DEFAULT_WEB_DEPENDENCIES
    service_dependencies: Tuple[str, ...] = DEFAULT_SERVICE_DEPENDENCIES
    python_service_dependencies: Tuple[str, ...] = DEFAULT_PYTHON_SERVICE_DEPENDENCIES

    def language_for(self, suffix: str) -> Optional[str]:
        return self.languages.get(suffix.lower())

    def merged(
        self,
        *,
        languages: Optional[Mapping[str, str]] = None,
        ignored_dirs: Optional[Sequence[str]] = None,
        static_site_dirs: Optional[Sequence[str]] = None,
        utility_dirs: Optional[Sequence[str]] = None,
        web_dependencies: Optional[Sequence[str]] = None,
        service_dependencies: Optional[Sequence[str]] = None,
        python_service_dependencies: Optional[Sequence[str]] = None,
    ) -> "HeuristicTables":
        """Return a copy with the given tables replaced; languages are merged."""
        changes: Dict[str, object] = {}
        if languages:
            merged_languages = dict(self.languages)
            for suffix, language in languages.items():
                key = suffix.lower() if suffix.startswith(".") else f".{suffix.lower()}"
                merged_languages[key] = language
            changes["languages"] = merged_languages
        if ignored_dirs is not None:
            changes["ignored_dirs"] = tuple(ignored_dirs)
        if static_site_dirs is not None:
            changes["static_site_dirs"] = tuple(static_site_dirs)
        if utility_dirs is not None:
            changes["utility_dirs"] = tuple(utility_dirs)
        if web_dependencies is not None:
            changes["web_dependencies"] = tuple(web_dependencies)
        if service_dependencies is not None:
            changes["service_dependencies"] = tuple(service_dependencies)
        if python_service_dependencies is not None:
            changes["python_service_dependencies"] = tuple(python_service_dependencies)
        return replace(self, **changes)


DEFAULT_TABLES = HeuristicTables()


__all__ = ["DEFAULT_TABLES", "HeuristicTables", "PYTHON_MANIFESTS"]
