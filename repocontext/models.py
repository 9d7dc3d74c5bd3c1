"""Core data models shared across repocontext components."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Type


class ModuleType(str, Enum):
    """Closed set of module classifications."""

    API = "api"
    SERVICE = "service"
    WEB = "web"
    LIBRARY = "library"
    STATIC_SITE = "static-site"
    UTILITY = "utility"
    DOCS = "docs"
    CONFIG = "config"
    UNKNOWN = "unknown"


class PathFormat(str, Enum):
    """Address shapes accepted by the path parser."""

    ABSOLUTE = "absolute_path"  # /repoId/path/to/file
    PREFIXED = "repository_prefixed"  # repoId://path/to/file
    RELATIVE = "relative_path"  # path/to/file


@dataclass
class RepositoryConfig:
    """A registered repository root."""

    id: str
    root_path: Path
    display_name: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "path": str(self.root_path),
            "displayName": self.display_name,
        }


@dataclass(frozen=True)
class PathReference:
    """Parsed address: which repository and where inside it."""

    repo_id: Optional[str]
    relative_path: str
    format: PathFormat

    def to_absolute(self) -> str:
        return f"/{self.repo_id}/{self.relative_path}"


@dataclass
class ModuleInfo:
    """A detected logical unit of a repository.

    ``type`` and ``language`` are best-effort tags produced by heuristics.
    """

    id: str
    name: str
    path: str
    type: ModuleType
    language: str
    repo_id: Optional[str] = None

    @property
    def is_catch_all(self) -> bool:
        return self.path == ""

    def with_repo(self, repo_id: str) -> "ModuleInfo":
        return replace(self, repo_id=repo_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "type": self.type.value,
            "language": self.language,
            "repoId": self.repo_id,
        }


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of address validation, returned instead of raising."""

    is_valid: bool
    error_message: Optional[str] = None
    error_type: Optional[Type[Exception]] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(is_valid=True)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"isValid": self.is_valid}
        if self.error_message is not None:
            payload["errorMessage"] = self.error_message
        return payload
