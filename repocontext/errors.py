"""Exception hierarchy for repository addressing and module discovery."""

from __future__ import annotations

import builtins


class RepoContextError(RuntimeError):
    """Base class for repocontext failures."""


class ConfigError(RepoContextError):
    """Raised when the configuration file cannot be parsed."""


class PathFormatError(RepoContextError, ValueError):
    """Raised for malformed or under-specified address strings."""


class UnknownRepositoryError(RepoContextError, LookupError):
    """Raised when a well-formed address names an unregistered repository."""

    def __init__(self, repo_id: str | None, message: str | None = None) -> None:
        self.repo_id = repo_id
        super().__init__(message or f'Repository "{repo_id}" not found')


class NotAFileError(RepoContextError):
    """Raised when a resolved path exists but is not a regular file."""


class NotADirectoryError(RepoContextError, builtins.NotADirectoryError):
    """Raised when a resolved path exists but is not a directory."""


class FileSystemAccessError(RepoContextError, OSError):
    """Raised when the filesystem refuses access or the path does not exist."""


class NotInitializedError(RepoContextError):
    """Raised when registries are queried before initialization completed."""


__all__ = [
    "ConfigError",
    "FileSystemAccessError",
    "NotADirectoryError",
    "NotAFileError",
    "NotInitializedError",
    "PathFormatError",
    "RepoContextError",
    "UnknownRepositoryError",
]
