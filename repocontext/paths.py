"""Repository-qualified address parsing, validation, and resolution.

Three address shapes are recognised, classified in this order:

- ``/repoId/path/to/file`` (absolute, the only form tools accept)
- ``repoId://path/to/file`` (prefixed)
- ``path/to/file`` (relative to the default repository)
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Union

from .errors import (
    FileSystemAccessError,
    NotADirectoryError,
    NotAFileError,
    PathFormatError,
    UnknownRepositoryError,
)
from .models import PathFormat, PathReference, ValidationResult
from .repositories import RepositoryRegistry

PREFIX_SEPARATOR = "://"
_PLACEHOLDER_REPO = "<repoId>"

# Tools whose path arguments must use the absolute /repoId/path form.
TOOL_PATH_REQUIREMENTS: Dict[str, bool] = {
    "read-file": True,
    "create-file": True,
    "update-file": True,
    "search-files": True,
    "exec-shell-command": True,
    "path-demo": True,
    "repo-tree": True,
    "ensure-dir-exists": True,
    "get-repositories": False,
}


def get_path_format(address: str) -> PathFormat:
    """Classify ``address`` without touching the filesystem."""
    if not address:
        raise PathFormatError("Unknown or invalid path format: empty path")
    if address.startswith("/"):
        return PathFormat.ABSOLUTE
    if PREFIX_SEPARATOR in address:
        return PathFormat.PREFIXED
    return PathFormat.RELATIVE


def parse_path(address: str, default_repo_id: Optional[str] = None) -> PathReference:
    """Split an address into repository id and repository-relative path."""
    path_format = get_path_format(address)

    if path_format is PathFormat.ABSOLUTE:
        parts = address[1:].split("/")
        if len(parts) < 2 or not parts[0]:
            raise PathFormatError(f"Invalid absolute path format: {address}")
        return PathReference(
            repo_id=parts[0],
            relative_path="/".join(parts[1:]),
            format=path_format,
        )

    if path_format is PathFormat.PREFIXED:
        prefix, _, rest = address.partition(PREFIX_SEPARATOR)
        if not prefix or not rest:
            raise PathFormatError(f"Invalid repository prefixed path: {address}")
        return PathReference(repo_id=prefix, relative_path=rest, format=path_format)

    return PathReference(repo_id=default_repo_id, relative_path=address, format=path_format)


def format_path(
    address: Union[str, PathReference],
    default_repo_id: Optional[str] = None,
) -> str:
    """Return the canonical ``/repoId/relative/path`` form of an address."""
    reference = address if isinstance(address, PathReference) else parse_path(address, default_repo_id)
    if reference.repo_id is None:
        raise UnknownRepositoryError(None, "No default repository is registered")
    return reference.to_absolute()


def _escapes_root(relative_path: str) -> bool:
    # a leading slash would replace the repository root when joined
    if relative_path.startswith("/"):
        return True
    depth = 0
    for segment in relative_path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            depth -= 1
            if depth < 0:
                return True
        else:
            depth += 1
    return False


def _example_repo(registry: RepositoryRegistry) -> str:
    return registry.default_id or _PLACEHOLDER_REPO


def validate_path(
    address: str,
    registry: RepositoryRegistry,
    tool: Optional[str] = None,
) -> ValidationResult:
    """Check an address against the tool contract and the registry.

    Failures come back as a :class:`ValidationResult` carrying a message and a
    corrected example address; nothing is raised.
    """
    try:
        path_format = get_path_format(address)
    except PathFormatError:
        return ValidationResult(
            is_valid=False,
            error_message=(
                "INVALID PATH: Path must not be empty. Use the format: "
                f"/{_example_repo(registry)}/path/to/file"
            ),
            error_type=PathFormatError,
        )

    requires_absolute = TOOL_PATH_REQUIREMENTS.get(tool, True) if tool else True

    if path_format is not PathFormat.ABSOLUTE and requires_absolute:
        if path_format is PathFormat.PREFIXED:
            prefix, _, rest = address.partition(PREFIX_SEPARATOR)
            example = f"/{prefix}/{rest}"
        else:
            example = f"/{_example_repo(registry)}/{address}"
        return ValidationResult(
            is_valid=False,
            error_message=(
                "ABSOLUTE PATH REQUIRED: All tools require absolute paths in the format: "
                f"/repoId/path/to/file\nConvert your path to: {example}"
            ),
            error_type=PathFormatError,
        )

    try:
        reference = parse_path(address, registry.default_id)
    except PathFormatError:
        if path_format is PathFormat.ABSOLUTE:
            message = (
                "INVALID ABSOLUTE PATH: Path must follow pattern: /repoId/path/to/file\n"
                f"For example: /{_example_repo(registry)}/path/to/file"
            )
        else:
            message = (
                "INVALID REPOSITORY PREFIXED PATH: Path must follow pattern: "
                f"repoId://path/to/file\nFor example: /{_example_repo(registry)}/path/to/file"
            )
        return ValidationResult(is_valid=False, error_message=message, error_type=PathFormatError)

    if reference.repo_id is None or reference.repo_id not in registry:
        known = ", ".join(registry.ids()) or "none"
        example = f"/{_example_repo(registry)}/{reference.relative_path}"
        return ValidationResult(
            is_valid=False,
            error_message=(
                f"INVALID REPOSITORY ID: '{reference.repo_id}' not found in registered "
                f"repositories ({known}).\nFor example: {example}"
            ),
            error_type=UnknownRepositoryError,
        )

    if _escapes_root(reference.relative_path):
        return ValidationResult(
            is_valid=False,
            error_message=(
                f"PATH ESCAPES REPOSITORY: '{address}' points outside repository "
                f"'{reference.repo_id}'.\nFor example: /{reference.repo_id}/path/to/file"
            ),
            error_type=PathFormatError,
        )

    return ValidationResult.ok()


class PathResolver:
    """Turns addresses into filesystem paths using repository roots.

    Resolution never consults the process working directory.
    """

    def __init__(self, registry: RepositoryRegistry) -> None:
        self.registry = registry

    def parse(self, address: str) -> PathReference:
        return parse_path(address, self.registry.default_id)

    def validate(self, address: str, tool: Optional[str] = None) -> ValidationResult:
        return validate_path(address, self.registry, tool=tool)

    def resolve(self, address: str) -> Path:
        """Return ``<repository root>/<relative path>`` for ``address``.

        Callers are expected to have validated the address; an unknown
        repository here is a programming error and raises.
        """
        reference = self.parse(address)
        repo = self.registry.get(reference.repo_id) if reference.repo_id else None
        if repo is None:
            raise UnknownRepositoryError(
                reference.repo_id, f"Repository not found: {reference.repo_id}"
            )
        return repo.root_path / reference.relative_path.lstrip("/")

    def exists(self, address: str) -> bool:
        return self.resolve(address).exists()

    def resolve_file(self, address: str) -> Path:
        target = self.resolve(address)
        self._stat(address, target)
        if not target.is_file():
            raise NotAFileError(
                f"Error: '{address}' is not a file. Please provide a valid file path."
            )
        return target

    def resolve_directory(self, address: str) -> Path:
        target = self.resolve(address)
        self._stat(address, target)
        if not target.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {address}")
        return target

    @staticmethod
    def _stat(address: str, target: Path) -> None:
        try:
            target.stat()
        except FileNotFoundError as exc:
            raise FileSystemAccessError(f"Path does not exist: {address}") from exc
        except OSError as exc:
            raise FileSystemAccessError(f"Cannot access {address}: {exc}") from exc


__all__ = [
    "PathResolver",
    "TOOL_PATH_REQUIREMENTS",
    "format_path",
    "get_path_format",
    "parse_path",
    "validate_path",
]
