"""Repository registry: repository ids, roots, and the shared working directory."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional

from .errors import FileSystemAccessError, UnknownRepositoryError
from .logging import get_logger
from .models import RepositoryConfig
from .naming import capitalize, normalize_repo_id, slugify, title_case

REPO_PATH_PREFIX = "REPO_PATH_"
REPO_NAME_PREFIX = "REPO_NAME_"
LEGACY_REPO_PATH = "REPO_PATH"
LEGACY_REPO_ID = "REPO_ID"
LEGACY_REPO_NAME = "REPO_NAME"
SWIFT_CODER_REPO_PATH = "SWIFT_CODER_REPO_PATH"
SWIFT_CODER_ID = "swift-coder"
SWIFT_CODER_NAME = "Swift Coder"


class RepositoryRegistry:
    """Authoritative mapping of repository id to root path.

    The registry also owns the process working directory. Every switch into a
    repository first returns to ``root_dir``; code that depends on the current
    directory must call :meth:`reset_working_directory` before relying on it.
    """

    def __init__(self, root_dir: str | Path = "/") -> None:
        self.root_dir = Path(root_dir).expanduser().resolve()
        self._repositories: Dict[str, RepositoryConfig] = {}
        self._default_id: Optional[str] = None
        self.logger = get_logger("repositories")

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str],
        root_dir: str | Path = "/",
    ) -> "RepositoryRegistry":
        """Build a registry from ``REPO_PATH_<ID>`` style variables."""
        registry = cls(root_dir=root_dir)
        registry.load_environment(environ)
        return registry

    def load_environment(self, environ: Mapping[str, str]) -> int:
        """Register repositories declared in ``environ`` and return how many were added."""
        added = 0
        for key in sorted(environ):
            if not key.startswith(REPO_PATH_PREFIX) or key == REPO_PATH_PREFIX:
                continue
            repo_id = normalize_repo_id(key[len(REPO_PATH_PREFIX):])
            if self._register_from_environment(
                repo_id,
                environ.get(key, ""),
                environ.get(f"{REPO_NAME_PREFIX}{repo_id.upper()}"),
                source=key,
            ):
                added += 1

        legacy_path = environ.get(LEGACY_REPO_PATH)
        if legacy_path:
            repo_id = normalize_repo_id(
                environ.get(LEGACY_REPO_ID) or slugify(Path(legacy_path).name)
            )
            display_name = environ.get(LEGACY_REPO_NAME) or title_case(repo_id)
            if self._register_from_environment(
                repo_id, legacy_path, display_name, source=LEGACY_REPO_PATH
            ):
                added += 1
                # The single-repository override always wins the default slot.
                self.set_default(repo_id)

        swift_coder_path = environ.get(SWIFT_CODER_REPO_PATH)
        if swift_coder_path and self._register_from_environment(
            SWIFT_CODER_ID, swift_coder_path, SWIFT_CODER_NAME, source=SWIFT_CODER_REPO_PATH
        ):
            added += 1
            self.set_default(SWIFT_CODER_ID)

        if not self._repositories:
            self.logger.warning("No valid repositories discovered in environment variables")
            self.logger.warning(
                "Set at least one variable in the format %s{ID}=/path/to/repo",
                REPO_PATH_PREFIX,
            )
        else:
            self.logger.info("Discovered %d repositories", len(self._repositories))
            for repo in self._repositories.values():
                self.logger.info("- %s (%s): %s", repo.display_name, repo.id, repo.root_path)
            self.logger.info("Default repository: %s", self._default_id)
        return added

    def _register_from_environment(
        self,
        repo_id: str,
        raw_path: str,
        display_name: Optional[str],
        *,
        source: str,
    ) -> bool:
        if not repo_id or not raw_path:
            return False
        try:
            self.register(
                RepositoryConfig(
                    id=repo_id,
                    root_path=Path(raw_path),
                    display_name=display_name or capitalize(repo_id),
                )
            )
        except FileSystemAccessError as exc:
            self.logger.warning("Skipping %s: %s", source, exc)
            return False
        return True

    def register(self, config: RepositoryConfig) -> RepositoryConfig:
        """Store ``config``; the last registration for an id wins."""
        repo_id = normalize_repo_id(config.id)
        if not repo_id:
            raise ValueError("Repository id must not be empty")

        root_path = Path(config.root_path).expanduser()
        if not root_path.is_absolute():
            root_path = self.root_dir / root_path
        root_path = Path(os.path.normpath(root_path))
        if not root_path.is_dir():
            raise FileSystemAccessError(f"Repository path is not a directory: {root_path}")

        stored = RepositoryConfig(
            id=repo_id,
            root_path=root_path,
            display_name=config.display_name or capitalize(repo_id),
        )
        if repo_id in self._repositories:
            self.logger.debug("Replacing repository registration for %s", repo_id)
        self._repositories[repo_id] = stored

        if self._default_id is None:
            self._default_id = repo_id
        return stored

    def get(self, repo_id: Optional[str] = None) -> Optional[RepositoryConfig]:
        """Return the named repository, or the default when ``repo_id`` is omitted."""
        if not repo_id:
            if self._default_id is None:
                return None
            return self._repositories.get(self._default_id)
        return self._repositories.get(normalize_repo_id(repo_id))

    def require(self, repo_id: Optional[str] = None) -> RepositoryConfig:
        repo = self.get(repo_id)
        if repo is None:
            raise UnknownRepositoryError(repo_id or self._default_id)
        return repo

    def all(self) -> List[RepositoryConfig]:
        return list(self._repositories.values())

    def ids(self) -> List[str]:
        return list(self._repositories)

    @property
    def default_id(self) -> Optional[str]:
        return self._default_id

    def set_default(self, repo_id: str) -> None:
        repo_id = normalize_repo_id(repo_id)
        if repo_id not in self._repositories:
            raise UnknownRepositoryError(repo_id)
        self._default_id = repo_id

    def __contains__(self, repo_id: object) -> bool:
        return isinstance(repo_id, str) and normalize_repo_id(repo_id) in self._repositories

    def __len__(self) -> int:
        return len(self._repositories)

    # Working directory discipline

    def reset_working_directory(self) -> bool:
        """Return the process to ``root_dir``; False when the change fails."""
        try:
            if Path.cwd() != self.root_dir:
                os.chdir(self.root_dir)
                self.logger.debug("Working directory reset to root: %s", self.root_dir)
        except OSError as exc:
            self.logger.error("Failed to reset working directory: %s", exc)
            return False
        return True

    def use_as_working_directory(self, repo_id: Optional[str] = None) -> bool:
        """Change into a repository root, always passing through ``root_dir`` first."""
        self.reset_working_directory()

        repo = self.get(repo_id)
        if repo is None:
            self.logger.error('Repository "%s" not found', repo_id or self._default_id)
            return False
        try:
            os.chdir(repo.root_path)
        except OSError as exc:
            self.logger.error("Failed to set repository %s as working directory: %s", repo.id, exc)
            return False
        self.logger.debug("Working directory set to repository %s: %s", repo.id, repo.root_path)
        return True

    @contextmanager
    def working_directory(self, repo_id: Optional[str] = None) -> Iterator[RepositoryConfig]:
        """Run a block inside a repository root and return to ``root_dir`` afterwards."""
        repo = self.require(repo_id)
        if not self.use_as_working_directory(repo.id):
            raise FileSystemAccessError(f"Cannot change into repository root: {repo.root_path}")
        try:
            yield repo
        finally:
            self.reset_working_directory()


__all__ = ["RepositoryRegistry"]
