"""Composition root: builds the registries and runs module detection."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .config import RepoContextConfig, load_config
from .detection import ModuleDetector
from .errors import (
    FileSystemAccessError,
    NotInitializedError,
    RepoContextError,
    UnknownRepositoryError,
)
from .logging import get_logger
from .models import ModuleInfo, RepositoryConfig, ValidationResult
from .modules import ModuleRegistry
from .paths import PathResolver
from .repositories import RepositoryRegistry


class Orchestrator:
    """Owns one repository registry, one module registry, and the resolver.

    Nothing is served until :meth:`initialize` has registered every repository
    and detected modules for each of them, one repository at a time.
    """

    def __init__(
        self,
        config: Optional[RepoContextConfig] = None,
        environ: Optional[Mapping[str, str]] = None,
        detector: Optional[ModuleDetector] = None,
    ) -> None:
        self.environ: Mapping[str, str] = dict(os.environ) if environ is None else environ
        self.config = config if config is not None else load_config(environ=self.environ)
        self.repositories = RepositoryRegistry(root_dir=self.config.root_dir)
        self.modules = ModuleRegistry(self.repositories)
        self.resolver = PathResolver(self.repositories)
        self.detector = detector or ModuleDetector(self.config.detection.build_tables())
        self.logger = get_logger("orchestrator")
        self._ready = False
        # detection changes the process cwd; scans never overlap
        self._scan_lock = threading.Lock()

    @property
    def ready(self) -> bool:
        return self._ready

    def initialize(self) -> int:
        """Populate both registries and return the number of detected modules."""
        self.logger.info("Loading repositories")
        self._register_configured_repositories()
        self.repositories.load_environment(self.environ)
        if self.config.default_repository:
            try:
                self.repositories.set_default(self.config.default_repository)
            except UnknownRepositoryError:
                self.logger.warning(
                    "Configured default repository %s is not registered",
                    self.config.default_repository,
                )

        total = 0
        repositories = self.repositories.all()
        self.logger.info("Scanning %d repositories for modules", len(repositories))
        for repo in repositories:
            total += len(self._detect(repo))
        self.logger.info("Total modules detected across all repositories: %d", total)

        self.repositories.reset_working_directory()
        self._ready = True
        return total

    def rescan(self, repo_id: Optional[str] = None) -> List[ModuleInfo]:
        """Replace the module set of one repository (the default when omitted)."""
        self._require_ready()
        repo = self.repositories.require(repo_id)
        return self._detect(repo)

    def _register_configured_repositories(self) -> None:
        for entry in self.config.repositories:
            try:
                self.repositories.register(
                    RepositoryConfig(
                        id=entry.id,
                        root_path=Path(entry.path),
                        display_name=entry.name or "",
                    )
                )
            except (FileSystemAccessError, ValueError) as exc:
                self.logger.warning("Skipping configured repository %s: %s", entry.id, exc)

    def _detect(self, repo: RepositoryConfig) -> List[ModuleInfo]:
        with self._scan_lock:
            self.repositories.reset_working_directory()
            self.logger.info("Scanning %s (%s) for modules", repo.display_name, repo.id)
            try:
                detected = self.detector.detect(repo.root_path, repo.id, repo.display_name)
            except (RepoContextError, OSError) as exc:
                self.logger.error("Error scanning %s for modules: %s", repo.display_name, exc)
                kept = self.modules.get_by_repo(repo.id)
                if kept:
                    self.logger.warning(
                        "Keeping %d previously detected modules for %s", len(kept), repo.display_name
                    )
                return kept
            stored = self.modules.replace(repo.id, detected)
        self.logger.info("Found %d modules in %s", len(stored), repo.display_name)
        return stored

    # Tool-facing operations

    def validate(self, address: str, tool: Optional[str] = None) -> ValidationResult:
        self._require_ready()
        return self.resolver.validate(address, tool=tool)

    def resolve(self, address: str) -> Path:
        self._require_ready()
        return self.resolver.resolve(address)

    def find_module(self, name: str) -> Optional[ModuleInfo]:
        self._require_ready()
        return self.modules.get_by_name(name)

    def summary(self) -> Dict[str, Any]:
        self._require_ready()
        return {
            "defaultRepository": self.repositories.default_id,
            "repositories": [repo.to_dict() for repo in self.repositories.all()],
            "modules": {
                repo_id: [module.to_dict() for module in modules]
                for repo_id, modules in self.modules.all_by_repo().items()
            },
        }

    def _require_ready(self) -> None:
        if not self._ready:
            raise NotInitializedError(
                "Registries are not initialized; call initialize() before serving requests"
            )


__all__ = ["Orchestrator"]
