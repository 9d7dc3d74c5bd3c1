"""Module registry: detected modules per repository with exact and fuzzy lookup."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from .models import ModuleInfo
from .naming import normalize_repo_id
from .repositories import RepositoryRegistry


class ModuleRegistry:
    """Stores modules keyed by repository id and module id.

    Lookups across repositories visit repositories in the order their modules
    were first registered and modules in id order, so results do not depend on
    detection order.
    """

    def __init__(self, repositories: RepositoryRegistry) -> None:
        self.repositories = repositories
        self._modules: Dict[str, Dict[str, ModuleInfo]] = {}

    def register(self, repo_id: str, module: ModuleInfo) -> ModuleInfo:
        """Store ``module`` under ``repo_id``, replacing any module with the same id."""
        repo_id = normalize_repo_id(repo_id)
        stored = module.with_repo(repo_id)
        self._modules.setdefault(repo_id, {})[module.id] = stored
        return stored

    def replace(self, repo_id: str, modules: Iterable[ModuleInfo]) -> List[ModuleInfo]:
        """Swap the full module set of a repository, as a rescan does."""
        repo_id = normalize_repo_id(repo_id)
        fresh: Dict[str, ModuleInfo] = {}
        for module in modules:
            fresh[module.id] = module.with_repo(repo_id)
        # single assignment; readers see either the old set or the new one
        self._modules[repo_id] = fresh
        return list(fresh.values())

    def get_by_repo(self, repo_id: str) -> List[ModuleInfo]:
        modules = self._modules.get(normalize_repo_id(repo_id))
        if not modules:
            return []
        return list(modules.values())

    def get_by_id(self, module_id: str, repo_id: Optional[str] = None) -> Optional[ModuleInfo]:
        target = repo_id or self.repositories.default_id
        if target is None:
            return None
        modules = self._modules.get(normalize_repo_id(target))
        if not modules:
            return None
        return modules.get(module_id)

    def get_by_name(self, name: str) -> Optional[ModuleInfo]:
        """Find a module in any repository.

        Tiers, first hit wins: exact id, exact name or id, then a
        case-insensitive substring of name or id.
        """
        for modules in self._modules.values():
            if name in modules:
                return modules[name]

        for module in self._iter_sorted():
            if module.name == name or module.id == name:
                return module

        needle = name.lower()
        for module in self._iter_sorted():
            if needle in module.name.lower() or needle in module.id.lower():
                return module
        return None

    def all_by_repo(self) -> Dict[str, List[ModuleInfo]]:
        return {repo_id: list(modules.values()) for repo_id, modules in self._modules.items()}

    def _iter_sorted(self) -> Iterator[ModuleInfo]:
        for modules in self._modules.values():
            for module_id in sorted(modules):
                yield modules[module_id]

    def __len__(self) -> int:
        return sum(len(modules) for modules in self._modules.values())


__all__ = ["ModuleRegistry"]
