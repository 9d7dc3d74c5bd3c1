"""Base classes for module detection passes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Set

from ..models import ModuleInfo
from .heuristics import HeuristicTables


@dataclass
class DetectionContext:
    """State shared by the passes while scanning one repository."""

    root: Path
    tables: HeuristicTables
    claimed: Set[str] = field(default_factory=set)

    def is_claimed(self, directory: str) -> bool:
        return directory in self.claimed

    def claim(self, modules: Iterable[ModuleInfo]) -> List[ModuleInfo]:
        accepted: List[ModuleInfo] = []
        for module in modules:
            if module.path in self.claimed:
                continue
            self.claimed.add(module.path)
            accepted.append(module)
        return accepted


class DetectionPass(ABC):
    """Contract for a pass that classifies top-level directories into modules."""

    name: str = "pass"

    @abstractmethod
    def detect(self, context: DetectionContext) -> Iterable[ModuleInfo]:
        """Yield modules for directories this pass recognises."""
