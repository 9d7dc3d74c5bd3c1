"""Utility detection for scripts, examples, and tooling directories."""

from __future__ import annotations

from typing import Iterable, List

from ..logging import get_logger
from ..models import ModuleInfo, ModuleType
from ..naming import title_case
from .base import DetectionContext, DetectionPass
from .language import detect_language

logger = get_logger("detection.utility")


class UtilityPass(DetectionPass):
    """Any existing candidate directory becomes a utility module."""

    name = "utility"

    def detect(self, context: DetectionContext) -> Iterable[ModuleInfo]:
        modules: List[ModuleInfo] = []
        for candidate in context.tables.utility_dirs:
            if context.is_claimed(candidate):
                continue
            directory = context.root / candidate
            try:
                if not directory.is_dir():
                    continue
            except OSError as exc:
                logger.warning("Skipping %s during utility detection: %s", candidate, exc)
                continue

            modules.append(
                ModuleInfo(
                    id=candidate,
                    name=title_case(candidate),
                    path=candidate,
                    type=ModuleType.UTILITY,
                    language=detect_language(directory, context.tables),
                )
            )
        return modules


__all__ = ["UtilityPass"]
