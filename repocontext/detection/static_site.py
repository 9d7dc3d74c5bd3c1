"""Static-site detection for documentation and page directories."""

from __future__ import annotations

from typing import Iterable, List

from ..logging import get_logger
from ..models import ModuleInfo, ModuleType
from ..naming import title_case
from .base import DetectionContext, DetectionPass

logger = get_logger("detection.static_site")

_DISPLAY_NAMES = {"docs": "Documentation"}


class StaticSitePass(DetectionPass):
    """Candidate directories holding ``index.html`` or markdown pages."""

    name = "static-site"

    def detect(self, context: DetectionContext) -> Iterable[ModuleInfo]:
        modules: List[ModuleInfo] = []
        for candidate in context.tables.static_site_dirs:
            if context.is_claimed(candidate):
                continue
            directory = context.root / candidate
            try:
                if not directory.is_dir():
                    continue
                items = [entry.name for entry in directory.iterdir()]
            except OSError as exc:
                logger.warning("Skipping %s during static-site detection: %s", candidate, exc)
                continue

            has_index = "index.html" in items
            has_markdown = any(item.lower().endswith(".md") for item in items)
            if not (has_index or has_markdown):
                continue

            modules.append(
                ModuleInfo(
                    id=candidate,
                    name=_DISPLAY_NAMES.get(candidate, title_case(candidate)),
                    path=candidate,
                    type=ModuleType.STATIC_SITE,
                    language="markdown" if has_markdown else "html",
                )
            )
        return modules


__all__ = ["StaticSitePass"]
