"""Module detector: runs the detection passes over one repository."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from ..errors import NotADirectoryError
from ..logging import get_logger
from ..models import ModuleInfo, ModuleType
from .base import DetectionContext, DetectionPass
from .heuristics import DEFAULT_TABLES, HeuristicTables
from .language import detect_language
from .manifest import ManifestPass
from .static_site import StaticSitePass
from .utility import UtilityPass


def default_passes() -> List[DetectionPass]:
    return [ManifestPass(), StaticSitePass(), UtilityPass()]


class ModuleDetector:
    """Classifies a repository's top-level directories into modules.

    Passes run in order and a directory claimed by an earlier pass is not
    reported again. When no pass finds anything, a single catch-all module
    with an empty path stands for the whole repository.
    """

    def __init__(
        self,
        tables: HeuristicTables = DEFAULT_TABLES,
        passes: Optional[Sequence[DetectionPass]] = None,
    ) -> None:
        self.tables = tables
        self.passes: List[DetectionPass] = list(passes) if passes is not None else default_passes()
        self.logger = get_logger("detection")

    def detect(
        self,
        repo_root: str | Path,
        repo_id: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> List[ModuleInfo]:
        root = Path(repo_root)
        if not root.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {repo_root}")

        context = DetectionContext(root=root, tables=self.tables)
        modules: List[ModuleInfo] = []
        for detection_pass in self.passes:
            found = context.claim(detection_pass.detect(context))
            self.logger.debug(
                "Pass %s found %d modules in %s", detection_pass.name, len(found), root
            )
            modules.extend(found)

        if not modules:
            catch_all_id = repo_id or root.name
            modules.append(
                ModuleInfo(
                    id=catch_all_id,
                    name=display_name or catch_all_id,
                    path="",
                    type=ModuleType.UNKNOWN,
                    language=detect_language(root, self.tables),
                )
            )
        return modules


__all__ = ["ModuleDetector", "default_passes"]
