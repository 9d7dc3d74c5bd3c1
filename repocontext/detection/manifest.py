"""Manifest-based detection: package.json, Python, Go, and Rust projects."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from ..logging import get_logger
from ..models import ModuleInfo, ModuleType
from ..naming import title_case
from .base import DetectionContext, DetectionPass
from .heuristics import PYTHON_MANIFESTS, HeuristicTables
from .utils import any_declared, node_dependencies, python_dependencies, read_package_json

logger = get_logger("detection.manifest")


def iter_top_level_dirs(root: Path) -> Iterator[Path]:
    """Yield visible top-level directories of ``root`` sorted by name."""
    try:
        entries = sorted(root.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning("Cannot list %s: %s", root, exc)
        return
    for entry in entries:
        if entry.name.startswith("."):
            continue
        try:
            if not entry.is_dir():
                continue
        except OSError as exc:
            logger.warning("Skipping %s: %s", entry, exc)
            continue
        yield entry


class ManifestPass(DetectionPass):
    """Classifies directories carrying a language-ecosystem manifest."""

    name = "manifest"

    def detect(self, context: DetectionContext) -> Iterable[ModuleInfo]:
        modules: List[ModuleInfo] = []
        for directory in iter_top_level_dirs(context.root):
            try:
                module = self._classify(directory, context.tables)
            except OSError as exc:
                logger.warning("Skipping %s during manifest detection: %s", directory.name, exc)
                continue
            if module is not None:
                modules.append(module)
        return modules

    def _classify(self, directory: Path, tables: HeuristicTables) -> Optional[ModuleInfo]:
        # First matching manifest kind wins.
        if (directory / "package.json").is_file():
            module = self._node_module(directory, tables)
            if module is not None:
                return module
        if any((directory / name).is_file() for name in PYTHON_MANIFESTS):
            return self._python_module(directory, tables)
        if (directory / "go.mod").is_file():
            return self._go_module(directory)
        if (directory / "Cargo.toml").is_file():
            return self._rust_module(directory)
        return None

    def _node_module(self, directory: Path, tables: HeuristicTables) -> Optional[ModuleInfo]:
        try:
            package = read_package_json(directory / "package.json")
        except ValueError as exc:
            logger.warning("Unparsable package.json in %s: %s", directory.name, exc)
            return None

        name = directory.name
        dependencies = node_dependencies(package)
        if name.startswith("web-") or any_declared(dependencies, tables.web_dependencies):
            module_type = ModuleType.WEB
        elif (
            "server" in name
            or "api" in name
            or any_declared(dependencies, tables.service_dependencies)
        ):
            module_type = ModuleType.SERVICE
        elif "lib" in name or package.get("private") is False:
            module_type = ModuleType.LIBRARY
        else:
            module_type = ModuleType.UNKNOWN

        display = package.get("name")
        return ModuleInfo(
            id=name,
            name=display if isinstance(display, str) and display else title_case(name),
            path=name,
            type=module_type,
            language="typescript",
        )

    def _python_module(self, directory: Path, tables: HeuristicTables) -> ModuleInfo:
        name = directory.name
        if "api" in name:
            module_type = ModuleType.API
        elif "service" in name or "processor" in name:
            module_type = ModuleType.SERVICE
        elif name.startswith("web-") or (directory / "templates").is_dir():
            module_type = ModuleType.WEB
        elif self._declares_python_service(directory, tables):
            module_type = ModuleType.SERVICE
        else:
            module_type = ModuleType.UNKNOWN
        return ModuleInfo(
            id=name,
            name=title_case(name),
            path=name,
            type=module_type,
            language="python",
        )

    def _declares_python_service(self, directory: Path, tables: HeuristicTables) -> bool:
        try:
            dependencies = python_dependencies(directory)
        except ValueError as exc:
            logger.debug("Unreadable Python manifest in %s: %s", directory.name, exc)
            return False
        return any_declared(dependencies, tables.python_service_dependencies)

    def _go_module(self, directory: Path) -> ModuleInfo:
        name = directory.name
        return ModuleInfo(
            id=name,
            name=title_case(name),
            path=name,
            type=ModuleType.API if "api" in name else ModuleType.SERVICE,
            language="go",
        )

    def _rust_module(self, directory: Path) -> ModuleInfo:
        name = directory.name
        return ModuleInfo(
            id=name,
            name=title_case(name),
            path=name,
            type=ModuleType.SERVICE,
            language="rust",
        )


__all__ = ["ManifestPass", "iter_top_level_dirs"]
