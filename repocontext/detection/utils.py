"""Manifest readers shared by the detection passes."""

from __future__ import annotations

import json
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Set

_NAME_PATTERN = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")
_INSTALL_REQUIRES = re.compile(r"install_requires\s*=\s*\[(.*?)\]", re.DOTALL)
_QUOTED = re.compile(r"""["']([^"']+)["']""")

# Node.js manifests


def read_package_json(path: Path) -> Dict[str, Any]:
    """Return the parsed ``package.json`` mapping.

    Raises ``ValueError`` (including ``json.JSONDecodeError``) when the file is
    not a JSON object, and ``OSError`` when it cannot be read.
    """
    manifest = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(manifest, dict):
        raise ValueError(f"{path.name} must contain a JSON object")
    return manifest


def node_dependencies(package: Dict[str, Any]) -> Set[str]:
    """Runtime and peer dependency names declared in a package manifest."""
    names: Set[str] = set()
    for section in ("dependencies", "peerDependencies"):
        declared = package.get(section)
        if isinstance(declared, dict):
            names.update(str(name) for name in declared)
    return names


# Python manifests


def python_dependencies(directory: Path) -> Set[str]:
    """Lower-cased distribution names declared by any Python manifest in ``directory``.

    ``requirements.txt`` lines, ``pyproject.toml`` (PEP 621 and Poetry tables),
    and literal ``install_requires`` lists in ``setup.py`` are read. Unreadable
    TOML and dynamic ``setup.py`` arguments contribute nothing.
    """
    names: Set[str] = set()
    readers = (
        ("requirements.txt", _requirements_entries),
        ("pyproject.toml", _pyproject_entries),
        ("setup.py", _setup_py_entries),
    )
    for filename, reader in readers:
        manifest = directory / filename
        if not manifest.is_file():
            continue
        for entry in reader(manifest.read_text(encoding="utf-8")):
            name = distribution_name(entry)
            if name and name != "python":
                names.add(name)
    return names


def distribution_name(requirement: str) -> str:
    """``"Flask[async]>=2.0 ; python_version>'3.8'"`` -> ``"flask"``."""
    match = _NAME_PATTERN.match(requirement)
    return match.group(1).lower() if match else ""


def _requirements_entries(text: str) -> Iterator[str]:
    for line in text.splitlines():
        entry = line.split("#", 1)[0].strip()
        # skip options such as -r, -e and --index-url
        if entry and not entry.startswith("-"):
            yield entry


def _pyproject_entries(text: str) -> Iterator[str]:
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError:
        return

    project = document.get("project")
    if isinstance(project, dict):
        yield from _strings(project.get("dependencies"))
        extras = project.get("optional-dependencies")
        if isinstance(extras, dict):
            for group in extras.values():
                yield from _strings(group)

    tool = document.get("tool")
    poetry = tool.get("poetry") if isinstance(tool, dict) else None
    if isinstance(poetry, dict) and isinstance(poetry.get("dependencies"), dict):
        yield from (str(name) for name in poetry["dependencies"])


def _setup_py_entries(text: str) -> Iterator[str]:
    match = _INSTALL_REQUIRES.search(text)
    if match:
        yield from _QUOTED.findall(match.group(1))


def _strings(value: object) -> Iterator[str]:
    if isinstance(value, list):
        yield from (item for item in value if isinstance(item, str))


def any_declared(declared: Iterable[str], candidates: Iterable[str]) -> bool:
    lowered = {name.lower() for name in declared}
    return any(candidate.lower() in lowered for candidate in candidates)


__all__ = [
    "any_declared",
    "distribution_name",
    "node_dependencies",
    "python_dependencies",
    "read_package_json",
]
