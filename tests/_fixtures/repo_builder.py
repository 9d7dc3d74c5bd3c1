"""Helper utilities for constructing temporary repositories in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import List, Mapping

from repocontext.detection import ModuleDetector
from repocontext.models import ModuleInfo


class RepoBuilder:
    """Utility for writing files into a throwaway repository and detecting its modules."""

    def __init__(self, tmp_path: Path, name: str = "repo") -> None:
        self.root = tmp_path / name
        self.root.mkdir()
        self._detector = ModuleDetector()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the repository."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_json(self, relative: str, payload: object) -> None:
        self.write({relative: json.dumps(payload)})

    def mkdir(self, relative: str) -> Path:
        path = self.root / relative
        path.mkdir(parents=True, exist_ok=True)
        return path

    def detect(self, repo_id: str = "repo", display_name: str = "Repo") -> List[ModuleInfo]:
        """Return freshly detected modules for the repository."""
        return self._detector.detect(self.root, repo_id, display_name)

    def path(self) -> Path:
        """Return the repository root path."""
        return self.root


__all__ = ["RepoBuilder"]
