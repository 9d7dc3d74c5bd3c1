"""Primary-language detection by file extension frequency."""

from __future__ import annotations

import os
from collections import Counter
from pathlib import Path
from typing import Dict, Iterator

from ..logging import get_logger
from .heuristics import DEFAULT_TABLES, HeuristicTables

UNKNOWN_LANGUAGE = "unknown"

logger = get_logger("detection.language")


def _log_walk_error(error: OSError) -> None:
    logger.debug("Skipping unreadable path during language scan: %s", error)


def _iter_files(root: Path, tables: HeuristicTables) -> Iterator[Path]:
    ignored = set(tables.ignored_dirs)
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        dirnames[:] = sorted(name for name in dirnames if name not in ignored)
        current = Path(dirpath)
        for filename in filenames:
            yield current / filename


def count_languages(path: str | Path, tables: HeuristicTables = DEFAULT_TABLES) -> Dict[str, int]:
    """Return file counts per language under ``path``; unmapped extensions are ignored."""
    extensions: Counter[str] = Counter()
    for file_path in _iter_files(Path(path), tables):
        suffix = file_path.suffix.lower()
        if suffix:
            extensions[suffix] += 1

    languages: Counter[str] = Counter()
    for suffix, count in extensions.items():
        language = tables.language_for(suffix)
        if language is not None:
            languages[language] += count
    return dict(languages)


def detect_language(path: str | Path, tables: HeuristicTables = DEFAULT_TABLES) -> str:
    """Return the most frequent language under ``path``.

    Ties go to the alphabetically first language name. Returns ``"unknown"``
    when no file maps to a known language.
    """
    counts = count_languages(path, tables)
    if not counts:
        return UNKNOWN_LANGUAGE
    return min(counts.items(), key=lambda item: (-item[1], item[0]))[0]


__all__ = ["UNKNOWN_LANGUAGE", "count_languages", "detect_language"]
