"""Module detection passes and the detector that runs them."""

from __future__ import annotations

from .base import DetectionContext, DetectionPass
from .detector import ModuleDetector, default_passes
from .heuristics import DEFAULT_TABLES, HeuristicTables
from .language import UNKNOWN_LANGUAGE, count_languages, detect_language
from .manifest import ManifestPass
from .static_site import StaticSitePass
from .utility import UtilityPass

__all__ = [
    "DEFAULT_TABLES",
    "DetectionContext",
    "DetectionPass",
    "HeuristicTables",
    "ManifestPass",
    "ModuleDetector",
    "StaticSitePass",
    "UNKNOWN_LANGUAGE",
    "UtilityPass",
    "count_languages",
    "default_passes",
    "detect_language",
]
