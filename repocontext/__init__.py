"""Repository-qualified addressing and automatic module discovery."""

from __future__ import annotations

from .detection import HeuristicTables, ModuleDetector, detect_language
from .errors import (
    ConfigError,
    FileSystemAccessError,
    NotADirectoryError,
    NotAFileError,
    NotInitializedError,
    PathFormatError,
    RepoContextError,
    UnknownRepositoryError,
)
from .models import (
    ModuleInfo,
    ModuleType,
    PathFormat,
    PathReference,
    RepositoryConfig,
    ValidationResult,
)
from .modules import ModuleRegistry
from .orchestrator import Orchestrator
from .paths import PathResolver, format_path, get_path_format, parse_path, validate_path
from .repositories import RepositoryRegistry

__version__ = "1.0.0"

__all__ = [
    "ConfigError",
    "FileSystemAccessError",
    "HeuristicTables",
    "ModuleDetector",
    "ModuleInfo",
    "ModuleRegistry",
    "ModuleType",
    "NotADirectoryError",
    "NotAFileError",
    "NotInitializedError",
    "Orchestrator",
    "PathFormat",
    "PathFormatError",
    "PathReference",
    "PathResolver",
    "RepoContextError",
    "RepositoryConfig",
    "RepositoryRegistry",
    "UnknownRepositoryError",
    "ValidationResult",
    "detect_language",
    "format_path",
    "get_path_format",
    "parse_path",
    "validate_path",
]
