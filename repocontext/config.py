"""Configuration loading for repocontext (.repocontext.yml and environment)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml
from dotenv import dotenv_values

from .detection.heuristics import DEFAULT_TABLES, HeuristicTables
from .errors import ConfigError

CONFIG_FILENAME = ".repocontext.yml"
ROOT_DIR_ENV = "REPOCONTEXT_ROOT_DIR"
CONFIG_PATH_ENV = "REPOCONTEXT_CONFIG"


@dataclass
class RepositoryEntry:
    """A repository declared in the settings file."""

    id: str
    path: str
    name: Optional[str] = None


@dataclass
class DetectionConfig:
    """Overrides for the module detection heuristic tables."""

    languages: Dict[str, str] = field(default_factory=dict)
    ignored_dirs: Optional[List[str]] = None
    static_site_dirs: Optional[List[str]] = None
    utility_dirs: Optional[List[str]] = None
    web_dependencies: Optional[List[str]] = None
    service_dependencies: Optional[List[str]] = None
    python_service_dependencies: Optional[List[str]] = None

    def build_tables(self, base: HeuristicTables = DEFAULT_TABLES) -> HeuristicTables:
        return base.merged(
            languages=self.languages,
            ignored_dirs=self.ignored_dirs,
            static_site_dirs=self.static_site_dirs,
            utility_dirs=self.utility_dirs,
            web_dependencies=self.web_dependencies,
            service_dependencies=self.service_dependencies,
            python_service_dependencies=self.python_service_dependencies,
        )


@dataclass
class RepoContextConfig:
    """Settings read from .repocontext.yml."""

    root_dir: Path = Path("/")
    default_repository: Optional[str] = None
    repositories: List[RepositoryEntry] = field(default_factory=list)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    source: Optional[Path] = None


def load_environment(
    env_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Return configuration variables, process environment taking precedence over ``env_file``."""
    merged: Dict[str, str] = {}
    if env_file is not None:
        if not env_file.exists():
            raise ConfigError(f"Environment file not found: {env_file}")
        for key, value in dotenv_values(env_file).items():
            if value is not None:
                merged[key] = value
    merged.update(os.environ if environ is None else environ)
    return merged


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RepoContextConfig:
    """Load settings from disk; missing files yield defaults."""
    env = os.environ if environ is None else environ
    if config_path is None:
        configured = env.get(CONFIG_PATH_ENV)
        config_path = Path(configured) if configured else Path.cwd()
    config_file = _resolve_config_path(config_path)

    config = RepoContextConfig()
    if config_file.exists():
        data = _read_config(config_file)
        if not isinstance(data, dict):
            raise ConfigError(f"{config_file.name} must contain a mapping at the root")
        config = _build_config(data, config_file)

    root_override = env.get(ROOT_DIR_ENV)
    if root_override:
        config.root_dir = Path(root_override)
    return config


def _build_config(data: Dict[str, Any], config_file: Path) -> RepoContextConfig:
    root_dir = _as_str(data.get("root_dir"))

    repositories: List[RepositoryEntry] = []
    raw_repositories = data.get("repositories")
    if raw_repositories is not None and not isinstance(raw_repositories, list):
        raise ConfigError("repositories must be a list of mappings")
    for index, item in enumerate(raw_repositories or []):
        entry = _as_dict(item)
        repo_id = _as_str(entry.get("id"))
        path = _as_str(entry.get("path"))
        if not repo_id or not path:
            raise ConfigError(f"repositories[{index}] requires both 'id' and 'path'")
        repositories.append(RepositoryEntry(id=repo_id, path=path, name=_as_str(entry.get("name"))))

    detection_data = _as_dict(data.get("detection"))
    detection = DetectionConfig(
        languages={
            str(suffix): str(language)
            for suffix, language in _as_dict(detection_data.get("languages")).items()
        },
        ignored_dirs=_as_optional_list(detection_data.get("ignored_dirs")),
        static_site_dirs=_as_optional_list(detection_data.get("static_site_dirs")),
        utility_dirs=_as_optional_list(detection_data.get("utility_dirs")),
        web_dependencies=_as_optional_list(detection_data.get("web_dependencies")),
        service_dependencies=_as_optional_list(detection_data.get("service_dependencies")),
        python_service_dependencies=_as_optional_list(
            detection_data.get("python_service_dependencies")
        ),
    )

    return RepoContextConfig(
        root_dir=Path(root_dir) if root_dir else Path("/"),
        default_repository=_as_str(data.get("default_repository")),
        repositories=repositories,
        detection=detection,
        source=config_file,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


def _as_optional_list(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    return _as_str_list(value)


__all__ = [
    "CONFIG_FILENAME",
    "DetectionConfig",
    "RepoContextConfig",
    "RepositoryEntry",
    "load_config",
    "load_environment",
]
