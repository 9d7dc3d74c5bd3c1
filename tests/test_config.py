"""Tests for repocontext.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from repocontext.config import (
    DetectionConfig,
    RepoContextConfig,
    RepositoryEntry,
    load_config,
    load_environment,
)
from repocontext.errors import ConfigError


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path, environ={})

    assert isinstance(config, RepoContextConfig)
    assert config.root_dir == Path("/")
    assert config.default_repository is None
    assert config.repositories == []
    assert config.detection == DetectionConfig()
    assert config.source is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".repocontext.yml"
    config_file.write_text(
        """
root_dir: /srv/code
default_repository: backend
repositories:
  - id: backend
    path: repos/backend
    name: Backend Services
  - id: web
    path: /srv/code/web
detection:
  languages:
    kts: kotlin
  ignored_dirs: [".git", "vendor"]
  utility_dirs: bin
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path, environ={})

    assert config.source == config_file.resolve()
    assert config.root_dir == Path("/srv/code")
    assert config.default_repository == "backend"
    assert config.repositories == [
        RepositoryEntry(id="backend", path="repos/backend", name="Backend Services"),
        RepositoryEntry(id="web", path="/srv/code/web"),
    ]
    assert config.detection.languages == {"kts": "kotlin"}
    assert config.detection.ignored_dirs == [".git", "vendor"]
    assert config.detection.utility_dirs == ["bin"]
    assert config.detection.static_site_dirs is None

    tables = config.detection.build_tables()
    assert tables.language_for(".kts") == "kotlin"
    assert tables.language_for(".py") == "python"
    assert tables.ignored_dirs == (".git", "vendor")
    assert "docs" in tables.static_site_dirs


def test_load_config_accepts_explicit_file(tmp_path: Path) -> None:
    config_file = tmp_path / "custom.yml"
    config_file.write_text("default_repository: api\n", encoding="utf-8")

    config = load_config(config_file, environ={})

    assert config.default_repository == "api"


def test_load_config_uses_environment_for_location_and_root(tmp_path: Path) -> None:
    (tmp_path / ".repocontext.yml").write_text("root_dir: /ignored\n", encoding="utf-8")

    config = load_config(
        environ={
            "REPOCONTEXT_CONFIG": str(tmp_path),
            "REPOCONTEXT_ROOT_DIR": str(tmp_path / "workspace"),
        }
    )

    assert config.source == (tmp_path / ".repocontext.yml").resolve()
    assert config.root_dir == tmp_path / "workspace"


def test_empty_config_file_yields_defaults(tmp_path: Path) -> None:
    (tmp_path / ".repocontext.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path, environ={})

    assert config.repositories == []


@pytest.mark.parametrize(
    "content",
    [
        "repositories: [unclosed\n",
        "- just\n- a list\n",
        "repositories: backend\n",
        "repositories:\n  - id: backend\n",
    ],
)
def test_load_config_rejects_invalid_files(tmp_path: Path, content: str) -> None:
    (tmp_path / ".repocontext.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})


def test_load_environment_reads_dotenv_file(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "REPO_PATH_API=/srv/api\nREPO_NAME_API=Public API\n", encoding="utf-8"
    )

    environ = load_environment(env_file, environ={"REPO_NAME_API": "Override"})

    assert environ["REPO_PATH_API"] == "/srv/api"
    assert environ["REPO_NAME_API"] == "Override"


def test_load_environment_without_file_copies_environment() -> None:
    assert load_environment(environ={"A": "1"}) == {"A": "1"}


def test_load_environment_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_environment(tmp_path / "missing.env", environ={})
