"""Tests for repocontext.detection.detector and its passes."""

from __future__ import annotations

from pathlib import Path

import pytest

from repocontext.detection import HeuristicTables, ModuleDetector
from repocontext.errors import NotADirectoryError
from repocontext.models import ModuleType
from tests._fixtures.repo_builder import RepoBuilder


def _by_path(modules):
    return {module.path: module for module in modules}


def test_ui_framework_dependency_yields_single_web_module(repo_builder: RepoBuilder) -> None:
    repo_builder.write_json(
        "frontend/package.json",
        {"name": "@acme/frontend", "dependencies": {"react": "^18.0.0"}},
    )

    modules = repo_builder.detect()

    assert len(modules) == 1
    module = modules[0]
    assert module.type is ModuleType.WEB
    assert module.path == "frontend"
    assert module.name == "@acme/frontend"
    assert module.language == "typescript"


def test_empty_repository_yields_catch_all(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"main.py": "print('hi')\n", "notes.txt": "hello\n"})
    repo_builder.mkdir("misc")

    modules = repo_builder.detect(repo_id="demo", display_name="Demo")

    assert len(modules) == 1
    catch_all = modules[0]
    assert catch_all.path == ""
    assert catch_all.type is ModuleType.UNKNOWN
    assert catch_all.id == "demo"
    assert catch_all.name == "Demo"
    assert catch_all.language == "python"
    assert catch_all.is_catch_all


def test_docs_and_scripts_become_static_site_and_utility(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "docs/index.html": "<html></html>\n",
            "scripts/build.py": "print('build')\n",
            "scripts/release.py": "print('release')\n",
        }
    )

    modules = repo_builder.detect()

    assert [(m.path, m.type, m.language) for m in modules] == [
        ("docs", ModuleType.STATIC_SITE, "html"),
        ("scripts", ModuleType.UTILITY, "python"),
    ]
    assert modules[0].name == "Documentation"
    assert not any(module.is_catch_all for module in modules)


def test_markdown_docs_are_tagged_markdown(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"docs/index.html": "<html></html>\n", "docs/guide.md": "# Guide\n"})

    modules = repo_builder.detect()

    assert [(m.path, m.language) for m in modules] == [("docs", "markdown")]


def test_static_site_candidate_without_pages_is_skipped(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"website/logo.svg": "<svg/>\n", "lib/readme.txt": "x\n"})

    modules = repo_builder.detect(repo_id="demo")

    assert [m.path for m in modules] == [""]


@pytest.mark.parametrize(
    ("directory", "manifest", "expected"),
    [
        ("web-admin", {"name": "admin"}, ModuleType.WEB),
        ("api-gateway", {"name": "gateway"}, ModuleType.SERVICE),
        ("worker", {"dependencies": {"express": "^4"}}, ModuleType.SERVICE),
        ("shared-lib", {"name": "shared"}, ModuleType.LIBRARY),
        ("sdk", {"name": "sdk", "private": False}, ModuleType.LIBRARY),
        ("tooling", {"name": "tooling", "private": True}, ModuleType.UNKNOWN),
    ],
)
def test_package_json_type_heuristics(
    repo_builder: RepoBuilder, directory: str, manifest: dict, expected: ModuleType
) -> None:
    repo_builder.write_json(f"{directory}/package.json", manifest)

    (module,) = repo_builder.detect()

    assert module.type is expected
    assert module.language == "typescript"


@pytest.mark.parametrize(
    ("directory", "files", "expected"),
    [
        ("payments-api", {"requirements.txt": "requests\n"}, ModuleType.API),
        ("billing-service", {"setup.py": "from setuptools import setup\n"}, ModuleType.SERVICE),
        ("data-processor", {"pyproject.toml": "[project]\nname = 'p'\n"}, ModuleType.SERVICE),
        ("portal", {"requirements.txt": "jinja2\n", "templates/base.html": "<html/>\n"}, ModuleType.WEB),
        ("backend", {"requirements.txt": "fastapi>=0.110\nuvicorn\n"}, ModuleType.SERVICE),
        ("analysis", {"requirements.txt": "numpy\n"}, ModuleType.UNKNOWN),
    ],
)
def test_python_manifest_type_heuristics(
    repo_builder: RepoBuilder, directory: str, files: dict, expected: ModuleType
) -> None:
    repo_builder.write({f"{directory}/{name}": content for name, content in files.items()})

    (module,) = repo_builder.detect()

    assert module.type is expected
    assert module.language == "python"
    assert module.path == directory


def test_go_and_rust_manifests(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "edge-api/go.mod": "module example.com/edge\n",
            "indexer/go.mod": "module example.com/indexer\n",
            "engine/Cargo.toml": "[package]\nname = 'engine'\n",
        }
    )

    modules = _by_path(repo_builder.detect())

    assert modules["edge-api"].type is ModuleType.API
    assert modules["edge-api"].language == "go"
    assert modules["indexer"].type is ModuleType.SERVICE
    assert modules["engine"].type is ModuleType.SERVICE
    assert modules["engine"].language == "rust"
    assert modules["engine"].name == "Engine"


def test_first_manifest_kind_wins(repo_builder: RepoBuilder) -> None:
    repo_builder.write_json("hybrid/package.json", {"name": "hybrid"})
    repo_builder.write({"hybrid/requirements.txt": "flask\n", "hybrid/go.mod": "module x\n"})

    (module,) = repo_builder.detect()

    assert module.language == "typescript"


def test_unparsable_package_json_falls_through(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"mixed/package.json": "{ not json", "mixed/requirements.txt": "requests\n"})

    (module,) = repo_builder.detect()

    assert module.language == "python"


def test_hidden_and_plain_files_are_ignored(repo_builder: RepoBuilder) -> None:
    repo_builder.write_json(".hidden/package.json", {"name": "hidden"})
    repo_builder.write_json("package.json", {"name": "root"})
    repo_builder.write_json("app/package.json", {"name": "app"})

    modules = repo_builder.detect()

    assert [m.path for m in modules] == ["app"]


def test_directory_claimed_by_manifest_is_not_repeated(repo_builder: RepoBuilder) -> None:
    repo_builder.write_json("docs/package.json", {"name": "docs-site", "dependencies": {"vue": "3"}})
    repo_builder.write({"docs/index.md": "# Docs\n", "tools/run.sh": "echo hi\n"})

    modules = repo_builder.detect()

    assert [(m.path, m.type) for m in modules] == [
        ("docs", ModuleType.WEB),
        ("tools", ModuleType.UTILITY),
    ]
    assert modules[1].language == "shell"


def test_unreadable_directory_is_skipped(repo_builder: RepoBuilder, monkeypatch: pytest.MonkeyPatch) -> None:
    repo_builder.write({"scripts/a.py": "x = 1\n", "docs/index.md": "# Docs\n"})
    original_iterdir = Path.iterdir

    def _failing_iterdir(self: Path):
        if self.name == "docs":
            raise PermissionError("denied")
        return original_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", _failing_iterdir)

    modules = repo_builder.detect()

    assert [m.path for m in modules] == ["scripts"]


def test_custom_tables_change_candidates(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"bin/run.sh": "echo hi\n", "scripts/a.py": "x = 1\n"})
    tables = HeuristicTables().merged(utility_dirs=["bin"])

    modules = ModuleDetector(tables).detect(repo_builder.path(), "repo")

    assert [(m.path, m.type, m.language) for m in modules] == [
        ("bin", ModuleType.UTILITY, "shell"),
    ]


def test_detect_rejects_missing_root(tmp_path: Path) -> None:
    with pytest.raises(NotADirectoryError):
        ModuleDetector().detect(tmp_path / "missing")
