"""CLI entrypoints for repocontext commands."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Optional

from .config import load_config, load_environment
from .errors import RepoContextError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repocontext",
        description="Address files across registered repositories and inspect detected modules.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Read REPO_PATH_<ID> style variables from a .env file.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .repocontext.yml settings file or its directory.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    repos_parser = subparsers.add_parser("repos", help="List registered repositories.")
    _add_verbose_option(repos_parser, suppress_default=True)

    modules_parser = subparsers.add_parser("modules", help="List detected modules.")
    _add_verbose_option(modules_parser, suppress_default=True)
    modules_parser.add_argument(
        "--repo",
        default=None,
        help="Only list modules of this repository.",
    )

    find_parser = subparsers.add_parser(
        "find-module",
        help="Look up a module by id or name across all repositories.",
    )
    _add_verbose_option(find_parser, suppress_default=True)
    find_parser.add_argument("name", help="Module id or (partial) name.")

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Print the filesystem path for a /repoId/path address.",
    )
    _add_verbose_option(resolve_parser, suppress_default=True)
    resolve_parser.add_argument("address")

    validate_parser = subparsers.add_parser(
        "validate",
        help="Check an address against the tool path contract.",
    )
    _add_verbose_option(validate_parser, suppress_default=True)
    validate_parser.add_argument("address")
    validate_parser.add_argument(
        "--tool",
        default=None,
        help="Apply the path requirements of a specific tool.",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP inspection service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def _build_orchestrator(args: argparse.Namespace) -> Orchestrator:
    environ = load_environment(args.env_file)
    config = load_config(args.config, environ=environ)
    return Orchestrator(config=config, environ=environ)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entrypoint for repocontext commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file, environ=os.environ)

    try:
        orchestrator = _build_orchestrator(args)
    except RepoContextError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "serve":
        _serve(orchestrator, args.host, args.port)
        return

    try:
        orchestrator.initialize()
    except RepoContextError as exc:
        parser.exit(1, f"repocontext initialization failed: {exc}\n")

    if args.command == "repos":
        _print_json(
            {
                "defaultRepository": orchestrator.repositories.default_id,
                "repositories": [repo.to_dict() for repo in orchestrator.repositories.all()],
            }
        )
    elif args.command == "modules":
        if args.repo:
            if args.repo not in orchestrator.repositories:
                parser.exit(1, f'Repository "{args.repo}" not found\n')
            modules = orchestrator.modules.get_by_repo(args.repo)
            _print_json([module.to_dict() for module in modules])
        else:
            _print_json(orchestrator.summary()["modules"])
    elif args.command == "find-module":
        module = orchestrator.find_module(args.name)
        if module is None:
            parser.exit(1, f'No module matches "{args.name}"\n')
        _print_json(module.to_dict())
    elif args.command == "validate":
        result = orchestrator.validate(args.address, tool=args.tool)
        if not result.is_valid:
            parser.exit(1, f"{result.error_message}\n")
        print("valid")
    elif args.command == "resolve":
        result = orchestrator.validate(args.address)
        if not result.is_valid:
            parser.exit(1, f"{result.error_message}\n")
        print(orchestrator.resolve(args.address))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _serve(orchestrator: Orchestrator, host: str, port: int) -> None:
    import uvicorn

    from .service import create_app

    app = create_app(lambda: orchestrator)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main(sys.argv[1:])
