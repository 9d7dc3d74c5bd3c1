"""Logging setup shared by the CLI, the service, and the registries."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

ROOT_LOGGER = "repocontext"
LOG_LEVEL_ENV = "REPOCONTEXT_LOG_LEVEL"

_CONSOLE_FORMAT = "[repocontext] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``repocontext.<name>``, or the package logger itself."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def resolve_level(verbose: bool = False, environ: Mapping[str, str] | None = None) -> int:
    """``--verbose`` wins; otherwise ``REPOCONTEXT_LOG_LEVEL`` (a level name), else INFO."""
    if verbose:
        return logging.DEBUG
    name = (environ or {}).get(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else logging.INFO
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> logging.Logger:
    """Route repocontext records to stderr and, optionally, to ``log_file``.

    Calling it again replaces the handlers installed by the previous call.
    """
    level = resolve_level(verbose, environ)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # stdout carries command output only
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger", "resolve_level"]
