"""Shared logging configuration for the banking console."""

from __future__ import annotations

import logging
from pathlib import Path

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, level: str, log_file: str | None = None) -> None:
    """Configure process logging with consistent format and runtime level.

    Interactive sessions should pass `log_file` so records stay off the
    console prompt; without it records go to stderr.
    """

    normalized_level = level.strip().upper() if level.strip() else "INFO"
    resolved_level = getattr(logging, normalized_level, logging.INFO)
    if not isinstance(resolved_level, int):
        resolved_level = logging.INFO

    handlers: list[logging.Handler] | None = None
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(path, encoding="utf-8")]

    logging.basicConfig(
        level=resolved_level,
        format=_LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
