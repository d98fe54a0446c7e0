"""Logging helpers for the NTRIP relay."""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Iterable

from .paths import LOG_DIR, LOG_FILE

DEFAULT_LOG_LEVEL = logging.INFO


def setup_logging(
    level: int | str = DEFAULT_LOG_LEVEL,
    extra_handlers: Iterable[logging.Handler] | None = None,
    *,
    log_to_file: bool = True,
) -> None:
    """Configure the root logger used by the relay.

    Human-readable lines go to stderr because stdout carries the raw
    correction stream. A rotating file under ``~/.ntrip-relay/logs`` is
    added by default; consumers can supply additional handlers when
    embedding the relay in a different runtime.
    """

    root = logging.getLogger()
    if root.handlers:
        # Assume logging is already configured.
        return

    root.setLevel(level)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=2 * 1024 * 1024,
            backupCount=5,
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if extra_handlers:
        for handler in extra_handlers:
            root.addHandler(handler)


__all__ = ["setup_logging", "DEFAULT_LOG_LEVEL"]
