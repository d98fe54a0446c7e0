"""Utilities for dealing with the relay version."""
from __future__ import annotations

from pathlib import Path

from .paths import VERSION_FILE

DEFAULT_VERSION = "1.0.0"


def read_version(version_file: Path | None = None) -> str:
    target = version_file or VERSION_FILE
    try:
        return target.read_text(encoding="utf-8").strip() or DEFAULT_VERSION
    except FileNotFoundError:
        return DEFAULT_VERSION


__all__ = ["DEFAULT_VERSION", "read_version"]
