"""Filesystem locations used by the NTRIP relay.

The defaults live under the user's home directory so the relay runs
without privileges; every path can be overridden through environment
variables, which is handy for service deployments and tests.
"""
from __future__ import annotations

import os
from pathlib import Path

__all__ = [
    "LOG_DIR",
    "LOG_FILE",
    "RELAY_ROOT",
    "VERSION_FILE",
]

ENV_PREFIX = "NTRIP_RELAY"


def _env_path(name: str, default: str) -> Path:
    value = os.environ.get(f"{ENV_PREFIX}_{name}")
    return Path(value) if value else Path(default)


RELAY_ROOT: Path = _env_path("ROOT", str(Path.home() / ".ntrip-relay"))
LOG_DIR: Path = _env_path("LOG_DIR", str(RELAY_ROOT / "logs"))
LOG_FILE: Path = _env_path("LOG_FILE", str(LOG_DIR / "relay.log"))
VERSION_FILE: Path = _env_path("VERSION_FILE", str(RELAY_ROOT / "VERSION.txt"))
