"""NTRIP correction relay package."""
from __future__ import annotations

from typing import Any, Iterable

__all__ = ["CorrectionRelay", "NtripClient", "RelayConfig", "read_version"]


def __getattr__(name: str) -> Any:  # pragma: no cover - simple import proxy
    if name == "NtripClient":
        from .client import NtripClient  # local import for lazy loading

        return NtripClient
    if name == "CorrectionRelay":
        from .relay import CorrectionRelay  # local import for lazy loading

        return CorrectionRelay
    if name == "RelayConfig":
        from .config import RelayConfig  # local import for lazy loading

        return RelayConfig
    if name == "read_version":
        from .versioning import read_version  # local import for lazy loading

        return read_version
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> Iterable[str]:  # pragma: no cover - introspection helper
    return sorted(set(globals()) | set(__all__))
