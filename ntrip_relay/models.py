"""Value types shared by the NTRIP client, the parser and the relay."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import sys
from typing import List, Optional


# ``slots`` support for ``dataclasses`` was added in Python 3.10. Keep using
# slots where available, but remain compatible with Python 3.9.
_DATACLASS_KWARGS = {"slots": True} if sys.version_info >= (3, 10) else {}


class IoStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    ERROR = "error"
    SUCCESS = "success"


class ConnectionStatus(str, Enum):
    OK = "ok"
    ERROR = "error"
    AUTH_FAILURE = "auth_failure"


class SessionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    AWAITING_RESPONSE = "awaiting_response"
    STREAMING = "streaming"
    AUTH_FAILED = "auth_failed"
    ERROR = "error"


@dataclass(frozen=True, **_DATACLASS_KWARGS)
class Location:
    latitude: float = 0.0
    longitude: float = 0.0
    elevation: float = 0.0


@dataclass(frozen=True, **_DATACLASS_KWARGS)
class MountPoint:
    """One row of a caster source table."""

    raw: str
    name: str = ""
    reference: Location = field(default_factory=Location)


@dataclass(frozen=True, **_DATACLASS_KWARGS)
class NtripLogin:
    """Everything needed to open a correction stream."""

    address: str
    port: int
    mountpoint: str = ""
    username: str = ""
    password: str = ""
    location: Location = field(default_factory=Location)


@dataclass(frozen=True, **_DATACLASS_KWARGS)
class SourceTableResult:
    """Outcome of a source-table request: mount points or an I/O error."""

    mount_points: Optional[List[MountPoint]] = None
    error: Optional[IoStatus] = None

    def __post_init__(self) -> None:
        if (self.mount_points is None) == (self.error is None):
            raise ValueError("exactly one of mount_points/error must be set")

    @classmethod
    def success(cls, mount_points: List[MountPoint]) -> "SourceTableResult":
        return cls(mount_points=list(mount_points))

    @classmethod
    def failure(cls, status: IoStatus = IoStatus.ERROR) -> "SourceTableResult":
        return cls(error=status)

    @property
    def ok(self) -> bool:
        return self.mount_points is not None


__all__ = [
    "ConnectionStatus",
    "IoStatus",
    "Location",
    "MountPoint",
    "NtripLogin",
    "SessionState",
    "SourceTableResult",
]
