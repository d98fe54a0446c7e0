"""Configuration model for the NTRIP relay."""
from __future__ import annotations

from dataclasses import dataclass
import os
import sys
from typing import Optional


# ``slots`` support for ``dataclasses`` was added in Python 3.10. Keep using
# slots where available, but remain compatible with Python 3.9.
_DATACLASS_KWARGS = {"slots": True} if sys.version_info >= (3, 10) else {}


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


@dataclass(**_DATACLASS_KWARGS)
class RelayConfig:
    address: str = ""
    port: int = 2101
    mountpoint: str = ""
    username: str = ""
    password: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    elevation: float = 0.0
    poll_interval_s: float = 0.1
    handshake_polls: int = 50  # 5 seconds at the default interval
    report_interval_ticks: int = 100  # 10 seconds at the default interval
    connect_timeout_s: Optional[float] = 10.0
    log_level: str = "INFO"
    log_to_file: bool = True

    @classmethod
    def from_env(cls) -> "RelayConfig":
        return cls(
            address=os.environ.get("NTRIP_RELAY_ADDRESS", ""),
            port=int(os.environ.get("NTRIP_RELAY_PORT", "2101")),
            mountpoint=os.environ.get("NTRIP_RELAY_MOUNT", ""),
            username=os.environ.get("NTRIP_RELAY_USER", ""),
            password=os.environ.get("NTRIP_RELAY_PASSWORD", ""),
            latitude=_optional_float(os.environ.get("NTRIP_RELAY_LATITUDE")),
            longitude=_optional_float(os.environ.get("NTRIP_RELAY_LONGITUDE")),
            elevation=float(os.environ.get("NTRIP_RELAY_ELEVATION", "0.0")),
            poll_interval_s=float(os.environ.get("NTRIP_RELAY_POLL_INTERVAL_S", "0.1")),
            handshake_polls=int(os.environ.get("NTRIP_RELAY_HANDSHAKE_POLLS", "50")),
            report_interval_ticks=int(
                os.environ.get("NTRIP_RELAY_REPORT_INTERVAL_TICKS", "100")
            ),
            connect_timeout_s=_optional_float(
                os.environ.get("NTRIP_RELAY_CONNECT_TIMEOUT_S", "10.0")
            ),
            log_level=os.environ.get("NTRIP_RELAY_LOG_LEVEL", "INFO").upper(),
            log_to_file=os.environ.get("NTRIP_RELAY_LOG_TO_FILE", "1")
                        not in {"0", "false", "False"},
        )


__all__ = ["RelayConfig"]
