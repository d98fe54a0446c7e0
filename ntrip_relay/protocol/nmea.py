"""Position reports sent to the caster for VRS computation."""
from __future__ import annotations

from datetime import datetime, timezone

from pynmeagps import GET, NMEAMessage

from ..models import Location

FIX_QUALITY = 1
SATELLITES_IN_USE = 12
HDOP = 1.0


def _utc_time(timestamp: datetime):
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    return timestamp.time()


def position_report_message(location: Location, timestamp: datetime) -> NMEAMessage:
    return NMEAMessage(
        "GP",
        "GGA",
        GET,
        time=_utc_time(timestamp),
        lat=location.latitude,
        lon=location.longitude,
        quality=FIX_QUALITY,
        numSV=SATELLITES_IN_USE,
        HDOP=HDOP,
        alt=location.elevation,
        altUnit="M",
        sep=0.0,
        sepUnit="M",
        diffAge="",
        diffStation="",
    )


def build_position_report(location: Location, timestamp: datetime) -> bytes:
    """Return a checksummed ``$GPGGA`` sentence terminated by CRLF."""

    return position_report_message(location, timestamp).serialize()


__all__ = ["build_position_report", "position_report_message"]
