"""NTRIP wire format helpers."""
from __future__ import annotations

from .nmea import build_position_report
from .request import build_request, encode_credentials
from .sourcetable import decode_coordinate, has_table_ending, parse_table

__all__ = [
    "build_position_report",
    "build_request",
    "decode_coordinate",
    "encode_credentials",
    "has_table_ending",
    "parse_table",
]
