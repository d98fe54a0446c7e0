"""Caster source-table parsing."""
from __future__ import annotations

import re
from typing import List, Union

from ..models import Location, MountPoint

TABLE_ENDING = b"ENDSOURCETABLE\r\n"
END_ROW = "ENDSOURCETABLE"
HEADER_SEPARATOR = "\r\n\r\n"
ROW_SEPARATOR = "\r\n"

# Column positions of an STR record:
# STR;mountpoint;identifier;format;format-details;carrier;nav-system;
# network;country;latitude;longitude;...
NAME_FIELD = 1
LATITUDE_FIELD = 9
LONGITUDE_FIELD = 10

_LEADING_INT = re.compile(r"-?\d+")
_INT32_MIN = -(2 ** 31)
_INT32_MAX = 2 ** 31 - 1


def _as_text(data: Union[bytes, bytearray, str]) -> str:
    if isinstance(data, str):
        return data
    return bytes(data).decode("latin-1")


def has_table_ending(data: Union[bytes, bytearray, str]) -> bool:
    if isinstance(data, str):
        data = data.encode("latin-1")
    return len(data) >= len(TABLE_ENDING) and bytes(data[-len(TABLE_ENDING):]) == TABLE_ENDING


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    value = int(match.group())
    if value < _INT32_MIN or value > _INT32_MAX:
        return 0
    return value


def decode_coordinate(text: str) -> float:
    """Decode a source-table coordinate.

    The integer part and the fractional digits are parsed separately, so the
    sign only applies to the integer part: ``"-0.5"`` gives ``0.5`` and
    ``"-1.5"`` gives ``-0.5``. Casters east of Greenwich and north of the
    equator are unaffected.
    """

    integer_text, dot, fraction_text = text.partition(".")
    if not dot:
        return float(_leading_int(text))
    integer = _leading_int(integer_text)
    fraction = _leading_int(fraction_text)
    return fraction / (10 ** len(fraction_text)) + integer


def _field(row: str, index: int, *, terminated: bool = False) -> str:
    fields = row.split(";")
    last = len(fields) - 1 if terminated else len(fields)
    if index >= last:
        return ""
    return fields[index]


def row_name(row: str) -> str:
    return _field(row, NAME_FIELD, terminated=True)


def row_reference(row: str) -> Location:
    return Location(
        latitude=decode_coordinate(_field(row, LATITUDE_FIELD)),
        longitude=decode_coordinate(_field(row, LONGITUDE_FIELD)),
    )


def parse_table(data: Union[bytes, bytearray, str]) -> List[MountPoint]:
    text = _as_text(data)
    mount_points: List[MountPoint] = []
    table_start = text.find(HEADER_SEPARATOR)
    if table_start < 0:
        return mount_points

    row_start = table_start + len(HEADER_SEPARATOR)
    row_end = text.find(ROW_SEPARATOR, row_start)
    while row_end >= 0:
        row = text[row_start:row_end]
        if row != END_ROW:
            mount_points.append(
                MountPoint(raw=row, name=row_name(row), reference=row_reference(row))
            )
        row_start = row_end + len(ROW_SEPARATOR)
        row_end = text.find(ROW_SEPARATOR, row_start)
    return mount_points


__all__ = [
    "TABLE_ENDING",
    "decode_coordinate",
    "has_table_ending",
    "parse_table",
    "row_name",
    "row_reference",
]
