from datetime import datetime, timedelta, timezone
from functools import reduce

import pytest

from ntrip_relay.models import Location
from ntrip_relay.protocol.nmea import build_position_report

WHEN = datetime(2024, 5, 1, 12, 34, 56, tzinfo=timezone.utc)


def _fields(sentence: bytes):
    body, _, _ = sentence.decode("ascii").strip().lstrip("$").partition("*")
    return body.split(",")


def _checksum_matches(sentence: bytes) -> bool:
    text = sentence.decode("ascii").strip()
    body, _, checksum = text[1:].partition("*")
    expected = reduce(lambda acc, ch: acc ^ ord(ch), body, 0)
    return checksum.upper() == f"{expected:02X}"


def test_report_is_a_checksummed_gga_sentence():
    sentence = build_position_report(Location(50.45, 30.52, 170.0), WHEN)

    assert sentence.startswith(b"$GPGGA,")
    assert sentence.endswith(b"\r\n")
    assert _checksum_matches(sentence)


def test_report_encodes_time_and_hemispheres():
    fields = _fields(build_position_report(Location(-33.5, -70.25, 520.0), WHEN))

    assert fields[1].startswith("123456")
    assert fields[2].startswith("3330")
    assert fields[3] == "S"
    assert fields[4].startswith("07015")
    assert fields[5] == "W"
    assert fields[6] == "1"


def test_report_for_northern_eastern_position():
    fields = _fields(build_position_report(Location(50.5, 30.25), WHEN))

    assert fields[2].startswith("5030")
    assert fields[3] == "N"
    assert fields[4].startswith("03015")
    assert fields[5] == "E"


@pytest.mark.parametrize("offset_hours", [2, -5])
def test_report_time_is_converted_to_utc(offset_hours):
    local = WHEN.astimezone(timezone(timedelta(hours=offset_hours)))

    fields = _fields(build_position_report(Location(1.0, 1.0), local))

    assert fields[1].startswith("123456")


def test_non_differential_fix_leaves_correction_fields_empty():
    fields = _fields(build_position_report(Location(50.45, 30.52, 170.0), WHEN))

    assert len(fields) == 15
    assert fields[13] == ""
    assert fields[14] == ""
