"""NTRIP v1 request construction."""
from __future__ import annotations

import base64

from ..versioning import read_version

USER_AGENT = f"NTRIP NtripRelay/{read_version()}"


def encode_credentials(username: str, password: str) -> str:
    """Return the Basic authentication token for ``username:password``."""

    return base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")


def build_request(mountpoint: str = "", username: str = "", password: str = "") -> bytes:
    """Build the GET request for ``mountpoint``.

    An empty mount point asks the caster for its source table. The
    ``Authorization`` header is only sent when a username is given.
    """

    lines = [
        f"GET /{mountpoint} HTTP/1.0",
        f"User-Agent: {USER_AGENT}",
        "Accept: */*",
        "Connection: close",
    ]
    if username:
        lines.append(f"Authorization: Basic {encode_credentials(username, password)}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1")


__all__ = ["USER_AGENT", "build_request", "encode_credentials"]
