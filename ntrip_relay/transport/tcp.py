"""Blocking TCP connect used to open a caster connection."""
from __future__ import annotations

import logging
import socket
from typing import Optional, Tuple

from ..models import IoStatus

LOGGER = logging.getLogger(__name__)


class TcpConnector:
    def __init__(self, timeout_s: Optional[float] = None) -> None:
        self.timeout_s = timeout_s

    def connect(self, address: str, port: int) -> Tuple[Optional[socket.socket], IoStatus]:
        """Resolve ``address`` and connect to the first reachable entry."""

        try:
            candidates = socket.getaddrinfo(address, port, type=socket.SOCK_STREAM)
        except (OSError, UnicodeError) as exc:
            LOGGER.warning("unable to resolve %s:%s: %s", address, port, exc)
            return None, IoStatus.ERROR

        for family, type_, proto, _, sockaddr in candidates:
            sock = socket.socket(family, type_, proto)
            try:
                sock.settimeout(self.timeout_s)
                sock.connect(sockaddr)
            except OSError as exc:
                LOGGER.debug("connect to %s failed: %s", sockaddr, exc)
                sock.close()
                continue
            sock.settimeout(None)
            LOGGER.info("connected to %s:%s", address, port)
            return sock, IoStatus.SUCCESS

        LOGGER.warning("could not connect to %s:%s", address, port)
        return None, IoStatus.ERROR


__all__ = ["TcpConnector"]
