"""Socket transports used by the NTRIP client."""
from __future__ import annotations

from .channel import AsyncSocketChannel
from .tcp import TcpConnector

__all__ = ["AsyncSocketChannel", "TcpConnector"]
