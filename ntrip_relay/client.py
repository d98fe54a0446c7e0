"""NTRIP client: handshake, source-table discovery and stream access."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from .config import RelayConfig
from .errors import ChannelError, NotConnectedError, SessionActiveError
from .models import (
    ConnectionStatus,
    IoStatus,
    Location,
    NtripLogin,
    SessionState,
    SourceTableResult,
)
from .poller import Ticker
from .protocol.nmea import build_position_report
from .protocol.request import build_request
from .protocol.sourcetable import has_table_ending, parse_table
from .transport.channel import AsyncSocketChannel
from .transport.tcp import TcpConnector

LOGGER = logging.getLogger(__name__)

HEADER_END = b"\r\n\r\n"
STREAM_OK = b"ICY 200 OK\r\n"
UNAUTHORIZED = b"HTTP/1.1 401 Unauthorized\r\n"


def header_complete(response: bytes) -> bool:
    return HEADER_END in response


class NtripClient:
    """Drive one NTRIP session over a single :class:`AsyncSocketChannel`.

    ``connect`` performs the handshake and, on success, leaves the channel
    open for :meth:`available`, :meth:`receive` and the position report
    calls. Any failed handshake releases the channel again so the client
    can be reused. Source-table discovery uses a separate short-lived
    connection and never touches the session.
    """

    def __init__(
        self,
        config: RelayConfig | None = None,
        *,
        connector: TcpConnector | None = None,
        ticker: Ticker | None = None,
    ) -> None:
        self.config = config or RelayConfig.from_env()
        self._connector = connector or TcpConnector(self.config.connect_timeout_s)
        self.ticker = ticker or Ticker(self.config.poll_interval_s)
        self._channel: Optional[AsyncSocketChannel] = None
        self._leftover = bytearray()
        self._state = SessionState.DISCONNECTED

    # Context manager ----------------------------------------------------
    def __enter__(self) -> "NtripClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Session lifecycle --------------------------------------------------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def active(self) -> bool:
        return self._channel is not None

    def connect(self, login: NtripLogin) -> ConnectionStatus:
        if self._channel is not None:
            raise SessionActiveError("tcp connection already created")

        self._state = SessionState.CONNECTING
        LOGGER.info("connecting to %s:%s/%s", login.address, login.port, login.mountpoint)
        sock, status = self._connector.connect(login.address, login.port)
        if status is not IoStatus.SUCCESS or sock is None:
            return self._abort(SessionState.ERROR, ConnectionStatus.ERROR)

        self._channel = AsyncSocketChannel(sock)
        self._state = SessionState.AWAITING_RESPONSE
        request = build_request(login.mountpoint, login.username, login.password)
        status, response = self._exchange(self._channel, request, header_complete)
        if status is not IoStatus.SUCCESS:
            return self._abort(SessionState.ERROR, ConnectionStatus.ERROR)

        if not header_complete(response):
            LOGGER.warning("no complete response from caster within %d polls", self.config.handshake_polls)
            return self._abort(SessionState.ERROR, ConnectionStatus.ERROR)
        if response.startswith(UNAUTHORIZED):
            LOGGER.warning("caster rejected credentials for user %r", login.username)
            return self._abort(SessionState.AUTH_FAILED, ConnectionStatus.AUTH_FAILURE)
        if not response.startswith(STREAM_OK):
            LOGGER.warning("unexpected caster response: %r", bytes(response[:64]))
            return self._abort(SessionState.ERROR, ConnectionStatus.ERROR)

        body_start = response.find(HEADER_END) + len(HEADER_END)
        self._leftover = bytearray(response[body_start:])
        self._state = SessionState.STREAMING
        LOGGER.info("streaming mount point %s", login.mountpoint)
        return ConnectionStatus.OK

    def close(self) -> None:
        """Close the active session, if any."""

        if self._channel is not None:
            self._channel.close()
            self._channel = None
            LOGGER.info("session closed")
        self._leftover.clear()
        self._state = SessionState.DISCONNECTED

    def _abort(self, state: SessionState, result: ConnectionStatus) -> ConnectionStatus:
        if self._channel is not None:
            self._channel.close()
            self._channel = None
        self._leftover.clear()
        self._state = state
        return result

    def _require_channel(self) -> AsyncSocketChannel:
        if self._channel is None:
            raise NotConnectedError("no tcp connection")
        return self._channel

    # Request/response exchange -----------------------------------------
    def _exchange(
        self,
        channel: AsyncSocketChannel,
        request: bytes,
        done: Callable[[bytes], bool],
    ) -> Tuple[IoStatus, bytearray]:
        """Send ``request`` and collect the reply until ``done`` or timeout.

        Returns ``IoStatus.SUCCESS`` with whatever arrived when the polling
        budget runs out; deciding whether that reply is usable is left to
        the caller.
        """

        response = bytearray()
        if channel.write(request) is not IoStatus.SUCCESS:
            LOGGER.warning("failed to send request")
            return IoStatus.ERROR, response

        for _ in self.ticker.ticks(self.config.handshake_polls):
            if channel.writing:
                status = channel.check()
                if status is IoStatus.ERROR:
                    return IoStatus.ERROR, response
                if status is IoStatus.SUCCESS:
                    channel.end()
            available = channel.available()
            if available < 0:
                LOGGER.warning("connection failed while waiting for the caster response")
                return IoStatus.ERROR, response
            if available > 0:
                response += channel.read(available)
                if done(response):
                    break
        return IoStatus.SUCCESS, response

    # Source table -------------------------------------------------------
    def get_mount_points(
        self,
        address: str,
        port: int,
        username: str = "",
        password: str = "",
    ) -> SourceTableResult:
        LOGGER.info("requesting source table from %s:%s", address, port)
        sock, status = self._connector.connect(address, port)
        if status is not IoStatus.SUCCESS or sock is None:
            return SourceTableResult.failure(IoStatus.ERROR)

        with AsyncSocketChannel(sock) as channel:
            status, response = self._exchange(
                channel, build_request("", username, password), has_table_ending
            )
        if status is not IoStatus.SUCCESS:
            return SourceTableResult.failure(status)
        if not has_table_ending(response):
            LOGGER.warning("source table from %s:%s is incomplete (%d bytes)", address, port, len(response))
            return SourceTableResult.failure(IoStatus.ERROR)

        mount_points = parse_table(response)
        LOGGER.info("source table lists %d entries", len(mount_points))
        return SourceTableResult.success(mount_points)

    # Streaming ----------------------------------------------------------
    def available(self) -> int:
        channel = self._require_channel()
        pending = len(self._leftover)
        count = channel.available()
        if count < 0:
            return pending if pending else count
        return pending + count

    def receive(self, size: int) -> bytes:
        channel = self._require_channel()
        head = bytes(self._leftover[:size])
        del self._leftover[:size]
        if len(head) == size:
            return head
        return head + channel.read(size - len(head))

    def send_position_report(
        self, location: Location, timestamp: datetime | None = None
    ) -> IoStatus:
        channel = self._require_channel()
        sentence = build_position_report(location, timestamp or datetime.now(timezone.utc))
        LOGGER.debug("sending position report %r", sentence)
        return channel.write(sentence)

    def check_position_report(self) -> IoStatus:
        """Poll the last report; a finished write is released on the way."""

        channel = self._require_channel()
        status = channel.check()
        if status is IoStatus.SUCCESS and channel.writing:
            channel.end()
        return status

    def is_sending(self) -> bool:
        status = self.check_position_report()
        if status is IoStatus.ERROR:
            raise ChannelError("error sending position report")
        return status is IoStatus.IN_PROGRESS


__all__ = ["NtripClient", "header_complete"]
