"""Non-blocking, poll driven I/O over one connected TCP socket."""
from __future__ import annotations

import fcntl
import logging
import select
import socket
import struct
import termios
from typing import Optional

from ..errors import ReadPreconditionError, WriteInFlightError
from ..models import IoStatus

LOGGER = logging.getLogger(__name__)


class AsyncSocketChannel:
    """Cooperative reader/writer for a socket owned by one control loop.

    Nothing here blocks: ``write`` hands the buffer to the kernel as far as
    it goes and ``check`` keeps pushing the remainder every time it is
    polled. Exactly one write can be in flight; it has to be finalised with
    ``end`` before the next ``write``.
    """

    def __init__(self, sock: socket.socket) -> None:
        sock.setblocking(False)
        self._sock = sock
        self._pending: Optional[memoryview] = None
        self._sent = 0
        self._failed = False

    # Context manager ----------------------------------------------------
    def __enter__(self) -> "AsyncSocketChannel":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._sock.fileno() == -1

    def close(self) -> None:
        self._pending = None
        self._sent = 0
        self._failed = False
        self._sock.close()

    # Writing ------------------------------------------------------------
    def write(self, data: bytes) -> IoStatus:
        if self._pending is not None:
            raise WriteInFlightError("previous write has not been ended")
        self._pending = memoryview(bytes(data))
        self._sent = 0
        self._failed = False
        try:
            self._push()
        except OSError as exc:
            LOGGER.warning("failed to submit %d bytes: %s", len(self._pending), exc)
            self._pending = None
            return IoStatus.ERROR
        return IoStatus.SUCCESS

    def check(self) -> IoStatus:
        if self._pending is None:
            return IoStatus.SUCCESS
        if self._failed:
            return IoStatus.ERROR
        try:
            self._push()
        except OSError as exc:
            LOGGER.warning("write failed after %d bytes: %s", self._sent, exc)
            self._failed = True
            return IoStatus.ERROR
        if self._sent < len(self._pending):
            return IoStatus.IN_PROGRESS
        return IoStatus.SUCCESS

    def end(self) -> int:
        """Release the completed write and return how many bytes it sent."""

        if self._pending is None:
            return -1
        if self._failed:
            self._pending = None
            self._failed = False
            return -1
        if self._sent < len(self._pending):
            return -1
        count = self._sent
        self._pending = None
        self._sent = 0
        return count

    @property
    def writing(self) -> bool:
        return self._pending is not None

    def _push(self) -> None:
        if self._pending is None:
            return
        while self._sent < len(self._pending):
            try:
                count = self._sock.send(self._pending[self._sent:])
            except BlockingIOError:
                return
            self._sent += count

    # Reading ------------------------------------------------------------
    def available(self) -> int:
        """Return the number of bytes readable right now, -1 on error.

        A socket that selects readable with nothing queued has reached end
        of stream, which is reported as an error as well.
        """

        if self.closed:
            return -1
        try:
            readable, _, errored = select.select([self._sock], [], [self._sock], 0)
            if errored:
                return -1
            if not readable:
                return 0
            raw = fcntl.ioctl(self._sock.fileno(), termios.FIONREAD, struct.pack("i", 0))
        except (OSError, ValueError) as exc:
            LOGGER.warning("unable to query readable bytes: %s", exc)
            return -1
        count = struct.unpack("i", raw)[0]
        if count == 0:
            LOGGER.info("peer closed the connection")
            return -1
        return count

    def read(self, size: int) -> bytes:
        if size < 0:
            raise ReadPreconditionError(f"cannot read {size} bytes")
        if size == 0:
            return b""
        available = self.available()
        if size > available:
            raise ReadPreconditionError(
                f"requested {size} bytes but only {available} are available"
            )
        data = bytearray()
        while len(data) < size:
            try:
                chunk = self._sock.recv(size - len(data))
            except BlockingIOError:
                break
            if not chunk:
                break
            data += chunk
        return bytes(data)


__all__ = ["AsyncSocketChannel"]
