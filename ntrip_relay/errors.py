"""Exceptions raised by the NTRIP relay.

``ProgrammerError`` and its subclasses flag misuse of the API (a second
session on a busy client, a send without a connection, ...). They are not
part of the runtime error taxonomy, which is reported through
:class:`~ntrip_relay.models.IoStatus` and
:class:`~ntrip_relay.models.ConnectionStatus` results instead.
"""
from __future__ import annotations


class ProgrammerError(RuntimeError):
    """A precondition of the API was violated by the caller."""


class SessionActiveError(ProgrammerError):
    """Raised when ``connect`` is called while a session is still open."""


class NotConnectedError(ProgrammerError):
    """Raised when an operation needs a session but none is active."""


class WriteInFlightError(ProgrammerError):
    """Raised when a write is submitted before the previous one was ended."""


class ReadPreconditionError(ProgrammerError):
    """Raised when more bytes are read than the channel has available."""


class ChannelError(Exception):
    """The socket channel failed while a write was in flight."""


__all__ = [
    "ChannelError",
    "NotConnectedError",
    "ProgrammerError",
    "ReadPreconditionError",
    "SessionActiveError",
    "WriteInFlightError",
]
