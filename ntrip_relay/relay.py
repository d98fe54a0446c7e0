"""Steady-state loop: relay corrections and report the position."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import BinaryIO, Callable, Optional

from .models import IoStatus, Location
from .poller import Ticker

LOGGER = logging.getLogger(__name__)

FIRST_REPORT_DELAY_TICKS = 3


class CorrectionRelay:
    """Forward correction bytes to ``sink`` and keep the caster informed.

    Every tick the relay first looks at the position report cadence: once
    ``report_interval_ticks`` ticks have elapsed a new report is sent, but
    only if the previous one finished transmitting. A report that is still
    in flight keeps the next one pending until a later tick. After that,
    whatever the caster sent is written to ``sink`` unchanged.
    """

    def __init__(
        self,
        client,
        location: Location,
        sink: BinaryIO,
        *,
        ticker: Ticker | None = None,
        report_interval_ticks: int = 100,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if report_interval_ticks < 1:
            raise ValueError("report_interval_ticks must be >= 1")
        self.client = client
        self.location = location
        self.sink = sink
        self.ticker = ticker or getattr(client, "ticker", None) or Ticker()
        self.report_interval_ticks = report_interval_ticks
        self._clock: Callable[[], datetime] = clock or (lambda: datetime.now(timezone.utc))
        self._counter = max(report_interval_ticks - FIRST_REPORT_DELAY_TICKS, 0)
        self.reports_sent = 0
        self.bytes_relayed = 0

    def run(self, max_ticks: Optional[int] = None) -> IoStatus:
        """Loop until a fatal channel error, a stop request or ``max_ticks``."""

        for _ in self.ticker.ticks(max_ticks):
            if self.report_step() is IoStatus.ERROR:
                return IoStatus.ERROR
            if self.relay_step() is IoStatus.ERROR:
                return IoStatus.ERROR
        LOGGER.info(
            "relay stopped after %d bytes and %d position reports",
            self.bytes_relayed,
            self.reports_sent,
        )
        return IoStatus.SUCCESS

    # PositionReportScheduler --------------------------------------------
    def report_step(self) -> IoStatus:
        self._counter += 1
        if self._counter < self.report_interval_ticks:
            return IoStatus.SUCCESS

        status = self.client.check_position_report()
        if status is IoStatus.IN_PROGRESS:
            LOGGER.debug("previous position report still in flight")
            return IoStatus.SUCCESS
        if status is IoStatus.ERROR:
            LOGGER.error("error sending position report")
            return IoStatus.ERROR

        self._counter = 0
        result = self.client.send_position_report(self.location, self._clock())
        if result is IoStatus.SUCCESS:
            self.reports_sent += 1
        else:
            LOGGER.error("position report sending error")
        return IoStatus.SUCCESS

    # CorrectionRelay ----------------------------------------------------
    def relay_step(self) -> IoStatus:
        count = self.client.available()
        if count < 0:
            LOGGER.error("correction stream lost")
            return IoStatus.ERROR
        if count == 0:
            return IoStatus.SUCCESS
        data = self.client.receive(count)
        self.sink.write(data)
        flush = getattr(self.sink, "flush", None)
        if callable(flush):
            flush()
        self.bytes_relayed += len(data)
        return IoStatus.SUCCESS


__all__ = ["CorrectionRelay", "FIRST_REPORT_DELAY_TICKS"]
