"""Fixed-interval ticking used by the handshake and the relay loop."""
from __future__ import annotations

import threading
from typing import Callable, Iterator, Optional


class Ticker:
    """Yield one tick per ``interval_s`` seconds.

    Each tick waits first and yields afterwards, so ``ticks(50)`` with a
    100 ms interval covers exactly five seconds. Waiting is done on
    ``stop_event`` which lets a signal handler end the loop between two
    ticks; tests inject ``sleep`` to run without delay.
    """

    def __init__(
        self,
        interval_s: float = 0.1,
        *,
        stop_event: Optional[threading.Event] = None,
        sleep: Optional[Callable[[float], object]] = None,
    ) -> None:
        if interval_s < 0:
            raise ValueError("interval_s must be >= 0")
        self.interval_s = interval_s
        self.stop_event = stop_event or threading.Event()
        self._sleep = sleep

    @property
    def stopped(self) -> bool:
        return self.stop_event.is_set()

    def stop(self) -> None:
        self.stop_event.set()

    def wait(self) -> bool:
        """Wait one interval; return False when the ticker was stopped."""

        if self._sleep is not None:
            self._sleep(self.interval_s)
            return not self.stop_event.is_set()
        return not self.stop_event.wait(self.interval_s)

    def ticks(self, limit: Optional[int] = None) -> Iterator[int]:
        index = 0
        while limit is None or index < limit:
            if self.stop_event.is_set() or not self.wait():
                return
            yield index
            index += 1


__all__ = ["Ticker"]
