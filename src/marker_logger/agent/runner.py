"""Fixed-rate tick loop driving polling and display refresh."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from marker_logger.agent.session import MarkerConsole

logger = logging.getLogger(__name__)


class TickLoop:
    """Calls the poller, then the display callback, once per interval.

    Everything runs on the calling thread, which keeps the log store and
    the connection set single-writer. ``stop`` may be called from a signal
    handler or from inside a callback; the loop exits before the next tick.
    """

    def __init__(
        self,
        console: MarkerConsole,
        interval: float = 0.05,
        on_display: Optional[Callable[[MarkerConsole, bool], None]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._console = console
        self._interval = interval
        self._on_display = on_display
        self._sleep = sleep
        self._running = False
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._running

    def tick(self) -> None:
        self._console.poll()
        changed = self._console.display_tick()
        if self._on_display is not None:
            self._on_display(self._console, changed)

    def run(self, max_ticks: Optional[int] = None) -> None:
        """Run until ``stop`` is called or ``max_ticks`` ticks have run."""
        self._running = True
        logger.info("Tick loop started (interval=%.3fs)", self._interval)

        while self._running:
            started = time.monotonic()
            try:
                self.tick()
            except Exception as e:
                logger.error("Error during tick: %s", e)
            self.ticks += 1

            if max_ticks is not None and self.ticks >= max_ticks:
                break
            remaining = self._interval - (time.monotonic() - started)
            if self._running and remaining > 0:
                self._sleep(remaining)

        self._running = False
        logger.info("Tick loop stopped after %d ticks", self.ticks)

    def stop(self) -> None:
        self._running = False
