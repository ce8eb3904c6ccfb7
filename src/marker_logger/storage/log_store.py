"""Bounded, filterable store of received log entries."""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Optional

from marker_logger.ingestion.models import MATCH_ALL, FilterPredicate, LogEntry

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 1000


class LogStore:
    """FIFO history of entries plus a filtered projection of it.

    The filtered view is always an order-preserving subsequence of the
    history holding exactly the entries that pass the active predicate.
    Every mutation sets the dirty flag; the display clears it with
    ``consume_dirty`` and re-reads ``view``, so redraws happen at most
    once per display tick regardless of ingestion rate.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._history: deque[LogEntry] = deque()
        self._view: deque[LogEntry] = deque()
        self._predicate = MATCH_ALL
        self._dirty = False
        self._listeners: list[Callable[[], None]] = []

    @property
    def predicate(self) -> FilterPredicate:
        return self._predicate

    @property
    def history(self) -> list[LogEntry]:
        return list(self._history)

    @property
    def view(self) -> list[LogEntry]:
        return list(self._view)

    @property
    def dirty(self) -> bool:
        return self._dirty

    def __len__(self) -> int:
        return len(self._history)

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a no-payload callback fired when the view changes."""
        self._listeners.append(callback)

    def append(self, entry: LogEntry) -> Optional[LogEntry]:
        """Append an entry, evicting the oldest one past capacity.

        Returns:
            The evicted entry, if any.
        """
        self._history.append(entry)
        evicted = None
        changed = False
        if len(self._history) > self.capacity:
            evicted = self._history.popleft()
            # The view is a subsequence of the history, so the oldest
            # history entry can only ever sit at the front of the view.
            if self._view and self._view[0] is evicted:
                self._view.popleft()
                changed = True

        if self._predicate.matches(entry):
            self._view.append(entry)
            changed = True

        if changed:
            self._mark_dirty()
        return evicted

    def set_filter(self, predicate: FilterPredicate) -> None:
        """Replace the active predicate and rebuild the view from history."""
        self._predicate = predicate
        self._view = deque(e for e in self._history if predicate.matches(e))
        logger.debug(
            "Filter content=%r stream=%r: %d of %d entries shown",
            predicate.content,
            predicate.stream,
            len(self._view),
            len(self._history),
        )
        self._mark_dirty()

    def clear(self) -> None:
        self._history.clear()
        self._view.clear()
        self._mark_dirty()

    def consume_dirty(self) -> bool:
        """Return the dirty flag and reset it."""
        was_dirty = self._dirty
        self._dirty = False
        return was_dirty

    def _mark_dirty(self) -> None:
        self._dirty = True
        for callback in self._listeners:
            callback()
