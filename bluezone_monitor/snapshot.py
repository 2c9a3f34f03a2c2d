"""Latest-value cell shared between a poller and its readers."""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SnapshotCell(Generic[T]):
    """Thread-safe holder for the newest snapshot of one poller.

    Each poll cycle draws a sequence number from ``next_cycle()`` when it
    starts and hands it back to ``publish()``. A publish carrying a number
    not newer than the current one is dropped, so a slow cycle that
    finishes after a later one cannot roll the snapshot back.
    """

    def __init__(self, name: str, initial: T) -> None:
        self.name = name
        self._value = initial
        self._cycle = 0
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def next_cycle(self) -> int:
        with self._lock:
            return next(self._counter)

    def get(self) -> T:
        with self._lock:
            return self._value

    @property
    def cycle(self) -> int:
        """Sequence number of the published snapshot (0 = initial value)."""
        with self._lock:
            return self._cycle

    def publish(self, cycle: int, value: T) -> bool:
        """Swap in ``value`` unless a newer cycle already published."""
        with self._lock:
            if cycle <= self._cycle:
                logger.debug(
                    "%s: dropping stale cycle %d (current %d)", self.name, cycle, self._cycle
                )
                return False
            self._value = value
            self._cycle = cycle
            return True
