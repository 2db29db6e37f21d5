"""
Tick sources - Host-side scheduling of simulator ticks.

The simulator never owns a thread or timer. After each tick it asks
its tick source for the next one; the source decides when to run it.

Provides:
- TickSource: Abstract request/cancel interface
- ManualTickSource: Caller-driven stepping (tests, batch runs)
- RealTimeTickSource: Wall-clock paced game loop
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional
import time


TickCallback = Callable[[], None]


class TickSource(ABC):
    """Schedules single tick callbacks on behalf of a simulator."""

    @abstractmethod
    def request_tick(self, callback: TickCallback) -> None:
        """Schedule callback to run once as the next tick."""

    @abstractmethod
    def cancel(self) -> None:
        """Drop any pending tick."""

    @property
    @abstractmethod
    def pending(self) -> bool:
        """Whether a tick is scheduled."""


class ManualTickSource(TickSource):
    """Tick source stepped explicitly by the caller.

    Holds at most one pending callback; requesting again replaces it.

    Usage:
        source = ManualTickSource()
        sim = RaceSimulator(field, conditions, tick_source=source)
        sim.start()
        source.run()
    """

    def __init__(self):
        self._pending: Optional[TickCallback] = None
        self._ticks_run: int = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def ticks_run(self) -> int:
        """Total callbacks executed by this source."""
        return self._ticks_run

    def request_tick(self, callback: TickCallback) -> None:
        self._pending = callback

    def cancel(self) -> None:
        self._pending = None

    def step(self) -> bool:
        """Run the pending tick, if any.

        Returns:
            True if a tick ran
        """
        callback = self._pending
        if callback is None:
            return False

        self._pending = None
        self._ticks_run += 1
        callback()
        return True

    def run(self, max_ticks: int = 100_000) -> int:
        """Run ticks until none is pending.

        Args:
            max_ticks: Maximum ticks to run

        Returns:
            Number of ticks run
        """
        steps = 0
        while steps < max_ticks and self.step():
            steps += 1
        return steps


class RealTimeTickSource(ManualTickSource):
    """Game loop that paces ticks to a fixed wall-clock interval."""

    def __init__(self, tick_interval_s: float = 1.0 / 60.0):
        """Initialize source.

        Args:
            tick_interval_s: Wall-clock seconds between ticks
        """
        super().__init__()
        if tick_interval_s < 0:
            raise ValueError("tick_interval_s must be non-negative")
        self.tick_interval_s = tick_interval_s
        self._last_real_time: float = 0.0

    def step(self) -> bool:
        if not self.pending:
            return False

        elapsed = time.monotonic() - self._last_real_time
        if elapsed < self.tick_interval_s:
            time.sleep(self.tick_interval_s - elapsed)
        self._last_real_time = time.monotonic()

        return super().step()
