"""
Turn Timer - The once-per-second clock that drives tick_turn.

There are no threads: the host calls pump() from its own loop with the
current time and the timer fires one tick per whole interval that has
passed. sync() arms the timer while a turn runs and clears it as soon
as it stops, so a stopped or torn-down view never receives ticks.
"""

from __future__ import annotations
from typing import Callable


class TurnTimer:
    """
    Usage:
        timer = TurnTimer(store.tick)
        timer.sync(is_running=True, now_ms=now)

        # from the host loop
        timer.pump(now_ms=now)
    """

    def __init__(self, on_tick: Callable[[], None], interval_ms: int = 1000):
        self.on_tick = on_tick
        self.interval_ms = interval_ms
        self._next_due: int | None = None

    @property
    def is_armed(self) -> bool:
        return self._next_due is not None

    def sync(self, is_running: bool, now_ms: int) -> None:
        """Arm while a turn runs; clear otherwise. Re-syncing an armed timer keeps its phase."""
        if not is_running:
            self.clear()
        elif self._next_due is None:
            self._next_due = now_ms + self.interval_ms

    def pump(self, now_ms: int) -> int:
        """Fire every tick due by `now_ms`. Returns how many fired."""
        fired = 0
        while self._next_due is not None and now_ms >= self._next_due:
            self._next_due += self.interval_ms
            fired += 1
            # on_tick may stop the turn and clear this timer
            self.on_tick()
        return fired

    def clear(self) -> None:
        self._next_due = None
