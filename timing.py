# =========  timing.py  =========
"""
Monotonic clock helpers.

The playback clock is a pure step function (`tick(elapsed_ms)`); this module
supplies the wall time and the small driver that turns it into whole,
fixed-size ticks.
"""

import time

import config


def now_ms() -> float:
    """Milliseconds on the monotonic clock (unaffected by wall-clock jumps)."""
    return time.monotonic() * 1000.0


class TickDriver:
    """
    Converts elapsed wall time into a count of `period_ms` ticks.

    The sub-period remainder is carried to the next call so coarse frame
    timing never loses time, only delays it.
    """

    def __init__(self, period_ms: float = config.TICK_MS):
        if period_ms <= 0:
            raise ValueError("period_ms must be positive")
        self.period_ms = period_ms
        self._last: float | None = None
        self._carry = 0.0

    def reset(self, now: float | None = None) -> None:
        """Forget accumulated time; the next poll starts from *now*."""
        self._last = now
        self._carry = 0.0

    def poll(self, now: float) -> int:
        """Return how many ticks have elapsed since the previous poll."""
        if self._last is None:
            self._last = now
            return 0
        delta = max(0.0, now - self._last)
        self._last = now
        self._carry += delta
        n = int(self._carry // self.period_ms)
        self._carry -= n * self.period_ms
        return n
