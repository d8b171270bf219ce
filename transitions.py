# transitions.py
"""
Crossfade bookkeeping between scenes.

While a TransitionRecord is live the renderer draws `from_index` in exiting
mode and `to_index` in entering mode.  Each record clears itself once the
overlap window (800 ms by default) has elapsed; starting a new transition
replaces the pending one and its clear deadline.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import config

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionRecord:
    from_index: Optional[int]
    to_index: int
    started_at: float            # ms, same clock as the caller's `now`

    def elapsed(self, now: float) -> float:
        return max(0.0, now - self.started_at)


class TransitionManager:
    def __init__(self, overlap_ms: float = config.TRANSITION_OVERLAP_MS):
        self.overlap_ms = overlap_ms
        self._record: Optional[TransitionRecord] = None
        self._clear_at: Optional[float] = None     # pending clear timer

    def begin_transition(self, from_index: Optional[int], to_index: int,
                         now: float) -> TransitionRecord:
        if self._record is not None:
            log.debug("transition %s→%s superseded by %s→%s",
                      self._record.from_index, self._record.to_index,
                      from_index, to_index)
        self._record = TransitionRecord(from_index, to_index, now)
        self._clear_at = now + self.overlap_ms
        return self._record

    def update(self, now: float) -> bool:
        """Fire the clear timer if due.  Returns True when a record cleared."""
        if self._clear_at is not None and now >= self._clear_at:
            self.clear()
            return True
        return False

    def active(self, now: float) -> Optional[TransitionRecord]:
        """Live record at *now*; an expired record is never reported."""
        if self._clear_at is None or now >= self._clear_at:
            return None
        return self._record

    def clear(self) -> None:
        self._record = None
        self._clear_at = None

    def progress(self, now: float) -> float:
        """0.0 → 1.0 through the overlap window (1.0 when idle)."""
        rec = self.active(now)
        if rec is None or self.overlap_ms <= 0:
            return 1.0
        return min(1.0, rec.elapsed(now) / self.overlap_ms)
