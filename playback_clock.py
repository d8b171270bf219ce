# playback_clock.py
"""
Autoplay clock for the presenter.

Progress runs 0 → 100 over one scene duration while the clock is started and
not suspended.  Reaching 100 fires `on_advance` and wraps progress to 0.
Time is accumulated in milliseconds so a scene lasts exactly
`scene_duration_ms` regardless of float rounding in the percentage.
"""
from __future__ import annotations

from typing import Callable, Optional

import config


class PlaybackClock:
    def __init__(self,
                 scene_duration_ms: float = config.SCENE_DURATION_MS,
                 on_advance: Optional[Callable[[], None]] = None):
        if scene_duration_ms <= 0:
            raise ValueError("scene_duration_ms must be positive")
        self.scene_duration_ms = scene_duration_ms
        self.on_advance = on_advance

        self.elapsed_ms = 0.0
        self.running    = False
        self.suspended  = False

    # ── run state ─────────────────────────────────────────────────────────
    def start(self) -> None:
        self.running = True

    def stop(self) -> None:
        self.running = False

    def suspend(self) -> None:
        """Halt accumulation (interactive pause); progress is held."""
        self.suspended = True

    def resume(self) -> None:
        self.suspended = False

    @property
    def accumulating(self) -> bool:
        return self.running and not self.suspended

    @property
    def progress(self) -> float:
        """Percent of the current scene elapsed, 0 ≤ progress < 100."""
        return 100.0 * self.elapsed_ms / self.scene_duration_ms

    def reset_progress(self) -> None:
        self.elapsed_ms = 0.0

    # ── step ──────────────────────────────────────────────────────────────
    def tick(self, elapsed_ms: float) -> bool:
        """
        Advance by `elapsed_ms`.  Returns True when the scene duration
        elapsed (the advance callback has already been invoked).
        """
        if not self.accumulating or elapsed_ms <= 0:
            return False

        if self.elapsed_ms + elapsed_ms >= self.scene_duration_ms:
            self.elapsed_ms = 0.0
            if self.on_advance:
                self.on_advance()
            return True

        self.elapsed_ms += elapsed_ms
        return False
