# orchestrator.py
"""
Playback orchestrator – the single owner of presentation state.

Commands (play / pause / jump / reset / narration / fullscreen / interactive
suspension) arrive on the main loop; `update()` is called once per frame to
drive the autoplay clock, retire finished transitions and apply narration
completions.  Renderers only ever see a frozen PlaybackSnapshot, either by
calling `snapshot()` or by subscribing to change notifications.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import config
from narration import NarrationController, NarrationSession, NarrationStatus
from playback_clock import PlaybackClock
from scene_catalog import Scene, SceneCatalog
from timing import TickDriver, now_ms
from transitions import TransitionManager, TransitionRecord

log = logging.getLogger(__name__)

Listener = Callable[["PlaybackSnapshot"], None]


@dataclass(frozen=True)
class PlaybackSnapshot:
    current_index: int
    previous_index: Optional[int]
    progress: float
    is_playing: bool
    is_suspended: bool
    is_narrating: bool
    is_fullscreen: bool
    narration_status: NarrationStatus
    current_scene: Scene
    previous_scene: Optional[Scene]
    transition: Optional[TransitionRecord]
    transition_progress: float
    scene_count: int

    @property
    def mode(self) -> str:
        if not self.is_playing:
            return "idle"
        return "suspended" if self.is_suspended else "playing"

    @property
    def status_label(self) -> str:
        if not self.is_playing:
            return "PAUSED"
        return "INTERACTION PAUSE" if self.is_suspended else "PLAYBACK"

    def as_dict(self) -> dict:
        t = self.transition
        return {
            "current_index":  self.current_index,
            "previous_index": self.previous_index,
            "progress":       round(self.progress, 3),
            "is_playing":     self.is_playing,
            "is_suspended":   self.is_suspended,
            "is_narrating":   self.is_narrating,
            "is_fullscreen":  self.is_fullscreen,
            "mode":           self.mode,
            "narration":      self.narration_status.value,
            "scene": {"id": self.current_scene.id,
                      "title": self.current_scene.title,
                      "caption": self.current_scene.caption},
            "transition": None if t is None else
                          {"from": t.from_index, "to": t.to_index},
            "scene_count":    self.scene_count,
        }


class PlaybackOrchestrator:
    def __init__(self,
                 catalog: SceneCatalog,
                 narration: NarrationController,
                 display=None,
                 clock: Callable[[], float] = now_ms,
                 scene_duration_ms: float = config.SCENE_DURATION_MS,
                 tick_ms: float = config.TICK_MS,
                 overlap_ms: float = config.TRANSITION_OVERLAP_MS):
        self.catalog = catalog
        self.display = display
        self._now = clock

        self.playback    = PlaybackClock(scene_duration_ms, on_advance=self._on_advance)
        self.transitions = TransitionManager(overlap_ms)
        self.narration   = narration
        self.narration.on_failed = self._on_narration_failed
        self._ticks      = TickDriver(tick_ms)
        self._tick_at: Optional[float] = None

        self.current_index = 0
        self.is_narrating  = False
        self.is_fullscreen = False

        self._listeners: List[Listener] = []

    # ── read side ─────────────────────────────────────────────────────────
    @property
    def is_playing(self) -> bool:
        return self.playback.running

    @property
    def is_suspended(self) -> bool:
        return self.playback.suspended

    @property
    def progress(self) -> float:
        return self.playback.progress

    @property
    def current_scene(self) -> Scene:
        return self.catalog[self.current_index]

    def snapshot(self, now: Optional[float] = None) -> PlaybackSnapshot:
        now = self._now() if now is None else now
        rec = self.transitions.active(now)
        prev = rec.from_index if rec is not None else None
        return PlaybackSnapshot(
            current_index=self.current_index,
            previous_index=prev,
            progress=self.playback.progress,
            is_playing=self.playback.running,
            is_suspended=self.playback.suspended,
            is_narrating=self.is_narrating,
            is_fullscreen=self.is_fullscreen,
            narration_status=self.narration.status,
            current_scene=self.catalog[self.current_index],
            previous_scene=self.catalog[prev] if prev is not None else None,
            transition=rec,
            transition_progress=self.transitions.progress(now),
            scene_count=len(self.catalog),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register for snapshots after every change; returns unsubscribe."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return _unsubscribe

    def _notify(self, now: Optional[float] = None) -> None:
        if not self._listeners:
            return
        snap = self.snapshot(now)
        for fn in list(self._listeners):
            fn(snap)

    # ── playback commands ─────────────────────────────────────────────────
    def play(self) -> None:
        if self.playback.running:
            return
        self._ticks.reset(self._now())
        self.playback.start()
        log.info("play (scene %d)", self.current_index)
        self._notify()

    def pause(self) -> None:
        if not self.playback.running:
            return
        self.playback.stop()
        log.info("pause (scene %d, %.1f%%)", self.current_index, self.progress)
        self._notify()

    def toggle_play(self) -> None:
        if self.playback.running:
            self.pause()
        else:
            self.play()

    def jump_to(self, index: int) -> None:
        self.catalog.check(index)              # raises before any mutation
        if index == self.current_index:
            return
        self._change_scene(index)
        self._notify()

    def next(self) -> None:
        self.jump_to(self.catalog.next(self.current_index))

    def prev(self) -> None:
        self.jump_to(self.catalog.prev(self.current_index))

    def reset(self) -> None:
        """Stop autoplay and rewind to the first scene.

        The live narration session is always cancelled; with narration on,
        the first scene is narrated again from the start.
        """
        self.playback.stop()
        self.narration.cancel()
        self.transitions.clear()
        self.current_index = 0
        self.playback.reset_progress()
        if self.is_narrating:
            self.narration.narrate(0, self.catalog[0].caption)
        log.info("reset")
        self._notify()

    # ── interactive suspension ────────────────────────────────────────────
    def on_interactive_suspend_start(self) -> None:
        if self.playback.suspended:
            return
        self.playback.suspend()
        self._notify()

    def on_interactive_suspend_end(self) -> None:
        if not self.playback.suspended:
            return
        self.playback.resume()
        self._ticks.reset(self._now())
        self._notify()

    # ── narration ─────────────────────────────────────────────────────────
    def toggle_narration(self) -> None:
        self.is_narrating = not self.is_narrating
        if self.is_narrating:
            log.info("narration on")
            self._narrate_current()
        else:
            log.info("narration off")
            self.narration.cancel()
        self._notify()

    def _narrate_current(self) -> None:
        try:
            self.narration.output.acquire()
        except Exception as exc:
            log.warning("audio output unavailable: %s", exc)
            self.is_narrating = False
            return
        scene = self.current_scene
        self.narration.narrate(self.current_index, scene.caption)

    def _on_narration_failed(self, session: NarrationSession) -> None:
        if self.is_narrating:
            log.info("narration disabled after failure on scene %d",
                     session.scene_index)
        self.is_narrating = False
        self._notify()

    # ── fullscreen ────────────────────────────────────────────────────────
    def toggle_fullscreen(self) -> None:
        if self.display is None:
            log.debug("no display collaborator – fullscreen ignored")
            return
        want = not self.is_fullscreen
        try:
            if want:
                self.display.request_fullscreen()
            else:
                self.display.exit_fullscreen()
        except Exception as exc:
            log.warning("fullscreen %s failed: %s",
                        "request" if want else "exit", exc)
            return
        self.is_fullscreen = want
        self._notify()

    def on_fullscreen_changed(self, is_fullscreen: bool) -> None:
        if bool(is_fullscreen) == self.is_fullscreen:
            return
        self.is_fullscreen = bool(is_fullscreen)
        self._notify()

    # ── frame update ──────────────────────────────────────────────────────
    def update(self, now: Optional[float] = None) -> None:
        now = self._now() if now is None else now
        changed = False

        if self.playback.accumulating:
            self._tick_at = now
            for _ in range(self._ticks.poll(now)):
                self.playback.tick(self._ticks.period_ms)
                changed = True
                if not self.playback.accumulating:
                    break                       # wrapped to the first scene
            self._tick_at = None

        if self.transitions.update(now):
            changed = True

        before = self.narration.status
        self.narration.pump()
        if self.narration.status is not before:
            changed = True

        if changed:
            self._notify(now)

    def close(self) -> None:
        """Tear down: stop autoplay and release narration audio."""
        self.playback.stop()
        self.narration.close()
        self.transitions.clear()

    # ── internals ─────────────────────────────────────────────────────────
    def _change_scene(self, index: int) -> None:
        old = self.current_index
        if self.is_narrating:
            self.narration.cancel()
        now = self._tick_at if self._tick_at is not None else self._now()
        self.transitions.begin_transition(old, index, now)
        self.current_index = index
        self.playback.reset_progress()
        log.info("scene %d → %d (%s)", old, index, self.catalog[index].id)
        if self.is_narrating:
            self.narration.narrate(index, self.catalog[index].caption)

    def _on_advance(self) -> None:
        old = self.current_index
        nxt = self.catalog.next(old)
        if nxt != old:
            self._change_scene(nxt)
        if nxt == 0 and old == len(self.catalog) - 1:
            self.playback.stop()
            log.info("end of presentation – autoplay stopped")
