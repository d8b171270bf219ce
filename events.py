#!/usr/bin/env python3
"""
events.py  – central hub

• Translates raw Pygame events to high-level action dicts.
• Exposes a thread-safe queue so *any* external source can inject
  the same actions (web remote, tests, scripts).
• `dispatch()` applies one action to the orchestrator on the main loop,
  which keeps every state change on a single thread.
"""

from __future__ import annotations
import logging
import queue
from pygame.locals import *

log = logging.getLogger(__name__)

Action = dict      # alias for readability

_DIGITS = {K_1: 0, K_2: 1, K_3: 2, K_4: 3, K_5: 4, K_6: 5, K_7: 6, K_8: 7, K_9: 8}


class EventManager:
    _fifo: "queue.Queue[Action]" = queue.Queue()      # global, thread-safe
    _hovering = False                                 # pointer over chart

    # ── SDL / keyboard / mouse path ───────────────────────────────────
    @classmethod
    def handle(cls, event, chart_rect=None) -> None:
        """Translate one Pygame event → action and enqueue it."""
        act = cls._translate_pygame(event, chart_rect)
        if act:
            cls._fifo.put(act)

    # ── external / programmatic path ───────────────────────────────────
    @classmethod
    def post(cls, action: Action) -> None:
        """
        Any thread may call this to inject an already-formed action dict, e.g.:
            EventManager.post({"type":"jump","to":3})
        """
        cls._fifo.put(action)

    # ── main-loop consumer ─────────────────────────────────────────────
    @classmethod
    def poll(cls) -> Action | None:
        """Return next queued action or None (non-blocking)."""
        try:
            return cls._fifo.get_nowait()
        except queue.Empty:
            return None

    @classmethod
    def clear(cls) -> None:
        while cls.poll() is not None:
            pass
        cls._hovering = False

    # ── hover tracking ────────────────────────────────────────────────
    @classmethod
    def hover(cls, inside: bool) -> Action | None:
        """Edge-detect pointer enter/leave of the interactive chart."""
        if inside and not cls._hovering:
            cls._hovering = True
            return {"type": "suspend_start"}
        if not inside and cls._hovering:
            cls._hovering = False
            return {"type": "suspend_end"}
        return None

    # ── internal translator ───────────────────────────────────────────
    @classmethod
    def _translate_pygame(cls, event, chart_rect) -> Action | None:
        if event.type == QUIT:
            return {"type": "quit"}

        if event.type == MOUSEMOTION:
            inside = chart_rect is not None and chart_rect.collidepoint(event.pos)
            return cls.hover(inside)

        if event.type == WINDOWLEAVE:
            return cls.hover(False)

        if event.type == KEYDOWN:
            if event.key in (K_ESCAPE, K_q):
                return {"type": "quit"}
            if event.key == K_SPACE:
                return {"type": "toggle_play"}
            if event.key == K_RIGHT:
                return {"type": "next"}
            if event.key == K_LEFT:
                return {"type": "prev"}
            if event.key in _DIGITS:
                return {"type": "jump", "to": _DIGITS[event.key]}
            if event.key == K_n:
                return {"type": "toggle_narration"}
            if event.key == K_f:
                return {"type": "toggle_fullscreen"}
            if event.key == K_r:
                return {"type": "reset"}

        return None


# ── action → orchestrator ─────────────────────────────────────────────────
_COMMANDS = {
    "play":              "play",
    "pause":             "pause",
    "toggle_play":       "toggle_play",
    "next":              "next",
    "prev":              "prev",
    "reset":             "reset",
    "toggle_narration":  "toggle_narration",
    "toggle_fullscreen": "toggle_fullscreen",
    "suspend_start":     "on_interactive_suspend_start",
    "suspend_end":       "on_interactive_suspend_end",
}


def dispatch(orch, act: Action) -> bool:
    """
    Apply *act* to the orchestrator.  Returns False for "quit", True
    otherwise.  A bad jump target is logged and dropped.
    """
    t = act.get("type")
    if t == "quit":
        return False
    if t == "jump":
        try:
            orch.jump_to(act.get("to"))
        except (IndexError, TypeError, ValueError) as exc:
            log.warning("ignoring jump: %s", exc)
        return True
    name = _COMMANDS.get(t)
    if name is None:
        log.warning("unknown action %r", act)
        return True
    getattr(orch, name)()
    return True
