#!/usr/bin/env python3
"""
app.py – narrated training-results presenter (pygame front end)

Owns the window and the main loop.  Input from the keyboard, the mouse and
the web remote all arrives through events.EventManager and is applied to the
PlaybackOrchestrator here, on the main thread.
"""
from __future__ import annotations

import logging
from typing import Optional

import pygame
from pygame.locals import *

import config
from audio_output import AudioOutput
from events import EventManager, dispatch
from narration import NarrationController
from orchestrator import PlaybackOrchestrator
from overlays import draw_overlay
from renderer import render_scene
from scene_catalog import SceneCatalog
from tts_client import GeminiTTSClient

log = logging.getLogger(__name__)


# ── fullscreen collaborator ────────────────────────────────────────────────
class PygameDisplay:
    """Owns the pygame window; raises pygame.error when a mode switch fails."""

    def __init__(self, fullscreen: bool = config.FULLSCREEN):
        self.fullscreen = fullscreen
        self.screen = self._set_mode(fullscreen)

    def _set_mode(self, fullscreen: bool) -> pygame.Surface:
        screen = pygame.display.set_mode(
            (0, 0) if fullscreen else config.WINDOWED_SIZE,
            pygame.FULLSCREEN if fullscreen else 0,
        )
        pygame.display.set_caption("Training Briefing")
        return screen

    def request_fullscreen(self) -> None:
        self.screen = self._set_mode(True)
        self.fullscreen = True

    def exit_fullscreen(self) -> None:
        self.screen = self._set_mode(False)
        self.fullscreen = False


# ── main application ───────────────────────────────────────────────────────
class PresenterApp:
    def __init__(self, catalog: SceneCatalog, synthesize=None,
                 output: Optional[AudioOutput] = None):
        # window ----------------------------------------------------------
        pygame.init()
        self.display = PygameDisplay(config.FULLSCREEN)
        self.clock = pygame.time.Clock()

        # core state ------------------------------------------------------
        self.catalog = catalog
        narration = NarrationController(
            synthesize or GeminiTTSClient(),
            output or AudioOutput(),
        )
        self.orch = PlaybackOrchestrator(catalog, narration, display=self.display)
        self.orch.is_fullscreen = self.display.fullscreen
        self.chart_rect: Optional[pygame.Rect] = None

    # ── drawing -----------------------------------------------------------
    def _draw(self) -> None:
        screen = self.display.screen
        screen.fill((5, 5, 5))
        snap = self.orch.snapshot()

        if snap.previous_scene is not None:
            render_scene(screen, snap.previous_scene, is_exiting=True,
                         alpha=1.0 - snap.transition_progress)
            alpha = snap.transition_progress
        else:
            alpha = 1.0
        self.chart_rect = render_scene(screen, snap.current_scene, alpha=alpha)

        draw_overlay(screen, snap, self.catalog.titles)

    # ── main loop ---------------------------------------------------------
    def run(self) -> None:
        running = True
        while running:
            for e in pygame.event.get():
                EventManager.handle(e, self.chart_rect)

            # drain keyboard + remote queue (non-blocking)
            while (act := EventManager.poll()):
                if not dispatch(self.orch, act):
                    running = False
                    break

            self.orch.update()
            self._draw()
            pygame.display.flip()
            self.clock.tick(config.FPS)

        self.orch.close()
        pygame.quit()
