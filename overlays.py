"""
overlays.py

Pygame overlay renderer: status badge, narration flag, segmented progress
strip with scene titles, and the wrapped caption.
"""

from __future__ import annotations

import textwrap

import pygame

import config

# ── colours ────────────────────────────────────────────────────────────────
WHITE = (255, 255, 255)
GREEN = (0, 255, 0)
RED   = (255,  50, 50)
YEL   = (200, 200, 50)
CYAN  = (34, 211, 238)
DIM   = (70, 80, 95)
BG    = (0, 0, 0, 180)

pygame.font.init()


# ── helpers ────────────────────────────────────────────────────────────────
def _compute_font_sizes(h: int) -> tuple[int, int, int]:
    return max(12, h // 60), max(16, h // 45), max(24, h // 15)


def _badge(surface, text, font, colour, pos, pad) -> pygame.Surface:
    txt = font.render(text, True, colour)
    bg  = pygame.Surface((txt.get_width() + pad * 2, txt.get_height() + pad),
                         pygame.SRCALPHA)
    bg.fill(BG)
    bg.blit(txt, (pad, pad // 2))
    surface.blit(bg, pos)
    return bg


# ── main entry point ───────────────────────────────────────────────────────
def draw_overlay(surface: pygame.Surface, snap, titles: list[str]) -> None:
    sw, sh = surface.get_width(), surface.get_height()
    tiny_pt, small_pt, _ = _compute_font_sizes(sh)
    FT = pygame.font.SysFont("monospace", tiny_pt)
    FS = pygame.font.SysFont("monospace", small_pt)

    # ── status badge (always) ────────────────────────────────────────────
    colour = {"playing": RED, "suspended": YEL}.get(snap.mode, WHITE)
    badge  = _badge(surface, snap.status_label, FS, colour, (10, 10), small_pt // 3)

    scene_txt = f"{snap.current_index + 1:02d}/{snap.scene_count:02d}"
    _badge(surface, scene_txt, FS, GREEN,
           (sw - FS.size(scene_txt)[0] - small_pt // 3 * 2 - 10, 10), small_pt // 3)

    if snap.is_narrating:
        _badge(surface, f"NARRATION {snap.narration_status.value.upper()}",
               FT, CYAN, (10, 10 + badge.get_height() + 5), tiny_pt // 3)

    if not config.SHOW_OVERLAYS:
        return

    # ── caption ──────────────────────────────────────────────────────────
    lines = textwrap.wrap(snap.current_scene.caption, config.CAPTION_WRAP)
    lh    = FS.get_linesize()
    y     = sh - 60 - lh * len(lines)
    for ln in lines:
        img = FS.render(ln, True, WHITE)
        surface.blit(img, ((sw - img.get_width()) // 2, y))
        y += lh

    # ── segmented progress strip ─────────────────────────────────────────
    n     = max(1, snap.scene_count)
    gap   = 6
    seg_w = (sw - 20 - gap * (n - 1)) / n
    top   = sh - 30
    for i in range(n):
        x = 10 + i * (seg_w + gap)
        pygame.draw.rect(surface, DIM, (x, top, seg_w, 4))
        if i < snap.current_index:
            fill = seg_w
        elif i == snap.current_index:
            fill = seg_w * snap.progress / 100.0
        else:
            fill = 0
        if fill:
            pygame.draw.rect(surface, CYAN, (x, top, fill, 4))
        if i < len(titles):
            lab = FT.render(titles[i][:int(seg_w // max(1, tiny_pt * 0.6))],
                            True, WHITE if i == snap.current_index else DIM)
            surface.blit(lab, (x, top + 8))
