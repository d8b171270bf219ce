"""
renderer.py – draws one scene's content onto a surface.

The controller never looks inside `scene.content_ref`; only this module
does.  Exiting scenes are drawn faded out and without the chart hit-box.
"""
from __future__ import annotations

import pygame

WHITE = (255, 255, 255)
GREY  = (140, 150, 165)
CYAN  = (34, 211, 238)
GREEN = (34, 197, 94)
RED   = (239, 68, 68)
PANEL = (15, 23, 42)

pygame.font.init()

_font_cache: dict[tuple[int, bool], pygame.font.Font] = {}


def _font(size: int, bold: bool = False) -> pygame.font.Font:
    key = (size, bold)
    if key not in _font_cache:
        _font_cache[key] = pygame.font.SysFont("monospace", size, bold=bold)
    return _font_cache[key]


def _centered(surf: pygame.Surface, text: str, y: int, size: int,
              colour=WHITE, bold=False) -> int:
    img = _font(size, bold).render(text, True, colour)
    surf.blit(img, ((surf.get_width() - img.get_width()) // 2, y))
    return y + img.get_height() + size // 3


def _draw_stats(surf, items, top):
    w, h = surf.get_size()
    n = max(1, len(items))
    cw = w // (n + 1)
    for i, (label, value) in enumerate(items):
        x = cw * (i + 1)
        val = _font(h // 12, True).render(str(value), True, WHITE)
        lab = _font(h // 40).render(label.upper(), True, GREY)
        surf.blit(val, (x - val.get_width() // 2, top))
        surf.blit(lab, (x - lab.get_width() // 2, top + val.get_height() + 6))


def _draw_line_chart(surf, rect: pygame.Rect, series: dict) -> None:
    pygame.draw.rect(surf, PANEL, rect, border_radius=8)
    ys = series.get("val_f1") or []
    if len(ys) < 2:
        _centered(surf, "no epoch data", rect.centery, 18, GREY)
        return
    lo, hi = min(ys), max(ys)
    span = (hi - lo) or 1.0
    step = rect.width / (len(ys) - 1)
    pts = [(rect.left + i * step,
            rect.bottom - 10 - (v - lo) / span * (rect.height - 20))
           for i, v in enumerate(ys)]
    pygame.draw.lines(surf, CYAN, False, pts, 3)


def _draw_bars(surf, rect: pygame.Rect, bars, reference: float) -> None:
    pygame.draw.rect(surf, PANEL, rect, border_radius=8)
    if not bars:
        return
    bw = rect.width // (len(bars) * 2)
    top = max([v for _, v in bars] + [reference, 1e-6])
    for i, (label, v) in enumerate(bars):
        bh = int((rect.height - 30) * v / top)
        x = rect.left + bw // 2 + i * 2 * bw
        pygame.draw.rect(surf, CYAN, (x, rect.bottom - 20 - bh, bw, bh))
        lab = _font(12).render(label, True, GREY)
        surf.blit(lab, (x, rect.bottom - 16))
    ry = rect.bottom - 20 - int((rect.height - 30) * reference / top)
    pygame.draw.line(surf, GREEN, (rect.left, ry), (rect.right, ry), 2)


def render_scene(screen: pygame.Surface, scene, is_exiting: bool = False,
                 alpha: float = 1.0) -> pygame.Rect | None:
    """
    Draw *scene* over the whole screen at the given opacity.
    Returns the interactive chart rect (screen coords) or None.
    """
    w, h = screen.get_size()
    layer = pygame.Surface((w, h), pygame.SRCALPHA)
    ref = scene.content_ref if isinstance(scene.content_ref, dict) else {}
    kind = ref.get("kind")

    y = _centered(layer, scene.title, h // 10, h // 16, CYAN, bold=True)
    chart = pygame.Rect(w // 8, y + 10, w * 3 // 4, h // 2)

    if kind == "headline":
        lines = ref.get("lines", [])
        yy = h // 4
        for i, ln in enumerate(lines):
            size = h // 10 if i < 2 else h // 36
            yy = _centered(layer, ln, yy, size, WHITE if i != 1 else CYAN, i < 2)
    elif kind in ("stats", None):
        _draw_stats(layer, ref.get("items", []), h // 3)
    elif kind == "tokens":
        toks = ref.get("tokens", [])
        _centered(layer, "  ".join(f"[{t}]" for t in toks), h // 3, h // 28, WHITE)
    elif kind == "line":
        _draw_line_chart(layer, chart, ref.get("series", {}))
    elif kind == "bars":
        _draw_bars(layer, chart, ref.get("bars", []), ref.get("reference", 0.0))
        _draw_stats(layer, ref.get("items", []), chart.bottom + 10)

    layer.set_alpha(int(255 * max(0.0, min(1.0, alpha))))
    screen.blit(layer, (0, 0))

    if is_exiting or not scene.interactive:
        return None
    return chart
