from __future__ import annotations

import logging
import os

import pygame

from .render import CanvasSize, Color, CompositeMode, TextExtents

logger = logging.getLogger(__name__)

FONT_CACHE_LIMIT = 4


def _channel(value: float) -> int:
    return max(0, min(255, int(round(value * 255.0))))


def to_rgb255(color: Color) -> tuple[int, int, int]:
    r, g, b = color
    return (_channel(r), _channel(g), _channel(b))


class PygameCanvas:
    """Canvas implementation drawing onto a pygame Surface.

    Fonts are loaded lazily and cached by (name, pixel size); at most
    ``FONT_CACHE_LIMIT`` are kept, oldest evicted first.
    """

    def __init__(self, surface: pygame.Surface) -> None:
        self._surface = surface
        self._fonts: dict[tuple[str | None, int], pygame.font.Font] = {}
        self._overlay: pygame.Surface | None = None
        self._warned_no_alpha = False

    @property
    def cached_font_count(self) -> int:
        return len(self._fonts)

    @property
    def surface(self) -> pygame.Surface:
        return self._surface

    def size(self) -> CanvasSize:
        w, h = self._surface.get_size()
        return CanvasSize(float(w), float(h))

    def fill(self, color: Color, *, alpha: float = 1.0, mode: CompositeMode = CompositeMode.SOURCE) -> None:
        rgb = to_rgb255(color)
        if alpha >= 1.0:
            self._surface.fill(rgb)
            return

        a = _channel(alpha)
        if mode is CompositeMode.SOURCE and self._surface.get_flags() & pygame.SRCALPHA:
            self._surface.fill((*rgb, a))
            return

        if mode is CompositeMode.SOURCE and not self._warned_no_alpha:
            logger.warning("Surface has no per-pixel alpha; blending translucent background over last frame")
            self._warned_no_alpha = True

        # Blending over the previous frame leaves a fading trail.
        if self._overlay is None or self._overlay.get_size() != self._surface.get_size():
            self._overlay = pygame.Surface(self._surface.get_size())
        self._overlay.fill(rgb)
        self._overlay.set_alpha(a)
        self._surface.blit(self._overlay, (0, 0))

    def font(self, *, size: float, font_name: str | None) -> pygame.font.Font:
        px = max(1, int(round(size)))
        key = (font_name, px)
        found = self._fonts.get(key)
        if found is None:
            if font_name is None or os.path.isfile(font_name):
                found = pygame.font.Font(font_name, px)
            else:
                found = pygame.font.SysFont(font_name, px)
            while len(self._fonts) >= FONT_CACHE_LIMIT:
                del self._fonts[next(iter(self._fonts))]
            self._fonts[key] = found
        return found

    def measure_text(self, text: str, *, size: float, font_name: str | None) -> TextExtents:
        font = self.font(size=size, font_name=font_name)
        metrics = [m for m in font.metrics(text) if m is not None]
        if not metrics:
            w, h = font.size(text)
            return TextExtents(
                x_bearing=0.0,
                y_bearing=-float(font.get_ascent()),
                width=float(w),
                height=float(h),
                x_advance=float(w),
            )

        advance = sum(m[4] for m in metrics)
        ink_left = metrics[0][0]
        ink_right = advance - metrics[-1][4] + metrics[-1][1]
        top = max(m[3] for m in metrics)
        bottom = min(m[2] for m in metrics)
        return TextExtents(
            x_bearing=float(ink_left),
            y_bearing=-float(top),
            width=float(ink_right - ink_left),
            height=float(top - bottom),
            x_advance=float(advance),
        )

    def draw_text(
        self,
        text: str,
        *,
        size: float,
        font_name: str | None,
        color: Color,
        origin: tuple[float, float],
    ) -> None:
        font = self.font(size=size, font_name=font_name)
        rendered = font.render(text, True, to_rgb255(color))
        x, baseline = origin
        self._surface.blit(rendered, (int(round(x)), int(round(baseline)) - font.get_ascent()))
