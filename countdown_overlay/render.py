"""Rendering decisions for the countdown overlay.

Everything here is pure decision logic: given an ``HMS`` snapshot and the
current canvas size it picks colors, blink state, text, font size and text
placement, then issues draw instructions to a ``Canvas``. The pygame-backed
canvas lives in ``pygame_canvas``; tests use a recording fake.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .timer import HMS, Timer

Color = tuple[float, float, float]


class BackgroundStyle(str, Enum):
    SOLID = "solid"
    TRAIL = "trail"


class FontSizing(str, Enum):
    FIXED = "fixed"
    PROPORTIONAL = "proportional"


class CompositeMode(str, Enum):
    OVER = "over"
    SOURCE = "source"


@dataclass(frozen=True, slots=True)
class Palette:
    foreground: Color
    background: Color


NORMAL_PALETTE = Palette(foreground=(1.0, 1.0, 1.0), background=(0.21, 0.2, 0.22))
ALARM_PALETTE = Palette(foreground=(0.0, 0.0, 0.0), background=(0.9, 0.0, 0.32))


@dataclass(frozen=True, slots=True)
class CanvasSize:
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class TextExtents:
    """Ink box of a string relative to its baseline pen origin.

    ``y_bearing`` is negative for glyphs that rise above the baseline.
    """

    x_bearing: float
    y_bearing: float
    width: float
    height: float
    x_advance: float


@dataclass(frozen=True, slots=True)
class BackgroundFill:
    color: Color
    alpha: float
    mode: CompositeMode


@dataclass(frozen=True, slots=True)
class Style:
    background: BackgroundStyle = BackgroundStyle.SOLID
    font_sizing: FontSizing = FontSizing.FIXED
    font_size: float = 72.0
    height_multiplier: float = 0.3
    trail_alpha: float = 0.2
    font_name: str | None = None
    normal: Palette = NORMAL_PALETTE
    alarm: Palette = ALARM_PALETTE

    def __post_init__(self) -> None:
        if self.font_size <= 0:
            raise ValueError("font_size must be > 0")
        if self.height_multiplier <= 0:
            raise ValueError("height_multiplier must be > 0")
        if not (0.0 <= self.trail_alpha <= 1.0):
            raise ValueError("trail_alpha must be in [0.0, 1.0]")


class Canvas(Protocol):
    def size(self) -> CanvasSize: ...
    def fill(self, color: Color, *, alpha: float = 1.0, mode: CompositeMode = CompositeMode.SOURCE) -> None: ...
    def measure_text(self, text: str, *, size: float, font_name: str | None) -> TextExtents: ...
    def draw_text(
        self,
        text: str,
        *,
        size: float,
        font_name: str | None,
        color: Color,
        origin: tuple[float, float],
    ) -> None: ...


def derive_blink_state(hms: HMS) -> bool:
    """Alarm palette on even overtime seconds; never while counting down."""

    return hms.overtime and hms.s % 2 == 0


def choose_background(inverted: bool, style: Style) -> BackgroundFill:
    if inverted:
        return BackgroundFill(color=style.alarm.background, alpha=1.0, mode=CompositeMode.SOURCE)
    if style.background is BackgroundStyle.TRAIL:
        return BackgroundFill(color=style.normal.background, alpha=style.trail_alpha, mode=CompositeMode.SOURCE)
    return BackgroundFill(color=style.normal.background, alpha=1.0, mode=CompositeMode.SOURCE)


def choose_foreground(inverted: bool, style: Style) -> Color:
    return style.alarm.foreground if inverted else style.normal.foreground


def format_text(hms: HMS) -> str:
    sign = "+" if hms.overtime else ""
    hours = f"{hms.h}:" if hms.h != 0 else ""
    return f"{sign}{hours}{hms.m:02d}:{hms.s:02d}"


def choose_font_size(canvas_size: CanvasSize, style: Style) -> float:
    if style.font_sizing is FontSizing.PROPORTIONAL:
        size = canvas_size.height * style.height_multiplier
    else:
        size = style.font_size
    return max(1.0, float(size))


def layout_text(canvas_size: CanvasSize, extents: TextExtents) -> tuple[float, float]:
    """Baseline origin that centers the measured ink box on the canvas."""

    x = canvas_size.width / 2.0 - (extents.x_bearing + extents.width / 2.0)
    y = canvas_size.height / 2.0 - (extents.y_bearing + extents.height / 2.0)
    return (x, y)


class TimerView:
    """Draws a Timer onto a Canvas.

    Holds no countdown state of its own; the only thing it remembers between
    frames is the canvas size seen on the last redraw.
    """

    def __init__(self, timer: Timer, style: Style | None = None) -> None:
        self._timer = timer
        self._style = style if style is not None else Style()
        self._canvas_size = CanvasSize(0.0, 0.0)

    @property
    def style(self) -> Style:
        return self._style

    @property
    def canvas_size(self) -> CanvasSize:
        return self._canvas_size

    def redraw(self, canvas: Canvas) -> HMS:
        self._canvas_size = canvas.size()
        hms = self._timer.until_end_hms()
        self.draw(canvas, hms, self._canvas_size)
        return hms

    def draw(self, canvas: Canvas, hms: HMS, canvas_size: CanvasSize) -> None:
        inverted = derive_blink_state(hms)

        bg = choose_background(inverted, self._style)
        canvas.fill(bg.color, alpha=bg.alpha, mode=bg.mode)

        text = format_text(hms)
        font_size = choose_font_size(canvas_size, self._style)
        extents = canvas.measure_text(text, size=font_size, font_name=self._style.font_name)
        canvas.draw_text(
            text,
            size=font_size,
            font_name=self._style.font_name,
            color=choose_foreground(inverted, self._style),
            origin=layout_text(canvas_size, extents),
        )
