from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from .render import BackgroundStyle, FontSizing, Style

ENV_PREFIX = "COUNTDOWN_OVERLAY_"
DURATION_ENV = f"{ENV_PREFIX}DURATION"
SIZE_ENV = f"{ENV_PREFIX}SIZE"
OPACITY_ENV = f"{ENV_PREFIX}OPACITY"
BACKGROUND_ENV = f"{ENV_PREFIX}BACKGROUND"
FONT_SIZING_ENV = f"{ENV_PREFIX}FONT_SIZING"
LOG_LEVEL_ENV = f"{ENV_PREFIX}LOG_LEVEL"

DEFAULT_DURATION_S = 15 * 60.0

_CLOCK_RE = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{1,2})$")
_UNITS_RE = re.compile(r"^(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?$")
_SIZE_RE = re.compile(r"^(\d+)\s*[xX]\s*(\d+)$")


def parse_duration(text: str) -> float:
    """Parse a duration into seconds.

    Accepted forms: ``"90"`` (seconds), ``"45s"``, ``"15m"``, ``"1h30m"``,
    ``"20:00"`` (mm:ss) and ``"1:02:03"`` (h:mm:ss).
    """

    raw = str(text).strip().lower()
    if raw == "":
        raise ValueError("duration must not be empty")

    if raw.isdigit():
        return float(int(raw))

    m = _CLOCK_RE.match(raw)
    if m is not None:
        hours = int(m.group(1) or 0)
        minutes = int(m.group(2))
        seconds = int(m.group(3))
        if seconds >= 60 or (m.group(1) is not None and minutes >= 60):
            raise ValueError(f"invalid duration: {text!r}")
        return float(hours * 3600 + minutes * 60 + seconds)

    m = _UNITS_RE.match(raw)
    if m is not None and any(g is not None for g in m.groups()):
        hours, minutes, seconds = (int(g or 0) for g in m.groups())
        return float(hours * 3600 + minutes * 60 + seconds)

    raise ValueError(f"invalid duration: {text!r}")


def parse_size(text: str) -> tuple[int, int]:
    m = _SIZE_RE.match(str(text).strip())
    if m is None:
        raise ValueError(f"invalid size (expected WIDTHxHEIGHT): {text!r}")
    w, h = int(m.group(1)), int(m.group(2))
    if w <= 0 or h <= 0:
        raise ValueError("window size must be positive")
    return (w, h)


def _parse_enum(enum_cls, raw: str):
    try:
        return enum_cls(str(raw).strip().lower())
    except ValueError:
        choices = ", ".join(e.value for e in enum_cls)
        raise ValueError(f"invalid value {raw!r}; expected one of: {choices}") from None


def parse_background(text: str) -> BackgroundStyle:
    return _parse_enum(BackgroundStyle, text)


def parse_font_sizing(text: str) -> FontSizing:
    return _parse_enum(FontSizing, text)


@dataclass(frozen=True, slots=True)
class OverlayConfig:
    """Startup parameters for the overlay window and its timer."""

    duration_s: float = DEFAULT_DURATION_S
    window_size: tuple[int, int] = (350, 370)
    decorated: bool = False
    opacity: float = 0.4
    always_on_top: bool = True
    resizable: bool = False
    title: str = "on screen countdown"
    refresh_ms: int = 50
    log_level: str = "INFO"
    style: Style = field(default_factory=Style)

    def __post_init__(self) -> None:
        if self.duration_s < 0:
            raise ValueError("duration_s must be >= 0")
        w, h = self.window_size
        if w <= 0 or h <= 0:
            raise ValueError("window size must be positive")
        if not (0.0 <= self.opacity <= 1.0):
            raise ValueError("opacity must be in [0.0, 1.0]")
        if self.refresh_ms <= 0:
            raise ValueError("refresh_ms must be > 0")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "OverlayConfig":
        """Defaults overridden by ``COUNTDOWN_OVERLAY_*`` environment variables."""

        env = os.environ if environ is None else environ
        config = cls()
        style = config.style

        raw = env.get(DURATION_ENV)
        if raw:
            config = replace(config, duration_s=parse_duration(raw))
        raw = env.get(SIZE_ENV)
        if raw:
            config = replace(config, window_size=parse_size(raw))
        raw = env.get(OPACITY_ENV)
        if raw:
            try:
                opacity = float(raw)
            except ValueError:
                raise ValueError(f"invalid opacity: {raw!r}") from None
            config = replace(config, opacity=opacity)
        raw = env.get(LOG_LEVEL_ENV)
        if raw:
            config = replace(config, log_level=raw.strip().upper())

        raw = env.get(BACKGROUND_ENV)
        if raw:
            style = replace(style, background=parse_background(raw))
        raw = env.get(FONT_SIZING_ENV)
        if raw:
            style = replace(style, font_sizing=parse_font_sizing(raw))

        return replace(config, style=style)
