"""Pygame shell for the countdown overlay.

Window setup, the refresh loop and key handling live here. Countdown
arithmetic is in ``timer`` and every drawing decision is in ``render``; this
module only wires them to pygame.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import pygame

from .config import OverlayConfig
from .pygame_canvas import PygameCanvas
from .render import Canvas, TimerView
from .timer import Clock, RealClock, Timer

logger = logging.getLogger(__name__)

REFRESH_EVENT = pygame.USEREVENT + 1
RESTART_KEYS = ("r", "R")

# pygame._sdl2 raises its own RuntimeError subclass, unrelated to pygame.error.
WINDOW_ERRORS = (pygame.error, RuntimeError, AttributeError)


def key_char(event: pygame.event.Event) -> str:
    """Resolve the character of a key event, falling back to the keycode for ``r``."""

    char = getattr(event, "unicode", "") or ""
    if char == "" and getattr(event, "key", None) == pygame.K_r:
        return "r"
    return char


class OverlayApp:
    """Single owner of the timer and its view.

    Both the key handler and the paint path run synchronously from the event
    loop, so they share the timer without locking.
    """

    def __init__(self, timer: Timer, view: TimerView, canvas: Canvas) -> None:
        self._timer = timer
        self._view = view
        self._canvas = canvas
        self._running = True
        self._last_overtime: bool | None = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def timer(self) -> Timer:
        return self._timer

    @property
    def view(self) -> TimerView:
        return self._view

    def quit(self) -> None:
        self._running = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.quit()
            return
        if event.type != pygame.KEYUP:
            return
        if key_char(event) in RESTART_KEYS:
            logger.info("Restart requested with %.1fs remaining", self._timer.remaining_s())
            self._timer.restart()

    def render(self) -> None:
        hms = self._view.redraw(self._canvas)
        if hms.overtime != self._last_overtime:
            if hms.overtime:
                logger.debug("Countdown reached zero; counting overtime")
            self._last_overtime = hms.overtime


def _sdl_window() -> object | None:
    try:
        from pygame._sdl2.video import Window
    except ImportError:
        logger.warning("pygame._sdl2 is unavailable; opacity and always-on-top are not applied")
        return None
    try:
        return Window.from_display_module()
    except WINDOW_ERRORS as exc:
        logger.warning("Cannot access the SDL window: %s", exc)
        return None


def apply_window_flags(config: OverlayConfig) -> None:
    """Apply opacity and always-on-top, degrading to an opaque normal window."""

    wants_opacity = config.opacity < 1.0
    if not wants_opacity and not config.always_on_top:
        return

    window = _sdl_window()
    if window is None:
        return

    if wants_opacity:
        try:
            window.opacity = config.opacity  # type: ignore[attr-defined]
        except WINDOW_ERRORS as exc:
            logger.warning("Window opacity unsupported, rendering opaque: %s", exc)

    if config.always_on_top:
        if hasattr(window, "always_on_top"):
            try:
                window.always_on_top = True  # type: ignore[attr-defined]
            except WINDOW_ERRORS as exc:
                logger.warning("Always-on-top unsupported: %s", exc)
        else:
            logger.warning("This pygame build cannot keep the window on top")


def create_window(config: OverlayConfig) -> pygame.Surface:
    flags = 0
    if not config.decorated:
        flags |= pygame.NOFRAME
    if config.resizable:
        flags |= pygame.RESIZABLE

    pygame.display.set_caption(config.title)
    surface = pygame.display.set_mode(config.window_size, flags)
    apply_window_flags(config)
    return surface


def run(
    config: OverlayConfig | None = None,
    *,
    clock: Clock | None = None,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
) -> int:
    config = config if config is not None else OverlayConfig()
    clock = clock if clock is not None else RealClock()

    pygame.init()
    logger.info(
        "Starting overlay: duration=%.0fs size=%dx%d opacity=%.2f background=%s",
        config.duration_s,
        config.window_size[0],
        config.window_size[1],
        config.opacity,
        config.style.background.value,
    )

    try:
        surface = create_window(config)
        timer = Timer(config.duration_s, clock=clock)
        app = OverlayApp(timer=timer, view=TimerView(timer, config.style), canvas=PygameCanvas(surface))

        pygame.time.set_timer(REFRESH_EVENT, config.refresh_ms)
        frame = 0
        while app.running:
            event = pygame.event.wait()
            if event.type != REFRESH_EVENT:
                app.handle_event(event)
                continue

            if event_injector is not None:
                event_injector(frame)

            app.render()
            pygame.display.flip()

            frame += 1
            if max_frames is not None and frame >= max_frames:
                break
    finally:
        pygame.time.set_timer(REFRESH_EVENT, 0)
        pygame.quit()

    return 0
