from __future__ import annotations

import pytest

from countdown_overlay.__main__ import build_parser, config_from_args
from countdown_overlay.config import OverlayConfig
from countdown_overlay.render import BackgroundStyle, FontSizing


def _config(argv: list[str], base: OverlayConfig | None = None) -> OverlayConfig:
    args = build_parser().parse_args(argv)
    return config_from_args(args, base if base is not None else OverlayConfig())


def test_no_arguments_keeps_base_config() -> None:
    base = OverlayConfig(duration_s=42.0, opacity=0.8)
    assert _config([], base) == base


def test_arguments_override_config() -> None:
    config = _config(
        [
            "--duration",
            "1:02:03",
            "--size",
            "500x200",
            "--opacity",
            "1",
            "--decorated",
            "--no-always-on-top",
            "--background",
            "trail",
            "--font-sizing",
            "proportional",
            "--font-size",
            "48",
            "--log-level",
            "warning",
        ]
    )

    assert config.duration_s == 3723.0
    assert config.window_size == (500, 200)
    assert config.opacity == 1.0
    assert config.decorated is True
    assert config.always_on_top is False
    assert config.log_level == "WARNING"
    assert config.style.background is BackgroundStyle.TRAIL
    assert config.style.font_sizing is FontSizing.PROPORTIONAL
    assert config.style.font_size == 48.0


def test_invalid_duration_is_an_argument_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["--duration", "later"])
    assert excinfo.value.code == 2


def test_out_of_range_opacity_is_rejected() -> None:
    args = build_parser().parse_args(["--opacity", "3"])
    with pytest.raises(ValueError):
        config_from_args(args, OverlayConfig())
