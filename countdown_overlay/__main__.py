from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    """Ensure the repository root (parent of this package) is on ``sys.path``.

    Lets ``python countdown_overlay/__main__.py`` resolve the package the same
    way ``python -m countdown_overlay`` does.
    """
    pkg_dir = Path(__file__).resolve().parent
    repo_root = pkg_dir.parent
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


try:
    # Works when executed as a module: python -m countdown_overlay
    from .app import run  # type: ignore[attr-defined]
    from .config import OverlayConfig, parse_background, parse_duration, parse_font_sizing, parse_size
except ImportError:
    # Works when executed as a script
    _ensure_repo_root_on_path()
    from countdown_overlay.app import run  # type: ignore[attr-defined]
    from countdown_overlay.config import (
        OverlayConfig,
        parse_background,
        parse_duration,
        parse_font_sizing,
        parse_size,
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _argtype(parse):
    """Adapt a ``ValueError``-raising parser to argparse's error reporting."""

    def convert(raw: str):
        try:
            return parse(raw)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from None

    convert.__name__ = parse.__name__
    return convert


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="countdown-overlay",
        description="Borderless always-on-top countdown. Press R to restart.",
    )
    parser.add_argument("--duration", type=_argtype(parse_duration), help="e.g. 900, 15m, 1h30m, 20:00, 1:02:03")
    parser.add_argument("--size", type=_argtype(parse_size), help="window size as WIDTHxHEIGHT")
    parser.add_argument("--opacity", type=float, help="window opacity in [0, 1]")
    parser.add_argument("--decorated", action="store_true", default=None, help="show the window frame")
    parser.add_argument(
        "--no-always-on-top",
        dest="always_on_top",
        action="store_false",
        default=None,
        help="let other windows cover the overlay",
    )
    parser.add_argument("--resizable", action="store_true", default=None)
    parser.add_argument("--background", type=_argtype(parse_background), help="solid or trail")
    parser.add_argument("--font-sizing", type=_argtype(parse_font_sizing), help="fixed or proportional")
    parser.add_argument("--font-size", type=float, help="point size for fixed sizing")
    parser.add_argument("--font", dest="font_name", help="system font name or path to a font file")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return parser


def config_from_args(args: argparse.Namespace, base: OverlayConfig) -> OverlayConfig:
    """Overlay explicitly given command-line options on ``base``."""

    changes = {}
    if args.duration is not None:
        changes["duration_s"] = args.duration
    if args.size is not None:
        changes["window_size"] = args.size
    if args.opacity is not None:
        changes["opacity"] = args.opacity
    if args.decorated is not None:
        changes["decorated"] = args.decorated
    if args.always_on_top is not None:
        changes["always_on_top"] = args.always_on_top
    if args.resizable is not None:
        changes["resizable"] = args.resizable
    if args.log_level is not None:
        changes["log_level"] = args.log_level.upper()

    style_changes = {}
    if args.background is not None:
        style_changes["background"] = args.background
    if args.font_sizing is not None:
        style_changes["font_sizing"] = args.font_sizing
    if args.font_size is not None:
        style_changes["font_size"] = args.font_size
    if args.font_name is not None:
        style_changes["font_name"] = args.font_name
    if style_changes:
        changes["style"] = replace(base.style, **style_changes)

    return replace(base, **changes)


def main(argv: list[str] | None = None) -> int:
    """Entry point for running the overlay from the command line."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = config_from_args(args, OverlayConfig.from_env())
    except ValueError as exc:
        parser.error(str(exc))

    configure_logging(config.log_level)
    return run(config)


if __name__ == "__main__":
    raise SystemExit(main())
