"""CLI entrypoint for the geobrowser terminal atlas."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from .canvas import BrailleCanvas
from .config import AppConfig, load_config
from .data import DataCache
from .errors import LoadFailure, MalformedInputError, NotFoundError
from .export import export_region_png
from .models import Continent, Country, NavigationLevel, World
from .render import build_frame
from .util import setup_logging
from .validate import Validator, format_report_lines

LOGGER = logging.getLogger("geobrowser.cli")

_LEVELS = ("world", "continent", "country")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geobrowser",
        description="Browse world, continent and country outlines in the terminal.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--config", default="config.yaml", help="Path to YAML config.")
        p.add_argument("--verbose", action="store_true", help="Enable debug logs.")

    browse_p = subparsers.add_parser("browse", help="Start the interactive browser.")
    add_common(browse_p)

    render_p = subparsers.add_parser(
        "render",
        help="Draw one region as braille text, or export it to PNG.",
    )
    add_common(render_p)
    render_p.add_argument("--level", choices=_LEVELS, default="world", help="Region level.")
    render_p.add_argument(
        "--region",
        default=None,
        help="Continent or country name (ignored at world level).",
    )
    render_p.add_argument("--highlight", default=None, help="Feature or continent to highlight.")
    render_p.add_argument("--cols", type=int, default=100, help="Text width in characters.")
    render_p.add_argument("--rows", type=int, default=40, help="Text height in lines.")
    render_p.add_argument("--png", default=None, help="Write a PNG to this path instead of text.")

    validate_p = subparsers.add_parser("validate", help="Check every list and outline file.")
    add_common(validate_p)

    return parser


def _load_and_setup(args: argparse.Namespace, *, console: bool) -> AppConfig:
    cfg = load_config(args.config)
    setup_logging(cfg.paths.log_file, verbose=args.verbose, console=console)
    return cfg


def _resolve_level(level: str, region: str | None) -> NavigationLevel:
    if level == "world":
        return World()
    if not region:
        raise ValueError(f"--region is required for level '{level}'")
    if level == "continent":
        return Continent(region)
    return Country(region)


def _run_browse(cfg: AppConfig) -> int:
    from .tui import run_browser

    try:
        return run_browser(cfg)
    except LoadFailure as exc:
        LOGGER.error("Cannot start browser: %s", exc.message)
        print(f"Cannot start browser: {exc.message}", file=sys.stderr)
        return 1


def _run_render(cfg: AppConfig, args: argparse.Namespace) -> int:
    level = _resolve_level(str(args.level), args.region)
    cache = DataCache(cfg.paths.data_dir)
    try:
        geometry = cache.load_region_geometry(level)
    except (NotFoundError, MalformedInputError) as exc:
        LOGGER.error("%s", exc)
        return 1

    if args.png:
        export_region_png(geometry, Path(args.png), cfg.render, highlight=args.highlight)
        return 0

    canvas = BrailleCanvas(int(args.cols), int(args.rows))
    width, height = canvas.surface_size
    frame = build_frame(
        geometry,
        width,
        height,
        threshold=cfg.render.minor_polygon_threshold,
        min_extent=cfg.render.min_extent_deg,
        highlight=args.highlight,
    )
    canvas.draw_frame(frame)
    LOGGER.info(
        "Rendered %s '%s': %d feature(s), %d segment(s)",
        level.tag,
        level.key,
        frame.feature_count,
        len(frame.segments),
    )
    print(canvas.to_text())
    return 0


def _run_validate(cfg: AppConfig) -> int:
    report = Validator(cfg).run()
    for line in format_report_lines(report):
        LOGGER.info(line)
    return 0 if report.ok else 1


def _dispatch(args: argparse.Namespace) -> int:
    command = str(args.command)
    if command == "browse":
        return _run_browse(_load_and_setup(args, console=False))
    if command == "render":
        return _run_render(_load_and_setup(args, console=True), args)
    if command == "validate":
        return _run_validate(_load_and_setup(args, console=True))
    raise ValueError(f"Unknown command: {command}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return _dispatch(args)


if __name__ == "__main__":
    raise SystemExit(main())
