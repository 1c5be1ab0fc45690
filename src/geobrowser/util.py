"""Utility helpers for logging, key slugging and name matching."""

from __future__ import annotations

import logging
import unicodedata
from pathlib import Path


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(log_file: Path | None = None, verbose: bool = False, console: bool = True) -> None:
    """Configure root logging to console and optionally a file.

    The full-screen browser passes ``console=False``; anything written to the
    terminal while the UI owns it would corrupt the display.
    """
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler())
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    if not handlers:
        handlers.append(logging.NullHandler())
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def region_slug(key: str) -> str:
    """File-name form of a region key: ``"Congo (Kinshasa)"`` -> ``"congo_kinshasa"``."""
    return key.strip().lower().replace(" ", "_").replace("(", "").replace(")", "")


def names_match(left: str, right: str) -> bool:
    return normalize_name(left) == normalize_name(right)


def normalize_name(value: str) -> str:
    folded = unicodedata.normalize("NFKD", value)
    without_marks = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return "".join(ch for ch in without_marks.casefold() if ch.isalnum())
