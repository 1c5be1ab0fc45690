"""Region data directory access: name lists, outlines and country metadata."""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Any, Mapping, assert_never

from .errors import MalformedInputError, NotFoundError
from .geometry import load_region_geometry
from .models import Continent, Country, CountryInfo, NavigationLevel, RegionGeometry, World
from .util import region_slug

_LOGGER = logging.getLogger("geobrowser.data")

COUNTRY_INFO_FILE = "country_info.json"
FUN_FACTS_FILE = "fun_facts.json"


def _file_prefix(level: NavigationLevel) -> str:
    match level:
        case World():
            return "continent"
        case Continent() | Country():
            return "country"
        case _:
            assert_never(level)


class DataCache:
    """Loads region files from one data directory.

    File names follow ``<prefix>_<slug>.json`` for child lists and
    ``<prefix>_<slug>.geojson`` for outlines, where the prefix is
    ``continent`` at world level and ``country`` below it.
    """

    def __init__(self, base: Path, *, rng: random.Random | None = None) -> None:
        self.base = base
        self._rng = rng or random.Random()
        self._lists: dict[tuple[str, str], tuple[str, ...]] = {}
        self._country_info = _load_country_info(base / COUNTRY_INFO_FILE)
        self._fun_facts = _load_fun_facts(base / FUN_FACTS_FILE)

    def names_path(self, level: NavigationLevel) -> Path:
        return self.base / f"{_file_prefix(level)}_{region_slug(level.key)}.json"

    def geometry_path(self, level: NavigationLevel) -> Path:
        return self.base / f"{_file_prefix(level)}_{region_slug(level.key)}.geojson"

    def load_region_names(self, level: NavigationLevel) -> tuple[str, ...]:
        """Selectable child names for ``level``.

        A country has no children; its list is the country itself.

        Raises:
            NotFoundError: If the list file is missing.
            MalformedInputError: If the file is not a JSON list of names.
        """
        if isinstance(level, Country):
            return (level.name,)
        cache_key = (level.tag, level.key)
        cached = self._lists.get(cache_key)
        if cached is not None:
            return cached

        path = self.names_path(level)
        if not path.exists():
            raise NotFoundError(level.key, f"Name list for '{level.key}' not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except ValueError as exc:
            raise MalformedInputError(f"Invalid JSON in {path}: {exc}") from exc
        except OSError as exc:
            raise NotFoundError(level.key, f"Cannot read name list {path}: {exc}") from exc
        names = _parse_name_list(raw, path)
        self._lists[cache_key] = names
        return names

    def load_region_geometry(self, level: NavigationLevel) -> RegionGeometry:
        return load_region_geometry(self.geometry_path(level), level.key)

    def load_region_metadata(self, name: str) -> CountryInfo | None:
        return self._country_info.get(region_slug(name))

    def random_fun_fact(self, name: str) -> str | None:
        facts = self._fun_facts.get(region_slug(name))
        if not facts:
            return None
        return self._rng.choice(facts)


def _parse_name_list(raw: Any, path: Path) -> tuple[str, ...]:
    if not isinstance(raw, list):
        raise MalformedInputError(f"Expected list of names in {path}")
    names: list[str] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, str) or not item.strip():
            raise MalformedInputError(f"Expected non-empty string at index {idx} in {path}")
        names.append(item.strip())
    return tuple(names)


def _read_optional_json(path: Path) -> Any | None:
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, ValueError) as exc:
        _LOGGER.warning("Ignoring unreadable %s: %s", path, exc)
        return None


def _load_country_info(path: Path) -> dict[str, CountryInfo]:
    raw = _read_optional_json(path)
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        _LOGGER.warning("Ignoring %s: expected a mapping of country records", path)
        return {}
    out: dict[str, CountryInfo] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not isinstance(value, Mapping):
            _LOGGER.warning("Skipping malformed country record %r in %s", key, path)
            continue
        try:
            out[region_slug(key)] = CountryInfo.from_mapping(value)
        except ValueError as exc:
            _LOGGER.warning("Skipping country record '%s' in %s: %s", key, path, exc)
    return out


def _load_fun_facts(path: Path) -> dict[str, tuple[str, ...]]:
    raw = _read_optional_json(path)
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        _LOGGER.warning("Ignoring %s: expected a mapping of fact lists", path)
        return {}
    out: dict[str, tuple[str, ...]] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not isinstance(value, list):
            _LOGGER.warning("Skipping malformed fun fact entry %r in %s", key, path)
            continue
        facts = tuple(item.strip() for item in value if isinstance(item, str) and item.strip())
        if facts:
            out[region_slug(key)] = facts
    return out
