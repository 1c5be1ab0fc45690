"""Region outline loading and minor-polygon filtering.

Responsibilities:
- Parse GeoJSON outline files into ``RegionGeometry`` (one shapely
  ``MultiPolygon`` per named feature)
- Validate ring structure (vertex count, closure, coordinate types)
- Drop minor pieces of a multi-part region relative to its largest piece
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping, Sequence

from shapely.geometry import MultiPolygon, Polygon

from .errors import MalformedInputError, NotFoundError
from .models import RegionFeature, RegionGeometry

_LOGGER = logging.getLogger("geobrowser.geometry")

MIN_RING_POINTS = 3

_NAME_PROPERTIES = ("ADMIN", "NAME", "NAME_EN", "name")
_CONTINENT_PROPERTIES = ("CONTINENT", "continent")
_NON_AREAL_TYPES = frozenset({"Point", "MultiPoint", "LineString", "MultiLineString"})


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_region_geometry(path: Path, key: str) -> RegionGeometry:
    """Load the outlines stored at ``path`` for region ``key``.

    Raises:
        NotFoundError: If the file does not exist.
        MalformedInputError: If the file is not valid GeoJSON or contains an
            invalid ring.
    """
    if not path.exists():
        raise NotFoundError(key, f"Outline file for '{key}' not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError both land here.
        raise MalformedInputError(f"Invalid JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise NotFoundError(key, f"Cannot read outline file {path}: {exc}") from exc

    geometry = parse_region_geometry(raw, key)
    _LOGGER.debug(
        "Loaded %d feature(s), %d polygon(s) for '%s' from %s",
        geometry.feature_count,
        geometry.polygon_count,
        key,
        path,
    )
    return geometry


def parse_region_geometry(raw: Any, key: str) -> RegionGeometry:
    """Build ``RegionGeometry`` from a decoded GeoJSON document."""
    if not isinstance(raw, Mapping):
        raise MalformedInputError(f"Expected GeoJSON object for '{key}', got {type(raw).__name__}")
    doc_type = raw.get("type")

    if doc_type == "FeatureCollection":
        features_raw = raw.get("features")
        if not isinstance(features_raw, list):
            raise MalformedInputError(f"Expected list for 'features' in '{key}'")
    elif doc_type == "Feature":
        features_raw = [raw]
    else:
        features_raw = [{"type": "Feature", "properties": {"name": key}, "geometry": raw}]

    features: list[RegionFeature] = []
    for idx, item in enumerate(features_raw):
        feature = _parse_feature(item, f"{key}[{idx}]")
        if feature is not None:
            features.append(feature)
    return RegionGeometry(key=key, features=tuple(features))


def _parse_feature(raw: Any, label: str) -> RegionFeature | None:
    if not isinstance(raw, Mapping) or raw.get("type") != "Feature":
        raise MalformedInputError(f"Expected GeoJSON Feature at {label}")
    props = raw.get("properties") or {}
    if not isinstance(props, Mapping):
        raise MalformedInputError(f"Expected mapping for 'properties' at {label}")

    name = _first_property(props, _NAME_PROPERTIES) or ""
    continent = _first_property(props, _CONTINENT_PROPERTIES)
    polygons = _parse_geometry(raw.get("geometry"), name or label)
    if not polygons:
        return None
    return RegionFeature(name=name, continent=continent, geometry=MultiPolygon(polygons))


def _first_property(props: Mapping[str, Any], candidates: Sequence[str]) -> str | None:
    for candidate in candidates:
        value = props.get(candidate)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _parse_geometry(raw: Any, label: str) -> list[Polygon]:
    if raw is None:
        return []
    if not isinstance(raw, Mapping):
        raise MalformedInputError(f"Expected geometry object in '{label}'")
    geom_type = raw.get("type")

    if geom_type == "Polygon":
        return [_parse_polygon(raw.get("coordinates"), label)]
    if geom_type == "MultiPolygon":
        coords = raw.get("coordinates")
        if not isinstance(coords, list):
            raise MalformedInputError(f"Expected list of polygons in '{label}'")
        return [_parse_polygon(item, label) for item in coords]
    if geom_type == "GeometryCollection":
        parts = raw.get("geometries")
        if not isinstance(parts, list):
            raise MalformedInputError(f"Expected list for 'geometries' in '{label}'")
        out: list[Polygon] = []
        for part in parts:
            out.extend(_parse_geometry(part, label))
        return out
    if geom_type in _NON_AREAL_TYPES:
        _LOGGER.debug("Skipping %s geometry in '%s'", geom_type, label)
        return []
    raise MalformedInputError(f"Unsupported geometry type {geom_type!r} in '{label}'")


def _parse_polygon(raw: Any, label: str) -> Polygon:
    if not isinstance(raw, list) or not raw:
        raise MalformedInputError(f"Polygon without rings in '{label}'")
    rings = [validate_ring(coords_to_tuples(ring, label), label) for ring in raw]
    return Polygon(rings[0], rings[1:])


def coords_to_tuples(raw_coords: Any, label: str) -> list[tuple[float, float]]:
    """Convert GeoJSON positions to (lon, lat) tuples, dropping altitude.

    Raises:
        MalformedInputError: If the ring or any position is malformed.
    """
    if not isinstance(raw_coords, list):
        raise MalformedInputError(
            f"Expected list of positions in '{label}', got {type(raw_coords).__name__}"
        )
    coords: list[tuple[float, float]] = []
    for idx, position in enumerate(raw_coords):
        if not isinstance(position, (list, tuple)) or len(position) < 2:
            raise MalformedInputError(
                f"Malformed position at index {idx} in '{label}': {position!r}"
            )
        lon, lat = position[0], position[1]
        if isinstance(lon, bool) or isinstance(lat, bool):
            raise MalformedInputError(f"Malformed position at index {idx} in '{label}': {position!r}")
        if not isinstance(lon, (int, float)) or not isinstance(lat, (int, float)):
            raise MalformedInputError(
                f"Non-numeric position at index {idx} in '{label}': {position!r}"
            )
        try:
            x, y = float(lon), float(lat)
        except OverflowError as exc:
            raise MalformedInputError(
                f"Position out of range at index {idx} in '{label}'"
            ) from exc
        if not (math.isfinite(x) and math.isfinite(y)):
            raise MalformedInputError(f"Non-finite position at index {idx} in '{label}'")
        coords.append((x, y))
    return coords


def validate_ring(coords: list[tuple[float, float]], label: str) -> list[tuple[float, float]]:
    """Check a ring has at least 3 distinct points and return it closed.

    Open rings are closed by repeating the first point, so closed and open
    input normalise to the same ring.
    """
    if len(coords) < MIN_RING_POINTS:
        raise MalformedInputError(
            f"Ring has only {len(coords)} point(s), need at least {MIN_RING_POINTS} in '{label}'"
        )
    if len(set(coords)) < MIN_RING_POINTS:
        raise MalformedInputError(f"Ring has fewer than 3 distinct points in '{label}'")
    if coords[0] != coords[-1]:
        coords = [*coords, coords[0]]
    return coords


# ---------------------------------------------------------------------------
# Minor polygon filtering
# ---------------------------------------------------------------------------


def polygon_area(polygon: Polygon) -> float:
    """Shoelace area of the exterior minus the area of its holes."""
    return abs(float(polygon.area))


def filter_minor_polygons(geometry: MultiPolygon, threshold: float) -> MultiPolygon:
    """Keep polygons whose area is at least ``threshold`` times the largest one."""
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be between 0 and 1, got {threshold}")
    polygons = list(geometry.geoms)
    if len(polygons) <= 1:
        return geometry
    areas = [polygon_area(polygon) for polygon in polygons]
    cutoff = max(areas) * threshold
    kept = [polygon for polygon, area in zip(polygons, areas) if area >= cutoff]
    return MultiPolygon(kept)


def filter_region(geometry: RegionGeometry, threshold: float) -> RegionGeometry:
    """Apply ``filter_minor_polygons`` to every feature independently."""
    features = tuple(
        replace(feature, geometry=filter_minor_polygons(feature.geometry, threshold))
        for feature in geometry.features
    )
    filtered = replace(geometry, features=features)
    dropped = geometry.polygon_count - filtered.polygon_count
    if dropped:
        _LOGGER.debug("Dropped %d minor polygon(s) from '%s'", dropped, geometry.key)
    return filtered
