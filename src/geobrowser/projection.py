"""Bounding boxes and fit-to-surface projection."""

from __future__ import annotations

from shapely.geometry import MultiPolygon

from .errors import EmptyGeometryError
from .models import BoundingBox, Projection

DEFAULT_MIN_EXTENT_DEG = 1e-6


def compute_bounds(geometry: MultiPolygon) -> BoundingBox:
    """Bounding box over exterior and hole coordinates of every polygon."""
    if geometry.is_empty or len(geometry.geoms) == 0:
        raise EmptyGeometryError("Cannot compute bounds of an empty MultiPolygon")
    min_lon, min_lat, max_lon, max_lat = geometry.bounds
    return BoundingBox(
        min_lon=float(min_lon),
        min_lat=float(min_lat),
        max_lon=float(max_lon),
        max_lat=float(max_lat),
    )


def fit_projection(
    bounds: BoundingBox,
    width: float,
    height: float,
    *,
    min_extent: float = DEFAULT_MIN_EXTENT_DEG,
) -> Projection:
    """Uniform scale that fits ``bounds`` into a ``width`` x ``height`` surface.

    The drawing is centred on the axis that has spare room. Zero extents (a
    single point, a perfectly horizontal or vertical outline) are widened to
    ``min_extent`` so the scale stays finite.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Surface size must be positive, got {width}x{height}")
    if min_extent <= 0:
        raise ValueError("min_extent must be > 0")

    span_lon = max(bounds.width, min_extent)
    span_lat = max(bounds.height, min_extent)
    scale = min(width / span_lon, height / span_lat)

    # Centre the real extent, not the widened one.
    offset_x = (width - bounds.width * scale) / 2.0
    offset_y = (height - bounds.height * scale) / 2.0
    return Projection(bounds=bounds, scale=scale, offset_x=offset_x, offset_y=offset_y)


def project_point(projection: Projection, lon: float, lat: float) -> tuple[float, float]:
    x = projection.offset_x + (lon - projection.bounds.min_lon) * projection.scale
    y = projection.offset_y + (projection.bounds.max_lat - lat) * projection.scale
    return (x, y)
