"""Region frame pipeline: filter, bound, project and emit outline segments."""

from __future__ import annotations

import logging
from typing import Iterator, Sequence

from shapely.geometry import MultiPolygon, Polygon

from .geometry import filter_region
from .models import Frame, Projection, RegionFeature, RegionGeometry, Segment
from .projection import DEFAULT_MIN_EXTENT_DEG, compute_bounds, fit_projection, project_point
from .util import names_match

_LOGGER = logging.getLogger("geobrowser.render")


def iter_segments(
    projection: Projection,
    geometry: MultiPolygon,
    *,
    highlighted: bool = False,
) -> Iterator[Segment]:
    """Yield the closed outline of every ring, exterior first then holes.

    Order follows polygon and ring order of ``geometry`` so output is
    reproducible.
    """
    for polygon in geometry.geoms:
        for ring in _iter_rings(polygon):
            points = [project_point(projection, lon, lat) for lon, lat in ring]
            if len(points) < 2:
                continue
            for (x1, y1), (x2, y2) in zip(points, points[1:]):
                yield Segment(x1, y1, x2, y2, highlighted)
            (x1, y1), (x2, y2) = points[-1], points[0]
            yield Segment(x1, y1, x2, y2, highlighted)


def _iter_rings(polygon: Polygon) -> Iterator[Sequence[tuple[float, float]]]:
    yield _open_ring(polygon.exterior.coords)
    for interior in polygon.interiors:
        yield _open_ring(interior.coords)


def _open_ring(coords: Sequence[Sequence[float]]) -> list[tuple[float, float]]:
    points = [(float(c[0]), float(c[1])) for c in coords]
    if len(points) > 1 and points[0] == points[-1]:
        points.pop()
    return points


def feature_matches(feature: RegionFeature, highlight: str | None) -> bool:
    """True when ``highlight`` names the feature itself or its continent."""
    if not highlight:
        return False
    if feature.name and names_match(feature.name, highlight):
        return True
    return bool(feature.continent) and names_match(feature.continent or "", highlight)


def build_frame(
    geometry: RegionGeometry,
    width: float,
    height: float,
    *,
    threshold: float,
    min_extent: float = DEFAULT_MIN_EXTENT_DEG,
    highlight: str | None = None,
) -> Frame:
    """Run the full pipeline for one region and surface size.

    Highlighted features are emitted after the others so they are painted on
    top. An empty region yields an empty frame without projecting.
    """
    filtered = filter_region(geometry, threshold)
    if filtered.is_empty:
        _LOGGER.debug("Nothing to draw for '%s'", geometry.key)
        return Frame(width=width, height=height, feature_count=filtered.feature_count)

    projection = fit_projection(
        compute_bounds(filtered.multipolygon),
        width,
        height,
        min_extent=min_extent,
    )
    plain = [f for f in filtered.features if not feature_matches(f, highlight)]
    marked = [f for f in filtered.features if feature_matches(f, highlight)]

    segments: list[Segment] = []
    for feature in plain:
        segments.extend(iter_segments(projection, feature.geometry))
    for feature in marked:
        segments.extend(iter_segments(projection, feature.geometry, highlighted=True))
    return Frame(
        width=width,
        height=height,
        segments=tuple(segments),
        feature_count=filtered.feature_count,
    )
