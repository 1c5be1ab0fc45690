"""Domain models shared across the loader, renderer and navigation modules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from shapely.geometry import MultiPolygon, Polygon


WORLD_KEY = "world"


def _require_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


def _require_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Expected numeric value for '{field_name}'")
    return float(value)


# ---------------------------------------------------------------------------
# Navigation levels
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class World:
    """Root of the hierarchy; its children are continents."""

    @property
    def key(self) -> str:
        return WORLD_KEY

    @property
    def tag(self) -> str:
        return "world"


@dataclass(frozen=True, slots=True)
class Continent:
    name: str

    @property
    def key(self) -> str:
        return self.name

    @property
    def tag(self) -> str:
        return "continent"


@dataclass(frozen=True, slots=True)
class Country:
    """Leaf level; there is nothing to descend into."""

    name: str

    @property
    def key(self) -> str:
        return self.name

    @property
    def tag(self) -> str:
        return "country"


NavigationLevel = World | Continent | Country


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Snapshot pushed before a descend; geometry is reloaded on ascend."""

    level: NavigationLevel
    selected: int
    names: tuple[str, ...]


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RegionFeature:
    """One named outline inside a region file."""

    name: str
    continent: str | None
    geometry: MultiPolygon

    @property
    def polygons(self) -> tuple[Polygon, ...]:
        return tuple(self.geometry.geoms)


@dataclass(frozen=True, slots=True)
class RegionGeometry:
    key: str
    features: tuple[RegionFeature, ...] = ()

    @property
    def feature_count(self) -> int:
        return len(self.features)

    @property
    def polygon_count(self) -> int:
        return sum(len(feature.geometry.geoms) for feature in self.features)

    @property
    def multipolygon(self) -> MultiPolygon:
        """All feature polygons as a single MultiPolygon, in input order."""
        parts: list[Polygon] = []
        for feature in self.features:
            parts.extend(feature.geometry.geoms)
        return MultiPolygon(parts)

    @property
    def is_empty(self) -> bool:
        return self.polygon_count == 0


@dataclass(frozen=True, slots=True)
class BoundingBox:
    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @property
    def width(self) -> float:
        return self.max_lon - self.min_lon

    @property
    def height(self) -> float:
        return self.max_lat - self.min_lat


@dataclass(frozen=True, slots=True)
class Projection:
    """Uniform-scale mapping from lon/lat to drawing-surface coordinates.

    Surface x grows to the right and y grows downward, so the northern edge of
    the bounding box lands on the top of the surface.
    """

    bounds: BoundingBox
    scale: float
    offset_x: float
    offset_y: float

    @property
    def scale_x(self) -> float:
        return self.scale

    @property
    def scale_y(self) -> float:
        return self.scale


@dataclass(frozen=True, slots=True)
class Segment:
    x1: float
    y1: float
    x2: float
    y2: float
    highlighted: bool = False


@dataclass(frozen=True, slots=True)
class Frame:
    """Drawable output for one tick: ordered segments in surface space."""

    width: float
    height: float
    segments: tuple[Segment, ...] = ()
    feature_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.segments


# ---------------------------------------------------------------------------
# Application state
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AppState:
    """Single root of navigation state; transitions return new instances."""

    level: NavigationLevel
    selected: int
    names: tuple[str, ...]
    geometry: RegionGeometry
    history: tuple[HistoryEntry, ...] = ()
    chart_active: bool = False

    @property
    def depth(self) -> int:
        return len(self.history)

    @property
    def selected_name(self) -> str | None:
        if not self.names:
            return None
        return self.names[self.selected]


@dataclass(frozen=True, slots=True)
class NavigationContext:
    """What list and panel widgets need to know about the current level."""

    level: str
    selected_name: str | None
    selected: int
    count: int


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CountryInfo:
    """Country record loaded from `country_info.json`."""

    name: str
    capital: str
    area: float
    population: int
    currency: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CountryInfo:
        population = _require_number(data.get("population"), "population")
        if population < 0:
            raise ValueError("population must be >= 0")
        area = _require_number(data.get("area"), "area")
        if area < 0:
            raise ValueError("area must be >= 0")
        return cls(
            name=_require_str(data.get("name"), "name"),
            capital=_require_str(data.get("capital"), "capital"),
            area=area,
            population=int(population),
            currency=_require_str(data.get("currency"), "currency"),
        )

    def describe(self) -> str:
        return (
            f"{self.name}\n"
            f"Capital: {self.capital}\n"
            f"Area: {self.area:,.0f} km²\n"
            f"Population: {self.population:,}\n"
            f"Currency: {self.currency}"
        )
