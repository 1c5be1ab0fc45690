"""Shared pytest fixtures for the geobrowser test suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Synthetic region data
# ---------------------------------------------------------------------------

AFRICA_COUNTRIES = ["Algeria", "Egypt", "Kenya", "Nigeria", "South Africa"]

GDP_CSV = """\
"Data Source","World Development Indicators",

"Last Updated Date","2025-01-28",

"Country Name","Country Code","Indicator Name","Indicator Code","2019","2020","2021","2022",
"Kenya","KEN","GDP (current US$)","NY.GDP.MKTP.CD","100000000000","101000000000","110000000000","113400000000",
"Egypt, Arab Rep.","EGY","GDP (current US$)","NY.GDP.MKTP.CD","303000000000","365000000000","","",
"Nigeria","NGA","GDP (current US$)","NY.GDP.MKTP.CD","","","","",
"""


def square(x: float, y: float, size: float, *, closed: bool = True) -> list[list[float]]:
    ring = [[x, y], [x + size, y], [x + size, y + size], [x, y + size]]
    if closed:
        ring.append([x, y])
    return ring


def polygon_feature(
    name: str,
    rings_per_polygon: list[list[list[list[float]]]],
    *,
    continent: str | None = None,
) -> dict[str, Any]:
    props: dict[str, Any] = {"ADMIN": name}
    if continent is not None:
        props["CONTINENT"] = continent
    return {
        "type": "Feature",
        "properties": props,
        "geometry": {"type": "MultiPolygon", "coordinates": rings_per_polygon},
    }


def collection(*features: dict[str, Any]) -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")


def _country_feature(name: str, idx: int) -> dict[str, Any]:
    x = 10.0 * idx
    polygons = [[square(x, 0.0, 8.0)]]
    if name == "Kenya":
        # Mainland plus a tiny offshore island.
        polygons.append([square(x + 9.0, 0.0, 0.5)])
    return polygon_feature(name, polygons, continent="Africa")


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    """Data directory with Africa fully populated, Europe missing, Asia broken."""
    base = tmp_path / "data"
    _write_json(base / "continent_world.json", ["Europe", "Africa", "Asia"])
    _write_json(
        base / "continent_world.geojson",
        collection(
            polygon_feature("Kenya", [[square(0.0, 0.0, 10.0)]], continent="Africa"),
            polygon_feature("Egypt", [[square(0.0, 12.0, 10.0)]], continent="Africa"),
            polygon_feature("Japan", [[square(40.0, 20.0, 5.0)]], continent="Asia"),
        ),
    )

    _write_json(base / "country_africa.json", AFRICA_COUNTRIES)
    _write_json(
        base / "country_africa.geojson",
        collection(*(_country_feature(name, idx) for idx, name in enumerate(AFRICA_COUNTRIES))),
    )
    for idx, name in enumerate(AFRICA_COUNTRIES):
        slug = name.lower().replace(" ", "_")
        _write_json(base / f"country_{slug}.geojson", collection(_country_feature(name, idx)))

    _write_json(base / "country_asia.json", ["Japan"])
    (base / "country_asia.geojson").write_text("{not json", encoding="utf-8")

    _write_json(
        base / "country_info.json",
        {
            "kenya": {
                "name": "Kenya",
                "capital": "Nairobi",
                "area": 580367,
                "population": 53771296,
                "currency": "Kenyan shilling",
            }
        },
    )
    _write_json(base / "fun_facts.json", {"kenya": ["Kenya straddles the equator."]})

    gdp_path = base / "dataPKB" / "pkb.csv"
    gdp_path.parent.mkdir(parents=True, exist_ok=True)
    gdp_path.write_text(GDP_CSV, encoding="utf-8")
    return base


@pytest.fixture()
def config_path(tmp_path: Path, data_dir: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        "paths:\n"
        "  data_dir: data\n"
        "  gdp_csv: data/dataPKB/pkb.csv\n"
        "  logs_dir: logs\n"
        "render:\n"
        "  minor_polygon_threshold: 0.2\n",
        encoding="utf-8",
    )
    return path
