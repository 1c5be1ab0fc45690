"""Tests for GDP series loading and lookup."""

from __future__ import annotations

from pathlib import Path

import pytest

from geobrowser.gdp import GdpData, format_gdp_value, load_gdp_data


@pytest.fixture()
def gdp(data_dir: Path) -> GdpData:
    return GdpData.from_csv(data_dir / "dataPKB" / "pkb.csv")


class TestGdpData:
    def test_preamble_is_skipped(self, gdp: GdpData) -> None:
        assert gdp.names == ["Kenya", "Egypt, Arab Rep.", "Nigeria"]

    def test_series(self, gdp: GdpData) -> None:
        assert gdp.series("Kenya") == {
            2019: 100e9,
            2020: 101e9,
            2021: 110e9,
            2022: 113.4e9,
        }

    def test_latest_skips_empty_cells(self, gdp: GdpData) -> None:
        assert gdp.latest("Kenya") == (2022, 113.4e9)
        assert gdp.latest("Egypt, Arab Rep.") == (2020, 365e9)

    def test_lookup_is_forgiving(self, gdp: GdpData) -> None:
        assert gdp.latest("kenya") == (2022, 113.4e9)
        assert gdp.latest("Egypt") == (2020, 365e9)

    def test_country_without_values(self, gdp: GdpData) -> None:
        assert gdp.series("Nigeria") == {}
        assert gdp.latest("Nigeria") is None

    def test_unknown_country(self, gdp: GdpData) -> None:
        assert gdp.series("Atlantis") is None
        assert gdp.latest("Atlantis") is None

    def test_series_is_a_copy(self, gdp: GdpData) -> None:
        series = gdp.series("Kenya")
        assert series is not None
        series.clear()
        assert gdp.latest("Kenya") is not None

    def test_from_rows_without_header(self) -> None:
        assert GdpData.from_rows([]).names == []


class TestLoadGdpData:
    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        assert load_gdp_data(tmp_path / "missing.csv") is None

    def test_loads_file(self, data_dir: Path) -> None:
        data = load_gdp_data(data_dir / "dataPKB" / "pkb.csv")
        assert data is not None
        assert "Kenya" in data.names


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (2.5e12, "2.50 tn USD"),
        (113.4e9, "113.40 bn USD"),
        (7.25e6, "7.25 mn USD"),
        (950.0, "950.00 USD"),
    ],
)
def test_format_gdp_value(value: float, expected: str) -> None:
    assert format_gdp_value(value) == expected
