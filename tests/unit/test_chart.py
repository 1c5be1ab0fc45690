"""Tests for the GDP history chart."""

from __future__ import annotations

from geobrowser.chart import chart_points, draw_gdp_chart, x_axis_years, y_axis_labels

KENYA = {2022: 113.4e9, 2019: 100e9, 2021: 110e9, 2020: 101e9}


def test_points_are_sorted_by_year() -> None:
    assert [year for year, _ in chart_points(KENYA)] == [2019, 2020, 2021, 2022]


def test_y_axis_labels() -> None:
    assert y_axis_labels(100e9) == ["0", "25.0B", "50.0B", "75.0B", "100.0B"]


def test_x_axis_years() -> None:
    assert x_axis_years(1960, 2020) == [1960, 1970, 1980, 1990, 2000, 2010, 2020]
    assert x_axis_years(2019, 2022) == [2019, 2020, 2021, 2022]
    assert x_axis_years(2000, 2000) == [2000]


def test_chart_draws_line_and_labels() -> None:
    canvas = draw_gdp_chart(KENYA, 60, 20)
    text = canvas.to_text()
    lines = text.split("\n")
    assert len(lines) == 20
    assert "2019" in lines[-1]
    assert "0" in lines[-2]
    assert any(marked for row in canvas.cells() for _, marked in row)


def test_empty_series_draws_axes_only() -> None:
    canvas = draw_gdp_chart({}, 40, 10)
    assert not any(marked for row in canvas.cells() for _, marked in row)
    assert "1960" in canvas.to_text()


def test_tiny_window() -> None:
    assert draw_gdp_chart(KENYA, 30, 2).to_text().startswith("Window too small")
