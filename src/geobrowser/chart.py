"""GDP history line chart drawn on a braille canvas."""

from __future__ import annotations

import math
from typing import Mapping

from .canvas import DOTS_X, DOTS_Y, BrailleCanvas

Y_LABEL_WIDTH = 8
X_TICKS = 6
_DEFAULT_YEARS = (1960, 2024)


def chart_points(series: Mapping[int, float]) -> list[tuple[int, float]]:
    return sorted((int(year), float(value)) for year, value in series.items())


def y_axis_labels(y_max: float) -> list[str]:
    """Labels for 0, 1/4, 1/2, 3/4 and full scale, in billions."""
    return ["0"] + [f"{y_max * step / 4 / 1e9:.1f}B" for step in (1, 2, 3, 4)]


def x_axis_years(min_year: int, max_year: int) -> list[int]:
    span = max_year - min_year
    if span <= 0:
        return [min_year]
    step = math.ceil(span / X_TICKS)
    return [min_year + step * i for i in range(X_TICKS + 1) if min_year + step * i <= max_year]


def draw_gdp_chart(series: Mapping[int, float], cols: int, rows: int) -> BrailleCanvas:
    canvas = BrailleCanvas(cols, rows)
    if cols < Y_LABEL_WIDTH + 4 or rows < 4:
        canvas.put_text(0, 0, "Window too small")
        return canvas

    points = chart_points(series)
    min_year, max_year = (points[0][0], points[-1][0]) if points else _DEFAULT_YEARS
    max_value = max((value for _, value in points), default=0.0)
    y_max = math.ceil(max_value * 1.1) or 1.0

    # Plot area in dots: right of the y labels, above the x label row.
    x0 = Y_LABEL_WIDTH * DOTS_X
    x1 = cols * DOTS_X - 1
    y0 = 0
    y1 = (rows - 1) * DOTS_Y - 1
    year_span = max(max_year - min_year, 1)

    def to_dot(year: float, value: float) -> tuple[float, float]:
        x = x0 + (year - min_year) / year_span * (x1 - x0)
        y = y1 - max(value, 0.0) / y_max * (y1 - y0)
        return (x, y)

    canvas.draw_line(x0, y0, x0, y1)
    canvas.draw_line(x0, y1, x1, y1)
    for (year_a, value_a), (year_b, value_b) in zip(points, points[1:]):
        ax, ay = to_dot(year_a, value_a)
        bx, by = to_dot(year_b, value_b)
        canvas.draw_line(ax, ay, bx, by, highlighted=True)
    if len(points) == 1:
        px, py = to_dot(*points[0])
        canvas.draw_line(px, py, px, py, highlighted=True)

    labels = y_axis_labels(y_max)
    plot_rows = rows - 1
    for idx, label in enumerate(labels):
        row = round((plot_rows - 1) * (1 - idx / (len(labels) - 1)))
        canvas.put_text(0, row, label.rjust(Y_LABEL_WIDTH - 1)[: Y_LABEL_WIDTH - 1])

    for year in x_axis_years(min_year, max_year):
        x, _ = to_dot(year, 0.0)
        col = min(int(x) // DOTS_X, cols - 4)
        canvas.put_text(col, rows - 1, str(year))
    return canvas
