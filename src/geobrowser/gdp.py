"""GDP time-series loading from the World Bank wide CSV layout."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

_LOGGER = logging.getLogger("geobrowser.gdp")

# World Bank exports start with four lines of metadata before the header.
PREAMBLE_LINES = 4
_NAME_COLUMN = 0
_CODE_COLUMN = 1


@dataclass(slots=True)
class GdpData:
    """Per-country ``year -> value`` series with forgiving name lookup."""

    series_by_code: dict[str, dict[int, float]] = field(default_factory=dict)
    codes_by_name: dict[str, str] = field(default_factory=dict)
    names: list[str] = field(default_factory=list)

    @classmethod
    def from_csv(cls, path: Path, *, preamble_lines: int = PREAMBLE_LINES) -> GdpData:
        if not path.exists():
            raise FileNotFoundError(f"GDP file not found: {path}")
        with path.open("r", encoding="utf-8-sig", newline="") as fh:
            for _ in range(preamble_lines):
                fh.readline()
            data = cls.from_rows(csv.reader(fh))
        _LOGGER.info("Loaded GDP data for %d countries from %s", len(data.names), path)
        return data

    @classmethod
    def from_rows(cls, rows: Iterable[list[str]]) -> GdpData:
        """Build from CSV rows; the first row must be the column header."""
        data = cls()
        iterator = iter(rows)
        header = next(iterator, None)
        if header is None:
            return data
        year_columns = _year_columns(header)
        for row in iterator:
            if len(row) <= _CODE_COLUMN:
                continue
            name = row[_NAME_COLUMN].strip()
            code = row[_CODE_COLUMN].strip()
            if not name or not code:
                continue
            values: dict[int, float] = {}
            for idx, year in year_columns:
                if idx >= len(row):
                    break
                cell = row[idx].strip()
                if not cell:
                    continue
                try:
                    values[year] = float(cell)
                except ValueError:
                    _LOGGER.debug("Skipping non-numeric GDP cell %r for %s %d", cell, code, year)
            data.add_country(name, code, values)
        return data

    def add_country(self, name: str, code: str, values: Mapping[int, float]) -> None:
        self.series_by_code[code] = dict(values)
        self.codes_by_name[name] = code
        self.codes_by_name.setdefault(name.casefold(), code)
        self.names.append(name)

    def _resolve_code(self, country_name: str) -> str | None:
        code = self.codes_by_name.get(country_name)
        if code is None:
            code = self.codes_by_name.get(country_name.casefold())
        if code is None:
            for available in self.names:
                if available in country_name or country_name in available:
                    code = self.codes_by_name.get(available)
                    if code is not None:
                        break
        return code

    def series(self, country_name: str) -> dict[int, float] | None:
        code = self._resolve_code(country_name)
        if code is None:
            return None
        values = self.series_by_code.get(code)
        return dict(values) if values is not None else None

    def latest(self, country_name: str) -> tuple[int, float] | None:
        """Most recent ``(year, value)`` with data, if any."""
        values = self.series(country_name)
        if not values:
            return None
        year = max(values)
        return (year, values[year])


def _year_columns(header: list[str]) -> list[tuple[int, int]]:
    columns: list[tuple[int, int]] = []
    for idx, label in enumerate(header):
        label = label.strip()
        if label.isdigit():
            columns.append((idx, int(label)))
    return columns


def load_gdp_data(path: Path) -> GdpData | None:
    """Load GDP data, or ``None`` when the file is missing or unreadable."""
    try:
        return GdpData.from_csv(path)
    except (OSError, csv.Error, UnicodeDecodeError) as exc:
        _LOGGER.warning("GDP data unavailable (%s): %s", path, exc)
        return None


def format_gdp_value(value: float) -> str:
    if value >= 1e12:
        return f"{value / 1e12:.2f} tn USD"
    if value >= 1e9:
        return f"{value / 1e9:.2f} bn USD"
    if value >= 1e6:
        return f"{value / 1e6:.2f} mn USD"
    return f"{value:.2f} USD"
