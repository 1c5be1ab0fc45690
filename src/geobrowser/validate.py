"""Offline validation of a region data directory."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .config import AppConfig
from .data import DataCache
from .errors import MalformedInputError, NotFoundError
from .gdp import load_gdp_data
from .geometry import filter_region
from .models import Continent, Country, NavigationLevel, World


@dataclass(slots=True)
class ValidationReport:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    infos: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)

    def add_info(self, msg: str) -> None:
        self.infos.append(msg)


class Validator:
    """Loads every list and outline reachable from the world level."""

    def __init__(self, cfg: AppConfig, cache: DataCache | None = None) -> None:
        self.cfg = cfg
        self.cache = cache or DataCache(cfg.paths.data_dir)

    def run(self) -> ValidationReport:
        report = ValidationReport()
        if not self.cfg.paths.data_dir.is_dir():
            report.add_error(f"Data directory not found: {self.cfg.paths.data_dir}")
            return report

        continents = self._validate_names(report, World())
        self._validate_geometry(report, World())
        country_count = 0
        missing_info: list[str] = []
        for continent in continents:
            countries = self._validate_names(report, Continent(continent))
            self._validate_geometry(report, Continent(continent))
            for country in countries:
                country_count += 1
                self._validate_geometry(report, Country(country))
                if self.cache.load_region_metadata(country) is None:
                    missing_info.append(country)

        report.add_info(f"Continents: {len(continents)}, countries: {country_count}")
        if missing_info:
            report.add_warning(
                f"No country_info entry for {len(missing_info)} countries: "
                f"{_format_code_list(sorted(missing_info))}"
            )
        self._validate_gdp(report)
        return report

    def _validate_names(self, report: ValidationReport, level: NavigationLevel) -> tuple[str, ...]:
        try:
            names = self.cache.load_region_names(level)
        except (NotFoundError, MalformedInputError) as exc:
            report.add_error(str(exc))
            return ()
        if not names:
            report.add_warning(f"Empty name list for {level.tag} '{level.key}'")
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            report.add_warning(
                f"Duplicate names for {level.tag} '{level.key}': {_format_code_list(duplicates)}"
            )
        return names

    def _validate_geometry(self, report: ValidationReport, level: NavigationLevel) -> None:
        try:
            geometry = self.cache.load_region_geometry(level)
        except (NotFoundError, MalformedInputError) as exc:
            report.add_error(str(exc))
            return
        filtered = filter_region(geometry, self.cfg.render.minor_polygon_threshold)
        if filtered.is_empty:
            report.add_warning(f"No polygons to draw for {level.tag} '{level.key}'")

    def _validate_gdp(self, report: ValidationReport) -> None:
        path = self.cfg.paths.gdp_csv
        if not path.exists():
            report.add_warning(f"GDP file not found, charts disabled: {path}")
            return
        gdp = load_gdp_data(path)
        if gdp is None or not gdp.names:
            report.add_warning(f"GDP file has no usable rows: {path}")
        else:
            report.add_info(f"GDP series: {len(gdp.names)}")


def _format_code_list(values: list[str], limit: int = 12) -> str:
    if len(values) <= limit:
        return ", ".join(values)
    shown = ", ".join(values[:limit])
    return f"{shown}, ... (+{len(values) - limit} more)"


def format_report_lines(report: ValidationReport) -> Iterable[str]:
    if report.infos:
        for info in report.infos:
            yield f"[INFO] {info}"
    if report.warnings:
        for warning in report.warnings:
            yield f"[WARN] {warning}"
    if report.errors:
        for error in report.errors:
            yield f"[ERROR] {error}"
    if report.ok:
        yield "[OK] Validation completed with no errors."
