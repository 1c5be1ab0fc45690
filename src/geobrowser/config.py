"""Typed configuration loader for `config.yaml`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, cast

import yaml


def _mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"Expected mapping for '{field_name}'")
    return cast(Mapping[str, Any], value)


def _optional_mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    return _mapping(value, field_name)


def _str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


def _int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Expected integer for '{field_name}'")
    return value


def _float(value: Any, field_name: str) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise ValueError(f"Expected float for '{field_name}'")


def _path_from_cfg(value: Any, field_name: str, root_dir: Path) -> Path:
    raw = _str(value, field_name)
    p = Path(raw)
    return p if p.is_absolute() else root_dir / p


@dataclass(frozen=True, slots=True)
class PathsConfig:
    data_dir: Path
    gdp_csv: Path
    logs_dir: Path

    @property
    def log_file(self) -> Path:
        return self.logs_dir / "geobrowser.log"

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], root_dir: Path) -> PathsConfig:
        data_dir = _path_from_cfg(raw.get("data_dir", "data"), "paths.data_dir", root_dir)
        gdp_raw = raw.get("gdp_csv")
        gdp_csv = (
            data_dir / "dataPKB" / "pkb.csv"
            if gdp_raw is None
            else _path_from_cfg(gdp_raw, "paths.gdp_csv", root_dir)
        )
        return cls(
            data_dir=data_dir,
            gdp_csv=gdp_csv,
            logs_dir=_path_from_cfg(raw.get("logs_dir", "logs"), "paths.logs_dir", root_dir),
        )


@dataclass(frozen=True, slots=True)
class RenderConfig:
    minor_polygon_threshold: float = 0.2
    min_extent_deg: float = 1e-6
    export_width_px: int = 1200
    export_height_px: int = 800
    export_dpi: int = 100
    outline_color: str = "#222222"
    highlight_color: str = "#d62728"

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> RenderConfig:
        defaults = cls()
        threshold = _float(
            raw.get("minor_polygon_threshold", defaults.minor_polygon_threshold),
            "render.minor_polygon_threshold",
        )
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("render.minor_polygon_threshold must be between 0 and 1")
        min_extent = _float(raw.get("min_extent_deg", defaults.min_extent_deg), "render.min_extent_deg")
        if min_extent <= 0:
            raise ValueError("render.min_extent_deg must be > 0")
        width_px = _int(raw.get("export_width_px", defaults.export_width_px), "render.export_width_px")
        height_px = _int(raw.get("export_height_px", defaults.export_height_px), "render.export_height_px")
        dpi = _int(raw.get("export_dpi", defaults.export_dpi), "render.export_dpi")
        if width_px <= 0 or height_px <= 0 or dpi <= 0:
            raise ValueError("render.export_width_px, export_height_px and export_dpi must be > 0")
        return cls(
            minor_polygon_threshold=threshold,
            min_extent_deg=min_extent,
            export_width_px=width_px,
            export_height_px=height_px,
            export_dpi=dpi,
            outline_color=_str(raw.get("outline_color", defaults.outline_color), "render.outline_color"),
            highlight_color=_str(
                raw.get("highlight_color", defaults.highlight_color), "render.highlight_color"
            ),
        )


@dataclass(frozen=True, slots=True)
class UiConfig:
    list_width_pct: int = 20
    map_width_pct: int = 60
    info_width_pct: int = 20

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> UiConfig:
        defaults = cls()
        list_pct = _int(raw.get("list_width_pct", defaults.list_width_pct), "ui.list_width_pct")
        map_pct = _int(raw.get("map_width_pct", defaults.map_width_pct), "ui.map_width_pct")
        info_pct = _int(raw.get("info_width_pct", defaults.info_width_pct), "ui.info_width_pct")
        if min(list_pct, map_pct, info_pct) <= 0:
            raise ValueError("ui column widths must be > 0")
        if list_pct + map_pct + info_pct != 100:
            raise ValueError("ui.list_width_pct + map_width_pct + info_width_pct must equal 100")
        return cls(list_width_pct=list_pct, map_width_pct=map_pct, info_width_pct=info_pct)


@dataclass(frozen=True, slots=True)
class AppConfig:
    source_path: Path
    paths: PathsConfig
    render: RenderConfig
    ui: UiConfig

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], source_path: Path) -> AppConfig:
        root_dir = source_path.parent.resolve()
        return cls(
            source_path=source_path.resolve(),
            paths=PathsConfig.from_mapping(_optional_mapping(raw.get("paths"), "paths"), root_dir),
            render=RenderConfig.from_mapping(_optional_mapping(raw.get("render"), "render")),
            ui=UiConfig.from_mapping(_optional_mapping(raw.get("ui"), "ui")),
        )


def load_config(path: str | Path) -> AppConfig:
    """Load and validate the YAML config file into typed settings."""
    cfg_path = Path(path).resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ValueError("Top-level config must be a YAML mapping")
    return AppConfig.from_mapping(cast(Mapping[str, Any], raw), cfg_path)
