"""PNG export of a region frame via matplotlib."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .config import RenderConfig
from .models import Frame, RegionGeometry
from .render import build_frame

_LOGGER = logging.getLogger("geobrowser.export")


def export_region_png(
    geometry: RegionGeometry,
    output_path: Path,
    cfg: RenderConfig,
    *,
    highlight: str | None = None,
) -> Path:
    """Render ``geometry`` at the configured pixel size and save it as PNG."""
    frame = build_frame(
        geometry,
        float(cfg.export_width_px),
        float(cfg.export_height_px),
        threshold=cfg.minor_polygon_threshold,
        min_extent=cfg.min_extent_deg,
        highlight=highlight,
    )
    return write_frame_png(frame, output_path, cfg)


def write_frame_png(frame: Frame, output_path: Path, cfg: RenderConfig) -> Path:
    plt = _require_matplotlib()
    dpi = cfg.export_dpi
    fig = plt.figure(figsize=(frame.width / dpi, frame.height / dpi), dpi=dpi)
    try:
        ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
        ax.set_xlim(0.0, frame.width)
        # Surface y grows downward.
        ax.set_ylim(frame.height, 0.0)
        ax.set_aspect("equal")
        ax.set_axis_off()
        for segment in frame.segments:
            color = cfg.highlight_color if segment.highlighted else cfg.outline_color
            ax.plot(
                [segment.x1, segment.x2],
                [segment.y1, segment.y2],
                color=color,
                linewidth=1.6 if segment.highlighted else 0.8,
                zorder=2 if segment.highlighted else 1,
                solid_capstyle="round",
            )
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=dpi, facecolor="white")
    finally:
        plt.close(fig)
    _LOGGER.info("Wrote %d segment(s) to %s", len(frame.segments), output_path)
    return output_path


def _require_matplotlib() -> Any:
    try:
        import matplotlib

        matplotlib.use("Agg", force=False)
        import matplotlib.pyplot as plt
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError("matplotlib is required for PNG export") from exc
    return plt
