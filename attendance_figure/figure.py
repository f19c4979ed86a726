"""Composing the panels on one page and rasterising it to TIFF."""

from __future__ import annotations

import os
from contextlib import contextmanager
from functools import partial
from pathlib import Path

# Keep matplotlib caches in a writable location.
os.environ.setdefault("MPLCONFIGDIR", "/tmp/matplotlib")
os.environ.setdefault("XDG_CACHE_HOME", "/tmp")

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns

from attendance_figure.data import (
    TRENDLESS_STATE,
    city_groups,
    fit_linear_trends,
    fit_log_trend,
    recode_byob,
    summarize_attendance,
)
from attendance_figure.errors import LayoutError
from attendance_figure.log import get_logger
from attendance_figure.panels import (
    add_panel_label,
    draw_byob_bars,
    draw_population_boxes,
    draw_size_scatter,
)

logger = get_logger(__name__)

WIDTH_IN = 6.0
HEIGHT_IN = 4.5
DPI = 600
DEFAULT_OUTPUT = "attendance_figure.tiff"
TIFF_COMPRESSION = "tiff_lzw"

THEME_STYLE = "ticks"
THEME_CONTEXT = "paper"
FONT_SCALE = 0.7

# Two stacked panels on the left, one tall panel over the right two columns.
PANEL_LAYOUT = [
    [1, 3, 3],
    [2, 3, 3],
]
PANEL_LABELS = {1: "A", 2: "B", 3: "C"}


def check_layout(layout, panel_ids):
    """Raise LayoutError unless ``layout`` places exactly ``panel_ids``, each as a rectangle."""
    rows = [list(row) for row in layout]
    if not rows or not rows[0] or any(len(r) != len(rows[0]) for r in rows):
        raise LayoutError("layout must be a non-empty rectangular matrix")

    cells = {}
    for i, row in enumerate(rows):
        for j, pid in enumerate(row):
            cells.setdefault(pid, []).append((i, j))

    declared = set(cells)
    supplied = set(panel_ids)
    if declared - supplied:
        raise LayoutError(f"layout references panel(s) with nothing to draw: {sorted(map(repr, declared - supplied))}")
    if supplied - declared:
        raise LayoutError(f"panel(s) missing from layout: {sorted(map(repr, supplied - declared))}")

    for pid, pos in cells.items():
        rs = [p[0] for p in pos]
        cs = [p[1] for p in pos]
        if len(pos) != (max(rs) - min(rs) + 1) * (max(cs) - min(cs) + 1):
            raise LayoutError(f"panel {pid!r} does not occupy a rectangular block of cells")


@contextmanager
def figure_canvas(width_in=WIDTH_IN, height_in=HEIGHT_IN, dpi=DPI):
    """Yield a themed figure of the given size; the figure is closed on every exit path."""
    with sns.axes_style(THEME_STYLE), sns.plotting_context(THEME_CONTEXT, font_scale=FONT_SCALE):
        fig = plt.figure(figsize=(width_in, height_in), dpi=dpi, layout="constrained")
        try:
            yield fig
        finally:
            plt.close(fig)


def compose_figure(fig, drawers, layout=PANEL_LAYOUT, labels=PANEL_LABELS):
    """Lay out one Axes per panel id and call each drawer on its Axes.

    ``drawers`` maps panel id to a callable taking the Axes. Returns the
    ``{panel id: Axes}`` mapping.
    """
    check_layout(layout, drawers)
    axes = fig.subplot_mosaic([list(row) for row in layout])
    for pid, draw in drawers.items():
        draw(axes[pid])
        label = (labels or {}).get(pid)
        if label:
            add_panel_label(axes[pid], label)
    return axes


def export_tiff(fig, path, width_in=WIDTH_IN, height_in=HEIGHT_IN, dpi=DPI):
    """Write ``fig`` as a TIFF of exactly ``width_in`` x ``height_in`` inches at ``dpi``.

    Size, resolution and bounding box are pinned so rcParams set by the
    caller (figure.dpi, savefig.dpi, savefig.bbox) cannot change them.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.set_size_inches(width_in, height_in)
    with matplotlib.rc_context({"savefig.bbox": "standard", "savefig.dpi": dpi}):
        fig.savefig(
            path,
            format="tiff",
            dpi=dpi,
            facecolor="white",
            pil_kwargs={"compression": TIFF_COMPRESSION, "dpi": (dpi, dpi)},
        )
    logger.info(f"wrote {path} ({width_in} x {height_in} in at {dpi} dpi)")
    return path


def prepare_panels(df, exclude_state=TRENDLESS_STATE):
    """Everything the panels read, computed once from the raw table."""
    df = recode_byob(df)
    return {
        "data": df,
        "summary": summarize_attendance(df),
        "trends": fit_linear_trends(df, exclude=exclude_state),
        "groups": city_groups(df),
        "log_fit": fit_log_trend(df),
    }


def make_drawers(prepared):
    return {
        1: partial(draw_byob_bars, summary=prepared["summary"]),
        2: partial(draw_size_scatter, df=prepared["data"], trends=prepared["trends"]),
        3: partial(draw_population_boxes, groups=prepared["groups"], log_fit=prepared["log_fit"]),
    }


def render_attendance_figure(df, output=DEFAULT_OUTPUT, exclude_state=TRENDLESS_STATE,
                             layout=PANEL_LAYOUT, labels=PANEL_LABELS):
    """Recode, summarise, draw, compose and export; returns the prepared panel inputs.

    The returned dict also carries the written ``output`` path.
    """
    prepared = prepare_panels(df, exclude_state=exclude_state)
    with figure_canvas() as fig:
        compose_figure(fig, make_drawers(prepared), layout=layout, labels=labels)
        prepared["output"] = export_tiff(fig, output)
    return prepared
