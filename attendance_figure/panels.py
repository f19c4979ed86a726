"""The three panels of the attendance figure, each drawn into a given Axes."""

from __future__ import annotations

import numpy as np
import seaborn as sns
from matplotlib.ticker import FuncFormatter

from attendance_figure.data import ATTENDANCE, BYOB, BYOB_LABELS, BYOB_LEVELS, SIZE, STATE
from attendance_figure.log import get_logger

logger = get_logger(__name__)

COLOR_PALETTE = [
    "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
    "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf",
]
STATE_COLORS = {"MA": "#4e79a7", "NH": "#f28e2b", "VT": "#59a14f"}
BYOB_COLORS = {0: "#bab0ab", 1: "#e15759"}

# Hand-placed call-outs (x, y, text) in box panel data coordinates.
OUTLIER_NOTES = [
    (22000, 96, "Rutland outlier"),
    (97000, 170, "Nashua outlier"),
    (158000, 31, "Worcester outlier"),
]

NOTE_FONTSIZE = 5
LABEL_FONTSIZE = 9


def state_palette(states):
    palette = {}
    spare = iter(c for c in COLOR_PALETTE if c not in STATE_COLORS.values())
    for state in states:
        palette[state] = STATE_COLORS.get(state) or next(spare, "#444444")
    return palette


def add_panel_label(ax, label, xy=(0.02, 0.98)):
    return ax.text(xy[0], xy[1], label, transform=ax.transAxes,
                   ha="left", va="top", fontsize=LABEL_FONTSIZE, fontweight="bold")


def draw_byob_bars(ax, summary, state_col=STATE, byob_col=BYOB):
    """Grouped bars of mean attendance per state, one bar per BYOB level, with SE bars."""
    summary = summary.assign(**{state_col: summary[state_col].astype(str)})
    states = sorted(summary[state_col].unique())
    x = np.arange(len(states))
    width = 0.8 / len(BYOB_LEVELS)

    for i, level in enumerate(BYOB_LEVELS):
        sub = summary[summary[byob_col] == level].set_index(state_col).reindex(states)
        x_draw = x + (i - (len(BYOB_LEVELS) - 1) / 2) * width
        ax.bar(x_draw, sub["mean"], width=width,
               color=BYOB_COLORS[level], edgecolor="black", linewidth=0.4,
               label=BYOB_LABELS[level])
        ax.errorbar(x_draw, sub["mean"], yerr=sub["se"],
                    fmt="none", ecolor="black", elinewidth=0.6, capsize=2, capthick=0.6)

    top = float((summary["mean"] + summary["se"].fillna(0)).max())
    ax.set_ylim(0, top * 1.25)
    ax.set_xticks(x)
    ax.set_xticklabels(states)
    ax.set_xlabel("State")
    ax.set_ylabel("Mean attendance")
    ax.legend(title="BYOB", frameon=False, loc="upper right")
    sns.despine(ax=ax)


def draw_size_scatter(ax, df, trends, x=SIZE, y=ATTENDANCE, hue=STATE):
    """Size vs attendance, coloured by state, with one line per fitted state.

    Each line spans only the x range its state was fitted on.
    """
    states = sorted(df[hue].astype(str).unique())
    palette = state_palette(states)
    sns.scatterplot(data=df.assign(**{hue: df[hue].astype(str)}), x=x, y=y,
                    hue=hue, hue_order=states, palette=palette,
                    s=8, linewidth=0, ax=ax)

    for state, (slope, intercept) in trends.items():
        sub = df[df[hue].astype(str) == state]
        xs = np.linspace(sub[x].min(), sub[x].max(), 50)
        ax.plot(xs, slope * xs + intercept, color=palette.get(state, "black"),
                linewidth=1, gid=f"trend-{state}")

    ax.set_xlabel("Restaurant size")
    ax.set_ylabel("Attendance")
    sns.move_legend(ax, "lower right", title="State", frameon=False)
    sns.despine(ax=ax)


def box_width(positions, fraction=0.6, cap=0.04):
    """Box width in data units that keeps neighbouring boxes apart."""
    pos = np.unique(np.asarray(positions, dtype=float))
    if pos.size < 2:
        return cap * abs(pos[0]) if pos.size and pos[0] else 1.0
    span = pos[-1] - pos[0]
    return float(min(fraction * np.diff(pos).min(), cap * span))


def draw_population_boxes(ax, groups, log_fit, notes=OUTLIER_NOTES):
    """One box per city at the city's population, the log trend and the call-outs.

    Returns the dict produced by ``Axes.boxplot``.
    """
    positions = [g["position"] for g in groups]
    width = box_width(positions)
    palette = state_palette(sorted({g["state"] for g in groups}))

    boxes = ax.boxplot(
        [g["values"] for g in groups],
        positions=positions,
        widths=width,
        manage_ticks=False,
        patch_artist=True,
        boxprops=dict(linewidth=0.5),
        whiskerprops=dict(linewidth=0.5),
        capprops=dict(linewidth=0.5),
        medianprops=dict(color="black", linewidth=0.8),
        flierprops=dict(marker="o", markersize=2, markeredgewidth=0.4),
    )
    for patch, group in zip(boxes["boxes"], groups):
        patch.set_facecolor(palette[group["state"]])
        patch.set_alpha(0.8)

    slope, intercept = log_fit
    xs = np.linspace(min(positions), max(positions), 200)
    ax.plot(xs, intercept + slope * np.log(xs), color="black",
            linestyle="--", linewidth=0.8, gid="log-trend")

    for x, y, text in notes:
        ax.text(x, y, text, fontsize=NOTE_FONTSIZE, ha="left", va="center")

    ax.set_xlim(min(positions) - 2 * width, max(positions) + 2 * width)
    ax.xaxis.set_major_formatter(FuncFormatter(lambda v, _: f"{v / 1000:.0f}k"))
    ax.set_xlabel("City population")
    ax.set_ylabel("Attendance")
    sns.despine(ax=ax)
    logger.debug(f"drew {len(groups)} city boxes, width={width:.0f}")
    return boxes
