"""Loading, recoding and summarising the restaurant attendance table."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

from attendance_figure.errors import DataSchemaError
from attendance_figure.log import get_logger

logger = get_logger(__name__)

SAMPLE_DATA = Path(__file__).resolve().parent / "sample_data" / "restaurants.csv"

ID = "restaurant_id"
STATE = "state"
CITY = "city"
POPULATION = "city_population"
SIZE = "restaurant_size"
ATTENDANCE = "attendance"
BYOB = "BYOB"

REQUIRED_COLUMNS = [ID, STATE, CITY, POPULATION, SIZE, ATTENDANCE, BYOB]

# Raw levels stay in the data; labels are only used when drawing.
BYOB_LEVELS = [0, 1]
BYOB_LABELS = {0: "No", 1: "Yes"}

# Its size/attendance cloud has no visible trend.
TRENDLESS_STATE = "VT"


def validate_columns(df, required=REQUIRED_COLUMNS):
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise DataSchemaError(f"restaurant table is missing column(s): {', '.join(missing)}")


def load_restaurants(source=None):
    """Read the restaurant table from a CSV path or URL.

    With no source the bundled copy of the dataset is used. URLs are fetched
    once by pandas, with no retry or caching.
    """
    if source is None:
        source = SAMPLE_DATA
    logger.info(f"loading restaurants from {source}")
    df = pd.read_csv(source)
    validate_columns(df)
    logger.debug(f"loaded {len(df)} rows, dtypes={dict(df.dtypes.astype(str))}")
    return df


def recode_byob(df, column=BYOB):
    """Return a copy of ``df`` with ``column`` as a two-level 0/1 categorical.

    The column arrives as a plain number, which grouping and colour mapping
    treat as continuous. Already recoded columns are returned unchanged.
    """
    out = df.copy()
    col = out[column]
    if isinstance(col.dtype, pd.CategoricalDtype):
        cats = col.cat.categories
        if cats.dtype.kind in "iu" and list(cats) == BYOB_LEVELS:
            return out
        col = col.astype(object)

    values = pd.to_numeric(col, errors="coerce")
    bad = values.isna() | ~values.isin(BYOB_LEVELS)
    if bad.any():
        examples = sorted(set(map(str, col[bad].tolist())))[:5]
        raise DataSchemaError(f"{column} must hold only 0/1, found {examples}")
    out[column] = pd.Categorical(values.astype(int), categories=BYOB_LEVELS)
    return out


def summarize_attendance(df, by=(STATE, BYOB), measure=ATTENDANCE):
    """Mean and standard error of ``measure`` per combination of ``by``.

    Returns one row per observed group with columns ``mean``, ``se`` (sample
    standard deviation over sqrt(n)) and ``n``.
    """
    by = list(by)
    validate_columns(df, by + [measure])
    if BYOB in by and not isinstance(df[BYOB].dtype, pd.CategoricalDtype):
        raise DataSchemaError(f"{BYOB} must be recoded to a category before grouping (see recode_byob)")

    grouped = df.groupby(by, observed=True, sort=True)[measure]
    summary = grouped.agg(mean="mean", se="sem", n="size").reset_index()
    logger.debug(f"summary over {by}: {len(summary)} groups")
    return summary


def fit_linear_trends(df, x=SIZE, y=ATTENDANCE, group=STATE, exclude=(TRENDLESS_STATE,)):
    """Least squares line of ``y`` on ``x`` for every group not in ``exclude``.

    Returns ``{group: (slope, intercept)}``.
    """
    if isinstance(exclude, str):
        exclude = (exclude,)
    exclude = {str(e) for e in exclude or ()}
    present = set(df[group].astype(str).unique())
    unknown = exclude - present
    if unknown:
        raise DataSchemaError(f"cannot exclude unknown {group}(s): {sorted(unknown)}")

    trends = {}
    for name, sub in df.groupby(group, observed=True, sort=True):
        name = str(name)
        if name in exclude:
            continue
        slope, intercept = np.polyfit(sub[x].to_numpy(dtype=float), sub[y].to_numpy(dtype=float), 1)
        trends[name] = (float(slope), float(intercept))
    logger.info(f"linear trends fitted for {sorted(trends)} (excluded {sorted(exclude)})")
    return trends


def fit_log_trend(df, x=POPULATION, y=ATTENDANCE):
    """Fit ``y = intercept + slope * ln(x)`` over all rows; returns (slope, intercept)."""
    xs = df[x].to_numpy(dtype=float)
    if (xs <= 0).any():
        raise DataSchemaError(f"{x} must be positive for a logarithmic trend")
    slope, intercept = np.polyfit(np.log(xs), df[y].to_numpy(dtype=float), 1)
    return float(slope), float(intercept)


def city_groups(df, position=POPULATION, value=ATTENDANCE):
    """One group per distinct (state, city), sorted by ``position``.

    Each group is a dict with ``state``, ``city``, ``position`` and ``values``.
    The population is shared by every restaurant of a city, so it becomes the
    group's position on the x axis rather than a per-point coordinate.
    """
    groups = []
    for (state, city), sub in df.groupby([STATE, CITY], observed=True, sort=True):
        positions = sub[position].unique()
        if len(positions) != 1:
            raise DataSchemaError(
                f"{city} ({state}) has {len(positions)} different {position} values; expected one"
            )
        groups.append({
            "state": str(state),
            "city": str(city),
            "position": float(positions[0]),
            "values": sub[value].to_numpy(dtype=float),
        })
    groups.sort(key=lambda g: g["position"])
    return groups
