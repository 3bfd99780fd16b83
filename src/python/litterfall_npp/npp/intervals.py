"""
Interval normalization

Collection intervals are irregular (weekly to monthly), so raw masses per
collection are not comparable. Each trap's series is sorted by collection
date and every mass is divided by the days elapsed since the previous
collection of the same trap, giving a daily rate.

The first collection of a trap has no predecessor and yields no rate.
Traps with fewer than two dated observations, and observations whose
date is invalid, are returned as diagnostic records rather than dropped.
"""

from __future__ import annotations

import warnings
from typing import NamedTuple

import pandas as pd

from litterfall_npp.constants import MASS_CATEGORIES, OBSERVATION_KEY, TRAP_KEY
from litterfall_npp.errors import (
    InsufficientHistoryWarning,
    UndatedObservationWarning,
    UndefinedRateWarning,
)

DIAGNOSTIC_COLUMNS = ["plot", "trap", "year", "month", "day", "n_observations", "reason"]
INVALID_DATE = "invalid date"


class TrapKey(NamedTuple):
    plot: str
    trap: int


class ObservationKey(NamedTuple):
    plot: str
    trap: int
    year: int
    month: int
    day: int


class IntervalResult(NamedTuple):
    """Interval records plus diagnostics for traps that could not form one."""

    intervals: pd.DataFrame
    diagnostics: pd.DataFrame


def rate_columns(df: pd.DataFrame) -> list[str]:
    """Mass columns present in `df` that get a daily rate."""
    return [c for c in MASS_CATEGORIES + ["total"] if c in df.columns]


def _diagnostic(key: TrapKey, series: pd.DataFrame, group: pd.DataFrame) -> dict:
    row = series.iloc[0] if len(series) else group.iloc[0]
    return {
        "plot": key.plot,
        "trap": key.trap,
        "year": row["year"],
        "month": row["month"],
        "day": row["day"],
        "n_observations": len(series),
        "reason": "no dated observations" if series.empty else "single observation",
    }


def _undated(key: TrapKey, undated: pd.DataFrame, n_dated: int) -> list[dict]:
    return [
        {
            "plot": key.plot,
            "trap": key.trap,
            "year": row.year,
            "month": row.month,
            "day": row.day,
            "n_observations": n_dated,
            "reason": INVALID_DATE,
        }
        for row in undated[["year", "month", "day"]].itertuples(index=False)
    ]


def _trap_intervals(series: pd.DataFrame, cols: list[str]) -> pd.DataFrame:
    """Interval records for one date-sorted trap series (length >= 2)."""
    elapsed = series["date"].diff() / pd.Timedelta(days=1)
    current = series.iloc[1:]
    rec = current[OBSERVATION_KEY + ["date"]].copy()
    rec["elapsed_days"] = elapsed.iloc[1:].astype("float64")
    for c in cols:
        rec[f"{c}_rate"] = current[c].astype("float64") / rec["elapsed_days"]
    return rec


def normalize_intervals(df: pd.DataFrame) -> IntervalResult:
    """
    Convert per-collection masses into daily rates per trap.

    Parameters
    ----------
    df : pd.DataFrame
        Cleaned observations with `plot`, `trap`, `year`, `month`, `day`,
        `date` (tz-aware) and mass category columns.

    Returns
    -------
    IntervalResult
        `intervals`: one row per consecutive pair of collections, keyed by
        the current observation (plot, trap, year, month, day) and holding
        `elapsed_days` and `<category>_rate` in g / trap / day.
        `diagnostics`: one row per trap with fewer than two dated
        observations and one row per observation with an invalid date
        (reason "invalid date"). Undated rows are excluded from the rates,
        so the following interval spans the gap.

    Zero elapsed days (duplicate timestamps) give infinite or undefined
    rates; these are left for the unit converter to null.
    """
    missing = [c for c in TRAP_KEY + ["year", "month", "day", "date"] if c not in df.columns]
    if missing:
        raise ValueError(f"normalize_intervals: columns {missing} not found")

    cols = rate_columns(df)
    records = []
    diagnostics = []
    for key, group in df.groupby(TRAP_KEY, sort=True, observed=True, dropna=False):
        trap_key = TrapKey(*key)
        dated = group["date"].notna()
        series = group[dated].sort_values("date", kind="mergesort")
        if len(series) < 2:
            diagnostics.append(_diagnostic(trap_key, series, group))
        else:
            records.append(_trap_intervals(series, cols))
        # a trap with no dated rows is already covered by its own record
        if len(series):
            diagnostics.extend(_undated(trap_key, group[~dated], len(series)))

    if records:
        intervals = pd.concat(records).sort_values(TRAP_KEY + ["date"], kind="mergesort")
    else:
        intervals = pd.DataFrame(columns=OBSERVATION_KEY + ["date", "elapsed_days"] + [f"{c}_rate" for c in cols])
    intervals = intervals.reset_index(drop=True)
    diag = pd.DataFrame(diagnostics, columns=DIAGNOSTIC_COLUMNS)

    n_undated = int((diag["reason"] == INVALID_DATE).sum())
    n_short = len(diag) - n_undated
    if n_short:
        warnings.warn(
            f"{n_short} trap series with fewer than 2 observations recorded as diagnostics",
            InsufficientHistoryWarning,
            stacklevel=2,
        )
    if n_undated:
        warnings.warn(
            f"{n_undated} observation(s) with an invalid collection date recorded as diagnostics",
            UndatedObservationWarning,
            stacklevel=2,
        )
    n_zero = int((intervals["elapsed_days"] == 0).sum())
    if n_zero:
        warnings.warn(
            f"{n_zero} interval(s) with zero elapsed days; rates are undefined",
            UndefinedRateWarning,
            stacklevel=2,
        )
    return IntervalResult(intervals, diag)


def index_by_observation(intervals: pd.DataFrame) -> pd.DataFrame:
    """
    Index interval records by their composite observation key.

    Lookups take an `ObservationKey`, e.g.
    ``index_by_observation(res.intervals).loc[ObservationKey("P1", 1, 2020, 1, 15)]``.
    """
    return intervals.set_index(OBSERVATION_KEY).sort_index()
