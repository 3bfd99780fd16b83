"""
Monthly aggregation of litterfall carbon flux.

Two grouping levels over the converted interval table:
- per trap and month: mean / sd / se per category and mean interval length
- per plot and month: mean / sd / se across trap means, plus dry-mass flux

By default the standard error divisor is a dataset-wide distinct count
(years for the trap table, (plot, trap) pairs for the plot table) rather than a
group-local count. `se_denominator: group` switches to the per-group count
of non-missing values.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from litterfall_npp.constants import CARBON_FRACTION, FLUX_CATEGORIES
from litterfall_npp.npp.units import carbon_flux_to_dry_mass

TRAP_MONTH_KEY = ["plot", "trap", "year", "month"]
PLOT_MONTH_KEY = ["plot", "year", "month"]
PLOT_YEAR_KEY = ["plot", "year"]


def standard_error(sd: pd.Series, n) -> pd.Series:
    """Sample standard deviation divided by sqrt(n); n may be a scalar or a Series."""
    n = pd.to_numeric(n, errors="coerce") if isinstance(n, pd.Series) else n
    return sd / np.sqrt(n)


def _categories(df: pd.DataFrame, suffix: str) -> list[str]:
    return [c for c in FLUX_CATEGORIES if f"{c}{suffix}" in df.columns]


def aggregate_trap_monthly(flux: pd.DataFrame, settings: dict[str, Any] | None = None) -> pd.DataFrame:
    """
    Aggregate interval flux per (plot, trap, year, month).

    Output columns: key columns, `<cat>_mean`, `<cat>_sd`, `<cat>_se` for
    each flux category, `interval_mean` (negated mean elapsed days) and
    `n_intervals`.
    """
    policy = (settings or {}).get("se_denominator", "dataset")
    cats = _categories(flux, "_flux")
    if flux.empty:
        cols = TRAP_MONTH_KEY + [f"{c}_{s}" for c in cats for s in ("mean", "sd", "se")]
        return pd.DataFrame(columns=cols + ["interval_mean", "n_intervals"])

    g = flux.groupby(TRAP_MONTH_KEY, observed=True, sort=True)
    named = {}
    for c in cats:
        named[f"{c}_mean"] = (f"{c}_flux", "mean")
        named[f"{c}_sd"] = (f"{c}_flux", "std")
        named[f"{c}_n"] = (f"{c}_flux", "count")
    named["interval_mean"] = ("elapsed_days", "mean")
    named["n_intervals"] = ("elapsed_days", "size")
    out = g.agg(**named).reset_index()

    # mean interval is reported negated
    out["interval_mean"] = -out["interval_mean"]

    n_years = flux["year"].nunique()
    for c in cats:
        n = out[f"{c}_n"] if policy == "group" else n_years
        out[f"{c}_se"] = standard_error(out[f"{c}_sd"], n)
    out = out.drop(columns=[f"{c}_n" for c in cats])

    ordered = TRAP_MONTH_KEY + [f"{c}_{s}" for c in cats for s in ("mean", "sd", "se")]
    return out[ordered + ["interval_mean", "n_intervals"]]


def aggregate_plot_monthly(
    trap_monthly: pd.DataFrame,
    settings: dict[str, Any] | None = None,
    carbon_fraction: float = CARBON_FRACTION,
) -> pd.DataFrame:
    """
    Aggregate trap-level monthly means per (plot, year, month).

    Output columns: key columns, `<cat>_mean`, `<cat>_sd`, `<cat>_se`,
    `n_traps` and `total_dry_g_m2_month` (total flux re-expressed as dry
    mass per m2 per month).
    """
    policy = (settings or {}).get("se_denominator", "dataset")
    cats = _categories(trap_monthly, "_mean")
    if trap_monthly.empty:
        cols = PLOT_MONTH_KEY + [f"{c}_{s}" for c in cats for s in ("mean", "sd", "se")]
        return pd.DataFrame(columns=cols + ["n_traps", "total_dry_g_m2_month"])

    g = trap_monthly.groupby(PLOT_MONTH_KEY, observed=True, sort=True)
    named = {}
    for c in cats:
        named[f"{c}_mean"] = (f"{c}_mean", "mean")
        named[f"{c}_sd"] = (f"{c}_mean", "std")
        named[f"{c}_n"] = (f"{c}_mean", "count")
    named["n_traps"] = ("trap", "nunique")
    out = g.agg(**named).reset_index()

    n_traps = trap_monthly[["plot", "trap"]].drop_duplicates().shape[0]
    for c in cats:
        n = out[f"{c}_n"] if policy == "group" else n_traps
        out[f"{c}_se"] = standard_error(out[f"{c}_sd"], n)
    out = out.drop(columns=[f"{c}_n" for c in cats])

    ordered = PLOT_MONTH_KEY + [f"{c}_{s}" for c in cats for s in ("mean", "sd", "se")]
    out = out[ordered + ["n_traps"]].copy()
    if "total_mean" in out.columns:
        out["total_dry_g_m2_month"] = carbon_flux_to_dry_mass(out["total_mean"], carbon_fraction)
    return out


def aggregate_plot_annual(plot_monthly: pd.DataFrame) -> pd.DataFrame:
    """
    Annual total litterfall flux per (plot, year) in Mg C / ha / yr.

    The annual value is the mean monthly flux scaled to 12 months; its
    standard error propagates the monthly standard errors and is missing
    when any contributing month has no standard error (e.g. single-trap plots).
    """
    cols = PLOT_YEAR_KEY + ["n_months", "total_flux_mean_month", "total_flux_annual", "total_flux_annual_se"]
    if plot_monthly.empty or "total_mean" not in plot_monthly.columns:
        return pd.DataFrame(columns=cols)

    valid = plot_monthly[plot_monthly["total_mean"].notna()].copy()
    valid["_se_sq"] = valid["total_se"] ** 2
    g = valid.groupby(PLOT_YEAR_KEY, observed=True, sort=True)
    out = g.agg(
        n_months=("total_mean", "count"),
        total_flux_mean_month=("total_mean", "mean"),
        _se_sq_sum=("_se_sq", "sum"),
        _se_n=("_se_sq", "count"),
    ).reset_index()
    out["total_flux_annual"] = out["total_flux_mean_month"] * 12
    out["total_flux_annual_se"] = np.sqrt(out["_se_sq_sum"]) / out["n_months"] * 12
    out["total_flux_annual_se"] = out["total_flux_annual_se"].where(out["_se_n"] == out["n_months"])
    return out[cols]
