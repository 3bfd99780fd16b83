"""
Litterfall cleaning

Row-local transforms applied after loading: rename raw columns to short
internal names, derive the per-observation total mass, null implausible
totals and compose the collection timestamp. No transform here looks
across rows, so each can be tested one row at a time.
"""

from __future__ import annotations

import warnings
from typing import Any

import numpy as np
import pandas as pd

from litterfall_npp.constants import COLUMN_MAP, MASS_CATEGORIES, TOTAL_CEILING_G
from litterfall_npp.errors import ImplausibleValueWarning
from litterfall_npp.utils.datetime import compose_collection_date


def rename_columns(df: pd.DataFrame) -> pd.DataFrame:
    return df.rename(columns=COLUMN_MAP)


def compute_total(df: pd.DataFrame) -> pd.DataFrame:
    """
    Add `total` as the row sum of all mass categories.

    Missing categories count as zero. When the computed sum is exactly zero
    and `total_recorded` is present, the recorded total is used instead.
    """
    out = df.copy()
    cats = [c for c in MASS_CATEGORIES if c in out.columns]
    total = out[cats].sum(axis=1, min_count=0).astype("float64")
    if "total_recorded" in out.columns:
        recorded = pd.to_numeric(out["total_recorded"], errors="coerce")
        use_recorded = (total == 0) & recorded.notna()
        total = total.where(~use_recorded, recorded)
    out["total"] = total
    return out


def filter_plausible_totals(df: pd.DataFrame, ceiling: float = TOTAL_CEILING_G) -> pd.DataFrame:
    """
    Set `total` to NaN where it falls outside [0, ceiling] grams.

    Both bounds are inclusive. Rows are retained.
    """
    out = df.copy()
    total = out["total"]
    implausible = total.notna() & ((total < 0) | (total > ceiling))
    n_bad = int(implausible.sum())
    if n_bad:
        warnings.warn(
            f"{n_bad} total mass value(s) outside [0, {ceiling:g}] g set to missing",
            ImplausibleValueWarning,
            stacklevel=2,
        )
    out["total"] = total.mask(implausible, np.nan)
    return out


def add_collection_date(df: pd.DataFrame, timezone: str = "UTC") -> pd.DataFrame:
    return compose_collection_date(df, timezone=timezone)


def keep_plots(df: pd.DataFrame, allowed: list[str]) -> pd.DataFrame:
    """
    Filter rows to plots present in `allowed`.
    Returns a copy; an empty `allowed` list keeps every plot.
    """
    if not allowed or "plot" not in df.columns:
        return df
    out = df[df["plot"].astype("string").isin(allowed)].copy()
    if isinstance(out["plot"].dtype, pd.CategoricalDtype):
        out["plot"] = out["plot"].cat.remove_unused_categories()
    return out


def clean_litterfall(df: pd.DataFrame, settings: dict[str, Any] | None = None, timezone: str = "UTC") -> pd.DataFrame:
    """
    Run the cleaning steps in order on a loaded litterfall table.

    Parameters
    - df: output of `load_litterfall`
    - settings: from `get_cleaning_settings` (keys `total_ceiling_g`, `plots_include`)
    - timezone: zone field dates are recorded in
    """
    settings = settings or {}
    out = rename_columns(df)
    out = keep_plots(out, settings.get("plots_include", []))
    out = compute_total(out)
    out = filter_plausible_totals(out, settings.get("total_ceiling_g", TOTAL_CEILING_G))
    out = add_collection_date(out, timezone=timezone)
    return out
