"""
Unit conversion from daily trap rates to monthly carbon flux.

g / trap / day -> Mg C / ha / month via a fixed constant chain:
trap area to hectare, grams to megagrams, dry mass to carbon, day to a
nominal 30-day month.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from litterfall_npp.constants import (
    CARBON_FRACTION,
    DAYS_PER_MONTH,
    FLUX_CATEGORIES,
    G_TO_MG,
    M2_PER_HA,
    TRAP_AREA_M2,
)


def monthly_flux_factor(
    trap_area_m2: float = TRAP_AREA_M2,
    carbon_fraction: float = CARBON_FRACTION,
    days_per_month: float = DAYS_PER_MONTH,
) -> float:
    # evaluation order is fixed so the default equals 10000/0.25 * 0.000001 * 0.49 * 30
    return M2_PER_HA / trap_area_m2 * G_TO_MG * carbon_fraction * days_per_month


MONTHLY_FLUX_FACTOR = monthly_flux_factor()


def carbon_flux_to_dry_mass(flux: pd.Series, carbon_fraction: float = CARBON_FRACTION) -> pd.Series:
    """Mg C / ha / month -> g dry mass / m2 / month."""
    return flux / carbon_fraction / G_TO_MG / M2_PER_HA


def to_monthly_flux(intervals: pd.DataFrame, settings: dict[str, Any] | None = None) -> pd.DataFrame:
    """
    Add `<category>_flux` (Mg C / ha / month) for each flux category.

    Parameters
    - intervals: output of `normalize_intervals` with `<category>_rate` columns
    - settings: from `get_conversion_settings`; defaults reproduce the standard chain

    Infinite rates from zero-day intervals become NaN in every
    `<category>_rate` column, including categories without a flux column.
    """
    settings = settings or {}
    factor = monthly_flux_factor(
        settings.get("trap_area_m2", TRAP_AREA_M2),
        settings.get("carbon_fraction", CARBON_FRACTION),
        settings.get("days_per_month", DAYS_PER_MONTH),
    )
    out = intervals.copy()
    for rate_col in [c for c in out.columns if c.endswith("_rate")]:
        out[rate_col] = pd.to_numeric(out[rate_col], errors="coerce").replace([np.inf, -np.inf], np.nan)
    for c in FLUX_CATEGORIES:
        if f"{c}_rate" in out.columns:
            out[f"{c}_flux"] = out[f"{c}_rate"] * factor
    return out
