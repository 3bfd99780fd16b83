"""Interval normalization, unit conversion and aggregation of litterfall NPP."""

from litterfall_npp.npp.aggregate import (
    aggregate_plot_annual,
    aggregate_plot_monthly,
    aggregate_trap_monthly,
)
from litterfall_npp.npp.intervals import (
    IntervalResult,
    ObservationKey,
    TrapKey,
    normalize_intervals,
)
from litterfall_npp.npp.units import MONTHLY_FLUX_FACTOR, to_monthly_flux

__all__ = [
    "IntervalResult",
    "ObservationKey",
    "TrapKey",
    "MONTHLY_FLUX_FACTOR",
    "aggregate_plot_annual",
    "aggregate_plot_monthly",
    "aggregate_trap_monthly",
    "normalize_intervals",
    "to_monthly_flux",
]
