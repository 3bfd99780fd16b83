"""
End-to-end litterfall NPP pipeline.

load -> clean -> interval normalization -> unit conversion -> aggregation,
run synchronously over an in-memory table. Only a structural problem with
the input file (`SchemaError`) aborts the run; row and trap anomalies are
nulled or returned as diagnostics.

Example
-------
>>> from pathlib import Path
>>> from litterfall_npp.config import load_analysis_config
>>> cfg = load_analysis_config(Path('.'))
>>> result = run_pipeline(Path('data/raw/litterfall/litterfall.csv'), cfg)
>>> result.diagnostics
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, NamedTuple

import pandas as pd

from litterfall_npp.clean.litterfall import clean_litterfall
from litterfall_npp.config import (
    get_aggregation_settings,
    get_cleaning_settings,
    get_conversion_settings,
    get_source_settings,
    validate_aggregation_settings,
    validate_cleaning_settings,
    validate_conversion_settings,
)
from litterfall_npp.loaders.litterfall import load_litterfall
from litterfall_npp.npp.aggregate import (
    aggregate_plot_annual,
    aggregate_plot_monthly,
    aggregate_trap_monthly,
)
from litterfall_npp.npp.intervals import INVALID_DATE, normalize_intervals
from litterfall_npp.npp.units import to_monthly_flux


class PipelineResult(NamedTuple):
    observations: pd.DataFrame
    intervals: pd.DataFrame
    diagnostics: pd.DataFrame
    flux: pd.DataFrame
    trap_monthly: pd.DataFrame
    plot_monthly: pd.DataFrame
    plot_annual: pd.DataFrame


def compute_npp(observations: pd.DataFrame, analysis_cfg: dict[str, Any] | None = None) -> PipelineResult:
    """
    Run the core stages on already cleaned observations.
    """
    analysis_cfg = analysis_cfg or {}
    conversion = validate_conversion_settings(get_conversion_settings(analysis_cfg))
    aggregation = validate_aggregation_settings(get_aggregation_settings(analysis_cfg))

    intervals, diagnostics = normalize_intervals(observations)
    flux = to_monthly_flux(intervals, conversion)
    trap_monthly = aggregate_trap_monthly(flux, aggregation)
    plot_monthly = aggregate_plot_monthly(trap_monthly, aggregation, conversion["carbon_fraction"])
    plot_annual = aggregate_plot_annual(plot_monthly)

    n_undated = int((diagnostics["reason"] == INVALID_DATE).sum())
    print(
        f"Diagnostics: {len(diagnostics) - n_undated} trap series with fewer than 2 observations, "
        f"{n_undated} observation(s) with an invalid date"
    )
    return PipelineResult(observations, intervals, diagnostics, flux, trap_monthly, plot_monthly, plot_annual)


def run_pipeline(
    path: Path | None,
    analysis_cfg: dict[str, Any] | None = None,
    root: Path | None = None,
) -> PipelineResult:
    """
    Load, clean and process a litterfall field sheet.

    Parameters
    ----------
    path : Path or None
        Input file; when None, `sources.litterfall.path` from config is used.
    analysis_cfg : dict, optional
        Parsed analysis.yml.
    root : Path, optional
        Project root; a relative `sources.litterfall.path` is resolved
        against it (otherwise against the working directory).

    Raises
    ------
    SchemaError
        If the input lacks or cannot coerce a required column.
    """
    analysis_cfg = analysis_cfg or {}
    source = get_source_settings(analysis_cfg, root)
    path = Path(path) if path is not None else source["path"]
    if path is None:
        raise ValueError("analysis.yml:sources.litterfall.path must be defined when no input path is given")
    cleaning = validate_cleaning_settings(get_cleaning_settings(analysis_cfg))

    raw = load_litterfall(path, source)
    observations = clean_litterfall(raw, cleaning, timezone=source["timezone"])
    return compute_npp(observations, analysis_cfg)
