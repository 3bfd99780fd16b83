"""
Stage 02: Litterfall NPP

Derives litterfall NPP from cleaned observations:
- Daily rates per collection interval (g / trap / day)
- Monthly carbon flux per interval (Mg C / ha / month)
- Trap-level and plot-level monthly means, SDs and SEs
- Plot-level annual totals (Mg C / ha / yr)

Trap series with fewer than two observations are written to
results/tables/litterfall_diagnostics.csv for manual review.
"""

import sys
import warnings
from pathlib import Path
from datetime import datetime

root = Path(__file__).parent.parent
sys.path.append(str(root / "src" / "python"))

from litterfall_npp.config import (
    load_analysis_config,
    get_aggregation_settings,
    get_conversion_settings,
)
from litterfall_npp.data import load_interim_parquet, save_csv, save_parquet, save_summary_json
from litterfall_npp.npp.units import monthly_flux_factor
from litterfall_npp.paths import diagnostics_table_path, processed_path, results_table_path
from litterfall_npp.pipeline import compute_npp
from litterfall_npp.utils.logging import setup_stage_logging
from litterfall_npp.utils.run_history import append_to_run_history


def save_outputs(root: Path, result) -> None:
    """Save processed tables, CSV copies and the diagnostics table."""
    tables = {
        "litterfall_intervals": result.flux,
        "litterfall_trap_monthly": result.trap_monthly,
        "litterfall_plot_monthly": result.plot_monthly,
        "litterfall_plot_annual": result.plot_annual,
    }
    for name, df in tables.items():
        path = processed_path(root, name)
        save_parquet(df, path)
        print(f"  ✓ Saved {name}: {path}")
    for name in ("litterfall_plot_monthly", "litterfall_plot_annual"):
        save_csv(tables[name], results_table_path(root, name))

    diag_path = diagnostics_table_path(root)
    save_csv(result.diagnostics, diag_path)
    print(f"  ✓ Saved diagnostics: {diag_path}")


def main():
    logger = setup_stage_logging(root, "stage02_litterfall_npp")

    try:
        print("=" * 60)
        print("STAGE 02: LITTERFALL NPP")
        print("=" * 60)
        print()

        cfg = load_analysis_config(root)
        conversion = get_conversion_settings(cfg)
        aggregation = get_aggregation_settings(cfg)
        print("Configuration:")
        print(f"  monthly_flux_factor: {monthly_flux_factor(**conversion)}")
        print(f"  se_denominator: {aggregation['se_denominator']}")
        print()

        print("Step 1: Loading cleaned observations...")
        observations = load_interim_parquet(root, "litterfall_clean")
        print(f"✓ Loaded {len(observations):,} observations")
        print()

        print("Step 2: Normalizing intervals, converting units, aggregating...")
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = compute_npp(observations, cfg)
        for w in caught:
            print(f"⚠ {w.category.__name__}: {w.message}")
        print(f"✓ Interval records: {len(result.intervals):,}")
        print(f"✓ Trap-month rows: {len(result.trap_monthly):,}")
        print(f"✓ Plot-month rows: {len(result.plot_monthly):,}")
        print()

        if not result.plot_annual.empty:
            print("Annual litterfall (Mg C / ha / yr):")
            for row in result.plot_annual.itertuples(index=False):
                print(f"  {row.plot} {row.year}: {row.total_flux_annual:.2f} ± {row.total_flux_annual_se:.2f} ({row.n_months} months)")
            print()

        print("Step 3: Saving outputs...")
        save_outputs(root, result)
        summary = {
            "observations": len(observations),
            "intervals": len(result.intervals),
            "diagnostics": len(result.diagnostics),
            "plots": sorted(str(p) for p in result.plot_monthly["plot"].unique()),
            "se_denominator": aggregation["se_denominator"],
        }
        save_summary_json(summary, root / "results" / "logs" / "litterfall_npp_summary.json")
        print()

        append_to_run_history(
            root=root,
            stage="Stage 02: Litterfall NPP",
            config={
                "carbon_fraction": conversion["carbon_fraction"],
                "trap_area_m2": conversion["trap_area_m2"],
                "se_denominator": aggregation["se_denominator"],
            },
            results={
                "intervals": len(result.intervals),
                "diagnostics": len(result.diagnostics),
                "plot_months": len(result.plot_monthly),
            },
            log_path=str(logger.log_path.relative_to(root))
        )

        print("=" * 60)
        print("✓ Stage 02 complete")
        print("=" * 60)
        print()
        print(f"Completed: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    finally:
        logger.close()


if __name__ == "__main__":
    main()
