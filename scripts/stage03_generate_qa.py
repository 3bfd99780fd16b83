"""
Stage 03 — Generate QA artifacts

Reads stage 01/02 outputs and produces:
- results/tables/litterfall_schema.csv
- results/tables/litterfall_coverage.csv
- results/figures/litterfall_monthly_flux.png
- results/logs/litterfall_qa_summary.json
"""

import sys
from pathlib import Path

import pandas as pd

root = Path(__file__).parent.parent
sys.path.append(str(root / "src" / "python"))

from litterfall_npp.config import load_analysis_config
from litterfall_npp.data import load_interim_parquet, load_processed_parquet, save_csv
from litterfall_npp.paths import diagnostics_table_path, results_table_path
from litterfall_npp.qa.litterfall import compute_schema, monthly_coverage, plot_monthly_flux, write_summary_json
from litterfall_npp.utils.run_history import append_to_run_history


def main() -> None:
    analysis = load_analysis_config(root)
    out_figs = root / "results" / "figures"
    out_logs = root / "results" / "logs"

    tables = {
        "litterfall_clean": load_interim_parquet(root, "litterfall_clean"),
        "litterfall_intervals": load_processed_parquet(root, "litterfall_intervals"),
        "litterfall_trap_monthly": load_processed_parquet(root, "litterfall_trap_monthly"),
        "litterfall_plot_monthly": load_processed_parquet(root, "litterfall_plot_monthly"),
    }
    schema_df = compute_schema(tables)
    save_csv(schema_df, results_table_path(root, "litterfall_schema"))

    coverage = monthly_coverage(tables["litterfall_trap_monthly"])
    save_csv(coverage, results_table_path(root, "litterfall_coverage"))

    fig_size = analysis.get("exploratory", {}).get("figure_size", [1600, 900])
    dpi = analysis.get("exploratory", {}).get("dpi", 300)
    plot_monthly_flux(
        tables["litterfall_plot_monthly"],
        out_figs / "litterfall_monthly_flux.png",
        fig_size_px=(fig_size[0], fig_size[1]),
        dpi=dpi,
    )

    diag_path = diagnostics_table_path(root)
    diagnostics = pd.read_csv(diag_path) if diag_path.exists() else pd.DataFrame(columns=["plot", "reason"])
    rows = {k: int(v.shape[0]) for k, v in tables.items()}
    extra = {
        "missing_total_frac": float(tables["litterfall_clean"]["total"].isna().mean()),
        "se_denominator": analysis.get("aggregation", {}).get("se_denominator", "dataset"),
    }
    write_summary_json(out_logs / "litterfall_qa_summary.json", rows, diagnostics, coverage, extra)

    # No logger in this script, so no log_path
    append_to_run_history(
        root=root,
        stage="Stage 03: QA Artifacts",
        config={
            "tables_checked": len(tables)
        },
        results={
            "schema_columns": len(schema_df),
            "diagnostics": len(diagnostics),
            "missing_total_frac": f"{extra['missing_total_frac']:.2%}",
            "mean_coverage": f"{coverage['coverage'].mean():.2%}" if not coverage.empty else "n/a",
        }
    )


if __name__ == "__main__":
    main()
