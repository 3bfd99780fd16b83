"""
QA utilities for the litterfall stages.

Schema summaries, diagnostics counts, completeness of monthly coverage
and a quick-look figure of plot-level monthly flux. Rendering uses
matplotlib with dimensions derived from configuration.
"""

from __future__ import annotations

import json
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd


def df_schema(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=["column", "dtype", "non_null_fraction"])
    return pd.DataFrame({
        "column": df.columns,
        "dtype": [str(t) for t in df.dtypes.values],
        "non_null_fraction": [float(1.0 - df[c].isna().mean()) for c in df.columns],
    })


def compute_schema(tables: dict[str, pd.DataFrame]) -> pd.DataFrame:
    rows = []
    for name, df in tables.items():
        sch = df_schema(df)
        sch.insert(0, "table", name)
        rows.append(sch)
    if not rows:
        return pd.DataFrame(columns=["table", "column", "dtype", "non_null_fraction"])
    return pd.concat(rows, ignore_index=True)


def diagnostics_summary(diagnostics: pd.DataFrame) -> pd.DataFrame:
    """Count diagnostic records per plot and reason."""
    if diagnostics.empty:
        return pd.DataFrame(columns=["plot", "reason", "n_records"])
    out = (
        diagnostics.astype({"plot": "string"})
        .groupby(["plot", "reason"], as_index=False)
        .size()
        .rename(columns={"size": "n_records"})
    )
    return out.sort_values(["plot", "reason"]).reset_index(drop=True)


def monthly_coverage(trap_monthly: pd.DataFrame) -> pd.DataFrame:
    """
    Fraction of a plot's traps reporting a total flux in each month.
    """
    if trap_monthly.empty:
        return pd.DataFrame(columns=["plot", "year", "month", "reporting", "expected", "coverage"])
    df = trap_monthly.astype({"plot": "string"})
    expected = df.groupby("plot")["trap"].nunique().rename("expected")
    reporting = (
        df[df["total_mean"].notna()]
        .groupby(["plot", "year", "month"])["trap"]
        .nunique()
        .rename("reporting")
        .reset_index()
    )
    out = reporting.merge(expected, left_on="plot", right_index=True, how="left")
    out["coverage"] = out["reporting"] / out["expected"]
    return out.sort_values(["plot", "year", "month"]).reset_index(drop=True)


def plot_monthly_flux(plot_monthly: pd.DataFrame, out_png: Path, fig_size_px=(1600, 900), dpi=300) -> None:
    fig_w = fig_size_px[0] / dpi
    fig_h = fig_size_px[1] / dpi
    out_png.parent.mkdir(parents=True, exist_ok=True)
    plt.figure(figsize=(fig_w, fig_h), dpi=dpi)
    if plot_monthly.empty:
        plt.text(0.5, 0.5, "No litterfall flux", ha="center", va="center")
        plt.axis("off")
        plt.savefig(out_png)
        plt.close()
        return
    df = plot_monthly.astype({"plot": "string"})
    df = df.assign(period=pd.to_datetime(dict(year=df["year"].astype(int), month=df["month"].astype(int), day=1)))
    for plot_code, sub in df.sort_values("period").groupby("plot"):
        plt.errorbar(sub["period"], sub["total_mean"], yerr=sub["total_se"], marker="o", capsize=2, label=plot_code)
    plt.ylabel("Litterfall (Mg C ha$^{-1}$ month$^{-1}$)")
    plt.xlabel("Month")
    plt.title("Total Litterfall Flux by Plot")
    plt.legend(fontsize="small")
    plt.xticks(rotation=45, ha="right")
    plt.tight_layout()
    plt.savefig(out_png)
    plt.close()


def write_summary_json(
    out_path: Path,
    rows: dict[str, int],
    diagnostics: pd.DataFrame,
    coverage: pd.DataFrame,
    extra: dict[str, object] | None = None,
) -> None:
    payload = {
        "rows": rows,
        "diagnostics": diagnostics_summary(diagnostics).to_dict(orient="records"),
        "coverage": coverage.to_dict(orient="records") if not coverage.empty else [],
    }
    if extra:
        payload.update(extra)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w") as f:
        json.dump(payload, f, indent=2, default=str)
