import numpy as np
import pandas as pd
import pytest

from litterfall_npp.npp.aggregate import (
    aggregate_plot_annual,
    aggregate_plot_monthly,
    aggregate_trap_monthly,
    standard_error,
)
from litterfall_npp.npp.units import carbon_flux_to_dry_mass


def flux_rows(rows):
    """rows: (plot, trap, year, month, day, elapsed_days, total_flux, leaves_flux)"""
    return pd.DataFrame(
        rows,
        columns=["plot", "trap", "year", "month", "day", "elapsed_days", "total_flux", "leaves_flux"],
    )


@pytest.fixture
def flux():
    return flux_rows([
        ("P1", 1, 2020, 1, 10, 10.0, 0.2, 0.1),
        ("P1", 1, 2020, 1, 24, 14.0, 0.4, 0.3),
        ("P1", 2, 2020, 1, 12, 12.0, 0.6, 0.5),
        ("P1", 2, 2020, 1, 26, 14.0, np.nan, 0.5),
        ("P1", 1, 2021, 1, 15, 20.0, 0.3, 0.2),
        ("P1", 2, 2021, 1, 15, 20.0, 0.5, 0.4),
    ])


def test_trap_monthly_means_ignore_missing(flux):
    out = aggregate_trap_monthly(flux)
    row = out[(out["trap"] == 2) & (out["year"] == 2020)].iloc[0]
    assert row["total_mean"] == pytest.approx(0.6)
    assert np.isnan(row["total_sd"])
    assert row["leaves_mean"] == pytest.approx(0.5)
    assert row["n_intervals"] == 2


def test_trap_monthly_interval_mean_is_negated(flux):
    out = aggregate_trap_monthly(flux)
    row = out[(out["trap"] == 1) & (out["year"] == 2020)].iloc[0]
    assert row["interval_mean"] == pytest.approx(-12.0)


def test_trap_monthly_se_uses_dataset_year_count(flux):
    out = aggregate_trap_monthly(flux)
    row = out[(out["trap"] == 1) & (out["year"] == 2020)].iloc[0]
    sd = np.std([0.2, 0.4], ddof=1)
    assert row["total_sd"] == pytest.approx(sd)
    assert row["total_se"] == pytest.approx(sd / np.sqrt(2))


def test_trap_monthly_se_group_policy(flux):
    flux = pd.concat([flux, flux_rows([("P1", 1, 2020, 1, 30, 6.0, 0.9, 0.1)])], ignore_index=True)
    out = aggregate_trap_monthly(flux, {"se_denominator": "group"})
    row = out[(out["trap"] == 1) & (out["year"] == 2020)].iloc[0]
    sd = np.std([0.2, 0.4, 0.9], ddof=1)
    assert row["total_se"] == pytest.approx(sd / np.sqrt(3))


def test_plot_monthly_across_traps(flux):
    trap_monthly = aggregate_trap_monthly(flux)
    out = aggregate_plot_monthly(trap_monthly)
    row = out[out["year"] == 2020].iloc[0]

    trap_means = [0.3, 0.6]
    sd = np.std(trap_means, ddof=1)
    assert row["total_mean"] == pytest.approx(0.45)
    assert row["total_sd"] == pytest.approx(sd)
    assert row["total_se"] == pytest.approx(sd / np.sqrt(2))
    assert row["n_traps"] == 2
    assert row["total_dry_g_m2_month"] == pytest.approx(0.45 / 0.49 * 100)


def test_plot_monthly_se_uses_dataset_trap_count(flux):
    # a third trap seen only in 2021 still counts toward the 2020 divisor
    flux = pd.concat([flux, flux_rows([("P1", 3, 2021, 1, 15, 20.0, 0.4, 0.1)])], ignore_index=True)
    out = aggregate_plot_monthly(aggregate_trap_monthly(flux))
    row = out[out["year"] == 2020].iloc[0]
    assert row["n_traps"] == 2
    assert row["total_se"] == pytest.approx(row["total_sd"] / np.sqrt(3))

    grouped = aggregate_plot_monthly(aggregate_trap_monthly(flux), {"se_denominator": "group"})
    row = grouped[grouped["year"] == 2020].iloc[0]
    assert row["total_se"] == pytest.approx(row["total_sd"] / np.sqrt(2))


def test_plot_monthly_se_counts_plot_trap_pairs():
    # trap numbers repeat across plots; each (plot, trap) pair is its own trap
    flux = flux_rows([
        ("P1", 1, 2020, 1, 15, 14.0, 0.2, 0.1),
        ("P1", 2, 2020, 1, 15, 14.0, 0.4, 0.1),
        ("P2", 1, 2020, 1, 15, 14.0, 0.3, 0.1),
        ("P2", 2, 2020, 1, 15, 14.0, 0.6, 0.1),
    ])
    out = aggregate_plot_monthly(aggregate_trap_monthly(flux))
    p1 = out[out["plot"] == "P1"].iloc[0]
    assert p1["n_traps"] == 2
    assert p1["total_sd"] == pytest.approx(np.std([0.2, 0.4], ddof=1))
    assert p1["total_se"] == pytest.approx(p1["total_sd"] / np.sqrt(4))


def test_dry_mass_uses_configured_carbon_fraction(flux):
    out = aggregate_plot_monthly(aggregate_trap_monthly(flux), carbon_fraction=0.5)
    expected = carbon_flux_to_dry_mass(out["total_mean"], 0.5)
    assert out["total_dry_g_m2_month"].tolist() == pytest.approx(expected.tolist())


def test_plot_annual_scales_monthly_mean():
    plot_monthly = pd.DataFrame({
        "plot": ["P1", "P1", "P1"],
        "year": [2020, 2020, 2020],
        "month": [1, 2, 3],
        "total_mean": [0.4, 0.5, np.nan],
        "total_se": [0.03, 0.04, np.nan],
    })
    out = aggregate_plot_annual(plot_monthly)
    row = out.iloc[0]
    assert row["n_months"] == 2
    assert row["total_flux_mean_month"] == pytest.approx(0.45)
    assert row["total_flux_annual"] == pytest.approx(5.4)
    assert row["total_flux_annual_se"] == pytest.approx(0.05 / 2 * 12)


def test_plot_annual_se_missing_without_monthly_se():
    # single-trap plot: no spread across traps, so no monthly SE
    plot_monthly = pd.DataFrame({
        "plot": ["P2", "P2", "P3", "P3"],
        "year": [2020, 2020, 2020, 2020],
        "month": [1, 2, 1, 2],
        "total_mean": [0.4, 0.5, 0.4, 0.5],
        "total_se": [np.nan, np.nan, 0.03, np.nan],
    })
    out = aggregate_plot_annual(plot_monthly).set_index("plot")
    assert out.loc["P2", "total_flux_annual"] == pytest.approx(5.4)
    assert np.isnan(out.loc["P2", "total_flux_annual_se"])
    assert np.isnan(out.loc["P3", "total_flux_annual_se"])


def test_empty_inputs_give_empty_tables():
    empty = flux_rows([])
    trap_monthly = aggregate_trap_monthly(empty)
    assert trap_monthly.empty
    assert "total_se" in trap_monthly.columns
    plot_monthly = aggregate_plot_monthly(trap_monthly)
    assert plot_monthly.empty
    assert aggregate_plot_annual(plot_monthly).empty


def test_standard_error_accepts_series_divisor():
    se = standard_error(pd.Series([2.0, 3.0]), pd.Series([4, 9]))
    assert se.tolist() == pytest.approx([1.0, 1.0])
