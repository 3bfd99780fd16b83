"""Shared pytest fixtures for the litterfall NPP test suite.

Observations are built in raw field-sheet form (string cells, as read
from CSV) and pushed through the real schema coercion and cleaning so
tests exercise the same path as the pipeline.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest

# Ensure we can import from src/python without installing the package
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src" / "python"))

from litterfall_npp.clean.litterfall import clean_litterfall
from litterfall_npp.constants import COLUMN_MAP, RAW_SCHEMA
from litterfall_npp.loaders.litterfall import coerce_schema

RAW_BY_SHORT = {short: raw for raw, short in COLUMN_MAP.items()}


def raw_row(plot="P1", trap=1, date="2020-01-01", **masses) -> dict:
    """One raw field-sheet row; masses use short names (leaves=10, ...)."""
    year, month, day = date.split("-")
    row = {name: None for name in RAW_SCHEMA}
    row.update({
        "plot_code": plot,
        "year": str(int(year)),
        "month": str(int(month)),
        "day": str(int(day)),
        "litterfall_trap_num": str(trap),
        "litterfall_trap_size_m2": "0.25",
    })
    for short, value in masses.items():
        row[RAW_BY_SHORT[short]] = None if value is None else str(value)
    return row


@pytest.fixture
def make_raw():
    """Factory: list of raw_row dicts -> raw DataFrame with all schema columns."""
    def _make(rows: list[dict]) -> pd.DataFrame:
        return pd.DataFrame(rows, columns=list(RAW_SCHEMA), dtype=object)
    return _make


@pytest.fixture
def make_observations(make_raw):
    """Factory: list of raw_row dicts -> cleaned observations."""
    def _make(rows: list[dict], settings: dict | None = None) -> pd.DataFrame:
        return clean_litterfall(coerce_schema(make_raw(rows)), settings)
    return _make


@pytest.fixture
def write_csv(tmp_path, make_raw):
    """Factory: write raw rows to a CSV in tmp_path and return its path."""
    def _write(rows: list[dict], name: str = "litterfall.csv", sep: str = ",") -> Path:
        path = tmp_path / name
        make_raw(rows).to_csv(path, index=False, sep=sep)
        return path
    return _write


@pytest.fixture
def three_collection_trap():
    """Trap P1.1 collected on 2020-01-01, 2020-01-15 and 2020-02-14."""
    return [
        raw_row("P1", 1, "2020-01-01", leaves=10),
        raw_row("P1", 1, "2020-01-15", leaves=20),
        raw_row("P1", 1, "2020-02-14", leaves=30),
    ]
