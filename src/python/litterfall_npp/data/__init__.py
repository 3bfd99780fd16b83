"""Data I/O utilities for loading and saving artifacts."""

from litterfall_npp.data.io import (
    load_interim_parquet,
    load_processed_parquet,
    save_csv,
    save_parquet,
    save_summary_json,
)

__all__ = [
    "load_interim_parquet",
    "load_processed_parquet",
    "save_csv",
    "save_parquet",
    "save_summary_json",
]
