"""
Common I/O functions for loading and saving data artifacts.

These functions standardize access to interim and processed data files
across pipeline stages.
"""

from pathlib import Path
import json

import pandas as pd


def load_interim_parquet(root: Path, name: str) -> pd.DataFrame:
    """
    Load a parquet file from data/interim/.

    Parameters
    ----------
    root : Path
        Project root directory.
    name : str
        File name without extension (e.g., "litterfall_clean").

    Returns
    -------
    pd.DataFrame
        Loaded DataFrame.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    path = root / "data" / "interim" / f"{name}.parquet"

    if not path.exists():
        raise FileNotFoundError(f"Interim file not found: {path}")

    return pd.read_parquet(path)


def load_processed_parquet(root: Path, name: str) -> pd.DataFrame:
    """
    Load a parquet file from data/processed/.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    path = root / "data" / "processed" / f"{name}.parquet"

    if not path.exists():
        raise FileNotFoundError(f"Processed file not found: {path}")

    return pd.read_parquet(path)


def save_parquet(df: pd.DataFrame, path: Path) -> None:
    """
    Save DataFrame to parquet with consistent settings.

    Creates parent directories if needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(path, index=False)


def save_csv(df: pd.DataFrame, path: Path) -> None:
    """Save DataFrame to CSV without the index, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)


def save_summary_json(summary: dict, path: Path) -> None:
    """
    Save summary dictionary to JSON with consistent formatting.

    Creates parent directories if needed. Values json cannot encode
    natively (timestamps, numpy scalars) are written as strings.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(summary, f, indent=2, default=str)
