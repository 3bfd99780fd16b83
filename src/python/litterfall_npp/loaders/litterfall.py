"""
Litterfall loader

Reads a delimited litterfall field sheet and coerces the fixed 20-column
schema to semantic types (text, integer, categorical, numeric).
Unexpected columns are dropped; missing or uncoercible required columns
raise `SchemaError` before any processing happens.

Example
-------
>>> from pathlib import Path
>>> df = load_litterfall(Path('data/raw/litterfall/litterfall.csv'))
"""

from pathlib import Path

import pandas as pd
from litterfall_npp.constants import RAW_SCHEMA
from litterfall_npp.errors import SchemaError


def _resolve_columns(columns: pd.Index, required: list[str]) -> dict[str, str]:
    """Map each required name to the actual header (exact, trimmed, case-insensitive)."""
    trimmed = {str(c).strip(): c for c in columns}
    lowered = {str(c).strip().lower(): c for c in columns}
    resolved = {}
    missing = []
    for name in required:
        if name in columns:
            resolved[name] = name
        elif name in trimmed:
            resolved[name] = trimmed[name]
        elif name.lower() in lowered:
            resolved[name] = lowered[name.lower()]
        else:
            missing.append(name)
    if missing:
        raise SchemaError(f"litterfall: required columns missing: {missing}")
    return resolved


def _blank_to_na(s: pd.Series) -> pd.Series:
    return s.astype("string").str.strip().replace("", pd.NA)


def _coerce_numeric(s: pd.Series, name: str) -> pd.Series:
    if not pd.api.types.is_numeric_dtype(s):
        s = _blank_to_na(s)
    out = pd.to_numeric(s, errors="coerce")
    if s.notna().any() and out.notna().sum() == 0:
        raise SchemaError(f"litterfall: column '{name}' cannot be coerced to numeric")
    return out.astype("float64")


def _coerce_integer(s: pd.Series, name: str) -> pd.Series:
    out = _coerce_numeric(s, name)
    present = out.dropna()
    if not (present == present.round()).all():
        raise SchemaError(f"litterfall: column '{name}' holds non-integer values")
    return out.round().astype("Int64")


def coerce_schema(df: pd.DataFrame, schema: dict[str, str] | None = None) -> pd.DataFrame:
    """
    Restrict `df` to the schema columns and coerce each to its semantic type.

    Parameters
    - df: raw DataFrame as read from disk
    - schema: mapping of column name to one of
      "text", "integer", "categorical", "numeric" (default: RAW_SCHEMA)

    Returns a new DataFrame with columns in schema order.
    """
    schema = schema or RAW_SCHEMA
    resolved = _resolve_columns(df.columns, list(schema))
    out = pd.DataFrame(index=df.index)
    for name, kind in schema.items():
        s = df[resolved[name]]
        if kind == "numeric":
            out[name] = _coerce_numeric(s, name)
        elif kind == "integer":
            out[name] = _coerce_integer(s, name)
        elif kind == "categorical":
            out[name] = s.astype("string").str.strip().astype("category")
        elif kind == "text":
            out[name] = s.astype("string")
        else:
            raise ValueError(f"unknown semantic type '{kind}' for column '{name}'")
    return out


def load_litterfall(path: Path, settings: dict | None = None) -> pd.DataFrame:
    """
    Load a litterfall field sheet and coerce it to the expected schema.

    Parameters
    ----------
    path : Path
        Delimited text file with one row per (plot, trap, collection date).
    settings : dict, optional
        Loader settings from `get_source_settings` (uses `delimiter`).

    Returns
    -------
    pd.DataFrame
        Table with the 20 schema columns coerced to semantic types.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    SchemaError
        If a required column is absent or uncoercible.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Litterfall file not found: {path}")
    delimiter = (settings or {}).get("delimiter", ",")
    raw = pd.read_csv(path, sep=delimiter, dtype=str, keep_default_na=True)
    return coerce_schema(raw)
