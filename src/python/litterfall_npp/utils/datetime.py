"""
Collection timestamp composition.

Field sheets record collection dates as separate year/month/day columns.
These are composed into absolute, timezone-aware instants so elapsed time
between collections is a plain timestamp difference rather than calendar
field arithmetic.
"""

from __future__ import annotations

import pandas as pd


def compose_collection_date(
    df: pd.DataFrame,
    timezone: str = "UTC",
    keys: tuple[str, str, str] = ("year", "month", "day"),
    target: str = "date",
) -> pd.DataFrame:
    """
    Add a `date` column composed from year/month/day columns.

    Parameters
    - df: DataFrame holding the date-part columns
    - timezone: zone the field dates are recorded in; output is converted to UTC
    - keys: names of the year, month and day columns
    - target: name of the output column

    Behavior
    - Raises ValueError when any of the date-part columns is missing
    - Impossible dates (e.g. 31 February) and missing parts become NaT
    """
    missing = [k for k in keys if k not in df.columns]
    if missing:
        raise ValueError(f"cannot compose collection date: columns {missing} not found")

    parts = pd.DataFrame({
        "year": pd.to_numeric(df[keys[0]], errors="coerce"),
        "month": pd.to_numeric(df[keys[1]], errors="coerce"),
        "day": pd.to_numeric(df[keys[2]], errors="coerce"),
    }, index=df.index)
    valid = parts.notna().all(axis=1)
    text = pd.Series(None, index=df.index, dtype=object)
    if valid.any():
        p = parts.loc[valid].astype("int64").astype(str)
        text.loc[valid] = p["year"].str.zfill(4) + "-" + p["month"].str.zfill(2) + "-" + p["day"].str.zfill(2)
    dt = pd.to_datetime(text, format="%Y-%m-%d", errors="coerce")

    dt = dt.dt.tz_localize(timezone or "UTC", nonexistent="NaT", ambiguous="NaT")
    dt = dt.dt.tz_convert("UTC")

    df = df.copy()
    df[target] = dt
    return df
