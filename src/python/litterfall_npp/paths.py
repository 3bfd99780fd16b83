from pathlib import Path


def litterfall_raw_path(root: Path) -> Path:
    return root / "data" / "raw" / "litterfall" / "litterfall.csv"


def litterfall_clean_path(root: Path) -> Path:
    return root / "data" / "interim" / "litterfall_clean.parquet"


def processed_path(root: Path, name: str) -> Path:
    return root / "data" / "processed" / f"{name}.parquet"


def diagnostics_table_path(root: Path) -> Path:
    return root / "results" / "tables" / "litterfall_diagnostics.csv"


def results_table_path(root: Path, name: str) -> Path:
    return root / "results" / "tables" / f"{name}.csv"
