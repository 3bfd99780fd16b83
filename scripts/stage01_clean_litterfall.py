"""
Stage 01: Clean Litterfall

Loads the raw litterfall field sheet, coerces the column schema, renames
columns, derives per-collection totals, nulls implausible totals and
composes collection dates. Writes data/interim/litterfall_clean.parquet.

Usage:
    python scripts/stage01_clean_litterfall.py [INPUT_CSV]
"""

import sys
import argparse
import warnings
from pathlib import Path
from datetime import datetime

root = Path(__file__).parent.parent
sys.path.append(str(root / "src" / "python"))

from litterfall_npp.config import (
    load_analysis_config,
    get_source_settings,
    get_cleaning_settings,
    validate_cleaning_settings,
)
from litterfall_npp.loaders.litterfall import load_litterfall
from litterfall_npp.clean.litterfall import clean_litterfall
from litterfall_npp.data import save_parquet
from litterfall_npp.paths import litterfall_raw_path, litterfall_clean_path
from litterfall_npp.utils.logging import setup_stage_logging
from litterfall_npp.utils.run_history import append_to_run_history


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Clean a litterfall field sheet")
    parser.add_argument("input", nargs="?", type=Path, help="litterfall CSV (default: sources.litterfall.path)")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logger = setup_stage_logging(root, "stage01_clean_litterfall")

    try:
        print("=" * 60)
        print("STAGE 01: CLEAN LITTERFALL")
        print("=" * 60)
        print()

        cfg = load_analysis_config(root)
        source = get_source_settings(cfg, root)
        cleaning = validate_cleaning_settings(get_cleaning_settings(cfg))
        input_path = args.input or source["path"] or litterfall_raw_path(root)
        print("Configuration:")
        print(f"  input: {input_path}")
        print(f"  total_ceiling_g: {cleaning['total_ceiling_g']}")
        print(f"  plots_include: {cleaning['plots_include'] or 'all'}")
        print()

        print("Step 1: Loading field sheet...")
        raw = load_litterfall(input_path, source)
        print(f"✓ Loaded {len(raw):,} rows, {len(raw.columns)} schema columns")
        print()

        print("Step 2: Cleaning...")
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            clean = clean_litterfall(raw, cleaning, timezone=source["timezone"])
        for w in caught:
            print(f"⚠ {w.category.__name__}: {w.message}")
        n_missing_total = int(clean["total"].isna().sum())
        n_undated = int(clean["date"].isna().sum())
        print(f"✓ Cleaned {len(clean):,} rows")
        print(f"    Plots: {clean['plot'].nunique()}")
        print(f"    Traps: {len(clean[['plot', 'trap']].drop_duplicates())}")
        print(f"    Missing totals: {n_missing_total}")
        print(f"    Rows without a valid date: {n_undated}")
        print()

        print("Step 3: Saving outputs...")
        out_path = litterfall_clean_path(root)
        save_parquet(clean, out_path)
        print(f"  ✓ Saved cleaned observations: {out_path}")
        print()

        append_to_run_history(
            root=root,
            stage="Stage 01: Clean Litterfall",
            config={
                "input": str(input_path),
                "total_ceiling_g": cleaning["total_ceiling_g"],
            },
            results={
                "rows": len(clean),
                "missing_totals": n_missing_total,
                "undated_rows": n_undated,
            },
            log_path=str(logger.log_path.relative_to(root))
        )

        print("=" * 60)
        print("✓ Stage 01 complete")
        print("=" * 60)
        print()
        print(f"Completed: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    finally:
        logger.close()


if __name__ == "__main__":
    main()
