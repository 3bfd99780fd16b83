import sys

import pandas as pd

from litterfall_npp.data import load_interim_parquet, save_csv, save_parquet, save_summary_json
from litterfall_npp.utils.datetime import compose_collection_date
from litterfall_npp.utils.logging import setup_stage_logging
from litterfall_npp.utils.run_history import append_to_run_history, format_history_entry


def test_stage_logging_tees_and_archives(tmp_path):
    logs = tmp_path / "results" / "logs"
    logs.mkdir(parents=True)
    (logs / "stage01_clean_litterfall_20200101_000000.txt").write_text("old")

    original = sys.stdout
    logger = setup_stage_logging(tmp_path, "stage01_clean_litterfall")
    try:
        print("hello litterfall")
    finally:
        logger.close()

    assert sys.stdout is original
    assert (logs / "archive" / "stage01_clean_litterfall_20200101_000000.txt").exists()
    assert "hello litterfall" in logger.log_path.read_text(encoding="utf-8")


def test_run_history_appends_entries(tmp_path):
    append_to_run_history(tmp_path, "Stage 01", {"a": 1}, {"rows": 5})
    path = append_to_run_history(tmp_path, "Stage 02", {}, {"intervals": 4}, log_path="x.txt")
    text = path.read_text(encoding="utf-8")
    assert text.count("## ") == 2
    assert "  - rows: 5" in text
    assert "**Log**: x.txt" in text


def test_history_entry_placeholders():
    entry = format_history_entry("Stage 03", {}, {}, timestamp="2026-01-01 00:00")
    assert entry.startswith("## 2026-01-01 00:00 | Stage 03")
    assert entry.count("  - (none)") == 2
    assert "**Log**: (none)" in entry


def test_compose_collection_date_converts_to_utc():
    df = pd.DataFrame({"year": [2020, 2020], "month": [6, 2], "day": [1, 30]})
    out = compose_collection_date(df, timezone="America/Lima")
    assert out["date"].iloc[0] == pd.Timestamp("2020-06-01 05:00", tz="UTC")
    assert pd.isna(out["date"].iloc[1])
    assert "date" not in df.columns


def test_parquet_round_trip_via_interim(tmp_path):
    df = pd.DataFrame({"plot": ["P1"], "total": [1.5]})
    save_parquet(df, tmp_path / "data" / "interim" / "litterfall_clean.parquet")
    back = load_interim_parquet(tmp_path, "litterfall_clean")
    pd.testing.assert_frame_equal(back, df)


def test_save_csv_and_json_create_parents(tmp_path):
    save_csv(pd.DataFrame({"a": [1]}), tmp_path / "t" / "a.csv")
    save_summary_json({"when": pd.Timestamp("2020-01-01")}, tmp_path / "j" / "s.json")
    assert (tmp_path / "t" / "a.csv").exists()
    assert "2020-01-01" in (tmp_path / "j" / "s.json").read_text()
