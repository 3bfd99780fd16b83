"""
Run history tracking for stage scripts.

Each successful stage run appends a short entry to
results/logs/RUN_HISTORY.md so outcomes can be compared across datasets
without digging through individual logs.
"""

from datetime import datetime
from pathlib import Path
from typing import Any


def format_history_entry(
    stage: str,
    config: dict[str, Any],
    results: dict[str, Any],
    log_path: str = "",
    notes: str = "",
    timestamp: str | None = None,
) -> str:
    """Render one RUN_HISTORY.md entry as markdown."""
    timestamp = timestamp or datetime.now().strftime("%Y-%m-%d %H:%M")
    config_str = "\n".join(f"  - {k}: {v}" for k, v in config.items()) or "  - (none)"
    results_str = "\n".join(f"  - {k}: {v}" for k, v in results.items()) or "  - (none)"

    return f"""## {timestamp} | {stage}

- **Config**:
{config_str}
- **Results**:
{results_str}
- **Log**: {log_path or "(none)"}
- **Notes**: {notes}

---

"""


def append_to_run_history(
    root: Path,
    stage: str,
    config: dict[str, Any],
    results: dict[str, Any],
    log_path: str = "",
    notes: str = ""
) -> Path:
    """
    Append a summary entry to RUN_HISTORY.md and return its path.

    Example:
        append_to_run_history(
            root=root,
            stage="Stage 02: Litterfall NPP",
            config={"se_denominator": "dataset"},
            results={"intervals": 1180, "diagnostics": 3},
            log_path="results/logs/stage02_litterfall_npp_20260101_101500.txt",
        )
    """
    history_path = root / "results" / "logs" / "RUN_HISTORY.md"
    history_path.parent.mkdir(parents=True, exist_ok=True)

    with open(history_path, "a", encoding="utf-8") as f:
        f.write(format_history_entry(stage, config, results, log_path, notes))

    print(f"  Appended to run history: {history_path.relative_to(root)}")
    return history_path
