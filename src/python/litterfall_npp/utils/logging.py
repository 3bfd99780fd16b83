"""
Logging utilities for stage scripts.

Stage output is printed to the terminal and mirrored into a timestamped
log under results/logs/. Logs from earlier runs of the same stage are
moved to results/logs/archive/.
"""

import shutil
import sys
from datetime import datetime
from pathlib import Path


class StageLogger:
    """
    Tee for stdout: every write goes to the terminal and the stage log.

    Usage:
        logger = setup_stage_logging(root, "stage02_litterfall_npp")
        try:
            print("Normalizing intervals...")
        finally:
            logger.close()
    """

    def __init__(self, log_path: Path):
        self.terminal = sys.stdout
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.log_file = open(log_path, "w", encoding="utf-8")

    def write(self, message: str):
        self.terminal.write(message)
        self.log_file.write(message)

    def flush(self):
        self.terminal.flush()
        self.log_file.flush()

    def close(self):
        """Close the log file and hand stdout back to the terminal."""
        if sys.stdout is self:
            sys.stdout = self.terminal
        self.log_file.close()


def archive_previous_logs(logs_dir: Path, stage_name: str, keep: Path | None = None) -> list[Path]:
    """Move earlier logs for `stage_name` into logs_dir/archive and return their new paths."""
    archive_dir = logs_dir / "archive"
    archive_dir.mkdir(parents=True, exist_ok=True)
    moved = []
    for existing_log in sorted(logs_dir.glob(f"{stage_name}_*.txt")):
        if existing_log == keep:
            continue
        target = archive_dir / existing_log.name
        shutil.move(str(existing_log), str(target))
        moved.append(target)
    return moved


def setup_stage_logging(root: Path, stage_name: str) -> StageLogger:
    """
    Start a timestamped stage log and redirect stdout through it.

    Args:
        root: Project root directory
        stage_name: Name of the stage (e.g., "stage01_clean_litterfall")

    Returns:
        StageLogger now installed as sys.stdout
    """
    logs_dir = root / "results" / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = logs_dir / f"{stage_name}_{timestamp}.txt"

    moved = archive_previous_logs(logs_dir, stage_name, keep=log_path)

    logger = StageLogger(log_path)
    sys.stdout = logger

    for p in moved:
        print(f"Archived previous log: {p.name} → archive/")
    print(f"Log file: {log_path.relative_to(root)}")
    print(f"Started: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print()

    return logger
