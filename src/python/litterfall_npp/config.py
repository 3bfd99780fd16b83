from pathlib import Path
from typing import Any

import yaml

from litterfall_npp.constants import (
    CARBON_FRACTION,
    DAYS_PER_MONTH,
    TOTAL_CEILING_G,
    TRAP_AREA_M2,
)

SE_DENOMINATORS = ("dataset", "group")


def read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r") as f:
        return yaml.safe_load(f) or {}


def load_analysis_config(root: Path) -> dict[str, Any]:
    """
    Read and return the analysis YAML configuration.

    Example
    -------
    >>> from pathlib import Path
    >>> cfg = load_analysis_config(Path('.'))
    """
    return read_yaml(root / "config" / "analysis.yml")


def get_plots_include(analysis_cfg: dict[str, Any]) -> list:
    """
    Return list of plot codes to include from config (empty keeps all).
    """
    return list(analysis_cfg.get("plots", {}).get("include", []) or [])


def get_source_settings(analysis_cfg: dict[str, Any], root: Path | None = None) -> dict[str, Any]:
    """
    Return normalized loader settings for the litterfall source.

    Keys returned:
    - path: Path | None (resolved against `root` when given)
    - delimiter: str (default ",")
    - timezone: str (default "UTC")
    """
    s = analysis_cfg.get("sources", {}).get("litterfall", {})
    path = s.get("path")
    if path is not None:
        path = Path(path)
        if root is not None and not path.is_absolute():
            path = (root / path).resolve()
    return {
        "path": path,
        "delimiter": s.get("delimiter", ","),
        "timezone": s.get("timezone", "UTC"),
    }


def get_cleaning_settings(analysis_cfg: dict[str, Any]) -> dict[str, Any]:
    """
    Return cleaning thresholds and plot filter.
    """
    c = analysis_cfg.get("cleaning", {})
    return {
        "total_ceiling_g": float(c.get("total_ceiling_g", TOTAL_CEILING_G)),
        "plots_include": get_plots_include(analysis_cfg),
    }


def get_conversion_settings(analysis_cfg: dict[str, Any]) -> dict[str, Any]:
    """
    Return trap area and carbon conversion parameters.
    """
    c = analysis_cfg.get("conversion", {})
    return {
        "trap_area_m2": c.get("trap_area_m2", TRAP_AREA_M2),
        "carbon_fraction": c.get("carbon_fraction", CARBON_FRACTION),
        "days_per_month": c.get("days_per_month", DAYS_PER_MONTH),
    }


def get_aggregation_settings(analysis_cfg: dict[str, Any]) -> dict[str, Any]:
    return {
        "se_denominator": analysis_cfg.get("aggregation", {}).get("se_denominator", "dataset"),
    }


def validate_conversion_settings(settings: dict[str, Any]) -> dict[str, Any]:
    """
    Validate conversion parameters and return the same dict.

    Rules:
    - trap_area_m2 and days_per_month must be positive numbers.
    - carbon_fraction must lie in (0, 1].
    Raises ValueError with clear messages including config path.
    """
    for key in ("trap_area_m2", "days_per_month"):
        v = settings.get(key)
        if not isinstance(v, (int, float)) or isinstance(v, bool) or v <= 0:
            raise ValueError(f"analysis.yml:conversion.{key}: must be a positive number, got {v!r}")
    cf = settings.get("carbon_fraction")
    if not isinstance(cf, (int, float)) or isinstance(cf, bool) or not 0 < cf <= 1:
        raise ValueError(f"analysis.yml:conversion.carbon_fraction: must be in (0, 1], got {cf!r}")
    return settings


def validate_aggregation_settings(settings: dict[str, Any]) -> dict[str, Any]:
    policy = settings.get("se_denominator")
    if policy not in SE_DENOMINATORS:
        raise ValueError(
            f"analysis.yml:aggregation.se_denominator: must be one of {list(SE_DENOMINATORS)}, got {policy!r}"
        )
    return settings


def validate_cleaning_settings(settings: dict[str, Any]) -> dict[str, Any]:
    ceiling = settings.get("total_ceiling_g")
    if ceiling is None or ceiling < 0:
        raise ValueError(f"analysis.yml:cleaning.total_ceiling_g: must be non-negative, got {ceiling!r}")
    if not isinstance(settings.get("plots_include"), list):
        raise ValueError("analysis.yml:plots.include: must be a list")
    return settings
