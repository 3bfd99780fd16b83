"""
Stage 00 — Verify Config

Reads config and prints resolved source, cleaning, conversion and
aggregation settings plus the input/output paths as pretty-printed JSON.
Does not read the raw data; intended for quick setup checks.
"""

import sys
import json
from pathlib import Path

root = Path(__file__).parent.parent
sys.path.append(str(root / "src" / "python"))

from litterfall_npp.config import (
    load_analysis_config,
    get_source_settings,
    get_cleaning_settings,
    get_conversion_settings,
    get_aggregation_settings,
    validate_cleaning_settings,
    validate_conversion_settings,
    validate_aggregation_settings,
)
from litterfall_npp.npp.units import monthly_flux_factor
from litterfall_npp.paths import (
    litterfall_raw_path,
    litterfall_clean_path,
    processed_path,
    diagnostics_table_path,
)


def main():
    """Print configuration values and example paths as JSON."""
    analysis = load_analysis_config(root)
    source = get_source_settings(analysis, root)
    cleaning = validate_cleaning_settings(get_cleaning_settings(analysis))
    conversion = validate_conversion_settings(get_conversion_settings(analysis))
    aggregation = validate_aggregation_settings(get_aggregation_settings(analysis))

    print(json.dumps({
        "source": {k: str(v) if isinstance(v, Path) else v for k, v in source.items()},
        "cleaning": cleaning,
        "conversion": conversion,
        "monthly_flux_factor": monthly_flux_factor(**conversion),
        "aggregation": aggregation,
    }, indent=2))

    print(json.dumps({
        "raw": str(source["path"] or litterfall_raw_path(root)),
        "clean": str(litterfall_clean_path(root)),
        "plot_monthly": str(processed_path(root, "litterfall_plot_monthly")),
        "diagnostics": str(diagnostics_table_path(root)),
    }, indent=2))


if __name__ == "__main__":
    main()
