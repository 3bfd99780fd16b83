"""
Column names, litter categories and unit-conversion constants.

Raw column names follow the standard litterfall field sheet. Internal
short names are used everywhere after cleaning.
"""

# Raw field-sheet columns and their semantic types, in file order.
RAW_SCHEMA: dict[str, str] = {
    "plot_code": "categorical",
    "year": "integer",
    "month": "integer",
    "day": "integer",
    "litterfall_trap_num": "integer",
    "litterfall_trap_size_m2": "numeric",
    "leaves_g_per_trap": "numeric",
    "twigs_g_per_trap": "numeric",
    "flowers_g_per_trap": "numeric",
    "fruits_g_per_trap": "numeric",
    "seeds_g_per_trap": "numeric",
    "bromeliads_g_per_trap": "numeric",
    "epiphytes_g_per_trap": "numeric",
    "other_g_per_trap": "numeric",
    "palm_leaves_g_per_trap": "numeric",
    "palm_flowers_g_per_trap": "numeric",
    "palm_fruits_g_per_trap": "numeric",
    "total_litterfall_g_per_trap": "numeric",
    "quality_code": "categorical",
    "comments": "text",
}

COLUMN_MAP: dict[str, str] = {
    "plot_code": "plot",
    "year": "year",
    "month": "month",
    "day": "day",
    "litterfall_trap_num": "trap",
    "litterfall_trap_size_m2": "trap_size",
    "leaves_g_per_trap": "leaves",
    "twigs_g_per_trap": "twigs",
    "flowers_g_per_trap": "flowers",
    "fruits_g_per_trap": "fruits",
    "seeds_g_per_trap": "seeds",
    "bromeliads_g_per_trap": "bromeliads",
    "epiphytes_g_per_trap": "epiphytes",
    "other_g_per_trap": "other",
    "palm_leaves_g_per_trap": "palm_leaves",
    "palm_flowers_g_per_trap": "palm_flowers",
    "palm_fruits_g_per_trap": "palm_fruits",
    "total_litterfall_g_per_trap": "total_recorded",
    "quality_code": "quality_code",
    "comments": "comments",
}

MASS_CATEGORIES: list[str] = [
    "leaves",
    "twigs",
    "flowers",
    "fruits",
    "seeds",
    "bromeliads",
    "epiphytes",
    "other",
    "palm_leaves",
    "palm_flowers",
    "palm_fruits",
]

# Categories carried through to carbon flux and aggregation.
FLUX_CATEGORIES: list[str] = [
    "leaves",
    "twigs",
    "flowers",
    "fruits",
    "bromeliads",
    "epiphytes",
    "other",
    "total",
]

TRAP_KEY: list[str] = ["plot", "trap"]
OBSERVATION_KEY: list[str] = ["plot", "trap", "year", "month", "day"]

TOTAL_CEILING_G = 1500.0

# g / 0.25 m2 trap / day -> Mg C / ha / month
TRAP_AREA_M2 = 0.25
M2_PER_HA = 10000
G_TO_MG = 0.000001
CARBON_FRACTION = 0.49
DAYS_PER_MONTH = 30
