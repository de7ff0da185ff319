import os
from typing import Literal, Tuple
from .config import load_excel_config

# ============================================================================
# SETTINGS & CONSTANTS
# ============================================================================

# Loaded once at import. Every key below may be overridden from the
# parameters file; anything missing keeps its built-in default.
_config = load_excel_config()


def _get(key, default):
    return _config.get(key, default)


def _get_bool(key, default):
    val = _config.get(key, default)
    if isinstance(val, str):
        return val.strip().lower() in ("1", "true", "yes", "y")
    return bool(val)


# Calculator
CALCULATOR_VERSION = str(_get("CALCULATOR_VERSION", "0.1.0"))
GREENMARK_ONE_POINT_REDUCTION_PCT = float(_get("GREENMARK_ONE_POINT_REDUCTION_PCT", 10.0))
GREENMARK_TWO_POINT_REDUCTION_PCT = float(_get("GREENMARK_TWO_POINT_REDUCTION_PCT", 20.0))

# Project defaults
DEFAULT_GFA = float(_get("DEFAULT_GFA", 1000.0))

# Default row
DEFAULT_COUNTRY_ID = str(_get("DEFAULT_COUNTRY_ID", "Singapore"))
DEFAULT_QUANTITY = float(_get("DEFAULT_QUANTITY", 20.0))
DEFAULT_UNITS = str(_get("DEFAULT_UNITS", "tonne"))
DEFAULT_MARINE_VEHICLE_ID = str(_get("DEFAULT_MARINE_VEHICLE_ID", "Bulk carrier"))
DEFAULT_INTERNATIONAL_ROAD_VEHICLE_ID = str(
    _get("DEFAULT_INTERNATIONAL_ROAD_VEHICLE_ID", "Very heavy goods vehicle")
)
DEFAULT_INTERNATIONAL_ROAD_DISTANCE = float(_get("DEFAULT_INTERNATIONAL_ROAD_DISTANCE", 0.0))
DEFAULT_LOCAL_ROAD_VEHICLE_ID = str(_get("DEFAULT_LOCAL_ROAD_VEHICLE_ID", "Heavy goods vehicle"))
DEFAULT_LOCAL_ROAD_DISTANCE = float(_get("DEFAULT_LOCAL_ROAD_DISTANCE", 50.0))

# Files
EXPORT_FILENAME = str(_get("EXPORT_FILENAME", "output.sbcc.json"))
ROWS_REPORT_FILENAME = str(_get("ROWS_REPORT_FILENAME", "output.sbcc.rows.csv"))
REPORTS_DIR = str(_get("REPORTS_DIR", os.path.join(os.getcwd(), "reports")))
CATALOGUE_DIR = str(
    _get("CATALOGUE_DIR", os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "catalogue"))
)

# Audit
AUDIT_ENABLED = _get_bool("AUDIT_ENABLED", False)

# Display
DECIMALS = int(_get("DECIMALS", 2))

PARAMETER_UNITS = {
    "GREENMARK_ONE_POINT_REDUCTION_PCT": "%",
    "GREENMARK_TWO_POINT_REDUCTION_PCT": "%",
    "DEFAULT_GFA": "m2",
    "DEFAULT_INTERNATIONAL_ROAD_DISTANCE": "km",
    "DEFAULT_LOCAL_ROAD_DISTANCE": "km",
}

# ============================================================================
# TYPES (Code constructs, not excel parameters)
# ============================================================================

Units = Literal["tonne", "kg"]
GreenMarkCategory = Literal["Concrete", "Steel", "Glass"]

UNITS: Tuple[str, ...] = ("tonne", "kg")
GREEN_MARK_CATEGORIES: Tuple[str, ...] = ("Concrete", "Steel", "Glass")
UNIT_TO_TONNES = {"tonne": 1.0, "kg": 0.001}

MODE_MARITIME = "Maritime"
MODE_ROAD = "Road"
