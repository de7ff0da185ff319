"""
Field-level coercion and validation for rows and project metadata.

Raw input usually comes from a prompt, so numbers may arrive as strings.
Errors are scoped to one field: a bad quantity never blocks a good distance
in the same row.
"""
import math
import numbers
import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional

from .constants import UNITS, GREEN_MARK_CATEGORIES
from .models import Row, FieldError, ROW_FIELDS

logger = logging.getLogger(__name__)


class FieldValidationError(ValueError):
    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
        self.value = value

    def to_field_error(self) -> FieldError:
        return FieldError(field=self.field, message=self.message, value=self.value)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_number(name: str, value: Any, minimum: Optional[float] = 0.0, optional: bool = False) -> Optional[float]:
    """
    Accept ints, floats and decimal strings; reject booleans, non-finite
    values and anything below `minimum`. Blank input is None for optional
    fields and an error otherwise.
    """
    if _is_blank(value):
        if optional:
            return None
        raise FieldValidationError(name, "a number is required", value)

    if isinstance(value, bool):
        raise FieldValidationError(name, "expected a number", value)
    if isinstance(value, (numbers.Real, Decimal)):
        try:
            number = float(value)
        except (OverflowError, ValueError):
            # huge ints, signalling NaN
            raise FieldValidationError(name, "expected a finite number", value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except (OverflowError, ValueError):
            raise FieldValidationError(name, f"'{value}' is not a number", value)
    else:
        raise FieldValidationError(name, "expected a number", value)

    if not math.isfinite(number):
        raise FieldValidationError(name, "must be a finite number", value)
    if minimum is not None and number < minimum:
        raise FieldValidationError(name, f"must be >= {minimum:g}", value)
    return number


def coerce_identifier(name: str, value: Any) -> str:
    # Existence in the catalogue is not checked here; unknown ids surface at lookup.
    if not isinstance(value, str):
        raise FieldValidationError(name, "expected an identifier string", value)
    return value


def coerce_choice(name: str, value: Any, choices, optional: bool = False) -> Optional[str]:
    if optional and _is_blank(value):
        return None
    if value not in choices:
        raise FieldValidationError(name, f"must be one of {', '.join(choices)}", value)
    return value


FIELD_RULES: Dict[str, Callable[[Any], Any]] = {
    "component_id": lambda v: coerce_identifier("component_id", v),
    "green_mark_category": lambda v: coerce_choice("green_mark_category", v, GREEN_MARK_CATEGORIES, optional=True),
    "country_id": lambda v: coerce_identifier("country_id", v),
    "quantity": lambda v: coerce_number("quantity", v),
    "units": lambda v: coerce_choice("units", v, UNITS),
    "marine_vehicle_id": lambda v: coerce_identifier("marine_vehicle_id", v),
    "manual_marine_distance": lambda v: coerce_number("manual_marine_distance", v, optional=True),
    "international_road_vehicle_id": lambda v: coerce_identifier("international_road_vehicle_id", v),
    "international_road_distance": lambda v: coerce_number("international_road_distance", v),
    "local_road_vehicle_id": lambda v: coerce_identifier("local_road_vehicle_id", v),
    "local_road_distance": lambda v: coerce_number("local_road_distance", v),
}

METADATA_RULES: Dict[str, Callable[[Any], Any]] = {
    # Positive GFA is expected but not enforced.
    "gfa": lambda v: coerce_number("gfa", v, minimum=None),
    "reference_value": lambda v: coerce_number("reference_value", v, minimum=None),
}

# Raw rows may use the artifact's camelCase keys.
CAMEL_CASE_ALIASES = {
    "componentId": "component_id",
    "greenMarkCategory": "green_mark_category",
    "countryId": "country_id",
    "marineVehicleId": "marine_vehicle_id",
    "manualMarineDistance": "manual_marine_distance",
    "internationalRoadVehicleId": "international_road_vehicle_id",
    "internationalRoadDistance": "international_road_distance",
    "localRoadVehicleId": "local_road_vehicle_id",
    "localRoadDistance": "local_road_distance",
    "referenceValue": "reference_value",
}


def normalise_field_name(name: str) -> str:
    return CAMEL_CASE_ALIASES.get(name, name)


def validate_field(name: str, value: Any) -> Any:
    """Return the coerced value or raise FieldValidationError."""
    rule = FIELD_RULES.get(normalise_field_name(name))
    if rule is None:
        raise FieldValidationError(name, "unknown field", value)
    return rule(value)


def validate_metadata(name: str, value: Any) -> float:
    rule = METADATA_RULES.get(normalise_field_name(name))
    if rule is None:
        raise FieldValidationError(name, "unknown metadata field", value)
    return rule(value)


@dataclass
class RowValidationResult:
    values: Dict[str, Any] = field(default_factory=dict)
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def apply_to(self, base: Row) -> Row:
        """Commit the valid fields onto `base`; invalid ones keep base's value."""
        return replace(base, **self.values)

    def to_row(self) -> Row:
        if self.errors:
            first = self.errors[0]
            raise FieldValidationError(first.field, first.message, first.value)
        if "component_id" not in self.values:
            raise FieldValidationError("component_id", "a component is required")
        return Row(**self.values)


def validate_row(raw: Mapping[str, Any]) -> RowValidationResult:
    """
    Validate every field present in `raw`. Fields absent from `raw` are left
    out of the result (Row defaults apply when building a new row).
    """
    result = RowValidationResult()
    for key, value in raw.items():
        name = normalise_field_name(key)
        if name not in ROW_FIELDS:
            result.errors.append(FieldError(field=key, message="unknown field", value=value))
            continue
        try:
            result.values[name] = validate_field(name, value)
        except FieldValidationError as e:
            result.errors.append(e.to_field_error())

    if result.errors:
        logger.debug(f"Row validation rejected {len(result.errors)} field(s): {[e.field for e in result.errors]}")
    return result


def check_row(row: Row) -> List[FieldError]:
    """Re-run every rule against an already built Row."""
    return validate_row(row.to_dict()).errors
