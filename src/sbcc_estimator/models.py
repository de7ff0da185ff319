from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple
from .constants import (
    DEFAULT_COUNTRY_ID, DEFAULT_QUANTITY, DEFAULT_UNITS, DEFAULT_MARINE_VEHICLE_ID,
    DEFAULT_INTERNATIONAL_ROAD_VEHICLE_ID, DEFAULT_INTERNATIONAL_ROAD_DISTANCE,
    DEFAULT_LOCAL_ROAD_VEHICLE_ID, DEFAULT_LOCAL_ROAD_DISTANCE,
    GreenMarkCategory, Units
)


@dataclass(frozen=True)
class Row:
    """
    One material + transport line item.

    Identifier fields point into the reference catalogue; whether they resolve
    is only checked at lookup time. Distances are in km, quantity in `units`.
    """
    component_id: str
    country_id: str = DEFAULT_COUNTRY_ID
    quantity: float = DEFAULT_QUANTITY
    units: Units = DEFAULT_UNITS  # type: ignore[assignment]
    marine_vehicle_id: str = DEFAULT_MARINE_VEHICLE_ID
    international_road_vehicle_id: str = DEFAULT_INTERNATIONAL_ROAD_VEHICLE_ID
    international_road_distance: float = DEFAULT_INTERNATIONAL_ROAD_DISTANCE
    local_road_vehicle_id: str = DEFAULT_LOCAL_ROAD_VEHICLE_ID
    local_road_distance: float = DEFAULT_LOCAL_ROAD_DISTANCE
    green_mark_category: Optional[GreenMarkCategory] = None
    manual_marine_distance: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


ROW_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(Row))


@dataclass(frozen=True)
class CalculatorParameters:
    """
    Immutable snapshot of the calculator state handed to the calculation function.
    Hashable, so it doubles as a memoisation key.
    """
    rows: Tuple[Row, ...]
    gfa: float
    reference_value: float


@dataclass
class OutputRow:
    a1a3: float
    a4: float
    component_id: Optional[str] = None
    green_mark_category: Optional[str] = None
    mass_t: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "componentId": self.component_id,
            "greenMarkCategory": self.green_mark_category,
            "mass": self.mass_t,
            "a1a3": self.a1a3,
            "a4": self.a4,
        }


@dataclass
class Output:
    """
    Result of one calculation run. Pure derived state: never edited in place,
    always replaced by a fresh calculation.
    """
    version: str
    total_emissions: float
    embodied_carbon_per_gfa: float
    embodied_carbon_per_gfa_compared_to_reference: float
    green_mark_score: int
    rows: List[OutputRow] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialisable form, keyed the way the export artifact expects."""
        return {
            "version": self.version,
            "totalEmissions": self.total_emissions,
            "embodiedCarbonPerGfa": self.embodied_carbon_per_gfa,
            "embodiedCarbonPerGfaComparedToReference": self.embodied_carbon_per_gfa_compared_to_reference,
            "greenMarkScore": self.green_mark_score,
            "rows": [r.to_dict() for r in self.rows],
        }


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str
    value: Any = None
