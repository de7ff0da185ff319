"""
Reference embodied carbon calculation.

The session only depends on `calculate_green_mark(params) -> Output`; any
object with that method can be swapped in. This implementation works off
the reference catalogue's factors:

    A1-A3 = mass(t) * material factor (kgCO2e/t)
    A4    = mass(t) * (sea_km * EF_marine + intl_km * EF_intl + local_km * EF_local)
"""
import logging
from typing import Optional

from .audit import audit_logger
from .catalogue import ReferenceCatalogue
from .constants import (
    CALCULATOR_VERSION, UNIT_TO_TONNES,
    GREENMARK_ONE_POINT_REDUCTION_PCT, GREENMARK_TWO_POINT_REDUCTION_PCT
)
from .models import CalculatorParameters, Output, OutputRow, Row

logger = logging.getLogger(__name__)


def mass_in_tonnes(quantity: float, units: str) -> float:
    return quantity * UNIT_TO_TONNES.get(units, 1.0)


def green_mark_score(
    reduction_pct: float,
    one_point_pct: float = GREENMARK_ONE_POINT_REDUCTION_PCT,
    two_point_pct: float = GREENMARK_TWO_POINT_REDUCTION_PCT,
) -> int:
    """Three bands: below one_point_pct -> 0, below two_point_pct -> 1, else 2."""
    if reduction_pct >= two_point_pct:
        return 2
    if reduction_pct >= one_point_pct:
        return 1
    return 0


class EmbodiedCarbonCalculator:
    def __init__(
        self,
        catalogue: ReferenceCatalogue,
        version: str = CALCULATOR_VERSION,
        one_point_pct: float = GREENMARK_ONE_POINT_REDUCTION_PCT,
        two_point_pct: float = GREENMARK_TWO_POINT_REDUCTION_PCT,
    ):
        self.catalogue = catalogue
        self.version = version
        self.one_point_pct = one_point_pct
        self.two_point_pct = two_point_pct

    def _vehicle_factor(self, vehicle_id: str, leg: str, row_index: int) -> float:
        factor = self.catalogue.vehicle_emission_factor(vehicle_id)
        if factor is None:
            logger.warning(f"Row {row_index}: unknown {leg} vehicle '{vehicle_id}', leg counted as 0.")
            return 0.0
        return factor

    def _sea_distance(self, row: Row) -> float:
        if row.manual_marine_distance is not None:
            return row.manual_marine_distance
        distance: Optional[float] = self.catalogue.sea_distance_km(row.country_id)
        return distance if distance is not None else 0.0

    def calculate_row(self, row: Row, row_index: int = 0) -> OutputRow:
        mass_t = mass_in_tonnes(row.quantity, row.units)

        factor = self.catalogue.a1a3_factor(row.component_id, row.country_id)
        if factor is None:
            logger.warning(f"Row {row_index}: no A1-A3 factor for '{row.component_id}', counted as 0.")
            factor = 0.0
        a1a3 = mass_t * factor

        sea_km = self._sea_distance(row)
        ef_marine = self._vehicle_factor(row.marine_vehicle_id, "marine", row_index)
        ef_intl = self._vehicle_factor(row.international_road_vehicle_id, "international road", row_index)
        ef_local = self._vehicle_factor(row.local_road_vehicle_id, "local road", row_index)
        a4 = mass_t * (
            sea_km * ef_marine
            + row.international_road_distance * ef_intl
            + row.local_road_distance * ef_local
        )

        audit_logger.log_calculation(
            context=f"Row {row_index}: A1-A3 ({row.component_id}, {row.country_id})",
            formula="Mass(t) * Factor(kgCO2e/t)",
            variables={"Mass_t": round(mass_t, 4), "Factor": factor},
            result=a1a3,
            unit="kgCO2e",
        )
        audit_logger.log_calculation(
            context=f"Row {row_index}: A4 transport",
            formula="Mass(t) * [Sea(km)*EF_Marine + Intl(km)*EF_Intl + Local(km)*EF_Local]",
            variables={
                "Mass_t": round(mass_t, 4),
                "Sea_km": sea_km,
                "EF_Marine": ef_marine,
                "Intl_km": row.international_road_distance,
                "EF_Intl": ef_intl,
                "Local_km": row.local_road_distance,
                "EF_Local": ef_local,
            },
            result=a4,
            unit="kgCO2e",
        )

        return OutputRow(
            a1a3=a1a3,
            a4=a4,
            component_id=row.component_id,
            green_mark_category=row.green_mark_category,
            mass_t=mass_t,
        )

    def calculate_green_mark(self, params: CalculatorParameters) -> Output:
        rows = [self.calculate_row(row, i) for i, row in enumerate(params.rows)]
        total = sum(r.a1a3 + r.a4 for r in rows)

        per_gfa = total / params.gfa if params.gfa > 0 else 0.0
        if params.reference_value > 0:
            reduction = (params.reference_value - per_gfa) / params.reference_value * 100.0
        else:
            reduction = 0.0

        return Output(
            version=self.version,
            total_emissions=total,
            embodied_carbon_per_gfa=per_gfa,
            embodied_carbon_per_gfa_compared_to_reference=reduction,
            green_mark_score=green_mark_score(reduction, self.one_point_pct, self.two_point_pct),
            rows=rows,
        )
