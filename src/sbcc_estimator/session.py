"""
One open estimator: catalogue, state, derived output, choosers and export.
"""
import logging
from typing import Any, Dict, Hashable, Optional

from .calculator import EmbodiedCarbonCalculator
from .catalogue import ReferenceCatalogue, load_catalogue
from .chooser import ChooserRegistry, LazyChooser
from .constants import DEFAULT_GFA, GREEN_MARK_CATEGORIES, UNITS
from .export import export_output, export_rows_csv
from .models import Output
from .state import CalculatorState
from .sync import CalculationFunction, DerivedOutputSync

logger = logging.getLogger(__name__)


class EstimatorSession:
    def __init__(
        self,
        catalogue: Optional[ReferenceCatalogue] = None,
        calculator: Optional[CalculationFunction] = None,
        gfa: float = DEFAULT_GFA,
    ):
        self.catalogue = catalogue if catalogue is not None else load_catalogue()
        self.calculator = calculator if calculator is not None else EmbodiedCarbonCalculator(self.catalogue)
        self.state = CalculatorState.with_default_row(self.catalogue, gfa=gfa)
        self.sync = DerivedOutputSync(self.state, self.calculator)
        self.choosers = ChooserRegistry()

        # Per-field option sources, all lazily evaluated.
        cat = self.catalogue
        self._option_sources = {
            "component_id": (cat.component_ids, None, "Select an option"),
            "green_mark_category": (lambda: list(GREEN_MARK_CATEGORIES), None, "No Category"),
            "country_id": (cat.country_ids, None, "Select an option"),
            "units": (lambda: list(UNITS), None, "Select an option"),
            "marine_vehicle_id": (cat.marine_vehicle_ids, None, "Select an option"),
            "international_road_vehicle_id": (cat.road_vehicle_ids, None, "Select an option"),
            "local_road_vehicle_id": (cat.road_vehicle_ids, None, "Select an option"),
            "reference_value": (cat.reference_value_options, cat.reference_value_label, "Select an option"),
        }

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    @property
    def output(self) -> Output:
        return self.sync.output

    def summary(self) -> Dict[str, Any]:
        out = self.output
        return {
            "version": out.version,
            "total_emissions": out.total_emissions,
            "green_mark_score": out.green_mark_score,
            "embodied_carbon_per_gfa": out.embodied_carbon_per_gfa,
            "reduction_pct": out.embodied_carbon_per_gfa_compared_to_reference,
            "rows": len(out.rows),
        }

    # ------------------------------------------------------------------
    # Choosers
    # ------------------------------------------------------------------

    def is_chooser_field(self, field_name: str) -> bool:
        return field_name in self._option_sources

    def chooser(self, field_name: str, row_index: Optional[int] = None) -> LazyChooser:
        """Chooser for a row field, or for metadata when row_index is None."""
        key: Hashable = (row_index, field_name) if row_index is not None else field_name
        options, label_for, placeholder = self._option_sources[field_name]
        return self.choosers.get(
            key, lambda k: LazyChooser(k, options, label_for=label_for, placeholder=placeholder)
        )

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def add_row(self) -> Optional[int]:
        return self.state.append()

    def duplicate_row(self, index: int) -> Optional[int]:
        return self.state.duplicate(index)

    def remove_row(self, index: int) -> bool:
        removed = self.state.remove(index)
        if removed:
            self.choosers.forget_row(index)
        return removed

    def set_field(self, index: int, field_name: str, value: Any) -> bool:
        return self.state.set_field(index, field_name, value)

    def set_gfa(self, value: Any) -> bool:
        return self.state.set_metadata("gfa", value)

    def set_reference_value(self, value: Any) -> bool:
        return self.state.set_metadata("reference_value", value)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_json(self, directory: str = ".") -> str:
        return export_output(self.output, directory)

    def export_csv(self, directory: str = ".") -> str:
        return export_rows_csv(self.output, directory)
