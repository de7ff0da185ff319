"""
Calculator state: project metadata plus the ordered list of rows.

Every mutator validates first and only touches the trusted state when the
new value is accepted. Rejected values are parked in `pending_errors` for the
UI to show next to the field. After each committed change all subscribers
are called, in subscription order, before the mutator returns.
"""
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .cascade import cascade_updates
from .catalogue import ReferenceCatalogue
from .constants import DEFAULT_GFA
from .models import CalculatorParameters, FieldError, Row
from .validation import (
    FieldValidationError, check_row, normalise_field_name, validate_field, validate_metadata, validate_row
)

logger = logging.getLogger(__name__)

Subscriber = Callable[["CalculatorState"], None]
PendingKey = Tuple[Optional[int], str]


class CalculatorState:
    def __init__(
        self,
        catalogue: ReferenceCatalogue,
        rows: Optional[List[Row]] = None,
        gfa: float = DEFAULT_GFA,
        reference_value: Optional[float] = None,
    ):
        self.catalogue = catalogue
        self._rows: List[Row] = list(rows or [])
        for i, row in enumerate(self._rows):
            errors = check_row(row)
            if errors:
                raise FieldValidationError(errors[0].field, f"row {i}: {errors[0].message}", errors[0].value)
        self._gfa = float(gfa)
        if reference_value is None:
            reference_value = catalogue.default_reference_value() or 0.0
        self._reference_value = float(reference_value)
        self._subscribers: List[Subscriber] = []
        # (row index, field) -> rejected value; metadata uses index None
        self.pending_errors: Dict[PendingKey, FieldError] = {}

    @classmethod
    def with_default_row(cls, catalogue: ReferenceCatalogue, **kwargs) -> "CalculatorState":
        state = cls(catalogue, **kwargs)
        state._rows.append(default_row(catalogue))
        return state

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def rows(self) -> Tuple[Row, ...]:
        return tuple(self._rows)

    @property
    def gfa(self) -> float:
        return self._gfa

    @property
    def reference_value(self) -> float:
        return self._reference_value

    def __len__(self) -> int:
        return len(self._rows)

    def row(self, index: int) -> Optional[Row]:
        if not self._in_range(index):
            return None
        return self._rows[index]

    def parameters(self) -> CalculatorParameters:
        return CalculatorParameters(rows=tuple(self._rows), gfa=self._gfa, reference_value=self._reference_value)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Subscriber:
        self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback: Subscriber):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _publish(self):
        for callback in list(self._subscribers):
            callback(self)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def append(self, row: Union[Row, Mapping[str, Any], None] = None) -> Optional[int]:
        """
        Append a row (a Row, a raw mapping, or None for a default row).
        Returns the new index, or None if the row was rejected.
        """
        if row is None:
            row = default_row(self.catalogue)
        elif not isinstance(row, Row):
            result = validate_row(row)
            try:
                row = result.to_row()
            except FieldValidationError as e:
                logger.warning(f"Rejected new row: {e}")
                self.pending_errors[(None, e.field)] = e.to_field_error()
                return None
        else:
            errors = validate_row(row.to_dict()).errors
            if errors:
                logger.warning(f"Rejected new row: {errors[0].field}: {errors[0].message}")
                self.pending_errors[(None, errors[0].field)] = errors[0]
                return None

        self._rows.append(row)
        logger.debug(f"Appended row {len(self._rows) - 1}: {row.component_id}")
        self._publish()
        return len(self._rows) - 1

    def duplicate(self, index: int) -> Optional[int]:
        """Append a value copy of row `index`. Out-of-range index is a no-op."""
        if not self._in_range(index):
            logger.debug(f"duplicate({index}) ignored: {len(self._rows)} rows")
            return None
        # Rows are frozen, so a shallow replace is a full value copy.
        self._rows.append(replace(self._rows[index]))
        logger.debug(f"Duplicated row {index} to {len(self._rows) - 1}")
        self._publish()
        return len(self._rows) - 1

    def remove(self, index: int) -> bool:
        """Remove row `index`. Out-of-range index is a no-op."""
        if not self._in_range(index):
            logger.debug(f"remove({index}) ignored: {len(self._rows)} rows")
            return False
        del self._rows[index]
        self._shift_pending(index)
        logger.debug(f"Removed row {index}")
        self._publish()
        return True

    def set_field(self, index: int, field_name: str, value: Any) -> bool:
        """
        Validate and commit one row field, plus any cascaded fields, as a
        single change. Returns False (state untouched) on rejection.
        """
        if not self._in_range(index):
            logger.debug(f"set_field({index}, {field_name}) ignored: {len(self._rows)} rows")
            return False

        name = normalise_field_name(field_name)
        try:
            coerced = validate_field(name, value)
        except FieldValidationError as e:
            logger.warning(f"Row {index}: rejected {e.field}={value!r} ({e.message})")
            self.pending_errors[(index, name)] = e.to_field_error()
            return False

        updates = {name: coerced}
        for key, derived in cascade_updates(name, coerced, self.catalogue).items():
            try:
                updates[key] = validate_field(key, derived)
            except FieldValidationError as e:
                # Catalogue value the row cannot hold: treat as no match.
                logger.warning(f"Row {index}: catalogue gave {key}={derived!r} ({e.message}); left unset.")
                updates[key] = None

        self._rows[index] = replace(self._rows[index], **updates)
        for key in updates:
            self.pending_errors.pop((index, key), None)
        self._publish()
        return True

    def set_metadata(self, field_name: str, value: Any) -> bool:
        """Set `gfa` or `reference_value`. Returns False on rejection."""
        name = normalise_field_name(field_name)
        try:
            coerced = validate_metadata(name, value)
        except FieldValidationError as e:
            logger.warning(f"Rejected {e.field}={value!r} ({e.message})")
            self.pending_errors[(None, name)] = e.to_field_error()
            return False

        if name == "gfa":
            if coerced <= 0:
                logger.warning(f"GFA is {coerced}; per-GFA figures will not be meaningful.")
            self._gfa = coerced
        else:
            self._reference_value = coerced
        self.pending_errors.pop((None, name), None)
        self._publish()
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _in_range(self, index) -> bool:
        return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(self._rows)

    def _shift_pending(self, removed: int):
        shifted: Dict[PendingKey, FieldError] = {}
        for (idx, name), err in self.pending_errors.items():
            if idx is None or idx < removed:
                shifted[(idx, name)] = err
            elif idx > removed:
                shifted[(idx - 1, name)] = err
        self.pending_errors = shifted


def default_row(catalogue: ReferenceCatalogue) -> Row:
    """A fresh default row: the first global component and the configured defaults."""
    component_id = catalogue.first_global_component_id() or ""
    return Row(component_id=component_id)
