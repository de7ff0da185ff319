import pytest

from sbcc_estimator.models import Row
from sbcc_estimator.state import CalculatorState, default_row
from sbcc_estimator.validation import FieldValidationError


def test_default_state(state):
    assert len(state) == 1
    row = state.row(0)
    assert row == Row(component_id="Concrete C30/37")
    assert row.country_id == "Singapore"
    assert row.quantity == 20.0
    assert row.units == "tonne"
    assert row.marine_vehicle_id == "Bulk carrier"
    assert row.international_road_vehicle_id == "Very heavy goods vehicle"
    assert row.international_road_distance == 0.0
    assert row.local_road_vehicle_id == "Heavy goods vehicle"
    assert row.local_road_distance == 50.0
    assert row.green_mark_category is None
    assert row.manual_marine_distance is None
    assert state.gfa == 1000.0
    assert state.reference_value == 1000.0


def test_append_default_and_raw(state):
    calls = []
    state.subscribe(lambda s: calls.append(len(s)))

    assert state.append() == 1
    assert state.row(1) == default_row(state.catalogue)

    assert state.append({"componentId": "Rebar", "quantity": "5", "units": "kg"}) == 2
    assert state.row(2).quantity == 5.0
    assert state.row(2).units == "kg"
    assert calls == [2, 3]


def test_append_rejected_row_leaves_state(state):
    calls = []
    state.subscribe(lambda s: calls.append(1))
    assert state.append({"componentId": "Rebar", "quantity": "lots"}) is None
    assert state.append(Row(component_id="Rebar", units="lb")) is None
    assert len(state) == 1
    assert calls == []
    assert (None, "quantity") in state.pending_errors
    assert (None, "units") in state.pending_errors


def test_duplicate_is_equal_but_independent(state):
    state.set_field(0, "quantity", 7)
    idx = state.duplicate(0)
    assert idx == 1
    assert state.row(1) == state.row(0)

    state.set_field(1, "quantity", 99)
    assert state.row(0).quantity == 7.0
    assert state.row(1).quantity == 99.0


def test_out_of_range_is_noop(state):
    calls = []
    state.subscribe(lambda s: calls.append(1))
    before = state.rows

    assert state.duplicate(5) is None
    assert state.duplicate(-1) is None
    assert state.remove(1) is False
    assert state.remove(-1) is False
    assert state.set_field(3, "quantity", 1) is False
    assert state.row(9) is None

    assert state.rows == before
    assert calls == []


def test_remove_shifts_rows_and_pending(state):
    state.append({"componentId": "Rebar"})
    state.append({"componentId": "Timber"})
    state.set_field(2, "quantity", "oops")
    assert (2, "quantity") in state.pending_errors

    assert state.remove(0) is True
    assert [r.component_id for r in state.rows] == ["Rebar", "Timber"]
    assert (1, "quantity") in state.pending_errors
    assert (2, "quantity") not in state.pending_errors


def test_remove_last_row_allowed(state):
    assert state.remove(0) is True
    assert len(state) == 0
    assert state.rows == ()


def test_set_field_rejects_without_mutation(state):
    calls = []
    state.subscribe(lambda s: calls.append(1))
    before = state.row(0)

    assert state.set_field(0, "quantity", "-4") is False
    assert state.set_field(0, "units", "lb") is False
    assert state.set_field(0, "colour", "red") is False

    assert state.row(0) == before
    assert calls == []
    err = state.pending_errors[(0, "quantity")]
    assert err.value == "-4"
    assert (0, "colour") in state.pending_errors


def test_accepted_value_clears_pending(state):
    state.set_field(0, "local_road_distance", "far")
    assert (0, "local_road_distance") in state.pending_errors
    assert state.set_field(0, "local_road_distance", "25") is True
    assert state.row(0).local_road_distance == 25.0
    assert (0, "local_road_distance") not in state.pending_errors


def test_camel_case_field_names(state):
    assert state.set_field(0, "localRoadDistance", 10) is True
    assert state.row(0).local_road_distance == 10.0


def test_component_change_cascades_in_one_commit(state):
    seen = []
    state.subscribe(lambda s: seen.append((s.row(0).component_id, s.row(0).green_mark_category)))

    state.set_field(0, "component_id", "Rebar")
    # Subscribers never see the new component with the old category.
    assert seen == [("Rebar", "Steel")]


def test_metadata(state):
    calls = []
    state.subscribe(lambda s: calls.append((s.gfa, s.reference_value)))

    assert state.set_metadata("gfa", "2500") is True
    assert state.set_metadata("referenceValue", 800) is True
    assert calls == [(2500.0, 1000.0), (2500.0, 800.0)]

    assert state.set_metadata("gfa", "wide") is False
    assert state.gfa == 2500.0
    assert (None, "gfa") in state.pending_errors

    # Non-positive GFA is accepted (with a warning).
    assert state.set_metadata("gfa", 0) is True
    assert state.gfa == 0.0
    assert (None, "gfa") not in state.pending_errors


def test_unsubscribe(state):
    calls = []
    cb = state.subscribe(lambda s: calls.append(1))
    state.append()
    state.unsubscribe(cb)
    state.append()
    assert calls == [1]


def test_parameters_snapshot_is_immutable(state):
    params = state.parameters()
    state.append()
    assert len(params.rows) == 1
    assert len(state.parameters().rows) == 2
    assert params != state.parameters()


def test_explicit_reference_value(catalogue):
    s = CalculatorState(catalogue, reference_value=500)
    assert s.reference_value == 500.0
    assert len(s) == 0


def test_append_remove_sequence_bounds(catalogue):
    s = CalculatorState(catalogue)
    appends = 0
    for op in ["a", "r", "r", "a", "a", "r", "a", "r", "r", "r", "a"]:
        if op == "a":
            s.append()
            appends += 1
        else:
            s.remove(0)
        assert 0 <= len(s) <= appends
    assert len(s) == 1


def test_constructor_rejects_invalid_rows(catalogue):
    with pytest.raises(FieldValidationError) as exc:
        CalculatorState(catalogue, rows=[Row(component_id="Rebar"), Row(component_id="Rebar", quantity=-2)])
    assert exc.value.field == "quantity"
    assert "row 1" in exc.value.message

    s = CalculatorState(catalogue, rows=[Row(component_id="Rebar")])
    assert len(s) == 1
