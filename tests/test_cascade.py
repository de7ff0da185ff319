from sbcc_estimator.cascade import cascade_updates, on_component_change
from sbcc_estimator.catalogue import ReferenceCatalogue
from sbcc_estimator.state import CalculatorState
from sbcc_estimator.validation import check_row


def test_component_change_sets_category(catalogue):
    assert cascade_updates("component_id", "Rebar", catalogue) == {"green_mark_category": "Steel"}
    assert cascade_updates("component_id", "Timber", catalogue) == {"green_mark_category": None}
    assert cascade_updates("component_id", "Not listed", catalogue) == {"green_mark_category": None}


def test_other_fields_do_not_cascade(catalogue):
    assert cascade_updates("quantity", 5.0, catalogue) == {}
    assert cascade_updates("country_id", "China", catalogue) == {}
    assert cascade_updates("green_mark_category", "Glass", catalogue) == {}


def test_on_component_change_logs(catalogue, caplog):
    with caplog.at_level("INFO", logger="sbcc_estimator.cascade"):
        assert on_component_change("Float glass", catalogue) == "Glass"
    assert "Setting green mark category for Float glass to Glass" in caplog.text


def test_component_change_overwrites_manual_category(state):
    state.set_field(0, "green_mark_category", "Glass")
    assert state.row(0).green_mark_category == "Glass"

    state.set_field(0, "component_id", "Rebar")
    assert state.row(0).green_mark_category == "Steel"

    # A manual category survives until the component changes again.
    state.set_field(0, "green_mark_category", "Concrete")
    state.set_field(0, "quantity", 3)
    assert state.row(0).green_mark_category == "Concrete"


def test_cascade_is_idempotent(state):
    state.set_field(0, "component_id", "Glazed panel")
    first = state.row(0)
    state.set_field(0, "component_id", "Glazed panel")
    assert state.row(0) == first
    assert first.green_mark_category == "Glass"


def test_category_outside_enum_is_left_unset():
    catalogue = ReferenceCatalogue(
        components=[
            {"componentId": "Concrete C30/37", "greenMarkCategory": "Concrete", "a1a3Factor": 100.0},
            {"componentId": "CLT", "greenMarkCategory": "Timber", "a1a3Factor": 110.0},
        ],
        country_components=[],
        ports=[],
        vehicles=[],
        reference_values=[],
    )
    state = CalculatorState.with_default_row(catalogue)
    state.set_field(0, "green_mark_category", "Steel")

    assert state.set_field(0, "component_id", "CLT") is True
    row = state.row(0)
    assert row.component_id == "CLT"
    assert row.green_mark_category is None
    assert check_row(row) == []

    # The row stays valid, so copies of it do too.
    assert state.duplicate(0) == 1
    assert state.append(state.row(1)) == 2
