import pandas as pd
import pytest

from sbcc_estimator.export import REPORT_COLUMNS, export_rows_csv, rows_dataframe


def test_rows_dataframe(state, sync):
    state.append({"componentId": "Timber", "quantity": "1.23456"})
    df = rows_dataframe(sync.output)
    print(df)

    assert list(df.columns) == REPORT_COLUMNS
    assert list(df["Row"]) == [1, 2]
    assert list(df["Component"]) == ["Concrete C30/37", "Timber"]
    # Missing categories are shown as '-'
    assert list(df["Green Mark Category"]) == ["-", "-"]
    assert df.loc[0, "Total (kgCO2e)"] == pytest.approx(2100.0)
    assert df.loc[1, "Mass (t)"] == 1.23


def test_rows_dataframe_keeps_precision_when_asked(state, sync):
    state.set_field(0, "quantity", "1.23456")
    df = rows_dataframe(sync.output, decimals=None)
    assert df.loc[0, "Mass (t)"] == pytest.approx(1.23456)


def test_rows_dataframe_empty(state, sync):
    state.remove(0)
    df = rows_dataframe(sync.output)
    assert df.empty
    assert list(df.columns) == REPORT_COLUMNS


def test_export_rows_csv(state, sync, tmp_path):
    state.set_field(0, "component_id", "Rebar")
    path = export_rows_csv(sync.output, str(tmp_path))
    df = pd.read_csv(path)
    assert list(df.columns) == REPORT_COLUMNS
    assert df.loc[0, "Green Mark Category"] == "Steel"
