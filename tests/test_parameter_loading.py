import pandas as pd

from sbcc_estimator import constants
from sbcc_estimator.config import load_excel_config, read_table, write_config_template


def test_param_loading_from_csv(tmp_path):
    path = tmp_path / "project_parameters.csv"
    pd.DataFrame([
        {"Key": "DEFAULT_GFA", "Value": 2500, "Unit": "m2", "Description": ""},
        {"Key": "GREENMARK_ONE_POINT_REDUCTION_PCT", "Value": 12.5, "Unit": "%", "Description": ""},
        {"Key": "EMPTY", "Value": None, "Unit": "-", "Description": "skipped"},
    ]).to_csv(path, index=False)

    config = load_excel_config(str(path))
    print("Keys found:", list(config.keys()))
    assert float(config["DEFAULT_GFA"]) == 2500.0
    assert float(config["GREENMARK_ONE_POINT_REDUCTION_PCT"]) == 12.5
    assert "EMPTY" not in config


def test_missing_config_uses_defaults(tmp_path):
    assert load_excel_config(str(tmp_path / "nope.xlsx")) == {}


def test_config_without_key_value_columns(tmp_path):
    path = tmp_path / "bad.csv"
    pd.DataFrame([{"Name": "DEFAULT_GFA", "Amount": 1}]).to_csv(path, index=False)
    assert load_excel_config(str(path)) == {}


def test_template_round_trips_through_loader(tmp_path):
    path = str(tmp_path / "params" / "project_parameters.xlsx")
    df = write_config_template(path)

    assert list(df.columns) == ["Key", "Value", "Unit", "Description"]
    keys = set(df["Key"])
    assert {"DEFAULT_GFA", "GREENMARK_TWO_POINT_REDUCTION_PCT", "EXPORT_FILENAME"} <= keys
    # Dicts/tuples are code constructs, not parameters.
    assert "PARAMETER_UNITS" not in keys
    assert "UNITS" not in keys
    assert df.set_index("Key").loc["DEFAULT_GFA", "Unit"] == "m2"

    config = load_excel_config(path)
    assert float(config["DEFAULT_GFA"]) == constants.DEFAULT_GFA
    assert config["DEFAULT_COUNTRY_ID"] == constants.DEFAULT_COUNTRY_ID


def test_read_table_by_extension(tmp_path):
    csv_path = tmp_path / "t.csv"
    pd.DataFrame([{"a": 1}]).to_csv(csv_path, index=False)
    assert read_table(str(csv_path))["a"].tolist() == [1]

    xlsx_path = tmp_path / "t.xlsx"
    pd.DataFrame([{"a": 2}]).to_excel(xlsx_path, index=False)
    assert read_table(str(xlsx_path))["a"].tolist() == [2]
