import os
import pandas as pd
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)

# Parameters file is looked up relative to the working directory unless
# SBCC_CONFIG_PATH points somewhere else.
DEFAULT_CONFIG_PATH = os.environ.get(
    "SBCC_CONFIG_PATH",
    os.path.join(os.getcwd(), "data", "parameters_config", "project_parameters.xlsx"),
)


def read_table(path: str) -> pd.DataFrame:
    """
    Read a tabular file into a DataFrame, choosing the reader by extension.
    .csv -> read_csv, anything else -> read_excel.
    """
    if path.lower().endswith(".csv"):
        return pd.read_csv(path)
    return pd.read_excel(path)


def load_excel_config(path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load configuration from an Excel (or CSV) file.
    Expected columns: Key, Value, Unit, Description
    Returns a dictionary of Key -> Value
    """
    config = {}
    if not os.path.exists(path):
        logger.debug(f"Config file not found at {path}. Using defaults.")
        return config

    try:
        df = read_table(path)
        if "Key" in df.columns and "Value" in df.columns:
            for _, row in df.iterrows():
                key = str(row["Key"]).strip()
                val = row["Value"]
                if pd.isna(val):
                    continue
                config[key] = val
            logger.info(f"Loaded {len(config)} parameters from {path}")
        else:
            logger.warning(f"Config file {path} missing 'Key' or 'Value' columns.")
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config from {path}: {e}")

    return config


def write_config_template(path: str) -> pd.DataFrame:
    """
    Dump the current scalar constants to a Key/Value/Unit/Description table.
    The result can be edited and pointed at via SBCC_CONFIG_PATH.
    """
    from . import constants

    data = []
    for name in dir(constants):
        if name.startswith("_"):
            continue
        val = getattr(constants, name)
        if name.isupper() and isinstance(val, (int, float, str, bool)):
            data.append({
                "Key": name,
                "Value": val,
                "Unit": constants.PARAMETER_UNITS.get(name, "-"),
                "Description": "Exported from sbcc_estimator.constants",
            })

    df = pd.DataFrame(data, columns=["Key", "Value", "Unit", "Description"])

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    if path.lower().endswith(".csv"):
        df.to_csv(path, index=False)
    else:
        df.to_excel(path, index=False)
    logger.info(f"Wrote {len(df)} parameters to {path}")
    return df
