"""
Export of the current Output.

The JSON artifact mirrors Output exactly and is self-contained; nothing in
here reads or writes the calculator state.
"""
import os
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pandas as pd

from .constants import DECIMALS, EXPORT_FILENAME, ROWS_REPORT_FILENAME
from .models import Output

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content: bytes
    media_type: str = "application/json"


def serialize_output(output: Output) -> str:
    return json.dumps(output.to_dict(), indent=2, ensure_ascii=False)


def build_artifact(output: Output, filename: str = EXPORT_FILENAME) -> ExportArtifact:
    return ExportArtifact(filename=filename, content=serialize_output(output).encode("utf-8"))


def _write_bytes(directory: str, filename: str, content: bytes) -> str:
    os.makedirs(directory, exist_ok=True)
    out_file = os.path.join(directory, filename)
    try:
        with open(out_file, "wb") as f:
            f.write(content)
    except PermissionError:
        # Target locked (e.g. open in another program): fall back to a timestamped name.
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        stem, ext = os.path.splitext(filename)
        fallback_file = os.path.join(directory, f"{stem}_{ts}{ext}")
        logger.warning(f"Could not save to {out_file} (File Locked?). Saving to {fallback_file} instead.")
        with open(fallback_file, "wb") as f:
            f.write(content)
        out_file = fallback_file
    return out_file


def write_artifact(artifact: ExportArtifact, directory: str = ".") -> str:
    path = _write_bytes(directory, artifact.filename, artifact.content)
    logger.info(f"Output saved to: {path}")
    return path


def export_output(output: Output, directory: str = ".", filename: str = EXPORT_FILENAME) -> str:
    """Serialise `output` and write it as a single JSON file. Returns the path."""
    return write_artifact(build_artifact(output, filename), directory)


# ============================================================================
# ROWS REPORT (CSV)
# ============================================================================

REPORT_COLUMNS = [
    "Row",
    "Component",
    "Green Mark Category",
    "Mass (t)",
    "A1-A3 (kgCO2e)",
    "A4 (kgCO2e)",
    "Total (kgCO2e)",
]


def rows_dataframe(output: Output, decimals: Optional[int] = DECIMALS) -> pd.DataFrame:
    """Per-row figures as a display table, rounded to `decimals`."""
    records = []
    for i, r in enumerate(output.rows, 1):
        records.append({
            "Row": i,
            "Component": r.component_id,
            "Green Mark Category": r.green_mark_category,
            "Mass (t)": r.mass_t,
            "A1-A3 (kgCO2e)": r.a1a3,
            "A4 (kgCO2e)": r.a4,
            "Total (kgCO2e)": r.a1a3 + r.a4,
        })
    df = pd.DataFrame(records, columns=REPORT_COLUMNS)
    df["Green Mark Category"] = df["Green Mark Category"].fillna("-")
    if decimals is not None:
        numeric_cols = ["Mass (t)", "A1-A3 (kgCO2e)", "A4 (kgCO2e)", "Total (kgCO2e)"]
        df[numeric_cols] = df[numeric_cols].astype(float).round(decimals)
    return df


def export_rows_csv(output: Output, directory: str = ".", filename: str = ROWS_REPORT_FILENAME) -> str:
    content = rows_dataframe(output).to_csv(index=False).encode("utf-8")
    path = _write_bytes(directory, filename, content)
    logger.info(f"Rows report saved to: {path}")
    return path
