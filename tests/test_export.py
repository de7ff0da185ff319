import copy
import json
import os

import pytest

from sbcc_estimator.constants import EXPORT_FILENAME
from sbcc_estimator.export import build_artifact, export_output, serialize_output


def test_artifact_shape(sync):
    output = sync.output
    snapshot = copy.deepcopy(output)

    artifact = build_artifact(output)
    assert artifact.filename == EXPORT_FILENAME == "output.sbcc.json"
    assert artifact.media_type == "application/json"

    data = json.loads(artifact.content.decode("utf-8"))
    assert set(data) == {
        "version", "totalEmissions", "embodiedCarbonPerGfa",
        "embodiedCarbonPerGfaComparedToReference", "greenMarkScore", "rows",
    }
    assert data["totalEmissions"] == pytest.approx(output.total_emissions)
    assert data["greenMarkScore"] == output.green_mark_score
    assert len(data["rows"]) == 1
    assert data["rows"][0]["a1a3"] == pytest.approx(2000.0)
    assert data["rows"][0]["a4"] == pytest.approx(100.0)
    assert data["rows"][0]["componentId"] == "Concrete C30/37"

    # Export never touches the output it was given.
    assert output == snapshot


def test_serialization_is_pretty_printed(sync):
    text = serialize_output(sync.output)
    assert text.startswith("{\n  \"version\"")


def test_export_does_not_touch_state(state, sync, tmp_path):
    before = state.parameters()
    count = sync.compute_count
    export_output(sync.output, str(tmp_path))
    assert state.parameters() == before
    assert sync.compute_count == count


def test_export_writes_file(sync, tmp_path):
    path = export_output(sync.output, str(tmp_path / "out"))
    assert os.path.basename(path) == "output.sbcc.json"
    with open(path, encoding="utf-8") as f:
        assert json.load(f) == sync.output.to_dict()


def test_export_falls_back_when_locked(sync, tmp_path, monkeypatch):
    import builtins
    real_open = builtins.open
    target = str(tmp_path / "output.sbcc.json")

    def locked_open(path, *args, **kwargs):
        if str(path) == target:
            raise PermissionError("locked")
        return real_open(path, *args, **kwargs)

    monkeypatch.setattr(builtins, "open", locked_open)
    path = export_output(sync.output, str(tmp_path))
    assert path != target
    assert os.path.basename(path).startswith("output.sbcc_")
    assert path.endswith(".json")
    assert os.path.exists(path)
