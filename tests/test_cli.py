"""End-to-end tests for the command line entry point."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from polelabel import config
from polelabel.__main__ import main

_COLLECTION = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "properties": {"name": "square"},
            "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [10, 0], [10, 10], [0, 10]]]},
        }
    ],
}


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for key in config.ENV_CASTERS:
        monkeypatch.delenv(key, raising=False)


def _write_input(tmp_path: Path) -> Path:
    path = tmp_path / "regions.geojson"
    path.write_text(json.dumps(_COLLECTION), encoding="utf-8")
    return path


def test_main_writes_output_file(tmp_path: Path):
    source = _write_input(tmp_path)
    target = tmp_path / "labels.geojson"

    main([str(source), "--precision", "0.1", "--with-distance", "--output", str(target)])

    data = json.loads(target.read_text(encoding="utf-8"))
    feature = data["features"][0]
    assert feature["properties"]["name"] == "square"
    assert feature["properties"]["distance"] == pytest.approx(5.0, abs=0.1)
    assert feature["geometry"]["coordinates"] == pytest.approx([5.0, 5.0], abs=0.1)


def test_main_prints_to_stdout(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    source = _write_input(tmp_path)

    main([str(source)])

    data = json.loads(capsys.readouterr().out)
    assert data["type"] == "FeatureCollection"
    assert "distance" not in data["features"][0]["properties"]


def test_main_reads_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(_COLLECTION)))

    main(["--precision", "0.5"])

    data = json.loads(capsys.readouterr().out)
    assert len(data["features"]) == 1


def test_main_exits_on_invalid_input(tmp_path: Path):
    source = tmp_path / "bad.json"
    source.write_text(json.dumps([[[0, 0], [1, 1]]]), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main([str(source)])

    assert excinfo.value.code == 1
