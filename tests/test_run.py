import json
from pathlib import Path

from unittest.mock import patch

import numpy as np

from dock_markers.run import main


def test_main_default_layout_prints_text(capsys):
    """With no arguments the built-in dock is printed as text."""
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "marker 96" in out
    assert "  top_left:    (-0.7053, 0.3105, -0.8378)" in out


def test_main_writes_json_from_config(tmp_path: Path, reference_world):
    """Read a config file and write JSON to --out."""
    cfg_path = tmp_path / "dock.json"
    cfg_path.write_text(
        json.dumps(
            {
                "drawing_unit": "mm",
                "markers": [
                    {"id": 43, "edge_size": 100, "drawing_position": [0, 100]},
                    {"id": 44, "edge_size": 100, "drawing_position": [100, 0]},
                    {"id": 96, "edge_size": 100, "drawing_position": [0, 0]},
                ],
                "dock_roll_deg": -25,
                "dock_yaw_deg": -90,
                "dock_position": [-0.7053, 0.3105, -0.8378],
            }
        ),
        encoding="utf-8",
    )
    out_path = tmp_path / "markers.json"
    log_path = tmp_path / "run.log"

    rc = main([
        "--config", str(cfg_path),
        "--format", "json",
        "--out", str(out_path),
        "--log-file", str(log_path),
    ])

    assert rc == 0
    doc = json.loads(out_path.read_text())
    for m in doc["markers"]:
        tl, tr, bl = reference_world[m["id"]]
        assert np.allclose(m["top_left"], tl, atol=1e-3)
        assert np.allclose(m["top_right"], tr, atol=1e-3)
        assert np.allclose(m["bottom_left"], bl, atol=1e-3)
    assert "summary markers=3" in log_path.read_text()


def test_main_overrides(capsys):
    """Command-line options override the configured pose and unit."""
    rc = main(["--roll", "0", "--yaw", "0", "--position", "0", "0", "0", "--unit", "m", "--format", "csv"])
    assert rc == 0
    rows = capsys.readouterr().out.strip().splitlines()
    # marker 43 drawn at (0, 100) with unit m sits 100 m down the dock Z axis
    assert rows[1].split(",")[:4] == ["43", "0.0", "0.0", "100.0"]


def test_main_degree_overrides_match_radians(capsys):
    assert main(["--roll-deg", "-25", "--yaw-deg", "-90", "--format", "json"]) == 0
    by_degrees = json.loads(capsys.readouterr().out)
    assert main(["--format", "json"]) == 0
    default = json.loads(capsys.readouterr().out)
    for a, b in zip(by_degrees["markers"], default["markers"]):
        assert a["id"] == b["id"]
        for corner in ("top_left", "top_right", "bottom_left"):
            assert np.allclose(a[corner], b[corner], atol=1e-12)


def test_main_rejects_both_angle_forms(capsys):
    assert main(["--roll", "0.1", "--roll-deg", "5"]) == 2
    assert capsys.readouterr().out == ""


def test_main_invalid_config_writes_nothing(tmp_path: Path, caplog):
    """An invalid config exits with 2 and never creates the output file."""
    cfg_path = tmp_path / "bad.yaml"
    cfg_path.write_text(
        "drawing_unit: mm\n"
        "markers:\n"
        "  - {id: 43, edge_size: -5, drawing_position: [0, 0]}\n",
        encoding="utf-8",
    )
    out_path = tmp_path / "markers.json"

    rc = main(["--config", str(cfg_path), "--format", "json", "--out", str(out_path)])

    assert rc == 2
    assert not out_path.exists()
    assert "marker 43: edge_size must be > 0" in caplog.text


def test_main_missing_config(tmp_path: Path):
    assert main(["--config", str(tmp_path / "missing.yaml")]) == 2


def test_main_negative_precision_exits_cleanly(tmp_path: Path, caplog):
    """A negative --precision is a usage error and leaves no partial output."""
    out_path = tmp_path / "markers.config"

    rc = main(["--format", "lua", "--out", str(out_path), "--precision", "-1"])

    assert rc == 2
    assert not out_path.exists()
    assert "precision must be a non-negative integer" in caplog.text


def test_main_reads_sys_argv(tmp_path: Path):
    """Invoked without arguments, main parses the process command line."""
    out_path = tmp_path / "markers.csv"
    with patch("sys.argv", ["dock-markers", "--format", "csv", "--out", str(out_path)]):
        assert main() == 0
    rows = out_path.read_text().splitlines()
    assert rows[0].startswith("marker_id,tl_x")
    assert [r.split(",")[0] for r in rows[1:]] == ["43", "44", "96"]
