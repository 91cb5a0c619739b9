"""
Tests for the fourb command line.
"""

import csv
import json
import math

import pytest

from fourb.main import main
from fourb.utils.config import Config


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("FOURB_CONFIG", str(tmp_path / "config.json"))
    Config._instance = None
    yield
    Config._instance = None


@pytest.fixture
def metrics_file(tmp_path):
    path = tmp_path / "metrics.json"
    path.write_text(json.dumps({
        "pelvis_momentum_peak": 100.0,
        "torso_momentum_peak": 450.0,
        "arms_momentum_peak": 742.5,
        "pelvis_peak_frame": 40,
        "torso_peak_frame": 50,
        "arms_peak_frame": 60,
        "contact_frame": 100,
        "pelvis_decel_pct": 40.0,
        "torso_decel_pct": 50.0,
        "drift_timing": 0.5,
        "bat_direction_std": 8.0,
        "exit_velo_avg": 80.0,
        "exit_velo_max": 88.0,
        "exit_velo_cv": 5.0,
        "barrel_rate": 30.0,
        "hard_hit_rate": 55.0,
        "mishit_rate": 10.0,
    }))
    return path


def _output(capsys):
    return json.loads(capsys.readouterr().out)


class TestScoreCommand:
    """Tests for `fourb score`."""

    def test_score(self, metrics_file, capsys):
        assert main(["score", str(metrics_file)]) == 0
        report = _output(capsys)
        assert report["composite"] == 94
        assert report["grade"] == "Plus-Plus"
        assert report["age_group"] == "13U"

    def test_age_flag(self, metrics_file, capsys):
        assert main(["score", str(metrics_file), "--age", "Pro"]) == 0
        assert _output(capsys)["age_group"] == "Pro"

    def test_missing_file(self, tmp_path, capsys):
        assert main(["score", str(tmp_path / "nope.json")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_missing_field(self, tmp_path, capsys):
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"pelvis_momentum_peak": 1.0}))
        assert main(["score", str(path)]) == 1


class TestFingerprintCommand:
    """Tests for `fourb fingerprint`."""

    def test_fingerprint(self, tmp_path, capsys):
        fields = ["lowertorso_angular_momentum_z", "torso_angular_momentum_z",
                  "arms_angular_momentum_z", "bat_angular_momentum_z",
                  "bat_kinetic_energy", "total_kinetic_energy",
                  "time_from_max_hand", "pelvis_rot", "torso_rot"]
        rows = [dict.fromkeys(fields, 0.0) for _ in range(10)]
        for i, row in enumerate(rows):
            row["time_from_max_hand"] = i - 8
        rows[2]["lowertorso_angular_momentum_z"] = 100.0
        rows[3]["torso_angular_momentum_z"] = 160.0
        rows[4]["arms_angular_momentum_z"] = 200.0
        rows[5]["bat_angular_momentum_z"] = 300.0
        rows[8]["bat_kinetic_energy"] = 50.0
        rows[8]["total_kinetic_energy"] = 100.0
        rows[1]["torso_rot"] = math.radians(55)

        path = tmp_path / "momentum.csv"
        with open(path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fields)
            writer.writeheader()
            writer.writerows(rows)

        assert main(["fingerprint", str(path)]) == 0
        result = _output(capsys)
        assert result["contact_frame"] == 8
        assert result["components"]["sequence_order"]["value"] == "P→T→A→B"
        assert 0 <= result["total"] <= 100

    def test_empty_csv(self, tmp_path, capsys):
        path = tmp_path / "empty.csv"
        path.write_text("")
        assert main(["fingerprint", str(path)]) == 1
        assert "Error" in capsys.readouterr().err


class TestNormalizeCommand:
    """Tests for `fourb normalize`."""

    def test_normalize(self, tmp_path, capsys):
        path = tmp_path / "swings.json"
        path.write_text(json.dumps([
            {"swingId": "a", "speedBarrelMax": 70, "speedHandsMax": 22},
            {"swingId": "b", "speedBarrelMax": 15},
        ]))
        assert main(["normalize", str(path), "--session", "S1"]) == 0
        out = _output(capsys)
        assert out["summary"]["valid"] == 1
        assert out["summary"]["invalid_reasons"] == {"below_speed_threshold": 1}
        assert [s["swing_id"] for s in out["swings"]] == ["a", "b"]

    def test_wrapped_payload(self, tmp_path, capsys):
        path = tmp_path / "swings.json"
        path.write_text(json.dumps({"swings": [{"speedBarrelMax": 70}]}))
        assert main(["normalize", str(path), "--session", "S1"]) == 0
        assert _output(capsys)["summary"]["total"] == 1

    def test_bad_json(self, tmp_path, capsys):
        path = tmp_path / "swings.json"
        path.write_text("[{")
        assert main(["normalize", str(path), "--session", "S1"]) == 1


class TestPrescribeCommand:
    """Tests for `fourb prescribe`."""

    def test_prescribe(self, capsys):
        assert main(["prescribe", "--profile", "whipper",
                     "flag_casting", "flag_drift"]) == 0
        out = _output(capsys)
        slugs = [d["slug"] for d in out["drills"]]
        assert "constraint-rope-drill" not in slugs
        assert slugs == ["wall-drill", "box-step-down-front"]

    def test_default_profile_from_config(self, capsys):
        assert main(["prescribe", "flag_drift"]) == 0
        assert _output(capsys)["profile"] == "SPINNER"
