"""CLI-level tests."""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from inlet_spacing import DrainageProject
from inlet_spacing import advisory, cli
from inlet_spacing.config import DEFAULT_CONFIG, load_project_from_json

from .sample_data import CONFIG_JSON


def _write_config(tmp_path: Path, text: str = CONFIG_JSON) -> Path:
    config_path: Path = tmp_path / "project.json"
    config_path.write_text(text, encoding="utf-8")
    return config_path


def test_validate_only_mode(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_path: Path = _write_config(tmp_path)
    csv_path: Path = tmp_path / "results.csv"

    exit_code: int = cli.main(["evaluate", "--config", str(config_path), "--csv", str(csv_path), "--validate-only"])
    assert exit_code == 0
    assert capsys.readouterr().out.strip() == f"{config_path} is valid."
    assert not csv_path.exists()

    # Sanity-check that the configuration can still be evaluated when needed.
    project: DrainageProject = load_project_from_json(path=config_path)
    assert len(project.evaluate_inlets()) == 2


def test_evaluate_prints_report_and_writes_csv(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_path: Path = _write_config(tmp_path)
    csv_path: Path = tmp_path / "results.csv"
    profile_csv_path: Path = tmp_path / "profile.csv"

    exit_code: int = cli.main(
        [
            "evaluate",
            "--config",
            str(config_path),
            "--csv",
            str(csv_path),
            "--profile-csv",
            str(profile_csv_path),
        ]
    )
    assert exit_code == 0
    out: str = capsys.readouterr().out
    assert "Inlet Calculation Summary" in out
    assert "Low Point: Sta 10200.00, Elev 121.00" in out

    results = pd.read_csv(csv_path, index_col="inlet")
    assert list(results["str_id"]) == ["INLET-1", "INLET-2-SAG"]
    profile = pd.read_csv(profile_csv_path)
    assert list(profile.columns) == ["station", "elevation"]
    assert len(profile) == 241


def test_invalid_configuration_exits(tmp_path: Path) -> None:
    data = json.loads(CONFIG_JSON)
    data["inlets"][0]["interception_ratio"] = 2.0
    config_path: Path = _write_config(tmp_path, json.dumps(data))

    with pytest.raises(SystemExit, match="Interception ratio must be between 0 and 1"):
        cli.main(["evaluate", "--config", str(config_path)])


def test_unsupported_extension_exits(tmp_path: Path) -> None:
    config_path: Path = tmp_path / "project.yaml"
    config_path.write_text("project: {}", encoding="utf-8")
    with pytest.raises(SystemExit, match="Use .json"):
        cli.main(["evaluate", "--config", str(config_path)])


def test_demo_writes_default_configuration(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    output: Path = tmp_path / "inlets.json"

    assert cli.main(["demo", "--output", str(output)]) == 0
    assert json.loads(output.read_text(encoding="utf-8")) == DEFAULT_CONFIG
    assert "Wrote demo configuration" in capsys.readouterr().out

    with pytest.raises(SystemExit, match="already exists"):
        cli.main(["demo", "--output", str(output)])
    assert cli.main(["demo", "--output", str(output), "--overwrite"]) == 0


def test_suggest_without_key_prints_configuration_hint(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(advisory, "resolve_api_key", lambda: None)
    config_path: Path = _write_config(tmp_path)

    assert cli.main(["suggest", "--config", str(config_path), "--inlet", "INLET-2-SAG"]) == 0
    assert "Advisory API key is not configured" in capsys.readouterr().out


def test_suggest_unknown_inlet_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(advisory, "resolve_api_key", lambda: None)
    config_path: Path = _write_config(tmp_path)
    with pytest.raises(SystemExit, match="No inlet with structure ID 'MISSING'"):
        cli.main(["suggest", "--config", str(config_path), "--inlet", "MISSING"])
