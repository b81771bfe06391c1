"""End-to-end coverage for loading JSON configurations into projects."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from inlet_spacing import InvalidSelectionError, LowPoint, OnGrade, StructureType
from inlet_spacing.config import DEFAULT_CONFIG, default_project, load_project_from_json, project_from_mapping
from inlet_spacing.models import DrainageProject

from .sample_data import CONFIG_JSON, CONFIG_MAPPING


def _mapping(**inlet_overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = copy.deepcopy(CONFIG_MAPPING)
    data["inlets"][0].update(inlet_overrides)
    return data


def test_build_from_json_config(tmp_path: Path) -> None:
    config_path: Path = tmp_path / "project.json"
    config_path.write_text(data=CONFIG_JSON, encoding="utf-8")

    project: DrainageProject = load_project_from_json(path=config_path)

    assert project.title == "Sample Project"
    assert (project.region, project.return_period) == ("Region 1", "10-Year")
    assert project.profile.beginning_grade == -1.0
    assert [pvi.station for pvi in project.profile.pvis] == [10200.0, 10600.0]
    first, sag = project.inlets
    assert first.structure_type is StructureType.CURB_OPENING
    assert first.mode == OnGrade(interception_ratio=0.75)
    assert sag.mode == LowPoint(intercepted_flow=0.95, flooding_width=6.9)
    assert project.validate() == []


def test_default_project_is_the_demo_dataset() -> None:
    project: DrainageProject = default_project()
    assert project.title == "Roadway Inlet Spacing"
    assert project.to_dict() == DEFAULT_CONFIG


def test_top_level_must_be_an_object(tmp_path: Path) -> None:
    config_path: Path = tmp_path / "list.json"
    config_path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError, match="must be an object"):
        load_project_from_json(config_path)


def test_sections_default_when_absent() -> None:
    project: DrainageProject = project_from_mapping({})
    assert project.title == ""
    assert (project.region, project.return_period) == ("Region 1", "10-Year")
    assert project.profile.beginning_grade is None
    assert project.profile.pvis == []
    assert project.inlets == []


def test_unknown_rainfall_selection_is_rejected() -> None:
    data: dict[str, Any] = copy.deepcopy(CONFIG_MAPPING)
    data["project"]["return_period"] = "500-Year"
    with pytest.raises(InvalidSelectionError, match="500-Year"):
        project_from_mapping(data)


def test_blank_grades_stay_unentered() -> None:
    data: dict[str, Any] = copy.deepcopy(CONFIG_MAPPING)
    data["profile"] = {"beginning_grade": "", "pvis": [{"station": 100, "elevation": 5}]}
    project: DrainageProject = project_from_mapping(data)
    assert project.profile.beginning_grade is None
    assert project.profile.ending_grade is None
    assert project.profile.pvis[0].curve_length == 0.0


def test_pvi_requires_station_and_elevation() -> None:
    data: dict[str, Any] = copy.deepcopy(CONFIG_MAPPING)
    data["profile"]["pvis"] = [{"station": 100}]
    with pytest.raises(ValueError, match="Missing required field 'elevation' in PVI #1"):
        project_from_mapping(data)


def test_non_numeric_fields_are_rejected() -> None:
    with pytest.raises(ValueError, match="Field 'station' in inlet 'INLET-1' must be a number"):
        project_from_mapping(_mapping(station="upstream"))


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"low_point": "yes"}, "must be true or false"),
        ({"low_point": True}, "Interception ratio does not apply"),
        ({"manual_flooding_width": 5.0}, "apply only when"),
        ({"structure_type": "CB-99"}, "Unsupported structure type 'CB-99'"),
    ],
)
def test_inlet_variant_fields_are_checked(overrides: dict[str, Any], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        project_from_mapping(_mapping(**overrides))


def test_missing_ids_are_numbered_by_position() -> None:
    data: dict[str, Any] = copy.deepcopy(CONFIG_MAPPING)
    data["inlets"] = [{}, {"str_id": "", "low_point": True}]
    project: DrainageProject = project_from_mapping(data)

    assert [inlet.str_id for inlet in project.inlets] == ["INLET-1", "INLET-2"]
    assert project.inlets[0].mode == OnGrade()
    assert project.inlets[0].runoff_coefficient == 0.9
    assert project.inlets[1].mode == LowPoint()


def test_inlets_must_be_a_list() -> None:
    data: dict[str, Any] = copy.deepcopy(CONFIG_MAPPING)
    data["inlets"] = {"str_id": "A"}
    with pytest.raises(ValueError, match="'inlets' section must be a list"):
        project_from_mapping(data)


def test_json_round_trip_through_project(tmp_path: Path) -> None:
    project: DrainageProject = project_from_mapping(CONFIG_MAPPING)
    config_path: Path = tmp_path / "round_trip.json"
    config_path.write_text(json.dumps(project.to_dict()), encoding="utf-8")
    assert load_project_from_json(config_path).to_dict() == CONFIG_MAPPING
