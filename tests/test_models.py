"""Coverage for the profile, inlet and project models."""

from __future__ import annotations

import pytest

from inlet_spacing import (
    PVI,
    DrainageProject,
    Inlet,
    LowPoint,
    OnGrade,
    ProfileDefinition,
    StructureType,
    ValidationError,
)

from .sample_data import CONFIG_MAPPING, build_sample_project, on_grade_inlet


def test_sample_project_is_valid() -> None:
    project: DrainageProject = build_sample_project()
    assert project.validate() == []
    project.assert_valid()


def test_profile_pvi_editing_shifts_indices() -> None:
    profile = ProfileDefinition(beginning_grade=-1.0, ending_grade=1.0)
    profile.add_pvi(PVI(station=100.0, elevation=10.0))
    profile.add_pvi(PVI(station=200.0, elevation=12.0, curve_length=50.0))
    blank: PVI = profile.add_pvi()

    assert blank.station == 0.0 and blank.curve_length == 0.0
    removed: PVI = profile.remove_pvi(0)
    assert removed.station == 100.0
    assert profile.pvis[0].station == 200.0

    profile.update_pvi(1, station="300", elevation=15.5, curve_length="")
    assert (profile.pvis[1].station, profile.pvis[1].elevation, profile.pvis[1].curve_length) == (300.0, 15.5, 0.0)
    with pytest.raises(ValueError, match="Unknown PVI field"):
        profile.update_pvi(0, grade=2.0)


def test_negative_curve_length_is_reported() -> None:
    profile = ProfileDefinition(pvis=[PVI(station=0.0, elevation=1.0, curve_length=-10.0)])
    errors: list[str] = profile.validate("Profile: ")
    assert errors == ["Profile: PVI #1: Curve length must be >= 0."]
    with pytest.raises(ValidationError, match="Curve length"):
        profile.assert_valid("Profile: ")


def test_profile_round_trips_blank_grades() -> None:
    profile = ProfileDefinition(ending_grade=0.5, pvis=[PVI(station=10.0, elevation=2.0, curve_length=20.0)])
    data = profile.to_dict()
    assert data["beginning_grade"] is None
    restored: ProfileDefinition = ProfileDefinition.from_dict(data)
    assert restored.beginning_grade is None
    assert restored.ending_grade == 0.5
    assert restored.pvis[0].curve_length == 20.0


def test_pvi_from_dict_accepts_length_alias() -> None:
    pvi: PVI = PVI.from_dict({"station": "1000", "elevation": 50, "length": 300})
    assert (pvi.station, pvi.elevation, pvi.curve_length) == (1000.0, 50.0, 300.0)


def test_inlet_defaults_to_on_grade() -> None:
    inlet = Inlet(str_id="A")
    assert not inlet.is_low_point
    assert inlet.mode == OnGrade(interception_ratio=0.0)
    assert inlet.runoff_coefficient == 0.9
    assert inlet.structure_type is StructureType.UNSET


def test_switching_low_point_discards_variant_values() -> None:
    inlet: Inlet = on_grade_inlet("A", ratio=0.6)
    inlet.set_low_point(True)
    assert inlet.mode == LowPoint()

    inlet.set_manual_capacity(intercepted_flow=1.2)
    inlet.set_manual_capacity(flooding_width=5.5)
    assert inlet.mode == LowPoint(intercepted_flow=1.2, flooding_width=5.5)

    inlet.set_low_point(True)
    assert inlet.mode == LowPoint(intercepted_flow=1.2, flooding_width=5.5)

    inlet.set_low_point(False)
    assert inlet.mode == OnGrade()


def test_variant_setters_reject_the_wrong_mode() -> None:
    inlet: Inlet = on_grade_inlet("A")
    with pytest.raises(ValueError, match="on grade"):
        inlet.set_manual_capacity(intercepted_flow=1.0)
    inlet.set_interception_ratio(0.3)
    assert inlet.mode == OnGrade(interception_ratio=0.3)

    inlet.set_low_point(True)
    with pytest.raises(ValueError, match="low point"):
        inlet.set_interception_ratio(0.5)


@pytest.mark.parametrize(
    ("field", "value", "message"),
    [
        ("str_id", "  ", "Structure ID is required."),
        ("area_times_c", -0.1, "Sum of area x C must be >= 0."),
        ("runoff_coefficient", 0.0, "Runoff coefficient must be > 0."),
        ("longest_flow_path", 0.0, "Longest flow path must be > 0."),
        ("flow_path_slope", -1.0, "Flow path slope must be > 0."),
        ("gutter_grade", -0.5, "Gutter grade must be >= 0."),
    ],
)
def test_inlet_validation_messages(field: str, value: object, message: str) -> None:
    inlet: Inlet = on_grade_inlet("A")
    setattr(inlet, field, value)
    assert inlet.validate() == [message]


def test_mode_specific_validation() -> None:
    assert on_grade_inlet("A", ratio=1.5).validate() == ["Interception ratio must be between 0 and 1."]
    sag: Inlet = on_grade_inlet("B")
    sag.mode = LowPoint(intercepted_flow=-1.0, flooding_width=-2.0)
    assert sag.validate() == [
        "Manual intercepted flow must be >= 0.",
        "Manual width of flooding must be >= 0.",
    ]


def test_inlet_serialization_uses_flat_variant_fields() -> None:
    project: DrainageProject = build_sample_project()
    on_grade, sag = (inlet.to_dict() for inlet in project.inlets)

    assert on_grade["low_point"] is False
    assert on_grade["interception_ratio"] == 0.75
    assert "manual_intercepted_flow" not in on_grade
    assert sag["low_point"] is True
    assert sag["manual_flooding_width"] == 6.9
    assert "interception_ratio" not in sag
    assert Inlet.from_dict(sag).mode == LowPoint(intercepted_flow=0.95, flooding_width=6.9)
    assert Inlet.from_dict(on_grade).structure_type is StructureType.CURB_OPENING


def test_structure_type_accepts_names_and_codes() -> None:
    assert Inlet.from_dict({"str_id": "A", "structure_type": "grate"}).structure_type is StructureType.GRATE
    assert Inlet.from_dict({"str_id": "A", "structure_type": "CB-08"}).structure_type is StructureType.COMBINATION
    assert StructureType.COMBINATION.label == "Combination"


def test_project_inlet_management() -> None:
    project = DrainageProject(title="Edits")
    first: Inlet = project.add_inlet()
    second: Inlet = project.add_inlet()
    assert (first.str_id, second.str_id) == ("INLET-1", "INLET-2")

    project.move_inlet(1, 0)
    assert [inlet.str_id for inlet in project.inlets] == ["INLET-2", "INLET-1"]
    assert project.find_inlet("INLET-1") is first
    with pytest.raises(KeyError):
        project.find_inlet("MISSING")

    assert project.remove_inlet(0) is second
    assert project.inlets == [first]


def test_project_validation_collects_nested_errors() -> None:
    project: DrainageProject = build_sample_project()
    project.region = "Region 7"
    project.inlets[1].str_id = "INLET-1"
    project.profile.pvis[1].station = 10000.0

    errors: list[str] = project.validate()
    assert errors[0] == "Unknown rainfall selection 'Region 7' / '10-Year'."
    assert any(error.startswith("Profile: PVI #2") for error in errors)
    assert "Inlet #2 (INLET-1): Structure ID is used by an earlier inlet." in errors
    with pytest.raises(ValidationError):
        project.assert_valid()


def test_project_round_trip_matches_configuration_layout() -> None:
    project: DrainageProject = build_sample_project()
    assert project.to_dict() == CONFIG_MAPPING
    restored: DrainageProject = DrainageProject.from_dict(project.to_dict())
    assert restored.to_dict() == project.to_dict()


def test_describe_is_used_for_repr() -> None:
    project: DrainageProject = build_sample_project()
    assert repr(project) == str(project) == project.describe()
    assert "inlets=2" in project.describe()
    assert "low point" in repr(project.inlets[1])
