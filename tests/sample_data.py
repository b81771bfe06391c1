"""Shared sample data structures used across tests."""

from __future__ import annotations

import copy
import json

from inlet_spacing import (
    PVI,
    DrainageProject,
    Inlet,
    LowPoint,
    OnGrade,
    ProfileDefinition,
    StructureType,
)
from inlet_spacing.config import DEFAULT_CONFIG

CONFIG_MAPPING: dict[str, object] = copy.deepcopy(DEFAULT_CONFIG)
CONFIG_MAPPING["project"] = {"title": "Sample Project", "region": "Region 1", "return_period": "10-Year"}

CONFIG_JSON: str = json.dumps(CONFIG_MAPPING, indent=2)


def build_sample_project() -> DrainageProject:
    """Construct a DrainageProject that mirrors the fixture configuration."""

    project = DrainageProject(title="Sample Project", region="Region 1", return_period="10-Year")
    project.profile = ProfileDefinition(
        beginning_grade=-1.0,
        ending_grade=-0.4,
        pvis=[
            PVI(station=10200.0, elevation=120.0, curve_length=400.0),
            PVI(station=10600.0, elevation=124.0, curve_length=400.0),
        ],
    )
    project.add_inlet(
        Inlet(
            str_id="INLET-1",
            structure_type=StructureType.CURB_OPENING,
            station=10105.0,
            area_times_c=0.19,
            runoff_coefficient=1.0,
            longest_flow_path=141.42,
            flow_path_slope=0.5,
            gutter_grade=1.0,
            mode=OnGrade(interception_ratio=0.75),
        )
    )
    project.add_inlet(
        Inlet(
            str_id="INLET-2-SAG",
            structure_type=StructureType.COMBINATION,
            station=10200.0,
            area_times_c=0.19,
            runoff_coefficient=0.95,
            longest_flow_path=106.07,
            flow_path_slope=0.5,
            gutter_grade=0.0,
            mode=LowPoint(intercepted_flow=0.95, flooding_width=6.9),
        )
    )
    return project


def on_grade_inlet(str_id: str, *, ratio: float = 0.5, area_times_c: float = 0.25) -> Inlet:
    """Return a complete on-grade inlet with typical inputs."""

    return Inlet(
        str_id=str_id,
        structure_type=StructureType.GRATE,
        station=10000.0,
        area_times_c=area_times_c,
        runoff_coefficient=0.9,
        longest_flow_path=120.0,
        flow_path_slope=1.0,
        gutter_grade=0.8,
        mode=OnGrade(interception_ratio=ratio),
    )
