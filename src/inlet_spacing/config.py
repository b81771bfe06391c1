"""Helpers for loading `DrainageProject` instances from configuration files."""

from __future__ import annotations

from collections.abc import Mapping, Sequence as ABCSequence
from pathlib import Path
from typing import Any, cast

import json

from .models import PVI, DrainageProject, Inlet, LowPoint, OnGrade, ProfileDefinition
from .models.inlet import InletMode
from .models.base import optional_float
from .rainfall import DEFAULT_REGION, DEFAULT_RETURN_PERIOD, lookup
from .type_helpers import StructureType, coerce_enum

JSONMapping = Mapping[str, Any]

DEFAULT_CONFIG: dict[str, Any] = {
    "project": {"title": "Roadway Inlet Spacing", "region": "Region 1", "return_period": "10-Year"},
    "profile": {
        "beginning_grade": -1.0,
        "ending_grade": -0.4,
        "pvis": [
            {"station": 10200.0, "elevation": 120.0, "curve_length": 400.0},
            {"station": 10600.0, "elevation": 124.0, "curve_length": 400.0},
        ],
    },
    "inlets": [
        {
            "str_id": "INLET-1",
            "structure_type": "CB-06",
            "station": 10105.0,
            "area_times_c": 0.19,
            "runoff_coefficient": 1.0,
            "longest_flow_path": 141.42,
            "flow_path_slope": 0.5,
            "gutter_grade": 1.0,
            "low_point": False,
            "interception_ratio": 0.75,
        },
        {
            "str_id": "INLET-2-SAG",
            "structure_type": "CB-08",
            "station": 10200.0,
            "area_times_c": 0.19,
            "runoff_coefficient": 0.95,
            "longest_flow_path": 106.07,
            "flow_path_slope": 0.5,
            "gutter_grade": 0.0,
            "low_point": True,
            "manual_intercepted_flow": 0.95,
            "manual_flooding_width": 6.9,
        },
    ],
}


def load_project_from_json(path: Path) -> DrainageProject:
    """Read a JSON file from disk and create a `DrainageProject`."""

    raw_data: Any = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw_data, Mapping):
        raise ValueError("Top-level JSON document must be an object.")
    data: JSONMapping = cast(JSONMapping, raw_data)
    return project_from_mapping(data)


def default_project() -> DrainageProject:
    """Return the sample two-inlet design used by the demo command."""

    return project_from_mapping(DEFAULT_CONFIG)


def project_from_mapping(config: JSONMapping) -> DrainageProject:
    """Build a DrainageProject from the parsed configuration mapping."""
    project_section: JSONMapping = _require_mapping(config.get("project", {}), context="Project section")

    project = DrainageProject()
    project.title = str(project_section.get("title", ""))
    project.region = str(project_section.get("region", DEFAULT_REGION))
    project.return_period = str(project_section.get("return_period", DEFAULT_RETURN_PERIOD))
    # Unknown selections are a configuration error, not something to default.
    lookup(project.region, project.return_period)

    project.profile = _parse_profile(_require_mapping(config.get("profile", {}), context="Profile section"))

    for index, entry in enumerate(_require_list(config.get("inlets", []), context="'inlets' section"), start=1):
        inlet_entry: JSONMapping = _require_mapping(entry, context=f"Inlet #{index}")
        project.inlets.append(_parse_inlet(inlet_entry, index=index))
    return project


def _parse_profile(entry: JSONMapping) -> ProfileDefinition:
    """
    Convert the profile section into a ProfileDefinition.

    Blank grades are kept as None ("not entered").
    """
    profile = ProfileDefinition()
    profile.beginning_grade = _optional_number(entry, "beginning_grade", context="profile")
    profile.ending_grade = _optional_number(entry, "ending_grade", context="profile")
    for index, raw in enumerate(_require_list(entry.get("pvis", []), context="Profile 'pvis'"), start=1):
        pvi_entry: JSONMapping = _require_mapping(raw, context=f"PVI #{index}")
        context: str = f"PVI #{index}"
        profile.pvis.append(
            PVI(
                station=_number(pvi_entry, "station", context=context),
                elevation=_number(pvi_entry, "elevation", context=context),
                curve_length=_number(pvi_entry, "curve_length", context=context, default=0.0),
            )
        )
    return profile


def _parse_inlet(entry: JSONMapping, *, index: int) -> Inlet:
    """
    Create an Inlet from a serialized dictionary entry.

    ``low_point`` selects which fields are read: the manual chart values at a
    sag, the interception ratio on grade. Fields for the other variant are rejected.
    """
    str_id: str = str(entry.get("str_id") or f"INLET-{index}")
    context: str = f"inlet '{str_id}'"
    low_point: Any = entry.get("low_point", False)
    if not isinstance(low_point, bool):
        raise ValueError(f"Field 'low_point' in {context} must be true or false")

    mode: InletMode
    if low_point:
        if "interception_ratio" in entry and entry["interception_ratio"] not in (None, ""):
            raise ValueError(f"Interception ratio does not apply to low-point {context}; use manual values.")
        mode = LowPoint(
            intercepted_flow=_number(entry, "manual_intercepted_flow", context=context, default=0.0),
            flooding_width=_number(entry, "manual_flooding_width", context=context, default=0.0),
        )
    else:
        manual: set[str] = {
            key for key in ("manual_intercepted_flow", "manual_flooding_width") if entry.get(key) not in (None, "")
        }
        if manual:
            raise ValueError(f"Fields ({', '.join(sorted(manual))}) apply only when {context} is at a low point.")
        mode = OnGrade(interception_ratio=_number(entry, "interception_ratio", context=context, default=0.0))

    try:
        structure_type: StructureType = coerce_enum(
            StructureType, entry.get("structure_type"), default=StructureType.UNSET
        )
    except ValueError as exc:
        raise ValueError(f"Unsupported structure type '{entry.get('structure_type')}' in {context}") from exc

    return Inlet(
        str_id=str_id,
        structure_type=structure_type,
        station=_number(entry, "station", context=context, default=0.0),
        area_times_c=_number(entry, "area_times_c", context=context, default=0.0),
        runoff_coefficient=_number(entry, "runoff_coefficient", context=context, default=0.9),
        longest_flow_path=_number(entry, "longest_flow_path", context=context, default=0.0),
        flow_path_slope=_number(entry, "flow_path_slope", context=context, default=0.0),
        gutter_grade=_number(entry, "gutter_grade", context=context, default=0.0),
        mode=mode,
    )


def _require_mapping(value: Any, *, context: str) -> JSONMapping:
    if not isinstance(value, Mapping):
        raise ValueError(f"{context} must be an object.")
    return cast(JSONMapping, value)


def _require_list(value: Any, *, context: str) -> list[Any]:
    if not isinstance(value, ABCSequence) or isinstance(value, (str, bytes)):
        raise ValueError(f"{context} must be a list")
    return list(cast(ABCSequence[Any], value))


def _optional_number(entry: JSONMapping, key: str, *, context: str) -> float | None:
    raw: Any = entry.get(key)
    if raw is None or raw == "":
        return None
    value: float | None = optional_float(raw)
    if value is None:
        raise ValueError(f"Field '{key}' in {context} must be a number")
    return value


def _number(entry: JSONMapping, key: str, *, context: str, default: float | None = None) -> float:
    """Fetch a numeric field; a missing field uses ``default`` or raises when there is none."""
    value: float | None = _optional_number(entry, key, context=context)
    if value is not None:
        return value
    if default is None:
        raise ValueError(f"Missing required field '{key}' in {context}")
    return default
