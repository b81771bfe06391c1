"""Public API for inlet-spacing."""

from .advisory import AdvisoryDispatcher, AdvisoryError, AdvisoryRequest, InletTypeAdvisor
from .cascade import InletResult, cascade_step, evaluate_inlets, results_dataframe
from .classes_references import InvalidSelectionError, ProfileOrderError, ValidationError
from .config import default_project, load_project_from_json, project_from_mapping
from .models import (
    PVI,
    DrainageProject,
    Inlet,
    InletMode,
    LowPoint,
    OnGrade,
    ProfileDefinition,
)
from .profile_engine import (
    CurveSegment,
    Extremum,
    ProfileDerived,
    ProfilePolyline,
    recompute_profile,
    resolve_segments,
    sample_profile,
)
from .rainfall import RainfallCoefficients, lookup, regions, return_periods
from .report import SummaryReport, assemble_report
from .type_helpers import PointKind, StructureType

__all__: list[str] = [
    "AdvisoryDispatcher",
    "AdvisoryError",
    "AdvisoryRequest",
    "InletTypeAdvisor",
    "InletResult",
    "cascade_step",
    "evaluate_inlets",
    "results_dataframe",
    "InvalidSelectionError",
    "ProfileOrderError",
    "ValidationError",
    "default_project",
    "load_project_from_json",
    "project_from_mapping",
    "PVI",
    "DrainageProject",
    "Inlet",
    "InletMode",
    "LowPoint",
    "OnGrade",
    "ProfileDefinition",
    "CurveSegment",
    "Extremum",
    "ProfileDerived",
    "ProfilePolyline",
    "recompute_profile",
    "resolve_segments",
    "sample_profile",
    "RainfallCoefficients",
    "lookup",
    "regions",
    "return_periods",
    "SummaryReport",
    "assemble_report",
    "PointKind",
    "StructureType",
]
