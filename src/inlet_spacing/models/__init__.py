"""
Domain models that describe a roadway drainage design.

These data classes hold the raw user inputs (profile control points, inlet
records and the rainfall selection). Derived values are produced by the
profile and cascade engines and never stored on the models.
"""

from __future__ import annotations

from .base import Validatable
from .profile import PVI, ProfileDefinition
from .inlet import Inlet, InletMode, LowPoint, OnGrade
from .project import DrainageProject

__all__: list[str] = [
    "Validatable",
    "PVI",
    "ProfileDefinition",
    "Inlet",
    "InletMode",
    "LowPoint",
    "OnGrade",
    "DrainageProject",
]
