"""Enums and enum helpers shared between inlet-spacing domain models."""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

TEnum = TypeVar("TEnum", bound=Enum)


def coerce_enum(enum_cls: type[TEnum], value: Any, *, default: TEnum) -> TEnum:
    """Return enum member from the provided value, accepting names/values."""

    if value is None or value == "":
        return default
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls[value.strip().upper().replace("-", "_").replace(" ", "_")]
        except KeyError:
            pass
    return enum_cls(value)


class _DescribedStrEnum(str, Enum):
    """Base class for enums whose values are drawing codes with a friendly label."""

    _label_: str

    def __new__(cls, value: str, label: str) -> "_DescribedStrEnum":
        obj: _DescribedStrEnum = str.__new__(cls, value)
        obj._value_ = value
        obj._label_ = label
        return obj

    @property
    def label(self) -> str:
        return self._label_


class StructureType(_DescribedStrEnum):
    """Inlet structure families (LADOTD catch basin standard plans)."""

    UNSET = "", "Not set"
    CURB_OPENING = "CB-06", "Curb opening"
    GRATE = "CB-07", "Grate"
    COMBINATION = "CB-08", "Combination"
    OTHER = "Other", "Other"


class PointKind(str, Enum):
    """Classification of a vertical curve extremum."""

    LOW = "Low Point"
    HIGH = "High Point"


class AnnotationKind(str, Enum):
    """Profile points that are labelled for a renderer."""

    PVI = "PVI"
    BVC = "BVC"
    EVC = "EVC"
    LOW_POINT = "Low Point"
    HIGH_POINT = "High Point"
