"""Stormwater inlet records and their on-grade / low-point variants."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Union
from _collections_abc import Mapping

from loguru import logger

from .base import Validatable, float_or_zero
from ..type_helpers import StructureType, coerce_enum


@dataclass(frozen=True, slots=True)
class OnGrade:
    """Inlet on a continuous grade: interception is a fraction of the approaching flow."""

    interception_ratio: float = 0.0


@dataclass(frozen=True, slots=True)
class LowPoint:
    """Inlet at a sag: interception and spread are read from design charts and entered manually."""

    intercepted_flow: float = 0.0
    flooding_width: float = 0.0


InletMode = Union[OnGrade, LowPoint]


@dataclass(slots=True)
class Inlet(Validatable):
    """Raw user inputs for one inlet. Derived values live in `InletResult`."""

    str_id: str
    structure_type: StructureType = StructureType.UNSET
    station: float = 0.0
    area_times_c: float = 0.0
    runoff_coefficient: float = 0.9
    longest_flow_path: float = 0.0
    flow_path_slope: float = 0.0
    gutter_grade: float = 0.0
    mode: InletMode = field(default_factory=OnGrade)

    @property
    def is_low_point(self) -> bool:
        return isinstance(self.mode, LowPoint)

    def describe(self) -> str:
        kind: str = "low point" if self.is_low_point else "on grade"
        return f"Inlet(id={self.str_id}, station={self.station:.3f}, {kind})"

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return self.describe()

    def set_low_point(self, low_point: bool) -> "Inlet":
        """Switch between the on-grade and low-point variants.

        Switching discards the values that only apply to the previous variant.
        """

        if low_point == self.is_low_point:
            return self
        self.mode = LowPoint() if low_point else OnGrade()
        logger.debug("Inlet {inlet} switched to {mode}", inlet=self.str_id, mode=type(self.mode).__name__)
        return self

    def set_interception_ratio(self, ratio: float) -> "Inlet":
        if not isinstance(self.mode, OnGrade):
            raise ValueError(f"Inlet '{self.str_id}' is at a low point; interception ratio does not apply.")
        self.mode = OnGrade(interception_ratio=ratio)
        return self

    def set_manual_capacity(
        self, intercepted_flow: float | None = None, flooding_width: float | None = None
    ) -> "Inlet":
        """Set the chart values of a low-point inlet; omitted values are kept."""

        if not isinstance(self.mode, LowPoint):
            raise ValueError(f"Inlet '{self.str_id}' is on grade; manual capacity applies only at low points.")
        updates: dict[str, float] = {}
        if intercepted_flow is not None:
            updates["intercepted_flow"] = intercepted_flow
        if flooding_width is not None:
            updates["flooding_width"] = flooding_width
        self.mode = replace(self.mode, **updates)
        return self

    def validate(self, prefix: str = "") -> list[str]:
        errors: list[str] = []
        if not self.str_id.strip():
            errors.append(f"{prefix}Structure ID is required.")
        if self.area_times_c < 0:
            errors.append(f"{prefix}Sum of area x C must be >= 0.")
        if self.runoff_coefficient <= 0:
            errors.append(f"{prefix}Runoff coefficient must be > 0.")
        if self.longest_flow_path <= 0:
            errors.append(f"{prefix}Longest flow path must be > 0.")
        if self.flow_path_slope <= 0:
            errors.append(f"{prefix}Flow path slope must be > 0.")
        if self.gutter_grade < 0:
            errors.append(f"{prefix}Gutter grade must be >= 0.")
        if isinstance(self.mode, OnGrade):
            if not 0.0 <= self.mode.interception_ratio <= 1.0:
                errors.append(f"{prefix}Interception ratio must be between 0 and 1.")
        else:
            if self.mode.intercepted_flow < 0:
                errors.append(f"{prefix}Manual intercepted flow must be >= 0.")
            if self.mode.flooding_width < 0:
                errors.append(f"{prefix}Manual width of flooding must be >= 0.")
        return errors

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "str_id": self.str_id,
            "structure_type": self.structure_type.value,
            "station": self.station,
            "area_times_c": self.area_times_c,
            "runoff_coefficient": self.runoff_coefficient,
            "longest_flow_path": self.longest_flow_path,
            "flow_path_slope": self.flow_path_slope,
            "gutter_grade": self.gutter_grade,
            "low_point": self.is_low_point,
        }
        if isinstance(self.mode, LowPoint):
            data["manual_intercepted_flow"] = self.mode.intercepted_flow
            data["manual_flooding_width"] = self.mode.flooding_width
        else:
            data["interception_ratio"] = self.mode.interception_ratio
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Inlet":
        mode: InletMode
        if bool(data.get("low_point", False)):
            mode = LowPoint(
                intercepted_flow=float_or_zero(data.get("manual_intercepted_flow")),
                flooding_width=float_or_zero(data.get("manual_flooding_width")),
            )
        else:
            mode = OnGrade(interception_ratio=float_or_zero(data.get("interception_ratio")))
        return cls(
            str_id=str(data.get("str_id", "")),
            structure_type=coerce_enum(StructureType, data.get("structure_type"), default=StructureType.UNSET),
            station=float_or_zero(data.get("station")),
            area_times_c=float_or_zero(data.get("area_times_c")),
            runoff_coefficient=float_or_zero(data.get("runoff_coefficient", 0.9)),
            longest_flow_path=float_or_zero(data.get("longest_flow_path")),
            flow_path_slope=float_or_zero(data.get("flow_path_slope")),
            gutter_grade=float_or_zero(data.get("gutter_grade")),
            mode=mode,
        )
