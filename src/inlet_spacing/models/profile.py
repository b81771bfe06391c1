"""Vertical profile definition: boundary grades and PVI control points."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any
from _collections_abc import Mapping

from loguru import logger

from .base import Validatable, float_or_zero, normalize_mapping, normalize_sequence, optional_float, pvi_list


@dataclass(slots=True)
class PVI(Validatable):
    """Point of vertical intersection with an optional symmetric parabolic curve."""

    station: float = 0.0
    elevation: float = 0.0
    curve_length: float = 0.0

    def describe(self) -> str:
        return f"PVI(station={self.station:.3f}, elevation={self.elevation:.3f}, L={self.curve_length:.3f})"

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return self.describe()

    def validate(self, prefix: str = "") -> list[str]:
        errors: list[str] = []
        if self.curve_length < 0:
            errors.append(f"{prefix}Curve length must be >= 0.")
        return errors

    def to_dict(self) -> dict[str, Any]:
        return {"station": self.station, "elevation": self.elevation, "curve_length": self.curve_length}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PVI":
        return cls(
            station=float_or_zero(data.get("station")),
            elevation=float_or_zero(data.get("elevation")),
            curve_length=float_or_zero(data.get("curve_length", data.get("length"))),
        )


@dataclass(slots=True)
class ProfileDefinition(Validatable):
    """Longitudinal roadway profile.

    Grades are percent. ``None`` marks a grade that has not been entered; the
    geometry engine treats it as 0 for grade inference and uses it to choose the
    fallback line when no PVIs exist. The PVI index is the only identity a PVI
    has, so removing one shifts every later index.
    """

    beginning_grade: float | None = None
    ending_grade: float | None = None
    pvis: list[PVI] = field(default_factory=pvi_list)

    def describe(self) -> str:
        begin: str = "-" if self.beginning_grade is None else f"{self.beginning_grade:.3f}%"
        end: str = "-" if self.ending_grade is None else f"{self.ending_grade:.3f}%"
        return f"ProfileDefinition(begin={begin}, end={end}, pvis={len(self.pvis)})"

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return self.describe()

    def add_pvi(self, pvi: PVI | None = None) -> PVI:
        """Append a PVI (a blank one at station 0 when omitted)."""

        if pvi is None:
            pvi = PVI()
        self.pvis.append(pvi)
        logger.debug("Added {pvi} as PVI #{index}", pvi=pvi.describe(), index=len(self.pvis))
        return pvi

    def remove_pvi(self, index: int) -> PVI:
        """Remove and return the PVI at ``index``; later PVIs shift down by one."""

        removed: PVI = self.pvis.pop(index)
        logger.debug("Removed PVI #{index} ({pvi})", index=index + 1, pvi=removed.describe())
        return removed

    def update_pvi(self, index: int, **values: Any) -> PVI:
        """Edit fields of the PVI at ``index`` in place."""

        pvi: PVI = self.pvis[index]
        allowed: set[str] = {item.name for item in fields(PVI)}
        unknown: set[str] = set(values) - allowed
        if unknown:
            raise ValueError(f"Unknown PVI field(s): {', '.join(sorted(unknown))}")
        for name, value in values.items():
            setattr(pvi, name, float_or_zero(value))
        logger.debug("Updated PVI #{index} to {pvi}", index=index + 1, pvi=pvi.describe())
        return pvi

    def validate(self, prefix: str = "") -> list[str]:
        errors: list[str] = []
        for index, pvi in enumerate(self.pvis, start=1):
            errors.extend(pvi.validate(f"{prefix}PVI #{index}: "))
        for index, (previous, current) in enumerate(zip(self.pvis, self.pvis[1:]), start=2):
            if current.station < previous.station:
                errors.append(
                    f"{prefix}PVI #{index}: station {current.station} precedes PVI #{index - 1} "
                    f"station {previous.station}."
                )
        return errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "beginning_grade": self.beginning_grade,
            "ending_grade": self.ending_grade,
            "pvis": [pvi.to_dict() for pvi in self.pvis],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProfileDefinition":
        return cls(
            beginning_grade=optional_float(data.get("beginning_grade")),
            ending_grade=optional_float(data.get("ending_grade")),
            pvis=[PVI.from_dict(normalize_mapping(raw)) for raw in normalize_sequence(data.get("pvis"))],
        )
