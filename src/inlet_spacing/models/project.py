"""Drainage project container: rainfall selection, profile and ordered inlets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, TYPE_CHECKING, cast

from loguru import logger

from .base import Validatable, inlet_list, normalize_mapping, normalize_sequence
from .inlet import Inlet
from .profile import ProfileDefinition
from ..rainfall import DEFAULT_REGION, DEFAULT_RETURN_PERIOD, find_coefficients

if TYPE_CHECKING:
    from ..cascade import InletResult
    from ..profile_engine import ProfileDerived


@dataclass(slots=True)
class DrainageProject(Validatable):
    """A roadway profile with the inlets that drain it.

    The order of `inlets` is the flow-cascade order: bypass from each inlet feeds
    the next one in the list.
    """

    title: str = ""
    region: str = DEFAULT_REGION
    return_period: str = DEFAULT_RETURN_PERIOD
    profile: ProfileDefinition = field(default_factory=ProfileDefinition)
    inlets: list[Inlet] = field(default_factory=inlet_list)

    def describe(self) -> str:
        return (
            f"DrainageProject(title={self.title or '<untitled>'}, rainfall={self.region}/{self.return_period}, "
            f"pvis={len(self.profile.pvis)}, inlets={len(self.inlets)})"
        )

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return self.describe()

    def validate(self, prefix: str = "") -> list[str]:
        errors: list[str] = []
        if find_coefficients(self.region, self.return_period) is None:
            errors.append(f"{prefix}Unknown rainfall selection '{self.region}' / '{self.return_period}'.")
        errors.extend(self.profile.validate(f"{prefix}Profile: "))
        seen: set[str] = set()
        for index, inlet in enumerate(self.inlets, start=1):
            inlet_prefix: str = f"{prefix}Inlet #{index} ({inlet.str_id}): "
            errors.extend(inlet.validate(inlet_prefix))
            if inlet.str_id in seen:
                errors.append(f"{inlet_prefix}Structure ID is used by an earlier inlet.")
            seen.add(inlet.str_id)
        return errors

    def add_inlet(self, inlet: Inlet | None = None) -> Inlet:
        """Append an inlet at the downstream end (a blank `INLET-<n>` when omitted)."""

        if inlet is None:
            inlet = Inlet(str_id=f"INLET-{len(self.inlets) + 1}")
        self.inlets.append(inlet)
        logger.debug(
            "Added inlet {inlet} to project {project}", inlet=inlet.str_id, project=self.title or "<untitled>"
        )
        return inlet

    def remove_inlet(self, index: int) -> Inlet:
        removed: Inlet = self.inlets.pop(index)
        logger.debug("Removed inlet #{index} ({inlet})", index=index + 1, inlet=removed.str_id)
        return removed

    def move_inlet(self, source: int, destination: int) -> None:
        """Move an inlet to a new position in the cascade."""

        inlet: Inlet = self.inlets.pop(source)
        self.inlets.insert(destination, inlet)
        logger.debug(
            "Moved inlet {inlet} from #{source} to #{destination}",
            inlet=inlet.str_id,
            source=source + 1,
            destination=destination + 1,
        )

    def find_inlet(self, str_id: str) -> Inlet:
        for inlet in self.inlets:
            if inlet.str_id == str_id:
                return inlet
        raise KeyError(f"No inlet with structure ID '{str_id}'.")

    def recompute_profile(self) -> "ProfileDerived":
        """Return freshly derived profile geometry."""
        from ..profile_engine import recompute_profile

        return recompute_profile(self.profile)

    def evaluate_inlets(self) -> "list[InletResult]":
        """Return freshly computed hydraulics for every inlet, in cascade order."""
        from ..cascade import evaluate_inlets

        return evaluate_inlets(self.inlets, self.region, self.return_period)

    def to_dict(self) -> dict[str, Any]:
        return {
            "project": {"title": self.title, "region": self.region, "return_period": self.return_period},
            "profile": self.profile.to_dict(),
            "inlets": [inlet.to_dict() for inlet in self.inlets],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DrainageProject":
        header: Mapping[str, Any] = normalize_mapping(data.get("project"))
        return cls(
            title=str(header.get("title", "")),
            region=str(header.get("region", DEFAULT_REGION)),
            return_period=str(header.get("return_period", DEFAULT_RETURN_PERIOD)),
            profile=ProfileDefinition.from_dict(normalize_mapping(data.get("profile"))),
            inlets=[
                Inlet.from_dict(cast(Mapping[str, Any], raw))
                for raw in normalize_sequence(data.get("inlets"))
                if isinstance(raw, Mapping)
            ],
        )
