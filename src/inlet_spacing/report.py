"""Plain-text and tabular summaries of a drainage design."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from loguru import logger

from .cascade import InletResult
from .models import DrainageProject, Inlet
from .profile_engine import Extremum, ProfileDerived

if TYPE_CHECKING:
    import pandas as pd

INLET_TABLE_COLUMNS: list[str] = [
    "Inlet #",
    "ID",
    "Type",
    "Sta",
    "ΣAC",
    "HL (ft)",
    "S Path (%)",
    "Gutter S (%)",
    "TC (min)",
    "Intensity (in/hr)",
    "Q Enter (cfs)",
    "Q Bypass Prev (cfs)",
    "Q Total (cfs)",
    "Qi (cfs)",
    "Q Bypass Curr (cfs)",
    "Spread (ft)",
]


def _fmt(value: float | None, fixed: int = 2) -> str:
    if value is None:
        return "-"
    return f"{value:.{fixed}f}"


def _string_list() -> list[str]:
    return []


def _row_list() -> list[dict[str, object]]:
    return []


@dataclass(slots=True)
class SummaryReport:
    """Read-only summary of the profile, rainfall selection and inlet cascade."""

    title: str
    region: str
    return_period: str
    profile_lines: list[str] = field(default_factory=_string_list)
    inlet_rows: list[dict[str, object]] = field(default_factory=_row_list)
    narrative: list[str] = field(default_factory=_string_list)

    def inlet_table(self) -> "pd.DataFrame":
        """Return the inlet calculation summary as a pandas DataFrame."""
        import pandas as pd

        return pd.DataFrame(self.inlet_rows, columns=INLET_TABLE_COLUMNS)

    def to_text(self) -> str:
        lines: list[str] = []
        if self.title:
            lines.extend([self.title, "=" * len(self.title), ""])
        lines.append("Profile Definition Summary")
        lines.extend(f"  {line}" for line in self.profile_lines)
        lines.append("")
        lines.append("Rainfall Parameters")
        lines.append(f"  Rainfall Region: {self.region}")
        lines.append(f"  Return Period: {self.return_period}")
        lines.append("")
        lines.append("Inlet Calculation Summary")
        if self.inlet_rows:
            table: str = self.inlet_table().to_string(index=False, float_format=lambda value: f"{value:.2f}")
            lines.extend(f"  {line}" for line in table.splitlines())
        else:
            lines.append("  No inlets defined.")
        if self.narrative:
            lines.append("")
            lines.append("Narrative")
            lines.extend(f"  {line}" for line in self.narrative)
        return "\n".join(lines)


def _profile_lines(project: DrainageProject, derived: ProfileDerived | None) -> list[str]:
    profile = project.profile
    lines: list[str] = [
        f"Beginning Grade: {_fmt(profile.beginning_grade)} %",
        f"Ending Grade: {_fmt(profile.ending_grade)} %",
    ]
    if not profile.pvis:
        lines.append("No PVI points defined.")
        return lines
    lines.append("PVI Points:")
    for index, pvi in enumerate(profile.pvis, start=1):
        lines.append(
            f"  PVI {index}: Sta {pvi.station:g}, Elev {_fmt(pvi.elevation)}, Curve Len {_fmt(pvi.curve_length)} ft"
        )
    if derived is not None:
        extrema: list[Extremum] = derived.extrema()
        for extremum in extrema:
            lines.append(f"{extremum.kind.value}: Sta {_fmt(extremum.station)}, Elev {_fmt(extremum.elevation)}")
    return lines


def _inlet_row(index: int, inlet: Inlet, result: InletResult) -> dict[str, object]:
    return {
        "Inlet #": index,
        "ID": inlet.str_id,
        "Type": inlet.structure_type.value or "-",
        "Sta": inlet.station,
        "ΣAC": inlet.area_times_c,
        "HL (ft)": inlet.longest_flow_path,
        "S Path (%)": inlet.flow_path_slope,
        "Gutter S (%)": inlet.gutter_grade,
        "TC (min)": result.time_of_concentration,
        "Intensity (in/hr)": result.intensity,
        "Q Enter (cfs)": result.q_from_area,
        "Q Bypass Prev (cfs)": result.q_bypass_in,
        "Q Total (cfs)": result.q_total,
        "Qi (cfs)": result.intercepted_flow,
        "Q Bypass Curr (cfs)": result.q_bypass_out,
        "Spread (ft)": result.flooding_width,
    }


def _narrative_line(inlet: Inlet, result: InletResult) -> str:
    structure: str = inlet.structure_type.label.lower() if inlet.structure_type.value else "unassigned structure"
    condition: str = "low point, charted capacity" if result.is_low_point else "on grade"
    return (
        f"{inlet.str_id} ({structure}, {condition}) at Sta {inlet.station:g} receives {_fmt(result.q_total)} cfs "
        f"({_fmt(result.q_from_area)} from its area, {_fmt(result.q_bypass_in)} bypassed from upstream), "
        f"intercepts {_fmt(result.intercepted_flow)} cfs and bypasses {_fmt(result.q_bypass_out)} cfs; "
        f"spread {_fmt(result.flooding_width)} ft."
    )


def assemble_report(
    project: DrainageProject,
    results: Sequence[InletResult],
    derived: ProfileDerived | None = None,
) -> SummaryReport:
    """
    Collect the project inputs and computed results into a `SummaryReport`.

    Args:
        project: The project whose inputs are summarized.
        results: Output of `evaluate_inlets` for the same project.
        derived: Optional profile derivation; adds high/low points when given.

    Raises:
        ValueError: ``results`` does not line up with the project's inlets.
    """
    if len(results) != len(project.inlets):
        raise ValueError(f"Expected {len(project.inlets)} inlet results, received {len(results)}.")
    for inlet, result in zip(project.inlets, results):
        if inlet.str_id != result.str_id:
            raise ValueError(f"Result for '{result.str_id}' does not match inlet '{inlet.str_id}'.")

    report = SummaryReport(title=project.title, region=project.region, return_period=project.return_period)
    report.profile_lines = _profile_lines(project, derived)
    for index, (inlet, result) in enumerate(zip(project.inlets, results), start=1):
        report.inlet_rows.append(_inlet_row(index, inlet, result))
        report.narrative.append(_narrative_line(inlet, result))
    logger.debug("Assembled report for {project}", project=project.describe())
    return report


__all__: list[str] = ["INLET_TABLE_COLUMNS", "SummaryReport", "assemble_report"]
