"""Hydrologic and gutter-flow formulas used by the inlet cascade.

Every helper is a pure function. Inputs that are non-positive (or NaN) yield
``0.0`` instead of raising so an in-progress dataset degrades to zero flow and
zero spread rather than aborting the whole evaluation.
"""

from __future__ import annotations

import math

from .rainfall import RainfallCoefficients, find_coefficients
from .units import minutes_to_hours, percent_to_ratio

MIN_TIME_OF_CONCENTRATION = 5.0
DEFAULT_MANNING_N = 0.015
GUTTER_CROSS_SLOPE = 0.025


def _positive(*values: float) -> bool:
    return all(value > 0 for value in values)


def time_of_concentration(flow_path_length: float, runoff_coefficient: float, path_slope: float) -> float:
    """
    Return the time of concentration in minutes.

    ``TC = 0.7039 * HL^0.3917 * C^-1.1309 * S^-0.1985`` with ``HL`` in feet and
    ``S`` in percent, never less than five minutes.

    Args:
        flow_path_length: Longest flow path HL (ft).
        runoff_coefficient: Weighted runoff coefficient C along the path.
        path_slope: Slope of the flow path (percent).

    Returns:
        Minutes, or 0.0 when any input is not positive.
    """
    if not _positive(flow_path_length, runoff_coefficient, path_slope):
        return 0.0
    tc: float = (
        0.7039
        * math.pow(flow_path_length, 0.3917)
        * math.pow(runoff_coefficient, -1.1309)
        * math.pow(path_slope, -0.1985)
    )
    return max(tc, MIN_TIME_OF_CONCENTRATION)


def intensity_from_coefficients(tc_minutes: float, coefficients: RainfallCoefficients | None) -> float:
    """Return ``a * (D + b) ** c`` in in/hr for a duration given in minutes."""

    if coefficients is None or not _positive(tc_minutes):
        return 0.0
    duration_hours: float = minutes_to_hours(tc_minutes)
    return coefficients.a * math.pow(duration_hours + coefficients.b, coefficients.c)


def rainfall_intensity(tc_minutes: float, region: str, return_period: str) -> float:
    """Return the design intensity (in/hr); 0.0 for an unknown selection or tc <= 0."""

    return intensity_from_coefficients(tc_minutes, find_coefficients(region, return_period))


def flow(intensity: float, sum_area_c: float) -> float:
    """Rational method discharge ``Q = I * sum(AC)`` in cfs."""

    if not _positive(intensity, sum_area_c):
        return 0.0
    return intensity * sum_area_c


def width_of_flooding(
    q_total: float,
    longitudinal_grade: float,
    cross_slope: float,
    manning_n: float = DEFAULT_MANNING_N,
) -> float:
    """
    Return the gutter spread T (ft) for a discharge on a continuous grade.

    Inverts ``Q = (0.56 / n) * Sx^(5/3) * T^(8/3) * S^(1/2)`` (LADOTD equation
    8-A.7-1), with ``S`` supplied in percent.
    """
    if not _positive(q_total, longitudinal_grade, cross_slope, manning_n):
        return 0.0
    slope: float = percent_to_ratio(longitudinal_grade)
    denominator: float = 0.56 * math.pow(cross_slope, 5 / 3) * math.sqrt(slope)
    return math.pow(q_total * manning_n / denominator, 3 / 8)


__all__: list[str] = [
    "DEFAULT_MANNING_N",
    "GUTTER_CROSS_SLOPE",
    "MIN_TIME_OF_CONCENTRATION",
    "flow",
    "intensity_from_coefficients",
    "rainfall_intensity",
    "time_of_concentration",
    "width_of_flooding",
]
