"""Regional rainfall intensity-duration-frequency coefficients.

Intensity follows the exponential model ``I = a * (D + b) ** c`` where ``D`` is
the storm duration in hours. Coefficients come from the LA DOTD Hydraulics
Manual, Figures 3.4-3, 3.4-4 and 3.4-5.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from loguru import logger

from .classes_references import InvalidSelectionError


@dataclass(frozen=True, slots=True)
class RainfallCoefficients:
    """Coefficients of the regional intensity model."""

    a: float
    b: float
    c: float


def _freeze(
    table: dict[str, dict[str, tuple[float, float, float]]]
) -> Mapping[str, Mapping[str, RainfallCoefficients]]:
    return MappingProxyType(
        {
            region: MappingProxyType({period: RainfallCoefficients(*abc) for period, abc in periods.items()})
            for region, periods in table.items()
        }
    )


RAINFALL_COEFFICIENTS: Mapping[str, Mapping[str, RainfallCoefficients]] = _freeze(
    {
        "Region 1": {
            "2-Year": (2.815, 0.282, -0.899),
            "5-Year": (3.536, 0.330, -0.851),
            "10-Year": (4.016, 0.347, -0.826),
            "25-Year": (4.611, 0.346, -0.798),
            "50-Year": (5.097, 0.351, -0.783),
            "100-Year": (5.487, 0.334, -0.759),
        },
        "Region 2": {
            "2-Year": (2.375, 0.221, -0.922),
            "5-Year": (2.976, 0.251, -0.865),
            "10-Year": (3.447, 0.277, -0.839),
            "25-Year": (4.092, 0.297, -0.808),
            "50-Year": (4.640, 0.318, -0.791),
            "100-Year": (5.195, 0.335, -0.771),
        },
        "Region 3": {
            "2-Year": (2.138, 0.192, -0.891),
            "5-Year": (2.701, 0.220, -0.847),
            "10-Year": (3.086, 0.231, -0.826),
            "25-Year": (3.592, 0.238, -0.809),
            "50-Year": (3.934, 0.227, -0.794),
            "100-Year": (4.286, 0.223, -0.780),
        },
    }
)

DEFAULT_REGION = "Region 1"
DEFAULT_RETURN_PERIOD = "10-Year"


def regions() -> list[str]:
    """Return the catalog regions in their published order."""

    return list(RAINFALL_COEFFICIENTS)


def return_periods(region: str) -> list[str]:
    """Return the return periods available for ``region`` (empty if unknown)."""

    return list(RAINFALL_COEFFICIENTS.get(region, {}))


def find_coefficients(region: str, return_period: str) -> RainfallCoefficients | None:
    """Return the coefficients for a selection, or None when it is not cataloged."""

    return RAINFALL_COEFFICIENTS.get(region, {}).get(return_period)


def lookup(region: str, return_period: str) -> RainfallCoefficients:
    """Return the coefficients for a selection or raise `InvalidSelectionError`."""

    coefficients: RainfallCoefficients | None = find_coefficients(region, return_period)
    if coefficients is None:
        logger.debug("Rainfall selection {region}/{period} is not cataloged", region=region, period=return_period)
        raise InvalidSelectionError(region, return_period)
    return coefficients


__all__: list[str] = [
    "DEFAULT_REGION",
    "DEFAULT_RETURN_PERIOD",
    "RAINFALL_COEFFICIENTS",
    "RainfallCoefficients",
    "find_coefficients",
    "lookup",
    "regions",
    "return_periods",
]
