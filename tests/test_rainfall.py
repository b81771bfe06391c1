"""Coverage for the regional rainfall coefficient catalog."""

from __future__ import annotations

import pytest

from inlet_spacing import InvalidSelectionError
from inlet_spacing.rainfall import (
    RAINFALL_COEFFICIENTS,
    RainfallCoefficients,
    find_coefficients,
    lookup,
    regions,
    return_periods,
)


def test_catalog_covers_three_regions_and_six_return_periods() -> None:
    assert regions() == ["Region 1", "Region 2", "Region 3"]
    for region in regions():
        assert return_periods(region) == ["2-Year", "5-Year", "10-Year", "25-Year", "50-Year", "100-Year"]


def test_lookup_returns_published_coefficients() -> None:
    assert lookup("Region 1", "10-Year") == RainfallCoefficients(a=4.016, b=0.347, c=-0.826)
    assert lookup("Region 3", "100-Year") == RainfallCoefficients(a=4.286, b=0.223, c=-0.780)


@pytest.mark.parametrize(("region", "period"), [("Region 4", "10-Year"), ("Region 1", "500-Year"), ("", "")])
def test_unknown_selection_is_a_caller_error(region: str, period: str) -> None:
    with pytest.raises(InvalidSelectionError, match="Unknown rainfall selection"):
        lookup(region, period)
    assert find_coefficients(region, period) is None
    assert return_periods("Region 4") == []


def test_catalog_is_read_only() -> None:
    with pytest.raises(TypeError):
        RAINFALL_COEFFICIENTS["Region 1"]["10-Year"] = RainfallCoefficients(1.0, 1.0, 1.0)  # type: ignore[index]
