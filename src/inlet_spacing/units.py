"""Unit conversion helpers shared across the inlet-spacing domain."""

MINUTES_PER_HOUR = 60.0
PERCENT = 100.0


def percent_to_ratio(value: float) -> float:
    """Convert a grade in percent into ft/ft."""
    return value / PERCENT


def ratio_to_percent(value: float) -> float:
    """Convert a grade in ft/ft into percent."""
    return value * PERCENT


def minutes_to_hours(value: float) -> float:
    """Convert minutes into hours."""
    return value / MINUTES_PER_HOUR
