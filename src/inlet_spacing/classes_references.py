"""Exception types shared across the inlet-spacing domain."""
from _collections_abc import Sequence


class ValidationError(ValueError):
    """Exception raised when a model fails validation."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors: list[str] = list(errors)
        message: str = "; ".join(self.errors) if self.errors else "Unknown validation error."
        super().__init__(message)


class InvalidSelectionError(ValueError):
    """Raised when a rainfall region/return period pair is not in the catalog."""

    def __init__(self, region: str, return_period: str) -> None:
        self.region: str = region
        self.return_period: str = return_period
        super().__init__(f"Unknown rainfall selection '{region}' / '{return_period}'.")


class ProfileOrderError(ValueError):
    """Raised when PVI stations decrease along the profile."""

    def __init__(self, index: int, station: float, previous_station: float) -> None:
        self.index: int = index
        self.station: float = station
        self.previous_station: float = previous_station
        super().__init__(
            f"PVI #{index + 1} station {station:.3f} precedes the previous PVI station {previous_station:.3f}."
        )
