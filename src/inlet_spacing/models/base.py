"""Shared base helpers for inlet-spacing model dataclasses."""

from __future__ import annotations
from abc import abstractmethod
import math
from typing import Any, Mapping, Sequence, TYPE_CHECKING, cast
from _collections_abc import Mapping as ABCMapping, Sequence as ABCSequence
from loguru import logger
from ..classes_references import ValidationError

if TYPE_CHECKING:
    from .inlet import Inlet
    from .profile import PVI


class Validatable:
    """
    A mixin class that provides a validation interface for domain models.

    Classes that inherit from `Validatable` must implement the `validate` method.
    This mixin supplies the `assert_valid` helper, which invokes `validate` and
    raises a `ValidationError` if any errors are found.
    """

    __slots__ = ()

    def assert_valid(self, prefix: str = "") -> None:
        """
        Raise a `ValidationError` if the model is invalid.

        Args:
            prefix: An optional string to prepend to each validation error message.
        """
        errors: list[str] = self.validate(prefix=prefix)
        if errors:
            logger.debug("Validation failed for {model}: {errors}", model=self.__class__.__name__, errors=errors)
            raise ValidationError(errors)
        logger.debug("Validation succeeded for {model}.", model=self.__class__.__name__)

    @abstractmethod
    def validate(self, prefix: str = "") -> list[str]:
        """
        Return a list of validation errors, or an empty list if the model is valid.

        Args:
            prefix: A string to prepend to each validation error message for context.
        """
        pass


def pvi_list() -> list["PVI"]:
    """
    Return a new list of `PVI` objects.

    This helper function is used as a `default_factory` in dataclasses to avoid
    the use of mutable default arguments.
    """

    return []


def inlet_list() -> list["Inlet"]:
    """
    Return a new list of `Inlet` objects.

    This helper function is used as a `default_factory` in dataclasses to avoid
    the use of mutable default arguments.
    """

    return []


def optional_float(value: Any) -> float | None:
    """Return a float, or None for blank or non-numeric input."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def float_or_zero(value: Any) -> float:
    """Return a float, treating blank or non-numeric input as 0.0."""

    number: float | None = optional_float(value)
    return 0.0 if number is None else number


def normalize_sequence(value: Any) -> list[Any]:
    """Return a list or fall back to an empty list for non-sequence values."""

    if isinstance(value, ABCSequence) and not isinstance(value, (str, bytes)):
        return list(cast(Sequence[Any], value))
    return []


def normalize_mapping(value: Any) -> Mapping[str, Any]:
    """Return a mapping or an empty dict if the value is not mapping-like."""

    if isinstance(value, ABCMapping):
        return cast(Mapping[str, Any], value)
    return {}
