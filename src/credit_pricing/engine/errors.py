"""
Error types raised by the credit pricing engine.

Every input problem derives from InvalidParametersError so callers that do not
care about the exact cause can catch a single class.
"""
from typing import Any


class InvalidParametersError(ValueError):
    """Base class for all invalid pricing requests and definitions."""


class DuplicateDefinitionError(InvalidParametersError):
    """Two definitions of one feature share a version or a valid-from instant."""

    def __init__(self, feature_slug: str, field: str, value: Any):
        self.feature_slug = feature_slug
        self.field = field
        self.value = value
        super().__init__(
            f"Duplicate {field} {value} in credit definitions for feature {feature_slug}"
        )


class FeatureNotPricedError(InvalidParametersError):
    """No credit definition applies to the requested feature."""

    def __init__(self, feature_slug: str, message: str = "Requested feature not allowed for credit usage"):
        self.feature_slug = feature_slug
        super().__init__(message)


class UnknownFeatureError(FeatureNotPricedError):
    """The feature has no definitions at all."""


class InvalidInputError(InvalidParametersError):
    """A quantity or price argument is out of range."""


class QuantityOverflowError(InvalidParametersError):
    """The curve decayed to a non-positive unit price."""

    def __init__(self, message: str = "The provided quantity surpasses the maximum supported amount of credits"):
        super().__init__(message)


class CurveInversionError(RuntimeError):
    """The quantity search for a unit price did not converge."""
