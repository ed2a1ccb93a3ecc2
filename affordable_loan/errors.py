"""Error taxonomy for the affordability core.

Every failure here is a deterministic function of the input or of the
static cost table; nothing is transient, so nothing is retried.
A household that cannot afford any loan is NOT an error (see
``AffordabilityResult.is_zero``).
"""

from __future__ import annotations


class AffordabilityError(Exception):
    """Base class for all errors raised by the core."""


class InvalidInputError(AffordabilityError, ValueError):
    """Out-of-range or malformed numeric input (caller's responsibility)."""


class UnknownRegionError(AffordabilityError, LookupError):
    """Region key missing from the cost table (stale or mismatched data set)."""

    def __init__(self, region: str) -> None:
        super().__init__(f"Unknown region: {region!r}")
        self.region = region


class UnknownPropertyStateError(AffordabilityError, LookupError):
    """Property state outside {new, second_hand}, or missing from a region's factors."""

    def __init__(self, property_state: str, region: str | None = None) -> None:
        if region is None:
            message = f"Unknown property state: {property_state!r}"
        else:
            message = f"No cost factor for property state {property_state!r} in region {region!r}"
        super().__init__(message)
        self.property_state = property_state
        self.region = region


class ArithmeticDegeneracyError(AffordabilityError, ArithmeticError):
    """Division by a true zero outside the handled zero-rate branches.

    Seeing this in practice means a bug in the calculators, not bad input.
    """
