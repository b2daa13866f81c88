"""Quantity formatting and parsing of user-typed quantities."""

import math
import re

INTEGER_TOLERANCE = 1e-4

_MIXED_FRACTION = re.compile(r"^(\d+)\s+(\d+)\s*/\s*(\d+)$")
_FRACTION = re.compile(r"^(\d+)\s*/\s*(\d+)$")
_DECIMAL = re.compile(r"^\d+(?:\.\d+)?$|^\.\d+$")


class InvalidQuantityError(ValueError):
    """Raised when a typed quantity cannot be read as a non-negative number."""

    def __init__(self, raw: str, reason: str = "not a number"):
        super().__init__(f"Invalid quantity {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


def is_whole(value: float, tolerance: float = INTEGER_TOLERANCE) -> bool:
    """Check whether a value is within tolerance of an integer."""
    return abs(value - round(value)) < tolerance


def format_quantity(value: float) -> str:
    """
    Format a quantity for display.

    Values within 1e-4 of an integer render as that integer ("2"),
    everything else uses the default float rendering ("2.5").
    """
    if is_whole(value):
        return str(int(round(value)))
    return str(value)


def format_quantity_one_decimal(value: float) -> str:
    """Format with at most one decimal place, used in per-meal breakdowns."""
    rounded = round(value * 10.0) / 10.0
    if abs(rounded - round(rounded)) < 0.001:
        return str(int(round(rounded)))
    return f"{rounded:.1f}"


def round_up_quantity(value: float) -> int:
    """Round up to the next whole unit, ignoring float noise near integers."""
    if is_whole(value):
        return int(round(value))
    return math.ceil(value)


def parse_quantity_input(raw: str | float | int | None) -> float:
    """
    Parse a quantity typed by the user.

    Handles formats like:
    - "" or None (defaults to 1)
    - "2", "1.5", "1,5"
    - "1/2"
    - "1 1/2" (one and a half)

    Raises:
        InvalidQuantityError: For anything else, including negative numbers.
    """
    if raw is None:
        return 1.0

    if isinstance(raw, bool):
        raise InvalidQuantityError(str(raw))

    if isinstance(raw, (int, float)):
        value = float(raw)
        if math.isnan(value) or math.isinf(value):
            raise InvalidQuantityError(str(raw))
        if value < 0:
            raise InvalidQuantityError(str(raw), "must not be negative")
        return value

    text = raw.strip().replace(",", ".")
    if not text:
        return 1.0

    if text.startswith("-"):
        raise InvalidQuantityError(raw, "must not be negative")

    mixed_match = _MIXED_FRACTION.match(text)
    if mixed_match:
        whole, num, denom = (int(group) for group in mixed_match.groups())
        if denom == 0:
            raise InvalidQuantityError(raw, "division by zero")
        return whole + num / denom

    frac_match = _FRACTION.match(text)
    if frac_match:
        num, denom = (int(group) for group in frac_match.groups())
        if denom == 0:
            raise InvalidQuantityError(raw, "division by zero")
        return num / denom

    if _DECIMAL.match(text):
        return float(text)

    raise InvalidQuantityError(raw)
