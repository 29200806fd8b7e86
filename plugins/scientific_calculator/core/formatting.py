"""Display formatting for calculator results."""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation

from .errors import EvaluationError

EXPONENTIAL_UPPER = 1e9
EXPONENTIAL_LOWER = 1e-7
EXPONENTIAL_DIGITS = 6
FIXED_DIGITS = 10
# Decimal exponents beyond this cannot come from a finite float.
MAX_DECIMAL_EXPONENT = 400


def _strip_fraction(text: str) -> str:
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in {"", "-", "-0"}:
        return "0"
    return text


def _exponential(value: float) -> str:
    mantissa, exponent = f"{value:.{EXPONENTIAL_DIGITS}e}".split("e")
    return f"{mantissa}e{int(exponent)}"


def plain_number(text: str) -> str:
    """Render a numeric display string as an exponent-free decimal literal."""

    try:
        number = Decimal(text)
    except InvalidOperation as exc:
        raise EvaluationError(f"'{text}' is not a number") from exc
    if not number.is_finite():
        raise EvaluationError("Result is not finite")
    if abs(number.adjusted()) > MAX_DECIMAL_EXPONENT:
        raise EvaluationError("Result is not finite")
    return _strip_fraction(format(number, "f"))


def format_result(value: float) -> str:
    """Return the display string for a finite ``value``.

    Magnitudes above ``1e9`` or below ``1e-7`` (zero excepted) use
    exponential notation with six fractional digits, e.g. ``1.000000e9``.
    Everything else is rounded to ten decimals and printed in its shortest
    fixed-point form. Both boundaries themselves print fixed-point.
    """

    if not math.isfinite(value):
        raise EvaluationError("Result is not finite")
    if value == 0:
        return "0"
    magnitude = abs(value)
    if magnitude > EXPONENTIAL_UPPER or magnitude < EXPONENTIAL_LOWER:
        return _exponential(value)
    rounded = float(f"{value:.{FIXED_DIGITS}f}")
    return plain_number(repr(rounded))


__all__ = [
    "EXPONENTIAL_UPPER",
    "EXPONENTIAL_LOWER",
    "format_result",
    "plain_number",
]
