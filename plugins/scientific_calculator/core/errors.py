"""Error types raised by the calculator engine."""

from __future__ import annotations


class ExpressionError(ValueError):
    """Raised when an expression cannot be parsed or evaluated."""


class NormalizationError(ExpressionError):
    """Raised when raw input cannot be rewritten into an evaluable form."""


class ExpressionSyntaxError(ExpressionError):
    """Raised when a normalized expression does not parse."""


class EvaluationError(ExpressionError):
    """Raised when evaluation leaves the real, finite domain."""


class UnknownKeyError(ValueError):
    """Raised when a keypad key is not part of the calculator alphabet."""


__all__ = [
    "ExpressionError",
    "NormalizationError",
    "ExpressionSyntaxError",
    "EvaluationError",
    "UnknownKeyError",
]
