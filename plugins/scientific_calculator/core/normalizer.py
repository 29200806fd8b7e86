"""Rewrite raw buffer text into the form the parser consumes."""

from __future__ import annotations

import re

from .errors import NormalizationError
from .formatting import plain_number
from .registry import Registry

ANSWER_TOKEN = "Ans"
MAX_EXPRESSION_LENGTH = 1024

_GLYPHS: tuple[tuple[str, str], ...] = (
    ("×", "*"),
    ("·", "*"),
    ("÷", "/"),
    ("−", "-"),
    ("**", "^"),
    ("√(", "sqrt("),
    ("π", "pi"),
)

_CALL = r"[a-z][a-z0-9]+\("
# A digit directly followed by a constant or a function call: 2pi, 3sin(.
_DIGIT_ADJACENT = re.compile(rf"(\d)(pi|e|{_CALL})")
# A closing parenthesis followed by a digit or a function call: (1)2, (2)cos(.
_PAREN_ADJACENT = re.compile(rf"(\))(\d|{_CALL})")
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _substitute_answer(text: str, last_result: str | None) -> str:
    if ANSWER_TOKEN not in text:
        return text
    literal = plain_number(last_result) if last_result else "0"
    return text.replace(ANSWER_TOKEN, f"({literal})")


def _canonicalize_glyphs(text: str) -> str:
    for glyph, replacement in _GLYPHS:
        text = text.replace(glyph, replacement)
    return text.lower()


def _insert_implicit_multiplication(text: str) -> str:
    text = _DIGIT_ADJACENT.sub(r"\1*\2", text)
    return _PAREN_ADJACENT.sub(r"\1*\2", text)


def _qualify_identifiers(text: str, registry: Registry) -> str:
    def qualify(match: re.Match[str]) -> str:
        name = match.group(0)
        entry = registry.get(name)
        if entry is None:
            raise NormalizationError(f"Unknown name '{name}'")
        is_call = text[match.end() : match.end() + 1] == "("
        if entry.is_constant and is_call:
            raise NormalizationError(f"'{entry.name}' is a constant, not a function")
        if not entry.is_constant and not is_call:
            raise NormalizationError(f"Function '{entry.name}' must be followed by '('")
        return entry.name

    return _IDENTIFIER.sub(qualify, text)


def normalize_expression(
    expression: str,
    *,
    registry: Registry,
    last_result: str | None = None,
    max_length: int = MAX_EXPRESSION_LENGTH,
) -> str:
    """Return ``expression`` rewritten for evaluation.

    The rewrite substitutes ``Ans``, canonicalises operator glyphs and case,
    inserts implicit multiplication after digits and closing parentheses,
    then checks every identifier against ``registry``. Running it on its own
    output returns the same string.
    """

    if not expression or not isinstance(expression, str):
        raise NormalizationError("Expression is required")
    expression = expression.strip()
    if not expression:
        raise NormalizationError("Expression is required")
    if len(expression) > max_length:
        raise NormalizationError("Expression is too long")
    text = _substitute_answer(expression, last_result)
    if len(text) > max_length:
        raise NormalizationError("Expression is too long")
    text = _canonicalize_glyphs(text)
    text = _insert_implicit_multiplication(text)
    return _qualify_identifiers(text, registry)


__all__ = ["ANSWER_TOKEN", "MAX_EXPRESSION_LENGTH", "normalize_expression"]
