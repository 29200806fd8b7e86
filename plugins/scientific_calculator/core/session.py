"""Keystroke-driven calculator session."""

from __future__ import annotations

from typing import Iterable, Mapping

from common.logging import get_logger

from .buffer import InputBuffer
from .engine import Evaluation, compute
from .errors import ExpressionError, UnknownKeyError
from .formatting import plain_number
from .history import HistoryEntry, HistoryTape
from .modes import ModeState, validate_angle_unit
from .normalizer import ANSWER_TOKEN, MAX_EXPRESSION_LENGTH
from .registry import (
    FUNCTION_KEYS,
    STRUCTURAL_KEYS,
    Registry,
    build_resolution_table,
    get_registry,
    get_resolution_table,
)

logger = get_logger()

DIGIT_KEYS: tuple[str, ...] = tuple("0123456789") + (".",)
OPERATOR_KEYS: tuple[str, ...] = ("+", "-", "×", "÷", "*", "/", "%")
VALUE_KEYS: Mapping[str, str] = {"pi": "pi", "π": "pi", "e": "e", ANSWER_TOKEN: ANSWER_TOKEN}
ACTION_KEYS: tuple[str, ...] = ("shift", "hyp", "drg", "clear", "backspace", "=")
MODIFIED_KEYS: tuple[str, ...] = FUNCTION_KEYS + tuple(STRUCTURAL_KEYS)

# Keypad labels accepted as synonyms of the canonical key names.
KEY_ALIASES: Mapping[str, str] = {
    "x²": "sq",
    "√": "sqrt",
    "C": "clear",
    "AC": "clear",
    "DEL": "backspace",
    "⌫": "backspace",
    "SHIFT": "shift",
    "HYP": "hyp",
    "DRG": "drg",
    "RAD": "drg",
    "DEG": "drg",
}


def canonical_key(key: str) -> str:
    """Return the canonical name of ``key`` or raise :class:`UnknownKeyError`."""

    if not isinstance(key, str):
        raise UnknownKeyError("Keys must be strings")
    name = KEY_ALIASES.get(key, key)
    if (
        name in DIGIT_KEYS
        or name in OPERATOR_KEYS
        or name in VALUE_KEYS
        or name in ACTION_KEYS
        or name in MODIFIED_KEYS
    ):
        return name
    raise UnknownKeyError(f"Unknown key '{key}'")


def list_keys() -> dict[str, list[str]]:
    return {
        "digits": list(DIGIT_KEYS),
        "operators": list(OPERATOR_KEYS),
        "values": list(VALUE_KEYS),
        "functions": list(MODIFIED_KEYS),
        "actions": list(ACTION_KEYS),
        "aliases": sorted(KEY_ALIASES),
    }


class CalculatorSession:
    """State of one open calculator: buffer, modifiers, last result and tape."""

    def __init__(
        self,
        *,
        angle_unit: str = "degree",
        registry: Registry | None = None,
        max_expression_length: int = MAX_EXPRESSION_LENGTH,
    ) -> None:
        self.modes = ModeState(angle_unit=validate_angle_unit(angle_unit))
        self.buffer = InputBuffer()
        self.history = HistoryTape()
        self.last_result: str | None = None
        self.max_expression_length = max_expression_length
        if registry is None:
            self._registry = get_registry()
            self._resolution = get_resolution_table()
        else:
            self._registry = registry
            self._resolution = build_resolution_table(registry)

    def resolve(self, key: str) -> str:
        """Return the text a function key inserts under the current modifiers."""

        name = canonical_key(key)
        try:
            return self._resolution[(name, self.modes.inverse, self.modes.hyperbolic)]
        except KeyError as exc:
            raise UnknownKeyError(f"'{key}' is not a function key") from exc

    def press(self, key: str) -> None:
        name = canonical_key(key)
        if name == "=":
            self.evaluate()
        elif name == "clear":
            self.buffer.clear()
        elif name == "backspace":
            self.buffer.backspace()
        elif name == "shift":
            self.modes.toggle_inverse()
        elif name == "hyp":
            self.modes.toggle_hyperbolic()
        elif name == "drg":
            self.modes.toggle_angle_unit()
        elif name in MODIFIED_KEYS:
            self.buffer.append(self.resolve(name))
        elif name in VALUE_KEYS:
            self.buffer.append(VALUE_KEYS[name])
        else:
            self.buffer.append(name)

    def press_all(self, keys: Iterable[str]) -> None:
        """Apply ``keys`` in order; nothing is applied if any key is unknown."""

        names = [canonical_key(key) for key in keys]
        for name in names:
            self.press(name)

    def evaluate(self) -> Evaluation | None:
        """Evaluate the buffer; failures leave the session in the error state."""

        expression = self.buffer.text
        try:
            outcome = compute(
                self.buffer.source(),
                angle_unit=self.modes.angle_unit,
                last_result=self.last_result,
                registry=self._registry,
                max_length=self.max_expression_length,
            )
        except ExpressionError as exc:
            logger.debug("calculator evaluation failed: %s (%r)", exc, expression)
            self.buffer.mark_failed()
            return None
        self.buffer.freeze_result(expression, outcome.formatted)
        self.last_result = outcome.formatted
        self.history.record(expression, outcome.formatted)
        return outcome

    def replay(self, index: int) -> HistoryEntry:
        """Type the result of history entry ``index`` into the buffer."""

        entry = self.history.get(index)
        self.buffer.append(plain_number(entry.result))
        return entry

    def clear_history(self) -> None:
        self.history.clear()

    def snapshot(self) -> dict[str, object]:
        return {
            **self.buffer.to_dict(),
            **self.modes.to_dict(),
            "last_result": self.last_result,
            "history": self.history.to_list(),
        }


__all__ = [
    "ACTION_KEYS",
    "DIGIT_KEYS",
    "KEY_ALIASES",
    "MODIFIED_KEYS",
    "OPERATOR_KEYS",
    "VALUE_KEYS",
    "CalculatorSession",
    "canonical_key",
    "list_keys",
]
