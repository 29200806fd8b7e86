"""Input buffer the user composes an expression in."""

from __future__ import annotations

from dataclasses import dataclass

from .formatting import plain_number

ERROR_MARKER = "Error"

# Tokens that continue a chained calculation from a frozen result.
CHAINING_TOKENS = frozenset({"+", "-", "×", "÷", "*", "/", "%", "^", "^(1/"})


@dataclass(slots=True)
class InputBuffer:
    """Live buffer text plus the frozen label shown above it.

    ``reset_on_input`` is armed after every evaluation, successful or not,
    and decides whether the next keystroke starts a fresh expression.
    """

    text: str = "0"
    expression_label: str = ""
    reset_on_input: bool = False
    failed: bool = False

    def append(self, token: str) -> None:
        if not token:
            raise ValueError("Cannot append an empty token")
        if self.failed:
            # Nothing of a failed expression carries into the next one.
            self.clear()
        elif self.reset_on_input:
            self.reset_on_input = False
            if token in CHAINING_TOKENS:
                self.text = plain_number(self.text) + token
            else:
                self.text = token
            return
        if self.text == "0" and token != "." and token not in CHAINING_TOKENS:
            self.text = token
        else:
            self.text += token

    def backspace(self) -> None:
        if self.reset_on_input:
            self.clear()
            return
        self.text = self.text[:-1] or "0"

    def clear(self) -> None:
        self.text = "0"
        self.expression_label = ""
        self.reset_on_input = False
        self.failed = False

    def source(self) -> str:
        """Return the text to evaluate for the current buffer."""

        if self.reset_on_input and not self.failed:
            return plain_number(self.text)
        return self.text

    def freeze_result(self, expression: str, result: str) -> None:
        self.expression_label = f"{expression} ="
        self.text = result
        self.reset_on_input = True
        self.failed = False

    def mark_failed(self) -> None:
        self.expression_label = ERROR_MARKER
        self.reset_on_input = True
        self.failed = True

    def to_dict(self) -> dict[str, object]:
        return {
            "display": self.text,
            "expression": self.expression_label,
            "reset_on_input": self.reset_on_input,
            "error": self.failed,
        }


__all__ = ["CHAINING_TOKENS", "ERROR_MARKER", "InputBuffer"]
