"""Tokenizer and recursive-descent parser for normalized expressions.

Grammar, loosest binding first::

    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/" | "%") unary)*
    unary      := ("+" | "-") unary | power
    power      := primary ("^" unary)?
    primary    := NUMBER | NAME | NAME "(" arguments? ")" | "(" expression ")"
    arguments  := expression ("," expression)*

``^`` is right-associative and binds tighter than a leading sign, so
``-2^2`` is ``-(2^2)`` and ``2^3^2`` is ``2^(3^2)``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from .errors import ExpressionSyntaxError

MAX_DEPTH = 64

BINARY_OPERATORS: dict[str, str] = {
    "+": "add",
    "-": "sub",
    "*": "mul",
    "/": "div",
    "%": "mod",
    "^": "pow",
}
UNARY_OPERATORS: dict[str, str] = {"+": "pos", "-": "neg"}

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<number>\d+(?:\.\d*)?|\.\d+)
    |(?P<name>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<op>[-+*/%^])
    |(?P<lparen>\()
    |(?P<rparen>\))
    |(?P<comma>,)
    |(?P<space>\s+)
    """,
    re.VERBOSE,
)


@dataclass(frozen=True, slots=True)
class Token:
    kind: str
    text: str
    position: int


@dataclass(frozen=True, slots=True)
class Number:
    value: float


@dataclass(frozen=True, slots=True)
class Constant:
    name: str


@dataclass(frozen=True, slots=True)
class Call:
    name: str
    args: tuple["Node", ...]


@dataclass(frozen=True, slots=True)
class UnaryOp:
    operator: str
    operand: "Node"


@dataclass(frozen=True, slots=True)
class BinaryOp:
    operator: str
    left: "Node"
    right: "Node"


@dataclass(frozen=True, slots=True)
class Group:
    inner: "Node"


Node = Union[Number, Constant, Call, UnaryOp, BinaryOp, Group]


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    position = 0
    while position < len(text):
        match = _TOKEN_PATTERN.match(text, position)
        if match is None:
            raise ExpressionSyntaxError(
                f"Unexpected character '{text[position]}' at position {position}"
            )
        kind = match.lastgroup or ""
        if kind != "space":
            tokens.append(Token(kind, match.group(0), position))
        position = match.end()
    return tokens


class _Parser:
    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._index = 0
        self._depth = 0

    def _peek(self) -> Token | None:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise ExpressionSyntaxError("Unexpected end of expression")
        self._index += 1
        return token

    def _accept(self, kind: str, texts: str | None = None) -> Token | None:
        token = self._peek()
        if token is None or token.kind != kind:
            return None
        if texts is not None and token.text not in texts:
            return None
        self._index += 1
        return token

    def _expect(self, kind: str, label: str) -> Token:
        token = self._accept(kind)
        if token is None:
            found = self._peek()
            where = f"'{found.text}' at position {found.position}" if found else "end of expression"
            raise ExpressionSyntaxError(f"Expected {label}, found {where}")
        return token

    def _enter(self) -> None:
        self._depth += 1
        if self._depth > MAX_DEPTH:
            raise ExpressionSyntaxError("Expression is nested too deeply")

    def _leave(self) -> None:
        self._depth -= 1

    def parse(self) -> Node:
        if not self._tokens:
            raise ExpressionSyntaxError("Expression is empty")
        node = self._expression()
        leftover = self._peek()
        if leftover is not None:
            raise ExpressionSyntaxError(
                f"Unexpected '{leftover.text}' at position {leftover.position}"
            )
        return node

    def _expression(self) -> Node:
        node = self._term()
        token = self._accept("op", "+-")
        while token is not None:
            node = BinaryOp(BINARY_OPERATORS[token.text], node, self._term())
            token = self._accept("op", "+-")
        return node

    def _term(self) -> Node:
        node = self._unary()
        token = self._accept("op", "*/%")
        while token is not None:
            node = BinaryOp(BINARY_OPERATORS[token.text], node, self._unary())
            token = self._accept("op", "*/%")
        return node

    def _unary(self) -> Node:
        token = self._accept("op", "+-")
        if token is None:
            return self._power()
        self._enter()
        try:
            return UnaryOp(UNARY_OPERATORS[token.text], self._unary())
        finally:
            self._leave()

    def _power(self) -> Node:
        base = self._primary()
        if self._accept("op", "^") is None:
            return base
        self._enter()
        try:
            return BinaryOp(BINARY_OPERATORS["^"], base, self._unary())
        finally:
            self._leave()

    def _primary(self) -> Node:
        token = self._advance()
        if token.kind == "number":
            return Number(float(token.text))
        if token.kind == "name":
            if self._accept("lparen") is None:
                return Constant(token.text)
            self._enter()
            try:
                args = self._arguments()
            finally:
                self._leave()
            self._expect("rparen", "')'")
            return Call(token.text, args)
        if token.kind == "lparen":
            self._enter()
            try:
                inner = self._expression()
            finally:
                self._leave()
            self._expect("rparen", "')'")
            return Group(inner)
        raise ExpressionSyntaxError(f"Unexpected '{token.text}' at position {token.position}")

    def _arguments(self) -> tuple[Node, ...]:
        peeked = self._peek()
        if peeked is not None and peeked.kind == "rparen":
            return ()
        args = [self._expression()]
        while self._accept("comma") is not None:
            args.append(self._expression())
        return tuple(args)


def parse_expression(text: str) -> Node:
    """Parse normalized ``text`` into an expression tree."""

    return _Parser(tokenize(text)).parse()


__all__ = [
    "BINARY_OPERATORS",
    "UNARY_OPERATORS",
    "MAX_DEPTH",
    "Token",
    "Number",
    "Constant",
    "Call",
    "UnaryOp",
    "BinaryOp",
    "Group",
    "Node",
    "tokenize",
    "parse_expression",
]
