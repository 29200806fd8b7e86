"""Walk expression trees against the function registry."""

from __future__ import annotations

import math

from .errors import EvaluationError, ExpressionError
from .parser import (
    BINARY_OPERATORS,
    BinaryOp,
    Call,
    Constant,
    Group,
    Node,
    Number,
    UnaryOp,
    parse_expression,
)
from .registry import AngleUnit, Registry, RegistryEntry

_OPERATOR_SYMBOLS = {name: symbol for symbol, name in BINARY_OPERATORS.items()}
_UNARY_SYMBOLS = {"neg": "-", "pos": "+"}


def _format_number(value: float) -> str:
    if float(value).is_integer() and abs(value) < 1e15:
        return str(int(value))
    return f"{value:.12g}"


def _entry(registry: Registry, name: str) -> RegistryEntry:
    entry = registry.get(name)
    if entry is None:
        raise EvaluationError(f"Function '{name}' is not allowed")
    return entry


def _apply(entry: RegistryEntry, args: tuple[float, ...], angle_unit: AngleUnit) -> float:
    try:
        value = entry.apply(args, angle_unit)
    except ExpressionError:
        raise
    except ZeroDivisionError as exc:
        raise EvaluationError("Division by zero") from exc
    except OverflowError as exc:
        raise EvaluationError("Result is not finite") from exc
    except (ValueError, TypeError) as exc:
        raise EvaluationError(f"'{entry.name}' is undefined for {_describe(args)}") from exc
    return value


def _describe(args: tuple[float, ...]) -> str:
    return ", ".join(_format_number(arg) for arg in args) or "no arguments"


def _eval_node(node: Node, registry: Registry, angle_unit: AngleUnit) -> float:
    if isinstance(node, Number):
        value = node.value
    elif isinstance(node, Constant):
        entry = _entry(registry, node.name)
        if not entry.is_constant:
            raise EvaluationError(f"Function '{node.name}' must be called")
        value = _apply(entry, (), angle_unit)
    elif isinstance(node, Group):
        value = _eval_node(node.inner, registry, angle_unit)
    elif isinstance(node, UnaryOp):
        operand = _eval_node(node.operand, registry, angle_unit)
        value = _apply(_entry(registry, node.operator), (operand,), angle_unit)
    elif isinstance(node, BinaryOp):
        left = _eval_node(node.left, registry, angle_unit)
        right = _eval_node(node.right, registry, angle_unit)
        value = _apply(_entry(registry, node.operator), (left, right), angle_unit)
    elif isinstance(node, Call):
        entry = _entry(registry, node.name)
        if entry.is_constant:
            raise EvaluationError(f"'{node.name}' is a constant, not a function")
        args = tuple(_eval_node(arg, registry, angle_unit) for arg in node.args)
        value = _apply(entry, args, angle_unit)
    else:  # pragma: no cover - parser only builds the node types above
        raise EvaluationError("Unsupported expression element")

    if isinstance(value, complex):
        raise EvaluationError("Complex results are not supported")
    if not isinstance(value, (int, float)):
        raise EvaluationError("Expression returned a non-numeric value")
    if math.isnan(value) or math.isinf(value):
        raise EvaluationError("Result is not finite")
    return float(value)


def evaluate_tree(node: Node, *, registry: Registry, angle_unit: AngleUnit) -> float:
    """Return the finite real value of ``node``."""

    return _eval_node(node, registry, angle_unit)


def evaluate_normalized(text: str, *, registry: Registry, angle_unit: AngleUnit) -> float:
    """Parse and evaluate an already normalized expression."""

    return evaluate_tree(parse_expression(text), registry=registry, angle_unit=angle_unit)


def canonicalize(node: Node) -> str:
    """Render ``node`` fully parenthesised, e.g. ``((3 * 4) + 5)``."""

    if isinstance(node, Number):
        return _format_number(node.value)
    if isinstance(node, Constant):
        return node.name
    if isinstance(node, Group):
        return canonicalize(node.inner)
    if isinstance(node, UnaryOp):
        return f"({_UNARY_SYMBOLS[node.operator]}{canonicalize(node.operand)})"
    if isinstance(node, BinaryOp):
        symbol = _OPERATOR_SYMBOLS[node.operator]
        return f"({canonicalize(node.left)} {symbol} {canonicalize(node.right)})"
    if isinstance(node, Call):
        args = ", ".join(canonicalize(arg) for arg in node.args)
        return f"{node.name}({args})"
    raise EvaluationError("Unsupported expression element")  # pragma: no cover


__all__ = ["evaluate_tree", "evaluate_normalized", "canonicalize"]
