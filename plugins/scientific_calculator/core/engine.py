"""Pure evaluation logic for the Scientific Calculator plugin."""

from __future__ import annotations

from dataclasses import dataclass

from .evaluator import canonicalize, evaluate_tree
from .formatting import format_result
from .modes import validate_angle_unit
from .normalizer import MAX_EXPRESSION_LENGTH, normalize_expression
from .parser import parse_expression
from .registry import AngleUnit, Registry, get_registry


@dataclass(frozen=True, slots=True)
class Evaluation:
    """Outcome of one successful evaluation."""

    expression: str
    normalized: str
    canonical: str
    value: float
    formatted: str
    angle_unit: AngleUnit

    def to_dict(self) -> dict[str, object]:
        return {
            "expression": self.expression,
            "normalized": self.normalized,
            "canonical": self.canonical,
            "result": self.value,
            "formatted": self.formatted,
            "angle_unit": self.angle_unit,
        }


def compute(
    expression: str,
    *,
    angle_unit: AngleUnit,
    last_result: str | None = None,
    registry: Registry | None = None,
    max_length: int = MAX_EXPRESSION_LENGTH,
) -> Evaluation:
    """Normalize, parse, evaluate and format ``expression``.

    Raises :class:`~.errors.ExpressionError` (or a subclass) when any stage
    fails.
    """

    if registry is None:
        registry = get_registry()
    normalized = normalize_expression(
        expression, registry=registry, last_result=last_result, max_length=max_length
    )
    tree = parse_expression(normalized)
    value = evaluate_tree(tree, registry=registry, angle_unit=angle_unit)
    return Evaluation(
        expression=expression,
        normalized=normalized,
        canonical=canonicalize(tree),
        value=value,
        formatted=format_result(value),
        angle_unit=angle_unit,
    )


def evaluate_expression(
    expression: str,
    *,
    angle_unit: str = "radian",
    last_result: str | None = None,
    max_length: int = MAX_EXPRESSION_LENGTH,
) -> dict[str, object]:
    """Evaluate a scalar expression and return its value plus display forms."""

    unit = validate_angle_unit(angle_unit)
    return compute(
        expression, angle_unit=unit, last_result=last_result, max_length=max_length
    ).to_dict()


__all__ = ["Evaluation", "compute", "evaluate_expression"]
