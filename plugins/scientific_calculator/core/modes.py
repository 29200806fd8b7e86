"""Angle unit and modifier flags of a calculator session."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ExpressionError
from .registry import ANGLE_UNITS, AngleUnit


def validate_angle_unit(angle_unit: str) -> AngleUnit:
    if angle_unit not in ANGLE_UNITS:
        raise ExpressionError("angle_unit must be 'radian' or 'degree'")
    return angle_unit  # type: ignore[return-value]


@dataclass(slots=True)
class ModeState:
    """Mutated only through the toggles; evaluation never clears a modifier."""

    angle_unit: AngleUnit = "degree"
    inverse: bool = False
    hyperbolic: bool = False

    def toggle_inverse(self) -> None:
        self.inverse = not self.inverse

    def toggle_hyperbolic(self) -> None:
        self.hyperbolic = not self.hyperbolic

    def toggle_angle_unit(self) -> None:
        self.angle_unit = "radian" if self.angle_unit == "degree" else "degree"

    def to_dict(self) -> dict[str, object]:
        return {
            "angle_unit": self.angle_unit,
            "inverse": self.inverse,
            "hyperbolic": self.hyperbolic,
        }


__all__ = ["ModeState", "validate_angle_unit"]
