"""Function registry shared by every calculator session."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import lru_cache
from itertools import product
from types import MappingProxyType
from typing import Callable, Iterator, Literal, Mapping

from .errors import EvaluationError

AngleUnit = Literal["radian", "degree"]

ANGLE_UNITS: tuple[str, ...] = ("degree", "radian")

Implementation = Callable[..., float]

# Largest n whose factorial is a finite float.
MAX_FACTORIAL = 170


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    """A constant or operation callable from expressions."""

    name: str
    arity: int
    implementation: Implementation = field(repr=False, compare=False)
    inverse: str | None = None
    hyperbolic: str | None = None
    description: str = ""

    @property
    def is_constant(self) -> bool:
        return self.arity == 0

    def apply(self, args: tuple[float, ...], angle_unit: AngleUnit) -> float:
        if len(args) != self.arity:
            raise EvaluationError(
                f"'{self.name}' expects {self.arity} argument(s), got {len(args)}"
            )
        return self.implementation(angle_unit, *args)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "arity": self.arity,
            "inverse": self.inverse,
            "hyperbolic": self.hyperbolic,
            "description": self.description,
        }


def _plain(fn: Callable[..., float]) -> Implementation:
    def wrapped(angle_unit: AngleUnit, *args: float) -> float:
        return fn(*args)

    return wrapped


def _constant(value: float) -> Implementation:
    def wrapped(angle_unit: AngleUnit) -> float:
        return value

    return wrapped


def _trig(fn: Callable[[float], float]) -> Implementation:
    def wrapped(angle_unit: AngleUnit, value: float) -> float:
        rad = math.radians(value) if angle_unit == "degree" else value
        return fn(rad)

    return wrapped


def _inverse_trig(fn: Callable[[float], float]) -> Implementation:
    def wrapped(angle_unit: AngleUnit, value: float) -> float:
        angle = fn(value)
        return math.degrees(angle) if angle_unit == "degree" else angle

    return wrapped


def _cbrt(value: float) -> float:
    return math.copysign(abs(value) ** (1.0 / 3.0), value)


def _factorial(value: float) -> float:
    if value < 0 or not float(value).is_integer():
        raise EvaluationError("Factorial is defined for non-negative integers only")
    if value > MAX_FACTORIAL:
        raise EvaluationError("Result is not finite")
    return float(math.factorial(int(value)))


def _divide(left: float, right: float) -> float:
    if right == 0:
        raise EvaluationError("Division by zero")
    return left / right


def _reciprocal(value: float) -> float:
    return _divide(1.0, value)


def _build_entries() -> list[RegistryEntry]:
    return [
        RegistryEntry("pi", 0, _constant(math.pi), description="Ratio of circumference to diameter"),
        RegistryEntry("e", 0, _constant(math.e), description="Euler's number"),
        # Infix operators resolve to these entries.
        RegistryEntry("add", 2, _plain(lambda a, b: a + b), description="a + b"),
        RegistryEntry("sub", 2, _plain(lambda a, b: a - b), description="a - b"),
        RegistryEntry("mul", 2, _plain(lambda a, b: a * b), description="a × b"),
        RegistryEntry("div", 2, _plain(_divide), description="a ÷ b"),
        RegistryEntry("mod", 2, _plain(math.fmod), description="Remainder with the sign of a"),
        RegistryEntry("pow", 2, _plain(math.pow), description="a raised to b"),
        RegistryEntry("neg", 1, _plain(lambda x: -x), description="Negation"),
        RegistryEntry("pos", 1, _plain(lambda x: +x), description="Identity"),
        # Trigonometry
        RegistryEntry("sin", 1, _trig(math.sin), inverse="asin", hyperbolic="sinh", description="Sine"),
        RegistryEntry("cos", 1, _trig(math.cos), inverse="acos", hyperbolic="cosh", description="Cosine"),
        RegistryEntry("tan", 1, _trig(math.tan), inverse="atan", hyperbolic="tanh", description="Tangent"),
        RegistryEntry("asin", 1, _inverse_trig(math.asin), description="Inverse sine"),
        RegistryEntry("acos", 1, _inverse_trig(math.acos), description="Inverse cosine"),
        RegistryEntry("atan", 1, _inverse_trig(math.atan), description="Inverse tangent"),
        RegistryEntry("sinh", 1, _plain(math.sinh), description="Hyperbolic sine"),
        RegistryEntry("cosh", 1, _plain(math.cosh), description="Hyperbolic cosine"),
        RegistryEntry("tanh", 1, _plain(math.tanh), description="Hyperbolic tangent"),
        RegistryEntry("asinh", 1, _plain(math.asinh), description="Inverse hyperbolic sine"),
        RegistryEntry("acosh", 1, _plain(math.acosh), description="Inverse hyperbolic cosine"),
        RegistryEntry("atanh", 1, _plain(math.atanh), description="Inverse hyperbolic tangent"),
        # Logs & exponentials
        RegistryEntry("log", 1, _plain(math.log10), inverse="pow10", description="Base-10 logarithm"),
        RegistryEntry("ln", 1, _plain(math.log), inverse="exp", description="Natural logarithm"),
        RegistryEntry("exp", 1, _plain(math.exp), description="e raised to x"),
        RegistryEntry("pow10", 1, _plain(lambda x: math.pow(10.0, x)), description="10 raised to x"),
        # Roots & powers
        RegistryEntry("sq", 1, _plain(lambda x: x * x), inverse="sqrt", description="Square"),
        RegistryEntry("sqrt", 1, _plain(math.sqrt), inverse="cb", description="Square root"),
        RegistryEntry("cb", 1, _plain(lambda x: x * x * x), description="Cube"),
        RegistryEntry("cbrt", 1, _plain(_cbrt), description="Cube root"),
        RegistryEntry("inv", 1, _plain(_reciprocal), description="Reciprocal"),
        # Misc
        RegistryEntry("abs", 1, _plain(abs), description="Absolute value"),
        RegistryEntry("fact", 1, _plain(_factorial), description="Factorial"),
    ]


class Registry(Mapping[str, RegistryEntry]):
    """Immutable catalogue of constants and operations."""

    def __init__(self, entries: list[RegistryEntry]) -> None:
        items: dict[str, RegistryEntry] = {}
        for entry in entries:
            if entry.name in items:
                raise ValueError(f"Duplicate registry entry '{entry.name}'")
            items[entry.name] = entry
        for entry in items.values():
            for alias in (entry.inverse, entry.hyperbolic):
                if alias is not None and alias not in items:
                    raise ValueError(f"Entry '{entry.name}' aliases unknown '{alias}'")
        self._entries = MappingProxyType(items)

    def __getitem__(self, name: str) -> RegistryEntry:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, name: str, *, inverse: bool = False, hyperbolic: bool = False) -> RegistryEntry:
        """Return the entry a modified function key invokes.

        The inverse alias wins over the hyperbolic one when both flags are
        set; entries without the requested alias resolve to themselves.
        """

        entry = self._entries[name]
        if inverse and entry.inverse:
            return self._entries[entry.inverse]
        if hyperbolic and entry.hyperbolic:
            return self._entries[entry.hyperbolic]
        return entry


# Keys that insert a registry call, keyed by the entry they are labelled with.
FUNCTION_KEYS: tuple[str, ...] = ("sin", "cos", "tan", "log", "ln", "sq", "sqrt")

# Structural keys: (plain insertion, shifted insertion).
STRUCTURAL_KEYS: Mapping[str, tuple[str, str]] = MappingProxyType(
    {
        "(": ("(", "inv("),
        ")": (")", "fact("),
        "^": ("^", "^(1/"),
    }
)

ResolutionKey = tuple[str, bool, bool]


def build_resolution_table(registry: Registry) -> Mapping[ResolutionKey, str]:
    """Materialise ``(key, inverse, hyperbolic) -> insertion text`` for every key."""

    table: dict[ResolutionKey, str] = {}
    for key, inverse, hyperbolic in product(FUNCTION_KEYS, (False, True), (False, True)):
        entry = registry.resolve(key, inverse=inverse, hyperbolic=hyperbolic)
        table[(key, inverse, hyperbolic)] = f"{entry.name}("
    for (key, (plain, shifted)), inverse, hyperbolic in product(
        STRUCTURAL_KEYS.items(), (False, True), (False, True)
    ):
        table[(key, inverse, hyperbolic)] = shifted if inverse else plain
    return MappingProxyType(table)


@lru_cache(maxsize=1)
def get_registry() -> Registry:
    """Return the process-wide :class:`Registry` instance."""

    return Registry(_build_entries())


@lru_cache(maxsize=1)
def get_resolution_table() -> Mapping[ResolutionKey, str]:
    """Return the keypad resolution table for the process-wide registry."""

    return build_resolution_table(get_registry())


__all__ = [
    "AngleUnit",
    "ANGLE_UNITS",
    "RegistryEntry",
    "Registry",
    "FUNCTION_KEYS",
    "STRUCTURAL_KEYS",
    "build_resolution_table",
    "get_registry",
    "get_resolution_table",
]
