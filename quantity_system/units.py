"""
Dimensional unit algebra.

A ``Units`` value is a mapping from unit symbol to an exact rational exponent,
e.g. ``{"m": 1, "s": -2}`` for an acceleration. Symbols are opaque strings:
"m" and "meter" are different, unrelated units. Entries with a zero exponent
are dropped on construction, so two values are equal exactly when their
normalized maps are equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from types import MappingProxyType
from typing import Mapping, Union

import sympy as sp


Exponent = Union[int, float, str, Fraction, sp.Rational]

# float exponents are approximated by the nearest fraction with a bounded denominator
MAX_FLOAT_DENOMINATOR = 10_000


def to_rational(value: Exponent) -> sp.Rational:
    """Coerce ``value`` to an exact ``sympy.Rational``."""
    if isinstance(value, sp.Rational):
        return value
    if isinstance(value, int):
        return sp.Integer(value)
    if isinstance(value, Fraction):
        return sp.Rational(value.numerator, value.denominator)
    if isinstance(value, float):
        return sp.Rational(value).limit_denominator(MAX_FLOAT_DENOMINATOR)
    return sp.Rational(value)


@dataclass(frozen=True, eq=False, repr=False)
class Units:
    """Immutable symbol → exponent map with multiply/divide/invert/power."""

    exponents: Mapping[str, sp.Rational] = field(default_factory=dict)

    def __post_init__(self):
        normalized = {}
        for symbol, exponent in self.exponents.items():
            exponent = to_rational(exponent)
            if exponent != 0:
                normalized[str(symbol)] = exponent
        object.__setattr__(self, "exponents", MappingProxyType(normalized))

    @classmethod
    def of(cls, symbol: str, exponent: Exponent = 1) -> "Units":
        return cls({symbol: exponent})

    @property
    def is_dimensionless(self) -> bool:
        return not self.exponents

    def exponent(self, symbol: str) -> sp.Rational:
        return self.exponents.get(symbol, sp.S.Zero)

    # ── algebra ──────────────────────────────────────────────────────────

    def multiply(self, other: "Units") -> "Units":
        merged = dict(self.exponents)
        for symbol, exponent in other.exponents.items():
            merged[symbol] = merged.get(symbol, sp.S.Zero) + exponent
        return Units(merged)

    def divide(self, other: "Units") -> "Units":
        merged = dict(self.exponents)
        for symbol, exponent in other.exponents.items():
            merged[symbol] = merged.get(symbol, sp.S.Zero) - exponent
        return Units(merged)

    def invert(self) -> "Units":
        return Units({symbol: -exponent for symbol, exponent in self.exponents.items()})

    def power(self, exponent: Exponent) -> "Units":
        factor = to_rational(exponent)
        return Units({symbol: e * factor for symbol, e in self.exponents.items()})

    def __mul__(self, other):
        if not isinstance(other, Units):
            return NotImplemented
        return self.multiply(other)

    def __truediv__(self, other):
        if not isinstance(other, Units):
            return NotImplemented
        return self.divide(other)

    def __pow__(self, exponent):
        return self.power(exponent)

    def __invert__(self):
        return self.invert()

    # ── value semantics ──────────────────────────────────────────────────

    def __eq__(self, other):
        if not isinstance(other, Units):
            return NotImplemented
        return dict(self.exponents) == dict(other.exponents)

    def __hash__(self):
        return hash(frozenset(self.exponents.items()))

    def __str__(self):
        """Symbols sorted by name, space separated, ``sym^exp`` unless exp is 1."""
        terms = []
        for symbol in sorted(self.exponents):
            exponent = self.exponents[symbol]
            terms.append(symbol if exponent == 1 else f"{symbol}^{exponent}")
        return " ".join(terms)

    def __repr__(self):
        readable = {symbol: str(e) for symbol, e in self.exponents.items()}
        return f"Units({readable!r})"


DIMENSIONLESS = Units()
