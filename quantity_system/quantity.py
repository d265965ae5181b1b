"""
╔══════════════════════════════════════════════════════════════════════╗
║  Quantity — value ± error with dimensional units                     ║
║                                                                      ║
║  Supports:                                                           ║
║    • Arithmetic with worst-case or quadrature error propagation      ║
║    • Rational powers with exact unit exponents                       ║
║    • First-order propagation through exp, log, sin, cos and any      ║
║      single-variable sympy expression                                ║
║    • Significant-error formatting (see formatting.py)                ║
╚══════════════════════════════════════════════════════════════════════╝
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable

import numpy as np
import sympy as sp

from .errors import (
    DimensionlessRequiredError,
    DomainError,
    ExpressionError,
    InvalidQuantityError,
    UnitMismatchError,
)
from .formatting import format_with_significant_error
from .units import DIMENSIONLESS, Exponent, Units, to_rational

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════
# §1  ERROR PROPAGATION MODELS
# ═══════════════════════════════════════════════════════════════════════

class ErrorPropagation(Enum):
    """How independent error contributions are combined."""

    WORST_CASE = "worst_case"    # Δ = Σ |cᵢ|      (fully correlated)
    QUADRATURE = "quadrature"    # Δ = √(Σ cᵢ²)    (independent)

    @classmethod
    def _missing_(cls, value):
        # accept member names and any casing: "QUADRATURE", "Worst_Case"
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_")
            for member in cls:
                if member.value == key:
                    return member
        return None


def _combine(contributions: Iterable[float], model: ErrorPropagation) -> float:
    """Combine per-operand error contributions ``cᵢ`` under ``model``."""
    model = ErrorPropagation(model)
    if model is ErrorPropagation.WORST_CASE:
        return float(sum(abs(c) for c in contributions))
    return float(np.sqrt(sum(c**2 for c in contributions)))


def _scaled_error(slope: float, error: float) -> float:
    # an exact input stays exact even where the slope diverges (e.g. √x at 0),
    # an unbounded one stays unbounded even where the slope vanishes
    if error == 0:
        return 0.0
    if np.isinf(error):
        return float(np.inf)
    return float(slope * error)


# ═══════════════════════════════════════════════════════════════════════
# §2  SINGLE-VARIABLE LINEARISATION
# ═══════════════════════════════════════════════════════════════════════

_X = sp.Symbol("x", real=True)

_TRANSCENDENTALS = {
    "exp": sp.exp(_X),
    "log": sp.log(_X),
    "sin": sp.sin(_X),     # argument in radians
    "cos": sp.cos(_X),
}


@lru_cache(maxsize=128)
def _linearize(expr: sp.Expr, variable: sp.Symbol):
    """
    Return numpy callables for f(x) and its sensitivity coefficient df/dx.

    The derivative is taken symbolically, so the only approximation is the
    first-order one: Δf ≈ |df/dx| · Δx.
    """
    derivative = sp.diff(expr, variable)
    return (
        sp.lambdify(variable, expr, "numpy"),
        sp.lambdify(variable, derivative, "numpy"),
    )


# ═══════════════════════════════════════════════════════════════════════
# §3  QUANTITY
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, eq=False)
class Quantity:
    """
    A measured value with a non-negative error and units.

    ``error`` may be ``+inf`` to mark an unbounded uncertainty, e.g. after a
    division by a quantity whose interval contains zero. Quantities carry
    uncertainty, so equality and ordering are not defined: two instances
    compare by identity only.
    """

    value: float
    error: float = 0.0
    units: Units = DIMENSIONLESS

    def __post_init__(self):
        if not isinstance(self.units, Units):
            object.__setattr__(self, "units", Units(self.units))

        value = float(self.value)
        error = float(self.error)
        if not np.isfinite(value):
            raise InvalidQuantityError(f"value must be finite, got {value}")
        # NaN fails this comparison as well
        if not error >= 0:
            raise InvalidQuantityError(f"error must be >= 0 or +inf, got {error}")

        object.__setattr__(self, "value", value)
        object.__setattr__(self, "error", error)

    @property
    def is_unbounded(self) -> bool:
        return self.error == np.inf

    @property
    def relative_error(self) -> float:
        if self.value == 0:
            return float('inf')
        return self.error / abs(self.value)

    # ── preconditions ────────────────────────────────────────────────────

    def _require_same_units(self, other: "Quantity", operation: str):
        if self.units != other.units:
            raise UnitMismatchError(
                f"Cannot {operation} quantities with different units: "
                f"'{self.units}' vs '{other.units}'"
            )

    def _require_dimensionless(self, operation: str):
        if not self.units.is_dimensionless:
            raise DimensionlessRequiredError(
                f"{operation}(...) requires a dimensionless quantity, got '{self.units}'"
            )

    # ── binary arithmetic ────────────────────────────────────────────────

    def add(self, other: "Quantity",
            model: ErrorPropagation = ErrorPropagation.WORST_CASE) -> "Quantity":
        self._require_same_units(other, "add")
        return Quantity(
            self.value + other.value,
            _combine((self.error, other.error), model),
            self.units,
        )

    def subtract(self, other: "Quantity",
                 model: ErrorPropagation = ErrorPropagation.WORST_CASE) -> "Quantity":
        self._require_same_units(other, "subtract")
        return Quantity(
            self.value - other.value,
            _combine((self.error, other.error), model),
            self.units,
        )

    def multiply(self, other: "Quantity",
                 model: ErrorPropagation = ErrorPropagation.WORST_CASE) -> "Quantity":
        # Δ(xy): contributions y·Δx and x·Δy
        contributions = (
            _scaled_error(other.value, self.error),
            _scaled_error(self.value, other.error),
        )
        return Quantity(
            self.value * other.value,
            _combine(contributions, model),
            self.units * other.units,
        )

    def divide(self, other: "Quantity",
               model: ErrorPropagation = ErrorPropagation.WORST_CASE) -> "Quantity":
        """
        Divide by ``other``.

        If the denominator's interval [v − Δv, v + Δv] contains zero, the
        linearised error is meaningless; the result gets ``error = +inf``
        under either model while the value is still v₁/v₂. This is a
        reporting policy, not a computed bound.
        """
        units = self.units / other.units
        with np.errstate(divide="ignore", invalid="ignore"):
            value = np.float64(self.value) / other.value

        if other.value - other.error <= 0.0 <= other.value + other.error:
            logger.debug(
                "Denominator %s +/- %s straddles zero; error set to +inf",
                other.value, other.error,
            )
            return Quantity(value, np.inf, units)

        # Δ(x/y): contributions Δx/y and x·Δy/y²
        contributions = (
            _scaled_error(1.0 / other.value, self.error),
            _scaled_error(self.value / other.value**2, other.error),
        )
        return Quantity(value, _combine(contributions, model), units)

    def negate(self) -> "Quantity":
        return Quantity(-self.value, self.error, self.units)

    def __add__(self, other):
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other):
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.multiply(other)

    def __truediv__(self, other):
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.divide(other)

    def __neg__(self):
        return self.negate()

    def __pow__(self, exponent):
        return self.pow(exponent)

    # ── single-variable functions ────────────────────────────────────────

    def pow(self, exponent: Exponent) -> "Quantity":
        """
        Raise to an exact rational power; units exponents are multiplied by it.

        Δf = |p · v^(p−1)| · Δv. A negative base with a fractional power is
        not guarded: the non-finite result is rejected by the constructor.
        """
        p = to_rational(exponent)
        p_real = float(p)
        with np.errstate(divide="ignore", invalid="ignore"):
            value = np.power(self.value, p_real)
            # d/dx x⁰ is exactly 0, even at x = 0
            slope = 0.0 if p == 0 else abs(p_real * np.power(self.value, p_real - 1))
        return Quantity(value, _scaled_error(slope, self.error), self.units ** p)

    def sqrt(self) -> "Quantity":
        return self.pow(sp.S.Half)

    def exp(self) -> "Quantity":
        self._require_dimensionless("exp")
        return self._propagate(_TRANSCENDENTALS["exp"], _X)

    def log(self) -> "Quantity":
        """Natural logarithm; requires a dimensionless, positive value."""
        self._require_dimensionless("log")
        if not self.value > 0:
            raise DomainError(f"log(...) requires a positive value, got {self.value}")
        return self._propagate(_TRANSCENDENTALS["log"], _X)

    def sin(self) -> "Quantity":
        self._require_dimensionless("sin")
        return self._propagate(_TRANSCENDENTALS["sin"], _X)

    def cos(self) -> "Quantity":
        self._require_dimensionless("cos")
        return self._propagate(_TRANSCENDENTALS["cos"], _X)

    def apply(self, expr, variable: sp.Symbol) -> "Quantity":
        """
        Propagate through an arbitrary single-variable function.

        Parameters
        ----------
        expr : sympy expression or str
            Function of ``variable`` only, e.g. ``"tanh(x)"``.
        variable : sympy.Symbol
            The free variable of ``expr``.

        The argument must be dimensionless; the result is dimensionless.
        """
        self._require_dimensionless(str(expr))
        expr = sp.sympify(expr, locals={variable.name: variable})
        extra = expr.free_symbols - {variable}
        if extra:
            raise ExpressionError(
                f"Expression {expr} has free symbols other than {variable}: "
                f"{sorted(str(s) for s in extra)}"
            )
        return self._propagate(expr, variable)

    def _propagate(self, expr: sp.Expr, variable: sp.Symbol) -> "Quantity":
        f, dfdx = _linearize(expr, variable)
        with np.errstate(divide="ignore", invalid="ignore"):
            value = float(f(self.value))
            slope = abs(float(dfdx(self.value)))
        return Quantity(value, _scaled_error(slope, self.error), DIMENSIONLESS)

    # ── rendering ────────────────────────────────────────────────────────

    def format_with_significant_error(self, sig_digits: int,
                                      leading_one_exception: bool = False) -> str:
        return format_with_significant_error(self, sig_digits, leading_one_exception)

    def __str__(self):
        unit_str = "" if self.units.is_dimensionless else f" {self.units}"
        return f"{self.value} +/- {self.error}{unit_str}"
