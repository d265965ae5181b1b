"""
Significant-error formatting: ``value ± error [units]``.

The error is rounded (half-up) to a requested number of significant digits
and the value is rounded at the same decimal position, so the value string
carries exactly as many decimals as the error string. Examples::

    1.321 ± 0.214,  1 digit  →  "1.3 ± 0.2"
    12345 ± 120,    1 digit  →  "12300 ± 100"
    12345 ± 120,    1 digit, leading-one exception  →  "12350 ± 120"

All rounding happens in ``decimal.Decimal`` on the shortest repr of each
float, never with binary ``round()``, so ties at the rounding boundary go
away from zero exactly as written.
"""

from __future__ import annotations

import logging
import numbers
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import TYPE_CHECKING

import numpy as np

from .errors import PrecisionError

if TYPE_CHECKING:
    from .quantity import Quantity

logger = logging.getLogger(__name__)

PLUS_MINUS = "±"
INFINITY = "∞"
NO_ERROR = "(no error)"

_ONE = Decimal(1)


def format_with_significant_error(q: "Quantity", sig_digits: int,
                                  leading_one_exception: bool = False) -> str:
    """
    Render ``q`` with its error truncated to ``sig_digits`` significant digits.

    Parameters
    ----------
    q : Quantity
        Quantity to render.
    sig_digits : int
        Significant digits for the error, >= 1.
    leading_one_exception : bool
        If True, an error whose leading digit is 1 is shown with 2 digits
        when ``sig_digits`` is 1 (e.g. "120" instead of "100").

    Zero error renders the plain value followed by "(no error)"; an infinite
    error renders as "∞" and the value is left unrounded.
    """
    if isinstance(sig_digits, bool) or not isinstance(sig_digits, numbers.Integral) \
            or sig_digits < 1:
        raise PrecisionError(f"sig_digits must be an integer >= 1, got {sig_digits!r}")
    sig_digits = int(sig_digits)

    unit_str = "" if q.units.is_dimensionless else f" {q.units}"

    if q.error == 0:
        return f"{q.value} {NO_ERROR}{unit_str}"
    if np.isinf(q.error):
        logger.debug("Unbounded error for value %s; skipping digit rounding", q.value)
        return f"{q.value} {PLUS_MINUS} {INFINITY}{unit_str}"

    error = exact_decimal(abs(q.error))
    exponent = error.adjusted()                 # floor(log10(|error|))
    leading_digit = error.as_tuple().digits[0]

    effective_sig = sig_digits
    if leading_one_exception and leading_digit == 1 and sig_digits == 1:
        logger.debug("Leading-one exception: error %s shown with 2 digits", q.error)
        effective_sig = 2

    # Both numbers are rounded at the same decimal position.
    shift = effective_sig - 1 - exponent

    error_str = format_sig_digits(round_half_up(error, shift), effective_sig)
    decimals = count_decimals(error_str)
    value_str = format_decimals(round_half_up(exact_decimal(q.value), shift), decimals)

    return f"{value_str} {PLUS_MINUS} {error_str}{unit_str}"


# ═══════════════════════════════════════════════════════════════════════
# Decimal helpers
# ═══════════════════════════════════════════════════════════════════════

def exact_decimal(x: float) -> Decimal:
    """Decimal of the shortest repr of ``x`` (0.1 → Decimal("0.1"))."""
    return Decimal(repr(float(x)))


def round_half_up(number: Decimal, shift: int) -> Decimal:
    """Round ``number · 10^shift`` to an integer (ties away from zero), then scale back."""
    scaled = number.scaleb(shift)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, scaled.adjusted() + 2)
        rounded = scaled.quantize(_ONE, rounding=ROUND_HALF_UP)
        return rounded.scaleb(-shift)


def _strip_trailing_zeros(number: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(number.as_tuple().digits))
        return number.normalize()


def format_sig_digits(number: Decimal, sig_digits: int) -> str:
    """
    Plain string of an already rounded ``number`` with exactly ``sig_digits``
    significant digits, padding trailing zeros where needed.

        0.5, 2   → "0.50"
        123, 4   → "123.0"
        1000, 1  → "1000"    (already has 4)
    """
    if number.is_zero():
        return "0" if sig_digits == 1 else "0." + "0" * (sig_digits - 1)

    plain = format(_strip_trailing_zeros(number), "f")
    missing = sig_digits - count_significant_digits(plain)
    if missing <= 0:
        return plain
    if "." not in plain:
        plain += "."
    return plain + "0" * missing


def count_significant_digits(text: str) -> int:
    """Digits from the first nonzero one on; sign and decimal point ignored."""
    digits = text.lstrip("+-").replace(".", "")
    return len(digits.lstrip("0"))


def count_decimals(text: str) -> int:
    return len(text.partition(".")[2])


def format_decimals(number: Decimal, decimals: int) -> str:
    """Round half-up to exactly ``decimals`` places, keeping trailing zeros."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + decimals + 2)
        rounded = number.quantize(_ONE.scaleb(-decimals), rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        rounded = rounded.copy_abs()
    return format(rounded, "f")
