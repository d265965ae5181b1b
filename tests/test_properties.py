import math

from hypothesis import assume, given
from hypothesis import strategies as st
import pytest

from quantity_system import (
    ErrorPropagation,
    Quantity,
    UnitMismatchError,
    Units,
    format_with_significant_error,
)
from quantity_system.formatting import count_significant_digits

SYMBOLS = ["m", "s", "kg", "K", "A", "meter"]

units_st = st.dictionaries(
    st.sampled_from(SYMBOLS),
    st.one_of(st.integers(-3, 3), st.fractions(-3, 3, max_denominator=4)),
    max_size=4,
).map(Units)

values = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)
errors = st.floats(min_value=0.0, max_value=1e6, allow_nan=False, allow_infinity=False)
positive_errors = st.floats(min_value=1e-6, max_value=1e6)
magnitudes = st.floats(min_value=1e-3, max_value=1e3)
signs = st.sampled_from([-1.0, 1.0])


@given(value=st.floats(allow_nan=False, allow_infinity=False), units=units_st)
def test_zero_error_always_says_so(value, units):
    q = Quantity(value, 0.0, units)
    assert "(no error)" in format_with_significant_error(q, 1, False)


@given(v1=values, e1=errors, v2=values, e2=errors, units=units_st)
def test_add_is_linear_under_worst_case(v1, e1, v2, e2, units):
    total = Quantity(v1, e1, units) + Quantity(v2, e2, units)
    assert total.value == v1 + v2
    assert total.error == e1 + e2
    assert total.units == units


@given(v1=values, e1=errors, v2=values, e2=errors, u1=units_st, u2=units_st)
def test_add_and_subtract_fail_on_any_unit_mismatch(v1, e1, v2, e2, u1, u2):
    assume(u1 != u2)
    q1, q2 = Quantity(v1, e1, u1), Quantity(v2, e2, u2)
    with pytest.raises(UnitMismatchError):
        q1 + q2
    with pytest.raises(UnitMismatchError):
        q1 - q2


@given(
    v1=values, e1=errors,
    sign=signs, magnitude=magnitudes, e2=errors,
    u1=units_st, u2=units_st,
    model=st.sampled_from(list(ErrorPropagation)),
)
def test_multiply_and_divide_accept_any_units(v1, e1, sign, magnitude, e2, u1, u2, model):
    q1, q2 = Quantity(v1, e1, u1), Quantity(sign * magnitude, e2, u2)
    assert q1.multiply(q2, model).units == u1 * u2
    assert q1.divide(q2, model).units == u1 / u2


@given(units=units_st)
def test_inverse_units_cancel(units):
    assert (units.invert() * units).is_dimensionless


@given(v1=values, e1=errors, sign=signs, magnitude=magnitudes, extra=st.floats(0.0, 10.0))
def test_division_by_interval_containing_zero_is_unbounded(v1, e1, sign, magnitude, extra):
    denominator = Quantity(sign * magnitude, magnitude + extra)
    assert (Quantity(v1, e1) / denominator).error == math.inf


@given(value=values, error=positive_errors, sig=st.integers(1, 6))
def test_error_string_carries_requested_digits(value, error, sig):
    text = format_with_significant_error(Quantity(value, error), sig, False)
    error_str = text.split(" ± ")[1]
    digits = count_significant_digits(error_str)
    # rounding up a magnitude (9.6 → "10") can only add trailing integer zeros
    assert digits >= sig
    if "." in error_str:
        assert digits == sig


@given(value=values, error=positive_errors, sig=st.integers(1, 6),
       leading_one=st.booleans())
def test_value_and_error_share_decimals(value, error, sig, leading_one):
    text = format_with_significant_error(Quantity(value, error), sig, leading_one)
    value_str, error_str = text.split(" ± ")
    assert len(value_str.partition(".")[2]) == len(error_str.partition(".")[2])
