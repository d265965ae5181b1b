import dataclasses
from fractions import Fraction

import pytest
import sympy as sp

from quantity_system import DIMENSIONLESS, Units, to_rational


def test_zero_exponents_are_dropped():
    units = Units({"m": 1, "s": 0})
    assert units == Units({"m": 1})
    assert dict(units.exponents) == {"m": sp.Integer(1)}
    assert Units({"m": 0}).is_dimensionless


def test_dimensionless():
    assert DIMENSIONLESS.is_dimensionless
    assert Units().is_dimensionless
    assert Units({}) == DIMENSIONLESS
    assert str(DIMENSIONLESS) == ""


def test_multiply_sums_exponents():
    force = Units({"kg": 1, "m": 1, "s": -2})
    length = Units.of("m")
    assert force * length == Units({"kg": 1, "m": 2, "s": -2})
    assert force.multiply(length) == force * length


def test_multiply_cancels_to_dimensionless():
    assert (Units.of("m") * Units.of("m", -1)).is_dimensionless


def test_divide_subtracts_exponents():
    speed = Units.of("m") / Units.of("s")
    assert speed.exponent("m") == 1
    assert speed.exponent("s") == -1
    assert speed.exponent("kg") == 0
    assert (speed / speed).is_dimensionless


def test_invert_negates_every_exponent():
    units = Units({"m": 2, "s": -1})
    assert units.invert() == Units({"m": -2, "s": 1})
    assert ~units == units.invert()


def test_power_multiplies_exponents_exactly():
    area = Units({"m": 2, "s": -1})
    root = area.power(Fraction(1, 2))
    assert root.exponent("m") == 1
    assert root.exponent("s") == sp.Rational(-1, 2)
    assert area ** sp.S.Half == root
    assert area.power(0).is_dimensionless


def test_render_sorts_symbols_and_shows_non_unit_exponents():
    assert str(Units({"s": -2, "kg": 1, "m": 1})) == "kg m s^-2"
    assert str(Units({"m": 2, "s": -1}).power(sp.S.Half)) == "m s^-1/2"
    assert str(Units.of("m", "1/3")) == "m^1/3"
    # plain lexicographic order: uppercase before lowercase
    assert str(Units({"m": 1, "K": 1})) == "K m"


def test_symbols_are_opaque():
    assert Units.of("m") != Units.of("meter")
    assert not (Units.of("m") / Units.of("meter")).is_dimensionless


def test_equality_and_hash_ignore_construction_order():
    a = Units({"m": 1, "s": -1})
    b = Units({"s": Fraction(-1), "m": "1"})
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1


def test_units_are_immutable():
    units = Units.of("m")
    with pytest.raises(TypeError):
        units.exponents["m"] = 2
    with pytest.raises(dataclasses.FrozenInstanceError):
        units.exponents = {}


def test_operations_return_new_values():
    units = Units.of("m")
    units * Units.of("s")
    units.power(3)
    assert units == Units.of("m")


def test_non_units_operands_are_rejected():
    with pytest.raises(TypeError):
        Units.of("m") * 2


@pytest.mark.parametrize(
    "raw, expected",
    [
        (2, sp.Integer(2)),
        (Fraction(3, 4), sp.Rational(3, 4)),
        ("1/2", sp.Rational(1, 2)),
        (0.5, sp.Rational(1, 2)),
        (0.1, sp.Rational(1, 10)),
        (sp.Rational(-2, 3), sp.Rational(-2, 3)),
    ],
)
def test_to_rational(raw, expected):
    assert to_rational(raw) == expected
