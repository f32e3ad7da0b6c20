"""
Test Dimensional Algebra
========================
"""

import pytest


def test_canonical_form_drops_zero_exponents():
    """Exponents that cancel are not stored."""
    from unitspec.dimensions import DimensionVector, LENGTH

    v = LENGTH / LENGTH
    assert v.exponents == ()
    assert v.is_dimensionless()
    assert all(exp != 0 for _, exp in DimensionVector.of(length=2, time=0, mass=-1))


def test_force_signature():
    """kg * m / s^2 -> M L T^-2"""
    from unitspec.dimensions import Dimension, FORCE, LENGTH, MASS, TIME

    force = MASS * LENGTH / TIME ** 2
    assert force == FORCE
    assert force[Dimension.MASS] == 1
    assert force[Dimension.LENGTH] == 1
    assert force[Dimension.TIME] == -2
    assert force[Dimension.CURRENT] == 0


def test_order_independent_equality():
    """Construction order does not matter."""
    from unitspec.dimensions import Dimension, DimensionVector

    a = DimensionVector({Dimension.TIME: -1, Dimension.LENGTH: 1})
    b = DimensionVector.of(length=1, time=-1)
    assert a == b
    assert hash(a) == hash(b)


def test_power_and_repr():
    from unitspec.dimensions import DIMENSIONLESS, VELOCITY

    assert repr(VELOCITY) == 'L * T^-1'
    assert repr(VELOCITY ** 2) == 'L^2 * T^-2'
    assert VELOCITY ** 0 == DIMENSIONLESS
    assert repr(DIMENSIONLESS) == '1'


def test_non_integer_exponents_rejected():
    """Only integer exponents exist."""
    from unitspec.dimensions import DimensionVector, LENGTH

    with pytest.raises(TypeError):
        LENGTH ** 0.5
    with pytest.raises(TypeError):
        DimensionVector.of(length=1.5)
    with pytest.raises(TypeError):
        DimensionVector.of(length=True)


def test_dimension_parse():
    from unitspec.dimensions import Dimension

    assert Dimension.parse('length') is Dimension.LENGTH
    assert Dimension.parse('TEMPERATURE') is Dimension.TEMPERATURE
    with pytest.raises(ValueError):
        Dimension.parse('charm')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
