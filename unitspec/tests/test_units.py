"""
Test Units and Quantities
=========================
"""

import pytest


def _si():
    from unitspec.dimensions import LENGTH, MASS, TIME, TEMPERATURE
    from unitspec.units import Unit

    meter = Unit("meter", 1.0, LENGTH)
    kilogram = Unit("kilogram", 1.0, MASS)
    second = Unit("second", 1.0, TIME)
    celsius = Unit("celsius", 1.0, TEMPERATURE, offset=273.15)
    return meter, kilogram, second, celsius


def test_composition():
    """Scales multiply, dimensions add."""
    from unitspec.dimensions import ACCELERATION, FORCE

    meter, kilogram, second, _ = _si()
    km = meter.scaled(1000.0, "km")

    accel = km / second ** 2
    assert accel.scale == 1000.0
    assert accel.dims == ACCELERATION
    assert (kilogram * accel).dims == FORCE
    assert accel.name == "km/second^2"


def test_power_one_is_identity():
    meter, _, _, celsius = _si()

    assert meter.power(1) is meter
    assert celsius.power(1) is celsius


def test_affine_units_do_not_compose():
    """degC * m is meaningless."""
    from unitspec.errors import AffineCompositionError

    meter, _, second, celsius = _si()

    with pytest.raises(AffineCompositionError):
        celsius * meter
    with pytest.raises(AffineCompositionError):
        meter / celsius
    with pytest.raises(AffineCompositionError):
        celsius ** 2


def test_canonical_round_trip():
    """to_canonical then from_canonical gives the value back."""
    meter, _, _, celsius = _si()
    foot = meter.scaled(0.3048, "foot")

    for unit in (meter, foot, celsius):
        for v in (-40.0, 0.0, 1.0, 123.456):
            assert unit.from_canonical(unit.to_canonical(v)) == pytest.approx(v, rel=1e-9, abs=1e-12)

    assert celsius.to_canonical(100.0) == pytest.approx(373.15)


def test_functional_unit_without_inverse():
    from unitspec.dimensions import DimensionVector
    from unitspec.errors import UnsupportedDirectionError
    from unitspec.expression import compile_expression
    from unitspec.units import FunctionalMap, Unit

    watt = Unit("watt", 1.0, DimensionVector.of(mass=1, length=2, time=-3))
    mw = watt.scaled(1e-3, "mW")
    dbm = Unit("dBm", 1.0, mw.dims, function=FunctionalMap(compile_expression("10^(x/10)"), mw))

    assert dbm.is_functional
    assert not dbm.function.invertible
    assert dbm.to_canonical(30.0) == pytest.approx(1.0)
    with pytest.raises(UnsupportedDirectionError):
        dbm.from_canonical(1.0)


def test_quantity_arithmetic():
    from unitspec.dimensions import AREA
    from unitspec.units import Quantity

    meter, _, second, _ = _si()
    foot = meter.scaled(0.3048, "foot")

    q = Quantity(2.0, meter) * Quantity(3.0, meter)
    assert q.value == 6.0
    assert q.dims == AREA

    total = Quantity(1.0, meter) + Quantity(1.0, foot)
    assert total.unit == meter
    assert total.value == pytest.approx(1.3048)

    assert (2 * Quantity(1.5, second)).value == 3.0
    assert (-Quantity(1.5, second)).value == -1.5


def test_quantity_addition_checks_dimensions():
    from unitspec.errors import IncompatibleDimensionsError
    from unitspec.units import Quantity

    meter, _, second, _ = _si()

    with pytest.raises(IncompatibleDimensionsError):
        Quantity(1.0, meter) + Quantity(1.0, second)


def test_quantity_str():
    from unitspec.units import Quantity

    meter, _, _, _ = _si()

    assert str(Quantity(1.5, meter)) == "1.5000 meter"
    assert str(Quantity(1.5e6, meter)) == "1.5000e+06 meter"


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
