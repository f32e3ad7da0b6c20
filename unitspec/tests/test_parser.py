"""
Test Unit Expression Parser
===========================
"""

import pytest


def test_compound_expression_dims(parser):
    """10 kg*m/s^2 is a force."""
    from unitspec.dimensions import Dimension

    q = parser.parse("10 kg*m/s^2")

    assert q.value == 10.0
    assert q.dims.as_dict() == {Dimension.MASS: 1, Dimension.LENGTH: 1, Dimension.TIME: -2}
    assert q.unit.name == "kg*m/s^2"


def test_prefixed_unit(parser, registry):
    """km is 1000 meters."""
    from unitspec.dimensions import LENGTH

    km = parser.parse_unit("km")
    assert km.dims == LENGTH
    assert km.scale == 1000.0 * registry.resolve("meter").scale

    q = parser.parse("km")
    assert q.value == 1.0
    assert q.unit.scale == 1000.0


def test_left_associative_division(parser):
    """J/kg/K is (J/kg)/K."""
    from unitspec.dimensions import DimensionVector

    unit = parser.parse_unit("J/kg/K")
    assert unit.dims == DimensionVector.of(length=2, time=-2, temperature=-1)


def test_parentheses_and_negative_exponents(parser):
    a = parser.parse_unit("W/(m^2*K)")
    b = parser.parse_unit("W*m^-2*K^-1")
    assert a.dims == b.dims
    assert a.scale == pytest.approx(b.scale)

    inverse_second = parser.parse_unit("1/s")
    assert inverse_second.dims == parser.parse_unit("Hz").dims


def test_alternative_operators(parser):
    """** for ^ and a middle dot for *."""
    assert parser.parse_unit("m**2").dims == parser.parse_unit("m^2").dims
    assert parser.parse_unit("N·m").dims == parser.parse_unit("J").dims


def test_number_forms(parser):
    assert parser.parse("1.5e3 m").value == 1500.0
    assert parser.parse("-40 degC").value == -40.0
    assert parser.parse(".5 s").value == 0.5
    assert parser.parse("  42  ").dims.is_dimensionless()


@pytest.mark.parametrize("text", [
    "",
    "   ",
    "10m",
    "m^",
    "m^1.5",
    "m^x",
    "(m",
    "m)",
    "m s",
    "2 m*3 s",
    "m $",
    "1..2 m",
])
def test_syntax_errors(parser, text):
    """Malformed text is a syntax error with a position."""
    from unitspec.errors import UnitSyntaxError

    with pytest.raises(UnitSyntaxError) as exc:
        parser.parse(text)
    assert exc.value.position >= 0


def test_unknown_unit(parser):
    from unitspec.errors import UnknownUnitSymbol

    with pytest.raises(UnknownUnitSymbol) as exc:
        parser.parse("3 furlongs/fortnight")
    assert exc.value.name == "furlongs"


def test_affine_unit_in_compound_expression(parser):
    """degC/s is rejected; degC alone is fine."""
    from unitspec.errors import AffineCompositionError

    assert parser.parse("20 degC").unit.offset == pytest.approx(273.15)
    with pytest.raises(AffineCompositionError):
        parser.parse("20 degC/s")


def test_tokenize_positions():
    from unitspec.parser import tokenize

    tokens = tokenize("10 kg*m")
    assert [(t.kind, t.text, t.position) for t in tokens] == [
        ('number', '10', 0),
        ('name', 'kg', 3),
        ('op', '*', 5),
        ('name', 'm', 6),
    ]



def test_deep_nesting_is_a_syntax_error(parser):
    """Thousands of parentheses give a positioned syntax error, not a crash."""
    from unitspec.errors import UnitSyntaxError
    from unitspec.parser import MAX_NESTING

    with pytest.raises(UnitSyntaxError) as exc:
        parser.parse("1 " + "(" * 3000 + "m" + ")" * 3000)
    assert exc.value.reason == "expression nested too deeply"
    assert exc.value.position == 2 + MAX_NESTING

    nested = "(" * MAX_NESTING + "m" + ")" * MAX_NESTING
    assert parser.parse_unit(nested).scale == 1.0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
