"""
Test Unit Registry
==================
"""

import pytest

from unitspec.definitions import (
    Alias,
    BaseUnit,
    CustomDefinition,
    DerivedUnit,
    Functional,
    Linear,
    Prefix,
    Simple,
)
from unitspec.dimensions import Dimension


def _small_records():
    return [
        Prefix("k", 1e3),
        Prefix("m", 1e-3),
        BaseUnit("meter", Dimension.LENGTH, ("m",)),
        BaseUnit("second", Dimension.TIME, ("s",)),
        BaseUnit("kelvin", Dimension.TEMPERATURE, ("K",)),
        DerivedUnit("yard", "0.9144 m", ("yd",)),
    ]


def test_builtin_registry_has_no_duplicates():
    """The shipped database builds under the strict override policy."""
    from unitspec.definitions import BUILTIN_RECORDS
    from unitspec.registry import OverridePolicy, RegistryOptions, UnitRegistry

    registry = UnitRegistry.build(BUILTIN_RECORDS, options=RegistryOptions(override_policy=OverridePolicy.STRICT))
    assert "meter" in registry.list_units()
    assert "celsius" in registry.list_units()


def test_aliases_resolve_to_canonical(registry):
    foot = registry.resolve("ft")

    assert foot.name == "foot"
    assert "feet" in foot.aliases
    assert foot.scale == pytest.approx(0.3048)
    assert registry.list_aliases()["ft"] == "foot"


def test_derived_units_in_any_order():
    """Derived units may refer to units defined later."""
    from unitspec.registry import UnitRegistry

    records = [DerivedUnit("chain", "22 yd")] + _small_records()
    registry = UnitRegistry.build(records)

    assert registry.resolve("chain").scale == pytest.approx(20.1168)


def test_custom_simple_unit():
    """furlong = 220 yard."""
    from unitspec.registry import UnitRegistry

    registry = UnitRegistry.build(_small_records(), [CustomDefinition("furlong", Simple(220, "yard"))])

    assert registry.resolve("furlong").scale == pytest.approx(201.168)
    assert registry.resolve("kfurlong").scale == pytest.approx(201168.0)


def test_custom_linear_unit():
    from unitspec.registry import UnitRegistry

    registry = UnitRegistry.build(_small_records(), [CustomDefinition("degC", Linear(1.0, 273.15, "K"))])
    unit = registry.resolve("degC")

    assert unit.offset == pytest.approx(273.15)
    assert unit.to_canonical(0.0) == pytest.approx(273.15)


def test_custom_linear_on_affine_base():
    """Offsets compose: base offset plus scaled own offset."""
    from unitspec.registry import UnitRegistry

    registry = UnitRegistry.build(_small_records(), [
        CustomDefinition("degC", Linear(1.0, 273.15, "K")),
        CustomDefinition("degRe", Linear(1.25, 0.0, "degC")),
    ])

    assert registry.resolve("degRe").to_canonical(80.0) == pytest.approx(373.15)


def test_circular_custom_definitions():
    """a = 2 b, b = 3 a fails for either name."""
    from unitspec.errors import CircularDefinitionError
    from unitspec.registry import UnitRegistry

    registry = UnitRegistry.build(_small_records(), [
        CustomDefinition("a", Simple(2, "b")),
        CustomDefinition("b", Simple(3, "a")),
    ])

    with pytest.raises(CircularDefinitionError) as exc:
        registry.resolve("a")
    assert exc.value.chain == ("a", "b", "a")

    with pytest.raises(CircularDefinitionError):
        registry.resolve("b")


def test_circular_derived_units_fail_build():
    from unitspec.errors import CircularDefinitionError
    from unitspec.registry import UnitRegistry

    with pytest.raises(CircularDefinitionError):
        UnitRegistry.build(_small_records() + [DerivedUnit("a", "2 b"), DerivedUnit("b", "3 a")])


def test_dangling_alias_fails_build():
    from unitspec.errors import UnknownUnitSymbol
    from unitspec.registry import UnitRegistry

    with pytest.raises(UnknownUnitSymbol):
        UnitRegistry.build(_small_records() + [Alias("furlongs", "furlong")])


def test_override_policy():
    """Later registration wins, unless the policy is strict."""
    from unitspec.errors import DuplicateDefinitionError
    from unitspec.registry import OverridePolicy, RegistryOptions, UnitRegistry

    redefined = [DerivedUnit("yard", "3 m")]

    registry = UnitRegistry.build(_small_records(), redefined)
    assert registry.resolve("yard").scale == 3.0

    strict = RegistryOptions(override_policy=OverridePolicy.STRICT)
    with pytest.raises(DuplicateDefinitionError) as exc:
        UnitRegistry.build(_small_records(), redefined, strict)
    assert exc.value.name == "yard"
    assert exc.value.kind == "derived"


def test_prefix_resolution_policies():
    """Longest prefix wins by default; strict mode reports the ambiguity."""
    from unitspec.errors import AmbiguousUnitSymbol
    from unitspec.registry import PrefixResolution, RegistryOptions, UnitRegistry

    records = _small_records() + [
        Prefix("p", 1e-12),
        Prefix("pa", 2.0),
        DerivedUnit("as", "7 s"),
    ]

    registry = UnitRegistry.build(records)
    assert registry.resolve("pas").scale == 2.0

    strict = UnitRegistry.build(records, options=RegistryOptions(prefix_resolution=PrefixResolution.STRICT))
    with pytest.raises(AmbiguousUnitSymbol) as exc:
        strict.resolve("pas")
    assert set(exc.value.candidates) == {("p", "as"), ("pa", "s")}


def test_functional_units_are_not_prefixed():
    from unitspec.errors import UnknownUnitSymbol
    from unitspec.registry import UnitRegistry

    registry = UnitRegistry.build(_small_records(), [
        CustomDefinition("dBm", Functional("10^(x/10)", "mm", "10*log10(x)")),
    ])

    assert registry.resolve("dBm").is_functional
    with pytest.raises(UnknownUnitSymbol):
        registry.resolve("kdBm")


def test_unknown_name(registry):
    from unitspec.errors import UnknownUnitSymbol

    assert "meter" in registry
    assert "km" in registry
    assert "blorp" not in registry
    with pytest.raises(UnknownUnitSymbol):
        registry.resolve("blorp")


def test_tables_are_read_only(registry):
    with pytest.raises(TypeError):
        registry._units["blorp"] = registry.resolve("m")


def test_describe(registry):
    info = registry.describe("km")

    assert info['kind'] == 'prefixed'
    assert info['scale'] == 1000.0
    assert registry.describe("meter")['kind'] == 'base'
    assert registry.describe("degF")['kind'] == 'alias'
    assert registry.list_prefixes()["k"] == 1e3


def test_handle_define_publishes_new_registry():
    """Old registry is untouched; the handle points at the rebuilt one."""
    from unitspec.registry import RegistryHandle, UnitRegistry

    handle = RegistryHandle(UnitRegistry.build(_small_records()))
    before = handle.current

    after = handle.define(CustomDefinition("furlong", Simple(220, "yard")))

    assert handle.current is after
    assert after is not before
    assert "furlong" in after
    assert "furlong" not in before


def test_handle_reload_keeps_inputs():
    from unitspec.registry import RegistryHandle, UnitRegistry

    handle = RegistryHandle(UnitRegistry.build(_small_records(), [CustomDefinition("furlong", Simple(220, "yard"))]))
    handle.reload(records=_small_records() + [DerivedUnit("rod", "5.0292 m")])

    assert "rod" in handle.current
    assert "furlong" in handle.current


def test_reload_failure_keeps_published_registry():
    """A failed build never replaces the current registry."""
    from unitspec.errors import UnknownUnitSymbol
    from unitspec.registry import RegistryHandle, UnitRegistry

    handle = RegistryHandle(UnitRegistry.build(_small_records()))
    before = handle.current

    with pytest.raises(UnknownUnitSymbol):
        handle.reload(records=_small_records() + [DerivedUnit("bad", "3 nothing")])

    assert handle.current is before



def test_contains_is_false_for_unresolvable_names():
    """Circular and ambiguous names are not units; `in` never raises."""
    from unitspec.registry import PrefixResolution, RegistryOptions, UnitRegistry

    registry = UnitRegistry.build(_small_records(), [
        CustomDefinition("a", Simple(2, "b")),
        CustomDefinition("b", Simple(3, "a")),
    ])
    assert "a" not in registry
    assert "b" not in registry

    records = _small_records() + [Prefix("p", 1e-12), Prefix("pa", 2.0), DerivedUnit("as", "7 s")]
    strict = UnitRegistry.build(records, options=RegistryOptions(prefix_resolution=PrefixResolution.STRICT))
    assert "pas" not in strict


def test_handle_prepare_failure_aborts_swap():
    """If preparing dependent state fails, the old registry stays published."""
    from unitspec.registry import RegistryHandle, UnitRegistry

    handle = RegistryHandle(UnitRegistry.build(_small_records()))
    before = handle.current
    seen = []

    def prepare(registry):
        seen.append(registry)
        raise RuntimeError("systems failed")

    with pytest.raises(RuntimeError):
        handle.define(CustomDefinition("furlong", Simple(220, "yard")), prepare=prepare)

    assert handle.current is before
    assert "furlong" in seen[0]


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
