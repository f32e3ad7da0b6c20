"""
Unit Session
============

Front-end surface: parse, convert, switch systems, define units.

    >>> session = UnitSession()
    >>> round(session.convert("100 km/hr", "m/s").value, 4)
    27.7778
    >>> registry = session.define("furlong", Simple(220, "yard"))
    >>> round(session.convert("1 furlong", "m").value, 3)
    201.168

Every operation reads the published registry once, so a concurrent
define() or reload() never shows it a half-built database.
"""

from typing import Iterable, List, Optional, Union

from unitspec.config.loader import Settings
from unitspec.conversion import ConversionEngine
from unitspec.definitions import (
    BUILTIN_RECORDS,
    CustomDefinition,
    DerivedUnit,
    Functional,
    Linear,
    Record,
    Simple,
)
from unitspec.parser import UnitExpressionParser
from unitspec.registry import (
    OverridePolicy,
    PrefixResolution,
    RegistryHandle,
    RegistryOptions,
    UnitRegistry,
)
from unitspec.systems import UnitSystem, UnitSystemManager, builtin_systems
from unitspec.units import Quantity, Unit


class UnitSession:
    """
    Registry, unit systems and conversion engine configured from Settings.

    Args:
        settings: Session settings (defaults when None)
        records: Built-in definition records
    """

    def __init__(self, settings: Optional[Settings] = None, records: Iterable[Record] = BUILTIN_RECORDS):
        self.settings = settings or Settings()
        options = RegistryOptions(
            override_policy=OverridePolicy(self.settings.override_policy),
            prefix_resolution=PrefixResolution(self.settings.prefix_resolution),
        )
        registry = UnitRegistry.build(records, self.settings.custom_units, options)
        self.handle = RegistryHandle(registry)
        self._extra_systems: List[UnitSystem] = []
        self.systems = UnitSystemManager(builtin_systems(registry), self.settings.default_system)

    @property
    def registry(self) -> UnitRegistry:
        return self.handle.current

    def _engine(self, registry: UnitRegistry) -> ConversionEngine:
        return ConversionEngine(registry, self.settings.functional_inverse)

    # -------------------------------------------------------------------------
    # Parsing / conversion
    # -------------------------------------------------------------------------

    def parse(self, text: str) -> Quantity:
        return UnitExpressionParser(self.handle.current).parse(text)

    def parse_unit(self, text: str) -> Unit:
        return UnitExpressionParser(self.handle.current).parse_unit(text)

    def convert(self, quantity: Union[Quantity, str], target: Union[Unit, str]) -> Quantity:
        """Convert a Quantity (or quantity text) to a target unit (or unit text)."""
        registry = self.handle.current
        if isinstance(quantity, str):
            quantity = UnitExpressionParser(registry).parse(quantity)
        return self._engine(registry).convert(quantity, target)

    def convert_to_system(self, quantity: Union[Quantity, str], system: Optional[str] = None) -> Quantity:
        """Express a quantity in the base units of `system` (the active system when None)."""
        registry = self.handle.current
        if isinstance(quantity, str):
            quantity = UnitExpressionParser(registry).parse(quantity)
        target = self.systems.get(system) if system is not None else self.systems.active
        return self._engine(registry).convert_between_systems(quantity, target)

    # -------------------------------------------------------------------------
    # Listings / systems
    # -------------------------------------------------------------------------

    def list_units(self) -> List[str]:
        return self.handle.current.list_units()

    def list_systems(self) -> List[str]:
        return self.systems.list_systems()

    def switch_system(self, name: str) -> UnitSystem:
        return self.systems.switch(name)

    def register_system(self, system: UnitSystem) -> None:
        self._extra_systems.append(system)
        self.systems.register(system)

    # -------------------------------------------------------------------------
    # Definitions
    # -------------------------------------------------------------------------

    def define(self, name: str, definition: Union[Simple, Linear, Functional, str, float], aliases=()) -> UnitRegistry:
        """
        Add a unit and publish the rebuilt registry.

        `definition` is a custom variant (Simple, Linear, Functional), an
        expression text such as "220 yard", or a bare dimensionless scale.
        Custom units resolve lazily, so a definition may refer to a unit
        defined later. Nothing is published when the build or the unit
        systems fail.
        """
        if isinstance(definition, (Simple, Linear, Functional)):
            record = CustomDefinition(name, definition, tuple(aliases))
        elif isinstance(definition, (str, int, float)) and not isinstance(definition, bool):
            record = DerivedUnit(name, definition, tuple(aliases))
        else:
            raise TypeError(f"Cannot define '{name}' from {definition!r}")

        return self.handle.define(record, prepare=self._install_systems)

    def reload(self, records: Optional[Iterable[Record]] = None) -> UnitRegistry:
        """Rebuild from `records` (current records when None) and publish."""
        return self.handle.reload(records=records, prepare=self._install_systems)

    def _install_systems(self, registry: UnitRegistry) -> UnitSystemManager:
        # Runs before the registry is published; raising here aborts the swap
        active = self.systems.active.name if self.systems.active else self.settings.default_system
        manager = UnitSystemManager(builtin_systems(registry), self.settings.default_system)
        for system in self._extra_systems:
            manager.register(system)
        if active in manager.list_systems():
            manager.switch(active)
        self.systems = manager
        return manager


__all__ = ['UnitSession']
