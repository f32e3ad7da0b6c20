"""
Unit Systems
============

A UnitSystem names one base unit per dimension. Converting a quantity into
a system re-expresses it as the product of those base units:

    SI:        meter, kilogram, second, ampere, kelvin, mole, candela
    CGS:       centimeter, gram, second, ampere, kelvin, mole, candela
    Imperial:  foot, pound, second, ampere, rankine, mole, candela
    Natural:   Planck length, mass, time, current and temperature
               (c = hbar = G = k_B = 1)

Systems are plain data. Which one is active is state held by a
UnitSystemManager instance, never a module global.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from unitspec.dimensions import Dimension
from unitspec.errors import SystemNotFoundError
from unitspec.units import Unit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnitSystem:
    name: str
    base_units: Mapping[Dimension, Unit]
    constants: Mapping[str, float] = field(default_factory=dict)
    description: str = ""

    def base_unit(self, dimension: Dimension) -> Optional[Unit]:
        return self.base_units.get(dimension)


# Base unit names per system, resolved through a registry
_SYSTEM_UNITS = {
    'SI': {
        Dimension.LENGTH: 'meter',
        Dimension.MASS: 'kilogram',
        Dimension.TIME: 'second',
        Dimension.CURRENT: 'ampere',
        Dimension.TEMPERATURE: 'kelvin',
        Dimension.AMOUNT: 'mole',
        Dimension.LUMINOSITY: 'candela',
    },
    'CGS': {
        Dimension.LENGTH: 'cm',
        Dimension.MASS: 'gram',
        Dimension.TIME: 'second',
        Dimension.CURRENT: 'ampere',
        Dimension.TEMPERATURE: 'kelvin',
        Dimension.AMOUNT: 'mole',
        Dimension.LUMINOSITY: 'candela',
    },
    'Imperial': {
        Dimension.LENGTH: 'foot',
        Dimension.MASS: 'pound',
        Dimension.TIME: 'second',
        Dimension.CURRENT: 'ampere',
        Dimension.TEMPERATURE: 'rankine',
        Dimension.AMOUNT: 'mole',
        Dimension.LUMINOSITY: 'candela',
    },
    'Natural': {
        Dimension.LENGTH: 'planck_length',
        Dimension.MASS: 'planck_mass',
        Dimension.TIME: 'planck_time',
        Dimension.CURRENT: 'planck_current',
        Dimension.TEMPERATURE: 'planck_temperature',
        Dimension.AMOUNT: 'mole',
        Dimension.LUMINOSITY: 'candela',
    },
}

_DESCRIPTIONS = {
    'SI': "International System of Units",
    'CGS': "Centimetre-gram-second",
    'Imperial': "Foot-pound-second with Rankine temperature",
    'Natural': "Planck units",
}

_CONSTANTS = {
    'Natural': {'c': 1.0, 'hbar': 1.0, 'G': 1.0, 'k_B': 1.0},
}


def builtin_systems(registry) -> List[UnitSystem]:
    """SI, CGS, Imperial and Natural, with base units taken from `registry`."""
    systems = []
    for name, names in _SYSTEM_UNITS.items():
        base_units = {dim: registry.resolve(unit_name) for dim, unit_name in names.items()}
        systems.append(UnitSystem(
            name=name,
            base_units=base_units,
            constants=dict(_CONSTANTS.get(name, {})),
            description=_DESCRIPTIONS[name],
        ))
    return systems


class UnitSystemManager:
    """Registered systems plus the currently active one."""

    def __init__(self, systems=(), active: str = 'SI'):
        self._systems: Dict[str, UnitSystem] = {}
        for system in systems:
            self.register(system)
        self._active = self.get(active) if self._systems else None

    def register(self, system: UnitSystem) -> None:
        if system.name in self._systems:
            logger.warning(f"Replacing unit system '{system.name}'")
        self._systems[system.name] = system

    def get(self, name: str) -> UnitSystem:
        try:
            return self._systems[name]
        except KeyError:
            raise SystemNotFoundError(name) from None

    def list_systems(self) -> List[str]:
        return list(self._systems)

    def switch(self, name: str) -> UnitSystem:
        system = self.get(name)
        self._active = system
        logger.info(f"Active unit system: {name}")
        return system

    @property
    def active(self) -> Optional[UnitSystem]:
        return self._active


__all__ = ['UnitSystem', 'UnitSystemManager', 'builtin_systems']
