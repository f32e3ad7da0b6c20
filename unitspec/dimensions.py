"""
Dimensional Algebra
===================

Dimensional analysis over the 7 SI base quantities.

A DimensionVector maps each base Dimension to an integer exponent:
    velocity = length^1 * time^-1  -> DimensionVector.of(length=1, time=-1)
    force = mass * length * time^-2 -> DimensionVector.of(mass=1, length=1, time=-2)

Zero exponents are never stored, so two vectors are equal exactly when
they describe the same physical kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Mapping, Tuple, Union


# =============================================================================
# BASE DIMENSIONS
# =============================================================================

class Dimension(Enum):
    """Base physical quantity kinds."""
    LENGTH = "length"             # L (meter)
    MASS = "mass"                 # M (kilogram)
    TIME = "time"                 # T (second)
    CURRENT = "current"           # I (ampere)
    TEMPERATURE = "temperature"   # Theta (kelvin)
    AMOUNT = "amount"             # N (mole)
    LUMINOSITY = "luminosity"     # J (candela)

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @classmethod
    def parse(cls, name: Union[str, Dimension]) -> Dimension:
        """Look up a dimension by value ('length') or member name ('LENGTH')."""
        if isinstance(name, Dimension):
            return name
        key = name.strip()
        try:
            return cls(key.lower())
        except ValueError:
            pass
        try:
            return cls[key.upper()]
        except KeyError:
            raise ValueError(f"Unknown dimension: {name}") from None


_SYMBOLS = {
    Dimension.LENGTH: 'L',
    Dimension.MASS: 'M',
    Dimension.TIME: 'T',
    Dimension.CURRENT: 'I',
    Dimension.TEMPERATURE: 'Theta',
    Dimension.AMOUNT: 'N',
    Dimension.LUMINOSITY: 'J',
}

_ORDER = {dim: i for i, dim in enumerate(Dimension)}


# =============================================================================
# DIMENSION VECTOR
# =============================================================================

ExponentSource = Union[Mapping[Dimension, int], Iterable[Tuple[Dimension, int]]]


@dataclass(frozen=True)
class DimensionVector:
    """
    Immutable exponent-per-dimension signature.

    Stored as a tuple of (Dimension, exponent) pairs in enum order with
    zero exponents removed. The empty vector is dimensionless.
    """
    exponents: Tuple[Tuple[Dimension, int], ...] = ()

    def __post_init__(self):
        items = self.exponents.items() if isinstance(self.exponents, Mapping) else self.exponents
        totals: Dict[Dimension, int] = {}
        for dim, exp in items:
            if isinstance(exp, bool) or not isinstance(exp, int):
                raise TypeError(f"Dimension exponents must be integers, got {exp!r}")
            dim = Dimension.parse(dim)
            totals[dim] = totals.get(dim, 0) + exp
        canonical = tuple(
            (dim, totals[dim])
            for dim in sorted(totals, key=_ORDER.__getitem__)
            if totals[dim] != 0
        )
        object.__setattr__(self, 'exponents', canonical)

    @classmethod
    def of(cls, **exponents: int) -> DimensionVector:
        """DimensionVector.of(mass=1, length=1, time=-2)"""
        return cls(tuple((Dimension.parse(k), v) for k, v in exponents.items()))

    @classmethod
    def base(cls, dim: Union[str, Dimension]) -> DimensionVector:
        return cls(((Dimension.parse(dim), 1),))

    def __getitem__(self, dim: Dimension) -> int:
        for d, exp in self.exponents:
            if d is dim:
                return exp
        return 0

    def __iter__(self):
        return iter(self.exponents)

    def __len__(self) -> int:
        return len(self.exponents)

    def as_dict(self) -> Dict[Dimension, int]:
        return dict(self.exponents)

    def is_dimensionless(self) -> bool:
        return not self.exponents

    def __mul__(self, other: DimensionVector) -> DimensionVector:
        """Multiply quantities -> add exponents"""
        return DimensionVector(self.exponents + other.exponents)

    def __truediv__(self, other: DimensionVector) -> DimensionVector:
        """Divide quantities -> subtract exponents"""
        return DimensionVector(self.exponents + tuple((d, -e) for d, e in other.exponents))

    def __pow__(self, n: int) -> DimensionVector:
        """Raise to power -> multiply all exponents"""
        if isinstance(n, bool) or not isinstance(n, int):
            raise TypeError(f"Dimension powers must be integers, got {n!r}")
        return DimensionVector(tuple((d, e * n) for d, e in self.exponents))

    def __repr__(self) -> str:
        parts = []
        for dim, exp in self.exponents:
            if exp == 1:
                parts.append(dim.symbol)
            else:
                parts.append(f"{dim.symbol}^{exp}")
        return ' * '.join(parts) if parts else '1'


def multiply(a: DimensionVector, b: DimensionVector) -> DimensionVector:
    return a * b


def divide(a: DimensionVector, b: DimensionVector) -> DimensionVector:
    return a / b


def power(a: DimensionVector, n: int) -> DimensionVector:
    return a ** n


# Common dimension constants
DIMENSIONLESS = DimensionVector()
LENGTH = DimensionVector.of(length=1)
MASS = DimensionVector.of(mass=1)
TIME = DimensionVector.of(time=1)
CURRENT = DimensionVector.of(current=1)
TEMPERATURE = DimensionVector.of(temperature=1)
AMOUNT = DimensionVector.of(amount=1)
LUMINOSITY = DimensionVector.of(luminosity=1)

# Derived dimensions
AREA = DimensionVector.of(length=2)
VOLUME = DimensionVector.of(length=3)
VELOCITY = DimensionVector.of(length=1, time=-1)
ACCELERATION = DimensionVector.of(length=1, time=-2)
FREQUENCY = DimensionVector.of(time=-1)
FORCE = DimensionVector.of(mass=1, length=1, time=-2)
PRESSURE = DimensionVector.of(mass=1, length=-1, time=-2)
ENERGY = DimensionVector.of(mass=1, length=2, time=-2)
POWER = DimensionVector.of(mass=1, length=2, time=-3)
DENSITY = DimensionVector.of(mass=1, length=-3)
CHARGE = DimensionVector.of(current=1, time=1)
VOLTAGE = DimensionVector.of(mass=1, length=2, time=-3, current=-1)
RESISTANCE = DimensionVector.of(mass=1, length=2, time=-3, current=-2)
CAPACITANCE = DimensionVector.of(mass=-1, length=-2, time=4, current=2)
INDUCTANCE = DimensionVector.of(mass=1, length=2, time=-2, current=-2)
MAGNETIC_FLUX = DimensionVector.of(mass=1, length=2, time=-2, current=-1)
MAGNETIC_FIELD = DimensionVector.of(mass=1, time=-2, current=-1)
DYNAMIC_VISCOSITY = DimensionVector.of(mass=1, length=-1, time=-1)
MOMENTUM = DimensionVector.of(mass=1, length=1, time=-1)


__all__ = [
    'Dimension', 'DimensionVector', 'multiply', 'divide', 'power',
    'DIMENSIONLESS', 'LENGTH', 'MASS', 'TIME', 'CURRENT', 'TEMPERATURE', 'AMOUNT',
    'LUMINOSITY', 'AREA', 'VOLUME', 'VELOCITY', 'ACCELERATION', 'FREQUENCY',
    'FORCE', 'PRESSURE', 'ENERGY', 'POWER', 'DENSITY', 'CHARGE', 'VOLTAGE',
    'RESISTANCE', 'CAPACITANCE', 'INDUCTANCE', 'MAGNETIC_FLUX', 'MAGNETIC_FIELD',
    'DYNAMIC_VISCOSITY', 'MOMENTUM',
]
