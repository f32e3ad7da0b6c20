"""
Units and Quantities
====================

A Unit is an immutable conversion descriptor: how many canonical (SI) units
it represents and which physical kind it measures.

    canonical = value * scale + offset      (offset != 0 only for affine units)

Functional units wrap a sandboxed expression instead:

    canonical = base.to_canonical(forward(value))

Affine and functional units can only stand alone. Multiplying, dividing or
raising them to a power other than 1 raises AffineCompositionError.

Usage:
    >>> meter = Unit("meter", 1.0, LENGTH)
    >>> second = Unit("second", 1.0, TIME)
    >>> (meter / second ** 2).dims
    L * T^-2
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Optional, Union

import numpy as np

from unitspec.dimensions import DIMENSIONLESS, DimensionVector
from unitspec.errors import (
    AffineCompositionError,
    IncompatibleDimensionsError,
    UnsupportedDirectionError,
)
from unitspec.expression import CompiledExpression

Number = Union[float, np.ndarray]


# =============================================================================
# FUNCTIONAL MAP
# =============================================================================

@dataclass(frozen=True)
class FunctionalMap:
    """
    Non-linear mapping between a functional unit and its base unit.

    forward(x) gives the value in `base`; inverse(y) maps a `base` value
    back. Without an inverse the unit can only be converted *from*.
    """
    forward: CompiledExpression
    base: Unit
    inverse: Optional[CompiledExpression] = None

    @property
    def invertible(self) -> bool:
        return self.inverse is not None


# =============================================================================
# UNIT
# =============================================================================

@dataclass(frozen=True)
class Unit:
    """Named, immutable conversion descriptor with a dimension signature."""
    name: str
    scale: float
    dims: DimensionVector = DIMENSIONLESS
    offset: float = 0.0
    aliases: FrozenSet[str] = field(default_factory=frozenset, compare=False)
    function: Optional[FunctionalMap] = None

    @classmethod
    def dimensionless(cls) -> Unit:
        return cls("1", 1.0, DIMENSIONLESS)

    @property
    def is_affine(self) -> bool:
        return self.offset != 0.0

    @property
    def is_functional(self) -> bool:
        return self.function is not None

    @property
    def is_linear(self) -> bool:
        """Purely multiplicative (no offset, no function)."""
        return self.offset == 0.0 and self.function is None

    def is_compatible_with(self, other: Unit) -> bool:
        return self.dims == other.dims

    # -------------------------------------------------------------------------
    # Algebra
    # -------------------------------------------------------------------------

    def _require_linear(self, operation: str) -> None:
        if not self.is_linear:
            raise AffineCompositionError(self.name, operation)

    def multiply(self, other: Unit) -> Unit:
        self._require_linear("multiplication")
        other._require_linear("multiplication")
        return Unit(
            f"{self.name}*{other.name}",
            self.scale * other.scale,
            self.dims * other.dims,
        )

    def divide(self, other: Unit) -> Unit:
        self._require_linear("division")
        other._require_linear("division")
        return Unit(
            f"{self.name}/{_group(other.name, '*/')}",
            self.scale / other.scale,
            self.dims / other.dims,
        )

    def power(self, n: int) -> Unit:
        if n == 1:
            return self
        self._require_linear(f"power {n}")
        return Unit(f"{_group(self.name, '*/^')}^{n}", self.scale ** n, self.dims ** n)

    def scaled(self, factor: float, name: str) -> Unit:
        """Same kind and offset, scale multiplied by `factor` (used for prefixes)."""
        return Unit(name, self.scale * factor, self.dims, self.offset)

    def renamed(self, name: str, aliases=()) -> Unit:
        return replace(self, name=name, aliases=frozenset(aliases))

    __mul__ = multiply
    __truediv__ = divide
    __pow__ = power

    # -------------------------------------------------------------------------
    # Canonical form
    # -------------------------------------------------------------------------

    def to_canonical(self, value: Number) -> Number:
        """Value in this unit -> value in the canonical (SI) unit of its kind."""
        if self.function is not None:
            return self.function.base.to_canonical(self.function.forward(value))
        if self.offset == 0.0:
            return value * self.scale
        return value * self.scale + self.offset

    def from_canonical(self, value: Number) -> Number:
        """
        Canonical (SI) value -> value in this unit.

        Raises:
            UnsupportedDirectionError: Functional unit without an inverse
        """
        if self.function is not None:
            if self.function.inverse is None:
                raise UnsupportedDirectionError(self.name)
            return self.function.inverse(self.function.base.from_canonical(value))
        if self.offset == 0.0:
            return value / self.scale
        return (value - self.offset) / self.scale

    def __str__(self) -> str:
        return self.name


def _group(name: str, operators: str) -> str:
    """Parenthesise compound names so composed names read unambiguously."""
    if any(op in name for op in operators):
        return f"({name})"
    return name


def multiply(u1: Unit, u2: Unit) -> Unit:
    return u1.multiply(u2)


def divide(u1: Unit, u2: Unit) -> Unit:
    return u1.divide(u2)


def power(u: Unit, n: int) -> Unit:
    return u.power(n)


# =============================================================================
# QUANTITY
# =============================================================================

@dataclass(frozen=True)
class Quantity:
    """
    A value with a unit.

    Arithmetic keeps the dimensions right:
        >>> q = Quantity(2.0, kg) * Quantity(3.0, m / s ** 2)
        >>> q.unit.dims
        L * M * T^-2

    Addition and subtraction express the right operand in the left
    operand's unit first.
    """
    value: Number
    unit: Unit

    @property
    def dims(self) -> DimensionVector:
        return self.unit.dims

    @property
    def si(self) -> Number:
        """Value in canonical (SI) units"""
        return self.unit.to_canonical(self.value)

    def __mul__(self, other: Union[Quantity, float, int]) -> Quantity:
        if isinstance(other, Quantity):
            return Quantity(self.value * other.value, self.unit.multiply(other.unit))
        if isinstance(other, (int, float)):
            return Quantity(self.value * other, self.unit)
        return NotImplemented

    def __rmul__(self, other: Union[float, int]) -> Quantity:
        if isinstance(other, (int, float)):
            return Quantity(other * self.value, self.unit)
        return NotImplemented

    def __truediv__(self, other: Union[Quantity, float, int]) -> Quantity:
        if isinstance(other, Quantity):
            return Quantity(self.value / other.value, self.unit.divide(other.unit))
        if isinstance(other, (int, float)):
            return Quantity(self.value / other, self.unit)
        return NotImplemented

    def __pow__(self, n: int) -> Quantity:
        return Quantity(self.value ** n, self.unit.power(n))

    def __neg__(self) -> Quantity:
        return Quantity(-self.value, self.unit)

    def __abs__(self) -> Quantity:
        return Quantity(abs(self.value), self.unit)

    def _in_own_unit(self, other: Quantity) -> Number:
        if not isinstance(other, Quantity):
            raise TypeError(f"Cannot combine Quantity and {type(other)}")
        if self.dims != other.dims:
            raise IncompatibleDimensionsError(other.dims, self.dims)
        if other.unit == self.unit:
            return other.value
        return self.unit.from_canonical(other.unit.to_canonical(other.value))

    def __add__(self, other: Quantity) -> Quantity:
        return Quantity(self.value + self._in_own_unit(other), self.unit)

    def __sub__(self, other: Quantity) -> Quantity:
        return Quantity(self.value - self._in_own_unit(other), self.unit)

    def __repr__(self) -> str:
        return f"Quantity({self.value!r}, '{self.unit.name}')"

    def __str__(self) -> str:
        if isinstance(self.value, np.ndarray):
            return f"{self.value} {self.unit.name}"
        if self.value != 0 and (abs(self.value) < 0.001 or abs(self.value) > 10000):
            return f"{self.value:.4e} {self.unit.name}"
        return f"{self.value:.4f} {self.unit.name}"


__all__ = ['Unit', 'FunctionalMap', 'Quantity', 'multiply', 'divide', 'power']
