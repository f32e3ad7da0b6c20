"""
Conversion Engine
=================

Converts quantities between compatible units and re-expresses them in a
unit system's base units.

    same unit:          value unchanged
    linear -> linear:   value * (source.scale / target.scale)
    anything else:      target.from_canonical(source.to_canonical(value))

The first two paths keep identity conversions exact. The last handles affine
units (degC, degF) and functional units.

A functional target without an inverse can only be reached when the engine
runs with functional_inverse='numeric': the root of forward(x) - y is
bracketed on a doubling grid and solved with scipy.optimize.brentq.
"""

import logging
from enum import Enum
from typing import Optional, Union

import numpy as np
from scipy.optimize import brentq

from unitspec.errors import (
    ExpressionEvaluationError,
    IncompatibleDimensionsError,
    MissingBaseUnitError,
    UnsupportedDirectionError,
)
from unitspec.parser import UnitExpressionParser
from unitspec.units import Number, Quantity, Unit

logger = logging.getLogger(__name__)

# Bracket search grid: 0, +-1, +-2, +-4, ... +-2^MAX_DOUBLINGS
MAX_DOUBLINGS = 64


class FunctionalInverse(Enum):
    EXPLICIT = "explicit"   # only declared inverse expressions
    NUMERIC = "numeric"     # fall back to root finding


class ConversionEngine:
    """
    Converts quantities using one registry.

    Args:
        registry: UnitRegistry used to resolve target unit text
        functional_inverse: 'explicit' (default) or 'numeric'
    """

    def __init__(self, registry, functional_inverse: Union[str, FunctionalInverse] = FunctionalInverse.EXPLICIT):
        self.registry = registry
        self.functional_inverse = FunctionalInverse(functional_inverse)

    def _unit(self, unit: Union[Unit, str]) -> Unit:
        if isinstance(unit, Unit):
            return unit
        return UnitExpressionParser(self.registry).parse_unit(unit)

    def convert(self, quantity: Quantity, target: Union[Unit, str]) -> Quantity:
        """
        Express `quantity` in `target`.

        Raises:
            IncompatibleDimensionsError: Different physical kinds
            UnsupportedDirectionError: Functional target without an inverse
            ExpressionEvaluationError: Functional expression failed
        """
        target = self._unit(target)
        return Quantity(self._convert_value(quantity.value, quantity.unit, target), target)

    def convert_values(self, values, source: Union[Unit, str], target: Union[Unit, str]) -> np.ndarray:
        """Convert an array of magnitudes from `source` to `target` in one call."""
        source = self._unit(source)
        target = self._unit(target)
        return np.asarray(self._convert_value(np.asarray(values, dtype=float), source, target), dtype=float)

    def _convert_value(self, value: Number, source: Unit, target: Unit) -> Number:
        if source.dims != target.dims:
            raise IncompatibleDimensionsError(source.dims, target.dims)

        if source == target:
            return value
        if source.is_linear and target.is_linear:
            return value * (source.scale / target.scale)

        canonical = source.to_canonical(value)
        try:
            return target.from_canonical(canonical)
        except UnsupportedDirectionError:
            if self.functional_inverse is not FunctionalInverse.NUMERIC:
                raise
        return self._solve_inverse(target, canonical)

    # -------------------------------------------------------------------------
    # Numeric inversion
    # -------------------------------------------------------------------------

    def _solve_inverse(self, target: Unit, canonical: Number) -> Number:
        if isinstance(canonical, np.ndarray):
            solved = [self._solve_scalar(target, float(v)) for v in canonical.ravel()]
            return np.array(solved, dtype=float).reshape(canonical.shape)
        return self._solve_scalar(target, float(canonical))

    def _solve_scalar(self, target: Unit, canonical: float) -> float:
        function = target.function
        wanted = function.base.from_canonical(canonical)

        def residual(x: float) -> float:
            return function.forward(x) - wanted

        bracket = _find_bracket(residual)
        if bracket is None:
            raise UnsupportedDirectionError(target.name)

        lo, hi = bracket
        if lo == hi:
            return lo
        root = brentq(residual, lo, hi, xtol=1e-12, rtol=1e-12, maxiter=200)
        logger.debug(f"Inverted '{target.name}' numerically in [{lo}, {hi}]: {root}")
        return float(root)

    # -------------------------------------------------------------------------
    # Unit systems
    # -------------------------------------------------------------------------

    def convert_between_systems(self, quantity: Quantity, system) -> Quantity:
        """
        Re-express `quantity` in the base units of `system`.

        The target unit is the product of the system's base unit for each
        dimension raised to that dimension's exponent.

        Raises:
            MissingBaseUnitError: The system has no base unit for a needed dimension
        """
        composite: Optional[Unit] = None
        for dimension, exponent in quantity.dims:
            base = system.base_units.get(dimension)
            if base is None:
                raise MissingBaseUnitError(system.name, dimension)
            factor = base.power(exponent)
            composite = factor if composite is None else composite.multiply(factor)

        if composite is None:
            composite = Unit.dimensionless()

        canonical = quantity.unit.to_canonical(quantity.value)
        return Quantity(composite.from_canonical(canonical), composite)


def _find_bracket(residual):
    """
    Two grid points with opposite residual signs, or (x, x) on an exact root.

    Points where the expression cannot be evaluated are skipped.
    """
    grid = [0.0]
    for k in range(MAX_DOUBLINGS + 1):
        grid.extend((-2.0 ** k, 2.0 ** k))
    grid.sort()

    previous = None
    for x in grid:
        try:
            r = residual(x)
        except ExpressionEvaluationError:
            previous = None
            continue
        if r == 0.0:
            return x, x
        if previous is not None and (previous[1] < 0) != (r < 0):
            return previous[0], x
        previous = (x, r)
    return None


__all__ = ['ConversionEngine', 'FunctionalInverse']
