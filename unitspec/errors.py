"""
UnitSpec Errors
===============

Every failure in the core is classified by type and carries the data that
caused it. Wording for humans belongs to the front end.

Hierarchy:
    UnitSpecError
    ├── ParseError
    │   ├── UnitSyntaxError
    │   ├── UnknownUnitSymbol
    │   ├── AmbiguousUnitSymbol
    │   ├── CircularDefinitionError
    │   └── ExpressionEvaluationError
    ├── ConversionError
    │   ├── IncompatibleDimensionsError
    │   ├── AffineCompositionError
    │   └── UnsupportedDirectionError
    ├── UnitSystemError
    │   ├── SystemNotFoundError
    │   └── MissingBaseUnitError
    └── DefinitionError
        └── DuplicateDefinitionError
"""

from typing import Sequence, Tuple


class UnitSpecError(Exception):
    """Base class for all unitspec failures."""
    pass


# =============================================================================
# PARSING / RESOLUTION
# =============================================================================

class ParseError(UnitSpecError):
    """Text could not be turned into a unit or quantity."""
    pass


class UnitSyntaxError(ParseError):
    """Malformed expression text (bad number, exponent, empty input, ...)."""

    def __init__(self, position: int, reason: str, text: str = ""):
        self.position = position
        self.reason = reason
        self.text = text
        super().__init__(f"{reason} at position {position}")


class UnknownUnitSymbol(ParseError):
    """No registry entry or prefix decomposition matches the name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown unit: '{name}'")


class AmbiguousUnitSymbol(ParseError):
    """Several prefix decompositions match and the policy cannot pick one."""

    def __init__(self, name: str, candidates: Sequence[Tuple[str, str]]):
        self.name = name
        self.candidates = tuple(candidates)
        options = ", ".join(f"{p}+{u}" for p, u in self.candidates)
        super().__init__(f"Ambiguous unit '{name}': {options}")


class CircularDefinitionError(ParseError):
    """A definition refers back to itself through a chain of names."""

    def __init__(self, chain: Sequence[str]):
        self.chain = tuple(chain)
        super().__init__(f"Circular definition: {' -> '.join(self.chain)}")


class ExpressionEvaluationError(ParseError):
    """A functional expression is not allowed or cannot be evaluated."""

    def __init__(self, expression: str, reason: str):
        self.expression = expression
        self.reason = reason
        super().__init__(f"Cannot evaluate '{expression}': {reason}")


# =============================================================================
# CONVERSION
# =============================================================================

class ConversionError(UnitSpecError):
    """A quantity cannot be expressed in the requested unit."""
    pass


class IncompatibleDimensionsError(ConversionError):
    def __init__(self, source_dims, target_dims):
        self.source_dims = source_dims
        self.target_dims = target_dims
        super().__init__(f"Cannot convert {source_dims} to {target_dims}")


class AffineCompositionError(ConversionError):
    """Affine or functional unit used inside a multi-term expression."""

    def __init__(self, unit: str, operation: str):
        self.unit = unit
        self.operation = operation
        super().__init__(f"Unit '{unit}' cannot take part in {operation}")


class UnsupportedDirectionError(ConversionError):
    """Conversion toward a functional unit that has no inverse."""

    def __init__(self, unit: str):
        self.unit = unit
        super().__init__(f"No inverse available for functional unit '{unit}'")


# =============================================================================
# UNIT SYSTEMS
# =============================================================================

class UnitSystemError(UnitSpecError):
    pass


class SystemNotFoundError(UnitSystemError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown unit system: '{name}'")


class MissingBaseUnitError(UnitSystemError):
    """The system declares no base unit for a dimension that is needed."""

    def __init__(self, system: str, dimension):
        self.system = system
        self.dimension = dimension
        super().__init__(f"System '{system}' has no base unit for {dimension}")


# =============================================================================
# DEFINITIONS
# =============================================================================

class DefinitionError(UnitSpecError):
    pass


class DuplicateDefinitionError(DefinitionError):
    """A name was registered twice while the strict override policy is on."""

    def __init__(self, name: str, kind: str):
        self.name = name
        self.kind = kind
        super().__init__(f"'{name}' is already defined ({kind})")


__all__ = [
    'UnitSpecError',
    'ParseError', 'UnitSyntaxError', 'UnknownUnitSymbol', 'AmbiguousUnitSymbol',
    'CircularDefinitionError', 'ExpressionEvaluationError',
    'ConversionError', 'IncompatibleDimensionsError', 'AffineCompositionError',
    'UnsupportedDirectionError',
    'UnitSystemError', 'SystemNotFoundError', 'MissingBaseUnitError',
    'DefinitionError', 'DuplicateDefinitionError',
]
