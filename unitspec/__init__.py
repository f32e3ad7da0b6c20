"""
UnitSpec - Physical Unit Conversion
===================================

Dimensional algebra, compound unit expressions and conversions between
units and unit systems.

    TEXT IN → PARSE → RESOLVE → CONVERT → QUANTITY OUT

Architecture:
    - dimensions / units: DimensionVector, Unit, Quantity
    - parser / registry: expression parsing, name/alias/prefix resolution
    - conversion / systems: ConversionEngine, SI/CGS/Imperial/Natural
    - session: front-end facade configured from config.yaml

Usage:
    from unitspec import UnitSession

    session = UnitSession()
    session.convert("100 km/hr", "m/s")

    # Or the CLI
    python -m unitspec.run "100 km/hr" "m/s"
"""

__version__ = "1.0.0"

from unitspec.conversion import ConversionEngine
from unitspec.definitions import (
    BUILTIN_RECORDS,
    Alias,
    BaseUnit,
    CustomDefinition,
    DerivedUnit,
    Functional,
    Linear,
    Prefix,
    Simple,
)
from unitspec.dimensions import Dimension, DimensionVector
from unitspec.errors import *  # noqa: F401,F403
from unitspec.errors import __all__ as _error_names
from unitspec.parser import UnitExpressionParser
from unitspec.registry import RegistryHandle, RegistryOptions, UnitRegistry
from unitspec.session import UnitSession
from unitspec.systems import UnitSystem, UnitSystemManager, builtin_systems
from unitspec.units import Quantity, Unit

__all__ = [
    'UnitSession', 'UnitRegistry', 'RegistryHandle', 'RegistryOptions',
    'UnitExpressionParser', 'ConversionEngine',
    'UnitSystem', 'UnitSystemManager', 'builtin_systems',
    'Dimension', 'DimensionVector', 'Unit', 'Quantity',
    'Prefix', 'BaseUnit', 'DerivedUnit', 'Alias', 'CustomDefinition',
    'Simple', 'Linear', 'Functional', 'BUILTIN_RECORDS',
    '__version__',
] + list(_error_names)
