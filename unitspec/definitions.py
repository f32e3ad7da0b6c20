"""
Unit Definition Records
=======================

The registry is built from a sequence of tagged records. Where they come
from (a definitions file, a config file, code) is up to the loader; the
registry only sees parsed data.

Records:
    Prefix(symbol, multiplier)              k -> 1e3
    BaseUnit(name, dimension)               meter -> length
    DerivedUnit(name, definition)           foot -> "0.3048 m"
    Alias(name, canonical)                  feet -> foot
    CustomDefinition(name, variant)         furlong -> Simple(220, "yard")

Custom variants:
    Simple(scale, base)                     x * scale  [base]
    Linear(scale, offset, base)             x * scale + offset  [base]
    Functional(expression, base, inverse)   f(x)  [base]

BUILTIN_RECORDS below is the database shipped with the package.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from unitspec.dimensions import Dimension


# =============================================================================
# RECORD TYPES
# =============================================================================

@dataclass(frozen=True)
class Prefix:
    symbol: str
    multiplier: float


@dataclass(frozen=True)
class BaseUnit:
    name: str
    dimension: Dimension
    aliases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DerivedUnit:
    """Unit defined by an expression ("0.3048 m", "kg*m/s^2") or a bare scale."""
    name: str
    definition: Union[str, float]
    aliases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Alias:
    name: str
    canonical: str


@dataclass(frozen=True)
class Simple:
    scale: float
    base: str


@dataclass(frozen=True)
class Linear:
    scale: float
    offset: float
    base: str


@dataclass(frozen=True)
class Functional:
    expression: str
    base: str
    inverse: Optional[str] = None


CustomVariant = Union[Simple, Linear, Functional]


@dataclass(frozen=True)
class CustomDefinition:
    name: str
    variant: CustomVariant
    aliases: Tuple[str, ...] = ()


Record = Union[Prefix, BaseUnit, DerivedUnit, Alias, CustomDefinition]


# =============================================================================
# BUILT-IN DATABASE
# =============================================================================

def _prefixes(*entries):
    return [Prefix(symbol, multiplier) for symbol, multiplier in entries]


def _derived(name, definition, *aliases):
    return DerivedUnit(name, definition, tuple(aliases))


PREFIXES = _prefixes(
    ("Y", 1e24), ("Z", 1e21), ("E", 1e18), ("P", 1e15), ("T", 1e12),
    ("G", 1e9), ("M", 1e6), ("k", 1e3), ("h", 1e2), ("da", 1e1),
    ("d", 1e-1), ("c", 1e-2), ("m", 1e-3), ("u", 1e-6), ("µ", 1e-6),
    ("μ", 1e-6), ("n", 1e-9), ("p", 1e-12), ("f", 1e-15), ("a", 1e-18),
    ("z", 1e-21), ("y", 1e-24),
    # Spelled out: "kilometer" -> kilo + meter
    ("yotta", 1e24), ("zetta", 1e21), ("exa", 1e18), ("peta", 1e15),
    ("tera", 1e12), ("giga", 1e9), ("mega", 1e6), ("kilo", 1e3),
    ("hecto", 1e2), ("deca", 1e1), ("deka", 1e1), ("deci", 1e-1),
    ("centi", 1e-2), ("milli", 1e-3), ("micro", 1e-6), ("nano", 1e-9),
    ("pico", 1e-12), ("femto", 1e-15), ("atto", 1e-18), ("zepto", 1e-21),
    ("yocto", 1e-24),
)

BASE_UNITS = [
    BaseUnit("meter", Dimension.LENGTH, ("m", "metre", "meters", "metres")),
    BaseUnit("kilogram", Dimension.MASS, ("kg", "kilograms")),
    BaseUnit("second", Dimension.TIME, ("s", "sec", "seconds")),
    BaseUnit("ampere", Dimension.CURRENT, ("A", "amp", "amps", "amperes")),
    BaseUnit("kelvin", Dimension.TEMPERATURE, ("K",)),
    BaseUnit("mole", Dimension.AMOUNT, ("mol", "moles")),
    BaseUnit("candela", Dimension.LUMINOSITY, ("cd",)),
]

_RANKINE = 5 / 9

DERIVED_UNITS = [
    # -------------------------------------------------------------------------
    # LENGTH
    # -------------------------------------------------------------------------
    _derived("inch", "0.0254 m", "in", "inches"),
    _derived("foot", "0.3048 m", "ft", "feet"),
    _derived("yard", "0.9144 m", "yd", "yards"),
    _derived("mile", "1609.344 m", "mi", "miles"),
    _derived("nautical_mile", "1852 m", "nmi"),
    _derived("fathom", "1.8288 m"),
    _derived("thou", "2.54e-5 m", "mil"),
    _derived("angstrom", "1e-10 m", "Å"),
    _derived("micron", "1e-6 m"),
    _derived("astronomical_unit", "149597870700 m", "au"),
    _derived("light_year", "9460730472580800 m", "ly"),
    _derived("parsec", "3.0856775814913673e16 m", "pc"),

    # -------------------------------------------------------------------------
    # MASS
    # -------------------------------------------------------------------------
    _derived("gram", "0.001 kg", "g", "grams"),
    _derived("tonne", "1000 kg", "t", "metric_ton"),
    _derived("pound", "0.45359237 kg", "lb", "lbs", "lbm", "pounds"),
    _derived("ounce", "0.028349523125 kg", "oz"),
    _derived("grain", "6.479891e-5 kg", "gr"),
    _derived("stone", "6.35029318 kg", "st"),
    _derived("slug", "14.593902937206364 kg"),
    _derived("short_ton", "907.18474 kg", "ton"),
    _derived("long_ton", "1016.0469088 kg"),
    _derived("dalton", "1.66053906660e-27 kg", "Da", "amu"),

    # -------------------------------------------------------------------------
    # TIME
    # -------------------------------------------------------------------------
    _derived("minute", "60 s", "min", "minutes"),
    _derived("hour", "3600 s", "h", "hr", "hours"),
    _derived("day", "86400 s", "d", "days"),
    _derived("week", "604800 s", "wk", "weeks"),
    _derived("year", "31557600 s", "yr", "years", "julian_year"),

    # -------------------------------------------------------------------------
    # TEMPERATURE (differences and absolute Rankine; Celsius/Fahrenheit below)
    # -------------------------------------------------------------------------
    _derived("rankine", f"{_RANKINE!r} K", "degR", "°R"),
    _derived("delta_degC", "1 K"),
    _derived("delta_degF", f"{_RANKINE!r} K"),

    # -------------------------------------------------------------------------
    # ANGLE / DIMENSIONLESS
    # -------------------------------------------------------------------------
    _derived("radian", 1.0, "rad", "radians"),
    _derived("steradian", 1.0, "sr"),
    _derived("degree", math.pi / 180, "deg", "degrees", "°"),
    _derived("arcminute", math.pi / 10800, "arcmin"),
    _derived("arcsecond", math.pi / 648000, "arcsec"),
    _derived("revolution", 2 * math.pi, "rev", "turn"),
    _derived("percent", 0.01, "%", "pct"),
    _derived("permille", 0.001),
    _derived("ppm", 1e-6),
    _derived("ppb", 1e-9),

    # -------------------------------------------------------------------------
    # AREA / VOLUME
    # -------------------------------------------------------------------------
    _derived("hectare", "10000 m^2", "ha"),
    _derived("acre", "4046.8564224 m^2", "acres"),
    _derived("liter", "0.001 m^3", "L", "l", "litre", "liters"),
    _derived("cubic_centimeter", "cm^3", "cc"),
    _derived("gallon", "3.785411784 L", "gal", "gallons", "US_gal"),
    _derived("quart", "0.25 gal", "qt"),
    _derived("pint", "0.125 gal", "pt"),
    _derived("fluid_ounce", "0.0078125 gal", "fl_oz", "floz"),
    _derived("imperial_gallon", "4.54609 L", "imp_gal"),
    _derived("barrel", "42 gal", "bbl"),

    # -------------------------------------------------------------------------
    # MECHANICS
    # -------------------------------------------------------------------------
    _derived("hertz", "s^-1", "Hz"),
    _derived("newton", "kg*m/s^2", "N", "newtons"),
    _derived("pascal", "N/m^2", "Pa"),
    _derived("joule", "N*m", "J", "joules"),
    _derived("watt", "J/s", "W", "watts"),
    _derived("standard_gravity", "9.80665 m/s^2", "g0", "gee"),
    _derived("knot", f"{1852 / 3600!r} m/s", "kn", "knots"),
    _derived("mph", "mile/hour"),
    _derived("kph", "km/hour"),
    _derived("speed_of_light", "299792458 m/s", "c"),
    _derived("dyne", "1e-5 N", "dyn"),
    _derived("pound_force", "4.4482216152605 N", "lbf"),
    _derived("kilogram_force", "9.80665 N", "kgf", "kp"),
    _derived("bar", "1e5 Pa", "bars"),
    _derived("atmosphere", "101325 Pa", "atm"),
    _derived("torr", f"{101325 / 760!r} Pa", "Torr"),
    _derived("mmHg", "133.322387415 Pa"),
    _derived("psi", "lbf/in^2"),
    _derived("erg", "1e-7 J"),
    _derived("calorie", "4.184 J", "cal"),
    _derived("kilocalorie", "4184 J", "kcal", "Cal"),
    _derived("btu", "1055.05585262 J", "BTU", "Btu"),
    _derived("electronvolt", "1.602176634e-19 J", "eV"),
    _derived("watt_hour", "3600 J", "Wh"),
    _derived("horsepower", "745.69987158227 W", "hp"),
    _derived("poise", "0.1 Pa*s", "P"),
    _derived("stokes", "1e-4 m^2/s", "St"),

    # -------------------------------------------------------------------------
    # ELECTROMAGNETISM
    # -------------------------------------------------------------------------
    _derived("coulomb", "A*s", "C"),
    _derived("volt", "W/A", "V", "volts"),
    _derived("ohm", "V/A", "Ω", "ohms"),
    _derived("siemens", "A/V", "S"),
    _derived("farad", "C/V", "F"),
    _derived("weber", "V*s", "Wb"),
    _derived("henry", "Wb/A", "H"),
    _derived("tesla", "Wb/m^2", "T"),
    _derived("gauss", "1e-4 T"),

    # -------------------------------------------------------------------------
    # CHEMISTRY / RADIATION / PHOTOMETRY
    # -------------------------------------------------------------------------
    _derived("molar", "mol/L", "M"),
    _derived("katal", "mol/s", "kat"),
    _derived("becquerel", "s^-1", "Bq"),
    _derived("gray", "J/kg", "Gy"),
    _derived("sievert", "J/kg", "Sv"),
    _derived("lumen", "cd*sr", "lm"),
    _derived("lux", "lm/m^2", "lx"),

    # -------------------------------------------------------------------------
    # PLANCK UNITS (base units of the Natural system)
    # -------------------------------------------------------------------------
    _derived("planck_length", "1.616255e-35 m", "l_P"),
    _derived("planck_mass", "2.176434e-8 kg", "m_P"),
    _derived("planck_time", "5.391247e-44 s", "t_P"),
    _derived("planck_temperature", "1.416784e32 K", "T_P"),
    _derived("planck_current", "3.4789e25 A", "I_P"),
]

CUSTOM_UNITS = [
    CustomDefinition("celsius", Linear(1.0, 273.15, "K"), ("degC", "°C")),
    CustomDefinition("fahrenheit", Linear(_RANKINE, 459.67 * _RANKINE, "K"), ("degF", "°F")),
]

BUILTIN_RECORDS: Tuple[Record, ...] = tuple(PREFIXES + BASE_UNITS + DERIVED_UNITS + CUSTOM_UNITS)


__all__ = [
    'Prefix', 'BaseUnit', 'DerivedUnit', 'Alias', 'CustomDefinition',
    'Simple', 'Linear', 'Functional', 'CustomVariant', 'Record',
    'BUILTIN_RECORDS', 'PREFIXES', 'BASE_UNITS', 'DERIVED_UNITS', 'CUSTOM_UNITS',
]
