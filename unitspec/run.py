"""
UnitSpec Converter (CLI wrapper)

Simple CLI interface for unitspec.session.

Usage:
    python -m unitspec.run "100 km/hr" "m/s"
    python -m unitspec.run "212 degF" degC --config config.yaml
    python -m unitspec.run "10 kg*m/s^2" --system Imperial
    python -m unitspec.run --list-units
    python -m unitspec.run --list-systems
"""

import argparse
import logging
import sys

from unitspec.config import ConfigurationError, Settings
from unitspec.errors import UnitSpecError
from unitspec.session import UnitSession


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format='%(message)s')

    parser = argparse.ArgumentParser(description="UnitSpec Converter")
    parser.add_argument("quantity", nargs="?", help='Quantity to convert, e.g. "100 km/hr"')
    parser.add_argument("target", nargs="?", help='Target unit, e.g. "m/s"')
    parser.add_argument("--config", help="Path to config YAML")
    parser.add_argument("--system", help="Express the quantity in this unit system's base units")
    parser.add_argument("--list-units", action="store_true", help="List unit names")
    parser.add_argument("--list-systems", action="store_true", help="List unit systems")

    args = parser.parse_args(argv)

    try:
        settings = Settings.from_file(args.config) if args.config else Settings()
        session = UnitSession(settings)
    except (ConfigurationError, UnitSpecError) as e:
        print(str(e), file=sys.stderr)
        return 1

    if args.list_units:
        for name in session.list_units():
            print(name)
        return 0

    if args.list_systems:
        for name in session.list_systems():
            marker = "*" if session.systems.active and session.systems.active.name == name else " "
            print(f" {marker} {name:10} {session.systems.get(name).description}")
        return 0

    if not args.quantity:
        parser.error("a quantity is required unless using --list-units or --list-systems")
    if not args.target and not args.system:
        parser.error("give a target unit or --system")

    try:
        quantity = session.parse(args.quantity)
        if args.target:
            result = session.convert(quantity, args.target)
        else:
            result = session.convert_to_system(quantity, args.system)
    except UnitSpecError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"{quantity} = {result}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
