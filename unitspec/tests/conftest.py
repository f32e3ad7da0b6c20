"""
Shared fixtures: one registry built from the built-in records per session.
"""

import pytest


@pytest.fixture(scope="session")
def registry():
    from unitspec.definitions import BUILTIN_RECORDS
    from unitspec.registry import UnitRegistry

    return UnitRegistry.build(BUILTIN_RECORDS)


@pytest.fixture
def parser(registry):
    from unitspec.parser import UnitExpressionParser

    return UnitExpressionParser(registry)


@pytest.fixture
def engine(registry):
    from unitspec.conversion import ConversionEngine

    return ConversionEngine(registry)


@pytest.fixture
def session():
    from unitspec.session import UnitSession

    return UnitSession()
