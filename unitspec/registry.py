"""
Unit Registry
=============

Resolves names, aliases, prefixes and custom definitions to Units.

Resolution of a bare name:
    1. base / derived / alias tables
    2. custom definitions (resolved lazily, cycle-checked)
    3. prefix + name, where the remainder matches step 1 or 2
    4. otherwise UnknownUnitSymbol

A registry is built once from definition records and is read-only
afterwards. To change the database, build a new one and publish it through
a RegistryHandle:

    >>> handle = RegistryHandle(UnitRegistry.build(BUILTIN_RECORDS))
    >>> registry = handle.define(CustomDefinition("furlong", Simple(220, "yard")))
    >>> round(handle.current.resolve("furlong").scale, 3)
    201.168
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from unitspec.definitions import (
    Alias,
    BaseUnit,
    CustomDefinition,
    DerivedUnit,
    Functional,
    Linear,
    Prefix,
    Record,
    Simple,
)
from unitspec.dimensions import DIMENSIONLESS, DimensionVector
from unitspec.errors import (
    AffineCompositionError,
    AmbiguousUnitSymbol,
    CircularDefinitionError,
    DuplicateDefinitionError,
    ParseError,
    UnknownUnitSymbol,
)
from unitspec.expression import CompiledExpression, compile_expression
from unitspec.parser import parse_quantity
from unitspec.units import FunctionalMap, Unit

logger = logging.getLogger(__name__)

Chain = Tuple[str, ...]


# =============================================================================
# POLICIES
# =============================================================================

class OverridePolicy(Enum):
    """What happens when a name is registered twice."""
    OVERRIDE = "override"   # later registration wins, logged as a warning
    STRICT = "strict"       # DuplicateDefinitionError


class PrefixResolution(Enum):
    """How to pick between several valid prefix decompositions."""
    LONGEST = "longest"     # longest matching prefix wins
    STRICT = "strict"       # any two differing decompositions are ambiguous


@dataclass(frozen=True)
class RegistryOptions:
    override_policy: OverridePolicy = OverridePolicy.OVERRIDE
    prefix_resolution: PrefixResolution = PrefixResolution.LONGEST


# =============================================================================
# REGISTRY
# =============================================================================

class UnitRegistry:
    """
    Read-only unit database.

    Build with UnitRegistry.build(); the constructor only creates an empty
    shell for the builder to fill.
    """

    def __init__(self, options: Optional[RegistryOptions] = None):
        self.options = options or RegistryOptions()
        self.records: Tuple[Record, ...] = ()
        self.user_records: Tuple[Record, ...] = ()

        self._units: Dict[str, Unit] = {}
        self._base_names: set = set()
        self._pending: Dict[str, DerivedUnit] = {}
        self._aliases: Dict[str, str] = {}
        self._custom: Dict[str, CustomDefinition] = {}
        self._compiled: Dict[str, Tuple[CompiledExpression, Optional[CompiledExpression]]] = {}
        self._prefixes: Dict[str, float] = {}
        self._alias_index: Dict[str, Tuple[str, ...]] = {}

    @classmethod
    def build(
        cls,
        records: Iterable[Record],
        user_records: Iterable[Record] = (),
        options: Optional[RegistryOptions] = None,
    ) -> 'UnitRegistry':
        """
        Build a complete registry.

        User records are layered on top of the built-in records and may
        replace them, subject to the override policy.

        Raises:
            DuplicateDefinitionError: Name registered twice under STRICT policy
            UnknownUnitSymbol: A derived unit or alias refers to nothing
            CircularDefinitionError: Derived units that define each other
            ExpressionEvaluationError: Invalid functional expression
        """
        registry = cls(options)
        registry.records = tuple(records)
        registry.user_records = tuple(user_records)

        for record in registry.records + registry.user_records:
            registry._add(record)
        registry._finalize()

        logger.debug(
            f"Built registry: {len(registry._units)} units, {len(registry._aliases)} aliases, "
            f"{len(registry._custom)} custom, {len(registry._prefixes)} prefixes"
        )
        return registry

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def _kind_of(self, name: str) -> Optional[str]:
        if name in self._base_names:
            return 'base'
        if name in self._units or name in self._pending:
            return 'derived'
        if name in self._aliases:
            return 'alias'
        if name in self._custom:
            return 'custom'
        return None

    def _claim(self, name: str) -> None:
        """Make `name` available, applying the override policy."""
        existing = self._kind_of(name)
        if existing is None:
            return
        if self.options.override_policy is OverridePolicy.STRICT:
            raise DuplicateDefinitionError(name, existing)

        logger.warning(f"Overriding {existing} unit '{name}'")
        self._base_names.discard(name)
        self._units.pop(name, None)
        self._pending.pop(name, None)
        self._aliases.pop(name, None)
        self._custom.pop(name, None)
        self._compiled.pop(name, None)

    def _add_aliases(self, canonical: str, aliases: Sequence[str]) -> None:
        for alias in aliases:
            self._claim(alias)
            self._aliases[alias] = canonical

    def _add(self, record: Record) -> None:
        if isinstance(record, Prefix):
            if record.symbol in self._prefixes:
                if self.options.override_policy is OverridePolicy.STRICT:
                    raise DuplicateDefinitionError(record.symbol, 'prefix')
                logger.warning(f"Overriding prefix '{record.symbol}'")
            self._prefixes[record.symbol] = float(record.multiplier)

        elif isinstance(record, BaseUnit):
            self._claim(record.name)
            self._units[record.name] = Unit(record.name, 1.0, DimensionVector.base(record.dimension))
            self._base_names.add(record.name)
            self._add_aliases(record.name, record.aliases)

        elif isinstance(record, DerivedUnit):
            self._claim(record.name)
            self._pending[record.name] = record
            self._add_aliases(record.name, record.aliases)

        elif isinstance(record, Alias):
            self._claim(record.name)
            self._aliases[record.name] = record.canonical

        elif isinstance(record, CustomDefinition):
            self._claim(record.name)
            self._custom[record.name] = record
            variant = record.variant
            if isinstance(variant, Functional):
                inverse = compile_expression(variant.inverse) if variant.inverse else None
                self._compiled[record.name] = (compile_expression(variant.expression), inverse)
            self._add_aliases(record.name, record.aliases)

        else:
            raise TypeError(f"Unknown definition record: {record!r}")

    def _finalize(self) -> None:
        # Alias chains point at their final target
        index: Dict[str, List[str]] = {}
        for alias in self._aliases:
            target = self._alias_target(alias)
            index.setdefault(target, []).append(alias)
        self._alias_index = {name: tuple(aliases) for name, aliases in index.items()}

        for name in list(self._units):
            self._units[name] = self._units[name].renamed(name, self._alias_index.get(name, ()))
        while self._pending:
            name = next(iter(self._pending))
            self._resolve_derived(name, ())

        self._units = MappingProxyType(self._units)
        self._aliases = MappingProxyType(self._aliases)
        self._custom = MappingProxyType(self._custom)
        self._compiled = MappingProxyType(self._compiled)
        self._prefixes = MappingProxyType(self._prefixes)
        self._alias_index = MappingProxyType(self._alias_index)
        self._base_names = frozenset(self._base_names)

    def _alias_target(self, alias: str) -> str:
        seen = [alias]
        target = self._aliases[alias]
        while target in self._aliases:
            if target in seen:
                raise CircularDefinitionError(seen + [target])
            seen.append(target)
            target = self._aliases[target]
        if target not in self._units and target not in self._pending and target not in self._custom:
            raise UnknownUnitSymbol(target)
        return target

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def resolve(self, name: str) -> Unit:
        """
        Resolve a single unit name (no operators).

        Raises:
            UnknownUnitSymbol: Nothing matches
            AmbiguousUnitSymbol: Prefix decompositions conflict
            CircularDefinitionError: Custom definitions refer to each other
        """
        return self._resolve(name, ())

    def _resolve(self, name: str, chain: Chain) -> Unit:
        unit = self._resolve_exact(name, chain)
        if unit is None:
            unit = self._resolve_prefixed(name, chain)
        if unit is None:
            raise UnknownUnitSymbol(name)
        return unit

    def _resolve_exact(self, name: str, chain: Chain) -> Optional[Unit]:
        if name in chain:
            raise CircularDefinitionError(chain + (name,))
        if name in self._units:
            return self._units[name]
        if name in self._pending:
            return self._resolve_derived(name, chain)
        if name in self._aliases:
            return self._resolve_exact(self._aliases[name], chain + (name,))
        if name in self._custom:
            return self._resolve_custom(name, chain)
        return None

    def _resolve_prefixed(self, name: str, chain: Chain) -> Optional[Unit]:
        candidates = []
        for symbol, multiplier in self._prefixes.items():
            if len(symbol) >= len(name) or not name.startswith(symbol):
                continue
            rest = name[len(symbol):]
            unit = self._resolve_exact(rest, chain)
            if unit is None or unit.is_functional:
                continue
            candidates.append((symbol, rest, unit.scaled(multiplier, name)))

        if not candidates:
            return None
        if self.options.prefix_resolution is PrefixResolution.LONGEST:
            longest = max(len(symbol) for symbol, _, _ in candidates)
            candidates = [c for c in candidates if len(c[0]) == longest]

        distinct = {(unit.scale, unit.offset, unit.dims) for _, _, unit in candidates}
        if len(distinct) > 1:
            raise AmbiguousUnitSymbol(name, [(symbol, rest) for symbol, rest, _ in candidates])
        return candidates[0][2]

    def _resolve_derived(self, name: str, chain: Chain) -> Unit:
        record = self._pending[name]
        aliases = self._alias_index.get(name, ())
        if isinstance(record.definition, str):
            unit = self._scaled_definition(name, 1.0, record.definition, chain + (name,), aliases)
        else:
            unit = Unit(name, float(record.definition), DIMENSIONLESS, aliases=frozenset(aliases))
        del self._pending[name]
        self._units[name] = unit
        return unit

    def _resolve_custom(self, name: str, chain: Chain) -> Unit:
        variant = self._custom[name].variant
        aliases = self._alias_index.get(name, ())
        inner = chain + (name,)

        if isinstance(variant, Simple):
            return self._scaled_definition(name, variant.scale, variant.base, inner, aliases)

        if isinstance(variant, Linear):
            base = self._evaluate(variant.base, inner)
            if base.is_functional:
                raise AffineCompositionError(base.name, "linear definition")
            return Unit(
                name,
                variant.scale * base.scale,
                base.dims,
                variant.offset * base.scale + base.offset,
                aliases=frozenset(aliases),
            )

        forward, inverse = self._compiled[name]
        base = self._evaluate(variant.base, inner)
        return Unit(
            name,
            1.0,
            base.dims,
            aliases=frozenset(aliases),
            function=FunctionalMap(forward=forward, base=base, inverse=inverse),
        )

    def _scaled_definition(self, name: str, factor: float, text: str, chain: Chain, aliases) -> Unit:
        """`factor * text`, where text may carry its own leading number."""
        base = self._evaluate(text, chain)
        if base.is_functional:
            raise AffineCompositionError(base.name, "scaling")
        return Unit(name, factor * base.scale, base.dims, base.offset, aliases=frozenset(aliases))

    def _evaluate(self, text: str, chain: Chain) -> Unit:
        quantity = parse_quantity(text, lambda n: self._resolve(n, chain))
        if quantity.value == 1.0:
            return quantity.unit
        if quantity.unit.is_functional:
            raise AffineCompositionError(quantity.unit.name, "scaling")
        return quantity.unit.scaled(quantity.value, quantity.unit.name)

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    def __contains__(self, name: str) -> bool:
        """True when `name` resolves; unknown, ambiguous and circular names are not units."""
        try:
            self.resolve(name)
        except ParseError:
            return False
        return True

    def list_units(self) -> List[str]:
        """Canonical names of all base, derived and custom units."""
        return sorted(list(self._units) + list(self._custom))

    def list_aliases(self) -> Dict[str, str]:
        return {alias: self._alias_target(alias) for alias in self._aliases}

    def list_prefixes(self) -> Dict[str, float]:
        return dict(self._prefixes)

    def describe(self, name: str) -> dict:
        """Kind and conversion data for a name, for listings in a front end."""
        kind = self._kind_of(name) or 'prefixed'
        unit = self.resolve(name)
        return {
            'name': name,
            'kind': kind,
            'canonical': unit.name,
            'scale': unit.scale,
            'offset': unit.offset,
            'dims': unit.dims,
            'functional': unit.is_functional,
        }


# =============================================================================
# PUBLISHING
# =============================================================================

class RegistryHandle:
    """
    Holds the active registry and swaps in replacements.

    Readers take `handle.current` once per operation; a reload builds the
    whole replacement before the reference changes, so no reader ever sees
    a partially built database.

    `prepare`, when given, is called with the new registry before it is
    published. Anything it raises aborts the swap; its return value is
    returned alongside the registry.
    """

    def __init__(self, registry: UnitRegistry):
        self._current = registry
        self._write_lock = threading.Lock()

    @property
    def current(self) -> UnitRegistry:
        return self._current

    def _publish(self, build: Callable[[UnitRegistry], UnitRegistry], prepare=None):
        with self._write_lock:
            registry = build(self._current)
            prepared = prepare(registry) if prepare is not None else None
            self._current = registry
        return registry, prepared

    def reload(
        self,
        records: Optional[Iterable[Record]] = None,
        user_records: Optional[Iterable[Record]] = None,
        options: Optional[RegistryOptions] = None,
        prepare: Optional[Callable[[UnitRegistry], Any]] = None,
    ) -> UnitRegistry:
        """Rebuild (reusing the current inputs for anything not given) and publish."""
        def build(old):
            return UnitRegistry.build(
                old.records if records is None else records,
                old.user_records if user_records is None else user_records,
                options or old.options,
            )

        registry, _ = self._publish(build, prepare)
        logger.info(f"Registry reloaded: {len(registry.list_units())} units")
        return registry

    def define(self, *records: Record, prepare: Optional[Callable[[UnitRegistry], Any]] = None) -> UnitRegistry:
        """Add user records on top of the current ones and publish."""
        def build(old):
            return UnitRegistry.build(old.records, old.user_records + tuple(records), old.options)

        registry, _ = self._publish(build, prepare)
        logger.info(f"Defined {', '.join(_record_name(r) for r in records)}")
        return registry


def _record_name(record: Record) -> str:
    return getattr(record, 'name', None) or getattr(record, 'symbol', '?')


__all__ = [
    'UnitRegistry', 'RegistryHandle', 'RegistryOptions',
    'OverridePolicy', 'PrefixResolution',
]
