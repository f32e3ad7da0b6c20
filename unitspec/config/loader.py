"""
Configuration loading.

    override_policy: override      # override | strict
    prefix_resolution: longest     # longest | strict
    functional_inverse: explicit   # explicit | numeric
    default_system: SI
    custom_units:
      - {name: furlong, kind: simple, scale: 220, base: yard}
      - {name: dBm, kind: functional, expression: "10^(x/10)", inverse: "10*log10(x)", base: mW}
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from unitspec.config.validator import (
    REQUIRED_FIELDS,
    ConfigurationError,
    require_key,
    validate_choice,
    validate_required,
)
from unitspec.definitions import CustomDefinition, Functional, Linear, Simple

OVERRIDE_POLICIES = ('override', 'strict')
PREFIX_RESOLUTIONS = ('longest', 'strict')
FUNCTIONAL_INVERSES = ('explicit', 'numeric')


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML config file. An empty file gives an empty dict."""
    path = Path(path)
    with open(path) as f:
        config = yaml.safe_load(f)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"{path}: top level must be a mapping, got {type(config).__name__}")
    return config


def _number(entry: Dict[str, Any], key: str, context: str) -> float:
    value = require_key(entry, key, context)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{context}: {key} must be a number, got {value!r}")
    return float(value)


def records_from_config(
    entries: List[Dict[str, Any]],
    config_path: Optional[Path] = None,
) -> Tuple[CustomDefinition, ...]:
    """
    Turn `custom_units` entries into CustomDefinition records.

    Raises:
        ConfigurationError: Missing keys or unknown kind
    """
    records = []
    for i, entry in enumerate(entries or ()):
        context = f"custom_units[{i}]"
        if not isinstance(entry, dict):
            raise ConfigurationError(f"{context}: expected a mapping, got {entry!r}")
        validate_required(entry, ['name', 'kind', 'base'], context, config_path)

        kind = validate_choice(entry['kind'], REQUIRED_FIELDS, f"{context}.kind")
        validate_required(entry, REQUIRED_FIELDS[kind], context, config_path)

        base = str(entry['base'])
        if kind == 'simple':
            variant = Simple(_number(entry, 'scale', context), base)
        elif kind == 'linear':
            variant = Linear(_number(entry, 'scale', context), _number(entry, 'offset', context), base)
        else:
            inverse = entry.get('inverse')
            variant = Functional(str(entry['expression']), base, str(inverse) if inverse is not None else None)

        aliases = tuple(str(a) for a in entry.get('aliases') or ())
        records.append(CustomDefinition(str(entry['name']), variant, aliases))
    return tuple(records)


@dataclass
class Settings:
    """Session settings. Defaults apply when a key is absent."""
    override_policy: str = 'override'
    prefix_resolution: str = 'longest'
    functional_inverse: str = 'explicit'
    default_system: str = 'SI'
    custom_units: Tuple[CustomDefinition, ...] = field(default_factory=tuple)

    @classmethod
    def from_config(cls, config: Dict[str, Any], config_path: Optional[Path] = None) -> 'Settings':
        config = config or {}
        unknown = set(config) - {f for f in cls.__dataclass_fields__}
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        return cls(
            override_policy=validate_choice(
                config.get('override_policy', 'override'), OVERRIDE_POLICIES, 'override_policy'),
            prefix_resolution=validate_choice(
                config.get('prefix_resolution', 'longest'), PREFIX_RESOLUTIONS, 'prefix_resolution'),
            functional_inverse=validate_choice(
                config.get('functional_inverse', 'explicit'), FUNCTIONAL_INVERSES, 'functional_inverse'),
            default_system=str(config.get('default_system', 'SI')),
            custom_units=records_from_config(config.get('custom_units') or [], config_path),
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'Settings':
        return cls.from_config(load_config(path), Path(path))
