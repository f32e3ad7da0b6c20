"""
UnitSpec Configuration Validator

Usage:
    from unitspec.config.validator import ConfigurationError, validate_required

    # In records_from_config():
    validate_required(entry, ['name', 'kind', 'base'], 'custom_units[0]', config_path)
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional


class ConfigurationError(Exception):
    """
    Raised when configuration is missing or invalid.

    Messages tell users exactly which keys to set and where.
    """
    pass


# Required keys per custom unit kind (on top of name/kind/base)
REQUIRED_FIELDS = {
    'simple': ['scale'],
    'linear': ['scale', 'offset'],
    'functional': ['expression'],
}


def validate_required(
    config: Dict[str, Any],
    required_keys: List[str],
    context: str,
    config_path: Optional[Path] = None,
) -> None:
    """
    Validate that all required configuration keys are present.

    Args:
        config: Configuration dictionary
        required_keys: Keys that must be present and not None
        context: Where in the config (for error message)
        config_path: Path to config file (for error message)

    Raises:
        ConfigurationError: If any required key is missing or None
    """
    missing = [key for key in required_keys if key not in config or config[key] is None]

    if missing:
        location = f"File: {config_path}\n" if config_path else ""
        raise ConfigurationError(
            f"\n{'='*60}\n"
            f"CONFIGURATION ERROR: Missing required parameters\n"
            f"{'='*60}\n"
            f"{location}"
            f"Entry: {context}\n\n"
            f"Missing fields:\n"
            f"{''.join(f'  - {k}' + chr(10) for k in missing)}\n"
            f"Add to the entry:\n"
            f"{''.join(f'  {k}: <value>' + chr(10) for k in missing)}"
            f"{'='*60}"
        )


def validate_choice(value: Any, choices: Iterable[str], key: str) -> str:
    """
    Check that a setting is one of a fixed set of strings.

    Raises:
        ConfigurationError: If the value is not one of `choices`
    """
    choices = list(choices)
    if value not in choices:
        raise ConfigurationError(
            f"Invalid value for {key}: {value!r} (expected one of: {', '.join(choices)})"
        )
    return value


def require_key(config: Dict[str, Any], key: str, context: str = "") -> Any:
    """
    Get a required configuration value.

    Unlike dict.get(), this never returns a default value.

    Raises:
        ConfigurationError: If key is missing or None
    """
    if key not in config or config[key] is None:
        raise ConfigurationError(
            f"\n{'='*60}\n"
            f"CONFIGURATION ERROR: {key} not set\n"
            f"{'='*60}\n"
            f"Entry: {context}\n\n"
            f"{key} is required. Set it in your config.yaml:\n\n"
            f"  {key}: <value>\n"
            f"{'='*60}"
        )

    return config[key]
