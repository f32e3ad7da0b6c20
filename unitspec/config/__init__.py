"""
UnitSpec configuration: YAML settings and custom unit entries.
"""

from unitspec.config.loader import Settings, load_config, records_from_config
from unitspec.config.validator import ConfigurationError, require_key, validate_required

__all__ = [
    'Settings', 'load_config', 'records_from_config',
    'ConfigurationError', 'require_key', 'validate_required',
]
