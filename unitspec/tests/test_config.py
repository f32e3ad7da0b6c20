"""
Test Configuration
==================
"""

import pytest


CONFIG_YAML = """
override_policy: strict
prefix_resolution: longest
functional_inverse: numeric
default_system: Imperial
custom_units:
  - {name: furlong, kind: simple, scale: 220, base: yard, aliases: [fur]}
  - {name: degRe, kind: linear, scale: 1.25, offset: 273.15, base: K}
  - {name: dBm, kind: functional, expression: "10^(x/10)", inverse: "10*log10(x)", base: mW}
"""


def test_load_settings(tmp_path):
    from unitspec.config import Settings, load_config
    from unitspec.definitions import Functional, Linear, Simple

    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML)

    settings = Settings.from_config(load_config(path), path)

    assert settings.override_policy == 'strict'
    assert settings.functional_inverse == 'numeric'
    assert settings.default_system == 'Imperial'

    furlong, degre, dbm = settings.custom_units
    assert furlong.variant == Simple(220.0, "yard")
    assert furlong.aliases == ("fur",)
    assert degre.variant == Linear(1.25, 273.15, "K")
    assert dbm.variant == Functional("10^(x/10)", "mW", "10*log10(x)")


def test_defaults():
    from unitspec.config import Settings

    settings = Settings.from_config({})

    assert settings.override_policy == 'override'
    assert settings.prefix_resolution == 'longest'
    assert settings.functional_inverse == 'explicit'
    assert settings.default_system == 'SI'
    assert settings.custom_units == ()


def test_empty_file(tmp_path):
    from unitspec.config import load_config

    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert load_config(path) == {}


def test_missing_keys_named():
    """Missing fields are listed in the error."""
    from unitspec.config import ConfigurationError, records_from_config

    with pytest.raises(ConfigurationError) as exc:
        records_from_config([{'name': 'furlong', 'kind': 'simple'}])
    assert 'base' in str(exc.value)

    with pytest.raises(ConfigurationError) as exc:
        records_from_config([{'name': 'degRe', 'kind': 'linear', 'base': 'K', 'scale': 1.25}])
    assert 'offset' in str(exc.value)


def test_invalid_values():
    from unitspec.config import ConfigurationError, Settings, records_from_config

    with pytest.raises(ConfigurationError):
        Settings.from_config({'override_policy': 'sometimes'})
    with pytest.raises(ConfigurationError):
        Settings.from_config({'colour': 'blue'})
    with pytest.raises(ConfigurationError):
        records_from_config([{'name': 'x', 'kind': 'cubic', 'base': 'm'}])
    with pytest.raises(ConfigurationError):
        records_from_config([{'name': 'x', 'kind': 'simple', 'base': 'm', 'scale': 'lots'}])


def test_require_key():
    from unitspec.config import ConfigurationError, require_key

    assert ConfigurationError.__bases__ == (Exception,)
    assert require_key({'a': 1}, 'a') == 1
    with pytest.raises(ConfigurationError):
        require_key({'a': None}, 'a')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
