import json

import pytest

from edfl import (
    CavityConfig,
    ConfigManager,
    DERIVATIVE_CONSTANTS,
    InvalidConfiguration,
    POPULATION_CONSTANTS,
    Propagation,
    get_default_config,
)


def test_default_config_builds_parameter_objects():
    params = ConfigManager.from_dict(get_default_config())

    cavity = params['cavity']
    assert isinstance(cavity, CavityConfig)
    assert cavity.pump_power == pytest.approx(0.1)
    assert cavity.pump_direction is Propagation.FORWARD
    assert params['physics'] == DERIVATIVE_CONSTANTS
    assert params['population_physics'] == POPULATION_CONSTANTS
    assert params['solver'] == {"tolerance": 1e-4, "max_iterations": 40}


def test_physics_overrides_only_touch_named_fields():
    config = get_default_config()
    config['physics'] = {"overlap_pump": 0.81, "overlap_signal": 0.6}
    config['population_physics'] = {"ion_density": 1e25}

    params = ConfigManager.from_dict(config)

    assert params['physics'].overlap_pump == 0.81
    assert params['physics'].sigma_12s == DERIVATIVE_CONSTANTS.sigma_12s
    assert params['population_physics'].ion_density == 1e25
    assert params['population_physics'].overlap_pump == 0.81


def test_missing_cavity_section():
    with pytest.raises(ValueError, match="cavity"):
        ConfigManager.validate_config({"solver": {}})


def test_missing_pump_power():
    with pytest.raises(ValueError, match="pump_power"):
        ConfigManager.validate_config({"cavity": {"fiber_length": 10.0}})


def test_invalid_cavity_is_rejected_on_load():
    config = get_default_config()
    config['cavity']['r2'] = 1.5
    with pytest.raises(InvalidConfiguration):
        ConfigManager.from_dict(config)


def test_save_and_load_round_trip(tmp_path):
    config = get_default_config()
    config['cavity']['pump_direction'] = "backward"
    path = tmp_path / "edfl.json"

    params = ConfigManager.from_dict(config)
    ConfigManager.save_config(ConfigManager.to_dict(params), str(path))
    reloaded = ConfigManager.from_dict(ConfigManager.load_config(str(path)))

    assert reloaded['cavity'] == params['cavity']
    assert reloaded['physics'] == params['physics']
    assert reloaded['population_physics'] == params['population_physics']
    assert json.loads(path.read_text())['cavity']['pump_direction'] == "backward"
