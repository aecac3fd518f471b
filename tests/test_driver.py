import numpy as np
import pytest

from edfl import CavitySolver, Propagation, make_config, output_power, pump_sweep, sweep


def test_make_config_fixes_launch_mirror():
    config = make_config(0.1, length=5.0, roc=0.3, direction="backward", segments=50)

    assert config.r1 == 0.98
    assert config.r2 == 0.3
    assert config.fiber_length == 5.0
    assert config.segments == 50
    assert config.pump_direction is Propagation.BACKWARD
    assert config.step == pytest.approx(0.1)


def test_output_power_matches_solver(solver):
    expected = solver.solve(make_config(1e-3, direction="backward")).output_power
    assert output_power(1e-3) == expected


def test_sweep_over_fiber_length(solver):
    values, results = sweep(make_config(1e-3), "fiber_length", [5.0, 10.0], solver)

    np.testing.assert_array_equal(values, [5.0, 10.0])
    assert [r.config.fiber_length for r in results] == [5.0, 10.0]
    assert [r.positions[-1] for r in results] == [5.0, 10.0]


def test_sweep_casts_segment_counts(solver):
    _, results = sweep(make_config(1e-3), "segments", [10, 20], solver)
    assert [r.positions.shape[0] for r in results] == [11, 21]


def test_sweep_rejects_unknown_parameter(solver):
    with pytest.raises(ValueError, match="Unknown cavity parameter"):
        sweep(make_config(1e-3), "temperature", [300.0], solver)


def test_pump_sweep_returns_one_output_per_pump():
    output = pump_sweep([0.0, 1e-3], solver=CavitySolver(), direction="forward")

    assert output.shape == (2,)
    assert np.all(np.isfinite(output))
    assert np.all(output >= 0.0)
