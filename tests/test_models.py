import json
import math
from dataclasses import replace

import numpy as np
import pytest

from edfl import (
    CavityConfig,
    CavitySolver,
    InvalidConfiguration,
    PhysicsModel,
    ConvergenceMetrics,
    DERIVATIVE_CONSTANTS,
    CavityState,
    PowerProfile,
    Propagation,
    make_config,
)


def test_propagation_signs():
    assert Propagation.FORWARD.sign == 1
    assert Propagation.BACKWARD.sign == -1
    assert Propagation.FORWARD.opposite is Propagation.BACKWARD
    assert Propagation("backward") is Propagation.BACKWARD


def test_derived_constants():
    c = DERIVATIVE_CONSTANTS
    assert c.a21 == pytest.approx(100.0)
    assert c.core_area == pytest.approx(math.pi * (2.3e-6)**2)
    assert c.pump_flux_denominator == pytest.approx(c.core_area * 6.626e-34 * 3e8 / 980e-9)
    assert c.signal_flux_denominator < c.pump_flux_denominator


def test_state_array_round_trip():
    state = CavityState(2.0, 0.1, 0.2, 0.3)
    assert CavityState.from_array(2.0, state.as_array()) == state
    assert state.is_finite()
    assert not CavityState(0.0, math.nan, 0.0, 0.0).is_finite()


def test_profile_finiteness():
    profile = PowerProfile(
        np.array([0.0, 1.0]), np.array([1.0, np.inf]), np.zeros(2), np.zeros(2), Propagation.FORWARD
    )
    assert not profile.is_finite()
    assert profile.ascending() is profile


def test_convergence_criteria():
    metrics = ConvergenceMetrics(tolerance=1e-4)
    assert not metrics.satisfied()

    metrics.launch_signal, metrics.pump, metrics.far_signal = 1.0, 1e-5, 1e-5
    assert metrics.satisfied()
    assert not metrics.satisfied_after_first_sweep()

    metrics.pump = 1.0
    assert not metrics.satisfied()

    metrics.launch_signal, metrics.pump = 1e-4, 1e-4
    assert metrics.satisfied_after_first_sweep()


def test_result_is_json_serialisable(solver):
    result = solver.solve(make_config(1e-3, segments=20))
    data = json.loads(json.dumps(result.to_dict()))

    assert data['config']['pump_direction'] == "forward"
    assert data['state'] == "converged"
    assert len(data['data']['positions']) == 21
    assert data['output_power'] == pytest.approx(result.output_power)


def test_diverged_result_is_strict_json(weak_pump_config):
    class ExplodingPhysics(PhysicsModel):
        def derivatives(self, z, y, pump_direction=None):
            return np.full(3, np.inf)

    result = CavitySolver(physics=ExplodingPhysics()).solve(weak_pump_config)
    data = json.loads(json.dumps(result.to_dict(), allow_nan=False))

    assert data['state'] == "numeric_divergence"
    start = weak_pump_config.initial_state()
    assert data['output_power'] == pytest.approx((1 - weak_pump_config.r2) * start.forward)
    assert data['data']['pump'][-1] == pytest.approx(start.pump)
    assert data['data']['pump'][0] is None
    assert data['metrics']['launch_signal'] is None
    assert data['metrics']['far_signal'] is None


@pytest.mark.parametrize("overrides", [
    {"pump_power": None},
    {"pump_power": "0.1"},
    {"fiber_length": "10"},
    {"r1": None},
    {"r2": "0.1"},
    {"guess_pump": "15"},
])
def test_non_numeric_fields_are_rejected(overrides):
    config = replace(CavityConfig(pump_power=0.1), **overrides)
    with pytest.raises(InvalidConfiguration, match="must be"):
        config.validate()
