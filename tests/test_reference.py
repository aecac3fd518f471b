from functools import partial

import numpy as np
import pytest
from scipy.integrate import solve_bvp

from edfl import PhysicsModel, make_config


def bvp_output_power(config, guess):
    """Output power from scipy's collocation solver on the same equations.

    Boundary conditions: launched pump at the launch end, ``Psf(0) = R1*Psb(0)``
    and ``Psb(L) = R2*Psf(L)``. ``guess`` supplies the initial mesh and profiles.
    """
    fun = partial(PhysicsModel().derivatives, pump_direction=config.pump_direction)

    def bc(ya, yb):
        launch = ya if config.launch_at_origin else yb
        return np.array([
            launch[0] - config.pump_power,
            ya[1] - config.r1 * ya[2],
            yb[2] - config.r2 * yb[1],
        ])

    y0 = np.vstack([guess.pump_profile, guess.forward_signal_profile, guess.backward_signal_profile])
    sol = solve_bvp(fun, bc, guess.positions, y0, tol=1e-6, max_nodes=20000)
    assert sol.success, sol.message
    return (1.0 - config.r2) * sol.y[1, -1]


@pytest.mark.parametrize("direction", ["forward", "backward"])
@pytest.mark.parametrize("pump", [60e-3, 100e-3])
def test_output_power_matches_collocation_reference(solver, direction, pump):
    config = make_config(pump, length=10.0, roc=0.1, direction=direction, segments=100)
    result = solver.solve(config)

    assert result.converged
    assert result.output_power == pytest.approx(bvp_output_power(config, result), rel=1e-2)
