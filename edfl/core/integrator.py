"""Fixed-step RK4 sweeps along the fiber, plus an adaptive cross-check."""

import numpy as np
from typing import Callable
from scipy.integrate import solve_ivp

from ..models import Propagation, CavityState, PowerProfile

Derivative = Callable[[float, np.ndarray], np.ndarray]


def rk4_step(fun: Derivative, z: float, y: np.ndarray, step: float, direction: Propagation) -> np.ndarray:
    """Advance y by one classical RK4 step of length ``step`` along ``direction``."""
    s = direction.sign * step
    k1 = fun(z, y)
    k2 = fun(z + 0.5 * s, y + 0.5 * s * k1)
    k3 = fun(z + 0.5 * s, y + 0.5 * s * k2)
    k4 = fun(z + s, y + s * k3)
    return y + (s / 6.0) * (k1 + 2.0 * (k2 + k3) + k4)


def _grid(start: CavityState, length: float, segments: int, direction: Propagation) -> np.ndarray:
    end = start.z + direction.sign * length
    return np.linspace(start.z, end, segments + 1)


def rk4_sweep(
    fun: Derivative,
    start: CavityState,
    length: float,
    segments: int,
    direction: Propagation
) -> PowerProfile:
    """Integrate across the full fiber length from ``start``."""
    positions = _grid(start, length, segments, direction)
    step = length / segments
    values = np.empty((segments + 1, 3))
    values[0] = start.as_array()

    y = values[0]
    for i in range(segments):
        y = rk4_step(fun, positions[i], y, step, direction)
        values[i + 1] = y

    return PowerProfile(positions, values[:, 0], values[:, 1], values[:, 2], direction)


def ivp_sweep(
    fun: Derivative,
    start: CavityState,
    length: float,
    segments: int,
    direction: Propagation,
    rtol: float = 1e-10,
    atol: float = 1e-14
) -> PowerProfile:
    """Same sweep as :func:`rk4_sweep` using scipy's adaptive RK45."""
    positions = _grid(start, length, segments, direction)
    sol = solve_ivp(
        fun,
        (positions[0], positions[-1]),
        start.as_array(),
        method='RK45',
        t_eval=positions,
        rtol=rtol,
        atol=atol,
    )
    if not sol.success:
        values = np.full((3, segments + 1), np.nan)
        values[:, :sol.y.shape[1]] = sol.y
    else:
        values = sol.y
    return PowerProfile(positions, values[0], values[1], values[2], direction)
