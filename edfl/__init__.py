"""Fabry-Perot erbium-doped fiber laser simulation package.

This package solves the steady-state pump and signal power distribution in
a linear EDFL cavity, for forward and backward pumping, with a double-sweep
relaxation method and fixed-step RK4 integration.
"""

__version__ = "0.1.0"

from .exceptions import InvalidConfiguration
from .models import (
    Propagation,
    PhysicalConstants,
    DERIVATIVE_CONSTANTS,
    POPULATION_CONSTANTS,
    CavityConfig,
    CavityState,
    PowerProfile,
    ConvergenceMetrics,
    SolverState,
    SolveResult
)

from .core.physics import PhysicsModel
from .core.integrator import rk4_step, rk4_sweep, ivp_sweep
from .core.solver import CavitySolver
from .core.driver import make_config, output_power, sweep, pump_sweep
from .config import ConfigManager, get_default_config
from .visualization.plotting import (
    plot_power_profile,
    plot_population_density,
    plot_output_power
)

__all__ = [
    'InvalidConfiguration',
    'Propagation',
    'PhysicalConstants',
    'DERIVATIVE_CONSTANTS',
    'POPULATION_CONSTANTS',
    'CavityConfig',
    'CavityState',
    'PowerProfile',
    'ConvergenceMetrics',
    'SolverState',
    'SolveResult',
    'PhysicsModel',
    'rk4_step',
    'rk4_sweep',
    'ivp_sweep',
    'CavitySolver',
    'make_config',
    'output_power',
    'sweep',
    'pump_sweep',
    'ConfigManager',
    'get_default_config',
    'plot_power_profile',
    'plot_population_density',
    'plot_output_power'
]
