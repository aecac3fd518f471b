"""Core data models for EDFL cavity simulations."""

import math
import numbers
from dataclasses import dataclass, field, asdict, replace
from typing import Optional, Dict, Any
import numpy as np
from enum import Enum

from ..exceptions import InvalidConfiguration


class Propagation(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def sign(self) -> int:
        return 1 if self is Propagation.FORWARD else -1

    @property
    def opposite(self) -> "Propagation":
        return Propagation.BACKWARD if self is Propagation.FORWARD else Propagation.FORWARD


class SolverState(str, Enum):
    FIRST_SWEEP = "first_sweep"
    CHECK_FIRST_CONVERGENCE = "check_first_convergence"
    SECOND_SWEEP = "second_sweep"
    CHECK_FULL_CONVERGENCE = "check_full_convergence"
    CONVERGED = "converged"
    ITERATION_LIMIT_REACHED = "iteration_limit_reached"
    NUMERIC_DIVERGENCE = "numeric_divergence"

    @property
    def terminal(self) -> bool:
        return self in (
            SolverState.CONVERGED,
            SolverState.ITERATION_LIMIT_REACHED,
            SolverState.NUMERIC_DIVERGENCE,
        )


@dataclass(frozen=True)
class PhysicalConstants:
    """Erbium two-level model parameters (SI units)."""
    sigma_12s: float = 2.33e-25  # m^2, signal absorption
    sigma_21s: float = 2.64e-25  # m^2, signal emission
    sigma_12p: float = 2e-25  # m^2, pump absorption
    sigma_21p: float = 0.0  # m^2, pump emission
    lifetime: float = 10e-3  # s, metastable level
    ion_density: float = 1.2e25  # m^-3
    overlap_pump: float = 0.64
    overlap_signal: float = 0.43
    loss_pump: float = 0.005  # 1/m
    loss_signal: float = 0.005  # 1/m
    wavelength_pump: float = 980e-9  # m
    wavelength_signal: float = 1550e-9  # m
    core_radius: float = 2.3e-6  # m
    planck: float = 6.626e-34  # J s
    light_speed: float = 3e8  # m/s

    @property
    def a21(self) -> float:
        return 1.0 / self.lifetime

    @property
    def core_area(self) -> float:
        return math.pi * self.core_radius**2

    @property
    def pump_frequency(self) -> float:
        return self.light_speed / self.wavelength_pump

    @property
    def signal_frequency(self) -> float:
        return self.light_speed / self.wavelength_signal

    @property
    def pump_flux_denominator(self) -> float:
        return self.core_area * self.planck * self.pump_frequency

    @property
    def signal_flux_denominator(self) -> float:
        return self.core_area * self.planck * self.signal_frequency


# Overlap factors differ between the propagation equations and the
# population post-processing; both sets are kept as-is.
DERIVATIVE_CONSTANTS = PhysicalConstants()
POPULATION_CONSTANTS = replace(DERIVATIVE_CONSTANTS, overlap_pump=0.81, overlap_signal=0.6)


@dataclass(frozen=True)
class CavityState:
    """Powers (W) at one longitudinal position z (m)."""
    z: float
    pump: float
    forward: float
    backward: float

    def as_array(self) -> np.ndarray:
        return np.array([self.pump, self.forward, self.backward], dtype=float)

    @classmethod
    def from_array(cls, z: float, y) -> "CavityState":
        return cls(float(z), float(y[0]), float(y[1]), float(y[2]))

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite([self.z, self.pump, self.forward, self.backward])))


@dataclass(frozen=True)
class CavityConfig:
    """Parameters of one Fabry-Perot cavity solve.

    ``r1`` is the mirror at z=0 and ``r2`` the output mirror at z=L. A forward
    pump is launched at z=0, a backward pump at z=L.
    """
    pump_power: float  # W
    fiber_length: float = 10.0  # m
    segments: int = 100
    r1: float = 0.98
    r2: float = 0.1
    pump_direction: Propagation = Propagation.FORWARD
    guess_pump: Optional[float] = None
    guess_forward: Optional[float] = None
    guess_backward: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.pump_direction, Propagation):
            try:
                direction = Propagation(self.pump_direction)
            except ValueError:
                raise InvalidConfiguration(
                    f"pump_direction must be 'forward' or 'backward', got {self.pump_direction!r}"
                ) from None
            object.__setattr__(self, 'pump_direction', direction)

    @property
    def step(self) -> float:
        return self.fiber_length / self.segments

    @property
    def launch_at_origin(self) -> bool:
        """True when the pump enters at z=0."""
        return self.pump_direction is Propagation.FORWARD

    def validate(self) -> None:
        """Reject configurations that cannot be integrated."""
        for name in ('pump_power', 'fiber_length', 'r1', 'r2'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidConfiguration(f"{name} must be a number, got {value!r}")
        if not (math.isfinite(self.fiber_length) and self.fiber_length > 0):
            raise InvalidConfiguration(f"fiber_length must be positive, got {self.fiber_length}")
        if isinstance(self.segments, bool) or not isinstance(self.segments, (int, np.integer)):
            raise InvalidConfiguration(f"segments must be an integer, got {self.segments!r}")
        if self.segments < 1:
            raise InvalidConfiguration(f"segments must be at least 1, got {self.segments}")
        for name in ('r1', 'r2'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidConfiguration(f"{name} must lie in [0, 1], got {value}")
        if not (math.isfinite(self.pump_power) and self.pump_power >= 0):
            raise InvalidConfiguration(f"pump_power must be non-negative, got {self.pump_power}")
        for name in ('guess_pump', 'guess_forward', 'guess_backward'):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
                raise InvalidConfiguration(f"{name} must be finite, got {value}")

    def initial_state(self) -> CavityState:
        """Guessed state at the end opposite to the pump launch."""
        if self.pump_direction is Propagation.FORWARD:
            z, defaults = self.fiber_length, (15.0, 1e-3, 10e-3)
        else:
            z, defaults = 0.0, (15e-3, 1e-3, 1e-3)
        guesses = (self.guess_pump, self.guess_forward, self.guess_backward)
        pump, forward, backward = (d if g is None else g for g, d in zip(guesses, defaults))
        return CavityState(z, pump, forward, backward)


@dataclass
class PowerProfile:
    """Powers sampled at the n+1 grid points of one sweep, in sweep order."""
    positions: np.ndarray
    pump: np.ndarray
    forward: np.ndarray
    backward: np.ndarray
    direction: Propagation

    def state(self, index: int) -> CavityState:
        return CavityState(
            float(self.positions[index]),
            float(self.pump[index]),
            float(self.forward[index]),
            float(self.backward[index]),
        )

    @property
    def start(self) -> CavityState:
        return self.state(0)

    @property
    def end(self) -> CavityState:
        return self.state(-1)

    def ascending(self) -> "PowerProfile":
        """Return the profile ordered by increasing z."""
        if self.direction is Propagation.FORWARD:
            return self
        return PowerProfile(
            self.positions[::-1].copy(),
            self.pump[::-1].copy(),
            self.forward[::-1].copy(),
            self.backward[::-1].copy(),
            Propagation.FORWARD,
        )

    def is_finite(self) -> bool:
        return bool(
            np.all(np.isfinite(self.pump))
            and np.all(np.isfinite(self.forward))
            and np.all(np.isfinite(self.backward))
        )


@dataclass
class ConvergenceMetrics:
    """Boundary residuals of the current relaxation iteration (W)."""
    tolerance: float = 1e-4
    launch_signal: float = math.inf
    pump: float = math.inf
    far_signal: float = math.inf

    def satisfied_after_first_sweep(self) -> bool:
        return self.launch_signal <= self.tolerance and self.pump <= self.tolerance

    def satisfied(self) -> bool:
        tol = self.tolerance
        return (self.launch_signal < tol or self.pump < tol) and self.far_signal < tol


def _finite_or_none(values) -> list:
    """JSON has no NaN/Infinity; non-finite entries become null."""
    return [float(v) if math.isfinite(v) else None for v in np.asarray(values, dtype=float).ravel()]


@dataclass
class SolveResult:
    """Container for a converged (or best-available) cavity solution."""
    output_power: float
    positions: np.ndarray
    pump_profile: np.ndarray
    forward_signal_profile: np.ndarray
    backward_signal_profile: np.ndarray
    n1_profile: np.ndarray
    n2_profile: np.ndarray
    converged: bool
    iterations: int
    state: SolverState
    metrics: ConvergenceMetrics = field(default_factory=ConvergenceMetrics)
    config: Optional[CavityConfig] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to a serializable dictionary."""
        config = asdict(self.config) if self.config is not None else None
        if config is not None:
            config['pump_direction'] = self.config.pump_direction.value
        return {
            "output_power": _finite_or_none([self.output_power])[0],
            "converged": self.converged,
            "iterations": self.iterations,
            "state": self.state.value,
            "metrics": {k: _finite_or_none([v])[0] for k, v in asdict(self.metrics).items()},
            "config": config,
            "data": {
                "positions": _finite_or_none(self.positions),
                "pump": _finite_or_none(self.pump_profile),
                "forward_signal": _finite_or_none(self.forward_signal_profile),
                "backward_signal": _finite_or_none(self.backward_signal_profile),
                "n1": _finite_or_none(self.n1_profile),
                "n2": _finite_or_none(self.n2_profile),
            },
        }
