"""Double-sweep relaxation solver for the Fabry-Perot cavity boundary value problem."""

import logging
from dataclasses import replace
from functools import partial
from typing import Optional

import numpy as np

from ..models import (
    Propagation,
    CavityConfig,
    CavityState,
    PowerProfile,
    ConvergenceMetrics,
    SolverState,
    SolveResult,
)
from .physics import PhysicsModel
from .integrator import rk4_sweep

logger = logging.getLogger(__name__)


class CavitySolver:
    """Shooting/relaxation solver alternating sweeps between the two mirrors.

    The first sweep of every iteration runs from the far end toward the pump
    launch end, the second sweep back again. Mirror relations are
    ``Psf(0) = R1*Psb(0)`` and ``Psb(L) = R2*Psf(L)``.
    """

    def __init__(
        self,
        physics: Optional[PhysicsModel] = None,
        tolerance: float = 1e-4,
        max_iterations: int = 40
    ):
        self.physics = physics if physics is not None else PhysicsModel()
        self.tolerance = tolerance
        self.max_iterations = max_iterations

    @staticmethod
    def mirror_residual(state: CavityState, config: CavityConfig, at_origin: bool) -> float:
        if at_origin:
            return abs(state.forward - config.r1 * state.backward)
        return abs(state.backward - config.r2 * state.forward)

    @staticmethod
    def reflect(state: CavityState, config: CavityConfig, at_origin: bool) -> CavityState:
        """Apply the mirror relation at one end of the cavity."""
        if at_origin:
            return replace(state, z=0.0, forward=state.backward * config.r1)
        return replace(state, z=config.fiber_length, backward=state.forward * config.r2)

    def sweep(self, start: CavityState, config: CavityConfig, direction: Propagation) -> PowerProfile:
        fun = partial(self.physics.derivatives, pump_direction=config.pump_direction)
        return rk4_sweep(fun, start, config.fiber_length, config.segments, direction)

    def solve(self, config: CavityConfig) -> SolveResult:
        """Solve the steady-state cavity for ``config``.

        Raises:
            InvalidConfiguration: if ``config`` fails validation.
        """
        config.validate()

        launch_at_origin = config.launch_at_origin
        first_direction = Propagation.BACKWARD if launch_at_origin else Propagation.FORWARD
        metrics = ConvergenceMetrics(tolerance=self.tolerance)
        current = config.initial_state()
        profile = None
        iterations = 0
        state = SolverState.FIRST_SWEEP

        with np.errstate(over='ignore', invalid='ignore', divide='ignore'):
            while not state.terminal:
                if state is SolverState.FIRST_SWEEP:
                    profile = self.sweep(current, config, first_direction)
                    current = profile.end
                    state = SolverState.CHECK_FIRST_CONVERGENCE

                elif state is SolverState.CHECK_FIRST_CONVERGENCE:
                    if not profile.is_finite():
                        state = SolverState.NUMERIC_DIVERGENCE
                        continue
                    metrics.launch_signal = self.mirror_residual(current, config, launch_at_origin)
                    metrics.pump = abs(current.pump - config.pump_power)
                    if metrics.satisfied_after_first_sweep():
                        state = SolverState.CONVERGED
                    else:
                        state = SolverState.SECOND_SWEEP

                elif state is SolverState.SECOND_SWEEP:
                    start = replace(
                        self.reflect(current, config, launch_at_origin),
                        pump=config.pump_power,
                    )
                    profile = self.sweep(start, config, first_direction.opposite)
                    current = profile.end
                    state = SolverState.CHECK_FULL_CONVERGENCE

                elif state is SolverState.CHECK_FULL_CONVERGENCE:
                    if not profile.is_finite():
                        state = SolverState.NUMERIC_DIVERGENCE
                        continue
                    metrics.far_signal = self.mirror_residual(current, config, not launch_at_origin)
                    current = self.reflect(current, config, not launch_at_origin)
                    iterations += 1
                    logger.debug(
                        "iteration %d: residuals launch=%.3e pump=%.3e far=%.3e",
                        iterations, metrics.launch_signal, metrics.pump, metrics.far_signal,
                    )
                    if metrics.satisfied():
                        state = SolverState.CONVERGED
                    elif iterations > self.max_iterations:
                        state = SolverState.ITERATION_LIMIT_REACHED
                    else:
                        state = SolverState.FIRST_SWEEP

            result = self._result(profile, config, metrics, iterations, state)

        if state is SolverState.CONVERGED:
            logger.info("Converged after %d iterations, Pout = %.6g W", iterations, result.output_power)
        elif state is SolverState.ITERATION_LIMIT_REACHED:
            logger.warning("Iteration limit reached (%d) without convergence", iterations)
        else:
            logger.warning("Non-finite powers after %d iterations", iterations)
        return result

    def _result(self, profile, config, metrics, iterations, state) -> SolveResult:
        final = profile.ascending()
        n1, n2 = self.physics.population_density(final.pump, final.backward, final.forward)
        return SolveResult(
            output_power=(1.0 - config.r2) * float(final.forward[-1]),
            positions=final.positions,
            pump_profile=final.pump,
            forward_signal_profile=final.forward,
            backward_signal_profile=final.backward,
            n1_profile=n1,
            n2_profile=n2,
            converged=state is SolverState.CONVERGED,
            iterations=iterations,
            state=state,
            metrics=metrics,
            config=config,
        )
