"""Two-level erbium rate-equation model for the cavity propagation equations."""

import numpy as np
from typing import Tuple, Optional

from ..models import (
    Propagation,
    PhysicalConstants,
    DERIVATIVE_CONSTANTS,
    POPULATION_CONSTANTS,
)


class PhysicsModel:
    """Local derivatives of pump and signal powers in the doped fiber.

    All methods are pure and accept scalars or numpy arrays. Non-finite
    inputs give non-finite outputs; nothing is raised for numeric edge cases.
    """

    def __init__(
        self,
        constants: Optional[PhysicalConstants] = None,
        population_constants: Optional[PhysicalConstants] = None
    ):
        self.constants = constants if constants is not None else DERIVATIVE_CONSTANTS
        self.population_constants = (
            population_constants if population_constants is not None else POPULATION_CONSTANTS
        )

    @staticmethod
    def rates(pp, psf, psb, constants: PhysicalConstants):
        """Stimulated transition rates (W12, W21, R12) in 1/s."""
        c = constants
        signal = psf + psb
        w12 = (c.sigma_12s * c.overlap_signal) * signal / c.signal_flux_denominator
        w21 = (c.sigma_21s * c.overlap_signal) * signal / c.signal_flux_denominator
        r12 = (c.sigma_12p * c.overlap_pump) * pp / c.pump_flux_denominator
        return w12, w21, r12

    def populations(self, pp, psf, psb, constants: Optional[PhysicalConstants] = None):
        """Steady-state ground (N1) and metastable (N2) densities in ions/m^3."""
        c = constants if constants is not None else self.constants
        w12, w21, r12 = self.rates(pp, psf, psb, c)
        a21 = c.a21
        n1 = c.ion_density * (w21 + a21) / (w12 + r12 + w21 + a21)
        n2 = c.ion_density * (w12 + r12) / (w21 + a21 + w12 + r12)
        return n1, n2

    def _pump_rate(self, pp, n1, n2, pump_direction: Propagation):
        c = self.constants
        gain = c.overlap_pump * pp * (c.sigma_21p * n2 - c.sigma_12p * n1)
        return pump_direction.sign * gain - c.loss_pump * pp

    def _signal_rate(self, power, n1, n2, direction: Propagation):
        c = self.constants
        net = c.overlap_signal * power * (c.sigma_21s * n2 - c.sigma_12s * n1) - c.loss_signal * power
        return direction.sign * net

    def pump_derivative(self, z, pp, psf, psb, pump_direction: Propagation = Propagation.FORWARD):
        """dPp/dz for a pump travelling in ``pump_direction``."""
        n1, n2 = self.populations(pp, psf, psb)
        return self._pump_rate(pp, n1, n2, pump_direction)

    def signal_derivative(self, direction: Propagation, z, pp, psf, psb):
        """dPsf/dz (``direction`` forward) or dPsb/dz (backward)."""
        n1, n2 = self.populations(pp, psf, psb)
        power = psf if direction is Propagation.FORWARD else psb
        return self._signal_rate(power, n1, n2, direction)

    def derivatives(self, z: float, y: np.ndarray, pump_direction: Propagation = Propagation.FORWARD) -> np.ndarray:
        """Right-hand side of the coupled system for y = (Pp, Psf, Psb).

        ``y`` may also be a (3, m) array of states, as passed by scipy's
        boundary value solver.
        """
        pp, psf, psb = y
        n1, n2 = self.populations(pp, psf, psb)
        return np.array([
            self._pump_rate(pp, n1, n2, pump_direction),
            self._signal_rate(psf, n1, n2, Propagation.FORWARD),
            self._signal_rate(psb, n1, n2, Propagation.BACKWARD),
        ])

    def population_density(self, pp, psb, psf) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorized N1, N2 over full power profiles.

        Uses ``population_constants``, whose overlap factors differ from the
        ones used in the propagation equations.
        """
        pp = np.asarray(pp, dtype=float)
        psb = np.asarray(psb, dtype=float)
        psf = np.asarray(psf, dtype=float)
        return self.populations(pp, psf, psb, self.population_constants)
