"""Thin callers of the cavity solver: defaulted configs and parameter sweeps."""

import logging
from dataclasses import replace, fields
from typing import Iterable, List, Optional, Tuple

import numpy as np

from ..models import CavityConfig, Propagation, SolveResult
from .solver import CavitySolver

logger = logging.getLogger(__name__)

LAUNCH_MIRROR_REFLECTIVITY = 0.98


def make_config(
    pump: float,
    length: float = 10.0,
    roc: float = 0.1,
    direction=Propagation.FORWARD,
    segments: int = 100
) -> CavityConfig:
    """Build a cavity with the launch-side mirror fixed at 98%."""
    return CavityConfig(
        pump_power=pump,
        fiber_length=length,
        segments=segments,
        r1=LAUNCH_MIRROR_REFLECTIVITY,
        r2=roc,
        pump_direction=direction,
    )


def output_power(
    pump: float,
    length: float = 10.0,
    roc: float = 0.1,
    direction=Propagation.BACKWARD,
    segments: int = 100,
    solver: Optional[CavitySolver] = None
) -> float:
    """Laser output power (W) for a launched pump power (W).

    Args:
        pump: Launched pump power
        length: Doped fiber length in meters
        roc: Reflectivity of the output mirror
        direction: Pumping configuration
        segments: Number of fiber sections

    Returns:
        Output power through the output mirror
    """
    solver = solver if solver is not None else CavitySolver()
    return solver.solve(make_config(pump, length, roc, direction, segments)).output_power


def sweep(
    base: CavityConfig,
    parameter: str,
    values: Iterable[float],
    solver: Optional[CavitySolver] = None
) -> Tuple[np.ndarray, List[SolveResult]]:
    """Solve independently for each value of one ``CavityConfig`` field."""
    names = {f.name for f in fields(CavityConfig)}
    if parameter not in names:
        raise ValueError(f"Unknown cavity parameter: {parameter}")

    solver = solver if solver is not None else CavitySolver()
    values = np.asarray(list(values), dtype=float)
    results = []
    for value in values:
        if parameter == 'segments':
            value = int(value)
        result = solver.solve(replace(base, **{parameter: value}))
        if not result.converged:
            logger.warning("%s=%g did not converge (%s)", parameter, value, result.state.value)
        results.append(result)
    return values, results


def pump_sweep(pumps: Iterable[float], solver: Optional[CavitySolver] = None, **kwargs) -> np.ndarray:
    """Output power for each launched pump power; ``kwargs`` go to :func:`make_config`."""
    pumps = list(pumps)
    base = make_config(pumps[0] if pumps else 0.0, **kwargs)
    _, results = sweep(base, 'pump_power', pumps, solver)
    return np.array([r.output_power for r in results])
