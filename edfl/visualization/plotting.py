"""Visualization tools for EDFL cavity simulations."""

from typing import Optional, Tuple
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes

from ..models import SolveResult

def _axes(ax: Optional[Axes], figsize: Tuple[float, float]) -> Tuple[Figure, Axes]:
    if ax is None:
        return plt.subplots(figsize=figsize)
    return ax.figure, ax

def plot_power_profile(
    result: SolveResult,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (10, 6),
    title: str = "Power Distribution Along the Cavity",
    **kwargs
) -> Tuple[Figure, Axes]:
    """Plot pump and signal powers along the fiber.

    Args:
        result: Solver result containing the power profiles
        ax: Optional matplotlib axes to plot on
        figsize: Figure size (width, height) in inches
        title: Plot title
        **kwargs: Additional keyword arguments passed to plot()

    Returns:
        Tuple of (figure, axes) containing the plot
    """
    fig, ax = _axes(ax, figsize)
    z = result.positions

    # Convert to mW for plotting
    ax.plot(z, result.forward_signal_profile * 1e3, label='Forward signal', **kwargs)
    ax.plot(z, result.backward_signal_profile * 1e3, 'r', label='Backward signal', **kwargs)
    ax.plot(z, result.pump_profile * 1e3, 'm', label='Pump', **kwargs)

    ax.set_xlabel('Fiber length (m)')
    ax.set_ylabel('Power (mW)')
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    ax.legend()

    status = "converged" if result.converged else result.state.value.replace('_', ' ')
    ax.text(
        0.02, 0.98,
        f"Pout = {result.output_power * 1e3:.3f} mW\n{status} ({result.iterations} iterations)",
        transform=ax.transAxes,
        verticalalignment='top',
        bbox=dict(boxstyle='round', facecolor='white', alpha=0.8)
    )

    return fig, ax

def plot_population_density(
    result: SolveResult,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (10, 6)
) -> Tuple[Figure, Axes]:
    """Plot ground and metastable level populations along the fiber."""
    fig, ax = _axes(ax, figsize)

    ax.plot(result.positions, result.n1_profile, 'm', linewidth=2, label='N1')
    ax.plot(result.positions, result.n2_profile, 'g', linewidth=2, label='N2')

    ax.set_xlabel('Fiber length (m)')
    ax.set_ylabel('Population density (ions/m³)')
    ax.set_title('Population Densities')
    ax.grid(True, alpha=0.3)
    ax.legend()

    return fig, ax

def plot_output_power(
    values: np.ndarray,
    output: np.ndarray,
    xlabel: str = 'Pump power (mW)',
    scale: float = 1e3,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (8, 5)
) -> Tuple[Figure, Axes]:
    """Plot output power against a swept parameter.

    Args:
        values: Swept parameter values
        output: Output power (W) for each value
        xlabel: Label of the swept parameter axis
        scale: Factor applied to ``values`` before plotting
        ax: Optional matplotlib axes to plot on
        figsize: Figure size (width, height) in inches

    Returns:
        Tuple of (figure, axes) containing the plot
    """
    fig, ax = _axes(ax, figsize)

    ax.plot(np.asarray(values) * scale, np.asarray(output) * 1e3, 'o-')
    ax.set_xlabel(xlabel)
    ax.set_ylabel('Output power (mW)')
    ax.set_title('Laser Output Power')
    ax.grid(True, alpha=0.3)

    return fig, ax
