"""Command-line interface for EDFL cavity simulations."""

import argparse
import json
import logging
from pathlib import Path
import numpy as np
import matplotlib.pyplot as plt

from .core.physics import PhysicsModel
from .core.solver import CavitySolver
from .core.driver import sweep
from .config import ConfigManager, get_default_config
from .visualization.plotting import plot_power_profile, plot_population_density, plot_output_power

def main(argv=None):
    # Set up argument parser
    parser = argparse.ArgumentParser(description='Fabry-Perot Erbium-Doped Fiber Laser Simulation')

    # Input/output arguments
    parser.add_argument('-c', '--config', type=str, help='Path to configuration file')
    parser.add_argument('-o', '--output', type=str, default='results',
                       help='Output directory for results')

    # Cavity overrides
    parser.add_argument('--pump', type=float, help='Launched pump power (W)')
    parser.add_argument('--length', type=float, help='Doped fiber length (m)')
    parser.add_argument('--roc', type=float, help='Output mirror reflectivity')
    parser.add_argument('--segments', type=int, help='Number of fiber sections')
    parser.add_argument('--direction', choices=['forward', 'backward'], help='Pumping configuration')
    parser.add_argument('--sweep', type=float, nargs=3, metavar=('START', 'STOP', 'NUM'),
                       help='Sweep pump power (W) instead of a single solve')

    parser.add_argument('--plot', action='store_true', help='Generate plots')
    parser.add_argument('--save', action='store_true', help='Save results to file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log solver iterations')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # Load configuration
    if args.config:
        config = ConfigManager.load_config(args.config)
    else:
        print("Using default configuration")
        config = get_default_config()

    overrides = {
        'pump_power': args.pump,
        'fiber_length': args.length,
        'r2': args.roc,
        'segments': args.segments,
        'pump_direction': args.direction,
    }
    config.setdefault('cavity', {}).update({k: v for k, v in overrides.items() if v is not None})

    # Create output directory
    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    try:
        params = ConfigManager.from_dict(config)
        cavity = params['cavity']
        physics = PhysicsModel(params['physics'], params['population_physics'])
        solver = CavitySolver(physics, **params['solver'])

        if args.sweep:
            start, stop, num = args.sweep
            print(f"Sweeping pump power from {start*1e3:.1f} mW to {stop*1e3:.1f} mW...")
            pumps, results = sweep(cavity, 'pump_power', np.linspace(start, stop, int(num)), solver)
            output = np.array([r.output_power for r in results])
            for pump, pout in zip(pumps, output):
                print(f"  Pp = {pump*1e3:8.2f} mW  ->  Pout = {pout*1e3:8.3f} mW")

            if args.save:
                result_file = output_dir / 'sweep_results.json'
                with open(result_file, 'w') as f:
                    json.dump({
                        'config': ConfigManager.to_dict(params),
                        'pump_power': pumps.tolist(),
                        'output_power': output.tolist(),
                        'converged': [r.converged for r in results]
                    }, f, indent=2)
                print(f"Results saved to {result_file}")

            if args.plot:
                plots_dir = output_dir / 'plots'
                plots_dir.mkdir(exist_ok=True)
                fig, _ = plot_output_power(pumps, output)
                fig.savefig(plots_dir / 'output_power.png', dpi=300, bbox_inches='tight')
                plt.close('all')
                print(f"Plots saved to {plots_dir}")
        else:
            print(f"Solving {cavity.pump_direction.value}-pumped cavity, "
                  f"Pp = {cavity.pump_power*1e3:.1f} mW, L = {cavity.fiber_length:g} m...")
            result = solver.solve(cavity)
            print(f"Pout = {result.output_power*1e3:.6f} mW "
                  f"({result.state.value}, {result.iterations} iterations)")

            if args.save:
                result_file = output_dir / 'simulation_results.json'
                with open(result_file, 'w') as f:
                    json.dump(result.to_dict(), f, indent=2)
                print(f"Results saved to {result_file}")

            if args.plot or params['simulation'].get('make_plots', False):
                print("Generating plots...")
                plots_dir = output_dir / 'plots'
                plots_dir.mkdir(exist_ok=True)

                fig, _ = plot_population_density(result)
                fig.savefig(plots_dir / 'population_density.png', dpi=300, bbox_inches='tight')

                fig, _ = plot_power_profile(result)
                fig.savefig(plots_dir / 'power_profile.png', dpi=300, bbox_inches='tight')

                plt.close('all')
                print(f"Plots saved to {plots_dir}")

        print("Simulation completed successfully!")

    except Exception as e:
        print(f"Error during simulation: {str(e)}")
        raise

if __name__ == "__main__":
    main()
