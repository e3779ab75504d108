"""
Run a 1D slab motor from a JSON case file.

Run from the project root:
    python rocketphase/scripts/run_regression_case.py rocketphase/scripts/slab_motor.json -v

The case file holds a 'regression' section naming the phases
'particles', 'gas' and 'propellant', and an optional 'simulation' section.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path to import the rocketphase package
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import numpy as np

from rocketphase.src import (
    Mesh1D, RegressionPhaseSystem, Simulation, configure_logging, load_config, read_checkpoint
)
from rocketphase.tests.slab_motor import slab_motor_phases


def main(args):
    configure_logging(verbose=args.verbose, very_verbose=args.very_verbose)

    regression, simulation = load_config(args.case)
    if args.steps is not None:
        simulation.n_steps = args.steps

    mesh = Mesh1D.uniform(0.0, args.length, args.cells)
    p = np.full(args.cells, args.pressure)
    phases = slab_motor_phases(mesh, p, x_surface=args.surface, T0=args.temperature)

    system = RegressionPhaseSystem(mesh, list(phases), p, regression, dt=simulation.dt)
    if args.restart:
        read_checkpoint(args.restart, system)

    sim = Simulation(system, simulation)
    info = sim.run()

    print(f"\nFinished {info['steps']} steps, t = {info['time']:.4e} s")
    for name, value in info['final'].items():
        print(f"  {name:>16s}: {value:.6e}")

    if args.plot or not args.no_display:
        sim.plot_solution(args.plot, show=not args.no_display)


if __name__ == "__main__":
    parser = argparse.ArgumentParser("Run a 1D slab motor with a regressing propellant surface.")
    parser.add_argument("case", help="path to JSON case file")
    parser.add_argument("-n", "--steps", type=int, default=None, help="number of time steps (overrides the case file)")
    parser.add_argument("--cells", type=int, default=200, help="number of cells")
    parser.add_argument("--length", type=float, default=0.1, help="domain length [m]")
    parser.add_argument("--surface", type=float, default=0.05, help="initial burning surface location [m]")
    parser.add_argument("--pressure", type=float, default=5.0e6, help="chamber pressure [Pa]")
    parser.add_argument("--temperature", type=float, default=300.0, help="initial temperature [K]")
    parser.add_argument("--restart", default=None, help="checkpoint to restart from")
    parser.add_argument("--plot", default=None, help="save the final solution plot to this file")
    parser.add_argument("--no-display", action="store_true", help="do not display the solution in a window")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable verbose output")
    parser.add_argument("-vv", "--very-verbose", action="store_true", help="enable very verbose output")

    args = parser.parse_args()

    main(args)
