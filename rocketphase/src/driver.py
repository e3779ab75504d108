"""
Time loop for the regression phase system.

Each step:
    store()    - snapshot fractions
    correct()  - burn rate, transfer rates, injection velocities
    solve()    - regress the surface, update phase fractions
    assemble   - heat_transfer() and momentum_transfer() (plus optional
                 interphase drag and heat exchange), applied to the phase
                 enthalpies and velocities cell by cell
"""

import matplotlib.pyplot as plt
from typing import Dict, Optional

from .checkpoint import write_checkpoint
from .closure import DrakeInviscidHeatTransfer, LothDrag, sutherland_viscosity
from .config import SimulationConfig
from .controller import RegressionPhaseSystem
from .equations import TransferTable
from .pair import PhasePairKey
from .thermo import T_STD


class InterphaseExchange:
    """
    Drag and heat exchange between the particles and gas of one pair.

    Momentum: K_d * (U_other - U)      Energy: K_h * (T_other - T)
    Both are added in linearised form with the exchange coefficient on
    the implicit side.
    """

    def __init__(self, key: PhasePairKey, d: float, As: float, Ts: float,
                 drag: Optional[LothDrag] = None,
                 heat_transfer: Optional[DrakeInviscidHeatTransfer] = None):
        """
        Args:
            key: (particles, gas) pair
            d: Particle diameter [m]
            As, Ts: Sutherland coefficients of the gas
            drag: Drag closure (no drag if None)
            heat_transfer: Heat transfer closure (no heat exchange if None)
        """
        self.key = key
        self.d = d
        self.As = As
        self.Ts = Ts
        self.drag = drag
        self.heat_transfer = heat_transfer

    def add(self, system: RegressionPhaseSystem, heat_eqns: TransferTable,
            momentum_eqns: TransferTable):
        pair = system.pair(self.key)
        particles = pair.phase1
        gas = pair.phase2

        if self.drag is not None:
            mu = sutherland_viscosity(gas.T, self.As, self.Ts)
            Kd = self.drag.K_pair(pair, self.d, mu)
            for phase, other in ((particles, gas), (gas, particles)):
                if phase.name in momentum_eqns:
                    momentum_eqns[phase.name].add_sp(Kd)
                    momentum_eqns[phase.name].add_su(Kd[:, None] * other.U)

        if self.heat_transfer is not None:
            Kh = self.heat_transfer.K_pair(pair, self.d)
            for phase, other in ((particles, gas), (gas, particles)):
                heat_eqns[phase.name].add_sp(Kh / phase.thermo.cp)
                heat_eqns[phase.name].add_su(Kh * (other.T - T_STD))


class Simulation:
    """
    Drives a RegressionPhaseSystem through time.
    """

    def __init__(self, system: RegressionPhaseSystem, config: SimulationConfig = None,
                 exchange: Optional[InterphaseExchange] = None):
        self.system = system
        self.config = config if config is not None else SimulationConfig()
        self.exchange = exchange
        self.history = []

        self.system.dt = self.config.dt

    def step(self) -> float:
        """
        Perform one time step.

        Returns:
            dt: Time step taken
        """
        system = self.system
        dt = self.config.dt
        system.dt = dt

        system.store()
        system.correct()
        system.solve()

        heat_eqns = system.heat_transfer()
        momentum_eqns = system.momentum_transfer()
        if self.exchange is not None:
            self.exchange.add(system, heat_eqns, momentum_eqns)

        # Both equations are assembled from the same state before either is applied
        for phase in system.phases:
            mass = phase.alpha_rho
            h_new = heat_eqns[phase.name].solve_pointwise(phase.h, mass, dt)
            if phase.name in momentum_eqns:
                phase.set_velocity(momentum_eqns[phase.name].solve_pointwise(phase.U, mass, dt))
            phase.set_enthalpy(h_new)

        system.time += dt
        system.step_index += 1

        self.history.append(conservation_summary(system))

        return dt

    def run(self, n_steps: int = None) -> Dict:
        """
        Run the time loop.

        Returns:
            Dictionary with run info
        """
        n_steps = n_steps if n_steps is not None else self.config.n_steps
        system = self.system

        print("Starting propellant regression simulation")
        print("=" * 50)
        print(f"Cells: {system.mesh.n_cells}, Phases: {[p.name for p in system.phases]}")
        print(f"Interfaces: {list(system.interfaces)}, Xp: {system.config.Xp}")
        print(f"dt: {self.config.dt:.4e}, Steps: {n_steps}")
        print("=" * 50)

        for _ in range(n_steps):
            dt = self.step()

            if self.config.print_interval and system.step_index % self.config.print_interval == 0:
                summary = self.history[-1]
                print(f"Step {system.step_index:6d}, t = {system.time:.4e}, dt = {dt:.4e}, "
                      f"propellant = {summary['regressing_mass']:.4e} kg, "
                      f"injected = {summary['injected_rate']:.4e} kg/s")

            if (self.config.write_interval and self.config.checkpoint
                    and system.step_index % self.config.write_interval == 0):
                write_checkpoint(self.config.checkpoint, system)

        return {
            'steps': system.step_index,
            'time': system.time,
            'final': self.history[-1] if self.history else None,
        }

    def plot_solution(self, filename: str = None, show: bool = True):
        """Plot the current solution."""
        system = self.system
        x = system.mesh.x_cells

        fig, axes = plt.subplots(2, 2, figsize=(12, 9))
        fig.suptitle(f'Propellant regression (t = {system.time:.4e} s, step = {system.step_index})')

        for phase in system.phases:
            axes[0, 0].plot(x, phase.alpha, linewidth=2, label=phase.name)
            axes[1, 0].plot(x, phase.T, linewidth=2, label=phase.name)
            if not phase.stationary:
                axes[0, 1].plot(x, phase.U[:, 0], linewidth=2, label=phase.name)
        axes[0, 0].set_ylabel('Volume fraction')
        axes[0, 1].set_ylabel('Velocity [m/s]')
        axes[1, 0].set_ylabel('Temperature [K]')

        for key in system.interfaces:
            axes[1, 1].plot(x, system.mass_transfer(key), linewidth=2, label=key.name())
        axes[1, 1].set_ylabel('Mass transfer [kg/(m³·s)]')

        for ax in axes.flat:
            ax.set_xlabel('x [m]')
            ax.grid(True)
            ax.legend()

        plt.tight_layout()

        if filename:
            plt.savefig(filename, dpi=150, bbox_inches='tight')
            print(f"Saved plot to {filename}")

        if show:
            plt.show()


def conservation_summary(system: RegressionPhaseSystem) -> Dict[str, float]:
    """
    Domain-integrated mass of each phase and the injected mass rate.
    """
    mesh = system.mesh
    summary = {f'{phase.name}_mass': mesh.integrate(phase.alpha_rho) for phase in system.phases}

    propellant_mass = 0.0
    injected_rate = 0.0
    for key, interface in system.interfaces.items():
        propellant_mass += mesh.integrate(system.phase(interface.propellant).alpha) * system.rho_propellant
        injected_rate += mesh.integrate(system.mass_transfer(key))

    summary['regressing_mass'] = propellant_mass
    summary['injected_rate'] = injected_rate
    summary['time'] = system.time
    return summary
