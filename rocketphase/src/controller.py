"""
Propellant regression phase system.

Couples a burning propellant surface to the gas and particle phases of the
combustion products. For every configured interface (particles, gas) a
regression model supplies the burn rate rb and area density As; the mass
released by the surface

    dmdt = rho_prop * rb    (interface cells)

is split between the pair with the particle mass fraction Xp:

    particles: Xp * dmdt        gas: (1 - Xp) * dmdt

Energy and momentum enter each phase at the adiabatic reference state
(Hs at T_ad) and the synthesized injection velocity, with an implicit sink
of the same strength on the transported field:

    eqn_k += -Sp(c_k * dmdt, psi_k) + c_k * dmdt * psi_k,inj

Per step the driver calls store(), correct(), solve() and then assembles
heat_transfer() and momentum_transfer().
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Dict, List

from .config import ConfigurationError, RegressionConfig
from .equations import TransferEquation, TransferTable
from .mesh import Mesh1D, SMALL
from .pair import PhasePair, PhasePairKey
from .phase import Phase
from .registry import ModelRegistry
from .regression import RegressionModel, default_regression_registry
from .system import MultiphaseSystem
from .thermo import R_UNIVERSAL
from .transfer import TransferCoefficientTable
from .velocity import VelocitySynthesizer

logger = logging.getLogger(__name__)


@dataclass
class AdiabaticReferenceState:
    """State at which the products of one interface enter the chamber."""
    T_ad: float
    Hs1: np.ndarray     # phase1 enthalpy at (p1, T_ad) [J/kg]
    Hs2: np.ndarray     # phase2 enthalpy at (p2, T_ad) [J/kg]
    RTf: float          # Gas constant times T_ad of the gas phase [J/kg]

    @classmethod
    def from_pair(cls, pair: PhasePair, T_ad: float) -> 'AdiabaticReferenceState':
        phase1 = pair.phase1
        phase2 = pair.phase2
        return cls(
            T_ad=T_ad,
            Hs1=phase1.thermo.he(phase1.p, T_ad),
            Hs2=phase2.thermo.he(phase2.p, T_ad),
            RTf=R_UNIVERSAL * T_ad / phase2.thermo.W,
        )


@dataclass
class RegressionInterface:
    """Per-interface state owned by the phase system."""
    key: PhasePairKey
    pair: PhasePair
    model: RegressionModel
    reference: AdiabaticReferenceState
    synthesizer: VelocitySynthesizer
    alpha_old: np.ndarray
    rb: np.ndarray
    Ug: np.ndarray
    Up: np.ndarray

    @property
    def propellant(self) -> str:
        return self.model.propellant


class RegressionPhaseSystem(MultiphaseSystem):
    """
    Multiphase system with regressing propellant interfaces.

    Owns the transfer table, one regression model per interface, the
    previous-step propellant fraction and the injection velocity fields.
    """

    def __init__(self, mesh: Mesh1D, phases: List[Phase], p: np.ndarray,
                 config: RegressionConfig, registry: ModelRegistry = None,
                 dt: float = 1e-4):
        """
        Args:
            mesh: Computational mesh
            phases: All phases, including the propellant
            p: Shared pressure field [Pa]
            config: Regression configuration (validated before any allocation)
            registry: Regression model registry (package models if None)
            dt: Time step [s]
        """
        config.validate()

        super().__init__(mesh, phases, p, dt)

        self.config = config
        self.registry = registry if registry is not None else default_regression_registry()
        self.solve_particle = config.solve_particle
        self.rho_propellant = config.propellant_rho

        self.transfer = TransferCoefficientTable(mesh.n_cells)
        self.interfaces: Dict[PhasePairKey, RegressionInterface] = {}

        for interface_config in config.interfaces:
            key = PhasePairKey.from_names(interface_config.pair)
            self._check_interface(key, interface_config.propellant)

            model = self.registry.create(interface_config.model, interface_config.coeffs,
                                         interface_config.propellant, self)
            pair = self.pair(key)
            reference = AdiabaticReferenceState.from_pair(pair, config.T_ad)
            synthesizer = VelocitySynthesizer(
                RTf=reference.RTf,
                Xp=config.Xp,
                rho_prop=self.rho_propellant,
                normal=config.normal,
                particle_velocity_ratio=config.particle_velocity_ratio,
            )

            # Initially assume no mass transfer
            self.transfer.add(key, config.Xp)

            self.interfaces[key] = RegressionInterface(
                key=key,
                pair=pair,
                model=model,
                reference=reference,
                synthesizer=synthesizer,
                alpha_old=self.phase(interface_config.propellant).alpha.copy(),
                rb=mesh.zeros(),
                Ug=mesh.vector_zeros(),
                Up=mesh.vector_zeros(),
            )

            logger.info(f"Regression interface {key!r}: model {interface_config.model}, "
                        f"propellant {interface_config.propellant}, Xp = {config.Xp}")

        if not self.solve_particle:
            logger.info("No particles in combustion products: particle fraction equations are not solved")

    def _check_interface(self, key: PhasePairKey, propellant: str):
        for name in key.names + (propellant,):
            if not self.has_phase(name):
                raise ConfigurationError(
                    f"Interface {key!r} refers to unknown phase '{name}'. "
                    f"Available phases: {[p.name for p in self.phases]}")
        if not self.phase(propellant).stationary:
            raise ConfigurationError(f"Propellant phase '{propellant}' must be stationary")
        if key in self.interfaces:
            raise ConfigurationError(f"Phase pair {key!r} is configured more than once")

    # --- Mass transfer ---

    def mass_transfer(self, key: PhasePairKey) -> np.ndarray:
        """Signed regression mass-transfer rate of a pair [kg/(m³·s)]."""
        if key not in self.transfer:
            return super().dmdt(key)
        return self.transfer.rate(key)

    def dmdts(self) -> Dict[str, np.ndarray]:
        dmdts = super().dmdts()

        for entry in self.transfer:
            pair = self.interfaces[entry.key].pair
            dmdts[pair.phase1.name] += entry.coeff * entry.rate
            dmdts[pair.phase2.name] += (1.0 - entry.coeff) * entry.rate

        return dmdts

    def mass_transfer_equations(self) -> TransferTable:
        """Species equations of every phase. Regression transfers bulk mass only."""
        eqns = {}
        n = self.mesh.n_cells
        for phase in self.phases:
            for Yi in phase.species:
                eqns[Yi] = TransferEquation(Yi, n)

        # (No species present)
        return eqns

    # --- Energy and momentum ---

    def heat_transfer(self) -> TransferTable:
        eqns = super().heat_transfer()

        for entry in self.transfer:
            interface = self.interfaces[entry.key]
            rDmdt = entry.rate
            coeff = entry.coeff

            eqn1 = eqns[interface.pair.phase1.name]
            eqn2 = eqns[interface.pair.phase2.name]

            eqn1.add_sp(coeff * rDmdt)
            eqn1.add_su(coeff * rDmdt * interface.reference.Hs1)
            eqn2.add_sp((1.0 - coeff) * rDmdt)
            eqn2.add_su((1.0 - coeff) * rDmdt * interface.reference.Hs2)

        return eqns

    def momentum_transfer(self) -> TransferTable:
        eqns = super().momentum_transfer()

        for entry in self.transfer:
            interface = self.interfaces[entry.key]
            rDmdt = entry.rate
            coeff = entry.coeff

            name1 = interface.pair.phase1.name
            name2 = interface.pair.phase2.name

            if name1 in eqns:
                eqns[name1].add_sp(coeff * rDmdt)
                eqns[name1].add_su((coeff * rDmdt)[:, None] * interface.Up)
            if name2 in eqns:
                eqns[name2].add_sp((1.0 - coeff) * rDmdt)
                eqns[name2].add_su(((1.0 - coeff) * rDmdt)[:, None] * interface.Ug)

        return eqns

    # --- Step lifecycle ---

    def solve(self):
        # Regress propellant surface
        for interface in self.interfaces.values():
            alpha = self.phase(interface.propellant).alpha
            interface.model.regress(alpha, interface.alpha_old)

        if self.solve_particle:
            super().solve()
        else:
            for interface in self.interfaces.values():
                self._set_fractions_from_propellant(interface)

    def _set_fractions_from_propellant(self, interface: RegressionInterface):
        """Gas fills the volume left by the propellant; particles are frozen at zero."""
        alpha_propellant = self.phase(interface.propellant).alpha
        gas_name = interface.pair.phase2.name

        for phase in self.phases:
            if phase.stationary:
                logger.info(phase.bounds_summary())
                continue

            if phase.name == gas_name:
                phase.set_alpha(1.0 - alpha_propellant)
                alpha_phi = self.mesh.interpolate(phase.alpha) * phase.phi
            else:
                phase.set_alpha(0.0 * alpha_propellant)
                alpha_phi = 0.0 * phase.phi
            phase.set_fluxes(alpha_phi, self.mesh.interpolate(phase.rho) * alpha_phi)
            phase.clip(SMALL, 1 - SMALL)

            logger.info(phase.bounds_summary())

    def correct(self):
        super().correct()

        # Burning rate and area density
        for interface in self.interfaces.values():
            interface.model.correct()
            self.transfer.reset(interface.key)

        # Mass released by the surface
        for interface in self.interfaces.values():
            interface.rb[:] = interface.model.rb()
            self.transfer.set_rate(interface.key, interface.model.dmdt() * self.rho_propellant)

        self.calculate_velocity()

    def store(self):
        super().store()

        for interface in self.interfaces.values():
            interface.alpha_old = self.phase(interface.propellant).alpha.copy()

    def calculate_velocity(self):
        """Velocity of the gas and particles entering the chamber."""
        for interface in self.interfaces.values():
            interface.synthesizer.update(
                interface.Ug, interface.Up,
                rb=interface.model.rb(),
                As=interface.model.As(),
                dmdt=self.transfer.rate(interface.key),
                p_gas=interface.pair.phase2.p,
            )

    # --- Accessors ---

    def interface(self, key: PhasePairKey) -> RegressionInterface:
        return self.interfaces[key]

    def injection_velocities(self, key: PhasePairKey):
        """(Up, Ug) of an interface."""
        interface = self.interfaces[key]
        return interface.Up.copy(), interface.Ug.copy()
