"""
Base multiphase system.

Holds the phases and the shared pressure field, and provides the default
(zero) interphase transfer accounting together with an explicit upwind
volume-fraction transport for the moving phases. Phase systems that model
interphase mass transfer derive from this class and add their own terms.
"""

import logging
import numpy as np
from typing import Dict, List

from .equations import TransferEquation, TransferTable
from .mesh import Mesh1D, SMALL
from .pair import PhasePair, PhasePairKey
from .phase import Phase

logger = logging.getLogger(__name__)


class MultiphaseSystem:
    """
    Collection of interpenetrating phases on a common mesh.

    Features:
    - Shared pressure field
    - Default zero mass, momentum and heat transfer
    - First-order upwind volume-fraction transport
    """

    def __init__(self, mesh: Mesh1D, phases: List[Phase], p: np.ndarray, dt: float = 1e-4):
        """
        Initialize the system.

        Args:
            mesh: Computational mesh
            phases: Phases of the model; their pressure must be p
            p: Shared pressure field [Pa]
            dt: Time step [s]
        """
        self.mesh = mesh
        self.p = p
        self.dt = dt
        self.time = 0.0
        self.step_index = 0

        self._phases: Dict[str, Phase] = {}
        for phase in phases:
            if phase.name in self._phases:
                raise ValueError(f"Duplicate phase name: {phase.name}")
            if phase.p is not p:
                phase.p = p
            self._phases[phase.name] = phase

    @property
    def phases(self) -> List[Phase]:
        return list(self._phases.values())

    def phase(self, name: str) -> Phase:
        try:
            return self._phases[name]
        except KeyError:
            raise KeyError(f"Unknown phase '{name}'. Available phases: {list(self._phases)}") from None

    def has_phase(self, name: str) -> bool:
        return name in self._phases

    def pair(self, key: PhasePairKey) -> PhasePair:
        """Resolve a key to its phases, in the order of the key."""
        return PhasePair(self.phase(key.first), self.phase(key.second))

    # --- Interphase transfer (zero by default) ---

    def dmdt(self, key: PhasePairKey) -> np.ndarray:
        """Mass-transfer rate of a pair [kg/(m³·s)]."""
        return self.mesh.zeros()

    def dmdts(self) -> Dict[str, np.ndarray]:
        """Net mass source per phase [kg/(m³·s)]."""
        return {phase.name: self.mesh.zeros() for phase in self.phases}

    def heat_transfer(self) -> TransferTable:
        """Enthalpy-equation contributions per phase."""
        return {phase.name: TransferEquation.like('h', phase.h) for phase in self.phases}

    def momentum_transfer(self) -> TransferTable:
        """Momentum-equation contributions per moving phase."""
        return {phase.name: TransferEquation.like('U', phase.U)
                for phase in self.phases if not phase.stationary}

    # --- Volume-fraction transport ---

    def upwind_flux(self, phase: Phase) -> np.ndarray:
        """First-order upwind face flux of the phase fraction [m³/s]."""
        alpha = phase.alpha
        phi = phase.phi

        alpha_L = np.empty(self.mesh.n_faces)
        alpha_R = np.empty(self.mesh.n_faces)
        alpha_L[1:] = alpha
        alpha_L[0] = alpha[0]
        alpha_R[:-1] = alpha
        alpha_R[-1] = alpha[-1]

        return np.where(phi >= 0.0, alpha_L, alpha_R) * phi

    def solve(self):
        """Advance the fractions of the moving phases with their fluxes and mass sources."""
        dmdts = self.dmdts()

        for phase in self.phases:
            if phase.stationary:
                logger.info(phase.bounds_summary())
                continue

            alpha_phi = self.upwind_flux(phase)
            div = (alpha_phi[1:] - alpha_phi[:-1]) / self.mesh.vol
            phase.set_alpha(phase.alpha + self.dt * (dmdts[phase.name] / phase.rho - div))
            phase.set_fluxes(alpha_phi, self.mesh.interpolate(phase.rho) * alpha_phi)
            phase.clip(SMALL, 1 - SMALL)

            logger.info(phase.bounds_summary())

    def correct(self):
        """Refresh face fluxes from the current phase velocities."""
        for phase in self.phases:
            phase.set_velocity(phase.U)

    def store(self):
        """Hook for old-time state stored at the start of a step."""
