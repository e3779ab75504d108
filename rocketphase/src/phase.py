"""
Phase representation for the multiphase system.

Each phase carries its own cell fields:
    alpha - volume fraction [-]
    h     - specific sensible enthalpy [J/kg]
    U     - velocity [m/s], shape (n_cells, 3)

and face fields:
    phi           - volumetric flux [m³/s]
    alpha_phi     - phase volumetric flux [m³/s]
    alpha_rho_phi - phase mass flux [kg/s]

Pressure is shared between phases and owned by the system.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import List, Union

from .mesh import Mesh1D
from .thermo import GasProperties, IncompressibleProperties

Thermo = Union[GasProperties, IncompressibleProperties]


@dataclass
class Phase:
    """
    A single continuum of the multiphase model.

    Fields are stored directly; temperature and density are computed
    as properties from enthalpy and the shared pressure.
    """
    name: str
    thermo: Thermo
    mesh: Mesh1D
    alpha: np.ndarray
    h: np.ndarray
    U: np.ndarray
    p: np.ndarray
    stationary: bool = False
    species: List[str] = field(default_factory=list)

    def __post_init__(self):
        n = self.mesh.n_cells
        self.alpha = np.array(np.broadcast_to(self.alpha, (n,)), dtype=float)
        self.h = np.array(np.broadcast_to(self.h, (n,)), dtype=float)
        self.U = np.array(np.broadcast_to(self.U, (n, 3)), dtype=float)
        self.phi = self.mesh.interpolate(self.U[:, 0]) * self.mesh.A_faces
        self.alpha_phi = self.mesh.interpolate(self.alpha) * self.phi
        self.alpha_rho_phi = self.mesh.interpolate(self.rho) * self.alpha_phi

    @classmethod
    def from_temperature(cls, name: str, thermo: Thermo, mesh: Mesh1D,
                         alpha, T, p, U=0.0, stationary: bool = False,
                         species: List[str] = None) -> 'Phase':
        """
        Create a phase from primitive variables.

        Args:
            alpha: Volume fraction (scalar or per cell)
            T: Temperature [K]
            p: Shared pressure field [Pa]
            U: Velocity [m/s] (scalar, 3-vector or per cell)
        """
        h = thermo.he(p, T)
        return cls(name=name, thermo=thermo, mesh=mesh, alpha=alpha, h=h, U=U,
                   p=p, stationary=stationary,
                   species=list(species) if species else [])

    # --- Derived fields as properties ---

    @property
    def T(self) -> np.ndarray:
        """Temperature [K]."""
        return self.thermo.T_from_he(self.h)

    @property
    def rho(self) -> np.ndarray:
        """Intrinsic density [kg/m³]."""
        return self.thermo.rho(self.p, self.T)

    @property
    def alpha_rho(self) -> np.ndarray:
        """Phase mass per volume [kg/m³]."""
        return self.alpha * self.rho

    # --- Setters used by the phase system ---

    def set_alpha(self, alpha: np.ndarray):
        self.alpha[:] = alpha

    def set_fluxes(self, alpha_phi: np.ndarray, alpha_rho_phi: np.ndarray):
        self.alpha_phi = np.array(alpha_phi, dtype=float)
        self.alpha_rho_phi = np.array(alpha_rho_phi, dtype=float)

    def set_enthalpy(self, h: np.ndarray):
        self.h[:] = h

    def set_velocity(self, U: np.ndarray):
        self.U[:] = U
        self.phi = self.mesh.interpolate(self.U[:, 0]) * self.mesh.A_faces

    def clip(self, lower: float, upper: float):
        """Clip the volume fraction into [lower, upper]."""
        np.clip(self.alpha, lower, upper, out=self.alpha)

    def weighted_average(self) -> float:
        return self.mesh.weighted_average(self.alpha)

    def bounds_summary(self) -> str:
        return (f"{self.name} fraction, min, max = {self.weighted_average():.6g} "
                f"{np.min(self.alpha):.6g} {np.max(self.alpha):.6g}")
