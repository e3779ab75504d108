"""
Injection velocity of the combustion products at a regressing surface.

Mass balance across the burning surface for a product stream carrying a
particle mass fraction Xp:

    rho_gf   = p / RTf
    alpha_gf = 1 / (1 + (rho_gf / rho_prop) * Xp / (1 - Xp))
    Ug       = (rb - (1 - Xp) * dmdt / (alpha_gf * As * rho_gf)) * n

where RTf = R_universal * T_ad / W_gas. Ug is only defined where As != 0.
"""

import numpy as np
from typing import Sequence


def gas_density_at_surface(p: np.ndarray, RTf: float) -> np.ndarray:
    """Gas density at the surface from the adiabatic reference state [kg/m³]."""
    return p / RTf


def gas_fraction_at_surface(rho_gf: np.ndarray, rho_prop: float, Xp: float) -> np.ndarray:
    """Gas volume fraction of the product stream leaving the surface."""
    return 1.0 / (1.0 + (rho_gf / rho_prop) * (Xp / (1.0 - Xp)))


def injection_speed(rb: np.ndarray, As: np.ndarray, dmdt: np.ndarray,
                    Xp: float, rho_gf: np.ndarray, alpha_gf: np.ndarray) -> np.ndarray:
    """
    Gas injection speed on cells with As != 0, NaN elsewhere.
    """
    speed = np.full_like(rb, np.nan, dtype=float)
    mask = As != 0
    speed[mask] = rb[mask] - (1 - Xp) * dmdt[mask] / (alpha_gf[mask] * As[mask] * rho_gf[mask])
    return speed


class VelocitySynthesizer:
    """Refreshes the gas and particle injection velocity fields of one interface."""

    def __init__(self, RTf: float, Xp: float, rho_prop: float,
                 normal: Sequence[float] = (1.0, 0.0, 0.0),
                 particle_velocity_ratio: float = 0.0):
        """
        Args:
            RTf: Gas constant times adiabatic temperature [J/kg]
            Xp: Particle mass fraction of the products
            rho_prop: Propellant intrinsic density [kg/m³]
            normal: Injection direction
            particle_velocity_ratio: Particle to gas injection speed ratio
        """
        self.RTf = RTf
        self.Xp = Xp
        self.rho_prop = rho_prop
        self.normal = np.asarray(normal, dtype=float)
        self.particle_velocity_ratio = particle_velocity_ratio

    def update(self, Ug: np.ndarray, Up: np.ndarray, rb: np.ndarray, As: np.ndarray,
               dmdt: np.ndarray, p_gas: np.ndarray):
        """
        Overwrite Ug and Up in place on cells where As != 0.

        Args:
            Ug, Up: Injection velocity fields (n_cells, 3)
            rb: Burn rate [m/s]
            As: Interfacial area density [1/m]
            dmdt: Mass-transfer rate of the pair [kg/(m³·s)]
            p_gas: Gas pressure [Pa]
        """
        rho_gf = gas_density_at_surface(p_gas, self.RTf)
        alpha_gf = gas_fraction_at_surface(rho_gf, self.rho_prop, self.Xp)

        speed = injection_speed(rb, As, dmdt, self.Xp, rho_gf, alpha_gf)
        mask = As != 0

        Ug[mask] = speed[mask, None] * self.normal
        Up[mask] = self.particle_velocity_ratio * Ug[mask]
