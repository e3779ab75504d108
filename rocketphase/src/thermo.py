"""
Thermodynamic closures for the gas, particulate and propellant phases.

Enthalpies are sensible enthalpies relative to T_STD:
    h(p, T) = cp * (T - T_STD)
"""

import numpy as np
from dataclasses import dataclass

R_UNIVERSAL = 8314.5    # Universal gas constant [J/(kmol·K)]
T_STD = 298.15          # Reference temperature of sensible enthalpy [K]


@dataclass
class GasProperties:
    """Thermodynamic properties for a calorically perfect gas."""
    gamma: float = 1.4          # Ratio of specific heats
    R: float = 287.0            # Specific gas constant [J/(kg·K)]

    @property
    def cp(self) -> float:
        """Specific heat at constant pressure [J/(kg·K)]."""
        return self.gamma * self.R / (self.gamma - 1)

    @property
    def cv(self) -> float:
        """Specific heat at constant volume [J/(kg·K)]."""
        return self.R / (self.gamma - 1)

    @property
    def W(self) -> float:
        """Molar mass [kg/kmol]."""
        return R_UNIVERSAL / self.R

    def rho(self, p: np.ndarray, T: np.ndarray) -> np.ndarray:
        """Density from the ideal gas law [kg/m³]."""
        return p / (self.R * T)

    def he(self, p: np.ndarray, T: np.ndarray) -> np.ndarray:
        """Sensible enthalpy [J/kg]."""
        p, T = np.broadcast_arrays(np.asarray(p, dtype=float), np.asarray(T, dtype=float))
        return self.cp * (T - T_STD)

    def T_from_he(self, h: np.ndarray) -> np.ndarray:
        """Temperature from sensible enthalpy [K]."""
        return T_STD + h / self.cp


@dataclass
class IncompressibleProperties:
    """Constant-density condensed phase (propellant, metal-oxide particles)."""
    rho0: float = 1700.0        # Intrinsic density [kg/m³]
    Cp: float = 1000.0          # Specific heat [J/(kg·K)]
    molar_mass: float = 100.0   # Molar mass [kg/kmol]

    @property
    def cp(self) -> float:
        return self.Cp

    @property
    def cv(self) -> float:
        return self.Cp

    @property
    def W(self) -> float:
        return self.molar_mass

    def rho(self, p: np.ndarray, T: np.ndarray) -> np.ndarray:
        p, T = np.broadcast_arrays(np.asarray(p, dtype=float), np.asarray(T, dtype=float))
        return np.full_like(T, self.rho0)

    def he(self, p: np.ndarray, T: np.ndarray) -> np.ndarray:
        p, T = np.broadcast_arrays(np.asarray(p, dtype=float), np.asarray(T, dtype=float))
        return self.Cp * (T - T_STD)

    def T_from_he(self, h: np.ndarray) -> np.ndarray:
        return T_STD + h / self.Cp
