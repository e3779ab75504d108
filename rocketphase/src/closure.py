"""
Closure correlations for dispersed particles in the combustion gas.

All correlations are stateless per-cell functions of the local flow
state. Denominators are clamped with SMALL at the same points as the
reference correlations; regime switches use

    neg0(x): x <= 0        pos(x): x > 0

Drag follows Loth (2008), blending a rarefied and a compressible regime
at Re = 45. Heat transfer follows Drake's Nusselt correlation with
Sutherland viscosity and Eucken conductivity.
"""

import numpy as np
from scipy.special import erf

from .mesh import SMALL
from .pair import PhasePair
from .registry import ModelRegistry


def sutherland_viscosity(T: np.ndarray, As: float, Ts: float) -> np.ndarray:
    """Dynamic viscosity mu = As * sqrt(T) / (1 + Ts / T) [Pa·s]."""
    return As * np.sqrt(T) / (1 + Ts / T)


def reynolds_number(rho: np.ndarray, U: np.ndarray, d: float, mu: np.ndarray) -> np.ndarray:
    """
    Reynolds number rho * |U| * d / mu.

    Args:
        U: Velocity, scalar per cell or (n_cells, 3)
        d: Reference length [m]
    """
    U = np.asarray(U, dtype=float)
    magU = np.linalg.norm(U, axis=1) if U.ndim == 2 else np.abs(U)
    return rho * magU * d / mu


class LothDrag:
    """
    Loth drag for compressible, rarefied particle flows.

    Returns Cd * Re, blended between:
        Re <= 45: rarefied regime (Knudsen and free-molecular limits)
        Re >  45: compressible continuum regime
    """

    def __init__(self, R: float, gamma: float, residualRe: float = 1e-3):
        """
        Args:
            R: Specific gas constant of the continuous phase [J/(kg·K)]
            gamma: Ratio of specific heats of the continuous phase
            residualRe: Residual Reynolds number, stored with the model coefficients
                and not applied to CdRe; only the Knudsen denominator is floored
        """
        self.R = R
        self.gamma = gamma
        self.residualRe = residualRe

    # --- Rarefied regime ---

    @staticmethod
    def fKn(Kn):
        return 1 / (1 + Kn * (2.514 + 0.8 * np.exp(-0.55 / np.maximum(Kn, SMALL))))

    @staticmethod
    def JM(Ma):
        MaMax = np.maximum(Ma, SMALL)
        return np.where(
            Ma - 1 <= 0,
            2.26 - 0.1 / MaMax + 0.14 / MaMax**3,
            1.6 + 0.25 / MaMax + 0.11 / MaMax**2 + 0.44 / MaMax**3,
        )

    @staticmethod
    def Cdfm(S):
        Smax = np.maximum(S, SMALL)
        sqrS = Smax**2
        S4 = Smax**4
        return (
            (1 + 2 * sqrS) * np.exp(-sqrS) / (np.sqrt(np.pi) * Smax**3)
            + 2 * np.sqrt(np.pi) / (3 * Smax)
            + (4 * S4 + 4 * sqrS - 1) * erf(Smax) / np.maximum(2 * sqrS, SMALL)
        )

    def CdfmRe(self, Re, Ma, S):
        CdfmF = self.Cdfm(S)
        JMF = self.JM(Ma)
        return CdfmF / (1 + np.sqrt(Re / 45) * (CdfmF / JMF - 1))

    def CdKnRe(self, Re, Kn):
        return 24 * (1 + 0.15 * Re**0.687) * self.fKn(Kn)

    def CdRare(self, Re, Ma, Kn, S):
        Ma4 = Ma**4
        return (self.CdKnRe(Re, Kn) + Re * Ma4 * self.CdfmRe(Re, Ma, S)) / (1 + Ma4)

    # --- Compressibility regime ---

    @staticmethod
    def CM(Ma):
        return np.where(
            Ma - 1.5 <= 0,
            1.65 + 0.65 * np.tanh(4 * Ma - 3.4),
            2.18 - 0.13 * np.tanh(0.9 * Ma - 2.7),
        )

    @staticmethod
    def GM(Ma):
        Ma3 = np.maximum(Ma, SMALL)**3
        return np.where(
            Ma - 0.8 <= 0,
            166 * Ma3 + 3.29 * Ma**2 - 10.9 * Ma + 20,
            5 + 40 / Ma3,
        )

    @staticmethod
    def HM(Ma):
        return np.where(
            Ma - 1.0 <= 0,
            0.0239 * Ma**3 + 0.212 * Ma**2 - 0.074 * Ma + 1,
            0.93 + 1 / (3.5 + Ma**5),
        )

    def CdComp(self, Re, Ma):
        CMMa = self.CM(Ma)
        return (
            24 * (1 + 0.15 * Re**0.687) * self.HM(Ma)
            + Re * 0.42 * CMMa / (1 + 42500 / np.maximum(Re**(1.16 * CMMa), SMALL)
                                  + self.GM(Ma) / np.maximum(np.sqrt(Re), SMALL))
        )

    # --- Blended ---

    def CdRe(self, Re: np.ndarray, Ma: np.ndarray) -> np.ndarray:
        """Drag coefficient times Reynolds number."""
        Re = np.asarray(Re, dtype=float)
        Ma = np.asarray(Ma, dtype=float)
        S = np.sqrt(self.gamma / 2) * Ma
        Kn = np.sqrt(np.pi) * S / np.maximum(Re, SMALL)

        return np.where(Re - 45 <= 0, self.CdRare(Re, Ma, Kn, S), self.CdComp(Re, Ma))

    def mach_number(self, magUr: np.ndarray, T: np.ndarray) -> np.ndarray:
        """Slip Mach number from the relative velocity."""
        return magUr / np.sqrt(self.gamma * self.R * T)

    def K(self, magUr, rho_c, mu_c, T_c, alpha_d, d: float) -> np.ndarray:
        """
        Momentum exchange coefficient [kg/(m³·s)]:
            K = 0.75 * CdRe * alpha_d * mu_c / d^2
        """
        Re = rho_c * magUr * d / mu_c
        Ma = self.mach_number(magUr, T_c)
        return 0.75 * self.CdRe(Re, Ma) * alpha_d * mu_c / d**2

    def K_pair(self, pair: PhasePair, d: float, mu_c: np.ndarray) -> np.ndarray:
        """Exchange coefficient of a pair (phase1 dispersed, phase2 continuous)."""
        continuous = pair.phase2
        return self.K(pair.magUr(), continuous.rho, mu_c, continuous.T, pair.phase1.alpha, d)


class DrakeInviscidHeatTransfer:
    """
    Particle heat transfer with Drake's Nusselt correlation:
        Nu = 2 + 0.6 * Re^(1/2) * Pr^(1/3)
        K  = 6 * alpha_d * kappa * Nu / d^2    where alpha_d > cutoff
    """

    def __init__(self, As: float, Ts: float, cutoff: float = 1e-6):
        """
        Args:
            As: Sutherland coefficient [Pa·s/K^0.5]
            Ts: Sutherland temperature [K]
            cutoff: Particle fraction below which no heat is exchanged
        """
        self.As = As
        self.Ts = Ts
        self.cutoff = cutoff

    def K(self, magUr, rho_c, T_c, p_c, Cp_c, Cv_c, alpha_d, d: float) -> np.ndarray:
        """Heat exchange coefficient [W/(m³·K)]."""
        mu = sutherland_viscosity(T_c, self.As, self.Ts)
        Re = rho_c * magUr * d / mu

        R = p_c / (rho_c * T_c)
        kappa = mu * Cv_c * (1.32 + 1.77 * R / Cv_c)
        Pr = mu * Cp_c / kappa
        Nu = 2.0 + 0.6 * np.sqrt(Re) * np.cbrt(Pr)

        active = np.asarray(alpha_d - self.cutoff > 0, dtype=float)
        return 6.0 * alpha_d * active * kappa * Nu / d**2

    def K_pair(self, pair: PhasePair, d: float) -> np.ndarray:
        continuous = pair.phase2
        return self.K(pair.magUr(), continuous.rho, continuous.T, continuous.p,
                      continuous.thermo.cp, continuous.thermo.cv, pair.phase1.alpha, d)


def default_drag_registry() -> ModelRegistry:
    registry = ModelRegistry('drag')
    registry.register('Loth', LothDrag)
    return registry


def default_heat_transfer_registry() -> ModelRegistry:
    registry = ModelRegistry('heatTransfer')
    registry.register('DrakeInviscid', DrakeInviscidHeatTransfer)
    return registry
