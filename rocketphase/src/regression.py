"""
Surface regression models for burning propellant interfaces.

A regression model owns the burning-rate state of one interface. Each step:
    correct()             - evaluate burn rate rb and interfacial area density As
    regress(alpha, alpha_old)
                          - advance the propellant volume fraction in place

The model exposes:
    rb()   - surface-normal regression speed [m/s]
    As()   - interfacial area density [1/m]
    dmdt() - regression flux on interface cells [m/s]; multiplied by the
             propellant density this is the mass-transfer rate of the pair
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Dict, Iterable

from .config import ConfigurationError
from .mesh import SMALL
from .registry import ModelRegistry


class RegressionModel(ABC):
    """Abstract base class for regression models."""

    required_coeffs: Iterable[str] = ()

    def __init__(self, coeffs: Dict[str, float], propellant: str, system):
        """
        Args:
            coeffs: Model coefficients from the interface configuration
            propellant: Name of the regressing phase
            system: Owning multiphase system (mesh, phases, pressure, dt)
        """
        missing = [c for c in self.required_coeffs if c not in coeffs]
        if missing:
            raise ConfigurationError(
                f"{type(self).__name__} for propellant '{propellant}' is missing "
                f"coefficients: {missing}")

        self.coeffs = dict(coeffs)
        self.propellant = propellant
        self.system = system
        self.mesh = system.mesh

        self._rb = self.mesh.zeros()
        self._As = self.mesh.zeros()

    @property
    def alpha(self) -> np.ndarray:
        """Current propellant volume fraction."""
        return self.system.phase(self.propellant).alpha

    @abstractmethod
    def correct(self):
        """Update burn rate and area density from the current state."""
        pass

    def rb(self) -> np.ndarray:
        return self._rb.copy()

    def As(self) -> np.ndarray:
        return self._As.copy()

    def interface_cells(self) -> np.ndarray:
        return self._As > SMALL

    def dmdt(self) -> np.ndarray:
        return np.where(self.interface_cells(), self._rb, 0.0)

    def regress(self, alpha: np.ndarray, alpha_old: np.ndarray):
        """
        Advance the propellant volume fraction over one time step.

        The surface recedes at rb, consuming rb * As of propellant volume
        per unit volume and time.
        """
        dt = self.system.dt
        alpha[:] = np.clip(alpha_old - dt * self._rb * self._As, 0.0, 1.0)

    # --- Checkpoint support ---

    def state_dict(self) -> Dict[str, np.ndarray]:
        return {'rb': self._rb.copy(), 'As': self._As.copy()}

    def load_state_dict(self, state: Dict[str, np.ndarray]):
        self._rb[:] = state['rb']
        self._As[:] = state['As']


class SaintRobertRegression(RegressionModel):
    """
    Pressure-dependent burning (Saint Robert / Vieille law):
        rb = a * p^n

    The area density is the magnitude of the propellant fraction gradient.

    Coefficients:
        a: Burn-rate coefficient [m/(s·Pa^n)]
        n: Pressure exponent [-]
    """

    required_coeffs = ('a', 'n')

    def correct(self):
        a = self.coeffs['a']
        n = self.coeffs['n']
        p = np.maximum(self.system.p, 0.0)

        self._rb[:] = a * p**n
        self._As[:] = np.abs(self.mesh.grad(self.alpha))


class ConstantRegression(RegressionModel):
    """
    Uniform burn rate.

    Coefficients:
        rb: Burn rate [m/s]
        As: Optional fixed area density [1/m] applied on cells where the
            propellant fraction gradient is non-zero. Without it the
            gradient magnitude is used.
    """

    required_coeffs = ('rb',)

    def correct(self):
        grad = np.abs(self.mesh.grad(self.alpha))

        self._rb[:] = self.coeffs['rb']
        if 'As' in self.coeffs:
            self._As[:] = np.where(grad > SMALL, self.coeffs['As'], 0.0)
        else:
            self._As[:] = grad


def default_regression_registry() -> ModelRegistry:
    """Registry holding the regression models shipped with the package."""
    registry = ModelRegistry('regression')
    registry.register('saintRobert', SaintRobertRegression)
    registry.register('constant', ConstantRegression)
    return registry
