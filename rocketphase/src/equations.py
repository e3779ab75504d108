"""
Source contributions to the per-phase transport equations.

Each contribution is held in linearised form

    S(psi) = Su - Sp * psi

where Sp is the implicit coefficient (kept on the diagonal by the
equation-assembly pass) and Su the explicit source. For vector
equations Su has shape (n_cells, 3) and Sp acts on every component.

Notation:
    psi - the field the equation is solved for (h, U, Y_i)
    Sp  - implicit sink coefficient [kg/(m³·s)]
    Su  - explicit source rate [psi·kg/(m³·s)]
"""

import numpy as np
from typing import Dict

from .mesh import SMALL


class TransferEquation:
    """Linearised source contribution for one field of one phase."""

    def __init__(self, psi_name: str, n_cells: int, n_components: int = 1):
        self.psi_name = psi_name
        self.n_cells = n_cells
        self.n_components = n_components
        self.Sp = np.zeros(n_cells)
        if n_components == 1:
            self.Su = np.zeros(n_cells)
        else:
            self.Su = np.zeros((n_cells, n_components))

    @classmethod
    def like(cls, psi_name: str, psi: np.ndarray) -> 'TransferEquation':
        """Zero contribution sized for the field psi."""
        n_components = 1 if psi.ndim == 1 else psi.shape[1]
        return cls(psi_name, psi.shape[0], n_components)

    def add_sp(self, coeff: np.ndarray):
        """Add the implicit sink -coeff * psi."""
        self.Sp += coeff

    def add_su(self, source: np.ndarray):
        """Add an explicit source."""
        if self.n_components > 1 and np.ndim(source) == 1:
            raise ValueError(f"Vector equation for {self.psi_name} needs a (n_cells, "
                             f"{self.n_components}) source")
        self.Su += source

    def _broadcast(self, coeff: np.ndarray) -> np.ndarray:
        return coeff if self.n_components == 1 else coeff[:, None]

    def evaluate(self, psi: np.ndarray) -> np.ndarray:
        """Source rate Su - Sp * psi for the given field."""
        return self.Su - self._broadcast(self.Sp) * psi

    def solve_pointwise(self, psi: np.ndarray, mass: np.ndarray, dt: float) -> np.ndarray:
        """
        Semi-implicit cell-local update of d(mass * psi)/dt = Su - Sp * psi.

        Args:
            psi: Current field
            mass: Phase mass per volume (alpha * rho) [kg/m³]
            dt: Time step [s]

        Returns:
            Updated field; unchanged where mass + dt * Sp vanishes
        """
        m = self._broadcast(mass)
        denom = m + dt * self._broadcast(self.Sp)
        psi_new = (m * psi + dt * self.Su) / np.maximum(denom, SMALL)

        # Cells without phase mass or sink keep their value
        return np.where(denom > SMALL, psi_new, psi)

    def is_zero(self) -> bool:
        return not (np.any(self.Sp) or np.any(self.Su))

    def __repr__(self):
        return f"TransferEquation({self.psi_name}, n_cells={self.n_cells})"


TransferTable = Dict[str, TransferEquation]
