"""
1D cell-centred mesh for the slab motor.
"""

import numpy as np
from dataclasses import dataclass
from typing import Callable, Optional

SMALL = 1e-15   # Floor for clamped denominators and volume-fraction bounds


@dataclass
class Mesh1D:
    """
    1D mesh with variable area support.

    Cell-centered finite volume mesh:
    - x_faces: Face locations (n_cells + 1)
    - x_cells: Cell centers (n_cells)
    - A_faces: Area at faces (n_cells + 1)
    - A_cells: Area at cell centers (n_cells)
    - dx: Cell widths (n_cells)
    - vol: Cell volumes = A * dx (n_cells)
    """
    x_faces: np.ndarray
    A_faces: np.ndarray

    def __post_init__(self):
        self.n_cells = len(self.x_faces) - 1
        self.x_cells = 0.5 * (self.x_faces[:-1] + self.x_faces[1:])
        self.A_cells = 0.5 * (self.A_faces[:-1] + self.A_faces[1:])
        self.dx = self.x_faces[1:] - self.x_faces[:-1]
        self.vol = self.A_cells * self.dx

    @classmethod
    def uniform(cls, x_min: float, x_max: float, n_cells: int,
                area_func: Optional[Callable[[np.ndarray], np.ndarray]] = None) -> 'Mesh1D':
        """
        Create a uniform mesh with a given area distribution.

        Args:
            x_min, x_max: Domain bounds
            n_cells: Number of cells
            area_func: Function A(x) returning area at position x (unit area if None)
        """
        x_faces = np.linspace(x_min, x_max, n_cells + 1)
        if area_func is None:
            A_faces = np.ones_like(x_faces)
        else:
            A_faces = area_func(x_faces)
        return cls(x_faces=x_faces, A_faces=A_faces)

    @property
    def n_faces(self) -> int:
        return self.n_cells + 1

    def zeros(self) -> np.ndarray:
        return np.zeros(self.n_cells)

    def vector_zeros(self) -> np.ndarray:
        return np.zeros((self.n_cells, 3))

    def interpolate(self, field: np.ndarray) -> np.ndarray:
        """
        Linear cell-to-face interpolation.

        Boundary faces take the value of the adjacent cell.
        """
        field = np.asarray(field, dtype=float)
        if field.ndim == 0:
            return np.full(self.n_faces, float(field))
        faces = np.empty(self.n_faces)
        faces[1:-1] = 0.5 * (field[:-1] + field[1:])
        faces[0] = field[0]
        faces[-1] = field[-1]
        return faces

    def grad(self, field: np.ndarray) -> np.ndarray:
        """Cell-centred gradient from interpolated face values (Gauss linear)."""
        faces = self.interpolate(field)
        return (faces[1:] - faces[:-1]) / self.dx

    def weighted_average(self, field: np.ndarray) -> float:
        """Volume-weighted average over the domain."""
        return float(np.sum(field * self.vol) / np.sum(self.vol))

    def integrate(self, field: np.ndarray) -> float:
        """Volume integral over the domain."""
        return float(np.sum(field * self.vol))
