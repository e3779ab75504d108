"""
Phase pair identification.

A PhasePairKey names the two phases of an interface. Keys compare equal
and hash the same regardless of order, but remember the order they were
built with so that signed quantities defined "from first to second" can
be flipped when looked up with the reverse order.
"""

import numpy as np
from dataclasses import dataclass
from typing import Tuple

from .phase import Phase


@dataclass(frozen=True, eq=False)
class PhasePairKey:
    first: str
    second: str

    def __post_init__(self):
        if self.first == self.second:
            raise ValueError(f"Phase pair must join two distinct phases, got ({self.first}, {self.second})")

    @classmethod
    def from_names(cls, names) -> 'PhasePairKey':
        first, second = names
        return cls(first, second)

    @property
    def names(self) -> Tuple[str, str]:
        return self.first, self.second

    def reversed(self) -> 'PhasePairKey':
        return PhasePairKey(self.second, self.first)

    def compare(self, other: 'PhasePairKey') -> int:
        """
        +1 if other has the same order, -1 if reversed, 0 if a different pair.
        """
        if (self.first, self.second) == (other.first, other.second):
            return 1
        if (self.first, self.second) == (other.second, other.first):
            return -1
        return 0

    def name(self) -> str:
        return f"{self.first}_{self.second}"

    def __eq__(self, other):
        if not isinstance(other, PhasePairKey):
            return NotImplemented
        return self.compare(other) != 0

    def __hash__(self):
        return hash(frozenset((self.first, self.second)))

    def __repr__(self):
        return f"({self.first} and {self.second})"


class PhasePair:
    """An ordered pair of phases: phase1 is the particulate side, phase2 the gas side."""

    def __init__(self, phase1: Phase, phase2: Phase):
        self.key = PhasePairKey(phase1.name, phase2.name)
        self.phase1 = phase1
        self.phase2 = phase2

    def name(self) -> str:
        return self.key.name()

    def magUr(self):
        """Magnitude of the relative velocity between the two phases."""
        return np.linalg.norm(self.phase1.U - self.phase2.U, axis=1)

    def __repr__(self):
        return f"PhasePair{self.key!r}"
