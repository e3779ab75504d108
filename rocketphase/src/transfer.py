"""
Signed mass-transfer rates and split coefficients keyed by phase pair.

The rate of each entry is defined in the order of the key it was
registered with. Looking it up with the reversed key flips the sign.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Iterator

from .config import ConfigurationError
from .pair import PhasePairKey


@dataclass
class TransferEntry:
    key: PhasePairKey
    rate: np.ndarray        # Mass-transfer-rate density [kg/(m³·s)]
    coeff: float            # Fraction attributed to key.first


class TransferCoefficientTable:
    """Owns one transfer field and split coefficient per pair."""

    def __init__(self, n_cells: int):
        self.n_cells = n_cells
        self._entries: Dict[PhasePairKey, TransferEntry] = {}

    def add(self, key: PhasePairKey, coeff: float, rate: np.ndarray = None) -> TransferEntry:
        """Register a pair. The rate starts at zero unless given."""
        if key in self._entries:
            raise ConfigurationError(f"Phase pair {key!r} is already governed by a regression model")
        if not 0.0 <= coeff < 1.0:
            raise ConfigurationError(f"Split coefficient of {key!r} must lie in [0, 1), got {coeff}")

        field = np.zeros(self.n_cells) if rate is None else np.array(rate, dtype=float)
        entry = TransferEntry(key=key, rate=field, coeff=float(coeff))
        self._entries[key] = entry
        return entry

    def __contains__(self, key: PhasePairKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TransferEntry]:
        return iter(list(self._entries.values()))

    def sign(self, key: PhasePairKey) -> int:
        """+1 if key matches the stored order, -1 if reversed."""
        return self._entries[key].key.compare(key)

    def rate(self, key: PhasePairKey) -> np.ndarray:
        """Signed rate for key; zeros for pairs without an entry."""
        if key not in self._entries:
            return np.zeros(self.n_cells)
        return self.sign(key) * self._entries[key].rate

    def coeff(self, key: PhasePairKey) -> float:
        """Split coefficient as seen from key.first."""
        entry = self._entries[key]
        return entry.coeff if self.sign(key) > 0 else 1.0 - entry.coeff

    def set_rate(self, key: PhasePairKey, rate: np.ndarray):
        """Set the rate, given in the order of key."""
        self._entries[key].rate[:] = self.sign(key) * rate

    def reset(self, key: PhasePairKey):
        self._entries[key].rate[:] = 0.0
