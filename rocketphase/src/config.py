"""
Configuration for the regression phase system and the time loop.

Configuration is read once at construction. JSON files map directly onto
the dataclasses below; nested dictionaries are converted in __post_init__.
"""

import dataclasses
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple


class ConfigurationError(ValueError):
    """Physically ill-posed or incomplete configuration. Fatal."""


def check_entries(cls, dct: dict, required=(), section: str = None):
    """Raise ConfigurationError for missing or unknown entries of a dataclass section."""
    where = f" in '{section}'" if section else ""
    missing = set(required) - set(dct)
    if missing:
        raise ConfigurationError(f"Missing required entries{where}: {sorted(missing)}")
    unknown = set(dct) - {f.name for f in dataclasses.fields(cls)}
    if unknown:
        raise ConfigurationError(f"Unknown entries{where}: {sorted(unknown)}")


@dataclass
class InterfaceConfig:
    """One regressing interface."""
    pair: Tuple[str, str]       # (particulate phase, gas phase)
    propellant: str             # Name of the regressing phase
    model: str = 'saintRobert'  # Regression model registry name
    coeffs: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        if len(self.pair) != 2:
            raise ConfigurationError(f"Interface pair must name two phases, got {self.pair}")
        self.pair = tuple(self.pair)
        if self.pair[0] == self.pair[1]:
            raise ConfigurationError(f"Interface pair must join two distinct phases, got {self.pair}")
        if self.propellant in self.pair:
            raise ConfigurationError(
                f"Propellant phase '{self.propellant}' cannot be a member of its product pair {self.pair}")

    @classmethod
    def from_dict(cls, dct: dict) -> 'InterfaceConfig':
        check_entries(cls, dct, required=('pair', 'propellant'), section='interfaces')
        return cls(**dct)


@dataclass
class RegressionConfig:
    """Configuration of the propellant regression phase system."""
    T_ad: float                 # Adiabatic flame temperature [K]
    Xp: float                   # Mass fraction of particles in combustion products [-]
    propellant_rho: float       # Propellant intrinsic density [kg/m³]
    interfaces: List[InterfaceConfig] = field(default_factory=list)
    normal: Tuple[float, float, float] = (1.0, 0.0, 0.0)   # Injection direction
    particle_velocity_ratio: float = 0.0                   # Up / Ug at the surface

    def __post_init__(self):
        self.interfaces = [InterfaceConfig.from_dict(i) if isinstance(i, dict) else i
                           for i in self.interfaces]
        self.normal = tuple(float(c) for c in self.normal)
        self.validate()

    def validate(self):
        if self.Xp == 1.0:
            raise ConfigurationError("Mass fraction of particles in combustion products cannot be 1.0")
        if not 0.0 <= self.Xp < 1.0:
            raise ConfigurationError(
                f"Mass fraction of particles in combustion products must lie in [0, 1), got {self.Xp}")
        if self.T_ad <= 0.0:
            raise ConfigurationError(f"Adiabatic flame temperature must be positive, got {self.T_ad}")
        if self.propellant_rho <= 0.0:
            raise ConfigurationError(f"Propellant density must be positive, got {self.propellant_rho}")
        if len(self.normal) != 3:
            raise ConfigurationError(f"Injection direction must have 3 components, got {self.normal}")
        if not self.interfaces:
            raise ConfigurationError("At least one regressing interface must be configured")

    @property
    def solve_particle(self) -> bool:
        """False selects the analytic volume-fraction path (no entrained particles)."""
        return self.Xp != 0.0

    @classmethod
    def from_dict(cls, dct: dict) -> 'RegressionConfig':
        check_entries(cls, dct, required=('T_ad', 'Xp', 'propellant_rho'), section='regression')
        return cls(**dct)


@dataclass
class SimulationConfig:
    """Configuration for the time loop."""
    dt: float = 1e-4
    n_steps: int = 100
    print_interval: int = 10
    write_interval: int = 0            # 0 disables checkpoints
    checkpoint: Optional[str] = None   # Checkpoint file path

    @classmethod
    def from_dict(cls, dct: dict) -> 'SimulationConfig':
        check_entries(cls, dct, section='simulation')
        return cls(**dct)


def load_config(path) -> Tuple[RegressionConfig, SimulationConfig]:
    """
    Load a JSON case file.

    The file holds a 'regression' section (RegressionConfig) and an optional
    'simulation' section (SimulationConfig).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Case file not found: {path}\nExpected at: {path.absolute()}")

    with open(path, 'r') as f:
        dct = json.load(f)

    if 'regression' not in dct:
        raise ConfigurationError(f"Case file {path} has no 'regression' section")

    regression = RegressionConfig.from_dict(dct['regression'])
    simulation = SimulationConfig.from_dict(dct.get('simulation', {}))
    return regression, simulation
