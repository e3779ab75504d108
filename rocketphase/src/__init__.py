"""
Propellant Regression Phase System
==================================

Phase-coupled mass, momentum and energy transfer for a burning propellant
surface that releases gas and entrained particles.

Features:
- Pluggable surface regression models (Saint Robert burning law, constant rate)
- Signed mass-transfer table keyed by phase pair
- Split of the released mass between particles and gas (particle mass fraction Xp)
- Energy sourced at the adiabatic flame temperature, momentum at the
  synthesized injection velocity
- Analytic volume fractions when the products carry no particles
- Loth drag and Drake heat-transfer closures
- HDF5 checkpoints for exact restarts

Source contributions use linearised form S = Su - Sp * psi.

Example:
    config = RegressionConfig(T_ad=3000.0, Xp=0.2, propellant_rho=1700.0,
                              interfaces=[{'pair': ('particles', 'gas'),
                                           'propellant': 'propellant',
                                           'model': 'saintRobert',
                                           'coeffs': {'a': 3.5e-5, 'n': 0.36}}])
    system = RegressionPhaseSystem(mesh, phases, p, config)
    Simulation(system, SimulationConfig(dt=1e-5)).run(100)
"""

from .thermo import GasProperties, IncompressibleProperties
from .mesh import Mesh1D, SMALL
from .phase import Phase
from .pair import PhasePair, PhasePairKey
from .equations import TransferEquation
from .config import ConfigurationError, InterfaceConfig, RegressionConfig, SimulationConfig, load_config
from .registry import ModelRegistry
from .regression import (RegressionModel, SaintRobertRegression, ConstantRegression,
                         default_regression_registry)
from .closure import (LothDrag, DrakeInviscidHeatTransfer, sutherland_viscosity, reynolds_number,
                      default_drag_registry, default_heat_transfer_registry)
from .transfer import TransferCoefficientTable
from .velocity import VelocitySynthesizer
from .system import MultiphaseSystem
from .controller import RegressionPhaseSystem, AdiabaticReferenceState
from .checkpoint import write_checkpoint, read_checkpoint
from .driver import Simulation, InterphaseExchange, conservation_summary
from .logs import configure_logging

__all__ = [
    # Thermodynamics
    'GasProperties',
    'IncompressibleProperties',

    # Mesh and phases
    'Mesh1D',
    'SMALL',
    'Phase',
    'PhasePair',
    'PhasePairKey',

    # Equations
    'TransferEquation',

    # Configuration
    'ConfigurationError',
    'InterfaceConfig',
    'RegressionConfig',
    'SimulationConfig',
    'load_config',

    # Models
    'ModelRegistry',
    'RegressionModel',
    'SaintRobertRegression',
    'ConstantRegression',
    'default_regression_registry',
    'LothDrag',
    'DrakeInviscidHeatTransfer',
    'sutherland_viscosity',
    'reynolds_number',
    'default_drag_registry',
    'default_heat_transfer_registry',

    # Phase coupling
    'TransferCoefficientTable',
    'VelocitySynthesizer',
    'MultiphaseSystem',
    'RegressionPhaseSystem',
    'AdiabaticReferenceState',

    # Run control
    'write_checkpoint',
    'read_checkpoint',
    'Simulation',
    'InterphaseExchange',
    'conservation_summary',
    'configure_logging',
]

__version__ = '1.0.0'
