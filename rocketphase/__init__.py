"""
rocketphase - Propellant Regression Phase System
================================================

Re-exports all public components from rocketphase.src
"""

from rocketphase.src import (
    # Thermodynamics
    GasProperties,
    IncompressibleProperties,
    # Mesh and phases
    Mesh1D,
    Phase,
    PhasePair,
    PhasePairKey,
    # Equations
    TransferEquation,
    # Configuration
    ConfigurationError,
    RegressionConfig,
    SimulationConfig,
    load_config,
    # Models
    ModelRegistry,
    RegressionModel,
    default_regression_registry,
    LothDrag,
    DrakeInviscidHeatTransfer,
    # Phase coupling
    TransferCoefficientTable,
    VelocitySynthesizer,
    MultiphaseSystem,
    RegressionPhaseSystem,
    # Run control
    write_checkpoint,
    read_checkpoint,
    Simulation,
    configure_logging,
)

__all__ = [
    'GasProperties',
    'IncompressibleProperties',
    'Mesh1D',
    'Phase',
    'PhasePair',
    'PhasePairKey',
    'TransferEquation',
    'ConfigurationError',
    'RegressionConfig',
    'SimulationConfig',
    'load_config',
    'ModelRegistry',
    'RegressionModel',
    'default_regression_registry',
    'LothDrag',
    'DrakeInviscidHeatTransfer',
    'TransferCoefficientTable',
    'VelocitySynthesizer',
    'MultiphaseSystem',
    'RegressionPhaseSystem',
    'write_checkpoint',
    'read_checkpoint',
    'Simulation',
    'configure_logging',
]
