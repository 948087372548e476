"""
Configuration module for the Runge-Kutta solver.

Provides YAML-based configuration with dataclass schema.
"""

from .schema import (
    SimulationConfig,
    GasConfig,
    NumericsConfig,
    StageConfig,
    IterationConfig,
    LoggingConfig,
    euler_upwind_preset,
    low_mach_preset,
    navier_stokes_preset,
)

from .loader import (
    load_yaml,
    from_dict,
    save_yaml,
)

__all__ = [
    # Schema classes
    'SimulationConfig',
    'GasConfig',
    'NumericsConfig',
    'StageConfig',
    'IterationConfig',
    'LoggingConfig',
    # Presets
    'euler_upwind_preset',
    'low_mach_preset',
    'navier_stokes_preset',
    # Loader functions
    'load_yaml',
    'from_dict',
    'save_yaml',
]
