"""
Solver components for the explicit multistage pseudo-time step.

This package provides:
    - The Runge-Kutta step orchestrator and its immutable configuration
    - Stage coefficient tables
    - Collaborator protocols (flux, gas model, boundary, smoothing, time step)
    - Edge-based local time stepping
"""

from .flow_field import FlowField, uniform_flow
from .stages import (
    StageTable,
    single_stage,
    upwind_3stage,
    upwind_5stage,
    hybrid_5stage,
    stage_preset,
)
from .collaborators import (
    Collaborators,
    TimeStepEstimator,
    SpatialScheme,
    GasModel,
    ResidualCorrector,
    BoundaryConditions,
    ResidualSmoother,
)
from .time_stepping import (
    TimeStepConfig,
    EdgeTimeStep,
    compute_spectral_radii,
    compute_local_timestep,
)
from .factory import create_solver, create_collaborators, run_simulation
from .rk_solver import (
    RungeKuttaSolver,
    SolverConfig,
    EquationSet,
    ReconstructionOrder,
)

__all__ = [
    'FlowField',
    'uniform_flow',
    # Stage tables
    'StageTable',
    'single_stage',
    'upwind_3stage',
    'upwind_5stage',
    'hybrid_5stage',
    'stage_preset',
    # Collaborators
    'Collaborators',
    'TimeStepEstimator',
    'SpatialScheme',
    'GasModel',
    'ResidualCorrector',
    'BoundaryConditions',
    'ResidualSmoother',
    # Time stepping
    'TimeStepConfig',
    'EdgeTimeStep',
    'compute_spectral_radii',
    'compute_local_timestep',
    # Solver
    'RungeKuttaSolver',
    'SolverConfig',
    'EquationSet',
    'ReconstructionOrder',
    # Factory
    'create_solver',
    'create_collaborators',
    'run_simulation',
]
