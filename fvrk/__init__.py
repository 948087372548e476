"""
fvrk - explicit multistage pseudo-time stepping for node-based
finite-volume discretisations of the compressible flow equations.
"""

from .exceptions import (
    SolverError,
    InsufficientWorkspaceError,
    WorkspaceBusyError,
    ConfigurationError,
)
from .solvers import RungeKuttaSolver, SolverConfig, Collaborators, FlowField

__version__ = "0.1.0"

__all__ = [
    'SolverError',
    'InsufficientWorkspaceError',
    'WorkspaceBusyError',
    'ConfigurationError',
    'RungeKuttaSolver',
    'SolverConfig',
    'Collaborators',
    'FlowField',
]
