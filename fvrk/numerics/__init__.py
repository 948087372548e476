"""
Numerical building blocks of the pseudo-time step.

This module provides:
- Scratch-buffer partitioning for limiter bounds and smoothing temporaries
- Low-Mach preconditioning of the residual
- Residual corrections at symmetry, wall and periodic boundaries
- Implicit residual smoothing on node-based meshes
"""

from .workspace import Workspace, allocate_work
from .preconditioning import apply_preconditioning, compute_preconditioning_matrices
from .boundary_residuals import BoundaryResidualCorrector
from .smoothing import ImplicitResidualSmoother

__all__ = [
    'Workspace',
    'allocate_work',
    'apply_preconditioning',
    'compute_preconditioning_matrices',
    'BoundaryResidualCorrector',
    'ImplicitResidualSmoother',
]
