"""
Global constants for the Runge-Kutta finite-volume solver.

This module defines constants used throughout the codebase to ensure
consistency in array shapes and indexing.
"""

# Conservative variables: [rho, rho*u, rho*v, rho*E]
NCONV = 4
RHO_IDX = 0
RHOU_IDX = 1
RHOV_IDX = 2
RHOE_IDX = 3

# Dependent variables: [p, T, c, gamma, cp] (+ [mu, kappa] for Navier-Stokes)
P_IDX = 0       # Pressure
T_IDX = 1       # Temperature
C_IDX = 2       # Speed of sound
GAMMA_IDX = 3   # Ratio of specific heats
CP_IDX = 4      # Specific heat at constant pressure (= dh/dT)
MU_IDX = 5      # Laminar viscosity
KAPPA_IDX = 6   # Heat conductivity

NDV_EULER = 5
NDV_VISCOUS = 7

# Limiter bounds and smoothing temporaries both use two (NCONV, nnodes) windows
NSCRATCH_VIEWS = 2


def get_work_size(nnodes: int) -> int:
    """
    Return the minimum length of the real work buffer.

    Parameters
    ----------
    nnodes : int
        Total number of mesh nodes (active and dummy).

    Returns
    -------
    int
        NSCRATCH_VIEWS * NCONV * nnodes
    """
    return NSCRATCH_VIEWS * NCONV * nnodes


def get_ndv(viscous: bool) -> int:
    """Number of dependent variables stored per node."""
    return NDV_VISCOUS if viscous else NDV_EULER
