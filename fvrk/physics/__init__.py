"""
Gas models for the finite-volume solver.
"""

from .perfect_gas import PerfectGas

__all__ = ['PerfectGas']
