"""
Call contracts of the kernels the pseudo-time step drives.

The step orchestrator only sequences these operations; it never looks
inside them. Any implementation with matching methods can be plugged in
(production kernels or recording stubs in tests). Every operation works
in place on the shared FlowField and signals failure by raising.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np
import numpy.typing as npt

from .flow_field import FlowField

NDArrayFloat = npt.NDArray[np.floating]


class TimeStepEstimator(Protocol):
    """Local pseudo-time step, evaluated once per step."""

    def time_step(self, flow: FlowField) -> None:
        """Fill flow.tstep from the current state (CFL not included)."""
        ...


class SpatialScheme(Protocol):
    """Gradients, limiter, upwind dissipation and convective/viscous fluxes."""

    def gradients(self, flow: FlowField) -> None: ...

    def gradients_viscous(self, flow: FlowField) -> None: ...

    def flux_viscous(self, flow: FlowField, beta: float) -> None:
        """Blend the viscous fluxes into flow.diss with weight beta."""
        ...

    def limiter_init(self, flow: FlowField,
                     umin: NDArrayFloat, umax: NDArrayFloat) -> None:
        """Fill the (4, nnodes) bound arrays umin / umax."""
        ...

    def limiter(self, flow: FlowField,
                umin: NDArrayFloat, umax: NDArrayFloat) -> None: ...

    def dissipation_roe1(self, flow: FlowField, beta: float) -> None: ...

    def dissipation_roe1_precond(self, flow: FlowField, beta: float) -> None: ...

    def dissipation_roe2(self, flow: FlowField, beta: float) -> None: ...

    def dissipation_roe2_precond(self, flow: FlowField, beta: float) -> None: ...

    def flux_roe1(self, flow: FlowField) -> None:
        """Convective flux plus flow.diss -> flow.rhs (all active nodes)."""
        ...

    def flux_roe2(self, flow: FlowField) -> None: ...


class GasModel(Protocol):
    """
    Dependent variables and the matrices of the low-Mach preconditioning.

    Matrix operations are batched over nodes: vectors have shape (4, n),
    scalars (n,), matrices (n, 4, 4). Primitive variables are [p, u, v, T].
    """

    def dependent_vars_all(self, flow: FlowField) -> None: ...

    def theta(self, gamma: NDArrayFloat, c: NDArrayFloat, q2: NDArrayFloat) -> NDArrayFloat: ...

    def cons_to_prim(self, wvec: NDArrayFloat, wpvec: NDArrayFloat,
                     H: NDArrayFloat, q2: NDArrayFloat, theta: NDArrayFloat,
                     rhoT: NDArrayFloat, hp: NDArrayFloat, hT: NDArrayFloat) -> NDArrayFloat:
        """Inverse of the preconditioned primitive-to-conservative Jacobian."""
        ...

    def prim_to_cons(self, wvec: NDArrayFloat, wpvec: NDArrayFloat,
                     H: NDArrayFloat, rhop: NDArrayFloat,
                     rhoT: NDArrayFloat, hp: NDArrayFloat, hT: NDArrayFloat) -> NDArrayFloat:
        """Primitive-to-conservative Jacobian dW/dWp."""
        ...

    def matrix_times_inverse(self, wpvec: NDArrayFloat, q2: NDArrayFloat,
                             pmat: NDArrayFloat, gmat1: NDArrayFloat) -> NDArrayFloat: ...


class ResidualCorrector(Protocol):
    """Residual treatment at symmetry / no-slip and periodic boundaries."""

    def zero_residuals(self, flow: FlowField) -> None: ...

    def periodic(self, var: NDArrayFloat) -> None:
        """Sum var over periodic node pairs and copy the sum to both."""
        ...


class BoundaryConditions(Protocol):
    """Boundary state enforcement after the update."""

    def enforce(self, flow: FlowField, work: NDArrayFloat) -> None: ...


class ResidualSmoother(Protocol):
    """Implicit residual smoothing of flow.rhs."""

    def smooth(self, flow: FlowField, iwork: np.ndarray,
               rhsold: NDArrayFloat, rhsit: NDArrayFloat) -> None: ...


@dataclass(frozen=True)
class Collaborators:
    """Kernels used by RungeKuttaSolver. ``smoother`` may be None when epsirs == 0."""
    time_step: TimeStepEstimator
    scheme: SpatialScheme
    gas: GasModel
    corrector: ResidualCorrector
    bcs: BoundaryConditions
    smoother: Optional[ResidualSmoother] = None
