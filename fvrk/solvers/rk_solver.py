"""
Explicit multistage (Runge-Kutta) pseudo-time step for the Euler and
Navier-Stokes equations on node-based meshes.

One step:
    W^(0) = W^n,  D^(0) = 0,  Δt from the time-step estimator
    for k = 1..m:
        D^(k) = β_k D(W^(k-1)) + (1-β_k) D^(k-1)    (stages with ldiss)
        R^(k) = P Γ^-1 [C(W^(k-1)) - D^(k)]           (preconditioned)
        R̄^(k) = IRS(α_k CFL Δt/Ω · R^(k))
        W^(k) = W^(0) - R̄^(k)
    W^(n+1) = W^(m)

Each stage applies its residual transformations in a fixed order: the
preconditioning acts on the raw flux balance, boundary corrections follow,
scaling by the local time step comes next and smoothing last (followed by
a second boundary correction).

Reference: Blazek, "Computational Fluid Dynamics", Chapter 6 and 9.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional

import numpy as np
from loguru import logger

from ..constants import NDV_VISCOUS
from ..exceptions import ConfigurationError
from ..numerics.preconditioning import apply_preconditioning
from ..numerics.workspace import Workspace, allocate_work
from .collaborators import Collaborators
from .flow_field import FlowField
from .stages import StageTable


class EquationSet(Enum):
    """Governing equations."""
    EULER = "E"
    NAVIER_STOKES = "N"


class ReconstructionOrder(IntEnum):
    """Spatial order of the upwind scheme."""
    FIRST = 1
    SECOND = 2


@dataclass(frozen=True)
class SolverConfig:
    """Immutable configuration of the pseudo-time step."""

    stages: StageTable
    equations: EquationSet = EquationSet.EULER
    order: ReconstructionOrder = ReconstructionOrder.SECOND
    precondition: bool = False
    cfl: float = 1.0
    epsirs: float = 0.0          # Implicit residual smoothing coefficient (0 = off)

    def __post_init__(self):
        if self.cfl <= 0.0:
            raise ConfigurationError(f"CFL number must be positive, got {self.cfl}")
        if self.epsirs < 0.0:
            raise ConfigurationError(f"epsirs must be >= 0, got {self.epsirs}")

    @property
    def viscous(self) -> bool:
        return self.equations is EquationSet.NAVIER_STOKES

    @property
    def second_order(self) -> bool:
        return self.order >= ReconstructionOrder.SECOND

    @property
    def smoothing(self) -> bool:
        return self.epsirs > 0.0


class RungeKuttaSolver:
    """
    Advances a FlowField by explicit multistage pseudo-time steps.

    Parameters
    ----------
    flow : FlowField
        State to advance (mutated in place).
    config : SolverConfig
        Stage table and scheme switches.
    collaborators : Collaborators
        Kernels the step sequences.
    """

    def __init__(self, flow: FlowField, config: SolverConfig,
                 collaborators: Collaborators) -> None:
        if config.smoothing and collaborators.smoother is None:
            raise ConfigurationError("epsirs > 0 requires a residual smoother")
        if config.viscous and flow.dv.shape[0] < NDV_VISCOUS:
            raise ConfigurationError(
                f"Navier-Stokes needs {NDV_VISCOUS} dependent variables, flow has {flow.dv.shape[0]}"
            )

        self.flow = flow
        self.config = config
        self.collab = collaborators

        self.iteration = 0
        self.residual_history: List[float] = []
        self.converged = False

        logger.info("Runge-Kutta solver initialized")
        logger.info(f"  Nodes: {flow.nnodes} ({flow.nndint} active)")
        logger.info(f"  Equations: {config.equations.name}, order: {int(config.order)}")
        logger.info(f"  Stages: {config.stages.nrk}, CFL: {config.cfl}")
        logger.info(f"  Preconditioning: {config.precondition}, IRS epsilon: {config.epsirs}")

    # ------------------------------------------------------------------
    # Step orchestration
    # ------------------------------------------------------------------

    def run_step(self, iwork: np.ndarray, work: np.ndarray) -> bool:
        """
        Perform one full multistage step.

        Parameters
        ----------
        iwork : ndarray of int
            Integer scratch (used by the residual smoother).
        work : ndarray of float
            Real scratch, at least 2 * 4 * nnodes long.

        Returns
        -------
        bool
            True once the last stage's boundary conditions are enforced.

        Raises
        ------
        InsufficientWorkspaceError
            ``work`` is too small; raised before the state is touched.
        """
        flow = self.flow
        workspace = Workspace(work, flow.nnodes)
        workspace.check()

        flow.snapshot()
        flow.diss[:] = 0.0

        self.collab.time_step.time_step(flow)

        for irk in range(self.config.stages.nrk):
            self._run_stage(irk, workspace, iwork, work)

        return True

    def _run_stage(self, irk: int, workspace: Workspace,
                   iwork: np.ndarray, work: np.ndarray) -> None:
        stages = self.config.stages
        ldiss = stages.ldiss[irk]
        beta = stages.betrk[irk]
        logger.debug(f"Stage {irk + 1}/{stages.nrk}: ark={stages.ark[irk]}, "
                     f"betrk={beta}, ldiss={ldiss}")

        self._blend_dissipation(irk)
        if ldiss:
            if self.config.viscous:
                self._viscous_flux(beta)
            self._upwind_dissipation(beta, workspace)
        self._convective_flux()

        if self.config.precondition:
            apply_preconditioning(self.flow, self.collab.gas)

        self._correct_residual()
        self._scale_residual(stages.ark[irk])

        if self.config.smoothing:
            self._smooth_residual(workspace, iwork)

        self._update_solution(work)

    # ------------------------------------------------------------------
    # Dissipation and fluxes
    # ------------------------------------------------------------------

    def _blend_dissipation(self, irk: int) -> None:
        """Keep (1 - β) of the previous dissipation before it is re-evaluated."""
        stages = self.config.stages
        if irk > 0 and stages.ldiss[irk]:
            self.flow.diss *= 1.0 - stages.betrk[irk]

    def _viscous_flux(self, beta: float) -> None:
        scheme = self.collab.scheme
        scheme.gradients_viscous(self.flow)
        scheme.flux_viscous(self.flow, beta)

    def _upwind_dissipation(self, beta: float, workspace: Workspace) -> None:
        scheme = self.collab.scheme
        flow = self.flow
        precond = self.config.precondition

        if not self.config.second_order:
            if precond:
                scheme.dissipation_roe1_precond(flow, beta)
            else:
                scheme.dissipation_roe1(flow, beta)
            return

        with workspace.views() as (umin, umax):
            if not self.config.viscous:
                scheme.gradients(flow)
            scheme.limiter_init(flow, umin, umax)
            scheme.limiter(flow, umin, umax)
            if precond:
                scheme.dissipation_roe2_precond(flow, beta)
            else:
                scheme.dissipation_roe2(flow, beta)

    def _convective_flux(self) -> None:
        if self.config.second_order:
            self.collab.scheme.flux_roe2(self.flow)
        else:
            self.collab.scheme.flux_roe1(self.flow)

    # ------------------------------------------------------------------
    # Residual treatment
    # ------------------------------------------------------------------

    def _correct_residual(self) -> None:
        corrector = self.collab.corrector
        corrector.zero_residuals(self.flow)
        corrector.periodic(self.flow.rhs)

    def _scale_residual(self, ark: float) -> None:
        """rhs_i *= ark * CFL * Δt_i / Ω_i over the active nodes."""
        flow = self.flow
        n = flow.nndint
        fac = ark * self.config.cfl
        adtv = fac * flow.tstep[:n] / flow.vol[:n]
        flow.rhs *= adtv[np.newaxis, :]

    def _smooth_residual(self, workspace: Workspace, iwork: np.ndarray) -> None:
        with workspace.views() as (rhsold, rhsit):
            self.collab.smoother.smooth(self.flow, iwork, rhsold, rhsit)
        # Smoothing spreads residual back onto constrained boundary nodes
        self.collab.corrector.zero_residuals(self.flow)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def _update_solution(self, work: np.ndarray) -> None:
        flow = self.flow
        n = flow.nndint
        flow.cv[:, :n] = flow.cvold[:, :n] - flow.rhs

        self.collab.gas.dependent_vars_all(flow)
        self.collab.bcs.enforce(flow, work)

    # ------------------------------------------------------------------
    # Convergence monitoring
    # ------------------------------------------------------------------

    def density_change_rms(self) -> float:
        """RMS of the density change of the last step over the active nodes."""
        n = self.flow.nndint
        drho = self.flow.cv[0, :n] - self.flow.cvold[0, :n]
        return float(np.sqrt(np.mean(drho * drho)))

    def iterate(self, max_iter: int, tol: float = 1e-6, print_freq: int = 10,
                iwork: Optional[np.ndarray] = None,
                work: Optional[np.ndarray] = None) -> bool:
        """
        Run steps until the density change drops by ``tol`` relative to the
        first step or ``max_iter`` steps are done.

        Returns
        -------
        bool
            True if converged.
        """
        if iwork is None or work is None:
            iwork_alloc, work_alloc = allocate_work(self.flow.nnodes)
            iwork = iwork_alloc if iwork is None else iwork
            work = work_alloc if work is None else work

        drho1: Optional[float] = None
        for _ in range(max_iter):
            self.run_step(iwork, work)
            self.iteration += 1

            drho = self.density_change_rms()
            self.residual_history.append(drho)
            if drho1 is None:
                drho1 = drho if drho > 0.0 else 1.0

            rel = drho / drho1
            if self.iteration % print_freq == 0:
                logger.info(f"Iter {self.iteration:6d}: drho = {drho:.4e} (rel {rel:.4e})")

            if rel <= tol:
                self.converged = True
                logger.info(f"Converged after {self.iteration} iterations (rel drho = {rel:.4e})")
                return True

            if not np.isfinite(drho):
                logger.error(f"Divergence detected at iteration {self.iteration}")
                return False

        logger.warning(f"Not converged after {max_iter} iterations")
        return False
