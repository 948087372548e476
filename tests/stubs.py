"""
Recording stub collaborators for exercising the step pipeline in isolation.

Every stub appends its operation name to a shared CallLog so tests can
assert on the exact call sequence.
"""

from typing import List, Optional

import numpy as np

from fvrk.solvers.collaborators import Collaborators


class CallLog:
    """Ordered record of collaborator calls."""

    def __init__(self) -> None:
        self.calls: List[str] = []

    def __call__(self, name: str) -> None:
        self.calls.append(name)

    def count(self, name: str) -> int:
        return self.calls.count(name)

    def clear(self) -> None:
        self.calls.clear()


class StubTimeStep:
    def __init__(self, log: CallLog, value: float = 1.0) -> None:
        self.log = log
        self.value = value

    def time_step(self, flow) -> None:
        self.log("time_step")
        flow.tstep[:] = self.value


class StubScheme:
    """
    Fluxes produce a fixed residual; dissipation adds ``beta * dissipation``.

    ``observed_diss`` holds a copy of flow.diss as seen on entry to every
    dissipation call.
    """

    def __init__(self, log: CallLog, residual=0.0, dissipation: float = 1.0,
                 fail_on: Optional[str] = None) -> None:
        self.log = log
        self.residual = np.asarray(residual, dtype=float)
        self.dissipation = dissipation
        self.fail_on = fail_on
        self.observed_diss: List[np.ndarray] = []
        self.limiter_saw_nan: List[bool] = []

    def _record(self, name: str) -> None:
        self.log(name)
        if name == self.fail_on:
            raise RuntimeError(f"{name} failed")

    def gradients(self, flow) -> None:
        self._record("gradients")

    def gradients_viscous(self, flow) -> None:
        self._record("gradients_viscous")

    def flux_viscous(self, flow, beta) -> None:
        self._record("flux_viscous")

    def limiter_init(self, flow, umin, umax) -> None:
        self._record("limiter_init")
        umin[:] = -1.0
        umax[:] = 1.0

    def limiter(self, flow, umin, umax) -> None:
        self._record("limiter")
        self.limiter_saw_nan.append(bool(np.isnan(umin).any() or np.isnan(umax).any()))

    def _dissipate(self, name, flow, beta) -> None:
        self._record(name)
        self.observed_diss.append(flow.diss.copy())
        flow.diss += beta * self.dissipation

    def dissipation_roe1(self, flow, beta) -> None:
        self._dissipate("dissipation_roe1", flow, beta)

    def dissipation_roe1_precond(self, flow, beta) -> None:
        self._dissipate("dissipation_roe1_precond", flow, beta)

    def dissipation_roe2(self, flow, beta) -> None:
        self._dissipate("dissipation_roe2", flow, beta)

    def dissipation_roe2_precond(self, flow, beta) -> None:
        self._dissipate("dissipation_roe2_precond", flow, beta)

    def _flux(self, name, flow) -> None:
        self._record(name)
        flow.rhs[:] = np.broadcast_to(
            self.residual.reshape(-1, 1) if self.residual.ndim == 1 else self.residual,
            flow.rhs.shape,
        )

    def flux_roe1(self, flow) -> None:
        self._flux("flux_roe1", flow)

    def flux_roe2(self, flow) -> None:
        self._flux("flux_roe2", flow)


class RelaxingScheme(StubScheme):
    """Residual proportional to the distance from a target state."""

    def __init__(self, log: CallLog, target: np.ndarray, rate: float = 0.5) -> None:
        super().__init__(log)
        self.target = target
        self.rate = rate

    def _flux(self, name, flow) -> None:
        self._record(name)
        n = flow.nndint
        flow.rhs[:] = self.rate * (flow.cv[:, :n] - self.target[:, :n])


class StubGas:
    """
    Gas model whose preconditioning matrix is a fixed 4x4 matrix.

    The Jacobian builders return identities; matrix_times_inverse returns
    ``dmat`` for every node.
    """

    def __init__(self, log: CallLog, dmat: Optional[np.ndarray] = None) -> None:
        self.log = log
        self.dmat = np.eye(4) if dmat is None else np.asarray(dmat, dtype=float)

    def dependent_vars_all(self, flow) -> None:
        self.log("dependent_vars_all")

    def theta(self, gamma, c, q2):
        self.log("theta")
        return np.ones_like(q2)

    def cons_to_prim(self, wvec, wpvec, H, q2, theta, rhoT, hp, hT):
        self.log("cons_to_prim")
        return np.broadcast_to(np.eye(4), (q2.shape[0], 4, 4)).copy()

    def prim_to_cons(self, wvec, wpvec, H, rhop, rhoT, hp, hT):
        self.log("prim_to_cons")
        return np.broadcast_to(np.eye(4), (rhop.shape[0], 4, 4)).copy()

    def matrix_times_inverse(self, wpvec, q2, pmat, gmat1):
        self.log("matrix_times_inverse")
        return np.broadcast_to(self.dmat, pmat.shape).copy()


class StubCorrector:
    """Records the residual it sees on every zero_residuals call."""

    def __init__(self, log: CallLog) -> None:
        self.log = log
        self.seen_rhs: List[np.ndarray] = []

    def zero_residuals(self, flow) -> None:
        self.log("zero_residuals")
        self.seen_rhs.append(flow.rhs.copy())

    def periodic(self, var) -> None:
        self.log("periodic")


class StubBoundaryConditions:
    def __init__(self, log: CallLog) -> None:
        self.log = log

    def enforce(self, flow, work) -> None:
        self.log("enforce")


class StubSmoother:
    """Halves the residual; records whether the scratch windows were poisoned."""

    def __init__(self, log: CallLog) -> None:
        self.log = log
        self.scratch_was_nan: List[bool] = []

    def smooth(self, flow, iwork, rhsold, rhsit) -> None:
        self.log("smooth")
        self.scratch_was_nan.append(bool(np.isnan(rhsold).all() and np.isnan(rhsit).all()))
        flow.rhs *= 0.5


def make_collaborators(log: CallLog, scheme=None, gas=None, smoother=None,
                       tstep: float = 1.0, corrector=None) -> Collaborators:
    """Bundle recording stubs; any of them can be overridden."""
    return Collaborators(
        time_step=StubTimeStep(log, tstep),
        scheme=scheme if scheme is not None else StubScheme(log),
        gas=gas if gas is not None else StubGas(log),
        corrector=corrector if corrector is not None else StubCorrector(log),
        bcs=StubBoundaryConditions(log),
        smoother=smoother,
    )
