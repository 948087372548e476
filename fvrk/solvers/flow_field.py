"""
Node-indexed flow field arrays shared by the pipeline and its collaborators.

Layout is variable-major: cv[k, i] is conservative variable k at node i.
"""

import numpy as np
import numpy.typing as npt
from dataclasses import dataclass

from ..constants import NCONV, get_ndv
from ..grid.mesh import MeshData

NDArrayFloat = npt.NDArray[np.floating]


@dataclass
class FlowField:
    """
    Mutable per-node state of one simulation.

    Attributes
    ----------
    mesh : MeshData
        Mesh the arrays are indexed over.
    cv : ndarray, shape (4, nnodes)
        Conservative variables [rho, rho*u, rho*v, rho*E].
    cvold : ndarray, shape (4, nnodes)
        Conservative variables at the start of the current step.
    dv : ndarray, shape (ndv, nnodes)
        Dependent variables [p, T, c, gamma, cp(, mu, kappa)].
    rhs : ndarray, shape (4, nndint)
        Residual of the active nodes.
    diss : ndarray, shape (4, nnodes)
        Artificial dissipation accumulator.
    tstep : ndarray, shape (nnodes,)
        Local time step (without the CFL number).
    """
    mesh: MeshData
    cv: NDArrayFloat
    cvold: NDArrayFloat
    dv: NDArrayFloat
    rhs: NDArrayFloat
    diss: NDArrayFloat
    tstep: NDArrayFloat

    @classmethod
    def allocate(cls, mesh: MeshData, viscous: bool = False) -> 'FlowField':
        """Allocate zeroed arrays for ``mesh``."""
        nnodes = mesh.nnodes
        return cls(
            mesh=mesh,
            cv=np.zeros((NCONV, nnodes)),
            cvold=np.zeros((NCONV, nnodes)),
            dv=np.zeros((get_ndv(viscous), nnodes)),
            rhs=np.zeros((NCONV, mesh.nndint)),
            diss=np.zeros((NCONV, nnodes)),
            tstep=np.zeros(nnodes),
        )

    @property
    def nnodes(self) -> int:
        return self.mesh.nnodes

    @property
    def nndint(self) -> int:
        return self.mesh.nndint

    @property
    def vol(self) -> NDArrayFloat:
        return self.mesh.vol

    def snapshot(self) -> None:
        """Copy cv into the (separately allocated) cvold array."""
        if np.shares_memory(self.cv, self.cvold):
            self.cvold = np.empty_like(self.cv)
        np.copyto(self.cvold, self.cv)


def uniform_flow(mesh: MeshData, rho: float, u: float, v: float, p: float,
                 gamma: float = 1.4, viscous: bool = False) -> FlowField:
    """
    Allocate a flow field initialised with a uniform state.

    Dependent variables are left at zero; the gas model fills them.
    """
    flow = FlowField.allocate(mesh, viscous=viscous)
    flow.cv[0, :] = rho
    flow.cv[1, :] = rho * u
    flow.cv[2, :] = rho * v
    flow.cv[3, :] = p / (gamma - 1.0) + 0.5 * rho * (u * u + v * v)
    return flow
