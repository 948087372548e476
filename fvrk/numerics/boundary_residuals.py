"""
Residual corrections at symmetry, no-slip and periodic boundaries.

Symmetry line y = const : y-momentum residual vanishes.
Symmetry line x = const : x-momentum residual vanishes.
No-slip wall (viscous)  : both momentum residuals vanish (velocity fixed).
Periodic node pair (i,j): both nodes receive the summed residual, since
                          each holds only its part of the shared control volume.
"""

import numpy as np
import numpy.typing as npt
from numba import njit

from ..constants import RHOU_IDX, RHOV_IDX
from ..grid.mesh import MeshData

NDArrayFloat = npt.NDArray[np.floating]


@njit(cache=True)
def _zero_component(rhs: np.ndarray, nodes: np.ndarray, comp: int) -> None:
    for n in range(nodes.shape[0]):
        rhs[comp, nodes[n]] = 0.0


@njit(cache=True)
def _combine_periodic(var: np.ndarray, pairs: np.ndarray) -> None:
    nvar = var.shape[0]
    for n in range(pairs.shape[0]):
        i = pairs[n, 0]
        j = pairs[n, 1]
        for k in range(nvar):
            var[k, i] = var[k, i] + var[k, j]
            var[k, j] = var[k, i]


class BoundaryResidualCorrector:
    """
    Residual corrector driven by the boundary node sets of a MeshData.

    Parameters
    ----------
    mesh : MeshData
        Supplies symmetry, wall and periodic node sets.
    viscous : bool
        Zero the momentum residual at no-slip walls (Navier-Stokes only;
        Euler walls are slip walls handled by the flux).
    """

    def __init__(self, mesh: MeshData, viscous: bool = False) -> None:
        self.symmetry_x_nodes = np.ascontiguousarray(mesh.symmetry_x_nodes, dtype=np.int64)
        self.symmetry_y_nodes = np.ascontiguousarray(mesh.symmetry_y_nodes, dtype=np.int64)
        self.wall_nodes = np.ascontiguousarray(mesh.wall_nodes, dtype=np.int64)
        self.periodic_pairs = np.ascontiguousarray(mesh.periodic_pairs, dtype=np.int64).reshape(-1, 2)
        self.viscous = viscous

    def zero_residuals(self, flow) -> None:
        rhs = flow.rhs
        _zero_component(rhs, self.symmetry_x_nodes, RHOV_IDX)
        _zero_component(rhs, self.symmetry_y_nodes, RHOU_IDX)
        if self.viscous:
            _zero_component(rhs, self.wall_nodes, RHOU_IDX)
            _zero_component(rhs, self.wall_nodes, RHOV_IDX)

    def periodic(self, var: NDArrayFloat) -> None:
        if self.periodic_pairs.shape[0] > 0:
            _combine_periodic(var, self.periodic_pairs)
