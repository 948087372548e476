"""
Implicit Residual Smoothing (IRS) on node-based unstructured meshes.

Smoothing equation for node i with neighbours j (edges i-j):

    (1 + eps * n_i) * R̄_i - eps * Σ_j R̄_j = R_i

solved approximately by Jacobi iteration:

    R̄_i^(m+1) = (R_i + eps * Σ_j R̄_j^(m)) / (1 + eps * n_i)

Reference: Jameson, Schmidt, Turkel (1981). AIAA paper 81-1259.
           Blazek, "Computational Fluid Dynamics", Section 9.4.
"""

from typing import Callable, Optional

import numpy as np
import numpy.typing as npt
from numba import njit

from ..exceptions import InsufficientWorkspaceError
from ..grid.mesh import MeshData

NDArrayFloat = npt.NDArray[np.floating]


@njit(cache=True)
def _count_neighbours(edges: np.ndarray, pairs: np.ndarray, ncontr: np.ndarray) -> None:
    """Number of edge neighbours per node; periodic partners share their count."""
    ncontr[:] = 0
    for e in range(edges.shape[0]):
        ncontr[edges[e, 0]] += 1
        ncontr[edges[e, 1]] += 1
    for n in range(pairs.shape[0]):
        i = pairs[n, 0]
        j = pairs[n, 1]
        ncontr[i] = ncontr[i] + ncontr[j]
        ncontr[j] = ncontr[i]


@njit(cache=True)
def _sum_neighbours(edges: np.ndarray, rhs: np.ndarray, rhsit: np.ndarray) -> None:
    """rhsit_i = Σ_j rhs_j over the edges (i, j)."""
    nvar = rhs.shape[0]
    rhsit[:, :] = 0.0
    for e in range(edges.shape[0]):
        i = edges[e, 0]
        j = edges[e, 1]
        for k in range(nvar):
            rhsit[k, i] += rhs[k, j]
            rhsit[k, j] += rhs[k, i]


@njit(cache=True)
def _jacobi_update(rhs: np.ndarray, rhsold: np.ndarray, rhsit: np.ndarray,
                   ncontr: np.ndarray, epsilon: float) -> None:
    nvar = rhs.shape[0]
    for i in range(rhs.shape[1]):
        den = 1.0 / (1.0 + ncontr[i] * epsilon)
        for k in range(nvar):
            rhs[k, i] = (rhsit[k, i] * epsilon + rhsold[k, i]) * den


class ImplicitResidualSmoother:
    """
    Jacobi-iterated implicit residual smoothing over the interior edges.

    Parameters
    ----------
    mesh : MeshData
        Edge connectivity and periodic node pairs.
    epsilon : float
        Smoothing coefficient (0 = none, ~0.5-0.8 typical for CFL 2-3x).
    n_iter : int
        Number of Jacobi sweeps.
    periodic : callable, optional
        Combines the neighbour sums across periodic pairs (usually
        ResidualCorrector.periodic).
    """

    def __init__(self, mesh: MeshData, epsilon: float, n_iter: int = 2,
                 periodic: Optional[Callable[[NDArrayFloat], None]] = None) -> None:
        self.nndint = mesh.nndint
        self.edges = np.ascontiguousarray(mesh.edges[mesh.interior_edge_mask()], dtype=np.int64)
        self.pairs = np.ascontiguousarray(mesh.periodic_pairs, dtype=np.int64).reshape(-1, 2)
        self.epsilon = epsilon
        self.n_iter = n_iter
        self.periodic = periodic

    def smooth(self, flow, iwork: np.ndarray,
               rhsold: NDArrayFloat, rhsit: NDArrayFloat) -> None:
        """
        Smooth flow.rhs in place.

        iwork receives the neighbour counts; rhsold and rhsit are scratch
        windows of shape (4, nnodes) that are fully written before use.
        """
        n = self.nndint
        if iwork.shape[0] < n:
            raise InsufficientWorkspaceError("integer", n, iwork.shape[0])
        if self.epsilon <= 0.0 or self.n_iter <= 0:
            return

        ncontr = iwork[:n]
        _count_neighbours(self.edges, self.pairs, ncontr)

        rhs = flow.rhs
        old = rhsold[:, :n]
        it = rhsit[:, :n]
        old[:, :] = rhs

        for _ in range(self.n_iter):
            _sum_neighbours(self.edges, rhs, it)
            if self.periodic is not None:
                self.periodic(it)
            _jacobi_update(rhs, old, it, ncontr, self.epsilon)
