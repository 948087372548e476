"""
Node-based (median-dual) mesh description for the finite-volume solver.

Unknowns live at the mesh nodes. Each node owns a control volume of the
dual grid, and each edge (i, j) of the primal grid carries the dual-face
normal S_ij, scaled by the face length and pointing from node i to node j.

Node numbering:
    - Nodes 0 .. nndint-1 are physical ("active") nodes updated in time.
    - Nodes nndint .. nnodes-1 are dummy nodes owned by the boundary
      conditions; the time stepping never updates them.
"""

import numpy as np
import numpy.typing as npt
from dataclasses import dataclass, field
from typing import Tuple

NDArrayFloat = npt.NDArray[np.floating]
NDArrayInt = npt.NDArray[np.integer]


def _empty_pairs() -> np.ndarray:
    return np.zeros((0, 2), dtype=np.int64)


def _empty_nodes() -> np.ndarray:
    return np.zeros(0, dtype=np.int64)


@dataclass(frozen=True)
class MeshData:
    """
    Median-dual mesh data.

    Attributes
    ----------
    nnodes : int
        Total number of nodes (physical + dummy).
    nndint : int
        Number of physical nodes; they are numbered first.
    vol : ndarray, shape (nnodes,)
        Control volumes (areas in 2D).
    edges : ndarray, shape (nedges, 2)
        Node pairs (i, j) of every edge.
    sij : ndarray, shape (nedges, 2)
        Dual-face normal of every edge, scaled by face length, from i to j.
    periodic_pairs : ndarray, shape (npairs, 2)
        Physical nodes that coincide across a periodic boundary.
    symmetry_x_nodes : ndarray
        Nodes on a symmetry line y = const (y-momentum residual vanishes).
    symmetry_y_nodes : ndarray
        Nodes on a symmetry line x = const (x-momentum residual vanishes).
    wall_nodes : ndarray
        Nodes on no-slip walls (momentum residual vanishes for viscous flow).
    """
    nnodes: int
    nndint: int
    vol: NDArrayFloat
    edges: NDArrayInt
    sij: NDArrayFloat
    periodic_pairs: NDArrayInt = field(default_factory=_empty_pairs)
    symmetry_x_nodes: NDArrayInt = field(default_factory=_empty_nodes)
    symmetry_y_nodes: NDArrayInt = field(default_factory=_empty_nodes)
    wall_nodes: NDArrayInt = field(default_factory=_empty_nodes)

    def __post_init__(self):
        if not 0 < self.nndint <= self.nnodes:
            raise ValueError(f"nndint must be in (0, nnodes], got {self.nndint} / {self.nnodes}")
        if self.vol.shape != (self.nnodes,):
            raise ValueError(f"vol has shape {self.vol.shape}, expected ({self.nnodes},)")
        if self.edges.ndim != 2 or self.edges.shape[1] != 2:
            raise ValueError(f"edges must have shape (nedges, 2), got {self.edges.shape}")
        if self.sij.shape != self.edges.shape:
            raise ValueError(f"sij shape {self.sij.shape} does not match edges {self.edges.shape}")
        if self.edges.size and (self.edges.min() < 0 or self.edges.max() >= self.nnodes):
            raise ValueError("edge node index out of range")
        if self.periodic_pairs.size and self.periodic_pairs.max() >= self.nndint:
            raise ValueError("periodic pairs must reference physical nodes")
        for name in ('symmetry_x_nodes', 'symmetry_y_nodes', 'wall_nodes'):
            nodes = getattr(self, name)
            if nodes.size and nodes.max() >= self.nndint:
                raise ValueError(f"{name} must reference physical nodes")

    @property
    def nedges(self) -> int:
        return self.edges.shape[0]

    @property
    def nedint(self) -> int:
        """Number of edges connecting two physical nodes."""
        return int(np.count_nonzero(self.interior_edge_mask()))

    def interior_edge_mask(self) -> np.ndarray:
        return (self.edges[:, 0] < self.nndint) & (self.edges[:, 1] < self.nndint)


def _node_index(i: int, j: int, nx: int) -> int:
    return i + j * nx


def cartesian_node_mesh(nx: int, ny: int,
                        lx: float = 1.0, ly: float = 1.0,
                        periodic_x: bool = False) -> MeshData:
    """
    Build the median-dual mesh of a uniform nx x ny node lattice on [0,lx]x[0,ly].

    Boundary nodes get half (corner: quarter) control volumes and the dual
    faces of boundary edges are halved accordingly. With ``periodic_x`` the
    nodes on x = 0 and x = lx are paired; their half volumes together form
    one full control volume.

    Parameters
    ----------
    nx, ny : int
        Number of nodes in x and y (>= 2).
    lx, ly : float
        Domain extents.
    periodic_x : bool
        Pair the left and right boundary nodes.

    Returns
    -------
    MeshData
        Mesh with nnodes = nndint = nx * ny; the bottom row is tagged as
        x-symmetry and the top row as no-slip wall.
    """
    if nx < 2 or ny < 2:
        raise ValueError(f"need at least 2 x 2 nodes, got {nx} x {ny}")

    dx = lx / (nx - 1)
    dy = ly / (ny - 1)
    nnodes = nx * ny

    fx = np.ones(nx)
    fx[[0, -1]] = 0.5
    fy = np.ones(ny)
    fy[[0, -1]] = 0.5
    vol = (dx * dy * np.outer(fy, fx)).ravel()

    edges = []
    sij = []
    for j in range(ny):
        for i in range(nx - 1):
            edges.append((_node_index(i, j, nx), _node_index(i + 1, j, nx)))
            sij.append((dy * fy[j], 0.0))
    for j in range(ny - 1):
        for i in range(nx):
            edges.append((_node_index(i, j, nx), _node_index(i, j + 1, nx)))
            sij.append((0.0, dx * fx[i]))

    periodic_pairs = _empty_pairs()
    if periodic_x:
        periodic_pairs = np.array(
            [(_node_index(0, j, nx), _node_index(nx - 1, j, nx)) for j in range(ny)],
            dtype=np.int64,
        )

    return MeshData(
        nnodes=nnodes,
        nndint=nnodes,
        vol=vol,
        edges=np.array(edges, dtype=np.int64),
        sij=np.array(sij, dtype=np.float64),
        periodic_pairs=periodic_pairs,
        symmetry_x_nodes=np.array([_node_index(i, 0, nx) for i in range(nx)], dtype=np.int64),
        wall_nodes=np.array([_node_index(i, ny - 1, nx) for i in range(nx)], dtype=np.int64),
    )


def closure_defect(mesh: MeshData) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sum of outward dual-face normals per node, (nnodes,) for x and y.

    Zero for nodes whose control volume is closed by interior edges alone;
    boundary nodes retain the (missing) boundary face.
    """
    sx = np.zeros(mesh.nnodes)
    sy = np.zeros(mesh.nnodes)
    i = mesh.edges[:, 0]
    j = mesh.edges[:, 1]
    np.add.at(sx, i, mesh.sij[:, 0])
    np.add.at(sy, i, mesh.sij[:, 1])
    np.subtract.at(sx, j, mesh.sij[:, 0])
    np.subtract.at(sy, j, mesh.sij[:, 1])
    return sx, sy
