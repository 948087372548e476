"""
Shared pytest fixtures for the test suite.

Recording stub collaborators live in tests/stubs.py; this directory is put
on sys.path so test modules in subdirectories can import them.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent))

from fvrk.grid.mesh import MeshData, cartesian_node_mesh
from fvrk.physics.perfect_gas import PerfectGas
from fvrk.solvers.flow_field import FlowField, uniform_flow

from stubs import CallLog


# =============================================================================
# Meshes
# =============================================================================

@pytest.fixture
def four_node_mesh():
    """
    Four nodes in a line, the last one a dummy (inactive) node.

    Unit volumes; edges 0-1, 1-2, 2-3.
    """
    return MeshData(
        nnodes=4,
        nndint=3,
        vol=np.ones(4),
        edges=np.array([[0, 1], [1, 2], [2, 3]], dtype=np.int64),
        sij=np.array([[1.0, 0.0], [1.0, 0.0], [1.0, 0.0]]),
    )


@pytest.fixture
def small_cartesian_mesh():
    """5 x 4 node median-dual mesh on the unit square."""
    return cartesian_node_mesh(5, 4)


# =============================================================================
# Flow fields
# =============================================================================

@pytest.fixture
def gas():
    return PerfectGas(gamma=1.4, cp=1004.5, precoeff=1.0, q2_inf=100.0)


@pytest.fixture
def four_node_flow(four_node_mesh):
    """Distinct, non-trivial conservative state on every node."""
    flow = FlowField.allocate(four_node_mesh)
    flow.cv[:] = np.array([
        [1.0, 1.1, 1.2, 1.3],
        [0.1, 0.2, 0.3, 0.4],
        [0.0, -0.1, -0.2, -0.3],
        [2.5, 2.6, 2.7, 2.8],
    ])
    return flow


@pytest.fixture
def air_flow(small_cartesian_mesh, gas):
    """Uniform low-speed air with consistent dependent variables."""
    flow = uniform_flow(small_cartesian_mesh, rho=1.2, u=10.0, v=2.0, p=1.0e5, gamma=gas.gamma)
    gas.dependent_vars_all(flow)
    return flow


@pytest.fixture
def call_log():
    return CallLog()
