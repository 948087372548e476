"""
Mesh description for the node-based finite-volume solver.
"""

from .mesh import MeshData, cartesian_node_mesh, closure_defect

__all__ = ['MeshData', 'cartesian_node_mesh', 'closure_defect']
