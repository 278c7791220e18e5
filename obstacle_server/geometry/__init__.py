"""Transforms, mesh construction and the geometry engine."""

from .transform import Transform, euler_to_rotation_matrix
from .engine import (
    CollisionEntity,
    GeometryEngine,
    MeshHandle,
    NumpyGeometryEngine,
    box_mesh,
)
from .mesh import MeshBuilder, OpenMesh, FinalizedMesh

__all__ = [
    "Transform",
    "euler_to_rotation_matrix",
    "CollisionEntity",
    "GeometryEngine",
    "MeshHandle",
    "NumpyGeometryEngine",
    "box_mesh",
    "MeshBuilder",
    "OpenMesh",
    "FinalizedMesh",
]
