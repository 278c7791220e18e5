"""Geometry engine interface and the in-process numpy implementation."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from ..errors import AlreadyFinalizedError, OutOfRangeError


@dataclass(frozen=True, eq=False)
class CollisionEntity:
    """
    Immutable, collision-ready solid produced by finalizing a mesh.

    Attributes:
        name: Name of the mesh it was built from
        vertices: (N, 3) read-only float array in the local frame
        triangles: (M, 3) read-only int array of vertex ranks
    """

    name: str
    vertices: np.ndarray
    triangles: np.ndarray

    def __post_init__(self):
        vertices = np.array(self.vertices, dtype=float).reshape(-1, 3)
        triangles = np.array(self.triangles, dtype=np.int64).reshape(-1, 3)
        vertices.setflags(write=False)
        triangles.setflags(write=False)
        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "triangles", triangles)

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    @property
    def num_triangles(self) -> int:
        return len(self.triangles)

    @property
    def bounds_min(self) -> np.ndarray:
        if self.num_vertices == 0:
            return np.zeros(3)
        return self.vertices.min(axis=0)

    @property
    def bounds_max(self) -> np.ndarray:
        if self.num_vertices == 0:
            return np.zeros(3)
        return self.vertices.max(axis=0)

    @property
    def local_center(self) -> np.ndarray:
        """Center of the local axis-aligned bounding box."""
        return (self.bounds_min + self.bounds_max) / 2

    @property
    def bounding_radius(self) -> float:
        """Radius of a sphere around local_center enclosing all vertices."""
        if self.num_vertices == 0:
            return 0.0
        return float(np.max(np.linalg.norm(self.vertices - self.local_center, axis=1)))

    def triangle_vertices(self) -> np.ndarray:
        """(M, 3, 3) array of triangle corner positions."""
        return self.vertices[self.triangles]

    def __repr__(self) -> str:
        return (
            f"CollisionEntity(name={self.name!r}, vertices={self.num_vertices}, "
            f"triangles={self.num_triangles})"
        )


class MeshHandle(ABC):
    """Engine-side storage of one growing mesh."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def append_vertex(self, x: float, y: float, z: float) -> int:
        """Append a vertex and return its rank."""
        pass

    @abstractmethod
    def append_triangle(self, i: int, j: int, k: int) -> int:
        """Append a triangle and return its rank."""
        pass

    @abstractmethod
    def finalize(self) -> CollisionEntity:
        """Build the collision entity. May only succeed once."""
        pass


class GeometryEngine(ABC):
    """Factory for mesh handles."""

    @abstractmethod
    def create_mesh(self, name: str) -> MeshHandle:
        pass


class NumpyMeshHandle(MeshHandle):
    """
    Mesh handle storing vertices and triangles in Python lists.

    Lists are converted to numpy arrays once, at finalization, where every
    triangle index is checked against the vertex count.
    """

    def __init__(self, name: str):
        super().__init__(name)
        self._vertices: List[Tuple[float, float, float]] = []
        self._triangles: List[Tuple[int, int, int]] = []
        self._entity = None

    def append_vertex(self, x: float, y: float, z: float) -> int:
        self._check_open("append_vertex")
        self._vertices.append((float(x), float(y), float(z)))
        return len(self._vertices) - 1

    def append_triangle(self, i: int, j: int, k: int) -> int:
        self._check_open("append_triangle")
        self._triangles.append((int(i), int(j), int(k)))
        return len(self._triangles) - 1

    def finalize(self) -> CollisionEntity:
        self._check_open("finalize")

        n_vertices = len(self._vertices)
        for rank, triangle in enumerate(self._triangles):
            for index in triangle:
                if not 0 <= index < n_vertices:
                    raise OutOfRangeError(
                        f"triangle {rank} {triangle} references vertex {index}, "
                        f"mesh has {n_vertices} vertices",
                        name=self.name,
                        operation="finalize",
                    )

        self._entity = CollisionEntity(
            name=self.name,
            vertices=np.array(self._vertices, dtype=float).reshape(-1, 3),
            triangles=np.array(self._triangles, dtype=np.int64).reshape(-1, 3),
        )
        return self._entity

    def _check_open(self, operation: str):
        if self._entity is not None:
            raise AlreadyFinalizedError(
                f"mesh {self.name!r} already has a collision entity",
                name=self.name,
                operation=operation,
            )


class NumpyGeometryEngine(GeometryEngine):
    """Default in-process geometry engine."""

    def create_mesh(self, name: str) -> MeshHandle:
        return NumpyMeshHandle(name)


def box_mesh(
    center: np.ndarray,
    half_extents: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Vertices and outward-facing triangles of an axis-aligned box.

    Args:
        center: (x, y, z)
        half_extents: (hx, hy, hz), all positive

    Returns:
        Tuple of (8x3 vertices, 12x3 triangles)
    """
    center = np.asarray(center, dtype=float).flatten()
    half_extents = np.asarray(half_extents, dtype=float).flatten()
    assert center.shape == (3,), "Center must be 3D"
    assert half_extents.shape == (3,), "Half-extents must be 3D"
    assert np.all(half_extents > 0), "Half-extents must be positive"

    hx, hy, hz = half_extents
    # Bottom face then top face, counter-clockwise seen from above
    corners = np.array([
        [-hx, -hy, -hz],
        [hx, -hy, -hz],
        [hx, hy, -hz],
        [-hx, hy, -hz],
        [-hx, -hy, hz],
        [hx, -hy, hz],
        [hx, hy, hz],
        [-hx, hy, hz],
    ])
    vertices = center + corners

    triangles = []

    def add_quad(i1, i2, i3, i4):
        triangles.append((i1, i2, i3))
        triangles.append((i1, i3, i4))

    add_quad(3, 2, 1, 0)  # bottom
    add_quad(4, 5, 6, 7)  # top
    add_quad(0, 1, 5, 4)  # y-
    add_quad(1, 2, 6, 5)  # x+
    add_quad(2, 3, 7, 6)  # y+
    add_quad(3, 0, 4, 7)  # x-

    return vertices, np.array(triangles, dtype=np.int64)
