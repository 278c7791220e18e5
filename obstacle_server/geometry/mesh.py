"""Incrementally built triangle meshes with a one-way Open -> Finalized state."""

import logging
import threading
from dataclasses import dataclass
from typing import Union

from ..errors import AlreadyFinalizedError, NotFinalizedError, OutOfRangeError
from .engine import CollisionEntity, GeometryEngine, MeshHandle

logger = logging.getLogger(__name__)


@dataclass
class OpenMesh:
    """Mesh still accepting vertices and triangles."""

    handle: MeshHandle
    vertex_count: int = 0
    triangle_count: int = 0


@dataclass(frozen=True)
class FinalizedMesh:
    """Mesh whose topology has been frozen into a collision entity."""

    entity: CollisionEntity


MeshState = Union[OpenMesh, FinalizedMesh]


class MeshBuilder:
    """
    Named, append-only triangle mesh.

    Vertices receive ranks in insertion order and are never removed or
    reordered. Triangles may only reference ranks that already exist. The
    builder moves from OpenMesh to FinalizedMesh exactly once; the
    collision entity is built a single time and shared afterwards.

    A per-builder lock serialises appends and the state flip, so two
    callers feeding the same mesh cannot interleave a rank.
    """

    def __init__(
        self,
        name: str,
        engine: GeometryEngine,
        validate_triangle_indices: bool = True,
    ):
        """
        Initialize an open mesh.

        Args:
            name: Mesh name (same as the owning body)
            engine: Geometry engine providing the mesh storage
            validate_triangle_indices: Reject out-of-range triangle ranks
                on insertion instead of at finalization
        """
        self.name = name
        self.validate_triangle_indices = validate_triangle_indices
        self._state: MeshState = OpenMesh(handle=engine.create_mesh(name))
        self._lock = threading.Lock()

    @property
    def state(self) -> MeshState:
        return self._state

    @property
    def is_finalized(self) -> bool:
        return isinstance(self._state, FinalizedMesh)

    @property
    def num_vertices(self) -> int:
        state = self._state
        if isinstance(state, FinalizedMesh):
            return state.entity.num_vertices
        return state.vertex_count

    @property
    def num_triangles(self) -> int:
        state = self._state
        if isinstance(state, FinalizedMesh):
            return state.entity.num_triangles
        return state.triangle_count

    @property
    def entity(self) -> CollisionEntity:
        """Collision entity of a finalized mesh."""
        state = self._state
        if not isinstance(state, FinalizedMesh):
            raise NotFinalizedError(
                f"mesh {self.name!r} is still open", name=self.name
            )
        return state.entity

    def add_point(self, x: float, y: float, z: float) -> int:
        """
        Append a vertex.

        Coordinates are passed through unchecked (NaN/Inf included).

        Returns:
            Rank of the new vertex
        """
        with self._lock:
            state = self._open_state("add_point")
            rank = state.handle.append_vertex(x, y, z)
            state.vertex_count += 1
        logger.debug(f"{self.name}: vertex {rank} = ({x}, {y}, {z})")
        return rank

    def add_triangle(self, i: int, j: int, k: int) -> int:
        """
        Append a triangle given three vertex ranks.

        Returns:
            Rank of the new triangle

        Raises:
            OutOfRangeError: A rank is not yet appended (eager validation)
        """
        with self._lock:
            state = self._open_state("add_triangle")
            if self.validate_triangle_indices:
                for index in (i, j, k):
                    if not 0 <= index < state.vertex_count:
                        raise OutOfRangeError(
                            f"vertex rank {index} out of range "
                            f"[0, {state.vertex_count})",
                            name=self.name,
                            operation="add_triangle",
                        )
            rank = state.handle.append_triangle(i, j, k)
            state.triangle_count += 1
        logger.debug(f"{self.name}: triangle {rank} = ({i}, {j}, {k})")
        return rank

    def finalize(self) -> CollisionEntity:
        """
        Freeze the topology into a collision entity.

        Raises:
            AlreadyFinalizedError: The mesh was finalized before
            OutOfRangeError: The engine rejected a triangle index
        """
        with self._lock:
            state = self._open_state("finalize")
            return self._finalize_locked(state)

    def ensure_finalized(self) -> CollisionEntity:
        """Finalize if still open, otherwise return the existing entity."""
        with self._lock:
            state = self._state
            if isinstance(state, FinalizedMesh):
                return state.entity
            return self._finalize_locked(state)

    def _finalize_locked(self, state: OpenMesh) -> CollisionEntity:
        # State only flips once the engine has succeeded
        entity = state.handle.finalize()
        self._state = FinalizedMesh(entity=entity)
        logger.info(
            f"Finalized mesh {self.name}: {entity.num_vertices} vertices, "
            f"{entity.num_triangles} triangles"
        )
        return entity

    def _open_state(self, operation: str) -> OpenMesh:
        state = self._state
        if isinstance(state, FinalizedMesh):
            raise AlreadyFinalizedError(
                f"mesh {self.name!r} is already finalized",
                name=self.name,
                operation=operation,
            )
        return state

    def __repr__(self) -> str:
        status = "finalized" if self.is_finalized else "open"
        return (
            f"MeshBuilder(name={self.name!r}, {status}, "
            f"vertices={self.num_vertices}, triangles={self.num_triangles})"
        )
