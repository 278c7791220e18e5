"""Named triangle-mesh body placed in the world frame."""

import logging
from typing import Optional

import numpy as np

from ..errors import NotFinalizedError
from ..geometry.engine import CollisionEntity, GeometryEngine
from ..geometry.mesh import MeshBuilder
from ..geometry.transform import Transform
from .base import Obstacle

logger = logging.getLogger(__name__)


class Body(Obstacle):
    """
    Registry-managed obstacle backed by a triangle mesh.

    Geometry is appended while the mesh is open. Once finalized, only the
    placement can change, and only by replacing the whole transform.
    Until the first placement the body reads as sitting at the identity.
    """

    def __init__(
        self,
        name: str,
        engine: GeometryEngine,
        validate_triangle_indices: bool = True,
    ):
        super().__init__(name)
        self.mesh = MeshBuilder(
            name, engine, validate_triangle_indices=validate_triangle_indices
        )
        self._transform: Optional[Transform] = None

    def as_body(self) -> "Body":
        return self

    @property
    def is_finalized(self) -> bool:
        return self.mesh.is_finalized

    @property
    def is_placed(self) -> bool:
        return self._transform is not None

    @property
    def transform(self) -> Transform:
        if self._transform is None:
            return Transform.identity()
        return self._transform

    @property
    def entity(self) -> CollisionEntity:
        return self.mesh.entity

    def set_transform(self, transform: Transform):
        """
        Replace the body's placement.

        Raises:
            NotFinalizedError: The mesh is still open
        """
        if not self.mesh.is_finalized:
            raise NotFinalizedError(
                f"body {self.name!r} must be finalized before placement",
                name=self.name,
                operation="set_transform",
            )
        self._transform = transform
        logger.debug(f"{self.name}: placed at {transform}")

    def world_vertices(self) -> np.ndarray:
        """(N, 3) vertex positions in the world frame."""
        return self.transform.apply(self.entity.vertices)

    def world_triangles(self) -> np.ndarray:
        """(M, 3, 3) triangle corners in the world frame."""
        return self.world_vertices()[self.entity.triangles]

    def get_center(self) -> np.ndarray:
        if not self.mesh.is_finalized:
            return self.transform.translation
        return self.transform.apply(self.entity.local_center)

    def get_bounding_radius(self) -> float:
        if not self.mesh.is_finalized or self.entity.num_vertices == 0:
            return 0.0
        offsets = self.world_vertices() - self.get_center()
        return float(np.max(np.linalg.norm(offsets, axis=1)))

    def __repr__(self) -> str:
        return (
            f"Body(name={self.name!r}, mesh={self.mesh!r}, "
            f"placed={self.is_placed})"
        )
