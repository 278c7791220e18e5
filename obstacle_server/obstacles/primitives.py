"""Primitive obstacles installed directly into the live set (sphere, box)."""

import numpy as np
from typing import Optional

from .base import Obstacle


class SphereObstacle(Obstacle):
    """
    Spherical obstacle not managed by the body registry.
    """

    def __init__(
        self,
        center: np.ndarray,
        radius: float,
        name: Optional[str] = None,
    ):
        """
        Initialize spherical obstacle.

        Args:
            center: 3D center position [x, y, z]
            radius: Sphere radius in meters
            name: Optional identifier
        """
        super().__init__(name)
        self.center = np.asarray(center, dtype=float).flatten()
        self.radius = float(radius)
        assert self.center.shape == (3,), "Center must be 3D"
        assert self.radius > 0, "Radius must be positive"

    def get_center(self) -> np.ndarray:
        return self.center.copy()

    def get_bounding_radius(self) -> float:
        return self.radius

    def __repr__(self) -> str:
        return (
            f"SphereObstacle(name={self.name!r}, center={self.center}, "
            f"radius={self.radius})"
        )


class BoxObstacle(Obstacle):
    """
    Axis-aligned box obstacle not managed by the body registry.

    Defined by center and half-extents along each axis.
    """

    def __init__(
        self,
        center: np.ndarray,
        half_extents: np.ndarray,
        name: Optional[str] = None,
    ):
        """
        Initialize box obstacle.

        Args:
            center: 3D center position [x, y, z]
            half_extents: Half-sizes along each axis [wx, wy, wz]
            name: Optional identifier
        """
        super().__init__(name)
        self.center = np.asarray(center, dtype=float).flatten()
        self.half_extents = np.asarray(half_extents, dtype=float).flatten()
        assert self.center.shape == (3,), "Center must be 3D"
        assert self.half_extents.shape == (3,), "Half-extents must be 3D"
        assert np.all(self.half_extents > 0), "Half-extents must be positive"

    def get_center(self) -> np.ndarray:
        return self.center.copy()

    def get_bounding_radius(self) -> float:
        return float(np.linalg.norm(self.half_extents))

    def get_corners(self) -> np.ndarray:
        """Get the 8 corner points of the box."""
        corners = []
        for sx in [-1, 1]:
            for sy in [-1, 1]:
                for sz in [-1, 1]:
                    corner = self.center + np.array([sx, sy, sz]) * self.half_extents
                    corners.append(corner)
        return np.array(corners)

    def __repr__(self) -> str:
        return (
            f"BoxObstacle(name={self.name!r}, center={self.center}, "
            f"half_extents={self.half_extents})"
        )


def create_obstacle_from_config(config: dict) -> Obstacle:
    """
    Factory function to create a primitive obstacle from a dictionary.

    Args:
        config: Dictionary with 'type' and type-specific parameters

    Returns:
        Obstacle instance
    """
    obs_type = config.get("type", "").lower()
    name = config.get("name")

    if obs_type == "sphere":
        return SphereObstacle(
            center=np.array(config["center"]),
            radius=config["radius"],
            name=name,
        )
    elif obs_type == "box":
        return BoxObstacle(
            center=np.array(config["center"]),
            half_extents=np.array(config["half_extents"]),
            name=name,
        )
    else:
        raise ValueError(f"Unknown obstacle type: {obs_type}")
