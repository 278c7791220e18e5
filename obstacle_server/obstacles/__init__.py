"""Obstacle kinds and the live obstacle set."""

from .base import Obstacle
from .body import Body
from .primitives import SphereObstacle, BoxObstacle, create_obstacle_from_config
from .collection import ObstacleSink, ObstacleCollection, find_body

__all__ = [
    "Obstacle",
    "Body",
    "SphereObstacle",
    "BoxObstacle",
    "create_obstacle_from_config",
    "ObstacleSink",
    "ObstacleCollection",
    "find_body",
]
