"""Obstacle server, its remote-call servant and scene loading."""

from .obstacle_server import ObstacleServer
from .servant import ObstacleServant, Configuration
from .scene import build_scene, load_scene

__all__ = [
    "ObstacleServer",
    "ObstacleServant",
    "Configuration",
    "build_scene",
    "load_scene",
]
