"""Status-code facade over ObstacleServer for a remote-call layer."""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from ..errors import ObstacleServerError
from ..geometry.transform import Transform
from ..utils.logging_utils import ROOT_LOGGER, get_logger
from .obstacle_server import ObstacleServer

SUCCESS = 0
FAILURE = -1


@dataclass
class Configuration:
    """
    Placement as received from a remote caller.

    Attributes:
        rot: 9 values of a row-major 3x3 rotation
        trs: 3 values of a translation
    """

    rot: List[float] = field(default_factory=lambda: np.eye(3).flatten().tolist())
    trs: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])

    def to_transform(self) -> Transform:
        return Transform.from_rotation_translation(self.rot, self.trs)

    @classmethod
    def from_transform(cls, transform: Transform) -> "Configuration":
        return cls(
            rot=transform.rotation_flat().tolist(),
            trs=transform.translation.tolist(),
        )


class ObstacleServant:
    """
    Remote-call servant for the obstacle server.

    Commands return 0 on success and -1 on failure. The two geometry
    appends return the new rank, or -1. Every domain failure is logged
    with its operation and name; other exceptions propagate.
    """

    def __init__(self, server: Optional[ObstacleServer] = None):
        self.server = server or ObstacleServer()
        self.logger = get_logger(f"{ROOT_LOGGER}.servant")

    def create_polyhedron(self, name: str) -> int:
        return self._command(lambda: self.server.create_polyhedron(name))

    def add_point(self, name: str, x: float, y: float, z: float) -> int:
        return self._rank(lambda: self.server.add_point(name, x, y, z))

    def add_triangle(self, name: str, pt1: int, pt2: int, pt3: int) -> int:
        return self._rank(lambda: self.server.add_triangle(name, pt1, pt2, pt3))

    def add_obstacle(self, name: str) -> int:
        return self._command(lambda: self.server.add_obstacle(name))

    def add_obstacle_config(self, name: str, cfg: Configuration) -> int:
        return self._command(
            lambda: self.server.place_and_install(name, cfg.to_transform())
        )

    def move_obstacle_config(self, name: str, cfg: Configuration) -> int:
        return self._command(lambda: self.server.reposition(name, cfg.to_transform()))

    def create_collision_list(self, list_name: str) -> int:
        return self._command(lambda: self.server.create_collision_list(list_name))

    def add_poly_to_coll_list(self, list_name: str, name: str) -> int:
        return self._command(lambda: self.server.add_body_to_list(list_name, name))

    def set_obstacles(self, list_name: str) -> int:
        return self._command(lambda: self.server.activate_list(list_name))

    def _command(self, call: Callable[[], object]) -> int:
        try:
            call()
        except ObstacleServerError as exc:
            self._report(exc)
            return FAILURE
        return SUCCESS

    def _rank(self, call: Callable[[], int]) -> int:
        try:
            return int(call())
        except ObstacleServerError as exc:
            self._report(exc)
            return FAILURE

    def _report(self, exc: ObstacleServerError):
        self.logger.error(f"{type(exc).__name__} [{exc.name}]: {exc}")
