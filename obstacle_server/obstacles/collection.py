"""Live obstacle set handed to the collision engine."""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List, Optional

from .base import Obstacle
from .body import Body

logger = logging.getLogger(__name__)


class ObstacleSink(ABC):
    """
    Planner-side consumer of the obstacle set.

    Implementations hold whatever the collision checker needs; the server
    only replaces the set, appends to it, or reads a snapshot of it.
    """

    @abstractmethod
    def set_obstacles(self, obstacles: Iterable[Obstacle]):
        """Replace the whole obstacle set."""
        pass

    @abstractmethod
    def add_obstacle(self, obstacle: Obstacle):
        """Append one obstacle to the set."""
        pass

    @abstractmethod
    def get_obstacles(self) -> List[Obstacle]:
        """Snapshot of the current set, in order."""
        pass


def find_body(obstacles: Iterable[Obstacle], name: str) -> Optional[Body]:
    """
    Linear scan for the first body with the given name.

    Entries that are not bodies are skipped, including engine-side
    objects that do not implement the Obstacle interface.

    Args:
        obstacles: Live obstacle entries, in order
        name: Exact body name

    Returns:
        Matching body or None
    """
    for obstacle in obstacles:
        as_body = getattr(obstacle, "as_body", None)
        body = as_body() if as_body is not None else None
        if body is None:
            logger.debug(f"Skipping non-body obstacle {obstacle!r} in lookup of {name}")
            continue
        if body.name == name:
            return body
    return None


class ObstacleCollection(ObstacleSink):
    """
    In-process obstacle set.

    Holds references, not copies: repositioning a body found here moves
    every live entry of that body, and the registry sees the same object.
    """

    def __init__(self, obstacles: Optional[Iterable[Obstacle]] = None):
        self._obstacles: List[Obstacle] = list(obstacles or [])

    def set_obstacles(self, obstacles: Iterable[Obstacle]):
        self._obstacles = list(obstacles)

    def add_obstacle(self, obstacle: Obstacle):
        self._obstacles.append(obstacle)

    def get_obstacles(self) -> List[Obstacle]:
        return list(self._obstacles)

    def find_body(self, name: str) -> Optional[Body]:
        return find_body(self._obstacles, name)

    def count(self, name: str) -> int:
        """Number of live entries with the given name."""
        return sum(1 for obs in self._obstacles if getattr(obs, "name", None) == name)

    def __len__(self) -> int:
        return len(self._obstacles)

    def __iter__(self) -> Iterator[Obstacle]:
        return iter(list(self._obstacles))

    def __repr__(self) -> str:
        return f"ObstacleCollection({len(self._obstacles)} obstacles)"
