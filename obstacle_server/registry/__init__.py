"""Name-keyed registries of bodies and collision lists."""

from .bodies import BodyRegistry
from .collision_lists import CollisionList, CollisionListRegistry

__all__ = ["BodyRegistry", "CollisionList", "CollisionListRegistry"]
