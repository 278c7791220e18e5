"""Named, reusable groupings of bodies."""

from typing import Dict, Iterator, List, Optional

from ..errors import AlreadyExistsError, NotFinalizedError, NotFoundError
from ..obstacles.body import Body


class CollisionList:
    """
    Ordered sequence of body references.

    Insertion order is kept and duplicates are not removed. Only finalized
    bodies can be appended.
    """

    def __init__(self, name: str):
        self.name = name
        self._bodies: List[Body] = []

    def append(self, body: Body):
        if not body.is_finalized:
            raise NotFinalizedError(
                f"body {body.name} must be finalized before joining list {self.name}",
                name=body.name,
                operation="add_body_to_list",
            )
        self._bodies.append(body)

    @property
    def bodies(self) -> List[Body]:
        return list(self._bodies)

    def body_names(self) -> List[str]:
        return [body.name for body in self._bodies]

    def __len__(self) -> int:
        return len(self._bodies)

    def __iter__(self) -> Iterator[Body]:
        return iter(list(self._bodies))

    def __repr__(self) -> str:
        return f"CollisionList(name={self.name!r}, bodies={self.body_names()})"


class CollisionListRegistry:
    """Mapping from unique name to CollisionList."""

    def __init__(self):
        self._lists: Dict[str, CollisionList] = {}

    def create(self, name: str) -> CollisionList:
        """
        Create an empty collision list.

        Raises:
            AlreadyExistsError: A list with this name exists
        """
        if name in self._lists:
            raise AlreadyExistsError(
                f"collision list {name} already exists",
                name=name,
                operation="create_collision_list",
            )
        collision_list = CollisionList(name)
        self._lists[name] = collision_list
        return collision_list

    def get(self, name: str, operation: Optional[str] = None) -> CollisionList:
        """
        Look up a collision list by name.

        Raises:
            NotFoundError: No list with this name
        """
        try:
            return self._lists[name]
        except KeyError:
            raise NotFoundError(
                f"collision list {name} does not exist",
                name=name,
                operation=operation,
            ) from None

    def exists(self, name: str) -> bool:
        return name in self._lists

    def names(self) -> List[str]:
        return list(self._lists)

    def __contains__(self, name: str) -> bool:
        return name in self._lists

    def __len__(self) -> int:
        return len(self._lists)
