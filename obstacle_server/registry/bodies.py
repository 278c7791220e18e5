"""Name-keyed store of bodies."""

from typing import Dict, Iterator, List, Optional

from ..errors import AlreadyExistsError, NotFoundError
from ..geometry.engine import GeometryEngine
from ..obstacles.body import Body


class BodyRegistry:
    """
    Mapping from unique name to Body.

    Creating a taken name is rejected, never overwritten. Lookups never
    create entries. Not thread-safe on its own; the server serialises
    access.
    """

    def __init__(self):
        self._bodies: Dict[str, Body] = {}

    def create(
        self,
        name: str,
        engine: GeometryEngine,
        validate_triangle_indices: bool = True,
    ) -> Body:
        """
        Create and register an open body.

        Raises:
            AlreadyExistsError: A body with this name exists
        """
        if name in self._bodies:
            raise AlreadyExistsError(
                f"polyhedron {name} already exists",
                name=name,
                operation="create_polyhedron",
            )
        body = Body(name, engine, validate_triangle_indices=validate_triangle_indices)
        self._bodies[name] = body
        return body

    def get(self, name: str, operation: Optional[str] = None) -> Body:
        """
        Look up a body by name.

        Raises:
            NotFoundError: No body with this name
        """
        try:
            return self._bodies[name]
        except KeyError:
            raise NotFoundError(
                f"polyhedron {name} does not exist",
                name=name,
                operation=operation,
            ) from None

    def exists(self, name: str) -> bool:
        return name in self._bodies

    def names(self) -> List[str]:
        return list(self._bodies)

    def __contains__(self, name: str) -> bool:
        return name in self._bodies

    def __len__(self) -> int:
        return len(self._bodies)

    def __iter__(self) -> Iterator[Body]:
        return iter(list(self._bodies.values()))
