"""Obstacle server: body and collision-list registries plus the live obstacle set."""

import logging
import threading
from typing import List, Optional

from ..errors import AlreadyExistsError, InvalidTransformError, NotFoundError
from ..geometry.engine import CollisionEntity, GeometryEngine, NumpyGeometryEngine
from ..geometry.transform import Transform
from ..obstacles.base import Obstacle
from ..obstacles.body import Body
from ..obstacles.collection import ObstacleCollection, ObstacleSink, find_body
from ..registry.bodies import BodyRegistry
from ..registry.collision_lists import CollisionList, CollisionListRegistry
from ..utils.config_loader import RegistryConfig, ServerConfig

logger = logging.getLogger(__name__)


class ObstacleServer:
    """
    Owns the body registry, the collision-list registry and the planner's
    obstacle sink, and implements every operation on them.

    A single re-entrant lock serialises registry and obstacle-set
    mutation, including the scan-then-update of ``reposition``. Mesh
    finalization runs under the mesh's own lock only.

    Failed operations raise an ObstacleServerError subclass and leave
    every registry as it was.
    """

    def __init__(
        self,
        engine: Optional[GeometryEngine] = None,
        sink: Optional[ObstacleSink] = None,
        config: Optional[RegistryConfig] = None,
    ):
        """
        Initialize server.

        Args:
            engine: Geometry engine building meshes (numpy engine by default)
            sink: Planner obstacle set (in-process collection by default)
            config: Registry behaviour switches
        """
        self.engine = engine or NumpyGeometryEngine()
        self.sink = sink if sink is not None else ObstacleCollection()
        self.config = config or RegistryConfig()

        self.bodies = BodyRegistry()
        self.collision_lists = CollisionListRegistry()
        self._lock = threading.RLock()

    @classmethod
    def from_config(
        cls,
        config: ServerConfig,
        engine: Optional[GeometryEngine] = None,
        sink: Optional[ObstacleSink] = None,
    ) -> "ObstacleServer":
        return cls(engine=engine, sink=sink, config=config.registry)

    # ------------------------------------------------------------------
    # Mesh construction
    # ------------------------------------------------------------------

    def create_polyhedron(self, name: str) -> Body:
        """
        Register a new open mesh body.

        Raises:
            AlreadyExistsError: The name is taken
        """
        with self._lock:
            body = self.bodies.create(
                name,
                self.engine,
                validate_triangle_indices=self.config.validate_triangle_indices,
            )
            logger.info(f"Created polyhedron {name} ({len(self.bodies)} registered)")
        return body

    def add_point(self, name: str, x: float, y: float, z: float) -> int:
        """
        Append a vertex to a named mesh.

        Returns:
            Vertex rank

        Raises:
            NotFoundError: Unknown body
            AlreadyFinalizedError: Mesh already finalized
        """
        body = self._get_body(name, "add_point")
        return body.mesh.add_point(x, y, z)

    def add_triangle(self, name: str, i: int, j: int, k: int) -> int:
        """
        Append a triangle to a named mesh.

        Returns:
            Triangle rank

        Raises:
            NotFoundError: Unknown body
            OutOfRangeError: Rank not yet appended (eager validation)
            AlreadyFinalizedError: Mesh already finalized
        """
        body = self._get_body(name, "add_triangle")
        return body.mesh.add_triangle(i, j, k)

    def finalize(self, name: str) -> CollisionEntity:
        """
        Build the collision entity of a named mesh.

        Raises:
            NotFoundError: Unknown body
            AlreadyFinalizedError: Finalized before
            OutOfRangeError: Engine rejected a triangle
        """
        body = self._get_body(name, "finalize")
        return body.mesh.finalize()

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def place_and_install(self, name: str, transform: Transform) -> Body:
        """
        Place a body and append it to the live obstacle set.

        Finalizes the mesh first if needed. Installing a body that is
        already live adds another entry unless duplicate installs are
        disabled.

        Raises:
            NotFoundError: Unknown body
            AlreadyExistsError: Body already live and duplicates disabled
        """
        self._check_transform(transform, "place_and_install")
        return self._install(name, transform, "place_and_install")

    def add_obstacle(self, name: str) -> Body:
        """Install a body with its current placement."""
        return self._install(name, None, "add_obstacle")

    def reposition(self, name: str, transform: Transform) -> Body:
        """
        Move a body that is already in the live obstacle set.

        Only the live set is searched; a registered body that was never
        installed is not found.

        Raises:
            NotFoundError: No live body with this name
        """
        self._check_transform(transform, "reposition")
        with self._lock:
            body = find_body(self.sink.get_obstacles(), name)
            if body is None:
                raise NotFoundError(
                    f"obstacle {name} is not in the obstacle list",
                    name=name,
                    operation="reposition",
                )
            body.set_transform(transform)
        logger.info(f"Obstacle {name} found and moved")
        return body

    def install_primitive(self, obstacle: Obstacle):
        """Append an obstacle that is not managed by the body registry."""
        if not isinstance(obstacle, Obstacle):
            raise TypeError(f"Expected an Obstacle, got {type(obstacle).__name__}")
        with self._lock:
            self.sink.add_obstacle(obstacle)
        logger.info(f"Installed primitive obstacle {obstacle!r}")

    # ------------------------------------------------------------------
    # Collision lists
    # ------------------------------------------------------------------

    def create_collision_list(self, name: str) -> CollisionList:
        """
        Create an empty collision list.

        Raises:
            AlreadyExistsError: The name is taken
        """
        with self._lock:
            collision_list = self.collision_lists.create(name)
        logger.info(f"Created collision list {name}")
        return collision_list

    def add_body_to_list(self, list_name: str, body_name: str) -> CollisionList:
        """
        Append a body to a collision list, finalizing it if needed.

        The live obstacle set is not touched.

        Raises:
            NotFoundError: Unknown list or unknown body
        """
        with self._lock:
            collision_list = self.collision_lists.get(list_name, "add_body_to_list")
            logger.debug(f"add_body_to_list: registered bodies {self.bodies.names()}")
            body = self.bodies.get(body_name, "add_body_to_list")

        body.mesh.ensure_finalized()

        with self._lock:
            collision_list.append(body)
        logger.info(
            f"Added {body_name} to collision list {list_name} "
            f"({len(collision_list)} bodies)"
        )
        return collision_list

    def activate_list(self, list_name: str) -> List[Obstacle]:
        """
        Replace the whole live obstacle set with a collision list.

        Raises:
            NotFoundError: Unknown list
        """
        with self._lock:
            collision_list = self.collision_lists.get(list_name, "activate_list")
            self.sink.set_obstacles(collision_list.bodies)
            obstacles = self.sink.get_obstacles()
        logger.info(f"Activated collision list {list_name}: {len(obstacles)} obstacles")
        return obstacles

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_body(self, name: str) -> Body:
        return self._get_body(name, "get_body")

    def has_body(self, name: str) -> bool:
        with self._lock:
            return name in self.bodies

    def body_names(self) -> List[str]:
        with self._lock:
            return self.bodies.names()

    def get_collision_list(self, name: str) -> CollisionList:
        with self._lock:
            return self.collision_lists.get(name, "get_collision_list")

    def collision_list_names(self) -> List[str]:
        with self._lock:
            return self.collision_lists.names()

    def obstacles(self) -> List[Obstacle]:
        with self._lock:
            return self.sink.get_obstacles()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_body(self, name: str, operation: str) -> Body:
        with self._lock:
            return self.bodies.get(name, operation)

    def _install(
        self, name: str, transform: Optional[Transform], operation: str
    ) -> Body:
        body = self._get_body(name, operation)
        body.mesh.ensure_finalized()

        with self._lock:
            if not self.config.allow_duplicate_installs:
                if find_body(self.sink.get_obstacles(), name) is not None:
                    raise AlreadyExistsError(
                        f"obstacle {name} is already installed",
                        name=name,
                        operation=operation,
                    )
            if transform is not None:
                body.set_transform(transform)
            self.sink.add_obstacle(body)
        logger.info(f"Installed obstacle {name} at {body.transform}")
        return body

    @staticmethod
    def _check_transform(transform, operation: str):
        if not isinstance(transform, Transform):
            raise InvalidTransformError(
                f"expected a Transform, got {type(transform).__name__}",
                operation=operation,
            )

    def __repr__(self) -> str:
        return (
            f"ObstacleServer(bodies={len(self.bodies)}, "
            f"collision_lists={len(self.collision_lists)}, "
            f"obstacles={len(self.sink.get_obstacles())})"
        )
