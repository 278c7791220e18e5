"""Populate an ObstacleServer from a scene description."""

import logging
from pathlib import Path
from typing import Optional

from ..errors import SceneError
from ..obstacles.primitives import create_obstacle_from_config
from ..utils.config_loader import SceneConfig, load_yaml
from .obstacle_server import ObstacleServer

logger = logging.getLogger(__name__)


def build_scene(server: ObstacleServer, scene: SceneConfig) -> ObstacleServer:
    """
    Apply a scene through the server's public operations.

    Order: meshes, collision lists, list activation, direct installs,
    primitives. Direct installs therefore add to the activated list.
    Errors from the server propagate unchanged; a scene that fails
    halfway leaves what was already applied.

    Args:
        server: Server to populate
        scene: Parsed scene

    Returns:
        The same server
    """
    for mesh in scene.meshes:
        server.create_polyhedron(mesh.name)
        for x, y, z in mesh.vertices:
            server.add_point(mesh.name, x, y, z)
        for i, j, k in mesh.triangles:
            server.add_triangle(mesh.name, int(i), int(j), int(k))

    for collision_list in scene.collision_lists:
        server.create_collision_list(collision_list.name)
        for body_name in collision_list.bodies:
            server.add_body_to_list(collision_list.name, body_name)

    if scene.active_list is not None:
        server.activate_list(scene.active_list)

    for placement in scene.obstacles:
        if placement.transform is None:
            server.add_obstacle(placement.name)
        else:
            server.place_and_install(placement.name, placement.transform)

    for primitive in scene.primitives:
        try:
            obstacle = create_obstacle_from_config(primitive)
        except (KeyError, ValueError, AssertionError) as exc:
            raise SceneError(f"Invalid primitive {primitive}: {exc}") from exc
        server.install_primitive(obstacle)

    logger.info(
        f"Scene '{scene.name}' loaded: {len(scene.meshes)} meshes, "
        f"{len(scene.collision_lists)} collision lists, "
        f"{len(server.obstacles())} live obstacles"
    )
    return server


def load_scene(
    scene_path: str | Path,
    server: Optional[ObstacleServer] = None,
) -> ObstacleServer:
    """Read a scene YAML file and apply it to a (new) server."""
    scene = SceneConfig.from_dict(load_yaml(scene_path))
    return build_scene(server or ObstacleServer(), scene)
