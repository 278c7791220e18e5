#!/usr/bin/env python3
"""
Remote Session Example

Replays the calls a remote client makes to build a pyramid obstacle,
group it into a collision list, activate the list, and move the pyramid.
Each call prints the status code the servant would send back.

Usage:
    python examples/remote_session.py
"""

import numpy as np

from obstacle_server.server.servant import Configuration, ObstacleServant
from obstacle_server.utils.logging_utils import setup_logger


def main():
    """Run the example session."""
    print("=== Remote Session Example ===\n")
    setup_logger(level="INFO")

    servant = ObstacleServant()

    print(f"createPolyhedron(pyramid)      -> {servant.create_polyhedron('pyramid')}")
    for x, y, z in [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0), (0.5, 0.5, 1)]:
        rank = servant.add_point("pyramid", x, y, z)
        print(f"addPoint({x}, {y}, {z})".ljust(31) + f"-> {rank}")
    for tri in [(0, 2, 1), (0, 3, 2), (0, 1, 4), (1, 2, 4), (2, 3, 4), (3, 0, 4)]:
        rank = servant.add_triangle("pyramid", *tri)
        print(f"addTriangle{tri}".ljust(31) + f"-> {rank}")

    # A rank that does not exist yet is refused
    print(f"addTriangle(0, 1, 7)           -> {servant.add_triangle('pyramid', 0, 1, 7)}")

    print(f"createCollisionList(world)     -> {servant.create_collision_list('world')}")
    print(f"addPolyToCollList(world, ...)  -> {servant.add_poly_to_coll_list('world', 'pyramid')}")
    print(f"setObstacles(world)            -> {servant.set_obstacles('world')}")

    yaw = np.pi / 4
    rot = [
        np.cos(yaw), -np.sin(yaw), 0.0,
        np.sin(yaw), np.cos(yaw), 0.0,
        0.0, 0.0, 1.0,
    ]
    cfg = Configuration(rot=rot, trs=[2.0, 0.0, 0.0])
    print(f"moveObstacleConfig(pyramid)    -> {servant.move_obstacle_config('pyramid', cfg)}")
    print(f"moveObstacleConfig(ghost)      -> {servant.move_obstacle_config('ghost', cfg)}")

    pyramid = servant.server.get_body("pyramid")
    print(f"\nPyramid center in world frame: {np.round(pyramid.get_center(), 3)}")
    print(f"Live obstacles: {[obs.name for obs in servant.server.obstacles()]}")


if __name__ == "__main__":
    main()
