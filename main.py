#!/usr/bin/env python3
"""
Obstacle Server - Scene Runner

This script builds an obstacle server from a scene file, reports the
registered bodies, collision lists and live obstacle set, and can
save a 3D plot of the live obstacles.
"""

import argparse
from typing import Optional

from obstacle_server.server.obstacle_server import ObstacleServer
from obstacle_server.server.scene import build_scene
from obstacle_server.utils.config_loader import get_default_config_path, load_config
from obstacle_server.utils.logging_utils import ROOT_LOGGER, setup_logger


def run_scene(
    scene_path: str,
    config_path: Optional[str] = None,
    save_plot: Optional[str] = None,
    log_level: Optional[str] = None,
) -> ObstacleServer:
    """
    Build a server from configuration files.

    Args:
        scene_path: Path to scene YAML
        config_path: Path to server config (optional)
        save_plot: Path to save a plot of the live obstacles
        log_level: Overrides the configured logging level

    Returns:
        Populated server
    """
    if config_path is None and get_default_config_path().exists():
        config_path = str(get_default_config_path())

    server_config, scene_config = load_config(config_path, scene_path)

    logger = setup_logger(
        ROOT_LOGGER,
        level=log_level or server_config.logging.level,
        log_file=server_config.logging.file,
    )

    server = ObstacleServer.from_config(server_config)
    build_scene(server, scene_config)

    logger.info(f"Scene: {scene_config.name}")
    logger.info(f"  Bodies: {', '.join(server.body_names()) or '-'}")
    for list_name in server.collision_list_names():
        collision_list = server.get_collision_list(list_name)
        logger.info(f"  Collision list {list_name}: {collision_list.body_names()}")
    for obstacle in server.obstacles():
        logger.info(f"  Live: {obstacle!r}")

    if save_plot:
        from obstacle_server.visualization.plotter_3d import plot_obstacle_set

        plotter = plot_obstacle_set(
            server.obstacles(),
            title=f"Scene: {scene_config.name}",
            save_path=save_plot,
        )
        plotter.close()
        logger.info(f"Plot saved to {save_plot}")

    return server


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Obstacle server scene runner"
    )
    parser.add_argument(
        "--scene",
        type=str,
        default="config/scenes/table_scene.yaml",
        help="Path to scene file",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to server config file",
    )
    parser.add_argument(
        "--save-plot",
        type=str,
        default=None,
        help="Path to save a plot of the live obstacles",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (DEBUG, INFO, ...)",
    )

    args = parser.parse_args()

    server = run_scene(
        scene_path=args.scene,
        config_path=args.config,
        save_plot=args.save_plot,
        log_level=args.log_level,
    )

    print(f"\nScene loaded: {server!r}")
    return 0


if __name__ == "__main__":
    exit(main())
