"""Shared fixtures for obstacle server tests."""

import pytest

from obstacle_server.server.obstacle_server import ObstacleServer
from obstacle_server.utils.config_loader import RegistryConfig


@pytest.fixture
def server():
    """Fresh server with default settings."""
    return ObstacleServer()


@pytest.fixture
def build_triangle():
    """Factory registering a single-triangle mesh on a server."""

    def _build(server: ObstacleServer, name: str = "P"):
        server.create_polyhedron(name)
        server.add_point(name, 0.0, 0.0, 0.0)
        server.add_point(name, 1.0, 0.0, 0.0)
        server.add_point(name, 0.0, 1.0, 0.0)
        server.add_triangle(name, 0, 1, 2)
        return server.get_body(name)

    return _build


@pytest.fixture
def lazy_server():
    """Server that leaves triangle index checks to finalization."""
    return ObstacleServer(config=RegistryConfig(validate_triangle_indices=False))
