"""Tests for ObstacleServer operations."""

import threading

import numpy as np
import pytest

from obstacle_server.errors import (
    AlreadyExistsError,
    AlreadyFinalizedError,
    InvalidTransformError,
    NotFoundError,
    OutOfRangeError,
)
from obstacle_server.geometry.transform import Transform
from obstacle_server.obstacles.collection import ObstacleCollection
from obstacle_server.obstacles.primitives import SphereObstacle
from obstacle_server.server.obstacle_server import ObstacleServer
from obstacle_server.utils.config_loader import RegistryConfig, ServerConfig


def translation(x, y, z) -> Transform:
    return Transform.from_rotation_translation(np.eye(3).flatten(), [x, y, z])


class TestMeshOperations:
    """Tests for mesh construction through the server."""

    def test_point_ranks(self, server):
        """Test ranks count prior successful appends."""
        server.create_polyhedron("P")
        ranks = [server.add_point("P", i, i, i) for i in range(6)]
        assert ranks == list(range(6))

    def test_ranks_are_per_mesh(self, server):
        """Test each mesh numbers its own vertices."""
        server.create_polyhedron("A")
        server.create_polyhedron("B")
        assert server.add_point("A", 0, 0, 0) == 0
        assert server.add_point("A", 1, 0, 0) == 1
        assert server.add_point("B", 0, 0, 0) == 0

    def test_duplicate_create(self, server):
        """Test second create fails and keeps one mesh."""
        first = server.create_polyhedron("P")
        with pytest.raises(AlreadyExistsError):
            server.create_polyhedron("P")
        assert server.body_names() == ["P"]
        assert server.get_body("P") is first

    def test_repeated_failures_do_not_mutate(self, server):
        """Test repeating a failed create leaves state as after the first success."""
        server.create_polyhedron("P")
        server.add_point("P", 0, 0, 0)
        for _ in range(3):
            with pytest.raises(AlreadyExistsError):
                server.create_polyhedron("P")
        assert server.body_names() == ["P"]
        assert server.get_body("P").mesh.num_vertices == 1

    def test_add_point_unknown(self, server):
        """Test appends to a missing mesh fail without creating it."""
        with pytest.raises(NotFoundError):
            server.add_point("missing", 0, 0, 0)
        with pytest.raises(NotFoundError):
            server.add_triangle("missing", 0, 1, 2)
        assert server.body_names() == []
        assert not server.has_body("missing")

    def test_triangle_out_of_range(self, server):
        """Test eager triangle validation."""
        server.create_polyhedron("P")
        server.add_point("P", 0, 0, 0)
        server.add_point("P", 1, 0, 0)
        with pytest.raises(OutOfRangeError):
            server.add_triangle("P", 0, 1, 2)
        assert server.get_body("P").mesh.num_triangles == 0

    def test_triangle_out_of_range_lazy(self, lazy_server):
        """Test unchecked triangles fail at finalization."""
        lazy_server.create_polyhedron("P")
        lazy_server.add_point("P", 0, 0, 0)
        assert lazy_server.add_triangle("P", 0, 1, 2) == 0
        with pytest.raises(OutOfRangeError):
            lazy_server.finalize("P")

    def test_finalize_twice(self, server, build_triangle):
        """Test explicit re-finalization is rejected."""
        build_triangle(server)
        entity = server.finalize("P")
        assert entity.num_triangles == 1
        with pytest.raises(AlreadyFinalizedError):
            server.finalize("P")
        assert server.get_body("P").entity is entity


class TestPlacement:
    """Tests for installing and moving obstacles."""

    def test_place_and_install_identity(self, server, build_triangle):
        """Test a single install with the identity placement."""
        build_triangle(server)
        server.finalize("P")
        server.place_and_install("P", Transform.identity())

        obstacles = server.obstacles()
        assert len(obstacles) == 1
        assert obstacles[0].name == "P"
        assert np.array_equal(obstacles[0].as_body().transform.matrix, np.eye(4))

    def test_install_finalizes(self, server, build_triangle):
        """Test installing an open mesh finalizes it."""
        body = build_triangle(server)
        assert not body.is_finalized
        server.place_and_install("P", translation(1, 0, 0))
        assert body.is_finalized
        assert np.allclose(body.transform.translation, [1, 0, 0])

    def test_install_unknown(self, server):
        """Test installing a missing body."""
        with pytest.raises(NotFoundError):
            server.place_and_install("P", Transform.identity())
        assert server.obstacles() == []

    def test_install_failure_leaves_state(self, lazy_server):
        """Test a failed finalization during install changes nothing."""
        lazy_server.create_polyhedron("P")
        lazy_server.add_point("P", 0, 0, 0)
        lazy_server.add_triangle("P", 0, 0, 9)
        with pytest.raises(OutOfRangeError):
            lazy_server.place_and_install("P", translation(1, 1, 1))
        body = lazy_server.get_body("P")
        assert not body.is_finalized
        assert not body.is_placed
        assert lazy_server.obstacles() == []

    def test_duplicate_installs(self, server, build_triangle):
        """Test installing twice gives two live entries."""
        body = build_triangle(server)
        server.place_and_install("P", Transform.identity())
        server.place_and_install("P", translation(0, 0, 1))
        assert server.obstacles() == [body, body]
        assert np.allclose(body.transform.translation, [0, 0, 1])

    def test_duplicate_installs_disabled(self, build_triangle):
        """Test the registry can refuse a second live entry."""
        server = ObstacleServer(config=RegistryConfig(allow_duplicate_installs=False))
        body = build_triangle(server)
        server.place_and_install("P", Transform.identity())
        with pytest.raises(AlreadyExistsError):
            server.place_and_install("P", translation(0, 0, 1))
        assert server.obstacles() == [body]
        assert body.transform == Transform.identity()

    def test_add_obstacle_keeps_placement(self, server, build_triangle):
        """Test installing without a pose."""
        body = build_triangle(server)
        server.add_obstacle("P")
        assert server.obstacles() == [body]
        assert not body.is_placed
        assert body.transform == Transform.identity()

    def test_invalid_transform_type(self, server, build_triangle):
        """Test raw arrays are not accepted as placements."""
        build_triangle(server)
        with pytest.raises(InvalidTransformError):
            server.place_and_install("P", np.eye(4))
        assert server.obstacles() == []

    def test_reposition(self, server, build_triangle):
        """Test moving an installed obstacle."""
        body = build_triangle(server)
        server.place_and_install("P", Transform.identity())
        target = translation(2, 3, 4)

        moved = server.reposition("P", target)
        assert moved is body
        assert server.obstacles()[0].as_body().transform == target

    def test_reposition_searches_live_set_only(self, server, build_triangle):
        """Test a registered but uninstalled body is not found."""
        build_triangle(server, "P")
        q = build_triangle(server, "Q")
        server.place_and_install("P", Transform.identity())
        q.mesh.finalize()

        with pytest.raises(NotFoundError):
            server.reposition("Q", translation(1, 0, 0))
        assert not q.is_placed

    def test_reposition_skips_primitives(self, server):
        """Test a primitive with the same name is not moved."""
        server.install_primitive(SphereObstacle([0, 0, 0], 1.0, name="P"))
        with pytest.raises(NotFoundError):
            server.reposition("P", translation(1, 0, 0))

    def test_reposition_after_primitive(self, server, build_triangle):
        """Test the scan continues past foreign entries."""
        body = build_triangle(server)
        server.install_primitive(SphereObstacle([0, 0, 0], 1.0, name="P"))
        server.place_and_install("P", Transform.identity())
        server.reposition("P", translation(0, 5, 0))
        assert np.allclose(body.transform.translation, [0, 5, 0])

    def test_scan_skips_engine_objects(self, build_triangle):
        """Test sink entries without the Obstacle interface are skipped."""
        server = ObstacleServer(
            sink=ObstacleCollection([object()]),
            config=RegistryConfig(allow_duplicate_installs=False),
        )
        body = build_triangle(server)
        server.place_and_install("P", Transform.identity())
        server.reposition("P", translation(0, 0, 2))
        assert np.allclose(body.transform.translation, [0, 0, 2])

        with pytest.raises(AlreadyExistsError):
            server.place_and_install("P", Transform.identity())
        with pytest.raises(NotFoundError):
            server.reposition("Q", Transform.identity())

    def test_install_primitive_type_checked(self, server):
        """Test only obstacles can be installed."""
        with pytest.raises(TypeError):
            server.install_primitive("not an obstacle")


class TestCollisionLists:
    """Tests for collision list operations."""

    def test_duplicate_list(self, server):
        """Test second create fails."""
        server.create_collision_list("L")
        with pytest.raises(AlreadyExistsError):
            server.create_collision_list("L")
        assert server.collision_list_names() == ["L"]

    def test_add_unknown_body(self, server):
        """Test adding a missing body leaves the list empty."""
        server.create_collision_list("L")
        with pytest.raises(NotFoundError) as excinfo:
            server.add_body_to_list("L", "P")
        assert excinfo.value.name == "P"
        assert len(server.get_collision_list("L")) == 0

    def test_add_to_unknown_list(self, server, build_triangle):
        """Test the list is checked before the body."""
        body = build_triangle(server)
        with pytest.raises(NotFoundError) as excinfo:
            server.add_body_to_list("L", "missing")
        assert excinfo.value.name == "L"
        with pytest.raises(NotFoundError):
            server.add_body_to_list("L", "P")
        assert not body.is_finalized

    def test_add_finalizes_without_installing(self, server, build_triangle):
        """Test list membership does not touch the live set."""
        body = build_triangle(server)
        server.create_collision_list("L")
        server.add_body_to_list("L", "P")
        server.add_body_to_list("L", "P")

        assert body.is_finalized
        assert server.get_collision_list("L").bodies == [body, body]
        assert server.obstacles() == []

    def test_activate_replaces_live_set(self, server, build_triangle):
        """Test activation is a wholesale swap."""
        a = build_triangle(server, "A")
        b = build_triangle(server, "B")
        server.place_and_install("A", Transform.identity())
        server.install_primitive(SphereObstacle([0, 0, 0], 1.0))

        server.create_collision_list("L")
        server.add_body_to_list("L", "B")
        obstacles = server.activate_list("L")

        assert obstacles == [b]
        assert server.obstacles() == [b]
        assert a not in server.obstacles()

    def test_activate_then_reposition(self, server, build_triangle):
        """Test bodies activated from a list can be moved."""
        body = build_triangle(server)
        server.create_collision_list("L")
        server.add_body_to_list("L", "P")
        server.activate_list("L")
        server.reposition("P", translation(0, 0, 2))
        assert np.allclose(body.transform.translation, [0, 0, 2])

    def test_activate_unknown(self, server, build_triangle):
        """Test activating a missing list keeps the live set."""
        body = build_triangle(server)
        server.add_obstacle("P")
        with pytest.raises(NotFoundError):
            server.activate_list("L")
        assert server.obstacles() == [body]

    def test_later_list_changes_not_live(self, server, build_triangle):
        """Test appending to a list after activation does not change the live set."""
        a = build_triangle(server, "A")
        build_triangle(server, "B")
        server.create_collision_list("L")
        server.add_body_to_list("L", "A")
        server.activate_list("L")
        server.add_body_to_list("L", "B")
        assert server.obstacles() == [a]


class TestConcurrency:
    """Tests for concurrent callers."""

    def test_concurrent_appends_same_mesh(self, server):
        """Test concurrent appenders never share a rank."""
        server.create_polyhedron("P")
        ranks = []
        ranks_lock = threading.Lock()

        def worker():
            local = [server.add_point("P", 0.0, 0.0, 0.0) for _ in range(200)]
            with ranks_lock:
                ranks.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(ranks) == list(range(800))
        assert server.get_body("P").mesh.num_vertices == 800

    def test_concurrent_creates(self, server):
        """Test exactly one concurrent create of a name succeeds."""
        results = []
        results_lock = threading.Lock()

        def worker():
            try:
                server.create_polyhedron("P")
                outcome = "ok"
            except AlreadyExistsError:
                outcome = "exists"
            with results_lock:
                results.append(outcome)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count("ok") == 1
        assert results.count("exists") == 7


class TestServerConfig:
    """Tests for building a server from configuration."""

    def test_from_config(self):
        """Test registry switches are applied."""
        config = ServerConfig.from_dict(
            {"registry": {"validate_triangle_indices": False}}
        )
        server = ObstacleServer.from_config(config)
        server.create_polyhedron("P")
        assert server.add_triangle("P", 0, 1, 2) == 0
