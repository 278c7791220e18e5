"""Configuration loading and dataclasses for the server and scene files."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import yaml

from ..errors import SceneError
from ..geometry.engine import box_mesh
from ..geometry.transform import Transform


@dataclass
class RegistryConfig:
    """Registry behaviour switches."""

    # Reject triangles referencing missing vertices on insertion
    validate_triangle_indices: bool = True
    # Installing a body that is already live adds a second entry
    allow_duplicate_installs: bool = True


@dataclass
class LoggingConfig:
    """Logger settings."""

    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class ServerConfig:
    """Top-level server configuration."""

    registry: RegistryConfig = field(default_factory=RegistryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ServerConfig":
        """Create ServerConfig from dictionary."""
        data = dict(data or {})
        registry_data = data.pop("registry", None) or {}
        logging_data = data.pop("logging", None) or {}
        return cls(
            registry=RegistryConfig(**registry_data),
            logging=LoggingConfig(**logging_data),
        )


@dataclass
class MeshConfig:
    """Geometry of one named mesh."""

    name: str
    vertices: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)))
    triangles: np.ndarray = field(
        default_factory=lambda: np.zeros((0, 3), dtype=np.int64)
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MeshConfig":
        """Create MeshConfig from explicit geometry or a 'box' shorthand."""
        if "name" not in data:
            raise SceneError(f"Mesh entry without a name: {data}")
        name = str(data["name"])

        if "box" in data:
            box = data["box"]
            try:
                vertices, triangles = box_mesh(
                    box.get("center", [0.0, 0.0, 0.0]), box["half_extents"]
                )
            except (KeyError, AssertionError, ValueError) as exc:
                raise SceneError(f"Invalid box for mesh {name}: {exc}", name=name) from exc
            return cls(name=name, vertices=vertices, triangles=triangles)

        try:
            vertices = np.array(data.get("vertices", []), dtype=float).reshape(-1, 3)
            triangles = np.array(data.get("triangles", []), dtype=np.int64).reshape(-1, 3)
        except ValueError as exc:
            raise SceneError(f"Invalid geometry for mesh {name}: {exc}", name=name) from exc
        return cls(name=name, vertices=vertices, triangles=triangles)


@dataclass
class CollisionListConfig:
    """Named group of bodies."""

    name: str
    bodies: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CollisionListConfig":
        if "name" not in data:
            raise SceneError(f"Collision list entry without a name: {data}")
        return cls(name=str(data["name"]), bodies=[str(b) for b in data.get("bodies", [])])


@dataclass
class PlacementConfig:
    """
    Placement of a body installed directly as an obstacle.

    The rotation is given by at most one of 'rotation' (9 values,
    row-major), 'euler' ([roll, pitch, yaw] in radians) or 'quaternion'
    ([x, y, z, w]). A full 'matrix' (4x4) overrides both rotation and
    translation. With no pose keys at all, the body keeps its current
    placement.
    """

    name: str
    transform: Optional[Transform] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlacementConfig":
        if "name" not in data:
            raise SceneError(f"Obstacle entry without a name: {data}")
        name = str(data["name"])

        rotation_keys = [k for k in ("rotation", "euler", "quaternion") if k in data]
        if len(rotation_keys) > 1:
            raise SceneError(
                f"Obstacle {name} gives more than one rotation: {rotation_keys}",
                name=name,
            )

        if "matrix" in data:
            return cls(name=name, transform=Transform.from_matrix(data["matrix"]))
        if not rotation_keys and "translation" not in data:
            return cls(name=name)

        translation = data.get("translation", [0.0, 0.0, 0.0])
        if "euler" in data:
            euler = np.asarray(data["euler"], dtype=float).flatten()
            if euler.shape != (3,):
                raise SceneError(f"Obstacle {name}: euler needs 3 angles", name=name)
            roll, pitch, yaw = euler
            transform = Transform.from_euler(roll, pitch, yaw, translation)
        elif "quaternion" in data:
            transform = Transform.from_quaternion(data["quaternion"], translation)
        else:
            rotation = data.get("rotation", np.eye(3).flatten())
            transform = Transform.from_rotation_translation(rotation, translation)
        return cls(name=name, transform=transform)


@dataclass
class SceneConfig:
    """Configuration for a complete obstacle scene."""

    name: str = "Unnamed Scene"
    description: str = ""

    meshes: List[MeshConfig] = field(default_factory=list)
    collision_lists: List[CollisionListConfig] = field(default_factory=list)
    active_list: Optional[str] = None
    obstacles: List[PlacementConfig] = field(default_factory=list)
    primitives: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SceneConfig":
        """Create SceneConfig from dictionary."""
        if not isinstance(data, dict):
            raise SceneError(f"Scene document must be a mapping, got {type(data).__name__}")

        config = cls()
        config.name = data.get("name", config.name)
        config.description = data.get("description", config.description)

        config.meshes = [MeshConfig.from_dict(m) for m in data.get("meshes", [])]
        config.collision_lists = [
            CollisionListConfig.from_dict(c) for c in data.get("collision_lists", [])
        ]
        config.active_list = data.get("active_list")
        config.obstacles = [PlacementConfig.from_dict(o) for o in data.get("obstacles", [])]
        config.primitives = [dict(p) for p in data.get("primitives", [])]

        return config


def load_yaml(filepath: str | Path) -> Dict[str, Any]:
    """Load a YAML file and return its contents."""
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    with open(filepath, "r") as f:
        return yaml.safe_load(f)


def load_config(
    server_config_path: str | Path | None = None,
    scene_path: str | Path | None = None,
) -> Tuple[ServerConfig, Optional[SceneConfig]]:
    """
    Load configuration files.

    Args:
        server_config_path: Path to server config YAML (optional)
        scene_path: Path to scene YAML (optional)

    Returns:
        Tuple of (ServerConfig, SceneConfig or None)
    """
    if server_config_path:
        server_config = ServerConfig.from_dict(load_yaml(server_config_path))
    else:
        server_config = ServerConfig()

    scene_config = None
    if scene_path:
        scene_config = SceneConfig.from_dict(load_yaml(scene_path))

    return server_config, scene_config


def get_default_config_path() -> Path:
    """Get default path of the server config relative to the repository root."""
    package_root = Path(__file__).parent.parent.parent
    return package_root / "config" / "server_config.yaml"
