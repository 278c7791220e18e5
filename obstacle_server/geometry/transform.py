"""Rigid placement transforms and rotation utilities."""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from scipy.spatial.transform import Rotation

from ..errors import InvalidTransformError

_BOTTOM_ROW = np.array([0.0, 0.0, 0.0, 1.0])


def euler_to_rotation_matrix(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """
    Convert Euler angles (ZYX convention) to rotation matrix.

    The rotation is applied in order: yaw (Z) -> pitch (Y) -> roll (X)
    This maps vectors from the body frame to the world frame.

    Args:
        roll: Rotation about X in radians
        pitch: Rotation about Y in radians
        yaw: Rotation about Z in radians

    Returns:
        3x3 rotation matrix
    """
    cr = np.cos(roll)
    sr = np.sin(roll)
    cp = np.cos(pitch)
    sp = np.sin(pitch)
    cy = np.cos(yaw)
    sy = np.sin(yaw)

    R = np.array(
        [
            [cy * cp, cy * sp * sr - sy * cr, cy * sp * cr + sy * sr],
            [sy * cp, sy * sp * sr + cy * cr, sy * sp * cr - cy * sr],
            [-sp, cp * sr, cp * cr],
        ]
    )
    return R


def rotation_matrix_to_euler(R: np.ndarray) -> Tuple[float, float, float]:
    """
    Extract Euler angles from rotation matrix (ZYX convention).

    Args:
        R: 3x3 rotation matrix

    Returns:
        Tuple of (roll, pitch, yaw) in radians
    """
    # Handle gimbal lock
    if np.abs(R[2, 0]) >= 1.0 - 1e-10:
        yaw = 0.0
        if R[2, 0] < 0:
            pitch = np.pi / 2
            roll = np.arctan2(R[0, 1], R[0, 2])
        else:
            pitch = -np.pi / 2
            roll = np.arctan2(-R[0, 1], -R[0, 2])
    else:
        pitch = -np.arcsin(R[2, 0])
        roll = np.arctan2(R[2, 1], R[2, 2])
        yaw = np.arctan2(R[1, 0], R[0, 0])

    return float(roll), float(pitch), float(yaw)


def _as_flat(values: Sequence[float], size: int, label: str) -> np.ndarray:
    try:
        array = np.asarray(values, dtype=float).flatten()
    except (TypeError, ValueError) as exc:
        raise InvalidTransformError(f"{label} must be numeric: {exc}") from exc
    if array.shape != (size,):
        raise InvalidTransformError(
            f"{label} must have {size} elements, got {array.size}"
        )
    return array


@dataclass(frozen=True, eq=False)
class Transform:
    """
    Rigid placement as a 4x4 homogeneous matrix.

    The upper-left 3x3 block is the rotation, the upper-right column the
    translation. The bottom row is always [0, 0, 0, 1] and every entry is
    finite. The matrix is stored read-only; placing a body again means
    building a new Transform.

    Attributes:
        matrix: (4, 4) read-only array
    """

    matrix: np.ndarray

    def __post_init__(self):
        matrix = np.array(self.matrix, dtype=float)
        if matrix.shape != (4, 4):
            raise InvalidTransformError(
                f"Transform matrix must be 4x4, got shape {matrix.shape}"
            )
        if not np.all(np.isfinite(matrix)):
            raise InvalidTransformError("Transform entries must be finite")
        if not np.array_equal(matrix[3], _BOTTOM_ROW):
            raise InvalidTransformError(
                f"Transform bottom row must be [0, 0, 0, 1], got {matrix[3].tolist()}"
            )
        matrix.setflags(write=False)
        object.__setattr__(self, "matrix", matrix)

    @classmethod
    def identity(cls) -> "Transform":
        return cls(np.eye(4))

    @classmethod
    def from_matrix(cls, matrix) -> "Transform":
        """Build from any 4x4 array-like (nested lists or 16 flat values)."""
        array = np.asarray(matrix, dtype=float)
        if array.size == 16:
            array = array.reshape(4, 4)
        return cls(array)

    @classmethod
    def from_rotation_translation(
        cls,
        rotation: Sequence[float],
        translation: Sequence[float],
    ) -> "Transform":
        """
        Build from a flat row-major 3x3 rotation and a translation vector.

        Args:
            rotation: 9 values, row-major
            translation: 3 values [x, y, z]

        Returns:
            Transform instance
        """
        rot = _as_flat(rotation, 9, "Rotation block")
        trs = _as_flat(translation, 3, "Translation vector")

        matrix = np.eye(4)
        matrix[:3, :3] = rot.reshape(3, 3)
        matrix[:3, 3] = trs
        return cls(matrix)

    @classmethod
    def from_euler(
        cls,
        roll: float,
        pitch: float,
        yaw: float,
        translation: Sequence[float] = (0.0, 0.0, 0.0),
    ) -> "Transform":
        """Build from ZYX Euler angles (radians) and a translation."""
        R = euler_to_rotation_matrix(roll, pitch, yaw)
        return cls.from_rotation_translation(R.flatten(), translation)

    @classmethod
    def from_quaternion(
        cls,
        quaternion: Sequence[float],
        translation: Sequence[float] = (0.0, 0.0, 0.0),
    ) -> "Transform":
        """Build from a scalar-last quaternion [x, y, z, w] and a translation."""
        quat = _as_flat(quaternion, 4, "Quaternion")
        if not np.all(np.isfinite(quat)) or np.linalg.norm(quat) < 1e-12:
            raise InvalidTransformError("Quaternion must be finite and non-zero")
        R = Rotation.from_quat(quat).as_matrix()
        return cls.from_rotation_translation(R.flatten(), translation)

    @property
    def rotation(self) -> np.ndarray:
        return self.matrix[:3, :3].copy()

    @property
    def translation(self) -> np.ndarray:
        return self.matrix[:3, 3].copy()

    def rotation_flat(self) -> np.ndarray:
        """Rotation block as 9 row-major values."""
        return self.matrix[:3, :3].flatten()

    def to_euler(self) -> Tuple[float, float, float]:
        return rotation_matrix_to_euler(self.matrix[:3, :3])

    def apply(self, points: np.ndarray) -> np.ndarray:
        """
        Map points from the local frame to the world frame.

        Args:
            points: (3,) or (N, 3) array

        Returns:
            Array of the same shape in world coordinates
        """
        points = np.asarray(points, dtype=float)
        if points.ndim == 1:
            return self.matrix[:3, :3] @ points + self.matrix[:3, 3]
        return points @ self.matrix[:3, :3].T + self.matrix[:3, 3]

    def compose(self, other: "Transform") -> "Transform":
        """Return self * other (other applied first)."""
        return Transform(self.matrix @ other.matrix)

    def __matmul__(self, other: "Transform") -> "Transform":
        return self.compose(other)

    def inverse(self) -> "Transform":
        """
        Inverse placement.

        Uses the transpose for the rotation block, which is exact for
        orthonormal rotations; other blocks fall back to a general inverse.
        """
        R = self.matrix[:3, :3]
        if np.allclose(R.T @ R, np.eye(3)):
            R_inv = R.T
        else:
            R_inv = np.linalg.inv(R)
        matrix = np.eye(4)
        matrix[:3, :3] = R_inv
        matrix[:3, 3] = -R_inv @ self.matrix[:3, 3]
        return Transform(matrix)

    def allclose(self, other: "Transform", atol: float = 1e-9) -> bool:
        return bool(np.allclose(self.matrix, other.matrix, atol=atol))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return bool(np.array_equal(self.matrix, other.matrix))

    def __hash__(self) -> int:
        # -0.0 and 0.0 compare equal
        return hash((self.matrix + 0.0).tobytes())

    def __repr__(self) -> str:
        return (
            f"Transform(rotation={self.rotation_flat().tolist()}, "
            f"translation={self.translation.tolist()})"
        )
