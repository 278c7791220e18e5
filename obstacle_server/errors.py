"""Exceptions raised by the obstacle registries and the geometry layer."""

from typing import Optional


class ObstacleServerError(Exception):
    """
    Base class for all registry and geometry errors.

    Attributes:
        name: Body or collision list name the error refers to (if any)
        operation: Server operation that failed (if known)
    """

    def __init__(
        self,
        message: str,
        name: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(message)
        self.name = name
        self.operation = operation

    def __str__(self) -> str:
        message = super().__str__()
        if self.operation:
            return f"{self.operation}: {message}"
        return message


class NotFoundError(ObstacleServerError):
    """Referenced name is absent from a registry or the live obstacle set."""


class AlreadyExistsError(ObstacleServerError):
    """A name is already taken."""


class AlreadyFinalizedError(ObstacleServerError):
    """Mesh topology is frozen and cannot be built or extended again."""


class NotFinalizedError(ObstacleServerError):
    """Mesh is still open where a collision entity is required."""


class OutOfRangeError(ObstacleServerError):
    """Triangle references a vertex rank that does not exist."""


class InvalidTransformError(ObstacleServerError, ValueError):
    """Malformed rotation/translation input."""


class SceneError(ObstacleServerError, ValueError):
    """Malformed scene document."""
