"""Abstract base class for entries of the live obstacle set."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

import numpy as np

if TYPE_CHECKING:
    from .body import Body


class Obstacle(ABC):
    """
    Abstract base class for all obstacle kinds.

    The live obstacle set may mix registry-managed bodies with foreign
    primitives. Code that needs a body asks each entry through
    ``as_body()`` rather than inspecting its class.
    """

    def __init__(self, name: Optional[str] = None):
        """
        Initialize obstacle.

        Args:
            name: Optional identifier of the obstacle
        """
        self.name = name

    def as_body(self) -> Optional["Body"]:
        """
        Return this obstacle as a registry body, or None.

        Only Body overrides this; every other kind is skipped by
        name-based lookups over the live set.
        """
        return None

    @abstractmethod
    def get_center(self) -> np.ndarray:
        """
        Get the center position of the obstacle in the world frame.

        Returns:
            3D position of obstacle center
        """
        pass

    @abstractmethod
    def get_bounding_radius(self) -> float:
        """
        Get bounding sphere radius.

        Returns:
            Radius of an enclosing sphere around get_center()
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
