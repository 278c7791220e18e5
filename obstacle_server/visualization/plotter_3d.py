"""3D visualization of the live obstacle set using Matplotlib."""

import numpy as np
import matplotlib

matplotlib.use("Agg")  # Non-interactive backend for saving
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401 - needed to register 3d projection
from mpl_toolkits.mplot3d.art3d import Poly3DCollection
from typing import List, Optional, Tuple

from ..obstacles.base import Obstacle
from ..obstacles.body import Body
from ..obstacles.primitives import SphereObstacle, BoxObstacle


class Plotter3D:
    """
    3D view of obstacles.

    Bodies are drawn as triangle meshes in the world frame, primitive
    spheres as surfaces and primitive boxes as wireframes.
    """

    def __init__(
        self,
        figsize: Tuple[int, int] = (10, 8),
        title: str = "Obstacle Set",
    ):
        """
        Initialize 3D plotter.

        Args:
            figsize: Figure size (width, height)
            title: Figure title
        """
        self.fig = plt.figure(figsize=figsize)
        self.ax = self.fig.add_subplot(111, projection="3d")
        self.ax.set_title(title)
        self._obstacle_artists = []

        self.body_color = "steelblue"
        self.primitive_color = "red"

    def setup_axes(
        self,
        xlim: Tuple[float, float] = (-5, 5),
        ylim: Tuple[float, float] = (-5, 5),
        zlim: Tuple[float, float] = (0, 5),
    ):
        """
        Configure axis limits and labels.

        Args:
            xlim: X-axis limits
            ylim: Y-axis limits
            zlim: Z-axis limits
        """
        self.ax.set_xlim(xlim)
        self.ax.set_ylim(ylim)
        self.ax.set_zlim(zlim)
        self.ax.set_xlabel("X [m]")
        self.ax.set_ylabel("Y [m]")
        self.ax.set_zlabel("Z [m]")

    def plot_body(
        self,
        body: Body,
        color: Optional[str] = None,
        alpha: float = 0.4,
    ):
        """
        Plot a finalized body's triangles at its current placement.

        Args:
            body: Finalized body
            color: Face color
            alpha: Transparency
        """
        triangles = body.world_triangles()
        if len(triangles) == 0:
            return
        collection = Poly3DCollection(
            triangles,
            facecolor=color or self.body_color,
            edgecolor="k",
            linewidths=0.3,
            alpha=alpha,
        )
        self.ax.add_collection3d(collection)
        self._obstacle_artists.append(collection)

    def plot_sphere_obstacle(
        self,
        obstacle: SphereObstacle,
        color: Optional[str] = None,
        alpha: float = 0.3,
        resolution: int = 20,
    ):
        """
        Plot spherical obstacle.

        Args:
            obstacle: SphereObstacle instance
            color: Surface color
            alpha: Transparency
            resolution: Sphere resolution
        """
        u = np.linspace(0, 2 * np.pi, resolution)
        v = np.linspace(0, np.pi, resolution)

        r = obstacle.radius
        x = obstacle.center[0] + r * np.outer(np.cos(u), np.sin(v))
        y = obstacle.center[1] + r * np.outer(np.sin(u), np.sin(v))
        z = obstacle.center[2] + r * np.outer(np.ones(np.size(u)), np.cos(v))

        surface = self.ax.plot_surface(
            x, y, z, color=color or self.primitive_color, alpha=alpha, linewidth=0
        )
        self._obstacle_artists.append(surface)

    def plot_box_obstacle(
        self,
        obstacle: BoxObstacle,
        color: Optional[str] = None,
        alpha: float = 0.6,
    ):
        """
        Plot box obstacle as a wireframe.

        Args:
            obstacle: BoxObstacle instance
            color: Edge color
            alpha: Transparency
        """
        vertices = obstacle.get_corners()

        # Corner order from get_corners: x-major, then y, then z
        edges = [
            (0, 4), (1, 5), (2, 6), (3, 7),  # x-parallel
            (0, 2), (1, 3), (4, 6), (5, 7),  # y-parallel
            (0, 1), (2, 3), (4, 5), (6, 7),  # z-parallel
        ]
        for i, j in edges:
            line, = self.ax.plot(
                [vertices[i, 0], vertices[j, 0]],
                [vertices[i, 1], vertices[j, 1]],
                [vertices[i, 2], vertices[j, 2]],
                color=color or self.primitive_color, alpha=alpha, linewidth=1
            )
            self._obstacle_artists.append(line)

    def plot_obstacles(self, obstacles: List[Obstacle]):
        """
        Plot all obstacles.

        Args:
            obstacles: Live obstacle entries; engine-side objects are skipped
        """
        for obs in obstacles:
            if not isinstance(obs, Obstacle):
                continue
            body = obs.as_body()
            if body is not None:
                self.plot_body(body)
            elif isinstance(obs, SphereObstacle):
                self.plot_sphere_obstacle(obs)
            elif isinstance(obs, BoxObstacle):
                self.plot_box_obstacle(obs)

    @property
    def num_obstacle_artists(self) -> int:
        return len(self._obstacle_artists)

    def show(self, block: bool = True):
        """Display the figure."""
        plt.show(block=block)

    def save(self, filename: str, dpi: int = 150):
        """Save figure to file."""
        self.fig.savefig(filename, dpi=dpi, bbox_inches="tight")

    def close(self):
        """Close the figure."""
        plt.close(self.fig)


def compute_axis_limits(
    obstacles: List[Obstacle],
    margin: float = 1.0,
) -> Tuple[Tuple[float, float], Tuple[float, float], Tuple[float, float]]:
    """
    Axis limits enclosing the bounding spheres of all obstacles.

    Args:
        obstacles: Obstacle entries
        margin: Extra space on each side

    Returns:
        (xlim, ylim, zlim)
    """
    obstacles = [obs for obs in obstacles if isinstance(obs, Obstacle)]
    if not obstacles:
        return (-margin, margin), (-margin, margin), (-margin, margin)

    centers = np.array([obs.get_center() for obs in obstacles])
    radii = np.array([obs.get_bounding_radius() for obs in obstacles])
    low = (centers - radii[:, None]).min(axis=0) - margin
    high = (centers + radii[:, None]).max(axis=0) + margin
    return (low[0], high[0]), (low[1], high[1]), (low[2], high[2])


def plot_obstacle_set(
    obstacles: List[Obstacle],
    title: str = "Obstacle Set",
    save_path: Optional[str] = None,
) -> Plotter3D:
    """
    Convenience function to plot a complete obstacle set.

    Args:
        obstacles: Live obstacle entries
        title: Plot title
        save_path: Optional path to save figure

    Returns:
        The plotter, for further drawing or display
    """
    plotter = Plotter3D(title=title)
    plotter.setup_axes(*compute_axis_limits(obstacles))
    plotter.plot_obstacles(obstacles)

    if save_path:
        plotter.save(save_path)

    return plotter
