"""Visualization tools."""

from .plotter_3d import Plotter3D, plot_obstacle_set

__all__ = ["Plotter3D", "plot_obstacle_set"]
