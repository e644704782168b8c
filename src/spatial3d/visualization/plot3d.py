"""
Matplotlib-based 3D visualization of geometry entities.
"""

from __future__ import annotations
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt

from ..geometry import (
    Circle3D,
    CoordinateSystem3D,
    Line3D,
    LineSegment3D,
    Plane3D,
    Point3D,
    PolyLine3D,
    Ray3D,
)


class GeometryPlotter:
    """
    3D entity visualization using matplotlib.

    Each ``plot_*`` call draws onto the current figure (created on first
    use) and returns it, so several entities can be layered.
    """

    def __init__(self, figsize: Tuple[float, float] = (10, 8)):
        """
        Initialize plotter.

        Args:
            figsize: Figure size (width, height) in inches
        """
        self.figsize = figsize
        self.fig = None
        self.ax = None

    def _setup_figure(self, title: str = ""):
        """Create figure and 3D axis."""
        self.fig = plt.figure(figsize=self.figsize)
        self.ax = self.fig.add_subplot(projection='3d')
        self.ax.set_xlabel('X')
        self.ax.set_ylabel('Y')
        self.ax.set_zlabel('Z')
        if title:
            self.ax.set_title(title, fontsize=14, fontweight='bold')

    def _axis(self):
        if self.ax is None:
            self._setup_figure()
        return self.ax

    @staticmethod
    def _xyz(points: Sequence[Point3D]):
        arr = np.array([p.to_array() for p in points], dtype=np.float64).reshape(-1, 3)
        return arr[:, 0], arr[:, 1], arr[:, 2]

    def plot_points(self, points: Iterable[Point3D], color: str = 'k', label: Optional[str] = None) -> plt.Figure:
        """Scatter plot of points."""
        ax = self._axis()
        ax.scatter(*self._xyz(list(points)), color=color, s=20, label=label)
        return self.fig

    def plot_segment(self, segment, color: str = 'C0', label: Optional[str] = None) -> plt.Figure:
        """Line3D or LineSegment3D between its two defining points."""
        ax = self._axis()
        ax.plot(*self._xyz([segment.start_point, segment.end_point]), color=color, linewidth=2, label=label)
        return self.fig

    def plot_polyline(self, polyline: PolyLine3D, color: str = 'C1',
                      show_vertices: bool = True, label: Optional[str] = None) -> plt.Figure:
        """Polyline with optional vertex markers."""
        ax = self._axis()
        marker = 'o' if show_vertices else ''
        ax.plot(*self._xyz(polyline.vertices), color=color, linewidth=2,
                marker=marker, markersize=4, label=label)
        return self.fig

    def plot_circle(self, circle: Circle3D, color: str = 'C2',
                    n_samples: int = 100, label: Optional[str] = None) -> plt.Figure:
        """
        Circle sampled in the plane normal to its axis.

        Args:
            circle: Circle to draw
            n_samples: Number of points around the circumference
        """
        u = circle.axis.orthogonal
        v = circle.axis.cross(u)
        theta = np.linspace(0.0, 2.0 * np.pi, n_samples)
        center = circle.center_point.to_array()
        pts = (center[None, :]
               + circle.radius * np.cos(theta)[:, None] * u.to_array()[None, :]
               + circle.radius * np.sin(theta)[:, None] * v.to_array()[None, :])
        ax = self._axis()
        ax.plot(pts[:, 0], pts[:, 1], pts[:, 2], color=color, linewidth=2, label=label)
        return self.fig

    def plot_ray(self, ray: Ray3D, length: float = 1.0, color: str = 'C3',
                 label: Optional[str] = None) -> plt.Figure:
        """Ray drawn as an arrow of ``length`` from its through point."""
        ax = self._axis()
        p = ray.through_point
        d = ray.direction
        ax.quiver(p.x, p.y, p.z, d.x, d.y, d.z, length=length, color=color, label=label)
        return self.fig

    def plot_plane(self, plane: Plane3D, size: float = 1.0, color: str = 'C4',
                   alpha: float = 0.3) -> plt.Figure:
        """Square patch of side ``2 * size`` centred on the plane's root point."""
        u = plane.normal.orthogonal
        v = plane.normal.cross(u)
        s = np.linspace(-size, size, 2)
        S, T = np.meshgrid(s, s)
        root = plane.root_point.to_array()
        X = root[0] + S * u.x + T * v.x
        Y = root[1] + S * u.y + T * v.y
        Z = root[2] + S * u.z + T * v.z
        ax = self._axis()
        ax.plot_surface(X, Y, Z, color=color, alpha=alpha)
        return self.fig

    def plot_frame(self, frame: CoordinateSystem3D, scale: float = 1.0) -> plt.Figure:
        """Axis triad (x red, y green, z blue) at the frame origin."""
        ax = self._axis()
        o = frame.origin
        for axis, color in zip((frame.x_axis, frame.y_axis, frame.z_axis), ('r', 'g', 'b')):
            ax.quiver(o.x, o.y, o.z, axis.x, axis.y, axis.z, length=scale, color=color)
        return self.fig

    def plot(self, entities, title: str = "Geometry") -> plt.Figure:
        """
        Plot a collection of entities on a new figure.

        Args:
            entities: Iterable of entities, or a mapping name -> entity
            title: Plot title

        Returns:
            Matplotlib figure
        """
        self._setup_figure(title)
        items = entities.items() if hasattr(entities, 'items') else ((None, e) for e in entities)
        for name, entity in items:
            if isinstance(entity, Point3D):
                self.plot_points([entity], label=name)
            elif isinstance(entity, (Line3D, LineSegment3D)):
                self.plot_segment(entity, label=name)
            elif isinstance(entity, PolyLine3D):
                self.plot_polyline(entity, label=name)
            elif isinstance(entity, Circle3D):
                self.plot_circle(entity, label=name)
            elif isinstance(entity, Ray3D):
                self.plot_ray(entity, label=name)
            elif isinstance(entity, Plane3D):
                self.plot_plane(entity)
            elif isinstance(entity, CoordinateSystem3D):
                self.plot_frame(entity)
            else:
                raise TypeError(f"Cannot plot {type(entity).__name__}")
        return self.fig

    def save(self, filepath: str | Path, dpi: int = 150) -> Path:
        """Save the current figure."""
        if self.fig is None:
            raise RuntimeError("Nothing has been plotted yet")
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        self.fig.savefig(filepath, dpi=dpi, bbox_inches='tight')
        return filepath

    def close(self):
        """Close the current figure."""
        if self.fig is not None:
            plt.close(self.fig)
        self.fig = None
        self.ax = None


def quick_plot(entities, title: str = "Geometry") -> plt.Figure:
    """Quick plot of entities."""
    plotter = GeometryPlotter()
    return plotter.plot(entities, title=title)
