"""Visualization of geometry entities."""

from .plot3d import GeometryPlotter, quick_plot

__all__ = [
    'GeometryPlotter',
    'quick_plot',
]
