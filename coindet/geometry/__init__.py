"""Geometric value types."""

from .circle import Circle, center_distance, circles_overlap

__all__ = ['Circle', 'center_distance', 'circles_overlap']
