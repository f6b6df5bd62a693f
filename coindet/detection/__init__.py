"""Circle detection pipeline."""

from .circle_detector import CircleDetector
from .suppression import suppress_duplicates

__all__ = ['CircleDetector', 'suppress_duplicates']
