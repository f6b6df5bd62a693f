"""Circle value type shared by detection, evaluation and I/O."""

import math
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Circle:
    """A disc in image coordinates.

    ``score`` is the detector confidence. Hough detections carry a fixed 1.0;
    circles read from label files carry the same default.
    """

    x: float
    y: float
    radius: float
    score: float = 1.0

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def as_tuple(self) -> Tuple[float, float, float]:
        """Return ``(cx, cy, r)`` as written to label files."""
        return (self.x, self.y, self.radius)


def center_distance(a: Circle, b: Circle) -> float:
    """Euclidean distance between two circle centers."""
    return math.hypot(a.x - b.x, a.y - b.y)


def circles_overlap(a: Circle, b: Circle) -> bool:
    """True when the centers are closer than half the smaller radius."""
    return center_distance(a, b) < 0.5 * min(a.radius, b.radius)
