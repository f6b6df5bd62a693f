"""Visualization utilities for debugging and display."""

from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from coindet.evaluation.metrics import MatchOutcome
from coindet.geometry.circle import Circle

DETECTION_COLOR = (0, 0, 255)
CENTER_COLOR = (0, 255, 0)
GROUND_TRUTH_COLOR = (255, 100, 50)
MATCHED_COLOR = (0, 200, 0)


def to_bgr(image: np.ndarray) -> np.ndarray:
    """Return a 3-channel copy of the image for drawing."""
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image.copy()


def _point(c: Circle) -> Tuple[int, int]:
    return (int(round(c.x)), int(round(c.y)))


def draw_circles(image: np.ndarray, circles: Sequence[Circle],
                 color: Tuple[int, int, int] = DETECTION_COLOR,
                 thickness: int = 2) -> np.ndarray:
    """Draw circles with a filled center dot."""
    output = to_bgr(image)
    for c in circles:
        cv2.circle(output, _point(c), int(round(c.radius)), color, thickness)
        cv2.circle(output, _point(c), 2, CENTER_COLOR, -1)
    return output


def draw_dashed_circle(image: np.ndarray, circle: Circle,
                       color: Tuple[int, int, int], thickness: int = 2,
                       dash_degrees: int = 12):
    """Draw a dashed circle outline in place."""
    center = _point(circle)
    radius = max(int(round(circle.radius)), 1)
    for start in range(0, 360, 2 * dash_degrees):
        cv2.ellipse(image, center, (radius, radius), 0, start, start + dash_degrees,
                    color, thickness)


def draw_ground_truth(image: np.ndarray, circles: Sequence[Circle],
                      color: Tuple[int, int, int] = GROUND_TRUTH_COLOR,
                      thickness: int = 2) -> np.ndarray:
    """Draw labeled circles as dashed outlines."""
    output = to_bgr(image)
    for c in circles:
        if c.radius > 0:
            draw_dashed_circle(output, c, color, thickness)
        cv2.drawMarker(output, _point(c), color, cv2.MARKER_CROSS, 8, 1)
    return output


def draw_evaluation(image: np.ndarray, detections: Sequence[Circle],
                    ground_truths: Sequence[Circle], outcome: MatchOutcome,
                    thickness: int = 2) -> np.ndarray:
    """
    Color detections by their match status.

    Matched detections are green, false positives red and missed ground
    truth circles dashed blue. A metrics line is written in the top-left
    corner.
    """
    matched_dets = {d for d, _ in outcome.matches}
    matched_gts = {g for _, g in outcome.matches}

    missed = [gt for i, gt in enumerate(ground_truths) if i not in matched_gts]
    output = draw_ground_truth(image, missed, GROUND_TRUTH_COLOR, thickness)

    for i, det in enumerate(detections):
        color = MATCHED_COLOR if i in matched_dets else DETECTION_COLOR
        cv2.circle(output, _point(det), int(round(det.radius)), color, thickness)
        cv2.circle(output, _point(det), 2, color, -1)

    text = (f"TP={outcome.tp} FP={outcome.fp} FN={outcome.fn} "
            f"P={outcome.precision:.2f} R={outcome.recall:.2f} F1={outcome.f1:.2f}")
    cv2.putText(output, text, (10, 25), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 2)
    return output


def render_result(image: np.ndarray, detections: Sequence[Circle],
                  ground_truths: Optional[Sequence[Circle]] = None,
                  outcome: Optional[MatchOutcome] = None) -> np.ndarray:
    """Pick the evaluation overlay when an outcome exists, else plain detections."""
    if outcome is not None and ground_truths is not None:
        return draw_evaluation(image, detections, ground_truths, outcome)
    return draw_circles(image, detections)
