"""Matching detected circles to ground truth circles."""

from typing import Optional, Sequence

import numpy as np
from scipy.optimize import linear_sum_assignment

from coindet.config import EvaluatorConfig
from coindet.evaluation.metrics import MatchOutcome
from coindet.geometry.circle import Circle, center_distance

# Cost assigned to ineligible pairs in the optimal assignment.
_FORBIDDEN = 1e9


def is_eligible(detection: Circle, ground_truth: Circle, match_tolerance_px: float,
                radius_tolerance: float) -> bool:
    """
    Check whether a detection may be credited against a ground truth circle.

    A ground truth circle with a non-positive radius never matches.
    """
    if not ground_truth.radius > 0:
        return False
    if center_distance(detection, ground_truth) > match_tolerance_px:
        return False
    radius_error = abs(detection.radius - ground_truth.radius) / ground_truth.radius
    return radius_error <= radius_tolerance


def evaluate(detections: Sequence[Circle], ground_truths: Sequence[Circle],
             match_tolerance_px: float = 20.0, radius_tolerance: float = 0.4) -> MatchOutcome:
    """
    Greedy one-pass matching of detections against ground truth.

    Detections are visited in the given order. Each one claims the nearest
    unused eligible ground truth circle, ties going to the earliest in
    ground truth order. The result depends on input order.

    Args:
        detections: Detected circles
        ground_truths: Labeled circles
        match_tolerance_px: Maximum center distance in pixels
        radius_tolerance: Maximum relative radius error

    Returns:
        MatchOutcome with TP/FP/FN counts and the detection-to-truth bindings
    """
    used = [False] * len(ground_truths)
    matches = []
    tp = fp = 0

    for det_idx, det in enumerate(detections):
        best_idx = -1
        best_dist = float('inf')
        for gt_idx, gt in enumerate(ground_truths):
            if used[gt_idx]:
                continue
            if not is_eligible(det, gt, match_tolerance_px, radius_tolerance):
                continue
            dist = center_distance(det, gt)
            if dist < best_dist:
                best_dist = dist
                best_idx = gt_idx

        if best_idx >= 0:
            used[best_idx] = True
            matches.append((det_idx, best_idx))
            tp += 1
        else:
            fp += 1

    fn = used.count(False)
    return MatchOutcome(tp, fp, fn, tuple(matches))


def evaluate_optimal(detections: Sequence[Circle], ground_truths: Sequence[Circle],
                     match_tolerance_px: float = 20.0,
                     radius_tolerance: float = 0.4) -> MatchOutcome:
    """
    Minimum-cost one-to-one matching under the same eligibility rules.

    Maximizes the number of matched pairs, then minimizes their summed
    center distance. Unlike :func:`evaluate` the result does not depend on
    input order, so counts can differ from the greedy matcher on ambiguous
    scenes.
    """
    n_det, n_gt = len(detections), len(ground_truths)
    if n_det == 0 or n_gt == 0:
        return MatchOutcome(0, n_det, n_gt)

    cost = np.full((n_det, n_gt), _FORBIDDEN)
    for i, det in enumerate(detections):
        for j, gt in enumerate(ground_truths):
            if is_eligible(det, gt, match_tolerance_px, radius_tolerance):
                cost[i, j] = center_distance(det, gt)

    rows, cols = linear_sum_assignment(cost)
    matches = [(int(i), int(j)) for i, j in zip(rows, cols) if cost[i, j] < _FORBIDDEN]
    tp = len(matches)
    return MatchOutcome(tp, n_det - tp, n_gt - tp, tuple(sorted(matches)))


class Evaluator:
    """Scores detections with fixed tolerances."""

    def __init__(self, match_tolerance_px: float = 20.0, radius_tolerance: float = 0.4):
        """
        Args:
            match_tolerance_px: Maximum center distance to count as a match
            radius_tolerance: Relative radius tolerance, e.g. 0.3 for 30%
        """
        self.match_tolerance_px = match_tolerance_px
        self.radius_tolerance = radius_tolerance

    @classmethod
    def from_config(cls, config: Optional[EvaluatorConfig] = None) -> 'Evaluator':
        config = config or EvaluatorConfig()
        return cls(config.match_tolerance_px, config.radius_tolerance)

    def evaluate(self, detections: Sequence[Circle],
                 ground_truths: Sequence[Circle]) -> MatchOutcome:
        """Greedy order-dependent matching, see :func:`evaluate`."""
        return evaluate(detections, ground_truths,
                        self.match_tolerance_px, self.radius_tolerance)

    def evaluate_optimal(self, detections: Sequence[Circle],
                         ground_truths: Sequence[Circle]) -> MatchOutcome:
        """Order-independent assignment, see :func:`evaluate_optimal`."""
        return evaluate_optimal(detections, ground_truths,
                                self.match_tolerance_px, self.radius_tolerance)

