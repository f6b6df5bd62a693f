"""Performance metrics and evaluation."""

from dataclasses import dataclass
from time import perf_counter
from typing import Dict, Tuple


@dataclass(frozen=True)
class MatchOutcome:
    """TP/FP/FN counts for one detection set scored against one ground truth set.

    ``matches`` holds ``(detection_index, ground_truth_index)`` pairs.
    """

    tp: int = 0
    fp: int = 0
    fn: int = 0
    matches: Tuple[Tuple[int, int], ...] = ()

    @property
    def precision(self) -> float:
        return self.tp / (self.tp + self.fp) if (self.tp + self.fp) > 0 else 0.0

    @property
    def recall(self) -> float:
        return self.tp / (self.tp + self.fn) if (self.tp + self.fn) > 0 else 0.0

    @property
    def f1(self) -> float:
        p, r = self.precision, self.recall
        return 2 * p * r / (p + r) if (p + r) > 0 else 0.0

    def __add__(self, other: 'MatchOutcome') -> 'MatchOutcome':
        if not isinstance(other, MatchOutcome):
            return NotImplemented
        # Indices are per image, so pooled totals drop the bindings.
        return MatchOutcome(self.tp + other.tp, self.fp + other.fp, self.fn + other.fn)

    def to_dict(self) -> Dict[str, float]:
        return {
            'tp': self.tp,
            'fp': self.fp,
            'fn': self.fn,
            'precision': self.precision,
            'recall': self.recall,
            'f1_score': self.f1
        }


class PerformanceMetrics:
    """Track performance metrics."""

    def __init__(self):
        self.start_times = {}
        self.durations = {}

    def start_timer(self, name: str):
        """Start timing an operation."""
        self.start_times[name] = perf_counter()

    def stop_timer(self, name: str) -> float:
        """Stop timing and return duration in milliseconds."""
        if name not in self.start_times:
            return 0.0
        duration = (perf_counter() - self.start_times.pop(name)) * 1000
        self.durations[name] = duration
        return duration
