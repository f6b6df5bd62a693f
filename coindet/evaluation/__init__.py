"""Scoring detections against ground truth."""

from .matcher import Evaluator, evaluate, evaluate_optimal
from .metrics import MatchOutcome, PerformanceMetrics

__all__ = ['Evaluator', 'evaluate', 'evaluate_optimal',
           'MatchOutcome', 'PerformanceMetrics']
