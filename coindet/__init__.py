"""
coindet - coin detection and detection scoring

Hough-based circle detection with greedy ground truth matching.
"""

__version__ = '1.0.0'

from .config import DetectorConfig, EvaluatorConfig
from .geometry.circle import Circle
from .detection.circle_detector import CircleDetector
from .evaluation.matcher import Evaluator, evaluate, evaluate_optimal
from .evaluation.metrics import MatchOutcome

__all__ = [
    'Circle', 'CircleDetector', 'DetectorConfig', 'EvaluatorConfig',
    'Evaluator', 'MatchOutcome', 'evaluate', 'evaluate_optimal',
]
