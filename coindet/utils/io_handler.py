"""I/O handling for images, label files, detection reports and JSON output."""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import cv2
import numpy as np

from coindet.evaluation.metrics import MatchOutcome
from coindet.geometry.circle import Circle

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _num(value: float) -> str:
    return f"{value:g}"


def load_labels(path: PathLike) -> List[Circle]:
    """
    Read a label file with one ``cx cy r`` circle per line.

    Blank lines are skipped. Reading stops at the first line that does not
    start with three numbers; circles read before it are kept. A line with
    anything after its three numbers is kept and ends reading.

    Args:
        path: Label file path

    Returns:
        Circles in file order, empty if the file cannot be opened
    """
    circles = []
    try:
        f = open(path, 'r')
    except OSError:
        logger.warning(f"Cannot open label file {path}")
        return circles

    with f:
        for line_no, line in enumerate(f, start=1):
            tokens = line.split()
            if not tokens:
                continue
            try:
                cx, cy, r = (float(t) for t in tokens[:3])
            except ValueError:
                logger.debug(f"Stopped reading {path} at line {line_no}: {line.strip()!r}")
                break
            circles.append(Circle(cx, cy, r))
            if len(tokens) > 3:
                logger.debug(f"Stopped reading {path} after line {line_no}: trailing {tokens[3]!r}")
                break
    return circles


def save_labels(path: PathLike, circles: Sequence[Circle]):
    """Write circles as ``cx cy r`` lines, replacing any existing file."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        for c in circles:
            f.write(f"{_num(c.x)} {_num(c.y)} {_num(c.radius)}\n")


def format_detection_report(detections: Sequence[Circle],
                            outcome: Optional[MatchOutcome] = None) -> str:
    """Human-readable listing of detections and optional evaluation block."""
    lines = [f"Detected circles: {len(detections)}"]
    for i, c in enumerate(detections):
        lines.append(f"{i}: cx={_num(c.x)} cy={_num(c.y)} r={_num(c.radius)}")

    if outcome is not None:
        lines.extend([
            "",
            "=== Evaluation ===",
            f"TP={outcome.tp}",
            f"FP={outcome.fp}",
            f"FN={outcome.fn}",
            f"Precision={_num(outcome.precision)}",
            f"Recall={_num(outcome.recall)}",
            f"F1={_num(outcome.f1)}",
        ])
    return "\n".join(lines) + "\n"


def write_detection_report(path: PathLike, detections: Sequence[Circle],
                           outcome: Optional[MatchOutcome] = None):
    """Write the detection report to ``path``."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        f.write(format_detection_report(detections, outcome))


class JSONWriter:
    """Write evaluation summaries to JSON."""

    @staticmethod
    def save_results(output_dict: Dict, output_path: PathLike, indent: int = 2):
        """Save results to JSON file."""
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(output_dict, f, indent=indent)


def save_image(image: np.ndarray, output_path: PathLike):
    """Save image to file."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    try:
        written = cv2.imwrite(str(output_path), image)
    except cv2.error as e:
        raise IOError(f"Failed to write image to {output_path}: {e}") from e
    if not written:
        raise IOError(f"Failed to write image to {output_path}")


def load_image(image_path: PathLike) -> Optional[np.ndarray]:
    """Load a BGR image from file."""
    return cv2.imread(str(image_path), cv2.IMREAD_COLOR)


def load_grayscale(image_path: PathLike) -> Optional[np.ndarray]:
    """Load an image from file as a single-channel array."""
    return cv2.imread(str(image_path), cv2.IMREAD_GRAYSCALE)
