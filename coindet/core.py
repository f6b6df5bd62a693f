"""
coindet Core Processor
Main entry point for coin detection and evaluation
"""

import itertools
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from coindet.config import DetectorConfig, EvaluatorConfig
from coindet.detection.circle_detector import CircleDetector
from coindet.evaluation.matcher import Evaluator
from coindet.evaluation.metrics import MatchOutcome, PerformanceMetrics
from coindet.geometry.circle import Circle
from coindet.preprocessing.enhancement import to_grayscale
from coindet.utils.io_handler import load_image, load_labels, save_image, write_detection_report
from coindet.utils.visualization import render_result

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png')
OUTPUT_SUFFIX = '_detected'


@dataclass
class ImageResult:
    """Detections and optional score for one image."""

    image_id: str
    detections: List[Circle]
    elapsed_ms: float
    ground_truths: Optional[List[Circle]] = None
    outcome: Optional[MatchOutcome] = None
    source: Optional[Path] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'image_id': self.image_id,
            'detections': [list(c.as_tuple()) for c in self.detections],
            'processing_time_ms': round(self.elapsed_ms, 2),
        }
        if self.outcome is not None:
            result['evaluation'] = self.outcome.to_dict()
        return result


@dataclass
class BatchResult:
    """Per-image results plus pooled counts over images with ground truth."""

    images: List[ImageResult] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    total: MatchOutcome = field(default_factory=MatchOutcome)
    evaluated: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'images': [r.to_dict() for r in self.images],
            'skipped': [str(p) for p in self.skipped],
            'evaluated_images': self.evaluated,
            'total': self.total.to_dict(),
        }


def ground_truth_path(image_path: Path) -> Path:
    """Label file paired with an image in batch mode: same stem, ``.txt``."""
    return image_path.with_suffix('.txt')


def output_paths(image_path: Path, output_dir: Optional[Path] = None):
    """Visualization and report paths written for an image."""
    folder = Path(output_dir) if output_dir is not None else image_path.parent
    stem = image_path.stem + OUTPUT_SUFFIX
    return folder / f"{stem}.png", folder / f"{stem}.txt"


def list_images(folder: Path) -> List[Path]:
    """Images in a folder, sorted, excluding previously written outputs."""
    images = []
    for path in sorted(Path(folder).iterdir()):
        if not path.is_file() or path.suffix.lower() not in IMAGE_EXTENSIONS:
            continue
        if path.stem.endswith(OUTPUT_SUFFIX):
            continue
        images.append(path)
    return images


class CoinProcessor:
    """Runs detection and evaluation over single images and folders."""

    def __init__(self, detector_config: Optional[DetectorConfig] = None,
                 evaluator_config: Optional[EvaluatorConfig] = None):
        """
        Initialize processor

        Args:
            detector_config: Detector tuning (defaults if omitted)
            evaluator_config: Matching tolerances (defaults if omitted)
        """
        self.detector = CircleDetector(detector_config)
        self.evaluator = Evaluator.from_config(evaluator_config)
        self.metrics = PerformanceMetrics()
        self._array_ids = itertools.count(1)

    def process_image(self, image_input: Union[str, Path, np.ndarray],
                      ground_truths: Optional[Sequence[Circle]] = None) -> ImageResult:
        """
        Detect coins in one image and score them when ground truth is given.

        Args:
            image_input: Path to image file or numpy array
            ground_truths: Labeled circles for this image

        Returns:
            ImageResult with detections, timing and optional MatchOutcome
        """
        source = None
        if isinstance(image_input, (str, Path)):
            source = Path(image_input)
            image = load_image(source)
            image_id = source.stem
            if image is None:
                raise ValueError(f"Failed to load image from {image_input}")
        else:
            image = image_input
            image_id = f"image_{int(time.time())}_{next(self._array_ids)}"

        gray = to_grayscale(image)

        self.metrics.start_timer('detect')
        detections = self.detector.detect(gray)
        elapsed_ms = self.metrics.stop_timer('detect')

        outcome = None
        if ground_truths is not None:
            ground_truths = list(ground_truths)
            outcome = self.evaluator.evaluate(detections, ground_truths)

        return ImageResult(image_id, detections, elapsed_ms, ground_truths, outcome, source)

    def process_file(self, image_path: Union[str, Path],
                     gt_path: Optional[Union[str, Path]] = None) -> ImageResult:
        """Process an image file, scoring it if ``gt_path`` exists."""
        ground_truths = None
        if gt_path is not None:
            if Path(gt_path).exists():
                ground_truths = load_labels(gt_path)
            else:
                logger.warning(f"Ground truth file not found: {gt_path}")
        return self.process_image(image_path, ground_truths)

    def process_batch(self, folder: Union[str, Path],
                      output_dir: Optional[Union[str, Path]] = None,
                      save: bool = True) -> BatchResult:
        """
        Process every image in a folder.

        Images with a matching ``<stem>.txt`` label file are scored and pooled
        into the batch total. Unreadable images are skipped.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(f"Not a directory: {folder}")

        batch = BatchResult()
        image_files = list_images(folder)
        logger.info(f"Processing {len(image_files)} images in {folder}")

        for i, image_path in enumerate(image_files):
            logger.info(f"Processing image {i + 1}/{len(image_files)}: {image_path.name}")
            gt_path = ground_truth_path(image_path)
            try:
                result = self.process_file(image_path, gt_path if gt_path.exists() else None)
            except ValueError as e:
                logger.warning(str(e))
                batch.skipped.append(image_path)
                continue

            if save:
                self.save_outputs(result, output_dir=output_dir)

            batch.images.append(result)
            if result.outcome is not None:
                batch.total = batch.total + result.outcome
                batch.evaluated += 1

        return batch

    def save_outputs(self, result: ImageResult, image: Optional[np.ndarray] = None,
                     output_dir: Optional[Union[str, Path]] = None):
        """
        Write the visualization and text report for a processed image.

        Args:
            result: Result of process_image / process_file
            image: Image to draw on; reloaded from ``result.source`` if omitted
            output_dir: Target folder, the image's folder by default

        Returns:
            Tuple of (visualization path, report path)
        """
        if result.source is None and output_dir is None:
            raise ValueError("output_dir is required for images not loaded from disk")

        base = result.source if result.source is not None else Path(f"{result.image_id}.png")
        vis_path, report_path = output_paths(base, output_dir)

        if image is None:
            if result.source is None:
                raise ValueError("image is required for results not loaded from disk")
            image = load_image(result.source)
            if image is None:
                raise ValueError(f"Failed to load image from {result.source}")

        save_image(render_result(image, result.detections, result.ground_truths, result.outcome),
                   vis_path)
        write_detection_report(report_path, result.detections, result.outcome)
        logger.debug(f"Saved {vis_path} and {report_path}")
        return vis_path, report_path
