"""Coin detection using the Hough Circle Transform."""

import logging
from typing import List, Optional

import cv2
import numpy as np

from coindet.config import DetectorConfig
from coindet.detection.suppression import suppress_duplicates
from coindet.geometry.circle import Circle
from coindet.preprocessing.enhancement import ImageEnhancer

logger = logging.getLogger(__name__)


class CircleDetector:
    """Detects coin-like discs in grayscale images."""

    def __init__(self, config: Optional[DetectorConfig] = None):
        self.config = config or DetectorConfig()
        self.enhancer = ImageEnhancer(self.config.gauss_kernel, self.config.gauss_sigma)

    def detect(self, image: np.ndarray) -> List[Circle]:
        """
        Detect circles in a single-channel image.

        Args:
            image: Grayscale uint8 image, ``(h, w)`` or ``(h, w, 1)``

        Returns:
            Circles in search order with overlapping duplicates removed
        """
        if image is None or image.size == 0:
            return []
        if image.ndim == 3 and image.shape[2] == 1:
            image = image[:, :, 0]
        if image.ndim != 2:
            raise ValueError(f"Expected a single-channel image, got shape {image.shape}")

        blurred = self.enhancer.smooth(image)
        candidates = self._search(blurred)
        circles = suppress_duplicates(candidates)

        logger.debug(f"Hough candidates: {len(candidates)}, after suppression: {len(circles)}")
        return circles

    def smooth(self, image: np.ndarray) -> np.ndarray:
        """Return the blurred image the search runs on."""
        return self.enhancer.smooth(image)

    def edges(self, image: np.ndarray) -> np.ndarray:
        """Return the Canny edge map for the configured gradient thresholds."""
        return self.enhancer.edges(image, self.config.canny_low, self.config.canny_high)

    def _search(self, blurred: np.ndarray) -> List[Circle]:
        cfg = self.config
        found = cv2.HoughCircles(blurred, cv2.HOUGH_GRADIENT, cfg.hough_dp, cfg.hough_min_dist,
                                 param1=cfg.hough_param1, param2=cfg.hough_param2,
                                 minRadius=int(cfg.min_radius), maxRadius=int(cfg.max_radius))

        if found is None:
            return []

        # HoughCircles does not report vote counts, so the score is a placeholder.
        return [Circle(float(x), float(y), float(r), 1.0) for x, y, r in found[0, :, :3]]
