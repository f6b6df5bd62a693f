"""Tests for drawing helpers."""

import numpy as np
from coindet.evaluation.matcher import evaluate
from coindet.geometry.circle import Circle
from coindet.utils.visualization import (draw_circles, draw_evaluation, draw_ground_truth,
                                         render_result, to_bgr)


class TestVisualization:
    """Test overlays."""

    def test_to_bgr(self):
        """Gray and BGRA inputs become 3-channel."""
        assert to_bgr(np.zeros((10, 10), dtype=np.uint8)).shape == (10, 10, 3)
        assert to_bgr(np.zeros((10, 10, 4), dtype=np.uint8)).shape == (10, 10, 3)

    def test_draw_circles_does_not_mutate(self):
        """The input image is left untouched."""
        image = np.zeros((100, 100, 3), dtype=np.uint8)
        output = draw_circles(image, [Circle(50, 50, 20)])
        assert image.max() == 0
        assert output.max() > 0

    def test_draw_circles_on_gray(self):
        """Gray images are converted before drawing."""
        output = draw_circles(np.zeros((100, 100), dtype=np.uint8), [Circle(50, 50, 20)])
        assert output.shape == (100, 100, 3)

    def test_draw_ground_truth_degenerate(self):
        """Zero-radius labels draw only a marker."""
        output = draw_ground_truth(np.zeros((50, 50), dtype=np.uint8), [Circle(25, 25, 0)])
        assert output.max() > 0

    def test_draw_evaluation(self):
        """Matched detections are drawn in green."""
        dets = [Circle(50, 50, 20)]
        gts = [Circle(51, 50, 20)]
        outcome = evaluate(dets, gts)
        output = draw_evaluation(np.zeros((120, 120), dtype=np.uint8), dets, gts, outcome)
        assert output[50, 30, 1] == 200

    def test_render_result(self):
        """Without an outcome only detections are drawn."""
        image = np.zeros((80, 80), dtype=np.uint8)
        plain = render_result(image, [Circle(40, 40, 10)])
        assert plain.shape == (80, 80, 3)
