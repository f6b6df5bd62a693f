"""Interactive ground truth label editor built on OpenCV HighGUI."""

import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence, Union

import cv2
import numpy as np

from coindet.detection.circle_detector import CircleDetector
from coindet.geometry.circle import Circle
from coindet.preprocessing.enhancement import to_grayscale
from coindet.utils.io_handler import load_image, load_labels, save_labels
from coindet.utils.visualization import draw_dashed_circle, to_bgr

logger = logging.getLogger(__name__)

DEFAULT_RADIUS = 40.0
HIT_TOLERANCE_PX = 10.0

MOVE = 'move'
RESIZE = 'resize'

KEY_ESCAPE = 27
KEY_DELETE = (0x2E0000, 0xFFFF, 127)


def labels_path_for(image_path: Union[str, Path]) -> Path:
    """Default label file for an image: ``<stem>_labels.txt`` beside it."""
    image_path = Path(image_path)
    return image_path.parent / f"{image_path.stem}_labels.txt"


class LabelSession:
    """Editing state for one image's ground truth circles."""

    def __init__(self, circles: Sequence[Circle] = (), labels_path: Optional[Path] = None,
                 hit_tolerance: float = HIT_TOLERANCE_PX):
        self.circles: List[Circle] = list(circles)
        self.labels_path = labels_path
        self.hit_tolerance = hit_tolerance
        self.active = 0 if self.circles else -1
        self.mode: Optional[str] = None
        self.detections: List[Circle] = []
        self.dirty = False

    def _hits_center(self, c: Circle, x: float, y: float) -> bool:
        return np.hypot(c.x - x, c.y - y) <= self.hit_tolerance

    def hit_test(self, x: float, y: float) -> int:
        """Index of the circle under the cursor, centers before rims, newest first."""
        for i in range(len(self.circles) - 1, -1, -1):
            if self._hits_center(self.circles[i], x, y):
                return i
        for i in range(len(self.circles) - 1, -1, -1):
            c = self.circles[i]
            if abs(np.hypot(c.x - x, c.y - y) - c.radius) <= self.hit_tolerance:
                return i
        return -1

    def press(self, x: float, y: float):
        """Select the circle under the cursor and start a move or resize."""
        self.active = self.hit_test(x, y)
        if self.active < 0:
            self.mode = None
        elif self._hits_center(self.circles[self.active], x, y):
            self.mode = MOVE
        else:
            self.mode = RESIZE

    def drag(self, x: float, y: float):
        if self.active < 0 or self.mode is None:
            return
        c = self.circles[self.active]
        if self.mode == MOVE:
            self.circles[self.active] = replace(c, x=float(x), y=float(y))
        else:
            radius = max(1.0, float(np.hypot(c.x - x, c.y - y)))
            self.circles[self.active] = replace(c, radius=radius)
        self.dirty = True

    def release(self):
        self.mode = None

    def add(self, x: float, y: float, radius: float = DEFAULT_RADIUS):
        """Append a circle at the cursor and select it."""
        self.circles.append(Circle(float(x), float(y), radius))
        self.active = len(self.circles) - 1
        self.dirty = True

    def delete_active(self) -> bool:
        if not 0 <= self.active < len(self.circles):
            return False
        del self.circles[self.active]
        self.active = min(self.active, len(self.circles) - 1)
        self.dirty = True
        return True

    def set_detections(self, circles: Sequence[Circle]):
        """Show detector output as an overlay; it is never saved."""
        self.detections = list(circles)

    def save(self) -> Path:
        if self.labels_path is None:
            raise ValueError("No label file set for this session")
        save_labels(self.labels_path, self.circles)
        self.dirty = False
        return self.labels_path

    def render(self, image: np.ndarray) -> np.ndarray:
        """Draw labels (active one green) and the detection overlay."""
        output = to_bgr(image)
        for det in self.detections:
            draw_dashed_circle(output, det, (255, 100, 50), 2)
        for i, c in enumerate(self.circles):
            color = (0, 255, 0) if i == self.active else (0, 0, 255)
            center = (int(round(c.x)), int(round(c.y)))
            cv2.circle(output, center, max(int(round(c.radius)), 0), color, 2)
            cv2.circle(output, center, 3, color if i == self.active else (255, 0, 0), -1)
        return output


class LabelEditor:
    """
    HighGUI window around a LabelSession.

    Left drag moves a circle by its center or resizes it by its rim, right
    click adds a circle, ``d``/Delete removes the selection, ``s`` saves,
    ``r`` overlays detector output and ``q``/Esc quits.
    """

    WINDOW = 'coindet label editor'

    def __init__(self, image_path: Union[str, Path],
                 labels_path: Optional[Union[str, Path]] = None,
                 detector: Optional[CircleDetector] = None):
        self.image_path = Path(image_path)
        self.image = load_image(self.image_path)
        if self.image is None:
            raise ValueError(f"Failed to load image from {image_path}")

        path = Path(labels_path) if labels_path is not None else labels_path_for(image_path)
        circles = load_labels(path) if path.exists() else []
        self.session = LabelSession(circles, path)
        self.detector = detector or CircleDetector()

    def _on_mouse(self, event, x, y, flags, param):
        if event == cv2.EVENT_LBUTTONDOWN:
            self.session.press(x, y)
        elif event == cv2.EVENT_MOUSEMOVE and flags & cv2.EVENT_FLAG_LBUTTON:
            self.session.drag(x, y)
        elif event == cv2.EVENT_LBUTTONUP:
            self.session.release()
        elif event == cv2.EVENT_RBUTTONDOWN:
            self.session.add(x, y)

    def handle_key(self, key: int) -> bool:
        """Apply a key press; returns False when the editor should close."""
        if key in (ord('q'), KEY_ESCAPE):
            return False
        if key == ord('d') or key in KEY_DELETE:
            self.session.delete_active()
        elif key == ord('s'):
            path = self.session.save()
            logger.info(f"Saved {len(self.session.circles)} labels to {path}")
        elif key == ord('r'):
            self.session.set_detections(self.detector.detect(to_grayscale(self.image)))
            logger.info(f"Detector found {len(self.session.detections)} circles")
        return True

    def run(self):
        cv2.namedWindow(self.WINDOW, cv2.WINDOW_AUTOSIZE)
        cv2.setMouseCallback(self.WINDOW, self._on_mouse)
        logger.info("Right click adds a circle. Drag to move/resize. d deletes. s saves. q quits.")
        try:
            while True:
                cv2.imshow(self.WINDOW, self.session.render(self.image))
                key = cv2.waitKeyEx(20)
                if key == -1:
                    continue
                if not self.handle_key(key if key in KEY_DELETE else key & 0xFF):
                    break
        finally:
            cv2.destroyWindow(self.WINDOW)
        if self.session.dirty:
            logger.warning("Closed with unsaved label changes")
