"""Image preparation ahead of circle search."""

import cv2
import numpy as np


def odd_kernel_size(kernel_size: int) -> int:
    """Round a kernel size up to the next odd value, minimum 3."""
    k = int(kernel_size) | 1
    return max(k, 3)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert a BGR or BGRA image to single channel; gray passes through."""
    if image.ndim == 2:
        return image
    channels = image.shape[2]
    if channels == 1:
        return image[:, :, 0]
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


class ImageEnhancer:
    """Gaussian smoothing and edge extraction for grayscale images."""

    def __init__(self, kernel_size: int = 9, sigma: float = 2.0):
        """
        Initialize image enhancer.

        Args:
            kernel_size: Gaussian kernel size, forced odd and at least 3
            sigma: Gaussian standard deviation
        """
        self.kernel_size = odd_kernel_size(kernel_size)
        self.sigma = sigma

    def smooth(self, gray: np.ndarray) -> np.ndarray:
        """Suppress texture and noise before the gradient search."""
        k = self.kernel_size
        return cv2.GaussianBlur(gray, (k, k), self.sigma)

    def edges(self, gray: np.ndarray, low: int = 100, high: int = 200) -> np.ndarray:
        """Canny edge map of the smoothed image."""
        return cv2.Canny(self.smooth(gray), low, high)
