"""Shared fixtures: synthetic coin images."""

import cv2
import numpy as np
import pytest

from coindet.geometry.circle import Circle

COINS = [
    Circle(100.0, 100.0, 30.0),
    Circle(270.0, 120.0, 40.0),
    Circle(170.0, 280.0, 50.0),
]


def draw_coins(circles, shape=(400, 400), background=10, foreground=250):
    """Filled discs on a flat background."""
    image = np.full(shape, background, dtype=np.uint8)
    for c in circles:
        cv2.circle(image, (int(c.x), int(c.y)), int(c.radius), foreground, -1)
    return image


@pytest.fixture
def coins():
    return list(COINS)


@pytest.fixture
def coin_image():
    return draw_coins(COINS)


@pytest.fixture
def coin_drawer():
    return draw_coins
