import cv2
import numpy as np
import pytest

FRAME_SHAPE = (240, 320, 3)

# Pure green sits inside the tuned HLS range: H=60, L=128, S=255
TAPE_COLOR = (0, 255, 0)


def draw_strip(frame, center, size=(20, 60), angle=0.0, color=TAPE_COLOR):
    """
    Fill a rotated strip, angle in degrees clockwise on screen.

    The tuned 7x7 box blur eats about 4 px off every edge before the
    luminance threshold, so strips are drawn wider than real tape.
    """
    box = cv2.boxPoints((center, size, angle))
    cv2.fillPoly(frame, [np.round(box).astype(np.int32)], color)
    return frame


def make_frame(strips=()):
    """Black 320x240 frame with the given (center, angle) strips drawn on it."""
    frame = np.zeros(FRAME_SHAPE, dtype=np.uint8)
    for center, angle in strips:
        draw_strip(frame, center, angle=angle)
    return frame


@pytest.fixture
def black_frame():
    return make_frame()


@pytest.fixture
def target_frame():
    """One goal target: left strip leans right at the top, right strip leans left."""
    return make_frame([((90, 120), 15.0), ((170, 120), -15.0)])
