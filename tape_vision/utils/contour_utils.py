"""
Contour Utility Module

This module extracts contours from a binary tape mask, filters them by
geometric acceptance criteria and fits rotated rectangles to the survivors.
"""

import math
from dataclasses import dataclass

import cv2
import numpy as np


# Tuned acceptance policy, everything but area and solidity is left open
DEFAULT_CONTOUR_FILTER_CONFIG = {
    "min_area": 20.0,
    "min_perimeter": 0.0,
    "min_width": 0.0,
    "max_width": 1000.0,
    "min_height": 0.0,
    "max_height": 1000.0,
    "solidity": [60.251798561151084, 100.0],
    "min_vertices": 0.0,
    "max_vertices": 1000000.0,
    "min_ratio": 0.0,
    "max_ratio": 1000.0,
}


@dataclass(frozen=True)
class RotatedRect:
    """
    Minimal enclosing rectangle of a tape contour.

    height is always the long side. angle is the clockwise rotation (as seen
    on screen) of the long axis away from vertical, in degrees in [0, 360):
    a strip leaning right at the top reports a small angle, a strip leaning
    left reports an angle just below 360.
    """

    center_x: float
    center_y: float
    width: float
    height: float
    angle: float


def find_contours(mask, external_only=True):
    """
    Find the boundaries of the set regions of a binary mask.

    Args:
        mask: Binary mask (uint8)
        external_only: Only return outer boundaries, skipping holes

    Returns:
        List of contours, each an (N, 1, 2) point array
    """
    mode = cv2.RETR_EXTERNAL if external_only else cv2.RETR_LIST
    contours, _ = cv2.findContours(mask, mode, cv2.CHAIN_APPROX_SIMPLE)
    return list(contours)


class ContourFilter:
    """Rejects contours that do not look like a strip of tape."""

    def __init__(self, config=None):
        """
        Initialize contour filter.

        Args:
            config: Optional dict overriding DEFAULT_CONTOUR_FILTER_CONFIG entries
        """
        cfg = dict(DEFAULT_CONTOUR_FILTER_CONFIG)
        cfg.update(config or {})

        self.min_area = cfg["min_area"]
        self.min_perimeter = cfg["min_perimeter"]
        self.min_width = cfg["min_width"]
        self.max_width = cfg["max_width"]
        self.min_height = cfg["min_height"]
        self.max_height = cfg["max_height"]
        self.min_solidity, self.max_solidity = cfg["solidity"]
        self.min_vertices = cfg["min_vertices"]
        self.max_vertices = cfg["max_vertices"]
        self.min_ratio = cfg["min_ratio"]
        self.max_ratio = cfg["max_ratio"]

    def failed_checks(self, contour):
        """
        Evaluate every acceptance criterion on a contour.

        Args:
            contour: Point array from find_contours

        Returns:
            List of the names of the failed checks, empty if accepted
        """
        failed = []

        _, _, width, height = cv2.boundingRect(contour)
        if width < self.min_width or width > self.max_width:
            failed.append("width")
        if height < self.min_height or height > self.max_height:
            failed.append("height")

        area = cv2.contourArea(contour)
        if area < self.min_area:
            failed.append("area")

        if cv2.arcLength(contour, True) < self.min_perimeter:
            failed.append("perimeter")

        hull_area = cv2.contourArea(cv2.convexHull(contour))
        if hull_area <= 0:
            failed.append("solidity")
        else:
            solidity = 100 * area / hull_area
            if solidity < self.min_solidity or solidity > self.max_solidity:
                failed.append("solidity")

        vertices = len(contour)
        if vertices < self.min_vertices or vertices > self.max_vertices:
            failed.append("vertices")

        if height <= 0:
            failed.append("ratio")
        else:
            ratio = width / float(height)
            if ratio < self.min_ratio or ratio > self.max_ratio:
                failed.append("ratio")

        return failed

    def accepts(self, contour):
        return not self.failed_checks(contour)

    def filter(self, contours, logger=None):
        """
        Keep the contours that pass every check, in input order.

        Args:
            contours: List of contours
            logger: Optional logger for rejected contours

        Returns:
            List of accepted contours
        """
        accepted = []
        for index, contour in enumerate(contours):
            failed = self.failed_checks(contour)
            if failed:
                if logger:
                    logger.debug(f"Contour {index} rejected: {', '.join(failed)}")
                continue
            accepted.append(contour)

        return accepted


def fit_rotated_rect(contour):
    """
    Fit the minimal-area rotated rectangle around a contour.

    The corner points from cv2.boxPoints are used to express the rectangle
    in the RotatedRect convention, whatever angle range the installed
    OpenCV version reports.

    Args:
        contour: Point array from find_contours

    Returns:
        RotatedRect, or None for a degenerate contour (fewer than 3 points
        or zero width or height)
    """
    points = np.asarray(contour, dtype=np.float32).reshape(-1, 2)
    if len(points) < 3:
        return None

    rect = cv2.minAreaRect(points)
    (center_x, center_y) = rect[0]
    box = cv2.boxPoints(rect)

    edge_a = box[1] - box[0]
    edge_b = box[2] - box[1]
    length_a = float(np.hypot(edge_a[0], edge_a[1]))
    length_b = float(np.hypot(edge_b[0], edge_b[1]))

    if length_a >= length_b:
        long_edge, height, width = edge_a, length_a, length_b
    else:
        long_edge, height, width = edge_b, length_b, length_a

    if height <= 0 or width <= 0:
        return None

    # Point the long axis upwards (image y grows downwards)
    dx, dy = float(long_edge[0]), float(long_edge[1])
    if dy > 0 or (dy == 0 and dx < 0):
        dx, dy = -dx, -dy

    angle = math.degrees(math.atan2(dx, -dy)) % 360.0

    return RotatedRect(
        center_x=float(center_x),
        center_y=float(center_y),
        width=width,
        height=height,
        angle=angle,
    )


def fit_rotated_rects(contours, logger=None):
    """
    Fit a rotated rectangle to each contour, skipping degenerate ones.

    Args:
        contours: List of contours
        logger: Optional logger for skipped contours

    Returns:
        List of RotatedRect in contour order
    """
    rects = []
    for index, contour in enumerate(contours):
        rect = fit_rotated_rect(contour)
        if rect is None:
            if logger:
                logger.debug(f"Contour {index} is degenerate, skipped")
            continue
        rects.append(rect)

    return rects
