"""
Tape Target Detection Module

This module chains the frame filter, contour extraction, contour filtering,
rectangle fitting, target pairing and camera calculations into one
per-frame pipeline, and draws its results for debugging.
"""

from dataclasses import dataclass
from typing import List

import cv2
import numpy as np

from .camera_calculations import CameraCalculations, TargetMeasurement
from .contour_utils import ContourFilter, RotatedRect, find_contours, fit_rotated_rects
from .frame_filter import filter_frame
from .target_pairing import GoalTarget, order_targets


@dataclass(frozen=True)
class TapeDetection:
    """Every intermediate output of one pipeline run."""

    mask: np.ndarray
    contours: list
    filtered_contours: list
    tapes: List[RotatedRect]
    targets: List[GoalTarget]
    measurements: List[TargetMeasurement]


class TapeDetector:
    """
    Retro-reflective tape target detector.

    Holds only configuration; every call to process() works on its own
    frame and returns a fresh TapeDetection.
    """

    def __init__(self, config=None, calibration=None, logger=None):
        """
        Initialize tape detector.

        Args:
            config: Optional dict with pipeline parameters (blur, HSL ranges,
                contour filter bounds, external_only, draw_detections)
            calibration: Optional CalibrationConstants
            logger: Optional logger for per-contour and per-target messages
        """
        cfg = config or {}
        self.logger = logger

        self.filter_config = {
            key: cfg[key]
            for key in ("blur_type", "blur_radius", "hue", "saturation", "luminance")
            if key in cfg
        }
        self.external_only = cfg.get("external_only", True)
        self.draw_detections = cfg.get("draw_detections", False)

        self.contour_filter = ContourFilter(cfg.get("contour_filter"))
        self.camera = CameraCalculations(calibration)

    def process(self, frame):
        """
        Run the full pipeline on one frame.

        Args:
            frame: BGR color image

        Returns:
            TapeDetection
        """
        mask = filter_frame(frame, self.filter_config)
        contours = find_contours(mask, self.external_only)
        filtered = self.contour_filter.filter(contours, self.logger)
        tapes = fit_rotated_rects(filtered, self.logger)
        targets = order_targets(tapes, self.logger)
        measurements = self.camera.measure_targets(targets, self.logger)

        return TapeDetection(
            mask=mask,
            contours=contours,
            filtered_contours=filtered,
            tapes=tapes,
            targets=targets,
            measurements=measurements,
        )

    def detect(self, frame):
        """
        Detect tape targets in a frame.

        Args:
            frame: BGR color image

        Returns:
            Tuple of (annotated_image, detection)
        """
        detection = self.process(frame)

        result = frame
        if self.draw_detections and detection.tapes:
            result = draw_tape_targets(frame, detection)

        return result, detection


def _box_points(tape):
    """Corner points of a RotatedRect for drawing."""
    # An upright (width, height) box rotated clockwise by tape.angle
    rect = ((tape.center_x, tape.center_y), (tape.width, tape.height), tape.angle)
    return np.round(cv2.boxPoints(rect)).astype(np.int32)


def draw_tape_targets(color_image, detection):
    """
    Draw fitted tape rectangles and target centers on the color image.

    Args:
        color_image: Original BGR image
        detection: TapeDetection from TapeDetector.process

    Returns:
        Annotated image
    """
    vis_image = color_image.copy()

    for tape in detection.tapes:
        cv2.drawContours(vis_image, [_box_points(tape)], 0, (0, 255, 0), 1)

    for index, target in enumerate(detection.targets):
        center = (int(target.center_x), int(target.center_y))
        cv2.circle(vis_image, center, 3, (0, 0, 255), -1)

        cv2.putText(
            vis_image,
            f"T{index}",
            (center[0] - 10, center[1] - 10),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.4,
            (255, 0, 0),
            1,
        )

    return vis_image


# Convenience function for one-off use
def detect_tape_targets(frame, config=None, calibration=None):
    """
    Run the pipeline once with the given settings.

    Args:
        frame: BGR color image
        config: Optional pipeline config dict
        calibration: Optional CalibrationConstants

    Returns:
        TapeDetection
    """
    return TapeDetector(config, calibration).process(frame)
