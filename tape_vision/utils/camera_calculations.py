"""
Camera Calculations Module

This module converts the pixel geometry of a goal target into a horizontal
offset, a straight line distance and a bearing angle using a pinhole
camera model.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class CalibrationConstants:
    """
    Fixed camera and field parameters.

    fov_horizontal is in degrees. With legacy_fov_units the degree value is
    handed to tan() unconverted, which is how the thresholds of the first
    season were tuned; by default it is converted to radians.
    """

    fov_horizontal: float = 61.0
    pixels_horizontal: float = 320.0
    pixels_vertical: float = 240.0
    distance_between_targets: float = 1.1  # meters
    legacy_fov_units: bool = False

    @property
    def center_pixel_horizontal(self):
        return self.pixels_horizontal / 2

    @property
    def center_pixel_vertical(self):
        return self.pixels_vertical / 2

    @classmethod
    def from_config(cls, config=None):
        """
        Build calibration constants from a config dict.

        Args:
            config: Optional dict, missing keys keep their defaults

        Returns:
            CalibrationConstants
        """
        cfg = config or {}
        defaults = cls()
        return cls(
            fov_horizontal=float(cfg.get("fov_horizontal", defaults.fov_horizontal)),
            pixels_horizontal=float(cfg.get("pixels_horizontal", defaults.pixels_horizontal)),
            pixels_vertical=float(cfg.get("pixels_vertical", defaults.pixels_vertical)),
            distance_between_targets=float(
                cfg.get("distance_between_targets", defaults.distance_between_targets)
            ),
            legacy_fov_units=bool(cfg.get("legacy_fov_units", defaults.legacy_fov_units)),
        )


@dataclass(frozen=True)
class TargetMeasurement:
    """Offset and distance in meters, angle in radians. distance is None when undefined."""

    x_offset: float
    distance: Optional[float]
    angle: float

    @property
    def has_distance(self):
        return self.distance is not None


class CameraCalculations:
    """Pinhole camera conversions from pixels to field measurements."""

    def __init__(self, calibration=None):
        """
        Initialize camera calculations.

        Args:
            calibration: CalibrationConstants (defaults to the 320x240, 61 degree camera)
        """
        self.calibration = calibration or CalibrationConstants()

    def get_focal_length(self):
        """Focal length in pixels."""
        cal = self.calibration
        half_fov = cal.fov_horizontal / 2
        if not cal.legacy_fov_units:
            half_fov = math.radians(half_fov)
        return cal.pixels_horizontal / (2 * math.tan(half_fov))

    def get_horizontal_angle(self, target_x_pixels):
        """Bearing in radians, positive for targets left of the optical axis."""
        offset = target_x_pixels - self.calibration.center_pixel_horizontal
        return -math.atan(offset / self.get_focal_length())

    def get_vertical_angle(self, target_y_pixels):
        """Elevation in radians, positive for targets below the optical axis."""
        offset = target_y_pixels - self.calibration.center_pixel_vertical
        return math.atan(offset / self.get_focal_length())

    def get_meters_per_pixel(self, target_width_pixels):
        if target_width_pixels <= 0:
            raise ValueError(f"Target width must be positive, got {target_width_pixels}")
        return self.calibration.distance_between_targets / target_width_pixels

    def get_x_offset(self, target_width_pixels, center_x_pixels):
        """Horizontal offset of the target from the optical axis in meters."""
        return self.get_meters_per_pixel(target_width_pixels) * (
            self.calibration.center_pixel_horizontal - center_x_pixels
        )

    def get_distance(self, target_width_pixels, center_x_pixels):
        """
        Straight line distance to the target in meters.

        Args:
            target_width_pixels: Distance between the tape centers in pixels
            center_x_pixels: Horizontal center of the target in pixels

        Returns:
            Distance, or None for a target on the optical axis where the
            bearing tangent is zero
        """
        tan_angle = math.tan(self.get_horizontal_angle(center_x_pixels))
        if tan_angle == 0:
            return None
        return self.get_x_offset(target_width_pixels, center_x_pixels) / tan_angle

    def measure(self, target):
        """
        Measure a goal target.

        Args:
            target: GoalTarget

        Returns:
            TargetMeasurement
        """
        width = target.target_width
        center_x = target.center_x
        return TargetMeasurement(
            x_offset=self.get_x_offset(width, center_x),
            distance=self.get_distance(width, center_x),
            angle=self.get_horizontal_angle(center_x),
        )

    def measure_targets(self, targets, logger=None):
        """
        Measure every goal target.

        Args:
            targets: List of GoalTarget
            logger: Optional logger for info messages

        Returns:
            List of TargetMeasurement in target order
        """
        measurements = []
        for index, target in enumerate(targets):
            measurement = self.measure(target)
            measurements.append(measurement)

            if logger:
                if measurement.has_distance:
                    logger.debug(
                        f"Target {index}: x_offset={measurement.x_offset:.3f} m, "
                        f"distance={measurement.distance:.3f} m, angle={measurement.angle:.3f} rad"
                    )
                else:
                    logger.debug(
                        f"Target {index} on optical axis: x_offset={measurement.x_offset:.3f} m, "
                        f"distance undefined"
                    )

        return measurements


def measurement_arrays(measurements):
    """
    Split measurements into the three published float64 arrays.

    An undefined distance is written as NaN so its index stays aligned
    with the offset and angle of the same target.

    Args:
        measurements: List of TargetMeasurement

    Returns:
        Dict with "xOffset", "distance" and "angle" numpy arrays of equal length
    """
    x_offset = np.array([m.x_offset for m in measurements], dtype=np.float64)
    distance = np.array(
        [m.distance if m.has_distance else np.nan for m in measurements],
        dtype=np.float64,
    )
    angle = np.array([m.angle for m in measurements], dtype=np.float64)

    return {"xOffset": x_offset, "distance": distance, "angle": angle}


def has_undefined_distance(measurements):
    """True when any target sits on the optical axis and has no distance."""
    return any(not m.has_distance for m in measurements)
