"""
Tape Target Vision Utilities

This package contains utility modules for frame filtering, contour analysis,
tape pairing, camera calculations, camera settings, configuration and logging.
"""

from .frame_filter import blur, blur_kernel_size, hsl_threshold, filter_frame
from .contour_utils import (
    RotatedRect,
    ContourFilter,
    find_contours,
    fit_rotated_rect,
    fit_rotated_rects,
)
from .target_pairing import (
    GoalTarget,
    sort_by_center_x,
    pair_tapes,
    pair_targets,
    order_targets,
)
from .camera_calculations import (
    CalibrationConstants,
    CameraCalculations,
    TargetMeasurement,
    measurement_arrays,
    has_undefined_distance,
)
from .tape_detector import TapeDetector, TapeDetection, detect_tape_targets, draw_tape_targets
from .camera_settings import camera_properties
from .config_utils import ConfigError, read_config, parse_config
from .log_utils import EveryNFrames, format_tape

__all__ = [
    'blur',
    'blur_kernel_size',
    'hsl_threshold',
    'filter_frame',
    'RotatedRect',
    'ContourFilter',
    'find_contours',
    'fit_rotated_rect',
    'fit_rotated_rects',
    'GoalTarget',
    'sort_by_center_x',
    'pair_tapes',
    'pair_targets',
    'order_targets',
    'CalibrationConstants',
    'CameraCalculations',
    'TargetMeasurement',
    'measurement_arrays',
    'has_undefined_distance',
    'camera_properties',
    'EveryNFrames',
    'format_tape',
    'TapeDetector',
    'TapeDetection',
    'detect_tape_targets',
    'draw_tape_targets',
    'ConfigError',
    'read_config',
    'parse_config',
]
