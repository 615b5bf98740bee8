"""
Configuration Module

This module reads the JSON configuration file describing the cameras,
pipeline tuning, camera calibration and publisher settings.
"""

import json

from .camera_settings import AUTO, HOLD, PIXEL_FORMATS, property_id

DEFAULT_CONFIG_FILE = "/boot/frc.json"

CALIBRATION_KEYS = ("fov_horizontal", "pixels_horizontal", "pixels_vertical", "distance_between_targets")

DEFAULT_PUBLISHER_CONFIG = {
    "table": "VisionTarget",
    "image_topic": "/image_raw/compressed",
    "compressed": True,
    "log_every_n_frames": 20,
    "show_debug_window": False,
}


class ConfigError(Exception):
    """Raised when the configuration file is missing or malformed."""

    def __init__(self, config_file, message):
        self.config_file = config_file
        super().__init__(f"config error in '{config_file}': {message}")


def config_file_from_argv(argv):
    """First positional argument after the program name, else the default file."""
    if len(argv) > 1:
        return argv[1]
    return DEFAULT_CONFIG_FILE


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _read_positive_int(config, key, default, config_file, context):
    value = config.get(key, default)
    if not _is_number(value) or value <= 0 or (isinstance(value, float) and not value.is_integer()):
        raise ConfigError(config_file, f"{context}: {key} must be a positive integer")
    return int(value)


def _read_section(top, key, config_file):
    section = top.get(key)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(config_file, f"{key} must be a JSON object")
    return section


def _read_auto_hold_or_number(config, key, config_file, context):
    value = config.get(key)
    if value is None or value in (AUTO, HOLD) or _is_number(value):
        return value
    raise ConfigError(config_file, f"{context}: {key} must be \"auto\", \"hold\" or a number")


def read_camera_properties(properties, config_file, context):
    """Validate the free-form [{"name": ..., "value": ...}] property list."""
    if not isinstance(properties, list):
        raise ConfigError(config_file, f"{context}: properties must be a JSON array")

    result = []
    for prop in properties:
        if not isinstance(prop, dict) or not isinstance(prop.get("name"), str):
            raise ConfigError(config_file, f"{context}: could not read property name")
        name = prop["name"]
        if property_id(name) is None:
            raise ConfigError(config_file, f"{context}: unknown property '{name}'")
        value = prop.get("value")
        if isinstance(value, bool):
            value = int(value)
        if not _is_number(value):
            raise ConfigError(config_file, f"{context}: property '{name}' needs a numeric value")
        result.append((name, value))
    return result


def read_camera_config(config, config_file=DEFAULT_CONFIG_FILE):
    """
    Read a single camera entry.

    Args:
        config: Dict for one camera
        config_file: Path used in error messages

    Returns:
        Dict with name, path, width, height, fps, pixel_format, brightness,
        white_balance, exposure, properties and stream keys
    """
    if not isinstance(config, dict):
        raise ConfigError(config_file, "camera entry must be a JSON object")

    name = config.get("name")
    if name is None:
        raise ConfigError(config_file, "could not read camera name")

    path = config.get("path")
    if path is None:
        raise ConfigError(config_file, f"camera '{name}': could not read path")

    context = f"camera '{name}'"

    pixel_format = config.get("pixel format")
    if pixel_format is not None and (
        not isinstance(pixel_format, str)
        or (pixel_format.upper() not in PIXEL_FORMATS and len(pixel_format) != 4)
    ):
        raise ConfigError(config_file, f"{context}: unknown pixel format {pixel_format!r}")

    brightness = config.get("brightness")
    if brightness is not None and not _is_number(brightness):
        raise ConfigError(config_file, f"{context}: brightness must be a number")

    stream = config.get("stream")
    if stream is None:
        stream = {}
    if not isinstance(stream, dict):
        raise ConfigError(config_file, f"{context}: stream must be a JSON object")
    quality = stream.get("quality", 90)
    if not _is_number(quality) or not 0 <= quality <= 100:
        raise ConfigError(config_file, f"{context}: stream quality must be between 0 and 100")

    return {
        "name": str(name),
        "path": str(path),
        "width": _read_positive_int(config, "width", 320, config_file, context),
        "height": _read_positive_int(config, "height", 240, config_file, context),
        "fps": _read_positive_int(config, "fps", 30, config_file, context),
        "pixel_format": pixel_format,
        "brightness": brightness,
        "white_balance": _read_auto_hold_or_number(config, "white balance", config_file, context),
        "exposure": _read_auto_hold_or_number(config, "exposure", config_file, context),
        "properties": read_camera_properties(config.get("properties", []), config_file, context),
        "stream": stream,
    }


def _check_publisher(publisher, config_file):
    for key in ("table", "image_topic"):
        if not isinstance(publisher[key], str) or not publisher[key]:
            raise ConfigError(config_file, f"publisher: {key} must be a non-empty string")
    for key in ("compressed", "show_debug_window"):
        if not isinstance(publisher[key], bool):
            raise ConfigError(config_file, f"publisher: {key} must be true or false")
    _read_positive_int(publisher, "log_every_n_frames", 20, config_file, "publisher")


def _check_calibration(calibration, config_file):
    for key, value in calibration.items():
        if key == "legacy_fov_units":
            if not isinstance(value, bool):
                raise ConfigError(config_file, "calibration: legacy_fov_units must be true or false")
        elif key in CALIBRATION_KEYS:
            if not _is_number(value) or value <= 0:
                raise ConfigError(config_file, f"calibration: {key} must be a positive number")


def parse_config(top, config_file=DEFAULT_CONFIG_FILE):
    """
    Validate an already decoded configuration.

    Args:
        top: Decoded JSON value
        config_file: Path used in error messages

    Returns:
        Dict with "cameras", "pipeline", "calibration" and "publisher" keys
    """
    if not isinstance(top, dict):
        raise ConfigError(config_file, "must be JSON object")

    cameras = top.get("cameras")
    if cameras is None:
        raise ConfigError(config_file, "could not read cameras")
    if not isinstance(cameras, list):
        raise ConfigError(config_file, "cameras must be a JSON array")

    pipeline = _read_section(top, "pipeline", config_file)
    calibration = _read_section(top, "calibration", config_file)
    _check_calibration(calibration, config_file)

    publisher = dict(DEFAULT_PUBLISHER_CONFIG)
    publisher.update(_read_section(top, "publisher", config_file))
    _check_publisher(publisher, config_file)

    return {
        "cameras": [read_camera_config(camera, config_file) for camera in cameras],
        "pipeline": pipeline,
        "calibration": calibration,
        "publisher": publisher,
    }


def read_config(config_file=DEFAULT_CONFIG_FILE):
    """
    Read and validate the configuration file.

    Args:
        config_file: Path to the JSON file

    Returns:
        Dict with "cameras", "pipeline", "calibration" and "publisher" keys
    """
    try:
        with open(config_file) as f:
            top = json.load(f)
    except OSError as e:
        raise ConfigError(config_file, f"could not open: {e}") from e
    except ValueError as e:
        raise ConfigError(config_file, f"invalid JSON: {e}") from e

    return parse_config(top, config_file)
