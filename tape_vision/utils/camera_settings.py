"""
Camera Settings Module

This module turns a validated camera entry from the configuration file into
the OpenCV capture properties applied to the device, in the order they must
be set.
"""

import cv2

# Pixel format names used in the configuration file -> V4L2 FourCC codes
PIXEL_FORMATS = {
    "MJPEG": "MJPG",
    "YUYV": "YUYV",
    "RGB565": "RGBP",
    "BGR": "BGR3",
    "GRAY": "GREY",
}

# OpenCV's V4L2 backend maps CAP_PROP_AUTO_EXPOSURE 0.75 to auto, 0.25 to manual
AUTO_EXPOSURE_ON = 0.75
AUTO_EXPOSURE_OFF = 0.25

AUTO = "auto"
HOLD = "hold"


def property_id(name):
    """
    Resolve a free-form property name to an OpenCV capture property.

    "contrast", "Contrast" and "CAP_PROP_CONTRAST" all resolve to
    cv2.CAP_PROP_CONTRAST.

    Returns:
        Property id, or None for an unknown name
    """
    key = name.strip().upper().replace(" ", "_")
    if not key.startswith("CAP_PROP_"):
        key = "CAP_PROP_" + key
    return getattr(cv2, key, None)


def fourcc(pixel_format):
    """FourCC code for a pixel format name or a raw four-character code."""
    code = PIXEL_FORMATS.get(pixel_format.upper(), pixel_format)
    return cv2.VideoWriter_fourcc(*code)


def _auto_hold_or_value(setting, auto_prop, auto_on, auto_off, value_prop):
    if setting == AUTO:
        return [(auto_prop, auto_on)]
    if setting == HOLD:
        # Leave automatic control, keep whatever value the device settled on
        return [(auto_prop, auto_off)]
    return [(auto_prop, auto_off), (value_prop, float(setting))]


def camera_properties(camera_config):
    """
    Capture properties for one camera entry.

    Args:
        camera_config: Dict returned by read_camera_config

    Returns:
        List of (property id, value) pairs
    """
    props = []

    if camera_config.get("pixel_format") is not None:
        props.append((cv2.CAP_PROP_FOURCC, fourcc(camera_config["pixel_format"])))

    props.append((cv2.CAP_PROP_FRAME_WIDTH, camera_config["width"]))
    props.append((cv2.CAP_PROP_FRAME_HEIGHT, camera_config["height"]))
    props.append((cv2.CAP_PROP_FPS, camera_config["fps"]))

    if camera_config.get("brightness") is not None:
        props.append((cv2.CAP_PROP_BRIGHTNESS, float(camera_config["brightness"])))

    if camera_config.get("white_balance") is not None:
        props.extend(_auto_hold_or_value(
            camera_config["white_balance"],
            cv2.CAP_PROP_AUTO_WB, 1, 0,
            cv2.CAP_PROP_WB_TEMPERATURE,
        ))

    if camera_config.get("exposure") is not None:
        props.extend(_auto_hold_or_value(
            camera_config["exposure"],
            cv2.CAP_PROP_AUTO_EXPOSURE, AUTO_EXPOSURE_ON, AUTO_EXPOSURE_OFF,
            cv2.CAP_PROP_EXPOSURE,
        ))

    for name, value in camera_config.get("properties", []):
        props.append((property_id(name), float(value)))

    return props
