"""
Frame Filtering Module

This module smooths camera frames and thresholds them in HLS color space
to produce a binary mask of the retro-reflective tape.
"""

import cv2

BOX = "box"
GAUSSIAN = "gaussian"
MEDIAN = "median"
BILATERAL = "bilateral"

# Labels written by the GRIP tuning tool
BLUR_LABELS = {
    "Box Blur": BOX,
    "Gaussian Blur": GAUSSIAN,
    "Median Filter": MEDIAN,
    "Bilateral Filter": BILATERAL,
}

# Tuned values for the green LED ring on the 320x240 camera
DEFAULT_FILTER_CONFIG = {
    "blur_type": BOX,
    "blur_radius": 2.7451980282168957,
    "hue": [59.89208633093525, 121.63822525597269],
    "saturation": [91.72661870503596, 255.0],
    "luminance": [123.83093525179856, 239.76962457337885],
}


def get_blur_type(label):
    """
    Resolve a blur label to one of the blur type names.

    Accepts the short names ("box", "gaussian", ...) as well as the GRIP
    labels ("Box Blur", ...). Anything unknown falls back to box blur.
    """
    if label in (BOX, GAUSSIAN, MEDIAN, BILATERAL):
        return label
    return BLUR_LABELS.get(label, BOX)


def blur_kernel_size(blur_type, radius):
    """
    Kernel size used for a blur of the given type and radius.

    Args:
        blur_type: Blur type name or GRIP label
        radius: Blur radius in pixels (rounded to the nearest integer)

    Returns:
        Odd kernel size for box, median and gaussian blurs, -1 for the
        bilateral filter (neighbourhood derived from sigma)
    """
    blur_type = get_blur_type(blur_type)
    radius = int(radius + 0.5)

    if blur_type == GAUSSIAN:
        return 6 * radius + 1
    if blur_type == BILATERAL:
        return -1
    return 2 * radius + 1


def blur(frame, blur_type=BOX, radius=DEFAULT_FILTER_CONFIG["blur_radius"]):
    """
    Soften an image using one of several filters.

    Args:
        frame: BGR color image
        blur_type: Blur type name or GRIP label
        radius: Blur radius in pixels

    Returns:
        Blurred copy of the image
    """
    blur_type = get_blur_type(blur_type)
    int_radius = int(radius + 0.5)
    kernel_size = blur_kernel_size(blur_type, radius)

    if blur_type == GAUSSIAN:
        return cv2.GaussianBlur(frame, (kernel_size, kernel_size), int_radius)
    if blur_type == MEDIAN:
        return cv2.medianBlur(frame, kernel_size)
    if blur_type == BILATERAL:
        return cv2.bilateralFilter(frame, kernel_size, int_radius, int_radius)
    return cv2.blur(frame, (kernel_size, kernel_size))


def hsl_threshold(frame, hue, saturation, luminance):
    """
    Segment an image based on hue, saturation and luminance ranges.

    OpenCV stores HLS pixels as (hue, luminance, saturation), so the bounds
    are passed to inRange in that order.

    Args:
        frame: BGR color image
        hue: [min, max] hue (0-180)
        saturation: [min, max] saturation (0-255)
        luminance: [min, max] luminance (0-255)

    Returns:
        Binary mask (uint8, 0 or 255) with the same height and width
    """
    hls = cv2.cvtColor(frame, cv2.COLOR_BGR2HLS)
    lower = (hue[0], luminance[0], saturation[0])
    upper = (hue[1], luminance[1], saturation[1])
    return cv2.inRange(hls, lower, upper)


def filter_frame(frame, config=None):
    """
    Blur a frame and threshold it into a binary mask of the tape.

    Args:
        frame: BGR color image
        config: Optional dict overriding DEFAULT_FILTER_CONFIG entries

    Returns:
        Binary mask (uint8, 0 or 255)
    """
    cfg = dict(DEFAULT_FILTER_CONFIG)
    cfg.update(config or {})

    blurred = blur(frame, cfg["blur_type"], cfg["blur_radius"])
    return hsl_threshold(blurred, cfg["hue"], cfg["saturation"], cfg["luminance"])
