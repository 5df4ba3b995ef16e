"""
POSE GEOMETRY - Joint angles and clothing color sampling
Pure functions over landmark coordinates and RGB(A) image arrays
"""

import math

import numpy as np

from pose_types import BodyPart, InvalidArgumentError, OutOfRangeError


# Pixels averaged for the "shirt" color
TORSO_SAMPLE_PARTS = (
    BodyPart.RIGHT_SHOULDER,
    BodyPart.RIGHT_HIP,
    BodyPart.LEFT_HIP,
    BodyPart.LEFT_SHOULDER,
)

# Pixels averaged for the "trouser" color
LEG_SAMPLE_PARTS = (
    BodyPart.RIGHT_KNEE,
    BodyPart.RIGHT_ANKLE,
    BodyPart.LEFT_KNEE,
    BodyPart.LEFT_ANKLE,
)


def angle_between(start, vertex, end):
    """
    Angle at `vertex` formed by `start` and `end`, in degrees within [0, 180].

    Each ray's direction is atan2(dy, dx) in image coordinates. A zero-length
    ray has direction 0 (atan2(0, 0)), so the result then depends only on the
    other ray.
    """
    result = math.degrees(
        math.atan2(end.y - vertex.y, end.x - vertex.x)
        - math.atan2(start.y - vertex.y, start.x - vertex.x)
    )
    result = abs(result)
    if result > 180.0:
        result = 360.0 - result
    return result


def format_angle_label(left_angle, right_angle, precision=None):
    """Two-line label: 'Left angle:<value>' then 'Right angle:<value>'"""
    def fmt(value):
        if precision is None:
            return str(float(value))
        return f"{value:.{precision}f}"

    return f"Left angle:{fmt(left_angle)}\nRight angle:{fmt(right_angle)}"


def check_image(image):
    """Validate an RGB(A) uint8 image array, return (height, width, channels)"""
    if not isinstance(image, np.ndarray) or image.ndim != 3 or image.shape[2] not in (3, 4):
        shape = getattr(image, 'shape', None)
        raise InvalidArgumentError(f"Expected an HxWx3 or HxWx4 image array, got shape {shape}")
    if image.dtype != np.uint8:
        raise InvalidArgumentError(f"Expected a uint8 image array, got {image.dtype}")
    h, w, c = image.shape
    return h, w, c


def sample_pixel(image, point):
    """
    Color of the pixel under `point`.

    Coordinates are truncated to integer indices. Points outside the image,
    including infinite or NaN coordinates, raise OutOfRangeError; there is
    no clamping.
    """
    h, w, _ = check_image(image)
    # NaN fails every comparison, so test for the inside and negate
    inside = (
        math.isfinite(point.x) and math.isfinite(point.y)
        and 0 <= point.x and 0 <= point.y
        and int(point.x) < w and int(point.y) < h
    )
    if not inside:
        raise OutOfRangeError(f"Point ({point.x}, {point.y}) is outside a {w}x{h} image")
    return tuple(int(v) for v in image[int(point.y), int(point.x)])


def sample_colors(image, landmarks, parts):
    """Sample the pixel color at each of `parts`, in order"""
    return [sample_pixel(image, landmarks.require(part)) for part in parts]


def average_color(samples):
    """
    Per-channel mean of `samples`, rounded half up.

    All samples must carry the same number of channels (3 for RGB, 4 for RGBA).
    """
    samples = [tuple(int(v) for v in s) for s in samples]
    if not samples:
        raise InvalidArgumentError("Cannot average an empty list of colors")

    channels = len(samples[0])
    if any(len(s) != channels for s in samples):
        raise InvalidArgumentError("All sampled colors must have the same number of channels")

    n = len(samples)
    totals = [sum(s[c] for s in samples) for c in range(channels)]
    # floor(total / n + 1/2) in integer arithmetic
    return tuple((2 * t + n) // (2 * n) for t in totals)
