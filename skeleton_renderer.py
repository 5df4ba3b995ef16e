"""
SKELETON RENDERER - Draws the torso/leg skeleton on a copy of the image
"""

import math

import cv2

from pose_geometry import check_image
from pose_types import BodyPart, InvalidArgumentError, MissingLandmarkError


# OpenCV drawing limits
MAX_COORDINATE = 2**31 - 1
MAX_THICKNESS = 32767

TORSO = 'torso'
LEG = 'leg'

# (start, end, region) in drawing order. The hip line is drawn twice;
# redrawing it does not change the output.
SKELETON_SEGMENTS = (
    (BodyPart.LEFT_SHOULDER, BodyPart.RIGHT_SHOULDER, TORSO),
    (BodyPart.RIGHT_SHOULDER, BodyPart.RIGHT_HIP, TORSO),
    (BodyPart.RIGHT_HIP, BodyPart.LEFT_HIP, TORSO),
    (BodyPart.LEFT_HIP, BodyPart.LEFT_SHOULDER, TORSO),
    (BodyPart.RIGHT_HIP, BodyPart.LEFT_HIP, TORSO),
    # Right leg
    (BodyPart.RIGHT_HIP, BodyPart.RIGHT_KNEE, LEG),
    (BodyPart.RIGHT_KNEE, BodyPart.RIGHT_ANKLE, LEG),
    # Left leg
    (BodyPart.LEFT_HIP, BodyPart.LEFT_KNEE, LEG),
    (BodyPart.LEFT_KNEE, BodyPart.LEFT_ANKLE, LEG),
    (BodyPart.LEFT_ANKLE, BodyPart.RIGHT_ANKLE, LEG),
)


def required_parts():
    """Every landmark the skeleton touches, in first-use order"""
    parts = []
    for start, end, _ in SKELETON_SEGMENTS:
        for part in (start, end):
            if part not in parts:
                parts.append(part)
    return parts


def _line_color(color, channels):
    color = tuple(int(v) for v in color)
    if len(color) == 3 and channels == 4:
        color = color + (255,)
    if len(color) != channels:
        raise InvalidArgumentError(
            f"Color {color} does not match a {channels}-channel image"
        )
    return color


def render_skeleton(image, landmarks, torso_color, leg_color, stroke_width=3.0):
    """
    Draw SKELETON_SEGMENTS on a copy of `image` and return the copy.

    All landmarks are checked before anything is drawn, so a missing one
    raises MissingLandmarkError without producing a partial skeleton.
    Lines are 8-connected without anti-aliasing so every drawn pixel holds
    the exact segment color.
    """
    _, _, channels = check_image(image)

    missing = landmarks.missing(required_parts())
    if missing:
        raise MissingLandmarkError(missing[0])

    if not (math.isfinite(stroke_width) and 0 < stroke_width <= MAX_THICKNESS):
        raise InvalidArgumentError(
            f"Stroke width must be in (0, {MAX_THICKNESS}], got {stroke_width}"
        )
    thickness = max(1, int(round(stroke_width)))

    for part in required_parts():
        point = landmarks[part]
        if not all(math.isfinite(v) and abs(v) <= MAX_COORDINATE for v in (point.x, point.y)):
            raise InvalidArgumentError(
                f"Landmark {part.value} at ({point.x}, {point.y}) cannot be drawn"
            )

    paints = {
        TORSO: _line_color(torso_color, channels),
        LEG: _line_color(leg_color, channels),
    }

    canvas = image.copy()
    for start, end, region in SKELETON_SEGMENTS:
        cv2.line(
            canvas,
            landmarks[start].as_pixel(),
            landmarks[end].as_pixel(),
            paints[region],
            thickness,
            lineType=cv2.LINE_8,
        )
    return canvas
