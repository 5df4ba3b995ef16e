"""
POSE TYPES - Landmarks, results and errors
Shared data model for the pose geometry overlay
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

import numpy as np


Color = Tuple[int, ...]


class PoseGeometryError(Exception):
    """Base class for every error raised by the pose geometry core"""


class MissingLandmarkError(PoseGeometryError, KeyError):
    """A landmark needed by the skeleton or the color sampler was not detected"""

    def __init__(self, name):
        self.name = getattr(name, 'value', name)
        super().__init__(self.name)

    def __str__(self):
        return f"Missing landmark: {self.name}"


class OutOfRangeError(PoseGeometryError, IndexError):
    """A sampling coordinate fell outside the image"""


class InvalidArgumentError(PoseGeometryError, ValueError):
    """An argument violated a precondition (empty samples, bad image shape...)"""


class DetectionFailedError(PoseGeometryError, RuntimeError):
    """The pose model returned no pose for the image"""


class BodyPart(Enum):
    """Body landmarks used by the analyzer, valued by their snake_case name"""

    LEFT_SHOULDER = 'left_shoulder'
    RIGHT_SHOULDER = 'right_shoulder'
    LEFT_WRIST = 'left_wrist'
    RIGHT_WRIST = 'right_wrist'
    LEFT_HIP = 'left_hip'
    RIGHT_HIP = 'right_hip'
    LEFT_KNEE = 'left_knee'
    RIGHT_KNEE = 'right_knee'
    LEFT_ANKLE = 'left_ankle'
    RIGHT_ANKLE = 'right_ankle'

    @property
    def mediapipe_index(self) -> int:
        return MEDIAPIPE_POSE_INDICES[self]


# MediaPipe Pose (33 landmark) indices
MEDIAPIPE_POSE_INDICES = {
    BodyPart.LEFT_SHOULDER: 11,
    BodyPart.RIGHT_SHOULDER: 12,
    BodyPart.LEFT_WRIST: 15,
    BodyPart.RIGHT_WRIST: 16,
    BodyPart.LEFT_HIP: 23,
    BodyPart.RIGHT_HIP: 24,
    BodyPart.LEFT_KNEE: 25,
    BodyPart.RIGHT_KNEE: 26,
    BodyPart.LEFT_ANKLE: 27,
    BodyPart.RIGHT_ANKLE: 28,
}


@dataclass(frozen=True)
class Point2D:
    """A landmark position in image pixel coordinates (y grows downward)"""

    x: float
    y: float

    def as_pixel(self) -> Tuple[int, int]:
        """Nearest integer pixel, as OpenCV drawing calls expect"""
        return int(round(self.x)), int(round(self.y))


class LandmarkSet(Mapping):
    """
    Read-only mapping from BodyPart to Point2D.

    Keys may be given as BodyPart members or their string values. Parts the
    detector did not find are simply absent.
    """

    def __init__(self, points: Optional[Mapping] = None):
        self._points: Dict[BodyPart, Point2D] = {}
        for part, point in (points or {}).items():
            if not isinstance(point, Point2D):
                point = Point2D(float(point[0]), float(point[1]))
            self._points[BodyPart(part)] = point

    def __getitem__(self, part):
        try:
            return self._points[BodyPart(part)]
        except ValueError:
            raise KeyError(part) from None

    def __iter__(self):
        return iter(self._points)

    def __len__(self):
        return len(self._points)

    def __contains__(self, part):
        try:
            return BodyPart(part) in self._points
        except ValueError:
            return False

    def __repr__(self):
        inner = ', '.join(f"{p.value}=({pt.x:.1f}, {pt.y:.1f})" for p, pt in self._points.items())
        return f"LandmarkSet({inner})"

    def require(self, part) -> Point2D:
        """Return the point for `part` or raise MissingLandmarkError"""
        part = BodyPart(part)
        point = self._points.get(part)
        if point is None:
            raise MissingLandmarkError(part)
        return point

    def missing(self, parts):
        """Parts from `parts` that are not present, in the given order"""
        return [BodyPart(p) for p in parts if BodyPart(p) not in self._points]


@dataclass(frozen=True, eq=False)
class AnnotatedResult:
    """Annotated copy of the source image plus the angle label"""

    image: np.ndarray
    angle_label: str
    left_angle: float
    right_angle: float
    torso_color: Color
    leg_color: Color
