import numpy as np
import pytest

from pose_types import BodyPart, LandmarkSet, Point2D


BACKGROUND = (10, 20, 30)
SHIRT = (200, 40, 40)
TROUSERS = (30, 30, 180)


def _base_points():
    return {
        BodyPart.LEFT_SHOULDER: Point2D(30, 30),
        BodyPart.RIGHT_SHOULDER: Point2D(70, 30),
        BodyPart.LEFT_WRIST: Point2D(10, 30),
        BodyPart.RIGHT_WRIST: Point2D(70, 10),
        BodyPart.LEFT_HIP: Point2D(30, 60),
        BodyPart.RIGHT_HIP: Point2D(70, 60),
        BodyPart.LEFT_KNEE: Point2D(30, 80),
        BodyPart.RIGHT_KNEE: Point2D(70, 80),
        BodyPart.LEFT_ANKLE: Point2D(30, 95),
        BodyPart.RIGHT_ANKLE: Point2D(70, 95),
    }


@pytest.fixture
def background():
    return BACKGROUND


@pytest.fixture
def shirt():
    return SHIRT


@pytest.fixture
def trousers():
    return TROUSERS


@pytest.fixture
def body_points():
    return _base_points()


@pytest.fixture
def body_landmarks():
    return LandmarkSet(_base_points())


@pytest.fixture
def solid_image():
    image = np.zeros((100, 100, 3), dtype=np.uint8)
    image[:, :] = BACKGROUND
    return image


@pytest.fixture
def dressed_image(solid_image):
    """Solid 100x100 photo with shirt pixels under the torso landmarks and
    trouser pixels under the leg landmarks"""
    image = solid_image.copy()
    for part in (BodyPart.LEFT_SHOULDER, BodyPart.RIGHT_SHOULDER,
                 BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP):
        p = _base_points()[part]
        image[int(p.y), int(p.x)] = SHIRT
    for part in (BodyPart.LEFT_KNEE, BodyPart.RIGHT_KNEE,
                 BodyPart.LEFT_ANKLE, BodyPart.RIGHT_ANKLE):
        p = _base_points()[part]
        image[int(p.y), int(p.x)] = TROUSERS
    return image
