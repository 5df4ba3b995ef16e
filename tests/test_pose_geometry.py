import math

import numpy as np
import pytest

from pose_geometry import (
    LEG_SAMPLE_PARTS,
    TORSO_SAMPLE_PARTS,
    angle_between,
    average_color,
    format_angle_label,
    sample_colors,
    sample_pixel,
)
from pose_types import (
    BodyPart,
    InvalidArgumentError,
    LandmarkSet,
    MissingLandmarkError,
    OutOfRangeError,
    Point2D,
)


def test_right_angle_is_90_degrees():
    assert angle_between(Point2D(1, 0), Point2D(0, 0), Point2D(0, 1)) == pytest.approx(90.0)


def test_straight_line_is_180_degrees():
    assert angle_between(Point2D(-5, 2), Point2D(0, 2), Point2D(5, 2)) == pytest.approx(180.0)


def test_reflex_difference_is_folded_below_180():
    # raw atan2 difference is 270 degrees
    angle = angle_between(Point2D(0, -1), Point2D(0, 0), Point2D(-1, 0))
    assert angle == pytest.approx(90.0)


@pytest.mark.parametrize("a,v,b", [
    ((3, 4), (0, 0), (-2, 7)),
    ((10, 10), (5, 5), (0, 12)),
    ((-3, -1), (1, 1), (4, -6)),
    ((100.5, 20.25), (50, 50), (51, 90)),
])
def test_angle_is_symmetric_and_bounded(a, v, b):
    a, v, b = Point2D(*a), Point2D(*v), Point2D(*b)
    forward = angle_between(a, v, b)
    assert forward == pytest.approx(angle_between(b, v, a))
    assert 0.0 <= forward <= 180.0


def test_zero_length_ray_uses_other_ray_direction():
    # atan2(0, 0) == 0, so only the (0, 1) ray counts
    assert angle_between(Point2D(0, 0), Point2D(0, 0), Point2D(0, 1)) == pytest.approx(90.0)


def test_angle_label_default_format():
    assert format_angle_label(90.0, 180) == "Left angle:90.0\nRight angle:180.0"


def test_angle_label_with_precision():
    assert format_angle_label(12.3456, 7.0, precision=2) == "Left angle:12.35\nRight angle:7.00"


def test_average_of_uniform_colors_is_that_color():
    assert average_color([(12, 34, 56)] * 4) == (12, 34, 56)


def test_average_rounds_half_up():
    assert average_color([(0, 0, 0), (255, 255, 255)]) == (128, 128, 128)
    assert average_color([(0, 0, 0), (0, 0, 1)]) == (0, 0, 1)
    assert average_color([(0, 0, 0), (0, 0, 0), (0, 0, 1)]) == (0, 0, 0)


def test_average_keeps_alpha_channel():
    assert average_color([(10, 20, 30, 255), (20, 30, 40, 0)]) == (15, 25, 35, 128)


def test_average_accepts_numpy_pixels():
    pixels = np.array([[1, 2, 3], [3, 4, 5]], dtype=np.uint8)
    assert average_color(pixels) == (2, 3, 4)


def test_average_of_nothing_is_invalid():
    with pytest.raises(InvalidArgumentError):
        average_color([])


def test_average_rejects_mixed_channel_counts():
    with pytest.raises(InvalidArgumentError):
        average_color([(1, 2, 3), (1, 2, 3, 4)])


def test_sample_pixel_truncates_coordinates(solid_image):
    solid_image[1, 2] = (9, 8, 7)
    assert sample_pixel(solid_image, Point2D(2.9, 1.7)) == (9, 8, 7)


def test_sample_pixel_last_column_and_row(solid_image):
    solid_image[99, 99] = (1, 1, 1)
    assert sample_pixel(solid_image, Point2D(99.99, 99.5)) == (1, 1, 1)


@pytest.mark.parametrize("x,y", [
    (100, 10), (10, 100), (-0.5, 10), (10, -1), (250, 250),
    (math.inf, 10), (10, -math.inf), (math.nan, 10), (10, math.nan),
])
def test_sample_pixel_out_of_bounds(solid_image, x, y):
    with pytest.raises(OutOfRangeError):
        sample_pixel(solid_image, Point2D(x, y))


def test_sample_pixel_rejects_grayscale():
    with pytest.raises(InvalidArgumentError):
        sample_pixel(np.zeros((5, 5), dtype=np.uint8), Point2D(1, 1))


def test_sample_colors_torso_and_legs(dressed_image, body_landmarks, shirt, trousers):
    assert sample_colors(dressed_image, body_landmarks, TORSO_SAMPLE_PARTS) == [shirt] * 4
    assert sample_colors(dressed_image, body_landmarks, LEG_SAMPLE_PARTS) == [trousers] * 4


def test_sample_colors_missing_landmark(dressed_image, body_points):
    del body_points[BodyPart.LEFT_ANKLE]
    with pytest.raises(MissingLandmarkError) as exc:
        sample_colors(dressed_image, LandmarkSet(body_points), LEG_SAMPLE_PARTS)
    assert exc.value.name == 'left_ankle'
