"""
POSE GEOMETRY ANALYSIS - Complete Implementation
Detects body landmarks with MediaPipe, measures the arm-raise angle at each
shoulder, estimates shirt/trouser colors from landmark pixels and draws the
torso/leg skeleton on a copy of the photo
"""

import argparse
import sys

import cv2
import matplotlib.pyplot as plt
import numpy as np

from pose_geometry import (
    LEG_SAMPLE_PARTS,
    TORSO_SAMPLE_PARTS,
    angle_between,
    average_color,
    check_image,
    format_angle_label,
    sample_colors,
)
from pose_types import (
    AnnotatedResult,
    BodyPart,
    DetectionFailedError,
    LandmarkSet,
    Point2D,
    PoseGeometryError,
)
from skeleton_renderer import render_skeleton


# Configuration
POSE_MODEL_PATH = 'images/pose_landmarker_heavy.task'
DEFAULT_STROKE_WIDTH = 3.0
DEFAULT_MIN_VISIBILITY = 0.0


def landmarks_from_mediapipe(pose_landmarks, width, height, min_visibility=DEFAULT_MIN_VISIBILITY):
    """
    Convert one MediaPipe pose (normalized landmarks) to a pixel LandmarkSet.

    Landmarks whose visibility is below `min_visibility` are left out, as if
    the model had not found them.
    """
    points = {}
    for part in BodyPart:
        idx = part.mediapipe_index
        if idx >= len(pose_landmarks):
            continue
        lm = pose_landmarks[idx]
        visibility = getattr(lm, 'visibility', None)
        if visibility is not None and visibility < min_visibility:
            continue
        points[part] = Point2D(float(lm.x) * width, float(lm.y) * height)
    return LandmarkSet(points)


def load_image(image_path):
    """Read an image from disk as an RGB array"""
    image = cv2.imread(str(image_path))
    if image is None:
        raise FileNotFoundError(f"Could not read image: {image_path}")
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def save_image(image_rgb, save_path):
    """Write an RGB(A) array to disk"""
    if image_rgb.shape[2] == 4:
        bgr = cv2.cvtColor(image_rgb, cv2.COLOR_RGBA2BGRA)
    else:
        bgr = cv2.cvtColor(image_rgb, cv2.COLOR_RGB2BGR)
    if not cv2.imwrite(str(save_path), bgr):
        raise OSError(f"Could not write image: {save_path}")


class PoseGeometryAnalyzer:
    """Arm angle, clothing color and skeleton overlay for a single photo"""

    def __init__(self, pose_model_path=POSE_MODEL_PATH,
                 stroke_width=DEFAULT_STROKE_WIDTH,
                 min_visibility=DEFAULT_MIN_VISIBILITY,
                 angle_precision=None):
        """Store configuration; the detector is created by initialize_detector()"""
        self.pose_model_path = pose_model_path
        self.stroke_width = stroke_width
        self.min_visibility = min_visibility
        self.angle_precision = angle_precision
        self.detector = None
        self._mp = None
        self.image_rgb = None
        self.landmarks = None
        self.result = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def initialize_detector(self):
        """Initialize MediaPipe Pose Landmarker"""
        try:
            import mediapipe as mp
            from mediapipe.tasks import python
            from mediapipe.tasks.python import vision
        except ImportError as e:
            raise RuntimeError(
                "MediaPipe is not installed. Install it with: pip install mediapipe"
            ) from e

        base_options = python.BaseOptions(model_asset_path=self.pose_model_path)
        options = vision.PoseLandmarkerOptions(
            base_options=base_options,
            output_segmentation_masks=False,
            num_poses=1
        )
        self._mp = mp
        self.detector = vision.PoseLandmarker.create_from_options(options)
        print("✓ MediaPipe Pose Detector initialized")

    def close(self):
        """Release the MediaPipe detector"""
        if self.detector is not None:
            self.detector.close()
            self.detector = None

    def load_image(self, image_path):
        """Load image for analysis"""
        self.image_rgb = load_image(image_path)
        print(f"✓ Image loaded: {self.image_rgb.shape}")
        return self.image_rgb

    def detect_pose_landmarks(self, image_rgb):
        """Detect pose landmarks using MediaPipe"""
        if self.detector is None:
            self.initialize_detector()

        h, w, c = check_image(image_rgb)
        image_format = self._mp.ImageFormat.SRGBA if c == 4 else self._mp.ImageFormat.SRGB
        mp_image = self._mp.Image(image_format=image_format, data=np.ascontiguousarray(image_rgb))
        detection_result = self.detector.detect(mp_image)

        if not detection_result.pose_landmarks:
            raise DetectionFailedError("No pose landmarks detected!")

        self.landmarks = landmarks_from_mediapipe(
            detection_result.pose_landmarks[0], w, h, self.min_visibility
        )
        print(f"✓ Detected {len(self.landmarks)} of {len(BodyPart)} body landmarks")
        return self.landmarks

    def calculate_arm_angles(self, landmarks):
        """Angle at each shoulder between the hip and the wrist"""
        left = angle_between(
            landmarks.require(BodyPart.LEFT_HIP),
            landmarks.require(BodyPart.LEFT_SHOULDER),
            landmarks.require(BodyPart.LEFT_WRIST),
        )
        right = angle_between(
            landmarks.require(BodyPart.RIGHT_HIP),
            landmarks.require(BodyPart.RIGHT_SHOULDER),
            landmarks.require(BodyPart.RIGHT_WRIST),
        )
        print(f"✓ Left arm angle: {left:.2f}°")
        print(f"✓ Right arm angle: {right:.2f}°")
        return left, right

    def estimate_clothing_colors(self, image_rgb, landmarks):
        """Average shirt color (shoulders/hips) and trouser color (knees/ankles)"""
        torso_color = average_color(sample_colors(image_rgb, landmarks, TORSO_SAMPLE_PARTS))
        leg_color = average_color(sample_colors(image_rgb, landmarks, LEG_SAMPLE_PARTS))
        print(f"✓ Shirt color: {torso_color}")
        print(f"✓ Trouser color: {leg_color}")
        return torso_color, leg_color

    def analyze(self, image_rgb, landmarks, stroke_width=None):
        """
        Annotate `image_rgb` using already-detected `landmarks`.

        The input array is left untouched; the returned AnnotatedResult holds a
        new image with the skeleton drawn on it.
        """
        if stroke_width is None:
            stroke_width = self.stroke_width

        check_image(image_rgb)
        left_angle, right_angle = self.calculate_arm_angles(landmarks)
        angle_label = format_angle_label(left_angle, right_angle, self.angle_precision)
        torso_color, leg_color = self.estimate_clothing_colors(image_rgb, landmarks)

        annotated = render_skeleton(image_rgb, landmarks, torso_color, leg_color, stroke_width)
        print("✓ All points successfully detected, skeleton drawn")

        self.result = AnnotatedResult(
            image=annotated,
            angle_label=angle_label,
            left_angle=left_angle,
            right_angle=right_angle,
            torso_color=torso_color,
            leg_color=leg_color,
        )
        return self.result

    def analyze_image(self, image_rgb):
        """Detect landmarks on `image_rgb` and annotate it"""
        landmarks = self.detect_pose_landmarks(image_rgb)
        return self.analyze(image_rgb, landmarks)

    def run_complete_analysis(self, image_path, save_path=None):
        """Run complete pose geometry pipeline"""
        print("\n" + "="*80)
        print("STARTING POSE GEOMETRY ANALYSIS")
        print("="*80 + "\n")

        # Step 1: Initialize detector
        if self.detector is None:
            self.initialize_detector()

        # Step 2: Load image
        self.load_image(image_path)

        # Step 3: Detect, measure and draw
        result = self.analyze_image(self.image_rgb)

        # Step 4: Save
        if save_path:
            save_image(result.image, save_path)
            print(f"✓ Saved visualization: {save_path}")

        print("\n" + "="*80)
        print(result.angle_label)
        print("="*80 + "\n")

        return result


def show_result(result, title='Pose Geometry'):
    """Display an AnnotatedResult with matplotlib"""
    plt.figure(figsize=(12, 8))
    plt.imshow(result.image)
    plt.title(f"{title}\n{result.angle_label}", fontsize=14)
    plt.axis('off')
    plt.tight_layout()
    plt.show()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Draw a torso/leg skeleton on a photo and measure arm angles."
    )
    parser.add_argument("--image", required=True, help="Input photo path.")
    parser.add_argument("--output", default='pose_geometry_overlay.jpg',
                        help="Where to save the annotated image.")
    parser.add_argument("--model", default=POSE_MODEL_PATH,
                        help="MediaPipe pose landmarker .task file.")
    parser.add_argument("--stroke-width", type=float, default=DEFAULT_STROKE_WIDTH,
                        help="Skeleton line thickness in pixels.")
    parser.add_argument("--min-visibility", type=float, default=DEFAULT_MIN_VISIBILITY,
                        help="Treat landmarks below this visibility as missing.")
    parser.add_argument("--precision", type=int, default=None,
                        help="Decimals shown in the angle label.")
    parser.add_argument("--show", action='store_true',
                        help="Display the result with matplotlib.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    analyzer = PoseGeometryAnalyzer(
        pose_model_path=args.model,
        stroke_width=args.stroke_width,
        min_visibility=args.min_visibility,
        angle_precision=args.precision,
    )
    with analyzer:
        try:
            result = analyzer.run_complete_analysis(args.image, save_path=args.output)
        except (PoseGeometryError, OSError) as e:
            print(f"✗ Pose detection failed: {e}", file=sys.stderr)
            return 1

    if args.show:
        show_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
