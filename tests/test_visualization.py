import numpy as np

from ridertriangle.calibration import AlignmentTransform
from ridertriangle.comfort import get_angles_summary
from ridertriangle.config import RenderConfig
from ridertriangle.ergonomics import AngleResult
from ridertriangle.geometry import MarkerSet, Point2D
from ridertriangle.skeleton import calculate_skeleton_joints
from ridertriangle.body import RiderSegments
from ridertriangle.visualization import (
    compose_overlay,
    draw_angle_labels,
    draw_rider_triangle,
    draw_skeleton,
    save_outputs,
    transform_skeleton,
)

MARKERS = MarkerSet(seat=Point2D(200, 150), peg=Point2D(190, 380), bar=Point2D(400, 60))


def test_compose_overlay_blends_only_covered_area():
    primary = np.zeros((100, 200, 3), dtype=np.uint8)
    secondary = np.full((100, 100, 3), 200, dtype=np.uint8)
    canvas = compose_overlay(primary, secondary, AlignmentTransform.identity(), 0.5)
    assert canvas.shape == primary.shape
    assert canvas[50, 50, 0] == 100
    assert canvas[50, 150, 0] == 0


def test_compose_overlay_applies_translation():
    primary = np.zeros((100, 200, 3), dtype=np.uint8)
    secondary = np.full((50, 50, 3), 200, dtype=np.uint8)
    transform = AlignmentTransform(scale=1.0, translation=Point2D(100, 0))
    canvas = compose_overlay(primary, secondary, transform, 1.0)
    assert canvas[10, 120, 0] == 200
    assert canvas[10, 20, 0] == 0


def test_draw_rider_triangle_marks_image():
    image = np.zeros((500, 500, 3), dtype=np.uint8)
    draw_rider_triangle(image, MARKERS, (0, 0, 255), RenderConfig())
    assert image.any()


def test_draw_skeleton_uses_zone_colors():
    cfg = RenderConfig()
    image = np.zeros((500, 500, 3), dtype=np.uint8)
    segments = RiderSegments(thigh=180, lower_leg=170, torso=220, upper_arm=140, forearm=110)
    joints = calculate_skeleton_joints(MARKERS, segments, 1.0)
    summary = get_angles_summary(AngleResult(knee=145, hip=100, back=30, arm=160))
    draw_skeleton(image, joints, summary, cfg)
    comfort = np.array(cfg.palette["comfort"], dtype=np.uint8)
    assert (image == comfort).all(axis=2).any()


def test_draw_angle_labels():
    image = np.zeros((200, 400, 3), dtype=np.uint8)
    angles = AngleResult(knee=145)
    draw_angle_labels(image, (10, 30), "Bike", angles, get_angles_summary(angles), (255, 255, 255), RenderConfig())
    assert image.any()


def test_transform_skeleton_scales_head():
    segments = RiderSegments(thigh=180, lower_leg=170, torso=220, upper_arm=140, forearm=110)
    joints = calculate_skeleton_joints(MARKERS, segments, 1.0)
    moved = transform_skeleton(joints, AlignmentTransform(scale=2.0, translation=Point2D(5, 5)))
    assert moved.hip == Point2D(405, 305)
    assert moved.head.radius == joints.head.radius * 2


def test_save_outputs(tmp_path):
    path = save_outputs(tmp_path / "out", np.zeros((10, 10, 3), dtype=np.uint8), "overlay.png")
    assert path.exists()
