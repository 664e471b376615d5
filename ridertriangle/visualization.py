from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np

from .calibration import AlignmentTransform
from .comfort import AnglesSummary
from .config import RenderConfig
from .ergonomics import AngleResult, format_angle
from .geometry import MarkerSet, Point2D
from .skeleton import Head, SkeletonJoints, segment_color

logger = logging.getLogger(__name__)


def _px(point: Point2D) -> tuple[int, int]:
    return int(round(point.x)), int(round(point.y))


def compose_overlay(primary: np.ndarray, secondary: np.ndarray, transform: AlignmentTransform, alpha: float) -> np.ndarray:
    """Warps the secondary photo into the primary frame and blends it where it lands."""
    h, w = primary.shape[:2]
    matrix = transform.to_matrix()
    warped = cv2.warpAffine(secondary, matrix, (w, h), flags=cv2.INTER_LINEAR, borderValue=(0, 0, 0))
    coverage = cv2.warpAffine(
        np.full(secondary.shape[:2], 255, dtype=np.uint8), matrix, (w, h), flags=cv2.INTER_NEAREST, borderValue=0
    )

    blended = cv2.addWeighted(primary, 1 - alpha, warped, alpha, 0)
    canvas = primary.copy()
    canvas[coverage > 0] = blended[coverage > 0]
    return canvas


def draw_rider_triangle(image: np.ndarray, markers: MarkerSet, color: tuple[int, int, int], cfg: RenderConfig) -> np.ndarray:
    points = [p for p in (markers.seat, markers.peg, markers.bar) if p is not None]
    if len(points) == 3:
        cv2.polylines(image, [np.array([_px(p) for p in points], dtype=np.int32)], True, color, cfg.triangle_thickness_px)
    for point in points:
        cv2.circle(image, _px(point), cfg.marker_radius_px, color, -1)
        cv2.circle(image, _px(point), cfg.marker_radius_px + 2, (255, 255, 255), 2)
    return image


def draw_skeleton(image: np.ndarray, joints: SkeletonJoints, summary: AnglesSummary | None, cfg: RenderConfig) -> np.ndarray:
    """Draws the stick figure, each bone coloured by the comfort zone of its joint angle."""
    for angle_type, start, end in joints.bones():
        status = summary.zones[angle_type].status if summary is not None else None
        cv2.line(image, _px(start), _px(end), segment_color(status, cfg.palette), cfg.bone_thickness_px, cv2.LINE_AA)

    if joints.head is not None:
        status = summary.zones["back"].status if summary is not None else None
        radius = max(1, int(round(joints.head.radius)))
        cv2.circle(image, _px(joints.head.center), radius, segment_color(status, cfg.palette), cfg.bone_thickness_px, cv2.LINE_AA)
    return image


def draw_angle_labels(
    image: np.ndarray,
    origin: tuple[int, int],
    label: str,
    angles: AngleResult,
    summary: AnglesSummary,
    color: tuple[int, int, int],
    cfg: RenderConfig,
) -> np.ndarray:
    x, y = origin
    cv2.putText(image, label, (x, y), cv2.FONT_HERSHEY_SIMPLEX, 0.75, color, 2)
    for i, (name, value) in enumerate(angles.as_dict().items(), start=1):
        status = summary.zones[name].status
        text = f"{name.capitalize()}: {format_angle(value)} ({status.value})"
        cv2.putText(
            image,
            text.replace("°", " deg").replace("–", "-"),
            (x, y + 26 * i),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.6,
            segment_color(status, cfg.palette),
            2,
        )
    return image


def transform_skeleton(joints: SkeletonJoints, transform: AlignmentTransform) -> SkeletonJoints:
    head = joints.head
    if head is not None:
        center = transform.apply(head.center)
        head = Head(x=center.x, y=center.y, radius=head.radius * transform.scale)
    return SkeletonJoints(
        hip=transform.apply(joints.hip),
        knee=transform.apply(joints.knee),
        foot=transform.apply(joints.foot),
        shoulder=transform.apply(joints.shoulder),
        elbow=transform.apply(joints.elbow),
        hand=transform.apply(joints.hand),
        head=head,
    )


def save_outputs(result_dir: Path, overlay: np.ndarray, overlay_name: str) -> Path:
    result_dir.mkdir(parents=True, exist_ok=True)
    path = result_dir / overlay_name
    if not cv2.imwrite(str(path), overlay):
        raise OSError(f"Could not write image: {path}")
    logger.info(f"Saved overlay: {path}")
    return path
