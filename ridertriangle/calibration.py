from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .geometry import Point2D, distance


@dataclass(frozen=True)
class CalibrationPoints:
    top: Point2D | None = None
    bot: Point2D | None = None

    @property
    def span_px(self) -> float:
        return distance(self.top, self.bot)

    @property
    def is_complete(self) -> bool:
        return self.top is not None and self.bot is not None


@dataclass(frozen=True)
class AlignmentTransform:
    """Maps a secondary photo's pixel space onto the primary photo: scale * p + translation."""

    scale: float = 1.0
    translation: Point2D = Point2D(0.0, 0.0)

    @classmethod
    def identity(cls) -> AlignmentTransform:
        return cls()

    def apply(self, point: Point2D | None) -> Point2D | None:
        if point is None:
            return None
        return Point2D(
            point.x * self.scale + self.translation.x,
            point.y * self.scale + self.translation.y,
        )

    def rescaled(self, src_factor: float, dst_factor: float) -> AlignmentTransform:
        """Same mapping for photos resized by src_factor (secondary) and dst_factor (primary)."""
        return AlignmentTransform(
            scale=self.scale * dst_factor / src_factor,
            translation=Point2D(self.translation.x * dst_factor, self.translation.y * dst_factor),
        )

    def to_matrix(self) -> np.ndarray:
        return np.array(
            [
                [self.scale, 0.0, self.translation.x],
                [0.0, self.scale, self.translation.y],
            ],
            dtype=np.float64,
        )


def calculate_px_per_mm(calib_pts: CalibrationPoints | None, diameter_mm: float | None) -> float:
    if calib_pts is None:
        return 0.0
    span = calib_pts.span_px
    if not span or not diameter_mm:
        return 0.0
    return span / diameter_mm


def calculate_scale(px_per_mm_a: float | None, px_per_mm_b: float | None) -> float:
    # No-op until both photos are calibrated
    if not px_per_mm_a or not px_per_mm_b:
        return 1.0
    return px_per_mm_a / px_per_mm_b


def calculate_translation(axle_a: Point2D | None, axle_b: Point2D | None, scale: float) -> Point2D:
    if axle_a is None or axle_b is None:
        return Point2D(0.0, 0.0)
    return Point2D(axle_a.x - axle_b.x * scale, axle_a.y - axle_b.y * scale)


def calculate_alignment(
    px_per_mm_primary: float | None,
    px_per_mm_secondary: float | None,
    axle_primary: Point2D | None,
    axle_secondary: Point2D | None,
) -> AlignmentTransform:
    scale = calculate_scale(px_per_mm_primary, px_per_mm_secondary)
    return AlignmentTransform(scale=scale, translation=calculate_translation(axle_primary, axle_secondary, scale))


def build_alignments(frames: dict) -> dict:
    """
    Aligns every bike onto the first one.

    frames maps bike key -> (px_per_mm, axle). The first key is the primary
    frame and always gets the identity transform.
    """
    keys = list(frames)
    if not keys:
        return {}
    primary_ratio, primary_axle = frames[keys[0]]
    result = {keys[0]: AlignmentTransform.identity()}
    for key in keys[1:]:
        ratio, axle = frames[key]
        result[key] = calculate_alignment(primary_ratio, ratio, primary_axle, axle)
    return result
