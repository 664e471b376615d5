"""
Stick-figure joint positions for the rider overlay.

Hinge joints (knee, elbow) are solved with a two-circle intersection between
their fixed endpoints. The shoulder has no independent anchor and is
approximated from the hip and the bar direction. Everything runs in the
pixel space of the input markers; results are for drawing, not measuring.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

from .body import RiderSegments
from .config import ErgonomicsConfig, SkeletonConfig
from .geometry import MarkerSet, Point2D


@dataclass(frozen=True)
class Head:
    x: float
    y: float
    radius: float

    @property
    def center(self) -> Point2D:
        return Point2D(self.x, self.y)


@dataclass(frozen=True)
class SkeletonJoints:
    hip: Point2D
    knee: Point2D | None
    foot: Point2D
    shoulder: Point2D | None
    elbow: Point2D | None
    hand: Point2D
    head: Head | None

    def bones(self) -> Iterator[tuple[str, Point2D, Point2D]]:
        """Yields (angle type, start, end) for every drawable bone."""
        chain = (
            ("knee", self.hip, self.knee),
            ("knee", self.knee, self.foot),
            ("back", self.hip, self.shoulder),
            ("arm", self.shoulder, self.elbow),
            ("arm", self.elbow, self.hand),
        )
        for name, start, end in chain:
            if start is not None and end is not None:
                yield name, start, end

    def as_dict(self) -> dict:
        out = {}
        for name in ("hip", "knee", "foot", "shoulder", "elbow", "hand"):
            point = getattr(self, name)
            out[name] = None if point is None else point.to_dict()
        out["head"] = None if self.head is None else {"x": self.head.x, "y": self.head.y, "radius": self.head.radius}
        return out


def _hinge_position(start: Point2D, end: Point2D, seg_a: float, seg_b: float, bend: int) -> Point2D:
    dx = end.x - start.x
    dy = end.y - start.y
    dist = math.hypot(dx, dy)

    if dist > seg_a + seg_b:
        # fully extended, split the straight line by segment length
        ratio = seg_a / (seg_a + seg_b)
        return Point2D(start.x + dx * ratio, start.y + dy * ratio)

    if dist < abs(seg_a - seg_b) or dist == 0:
        return Point2D(start.x + dx * 0.5, start.y + dy * 0.5)

    along = (seg_a * seg_a - seg_b * seg_b + dist * dist) / (2 * dist)
    across = math.sqrt(max(0.0, seg_a * seg_a - along * along))

    ux = dx / dist
    uy = dy / dist
    # bend=+1 -> (-uy, ux), bend=-1 -> (uy, -ux)
    px = -uy * bend
    py = ux * bend

    return Point2D(start.x + ux * along + px * across, start.y + uy * along + py * across)


def calculate_knee_position(hip: Point2D | None, foot: Point2D | None, thigh_px: float, lower_leg_px: float) -> Point2D | None:
    if hip is None or foot is None:
        return None
    # fixed handedness so the knee never flips sides while dragging
    return _hinge_position(hip, foot, thigh_px, lower_leg_px, bend=1)


def calculate_elbow_position(shoulder: Point2D | None, hand: Point2D | None, upper_arm_px: float, forearm_px: float) -> Point2D | None:
    if shoulder is None or hand is None:
        return None
    # elbow bends down and out
    return _hinge_position(shoulder, hand, upper_arm_px, forearm_px, bend=-1)


def calculate_shoulder_position(
    hip: Point2D | None,
    hand: Point2D | None,
    torso_px: float,
    config: SkeletonConfig = SkeletonConfig(),
) -> Point2D | None:
    if hip is None or hand is None:
        return None

    dx = hand.x - hip.x
    dy = hand.y - hip.y
    dist = math.hypot(dx, dy)

    if dist == 0:
        return Point2D(hip.x, hip.y - torso_px)

    horizontal = (dx / dist) * torso_px * config.horizontal_fraction * config.lean_factor
    vertical = -torso_px * config.vertical_fraction
    return Point2D(hip.x + horizontal, hip.y + vertical)


def calculate_head(shoulder: Point2D | None, torso_px: float, config: SkeletonConfig = SkeletonConfig()) -> Head | None:
    if shoulder is None:
        return None
    radius = torso_px * config.head_radius_fraction
    return Head(x=shoulder.x, y=shoulder.y - radius * config.head_lift, radius=radius)


def _segment_px(value: float | None, default_mm: float, px_per_mm: float) -> float:
    mm = value if value else default_mm
    return mm * px_per_mm


def calculate_skeleton_joints(
    markers: MarkerSet | None,
    segments: RiderSegments | None,
    px_per_mm: float | None,
    config: SkeletonConfig = SkeletonConfig(),
    defaults: ErgonomicsConfig = ErgonomicsConfig(),
) -> SkeletonJoints | None:
    if markers is None or not markers.is_complete or not px_per_mm:
        return None
    segments = segments or RiderSegments()

    thigh_px = _segment_px(segments.thigh, defaults.default_thigh_mm, px_per_mm)
    lower_leg_px = _segment_px(segments.lower_leg, defaults.default_lower_leg_mm, px_per_mm)
    torso_px = _segment_px(segments.torso, defaults.default_torso_mm, px_per_mm)
    upper_arm_px = _segment_px(segments.upper_arm, defaults.default_upper_arm_mm, px_per_mm)
    forearm_px = _segment_px(segments.forearm, defaults.default_forearm_mm, px_per_mm)

    hip, foot, hand = markers.seat, markers.peg, markers.bar

    knee = calculate_knee_position(hip, foot, thigh_px, lower_leg_px)
    shoulder = calculate_shoulder_position(hip, hand, torso_px, config)
    elbow = calculate_elbow_position(shoulder, hand, upper_arm_px, forearm_px)
    head = calculate_head(shoulder, torso_px, config)

    return SkeletonJoints(hip=hip, knee=knee, foot=foot, shoulder=shoulder, elbow=elbow, hand=hand, head=head)


def segment_color(status: str | None, palette: dict) -> tuple[int, int, int]:
    return palette.get(status, palette["unknown"])
