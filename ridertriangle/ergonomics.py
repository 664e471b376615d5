"""
Ergonomic joint angles for a rider on a bike.

Angles are estimated from the rider triangle (seat, footpeg, handlebar) and
the rider's segment lengths. Every function returns None when an input is
missing; 0 degrees is a valid angle and is never used as a sentinel.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from .body import RiderSegments
from .geometry import DistanceSet, MarkerSet, Point2D, distance, law_of_cosines_angle, vector_angle

DEFAULT_SHOULDER_OFFSET_MM = 100.0
ARM_FLOOR_DEG = 45.0


@dataclass(frozen=True)
class AngleResult:
    knee: float | None = None
    hip: float | None = None
    back: float | None = None
    arm: float | None = None

    @classmethod
    def empty(cls) -> AngleResult:
        return cls()

    def as_dict(self) -> dict:
        return {"knee": self.knee, "hip": self.hip, "back": self.back, "arm": self.arm}


@dataclass(frozen=True)
class ManualMeasurements:
    """
    Offsets measured on the bike itself, in mm.

    Peg is behind (+horizontal) and below (+vertical) the seat; the bar is in
    front (+horizontal) and above (+vertical) the seat.
    """

    seat_to_peg_horizontal: float | None = None
    seat_to_peg_vertical: float | None = None
    seat_to_bar_horizontal: float | None = None
    seat_to_bar_vertical: float | None = None
    seat_height: float | None = None

    @property
    def has_peg(self) -> bool:
        return self.seat_to_peg_horizontal is not None and self.seat_to_peg_vertical is not None

    @property
    def has_bar(self) -> bool:
        return self.seat_to_bar_horizontal is not None and self.seat_to_bar_vertical is not None

    @property
    def is_complete(self) -> bool:
        return self.has_peg and self.has_bar

    def distances(self) -> DistanceSet:
        seat_peg = seat_bar = peg_bar = None
        if self.has_peg:
            seat_peg = math.hypot(self.seat_to_peg_horizontal, self.seat_to_peg_vertical)
        if self.has_bar:
            seat_bar = math.hypot(self.seat_to_bar_horizontal, self.seat_to_bar_vertical)
        if self.is_complete:
            peg_bar = math.hypot(
                self.seat_to_peg_horizontal + self.seat_to_bar_horizontal,
                self.seat_to_peg_vertical + self.seat_to_bar_vertical,
            )
        return DistanceSet(seat_peg=seat_peg, seat_bar=seat_bar, peg_bar=peg_bar)


def _missing(*values) -> bool:
    for value in values:
        if value is None or not math.isfinite(value) or value <= 0:
            return True
    return False


def _limb_angle(reach: float, a: float, b: float) -> float | None:
    if reach > a + b:
        return 180.0
    if reach < abs(a - b):
        return None
    return law_of_cosines_angle(a, b, reach)


def calculate_knee_angle(seat_peg_mm: float | None, thigh_mm: float | None, lower_leg_mm: float | None) -> float | None:
    """
    Knee angle from the seat-to-peg distance, law of cosines.

    Over-reach means a fully extended leg (180). A seat-peg distance shorter
    than |thigh - lower leg| cannot be reached by a bent leg and gives None.
    """
    if _missing(seat_peg_mm, thigh_mm, lower_leg_mm):
        return None
    return _limb_angle(seat_peg_mm, thigh_mm, lower_leg_mm)


def _hip_from_vectors(thigh_x: float, thigh_y: float, torso_x: float, torso_y: float) -> float | None:
    return vector_angle(thigh_x, thigh_y, torso_x, torso_y)


def _back_from_vector(dx: float, dy: float) -> float | None:
    if not (math.isfinite(dx) and math.isfinite(dy)) or (dx == 0 and dy == 0):
        return None
    # screen y grows downward, so -dy points up
    angle = math.degrees(math.atan2(abs(dx), -dy))
    if dy > 0:
        # bar below the seat
        angle = 90 + (90 - angle)
    return abs(angle)


def calculate_hip_angle(
    seat: Point2D | None,
    peg: Point2D | None,
    bar: Point2D | None,
    torso_mm: float | None,
) -> float | None:
    """
    Angle at the hip between thigh and torso.

    The thigh follows seat->peg and the torso follows seat->bar; the bar
    direction stands in for the shoulder, which has no marker of its own.
    """
    if seat is None or peg is None or bar is None or _missing(torso_mm):
        return None
    return _hip_from_vectors(peg.x - seat.x, peg.y - seat.y, bar.x - seat.x, bar.y - seat.y)


def calculate_back_angle(seat: Point2D | None, bar: Point2D | None) -> float | None:
    """Torso lean from vertical: 0 is upright, 90 is a flat racing tuck."""
    if seat is None or bar is None:
        return None
    return _back_from_vector(bar.x - seat.x, bar.y - seat.y)


def calculate_arm_angle(
    seat_bar_mm: float | None,
    upper_arm_mm: float | None,
    forearm_mm: float | None,
    shoulder_offset_mm: float = 0.0,
) -> float | None:
    if _missing(seat_bar_mm, upper_arm_mm, forearm_mm):
        return None
    reach = max(0.0, seat_bar_mm - (shoulder_offset_mm or 0.0))
    angle = _limb_angle(reach, upper_arm_mm, forearm_mm)
    if angle is None:
        # short reach is common for arms, report the floor instead of failing
        return ARM_FLOOR_DEG
    return angle


def calculate_all_angles(
    markers: MarkerSet | None,
    segments: RiderSegments | None,
    px_per_mm: float | None,
    shoulder_offset_mm: float = DEFAULT_SHOULDER_OFFSET_MM,
) -> AngleResult:
    if markers is None or segments is None or not px_per_mm:
        return AngleResult.empty()

    seat, peg, bar = markers.seat, markers.peg, markers.bar
    seat_peg_mm = distance(seat, peg) / px_per_mm if seat is not None and peg is not None else None
    seat_bar_mm = distance(seat, bar) / px_per_mm if seat is not None and bar is not None else None

    return AngleResult(
        knee=calculate_knee_angle(seat_peg_mm, segments.thigh, segments.lower_leg),
        hip=calculate_hip_angle(seat, peg, bar, segments.torso),
        back=calculate_back_angle(seat, bar),
        arm=calculate_arm_angle(seat_bar_mm, segments.upper_arm, segments.forearm, shoulder_offset_mm),
    )


def calculate_all_angles_from_distances(
    distances: DistanceSet | None,
    manual: ManualMeasurements | None,
    segments: RiderSegments | None,
    shoulder_offset_mm: float = DEFAULT_SHOULDER_OFFSET_MM,
) -> AngleResult:
    """
    Angles for manually measured bikes.

    Knee and arm use the direct distances. Hip and back use the entered
    offsets as vectors from the seat, with y pointing down like a photo.
    """
    if distances is None or segments is None:
        return AngleResult.empty()

    knee = calculate_knee_angle(distances.seat_peg, segments.thigh, segments.lower_leg)
    arm = calculate_arm_angle(distances.seat_bar, segments.upper_arm, segments.forearm, shoulder_offset_mm)

    hip = back = None
    if manual is not None and manual.is_complete:
        thigh_x, thigh_y = -manual.seat_to_peg_horizontal, manual.seat_to_peg_vertical
        torso_x, torso_y = manual.seat_to_bar_horizontal, -manual.seat_to_bar_vertical
        if not _missing(segments.torso):
            hip = _hip_from_vectors(thigh_x, thigh_y, torso_x, torso_y)
        back = _back_from_vector(torso_x, torso_y)

    return AngleResult(knee=knee, hip=hip, back=back, arm=arm)


def format_angle(angle: float | None, decimals: int = 0) -> str:
    if angle is None or (isinstance(angle, float) and math.isnan(angle)):
        return "–"
    return f"{angle:.{decimals}f}°"
