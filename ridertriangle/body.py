"""
Rider body measurements.

Segment lengths are estimated from standing height with average
anthropometric ratios (NASA-STD-3000, Dreyfuss, ANSUR II) and can be
overridden individually. All lengths are in millimetres.
"""
from __future__ import annotations

from dataclasses import dataclass, field

BODY_RATIOS: dict[str, float] = {
    "inseam":        0.47,    # floor to crotch
    "thigh":         0.245,   # crotch to knee centre
    "lower_leg":     0.225,   # knee centre to ankle
    "torso":         0.30,    # crotch to shoulder
    "sitting_height": 0.52,
    "arm_length":    0.44,    # shoulder to fingertip
    "upper_arm":     0.186,   # shoulder to elbow
    "forearm":       0.146,   # elbow to wrist
    "hand":          0.108,
    "shoulder_width": 0.26,
    "hip_width":     0.17,
    "foot_length":   0.15,
}

SEAT_POSITIONS: dict[str, int] = {
    "forward": 30,
    "center":  0,
    "back":   -30,
}

DEFAULT_HEIGHT_CM = 175.0


@dataclass(frozen=True)
class RiderSegments:
    thigh: float | None = None
    lower_leg: float | None = None
    torso: float | None = None
    upper_arm: float | None = None
    forearm: float | None = None


@dataclass(frozen=True)
class BodyMeasurements:
    height: int
    inseam: int
    thigh: int
    lower_leg: int
    torso: int
    arm_length: int
    upper_arm: int
    forearm: int
    shoulder_width: int
    seat_position: str = "center"
    seat_offset: int = 0

    def segments(self) -> RiderSegments:
        return RiderSegments(
            thigh=self.thigh,
            lower_leg=self.lower_leg,
            torso=self.torso,
            upper_arm=self.upper_arm,
            forearm=self.forearm,
        )


@dataclass(frozen=True)
class RiderProfile:
    name: str = "Default Rider"
    height_cm: float = DEFAULT_HEIGHT_CM
    # None means "use the estimate"
    overrides: dict = field(default_factory=lambda: {"inseam": None, "torso": None, "arm_length": None})
    seat_position: str = "center"

    def segments(self) -> RiderSegments:
        return effective_measurements(self).segments()


def estimate_from_height(height_cm: float) -> BodyMeasurements:
    height_mm = height_cm * 10

    def part(name: str) -> int:
        return round(height_mm * BODY_RATIOS[name])

    return BodyMeasurements(
        height=round(height_mm),
        inseam=part("inseam"),
        thigh=part("thigh"),
        lower_leg=part("lower_leg"),
        torso=part("torso"),
        arm_length=part("arm_length"),
        upper_arm=part("upper_arm"),
        forearm=part("forearm"),
        shoulder_width=part("shoulder_width"),
    )


def effective_measurements(profile: RiderProfile) -> BodyMeasurements:
    estimated = estimate_from_height(profile.height_cm)
    overrides = profile.overrides or {}
    seat_position = profile.seat_position if profile.seat_position in SEAT_POSITIONS else "center"

    def pick(name: str) -> int:
        value = overrides.get(name)
        return getattr(estimated, name) if value is None else value

    return BodyMeasurements(
        height=estimated.height,
        inseam=pick("inseam"),
        thigh=estimated.thigh,
        lower_leg=estimated.lower_leg,
        torso=pick("torso"),
        arm_length=pick("arm_length"),
        upper_arm=estimated.upper_arm,
        forearm=estimated.forearm,
        shoulder_width=estimated.shoulder_width,
        seat_position=seat_position,
        seat_offset=SEAT_POSITIONS[seat_position],
    )
