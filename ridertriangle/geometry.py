from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float

    @classmethod
    def from_any(cls, value) -> Point2D | None:
        """Builds a point from a Point2D, an {"x", "y"} mapping or an (x, y) pair."""
        if value is None:
            return None
        if isinstance(value, Point2D):
            return value
        try:
            if isinstance(value, dict):
                x, y = value["x"], value["y"]
            else:
                x, y = value
            x, y = float(x), float(y)
        except (KeyError, TypeError, ValueError):
            return None
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        return cls(x, y)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class MarkerSet:
    seat: Point2D | None = None
    peg: Point2D | None = None
    bar: Point2D | None = None

    @property
    def is_complete(self) -> bool:
        return self.seat is not None and self.peg is not None and self.bar is not None

    def transformed(self, fn: Callable[[Point2D | None], Point2D | None]) -> MarkerSet:
        return MarkerSet(seat=fn(self.seat), peg=fn(self.peg), bar=fn(self.bar))


@dataclass(frozen=True)
class DistanceSet:
    seat_peg: float | None
    seat_bar: float | None
    peg_bar: float | None

    def as_dict(self) -> dict:
        return {"seat_peg": self.seat_peg, "seat_bar": self.seat_bar, "peg_bar": self.peg_bar}


def distance(a: Point2D | None, b: Point2D | None) -> float:
    if a is None or b is None:
        return 0.0
    return math.hypot(a.x - b.x, a.y - b.y)


def distance_in_mm(a: Point2D | None, b: Point2D | None, px_per_mm: float | None) -> float:
    if not px_per_mm:
        return 0.0
    return distance(a, b) / px_per_mm


def get_distances(markers: MarkerSet | None, px_per_mm: float | None) -> DistanceSet:
    if markers is None:
        return DistanceSet(0.0, 0.0, 0.0)
    return DistanceSet(
        seat_peg=distance_in_mm(markers.seat, markers.peg, px_per_mm),
        seat_bar=distance_in_mm(markers.seat, markers.bar, px_per_mm),
        peg_bar=distance_in_mm(markers.peg, markers.bar, px_per_mm),
    )


def clamp_cos(value: float) -> float:
    return max(-1.0, min(1.0, value))


def vector_angle(ax: float, ay: float, bx: float, by: float) -> float | None:
    """Angle in degrees between vectors a and b, None for zero-length or non-finite input."""
    if not all(math.isfinite(v) for v in (ax, ay, bx, by)):
        return None
    mag_a = math.hypot(ax, ay)
    mag_b = math.hypot(bx, by)
    if mag_a == 0 or mag_b == 0:
        return None
    cos_angle = (ax * bx + ay * by) / (mag_a * mag_b)
    return math.degrees(math.acos(clamp_cos(cos_angle)))


def law_of_cosines_angle(a: float, b: float, c: float) -> float:
    """Angle in degrees between sides a and b of a triangle, opposite side c."""
    cos_angle = (a * a + b * b - c * c) / (2 * a * b)
    return math.degrees(math.acos(clamp_cos(cos_angle)))


def angle_between(a: Point2D | None, vertex: Point2D | None, c: Point2D | None) -> float | None:
    if a is None or vertex is None or c is None:
        return None
    return vector_angle(a.x - vertex.x, a.y - vertex.y, c.x - vertex.x, c.y - vertex.y)
