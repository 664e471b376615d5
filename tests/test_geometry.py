import math

import pytest

from ridertriangle.geometry import (
    DistanceSet,
    MarkerSet,
    Point2D,
    angle_between,
    distance,
    distance_in_mm,
    get_distances,
    law_of_cosines_angle,
    vector_angle,
)


def test_distance_and_missing_points():
    assert distance(Point2D(0, 0), Point2D(3, 4)) == 5
    assert distance(None, Point2D(3, 4)) == 0
    assert distance_in_mm(Point2D(0, 0), Point2D(30, 40), 0.5) == 100
    assert distance_in_mm(Point2D(0, 0), Point2D(30, 40), 0) == 0


def test_get_distances():
    markers = MarkerSet(seat=Point2D(0, 0), peg=Point2D(0, 40), bar=Point2D(30, 0))
    result = get_distances(markers, 0.1)
    assert result.seat_peg == pytest.approx(400)
    assert result.seat_bar == pytest.approx(300)
    assert result.peg_bar == pytest.approx(500)


def test_get_distances_without_markers():
    assert get_distances(None, 1.0) == DistanceSet(0.0, 0.0, 0.0)


def test_vector_angle():
    assert vector_angle(1, 0, 0, 1) == pytest.approx(90)
    assert vector_angle(1, 0, -1, 0) == pytest.approx(180)
    assert vector_angle(0, 0, 1, 0) is None


def test_law_of_cosines_clamps_degenerate_triangles():
    # 3-4-5 triangle, right angle opposite the hypotenuse
    assert law_of_cosines_angle(3, 4, 5) == pytest.approx(90)
    # slightly over-reached input must not raise a math domain error
    assert law_of_cosines_angle(1, 1, 2.0000001) == pytest.approx(180)
    assert not math.isnan(law_of_cosines_angle(1, 1, 0))


def test_angle_between():
    assert angle_between(Point2D(1, 0), Point2D(0, 0), Point2D(0, 1)) == pytest.approx(90)
    assert angle_between(None, Point2D(0, 0), Point2D(0, 1)) is None


def test_point_from_any():
    assert Point2D.from_any({"x": 1, "y": "2"}) == Point2D(1.0, 2.0)
    assert Point2D.from_any((3, 4)) == Point2D(3.0, 4.0)
    assert Point2D.from_any({"x": 1}) is None
    assert Point2D.from_any("nope") is None
    assert Point2D.from_any(None) is None


def test_marker_set_transformed():
    markers = MarkerSet(seat=Point2D(1, 1), peg=None, bar=Point2D(2, 2))
    moved = markers.transformed(lambda p: None if p is None else Point2D(p.x + 1, p.y))
    assert moved == MarkerSet(seat=Point2D(2, 1), peg=None, bar=Point2D(3, 2))
    assert not moved.is_complete


@pytest.mark.parametrize("value", [{"x": math.nan, "y": 100}, (1, math.inf), {"x": "nan", "y": 0}])
def test_point_from_any_rejects_non_finite(value):
    assert Point2D.from_any(value) is None


def test_vector_angle_non_finite():
    assert vector_angle(math.nan, 1, 1, 0) is None
    assert vector_angle(1, 0, 0, math.inf) is None
