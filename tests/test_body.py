import pytest

from ridertriangle.body import (
    SEAT_POSITIONS,
    RiderProfile,
    effective_measurements,
    estimate_from_height,
)


def test_estimate_from_height():
    body = estimate_from_height(175)
    assert body.height == 1750
    assert body.thigh == 429
    assert body.torso == 525
    assert body.upper_arm == pytest.approx(326, abs=1)
    assert body.forearm == pytest.approx(256, abs=1)


def test_estimates_scale_with_height():
    short = estimate_from_height(160)
    tall = estimate_from_height(190)
    assert short.thigh < tall.thigh
    assert short.arm_length < tall.arm_length


def test_overrides_replace_estimates():
    profile = RiderProfile(height_cm=175, overrides={"inseam": 800, "torso": 560, "arm_length": None})
    body = effective_measurements(profile)
    assert body.inseam == 800
    assert body.torso == 560
    assert body.arm_length == estimate_from_height(175).arm_length
    assert profile.segments().torso == 560


def test_seat_position_offset():
    body = effective_measurements(RiderProfile(seat_position="forward"))
    assert body.seat_offset == SEAT_POSITIONS["forward"]
    body = effective_measurements(RiderProfile(seat_position="sideways"))
    assert body.seat_position == "center"
    assert body.seat_offset == 0


def test_segments_are_complete():
    segments = RiderProfile().segments()
    for value in (segments.thigh, segments.lower_leg, segments.torso, segments.upper_arm, segments.forearm):
        assert value > 0
