import json

import pytest

from ridertriangle.comfort import RidingStyle
from ridertriangle.geometry import Point2D
from ridertriangle.session import BIKE_PRESETS, BikeSetup, load_session, parse_session


def test_parse_session(session_payload, tmp_path):
    session = parse_session(session_payload, base_dir=tmp_path)
    assert session.riding_style == RidingStyle.TOURING
    assert session.rider.height_cm == 180
    assert [bike.key for bike in session.bikes] == ["gsx", "vstrom"]

    gsx = session.primary
    assert gsx.label == BIKE_PRESETS["gsx"]["label"]
    assert gsx.tire_spec == "190/50 ZR17M/C"
    assert gsx.image == tmp_path / "gsx.jpg"
    assert gsx.markers.seat == Point2D(300, 100)
    assert gsx.is_calibrated


def test_tire_override_and_front_wheel(session_payload, tmp_path):
    session_payload["bikes"][0]["tires"] = {"front": "120/60 ZR17"}
    session_payload["bikes"][0]["wheel"] = "front"
    bike = parse_session(session_payload, tmp_path).primary
    assert bike.tire_spec == "120/60 ZR17"
    assert bike.tires["rear"] == "190/50 ZR17M/C"


def test_bike_without_tire_spec():
    bike = BikeSetup(key="custom")
    assert bike.tire_spec is None
    assert bike.diameter_mm == 0
    assert not bike.is_calibrated


def test_manual_bike(tmp_path):
    payload = {
        "bikes": [
            {
                "key": "manual",
                "mode": "manual",
                "manual": {
                    "seat_to_peg_horizontal": 100,
                    "seat_to_peg_vertical": "450",
                    "seat_to_bar_horizontal": 500,
                    "seat_to_bar_vertical": 250,
                },
            }
        ]
    }
    session = parse_session(payload, tmp_path)
    bike = session.primary
    assert bike.uses_manual
    assert bike.manual.seat_to_peg_vertical == 450.0
    assert session.riding_style == RidingStyle.COMMUTE


@pytest.mark.parametrize(
    "mutate, message",
    [
        (lambda p: p.update(bikes=[]), "non-empty"),
        (lambda p: p.update(riding_style="cruiser"), "riding style"),
        (lambda p: p["bikes"][0].update(preset="harley"), "unknown preset"),
        (lambda p: p["bikes"][0].update(wheel="middle"), "wheel"),
        (lambda p: p["bikes"][0].update(mode="video"), "mode"),
        (lambda p: p["bikes"][0].update(axle={"x": 1}), r"bikes\[0\]\.axle"),
        (lambda p: p["bikes"][1].update(key="gsx"), "duplicate"),
        (lambda p: p["bikes"][0].update(tires="190/50 ZR17"), "tires"),
        (lambda p: p.update(rider={"overrides": {"neck": 10}}), "unknown measurement"),
        (lambda p: p["bikes"][0].update(manual={"seat_height": "tall"}), "expected a number"),
    ],
)
def test_parse_errors(session_payload, mutate, message):
    mutate(session_payload)
    with pytest.raises(ValueError, match=message):
        parse_session(session_payload)


def test_load_session(session_payload, tmp_path):
    path = tmp_path / "session.json"
    path.write_text(json.dumps(session_payload), encoding="utf-8")
    session = load_session(path)
    assert session.primary.image == tmp_path / "gsx.jpg"


def test_load_session_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_session(tmp_path / "nope.json")


def test_load_session_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="invalid JSON"):
        load_session(path)


def test_nan_marker_rejected(session_payload, tmp_path):
    session_payload["bikes"][0]["markers"]["seat"] = {"x": float("nan"), "y": 100}
    path = tmp_path / "session.json"
    # json.dumps writes the bare NaN literal, which json.loads accepts
    path.write_text(json.dumps(session_payload), encoding="utf-8")
    with pytest.raises(ValueError, match=r"bikes\[0\]\.markers\.seat"):
        load_session(path)


def test_non_finite_manual_value_rejected():
    payload = {"bikes": [{"mode": "manual", "manual": {"seat_to_peg_vertical": "inf"}}]}
    with pytest.raises(ValueError, match="finite"):
        parse_session(payload)
