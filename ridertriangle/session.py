"""
Comparison session: the bikes to compare, the rider and the riding style.

Sessions are plain JSON produced by whatever front end places the markers:

    {
      "riding_style": "touring",
      "rider": {"height_cm": 180, "overrides": {"torso": 560}},
      "bikes": [
        {"key": "gsx", "preset": "gsx", "image": "gsx.jpg", "wheel": "rear",
         "calibration": {"top": {"x": 410, "y": 520}, "bot": {"x": 412, "y": 905}},
         "axle": {"x": 411, "y": 712},
         "markers": {"seat": ..., "peg": ..., "bar": ...}},
        {"key": "vstrom", "mode": "manual",
         "manual": {"seat_to_peg_horizontal": 120, "seat_to_peg_vertical": 430,
                    "seat_to_bar_horizontal": 520, "seat_to_bar_vertical": 250}}
      ]
    }

The first bike is the primary frame every other photo is aligned to.
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path

from .body import RiderProfile
from .calibration import CalibrationPoints
from .comfort import DEFAULT_STYLE, RidingStyle
from .ergonomics import ManualMeasurements
from .geometry import MarkerSet, Point2D
from .tire import outer_diameter_mm

logger = logging.getLogger(__name__)

WHEELS = ("front", "rear")
MODES = ("photo", "manual")

BIKE_PRESETS: dict[str, dict] = {
    "vstrom": {
        "label": "V-Strom 1050 SE",
        "tires": {"front": "110/80 R19", "rear": "150/70 R17"},
    },
    "gsx": {
        "label": "GSX-S1000GX",
        "tires": {"front": "120/70 ZR17M/C", "rear": "190/50 ZR17M/C"},
    },
}


@dataclass(frozen=True)
class BikeSetup:
    key: str
    label: str = ""
    tires: dict = field(default_factory=lambda: {"front": None, "rear": None})
    wheel: str = "rear"
    calibration: CalibrationPoints = CalibrationPoints()
    axle: Point2D | None = None
    markers: MarkerSet = MarkerSet()
    image: Path | None = None
    mode: str = "photo"
    manual: ManualMeasurements = ManualMeasurements()

    @property
    def tire_spec(self) -> str | None:
        return self.tires.get(self.wheel)

    @property
    def diameter_mm(self) -> float:
        # 0 means "enter tire specs"
        return outer_diameter_mm(self.tire_spec) or 0.0

    @property
    def is_calibrated(self) -> bool:
        return self.calibration.is_complete and self.axle is not None

    @property
    def uses_manual(self) -> bool:
        return self.mode == "manual" and self.manual.is_complete


@dataclass(frozen=True)
class Session:
    bikes: tuple
    rider: RiderProfile = RiderProfile()
    riding_style: RidingStyle = DEFAULT_STYLE

    @property
    def primary(self) -> BikeSetup | None:
        return self.bikes[0] if self.bikes else None


def _point(raw: dict, name: str, where: str) -> Point2D | None:
    value = raw.get(name)
    if value is None:
        return None
    point = Point2D.from_any(value)
    if point is None:
        raise ValueError(f"{where}.{name}: expected {{'x': ..., 'y': ...}}, got {value!r}")
    return point


def _number(raw: dict, name: str, where: str) -> float | None:
    value = raw.get(name)
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{where}.{name}: expected a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValueError(f"{where}.{name}: expected a finite number, got {value!r}")
    return number


def _parse_bike(raw: dict, index: int, base_dir: Path) -> BikeSetup:
    where = f"bikes[{index}]"
    if not isinstance(raw, dict):
        raise ValueError(f"{where}: expected an object")

    preset_name = raw.get("preset")
    preset = {}
    if preset_name is not None:
        if preset_name not in BIKE_PRESETS:
            raise ValueError(f"{where}.preset: unknown preset '{preset_name}'")
        preset = BIKE_PRESETS[preset_name]

    key = raw.get("key") or preset_name or f"bike{index + 1}"
    raw_tires = raw.get("tires", {})
    if not isinstance(raw_tires, dict):
        raise ValueError(f"{where}.tires: expected {{'front': ..., 'rear': ...}}")
    tires = {**preset.get("tires", {"front": None, "rear": None}), **raw_tires}

    wheel = raw.get("wheel", "rear")
    if wheel not in WHEELS:
        raise ValueError(f"{where}.wheel: expected one of {WHEELS}, got {wheel!r}")
    mode = raw.get("mode", "photo")
    if mode not in MODES:
        raise ValueError(f"{where}.mode: expected one of {MODES}, got {mode!r}")

    calib = raw.get("calibration") or {}
    markers = raw.get("markers") or {}
    manual = raw.get("manual") or {}
    image = raw.get("image")

    return BikeSetup(
        key=str(key),
        label=raw.get("label") or preset.get("label") or str(key),
        tires=tires,
        wheel=wheel,
        calibration=CalibrationPoints(
            top=_point(calib, "top", f"{where}.calibration"),
            bot=_point(calib, "bot", f"{where}.calibration"),
        ),
        axle=_point(raw, "axle", where),
        markers=MarkerSet(
            seat=_point(markers, "seat", f"{where}.markers"),
            peg=_point(markers, "peg", f"{where}.markers"),
            bar=_point(markers, "bar", f"{where}.markers"),
        ),
        image=(base_dir / image) if image else None,
        mode=mode,
        manual=ManualMeasurements(
            seat_to_peg_horizontal=_number(manual, "seat_to_peg_horizontal", f"{where}.manual"),
            seat_to_peg_vertical=_number(manual, "seat_to_peg_vertical", f"{where}.manual"),
            seat_to_bar_horizontal=_number(manual, "seat_to_bar_horizontal", f"{where}.manual"),
            seat_to_bar_vertical=_number(manual, "seat_to_bar_vertical", f"{where}.manual"),
            seat_height=_number(manual, "seat_height", f"{where}.manual"),
        ),
    )


def _parse_rider(raw: dict) -> RiderProfile:
    if not isinstance(raw, dict):
        raise ValueError("rider: expected an object")
    defaults = RiderProfile()
    overrides = {**defaults.overrides}
    for name, value in (raw.get("overrides") or {}).items():
        if name not in overrides:
            raise ValueError(f"rider.overrides: unknown measurement '{name}'")
        overrides[name] = _number({name: value}, name, "rider.overrides")
    return RiderProfile(
        name=raw.get("name", defaults.name),
        height_cm=_number(raw, "height_cm", "rider") or defaults.height_cm,
        overrides=overrides,
        seat_position=raw.get("seat_position", defaults.seat_position),
    )


def parse_session(payload: dict, base_dir: Path = Path(".")) -> Session:
    if not isinstance(payload, dict):
        raise ValueError("session: expected a JSON object")
    raw_bikes = payload.get("bikes")
    if not isinstance(raw_bikes, list) or not raw_bikes:
        raise ValueError("session.bikes: expected a non-empty list")

    style_name = payload.get("riding_style", DEFAULT_STYLE.value)
    try:
        style = RidingStyle(style_name)
    except ValueError:
        raise ValueError(f"session.riding_style: unknown riding style {style_name!r}") from None

    bikes = tuple(_parse_bike(raw, i, base_dir) for i, raw in enumerate(raw_bikes))
    keys = [bike.key for bike in bikes]
    if len(set(keys)) != len(keys):
        raise ValueError(f"session.bikes: duplicate bike keys {keys}")

    return Session(bikes=bikes, rider=_parse_rider(payload.get("rider") or {}), riding_style=style)


def load_session(path: Path) -> Session:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Session file not found: {path}")
    logger.info(f"Loading session from: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{path}: invalid JSON ({e})") from e
    session = parse_session(payload, base_dir=path.parent)
    logger.debug(f"Loaded {len(session.bikes)} bikes, riding style '{session.riding_style.value}'")
    return session
