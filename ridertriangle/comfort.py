"""
Comfort zones for ergonomic angles.

Each angle type has a comfort band and a wider warning band; anything
outside the warning band is extreme. Riding styles override the comfort band
of specific angles. The full angle type x riding style table is resolved and
validated once, at import.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


class AngleType(str, Enum):
    KNEE = "knee"
    HIP = "hip"
    BACK = "back"
    ARM = "arm"


class RidingStyle(str, Enum):
    TOURING = "touring"
    SPORT = "sport"
    ADVENTURE = "adventure"
    COMMUTE = "commute"


class ZoneStatus(str, Enum):
    COMFORT = "comfort"
    WARNING = "warning"
    EXTREME = "extreme"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ZoneRange:
    min: float
    max: float

    def __contains__(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class AngleZoneSpec:
    label: str
    description: str
    comfort: ZoneRange
    warning: ZoneRange
    ideal_text: str
    low_text: str
    high_text: str


@dataclass(frozen=True)
class ZoneBands:
    comfort: ZoneRange
    warning: ZoneRange


@dataclass(frozen=True)
class ComfortZoneResult:
    status: ZoneStatus
    message: str

    def as_dict(self) -> dict:
        return {"status": self.status.value, "message": self.message}


@dataclass(frozen=True)
class AnglesSummary:
    zones: dict
    counts: dict = field(default_factory=dict)
    overall: ZoneStatus = ZoneStatus.UNKNOWN

    def as_dict(self) -> dict:
        return {
            "zones": {name: zone.as_dict() for name, zone in self.zones.items()},
            "counts": dict(self.counts),
            "overall": self.overall.value,
        }


COMFORT_ZONES: dict[AngleType, AngleZoneSpec] = {
    AngleType.KNEE: AngleZoneSpec(
        label="Knee",
        description="Angle at the knee when foot is on peg",
        comfort=ZoneRange(140, 155),
        warning=ZoneRange(130, 165),
        ideal_text="140°-155° (slightly bent)",
        low_text="Too bent - may cause knee strain",
        high_text="Too extended - less control, shock absorption",
    ),
    AngleType.HIP: AngleZoneSpec(
        label="Hip",
        description="Angle between torso and thigh",
        comfort=ZoneRange(90, 120),
        warning=ZoneRange(80, 135),
        ideal_text="90°-120° (open angle = comfort)",
        low_text="Too closed - hip flexor strain, breathing restriction",
        high_text="Very open - unusual, check measurements",
    ),
    AngleType.BACK: AngleZoneSpec(
        label="Back",
        description="Torso lean from vertical",
        comfort=ZoneRange(15, 45),
        warning=ZoneRange(5, 60),
        ideal_text="15°-45° (touring: 15-30°, sport: 35-50°)",
        low_text="Very upright - cruiser position",
        high_text="Aggressive lean - wrist/neck strain risk",
    ),
    AngleType.ARM: AngleZoneSpec(
        label="Arm",
        description="Angle at the elbow when gripping bars",
        comfort=ZoneRange(150, 170),
        warning=ZoneRange(135, 175),
        ideal_text="150°-170° (slight bend)",
        low_text="Too bent - reach too short",
        high_text="Nearly locked - shock transmitted to shoulders",
    ),
}

RIDING_STYLE_LABELS: dict[RidingStyle, tuple[str, str]] = {
    RidingStyle.TOURING:   ("Touring", "Long-distance comfort priority"),
    RidingStyle.SPORT:     ("Sport", "Performance priority, aggressive position"),
    RidingStyle.ADVENTURE: ("Adventure", "Versatile, standing capability"),
    RidingStyle.COMMUTE:   ("Commute", "Balanced comfort and control"),
}

# comfort band overrides; commute uses the defaults
STYLE_ADJUSTMENTS: dict[RidingStyle, dict[AngleType, ZoneRange]] = {
    RidingStyle.TOURING: {
        AngleType.BACK: ZoneRange(10, 35),
        AngleType.HIP:  ZoneRange(95, 130),
    },
    RidingStyle.SPORT: {
        AngleType.BACK: ZoneRange(35, 55),
        AngleType.HIP:  ZoneRange(75, 110),
    },
    RidingStyle.ADVENTURE: {
        AngleType.KNEE: ZoneRange(135, 150),
        AngleType.BACK: ZoneRange(20, 40),
    },
    RidingStyle.COMMUTE: {},
}

DEFAULT_STYLE = RidingStyle.COMMUTE


def _check_range(where: str, zone: ZoneRange) -> None:
    if not (math.isfinite(zone.min) and math.isfinite(zone.max)):
        raise ValueError(f"{where}: non-finite bound {zone}")
    if zone.min > zone.max:
        raise ValueError(f"{where}: min {zone.min} is above max {zone.max}")
    if zone.min < 0 or zone.max > 180:
        raise ValueError(f"{where}: bounds must lie within 0-180°, got {zone}")


def build_zone_table(
    zones: dict[AngleType, AngleZoneSpec],
    adjustments: dict[RidingStyle, dict[AngleType, ZoneRange]],
) -> dict[tuple[AngleType, RidingStyle], ZoneBands]:
    """Resolves every angle type x riding style pair into explicit bands."""
    table = {}
    for angle_type in AngleType:
        if angle_type not in zones:
            raise ValueError(f"No comfort zone defined for '{angle_type.value}'")
        spec = zones[angle_type]
        _check_range(f"{angle_type.value}.comfort", spec.comfort)
        _check_range(f"{angle_type.value}.warning", spec.warning)

        for style in RidingStyle:
            if style not in adjustments:
                raise ValueError(f"No adjustments defined for riding style '{style.value}'")
            unknown = set(adjustments[style]) - set(AngleType)
            if unknown:
                raise ValueError(f"{style.value}: unknown angle types {sorted(unknown)}")

            comfort = adjustments[style].get(angle_type, spec.comfort)
            _check_range(f"{style.value}.{angle_type.value}.comfort", comfort)
            # the warning band always encloses the comfort band
            warning = ZoneRange(min(spec.warning.min, comfort.min), max(spec.warning.max, comfort.max))
            table[(angle_type, style)] = ZoneBands(comfort=comfort, warning=warning)
    return table


ZONE_TABLE = build_zone_table(COMFORT_ZONES, STYLE_ADJUSTMENTS)


def _as_angle_type(value) -> AngleType | None:
    try:
        return AngleType(value)
    except ValueError:
        return None


def _as_style(value) -> RidingStyle:
    try:
        return RidingStyle(value)
    except ValueError:
        return DEFAULT_STYLE


def get_zone_bands(angle_type, riding_style=DEFAULT_STYLE) -> ZoneBands | None:
    kind = _as_angle_type(angle_type)
    if kind is None:
        return None
    return ZONE_TABLE[(kind, _as_style(riding_style))]


def get_angle_zone(angle_type, value: float | None, riding_style=DEFAULT_STYLE) -> ComfortZoneResult:
    if value is None or math.isnan(value):
        return ComfortZoneResult(ZoneStatus.UNKNOWN, "Not calculated")

    kind = _as_angle_type(angle_type)
    if kind is None:
        return ComfortZoneResult(ZoneStatus.UNKNOWN, "Unknown angle type")

    spec = COMFORT_ZONES[kind]
    bands = ZONE_TABLE[(kind, _as_style(riding_style))]

    if value in bands.comfort:
        return ComfortZoneResult(ZoneStatus.COMFORT, spec.ideal_text)

    if value in bands.warning:
        is_low = value < bands.comfort.min
        return ComfortZoneResult(ZoneStatus.WARNING, spec.low_text if is_low else spec.high_text)

    is_low = value < bands.warning.min
    return ComfortZoneResult(ZoneStatus.EXTREME, spec.low_text if is_low else spec.high_text)


def get_angles_summary(angles, riding_style=DEFAULT_STYLE) -> AnglesSummary:
    """
    Classifies all four angles and reports the worst status.

    angles may be an AngleResult or a mapping with knee/hip/back/arm keys.
    """
    values = angles if isinstance(angles, dict) else angles.as_dict()
    zones = {kind.value: get_angle_zone(kind, values.get(kind.value), riding_style) for kind in AngleType}

    counts = {status.value: 0 for status in ZoneStatus}
    for zone in zones.values():
        counts[zone.status.value] += 1

    if counts["extreme"]:
        overall = ZoneStatus.EXTREME
    elif counts["warning"]:
        overall = ZoneStatus.WARNING
    elif counts["unknown"] == len(zones):
        overall = ZoneStatus.UNKNOWN
    else:
        overall = ZoneStatus.COMFORT

    return AnglesSummary(zones=zones, counts=counts, overall=overall)
