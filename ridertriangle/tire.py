from __future__ import annotations

import re
from dataclasses import dataclass

MM_PER_INCH = 25.4

# width / aspect, then anything non-numeric (R, ZR, -, spaces), then rim
_TIRE_RE = re.compile(r"([0-9]{2,3})\s*/\s*([0-9]{2})[^0-9]*([0-9]{2})", re.IGNORECASE)


@dataclass(frozen=True)
class TireSpec:
    width_mm: float
    aspect_percent: float
    rim_inches: float

    @property
    def sidewall_mm(self) -> float:
        return self.width_mm * (self.aspect_percent / 100)

    @property
    def outer_diameter_mm(self) -> float:
        return self.rim_inches * MM_PER_INCH + 2 * self.sidewall_mm


def parse_tire_spec(spec: str | None) -> TireSpec | None:
    """
    Parses a manufacturer tire size such as "190/50 ZR17M/C" or "110/80 R19 59V".

    Returns None when the string does not contain a width/aspect/rim group.
    """
    if not isinstance(spec, str):
        return None
    match = _TIRE_RE.search(spec)
    if match is None:
        return None
    width, aspect, rim = (float(group) for group in match.groups())
    return TireSpec(width_mm=width, aspect_percent=aspect, rim_inches=rim)


def outer_diameter_mm(spec: str | None) -> float | None:
    parsed = parse_tire_spec(spec)
    if parsed is None:
        return None
    return parsed.outer_diameter_mm
