from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class ErgonomicsConfig:
    shoulder_offset_mm: float = 100.0
    default_thigh_mm: float = 400.0
    default_lower_leg_mm: float = 380.0
    default_torso_mm: float = 500.0
    default_upper_arm_mm: float = 320.0
    default_forearm_mm: float = 250.0


@dataclass(frozen=True)
class SkeletonConfig:
    lean_factor: float = 0.7
    horizontal_fraction: float = 0.5
    vertical_fraction: float = 0.85
    head_radius_fraction: float = 0.2
    head_lift: float = 1.5


def _default_palette() -> dict:
    # BGR
    return {
        "comfort": (94, 197, 34),
        "warning": (11, 158, 245),
        "extreme": (68, 68, 239),
        "unknown": (128, 114, 107),
    }


@dataclass(frozen=True)
class RenderConfig:
    max_image_side: int = 1920
    overlay_alpha: float = 0.5
    marker_radius_px: int = 8
    bone_thickness_px: int = 4
    triangle_thickness_px: int = 2
    palette: dict = field(default_factory=_default_palette)
    bike_colors: tuple = ((0, 108, 239), (210, 118, 25), (60, 160, 60), (160, 60, 160))


@dataclass(frozen=True)
class OutputConfig:
    result_dir: Path = Path("result")
    overlay_name: str = "comparison_overlay.jpg"
    report_name: str = "report.json"


@dataclass(frozen=True)
class AppConfig:
    ergonomics: ErgonomicsConfig = ErgonomicsConfig()
    skeleton: SkeletonConfig = SkeletonConfig()
    render: RenderConfig = RenderConfig()
    output: OutputConfig = OutputConfig()
    render_overlay: bool = True


DEFAULT_CONFIG = AppConfig()
