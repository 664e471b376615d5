from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .comfort import RIDING_STYLE_LABELS, RidingStyle
from .config import AppConfig, OutputConfig, RenderConfig
from .ergonomics import format_angle
from .logging_config import setup_logging
from .pipeline import run_pipeline
from .session import load_session

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compare motorcycle rider triangles from two calibrated photos.")
    parser.add_argument("--session", type=Path, required=True, help="Session JSON with bikes, markers and calibration")
    parser.add_argument("--style", choices=[s.value for s in RidingStyle], help="Override the session riding style")
    parser.add_argument("--height", type=float, help="Override the rider height, cm")
    parser.add_argument("--result-dir", type=Path, default=Path("result"), help="Output folder")
    parser.add_argument("--alpha", type=float, default=0.5, help="Opacity of the secondary photo in the overlay")
    parser.add_argument("--no-render", action="store_true", help="Only compute angles, skip the overlay image")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def _print_result(result: dict) -> None:
    label, description = RIDING_STYLE_LABELS[RidingStyle(result["riding_style"])]
    print(f"Riding style: {label} ({description})")
    segments = result["rider"]["segments_mm"]
    print("Rider segments (mm): " + ", ".join(f"{k}={v}" for k, v in segments.items()))

    for key, bike in result["bikes"].items():
        print(f"\n─── {bike['label']} ({bike['mode']}) ───")
        if bike["mode"] == "photo":
            print(f"Tire diameter: {bike['diameter_mm']:.1f} mm  |  {bike['px_per_mm']:.4f} px/mm")
        elif bike["seat_height_mm"] is not None:
            print(f"Seat height: {bike['seat_height_mm']:.0f} mm")
        for name, value in bike["angles"].items():
            zone = bike["comfort"]["zones"][name]
            print(f"{name.capitalize():5}  {format_angle(value):>5}  [{zone['status']}] {zone['message']}")
        print(f"Overall: {bike['comfort']['overall']}")
        distances = bike["distances_mm"]
        print("Distances (mm): " + ", ".join(
            f"{k}={'–' if v is None else f'{v:.0f}'}" for k, v in distances.items()
        ))
        align = result["alignment"][key]
        print(f"Alignment: scale={align['scale']:.4f}, "
              f"translate=({align['translation']['x']:.1f}, {align['translation']['y']:.1f})")

    if result["overlay"]:
        print(f"\nOverlay: {result['overlay']}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    try:
        session = load_session(args.session)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    if args.style:
        session = replace(session, riding_style=RidingStyle(args.style))
    if args.height:
        session = replace(session, rider=replace(session.rider, height_cm=args.height))

    config = AppConfig(
        render=RenderConfig(overlay_alpha=args.alpha),
        output=OutputConfig(result_dir=args.result_dir),
        render_overlay=not args.no_render,
    )

    try:
        result = run_pipeline(session, config)
    except (FileNotFoundError, OSError) as e:
        logger.error(str(e))
        return 1

    _print_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
