from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from .body import RiderSegments
from .calibration import AlignmentTransform, build_alignments, calculate_px_per_mm
from .comfort import AnglesSummary, RidingStyle, get_angles_summary
from .config import DEFAULT_CONFIG, AppConfig
from .ergonomics import AngleResult, calculate_all_angles, calculate_all_angles_from_distances
from .geometry import DistanceSet, get_distances
from .io_utils import load_image, save_report
from .session import BikeSetup, Session
from .skeleton import SkeletonJoints, calculate_skeleton_joints
from .visualization import (
    compose_overlay,
    draw_angle_labels,
    draw_rider_triangle,
    draw_skeleton,
    save_outputs,
    transform_skeleton,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BikeAnalysis:
    key: str
    label: str
    mode: str
    diameter_mm: float
    px_per_mm: float
    distances: DistanceSet
    angles: AngleResult
    summary: AnglesSummary
    skeleton: SkeletonJoints | None
    seat_height_mm: float | None = None

    def as_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "mode": self.mode,
            "diameter_mm": self.diameter_mm,
            "px_per_mm": self.px_per_mm,
            "distances_mm": self.distances.as_dict(),
            "angles": self.angles.as_dict(),
            "comfort": self.summary.as_dict(),
            "skeleton": None if self.skeleton is None else self.skeleton.as_dict(),
            "seat_height_mm": self.seat_height_mm,
        }


def analyze_bike(
    bike: BikeSetup,
    segments: RiderSegments,
    riding_style: RidingStyle,
    config: AppConfig = DEFAULT_CONFIG,
) -> BikeAnalysis:
    diameter = bike.diameter_mm
    px_per_mm = calculate_px_per_mm(bike.calibration, diameter)
    offset = config.ergonomics.shoulder_offset_mm

    if bike.uses_manual:
        distances = bike.manual.distances()
        angles = calculate_all_angles_from_distances(distances, bike.manual, segments, offset)
        skeleton = None
        mode = "manual"
    else:
        if bike.mode == "manual":
            logger.warning(f"{bike.key}: manual measurements incomplete, using photo markers")
        if not diameter:
            logger.warning(f"{bike.key}: tire spec {bike.tire_spec!r} not recognised, enter tire specs")
        elif not px_per_mm:
            logger.warning(f"{bike.key}: calibration points missing")
        distances = get_distances(bike.markers, px_per_mm)
        angles = calculate_all_angles(bike.markers, segments, px_per_mm, offset)
        skeleton = calculate_skeleton_joints(bike.markers, segments, px_per_mm, config.skeleton, config.ergonomics)
        mode = "photo"

    summary = get_angles_summary(angles, riding_style)
    logger.debug(f"{bike.key}: {angles.as_dict()} -> {summary.overall.value}")
    return BikeAnalysis(
        key=bike.key,
        label=bike.label,
        mode=mode,
        diameter_mm=diameter,
        px_per_mm=px_per_mm,
        distances=distances,
        angles=angles,
        summary=summary,
        skeleton=skeleton,
        seat_height_mm=bike.manual.seat_height if mode == "manual" else None,
    )


def _render_overlay(session: Session, analyses: dict, alignments: dict, config: AppConfig):
    primary = session.primary
    if primary.image is None:
        logger.info("Primary bike has no photo, skipping overlay")
        return None

    render = config.render
    canvas, primary_factor = load_image(primary.image, render.max_image_side)

    for index, bike in enumerate(session.bikes):
        analysis = analyses[bike.key]
        if analysis.mode != "photo":
            continue
        transform = alignments[bike.key]
        color = render.bike_colors[index % len(render.bike_colors)]

        if bike is not primary and bike.image is not None:
            secondary, factor = load_image(bike.image, render.max_image_side)
            canvas = compose_overlay(canvas, secondary, transform.rescaled(factor, primary_factor), render.overlay_alpha)

        # engine output lives in the bike's original photo pixels
        to_canvas = transform.rescaled(1.0, primary_factor)
        draw_rider_triangle(canvas, bike.markers.transformed(to_canvas.apply), color, render)
        if analysis.skeleton is not None:
            draw_skeleton(canvas, transform_skeleton(analysis.skeleton, to_canvas), analysis.summary, render)
        draw_angle_labels(canvas, (20, 40 + 150 * index), bike.label, analysis.angles, analysis.summary, color, render)

    return canvas


def run_pipeline(session: Session, config: AppConfig = DEFAULT_CONFIG) -> dict:
    segments = session.rider.segments()
    logger.info(f"Rider '{session.rider.name}', {session.rider.height_cm:.0f} cm, style '{session.riding_style.value}'")

    analyses = {bike.key: analyze_bike(bike, segments, session.riding_style, config) for bike in session.bikes}
    alignments: dict[str, AlignmentTransform] = build_alignments(
        {bike.key: (analyses[bike.key].px_per_mm, bike.axle) for bike in session.bikes}
    )
    for bike in session.bikes[1:]:
        if not (bike.is_calibrated and session.primary.is_calibrated):
            logger.warning(f"{bike.key}: not fully calibrated, alignment is the identity")

    overlay_path = None
    if config.render_overlay:
        overlay = _render_overlay(session, analyses, alignments, config)
        if overlay is not None:
            overlay_path = save_outputs(config.output.result_dir, overlay, config.output.overlay_name)

    result = {
        "riding_style": session.riding_style.value,
        "rider": {"name": session.rider.name, "height_cm": session.rider.height_cm, "segments_mm": asdict(segments)},
        "bikes": {key: analysis.as_dict() for key, analysis in analyses.items()},
        "alignment": {
            key: {"scale": t.scale, "translation": t.translation.to_dict()} for key, t in alignments.items()
        },
        "overlay": None if overlay_path is None else str(overlay_path),
    }

    report_path = config.output.result_dir / config.output.report_name
    save_report(report_path, result)
    logger.info(f"Report saved to: {report_path}")
    return result
