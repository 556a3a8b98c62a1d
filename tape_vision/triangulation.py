"""Pixel geometry of a tape pair -> distance and lateral offset in inches."""
import math

from tape_vision.common import (
    CandidatePair,
    DegenerateGeometryError,
    FrameGeometry,
    TriangulationResult,
)
from tape_vision.geometry import TargetGeometry


def _distance_from_subtense(half_size_in: float, subtense_rad: float) -> float:
    if not 0.0 < subtense_rad < math.pi:
        raise DegenerateGeometryError(f"angular subtense {subtense_rad:.4f} rad out of range")
    return half_size_in / math.tan(subtense_rad / 2.0)


def triangulate(
    pair: CandidatePair, frame: FrameGeometry, target: TargetGeometry
) -> TriangulationResult:
    """
    Two range estimates plus the signed lateral offset.

    Width estimate: known center-to-center separation against the angle it
    subtends horizontally. Height estimate: mean strip height, scaled by the
    same inches-per-pixel, against the angle it subtends vertically.

    Because both sides of the height estimate scale with the box height, it
    reduces to roughly separation * frame_height / (pixel_separation * vfov)
    and so cross-checks the vertical against the horizontal projection;
    strip height itself cancels out.

    Positive lateral offset means the pair sits right of the frame center.
    """
    left_cx = pair.left.center_x
    right_cx = pair.right.center_x
    pixel_separation = right_cx - left_cx
    if pixel_separation == 0:
        raise DegenerateGeometryError("zero pixel separation between tapes")

    inches_per_pixel = target.separation_inches / pixel_separation

    subtense = (pixel_separation / frame.width) * target.horizontal_fov_rad
    distance_by_width = _distance_from_subtense(target.separation_inches / 2.0, subtense)

    midpoint_x = (left_cx + right_cx) / 2.0
    lateral = (midpoint_x - frame.width / 2.0) * inches_per_pixel

    height_px = (pair.left.height + pair.right.height) / 2.0
    height_subtense = (height_px / frame.height) * target.vertical_fov_rad
    distance_by_height = _distance_from_subtense(
        height_px * inches_per_pixel / 2.0, height_subtense
    )

    return TriangulationResult(
        distance_by_width=distance_by_width,
        distance_by_height=distance_by_height,
        lateral_offset_inches=lateral,
    )
