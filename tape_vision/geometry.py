"""
Geometry constants, computed once at startup.

Every angle leaving this module is in radians and every length in inches;
degrees from the config blobs are converted here and nowhere else.
"""
import math
from dataclasses import dataclass
from typing import Tuple

from tape_vision.common import ConfigurationError, FrameGeometry
from tape_vision.config import CameraConfig, TargetConfig


@dataclass(frozen=True)
class TargetGeometry:
    tape_angle_rad: float
    horizontal_fov_rad: float
    vertical_fov_rad: float
    separation_inches: float   # Center-to-center between the two strips
    tape_height_inches: float  # Height of one strip's bounding box


def tape_bounding_size(width: float, length: float, angle_rad: float) -> Tuple[float, float]:
    """(w, h) of the axis-aligned box around a strip tilted by ``angle_rad``."""
    c, s = math.cos(angle_rad), math.sin(angle_rad)
    return width * c + length * s, length * c + width * s


def vertical_fov_from_horizontal(hfov_rad: float, width: int, height: int) -> float:
    return 2.0 * math.atan((height / width) * math.tan(hfov_rad / 2.0))


def _check_fov(name: str, deg: float) -> None:
    if not 0.0 < deg < 180.0:
        raise ConfigurationError(f"{name} must be in (0, 180) degrees, got {deg}")


def build_geometry(
    target_cfg: TargetConfig, camera_cfg: CameraConfig
) -> Tuple[FrameGeometry, TargetGeometry]:
    """Derive the immutable constant set for one camera."""
    if camera_cfg.width <= 0 or camera_cfg.height <= 0:
        raise ConfigurationError(
            f"camera '{camera_cfg.name}': resolution must be positive, "
            f"got {camera_cfg.width}x{camera_cfg.height}"
        )
    for name in ("tape_width_in", "tape_length_in"):
        if getattr(target_cfg, name) <= 0:
            raise ConfigurationError(f"{name} must be positive")
    if target_cfg.inner_gap_in < 0:
        raise ConfigurationError("inner_gap_in must not be negative")

    _check_fov("horizontal_fov_deg", camera_cfg.horizontal_fov_deg)
    hfov = math.radians(camera_cfg.horizontal_fov_deg)
    if camera_cfg.vertical_fov_deg is not None:
        _check_fov("vertical_fov_deg", camera_cfg.vertical_fov_deg)
        vfov = math.radians(camera_cfg.vertical_fov_deg)
    else:
        vfov = vertical_fov_from_horizontal(hfov, camera_cfg.width, camera_cfg.height)

    angle = math.radians(target_cfg.tape_angle_deg)
    box_w, box_h = tape_bounding_size(target_cfg.tape_width_in, target_cfg.tape_length_in, angle)

    if target_cfg.separation_in is not None:
        if target_cfg.separation_in <= 0:
            raise ConfigurationError("separation_in must be positive")
        separation = float(target_cfg.separation_in)
    else:
        # Half a box on each side plus the gap between the inner tips
        separation = box_w + target_cfg.inner_gap_in

    frame = FrameGeometry(camera_cfg.width, camera_cfg.height)
    target = TargetGeometry(
        tape_angle_rad=angle,
        horizontal_fov_rad=hfov,
        vertical_fov_rad=vfov,
        separation_inches=separation,
        tape_height_inches=box_h,
    )
    return frame, target
