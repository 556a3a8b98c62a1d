"""Typed configuration blobs for the whole system, plus the JSON loader."""
from __future__ import annotations

import json
import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from tape_vision.common import ConfigurationError

DEFAULT_CONFIG_FILE = "/boot/frc.json"


# ---------------------- Camera ----------------------
@dataclass
class CameraConfig:
    name: str = "camera0"
    path: str = "/dev/video0"
    width: int = 1920
    height: int = 1080
    fps: int = 30
    horizontal_fov_deg: float = 78.0   # From camera data-sheet
    # Measured; agrees with 78 deg HFOV at 1080p. None = derive from HFOV + aspect
    vertical_fov_deg: float | None = 44.0


# ---------------------- Target ----------------------
@dataclass
class TargetConfig:
    tape_angle_deg: float = 14.0       # Tilt of each strip from vertical
    tape_width_in: float = 2.0
    tape_length_in: float = 5.5
    inner_gap_in: float = 8.0          # Between the top inner tips
    separation_in: float | None = None  # Center-to-center override


# --------------------- Detector ---------------------
@dataclass
class DetectorConfig:
    hsv_low: Tuple[int, int, int] = (50, 100, 100)
    hsv_high: Tuple[int, int, int] = (90, 255, 255)
    min_area_px: float = 50.0
    min_aspect: float = 0.2            # width / height of the bounding box
    max_aspect: float = 1.5
    max_candidates: int = 8


# ----------------------- Gate -----------------------
@dataclass
class GateConfig:
    relative_tolerance: float = 0.10


# -------------------- Publisher ---------------------
@dataclass
class PublisherConfig:
    table: str = "PI_Output"
    distance_key: str = "DistanceToRobotInches"
    lateral_key: str = "DistanceRightToRobotInches"
    angle_key: str = "AngleOfRobotToTapeRadians"
    server: Optional[str] = None       # Falls back to the team address
    queue_size: int = 1


@dataclass
class VisionConfig:
    team: int = 0
    cameras: List[CameraConfig] = field(default_factory=list)
    target: TargetConfig = field(default_factory=TargetConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    gate: GateConfig = field(default_factory=GateConfig)
    publisher: PublisherConfig = field(default_factory=PublisherConfig)


def team_server_address(team: int) -> str:
    """Robot controller address for a team number, e.g. 1234 -> 10.12.34.2."""
    return f"10.{team // 100}.{team % 100}.2"


# ------------------------------------------------------------------
#   JSON loading
# ------------------------------------------------------------------
_CAMERA_KEYS = {
    "width": "width",
    "height": "height",
    "fps": "fps",
    "horizontal fov": "horizontal_fov_deg",
    "vertical fov": "vertical_fov_deg",
}


def _parse_error(path: Path, msg: str) -> ConfigurationError:
    return ConfigurationError(f"config error in '{path}': {msg}")


def _number(value: Any, kind: type) -> float | int:
    """JSON number -> float/int. Refuses strings, bools, NaN and infinities."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError("expected a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError("number must be finite")
    if kind is int:
        if not number.is_integer():
            raise ValueError("expected an integer")
        return int(number)
    return number


def _read_camera(path: Path, obj: Any) -> CameraConfig:
    if not isinstance(obj, dict):
        raise _parse_error(path, "camera entry must be a JSON object")

    name = obj.get("name")
    if name is None:
        raise _parse_error(path, "could not read camera name")
    cam_path = obj.get("path")
    if cam_path is None:
        raise _parse_error(path, f"camera '{name}': could not read path")

    cam = CameraConfig(name=str(name), path=str(cam_path))
    for json_key, attr in _CAMERA_KEYS.items():
        if json_key in obj:
            kind = int if attr in ("width", "height", "fps") else float
            try:
                setattr(cam, attr, _number(obj[json_key], kind))
            except (TypeError, ValueError, OverflowError):
                raise _parse_error(
                    path, f"camera '{name}': bad value for '{json_key}'"
                ) from None
    return cam


# Fields whose default is None, and what they hold when set.
_OPTIONAL_KINDS = {"separation_in": float, "server": str}


def _coerce(name: str, current: Any, value: Any) -> Any:
    kind = _OPTIONAL_KINDS.get(name, type(current))
    if value is None and name in _OPTIONAL_KINDS:
        return None
    if kind is tuple:
        if not isinstance(value, list) or len(value) != len(current):
            raise ValueError(f"expected a list of {len(current)} numbers")
        return tuple(_number(v, int) for v in value)
    if kind is str:
        if not isinstance(value, str):
            raise TypeError("expected a string")
        return value
    return _number(value, kind)


def _override(path: Path, section: str, blob: Any, values: Any) -> Any:
    if not isinstance(values, dict):
        raise _parse_error(path, f"vision.{section} must be a JSON object")
    known = {f.name for f in fields(blob)}
    unknown = set(values) - known
    if unknown:
        raise _parse_error(
            path, f"unknown key(s) in vision.{section}: {', '.join(sorted(unknown))}"
        )
    cleaned = {}
    for key, value in values.items():
        try:
            cleaned[key] = _coerce(key, getattr(blob, key), value)
        except (TypeError, ValueError, OverflowError) as exc:
            raise _parse_error(path, f"vision.{section}.{key}: {exc}") from None
    return replace(blob, **cleaned)


def _validate(path: Path, cfg: VisionConfig) -> None:
    """Range checks that would otherwise surface per frame."""
    if cfg.gate.relative_tolerance <= 0:
        raise _parse_error(path, "vision.gate.relative_tolerance must be positive")
    if cfg.publisher.queue_size < 1:
        raise _parse_error(path, "vision.publisher.queue_size must be >= 1")
    det = cfg.detector
    if det.max_candidates < 2:
        raise _parse_error(path, "vision.detector.max_candidates must be >= 2")
    if not 0 < det.min_aspect <= det.max_aspect:
        raise _parse_error(path, "vision.detector aspect bounds must satisfy 0 < min <= max")
    if any(not 0 <= v <= 255 for v in det.hsv_low + det.hsv_high):
        raise _parse_error(path, "vision.detector HSV bounds must be within 0..255")


def load_config(path: str | Path = DEFAULT_CONFIG_FILE) -> VisionConfig:
    """
    Read an FRC-style camera config file.

    Required: ``team`` and ``cameras``. An optional ``vision`` object may
    override any field of the target/detector/gate/publisher blobs; values
    are converted to the field's type here so bad ones fail at startup.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fp:
            top = json.load(fp)
    except OSError as exc:
        raise ConfigurationError(f"could not open '{path}': {exc}") from exc
    except json.JSONDecodeError as exc:
        raise _parse_error(path, f"invalid JSON: {exc}") from exc

    if not isinstance(top, dict):
        raise _parse_error(path, "must be JSON object")

    if "team" not in top:
        raise _parse_error(path, "could not read team number")
    try:
        team = _number(top["team"], int)
    except (TypeError, ValueError, OverflowError):
        raise _parse_error(path, "team number must be an integer") from None

    cameras = top.get("cameras")
    if cameras is None:
        raise _parse_error(path, "could not read cameras")
    if not isinstance(cameras, list):
        raise _parse_error(path, "cameras must be a JSON array")

    cfg = VisionConfig(team=team, cameras=[_read_camera(path, c) for c in cameras])

    vision: Dict[str, Any] = top.get("vision", {})
    if not isinstance(vision, dict):
        raise _parse_error(path, "vision must be a JSON object")
    for section in ("target", "detector", "gate", "publisher"):
        if section in vision:
            setattr(cfg, section, _override(path, section, getattr(cfg, section), vision[section]))
    _validate(path, cfg)
    return cfg
