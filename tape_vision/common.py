"""Objects that are shared across multiple modules."""
from dataclasses import dataclass
from typing import Sequence, Tuple

# Out of range for any heading in [-pi, pi]; consumers treat it as "invalid".
SENTINEL_ANGLE_RAD = 360.0


# ------------------- Exceptions -------------------
class PipelineError(RuntimeError):
    """Base class for per-frame faults. Never escapes the pipeline."""


class InsufficientCandidatesError(PipelineError):
    """Fewer than two candidate boxes were detected in the frame."""


class DegenerateGeometryError(PipelineError):
    """The chosen pair cannot be triangulated (e.g. zero pixel separation)."""


class ConfigurationError(ValueError):
    """Malformed startup configuration. Fatal."""


# ------------------- Value types -------------------
@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned candidate box in pixels, top-left origin."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2.0

    @classmethod
    def from_rect(cls, rect: Sequence[float]) -> "BoundingBox":
        """Build from an OpenCV ``(x, y, w, h)`` tuple."""
        x, y, w, h = rect
        return cls(x, y, w, h)


@dataclass(frozen=True)
class FrameGeometry:
    width: int
    height: int

    @property
    def center(self) -> Tuple[float, float]:
        return self.width / 2.0, self.height / 2.0


@dataclass(frozen=True)
class CandidatePair:
    left: BoundingBox
    right: BoundingBox


@dataclass(frozen=True)
class TriangulationResult:
    distance_by_width: float
    distance_by_height: float
    lateral_offset_inches: float


@dataclass(frozen=True)
class Reading:
    """
    One published measurement.

    ``angle_radians`` is reserved: always 0.0 on an accepted frame, and
    ``SENTINEL_ANGLE_RAD`` on a rejected one.
    """
    distance_inches: float
    lateral_offset_inches: float
    angle_radians: float

    @classmethod
    def sentinel(cls) -> "Reading":
        return cls(-1.0, 0.0, SENTINEL_ANGLE_RAD)

    @property
    def is_sentinel(self) -> bool:
        return self == Reading.sentinel()
