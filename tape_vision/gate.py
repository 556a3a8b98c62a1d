"""Cross-checks the two range estimates before anything is published."""
from tape_vision.common import Reading, TriangulationResult

DEFAULT_TOLERANCE = 0.10


def relative_difference(result: TriangulationResult) -> float:
    return abs(result.distance_by_height - result.distance_by_width) / result.distance_by_width


def evaluate(result: TriangulationResult, tolerance: float = DEFAULT_TOLERANCE) -> Reading:
    """Accepted -> width-based reading with a zero angle; rejected -> sentinel."""
    if relative_difference(result) < tolerance:
        return Reading(
            distance_inches=result.distance_by_width,
            lateral_offset_inches=result.lateral_offset_inches,
            angle_radians=0.0,
        )
    return Reading.sentinel()
