"""Picks the two candidate boxes most likely to be the tape pair."""
from typing import List, Optional, Sequence, Tuple

from tape_vision.common import (
    BoundingBox,
    CandidatePair,
    FrameGeometry,
    InsufficientCandidatesError,
)


def squared_center_distance(box: BoundingBox, frame: FrameGeometry) -> float:
    cx, cy = frame.center
    dx = box.center_x - cx
    dy = box.center_y - cy
    return dx * dx + dy * dy


def _order(first: Tuple[int, BoundingBox], second: Tuple[int, BoundingBox]) -> CandidatePair:
    """Left = smaller center-x; equal center-x keeps input order."""
    a, b = sorted((first, second), key=lambda t: (t[1].center_x, t[0]))
    return CandidatePair(left=a[1], right=b[1])


def select_pair(candidates: Sequence[BoundingBox], frame: FrameGeometry) -> CandidatePair:
    """
    Return the two boxes closest to the frame center.

    Single pass keeping the best and second-best seen so far. A newcomer
    only displaces a kept box when strictly closer, so ties go to the
    earlier candidate.
    """
    n = len(candidates)
    if n < 2:
        raise InsufficientCandidatesError(f"need 2 candidates, got {n}")
    if n == 2:
        return _order((0, candidates[0]), (1, candidates[1]))

    # (distance, index, box)
    best: Optional[Tuple[float, int, BoundingBox]] = None
    second: Optional[Tuple[float, int, BoundingBox]] = None
    for idx, box in enumerate(candidates):
        entry = (squared_center_distance(box, frame), idx, box)
        if best is None:
            best = entry
        elif second is None or entry[0] < second[0]:
            if entry[0] < best[0]:
                best, second = entry, best
            else:
                second = entry

    kept: List[Tuple[int, BoundingBox]] = [(best[1], best[2]), (second[1], second[2])]
    return _order(*kept)
