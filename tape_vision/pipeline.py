"""Per-frame chain: select -> triangulate -> gate -> publish."""
from typing import Optional, Protocol, Sequence

from tape_vision.common import BoundingBox, FrameGeometry, PipelineError, Reading
from tape_vision.config import GateConfig
from tape_vision.gate import evaluate
from tape_vision.geometry import TargetGeometry
from tape_vision.selector import select_pair
from tape_vision.triangulation import triangulate


class ReadingSink(Protocol):
    def publish(self, reading: Reading) -> None: ...


class TargetPipeline:
    """
    Stateless apart from the constants handed in at construction.

    ``process`` publishes exactly once per frame that yields a reading and
    not at all for skipped frames.
    """

    def __init__(
        self,
        frame: FrameGeometry,
        target: TargetGeometry,
        gate_cfg: GateConfig,
        sink: ReadingSink,
        *,
        verbose: bool = False,
    ):
        self.frame = frame
        self.target = target
        self.gate_cfg = gate_cfg
        self.sink = sink
        self.verbose = verbose

    def compute(self, candidates: Sequence[BoundingBox]) -> Reading:
        """Pure part of the chain. Raises a ``PipelineError`` on skip."""
        pair = select_pair(candidates, self.frame)
        result = triangulate(pair, self.frame, self.target)
        return evaluate(result, self.gate_cfg.relative_tolerance)

    def process(self, candidates: Sequence[BoundingBox]) -> Optional[Reading]:
        try:
            reading = self.compute(candidates)
        except PipelineError as exc:
            if self.verbose:
                print(f"[Pipeline] Frame skipped: {exc}")
            return None
        self.sink.publish(reading)
        return reading
