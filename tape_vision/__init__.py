"""Tape-pair range finder – re-export high-level API."""
from .processor import VisionProcessor                  # noqa: F401
from .pipeline import TargetPipeline                    # noqa: F401
from .common import (                                   # noqa: F401
    BoundingBox, FrameGeometry, Reading, ConfigurationError,
)
from .config import VisionConfig, load_config           # noqa: F401
