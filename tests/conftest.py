import pytest

from tape_vision.common import FrameGeometry
from tape_vision.config import CameraConfig, TargetConfig
from tape_vision.geometry import build_geometry

from helpers import RecordingSink


@pytest.fixture
def frame():
    return FrameGeometry(1920, 1080)


@pytest.fixture
def geometry():
    """1080p, 78 deg HFOV, 13.5 in separation, VFOV chosen so both estimates agree."""
    cam = CameraConfig(width=1920, height=1080, horizontal_fov_deg=78.0, vertical_fov_deg=44.0)
    return build_geometry(TargetConfig(separation_in=13.5), cam)


@pytest.fixture
def sink():
    return RecordingSink()
