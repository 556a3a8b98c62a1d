import math

import pytest

from tape_vision.common import ConfigurationError
from tape_vision.config import CameraConfig, TargetConfig
from tape_vision.geometry import (
    build_geometry,
    tape_bounding_size,
    vertical_fov_from_horizontal,
)


def test_angles_converted_to_radians():
    frame, target = build_geometry(TargetConfig(), CameraConfig())
    assert (frame.width, frame.height) == (1920, 1080)
    assert target.horizontal_fov_rad == pytest.approx(math.radians(78.0))
    assert target.tape_angle_rad == pytest.approx(math.radians(14.0))


def test_default_separation_from_tape_dimensions():
    _, target = build_geometry(TargetConfig(), CameraConfig())
    a = math.radians(14.0)
    box_w = 2.0 * math.cos(a) + 5.5 * math.sin(a)
    assert target.separation_inches == pytest.approx(box_w + 8.0)
    assert target.tape_height_inches == pytest.approx(5.5 * math.cos(a) + 2.0 * math.sin(a))


def test_separation_override():
    _, target = build_geometry(TargetConfig(separation_in=13.5), CameraConfig())
    assert target.separation_inches == 13.5


def test_untilted_strip_bounding_box():
    assert tape_bounding_size(2.0, 5.5, 0.0) == pytest.approx((2.0, 5.5))


def test_vertical_fov_derived_from_aspect():
    _, target = build_geometry(TargetConfig(), CameraConfig(width=1000, height=1000, vertical_fov_deg=None))
    assert target.vertical_fov_rad == pytest.approx(target.horizontal_fov_rad)
    assert vertical_fov_from_horizontal(math.radians(78.0), 1920, 1080) < math.radians(78.0)


def test_explicit_vertical_fov_wins():
    _, target = build_geometry(TargetConfig(), CameraConfig(vertical_fov_deg=45.0))
    assert target.vertical_fov_rad == pytest.approx(math.radians(45.0))


@pytest.mark.parametrize(
    "target_cfg, camera_cfg",
    [
        (TargetConfig(), CameraConfig(width=0)),
        (TargetConfig(), CameraConfig(height=-1080)),
        (TargetConfig(), CameraConfig(horizontal_fov_deg=0.0)),
        (TargetConfig(), CameraConfig(horizontal_fov_deg=180.0)),
        (TargetConfig(), CameraConfig(vertical_fov_deg=-5.0)),
        (TargetConfig(tape_width_in=0.0), CameraConfig()),
        (TargetConfig(inner_gap_in=-1.0), CameraConfig()),
        (TargetConfig(separation_in=0.0), CameraConfig()),
    ],
)
def test_bad_configuration_is_fatal(target_cfg, camera_cfg):
    with pytest.raises(ConfigurationError):
        build_geometry(target_cfg, camera_cfg)


def test_constants_are_immutable():
    _, target = build_geometry(TargetConfig(), CameraConfig())
    with pytest.raises(AttributeError):
        target.separation_inches = 1.0


def test_default_vertical_fov_is_measured_value():
    _, target = build_geometry(TargetConfig(), CameraConfig())
    assert target.vertical_fov_rad == pytest.approx(math.radians(44.0))
