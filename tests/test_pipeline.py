import pytest

from tape_vision.config import CameraConfig, GateConfig, TargetConfig
from tape_vision.geometry import build_geometry
from tape_vision.pipeline import TargetPipeline

from helpers import box_at


@pytest.fixture
def pipeline(geometry, sink):
    frame, target = geometry
    return TargetPipeline(frame, target, GateConfig(), sink)


def test_accepted_frame_publishes_once(pipeline, sink):
    reading = pipeline.process([box_at(100), box_at(860), box_at(1060), box_at(1850)])
    assert reading is not None
    assert reading.distance_inches == pytest.approx(95.0, abs=0.1)
    assert reading.lateral_offset_inches == pytest.approx(0.0)
    assert reading.angle_radians == 0.0
    assert sink.readings == [reading]


@pytest.mark.parametrize("candidates", [[], [box_at(960)]])
def test_insufficient_candidates_publish_nothing(pipeline, sink, candidates):
    assert pipeline.process(candidates) is None
    assert sink.readings == []


def test_zero_separation_publishes_nothing(pipeline, sink):
    assert pipeline.process([box_at(960), box_at(960, 600)]) is None
    assert sink.readings == []


def test_inconsistent_estimates_publish_sentinel(sink):
    cam = CameraConfig(width=1920, height=1080, horizontal_fov_deg=78.0, vertical_fov_deg=60.0)
    frame, target = build_geometry(TargetConfig(separation_in=13.5), cam)
    pipeline = TargetPipeline(frame, target, GateConfig(), sink)

    reading = pipeline.process([box_at(860), box_at(1060)])
    assert reading.is_sentinel
    assert sink.readings == [reading]


def test_same_input_same_output(pipeline, sink):
    boxes = [box_at(700), box_at(860), box_at(1060)]
    first = pipeline.process(boxes)
    second = pipeline.process(boxes)
    assert first == second
    assert len(sink.readings) == 2


def test_candidate_order_does_not_matter(pipeline):
    a, b = box_at(860), box_at(1060)
    assert pipeline.compute([a, b]) == pipeline.compute([b, a])


def test_default_camera_config_accepts_reference_scenario(sink):
    frame, target = build_geometry(TargetConfig(separation_in=13.5), CameraConfig())
    pipeline = TargetPipeline(frame, target, GateConfig(), sink)

    reading = pipeline.process([box_at(860), box_at(1060)])
    assert not reading.is_sentinel
    assert reading.distance_inches == pytest.approx(95.0, abs=0.1)


@pytest.mark.parametrize("spacing", [100, 200, 400])
@pytest.mark.parametrize("height", [20, 40, 80])
def test_default_config_accepts_normal_range(sink, spacing, height):
    frame, target = build_geometry(TargetConfig(), CameraConfig())
    pipeline = TargetPipeline(frame, target, GateConfig(), sink)

    reading = pipeline.process(
        [box_at(960 - spacing / 2, height=height), box_at(960 + spacing / 2, height=height)]
    )
    assert not reading.is_sentinel
