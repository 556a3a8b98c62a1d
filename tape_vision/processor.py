"""Glue logic that wires camera -> detector -> pipeline -> publisher."""
import threading
import time
import traceback
from typing import Any, List, Optional

from tape_vision.camera import Camera
from tape_vision.config import VisionConfig
from tape_vision.detector import RetroTapeDetector
from tape_vision.geometry import build_geometry
from tape_vision.pipeline import TargetPipeline
from tape_vision.publisher import PublisherThread, ReadingChannel


class CameraWorker(threading.Thread):
    """One per active camera. Frames are handled strictly in arrival order."""

    def __init__(
        self,
        camera: Camera,
        detector: RetroTapeDetector,
        pipeline: TargetPipeline,
        max_reopens: int = 5,
    ):
        super().__init__(name=f"vision-{camera.config.name}", daemon=True)
        self.camera = camera
        self.detector = detector
        self.pipeline = pipeline
        self.max_reopens = max_reopens
        self._stop_evt = threading.Event()

        # Runtime metrics
        self.total_frames = 0
        self.frame_count = 0
        self.published = 0
        self.proc_time_sum = 0.0
        self.fps_timer_start = time.time()
        self.cam_reopens = 0

    def stop(self) -> None:
        self._stop_evt.set()

    @property
    def stopped(self) -> bool:
        return self._stop_evt.is_set()

    def _recover_camera(self) -> bool:
        """Returns False once the reopen budget is exhausted."""
        if self.camera.is_opened():
            return True
        if self.cam_reopens >= self.max_reopens:
            print(f"[Worker] '{self.camera.config.name}' gave up after {self.cam_reopens} reopens")
            return False
        if self.camera.open():
            self.cam_reopens = 0
        else:
            self.cam_reopens += 1
        return True

    def process_frame(self) -> bool:
        """Returns False if the worker should exit."""
        _, frame = self.camera.read()
        if frame is None:
            if not self._recover_camera():
                return False
            time.sleep(0.05)
            return True

        self.total_frames += 1
        tic = time.time()
        candidates = self.detector.detect(frame)
        if self.pipeline.process(candidates) is not None:
            self.published += 1

        # -------- Stats --------
        now = time.time()
        self.proc_time_sum += (now - tic) * 1000.0
        self.frame_count += 1
        if now - self.fps_timer_start >= 1.0:
            fps = self.frame_count / (now - self.fps_timer_start)
            proc_ms = self.proc_time_sum / self.frame_count
            print(
                f"[Worker] '{self.camera.config.name}' FPS:{fps:.1f} "
                f"Proc:{proc_ms:.1f}ms Published:{self.published}"
            )
            self.frame_count = 0
            self.proc_time_sum = 0.0
            self.fps_timer_start = now
        return True

    def run(self) -> None:
        try:
            while not self.stopped:
                if not self.process_frame():
                    break
        except Exception as exc:  # noqa: BLE001
            print(f"[Worker] '{self.camera.config.name}' loop error: {exc}")
            traceback.print_exc()
        finally:
            self.camera.release()
            print(f"[Worker] '{self.camera.config.name}' exited. Total frames: {self.total_frames}")


class VisionProcessor:
    """The main high-level orchestrator."""

    def __init__(
        self,
        config: VisionConfig,
        *,
        process_all_cameras: bool = False,
        heartbeat_s: float = 10.0,
        verbose: bool = False,
    ):
        self.config = config
        self.heartbeat_s = heartbeat_s
        self.channel = ReadingChannel(config.publisher.queue_size)
        self.publisher: Optional[PublisherThread] = None
        self.workers: List[CameraWorker] = []

        cams = config.cameras if process_all_cameras else config.cameras[:1]
        detector_cfg = config.detector
        for cam_cfg in cams:
            # ConfigurationError propagates: fatal at startup
            frame, target = build_geometry(config.target, cam_cfg)
            pipeline = TargetPipeline(frame, target, config.gate, self.channel, verbose=verbose)
            self.workers.append(
                CameraWorker(Camera(cam_cfg), RetroTapeDetector(detector_cfg), pipeline)
            )

    # ---------------------------------------------------------------------
    #                         Setup / teardown
    # ---------------------------------------------------------------------
    def start(self, sink: Any) -> bool:
        """Open cameras, then the output sink takes over draining the channel."""
        if not self.workers:
            print("[Processor] No cameras configured")
            return False
        opened = [w for w in self.workers if w.camera.open()]
        if not opened:
            return False
        self.publisher = PublisherThread(self.channel, sink)
        self.publisher.start()
        for w in opened:
            w.start()
        print(f"[Processor] Running {len(opened)} camera worker(s)")
        return True

    def stop(self) -> None:
        print("[Processor] Cleaning up...")
        for w in self.workers:
            w.stop()
        for w in self.workers:
            if w.is_alive():
                w.join(2.0)
        published = 0
        if self.publisher is not None:
            if self.publisher.is_alive():
                self.publisher.stop()
            published = self.publisher.published
        print(
            f"[Processor] Exited. Published: {published}, "
            f"dropped: {self.channel.dropped}"
        )

    def run(self, sink: Any, max_beats: Optional[int] = None) -> None:
        """Main thread only keeps the process alive."""
        if not self.start(sink):
            self.stop()
            return
        beats = 0
        try:
            while any(w.is_alive() for w in self.workers):
                time.sleep(self.heartbeat_s)
                beats += 1
                if max_beats is not None and beats >= max_beats:
                    break
        except KeyboardInterrupt:
            print("\n[Processor] Stopped by user.")
        finally:
            self.stop()
