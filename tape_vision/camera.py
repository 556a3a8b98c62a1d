"""A thin wrapper around cv2.VideoCapture with reconnection support."""
from __future__ import annotations

import time
from typing import Optional, Tuple

import cv2
import numpy as np

from tape_vision.config import CameraConfig


class Camera:
    def __init__(self, config: CameraConfig) -> None:
        self.config = config
        self.cap: Optional[cv2.VideoCapture] = None

        # Exposed runtime values
        self.actual_width: int = 0
        self.actual_height: int = 0
        self.actual_fps: float = 0.0

    # --------------- Public API ---------------------
    def open(self) -> bool:
        self.cap = cv2.VideoCapture(self.config.path)
        if not self.cap or not self.cap.isOpened():
            print(f"[Camera] Could not open '{self.config.name}' on {self.config.path}")
            self.cap = None
            return False

        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.height)
        if self.config.fps > 0:
            self.cap.set(cv2.CAP_PROP_FPS, self.config.fps)

        time.sleep(0.1)  # Let driver settle

        self.actual_width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.actual_height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self.actual_fps = self.cap.get(cv2.CAP_PROP_FPS)

        print(
            f"[Camera] '{self.config.name}' "
            f"{self.actual_width}x{self.actual_height}@{self.actual_fps:.1f} FPS"
        )
        if self.actual_width == 0 or self.actual_height == 0:
            print("[Camera] Error: camera returned zero resolution")
            self.release()
            return False
        if (self.actual_width, self.actual_height) != (self.config.width, self.config.height):
            print(
                f"[Camera] Warning: requested {self.config.width}x{self.config.height}, "
                "geometry constants assume the requested size"
            )
        return True

    def read(self) -> Tuple[float, Optional[np.ndarray]]:
        if not self.is_opened():
            return time.time(), None
        ts = time.time()
        ret, frame = self.cap.read()
        return (ts, frame) if ret and frame is not None else (ts, None)

    def is_opened(self) -> bool:
        return bool(self.cap and self.cap.isOpened())

    def release(self) -> None:
        if self.cap:
            print(f"[Camera] Releasing '{self.config.name}'")
            self.cap.release()
            self.cap = None
