"""HSV-threshold detector for lit retro-reflective tape."""
from typing import List, Optional

import cv2
import numpy as np

from tape_vision.common import BoundingBox
from tape_vision.config import DetectorConfig


class RetroTapeDetector:
    def __init__(self, config: DetectorConfig):
        self.config = config
        self._low = np.array(config.hsv_low, dtype=np.uint8)
        self._high = np.array(config.hsv_high, dtype=np.uint8)

    def mask(self, frame_bgr: np.ndarray) -> np.ndarray:
        hsv = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2HSV)
        return cv2.inRange(hsv, self._low, self._high)

    def detect(self, frame_bgr: Optional[np.ndarray]) -> List[BoundingBox]:
        """
        Returns candidate boxes, largest contour first, capped at
        ``max_candidates``.
        """
        if frame_bgr is None or frame_bgr.size == 0:
            return []
        if frame_bgr.ndim == 2:
            frame_bgr = cv2.cvtColor(frame_bgr, cv2.COLOR_GRAY2BGR)

        contours, _ = cv2.findContours(
            self.mask(frame_bgr), cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE
        )

        scored = []
        for cnt in contours:
            area = cv2.contourArea(cnt)
            if area < self.config.min_area_px:
                continue
            x, y, w, h = cv2.boundingRect(cnt)
            if h == 0:
                continue
            aspect = w / h
            if not self.config.min_aspect <= aspect <= self.config.max_aspect:
                continue
            scored.append((area, BoundingBox(x, y, w, h)))

        scored.sort(key=lambda t: t[0], reverse=True)
        return [box for _, box in scored[: self.config.max_candidates]]
