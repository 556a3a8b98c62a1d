"""Output side: network-table sink and the worker -> publisher hand-off."""
from __future__ import annotations

import queue
import threading
from typing import Any, Optional

from tape_vision.common import Reading
from tape_vision.config import PublisherConfig, team_server_address


# ---------------------- Sinks ----------------------
class NetworkTablesSink:
    """Writes the three reading fields as one unit."""

    def __init__(self, table: Any, cfg: PublisherConfig, flush: Any = None):
        self.table = table
        self.cfg = cfg
        self._flush = flush
        self._lock = threading.Lock()

    def publish(self, reading: Reading) -> None:
        with self._lock:
            self.table.putNumber(self.cfg.distance_key, reading.distance_inches)
            self.table.putNumber(self.cfg.lateral_key, reading.lateral_offset_inches)
            self.table.putNumber(self.cfg.angle_key, reading.angle_radians)
            if self._flush is not None:
                self._flush()


class ConsoleSink:
    """Dry-run sink for bench testing without a robot."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def publish(self, reading: Reading) -> None:
        with self._lock:
            if reading.is_sentinel:
                print("[Output] inconsistent target geometry")
            else:
                print(
                    f"[Output] dist={reading.distance_inches:.1f}in "
                    f"right={reading.lateral_offset_inches:+.1f}in"
                )


def connect_network_tables(cfg: PublisherConfig, team: int) -> NetworkTablesSink:
    """Start a client connection and return a sink on the output table."""
    from networktables import NetworkTables

    server = cfg.server or team_server_address(team)
    print(f"[Output] NetworkTables client -> {server}, table '{cfg.table}'")
    NetworkTables.initialize(server=server)
    return NetworkTablesSink(NetworkTables.getTable(cfg.table), cfg, flush=NetworkTables.flush)


# -------------------- Hand-off ---------------------
class ReadingChannel:
    """
    Bounded channel between camera workers and the publisher.

    When full, the oldest pending reading is dropped so the consumer only
    ever sees fresh, complete readings.
    """

    def __init__(self, maxsize: int = 1):
        if maxsize < 1:
            raise ValueError("maxsize must be >= 1")
        self._q: "queue.Queue[Reading]" = queue.Queue(maxsize=maxsize)
        self.dropped = 0
        # Serializes producers; `dropped` is only written under it
        self._put_lock = threading.Lock()

    def publish(self, reading: Reading) -> None:
        with self._put_lock:
            while True:
                try:
                    self._q.put_nowait(reading)
                    return
                except queue.Full:
                    try:
                        self._q.get_nowait()
                        self.dropped += 1
                    except queue.Empty:
                        pass

    def get(self, timeout: Optional[float] = None) -> Optional[Reading]:
        try:
            return self._q.get(timeout=timeout)
        except queue.Empty:
            return None

    def __len__(self) -> int:
        return self._q.qsize()


class PublisherThread(threading.Thread):
    """Drains the channel into the sink. The only place that writes out."""

    def __init__(self, channel: ReadingChannel, sink: Any, poll_s: float = 0.1):
        super().__init__(name="publisher", daemon=True)
        self.channel = channel
        self.sink = sink
        self.poll_s = poll_s
        self._stop_evt = threading.Event()
        self.published = 0

    def run(self) -> None:
        while not self._stop_evt.is_set():
            reading = self.channel.get(timeout=self.poll_s)
            if reading is None:
                continue
            try:
                self.sink.publish(reading)
                self.published += 1
            except Exception as exc:  # noqa: BLE001
                print(f"[Output] Publish error: {exc}")

    def stop(self, timeout: float = 1.0) -> None:
        self._stop_evt.set()
        self.join(timeout)
