# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass(frozen=True)
class TimingRecord:
    """Cumulative processing time and frame count.

    Records of several sequences are combined with `+`, which sums both
    fields. Throughput is then derived from the totals, so longer sequences
    weigh more in a batch figure than shorter ones.

    Attributes:
        duration_ms: Total detect+track time in milliseconds.
        frame_count: Number of frames the time was measured over.
    """

    duration_ms: float = 0.0
    frame_count: int = 0

    @property
    def fps(self) -> float | None:
        """Frames per second, or `None` when no time was measured."""
        if self.duration_ms <= 0:
            return None
        return self.frame_count * 1000 / self.duration_ms

    def __add__(self, other: TimingRecord) -> TimingRecord:
        if not isinstance(other, TimingRecord):
            return NotImplemented
        return TimingRecord(
            duration_ms=self.duration_ms + other.duration_ms,
            frame_count=self.frame_count + other.frame_count,
        )

    def to_dict(self) -> dict[str, float | int | None]:
        return {
            "duration_ms": self.duration_ms,
            "frame_count": self.frame_count,
            "fps": self.fps,
        }


class TimingAggregator:
    """Accumulate per-frame latency of one sequence.

    Examples:
        ```python
        timing = TimingAggregator()
        for frame in frames:
            with timing.measure():
                trackings = sequence_tracker.process(frame)
        timing.record.fps
        ```
    """

    def __init__(self) -> None:
        self._duration_ms = 0.0
        self._frame_count = 0

    @contextmanager
    def measure(self) -> Iterator[None]:
        """Time the enclosed block as the processing of one frame.

        Nothing is recorded when the block raises.
        """
        start = time.perf_counter()
        yield
        self._duration_ms += (time.perf_counter() - start) * 1000
        self._frame_count += 1

    @property
    def record(self) -> TimingRecord:
        return TimingRecord(
            duration_ms=self._duration_ms, frame_count=self._frame_count
        )


def format_timing(record: TimingRecord) -> str:
    """Format as `<ms>ms (<fps>fps)`, e.g. `1520ms (19.7fps)`."""
    fps = record.fps
    fps_part = "--" if fps is None else f"{fps:.1f}"
    return f"{record.duration_ms:.0f}ms ({fps_part}fps)"
