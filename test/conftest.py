# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import cv2
import numpy as np
import pytest
import supervision as sv

from trackbench.config import HarnessConfig
from trackbench.core.base import BaseDetector, BaseTracker
from trackbench.io.frames import Frame

FRAME_WIDTH = 16
FRAME_HEIGHT = 16

# (label, tracker_id, (x, y, width, height))
ScriptedTrack = tuple[str, int, tuple[float, float, float, float]]


def create_frame(index: int) -> np.ndarray:
    """Create a small frame whose pixels all hold `index`."""
    return np.full((FRAME_HEIGHT, FRAME_WIDTH, 3), index % 256, dtype=np.uint8)


def scripted_detections(tracks: Sequence[ScriptedTrack]) -> sv.Detections:
    """Build tracker output from `(label, id, xywh)` tuples."""
    if not tracks:
        return sv.Detections.empty()
    xyxy = np.array(
        [[x, y, x + w, y + h] for _, _, (x, y, w, h) in tracks], dtype=np.float64
    )
    return sv.Detections(
        xyxy=xyxy,
        confidence=np.ones(len(tracks), dtype=np.float32),
        tracker_id=np.array([track_id for _, track_id, _ in tracks]),
        data={"class_name": np.array([label for label, _, _ in tracks])},
    )


class RecordingDetector(BaseDetector):
    """Detector returning no boxes and recording every frame it receives."""

    def __init__(self) -> None:
        self.frames: list[Frame] = []

    def detect(self, frame: Frame) -> sv.Detections:
        self.frames.append(frame)
        return sv.Detections.empty()


class FailingDetector(BaseDetector):
    """Detector raising on the frame with index `fail_at`."""

    def __init__(self, fail_at: int = 0, error: Exception | None = None) -> None:
        self.fail_at = fail_at
        self.error = error or RuntimeError("detector exploded")

    def detect(self, frame: Frame) -> sv.Detections:
        if frame.index == self.fail_at:
            raise self.error
        return sv.Detections.empty()


class ScriptedTracker(BaseTracker):
    """Tracker replaying a fixed output per call to `update`.

    Calls beyond the script return no tracks.
    """

    def __init__(self, script: Sequence[Sequence[ScriptedTrack]] = ()) -> None:
        self.script = list(script)
        self.calls = 0

    def update(self, detections: sv.Detections) -> sv.Detections:
        tracks = self.script[self.calls] if self.calls < len(self.script) else []
        self.calls += 1
        return scripted_detections(tracks)

    def reset(self) -> None:
        self.calls = 0


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "data"
    directory.mkdir()
    return directory


@pytest.fixture
def config(data_dir: Path) -> HarnessConfig:
    return HarnessConfig(data_dir=data_dir, configuration_name="test-config")


@pytest.fixture
def sequence_factory(data_dir: Path) -> Callable[..., Path]:
    """Factory creating `<data_dir>/<name>/images/` with PNG frames."""

    def _create(
        name: str,
        n_frames: int = 3,
        filename_pattern: str = "{:06d}.png",
    ) -> Path:
        images_dir = data_dir / name / "images"
        images_dir.mkdir(parents=True, exist_ok=True)
        for index in range(n_frames):
            filename = filename_pattern.format(index + 1)
            cv2.imwrite(str(images_dir / filename), create_frame(index))
        return images_dir

    return _create
