# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

from __future__ import annotations

from pathlib import Path

import cv2
import pytest

from conftest import (
    FailingDetector,
    RecordingDetector,
    ScriptedTracker,
    create_frame,
)
from trackbench.config import HarnessConfig
from trackbench.errors import (
    DuplicateTrackingError,
    InferenceError,
    SequenceNotFoundError,
)
from trackbench.io.mot import load_trajectory
from trackbench.pipeline import track_sequence


def test_writes_one_row_per_tracking(config: HarnessConfig, sequence_factory) -> None:
    sequence_factory("seq01", n_frames=3)
    tracker = ScriptedTracker(
        [
            [("car", 1, (10, 20, 30, 40))],
            [],
            [("car", 1, (12, 20, 30, 40))],
        ]
    )

    result = track_sequence("seq01", config, RecordingDetector(), tracker)

    output = config.output_path("seq01")
    assert result.status == "completed"
    assert result.output_path == output
    assert output.read_text().splitlines() == [
        "0,car,1,10,20,30,40,1,-1,-1,-1",
        "2,car,1,12,20,30,40,1,-1,-1,-1",
    ]
    assert result.timing.frame_count == 3
    assert result.timing.duration_ms >= 0


def test_output_layout(config: HarnessConfig, sequence_factory, data_dir: Path) -> None:
    sequence_factory("seq01", n_frames=1)

    track_sequence("seq01", config, RecordingDetector(), ScriptedTracker())

    assert (data_dir / "results" / "seq01" / "test-config" / "track.txt").is_file()


def test_frames_processed_in_filename_order(
    config: HarnessConfig, data_dir: Path
) -> None:
    images_dir = data_dir / "seq01" / "images"
    images_dir.mkdir(parents=True)
    for index, name in enumerate(["b.png", "c.png", "a.png"]):
        cv2.imwrite(str(images_dir / name), create_frame(index))
    detector = RecordingDetector()

    track_sequence("seq01", config, detector, ScriptedTracker())

    assert [f.path.name for f in detector.frames] == ["a.png", "b.png", "c.png"]
    assert [f.index for f in detector.frames] == [0, 1, 2]


def test_detector_receives_decoded_frames(
    config: HarnessConfig, sequence_factory
) -> None:
    sequence_factory("seq01", n_frames=2)
    detector = RecordingDetector()

    track_sequence("seq01", config, detector, ScriptedTracker())

    assert all(frame.image is not None for frame in detector.frames)
    assert int(detector.frames[1].image[0, 0, 0]) == 1


def test_existing_output_is_skipped(config: HarnessConfig, sequence_factory) -> None:
    sequence_factory("seq01", n_frames=2)
    output = config.output_path("seq01")
    output.parent.mkdir(parents=True)
    output.write_text("previous\n")
    detector = RecordingDetector()

    result = track_sequence("seq01", config, detector, ScriptedTracker())

    assert result.status == "skipped"
    assert result.timing.duration_ms == 0
    assert result.timing.frame_count == 0
    assert detector.frames == []
    assert output.read_text() == "previous\n"


def test_second_run_is_skipped(config: HarnessConfig, sequence_factory) -> None:
    sequence_factory("seq01", n_frames=2)
    tracker = ScriptedTracker([[("car", 1, (10, 20, 30, 40))]])
    track_sequence("seq01", config, RecordingDetector(), tracker)
    first = config.output_path("seq01").read_text()

    result = track_sequence("seq01", config, RecordingDetector(), ScriptedTracker())

    assert result.status == "skipped"
    assert config.output_path("seq01").read_text() == first


def test_missing_images_dir_creates_no_output(config: HarnessConfig) -> None:
    with pytest.raises(SequenceNotFoundError):
        track_sequence("missing", config, RecordingDetector(), ScriptedTracker())

    assert not config.output_path("missing").exists()
    assert not (config.results_dir / "missing").exists()


def test_detector_failure_removes_partial_output(
    config: HarnessConfig, sequence_factory
) -> None:
    sequence_factory("seq01", n_frames=3)
    detector = FailingDetector(fail_at=2, error=InferenceError("model failed"))

    with pytest.raises(InferenceError):
        track_sequence("seq01", config, detector, ScriptedTracker())

    assert not config.output_path("seq01").exists()


def test_unreadable_frame_removes_partial_output(
    config: HarnessConfig, sequence_factory
) -> None:
    images_dir = sequence_factory("seq01", n_frames=1)
    (images_dir / "000002.png").write_bytes(b"not an image")

    with pytest.raises(OSError, match="Failed to read image"):
        track_sequence("seq01", config, RecordingDetector(), ScriptedTracker())

    assert not config.output_path("seq01").exists()


def test_duplicate_identity_in_frame_fails(
    config: HarnessConfig, sequence_factory
) -> None:
    sequence_factory("seq01", n_frames=1)
    tracker = ScriptedTracker(
        [[("car", 1, (10, 20, 30, 40)), ("car", 1, (50, 20, 30, 40))]]
    )

    with pytest.raises(DuplicateTrackingError):
        track_sequence("seq01", config, RecordingDetector(), tracker)

    assert not config.output_path("seq01").exists()


def test_empty_images_dir(config: HarnessConfig, sequence_factory) -> None:
    sequence_factory("seq01", n_frames=0)

    result = track_sequence("seq01", config, RecordingDetector(), ScriptedTracker())

    assert result.status == "completed"
    assert result.timing.frame_count == 0
    assert result.timing.fps is None
    assert config.output_path("seq01").read_text() == ""


def test_output_loads_back(config: HarnessConfig, sequence_factory) -> None:
    sequence_factory("seq01", n_frames=2)
    tracker = ScriptedTracker(
        [
            [("car", 1, (10, 20, 30, 40)), ("person", 2, (1.5, 2, 3, 4))],
            [("car", 1, (11, 20, 30, 40))],
        ]
    )

    track_sequence("seq01", config, RecordingDetector(), tracker)
    frames = load_trajectory(config.output_path("seq01"))

    assert sorted(frames) == [0, 1]
    assert [t.tracker_id for t in frames[0]] == [1, 2]
    assert frames[0][1].x == 1.5
    assert frames[1][0].label == "car"
