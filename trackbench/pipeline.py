# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

from __future__ import annotations

from trackbench.config import HarnessConfig
from trackbench.core.base import BaseDetector, BaseTracker
from trackbench.core.sequence import SequenceTracker
from trackbench.errors import OutputExistsError
from trackbench.io.frames import FrameSource
from trackbench.io.mot import TrajectoryWriter
from trackbench.log import get_logger
from trackbench.results import SequenceResult
from trackbench.timing import TimingAggregator

logger = get_logger(__name__)


def track_sequence(
    sequence: str,
    config: HarnessConfig,
    detector: BaseDetector,
    tracker: BaseTracker,
) -> SequenceResult:
    """Detect and track every frame of one sequence and write its trajectory.

    Frames are decoded one at a time; only the detect+track call of each frame
    is timed. A sequence whose trajectory file already exists is skipped and
    reported with zero duration and zero frames.

    Args:
        sequence: Sequence identifier, relative to `config.data_dir`.
        config: Harness paths and options.
        detector: Detector used for every frame.
        tracker: Freshly constructed tracker. It must not have seen another
            sequence.

    Returns:
        `SequenceResult` with status `completed` or `skipped`.

    Raises:
        SequenceNotFoundError: If the images directory does not exist.
        OutputUnwritableError: If the trajectory file cannot be written.
        InferenceError: If the detector fails on a frame.
        OSError: If a frame cannot be decoded.
    """
    frames = FrameSource(config.images_dir(sequence))
    output_path = config.output_path(sequence)

    try:
        writer = TrajectoryWriter.open(output_path)
    except OutputExistsError:
        return skipped_result(sequence, config)

    sequence_tracker = SequenceTracker(detector, tracker)
    timing = TimingAggregator()

    with writer:
        for frame in frames:
            frame = frame.load()
            with timing.measure():
                trackings = sequence_tracker.process(frame)
            writer.append(trackings)

    logger.info(
        "Sequence %s: %d frames, %d rows written to %s",
        sequence,
        timing.record.frame_count,
        writer.rows_written,
        output_path,
    )
    return SequenceResult(
        sequence=sequence,
        status="completed",
        timing=timing.record,
        output_path=output_path,
    )


def skipped_result(sequence: str, config: HarnessConfig) -> SequenceResult:
    """Result of a sequence whose trajectory file already exists."""
    output_path = config.output_path(sequence)
    logger.warning("Output file %s already exists; skipping", output_path)
    return SequenceResult(sequence=sequence, status="skipped", output_path=output_path)
