# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

from trackbench.batch import BatchDriver, read_sequence_list
from trackbench.config import HarnessConfig
from trackbench.core.base import BaseDetector, BaseTracker
from trackbench.core.bytetrack import ByteTrackTracker
from trackbench.core.detectors import InferenceModelDetector, MOTDetectionsDetector
from trackbench.core.sequence import SequenceTracker, Tracking
from trackbench.io.frames import Frame, FrameSource
from trackbench.io.mot import TrajectoryWriter, load_trajectory
from trackbench.pipeline import track_sequence
from trackbench.results import BatchResult, SequenceResult
from trackbench.timing import TimingAggregator, TimingRecord

__all__ = [
    "BaseDetector",
    "BaseTracker",
    "BatchDriver",
    "BatchResult",
    "ByteTrackTracker",
    "Frame",
    "FrameSource",
    "HarnessConfig",
    "InferenceModelDetector",
    "MOTDetectionsDetector",
    "SequenceResult",
    "SequenceTracker",
    "TimingAggregator",
    "TimingRecord",
    "Tracking",
    "TrajectoryWriter",
    "load_trajectory",
    "read_sequence_list",
    "track_sequence",
]
