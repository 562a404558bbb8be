# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

import dataclasses

import numpy as np
import supervision as sv

from trackbench.core.base import BaseTracker


class ByteTrackTracker(BaseTracker):
    """Track objects with the ByteTrack implementation shipped by `supervision`.

    Args:
        track_activation_threshold: `float` specifying minimum detection
            confidence to create new tracks.
        lost_track_buffer: `int` specifying number of frames to buffer when a
            track is lost.
        minimum_matching_threshold: `float` specifying the threshold used to
            match detections to existing tracks.
        frame_rate: `int` specifying the frame rate of the sequence. Used to
            scale the lost track buffer.
        minimum_consecutive_frames: `int` specifying number of consecutive
            frames before a track is reported.
    """

    tracker_id = "bytetrack"

    def __init__(
        self,
        track_activation_threshold: float = 0.25,
        lost_track_buffer: int = 30,
        minimum_matching_threshold: float = 0.8,
        frame_rate: int = 30,
        minimum_consecutive_frames: int = 1,
    ) -> None:
        self._params = dict(
            track_activation_threshold=track_activation_threshold,
            lost_track_buffer=lost_track_buffer,
            minimum_matching_threshold=minimum_matching_threshold,
            frame_rate=frame_rate,
            minimum_consecutive_frames=minimum_consecutive_frames,
        )
        self._byte_track = sv.ByteTrack(**self._params)

    def update(self, detections: sv.Detections) -> sv.Detections:
        """Associate `detections` with existing tracks.

        Detections without confidence scores are treated as fully confident.

        Returns:
            `sv.Detections` of the confirmed tracks with `tracker_id` set.
        """
        if detections.confidence is None:
            detections = dataclasses.replace(
                detections, confidence=np.ones(len(detections), dtype=np.float32)
            )
        return self._byte_track.update_with_detections(detections)

    def reset(self) -> None:
        self._byte_track = sv.ByteTrack(**self._params)
