# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import supervision as sv

from trackbench.core.base import BaseDetector, BaseTracker

if TYPE_CHECKING:
    from trackbench.io.frames import Frame

UNKNOWN_LABEL = -1


@dataclass(frozen=True)
class Tracking:
    """One tracked object in one frame.

    Attributes:
        frame_index: Zero-based index of the frame.
        label: Class name, or integer class ID when the detector reports no
            names.
        tracker_id: Identity assigned by the tracker, stable across frames.
        x: Top-left x coordinate in pixels.
        y: Top-left y coordinate in pixels.
        width: Box width in pixels.
        height: Box height in pixels.
    """

    frame_index: int
    label: str | int
    tracker_id: int
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_detections(
        cls, frame_index: int, detections: sv.Detections
    ) -> list[Tracking]:
        """Convert tracker output to trackings for one frame.

        Entries without an identity (`tracker_id` missing or `-1`) are not
        trackings and are left out.

        Args:
            frame_index: Zero-based index of the frame.
            detections: Tracker output in `(x_min, y_min, x_max, y_max)`
                format.

        Returns:
            Trackings in the order the tracker reported them.
        """
        if len(detections) == 0 or detections.tracker_id is None:
            return []

        class_names = detections.data.get("class_name")
        trackings = []
        for i in range(len(detections)):
            tracker_id = int(detections.tracker_id[i])
            if tracker_id == -1:
                continue

            if class_names is not None:
                label: str | int = str(class_names[i])
            elif detections.class_id is not None:
                label = int(detections.class_id[i])
            else:
                label = UNKNOWN_LABEL

            x1, y1, x2, y2 = (float(v) for v in detections.xyxy[i])
            trackings.append(
                cls(
                    frame_index=frame_index,
                    label=label,
                    tracker_id=tracker_id,
                    x=x1,
                    y=y1,
                    width=x2 - x1,
                    height=y2 - y1,
                )
            )
        return trackings


class SequenceTracker:
    """Detect-then-track unit of work for the frames of one sequence.

    The tracker keeps its state for the lifetime of this object, so create a
    new `SequenceTracker` with a fresh tracker for every sequence.

    Args:
        detector: Produces object proposals for a frame.
        tracker: Links proposals into identity-persistent tracks.
    """

    def __init__(self, detector: BaseDetector, tracker: BaseTracker) -> None:
        self.detector = detector
        self.tracker = tracker

    def process(self, frame: Frame) -> list[Tracking]:
        """Run detection and tracking on one frame.

        Errors raised by the detector or the tracker propagate unchanged.

        Args:
            frame: Decoded frame.

        Returns:
            Trackings of the frame, tagged with `frame.index`.
        """
        detections = self.detector.detect(frame)
        tracked = self.tracker.update(detections)
        return Tracking.from_detections(frame.index, tracked)
