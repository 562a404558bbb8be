# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

import supervision as sv

if TYPE_CHECKING:
    from trackbench.io.frames import Frame


@dataclass(frozen=True)
class TrackerInfo:
    """Registry entry for a tracker implementation.

    Attributes:
        tracker_id: Name the tracker is registered under (e.g. `bytetrack`).
        tracker_class: Class to instantiate.
    """

    tracker_id: str
    tracker_class: type[BaseTracker]


class BaseDetector(ABC):
    @abstractmethod
    def detect(self, frame: Frame) -> sv.Detections:
        """Return object proposals for one decoded frame.

        Raises:
            InferenceError: If the detector fails on the frame.
        """


class BaseTracker(ABC):
    """Stateful multi-object tracker.

    Subclasses that define a `tracker_id` class attribute are registered
    automatically and can be looked up by name.
    """

    tracker_id: ClassVar[str | None] = None
    _registry: ClassVar[dict[str, TrackerInfo]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        tracker_id = cls.__dict__.get("tracker_id")
        if tracker_id:
            BaseTracker._registry[tracker_id] = TrackerInfo(
                tracker_id=tracker_id, tracker_class=cls
            )

    @classmethod
    def _lookup_tracker(cls, tracker_id: str) -> TrackerInfo | None:
        return BaseTracker._registry.get(tracker_id)

    @classmethod
    def _registered_trackers(cls) -> list[str]:
        return sorted(BaseTracker._registry)

    @abstractmethod
    def update(self, detections: sv.Detections) -> sv.Detections:
        pass

    @abstractmethod
    def reset(self) -> None:
        pass
