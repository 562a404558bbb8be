# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

"""I/O utilities for enumerating frames and reading and writing MOT data."""

from trackbench.io.frames import IMAGE_EXTENSIONS, Frame, FrameSource
from trackbench.io.mot import (
    MOTFrameData,
    TrajectoryWriter,
    format_tracking,
    load_mot_file,
    load_trajectory,
)

__all__ = [
    "IMAGE_EXTENSIONS",
    "Frame",
    "FrameSource",
    "MOTFrameData",
    "TrajectoryWriter",
    "format_tracking",
    "load_mot_file",
    "load_trajectory",
]
