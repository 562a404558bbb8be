# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

"""Exceptions raised by the sequence processing pipeline.

Every exception subclasses the builtin it refines, so callers that only care
about the broad category (e.g. `FileNotFoundError`) can keep catching that.
"""

from __future__ import annotations


class SequenceNotFoundError(FileNotFoundError):
    """The images directory of a sequence does not exist."""


class SequenceListNotFoundError(FileNotFoundError):
    """The file listing the sequences of a batch does not exist."""


class OutputExistsError(FileExistsError):
    """The trajectory file of a sequence already exists.

    Not a failure: the pipeline treats the sequence as already computed.
    """


class OutputUnwritableError(OSError):
    """The trajectory file could not be created or written."""


class InferenceError(RuntimeError):
    """A detector failed to produce detections for a frame."""


class DuplicateTrackingError(ValueError):
    """A tracker reported the same track ID twice for one frame."""
