# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

"""Reading and writing MOT-style text files.

Trajectory files written by `TrajectoryWriter` have one row per tracking:

    frameIndex,label,ID,x1,y1,width,height,1,-1,-1,-1

Frame indices are zero-based. The trailing `1,-1,-1,-1` columns are the
confidence and 3D placeholders expected by MOT evaluation tools. The column
layout is a compatibility contract with those tools.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import IO

import numpy as np
import supervision as sv

from trackbench.core.sequence import Tracking
from trackbench.errors import (
    DuplicateTrackingError,
    OutputExistsError,
    OutputUnwritableError,
)
from trackbench.log import get_logger

logger = get_logger(__name__)

TRAJECTORY_SUFFIX = ("1", "-1", "-1", "-1")
TRAJECTORY_COLUMNS = 7 + len(TRAJECTORY_SUFFIX)


def _format_number(value: float) -> str:
    """Format a coordinate so that parsing it back yields the same value."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _parse_number(token: str) -> float | int:
    number = float(token)
    return int(number) if number.is_integer() and "." not in token else number


def _parse_label(token: str) -> str | int:
    try:
        return int(token)
    except ValueError:
        return token


LABEL_FORBIDDEN_CHARS = (",", "\r", "\n")


def format_tracking(tracking: Tracking) -> str:
    """Format one tracking as a trajectory row, without the newline.

    Raises:
        ValueError: If the label contains a comma or a line break, which would
            change the column layout of the row.
    """
    label = str(tracking.label)
    if any(char in label for char in LABEL_FORBIDDEN_CHARS):
        raise ValueError(
            f"Label {label!r} cannot be written to a trajectory file: labels "
            "must not contain commas or line breaks"
        )
    return ",".join(
        [
            str(tracking.frame_index),
            label,
            str(tracking.tracker_id),
            _format_number(tracking.x),
            _format_number(tracking.y),
            _format_number(tracking.width),
            _format_number(tracking.height),
            *TRAJECTORY_SUFFIX,
        ]
    )


class TrajectoryWriter:
    """Write-once trajectory file of one sequence.

    Use `TrajectoryWriter.open` to create the file and the writer as a context
    manager so the file is always closed. If the `with` block raises, the
    partial file is removed so a later run computes the sequence again instead
    of skipping it as finished.

    Examples:
        ```python
        with TrajectoryWriter.open("results/seq01/sort/track.txt") as writer:
            writer.append(trackings)
        ```
    """

    def __init__(self, path: Path, file: IO[str]) -> None:
        self.path = path
        self._file: IO[str] | None = file
        self._seen: set[tuple[int, int]] = set()
        self.rows_written = 0

    @classmethod
    def open(cls, path: str | Path) -> TrajectoryWriter:
        """Create the trajectory file, with its parent directories.

        The file is created exclusively: it is never truncated or overwritten.

        Raises:
            OutputExistsError: If the file already exists.
            OutputUnwritableError: If the file cannot be created.
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputUnwritableError(
                f"Cannot create output directory '{path.parent}': {e}"
            ) from e

        try:
            file = open(path, "x")
        except FileExistsError as e:
            raise OutputExistsError(f"Output file '{path}' already exists") from e
        except OSError as e:
            raise OutputUnwritableError(
                f"Cannot create output file '{path}': {e}"
            ) from e
        return cls(path, file)

    @property
    def closed(self) -> bool:
        return self._file is None

    def append(self, trackings: list[Tracking]) -> None:
        """Write the trackings of one frame.

        Raises:
            DuplicateTrackingError: If a `(frame_index, tracker_id)` pair was
                already written.
            ValueError: If a label cannot be written unambiguously.
            OutputUnwritableError: If writing fails.
        """
        if self._file is None:
            raise ValueError(f"Trajectory file '{self.path}' is closed")

        lines = []
        for tracking in trackings:
            key = (tracking.frame_index, tracking.tracker_id)
            if key in self._seen:
                raise DuplicateTrackingError(
                    f"Track {tracking.tracker_id} reported more than once in "
                    f"frame {tracking.frame_index}"
                )
            self._seen.add(key)
            lines.append(format_tracking(tracking) + "\n")

        try:
            self._file.writelines(lines)
        except OSError as e:
            raise OutputUnwritableError(
                f"Failed to write output file '{self.path}': {e}"
            ) from e
        self.rows_written += len(lines)

    def close(self) -> None:
        """Flush and close the file. Safe to call more than once."""
        if self._file is not None:
            file, self._file = self._file, None
            file.close()

    def discard(self) -> None:
        """Close the file and delete it."""
        try:
            self.close()
        finally:
            self.path.unlink(missing_ok=True)

    def __enter__(self) -> TrajectoryWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        if exc_type is None:
            try:
                self.close()
            except OSError as e:
                logger.warning("Removing output file %s after failed close", self.path)
                self.discard()
                raise OutputUnwritableError(
                    f"Failed to write output file '{self.path}': {e}"
                ) from e
            return
        logger.warning(
            "Removing incomplete output file %s after %s",
            self.path,
            exc_type.__name__,
        )
        self.discard()


def load_trajectory(path: str | Path) -> dict[int, list[Tracking]]:
    """Load a trajectory file written by `TrajectoryWriter`.

    Args:
        path: Path to the trajectory file.

    Returns:
        Dictionary mapping zero-based frame indices to the trackings of that
        frame, in file order. Frames without trackings are absent.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a row does not follow the trajectory layout.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Trajectory file not found: {path}")

    frames: dict[int, list[Tracking]] = {}
    with open(path, newline="") as f:
        for line_number, row in enumerate(csv.reader(f), start=1):
            if not row:
                continue
            if len(row) != TRAJECTORY_COLUMNS:
                raise ValueError(
                    f"Invalid trajectory row in {path}:{line_number}: expected "
                    f"{TRAJECTORY_COLUMNS} columns, got {len(row)}"
                )
            try:
                tracking = Tracking(
                    frame_index=int(row[0]),
                    label=_parse_label(row[1]),
                    tracker_id=int(row[2]),
                    x=_parse_number(row[3]),
                    y=_parse_number(row[4]),
                    width=_parse_number(row[5]),
                    height=_parse_number(row[6]),
                )
            except ValueError as e:
                raise ValueError(
                    f"Invalid trajectory row in {path}:{line_number}: {row}"
                ) from e
            frames.setdefault(tracking.frame_index, []).append(tracking)

    return frames


@dataclass
class MOTFrameData:
    """Detections of a single frame from a MOT format file.

    Attributes:
        ids: Track IDs, `-1` for detection files. Shape `(N,)`.
        boxes: Bounding boxes in xywh format. Shape `(N, 4)`.
        confidences: Detection confidence scores. Shape `(N,)`.
        classes: Class IDs. Shape `(N,)`.
    """

    ids: np.ndarray
    boxes: np.ndarray
    confidences: np.ndarray
    classes: np.ndarray

    def to_detections(self) -> sv.Detections:
        """Convert to `sv.Detections` in xyxy format."""
        xyxy = self.boxes.copy()
        xyxy[:, 2:4] += xyxy[:, 0:2]
        return sv.Detections(
            xyxy=xyxy,
            confidence=self.confidences.astype(np.float32),
            class_id=self.classes.astype(int),
        )


def load_mot_file(path: str | Path) -> dict[int, MOTFrameData]:
    """Load a MOT Challenge format detection or ground truth file.

    Each line holds one box:
    `<frame>, <id>, <bb_left>, <bb_top>, <bb_width>, <bb_height>, <conf>, ...`

    Args:
        path: Path to the MOT format text file.

    Returns:
        Dictionary mapping frame numbers, as written in the file (1-based for
        MOT Challenge data), to `MOTFrameData`.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a row has fewer than 6 columns or non-numeric values.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"MOT file not found: {path}")

    frame_rows: dict[int, list[list[str]]] = {}

    with open(path, newline="") as f:
        sample = f.readline()
        f.seek(0)

        try:
            dialect = csv.Sniffer().sniff(sample, delimiters=",; \t")
        except csv.Error:
            dialect = csv.excel

        for row in csv.reader(f, dialect, skipinitialspace=True):
            while row and row[-1].strip() == "":
                row = row[:-1]
            if not row:
                continue
            if len(row) < 6:
                raise ValueError(
                    f"Invalid MOT format in {path}: expected at least 6 columns, "
                    f"got {len(row)} in row: {row}"
                )
            try:
                frame = int(float(row[0]))
            except ValueError as e:
                raise ValueError(f"Invalid frame number in {path}: {row[0]}") from e
            frame_rows.setdefault(frame, []).append(row)

    result: dict[int, MOTFrameData] = {}
    for frame, rows in frame_rows.items():
        width = min(len(row) for row in rows)
        try:
            data = np.array([row[:width] for row in rows], dtype=np.float64)
        except ValueError as e:
            raise ValueError(
                f"Cannot convert data to float in {path}, frame {frame}"
            ) from e

        result[frame] = MOTFrameData(
            ids=data[:, 1].astype(np.intp),
            boxes=data[:, 2:6],
            confidences=data[:, 6] if width > 6 else np.ones(len(data)),
            classes=(
                data[:, 7].astype(np.intp)
                if width > 7
                else np.ones(len(data), dtype=np.intp)
            ),
        )

    return result
