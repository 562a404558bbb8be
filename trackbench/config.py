# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_IMAGES_DIRNAME = "images"
DEFAULT_OUTPUT_FILENAME = "track.txt"


@dataclass
class HarnessConfig:
    """Paths and run options for one benchmark invocation.

    Attributes:
        data_dir: Root directory holding one folder per sequence. A sequence
            identifier is a path relative to this directory.
        configuration_name: Name of the detector/tracker configuration. Each
            configuration gets its own trajectory file per sequence.
        results_dir: Root directory for trajectory files. Defaults to
            `data_dir / "results"`.
        images_dirname: Name of the per-sequence folder holding the frames.
        output_filename: File name of the trajectory file.
        workers: Number of sequences processed concurrently. Frames of one
            sequence are always processed in order.
        fail_fast: Abort the whole batch on the first failing sequence instead
            of recording the failure and moving on.
    """

    data_dir: Path
    configuration_name: str
    results_dir: Path | None = None
    images_dirname: str = DEFAULT_IMAGES_DIRNAME
    output_filename: str = DEFAULT_OUTPUT_FILENAME
    workers: int = 1
    fail_fast: bool = False

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir)
        if self.results_dir is None:
            self.results_dir = self.data_dir / "results"
        else:
            self.results_dir = Path(self.results_dir)

        if not self.configuration_name or not self.configuration_name.strip():
            raise ValueError("configuration_name must not be empty")
        if "/" in self.configuration_name or "\\" in self.configuration_name:
            raise ValueError(
                f"configuration_name must not contain path separators: "
                f"'{self.configuration_name}'"
            )
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")

    def images_dir(self, sequence: str) -> Path:
        """Directory holding the frames of `sequence`."""
        return self.data_dir / sequence / self.images_dirname

    def output_path(self, sequence: str) -> Path:
        """Trajectory file of `sequence` for this configuration."""
        results_dir = self.results_dir or self.data_dir / "results"
        return results_dir / sequence / self.configuration_name / self.output_filename

    def resolve_sequence_list(self, path: str | Path) -> Path:
        """Resolve a sequence list path.

        The path is used as given when it exists, otherwise it is looked up in
        `data_dir / "config"`. The returned path may still not exist; reading
        it reports the error.
        """
        path = Path(path)
        if path.exists() or path.is_absolute():
            return path
        candidate = self.data_dir / "config" / path
        return candidate if candidate.exists() else path
