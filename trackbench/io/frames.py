# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import cv2
import numpy as np

from trackbench.errors import SequenceNotFoundError

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif"})


@dataclass(frozen=True)
class Frame:
    """One frame of a sequence.

    Attributes:
        index: Zero-based position of the frame in its sequence.
        path: Image file the frame is read from.
        image: Decoded BGR pixels, `None` until `load` is called.
    """

    index: int
    path: Path
    image: np.ndarray | None = None

    def load(self) -> Frame:
        """Decode the image file and return a copy of the frame holding it.

        Raises:
            OSError: If the file exists but cannot be decoded.
        """
        image = cv2.imread(str(self.path), cv2.IMREAD_COLOR)
        if image is None:
            raise OSError(f"Failed to read image: {self.path}")
        return dataclasses.replace(self, image=image)


class FrameSource:
    """Ordered frames of one sequence.

    Frames are enumerated in lexicographic file-name order, so file names must
    sort into temporal order (e.g. `000001.jpg`, `000002.jpg`). Every call to
    `iter()` lists the directory again, so a source can be iterated more than
    once. Images are not decoded during enumeration.

    Args:
        images_dir: Directory holding the frames of the sequence.
        extensions: Lower-case file suffixes treated as frames.

    Raises:
        SequenceNotFoundError: If `images_dir` is not a directory.
    """

    def __init__(
        self,
        images_dir: str | Path,
        *,
        extensions: frozenset[str] = IMAGE_EXTENSIONS,
    ) -> None:
        self.images_dir = Path(images_dir)
        self.extensions = extensions
        if not self.images_dir.is_dir():
            raise SequenceNotFoundError(
                f"Images directory not found: {self.images_dir}"
            )

    def paths(self) -> list[Path]:
        """Return the frame files in enumeration order."""
        return sorted(
            (
                p
                for p in self.images_dir.iterdir()
                if p.is_file()
                and not p.name.startswith(".")
                and p.suffix.lower() in self.extensions
            ),
            key=lambda p: p.name,
        )

    def __iter__(self) -> Iterator[Frame]:
        for index, path in enumerate(self.paths()):
            yield Frame(index=index, path=path)

    def __len__(self) -> int:
        return len(self.paths())
