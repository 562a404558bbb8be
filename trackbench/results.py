# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

"""Result classes for benchmark runs.

This module provides dataclasses for storing per-sequence and per-batch
timing results with methods for serialization, display, and persistence.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from trackbench.timing import TimingRecord

SequenceStatus = Literal["completed", "skipped", "failed"]
TABLE_COLUMNS = ["Status", "Frames", "Duration (ms)", "FPS"]


@dataclass
class SequenceResult:
    """Outcome of processing one sequence.

    Attributes:
        sequence: Sequence identifier as listed in the batch.
        status: `completed` when the trajectory file was written, `skipped`
            when it already existed, `failed` when processing raised.
        timing: Detect+track time and frame count. Zero for skipped and
            failed sequences.
        output_path: Trajectory file of the sequence, when known.
        error: Error message of a failed sequence.
    """

    sequence: str
    status: SequenceStatus
    timing: TimingRecord = field(default_factory=TimingRecord)
    output_path: Path | None = None
    error: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SequenceResult:
        timing = data.get("timing") or {}
        output_path = data.get("output_path")
        return cls(
            sequence=data["sequence"],
            status=data["status"],
            timing=TimingRecord(
                duration_ms=float(timing.get("duration_ms", 0.0)),
                frame_count=int(timing.get("frame_count", 0)),
            ),
            output_path=Path(output_path) if output_path else None,
            error=data.get("error"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequence": self.sequence,
            "status": self.status,
            "timing": self.timing.to_dict(),
            "output_path": str(self.output_path) if self.output_path else None,
            "error": self.error,
        }

    def json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


@dataclass
class BatchResult:
    """Results of all sequences of a batch, in the order they were listed.

    Attributes:
        sequences: Mapping from sequence identifier to its result.
    """

    sequences: dict[str, SequenceResult] = field(default_factory=dict)

    @property
    def total(self) -> TimingRecord:
        """Sum of the timing of every sequence."""
        return sum(
            (result.timing for result in self.sequences.values()), TimingRecord()
        )

    @property
    def failed(self) -> list[str]:
        return [
            name for name, result in self.sequences.items() if result.status == "failed"
        ]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BatchResult:
        return cls(
            sequences={
                name: SequenceResult.from_dict(seq_data)
                for name, seq_data in data["sequences"].items()
            }
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequences": {
                name: result.to_dict() for name, result in self.sequences.items()
            },
            "total": self.total.to_dict(),
        }

    def json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def table(self) -> str:
        """Format the batch as a plain text table with a `TOTAL` row."""
        rows = [
            (name, _format_row(result.status, result.timing))
            for name, result in self.sequences.items()
        ]
        total_row = ("TOTAL", _format_row("", self.total))

        name_width = max([30, *(len(name) + 2 for name, _ in rows)])
        col_widths = [
            max(len(col), *(len(values[i]) for _, values in [*rows, total_row]))
            for i, col in enumerate(TABLE_COLUMNS)
        ]

        def _line(name: str, values: list[str]) -> str:
            return name.ljust(name_width) + "  ".join(
                value.rjust(width) for value, width in zip(values, col_widths)
            )

        header = _line("Sequence", TABLE_COLUMNS)
        separator = "-" * len(header)
        lines = [header, separator]
        lines.extend(_line(name, values) for name, values in rows)
        lines.append(separator)
        lines.append(_line(*total_row))
        return "\n".join(lines)

    def save(self, path: str | Path) -> None:
        """Save to a JSON file, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.json())

    @classmethod
    def load(cls, path: str | Path) -> BatchResult:
        """Load from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Results file not found: {path}")
        return cls.from_dict(json.loads(path.read_text()))


def _format_row(status: str, timing: TimingRecord) -> list[str]:
    fps = timing.fps
    return [
        status,
        str(timing.frame_count),
        f"{timing.duration_ms:.0f}",
        "--" if fps is None else f"{fps:.1f}",
    ]
