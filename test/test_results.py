# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

from __future__ import annotations

from pathlib import Path

import pytest

from trackbench.results import BatchResult, SequenceResult
from trackbench.timing import TimingRecord


@pytest.fixture
def batch() -> BatchResult:
    return BatchResult(
        sequences={
            "seq01": SequenceResult(
                sequence="seq01",
                status="completed",
                timing=TimingRecord(duration_ms=100.0, frame_count=10),
                output_path=Path("results/seq01/cfg/track.txt"),
            ),
            "seq02": SequenceResult(
                sequence="seq02",
                status="completed",
                timing=TimingRecord(duration_ms=1000.0, frame_count=10),
            ),
            "seq03": SequenceResult(
                sequence="seq03",
                status="failed",
                error="SequenceNotFoundError: Images directory not found",
            ),
        }
    )


class TestBatchResult:
    def test_total_sums_fields(self, batch: BatchResult) -> None:
        assert batch.total == TimingRecord(duration_ms=1100.0, frame_count=20)

    def test_total_fps_from_sums(self, batch: BatchResult) -> None:
        assert batch.total.fps == pytest.approx(20 * 1000 / 1100)

    def test_failed(self, batch: BatchResult) -> None:
        assert batch.failed == ["seq03"]

    def test_empty_total(self) -> None:
        assert BatchResult().total.fps is None

    def test_to_dict(self, batch: BatchResult) -> None:
        data = batch.to_dict()

        assert list(data["sequences"]) == ["seq01", "seq02", "seq03"]
        assert data["sequences"]["seq01"]["output_path"] == str(
            Path("results/seq01/cfg/track.txt")
        )
        assert data["sequences"]["seq03"]["timing"]["fps"] is None
        assert data["total"]["frame_count"] == 20

    def test_save_and_load(self, batch: BatchResult, tmp_path: Path) -> None:
        path = tmp_path / "out" / "results.json"

        batch.save(path)
        loaded = BatchResult.load(path)

        assert loaded == batch

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            BatchResult.load(tmp_path / "missing.json")

    def test_table(self, batch: BatchResult) -> None:
        lines = batch.table().splitlines()

        assert lines[0].startswith("Sequence")
        assert lines[0].endswith("FPS")
        assert lines[2].startswith("seq01")
        assert lines[2].endswith("100.0")
        assert lines[4].startswith("seq03")
        assert lines[4].endswith("--")
        assert lines[-1].startswith("TOTAL")
        assert lines[-1].endswith("18.2")


class TestSequenceResult:
    def test_defaults(self) -> None:
        result = SequenceResult(sequence="seq01", status="skipped")

        assert result.timing == TimingRecord()
        assert result.output_path is None
        assert result.error is None

    def test_from_dict_without_timing(self) -> None:
        result = SequenceResult.from_dict({"sequence": "seq01", "status": "failed"})

        assert result.timing == TimingRecord()
