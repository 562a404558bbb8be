# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from rich.console import Console

from trackbench.config import HarnessConfig
from trackbench.core.base import BaseDetector, BaseTracker
from trackbench.errors import SequenceListNotFoundError
from trackbench.log import get_logger
from trackbench.pipeline import skipped_result, track_sequence
from trackbench.results import BatchResult, SequenceResult
from trackbench.timing import format_timing

logger = get_logger(__name__)

DetectorFactory = Callable[[str], BaseDetector]
TrackerFactory = Callable[[], BaseTracker]


def read_sequence_list(path: str | Path) -> list[str]:
    """Read sequence identifiers, one per line.

    Surrounding whitespace is stripped. Empty lines, `#` comments and the
    `name` header of MOT Challenge seqmap files are skipped.

    Raises:
        SequenceListNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.is_file():
        raise SequenceListNotFoundError(f"Sequence list not found: {path}")

    sequences = []
    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or line.lower() == "name":
                continue
            sequences.append(line)
    return sequences


class BatchDriver:
    """Run the sequence pipeline over a list of sequences and report throughput.

    Every sequence gets its own tracker from `tracker_factory` and its own
    detector from `detector_factory`, so no state leaks between sequences.
    Each sequence runs inside a failure boundary: an exception is logged and
    recorded as a `failed` result that adds nothing to the totals, unless
    `config.fail_fast` is set, in which case it aborts the batch.

    With `config.workers > 1` sequences are processed concurrently on a thread
    pool. Results are still reported and aggregated in listed order.

    Args:
        config: Harness paths and options.
        detector_factory: Called with a sequence identifier, returns the
            detector for that sequence.
        tracker_factory: Returns a new tracker.
        console: Console receiving the report. Defaults to stdout.
    """

    def __init__(
        self,
        config: HarnessConfig,
        detector_factory: DetectorFactory,
        tracker_factory: TrackerFactory,
        console: Console | None = None,
    ) -> None:
        self.config = config
        self.detector_factory = detector_factory
        self.tracker_factory = tracker_factory
        self.console = console or Console()

    def run(self, sequences: Iterable[str]) -> BatchResult:
        """Process `sequences` and print per-sequence and total throughput.

        Raises:
            Exception: The first sequence failure, only when
                `config.fail_fast` is set.
        """
        listed = list(sequences)
        sequences = list(dict.fromkeys(listed))
        if len(sequences) != len(listed):
            logger.warning("Ignoring repeated sequence identifiers in the batch")
        logger.info(
            "Processing %d sequences with %d worker(s)",
            len(sequences),
            self.config.workers,
        )

        result = BatchResult()
        if self.config.workers == 1:
            for sequence in sequences:
                self._record(result, self._run_sequence(sequence))
        else:
            self._run_parallel(sequences, result)

        self._print(f"Total duration: {format_timing(result.total)}")
        return result

    def run_file(self, path: str | Path) -> BatchResult:
        """Read a sequence list and run it."""
        resolved = self.config.resolve_sequence_list(path)
        return self.run(read_sequence_list(resolved))

    def _run_parallel(self, sequences: list[str], result: BatchResult) -> None:
        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            futures: list[Future[SequenceResult]] = [
                executor.submit(self._run_sequence, sequence) for sequence in sequences
            ]
            try:
                for future in futures:
                    self._record(result, future.result())
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

    def _run_sequence(self, sequence: str) -> SequenceResult:
        # Finished sequences are skipped before their detector is built.
        if self.config.output_path(sequence).exists():
            return skipped_result(sequence, self.config)
        try:
            return track_sequence(
                sequence,
                self.config,
                detector=self.detector_factory(sequence),
                tracker=self.tracker_factory(),
            )
        except Exception as e:
            if self.config.fail_fast:
                raise
            logger.error("Sequence %s failed: %s", sequence, e)
            return SequenceResult(
                sequence=sequence,
                status="failed",
                output_path=self.config.output_path(sequence),
                error=f"{type(e).__name__}: {e}",
            )

    def _record(self, batch: BatchResult, result: SequenceResult) -> None:
        self._print(f"Sequence: {result.sequence}")
        if result.status == "skipped":
            self._print(f"Skipped: {result.output_path} already exists")
        elif result.status == "failed":
            self._print(f"Failed: {result.error}")
        self._print(f"Duration: {format_timing(result.timing)}")
        batch.sequences[result.sequence] = result

    def _print(self, line: str) -> None:
        self.console.print(line, markup=False, highlight=False)
