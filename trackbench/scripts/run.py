#!/usr/bin/env python
# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

"""Run detection and tracking over a batch of image sequences.

Each sequence listed in the sequence file is read from
`<data-dir>/<sequence>/images/` and its trajectory is written to
`<results-dir>/<sequence>/<config-name>/track.txt`. Sequences whose trajectory
file already exists are skipped.
"""

from __future__ import annotations

import argparse
import sys
import threading
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from trackbench.batch import BatchDriver, DetectorFactory, TrackerFactory
from trackbench.config import HarnessConfig
from trackbench.core.base import BaseDetector, BaseTracker
from trackbench.core.detectors import (
    DEFAULT_CONFIDENCE,
    DEFAULT_DEVICE,
    DEFAULT_MODEL,
    InferenceModelDetector,
    MOTDetectionsDetector,
    load_model,
    resolve_class_filter,
)
from trackbench.results import BatchResult
from trackbench.timing import TimingRecord

DEFAULT_TRACKER = "bytetrack"
DEFAULT_DATA_DIR = Path("data")


def add_run_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Add the run subcommand to the argument parser."""
    parser = subparsers.add_parser(
        "run",
        help="Detect and track objects in a batch of image sequences.",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--sequences",
        "-s",
        type=Path,
        required=True,
        metavar="PATH",
        help=(
            "File listing one sequence per line. Looked up in "
            "<data-dir>/config/ when not found as given."
        ),
    )

    paths_group = parser.add_argument_group("paths")
    paths_group.add_argument(
        "--data-dir",
        type=Path,
        default=DEFAULT_DATA_DIR,
        metavar="DIR",
        help="Directory containing the sequences. Default: ./data",
    )
    paths_group.add_argument(
        "--results-dir",
        type=Path,
        default=None,
        metavar="DIR",
        help="Directory for trajectory files. Default: <data-dir>/results",
    )
    paths_group.add_argument(
        "--config-name",
        type=str,
        default=None,
        metavar="NAME",
        help=(
            "Configuration name used in output paths. "
            "Default: derived from detector and tracker."
        ),
    )

    detection_group = parser.add_argument_group("detection")
    source = detection_group.add_mutually_exclusive_group()
    source.add_argument(
        "--model",
        "-m",
        type=str,
        default=None,
        metavar="ID",
        help=f"Detection model ID. Default: {DEFAULT_MODEL}",
    )
    source.add_argument(
        "--detections",
        type=Path,
        default=None,
        metavar="PATH",
        help=(
            "Pre-computed MOT detections, relative to each sequence directory "
            "(e.g. det/det.txt)."
        ),
    )
    detection_group.add_argument(
        "--model.confidence",
        dest="model_confidence",
        type=float,
        default=DEFAULT_CONFIDENCE,
        help=f"Detection confidence threshold. Default: {DEFAULT_CONFIDENCE}",
    )
    detection_group.add_argument(
        "--model.device",
        dest="device",
        type=str,
        default=DEFAULT_DEVICE,
        help="Device: auto, cpu, cuda, cuda:0, mps. Default: auto",
    )
    detection_group.add_argument(
        "--model.api-key",
        dest="api_key",
        type=str,
        default=None,
        help="Roboflow API key for custom models.",
    )
    detection_group.add_argument(
        "--classes",
        type=str,
        default=None,
        help="Filter by class names or IDs (comma-separated, e.g. person,car).",
    )

    tracking_group = parser.add_argument_group("tracking")
    tracking_group.add_argument(
        "--tracker",
        "-t",
        type=str,
        default=DEFAULT_TRACKER,
        help=f"Tracking algorithm. Default: {DEFAULT_TRACKER}",
    )
    tracking_group.add_argument(
        "--tracker-param",
        dest="tracker_params",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Tracker parameter, may be repeated (e.g. lost_track_buffer=60).",
    )

    run_group = parser.add_argument_group("execution")
    run_group.add_argument(
        "--workers",
        "-j",
        type=int,
        default=1,
        help="Number of sequences processed in parallel. Default: 1",
    )
    run_group.add_argument(
        "--fail-fast",
        action="store_true",
        help="Abort the batch on the first failing sequence.",
    )
    run_group.add_argument(
        "--output",
        "-o",
        type=Path,
        metavar="PATH",
        help="Output file for batch results (JSON format).",
    )

    parser.set_defaults(func=run_batch)


def run_batch(args: argparse.Namespace) -> int:
    """Execute the run command."""
    try:
        config = HarnessConfig(
            data_dir=args.data_dir,
            configuration_name=args.config_name or _default_config_name(args),
            results_dir=args.results_dir,
            workers=args.workers,
            fail_fast=args.fail_fast,
        )
        tracker_factory = _create_tracker_factory(
            args.tracker, _parse_tracker_params(args.tracker_params)
        )
        detector_factory = _create_detector_factory(args, config)

        driver = BatchDriver(config, detector_factory, tracker_factory)
        result = driver.run_file(args.sequences)
    except (FileNotFoundError, ValueError, ImportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _print_summary(result)

    if args.output:
        result.save(args.output)
        print(f"\nResults saved to: {args.output}")

    if result.failed:
        print(
            f"Error: {len(result.failed)} sequence(s) failed: "
            f"{', '.join(result.failed)}",
            file=sys.stderr,
        )
        return 1
    return 0


def _default_config_name(args: argparse.Namespace) -> str:
    """Derive a configuration name such as `rfdetr-nano-bytetrack`."""
    if args.detections is not None:
        source = Path(args.detections).stem
    else:
        source = (args.model or DEFAULT_MODEL).replace("/", "-")
    return f"{source}-{args.tracker}"


def _parse_tracker_params(params: list[str]) -> dict[str, Any]:
    """Parse `KEY=VALUE` pairs, converting numbers and booleans."""
    parsed: dict[str, Any] = {}
    for item in params:
        if "=" not in item:
            raise ValueError(f"Tracker parameter must be KEY=VALUE, got '{item}'")
        key, value = item.split("=", 1)
        parsed[key.strip()] = _parse_value(value.strip())
    return parsed


def _parse_value(value: str) -> Any:
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


def _create_tracker_factory(
    tracker_id: str, params: dict[str, Any]
) -> TrackerFactory:
    """Return a factory building a new registered tracker per sequence.

    Raises:
        ValueError: If tracker_id is not registered.
    """
    import trackbench.core.bytetrack  # noqa: F401

    info = BaseTracker._lookup_tracker(tracker_id)
    if info is None:
        available = ", ".join(BaseTracker._registered_trackers())
        raise ValueError(f"Unknown tracker: '{tracker_id}'. Available: {available}")

    def _factory() -> BaseTracker:
        return info.tracker_class(**params)

    return _factory


def _create_detector_factory(
    args: argparse.Namespace, config: HarnessConfig
) -> DetectorFactory:
    """Return a factory building the detector of one sequence.

    Models are loaded once per worker thread and shared by the sequences that
    thread processes.

    Raises:
        ValueError: If `--classes` is given together with `--detections`.
    """
    if args.detections is not None:
        if args.classes:
            raise ValueError(
                "--classes filters model detections and cannot be combined with "
                "--detections"
            )
        relative = Path(args.detections)

        def _detections_factory(sequence: str) -> BaseDetector:
            return MOTDetectionsDetector(config.data_dir / sequence / relative)

        return _detections_factory

    model_id = args.model or DEFAULT_MODEL
    local = threading.local()

    def _model_factory(sequence: str) -> BaseDetector:
        model = getattr(local, "model", None)
        if model is None:
            model = load_model(model_id, device=args.device, api_key=args.api_key)
            local.model = model
        class_names = list(getattr(model, "class_names", []))
        return InferenceModelDetector(
            model_id,
            confidence=args.model_confidence,
            class_filter=resolve_class_filter(args.classes, class_names),
            model=model,
        )

    return _model_factory


def _print_summary(result: BatchResult) -> None:
    """Print the batch results as a table."""
    console = Console()
    table = Table(title="Benchmark Results")
    table.add_column("Sequence", style="cyan")
    table.add_column("Status")
    table.add_column("Frames", justify="right")
    table.add_column("Duration (ms)", justify="right")
    table.add_column("FPS", style="green", justify="right")

    for name, seq_result in result.sequences.items():
        table.add_row(name, seq_result.status, *_timing_cells(seq_result.timing))

    table.add_section()
    table.add_row("[bold]TOTAL[/bold]", "", *_timing_cells(result.total))
    console.print(table)


def _timing_cells(timing: TimingRecord) -> list[str]:
    fps = timing.fps
    return [
        str(timing.frame_count),
        f"{timing.duration_ms:.0f}",
        "--" if fps is None else f"{fps:.1f}",
    ]
