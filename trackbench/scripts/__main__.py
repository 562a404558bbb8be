#!/usr/bin/env python
# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

from __future__ import annotations

import argparse
import sys
import warnings


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the trackbench CLI."""
    # Beta warning
    warnings.warn(
        "The trackbench CLI is in beta. APIs may change in future releases.",
        UserWarning,
        stacklevel=2,
    )

    parser = argparse.ArgumentParser(
        prog="trackbench",
        description="Benchmark detection and tracking over image sequences.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit.",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands:",
    )

    from trackbench.scripts.run import add_run_subparser

    add_run_subparser(subparsers)

    args = parser.parse_args(argv)

    if args.version:
        from importlib.metadata import version

        print(f"trackbench {version('trackbench')}")
        return 0

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
