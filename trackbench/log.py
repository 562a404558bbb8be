# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "TRACKBENCH_LOG_LEVEL"
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger writing to stderr.

    The level is read from the `TRACKBENCH_LOG_LEVEL` environment variable and
    defaults to `WARNING`.

    Args:
        name: Logger name, usually `__name__` of the calling module.

    Returns:
        Configured `logging.Logger`.
    """
    logger = logging.getLogger(name)
    level = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logger.setLevel(getattr(logging, level, logging.WARNING))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
