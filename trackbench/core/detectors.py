# ------------------------------------------------------------------------
# Trackbench
# Copyright (c) 2026 Roboflow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0 [see LICENSE for details]
# ------------------------------------------------------------------------

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np
import supervision as sv

from trackbench.core.base import BaseDetector
from trackbench.errors import InferenceError
from trackbench.io.mot import MOTFrameData, load_mot_file
from trackbench.log import get_logger

if TYPE_CHECKING:
    import torch

    from trackbench.io.frames import Frame

logger = get_logger(__name__)

DEFAULT_MODEL = "rfdetr-nano"
DEFAULT_CONFIDENCE = 0.5
DEFAULT_DEVICE = "auto"


class MOTDetectionsDetector(BaseDetector):
    """Serve pre-computed detections from a MOT format file.

    MOT Challenge files number frames from 1, so frame `index` of a sequence
    reads the boxes stored under frame number `index + 1`.

    Args:
        path: MOT format detection file, e.g. `MOT17-02/det/det.txt`.
        min_confidence: Drop boxes scored below this value.
        frame_offset: Frame number of the first frame in the file.
    """

    def __init__(
        self,
        path: str | Path,
        min_confidence: float = 0.0,
        frame_offset: int = 1,
    ) -> None:
        self.path = Path(path)
        self.min_confidence = min_confidence
        self.frame_offset = frame_offset
        self._frames: dict[int, MOTFrameData] = load_mot_file(self.path)

    def detect(self, frame: Frame) -> sv.Detections:
        frame_data = self._frames.get(frame.index + self.frame_offset)
        if frame_data is None:
            return sv.Detections.empty()

        detections = frame_data.to_detections()
        if self.min_confidence > 0 and len(detections) > 0:
            detections = detections[detections.confidence >= self.min_confidence]
        return detections


class InferenceModelDetector(BaseDetector):
    """Run a detection model loaded with `inference-models`.

    Args:
        model_id: Model identifier. Pretrained: rfdetr-nano, rfdetr-base, etc.
            Custom: workspace/project/version.
        confidence: Detection confidence threshold.
        device: Device: auto, cpu, cuda, cuda:0, mps.
        api_key: Roboflow API key for custom models.
        class_filter: Keep only these class IDs. `None` keeps all classes.
        model: Already loaded model. Skips loading `model_id` when given, so
            one model can be shared by the detectors of several sequences.
    """

    def __init__(
        self,
        model_id: str = DEFAULT_MODEL,
        *,
        confidence: float = DEFAULT_CONFIDENCE,
        device: str = DEFAULT_DEVICE,
        api_key: str | None = None,
        class_filter: list[int] | None = None,
        model: Any = None,
    ) -> None:
        self.model_id = model_id
        self.confidence = confidence
        self.class_filter = class_filter
        self.model = (
            model
            if model is not None
            else load_model(model_id, device=device, api_key=api_key)
        )
        self.class_names: list[str] = list(getattr(self.model, "class_names", []))

    def detect(self, frame: Frame) -> sv.Detections:
        """Run the model on `frame.image`.

        Raises:
            InferenceError: If the model fails on the frame.
        """
        if frame.image is None:
            raise InferenceError(f"Frame {frame.index} has not been decoded")

        try:
            predictions = self.model(frame.image)
        except Exception as e:
            raise InferenceError(
                f"Model '{self.model_id}' failed on frame {frame.index} "
                f"({frame.path})"
            ) from e

        if not predictions:
            return sv.Detections.empty()

        detections = predictions[0].to_supervision()
        if len(detections) == 0:
            return detections

        if detections.confidence is not None:
            detections = detections[detections.confidence >= self.confidence]

        if self.class_filter is not None and detections.class_id is not None:
            detections = detections[np.isin(detections.class_id, self.class_filter)]

        if (
            self.class_names
            and detections.class_id is not None
            and "class_name" not in detections.data
        ):
            detections.data["class_name"] = np.array(
                [self._class_name(int(c)) for c in detections.class_id]
            )
        return detections

    def _class_name(self, class_id: int) -> str:
        if 0 <= class_id < len(self.class_names):
            return self.class_names[class_id]
        return str(class_id)


def resolve_class_filter(
    classes_arg: str | None,
    class_names: list[str],
) -> list[int] | None:
    """Resolve a comma-separated `--classes` value to a list of integer IDs.

    Each token is checked independently: if it parses as an `int` it is used
    directly as a class ID; otherwise it is looked up by name in *class_names*.
    Unknown names are logged and skipped.

    Args:
        classes_arg: Raw `--classes` string (e.g. `"person,car"` or `"0,2"`).
            `None` means no filter.
        class_names: Class names where the index equals the class ID.

    Returns:
        List of integer class IDs, or `None` when no valid filter remains.
    """
    if not classes_arg:
        return None

    name_to_id = {name: i for i, name in enumerate(class_names)}
    class_filter: list[int] = []
    for token in (t.strip() for t in classes_arg.split(",")):
        try:
            class_filter.append(int(token))
        except ValueError:
            if token in name_to_id:
                class_filter.append(name_to_id[token])
            else:
                logger.warning("Class '%s' not found in model class list", token)
    return class_filter if class_filter else None


def load_model(
    model_id: str,
    *,
    device: str = DEFAULT_DEVICE,
    api_key: str | None = None,
) -> Any:
    """Load a detection model via inference-models.

    Raises:
        ImportError: If `inference-models` is not installed.
    """
    try:
        from inference_models import AutoModel
    except ImportError as e:
        raise ImportError(
            "inference-models is required for model-based detection. "
            "Install with: pip install 'trackbench[detection]'"
        ) from e

    resolved_device = _best_device() if device == DEFAULT_DEVICE else device
    logger.info("Loading model %s on %s", model_id, resolved_device)
    return AutoModel.from_pretrained(
        model_id,
        api_key=api_key,
        device=resolved_device,
    )


def _best_device() -> torch.device:
    """Return the best available PyTorch device, preferring acceleration."""
    import torch

    if torch.cuda.is_available():
        return torch.device("cuda")
    if torch.backends.mps.is_built() and torch.backends.mps.is_available():
        return torch.device("mps")
    return torch.device("cpu")
