"""
Target-label watcher: decodes each output grid and reports where the configured label was seen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from tinyyolo_kit.metadata import load_class_labels
from tinyyolo_kit.model import TINY_YOLO_V2_VOC, ModelSpec
from tinyyolo_kit.postprocess import decode
from tinyyolo_kit.types import Detection
from tinyyolo_kit.visualize import draw_detections

from .config import WatchProfile

logger = logging.getLogger(__name__)

MATCH_COLOR = (255, 255, 0)


@dataclass(frozen=True)
class TargetMarker:
    """
    Arrow marker at the centre of a matched box, numbered per frame from 0.
    """

    id: int
    label: str
    frame_id: str
    position: Tuple[float, float, float]
    detection: Detection


@dataclass(frozen=True)
class WatchResult:
    detections: List[Detection] = field(default_factory=list)
    markers: List[TargetMarker] = field(default_factory=list)

    @property
    def seen(self) -> bool:
        return bool(self.markers)

    @property
    def matched(self) -> List[Detection]:
        return [m.detection for m in self.markers]


def model_for_profile(profile: WatchProfile, base: ModelSpec = TINY_YOLO_V2_VOC) -> ModelSpec:
    if profile.labels_path is None:
        return base
    return ModelSpec(labels=load_class_labels(profile.labels_path), anchors=base.anchors)


class TargetWatcher:
    def __init__(self, profile: WatchProfile, model: Optional[ModelSpec] = None):
        self.profile = profile
        self.model = model if model is not None else model_for_profile(profile)
        if profile.label not in self.model.labels:
            raise ValueError(
                f"Target label {profile.label!r} is not one of the model's labels: {list(self.model.labels)}"
            )

    def process(self, tensor: np.ndarray) -> WatchResult:
        detections = decode(tensor, self.profile.confidence, model=self.model, strict=self.profile.strict)

        markers: List[TargetMarker] = []
        for det in detections:
            if det.label != self.profile.label:
                continue
            cx, cy = det.center()
            markers.append(
                TargetMarker(
                    id=len(markers),
                    label=det.label,
                    frame_id=self.profile.frame_id,
                    position=(cx, cy, 0.0),
                    detection=det,
                )
            )
            if self.profile.debug:
                logger.info("matched label: %s (%.3f)", det.label, det.confidence)

        return WatchResult(detections=detections, markers=markers)

    def annotate(self, image_bgr: np.ndarray, result: WatchResult) -> np.ndarray:
        """
        Draw matched boxes when debug is on. `image_bgr` must be in the same pixel space as
        the detections (the resized network input).
        """

        if not self.profile.debug:
            return image_bgr.copy()
        return draw_detections(image_bgr, result.matched, color=MATCH_COLOR, show_score=False, thickness=2)
