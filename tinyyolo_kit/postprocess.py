"""
Decoder for the raw Tiny YOLOv2 output grid.

The network emits 125 channels over a 13x13 grid, flattened channel-major into 21125 floats.
Every cell holds 5 anchor boxes of 25 features each: tx, ty, tw, th, tc and 20 class logits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from .model import (
    BOX_INFO_FEATURE_COUNT,
    BOXES_PER_CELL,
    CELL_HEIGHT,
    CELL_WIDTH,
    COL_COUNT,
    FEATURES_PER_BOX,
    ROW_COUNT,
    TENSOR_SIZE,
    TINY_YOLO_V2_VOC,
    ModelSpec,
)
from .types import Detection

logger = logging.getLogger(__name__)


class TensorShapeError(ValueError):
    """Raised when the output tensor does not hold exactly one 125x13x13 grid."""


def offset(x, y, channel):
    """
    Flat index of (channel, row=y, column=x). Works on ints and on NumPy index arrays.
    """

    return channel * (ROW_COUNT * COL_COUNT) + y * COL_COUNT + x


def sigmoid(value):
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-value))


def softmax(values: np.ndarray, axis: int = -1) -> np.ndarray:
    """
    Max-shifted softmax. Returns a new array; the input is left untouched.
    """

    v = np.asarray(values)
    with np.errstate(over="ignore", invalid="ignore"):
        e = np.exp(v - np.max(v, axis=axis, keepdims=True))
        return e / np.sum(e, axis=axis, keepdims=True)


def _gather_table():
    cy, cx, box, feature = np.meshgrid(
        np.arange(ROW_COUNT),
        np.arange(COL_COUNT),
        np.arange(BOXES_PER_CELL),
        np.arange(FEATURES_PER_BOX),
        indexing="ij",
    )
    index = offset(cx, cy, box * FEATURES_PER_BOX + feature).reshape(-1, FEATURES_PER_BOX)
    return index, cx[..., 0].reshape(-1), cy[..., 0].reshape(-1), box[..., 0].reshape(-1)


# Candidate order: rows, then columns, then anchor boxes.
_GATHER_INDEX, _CELL_X, _CELL_Y, _BOX_INDEX = _gather_table()


def _as_flat_tensor(tensor) -> np.ndarray:
    p = np.asarray(tensor, dtype=np.float32)
    if p.size != TENSOR_SIZE:
        raise TensorShapeError(
            f"Expected {TENSOR_SIZE} values (125x13x13), got {p.size} (shape {p.shape})."
        )
    return p.reshape(-1)


def decode(tensor, threshold: float, *, model: ModelSpec = TINY_YOLO_V2_VOC, strict: bool = False) -> List[Detection]:
    """
    Convert one raw output grid into detections.

    Args:
        tensor: 21125 floats; flat, (125, 13, 13) or (1, 125, 13, 13).
        threshold: applied to objectness first, then to objectness * top class probability.
        model: labels and anchors of the checkpoint that produced `tensor`.
        strict: drop detections carrying NaN/Inf instead of returning them.

    Detections come back in grid order (row, column, anchor box), not ranked.
    """

    flat = _as_flat_tensor(tensor)
    features = flat[_GATHER_INDEX]

    with np.errstate(over="ignore", invalid="ignore"):
        objectness = sigmoid(features[:, 4])
        # NaN objectness is not rejected here.
        candidates = np.nonzero(~(objectness < threshold))[0]
        if candidates.size == 0:
            return []

        f = features[candidates]
        box = _BOX_INDEX[candidates]
        anchor_w = np.asarray(model.anchors.widths, dtype=np.float32)[box]
        anchor_h = np.asarray(model.anchors.heights, dtype=np.float32)[box]

        cx = (_CELL_X[candidates] + sigmoid(f[:, 0])) * CELL_WIDTH
        cy = (_CELL_Y[candidates] + sigmoid(f[:, 1])) * CELL_HEIGHT
        width = np.exp(f[:, 2]) * CELL_WIDTH * anchor_w
        height = np.exp(f[:, 3]) * CELL_HEIGHT * anchor_h

        probs = softmax(f[:, BOX_INFO_FEATURE_COUNT:], axis=1)
        top_class = np.argmax(probs, axis=1)
        scores = probs[np.arange(probs.shape[0]), top_class] * objectness[candidates]

        keep = ~(scores < threshold)
        x = cx - width / 2
        y = cy - height / 2

    if strict:
        finite = np.isfinite(x) & np.isfinite(y) & np.isfinite(width) & np.isfinite(height) & np.isfinite(scores)
        dropped = int(np.count_nonzero(keep & ~finite))
        if dropped:
            logger.warning("Dropped %d detection(s) with non-finite values", dropped)
        keep &= finite

    detections = [
        Detection(
            label=model.labels[int(cls_id)],
            x=float(x[i]),
            y=float(y[i]),
            width=float(width[i]),
            height=float(height[i]),
            confidence=float(scores[i]),
            class_id=int(cls_id),
        )
        for i, cls_id in zip(np.nonzero(keep)[0], top_class[keep])
    ]
    logger.debug("Decoded %d detection(s) from %d candidate box(es)", len(detections), candidates.size)
    return detections


@dataclass(frozen=True)
class TinyYoloPostConfig:
    conf_threshold: float = 0.3
    # If True, detections with NaN/Inf fields are dropped.
    strict: bool = False
    model: ModelSpec = TINY_YOLO_V2_VOC


class TinyYoloPostprocessor:
    """
    Config-bound wrapper around `decode` for use inside a pipeline.
    """

    def __init__(self, cfg: TinyYoloPostConfig):
        self.cfg = cfg

    def process(self, preds: np.ndarray) -> List[Detection]:
        return decode(preds, self.cfg.conf_threshold, model=self.cfg.model, strict=self.cfg.strict)
