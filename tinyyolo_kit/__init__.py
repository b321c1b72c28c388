"""
Tiny YOLOv2 (VOC) output decoding and the small runtime around it.

The decoder only needs NumPy. OpenCV is used for resizing/drawing and ONNX Runtime for
inference; both are imported lazily.
"""

from .types import Detection
from .model import (
    CLASS_COUNT,
    TENSOR_SIZE,
    TINY_YOLO_V2_ANCHORS,
    TINY_YOLO_V2_VOC,
    VOC_LABELS,
    AnchorTable,
    ClassLabels,
    ModelSpec,
)
from .postprocess import (
    TensorShapeError,
    TinyYoloPostConfig,
    TinyYoloPostprocessor,
    decode,
    offset,
    sigmoid,
    softmax,
)
from .runtime import PreprocessConfig, TinyYoloPipeline, load_pipeline, find_project_root, resolve_path
from .metadata import load_class_labels
from .visualize import draw_detections

__all__ = [
    "Detection",
    "CLASS_COUNT",
    "TENSOR_SIZE",
    "TINY_YOLO_V2_ANCHORS",
    "TINY_YOLO_V2_VOC",
    "VOC_LABELS",
    "AnchorTable",
    "ClassLabels",
    "ModelSpec",
    "TensorShapeError",
    "TinyYoloPostConfig",
    "TinyYoloPostprocessor",
    "decode",
    "offset",
    "sigmoid",
    "softmax",
    "PreprocessConfig",
    "TinyYoloPipeline",
    "load_pipeline",
    "find_project_root",
    "resolve_path",
    "load_class_labels",
    "draw_detections",
]
