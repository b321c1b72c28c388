from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .model import INPUT_HEIGHT, INPUT_WIDTH
from .postprocess import TinyYoloPostConfig, TinyYoloPostprocessor
from .types import Detection

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def find_project_root(
    start: Optional[PathLike] = None,
    markers: Sequence[str] = ("pyproject.toml", ".git"),
) -> Path:
    """
    Walk up from `start` (or the cwd) to the first directory holding one of `markers`.
    """

    p = Path(start) if start is not None else Path.cwd()
    p = p.resolve()
    if p.is_file():
        p = p.parent

    for parent in (p, *p.parents):
        for m in markers:
            if (parent / m).exists():
                return parent
    return p


def resolve_path(path: PathLike, root: Optional[PathLike] = "auto") -> Path:
    """
    Absolute paths are returned as-is; relative ones resolve against `root`, or the project
    root when `root` is "auto"/None.
    """

    p = Path(path)
    if p.is_absolute():
        return p

    if root == "auto" or root is None:
        base = find_project_root()
    else:
        base = Path(root).resolve()

    return (base / p).resolve()


@dataclass(frozen=True)
class PreprocessConfig:
    input_size: Tuple[int, int] = (INPUT_WIDTH, INPUT_HEIGHT)
    # Tiny YOLOv2 from the ONNX model zoo takes raw 0..255 pixels.
    normalize: bool = False
    swap_rb: bool = False


@dataclass(frozen=True)
class PreprocessResult:
    blob: np.ndarray
    resized: np.ndarray
    orig_size: Tuple[int, int]


class TinyYoloPipeline:
    """
    preprocess (resize) -> inference -> decode.

    Takes BGR images (OpenCV-style) and returns detections in network input space
    (416x416). Use `scale_to_original` to map them onto the source frame.
    """

    def __init__(
        self,
        infer_fn: Callable[[np.ndarray], np.ndarray],
        *,
        backend: Optional[object] = None,
        preprocess_cfg: PreprocessConfig = PreprocessConfig(),
        post_cfg: TinyYoloPostConfig = TinyYoloPostConfig(),
    ):
        self._infer_fn = infer_fn
        self.backend = backend
        self.preprocess_cfg = preprocess_cfg
        self.post = TinyYoloPostprocessor(post_cfg)

    def preprocess(self, image_bgr: np.ndarray) -> PreprocessResult:
        try:
            import cv2  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ImportError("OpenCV is required for preprocessing. Install with `pip install opencv-python`.") from e

        if image_bgr is None or not hasattr(image_bgr, "shape"):
            raise TypeError("image_bgr must be a NumPy array (BGR).")
        if image_bgr.ndim != 3 or image_bgr.shape[2] != 3:
            raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image_bgr, 'shape', None)}")

        orig_h, orig_w = image_bgr.shape[:2]
        new_w, new_h = self.preprocess_cfg.input_size
        resized = image_bgr
        if (orig_w, orig_h) != (new_w, new_h):
            resized = cv2.resize(image_bgr, (new_w, new_h), interpolation=cv2.INTER_LINEAR)

        img = resized[:, :, ::-1] if self.preprocess_cfg.swap_rb else resized
        blob = img.astype(np.float32)
        if self.preprocess_cfg.normalize:
            blob /= 255.0
        blob = np.ascontiguousarray(np.transpose(blob, (2, 0, 1))[None, ...])

        return PreprocessResult(blob=blob, resized=resized, orig_size=(orig_w, orig_h))

    def scale_to_original(self, detections: Sequence[Detection], prep: PreprocessResult) -> List[Detection]:
        new_w, new_h = self.preprocess_cfg.input_size
        orig_w, orig_h = prep.orig_size
        sx, sy = orig_w / float(new_w), orig_h / float(new_h)
        return [det.scaled(sx, sy) for det in detections]

    def run(self, image_bgr: np.ndarray) -> Tuple[PreprocessResult, np.ndarray]:
        """
        Preprocess + inference only; returns the raw output grid for callers that decode
        it themselves.
        """

        prep = self.preprocess(image_bgr)
        return prep, self._infer_fn(prep.blob)

    def __call__(self, image_bgr: np.ndarray) -> List[Detection]:
        _, preds = self.run(image_bgr)
        return self.post.process(preds)


def load_pipeline(
    model_path: PathLike,
    *,
    root: Optional[PathLike] = "auto",
    preprocess_cfg: PreprocessConfig = PreprocessConfig(),
    post_cfg: TinyYoloPostConfig = TinyYoloPostConfig(),
    onnx_providers: Optional[Sequence[str]] = None,
    onnx_input_name: Optional[str] = "image",
    onnx_output_name: Optional[str] = "grid",
) -> TinyYoloPipeline:
    """
    Create a pipeline for a Tiny YOLOv2 ONNX model on disk.

        pipe = load_pipeline("models/tinyyolov2-8.onnx")

    Pass `onnx_input_name=None` / `onnx_output_name=None` to use the model's first input/output.
    """

    resolved = resolve_path(model_path, root=root)
    if resolved.suffix.lower() != ".onnx":
        raise ValueError(f"Expected an .onnx model, got '{resolved.suffix}'.")

    from .backends.onnxruntime_backend import OnnxRuntimeBackend, OnnxRuntimeBackendConfig

    backend = OnnxRuntimeBackend(
        resolved,
        OnnxRuntimeBackendConfig(
            providers=onnx_providers,
            input_name=onnx_input_name,
            output_name=onnx_output_name,
        ),
    )
    logger.info("Loaded %s with providers %s", resolved.name, ", ".join(backend.providers_in_use))
    return TinyYoloPipeline(backend.infer, backend=backend, preprocess_cfg=preprocess_cfg, post_cfg=post_cfg)
