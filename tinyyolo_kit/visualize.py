from __future__ import annotations

from typing import Iterable, Optional, Tuple

import numpy as np

from .types import Detection

# One BGR color per VOC class id.
_PALETTE = [
    (255, 56, 56),
    (255, 157, 151),
    (255, 112, 31),
    (255, 178, 29),
    (207, 210, 49),
    (72, 249, 10),
    (146, 204, 23),
    (61, 219, 134),
    (26, 147, 52),
    (0, 212, 187),
    (44, 153, 168),
    (0, 194, 255),
    (52, 69, 147),
    (100, 115, 255),
    (0, 24, 236),
    (132, 56, 255),
    (82, 0, 133),
    (203, 56, 255),
    (255, 149, 200),
    (255, 55, 199),
]


def color_for_class_id(class_id: Optional[int]) -> Tuple[int, int, int]:
    if class_id is None or not 0 <= class_id < len(_PALETTE):
        return (0, 255, 255)
    return _PALETTE[class_id]


def clamp_box(det: Detection, image_width: int, image_height: int) -> Tuple[int, int, int, int]:
    """
    Integer (x, y, w, h) rectangle kept inside the image: origin clipped at 0, size cut at the
    right/bottom edge.
    """

    x = max(int(det.x), 0)
    y = max(int(det.y), 0)
    w = min(image_width - x, int(det.width))
    h = min(image_height - y, int(det.height))
    return x, y, max(w, 0), max(h, 0)


def draw_detections(
    image_bgr: np.ndarray,
    detections: Iterable[Detection],
    *,
    color: Optional[Tuple[int, int, int]] = None,
    show_score: bool = True,
    thickness: int = 2,
    font_scale: float = 0.5,
) -> np.ndarray:
    """
    Draw boxes + labels on an OpenCV BGR image and return a copy.

    Detections must already be in the image's pixel space. `color` forces a single color,
    otherwise each class gets its palette entry.
    """

    try:
        import cv2  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError("OpenCV is required for draw_detections(). Install with `pip install opencv-python`.") from e

    if image_bgr is None or not hasattr(image_bgr, "shape"):
        raise TypeError("image_bgr must be a NumPy array (BGR).")
    if image_bgr.ndim != 3 or image_bgr.shape[2] != 3:
        raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image_bgr, 'shape', None)}")

    out = image_bgr.copy()
    h, w = out.shape[:2]

    for det in detections:
        if not np.all(np.isfinite((det.x, det.y, det.width, det.height))):
            continue
        x, y, bw, bh = clamp_box(det, w, h)
        if bw == 0 or bh == 0:
            continue
        box_color = color if color is not None else color_for_class_id(det.class_id)
        cv2.rectangle(out, (x, y), (x + bw, y + bh), box_color, thickness, cv2.LINE_8, 0)

        text = f"{det.label} {det.confidence:.2f}" if show_score else det.label
        (tw, th), baseline = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, font_scale, 1)
        y_text = y - baseline if y - th - baseline >= 0 else y + th
        cv2.putText(
            out,
            text,
            (x, min(y_text, h - 1)),
            cv2.FONT_HERSHEY_SIMPLEX,
            font_scale,
            box_color,
            thickness=1,
            lineType=cv2.LINE_AA,
        )

    return out
