"""
Fixed constants of the Tiny YOLOv2 (PASCAL VOC) network.

The output grid shape is a property of the architecture and never changes at runtime.
Labels and anchors belong to a trained checkpoint: swap them together through `ModelSpec`
when reusing the decoder with an architecturally identical model.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

ROW_COUNT = 13
COL_COUNT = 13
BOXES_PER_CELL = 5
BOX_INFO_FEATURE_COUNT = 5
CLASS_COUNT = 20
FEATURES_PER_BOX = BOX_INFO_FEATURE_COUNT + CLASS_COUNT
CHANNEL_COUNT = FEATURES_PER_BOX * BOXES_PER_CELL
CELL_WIDTH = 32.0
CELL_HEIGHT = 32.0
TENSOR_SIZE = CHANNEL_COUNT * ROW_COUNT * COL_COUNT

INPUT_WIDTH = int(COL_COUNT * CELL_WIDTH)
INPUT_HEIGHT = int(ROW_COUNT * CELL_HEIGHT)


@dataclass(frozen=True)
class ClassLabels:
    """
    Ordered mapping class index -> class name.
    """

    names: Tuple[str, ...]

    def __post_init__(self) -> None:
        names = tuple(self.names)
        object.__setattr__(self, "names", names)
        if len(names) != CLASS_COUNT:
            raise ValueError(f"Expected {CLASS_COUNT} class labels, got {len(names)}")
        for name in names:
            if not isinstance(name, str) or not name.strip():
                raise ValueError(f"Class labels must be non-empty strings, got {name!r}")
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate class labels: {duplicates}")

    def __len__(self) -> int:
        return len(self.names)

    def __getitem__(self, class_id: int) -> str:
        return self.names[class_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __contains__(self, label: object) -> bool:
        return label in self.names

    def index_of(self, label: str) -> int:
        try:
            return self.names.index(label)
        except ValueError:
            raise ValueError(f"Unknown class label: {label!r}") from None


@dataclass(frozen=True)
class AnchorTable:
    """
    (width, height) priors in grid-cell units, one per box slot.
    """

    pairs: Tuple[Tuple[float, float], ...]

    def __post_init__(self) -> None:
        pairs = tuple((float(w), float(h)) for w, h in self.pairs)
        object.__setattr__(self, "pairs", pairs)
        if len(pairs) != BOXES_PER_CELL:
            raise ValueError(f"Expected {BOXES_PER_CELL} anchor pairs, got {len(pairs)}")
        if any(w <= 0 or h <= 0 for w, h in pairs):
            raise ValueError("Anchor widths and heights must be > 0")

    @classmethod
    def from_flat(cls, values: Sequence[float]) -> "AnchorTable":
        if len(values) % 2 != 0:
            raise ValueError("Flat anchor list must hold (width, height) pairs")
        return cls(tuple((values[i], values[i + 1]) for i in range(0, len(values), 2)))

    def __len__(self) -> int:
        return len(self.pairs)

    def __getitem__(self, box: int) -> Tuple[float, float]:
        return self.pairs[box]

    @property
    def widths(self) -> Tuple[float, ...]:
        return tuple(w for w, _ in self.pairs)

    @property
    def heights(self) -> Tuple[float, ...]:
        return tuple(h for _, h in self.pairs)


@dataclass(frozen=True)
class ModelSpec:
    labels: ClassLabels
    anchors: AnchorTable


VOC_LABELS = ClassLabels(
    (
        "aeroplane", "bicycle", "bird", "boat", "bottle",
        "bus", "car", "cat", "chair", "cow",
        "diningtable", "dog", "horse", "motorbike", "person",
        "pottedplant", "sheep", "sofa", "train", "tvmonitor",
    )
)

TINY_YOLO_V2_ANCHORS = AnchorTable.from_flat(
    (1.08, 1.19, 3.42, 4.41, 6.63, 11.38, 9.42, 5.11, 16.62, 10.52)
)

TINY_YOLO_V2_VOC = ModelSpec(labels=VOC_LABELS, anchors=TINY_YOLO_V2_ANCHORS)
