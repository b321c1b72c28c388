from __future__ import annotations

from pathlib import Path
from typing import Dict, Union

from .model import ClassLabels


def load_class_labels(metadata_path: Union[str, Path]) -> ClassLabels:
    """
    Load class labels from the lightweight `metadata.yaml` format:

        names:
          0: aeroplane
          1: bicycle
          ...

    Ids must run contiguously from 0. Only the `names:` block is read, so no PyYAML is needed.
    """

    names: Dict[int, str] = {}
    in_names = False

    with open(metadata_path, "r", encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            if line == "names:":
                in_names = True
                continue
            if not in_names:
                continue
            # A new top-level key ends the names block.
            if not raw[:1].isspace() and line.endswith(":"):
                break

            if ":" not in line:
                continue
            left, right = line.split(":", 1)
            left = left.strip()
            right = right.strip().strip("'").strip('"')
            if not left.isdigit():
                continue
            class_id = int(left)
            if class_id in names:
                raise ValueError(f"Duplicate class id {class_id} in {metadata_path}")
            names[class_id] = right

    if not names:
        raise ValueError(f"No class names found in {metadata_path}")
    if sorted(names) != list(range(len(names))):
        raise ValueError(f"Class ids in {metadata_path} must be contiguous from 0")

    return ClassLabels(tuple(names[i] for i in range(len(names))))
