from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional

from .watcher import WatchResult


def result_to_dict(result: WatchResult, *, frame_idx: Optional[int] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "seen": result.seen,
        "detections": [asdict(d) for d in result.detections],
        "markers": [
            {
                "id": m.id,
                "label": m.label,
                "frame_id": m.frame_id,
                "position": list(m.position),
                "confidence": m.detection.confidence,
            }
            for m in result.markers
        ],
    }
    if frame_idx is not None:
        payload["frame_idx"] = frame_idx
    return payload


def write_result_json(path: Path, result: WatchResult, *, frame_idx: Optional[int] = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(result_to_dict(result, frame_idx=frame_idx), indent=2, sort_keys=True), encoding="utf-8")
    return path
