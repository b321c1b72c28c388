"""
Target watching on top of `tinyyolo_kit`.

Decoding stays in `tinyyolo_kit`; this package holds the "did we see X" layer:
- watch profile (target label, threshold, debug drawing)
- marker positions for matched boxes
- JSON reporting of per-frame results
"""

from __future__ import annotations

from .config import WatchProfile, load_watch_profile
from .reporting import result_to_dict, write_result_json
from .watcher import TargetMarker, TargetWatcher, WatchResult, model_for_profile

__all__ = [
    "WatchProfile",
    "load_watch_profile",
    "result_to_dict",
    "write_result_json",
    "TargetMarker",
    "TargetWatcher",
    "WatchResult",
    "model_for_profile",
]
