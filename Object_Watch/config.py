from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_LABEL = "person"
DEFAULT_CONFIDENCE = 0.3


@dataclass(frozen=True)
class WatchProfile:
    """
    Settings for watching one target label.

    `confidence` is passed to the decoder unchanged; values outside [0, 1] are allowed and
    simply let every box through or reject all of them.
    """

    schema_version: int = 1
    label: str = DEFAULT_LABEL
    confidence: float = DEFAULT_CONFIDENCE
    debug: bool = False
    frame_id: str = "camera"
    labels_path: Optional[str] = None
    strict: bool = False

    def __post_init__(self) -> None:
        if self.schema_version != 1:
            raise ValueError("watch profile schema_version must be 1")
        if not self.label.strip():
            raise ValueError("label must not be empty")
        if not self.frame_id.strip():
            raise ValueError("frame_id must not be empty")


def _require_number(payload: Dict[str, Any], key: str, default: float) -> float:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _require_int(payload: Dict[str, Any], key: str) -> int:
    if key not in payload:
        raise ValueError(f"Missing required key: {key}")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return int(value)


def _optional_str(payload: Dict[str, Any], key: str, default: Optional[str]) -> Optional[str]:
    value = payload.get(key, default)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{key} must be a string if provided")
    return value


def _optional_bool(payload: Dict[str, Any], key: str, default: bool) -> bool:
    value = payload.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean")
    return value


def load_watch_profile(path: Path) -> WatchProfile:
    if not path.exists():
        raise FileNotFoundError(f"Watch profile not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid watch profile JSON: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Watch profile must be a JSON object")

    allowed = {"schema_version", "label", "confidence", "debug", "frame_id", "labels_path", "strict"}
    unknown = sorted(set(payload.keys()) - allowed)
    if unknown:
        raise ValueError(f"Unknown watch profile keys: {unknown}")

    labels_path = _optional_str(payload, "labels_path", None)
    if labels_path is not None and not Path(labels_path).is_absolute():
        # Relative label files live next to the profile.
        labels_path = str((path.parent / labels_path).resolve())

    return WatchProfile(
        schema_version=_require_int(payload, "schema_version"),
        label=_optional_str(payload, "label", DEFAULT_LABEL) or "",
        confidence=_require_number(payload, "confidence", DEFAULT_CONFIDENCE),
        debug=_optional_bool(payload, "debug", False),
        frame_id=_optional_str(payload, "frame_id", "camera") or "",
        labels_path=labels_path,
        strict=_optional_bool(payload, "strict", False),
    )
