from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np


PathLike = Union[str, Path]


@dataclass(frozen=True)
class OnnxRuntimeBackendConfig:
    """
    - providers: ORT execution providers (e.g., ["CUDAExecutionProvider", "CPUExecutionProvider"])
    - input_name/output_name: I/O names; None picks the model's first input/output
    """

    providers: Optional[Sequence[str]] = None
    input_name: Optional[str] = None
    output_name: Optional[str] = None


class OnnxRuntimeBackend:
    """
    Expects an NCHW float32 blob shaped (1, 3, 416, 416) and returns the output grid.
    """

    def __init__(self, model_path: PathLike, cfg: OnnxRuntimeBackendConfig = OnnxRuntimeBackendConfig()):
        try:
            import onnxruntime as ort  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ImportError(
                "onnxruntime is required for the ONNX backend. Install it with `pip install onnxruntime` "
                "(or `onnxruntime-gpu`)."
            ) from e

        self._ort = ort
        self.model_path = Path(model_path)
        if not self.model_path.exists():
            raise FileNotFoundError(str(self.model_path))

        sess_opts = ort.SessionOptions()
        providers = list(cfg.providers) if cfg.providers is not None else None
        self.session = ort.InferenceSession(str(self.model_path), sess_options=sess_opts, providers=providers)

        self.input_name = self._pick_name(cfg.input_name, [i.name for i in self.session.get_inputs()], "input")
        self.output_name = self._pick_name(cfg.output_name, [o.name for o in self.session.get_outputs()], "output")

    @staticmethod
    def _pick_name(requested: Optional[str], available: Sequence[str], kind: str) -> str:
        if requested is None:
            return available[0]
        if requested not in available:
            raise ValueError(f"Model has no {kind} named {requested!r} (available: {list(available)})")
        return requested

    @property
    def providers_in_use(self) -> Sequence[str]:
        return tuple(self.session.get_providers())

    @property
    def available_providers(self) -> Sequence[str]:
        return tuple(self._ort.get_available_providers())

    def infer(self, blob: np.ndarray, extra_inputs: Optional[Dict[str, Any]] = None) -> np.ndarray:
        inputs: Dict[str, Any] = {self.input_name: blob}
        if extra_inputs:
            inputs.update(extra_inputs)
        outputs = self.session.run([self.output_name], inputs)
        return outputs[0]
