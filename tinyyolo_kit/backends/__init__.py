"""
Inference backends for tinyyolo_kit.

Kept apart so decoding can be used without an inference runtime installed.
"""

from __future__ import annotations

__all__ = []
