from dataclasses import dataclass, replace
from typing import Optional, Tuple


@dataclass(frozen=True)
class Detection:
    """
    One decoded box. `x`, `y` are the top-left corner; all geometry is in pixels of the
    network input space (416x416) unless rescaled with `scaled()`.

    `confidence` is objectness * top class probability and is not clamped.
    """

    label: str
    x: float
    y: float
    width: float
    height: float
    confidence: float
    class_id: Optional[int] = None

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, self.x + self.width, self.y + self.height

    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    def scaled(self, sx: float, sy: float) -> "Detection":
        return replace(self, x=self.x * sx, y=self.y * sy, width=self.width * sx, height=self.height * sy)
