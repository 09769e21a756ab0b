from dataclasses import dataclass
import math
from typing import Tuple


@dataclass(frozen=True, slots=True)
class VectorFloat:
    """Displacement between two PointFloats.

    AffineTransform.apply_to_vector() maps it through the linear part only,
    so translation never moves a vector.
    """
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __add__(self, o: "VectorFloat") -> "VectorFloat":
        return VectorFloat(self.x + o.x, self.y + o.y)

    def __mul__(self, k: float) -> "VectorFloat":
        return VectorFloat(self.x * k, self.y * k)

    def __abs__(self) -> float:
        return math.hypot(self.x, self.y)
