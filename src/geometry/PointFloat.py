from dataclasses import dataclass
import math
from typing import Iterator, Sequence, Tuple

from geometry.VectorFloat import VectorFloat


@dataclass(frozen=True, slots=True)
class PointFloat:
    """A location in the plane. Transforms map points including translation."""
    x: float
    y: float

    @staticmethod
    def from_tuple(xy: Sequence[float]) -> "PointFloat":
        x, y = xy
        return PointFloat(float(x), float(y))

    def as_tuple(self) -> Tuple[float, float]: return (self.x, self.y)
    def __iter__(self) -> Iterator[float]: return iter((self.x, self.y))
    def __add__(self, v: VectorFloat) -> "PointFloat": return PointFloat(self.x + v.x, self.y + v.y)
    def __sub__(self, p: "PointFloat") -> VectorFloat: return VectorFloat(self.x - p.x, self.y - p.y)
    def __abs__(self) -> float: return math.hypot(self.x, self.y)

    def distance_to(self, p: "PointFloat") -> float:
        return abs(self - p)
