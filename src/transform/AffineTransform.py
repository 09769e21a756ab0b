import math
from typing import Final, Iterable, List, Optional, Tuple

import numpy as np
import numpy.typing as npt

from geometry.PointFloat import PointFloat
from geometry.VectorFloat import VectorFloat
from transform.NotInvertibleError import NotInvertibleError

# |det| must exceed this for the linear part to count as invertible.
EPSILON: Final[float] = 1e-10


def _svg_number(v: float) -> str:
    # %g style: shortest round-trip digits, exponent form below 1e-4 or from 1e6 up
    v = float(v)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "+Inf" if v > 0 else "-Inf"
    sci = np.format_float_scientific(v, trim="-", exp_digits=2)
    exp = int(sci.rsplit("e", 1)[1])
    if exp < -4 or exp >= 6:
        return sci
    return np.format_float_positional(v, trim="-")


def multiply_transforms(a: "AffineTransform", b: "AffineTransform") -> "AffineTransform":
    """Full 3x3 product a.b (row 2 included), returned as a new transform."""
    return AffineTransform(a.m @ b.m)


class AffineTransform:
    """2D affine transform: 3x3 homogeneous matrix.

    Stored as numpy array with shape (3,3) laid out as
    [[a, b, tx], [c, d, ty], [0, 0, 1]]. Points are column vectors [x,y,1]^T.

    Composition methods right-multiply (self <- self @ E) and return self.
    Applied to a point, the operation appended last acts first, so
    ``t.translate(cx, cy).rotate_origin(r).translate(-cx, -cy)`` rotates
    about (cx, cy), the same way an SVG transform list reads.

    No method here writes row 2. A matrix handed to the constructor is used
    as-is and its row 2 is not checked.

    Instances are mutable and unsynchronised; clone() before sharing one
    between threads.
    """

    __hash__ = None  # mutable value

    def __init__(self, m: Optional[npt.ArrayLike] = None):
        if m is None:
            self.m = np.eye(3, dtype=float)
        else:
            self.m = np.array(m, dtype=float).reshape(3, 3)

    # ---- free entries -------------------------------------------------

    @property
    def a(self) -> float:
        return float(self.m[0, 0])

    @a.setter
    def a(self, value: float) -> None:
        self.m[0, 0] = value

    @property
    def b(self) -> float:
        return float(self.m[0, 1])

    @b.setter
    def b(self, value: float) -> None:
        self.m[0, 1] = value

    @property
    def c(self) -> float:
        return float(self.m[1, 0])

    @c.setter
    def c(self, value: float) -> None:
        self.m[1, 0] = value

    @property
    def d(self) -> float:
        return float(self.m[1, 1])

    @d.setter
    def d(self, value: float) -> None:
        self.m[1, 1] = value

    @property
    def tx(self) -> float:
        return float(self.m[0, 2])

    @tx.setter
    def tx(self, value: float) -> None:
        self.m[0, 2] = value

    @property
    def ty(self) -> float:
        return float(self.m[1, 2])

    @ty.setter
    def ty(self, value: float) -> None:
        self.m[1, 2] = value

    # ---- factories ----------------------------------------------------

    @staticmethod
    def identity() -> "AffineTransform":
        return AffineTransform()

    @staticmethod
    def translation(tx: float, ty: float) -> "AffineTransform":
        m = np.eye(3)
        m[0, 2] = tx
        m[1, 2] = ty
        return AffineTransform(m)

    @staticmethod
    def scaling(sx: float, sy: Optional[float] = None) -> "AffineTransform":
        if sy is None:
            sy = sx
        m = np.eye(3)
        m[0, 0] = sx
        m[1, 1] = sy
        return AffineTransform(m)

    @staticmethod
    def rotation(angle: float, cx: float = 0.0, cy: float = 0.0) -> "AffineTransform":
        """Counter-clockwise rotation by ``angle`` radians about (cx, cy)."""
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        R = np.array(
            [[cos_a, -sin_a, 0.0], [sin_a, cos_a, 0.0], [0, 0, 1]], dtype=float)
        if cx == 0.0 and cy == 0.0:
            return AffineTransform(R)
        return AffineTransform._about_point(R, cx, cy)

    @staticmethod
    def rotation_deg(angle_deg: float, cx: float = 0.0, cy: float = 0.0) -> "AffineTransform":
        return AffineTransform.rotation(math.radians(angle_deg), cx, cy)

    @staticmethod
    def from_svg_values(a: float, b: float, c: float, d: float, e: float, f: float) -> "AffineTransform":
        m = np.array([[a, c, e], [b, d, f], [0, 0, 1]],
                     dtype=float)  # SVG's (a b c d e f)
        return AffineTransform(m)

    @staticmethod
    def _about_point(E: np.ndarray, cx: float, cy: float) -> "AffineTransform":
        # T(cx,cy) . (E . T(-cx,-cy))
        T1 = AffineTransform.translation(-cx, -cy).m
        T2 = AffineTransform.translation(cx, cy).m
        return AffineTransform(T2 @ (E @ T1))

    # ---- composition --------------------------------------------------

    def __matmul__(self, other: "AffineTransform") -> "AffineTransform":
        return multiply_transforms(self, other)

    def multiply_with(self, other: "AffineTransform") -> "AffineTransform":
        self.m = self.m @ other.m
        return self

    def translate(self, x: float, y: float) -> "AffineTransform":
        return self.multiply_with(AffineTransform.translation(x, y))

    def scale(self, x: float, y: Optional[float] = None) -> "AffineTransform":
        return self.multiply_with(AffineTransform.scaling(x, y))

    def rotate_origin(self, angle: float) -> "AffineTransform":
        return self.multiply_with(AffineTransform.rotation(angle))

    def rotate_point(self, angle: float, x: float, y: float) -> "AffineTransform":
        """Rotate about (x, y) as three appended steps."""
        self.translate(x, y)
        self.rotate_origin(angle)
        return self.translate(-x, -y)

    def rotate_around_point(self, angle: float, cx: float, cy: float) -> "AffineTransform":
        """Rotate about (cx, cy) as one composite matrix."""
        return self.multiply_with(AffineTransform.rotation(angle, cx, cy))

    def skew_x(self, angle: float) -> "AffineTransform":
        return self.shear(math.tan(angle), 0.0)

    def skew_y(self, angle: float) -> "AffineTransform":
        return self.shear(0.0, math.tan(angle))

    def shear(self, shx: float, shy: float) -> "AffineTransform":
        m = np.eye(3)
        m[0, 1] = shx
        m[1, 0] = shy
        return self.multiply_with(AffineTransform(m))

    def reflect_x(self) -> "AffineTransform":
        """Mirror across the x axis (y -> -y)."""
        return self.multiply_with(AffineTransform.scaling(1.0, -1.0))

    def reflect_y(self) -> "AffineTransform":
        """Mirror across the y axis (x -> -x)."""
        return self.multiply_with(AffineTransform.scaling(-1.0, 1.0))

    def reflect_origin(self) -> "AffineTransform":
        return self.multiply_with(AffineTransform.scaling(-1.0, -1.0))

    def scale_around_point(self, sx: float, sy: float, cx: float, cy: float) -> "AffineTransform":
        S = AffineTransform.scaling(sx, sy).m
        return self.multiply_with(AffineTransform._about_point(S, cx, cy))

    # ---- mapping ------------------------------------------------------

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        m = self.m
        return (float(m[0, 0] * x + m[0, 1] * y + m[0, 2]),
                float(m[1, 0] * x + m[1, 1] * y + m[1, 2]))

    def apply_vector(self, dx: float, dy: float) -> Tuple[float, float]:
        """Map a displacement; translation does not apply."""
        m = self.m
        return (float(m[0, 0] * dx + m[0, 1] * dy),
                float(m[1, 0] * dx + m[1, 1] * dy))

    def apply_to_point(self, p: PointFloat) -> PointFloat:
        return PointFloat(*self.apply(p.x, p.y))

    def apply_to_vector(self, v: VectorFloat) -> VectorFloat:
        return VectorFloat(*self.apply_vector(v.x, v.y))

    def apply_to_points(self, points: Iterable[PointFloat]) -> List[PointFloat]:
        return [self.apply_to_point(p) for p in points]

    def apply_to_array(self, xy: np.ndarray) -> np.ndarray:
        """Map an (N, 2) array of x,y rows in one go."""
        pts = np.asarray(xy, dtype=float).reshape(-1, 2)
        return pts @ self.m[:2, :2].T + self.m[:2, 2]

    # ---- analysis -----------------------------------------------------

    def determinant(self) -> float:
        m = self.m
        return float(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])

    def is_invertible(self) -> bool:
        return abs(self.determinant()) > EPSILON

    def invert(self) -> "AffineTransform":
        """Return the inverse as a new transform; self is not modified.

        Raises:
            NotInvertibleError: |determinant| <= EPSILON (or NaN)
        """
        det = self.determinant()
        if not abs(det) > EPSILON:
            raise NotInvertibleError(det, EPSILON)

        a, b, tx = (float(v) for v in self.m[0])
        c, d, ty = (float(v) for v in self.m[1])
        return AffineTransform([
            [d / det, -b / det, (b * ty - d * tx) / det],
            [-c / det, a / det, (c * tx - a * ty) / det],
            [0.0, 0.0, 1.0],
        ])

    def get_translation(self) -> Tuple[float, float]:
        return self.tx, self.ty

    def get_scale(self) -> Tuple[float, float]:
        """Column norms of the linear part; sy is negative for a reflection.

        Only meaningful when the matrix carries no shear, this is not a
        general polar decomposition.
        """
        m = self.m
        sx = math.sqrt(m[0, 0] * m[0, 0] + m[1, 0] * m[1, 0])
        sy = math.sqrt(m[0, 1] * m[0, 1] + m[1, 1] * m[1, 1])
        if self.determinant() < 0:
            sy = -sy
        return sx, sy

    def get_rotation(self) -> float:
        """Rotation angle in radians, under the same no-shear assumption as get_scale()."""
        return math.atan2(self.m[1, 0], self.m[0, 0])

    def is_identity(self) -> bool:
        return self.equals(AffineTransform.identity())

    def is_orthogonal(self) -> bool:
        """True for pure rotations and reflections (|det| == 1)."""
        return abs(abs(self.determinant()) - 1.0) < EPSILON

    # ---- comparison ---------------------------------------------------

    def equals(self, other: "AffineTransform") -> bool:
        return bool(np.array_equal(self.m, other.m))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return self.equals(other)

    def is_nearly_equal(self, other: "AffineTransform", epsilon: float) -> bool:
        return bool(np.all(np.abs(self.m - other.m) <= epsilon))

    # ---- utility ------------------------------------------------------

    def reset(self) -> "AffineTransform":
        self.m[...] = np.eye(3)
        return self

    def clone(self) -> "AffineTransform":
        return AffineTransform(self.m)

    def __copy__(self) -> "AffineTransform":
        return self.clone()

    def __deepcopy__(self, memo) -> "AffineTransform":
        return self.clone()

    def lerp(self, other: "AffineTransform", factor: float) -> "AffineTransform":
        """Cell-wise blend of all nine entries, row 2 included.

        factor is not clamped; values outside [0, 1] extrapolate.
        """
        return AffineTransform(self.m * (1.0 - factor) + other.m * factor)

    def to_svg_matrix(self) -> str:
        # SVG wants column-major order: a c b d tx ty
        m = self.m
        values = (m[0, 0], m[1, 0], m[0, 1], m[1, 1], m[0, 2], m[1, 2])
        return "matrix(" + ",".join(_svg_number(v) for v in values) + ")"

    def __str__(self) -> str:
        return "AffineTransform[%.3f %.3f %.3f; %.3f %.3f %.3f; %.3f %.3f %.3f]" % tuple(self.m.ravel())

    def __repr__(self) -> str:
        return f"AffineTransform({self.m.tolist()!r})"
