import math
import re
from typing import Any, Optional

from svgelements import Matrix

from transform.AffineTransform import AffineTransform


class SvgTransform:
    """SVG transform attribute text and svgelements.Matrix <-> AffineTransform."""

    _TOKEN_RE = re.compile(r"(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)")
    _SEP_RE = re.compile(r"[\s,]+")

    @staticmethod
    def _numbers(args: str) -> list:
        return [float(p) for p in SvgTransform._SEP_RE.split(args.strip()) if p]

    @staticmethod
    def parse_matrix(text: str) -> AffineTransform:
        """Parse one ``matrix(a,b,c,d,e,f)``, the output of to_svg_matrix()."""
        m = re.fullmatch(r"\s*matrix\s*\(([^)]*)\)\s*", text or "")
        if m is None:
            raise ValueError(f"not a single SVG matrix: {text!r}")
        parts = SvgTransform._numbers(m.group(1))
        if len(parts) != 6:
            raise ValueError(f"SVG matrix needs 6 numbers, got {len(parts)}: {text!r}")
        return AffineTransform.from_svg_values(*parts)

    @staticmethod
    def parse(transform_str: Optional[str]) -> AffineTransform:
        """Parse an SVG transform list such as ``translate(10,20) rotate(45)``.

        Entries are appended left to right, so the rightmost one acts on a
        point first. Entries with an unsupported argument count are skipped.
        """
        transform = AffineTransform.identity()
        if not transform_str:
            return transform

        for name, args in SvgTransform._TOKEN_RE.findall(transform_str):
            parts = SvgTransform._numbers(args)
            if name == "matrix" and len(parts) == 6:
                T = AffineTransform.from_svg_values(*parts)
            elif name == "translate" and len(parts) in (1, 2):
                tx = parts[0]
                ty = parts[1] if len(parts) == 2 else 0.0
                T = AffineTransform.translation(tx, ty)
            elif name == "scale" and len(parts) in (1, 2):
                sx = parts[0]
                sy = parts[1] if len(parts) == 2 else None
                T = AffineTransform.scaling(sx, sy)
            elif name == "rotate" and len(parts) in (1, 3):
                angle = parts[0]
                if len(parts) == 3:
                    T = AffineTransform.rotation_deg(angle, parts[1], parts[2])
                else:
                    T = AffineTransform.rotation_deg(angle)
            elif name == "skewX" and len(parts) == 1:
                T = AffineTransform.identity().skew_x(math.radians(parts[0]))
            elif name == "skewY" and len(parts) == 1:
                T = AffineTransform.identity().skew_y(math.radians(parts[0]))
            else:
                continue
            transform.multiply_with(T)
        return transform

    @staticmethod
    def to_svgelements(t: AffineTransform) -> Matrix:
        # svgelements keeps SVG's column-major (a b c d e f)
        return Matrix(t.a, t.c, t.b, t.d, t.tx, t.ty)

    @staticmethod
    def from_svgelements(M: Any) -> AffineTransform:
        a = getattr(M, "a", 1.0)
        b = getattr(M, "b", 0.0)
        c = getattr(M, "c", 0.0)
        d = getattr(M, "d", 1.0)
        e = getattr(M, "e", 0.0)
        f = getattr(M, "f", 0.0)
        return AffineTransform.from_svg_values(a, b, c, d, e, f)
