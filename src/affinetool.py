from __future__ import annotations

import argparse
import json
import math
import sys
from typing import List, Optional, Sequence

import matplotlib.pyplot as plt

from geometry.PointFloat import PointFloat
from svg.SvgTransform import SvgTransform
from transform.AffineTransform import AffineTransform
from transform.NotInvertibleError import NotInvertibleError


def parse_point(text: str) -> PointFloat:
    """'x,y' -> PointFloat (argparse type)."""
    try:
        x, y = (float(v) for v in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected X,Y but got {text!r}")
    return PointFloat(x, y)


def build_transform(transform_text: Optional[str], matrix_text: Optional[str]) -> AffineTransform:
    t = AffineTransform.identity()
    if matrix_text:
        t.multiply_with(SvgTransform.parse_matrix(matrix_text))
    if transform_text:
        t.multiply_with(SvgTransform.parse(transform_text))
    return t


def describe(t: AffineTransform) -> List[str]:
    tx, ty = t.get_translation()
    sx, sy = t.get_scale()
    return [
        f"Translation: ({tx:g}, {ty:g})",
        f"Scale (no-shear estimate): ({sx:g}, {sy:g})",
        f"Rotation: {math.degrees(t.get_rotation()):g} deg",
        f"Determinant: {t.determinant():g}  invertible={t.is_invertible()}  orthogonal={t.is_orthogonal()}",
    ]


def visualize_points(before: List[PointFloat], after: List[PointFloat]) -> None:
    """Plot input points and their images, joined by arrows."""
    fig, ax = plt.subplots(figsize=(6, 6))
    ax.scatter([p.x for p in before], [p.y for p in before], label="input")
    ax.scatter([p.x for p in after], [p.y for p in after], label="mapped")
    for p, q in zip(before, after):
        ax.annotate("", xy=q.as_tuple(), xytext=p.as_tuple(),
                    arrowprops=dict(arrowstyle="->", linewidth=0.8))
    ax.axhline(0, linewidth=0.5)
    ax.axvline(0, linewidth=0.5)
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(True)
    ax.legend()
    plt.tight_layout()
    plt.show()


def export_json(t: AffineTransform, before: List[PointFloat], after: List[PointFloat], path: str) -> None:
    """Export as JSON: { "svg": str, "matrix": [[...]*3], "points": [[[x,y],[x',y']], ...] }"""
    obj = {
        "svg": t.to_svg_matrix(),
        "matrix": t.m.tolist(),
        "points": [[list(p.as_tuple()), list(q.as_tuple())] for p, q in zip(before, after)],
    }
    data = json.dumps(obj, ensure_ascii=False, separators=(",", ":"))
    if path == "-" or path == "stdout":
        print(data)
    else:
        with open(path, "w", encoding="utf-8") as f:
            f.write(data)


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Compose 2D affine transforms from SVG syntax and map points through them")
    ap.add_argument("--transform", help="SVG transform list, e.g. 'translate(10,20) rotate(45)'")
    ap.add_argument("--matrix", help="Single SVG matrix(a,b,c,d,e,f), applied before --transform")
    ap.add_argument("--point", dest="points", type=parse_point, action="append", default=[],
                    metavar="X,Y", help="Point to map (repeatable)")
    ap.add_argument("--invert", action="store_true", help="Use the inverse of the composed transform")
    ap.add_argument("--decompose", action="store_true", help="Print translation/scale/rotation")
    ap.add_argument("--export-json", metavar="PATH", help="Write transform and mapped points to JSON (use '-' for stdout)")
    ap.add_argument("--view", action="store_true", help="Plot input and mapped points")
    args = ap.parse_args(argv)

    try:
        t = build_transform(args.transform, args.matrix)
    except ValueError as ex:
        print(f"error: {ex}", file=sys.stderr)
        return 2

    if args.invert:
        try:
            t = t.invert()
        except NotInvertibleError as ex:
            print(f"error: {ex}", file=sys.stderr)
            return 1

    print(t)
    print(t.to_svg_matrix())
    if args.decompose:
        for line in describe(t):
            print(line)

    mapped = t.apply_to_points(args.points)
    for p, q in zip(args.points, mapped):
        print(f"({p.x:g}, {p.y:g}) -> ({q.x:g}, {q.y:g})")

    if args.export_json:
        export_json(t, args.points, mapped, args.export_json)

    if args.view and args.points:
        visualize_points(args.points, mapped)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
