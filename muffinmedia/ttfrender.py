"""Quadratic Bézier helpers and a scan-line renderer for simple glyphs."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from .ttf import Glyph, PointFlag, flag_value, modify_flag
from .utils import Point, lerp

_EPSILON = 0.00001
_INV_EPSILON = 1.0 / _EPSILON
_CURVE_STEPS = 150
_WHITE = (255, 255, 255, 255)


def _epsilize(value: float) -> float:
    return math.floor(value * _INV_EPSILON) * _EPSILON


@dataclass
class Roots:
    """Real roots of a quadratic; only the first ``n_roots`` values are meaningful."""

    r0: float = 0.0
    r1: float = 0.0
    n_roots: int = 0


@dataclass
class GlyphBitmap:
    """An RGBA bitmap, four bytes per pixel, rows stored one after another."""

    width: int
    height: int
    data: bytearray = field(default_factory=bytearray)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("bitmap dimensions must be non-negative")
        size = self.width * self.height * 4
        if not self.data:
            self.data = bytearray(size)
        elif len(self.data) != size:
            raise ValueError("pixel data does not match the bitmap size")

    def _index(self, x: float, y: float) -> int | None:
        xi, yi = int(x), int(y)
        if 0 <= xi < self.width and 0 <= yi < self.height:
            return (yi * self.width + xi) * 4
        return None

    def set_pixel(self, x: float, y: float, color: tuple[int, int, int, int] = _WHITE) -> None:
        """Set the pixel under ``(x, y)``; positions outside the bitmap are ignored."""
        idx = self._index(x, y)
        if idx is not None:
            self.data[idx:idx + 4] = bytes(color)

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the RGBA value of the pixel at ``(x, y)``."""
        idx = self._index(x, y)
        if idx is None:
            raise IndexError(f"pixel ({x}, {y}) is outside the bitmap")
        r, g, b, a = self.data[idx:idx + 4]
        return (r, g, b, a)


def p_lerp(p0: Point, p1: Point, t: float) -> Point:
    """Linearly interpolate between two points."""
    return Point(lerp(p0.x, p1.x, t), lerp(p0.y, p1.y, t))


def bezier3(p0: Point, p1: Point, p2: Point, t: float) -> Point:
    """Evaluate a quadratic Bézier curve at ``t``."""
    return p_lerp(p_lerp(p0, p1, t), p_lerp(p1, p2, t), t)


def bezier4(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """Evaluate a cubic Bézier curve at ``t``."""
    i0 = p_lerp(p0, p1, t)
    i1 = p_lerp(p1, p2, t)
    i2 = p_lerp(p2, p3, t)
    return p_lerp(p_lerp(i0, i1, t), p_lerp(i1, i2, t), t)


def bezier(points: Sequence[Point], t: float) -> Point:
    """Evaluate a Bézier curve of any degree (at least three control points)."""
    if len(points) < 3:
        raise ValueError("a Bézier curve needs at least three points")
    level = list(points)
    while len(level) > 1:
        level = [p_lerp(a, b, t) for a, b in zip(level, level[1:])]
    return level[0]


def scale_point(p: Point, s: float) -> Point:
    """Scale both coordinates of ``p`` by ``s``."""
    return Point(p.x * s, p.y * s)


def get_roots(a: float, b: float, c: float) -> Roots:
    """Return the real roots of ``a*t**2 + b*t + c``; a vanishing ``a`` gives none."""
    if _epsilize(a) == 0.0:
        return Roots()
    disc = _epsilize(b * b - 4.0 * a * c)
    if disc < 0.0:
        return Roots()
    inv = 1.0 / (2.0 * a)
    root = _epsilize(math.sqrt(disc))
    if root != 0.0:
        return Roots((-b + root) * inv, (-b - root) * inv, 2)
    return Roots((-b + root) * inv, 0.0, 1)


def _valid_root(r: float, p0: Point, p1: Point, p2: Point, e: Point) -> bool:
    return 0.0 <= r <= 1.0 and bezier3(p0, p1, p2, r).x > e.x


def intersects_curve(p0: Point, p1: Point, p2: Point, e: Point) -> int:
    """Count crossings (0, 1 or 2) of a rightward ray from ``e`` with a quadratic curve."""
    q0 = Point(p0.x, p0.y - e.y)
    q1 = Point(p1.x, p1.y - e.y)
    q2 = Point(p2.x, p2.y - e.y)
    a = q0.y - 2 * q1.y + q2.y
    b = 2 * q1.y - 2 * q0.y
    c = q0.y
    roots = get_roots(a, b, c)
    if roots.n_roots <= 0:
        return 0
    count = int(_valid_root(roots.r0, q0, q1, q2, e))
    if roots.n_roots > 1 and _valid_root(roots.r1, q0, q1, q2, e):
        count += 1
    return count


def clean_glyph_points(glyph: Glyph) -> tuple[list[Point], list[int]]:
    """Insert implied points and close every contour.

    Between two consecutive points that are both on or both off the curve a
    midpoint of the other kind is added, and each contour ends by repeating
    its first point.
    """
    points: list[Point] = []
    flags: list[int] = []
    ends = glyph.contour_ends
    n = glyph.n_points
    contour = 0

    for i, (p, p_flag) in enumerate(zip(glyph.points, glyph.flags)):
        points.append(p)
        flags.append(p_flag)
        on = flag_value(p_flag, PointFlag.ON_CURVE)

        if (contour < len(ends) and i == ends[contour]) or i >= n - 1:
            start = ends[contour - 1] + 1 if contour > 0 else 0
            if start >= n:
                raise ValueError("contour start lies beyond the glyph's points")
            first_flag = glyph.flags[start]
            first_on = flag_value(first_flag, PointFlag.ON_CURVE)
            if first_on == on:
                points.append(p_lerp(p, glyph.points[start], 0.5))
                flags.append(modify_flag(p_flag, PointFlag.ON_CURVE, int(not first_on)))
            points.append(glyph.points[start])
            flags.append(first_flag)
            contour += 1
            continue

        if on == flag_value(glyph.flags[i + 1], PointFlag.ON_CURVE):
            points.append(p_lerp(p, glyph.points[i + 1], 0.5))
            flags.append(modify_flag(p_flag, PointFlag.ON_CURVE, int(not on)))

    return points, flags


def render_glyph(glyph: Glyph, scale: float = 1.0) -> GlyphBitmap:
    """Render a glyph's outline and even-odd fill in white onto a new bitmap."""
    if scale <= 0.0:
        raise ValueError("scale must be positive")

    width = int(int(glyph.x_max - glyph.x_min) * scale) + 1
    height = int(int(glyph.y_max - glyph.y_min) * scale) + 1
    bitmap = GlyphBitmap(width, height)

    tx = -glyph.x_min * scale
    ty = -glyph.y_min * scale
    points, flags = clean_glyph_points(glyph)

    curves: list[tuple[Point, Point, Point]] = []
    on_count = off_count = 0
    for i, (p, p_flag) in enumerate(zip(points, flags)):
        if not flag_value(p_flag, PointFlag.ON_CURVE):
            off_count += 1
            continue
        if on_count == 0 and off_count == 0:
            on_count += 1
            continue
        if off_count == 0:
            continue
        curve = (
            scale_point(points[i - 2], scale),
            scale_point(points[i - 1], scale),
            scale_point(p, scale),
        )
        curves.append(curve)
        for step in range(_CURVE_STEPS):
            q = bezier3(*curve, step / _CURVE_STEPS)
            bitmap.set_pixel(q.x + tx, q.y + ty)
        on_count = off_count = 0

    for y in range(height):
        for x in range(width):
            probe = Point(float(x), float(y))
            crossings = sum(intersects_curve(*c, probe) for c in curves)
            if crossings & 1:
                bitmap.set_pixel(x + tx, y + ty)

    return bitmap