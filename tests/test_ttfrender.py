import math

import pytest

from muffinmedia.ttf import Glyph, PointFlag, flag_value
from muffinmedia.ttfrender import (
    GlyphBitmap,
    bezier,
    bezier3,
    bezier4,
    clean_glyph_points,
    get_roots,
    intersects_curve,
    p_lerp,
    render_glyph,
    scale_point,
)
from muffinmedia.utils import Point


def _square_glyph():
    return Glyph(
        n_contours=1,
        x_min=0,
        y_min=0,
        x_max=10,
        y_max=10,
        points=[Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)],
        flags=[1, 1, 1, 1],
        contour_ends=[3],
    )


def test_p_lerp_endpoints():
    a, b = Point(1.0, 2.0), Point(7.0, -3.0)
    assert p_lerp(a, b, 0.0) == a
    assert p_lerp(a, b, 1.0) == b


def test_bezier3_endpoints():
    p0, p1, p2 = Point(0, 0), Point(3, 9), Point(6, 1)
    assert bezier3(p0, p1, p2, 0.0) == p0
    assert bezier3(p0, p1, p2, 1.0) == p2


def test_general_bezier_matches_fixed_degree():
    pts = [Point(0, 0), Point(2, 5), Point(7, 3), Point(9, 9)]
    for t in (0.0, 0.25, 0.5, 0.9):
        q = bezier(pts[:3], t)
        r = bezier3(*pts[:3], t)
        assert math.isclose(q.x, r.x) and math.isclose(q.y, r.y)
        q4 = bezier(pts, t)
        r4 = bezier4(*pts, t)
        assert math.isclose(q4.x, r4.x) and math.isclose(q4.y, r4.y)


def test_bezier_needs_three_points():
    with pytest.raises(ValueError):
        bezier([Point(0, 0), Point(1, 1)], 0.5)


def test_scale_point():
    assert scale_point(Point(1.5, -2.0), 2.0) == Point(3.0, -4.0)


def test_get_roots_degenerate_and_negative():
    assert get_roots(0.0, 1.0, 1.0).n_roots == 0
    assert get_roots(1.0, 0.0, 1.0).n_roots == 0


def test_get_roots_two_roots_solve_equation():
    roots = get_roots(1.0, 0.0, -1.0)
    assert roots.n_roots == 2
    for r in (roots.r0, roots.r1):
        assert abs(r * r - 1.0) < 1e-3
    assert roots.r0 != roots.r1


def test_get_roots_double_root():
    roots = get_roots(1.0, -2.0, 1.0)
    assert roots.n_roots == 1
    assert math.isclose(roots.r0, 1.0, abs_tol=1e-4)


def test_intersects_curve_left_and_right():
    p0, p1, p2 = Point(5, -4), Point(6, 0), Point(5, 8)
    assert intersects_curve(p0, p1, p2, Point(0, 0)) == 1
    assert intersects_curve(p0, p1, p2, Point(20, 0)) == 0


def test_intersects_curve_above_curve():
    p0, p1, p2 = Point(5, -4), Point(6, 0), Point(5, 8)
    assert intersects_curve(p0, p1, p2, Point(0, 100)) == 0


def test_clean_glyph_points_closes_and_alternates():
    glyph = _square_glyph()
    points, flags = clean_glyph_points(glyph)
    assert len(points) == len(flags)
    assert points[0] == points[-1]
    on = [flag_value(f, PointFlag.ON_CURVE) for f in flags]
    assert all(a != b for a, b in zip(on, on[1:]))
    assert on[0] and on[-1]


def test_clean_glyph_points_midpoint_between_neighbours():
    points, _ = clean_glyph_points(_square_glyph())
    assert points[1] == p_lerp(points[0], points[2], 0.5)


def test_render_glyph_dimensions_and_outline():
    bmp = render_glyph(_square_glyph(), 1.0)
    assert (bmp.width, bmp.height) == (11, 11)
    assert len(bmp.data) == bmp.width * bmp.height * 4
    assert bmp.pixel(0, 0) == (255, 255, 255, 255)
    assert bmp.pixel(5, 5) == (0, 0, 0, 0)


def test_render_glyph_scale_grows_bitmap():
    small = render_glyph(_square_glyph(), 1.0)
    large = render_glyph(_square_glyph(), 2.0)
    assert large.width > small.width
    assert large.height > small.height


def test_render_glyph_rejects_non_positive_scale():
    with pytest.raises(ValueError):
        render_glyph(_square_glyph(), 0.0)


def test_bitmap_pixel_bounds():
    bmp = GlyphBitmap(2, 2)
    bmp.set_pixel(5, 5)
    assert bytes(bmp.data) == bytes(16)
    with pytest.raises(IndexError):
        bmp.pixel(2, 0)