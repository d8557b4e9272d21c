"""Test Catmull-Rom spline conversion and arrowhead direction sampling."""

from __future__ import annotations

import math

from geom2d import CubicBezier, P
from sketchgeom import spline


def _close(p1: P, p2: tuple[float, float], tolerance: float = 1e-6) -> bool:
    return math.hypot(p1[0] - p2[0], p1[1] - p2[1]) < tolerance


def test_too_few_points() -> None:
    assert spline.catmull_rom([]) == []
    assert spline.catmull_rom([(1, 1)]) == []


def test_two_points() -> None:
    curves = spline.catmull_rom([(0, 0), (10, 5)])
    assert len(curves) == 1
    curve = curves[0]
    assert curve.p1 == (0, 0)
    assert curve.c1 == (0, 0)
    assert curve.c2 == (10, 5)
    assert curve.p2 == (10, 5)


def test_continuity() -> None:
    points = [(0, 0), (30, 40), (80, 10), (120, 60), (150, 20)]
    curves = spline.catmull_rom(points)
    assert len(curves) == len(points) - 1
    assert curves[0].p1 == points[0]
    assert curves[-1].p2 == points[-1]
    for curve1, curve2 in zip(curves, curves[1:]):
        assert curve1.p2 == curve2.p1
    for curve, p1, p2 in zip(curves, points, points[1:]):
        assert curve.p1 == p1
        assert curve.p2 == p2


def test_control_points() -> None:
    curves = spline.catmull_rom([(0, 0), (10, 0), (20, 10)], tension=0.5)
    # The virtual point before the first point is clamped to it
    assert _close(curves[0].c1, (10 / 6, 0))
    assert _close(curves[0].c2, (10 - 20 / 6, -10 / 6))
    assert _close(curves[1].c1, (10 + 20 / 6, 10 / 6))


def test_cubic_point() -> None:
    curve = CubicBezier((0, 0), (0, 0), (10, 0), (10, 0))
    assert spline.cubic_point(*curve, 0) == (0, 0)
    assert spline.cubic_point(*curve, 1) == (10, 0)
    assert _close(spline.cubic_point(*curve, 0.5), (5, 0))


def test_arrowhead_direction() -> None:
    tail, tip, length = spline.arrowhead_direction([(0, 0), (100, 0)])
    assert tip == (100, 0)
    assert _close(tail, (78.4, 0))
    assert math.isclose(length, 100)

    tail, tip, length = spline.arrowhead_direction(
        [(0, 0), (100, 0)], 'start'
    )
    assert tip == (0, 0)
    assert _close(tail, (21.6, 0))
    assert math.isclose(length, 100)


def test_arrowhead_direction_curved() -> None:
    points = [(0, 0), (50, 50), (100, 0)]
    tail, tip, length = spline.arrowhead_direction(points)
    assert tip == (100, 0)
    assert math.isclose(length, math.hypot(50, 50))
    # The tail follows the curve, not the chord
    assert tail.y > 0
    assert spline.arrowhead_direction([(1, 1)]) is None
