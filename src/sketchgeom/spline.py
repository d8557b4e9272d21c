"""Catmull-Rom splines expressed as cubic Bezier curves.

Used for smooth line and arrow shafts, for connecting jittered
ellipse samples, and for locating arrowhead tangents near the
ends of a curved shaft.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Literal

from geom2d import CubicBezier, P

if TYPE_CHECKING:
    from collections.abc import Sequence

    from geom2d import TPoint
    from typing_extensions import TypeAlias

logger = logging.getLogger(__name__)

DEFAULT_TENSION = 0.5

# Parameter values used to sample the shaft direction near each end.
START_SAMPLE_T = 0.3
END_SAMPLE_T = 0.7

TCapPosition: TypeAlias = Literal['start', 'end']


def catmull_rom(
    points: Sequence[TPoint], tension: float = DEFAULT_TENSION
) -> list[CubicBezier]:
    """Convert a point sequence to Catmull-Rom derived cubic curves.

    The virtual points before the first and after the last point
    are clamped to the end points, so the curve does not loop.

    Args:
        points: Ordered points the curve passes through.
        tension: Tangent scale factor. Default is 0.5.

    Returns:
        One cubic curve per consecutive point pair. Each curve starts
        exactly where the previous one ends. An empty list if there
        are fewer than two points. Two points produce a single
        straight curve whose control points equal its end points.
    """
    pts = [P(p) for p in points]
    num_points = len(pts)
    if num_points < 2:
        return []
    if num_points == 2:
        return [CubicBezier(pts[0], pts[0], pts[1], pts[1])]

    curves = []
    for i in range(num_points - 1):
        p0 = pts[max(i - 1, 0)]
        p1 = pts[i]
        p2 = pts[i + 1]
        p3 = pts[min(i + 2, num_points - 1)]
        c1 = p1 + ((p2 - p0) * tension) / 3.0
        c2 = p2 - ((p3 - p1) * tension) / 3.0
        curves.append(CubicBezier(p1, c1, c2, p2))
    return curves


def cubic_point(
    p0: TPoint, c1: TPoint, c2: TPoint, p3: TPoint, t: float
) -> P:
    """Evaluate a cubic Bezier curve at `t` using the Bernstein blend.

    Unlike CubicBezier.point_at() there is no snapping
    of `t` to the end points.
    """
    u = 1.0 - t
    u2 = u * u
    u3 = u2 * u
    t2 = t * t
    t3 = t2 * t
    x = u3 * p0[0] + 3.0 * u2 * t * c1[0] + 3.0 * u * t2 * c2[0] + t3 * p3[0]
    y = u3 * p0[1] + 3.0 * u2 * t * c1[1] + 3.0 * u * t2 * c2[1] + t3 * p3[1]
    return P(x, y)


def arrowhead_direction(
    points: Sequence[TPoint],
    position: TCapPosition = 'end',
    tension: float = DEFAULT_TENSION,
) -> tuple[P, P, float] | None:
    """Find the tail, tip, and segment length for an arrowhead.

    The tail is sampled from the spline segment nearest the cap
    (t=0.7 on the last segment for the end cap, t=0.3 on the first
    segment for the start cap) so the cap follows the curve tangent
    rather than the chord.

    Args:
        points: Shaft points in absolute coordinates.
        position: 'start' or 'end'.
        tension: Catmull-Rom tension.

    Returns:
        A tuple (tail, tip, segment_length) or None if
        there are fewer than two points.
    """
    curves = catmull_rom(points, tension)
    if not curves:
        return None
    if position == 'start':
        curve = curves[0]
        tail = cubic_point(*curve, START_SAMPLE_T)
        tip = curve.p1
    else:
        curve = curves[-1]
        tail = cubic_point(*curve, END_SAMPLE_T)
        tip = curve.p2
    dx = curve.p2.x - curve.p1.x
    dy = curve.p2.y - curve.p1.y
    return tail, tip, math.sqrt(dx * dx + dy * dy)
