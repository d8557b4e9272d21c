"""Rounded corners for rectangles and elbow arrows.

Corners are built as quadratic Bezier curves and then elevated to
cubic curves so that any sink that understands M/L/C can draw them.
"""

from __future__ import annotations

import enum
import logging
import math
from typing import TYPE_CHECKING, Any, NamedTuple

from geom2d import CubicBezier, Line, P

from .path import Subpath, polyline_subpath

if TYPE_CHECKING:
    from collections.abc import Sequence

    from geom2d import TPoint

    from .path import TPath, TSegment

logger = logging.getLogger(__name__)

# Radius as a fraction of the smaller rectangle side
PROPORTIONAL_RADIUS = 0.25
# Fixed radius used by adaptive roundness when none is specified
DEFAULT_ADAPTIVE_RADIUS = 32.0
# Default maximum corner radius of elbow arrows
DEFAULT_ELBOW_CORNER = 16.0
# Points per quarter circle when sampling a rounded rectangle
DEFAULT_CORNER_STEPS = 8


class RoundnessKind(enum.IntEnum):
    """Roundness descriptor kinds."""

    UNKNOWN = 0
    LEGACY = 1
    PROPORTIONAL = 2
    ADAPTIVE = 3

    @classmethod
    def _missing_(cls, value: object) -> RoundnessKind:
        logger.debug('Unknown roundness type: %r', value)
        return cls.UNKNOWN


class Roundness(NamedTuple):
    """Roundness descriptor: a kind and an optional fixed radius."""

    kind: RoundnessKind
    value: float | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Roundness:
        """Create a Roundness from a document dict like {'type': 3}."""
        try:
            kind = RoundnessKind(int(d.get('type', 0)))
        except (TypeError, ValueError):
            kind = RoundnessKind.UNKNOWN
        value = d.get('value')
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cls(kind, float(value))
        return cls(kind)


def corner_radius(x: float, roundness: Roundness | None) -> float:
    """Corner radius for a shape whose smaller side is `x`.

    Legacy and proportional roundness use a quarter of `x`.
    Adaptive roundness uses a fixed radius (32 by default) unless
    `x` is too small for it, in which case it falls back to the
    proportional radius.

    Args:
        x: The smaller of the shape width and height.
        roundness: The roundness descriptor or None.

    Returns:
        The corner radius. Zero if there is no roundness
        or the kind is unknown.
    """
    if roundness is None:
        return 0.0
    if roundness.kind in {RoundnessKind.LEGACY, RoundnessKind.PROPORTIONAL}:
        return x * PROPORTIONAL_RADIUS
    if roundness.kind == RoundnessKind.ADAPTIVE:
        fixed = (
            roundness.value
            if roundness.value is not None
            else DEFAULT_ADAPTIVE_RADIUS
        )
        cutoff = fixed / PROPORTIONAL_RADIUS
        if x <= cutoff:
            return x * PROPORTIONAL_RADIUS
        return fixed
    return 0.0


def rounded_rect_path(
    x: float, y: float, width: float, height: float, radius: float
) -> TPath:
    """Closed rectangle path with quarter-round corners.

    The radius is clamped to half the width and half the height.
    The path starts at (x + r, y) and runs clockwise
    (in y-down coordinates).

    Returns:
        A path with one closed subpath. Four lines if the radius
        is zero, otherwise four lines and four elevated quadratic
        corners. An empty path if the rectangle has no area.
    """
    if width <= 0 or height <= 0:
        return []
    r = min(radius, width / 2, height / 2)
    x2 = x + width
    y2 = y + height
    if r <= 0:
        return [polyline_subpath([(x, y), (x2, y), (x2, y2), (x, y2)], True)]

    segments: list[TSegment] = [
        Line((x + r, y), (x2 - r, y)),
        CubicBezier.from_quadratic((x2 - r, y), (x2, y), (x2, y + r)),
        Line((x2, y + r), (x2, y2 - r)),
        CubicBezier.from_quadratic((x2, y2 - r), (x2, y2), (x2 - r, y2)),
        Line((x2 - r, y2), (x + r, y2)),
        CubicBezier.from_quadratic((x + r, y2), (x, y2), (x, y2 - r)),
        Line((x, y2 - r), (x, y + r)),
        CubicBezier.from_quadratic((x, y + r), (x, y), (x + r, y)),
    ]
    return [Subpath(segments, closed=True)]


def rounded_rect_points(
    x: float,
    y: float,
    width: float,
    height: float,
    radius: float,
    corner_steps: int = DEFAULT_CORNER_STEPS,
) -> list[P]:
    """Sample the outline of a rounded rectangle.

    Each corner arc contributes `corner_steps` + 1 points, starting
    with the top right corner. Every arc is preceded by one edge
    point: the start of the top edge, then the ends of the right,
    bottom and left edges. Straight edges are implied by consecutive
    points. Coincident points are kept, so a ring with the default
    eight steps always has 40 points, and the ring is not explicitly
    closed.
    """
    r = min(radius, width / 2, height / 2)
    x2 = x + width
    y2 = y + height
    arcs = (
        # edge point, arc center, start angle in degrees
        ((x + r, y), (x2 - r, y + r), -90),
        ((x2, y2 - r), (x2 - r, y2 - r), 0),
        ((x + r, y2), (x + r, y2 - r), 90),
        ((x, y + r), (x + r, y + r), 180),
    )
    points: list[P] = []
    for edge_point, center, start_angle in arcs:
        points.append(P(edge_point))
        for i in range(corner_steps + 1):
            a = math.radians(start_angle + 90 * i / corner_steps)
            points.append(
                P(center[0] + r * math.cos(a), center[1] + r * math.sin(a))
            )
    return points


def _sign(value: float) -> float:
    if value > 0:
        return 1.0
    if value < 0:
        return -1.0
    return 0.0


def _axis_offset(p: P, d: P, distance: float) -> P:
    """Move `p` by `distance` along the dominant axis of `d`."""
    if abs(d.x) >= abs(d.y):
        return P(p.x + _sign(d.x) * distance, p.y)
    return P(p.x, p.y + _sign(d.y) * distance)


def elbow_arrow_path(
    points: Sequence[TPoint], max_corner: float = DEFAULT_ELBOW_CORNER
) -> TPath:
    """Path through an orthogonal polyline with rounded interior corners.

    Each interior vertex is replaced by a quarter-round corner of
    radius min(`max_corner`, half the shorter adjacent segment).
    Tangent points are placed along the dominant axis of each
    adjacent segment (horizontal wins a tie).

    Args:
        points: Absolute polyline points.
        max_corner: Maximum corner radius.

    Returns:
        A path with one open subpath. A single line for two points.
        An empty path for fewer than two points.
    """
    pts = [P(p) for p in points]
    if len(pts) < 2:
        return []
    if len(pts) == 2:
        return [polyline_subpath(pts)]

    segments: list[TSegment] = []
    current = pts[0]
    for prev, vertex, nxt in zip(pts, pts[1:], pts[2:]):
        d_in = vertex - prev
        d_out = nxt - vertex
        r = min(max_corner, min(d_in.length(), d_out.length()) / 2)
        if r <= 0:
            if vertex != current:
                segments.append(Line(current, vertex))
            current = vertex
            continue
        t_in = _axis_offset(vertex, d_in, -r)
        t_out = _axis_offset(vertex, d_out, r)
        if t_in != current:
            segments.append(Line(current, t_in))
        segments.append(CubicBezier.from_quadratic(t_in, vertex, t_out))
        current = t_out
    if pts[-1] != current:
        segments.append(Line(current, pts[-1]))
    return [Subpath(segments)]
