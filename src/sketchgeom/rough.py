"""Hand-drawn (rough) stroke generation.

Every generator returns a list of StrokePass records: one to three
perturbed copies of the same outline drawn at decreasing opacity.
Each pass owns a freshly seeded LcgRng derived from the element seed,
so the output only depends on the input geometry, seed and roughness.

A roughness of zero (or less) always produces a single exact pass.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import geom2d
from geom2d import CubicBezier, P
from geom2d.bezier import bezier_ellipse

from . import corners, spline
from .path import StrokePass, Subpath, curve_subpath, polyline_subpath
from .rng import LcgRng, offset_seed

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from geom2d import TPoint

    from .path import RoughPath, TPath

logger = logging.getLogger(__name__)

# Opacity multipliers of the primary, secondary and tertiary passes
PASS_OPACITY = (1.0, 0.85, 0.7)

# Tangential jitter as a fraction of the perpendicular jitter
TANGENT_JITTER = 0.3
# Floor for tangent lengths at repeated points
MIN_TANGENT_LENGTH = 1e-6

# Polygon jitter amplitude per unit roughness
POLYGON_AMPLITUDE = 1.2

# Ellipse sampling (minimum step count)
CURVE_STEP_COUNT = 9

# Shaft jitter amplitude is (SHAFT_AMPLITUDE + SHAFT_WIDTH_AMPLITUDE * w) * r
SHAFT_AMPLITUDE = 1.2
SHAFT_WIDTH_AMPLITUDE = 0.3
# Seed offset of the tertiary shaft pass
SHAFT_SEED_OFFSET = 0x55555555

# Rough line segments
BOWING = 1.0
SHORT_SEGMENT = 200.0
LONG_SEGMENT = 500.0
LONG_SEGMENT_GAIN = 0.4


def jitter_polyline(
    points: Sequence[TPoint],
    rng: LcgRng,
    amplitude: float,
    closed: bool = False,
) -> list[P]:
    """Offset each point mostly perpendicular to the local direction.

    The local direction at an interior point is the chord between its
    neighbors. For an open polyline the end points use their single
    adjacent segment. For a closed ring the neighbors wrap around.

    Each point draws two random values: a perpendicular offset in
    [-amplitude, amplitude) and then a tangential offset in
    [-0.3 * amplitude, 0.3 * amplitude).

    Args:
        points: The polyline or ring vertices.
        rng: Random number source. It is advanced two steps per point.
        amplitude: Maximum perpendicular offset.
        closed: Treat `points` as a closed ring.

    Returns:
        The jittered points. A copy of `points` if there are
        fewer than two.
    """
    pts = [P(p) for p in points]
    num_points = len(pts)
    if num_points < 2:
        return pts

    jittered = []
    for i, p in enumerate(pts):
        if closed:
            d = pts[(i + 1) % num_points] - pts[i - 1]
        elif i == 0:
            d = pts[1] - p
        elif i == num_points - 1:
            d = p - pts[i - 1]
        else:
            d = pts[i + 1] - pts[i - 1]
        length = max(math.hypot(d[0], d[1]), MIN_TANGENT_LENGTH)
        t = d / length
        perp = rng.range(-amplitude, amplitude)
        tang_max = amplitude * TANGENT_JITTER
        tang = rng.range(-tang_max, tang_max)
        jittered.append(p + P(-t[1], t[0]) * perp + t * tang)
    return jittered


def rough_polygon_paths(
    points: Sequence[TPoint], roughness: float, seed: int
) -> RoughPath:
    """Closed polygon drawn with up to three jittered passes.

    Pass amplitudes are 1.2r, 0.6r and 0.36r using seeds `seed`,
    `seed` + 1 and `seed` + 2. The third pass is only drawn when
    `roughness` > 1.

    Returns:
        The stroke passes. A single exact pass if roughness is not
        positive or there are fewer than three points. Empty if
        there are fewer than two points.
    """
    if len(points) < 2:
        return []
    if roughness <= 0 or len(points) < 3:
        return [StrokePass([polyline_subpath(points, closed=True)])]

    amplitude = POLYGON_AMPLITUDE * roughness
    schedule = [(0, 1.0), (1, 0.5)]
    if roughness > 1:
        schedule.append((2, 0.3))
    passes = []
    for (offset, scale), opacity in zip(schedule, PASS_OPACITY):
        rng = LcgRng(offset_seed(seed, offset))
        ring = jitter_polyline(points, rng, amplitude * scale, closed=True)
        subpath = polyline_subpath(ring, closed=True)
        passes.append(StrokePass([subpath], opacity))
    return passes


def ellipse_step_count(rx: float, ry: float) -> int:
    """Number of perimeter samples for an ellipse of radii `rx`, `ry`."""
    psq = math.sqrt(math.pi * 2 * math.sqrt((rx * rx + ry * ry) / 2))
    return math.ceil(
        max(CURVE_STEP_COUNT, (CURVE_STEP_COUNT / math.sqrt(200)) * psq)
    )


def ellipse_points(
    center: TPoint,
    rx: float,
    ry: float,
    offset_factor: float,
    rng: LcgRng,
    roughness: float,
) -> list[P]:
    """Jittered samples around an ellipse perimeter.

    Sampling starts at a random angle near the top of the ellipse.
    A point just inside the perimeter is added before the first
    sample and three overlap points after the last sample so that
    the spline through the points reads as a closed pencil loop.
    Each coordinate gets an offset in
    [-offset_factor, offset_factor) * roughness.
    """
    cx, cy = center[0], center[1]
    increment = (math.pi * 2) / ellipse_step_count(rx, ry)
    rad_offset = rng.range(-0.5, 0.5) - math.pi / 2
    overlap = increment * 0.5

    def jittered(scale: float, angle: float) -> P:
        x = cx + scale * rx * math.cos(angle)
        x += rng.range(-offset_factor, offset_factor) * roughness
        y = cy + scale * ry * math.sin(angle)
        y += rng.range(-offset_factor, offset_factor) * roughness
        return P(x, y)

    points = [jittered(0.9, rad_offset - increment)]
    end_angle = math.pi * 2 + rad_offset - 0.01
    angle = rad_offset
    while angle < end_angle:
        points.append(jittered(1.0, angle))
        angle += increment
    points.append(jittered(1.0, rad_offset + math.pi * 2 + overlap * 0.5))
    points.append(jittered(0.98, rad_offset + overlap))
    points.append(jittered(0.9, rad_offset + overlap * 0.5))
    return points


def exact_ellipse_path(center: TPoint, rx: float, ry: float) -> TPath:
    """Closed cubic Bezier approximation of an axis aligned ellipse."""
    if rx <= 0 or ry <= 0:
        return []
    curves = bezier_ellipse(geom2d.Ellipse(center, rx, ry))
    return [curve_subpath(curves, closed=True)]


def rough_ellipse_paths(
    center: TPoint,
    rx: float,
    ry: float,
    roughness: float,
    seed: int,
    tension: float = spline.DEFAULT_TENSION,
) -> RoughPath:
    """Ellipse drawn as up to three jittered spline loops.

    Passes use offset factors 1.0, 1.5 and 1.2 (the last with
    0.7 * roughness) and seeds `seed`, `seed` + 1 and `seed` + 2.
    The third pass is only drawn when `roughness` > 1.

    Returns:
        The stroke passes. A single exact pass if roughness is not
        positive. Empty if either radius is not positive.
    """
    if rx <= 0 or ry <= 0:
        return []
    if roughness <= 0:
        return [StrokePass(exact_ellipse_path(center, rx, ry))]

    schedule = [(0, 1.0, roughness), (1, 1.5, roughness)]
    if roughness > 1:
        schedule.append((2, 1.2, roughness * 0.7))
    passes = []
    for (offset, factor, pass_roughness), opacity in zip(
        schedule, PASS_OPACITY
    ):
        rng = LcgRng(offset_seed(seed, offset))
        points = ellipse_points(center, rx, ry, factor, rng, pass_roughness)
        curves = spline.catmull_rom(points, tension)
        passes.append(StrokePass([curve_subpath(curves)], opacity))
    return passes


def roughness_gain(length: float) -> float:
    """Jitter scale for a segment of `length`.

    1.0 below 200 units, tapering linearly to 0.4 at 500 units.
    """
    if length < SHORT_SEGMENT:
        return 1.0
    if length > LONG_SEGMENT:
        return LONG_SEGMENT_GAIN
    return -0.0016668 * length + 1.233334


def rough_line_segment(
    p1: TPoint,
    p2: TPoint,
    rng: LcgRng,
    roughness: float,
    bowing: float = BOWING,
    max_offset: float = 2.0,
    preserve_vertices: bool = False,
    overlay: bool = False,
) -> CubicBezier:
    """A straight segment redrawn as a wobbly cubic curve.

    The two control points sit at one and two times a random divergence
    fraction (0.2 to 0.4) along the segment. Both are displaced by a
    shared perpendicular bow plus independent jitter.

    Args:
        p1: Segment start.
        p2: Segment end.
        rng: Random number source.
        roughness: Roughness scalar.
        bowing: Perpendicular bulge factor.
        max_offset: Maximum random offset. Capped at a tenth of the
            segment length for short segments.
        preserve_vertices: Keep the end points exact.
        overlay: Second pass mode. Halves the end point and control
            point jitter and never preserves the end points.

    Returns:
        The jittered curve.
    """
    p1 = P(p1)
    p2 = P(p2)
    length_sq = p1.distance2(p2)
    length = math.sqrt(length_sq)
    gain = roughness * roughness_gain(length)

    offset = max_offset
    if offset * offset * 100 > length_sq:
        offset = length / 10
    jitter = offset / 2 if overlay else offset

    diverge = 0.2 + rng.next_float() * 0.2
    mid_x = bowing * max_offset * (p2.y - p1.y) / 200
    mid_y = bowing * max_offset * (p1.x - p2.x) / 200
    mid = P(rng.range(-mid_x, mid_x) * gain, rng.range(-mid_y, mid_y) * gain)

    def rnd() -> P:
        return P(
            rng.range(-jitter, jitter) * gain,
            rng.range(-jitter, jitter) * gain,
        )

    if preserve_vertices and not overlay:
        start, end = p1, p2
    else:
        start = p1 + rnd()
        end = p2 + rnd()
    d = p2 - p1
    c1 = mid + p1 + d * diverge + rnd()
    c2 = mid + p1 + d * (2 * diverge) + rnd()
    return CubicBezier(start, c1, c2, end)


def _rough_ring(
    ring: Sequence[P],
    rng: LcgRng,
    roughness: float,
    max_offset: float,
    preserve_vertices: bool,
    overlay: bool,
) -> Subpath:
    segments = [
        rough_line_segment(
            ring[i],
            ring[(i + 1) % len(ring)],
            rng,
            roughness,
            BOWING,
            max_offset,
            preserve_vertices,
            overlay,
        )
        for i in range(len(ring))
    ]
    return Subpath(segments)


def rough_rect_paths(
    x: float,
    y: float,
    width: float,
    height: float,
    radius: float,
    roughness: float,
    seed: int,
) -> RoughPath:
    """Rectangle outline drawn with rough line segments.

    Square corners use the four corner points. Rounded corners use a
    sampled ring with eight steps per corner. Each ring edge becomes
    one rough segment.

    Pass one uses `seed` in normal mode. Pass two uses `seed` + 1 in
    overlay mode. When `roughness` > 1 a third pass uses `seed` + 2
    in overlay mode with 0.6 times the offset.

    Returns:
        The stroke passes. A single exact rounded rectangle if
        roughness is not positive. Empty if the rectangle has
        no area.
    """
    if width <= 0 or height <= 0:
        return []
    if roughness <= 0:
        path = corners.rounded_rect_path(x, y, width, height, radius)
        return [StrokePass(path)]

    if radius > 0:
        ring = corners.rounded_rect_points(x, y, width, height, radius)
    else:
        ring = [
            P(x, y),
            P(x + width, y),
            P(x + width, y + height),
            P(x, y + height),
        ]
    max_offset = 2.0 * math.sqrt(roughness)
    preserve = roughness < 1.5

    schedule = [
        (0, max_offset, preserve, False),
        (1, max_offset, False, True),
    ]
    if roughness > 1:
        schedule.append((2, max_offset * 0.6, False, True))
    passes = []
    for (offset, pass_offset, pass_preserve, overlay), opacity in zip(
        schedule, PASS_OPACITY
    ):
        rng = LcgRng(offset_seed(seed, offset))
        subpath = _rough_ring(
            ring, rng, roughness, pass_offset, pass_preserve, overlay
        )
        passes.append(StrokePass([subpath], opacity))
    return passes


def shaft_amplitude(roughness: float, stroke_width: float) -> float:
    """Jitter amplitude of line and arrow shafts."""
    return (SHAFT_AMPLITUDE + SHAFT_WIDTH_AMPLITUDE * stroke_width) * roughness


def rough_polyline_paths(
    points: Sequence[TPoint],
    roughness: float,
    seed: int,
    stroke_width: float,
    build_path: Callable[[Sequence[P]], TPath],
) -> RoughPath:
    """Open line or arrow shaft with up to two extra jittered passes.

    The first pass is the exact shaft. When roughness > 0 a second
    pass jitters the points with `seed` and a third pass (roughness > 1)
    uses 0.6 times the amplitude and `seed` + 0x55555555.

    Args:
        points: Absolute shaft points.
        roughness: Roughness scalar.
        seed: Element seed.
        stroke_width: Shaft stroke width. Wider strokes wobble more.
        build_path: Turns a point list into a path, e.g. a spline,
            an elbow path or a straight polyline.

    Returns:
        The stroke passes. Empty if there are fewer than two points.
    """
    pts = [P(p) for p in points]
    if len(pts) < 2:
        return []
    passes = [StrokePass(build_path(pts))]
    if roughness <= 0:
        return passes

    amplitude = shaft_amplitude(roughness, stroke_width)
    rng = LcgRng(seed)
    jittered = jitter_polyline(pts, rng, amplitude)
    passes.append(StrokePass(build_path(jittered), PASS_OPACITY[1]))
    if roughness > 1:
        rng = LcgRng(offset_seed(seed, SHAFT_SEED_OFFSET))
        jittered = jitter_polyline(pts, rng, amplitude * 0.6)
        passes.append(StrokePass(build_path(jittered), PASS_OPACITY[2]))
    return passes


def polyline_path(points: Sequence[TPoint]) -> TPath:
    """Straight open polyline path. Empty for fewer than two points."""
    if len(points) < 2:
        return []
    return [polyline_subpath(points)]
