"""Per-element rendering: element in, draw primitives out.

This is the control flow that ties the geometry modules together:
decode stroke and fill, route the shape through the rough stroke
generators (and the spline builder for curved shafts), then add
arrowhead caps for lines and arrows.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from geom2d import P

from . import corners, hachure, rough, spline
from .arrowhead import (
    JITTER_PASS_OPACITY,
    Arrowhead,
    BarCap,
    CircleCap,
    CrowfootCap,
    TriangleCap,
    arrowhead_geometry,
    cap_seed,
    jittered_arrowhead,
)
from .config import RenderOptions
from .draw import (
    DrawCircle,
    DrawEllipse,
    DrawLine,
    DrawPath,
    DrawPolygon,
    DrawRect,
    ElementDrawing,
    Paint,
)
from .element import ShapeKind
from .path import Subpath, curve_subpath
from .rng import LcgRng
from .style import FillStyle, StrokeStyle, dotted_cap_dash_array, parse_color

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .arrowhead import ArrowheadGeometry
    from .draw import DrawPrimitive
    from .element import Element
    from .path import RoughPath, TPath
    from .style import TRGBA

logger = logging.getLogger(__name__)


def render_element(
    element: Element, options: RenderOptions | None = None
) -> ElementDrawing:
    """Convert one element to draw primitives.

    Args:
        element: The element to draw.
        options: Render options. Defaults are used if None.

    Returns:
        The primitives in drawing order plus the element rotation.
        Deleted elements, text, unknown kinds and degenerate
        geometry give an empty drawing.
    """
    if options is None:
        options = RenderOptions()
    if element.is_deleted:
        return ElementDrawing([])

    if element.kind == ShapeKind.RECTANGLE:
        primitives = _render_rectangle(element, options)
    elif element.kind == ShapeKind.DIAMOND:
        primitives = _render_diamond(element)
    elif element.kind == ShapeKind.ELLIPSE:
        primitives = _render_ellipse(element, options)
    elif element.kind.is_linear:
        primitives = _render_linear(element, options)
    else:
        logger.debug(
            'Element %r of kind %s is not drawn',
            element.element_id,
            element.kind.value,
        )
        primitives = []

    if not primitives:
        return ElementDrawing([])
    return ElementDrawing(primitives, element.transform)


def stroke_paint(element: Element) -> Paint:
    """Primary stroke paint of an element."""
    dash_array = element.stroke_style.dash_array(element.stroke_width)
    return Paint(
        stroke=parse_color(element.stroke_color),
        stroke_width=element.stroke_width,
        opacity=element.alpha,
        dash_array=tuple(dash_array) if dash_array else None,
    )


def fill_paint(element: Element) -> Paint:
    """Exact fill paint of an element."""
    return Paint(
        fill=parse_color(element.background_color), opacity=element.alpha
    )


def _stroke_passes(
    rough_path: RoughPath, paint: Paint
) -> list[DrawPrimitive]:
    return [
        DrawPath(stroke.path, paint.with_opacity(stroke.opacity))
        for stroke in rough_path
        if stroke.path
    ]


def _render_rectangle(
    element: Element, options: RenderOptions
) -> list[DrawPrimitive]:
    x, y, width, height = element.x, element.y, element.width, element.height
    if width <= 0 or height <= 0:
        return []
    radius = element.corner_radius
    primitives: list[DrawPrimitive] = []

    if element.has_fill:
        if element.fill_style == FillStyle.SOLID:
            if radius > 0:
                path = corners.rounded_rect_path(x, y, width, height, radius)
                primitives.append(DrawPath(path, fill_paint(element)))
            else:
                primitives.append(
                    DrawRect(x, y, width, height, fill_paint(element))
                )
        else:
            hatch = (
                hachure.cross_hatch_lines
                if element.fill_style == FillStyle.CROSS_HATCH
                else hachure.hachure_lines
            )
            lines = hatch(
                x,
                y,
                width,
                height,
                gap=options.hachure_gap,
                hachure_angle=options.hachure_angle,
            )
            if lines:
                paint = Paint(
                    stroke=parse_color(element.background_color),
                    stroke_width=options.hachure_stroke_width,
                    opacity=element.alpha,
                )
                path = [Subpath([line]) for line in lines]
                primitives.append(DrawPath(path, paint))

    if element.has_stroke:
        rough_path = rough.rough_rect_paths(
            x, y, width, height, radius, element.roughness, element.seed
        )
        primitives.extend(_stroke_passes(rough_path, stroke_paint(element)))
    return primitives


def diamond_points(element: Element) -> list[P]:
    """Diamond vertices: top, right, bottom, left."""
    x, y, width, height = element.x, element.y, element.width, element.height
    return [
        P(x + width / 2, y),
        P(x + width, y + height / 2),
        P(x + width / 2, y + height),
        P(x, y + height / 2),
    ]


def _render_diamond(element: Element) -> list[DrawPrimitive]:
    if element.width <= 0 or element.height <= 0:
        return []
    ring = diamond_points(element)
    primitives: list[DrawPrimitive] = []
    if element.has_fill:
        primitives.append(DrawPolygon(tuple(ring), fill_paint(element)))
    if element.has_stroke:
        rough_path = rough.rough_polygon_paths(
            ring, element.roughness, element.seed
        )
        primitives.extend(_stroke_passes(rough_path, stroke_paint(element)))
    return primitives


def _render_ellipse(
    element: Element, options: RenderOptions
) -> list[DrawPrimitive]:
    rx = element.width / 2
    ry = element.height / 2
    if rx <= 0 or ry <= 0:
        return []
    center = element.center
    primitives: list[DrawPrimitive] = []
    if element.has_fill:
        primitives.append(DrawEllipse(center, rx, ry, fill_paint(element)))
    if element.has_stroke:
        rough_path = rough.rough_ellipse_paths(
            center,
            rx,
            ry,
            element.roughness,
            element.seed,
            options.tension,
        )
        primitives.extend(_stroke_passes(rough_path, stroke_paint(element)))
    return primitives


def _shaft_builder(
    element: Element, num_points: int, options: RenderOptions
) -> tuple[Callable[[Sequence[P]], TPath], bool]:
    """Pick the shaft path builder and whether the shaft is curved."""
    if element.elbowed and num_points >= 3:
        max_corner = options.elbow_corner_radius

        def build_elbow(points: Sequence[P]) -> TPath:
            return corners.elbow_arrow_path(points, max_corner)

        return build_elbow, False

    if element.roundness is not None:
        tension = options.tension

        def build_curve(points: Sequence[P]) -> TPath:
            return [curve_subpath(spline.catmull_rom(points, tension))]

        return build_curve, True

    return rough.polyline_path, False


def cap_direction(
    points: Sequence[P], position: str, curved: bool, tension: float
) -> tuple[P, P, float] | None:
    """Tail, tip and segment length for the 'start' or 'end' cap."""
    if len(points) < 2:
        return None
    if curved:
        return spline.arrowhead_direction(points, position, tension)
    if position == 'start':
        tail, tip = points[1], points[0]
    else:
        tail, tip = points[-2], points[-1]
    return tail, tip, tail.distance(tip)


def _render_linear(
    element: Element, options: RenderOptions
) -> list[DrawPrimitive]:
    points = element.absolute_points
    if len(points) < 2:
        return []
    if not element.has_stroke:
        return []

    build_path, curved = _shaft_builder(element, len(points), options)
    paint = stroke_paint(element)
    rough_path = rough.rough_polyline_paths(
        points,
        element.roughness,
        element.seed,
        element.stroke_width,
        build_path,
    )
    primitives = _stroke_passes(rough_path, paint)

    cap_paint = paint._replace(
        dash_array=(
            tuple(dotted_cap_dash_array(element.stroke_width))
            if element.stroke_style == StrokeStyle.DOTTED
            else None
        )
    )
    outline_fill = parse_color(options.outline_fill)
    for position, kind in (
        ('end', element.end_arrowhead),
        ('start', element.start_arrowhead),
    ):
        if kind is None:
            continue
        direction = cap_direction(points, position, curved, options.tension)
        if direction is None:
            continue
        tail, tip, segment_length = direction
        geometry = arrowhead_geometry(
            tail, tip, kind, element.stroke_width, segment_length
        )
        if geometry is None:
            logger.debug(
                'No %s arrowhead (%s) for element %r',
                position,
                kind.value,
                element.element_id,
            )
            continue
        primitives.extend(
            cap_primitives(kind, geometry, cap_paint, outline_fill)
        )

        jittered = jittered_arrowhead(
            tail,
            tip,
            kind,
            element.stroke_width,
            segment_length,
            LcgRng(cap_seed(element.seed, position)),
            element.roughness,
        )
        if jittered is not None:
            primitives.extend(
                cap_primitives(
                    kind,
                    jittered.geometry,
                    cap_paint.with_opacity(JITTER_PASS_OPACITY),
                    outline_fill,
                )
            )
    return primitives


def cap_primitives(
    kind: Arrowhead,
    geometry: ArrowheadGeometry,
    paint: Paint,
    outline_fill: TRGBA,
) -> list[DrawPrimitive]:
    """Draw primitives for one arrowhead cap.

    Args:
        kind: Arrowhead kind.
        geometry: Cap geometry from arrowhead_geometry().
        paint: Stroke paint of the cap.
        outline_fill: Fill color of outline kinds.

    Returns:
        Filled circles and polygons for dot, circle, triangle and
        diamond kinds, and lines for arrow, bar and crowfoot kinds.
    """
    fill = outline_fill if kind.is_outline else paint.stroke
    if isinstance(geometry, CircleCap):
        if geometry.diameter <= 0:
            return []
        return [
            DrawCircle(
                geometry.center,
                geometry.diameter / 2,
                paint._replace(fill=fill),
            )
        ]
    if isinstance(geometry, BarCap):
        return [DrawLine(geometry.p1, geometry.p2, paint)]
    if isinstance(geometry, CrowfootCap):
        primitives: list[DrawPrimitive] = []
        if kind in {Arrowhead.CROWFOOT_ONE, Arrowhead.CROWFOOT_ONE_OR_MANY}:
            primitives.append(DrawLine(geometry.left, geometry.right, paint))
        if kind in {Arrowhead.CROWFOOT_MANY, Arrowhead.CROWFOOT_ONE_OR_MANY}:
            primitives.append(DrawLine(geometry.left, geometry.base, paint))
            primitives.append(DrawLine(geometry.right, geometry.base, paint))
        return primitives
    if isinstance(geometry, TriangleCap) and kind == Arrowhead.ARROW:
        return [
            DrawLine(geometry.left, geometry.tip, paint),
            DrawLine(geometry.right, geometry.tip, paint),
        ]
    return [DrawPolygon(geometry.points, paint._replace(fill=fill))]
