"""Typed draw primitives.

This is the raster-friendly output of the engine: a flat list of
simple shapes, each with its own paint. Coordinates are absolute
document coordinates. Element rotation is carried separately by
ElementDrawing so that sinks can apply it as a single transform.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple, Union

if TYPE_CHECKING:
    from geom2d import P
    from geom2d.transform2d import TMatrix
    from typing_extensions import TypeAlias

    from .path import TPath
    from .style import TRGBA


class Paint(NamedTuple):
    """Stroke and fill parameters of a primitive.

    Attributes:
        stroke: Stroke color as RGBA bytes, or None for no stroke.
        stroke_width: Stroke width.
        fill: Fill color as RGBA bytes, or None for no fill.
        opacity: Opacity multiplier (0.0 - 1.0).
        dash_array: Dash pattern, or None for a solid stroke.
    """

    stroke: TRGBA | None = None
    stroke_width: float = 0.0
    fill: TRGBA | None = None
    opacity: float = 1.0
    dash_array: tuple[float, ...] | None = None

    def with_opacity(self, factor: float) -> Paint:
        """A copy with the opacity multiplied by `factor`, capped at 1."""
        return self._replace(opacity=min(self.opacity * factor, 1.0))


class DrawRect(NamedTuple):
    """Axis aligned rectangle."""

    x: float
    y: float
    width: float
    height: float
    paint: Paint


class DrawEllipse(NamedTuple):
    """Axis aligned ellipse."""

    center: P
    rx: float
    ry: float
    paint: Paint


class DrawPolygon(NamedTuple):
    """Closed polygon."""

    points: tuple[P, ...]
    paint: Paint


class DrawPath(NamedTuple):
    """Arbitrary path of lines and cubic curves."""

    path: TPath
    paint: Paint


class DrawCircle(NamedTuple):
    """Circle."""

    center: P
    radius: float
    paint: Paint


class DrawLine(NamedTuple):
    """Single straight line."""

    p1: P
    p2: P
    paint: Paint


DrawPrimitive: TypeAlias = Union[
    DrawRect, DrawEllipse, DrawPolygon, DrawPath, DrawCircle, DrawLine
]


class ElementDrawing(NamedTuple):
    """Everything needed to draw one element.

    Attributes:
        primitives: Primitives in drawing order.
        transform: Rotation about the element center to apply to
            all primitives, or None.
    """

    primitives: list[DrawPrimitive]
    transform: TMatrix | None = None

    @property
    def is_empty(self) -> bool:
        """True if there is nothing to draw."""
        return not self.primitives
