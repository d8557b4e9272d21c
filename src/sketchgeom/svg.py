"""SVG output sink for element drawings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TextIO

from geom2d.util import float_formatter
from lxml import etree

from . import style
from .config import RenderOptions
from .draw import (
    DrawCircle,
    DrawEllipse,
    DrawLine,
    DrawPath,
    DrawPolygon,
    DrawRect,
)
from .element import calculate_viewbox
from .path import DEFAULT_PRECISION, path_to_svg, polyline_subpath
from .render import render_element

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from geom2d import TPoint
    from geom2d.transform2d import TMatrix
    from typing_extensions import Self, TypeAlias

    from .draw import DrawPrimitive, ElementDrawing, Paint
    from .element import Element, ViewBox
    from .path import TPath

logger = logging.getLogger(__name__)

# : SVG Namespaces
SVG_NS = {
    None: 'http://www.w3.org/2000/svg',
    'xlink': 'http://www.w3.org/1999/xlink',
}

TDocument: TypeAlias = (
    etree._ElementTree  # noqa: SLF001 pylint: disable=protected-access
)
TElement: TypeAlias = (
    etree._Element  # noqa: SLF001 pylint: disable=protected-access
)


class SVGError(Exception):
    """SVG output error."""


def svg_ns(tag: str) -> str:
    """Prepend the SVG namespace to `tag`."""
    return f'{{{SVG_NS[None]}}}{tag}'


class SVGContext:
    """SVG document context."""

    document: TDocument
    docroot: TElement
    current_parent: TElement

    @classmethod
    def create_document(
        cls: type[Self],
        viewbox: ViewBox,
        background: str | None = None,
        precision: int = DEFAULT_PRECISION,
    ) -> Self:
        """Create an empty SVG document.

        Args:
            viewbox: Document view box.
            background: Optional background color. A background rect
                covering the view box is added unless the color is
                fully transparent.
            precision: Digits after the decimal point.

        Returns:
            An SVGContext

        Raises:
            style.ColorError: If the background color is invalid.
        """
        docroot = etree.Element(svg_ns('svg'), nsmap=SVG_NS)
        document = etree.ElementTree(docroot)
        context = cls(document, precision)
        docroot.set(
            'viewBox', ' '.join(context.fmt_float(v) for v in viewbox)
        )
        if background is not None:
            rgba = style.parse_color_strict(background)
            if rgba[3] > 0:
                color, alpha = style.rgba_to_css(rgba)
                attrs = {
                    'x': context.fmt_float(viewbox.min_x),
                    'y': context.fmt_float(viewbox.min_y),
                    'width': context.fmt_float(viewbox.width),
                    'height': context.fmt_float(viewbox.height),
                    'fill': color,
                    'fill-opacity': f'{alpha:.4f}',
                }
                context._create_svgelem('rect', attrs)  # noqa: SLF001
        return context

    def __init__(
        self, document: TDocument, precision: int = DEFAULT_PRECISION
    ) -> None:
        """New SVG context.

        Args:
            document: An SVG ElementTree.
            precision: Digits after the decimal point.
        """
        self.document = document
        self.docroot = document.getroot()
        self.current_parent = self.docroot
        self.set_precision(precision)

    def set_precision(self, precision: int) -> None:
        """Set the output precision.

        Args:
            precision: The number of digits after the decimal point.
                Values below 1 are treated as 1.
        """
        self.precision = max(precision, 1)
        self._fmt = float_formatter(precision=self.precision)

    def fmt_float(self, value: float) -> str:
        """Format a number with trailing zeros stripped."""
        s = self._fmt(value)
        return '0' if s == '-0' else s

    def write_document(
        self, stream: TextIO, pretty_print: bool = False
    ) -> None:
        """Write the SVG document to a stream output."""
        stream.write('<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n')
        data = etree.tostring(
            self.document.getroot(),
            encoding='unicode',
            pretty_print=pretty_print,
        )
        stream.write(data)

    def add_drawing(
        self, drawing: ElementDrawing, parent: TElement | None = None
    ) -> TElement | None:
        """Write the primitives of one element.

        Rotated drawings are wrapped in a group with a transform.

        Returns:
            The group element of a rotated drawing, otherwise None.

        Raises:
            SVGError: If a primitive cannot be written.
        """
        if drawing.is_empty:
            return None
        group = None
        if drawing.transform is not None:
            group = self.create_group(drawing.transform, parent=parent)
            parent = group
        for primitive in drawing.primitives:
            self.add_primitive(primitive, parent)
        return group

    def add_primitive(
        self, primitive: DrawPrimitive, parent: TElement | None = None
    ) -> TElement:
        """Write one draw primitive.

        Raises:
            SVGError: If the primitive type is not known.
        """
        if isinstance(primitive, DrawPath):
            return self.create_path(primitive.path, primitive.paint, parent)
        if isinstance(primitive, DrawRect):
            return self.create_rect(
                (primitive.x, primitive.y),
                primitive.width,
                primitive.height,
                primitive.paint,
                parent,
            )
        if isinstance(primitive, DrawEllipse):
            return self.create_ellipse(
                primitive.center,
                primitive.rx,
                primitive.ry,
                primitive.paint,
                parent,
            )
        if isinstance(primitive, DrawCircle):
            return self.create_circle(
                primitive.center, primitive.radius, primitive.paint, parent
            )
        if isinstance(primitive, DrawPolygon):
            return self.create_polygon(
                primitive.points, primitive.paint, parent
            )
        if isinstance(primitive, DrawLine):
            return self.create_line(
                primitive.p1, primitive.p2, primitive.paint, parent
            )
        raise SVGError(f'Unsupported draw primitive: {primitive!r}')

    def create_group(
        self,
        transform: TMatrix | None = None,
        parent: TElement | None = None,
    ) -> TElement:
        """Create an SVG group."""
        attrs = {}
        if transform is not None:
            attrs['transform'] = transform_attr(transform)
        return self._create_svgelem('g', attrs, parent=parent)

    def create_path(
        self, path: TPath, paint: Paint, parent: TElement | None = None
    ) -> TElement:
        """Create an SVG path element with round caps and joins."""
        attrs = {'d': path_to_svg(path, self.precision)}
        attrs.update(self.paint_attrs(paint))
        attrs['stroke-linecap'] = 'round'
        attrs['stroke-linejoin'] = 'round'
        return self._create_svgelem('path', attrs, parent=parent)

    def create_rect(
        self,
        position: TPoint,
        width: float,
        height: float,
        paint: Paint,
        parent: TElement | None = None,
    ) -> TElement:
        """Create an SVG rect element."""
        attrs = {
            'x': self.fmt_float(position[0]),
            'y': self.fmt_float(position[1]),
            'width': self.fmt_float(width),
            'height': self.fmt_float(height),
        }
        attrs.update(self.paint_attrs(paint))
        return self._create_svgelem('rect', attrs, parent=parent)

    def create_ellipse(
        self,
        center: TPoint,
        rx: float,
        ry: float,
        paint: Paint,
        parent: TElement | None = None,
    ) -> TElement:
        """Create an SVG ellipse element."""
        attrs = {
            'cx': self.fmt_float(center[0]),
            'cy': self.fmt_float(center[1]),
            'rx': self.fmt_float(rx),
            'ry': self.fmt_float(ry),
        }
        attrs.update(self.paint_attrs(paint))
        return self._create_svgelem('ellipse', attrs, parent=parent)

    def create_circle(
        self,
        center: TPoint,
        radius: float,
        paint: Paint,
        parent: TElement | None = None,
    ) -> TElement:
        """Create an SVG circle element."""
        attrs = {
            'cx': self.fmt_float(center[0]),
            'cy': self.fmt_float(center[1]),
            'r': self.fmt_float(radius),
        }
        attrs.update(self.paint_attrs(paint))
        return self._create_svgelem('circle', attrs, parent=parent)

    def create_polygon(
        self,
        vertices: Sequence[TPoint],
        paint: Paint,
        parent: TElement | None = None,
    ) -> TElement:
        """Create an SVG polygon element."""
        attrs = {
            'points': ' '.join(
                f'{self.fmt_float(p[0])},{self.fmt_float(p[1])}'
                for p in vertices
            )
        }
        attrs.update(self.paint_attrs(paint))
        attrs['stroke-linejoin'] = 'round'
        return self._create_svgelem('polygon', attrs, parent=parent)

    def create_line(
        self,
        p1: TPoint,
        p2: TPoint,
        paint: Paint,
        parent: TElement | None = None,
    ) -> TElement:
        """Create an SVG path consisting of one line segment."""
        return self.create_path([polyline_subpath((p1, p2))], paint, parent)

    def paint_attrs(self, paint: Paint) -> dict[str, str]:
        """Presentation attributes for a paint."""
        attrs = {}
        if paint.fill is None or paint.fill[3] == 0:
            attrs['fill'] = 'none'
        else:
            attrs['fill'], alpha = style.rgba_to_css(paint.fill)
            if alpha < 1:
                attrs['fill-opacity'] = f'{alpha:.4f}'
        if paint.stroke is None or paint.stroke_width <= 0:
            attrs['stroke'] = 'none'
        else:
            attrs['stroke'], alpha = style.rgba_to_css(paint.stroke)
            if alpha < 1:
                attrs['stroke-opacity'] = f'{alpha:.4f}'
            attrs['stroke-width'] = self.fmt_float(paint.stroke_width)
            if paint.dash_array:
                attrs['stroke-dasharray'] = style.dasharray_attr(
                    list(paint.dash_array)
                )
        if paint.opacity < 1:
            attrs['opacity'] = self.fmt_float(paint.opacity)
        return attrs

    def _create_svgelem(
        self,
        tag: str,
        attrs: dict[str, str],
        parent: TElement | None = None,
    ) -> TElement:
        """Create an SVG element."""
        if parent is None:
            parent = self.current_parent
        return etree.SubElement(parent, svg_ns(tag), attrs)


def transform_attr(matrix: TMatrix) -> str:
    """Create a SVG transform attribute value from matrix."""
    return (
        f'matrix({matrix[0][0]:f},{matrix[1][0]:f},'
        f'{matrix[0][1]:f},{matrix[1][1]:f},'
        f'{matrix[0][2]:f},{matrix[1][2]:f})'
    )


def render_svg(
    elements: Iterable[Element], options: RenderOptions | None = None
) -> SVGContext:
    """Render a list of elements to a new SVG document.

    Elements are drawn in list order. The view box is computed
    from the live elements.

    Raises:
        style.ColorError: If the background color is invalid.
        SVGError: If a primitive cannot be written.
    """
    if options is None:
        options = RenderOptions()
    elements = list(elements)
    context = SVGContext.create_document(
        calculate_viewbox(elements), options.background, options.precision
    )
    for element in elements:
        context.add_drawing(render_element(element, options))
    logger.debug('Rendered %d elements', len(elements))
    return context
