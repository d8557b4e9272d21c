"""Test SVG output."""

from __future__ import annotations

import io
import math

import pytest
from geom2d import P
from sketchgeom import svg
from sketchgeom.config import RenderOptions
from sketchgeom.draw import DrawCircle, DrawLine, ElementDrawing, Paint
from sketchgeom.element import Element, ViewBox
from sketchgeom.style import ColorError

_VIEWBOX = ViewBox(0, 0, 800, 600)


def _rect(**kwargs: object) -> Element:
    d = {
        'type': 'rectangle',
        'x': 10,
        'y': 20,
        'width': 100,
        'height': 50,
        'roughness': 0,
    }
    d.update(kwargs)
    return Element.from_dict(d)


def test_create_document() -> None:
    context = svg.SVGContext.create_document(ViewBox(60, 60, 280, 230.5))
    root = context.docroot
    assert root.tag == svg.svg_ns('svg')
    assert root.get('viewBox') == '60 60 280 230.5'
    assert len(root) == 0


def test_background() -> None:
    context = svg.SVGContext.create_document(_VIEWBOX, '#ffffff')
    (rect,) = context.docroot
    assert rect.tag == svg.svg_ns('rect')
    assert rect.get('fill') == '#ffffff'
    assert rect.get('fill-opacity') == '1.0000'
    assert rect.get('width') == '800'

    context = svg.SVGContext.create_document(_VIEWBOX, '#00000080')
    (rect,) = context.docroot
    assert rect.get('fill-opacity') == f'{128 / 255:.4f}'

    for color in ('transparent', '#ffffff00'):
        context = svg.SVGContext.create_document(_VIEWBOX, color)
        assert len(context.docroot) == 0

    with pytest.raises(ColorError):
        svg.SVGContext.create_document(_VIEWBOX, 'white')


def test_render_svg() -> None:
    context = svg.render_svg([_rect()])
    root = context.docroot
    assert root.get('viewBox') == '-30 -20 180 130'
    (path,) = root.findall(svg.svg_ns('path'))
    assert path.get('d') == 'M 10 20 L 110 20 L 110 70 L 10 70 Z'
    assert path.get('fill') == 'none'
    assert path.get('stroke') == '#000000'
    assert path.get('stroke-width') == '1'
    assert path.get('stroke-linecap') == 'round'
    assert path.get('stroke-linejoin') == 'round'
    assert path.get('opacity') is None
    assert path.get('stroke-dasharray') is None


def test_render_svg_options() -> None:
    options = RenderOptions(precision=1, background='#fafafa')
    context = svg.render_svg([_rect(x=0.26)], options)
    rect, path = context.docroot
    assert rect.get('fill') == '#fafafa'
    assert path.get('d').startswith('M 0.3 20 L 100.3 20')


def test_rotated_element() -> None:
    context = svg.render_svg([_rect(angle=math.pi / 4)])
    (group,) = context.docroot
    assert group.tag == svg.svg_ns('g')
    assert group.get('transform').startswith('matrix(')
    assert len(group) == 1


def test_deleted_element() -> None:
    context = svg.render_svg([_rect(), _rect(isDeleted=True)])
    assert len(context.docroot) == 1


def test_paint_attrs() -> None:
    context = svg.SVGContext.create_document(_VIEWBOX)
    attrs = context.paint_attrs(
        Paint(
            stroke=(255, 0, 0, 128),
            stroke_width=2.5,
            fill=(0, 0, 255, 255),
            opacity=0.5,
            dash_array=(8.0, 10.5),
        )
    )
    assert attrs == {
        'fill': '#0000ff',
        'stroke': '#ff0000',
        'stroke-opacity': f'{128 / 255:.4f}',
        'stroke-width': '2.5',
        'stroke-dasharray': '8,10.5',
        'opacity': '0.5',
    }
    attrs = context.paint_attrs(Paint(fill=(0, 0, 0, 0)))
    assert attrs == {'fill': 'none', 'stroke': 'none'}


def test_primitives() -> None:
    context = svg.SVGContext.create_document(_VIEWBOX)
    paint = Paint(stroke=(0, 0, 0, 255), stroke_width=1)
    circle = context.add_primitive(DrawCircle(P(5, 5), 2.5, paint))
    assert circle.tag == svg.svg_ns('circle')
    assert (circle.get('cx'), circle.get('cy'), circle.get('r')) == (
        '5',
        '5',
        '2.5',
    )
    line = context.add_primitive(DrawLine(P(0, 0), P(10, 0), paint))
    assert line.get('d') == 'M 0 0 L 10 0'
    with pytest.raises(svg.SVGError):
        context.add_primitive(object())


def test_empty_drawing() -> None:
    context = svg.SVGContext.create_document(_VIEWBOX)
    assert context.add_drawing(ElementDrawing([])) is None
    assert len(context.docroot) == 0


def test_precision() -> None:
    context = svg.SVGContext.create_document(_VIEWBOX, precision=0)
    assert context.precision == 1
    assert context.fmt_float(1.26) == '1.3'
    assert context.fmt_float(-0.01) == '0'


def test_write_document() -> None:
    context = svg.render_svg([_rect()])
    stream = io.StringIO()
    context.write_document(stream)
    output = stream.getvalue()
    assert output.startswith('<?xml version="1.0"')
    assert '<svg ' in output
    assert 'xmlns="http://www.w3.org/2000/svg"' in output
    assert output.rstrip().endswith('</svg>')


def test_transform_attr() -> None:
    m = ((1.0, 0.0, 5.0), (0.0, 1.0, -2.0))
    assert svg.transform_attr(m) == (
        'matrix(1.000000,0.000000,0.000000,1.000000,5.000000,-2.000000)'
    )
