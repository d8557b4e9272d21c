"""Test element parsing and the document view box."""

from __future__ import annotations

import math

import pytest
from geom2d import P
from sketchgeom.arrowhead import Arrowhead
from sketchgeom.corners import RoundnessKind
from sketchgeom.element import (
    Element,
    ElementError,
    ShapeKind,
    ViewBox,
    calculate_viewbox,
    elements_from_document,
)
from sketchgeom.style import FillStyle, StrokeStyle


def _rect(x: float, y: float, width: float, height: float) -> dict:
    return {
        'type': 'rectangle',
        'x': x,
        'y': y,
        'width': width,
        'height': height,
    }


def test_from_dict_defaults() -> None:
    element = Element.from_dict(_rect(10, 20, 30, 40))
    assert element.kind == ShapeKind.RECTANGLE
    assert element.angle == 0
    assert element.seed == 0
    assert element.roughness == 1
    assert element.stroke_width == 1
    assert element.stroke_style == StrokeStyle.SOLID
    assert element.fill_style == FillStyle.HACHURE
    assert element.roundness is None
    assert element.alpha == 1.0
    assert not element.is_deleted
    assert element.center == (25, 40)


def test_from_dict_fields() -> None:
    d = {
        'id': 'abc',
        'type': 'arrow',
        'x': 100,
        'y': 50,
        'width': 200,
        'height': 0,
        'angle': math.pi / 2,
        'seed': 1234,
        'roughness': 2,
        'strokeWidth': 4,
        'strokeStyle': 'dashed',
        'strokeColor': '#1e1e1e',
        'backgroundColor': '#ffc9c9',
        'fillStyle': 'cross-hatch',
        'opacity': 50,
        'points': [[0, 0], [200, 0]],
        'roundness': {'type': 2},
        'startArrowhead': None,
        'endArrowhead': 'triangle',
        'elbowed': True,
        'isDeleted': False,
    }
    element = Element.from_dict(d)
    assert element.element_id == 'abc'
    assert element.kind == ShapeKind.ARROW
    assert element.kind.is_linear
    assert element.angle == pytest.approx(90)
    assert element.seed == 1234
    assert element.stroke_width == 4
    assert element.stroke_style == StrokeStyle.DASHED
    assert element.fill_style == FillStyle.CROSS_HATCH
    assert element.alpha == 0.5
    assert element.points == (P(0, 0), P(200, 0))
    assert element.absolute_points == [(100, 50), (300, 50)]
    assert element.roundness.kind == RoundnessKind.PROPORTIONAL
    assert element.start_arrowhead is None
    assert element.end_arrowhead == Arrowhead.TRIANGLE
    assert element.elbowed


def test_legacy_arrow_keys() -> None:
    d = _rect(0, 0, 10, 10)
    d.update(type='line', points=[[0, 0], [10, 10]], endArrowType='arrow')
    element = Element.from_dict(d)
    assert element.end_arrowhead == Arrowhead.ARROW


def test_unknown_tags() -> None:
    d = _rect(0, 0, 10, 10)
    d.update(type='frame', strokeStyle='wavy', fillStyle='zigzag')
    element = Element.from_dict(d)
    assert element.kind == ShapeKind.UNKNOWN
    assert element.stroke_style == StrokeStyle.SOLID
    assert element.fill_style == FillStyle.HACHURE


def test_missing_field() -> None:
    d = _rect(0, 0, 10, 10)
    del d['x']
    with pytest.raises(ElementError, match="missing field 'x'"):
        Element.from_dict(d)


def test_wrong_types() -> None:
    d = _rect(0, 0, 10, 10)
    d['width'] = 'wide'
    with pytest.raises(ElementError, match='must be a number'):
        Element.from_dict(d)
    d = _rect(0, 0, 10, 10)
    d['roughness'] = True
    with pytest.raises(ElementError):
        Element.from_dict(d)
    d = _rect(0, 0, 10, 10)
    d['points'] = [[0, 0], ['a', 1]]
    with pytest.raises(ElementError, match='invalid point'):
        Element.from_dict(d)
    with pytest.raises(ElementError):
        Element.from_dict([])


def test_non_finite_numbers() -> None:
    for value in (math.nan, math.inf, -math.inf, 10**400):
        d = _rect(0, 0, 10, 10)
        d['seed'] = value
        with pytest.raises(ElementError, match='must be finite'):
            Element.from_dict(d)
    d = _rect(0, 0, 10, 10)
    d['width'] = math.inf
    with pytest.raises(ElementError, match='must be finite'):
        Element.from_dict(d)
    d = _rect(0, 0, 10, 10)
    d['points'] = [[0, 0], [math.nan, 1]]
    with pytest.raises(ElementError, match='invalid point'):
        Element.from_dict(d)


def test_transform() -> None:
    element = Element.from_dict(_rect(0, 0, 100, 50))
    assert element.transform is None
    d = _rect(0, 0, 100, 50)
    d['angle'] = math.pi / 2
    element = Element.from_dict(d)
    m = element.transform
    assert m is not None
    # Rotation is about the element center
    assert element.center.transform(m) == element.center
    assert P(0, 0).transform(m) == (75, -25)


def test_corner_radius() -> None:
    d = _rect(0, 0, 100, 200)
    assert Element.from_dict(d).corner_radius == 0
    d['roundness'] = {'type': 3}
    assert Element.from_dict(d).corner_radius == 25


def test_alpha_clamped() -> None:
    d = _rect(0, 0, 10, 10)
    d['opacity'] = 150
    assert Element.from_dict(d).alpha == 1.0
    d['opacity'] = -5
    assert Element.from_dict(d).alpha == 0.0


def test_viewbox() -> None:
    elements = [
        Element.from_dict(_rect(100, 100, 200, 100)),
        Element.from_dict(
            {
                'type': 'ellipse',
                'x': 120,
                'y': 150,
                'width': 40,
                'height': 100,
            }
        ),
    ]
    assert calculate_viewbox(elements) == ViewBox(60, 60, 280, 230)


def test_viewbox_ignores_deleted() -> None:
    deleted = _rect(-1000, -1000, 10, 10)
    deleted['isDeleted'] = True
    elements = [
        Element.from_dict(_rect(0, 0, 10, 10)),
        Element.from_dict(deleted),
    ]
    assert calculate_viewbox(elements) == ViewBox(-40, -40, 90, 90)
    assert calculate_viewbox([Element.from_dict(deleted)]) == ViewBox(
        0, 0, 800, 600
    )


def test_empty_viewbox() -> None:
    assert calculate_viewbox([]) == ViewBox(0, 0, 800, 600)


def test_elements_from_document() -> None:
    elements = elements_from_document(
        {'type': 'excalidraw', 'elements': [_rect(0, 0, 10, 10)]}
    )
    assert len(elements) == 1
    with pytest.raises(ElementError, match='elements'):
        elements_from_document({'type': 'excalidraw'})
    with pytest.raises(ElementError):
        elements_from_document([])
