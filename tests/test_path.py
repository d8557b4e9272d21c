"""Test the path model and path description formatting."""

from __future__ import annotations

from geom2d import CubicBezier, Line
from sketchgeom.path import (
    StrokePass,
    Subpath,
    curve_subpath,
    path_commands,
    path_to_svg,
    polyline_subpath,
    rough_path_descriptions,
)


def test_polyline_subpath() -> None:
    subpath = polyline_subpath([(0, 0), (10, 0), (10, 10)])
    assert len(subpath.segments) == 2
    assert not subpath.closed
    subpath = polyline_subpath([(0, 0), (10, 0), (10, 10)], closed=True)
    assert len(subpath.segments) == 3
    assert subpath.segments[-1] == Line((10, 10), (0, 0))
    # Already closed rings get no extra segment
    subpath = polyline_subpath([(0, 0), (10, 0), (10, 10), (0, 0)], True)
    assert len(subpath.segments) == 3


def test_path_commands() -> None:
    curve = CubicBezier((10, 0), (12, 2), (14, 2), (16, 0))
    subpath = Subpath([Line((0, 0), (10, 0)), curve])
    commands = list(path_commands([subpath]))
    assert [cmd for cmd, _ in commands] == ['M', 'L', 'C']
    assert commands[2][1] == (curve.c1, curve.c2, curve.p2)


def test_closed_path() -> None:
    path = [polyline_subpath([(0, 0), (10, 0), (10, 10)], closed=True)]
    assert path_to_svg(path) == 'M 0 0 L 10 0 L 10 10 Z'


def test_discontinuous_segments() -> None:
    subpath = Subpath([Line((0, 0), (1, 0)), Line((5, 5), (6, 5))])
    assert path_to_svg([subpath]) == 'M 0 0 L 1 0 M 5 5 L 6 5'


def test_multiple_subpaths() -> None:
    path = [
        polyline_subpath([(0, 0), (1, 1)]),
        polyline_subpath([(2, 2), (3, 3)]),
    ]
    assert path_to_svg(path) == 'M 0 0 L 1 1 M 2 2 L 3 3'


def test_precision() -> None:
    path = [polyline_subpath([(0, 0), (1.23456, 2)])]
    assert path_to_svg(path) == 'M 0 0 L 1.23 2'
    assert path_to_svg(path, precision=4) == 'M 0 0 L 1.2346 2'
    # Precision is at least one digit
    assert path_to_svg(path, precision=0) == 'M 0 0 L 1.2 2'
    # No negative zero
    path = [polyline_subpath([(-0.001, 0), (1, 0)])]
    assert path_to_svg(path) == 'M 0 0 L 1 0'


def test_empty_path() -> None:
    assert path_to_svg([]) == ''
    assert path_to_svg([Subpath([])]) == ''


def test_curve_subpath() -> None:
    curves = [
        CubicBezier((0, 0), (1, 1), (2, 1), (3, 0)),
        CubicBezier((3, 0), (4, -1), (5, -1), (6, 0)),
    ]
    assert path_to_svg([curve_subpath(curves)]) == (
        'M 0 0 C 1 1 2 1 3 0 C 4 -1 5 -1 6 0'
    )


def test_rough_path_descriptions() -> None:
    rough = [
        StrokePass([polyline_subpath([(0, 0), (1, 0)])]),
        StrokePass([], 0.85),
        StrokePass([polyline_subpath([(0, 1), (1, 1)])], 0.7),
    ]
    assert rough_path_descriptions(rough) == [
        ('M 0 0 L 1 0', 1.0),
        ('M 0 1 L 1 1', 0.7),
    ]
