"""Sink-neutral path model and path description formatting.

A path is a list of subpaths. Each subpath is a connected run of
geom2d.Line and geom2d.CubicBezier segments that may be closed.
A rough (hand-drawn) path is a list of (path, opacity) passes.

Path descriptions use only absolute M, L, C, and Z commands.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple, Union

from geom2d import CubicBezier, Line, P
from geom2d.util import float_formatter

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from geom2d import TPoint
    from typing_extensions import TypeAlias

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 2

TSegment: TypeAlias = Union[Line, CubicBezier]


class Subpath(NamedTuple):
    """A connected run of segments."""

    segments: list[TSegment]
    closed: bool = False

    @property
    def start(self) -> P:
        """First point of this subpath."""
        return self.segments[0][0]


TPath: TypeAlias = list[Subpath]


class StrokePass(NamedTuple):
    """One pass of a hand-drawn stroke.

    Attributes:
        path: The geometry of this pass.
        opacity: Opacity multiplier, 1.0 for the primary pass.
    """

    path: TPath
    opacity: float = 1.0


RoughPath: TypeAlias = list[StrokePass]


def polyline_subpath(
    points: Sequence[TPoint], closed: bool = False
) -> Subpath:
    """Create a subpath of straight line segments through `points`.

    If `closed` is True and the last point does not equal the
    first point a closing segment is added.
    """
    pts = [P(p) for p in points]
    segments: list[TSegment] = [
        Line(p1, p2) for p1, p2 in zip(pts, pts[1:])
    ]
    if closed and len(pts) > 2 and pts[-1] != pts[0]:
        segments.append(Line(pts[-1], pts[0]))
    return Subpath(segments, closed)


def curve_subpath(
    curves: Sequence[CubicBezier], closed: bool = False
) -> Subpath:
    """Create a subpath from a sequence of connected cubic curves."""
    return Subpath(list(curves), closed)


def path_commands(
    path: Iterable[Subpath],
) -> Iterator[tuple[str, tuple[P, ...]]]:
    """Walk a path and yield (command, points) tuples.

    Commands are 'M' (one point), 'L' (one point), 'C' (three
    points) and 'Z' (no points). A move is emitted at the start of
    each subpath and whenever a segment does not start where the
    previous one ended. A final straight segment that returns to
    the start of a closed subpath is left to the 'Z'.
    """
    for subpath in path:
        current: P | None = None
        last = len(subpath.segments) - 1
        for i, segment in enumerate(subpath.segments):
            if current is None or segment[0] != current:
                yield 'M', (segment[0],)
            elif (
                subpath.closed
                and i == last
                and isinstance(segment, Line)
                and segment.p2 == subpath.start
            ):
                break
            if isinstance(segment, CubicBezier):
                yield 'C', (segment.c1, segment.c2, segment.p2)
            else:
                yield 'L', (segment[1],)
            current = segment[-1]
        if subpath.closed and current is not None:
            yield 'Z', ()


def path_to_svg(
    path: Iterable[Subpath], precision: int = DEFAULT_PRECISION
) -> str:
    """Format a path as a path description string.

    Args:
        path: The path to format.
        precision: Maximum number of digits after the decimal point.
            Trailing zeros are stripped. Values below 1 are treated
            as 1.

    Returns:
        A string such as 'M 25 0 L 75 0 C 87.5 0 100 12.5 100 25 Z'.
        An empty string if the path has no segments.
    """
    # The formatter strips trailing zeros so it needs a decimal point.
    fmt = float_formatter(precision=max(precision, 1))

    def fmt_float(value: float) -> str:
        s = fmt(value)
        return '0' if s == '-0' else s

    parts = []
    for cmd, points in path_commands(path):
        parts.append(cmd)
        for p in points:
            parts.append(fmt_float(p[0]))
            parts.append(fmt_float(p[1]))
    return ' '.join(parts)


def rough_path_descriptions(
    rough: RoughPath, precision: int = DEFAULT_PRECISION
) -> list[tuple[str, float]]:
    """Convert a rough path to (path description, opacity) pairs.

    Passes with no geometry are dropped.
    """
    descriptions = []
    for stroke in rough:
        d = path_to_svg(stroke.path, precision)
        if d:
            descriptions.append((d, stroke.opacity))
    return descriptions

