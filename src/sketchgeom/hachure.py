"""Hachure (diagonal line) fill patterns for rectangles.

Parallel lines are generated across the rectangle diagonal and
clipped to the rectangle with Cohen-Sutherland outcode clipping.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from geom2d import Box, Line, P

if TYPE_CHECKING:
    from geom2d import TPoint

logger = logging.getLogger(__name__)

DEFAULT_GAP = 4.0
DEFAULT_HACHURE_ANGLE = -45.0

# Outcodes. TOP is y < ymin (y axis points down).
_INSIDE = 0
_LEFT = 1
_RIGHT = 2
_BOTTOM = 4
_TOP = 8


def _outcode(x: float, y: float, box: Box) -> int:
    code = _INSIDE
    if x < box.xmin:
        code |= _LEFT
    elif x > box.xmax:
        code |= _RIGHT
    if y < box.ymin:
        code |= _TOP
    elif y > box.ymax:
        code |= _BOTTOM
    return code


def clip_line(p1: TPoint, p2: TPoint, box: Box) -> Line | None:
    """Clip a line segment to a box (Cohen-Sutherland).

    Args:
        p1: Segment start point.
        p2: Segment end point.
        box: Clipping rectangle.

    Returns:
        The clipped segment, or None if the segment lies
        entirely outside the box.
    """
    x1, y1 = p1[0], p1[1]
    x2, y2 = p2[0], p2[1]
    code1 = _outcode(x1, y1, box)
    code2 = _outcode(x2, y2, box)
    while True:
        if not code1 | code2:
            return Line((x1, y1), (x2, y2))
        if code1 & code2:
            return None
        code_out = code1 or code2
        # The division is safe: a zero delta would put both
        # points in the same outside region.
        if code_out & _TOP:
            x = x1 + (x2 - x1) * (box.ymin - y1) / (y2 - y1)
            y = box.ymin
        elif code_out & _BOTTOM:
            x = x1 + (x2 - x1) * (box.ymax - y1) / (y2 - y1)
            y = box.ymax
        elif code_out & _RIGHT:
            y = y1 + (y2 - y1) * (box.xmax - x1) / (x2 - x1)
            x = box.xmax
        else:
            y = y1 + (y2 - y1) * (box.xmin - x1) / (x2 - x1)
            x = box.xmin
        if code_out == code1:
            x1, y1 = x, y
            code1 = _outcode(x1, y1, box)
        else:
            x2, y2 = x, y
            code2 = _outcode(x2, y2, box)


def hachure_lines(
    x: float,
    y: float,
    width: float,
    height: float,
    angle: float = 0.0,
    gap: float = DEFAULT_GAP,
    hachure_angle: float = DEFAULT_HACHURE_ANGLE,
) -> list[Line]:
    """Parallel fill lines clipped to a rectangle.

    Lines are spaced `gap` apart and centered on the rectangle
    center. Enough lines are generated to cover the rectangle
    diagonal in both directions.

    Args:
        x: Rectangle left.
        y: Rectangle top.
        width: Rectangle width.
        height: Rectangle height.
        angle: Additional rotation in degrees. Renderers that rotate
            the whole element leave this at zero.
        gap: Distance between lines.
        hachure_angle: Line angle in degrees relative to `angle`.

    Returns:
        A list of clipped line segments. Empty for a rectangle
        with no area or a non-positive gap.
    """
    if width <= 0 or height <= 0 or gap <= 0:
        return []
    rad = math.radians(angle + hachure_angle)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    diagonal = math.hypot(width, height)
    num_lines = math.ceil(diagonal / gap)
    center = P(x + width / 2, y + height / 2)
    box = Box((x, y), (x + width, y + height))
    along = P(cos_a * diagonal, sin_a * diagonal)

    lines = []
    for i in range(-num_lines, num_lines + 1):
        offset = i * gap
        mid = center + P(-sin_a * offset, cos_a * offset)
        line = clip_line(mid - along, mid + along, box)
        if line is not None:
            lines.append(line)
    return lines


def cross_hatch_lines(
    x: float,
    y: float,
    width: float,
    height: float,
    angle: float = 0.0,
    gap: float = DEFAULT_GAP,
    hachure_angle: float = DEFAULT_HACHURE_ANGLE,
) -> list[Line]:
    """Two hachure patterns at right angles to each other."""
    return hachure_lines(
        x, y, width, height, angle, gap, hachure_angle
    ) + hachure_lines(x, y, width, height, angle, gap, hachure_angle + 90)
