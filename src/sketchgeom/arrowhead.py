"""Arrowhead cap geometry.

Given the tail and tip of the last shaft segment, compute the points
needed to draw an arrowhead of a given kind. The geometry does not
depend on the output format.

The cap length scales with the stroke width and shrinks on short
shafts so the cap never overruns the line::

    cap = min(base_size * (1 + (stroke_width - 1) * 0.3),
              segment_length * length_fraction)

Arrow flanks are the cap base point (one cap length back from the tip)
rotated about the tip. Bar, triangle and diamond flanks start at the
base point and extend one cap length along the shaft normal turned by
the cap angle toward the tail (left) or the tip (right). Crowfoot
flanks are the tip rotated about the base point.
"""

from __future__ import annotations

import enum
import logging
import math
from typing import TYPE_CHECKING, NamedTuple, Union

from geom2d import P

from . import rng as _rng

if TYPE_CHECKING:
    from geom2d import TPoint
    from typing_extensions import TypeAlias

    from .rng import LcgRng

logger = logging.getLogger(__name__)

# Seed mix for the start cap jitter pass
START_CAP_SEED_MIX = 0xABCDEF
# Opacity multiplier of the jittered cap pass
JITTER_PASS_OPACITY = 0.9


class Arrowhead(str, enum.Enum):
    """Arrowhead kinds."""

    ARROW = 'arrow'
    BAR = 'bar'
    DOT = 'dot'
    CIRCLE = 'circle'
    CIRCLE_OUTLINE = 'circle_outline'
    TRIANGLE = 'triangle'
    TRIANGLE_OUTLINE = 'triangle_outline'
    DIAMOND = 'diamond'
    DIAMOND_OUTLINE = 'diamond_outline'
    CROWFOOT_ONE = 'crowfoot_one'
    CROWFOOT_MANY = 'crowfoot_many'
    CROWFOOT_ONE_OR_MANY = 'crowfoot_one_or_many'
    UNKNOWN = 'unknown'

    @classmethod
    def _missing_(cls, value: object) -> Arrowhead:
        logger.debug('Unknown arrowhead: %r', value)
        return cls.UNKNOWN

    @property
    def base_size(self) -> float:
        """Cap length before stroke width scaling."""
        if self == Arrowhead.ARROW:
            return 25.0
        if self.is_diamond:
            return 12.0
        if self.is_crowfoot:
            return 20.0
        return 15.0

    @property
    def angle(self) -> float:
        """Flank angle in degrees."""
        if self == Arrowhead.BAR:
            return 90.0
        if self == Arrowhead.ARROW:
            return 20.0
        return 25.0

    @property
    def length_fraction(self) -> float:
        """Maximum cap length as a fraction of the segment length."""
        return 0.25 if self.is_diamond else 0.5

    @property
    def is_circle(self) -> bool:
        """True for dot, circle and circle_outline."""
        return self in {
            Arrowhead.DOT,
            Arrowhead.CIRCLE,
            Arrowhead.CIRCLE_OUTLINE,
        }

    @property
    def is_diamond(self) -> bool:
        """True for diamond and diamond_outline."""
        return self in {Arrowhead.DIAMOND, Arrowhead.DIAMOND_OUTLINE}

    @property
    def is_crowfoot(self) -> bool:
        """True for the crowfoot family."""
        return self in {
            Arrowhead.CROWFOOT_ONE,
            Arrowhead.CROWFOOT_MANY,
            Arrowhead.CROWFOOT_ONE_OR_MANY,
        }

    @property
    def is_outline(self) -> bool:
        """True for caps that are filled with the outline fill."""
        return self in {
            Arrowhead.CIRCLE_OUTLINE,
            Arrowhead.TRIANGLE_OUTLINE,
            Arrowhead.DIAMOND_OUTLINE,
        }


class CircleCap(NamedTuple):
    """Circular cap centered on the tip."""

    center: P
    diameter: float

    @property
    def points(self) -> tuple[P, ...]:
        """Points that define this cap."""
        return (self.center,)


class BarCap(NamedTuple):
    """Bar across the tip."""

    p1: P
    p2: P

    @property
    def points(self) -> tuple[P, ...]:
        """Points that define this cap."""
        return (self.p1, self.p2)


class TriangleCap(NamedTuple):
    """Arrow or triangle cap: the tip and two flank points."""

    tip: P
    left: P
    right: P

    @property
    def points(self) -> tuple[P, ...]:
        """Points that define this cap."""
        return (self.tip, self.left, self.right)


class DiamondCap(NamedTuple):
    """Diamond cap, in polygon order."""

    tip: P
    left: P
    rear: P
    right: P

    @property
    def points(self) -> tuple[P, ...]:
        """Points that define this cap."""
        return (self.tip, self.left, self.rear, self.right)


class CrowfootCap(NamedTuple):
    """Crowfoot cap: the base point on the shaft and two flank points."""

    base: P
    left: P
    right: P

    @property
    def points(self) -> tuple[P, ...]:
        """Points that define this cap."""
        return (self.base, self.left, self.right)


ArrowheadGeometry: TypeAlias = Union[
    CircleCap, BarCap, TriangleCap, DiamondCap, CrowfootCap
]


def cap_length(
    kind: Arrowhead, stroke_width: float, segment_length: float
) -> float:
    """Length of the cap measured back from the tip along the shaft."""
    size_multiplier = 1.0 + (stroke_width - 1.0) * 0.3
    return min(
        kind.base_size * size_multiplier,
        segment_length * kind.length_fraction,
    )


def arrowhead_geometry(
    tail: TPoint,
    tip: TPoint,
    kind: Arrowhead | str,
    stroke_width: float,
    segment_length: float,
) -> ArrowheadGeometry | None:
    """Compute the cap geometry for an arrowhead.

    Args:
        tail: A point on the shaft behind the tip. Only the
            direction from `tail` to `tip` is used.
        tip: The shaft end point.
        kind: Arrowhead kind (an Arrowhead or its tag string).
        stroke_width: Shaft stroke width.
        segment_length: Length of the last shaft segment.

    Returns:
        The cap geometry, or None if the tail and tip coincide
        or the kind is unknown.
    """
    kind = Arrowhead(kind)
    tail = P(tail)
    tip = P(tip)
    d = tip - tail
    dist = math.hypot(d[0], d[1])
    if dist == 0:
        return None
    if kind == Arrowhead.UNKNOWN:
        return None

    n = d / dist
    size = cap_length(kind, stroke_width, segment_length)
    base = tip - n * size
    angle = math.radians(kind.angle)

    if kind.is_circle:
        return CircleCap(tip, base.distance(tip) + stroke_width - 2.0)
    if kind.is_crowfoot:
        return CrowfootCap(
            base,
            tip.rotate(-angle, origin=base),
            tip.rotate(angle, origin=base),
        )

    if kind == Arrowhead.ARROW:
        return TriangleCap(
            tip,
            base.rotate(-angle, origin=tip),
            base.rotate(angle, origin=tip),
        )

    # Flanks are anchored at the base point, measured from the normal
    normal = P(-n[1], n[0])
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    left = base + (normal * cos_a - n * sin_a) * size
    right = base + (normal * cos_a + n * sin_a) * size
    if kind == Arrowhead.BAR:
        return BarCap(left, right)
    if kind.is_diamond:
        return DiamondCap(tip, left, tip - n * (size * 2), right)
    return TriangleCap(tip, left, right)


class JitteredCap(NamedTuple):
    """Second, hand-drawn pass of an arrowhead cap.

    Attributes:
        geometry: Cap geometry computed from the shifted shaft.
        offset: The (dx, dy) shift applied to the tail and tip.
        width_scale: Random stroke width factor used for sizing.
    """

    geometry: ArrowheadGeometry
    offset: P
    width_scale: float


def cap_seed(seed: int, position: str) -> int:
    """Seed of the jittered cap pass for the 'start' or 'end' cap."""
    if position == 'start':
        return _rng.wrap_seed(seed ^ START_CAP_SEED_MIX)
    return seed


def jittered_arrowhead(
    tail: TPoint,
    tip: TPoint,
    kind: Arrowhead | str,
    stroke_width: float,
    segment_length: float,
    rng: LcgRng,
    roughness: float,
) -> JitteredCap | None:
    """Compute a jittered copy of an arrowhead cap.

    The tail and tip are shifted by the same random offset and the
    cap is sized with a slightly perturbed stroke width. Random
    values are drawn in the order dx, dy, width factor.

    Returns:
        The jittered cap, or None if roughness is not positive,
        the kind is a dot, or the geometry is degenerate.
    """
    kind = Arrowhead(kind)
    if roughness <= 0 or kind == Arrowhead.DOT:
        return None
    jitter = (0.6 + 0.2 * stroke_width) * roughness
    offset = P(rng.range(-jitter, jitter), rng.range(-jitter, jitter))
    width_scale = rng.range(0.95, 1.05)
    geometry = arrowhead_geometry(
        P(tail) + offset,
        P(tip) + offset,
        kind,
        stroke_width * width_scale,
        segment_length,
    )
    if geometry is None:
        return None
    return JitteredCap(geometry, offset, width_scale)
