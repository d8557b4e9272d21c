"""Read-only view of diagram elements.

Elements are parsed from Excalidraw JSON element dicts. Only the
fields used by the geometry engine are kept. Document angles are
in radians and are stored in degrees.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import math
from typing import TYPE_CHECKING, Any, NamedTuple

from geom2d import Box, P, transform2d

from . import style
from .arrowhead import Arrowhead
from .corners import Roundness, corner_radius
from .style import FillStyle, StrokeStyle

if TYPE_CHECKING:
    from collections.abc import Iterable

    from geom2d.transform2d import TMatrix
    from typing_extensions import Self

logger = logging.getLogger(__name__)

# Viewbox padding around the document content
VIEWBOX_PADDING = 40.0
# Viewbox of an empty document
DEFAULT_VIEWBOX_SIZE = (800.0, 600.0)

_REQUIRED_FIELDS = ('type', 'x', 'y', 'width', 'height')


class ElementError(ValueError):
    """Malformed document element."""


class ShapeKind(str, enum.Enum):
    """Element kinds."""

    RECTANGLE = 'rectangle'
    DIAMOND = 'diamond'
    ELLIPSE = 'ellipse'
    LINE = 'line'
    ARROW = 'arrow'
    TEXT = 'text'
    UNKNOWN = 'unknown'

    @classmethod
    def _missing_(cls, value: object) -> ShapeKind:
        logger.debug('Unknown element type: %r', value)
        return cls.UNKNOWN

    @property
    def is_linear(self) -> bool:
        """True for kinds defined by a point list."""
        return self in {ShapeKind.LINE, ShapeKind.ARROW}


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value: object) -> bool:
    if not _is_number(value):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # Integers too large for a float
        return False


def _number(
    d: dict[str, Any], key: str, default: float, element_id: str
) -> float:
    value = d.get(key)
    if value is None:
        return default
    if not _is_number(value):
        raise ElementError(
            f'Element {element_id!r}: field {key!r} must be a number,'
            f' got {value!r}'
        )
    if not _is_finite(value):
        raise ElementError(
            f'Element {element_id!r}: field {key!r} must be finite,'
            f' got {value!r}'
        )
    return float(value)


def _string(d: dict[str, Any], key: str, default: str) -> str:
    value = d.get(key)
    return value if isinstance(value, str) else default


def _points(value: object, element_id: str) -> tuple[P, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ElementError(
            f'Element {element_id!r}: field \'points\' must be a list'
        )
    points = []
    for point in value:
        if (
            not isinstance(point, (list, tuple))
            or len(point) < 2
            or not (_is_finite(point[0]) and _is_finite(point[1]))
        ):
            raise ElementError(
                f'Element {element_id!r}: invalid point {point!r}'
            )
        points.append(P(float(point[0]), float(point[1])))
    return tuple(points)


def _arrowhead(
    d: dict[str, Any], key: str, legacy_key: str
) -> Arrowhead | None:
    tag = d.get(key) or d.get(legacy_key)
    if not tag:
        return None
    return Arrowhead(tag)


@dataclasses.dataclass(frozen=True)
class Element:
    """Geometry view of one diagram element.

    Attributes:
        kind: Shape kind.
        x: Left of the bounding box (origin of `points`).
        y: Top of the bounding box.
        width: Bounding box width.
        height: Bounding box height.
        angle: Rotation about the box center in degrees.
        seed: Jitter seed.
        roughness: Jitter scale. Zero draws exact geometry.
        stroke_width: Stroke width.
        stroke_style: Solid, dashed or dotted.
        stroke_color: Stroke color string.
        background_color: Fill color string.
        fill_style: Fill pattern.
        opacity: Element opacity, 0 to 100.
        points: Line and arrow points relative to (x, y).
        roundness: Corner roundness descriptor.
        start_arrowhead: Cap at the first point.
        end_arrowhead: Cap at the last point.
        elbowed: Draw the shaft as an elbow arrow.
        is_deleted: Deleted elements are not drawn.
        element_id: Document id, used in messages.
    """

    kind: ShapeKind
    x: float
    y: float
    width: float
    height: float
    angle: float = 0.0
    seed: int = 0
    roughness: float = 1.0
    stroke_width: float = 1.0
    stroke_style: StrokeStyle = StrokeStyle.SOLID
    stroke_color: str = '#000000'
    background_color: str = 'transparent'
    fill_style: FillStyle = FillStyle.HACHURE
    opacity: float = 100.0
    points: tuple[P, ...] = ()
    roundness: Roundness | None = None
    start_arrowhead: Arrowhead | None = None
    end_arrowhead: Arrowhead | None = None
    elbowed: bool = False
    is_deleted: bool = False
    element_id: str = ''

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Self:
        """Create an Element from an Excalidraw element dict.

        Raises:
            ElementError: If a required field is missing or
                a field has the wrong type.
        """
        if not isinstance(d, dict):
            raise ElementError(f'Element must be an object, got {d!r}')
        element_id = _string(d, 'id', '')
        for key in _REQUIRED_FIELDS:
            if d.get(key) is None:
                raise ElementError(
                    f'Element {element_id!r}: missing field {key!r}'
                )
        if not isinstance(d['type'], str):
            raise ElementError(
                f'Element {element_id!r}: field \'type\' must be a string'
            )

        seed = _number(d, 'seed', 0, element_id)
        roundness = d.get('roundness')
        return cls(
            kind=ShapeKind(d['type']),
            x=_number(d, 'x', 0, element_id),
            y=_number(d, 'y', 0, element_id),
            width=_number(d, 'width', 0, element_id),
            height=_number(d, 'height', 0, element_id),
            angle=math.degrees(_number(d, 'angle', 0, element_id)),
            seed=int(seed),
            roughness=_number(d, 'roughness', 1, element_id),
            stroke_width=_number(d, 'strokeWidth', 1, element_id),
            stroke_style=StrokeStyle(_string(d, 'strokeStyle', 'solid')),
            stroke_color=_string(d, 'strokeColor', '#000000'),
            background_color=_string(d, 'backgroundColor', 'transparent'),
            fill_style=FillStyle(_string(d, 'fillStyle', 'hachure')),
            opacity=_number(d, 'opacity', 100, element_id),
            points=_points(d.get('points'), element_id),
            roundness=(
                Roundness.from_dict(roundness)
                if isinstance(roundness, dict)
                else None
            ),
            start_arrowhead=_arrowhead(d, 'startArrowhead', 'startArrowType'),
            end_arrowhead=_arrowhead(d, 'endArrowhead', 'endArrowType'),
            elbowed=bool(d.get('elbowed', False)),
            is_deleted=bool(d.get('isDeleted', False)),
            element_id=element_id,
        )

    @property
    def center(self) -> P:
        """Center of the bounding box."""
        return P(self.x + self.width / 2, self.y + self.height / 2)

    @property
    def bounds(self) -> Box:
        """Unrotated bounding box."""
        return Box(
            (self.x, self.y), (self.x + self.width, self.y + self.height)
        )

    @property
    def absolute_points(self) -> list[P]:
        """Line and arrow points in document coordinates."""
        origin = P(self.x, self.y)
        return [origin + p for p in self.points]

    @property
    def transform(self) -> TMatrix | None:
        """Rotation about the element center, or None if not rotated."""
        if self.angle == 0:
            return None
        return transform2d.matrix_rotate(
            math.radians(self.angle), origin=self.center
        )

    @property
    def corner_radius(self) -> float:
        """Corner radius of a rectangle-like element."""
        return corner_radius(min(self.width, self.height), self.roundness)

    @property
    def has_stroke(self) -> bool:
        """True if the outline is visible."""
        return style.has_stroke(self.stroke_color, self.stroke_width)

    @property
    def has_fill(self) -> bool:
        """True if the interior is filled."""
        return style.has_fill(self.background_color)

    @property
    def alpha(self) -> float:
        """Element opacity as a 0.0 - 1.0 multiplier."""
        return min(max(self.opacity / 100, 0.0), 1.0)


class ViewBox(NamedTuple):
    """Document view box."""

    min_x: float
    min_y: float
    width: float
    height: float


def calculate_viewbox(elements: Iterable[Element]) -> ViewBox:
    """The union of live element boxes padded by 40 units.

    Deleted elements are ignored. A document with no live
    elements gets a default 800 x 600 view box at the origin.
    """
    box: Box | None = None
    for element in elements:
        if element.is_deleted:
            continue
        box = element.bounds if box is None else box.union(element.bounds)
    if box is None:
        return ViewBox(0.0, 0.0, *DEFAULT_VIEWBOX_SIZE)
    return ViewBox(
        box.xmin - VIEWBOX_PADDING,
        box.ymin - VIEWBOX_PADDING,
        box.width + VIEWBOX_PADDING * 2,
        box.height + VIEWBOX_PADDING * 2,
    )


def elements_from_document(document: dict[str, Any]) -> list[Element]:
    """Parse the element list of an Excalidraw document.

    Raises:
        ElementError: If the document has no element list or
            an element is malformed.
    """
    if not isinstance(document, dict):
        raise ElementError('Document must be a JSON object')
    elements = document.get('elements')
    if not isinstance(elements, list):
        raise ElementError('Document has no \'elements\' list')
    return [Element.from_dict(d) for d in elements]
