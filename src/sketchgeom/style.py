"""Color and stroke/fill style decoding."""

from __future__ import annotations

import enum
import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing_extensions import TypeAlias

logger = logging.getLogger(__name__)

TRGBA: TypeAlias = tuple[int, int, int, int]

TRANSPARENT: TRGBA = (0, 0, 0, 0)
BLACK: TRGBA = (0, 0, 0, 255)

_HEX_RGB_LEN = 6
_HEX_RGBA_LEN = 8
_RE_HEX_BYTE = re.compile(r'[0-9a-f]{2}', flags=(re.IGNORECASE | re.ASCII))
_CHANNELS = 'RGBA'


class ColorError(ValueError):
    """Invalid color string."""


def is_transparent(color: str) -> bool:
    """True if `color` is 'transparent' (any case) or empty."""
    return not color or color.lower() == 'transparent'


def parse_color_strict(color: str) -> TRGBA:
    """Parse a hex color string.

    Accepts 'transparent' and 6 (RRGGBB) or 8 (RRGGBBAA) hex digits
    with an optional '#' prefix. Alpha defaults to 255.

    Raises:
        ColorError: If the color cannot be parsed.
    """
    if color.lower() == 'transparent':
        return TRANSPARENT
    hex_color = color.strip()
    hex_color = hex_color.removeprefix('#')
    if len(hex_color) not in {_HEX_RGB_LEN, _HEX_RGBA_LEN}:
        raise ColorError(
            'Expected 6 or 8 hex digits (RRGGBB or RRGGBBAA),'
            f' got {len(hex_color)}'
        )
    channels = [255, 255, 255, 255]
    for i in range(0, len(hex_color), 2):
        byte = hex_color[i : i + 2]
        if not _RE_HEX_BYTE.fullmatch(byte):
            raise ColorError(
                f'Invalid hex digit in {_CHANNELS[i // 2]} component'
            )
        channels[i // 2] = int(byte, 16)
    return (channels[0], channels[1], channels[2], channels[3])


def parse_color(color: str | None) -> TRGBA:
    """Parse a hex color string, falling back to a default.

    Never raises. Transparent or empty colors give (0, 0, 0, 0)
    and anything that cannot be parsed gives opaque black.
    """
    if color is None or is_transparent(color):
        return TRANSPARENT
    try:
        return parse_color_strict(color)
    except ColorError:
        logger.debug('Invalid color: %r', color)
        return BLACK


def has_stroke(color: str | None, width: float) -> bool:
    """True if a stroke with this color and width is visible."""
    return color is not None and not is_transparent(color) and width > 0


def has_fill(color: str | None) -> bool:
    """True if a fill with this color is visible."""
    return color is not None and not is_transparent(color)


def rgba_to_css(rgba: TRGBA) -> tuple[str, float]:
    """Convert RGBA bytes to a CSS hex color and an opacity (0.0 - 1.0)."""
    r, g, b, a = rgba
    return f'#{r:02x}{g:02x}{b:02x}', a / 255


class StrokeStyle(str, enum.Enum):
    """Stroke dash styles. Unknown tags are drawn solid."""

    SOLID = 'solid'
    DASHED = 'dashed'
    DOTTED = 'dotted'

    @classmethod
    def _missing_(cls, value: object) -> StrokeStyle:
        logger.debug('Unknown stroke style: %r', value)
        return cls.SOLID

    def dash_array(self, stroke_width: float) -> list[float] | None:
        """Dash pattern for this style, or None for a solid stroke."""
        if self == StrokeStyle.DASHED:
            return [8.0, 8.0 + max(stroke_width, 0.0)]
        if self == StrokeStyle.DOTTED:
            return [1.5, 6.0 + max(stroke_width, 0.0)]
        return None


def dotted_cap_dash_array(stroke_width: float) -> list[float]:
    """Dotted pattern used for arrowhead caps of dotted arrows."""
    return [1.5, 6.0 + max(stroke_width - 1.0, 0.0)]


def dasharray_attr(dash_array: list[float] | None) -> str:
    """Format a dash array as a stroke-dasharray value, e.g. '8,9'."""
    if not dash_array:
        return 'none'
    return ','.join(f'{v:g}' for v in dash_array)


class FillStyle(str, enum.Enum):
    """Fill styles. Empty tags are solid, unknown tags are hachure."""

    HACHURE = 'hachure'
    CROSS_HATCH = 'cross-hatch'
    SOLID = 'solid'

    @classmethod
    def _missing_(cls, value: object) -> FillStyle:
        if not value:
            return cls.SOLID
        logger.debug('Unknown fill style: %r', value)
        return cls.HACHURE
