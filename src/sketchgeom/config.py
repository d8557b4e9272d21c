"""Render options and TOML configuration loading.

Options are read from the ``[render]`` table of a TOML file::

    [render]
    precision = 3
    hachure_gap = 6.0
    background = "#ffffff"
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from .style import ColorError, parse_color_strict

if TYPE_CHECKING:
    import pathlib

    from typing_extensions import Self

logger = logging.getLogger(__name__)

CONFIG_TABLE = 'render'


class ConfigError(ValueError):
    """Invalid configuration."""


@dataclasses.dataclass(frozen=True)
class RenderOptions:
    """Presentation and tuning values used when rendering elements.

    Attributes:
        precision: Digits after the decimal point in path descriptions.
        tension: Catmull-Rom tension of curved shafts and ellipses.
        elbow_corner_radius: Maximum corner radius of elbow arrows.
        hachure_gap: Distance between hachure lines.
        hachure_angle: Hachure line angle in degrees.
        hachure_stroke_width: Stroke width of hachure lines.
        background: Document background color or None.
        outline_fill: Fill color of outline arrowheads.
    """

    precision: int = 2
    tension: float = 0.5
    elbow_corner_radius: float = 16.0
    hachure_gap: float = 4.0
    hachure_angle: float = -45.0
    hachure_stroke_width: float = 1.0
    background: str | None = None
    outline_fill: str = '#ffffff'

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Self:
        """Create options from a dict of option values.

        Integers are accepted for float options.

        Raises:
            ConfigError: On unknown keys, wrong value types,
                or invalid colors.
        """
        fields = {f.name: f for f in dataclasses.fields(cls)}
        values: dict[str, Any] = {}
        for key, value in d.items():
            name = key.replace('-', '_')
            if name not in fields:
                raise ConfigError(f'Unknown render option: {key!r}')
            values[name] = _check_value(name, value)
        if values.get('precision', 1) < 1:
            raise ConfigError('precision must be at least 1')
        try:
            for name in ('background', 'outline_fill'):
                if values.get(name) is not None:
                    parse_color_strict(values[name])
        except ColorError as e:
            raise ConfigError(f'Invalid {name}: {e}') from e
        return cls(**values)


def _check_value(name: str, value: object) -> Any:  # noqa: ANN401
    if isinstance(value, bool):
        raise ConfigError(
            f'{name} must be a number or string, got {value!r}'
        )
    if name == 'precision':
        if not isinstance(value, int):
            raise ConfigError(
                f'precision must be an integer, got {value!r}'
            )
        return value
    if name in {'background', 'outline_fill'}:
        if not isinstance(value, str):
            raise ConfigError(f'{name} must be a string, got {value!r}')
        return value
    if not isinstance(value, (int, float)):
        raise ConfigError(f'{name} must be a number, got {value!r}')
    return float(value)


def load_options(path: pathlib.Path) -> RenderOptions:
    """Load render options from the [render] table of a TOML file.

    A file without a [render] table gives the default options.

    Raises:
        ConfigError: If the file cannot be read or parsed, or the
            options are invalid.
    """
    try:
        with path.open('rb') as fp:
            data = tomllib.load(fp)
    except OSError as e:
        raise ConfigError(f'Cannot read {path}: {e}') from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f'Invalid TOML in {path}: {e}') from e

    table = data.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigError(f'[{CONFIG_TABLE}] must be a table in {path}')
    logger.debug('Loaded render options from %s: %s', path, table)
    return RenderOptions.from_dict(table)
