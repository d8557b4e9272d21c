"""Command line interface: Excalidraw JSON in, SVG out."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import pathlib
import sys
from typing import Any

from . import __version__
from .config import ConfigError, RenderOptions, load_options
from .element import ElementError, elements_from_document
from .style import ColorError, parse_color_strict
from .svg import SVGError, render_svg

logger = logging.getLogger(__name__)


def errormsg(
    *args: Any,  # noqa: ANN401
    exit_status: int | None = None,
    **kwargs: Any,  # noqa: ANN401
) -> None:
    """Write an error msg to stderr and optionally exit."""
    print(*args, file=sys.stderr, **kwargs)
    if exit_status is not None:
        sys.exit(exit_status)


def background_color(value: str) -> str:
    """Argparse type for a hex color or 'transparent'."""
    try:
        parse_color_strict(value)
    except ColorError as e:
        raise argparse.ArgumentTypeError(
            f'Invalid color {value!r}: {e}'
        ) from e
    return value


def create_parser() -> argparse.ArgumentParser:
    """Create the command line option parser."""
    parser = argparse.ArgumentParser(
        prog='sketchgeom',
        description='Render an Excalidraw document as a hand-drawn SVG.',
    )
    parser.add_argument(
        'input_file',
        nargs='?',
        type=pathlib.Path,
        help='Path name of input file. Default is stdin.',
    )
    parser.add_argument(
        '--output-file',
        '-o',
        type=pathlib.Path,
        help='Output file. Default is stdout.',
    )
    parser.add_argument(
        '--background',
        type=background_color,
        default=None,
        help='Background color (RRGGBB or RRGGBBAA).',
    )
    parser.add_argument(
        '--config',
        type=pathlib.Path,
        default=None,
        help='TOML file with a [render] options table.',
    )
    parser.add_argument(
        '--precision',
        type=int,
        default=None,
        help='Digits after the decimal point in path data.',
    )
    parser.add_argument(
        '--pretty-print',
        action='store_true',
        help='Indent the SVG output.',
    )
    parser.add_argument('--log-level', default='WARNING', help='Log level')
    parser.add_argument(
        '--log-filename',
        default=None,
        help='Full pathname of log file. Default is stderr.',
    )
    parser.add_argument(
        '--version', action='version', version=f'%(prog)s {__version__}'
    )
    return parser


def render_options(options: argparse.Namespace) -> RenderOptions:
    """Combine the config file and command line options.

    Command line values override values from the config file.

    Raises:
        ConfigError: If the config file or an option is invalid.
    """
    render_opts = (
        load_options(options.config) if options.config else RenderOptions()
    )
    overrides: dict[str, Any] = {}
    if options.background is not None:
        overrides['background'] = options.background
    if options.precision is not None:
        if options.precision < 1:
            raise ConfigError('precision must be at least 1')
        overrides['precision'] = options.precision
    if overrides:
        render_opts = dataclasses.replace(render_opts, **overrides)
    return render_opts


def read_document(input_file: pathlib.Path | None) -> dict[str, Any]:
    """Read a JSON document from a file or stdin."""
    if input_file:
        with input_file.open(encoding='utf8') as f:
            return json.load(f)
    return json.load(sys.stdin)


def main(argv: list[str] | None = None) -> int:
    """Run the command line interface.

    Args:
        argv: Command line arguments. Default is sys.argv[1:].

    Returns:
        Exit status.
    """
    options = create_parser().parse_args(argv)
    logging.basicConfig(
        filename=options.log_filename,
        level=options.log_level.upper(),
    )

    try:
        render_opts = render_options(options)
        document = read_document(options.input_file)
        elements = elements_from_document(document)
        logger.info('Read %d elements', len(elements))
        context = render_svg(elements, render_opts)
        if options.output_file:
            with options.output_file.open('w', encoding='utf8') as f:
                context.write_document(f, pretty_print=options.pretty_print)
        else:
            context.write_document(
                sys.stdout, pretty_print=options.pretty_print
            )
            sys.stdout.write('\n')
    except UnicodeDecodeError as e:
        errormsg(f'Cannot decode input as UTF-8: {e}', exit_status=1)
    except json.JSONDecodeError as e:
        errormsg(f'Invalid JSON: {e}', exit_status=1)
    except OSError as e:
        errormsg(str(e), exit_status=1)
    except (ElementError, ConfigError, ColorError, SVGError) as e:
        errormsg(str(e), exit_status=1)
    return 0


if __name__ == '__main__':
    sys.exit(main())
