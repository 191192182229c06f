#!/usr/bin/env python3
"""Generate a shade scale for one or more colors and print it as CSS."""

import argparse
import logging
import sys
from pathlib import Path

from ditto_tones import ConfigError, DittoTones, InvalidColorError
from ramp_sets import DEFAULT_RAMP_SET, available_ramp_sets, resolve_ramps
from render import COLOR_FORMATS, render, render_html, render_swatches, sanitize_name, to_css


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Generate a full shade scale from a color by matching it to reference ramps.'
    )
    parser.add_argument(
        'colors',
        nargs='+',
        help='Colors to generate scales for (hex, named, rgb(), hsl(), oklch(), oklab())'
    )
    parser.add_argument(
        '--ramps', '-r',
        default=DEFAULT_RAMP_SET,
        help=f"Built-in ramp set ({', '.join(available_ramp_sets())}) or a JSON/YAML ramp table"
    )
    parser.add_argument(
        '--name', '-n',
        default='color',
        help='CSS variable prefix (default: color; numbered when several colors are given)'
    )
    parser.add_argument(
        '--format', '-f',
        choices=COLOR_FORMATS,
        default='oklch',
        help='Color format for CSS values'
    )
    parser.add_argument(
        '--html',
        nargs='?',
        const=True,
        default=None,
        help='Write HTML report. Optionally specify path, otherwise auto-names from --name.'
    )
    parser.add_argument(
        '--png',
        nargs='?',
        const=True,
        default=None,
        help='Write PNG swatch strip. Optionally specify path, otherwise auto-names from --name.'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log matching decisions'
    )
    return parser


def _output_path(option, name: str, suffix: str, index: int, total: int) -> Path:
    """Explicit path (numbered when several colors share it) or <name>-palette<suffix>."""
    if option is True:
        return Path(f"{name}-palette{suffix}")
    path = Path(option)
    if total > 1:
        path = path.with_name(f"{path.stem}-{index}{path.suffix}")
    return path


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        ditto = DittoTones(resolve_ramps(args.ramps))
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error loading ramps: {e}", file=sys.stderr)
        return 2

    total = len(args.colors)
    for i, color in enumerate(args.colors, 1):
        name = sanitize_name(args.name if total == 1 else f"{args.name}-{i}")

        try:
            result = ditto.generate(color)
        except InvalidColorError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        if i > 1:
            print()
        print(render(result, name))
        print()
        print(to_css(result, name, args.format))

        try:
            if args.html:
                output_path = _output_path(args.html, name, '.html', i, total)
                output_path.write_text(render_html(result, ditto.registry, name, args.format))
                print(f"\nWrote: {output_path}")
            if args.png:
                output_path = _output_path(args.png, name, '.png', i, total)
                render_swatches(result, str(output_path))
                print(f"\nWrote: {output_path}")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
