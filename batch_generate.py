#!/usr/bin/env python3
"""Batch generate shade scales from a file of colors into one CSS file."""

import argparse
import logging
import sys
import time
from pathlib import Path

from color_space import parse_color
from ditto_tones import ConfigError, DittoTones, InvalidColorError
from ramp_sets import DEFAULT_RAMP_SET, resolve_ramps
from render import COLOR_FORMATS, describe_sources, sanitize_name, to_css


def _is_color(text: str) -> bool:
    try:
        parse_color(text)
    except InvalidColorError:
        return False
    return True


def read_color_lines(path: Path) -> list[tuple[str, str]]:
    """
    Read (name, color) pairs, one per line.

    A line is either `color` or `name color`: a line that parses as a color
    as a whole is unnamed, otherwise its first token is the name. Blank lines
    and comment lines ("# ..." with a space after the hash) are skipped;
    unnamed colors are numbered by position.
    """
    entries = []
    for line in path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line == '#' or line.startswith('# '):
            continue
        parts = line.split(None, 1)
        if len(parts) == 2 and not _is_color(line):
            entries.append((parts[0], parts[1]))
        else:
            entries.append((f"color-{len(entries) + 1}", line))
    return entries


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Batch generate shade scales and write them as CSS custom properties.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Text file with one color (or "name color") per line'
    )
    parser.add_argument(
        '--output', '-o',
        required=True,
        help='CSS file to write'
    )
    parser.add_argument(
        '--ramps', '-r',
        default=DEFAULT_RAMP_SET,
        help='Built-in ramp set name or a JSON/YAML ramp table'
    )
    parser.add_argument(
        '--format', '-f',
        choices=COLOR_FORMATS,
        default='oklch',
        help='Color format for CSS values'
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format='%(levelname)s %(name)s: %(message)s')

    input_path = Path(args.input)
    output_path = Path(args.output)

    if not input_path.is_file():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 2

    try:
        ditto = DittoTones(resolve_ramps(args.ramps))
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error loading ramps: {e}", file=sys.stderr)
        return 2

    entries = read_color_lines(input_path)
    if not entries:
        print(f"No colors found in {input_path}", file=sys.stderr)
        return 2

    total = len(entries)
    blocks = []
    failed = []

    batch_start = time.perf_counter()

    for i, (name, color) in enumerate(entries, 1):
        try:
            result = ditto.generate(color)
        except InvalidColorError as e:
            print(f"[{i}/{total}] {color} → ERROR: {e}", file=sys.stderr)
            failed.append((color, str(e)))
            continue

        blocks.append(to_css(result, sanitize_name(name), args.format))
        print(f"[{i}/{total}] {color} → {result.method} ({describe_sources(result)})")

    batch_elapsed = time.perf_counter() - batch_start

    if blocks:
        if output_path.exists():
            print(f"  Warning: Overwriting {output_path.name}", file=sys.stderr)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text("\n\n".join(blocks) + "\n")

    # Summary
    print()
    print(f"Completed: {len(blocks)}/{total} succeeded in {batch_elapsed:.2f}s")
    if failed:
        print(f"Failed ({len(failed)}):")
        for color, error in failed:
            print(f"  - {color}: {error}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
