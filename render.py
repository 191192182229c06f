#!/usr/bin/env python3
"""
Render generated scales: CSS custom properties, prose, HTML report, PNG swatches.
"""

import re
from html import escape

from PIL import Image, ImageDraw

from color_space import Oklch, to_css_oklab, to_css_oklch, to_hex, to_rgb_tuple
from ditto_tones import GenerateResult
from ramps import RampRegistry


COLOR_FORMATS = ('hex', 'oklch', 'oklab')


# =============================================================================
# Formatting
# =============================================================================

def format_color(color: Oklch, fmt: str = 'oklch') -> str:
    """Format a color as hex, oklch() or oklab()."""
    if fmt == 'hex':
        return to_hex(color)
    if fmt == 'oklch':
        return to_css_oklch(color)
    if fmt == 'oklab':
        return to_css_oklab(color)
    raise ValueError(f"Unknown color format: {fmt} (expected one of {', '.join(COLOR_FORMATS)})")


def sanitize_name(name: str) -> str:
    """Turn a free-form name into a CSS identifier fragment."""
    safe = re.sub(r'[^a-z0-9]+', '-', name.lower()).strip('-')
    return safe or 'color'


def sorted_shades(keys) -> list:
    """Numeric shade keys ascending by value, then any others in given order."""
    numeric, other = [], []
    for key in keys:
        try:
            numeric.append((float(key), key))
        except ValueError:
            other.append(key)
    return [key for _, key in sorted(numeric, key=lambda pair: pair[0])] + other


def describe_sources(result: GenerateResult) -> str:
    """e.g. 'blue (50%) + red (50%)'."""
    return ' + '.join(f"{s.name} ({s.weight * 100:.0f}%)" for s in result.sources)


def text_color_for_background(color: Oklch) -> str:
    """Return dark or light text color based on background lightness."""
    return "#18181b" if color.l > 0.6 else "#fafafa"


# =============================================================================
# CSS
# =============================================================================

def to_css(result: GenerateResult, name: str = 'color', fmt: str = 'oklch') -> str:
    """Render a scale as a :root block of CSS custom properties."""
    name = sanitize_name(name)
    lines = [f"  /* {name}: {result.method} from {describe_sources(result)} @ shade {result.matched_shade} */"]
    for shade in sorted_shades(result.scale):
        lines.append(f"  --{name}-{shade}: {format_color(result.scale[shade], fmt)};")
    return ":root {\n" + "\n".join(lines) + "\n}"


# =============================================================================
# Prose
# =============================================================================

def render(result: GenerateResult, name: str = 'color') -> str:
    """Render a result as a plain-text report."""
    lines = []

    lines.append(f"PALETTE: {sanitize_name(name)}")
    lines.append(f"Input: {to_hex(result.input_color)} / {to_css_oklch(result.input_color)}")
    lines.append(f"Method: {result.method} | Matched shade: {result.matched_shade}")
    lines.append("")

    lines.append("SOURCES:")
    for source in result.sources:
        lines.append(f"  - {source.name}: weight {source.weight * 100:.0f}% | distance {source.distance:.4f}")
    lines.append("")

    lines.append("SCALE:")
    for shade in sorted_shades(result.scale):
        color = result.scale[shade]
        marker = " *" if shade == result.matched_shade else ""
        lines.append(f"  {shade:>5}  {to_hex(color)}  {to_css_oklch(color)}{marker}")

    return "\n".join(lines)


# =============================================================================
# HTML
# =============================================================================

_CSS = """
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body {
            font-family: system-ui, -apple-system, sans-serif;
            background: #f5f5f5;
            color: #333;
            line-height: 1.5;
            padding: 2rem;
            max-width: 1100px;
            margin: 0 auto;
        }
        h1 { font-size: 1.5rem; margin-bottom: 0.5rem; }
        h2 { font-size: 1.2rem; margin: 2rem 0 1rem; border-bottom: 1px solid #ddd; padding-bottom: 0.5rem; }
        .meta { color: #666; font-size: 0.9rem; margin-bottom: 0.25rem; }
        .ramp-row { display: grid; grid-template-columns: 110px 1fr; gap: 1rem; align-items: center; margin: 0.75rem 0; }
        .ramp-label { font-size: 0.85rem; font-weight: 600; text-align: right; }
        .ramp-label .weight { font-weight: 400; color: #666; }
        .ramp-bar {
            display: flex;
            border-radius: 8px;
            overflow: hidden;
            box-shadow: 0 2px 8px rgba(0,0,0,0.1);
        }
        .ramp-bar .shade {
            flex: 1;
            height: 64px;
            display: flex;
            flex-direction: column;
            align-items: center;
            justify-content: flex-end;
            padding: 0.4rem 0.2rem;
            font-size: 0.65rem;
            font-weight: 500;
        }
        .ramp-bar.source .shade { height: 36px; }
        .ramp-bar .shade.matched { outline: 3px solid #111; outline-offset: -3px; }
        pre {
            background: #fff;
            border-radius: 8px;
            padding: 1rem;
            font-size: 0.8rem;
            overflow-x: auto;
            box-shadow: 0 1px 3px rgba(0,0,0,0.08);
        }
    """


def _ramp_bar(colors: dict, shades: list, matched_shade: str, css_class: str, show_values: bool) -> str:
    """One row of swatches, matched shade outlined."""
    cells = []
    for shade in shades:
        color = colors.get(shade)
        if color is None:
            continue
        hex_val = to_hex(color)
        matched = ' matched' if shade == matched_shade else ''
        label = f'{escape(shade)}<br>{hex_val}' if show_values else escape(shade)
        cells.append(
            f'<div class="shade{matched}" style="background:{to_css_oklch(color)}; '
            f'color:{text_color_for_background(color)}" title="{hex_val}">{label}</div>'
        )
    return f'<div class="ramp-bar {css_class}">{"".join(cells)}</div>'


def render_html(result: GenerateResult, registry: RampRegistry, name: str = 'color',
                fmt: str = 'oklch') -> str:
    """Render the generated scale next to the ramps it came from."""
    safe_name = escape(sanitize_name(name))
    shades = registry.shade_keys

    lines = [
        '<!DOCTYPE html>',
        '<html lang="en">',
        '<head>',
        '  <meta charset="UTF-8">',
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">',
        f'  <title>Palette: {safe_name}</title>',
        f'  <style>{_CSS}</style>',
        '</head>',
        '<body>',
    ]

    # Header
    lines.append(f'<h1>{safe_name}</h1>')
    lines.append(f'<p class="meta">Input: {to_hex(result.input_color)} · '
                 f'{escape(to_css_oklch(result.input_color))}</p>')
    lines.append(f'<p class="meta">Method: {escape(result.method)} · '
                 f'Matched shade: {escape(result.matched_shade)} · '
                 f'{escape(describe_sources(result))}</p>')

    # Sources around the generated scale
    lines.append('<h2>Scale</h2>')
    rows = [(source, registry.get_ramp(source.name)) for source in result.sources]

    def source_row(source, ramp):
        bar = _ramp_bar(ramp or {}, shades, result.matched_shade, 'source', False)
        return ('<div class="ramp-row">'
                f'<div class="ramp-label">{escape(source.name)}<br>'
                f'<span class="weight">{source.weight * 100:.0f}%</span></div>'
                f'{bar}</div>')

    if rows:
        lines.append(source_row(*rows[0]))
    generated_bar = _ramp_bar(result.scale, shades, result.matched_shade, 'generated', True)
    lines.append('<div class="ramp-row">'
                 f'<div class="ramp-label">{safe_name}</div>'
                 f'{generated_bar}</div>')
    for source, ramp in rows[1:]:
        lines.append(source_row(source, ramp))

    # CSS
    lines.append('<h2>CSS</h2>')
    lines.append(f'<pre>{escape(to_css(result, name, fmt))}</pre>')

    lines.append('</body>')
    lines.append('</html>')

    return '\n'.join(lines)


# =============================================================================
# Swatches
# =============================================================================

def render_swatches(result: GenerateResult, output_path: str) -> None:
    """Save a PNG strip of the generated scale with shade labels."""
    swatch_size = 80
    padding = 10
    text_height = 20

    shades = sorted_shades(result.scale)
    img_width = len(shades) * (swatch_size + padding) + padding
    img_height = swatch_size + text_height + 2 * padding

    img = Image.new('RGB', (img_width, img_height), (240, 240, 240))
    draw = ImageDraw.Draw(img)

    for i, shade in enumerate(shades):
        color = result.scale[shade]
        x = padding + i * (swatch_size + padding)
        y = padding

        draw.rectangle([x, y, x + swatch_size, y + swatch_size], fill=to_rgb_tuple(color))
        if shade == result.matched_shade:
            draw.rectangle([x, y, x + swatch_size, y + swatch_size], outline=(0, 0, 0), width=3)

        # Center label under swatch
        bbox = draw.textbbox((0, 0), shade)
        text_width = bbox[2] - bbox[0]
        draw.text((x + (swatch_size - text_width) // 2, y + swatch_size + 4), shade, fill=(0, 0, 0))

    img.save(output_path)
