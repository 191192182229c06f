#!/usr/bin/env python3
"""
OKLCH color primitive: conversion, parsing, distance, interpolation, formatting.

Conversions operate on numpy arrays so whole ramp tables convert in one pass.
Single colors are carried around as immutable Oklch values.
"""

import math
import re
from dataclasses import dataclass

import numpy as np
from PIL import ImageColor


# =============================================================================
# Constants
# =============================================================================

ACHROMATIC_EPSILON = 1e-6  # Below this chroma, hue is meaningless
CHROMA_REFERENCE = 0.4  # 100% chroma / a / b in CSS oklch() and oklab()
CSS_PRECISION = 3  # Decimal places for CSS channel values

# Ottosson's OKLab matrices (linear sRGB -> LMS -> OKLab and back)
_RGB_TO_LMS = np.array([
    [0.4122214708, 0.5363325363, 0.0514459929],
    [0.2119034982, 0.6806995451, 0.1073969566],
    [0.0883024619, 0.2817188376, 0.6299787005],
])
_LMS_TO_LAB = np.array([
    [0.2104542553, 0.7936177850, -0.0040720468],
    [1.9779984951, -2.4285922050, 0.4505937099],
    [0.0259040371, 0.7827717662, -0.8086757660],
])
_LAB_TO_LMS = np.array([
    [1.0, 0.3963377774, 0.2158037573],
    [1.0, -0.1055613458, -0.0638541728],
    [1.0, -0.0894841775, -1.2914855480],
])
_LMS_TO_RGB = np.array([
    [4.0767416621, -3.3077115913, 0.2309699292],
    [-1.2684380046, 2.6097574011, -0.3413193965],
    [-0.0041960863, -0.7034186147, 1.7076147010],
])


class InvalidColorError(ValueError):
    """Raised when a color string cannot be parsed."""


# =============================================================================
# Color Conversion
# =============================================================================

def srgb_to_linear(rgb: np.ndarray) -> np.ndarray:
    """Apply the inverse sRGB transfer function to 0-1 values."""
    mask = rgb > 0.04045
    return np.where(mask, ((np.clip(rgb, 0, None) + 0.055) / 1.055) ** 2.4, rgb / 12.92)


def linear_to_srgb(rgb: np.ndarray) -> np.ndarray:
    """Apply the sRGB transfer function to linear 0-1 values."""
    mask = rgb > 0.0031308
    return np.where(mask, 1.055 * np.power(np.clip(rgb, 0, None), 1/2.4) - 0.055, 12.92 * rgb)


def rgb_to_oklab(rgb: np.ndarray) -> np.ndarray:
    """Convert RGB array (0-255) to OKLab."""
    rgb = np.asarray(rgb, dtype=np.float64).reshape(-1, 3)
    rgb_linear = srgb_to_linear(rgb / 255.0)

    lms = rgb_linear @ _RGB_TO_LMS.T
    lms_ = np.cbrt(lms)

    return lms_ @ _LMS_TO_LAB.T


def oklab_to_rgb(lab: np.ndarray) -> np.ndarray:
    """Convert OKLab array to RGB (0-255), clipping out-of-gamut values."""
    lab = np.asarray(lab, dtype=np.float64).reshape(-1, 3)

    lms_ = lab @ _LAB_TO_LMS.T
    lms = lms_ ** 3
    rgb_linear = lms @ _LMS_TO_RGB.T

    rgb = linear_to_srgb(rgb_linear)
    return np.clip(np.round(rgb * 255), 0, 255).astype(np.uint8)


def oklab_to_oklch(lab: np.ndarray) -> np.ndarray:
    """Convert OKLab array to OKLCH (hue in degrees, 0-360)."""
    lab = np.asarray(lab, dtype=np.float64).reshape(-1, 3)
    L, a, b = lab[:, 0], lab[:, 1], lab[:, 2]

    C = np.sqrt(a**2 + b**2)
    H = np.degrees(np.arctan2(b, a)) % 360

    # Hue of a gray is noise from the matrix round trip
    achromatic = C < ACHROMATIC_EPSILON
    C = np.where(achromatic, 0.0, C)
    H = np.where(achromatic, 0.0, H)

    return np.column_stack([L, C, H])


def oklch_to_oklab(lch: np.ndarray) -> np.ndarray:
    """Convert OKLCH array to OKLab."""
    lch = np.asarray(lch, dtype=np.float64).reshape(-1, 3)
    L, C, H = lch[:, 0], lch[:, 1], np.radians(lch[:, 2])
    return np.column_stack([L, C * np.cos(H), C * np.sin(H)])


def rgb_to_oklch(rgb: np.ndarray) -> np.ndarray:
    """Convert RGB array (0-255) to OKLCH."""
    return oklab_to_oklch(rgb_to_oklab(rgb))


# =============================================================================
# Color Value
# =============================================================================

@dataclass(frozen=True)
class Oklch:
    """A color in OKLCH. Absent chroma and hue are explicit zeros."""
    l: float  # Lightness, 0-1
    c: float = 0.0  # Chroma, >= 0
    h: float = 0.0  # Hue in degrees, 0-360
    alpha: float = 1.0

    def __post_init__(self):
        h = self.h % 360
        # Tiny negative hues wrap to exactly 360.0 under float modulo
        object.__setattr__(self, 'h', 0.0 if h >= 360 else h)

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int, alpha: float = 1.0) -> 'Oklch':
        L, C, H = rgb_to_oklch(np.array([r, g, b]))[0]
        return cls(l=float(L), c=float(C), h=float(H), alpha=alpha)

    @classmethod
    def from_array(cls, lch: np.ndarray, alpha: float = 1.0) -> 'Oklch':
        return cls(l=float(lch[0]), c=float(lch[1]), h=float(lch[2]), alpha=alpha)

    def to_array(self) -> np.ndarray:
        return np.array([self.l, self.c, self.h])

    @property
    def is_achromatic(self) -> bool:
        return self.c < ACHROMATIC_EPSILON


# =============================================================================
# Parsing
# =============================================================================

_NUMBER = r'[+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?'
_CHANNEL = rf'(?:{_NUMBER}%?|none)'
_FUNCTIONAL_RE = re.compile(
    rf'^(oklch|oklab)\(\s*({_CHANNEL})\s+({_CHANNEL})\s+({_CHANNEL}(?:deg)?)'
    rf'\s*(?:/\s*({_CHANNEL})\s*)?\)$',
    re.IGNORECASE,
)
_ALPHA = rf'(?:\s*/\s*({_CHANNEL})\s*)?'
_RGB_SPACE_RE = re.compile(
    rf'^rgba?\(\s*({_CHANNEL})\s+({_CHANNEL})\s+({_CHANNEL})\s*{_ALPHA}\)$',
    re.IGNORECASE,
)
_HSL_SPACE_RE = re.compile(
    rf'^hsla?\(\s*({_CHANNEL}(?:deg)?)\s+({_CHANNEL})\s+({_CHANNEL})\s*{_ALPHA}\)$',
    re.IGNORECASE,
)


def _parse_channel(token: str, percent_scale: float) -> float:
    """Parse one functional-notation channel; 'none' is zero."""
    token = token.lower()
    if token == 'none':
        return 0.0
    if token.endswith('%'):
        return float(token[:-1]) / 100 * percent_scale
    return float(token)


def _parse_functional(match: re.Match) -> Oklch:
    space = match.group(1).lower()
    L = _parse_channel(match.group(2), 1.0)
    alpha = _parse_channel(match.group(5), 1.0) if match.group(5) else 1.0
    alpha = min(1.0, max(0.0, alpha))

    if space == 'oklch':
        C = max(0.0, _parse_channel(match.group(3), CHROMA_REFERENCE))
        hue_token = match.group(4).lower()
        if hue_token.endswith('deg'):
            hue_token = hue_token[:-3]
        H = _parse_channel(hue_token, 360.0) % 360
        return Oklch(l=L, c=C, h=H, alpha=alpha)

    a = _parse_channel(match.group(3), CHROMA_REFERENCE)
    b = _parse_channel(match.group(4), CHROMA_REFERENCE)
    return Oklch.from_array(oklab_to_oklch(np.array([L, a, b]))[0], alpha=alpha)


def _parse_alpha(token) -> float:
    return min(1.0, max(0.0, _parse_channel(token, 1.0))) if token else 1.0


def _parse_rgb_space(match: re.Match) -> Oklch:
    """rgb(r g b / a) with 0-255 or percentage channels."""
    r, g, b = (min(255.0, max(0.0, _parse_channel(match.group(i), 255.0))) for i in (1, 2, 3))
    return Oklch.from_rgb(r, g, b, alpha=_parse_alpha(match.group(4)))


def _parse_hsl_space(match: re.Match) -> Oklch:
    """hsl(h s l / a), handed to Pillow in its comma-separated form."""
    hue_token = match.group(1).lower()
    if hue_token.endswith('deg'):
        hue_token = hue_token[:-3]
    h = _parse_channel(hue_token, 360.0) % 360
    s, l = (min(100.0, max(0.0, _parse_channel(match.group(i), 100.0))) for i in (2, 3))

    r, g, b = ImageColor.getrgb(f"hsl({h:.6f}, {s:.6f}%, {l:.6f}%)")[:3]
    return Oklch.from_rgb(r, g, b, alpha=_parse_alpha(match.group(4)))


def parse_color(text: str) -> Oklch:
    """
    Parse a CSS-style color string into OKLCH.

    Accepts hex, named colors (plus 'transparent'), rgb()/hsl()/hsv() (via
    Pillow's ImageColor, in comma or space-separated form) as well as
    oklch() and oklab().

    Raises:
        InvalidColorError: If the text is not a recognizable color
    """
    if not isinstance(text, str):
        raise InvalidColorError(f"Invalid color: {text!r}")
    stripped = text.strip()
    if not stripped:
        raise InvalidColorError("Invalid color: empty string")

    match = _FUNCTIONAL_RE.match(stripped)
    if match:
        return _parse_functional(match)

    match = _RGB_SPACE_RE.match(stripped)
    if match:
        return _parse_rgb_space(match)

    match = _HSL_SPACE_RE.match(stripped)
    if match:
        return _parse_hsl_space(match)

    if stripped.lower() == 'transparent':
        return Oklch(l=0.0, alpha=0.0)

    try:
        rgba = ImageColor.getrgb(stripped)
    except ValueError:
        raise InvalidColorError(f"Invalid color: {text}")

    alpha = rgba[3] / 255 if len(rgba) == 4 else 1.0
    return Oklch.from_rgb(rgba[0], rgba[1], rgba[2], alpha=alpha)


# =============================================================================
# Color Utilities
# =============================================================================

def signed_hue_difference(hue1: float, hue2: float) -> float:
    """Shortest signed angle (-180, 180] taking hue1 to hue2."""
    diff = (hue2 - hue1) % 360
    return diff - 360 if diff > 180 else diff


def circular_hue_distance(hue1: float, hue2: float) -> float:
    """Compute minimum angular distance between two hues (0-180)."""
    diff = abs(hue1 - hue2)
    return min(diff, 360 - diff)


def difference_euclidean(a: Oklch, b: Oklch) -> float:
    """
    Perceptual distance between two colors in OKLCH.

    The hue term is weighted by chroma, 2*sqrt(c1*c2)*sin(dh/2), so hue
    differences between grays contribute nothing.
    """
    dL = a.l - b.l
    dC = a.c - b.c
    dh = math.radians(signed_hue_difference(a.h, b.h))
    dH = 2 * math.sqrt(a.c * b.c) * math.sin(dh / 2)
    return math.sqrt(dL**2 + dC**2 + dH**2)


def interpolate(a: Oklch, b: Oklch, t: float) -> Oklch:
    """Interpolate between two colors in OKLCH along the shorter hue arc."""
    if a.is_achromatic and not b.is_achromatic:
        h = b.h
    elif b.is_achromatic and not a.is_achromatic:
        h = a.h
    else:
        h = (a.h + signed_hue_difference(a.h, b.h) * t) % 360

    return Oklch(
        l=a.l + (b.l - a.l) * t,
        c=a.c + (b.c - a.c) * t,
        h=h,
        alpha=a.alpha + (b.alpha - a.alpha) * t,
    )


# =============================================================================
# Formatting
# =============================================================================

def to_rgb_tuple(color: Oklch) -> tuple:
    """Convert to an (r, g, b) tuple, clamped to the sRGB cube."""
    rgb = oklab_to_rgb(oklch_to_oklab(color.to_array()))[0]
    return (int(rgb[0]), int(rgb[1]), int(rgb[2]))


def to_hex(color: Oklch) -> str:
    """Convert to hex string; alpha below 1 adds a fourth byte."""
    r, g, b = to_rgb_tuple(color)
    if color.alpha < 1:
        return f"#{r:02x}{g:02x}{b:02x}{round(color.alpha * 255):02x}"
    return f"#{r:02x}{g:02x}{b:02x}"


def _fmt(value: float, precision: int) -> str:
    rounded = round(value, precision)
    if rounded == 0:
        rounded = 0.0  # No "-0"
    return f"{rounded:.{precision}f}".rstrip('0').rstrip('.')


def _css_alpha(color: Oklch, precision: int) -> str:
    return f" / {_fmt(color.alpha, precision)}" if color.alpha < 1 else ""


def to_css_oklch(color: Oklch, precision: int = CSS_PRECISION) -> str:
    """Format as CSS oklch()."""
    return (f"oklch({_fmt(color.l, precision)} {_fmt(color.c, precision)} "
            f"{_fmt(color.h, precision)}{_css_alpha(color, precision)})")


def to_css_oklab(color: Oklch, precision: int = CSS_PRECISION) -> str:
    """Format as CSS oklab()."""
    L, a, b = oklch_to_oklab(color.to_array())[0]
    return (f"oklab({_fmt(L, precision)} {_fmt(a, precision)} "
            f"{_fmt(b, precision)}{_css_alpha(color, precision)})")
