#!/usr/bin/env python3
"""
Generate a full shade scale from one color by matching it against reference ramps.

Four steps: Match (or Neutral shortcut) → optional Blend → Build Scale → Result
The output scale passes through the input color at the matched shade and
follows the relative lightness/chroma shape of the closest ramp(s).
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

from color_space import (
    InvalidColorError,
    Oklch,
    circular_hue_distance,
    difference_euclidean,
    interpolate,
    parse_color,
)
from ramps import ConfigError, Ramp, RampRegistry

logger = logging.getLogger(__name__)

__all__ = [
    'ConfigError', 'InvalidColorError', 'DittoTones', 'GenerateResult', 'Match', 'Source',
    'find_closest', 'find_second_closest', 'find_closest_shade', 'blend_ramps',
    'build_scale', 'generate_neutral', 'EXACT_THRESHOLD', 'NEUTRAL_CHROMA',
]


# =============================================================================
# Constants
# =============================================================================

EXACT_THRESHOLD = 0.02  # Closest-match distance below which the match is exact
NEUTRAL_CHROMA = 0.02  # Chroma below which a color is treated as gray


# =============================================================================
# Result Types
# =============================================================================

@dataclass(frozen=True)
class Match:
    """A reference ramp + shade paired with its distance to the input."""
    ramp_name: str
    shade: str
    distance: float


@dataclass(frozen=True)
class Source:
    """A ramp that contributed to a generated scale."""
    name: str
    distance: float
    weight: float


@dataclass(frozen=True)
class GenerateResult:
    """A generated scale and how it was derived."""
    input_color: Oklch
    matched_shade: str
    method: str  # 'exact', 'single', 'blend'
    sources: tuple  # Source, weights sum to 1
    scale: dict  # shade key -> Oklch


# =============================================================================
# Match Finder
# =============================================================================

def find_closest(registry: RampRegistry, color: Oklch) -> Match:
    """Closest (ramp, shade) over the whole registry; first minimum wins ties."""
    best = Match(ramp_name='', shade='', distance=math.inf)
    for ramp_name, ramp in registry.items():
        for shade, ramp_color in ramp.items():
            if ramp_color is None:
                continue
            distance = difference_euclidean(color, ramp_color)
            if distance < best.distance:
                best = Match(ramp_name=ramp_name, shade=shade, distance=distance)
    return best


def find_second_closest(registry: RampRegistry, color: Oklch, matched_shade: str,
                        exclude_ramp: str, neutral_chroma: float = NEUTRAL_CHROMA) -> Optional[Match]:
    """
    Pick a second ramp to blend with, by hue compatibility at the matched shade.

    Only each ramp's color at matched_shade is considered, and near-gray
    candidates are skipped since they carry no hue. Selection is by smallest
    circular hue distance; the reported distance is the perceptual distance
    used later for blend weighting.

    Returns:
        The chosen Match, or None when no ramp qualifies
    """
    best, best_hue_distance = None, math.inf

    for ramp_name, ramp in registry.items():
        if ramp_name == exclude_ramp:
            continue
        ramp_color = ramp.get(matched_shade)
        if ramp_color is None or ramp_color.c < neutral_chroma:
            continue

        hue_distance = circular_hue_distance(color.h, ramp_color.h)
        if best is None or hue_distance < best_hue_distance:
            best = Match(ramp_name=ramp_name, shade=matched_shade,
                         distance=difference_euclidean(color, ramp_color))
            best_hue_distance = hue_distance

    return best


def find_closest_shade(ramp: Ramp, color: Oklch) -> str:
    """Closest shade key within a single ramp."""
    best_shade, best_distance = '', math.inf
    for shade, ramp_color in ramp.items():
        if ramp_color is None:
            continue
        distance = difference_euclidean(color, ramp_color)
        if distance < best_distance:
            best_shade, best_distance = shade, distance
    return best_shade


# =============================================================================
# Blend Engine
# =============================================================================

def blend_ramps(ramp1: Ramp, ramp2: Ramp, distance1: float, distance2: float) -> tuple:
    """
    Interpolate two ramps shade by shade.

    The mix parameter t = d1 / (d1 + d2) is the fraction of ramp2 (0.5 when
    both distances are zero). Shades missing from either ramp are dropped.

    Returns:
        Tuple of (blended_ramp, t)
    """
    total = distance1 + distance2
    t = distance1 / total if total > 0 else 0.5

    blended = {}
    for shade, c1 in ramp1.items():
        c2 = ramp2.get(shade)
        if c1 is None or c2 is None:
            continue
        blended[shade] = interpolate(c1, c2, t)

    return blended, t


# =============================================================================
# Scale Builder
# =============================================================================

def build_scale(reference: Ramp, target: Oklch, matched_shade: str,
                neutral_chroma: float = NEUTRAL_CHROMA) -> dict:
    """
    Re-hue a reference ramp to the target and anchor it at matched_shade.

    Lightness shifts additively. Chroma scales by a ratio, unless the reference
    is itself near gray at the matched shade, in which case it shifts.
    """
    rotated = {
        shade: Oklch(l=color.l, c=color.c, h=target.h)
        for shade, color in reference.items()
        if color is not None
    }

    anchor = rotated.get(matched_shade)
    if anchor is None:
        return rotated

    delta_l = target.l - anchor.l
    if anchor.c > neutral_chroma:
        ratio = target.c / anchor.c

        def scale_c(c):
            return c * ratio
    else:
        shift = target.c - anchor.c

        def scale_c(c):
            return c + shift

    return {
        shade: Oklch(
            l=max(0.0, min(1.0, color.l + delta_l)),
            c=max(0.0, scale_c(color.c)),
            h=color.h,
        )
        for shade, color in rotated.items()
    }


# =============================================================================
# Neutral Path
# =============================================================================

def generate_neutral(registry: RampRegistry, color: Oklch) -> GenerateResult:
    """Scale for a gray input: the neutral ramp, tinted with the input hue."""
    ramp_name = registry.neutral_ramp_name
    ramp = registry.get_ramp(ramp_name)
    shade = find_closest_shade(ramp, color)

    # Hue is kept even at ~0 chroma so downstream tinting has something to use
    scale = {
        s: Oklch(l=ramp_color.l, c=ramp_color.c, h=color.h)
        for s, ramp_color in ramp.items()
        if ramp_color is not None
    }
    scale[shade] = color

    logger.debug("Neutral input c=%.4f: using %s @ %s", color.c, ramp_name, shade)
    return GenerateResult(
        input_color=color,
        matched_shade=shade,
        method='exact',
        sources=(Source(name=ramp_name, distance=0.0, weight=1.0),),
        scale=scale,
    )


# =============================================================================
# Main Entry
# =============================================================================

class DittoTones:
    """
    Scale generator bound to one read-only ramp registry.

    Args:
        ramps: A RampRegistry, or an ordered {name: ramp} mapping to build one
        exact_threshold: Distance below which the closest match is exact
        neutral_chroma: Chroma below which colors are treated as gray

    Raises:
        ConfigError: If the ramps cannot form a valid registry
    """

    def __init__(self, ramps: Union[RampRegistry, dict], *,
                 exact_threshold: float = EXACT_THRESHOLD,
                 neutral_chroma: float = NEUTRAL_CHROMA):
        self.registry = ramps if isinstance(ramps, RampRegistry) else RampRegistry(ramps)
        self.exact_threshold = exact_threshold
        self.neutral_chroma = neutral_chroma

    @property
    def ramp_names(self) -> list:
        return self.registry.ramp_names

    @property
    def shades(self) -> list:
        return self.registry.shade_keys

    def generate(self, color: Union[str, Oklch]) -> GenerateResult:
        """
        Generate a full scale passing through the given color.

        Raises:
            InvalidColorError: If the color text cannot be parsed
        """
        parsed = color if isinstance(color, Oklch) else parse_color(color)

        if parsed.c < self.neutral_chroma:
            return generate_neutral(self.registry, parsed)

        closest = find_closest(self.registry, parsed)
        if closest.distance < self.exact_threshold:
            return self._from_single_ramp(parsed, closest)

        second = find_second_closest(self.registry, parsed, closest.shade,
                                     closest.ramp_name, self.neutral_chroma)
        if second is None:
            return self._from_single_ramp(parsed, closest)

        return self._blended(parsed, closest, second)

    def _from_single_ramp(self, parsed: Oklch, match: Match) -> GenerateResult:
        method = 'exact' if match.distance < self.exact_threshold else 'single'
        ramp = self.registry.get_ramp(match.ramp_name)
        scale = build_scale(ramp, parsed, match.shade, self.neutral_chroma)

        logger.debug("%s match: %s @ %s (distance %.4f)",
                     method, match.ramp_name, match.shade, match.distance)
        return GenerateResult(
            input_color=parsed,
            matched_shade=match.shade,
            method=method,
            sources=(Source(name=match.ramp_name, distance=match.distance, weight=1.0),),
            scale=scale,
        )

    def _blended(self, parsed: Oklch, first: Match, second: Match) -> GenerateResult:
        blended, t = blend_ramps(
            self.registry.get_ramp(first.ramp_name),
            self.registry.get_ramp(second.ramp_name),
            first.distance,
            second.distance,
        )
        scale = build_scale(blended, parsed, first.shade, self.neutral_chroma)

        logger.debug("blend: %s (%.4f) + %s (%.4f) @ %s, t=%.3f",
                     first.ramp_name, first.distance, second.ramp_name,
                     second.distance, first.shade, t)
        return GenerateResult(
            input_color=parsed,
            matched_shade=first.shade,
            method='blend',
            sources=(
                Source(name=first.ramp_name, distance=first.distance, weight=1 - t),
                Source(name=second.ramp_name, distance=second.distance, weight=t),
            ),
            scale=scale,
        )

