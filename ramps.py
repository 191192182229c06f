#!/usr/bin/env python3
"""
Reference ramp registry and ramp table loading.

A ramp maps shade keys ("50", "500", ...) to colors. Every ramp in a registry
shares the same shade keys; registry order is significant and decides ties.
"""

import json
import logging
import math
import re
from pathlib import Path
from types import MappingProxyType
from typing import Optional

import numpy as np
import yaml

from color_space import InvalidColorError, Oklch, parse_color, rgb_to_oklch

logger = logging.getLogger(__name__)

Ramp = dict  # shade key -> Oklch (or None when explicitly absent)

_HEX_RE = re.compile(r'^#?([0-9a-fA-F]{6})$')


class ConfigError(ValueError):
    """Raised when a ramp collection cannot form a valid registry."""


# =============================================================================
# Registry
# =============================================================================

class RampRegistry:
    """
    Immutable, ordered collection of reference ramps.

    Validates that every ramp has the first ramp's shade keys and caches the
    neutral ramp (lowest mean chroma) at construction.

    Raises:
        ConfigError: If there are no ramps or shade keys are inconsistent
    """

    def __init__(self, ramps: dict):
        if not ramps:
            raise ConfigError("At least one ramp is required")

        self._ramps = {name: dict(ramp) for name, ramp in ramps.items()}
        first = next(iter(self._ramps.values()))
        self._shade_keys = list(first.keys())

        expected = set(self._shade_keys)
        for name, ramp in self._ramps.items():
            keys = set(ramp.keys())
            if len(ramp) != len(self._shade_keys) or keys != expected:
                raise ConfigError(f"Ramp {name} has inconsistent keys")

        self._neutral_ramp_name = self._find_neutral_ramp()
        logger.debug("Registry: %d ramps x %d shades, neutral ramp %s",
                     len(self._ramps), len(self._shade_keys), self._neutral_ramp_name)

    def _find_neutral_ramp(self) -> str:
        """Ramp with the strictly lowest mean chroma; first wins ties."""
        best_name, best_chroma = None, math.inf
        for name, ramp in self._ramps.items():
            chromas = [color.c for color in ramp.values() if color is not None]
            avg = sum(chromas) / len(chromas) if chromas else math.inf
            if best_name is None or avg < best_chroma:
                best_name, best_chroma = name, avg
        return best_name

    @property
    def ramp_names(self) -> list:
        return list(self._ramps.keys())

    @property
    def shade_keys(self) -> list:
        return list(self._shade_keys)

    @property
    def neutral_ramp_name(self) -> str:
        return self._neutral_ramp_name

    def get_ramp(self, name: str) -> Optional[MappingProxyType]:
        """Read-only view of one ramp, or None if the name is unknown."""
        ramp = self._ramps.get(name)
        return None if ramp is None else MappingProxyType(ramp)

    def items(self):
        """(name, read-only ramp view) pairs in registry order."""
        return ((name, MappingProxyType(ramp)) for name, ramp in self._ramps.items())

    def __len__(self) -> int:
        return len(self._ramps)

    def __contains__(self, name) -> bool:
        return name in self._ramps

    def __repr__(self) -> str:
        return f"RampRegistry({len(self._ramps)} ramps, shades={self._shade_keys})"


# =============================================================================
# Ramp Tables
# =============================================================================

def ramps_from_hex(table: dict) -> dict:
    """
    Convert a {name: {shade: color_string}} table into OKLCH ramps.

    Plain 6-digit hex entries are converted together in one numpy pass; any
    other color syntax goes through parse_color.

    Raises:
        ConfigError: If an entry is not a parseable color
    """
    ramps = {}
    for name, shades in table.items():
        if not isinstance(shades, dict):
            raise ConfigError(f"Ramp {name} must map shade keys to colors")

        hex_shades, hex_rgb, ramp = [], [], {}
        for shade, value in shades.items():
            shade = str(shade)
            ramp[shade] = None
            if value is None:
                continue
            match = _HEX_RE.match(str(value).strip())
            if match:
                digits = match.group(1)
                hex_shades.append(shade)
                hex_rgb.append([int(digits[i:i + 2], 16) for i in (0, 2, 4)])
                continue
            try:
                ramp[shade] = parse_color(str(value))
            except InvalidColorError as e:
                raise ConfigError(f"Ramp {name} shade {shade}: {e}")

        if hex_rgb:
            lch = rgb_to_oklch(np.array(hex_rgb))
            for shade, row in zip(hex_shades, lch):
                ramp[shade] = Oklch.from_array(row)

        ramps[str(name)] = ramp

    return ramps


def load_ramp_table(path) -> dict:
    """
    Read a ramp table from a JSON or YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the suffix is unsupported or the content is not a table
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Ramp table not found: {path}")

    suffix = path.suffix.lower()
    with open(path, encoding="utf-8") as f:
        if suffix == '.json':
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"Could not parse {path}: {e}")
        elif suffix in ('.yaml', '.yml'):
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Could not parse {path}: {e}")
        else:
            raise ConfigError(f"Unsupported ramp table format: {path.suffix or path.name}")

    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        raise ConfigError(f"Ramp table {path} must map ramp names to {{shade: color}} tables")

    logger.info("Loaded %d ramps from %s", len(data), path)
    return data


def load_registry(path) -> RampRegistry:
    """Load a ramp table file and build a registry from it."""
    return RampRegistry(ramps_from_hex(load_ramp_table(path)))
