"""
Pytest configuration and shared fixtures.

Registries here are built directly in OKLCH so expected values can be worked
out by hand.
"""

import sys
from pathlib import Path

import pytest

# Repository root on path so the top-level modules import without installing
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from color_space import Oklch  # noqa: E402
from ramps import RampRegistry  # noqa: E402


def make_ramp(hue: float, chromas=(0.05, 0.15, 0.10), lightness=(0.9, 0.6, 0.3)) -> dict:
    return {
        shade: Oklch(l=L, c=C, h=hue)
        for shade, L, C in zip(('100', '500', '900'), lightness, chromas)
    }


@pytest.fixture
def blue_ramp():
    return make_ramp(260)


@pytest.fixture
def red_ramp():
    return make_ramp(20)


@pytest.fixture
def gray_ramp():
    # Lightness offset from the colored ramps so grays never win a closest match
    return make_ramp(0, chromas=(0.0, 0.005, 0.0), lightness=(0.95, 0.5, 0.2))


@pytest.fixture
def registry(blue_ramp, red_ramp, gray_ramp):
    return RampRegistry({'blue': blue_ramp, 'red': red_ramp, 'gray': gray_ramp})


@pytest.fixture
def blue_gray_registry(blue_ramp, gray_ramp):
    return RampRegistry({'blue': blue_ramp, 'gray': gray_ramp})
