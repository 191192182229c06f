"""Tests for the OKLCH color primitive."""

import numpy as np
import pytest

from color_space import (
    InvalidColorError,
    Oklch,
    circular_hue_distance,
    difference_euclidean,
    interpolate,
    parse_color,
    rgb_to_oklch,
    to_css_oklab,
    to_css_oklch,
    to_hex,
    to_rgb_tuple,
)


class TestParseColor:

    def test_hex_red(self):
        color = parse_color('#ff0000')
        assert color.l == pytest.approx(0.628, abs=1e-3)
        assert color.c == pytest.approx(0.2577, abs=1e-3)
        assert color.h == pytest.approx(29.23, abs=0.1)
        assert color.alpha == 1.0

    def test_white_is_achromatic(self):
        color = parse_color('#ffffff')
        assert color.l == pytest.approx(1.0, abs=1e-4)
        assert color.c == 0.0
        assert color.h == 0.0

    def test_named_color_matches_hex(self):
        assert parse_color('white') == parse_color('#fff')
        assert parse_color('rebeccapurple') == parse_color('#663399')

    def test_rgb_functional(self):
        assert parse_color('rgb(59, 130, 246)') == parse_color('#3b82f6')

    @pytest.mark.parametrize('modern, legacy', [
        ('rgb(10 20 30)', 'rgb(10, 20, 30)'),
        ('rgba(59 130 246)', '#3b82f6'),
        ('rgb(100% 0% 0%)', 'red'),
        ('hsl(120 50% 50%)', 'hsl(120, 50%, 50%)'),
        ('hsl(480deg 50 50)', 'hsl(120, 50%, 50%)'),
    ])
    def test_space_separated_functional(self, modern, legacy):
        assert parse_color(modern) == parse_color(legacy)

    def test_space_separated_alpha(self):
        assert parse_color('rgb(255 0 0 / 50%)').alpha == pytest.approx(0.5)
        assert parse_color('hsl(120 50% 50% / 0.25)').alpha == pytest.approx(0.25)

    def test_transparent(self):
        assert parse_color('transparent') == Oklch(l=0.0, alpha=0.0)

    def test_hex_with_alpha(self):
        color = parse_color('#ff000080')
        assert color.alpha == pytest.approx(128 / 255)

    def test_oklch_values_are_kept_exactly(self):
        assert parse_color('oklch(0.6 0.15 260)') == Oklch(l=0.6, c=0.15, h=260.0)

    def test_oklch_percent_deg_and_alpha(self):
        color = parse_color('oklch(60% 37.5% 260deg / 0.5)')
        assert color.l == pytest.approx(0.6)
        assert color.c == pytest.approx(0.15)
        assert color.h == pytest.approx(260)
        assert color.alpha == pytest.approx(0.5)

    def test_oklch_none_hue(self):
        assert parse_color('oklch(0.5 0 none)').h == 0.0

    def test_oklab(self):
        color = parse_color('oklab(0.5 0.1 0)')
        assert color.l == pytest.approx(0.5)
        assert color.c == pytest.approx(0.1)
        assert color.h == pytest.approx(0.0)

    def test_surrounding_whitespace(self):
        assert parse_color('  #3b82f6 \n') == parse_color('#3b82f6')

    @pytest.mark.parametrize('text', ['not-a-color', '', '   ', 'oklch(1 2)', '#12345'])
    def test_invalid_text_raises(self, text):
        with pytest.raises(InvalidColorError):
            parse_color(text)

    def test_non_string_raises(self):
        with pytest.raises(InvalidColorError):
            parse_color(None)

    def test_invalid_color_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_color('nope')


class TestConversion:

    def test_vectorized_shape(self):
        lch = rgb_to_oklch(np.array([[255, 0, 0], [0, 0, 255], [128, 128, 128]]))
        assert lch.shape == (3, 3)
        assert lch[2, 1] == 0.0

    def test_hex_round_trip(self):
        assert to_hex(parse_color('#3b82f6')) == '#3b82f6'

    def test_out_of_gamut_is_clamped(self):
        r, g, b = to_rgb_tuple(Oklch(l=0.7, c=0.4, h=150))
        assert all(0 <= v <= 255 for v in (r, g, b))

    def test_hex_alpha_suffix(self):
        assert to_hex(Oklch(l=1.0, alpha=0.5)) == '#ffffff80'


class TestHue:

    @pytest.mark.parametrize('hue, expected', [(500, 140), (-30, 330), (720, 0), (-1e-20, 0.0)])
    def test_hue_is_normalized(self, hue, expected):
        assert Oklch(l=0.5, c=0.1, h=hue).h == pytest.approx(expected)
        assert 0 <= Oklch(l=0.5, c=0.1, h=hue).h < 360

    def test_circular_hue_distance_wraps(self):
        assert circular_hue_distance(350, 10) == 20
        assert circular_hue_distance(10, 350) == 20
        assert circular_hue_distance(0, 180) == 180

    def test_difference_of_identical_colors(self):
        color = Oklch(l=0.6, c=0.15, h=260)
        assert difference_euclidean(color, color) == 0.0

    def test_difference_is_hue_symmetric(self):
        target = Oklch(l=0.6, c=0.15, h=320)
        blue = Oklch(l=0.6, c=0.15, h=260)
        red = Oklch(l=0.6, c=0.15, h=20)
        assert difference_euclidean(target, blue) == difference_euclidean(target, red)
        assert difference_euclidean(target, blue) == pytest.approx(0.15)

    def test_hue_ignored_for_grays(self):
        a = Oklch(l=0.5, c=0.0, h=10)
        b = Oklch(l=0.5, c=0.0, h=200)
        assert difference_euclidean(a, b) == 0.0


class TestInterpolate:

    def test_linear_lightness_and_chroma(self):
        mid = interpolate(Oklch(l=0.2, c=0.1, h=100), Oklch(l=0.8, c=0.3, h=100), 0.25)
        assert mid.l == pytest.approx(0.35)
        assert mid.c == pytest.approx(0.15)
        assert mid.h == pytest.approx(100)

    def test_shorter_hue_arc(self):
        mid = interpolate(Oklch(l=0.5, c=0.1, h=350), Oklch(l=0.5, c=0.1, h=10), 0.5)
        assert min(mid.h, 360 - mid.h) == pytest.approx(0.0, abs=1e-9)

    def test_achromatic_endpoint_takes_other_hue(self):
        mid = interpolate(Oklch(l=0.5), Oklch(l=0.5, c=0.1, h=200), 0.3)
        assert mid.h == 200


class TestCss:

    def test_oklch_css(self):
        assert to_css_oklch(Oklch(l=0.6, c=0.15, h=260)) == 'oklch(0.6 0.15 260)'

    def test_oklch_css_rounds_and_adds_alpha(self):
        css = to_css_oklch(Oklch(l=0.61234, c=0.0, h=12.3456, alpha=0.5))
        assert css == 'oklch(0.612 0 12.346 / 0.5)'

    def test_oklab_css(self):
        assert to_css_oklab(Oklch(l=0.5, c=0.1, h=0)) == 'oklab(0.5 0.1 0)'
