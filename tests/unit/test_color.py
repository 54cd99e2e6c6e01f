"""
Unit Tests for 8-bit Colour Math

Tests for:
- map_range truncation
- Degree -> 8-bit hue conversion
- HSV -> RGB (grey axis, max component == value)
- Linear blend endpoints
- Saturating add/subtract
"""

import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from core.animation.color import (
    blend,
    hsv_to_rgb,
    hue360_to_hue8,
    map_range,
    qadd8,
    qsub8,
)
from core.animation.types import RGB


class TestMapRange:
    """Tests for integer range mapping."""

    def test_endpoints(self):
        assert map_range(0, 0, 100, 0, 255) == 0
        assert map_range(100, 0, 100, 0, 255) == 255

    def test_truncates(self):
        # 127.5 -> 127
        assert map_range(50, 0, 100, 0, 255) == 127

    def test_descending_output(self):
        assert map_range(171, 171, 255, 255, 0) == 255
        assert map_range(255, 171, 255, 255, 0) == 0


class TestHueConversion:
    """Tests for degree to 8-bit hue conversion."""

    def test_zero(self):
        assert hue360_to_hue8(0) == 0

    def test_top_of_circle(self):
        assert hue360_to_hue8(359) == 254

    def test_wraps(self):
        assert hue360_to_hue8(360) == 0
        assert hue360_to_hue8(-90) == hue360_to_hue8(270) == 191


class TestHsvToRgb:
    """Tests for the sector HSV -> RGB conversion."""

    def test_zero_saturation_is_grey(self):
        assert hsv_to_rgb(123, 0, 200) == RGB(200, 200, 200)

    def test_pure_red(self):
        assert hsv_to_rgb(0, 255, 255) == RGB(255, 0, 0)

    @pytest.mark.parametrize("hue", [0, 20, 43, 64, 86, 128, 170, 200, 250, 255])
    @pytest.mark.parametrize("value", [0, 20, 128, 255])
    def test_max_component_equals_value(self, hue, value):
        rgb = hsv_to_rgb(hue, 255, value)
        assert max(rgb.to_tuple()) == value

    def test_out_of_range_inputs_clamped(self):
        assert hsv_to_rgb(0, 0, 400) == RGB(255, 255, 255)


class TestBlend:
    """Tests for linear colour mixing."""

    def test_amount_zero_returns_first(self):
        a, b = RGB(10, 20, 30), RGB(200, 100, 50)
        assert blend(a, b, 0) == a

    def test_amount_full_returns_second(self):
        a, b = RGB(10, 20, 30), RGB(200, 100, 50)
        assert blend(a, b, 255) == b

    def test_midpoint_between(self):
        mixed = blend(RGB(0, 0, 0), RGB(255, 255, 255), 128)
        assert 120 <= mixed.r <= 135
        assert mixed.r == mixed.g == mixed.b


class TestSaturatingMath:
    """Tests for qadd8 / qsub8."""

    def test_qadd8_saturates(self):
        assert qadd8(200, 100) == 255
        assert qadd8(10, 5) == 15

    def test_qsub8_saturates(self):
        assert qsub8(10, 20) == 0
        assert qsub8(30, 5) == 25
