"""
Tests for HSV/HSBCOLOR color derivation.
"""
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sentilight.utils.color_utils import (
    FALLBACK_COLOR,
    hsv_to_rgb,
    hsb_command_to_rgb,
    rgb_to_hex,
    clamp_rgb,
)


class TestHsvToRgb:

    @pytest.mark.parametrize("h,expected", [
        (0, (255, 0, 0)),
        (60, (255, 255, 0)),
        (120, (0, 255, 0)),
        (180, (0, 255, 255)),
        (240, (0, 0, 255)),
        (300, (255, 0, 255)),
        (360, (255, 0, 0)),
    ])
    def test_primary_hues(self, h, expected):
        assert hsv_to_rgb(h, 1.0, 1.0) == expected

    def test_zero_saturation_is_grey(self):
        assert hsv_to_rgb(200, 0.0, 0.5) == (128, 128, 128)

    def test_zero_value_is_black(self):
        assert hsv_to_rgb(123, 1.0, 0.0) == (0, 0, 0)

    def test_out_of_range_is_clamped(self):
        assert hsv_to_rgb(0, 1.5, 2.0) == (255, 0, 0)


class TestHsbCommandToRgb:

    def test_red(self):
        assert hsb_command_to_rgb("HSBCOLOR 0,100,100") == (255, 0, 0)

    def test_green(self):
        assert hsb_command_to_rgb("HSBCOLOR 120,100,100;Dimmer 70;CT 250") == (0, 255, 0)

    def test_warm_yellow(self):
        assert hsb_command_to_rgb("HSBCOLOR 60,100,100;Dimmer 70;CT 250") == (255, 255, 0)

    def test_case_and_spacing(self):
        assert hsb_command_to_rgb("hsbcolor240,100,100") == (0, 0, 255)

    def test_lights_off_command(self):
        assert hsb_command_to_rgb("HSBCOLOR 0,0,0;Dimmer 0;CT 500") == (0, 0, 0)

    @pytest.mark.parametrize("command", ["Dimmer 50", "", None, "HSBCOLOR a,b,c", "HSBCOLOR 1,2"])
    def test_unparseable_falls_back(self, command):
        assert hsb_command_to_rgb(command) == FALLBACK_COLOR

    def test_fallback_is_dark_neutral(self):
        assert rgb_to_hex(FALLBACK_COLOR) == "#181B1C"


class TestHelpers:

    def test_rgb_to_hex(self):
        assert rgb_to_hex((255, 128, 0)) == "#FF8000"

    def test_clamp(self):
        assert clamp_rgb(-5, 300, 12.7) == (0, 255, 12)
