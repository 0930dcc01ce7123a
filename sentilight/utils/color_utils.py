"""
Color utility functions for SentiLight.

Provides helper functions for color manipulation:
- HSV to RGB conversion
- Display color derivation from Tasmota HSBCOLOR commands
- Hex formatting
"""

import re
from typing import Tuple

RGB = Tuple[int, int, int]

# Shown when a command has no readable HSBCOLOR clause (#181B1C).
FALLBACK_COLOR: RGB = (0x18, 0x1B, 0x1C)

HSB_PATTERN = re.compile(r"HSBCOLOR\s*(\d+),(\d+),(\d+)", re.IGNORECASE)


def hsv_to_rgb(h: float, s: float, v: float) -> RGB:
    """
    Convert HSV to RGB.

    Args:
        h: Hue (0-360, wraps)
        s: Saturation (0-1)
        v: Value (0-1)

    Returns:
        Tuple of (r, g, b) where values are 0-255
    """
    h = h % 360
    s = max(0.0, min(1.0, s))
    v = max(0.0, min(1.0, v))

    c = v * s
    x = c * (1 - abs((h / 60) % 2 - 1))
    m = v - c

    if 0 <= h < 60:
        r, g, b = c, x, 0
    elif 60 <= h < 120:
        r, g, b = x, c, 0
    elif 120 <= h < 180:
        r, g, b = 0, c, x
    elif 180 <= h < 240:
        r, g, b = 0, x, c
    elif 240 <= h < 300:
        r, g, b = x, 0, c
    else:
        r, g, b = c, 0, x

    return clamp_rgb(round((r + m) * 255), round((g + m) * 255), round((b + m) * 255))


def clamp_rgb(r, g, b) -> RGB:
    """
    Clamp RGB values to valid range.

    Args:
        r, g, b: RGB values

    Returns:
        Clamped (r, g, b) tuple
    """
    return (
        max(0, min(255, int(r))),
        max(0, min(255, int(g))),
        max(0, min(255, int(b)))
    )


def hsb_command_to_rgb(command: str) -> RGB:
    """
    Derive the display color of a Tasmota command.

    Reads the first 'HSBCOLOR h,s,b' clause (hue 0-359, saturation and
    brightness 0-100). Commands without one get FALLBACK_COLOR.
    """
    match = HSB_PATTERN.search(command or "")
    if not match:
        print(f"[color] No HSBCOLOR clause in command: {command!r}")
        return FALLBACK_COLOR

    h = float(match.group(1))
    s = float(match.group(2)) / 100.0
    v = float(match.group(3)) / 100.0
    return hsv_to_rgb(h, s, v)


def rgb_to_hex(rgb: RGB) -> str:
    """Format an RGB tuple as '#RRGGBB'."""
    r, g, b = clamp_rgb(*rgb)
    return f"#{r:02X}{g:02X}{b:02X}"
