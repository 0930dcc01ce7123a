from .color_utils import (
    FALLBACK_COLOR,
    hsv_to_rgb,
    clamp_rgb,
    hsb_command_to_rgb,
    rgb_to_hex,
)

__all__ = [
    'FALLBACK_COLOR',
    'hsv_to_rgb',
    'clamp_rgb',
    'hsb_command_to_rgb',
    'rgb_to_hex',
]
