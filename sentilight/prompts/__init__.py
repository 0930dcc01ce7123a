"""Prompts and preset scenes."""

from .mood_prompt import get_mood_prompt
from .presets import PRESETS, get_preset

__all__ = ['get_mood_prompt', 'PRESETS', 'get_preset']
