"""
Logging components for SentiLight.

This package handles event logging of mood commands and presets.
"""

from .event_logger import EventLogger

__all__ = ['EventLogger']
