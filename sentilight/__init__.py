"""
SentiLight - mood-driven lighting for Tasmota bulbs.

The sentilight package provides:
- Device registry (persisted bulb IP list)
- Gemini client and response parser
- Tasmota command fan-out
- MoodController tying them together

Example usage:
    from sentilight import MoodController, ControllerConfig, DeviceRegistry

    controller = MoodController(
        ControllerConfig(api_key='AIza...'),
        DeviceRegistry(),
    )

    result = controller.process("calm and a bit sleepy").result()
    print(result.command, result.color_hex)
"""

from .controller import MoodController, MoodResult
from .core import (
    ControllerConfig,
    load_config,
    DeviceRegistry,
    is_valid_ipv4,
    SettingsStore,
    set_settings_storage_dir,
)
from .devices import TasmotaClient, DispatchReport
from .errors import SentiLightError, ConfigurationError, GeminiError, TasmotaError
from .event_logging import EventLogger
from .processing import GeminiClient, parse_response
from .prompts import PRESETS, get_preset

__version__ = '0.1.0'

__all__ = [
    # Main interface
    'MoodController',
    'MoodResult',

    # Core
    'ControllerConfig',
    'load_config',
    'DeviceRegistry',
    'is_valid_ipv4',
    'SettingsStore',
    'set_settings_storage_dir',

    # Transport
    'GeminiClient',
    'TasmotaClient',
    'DispatchReport',
    'parse_response',

    # Presets
    'PRESETS',
    'get_preset',

    # Logging
    'EventLogger',

    # Errors
    'SentiLightError',
    'ConfigurationError',
    'GeminiError',
    'TasmotaError',
]
