"""
Core components for SentiLight.

This package contains the device registry, its settings storage, and the
controller configuration.
"""

from .config import ControllerConfig, load_config, expand_env
from .registry import DeviceRegistry, is_valid_ipv4, DEFAULT_IPS
from .storage import SettingsStore, set_settings_storage_dir

__all__ = [
    'ControllerConfig',
    'load_config',
    'expand_env',
    'DeviceRegistry',
    'is_valid_ipv4',
    'DEFAULT_IPS',
    'SettingsStore',
    'set_settings_storage_dir',
]
