"""
Controller configuration for SentiLight.

ControllerConfig is an immutable value handed to the MoodController at
construction; reconfigure() returns a new value instead of changing the
one in-flight requests are using.
"""

import os
from dataclasses import dataclass, replace, asdict
from pathlib import Path
from typing import Any, Dict

import yaml

from sentilight.errors import ConfigurationError


DEFAULT_MODEL = "gemini-2.5-flash-lite"
DEFAULT_GEMINI_HOST = "generativelanguage.googleapis.com"


@dataclass(frozen=True)
class ControllerConfig:
    """Credential, model and transport settings for the mood controller."""
    api_key: str = ""
    model: str = DEFAULT_MODEL
    gemini_host: str = DEFAULT_GEMINI_HOST
    gemini_timeout: float = 20.0
    gemini_attempts: int = 2
    gemini_retry_delay: float = 0.3
    tasmota_timeout: float = 20.0
    tasmota_attempts: int = 2
    tasmota_retry_delay: float = 0.2
    max_workers: int = 32
    verbose: bool = False

    def __post_init__(self):
        # Keys pasted from dashboards often carry trailing whitespace.
        object.__setattr__(self, 'api_key', (self.api_key or "").strip())
        object.__setattr__(self, 'model', (self.model or "").strip() or DEFAULT_MODEL)

        for name in ('gemini_attempts', 'tasmota_attempts', 'max_workers'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        for name in ('gemini_timeout', 'tasmota_timeout'):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)!r}")
        for name in ('gemini_retry_delay', 'tasmota_retry_delay'):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative, got {getattr(self, name)!r}")

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def reconfigure(self, **changes) -> 'ControllerConfig':
        """
        Return a copy with some fields changed.

        A blank model keeps the current one, matching how the settings screen
        treats an empty model field.
        """
        if 'model' in changes and not (changes['model'] or "").strip():
            changes.pop('model')
        return replace(self, **changes)

    def to_public_dict(self) -> Dict[str, Any]:
        """Config as a dict with the credential masked."""
        data = asdict(self)
        data.pop('api_key')
        data['has_api_key'] = self.has_api_key
        return data

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'ControllerConfig':
        """
        Build from a loaded config file.

        Args:
            config: Dict with optional 'gemini', 'tasmota' and 'controller'
                    sections
        """
        gemini = config.get('gemini') or {}
        tasmota = config.get('tasmota') or {}
        controller = config.get('controller') or {}
        defaults = cls()

        return cls(
            api_key=gemini.get('api_key') or os.environ.get('GEMINI_API_KEY', ''),
            model=gemini.get('model', defaults.model),
            gemini_host=gemini.get('host', defaults.gemini_host),
            gemini_timeout=float(gemini.get('timeout', defaults.gemini_timeout)),
            gemini_attempts=int(gemini.get('attempts', defaults.gemini_attempts)),
            gemini_retry_delay=float(gemini.get('retry_delay', defaults.gemini_retry_delay)),
            tasmota_timeout=float(tasmota.get('timeout', defaults.tasmota_timeout)),
            tasmota_attempts=int(tasmota.get('attempts', defaults.tasmota_attempts)),
            tasmota_retry_delay=float(tasmota.get('retry_delay', defaults.tasmota_retry_delay)),
            max_workers=int(controller.get('max_workers', defaults.max_workers)),
            verbose=bool(controller.get('verbose', defaults.verbose)),
        )


def expand_env(obj):
    """Replace '${VAR}' strings with environment values, recursively."""
    if isinstance(obj, str) and obj.startswith('${') and obj.endswith('}'):
        env_var = obj[2:-1]
        return os.environ.get(env_var, '')
    elif isinstance(obj, dict):
        return {k: expand_env(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [expand_env(item) for item in obj]
    return obj


def load_config(config_path) -> dict:
    """Load configuration from YAML file."""
    with open(Path(config_path)) as f:
        config = yaml.safe_load(f) or {}

    return expand_env(config)
