"""Exceptions raised by SentiLight."""


class SentiLightError(Exception):
    """Base class for SentiLight errors."""


class ConfigurationError(SentiLightError):
    """Controller is missing something it needs before any network call."""


class GeminiError(SentiLightError):
    """The language model call failed or returned nothing usable."""


class TasmotaError(SentiLightError):
    """A bulb could not be reached."""
