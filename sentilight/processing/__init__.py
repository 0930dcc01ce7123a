"""
Processing components for SentiLight.

- GeminiClient: generateContent REST call with retries
- parser: [COMMAND: ...] / [EXPLANATION: ...] extraction with fallbacks
"""

from .gemini import GeminiClient
from .parser import (
    ParsedResponse,
    parse_response,
    extract_command,
    extract_explanation,
    sanitize_command,
    FALLBACK_NO_COMMAND,
    FALLBACK_INVALID_COMMAND,
)

__all__ = [
    'GeminiClient',
    'ParsedResponse',
    'parse_response',
    'extract_command',
    'extract_explanation',
    'sanitize_command',
    'FALLBACK_NO_COMMAND',
    'FALLBACK_INVALID_COMMAND',
]
