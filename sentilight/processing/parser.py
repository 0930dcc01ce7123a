"""
Response parser for Gemini mood answers.

Pulls the [COMMAND: ...] and [EXPLANATION: ...] blocks out of free model
text. Parsing never fails: bad or missing commands fall back to fixed ones.
"""

import re
from dataclasses import dataclass

# No [COMMAND: ...] block at all: lights off.
FALLBACK_NO_COMMAND = "HSBCOLOR 0,0,0;Dimmer 0;CT 500"
# Block present but no usable HSBCOLOR clause.
FALLBACK_INVALID_COMMAND = "HSBCOLOR 60,100,100;Dimmer 70;CT 250"

COMMAND_PATTERN = re.compile(r"\[COMMAND:\s*(.*?)\]", re.DOTALL)
EXPLANATION_PATTERN = re.compile(r"\[EXPLANATION:\s*(.*?)\]", re.DOTALL)
DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9,;\s]")
WHITESPACE = re.compile(r"\s+")


@dataclass
class ParsedResponse:
    """Command and explanation read from one model answer."""
    command: str
    explanation: str


def sanitize_command(raw: str) -> str:
    """Collapse whitespace and drop characters Tasmota commands never need."""
    cleaned = WHITESPACE.sub(" ", raw.strip())
    return DISALLOWED_CHARS.sub("", cleaned)


def extract_command(full_response: str) -> str:
    """Get the sanitized command, or a fallback command."""
    match = COMMAND_PATTERN.search(full_response or "")
    if not match:
        return FALLBACK_NO_COMMAND

    cleaned = sanitize_command(match.group(1))
    if "HSBCOLOR" not in cleaned.upper():
        return FALLBACK_INVALID_COMMAND
    return cleaned


def extract_explanation(full_response: str, command: str) -> str:
    """Get the explanation text, or a default mentioning the command."""
    match = EXPLANATION_PATTERN.search(full_response or "")
    if match:
        return match.group(1).strip()
    return f"{command} command generated (no explanation)"


def parse_response(full_response: str) -> ParsedResponse:
    command = extract_command(full_response)
    return ParsedResponse(
        command=command,
        explanation=extract_explanation(full_response, command),
    )
