"""
Gemini client for SentiLight.

Single-shot generateContent call over the REST API. The credential goes in
the `key` query parameter; failed attempts are retried after a fixed delay.
"""

import time
from typing import Optional

import requests

from sentilight.core.config import ControllerConfig
from sentilight.errors import ConfigurationError, GeminiError


class GeminiClient:
    """Sends one prompt to Gemini and returns the generated text."""

    def __init__(self, session: Optional[requests.Session] = None, sleep=time.sleep):
        """
        Initialize the client.

        Args:
            session: requests session to send through (created if not given)
            sleep: Delay function between attempts
        """
        self.session = session or requests.Session()
        self._sleep = sleep

    @staticmethod
    def build_url(config: ControllerConfig) -> str:
        """Endpoint URL for the configured model (without the key)."""
        model = config.model
        if not model.startswith("models/"):
            model = f"models/{model}"
        return f"https://{config.gemini_host}/v1/{model}:generateContent"

    @staticmethod
    def build_body(prompt: str) -> dict:
        return {
            "contents": [
                {"role": "user", "parts": [{"text": prompt}]}
            ]
        }

    @staticmethod
    def extract_text(payload) -> str:
        """
        Pull candidates[0].content.parts[0].text out of a response.

        Raises:
            GeminiError: if the path is missing or the text is blank
        """
        candidates = payload.get("candidates") if isinstance(payload, dict) else None
        if not isinstance(candidates, list) or not candidates:
            raise GeminiError("Gemini response is empty or has no candidates.")

        candidate = candidates[0]
        content = candidate.get("content") if isinstance(candidate, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
            raise GeminiError("Could not parse Gemini response (no content/parts).")

        text = parts[0].get("text")
        if not isinstance(text, str) or not text.strip():
            raise GeminiError("Gemini did not generate any text.")
        return text.strip()

    def generate(self, prompt: str, config: ControllerConfig) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: Full prompt text
            config: Configuration snapshot for this request

        Returns:
            The generated text, stripped

        Raises:
            ConfigurationError: if no API key is configured
            GeminiError: if every attempt failed
        """
        if not config.has_api_key:
            raise ConfigurationError("Gemini API key is not set. Configure gemini.api_key or GEMINI_API_KEY.")

        url = self.build_url(config)
        body = self.build_body(prompt)
        last_error = None

        for attempt in range(1, config.gemini_attempts + 1):
            try:
                response = self.session.post(
                    url,
                    params={"key": config.api_key},
                    json=body,
                    timeout=config.gemini_timeout,
                )
                if not response.ok:
                    raise GeminiError(f"Gemini API error: HTTP {response.status_code} / {response.text}")
                try:
                    payload = response.json()
                except ValueError as e:
                    raise GeminiError(f"Gemini returned invalid JSON: {e}") from e
                return self.extract_text(payload)

            except requests.exceptions.RequestException as e:
                last_error = GeminiError(f"Gemini request failed: {e}")
            except GeminiError as e:
                last_error = e

            print(f"[gemini] attempt {attempt}/{config.gemini_attempts} failed: {last_error}")
            if attempt < config.gemini_attempts:
                self._sleep(config.gemini_retry_delay)

        raise last_error or GeminiError("Gemini call failed (unknown cause)")
