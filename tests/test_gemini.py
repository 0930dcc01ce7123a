"""
Tests for the Gemini client. No real API calls are made.
"""
import os
import sys
from unittest.mock import MagicMock

import pytest
import requests

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sentilight.core.config import ControllerConfig
from sentilight.errors import ConfigurationError, GeminiError
from sentilight.processing.gemini import GeminiClient

from helpers import fake_response, gemini_payload, gemini_session, failing_session


class TestRequestShape:

    def test_url_adds_models_prefix(self):
        config = ControllerConfig(api_key="k", model="gemini-2.5-flash-lite")
        assert GeminiClient.build_url(config) == (
            "https://generativelanguage.googleapis.com/v1/models/gemini-2.5-flash-lite:generateContent"
        )

    def test_url_keeps_existing_prefix(self):
        config = ControllerConfig(api_key="k", model="models/gemini-pro")
        assert GeminiClient.build_url(config).endswith("/v1/models/gemini-pro:generateContent")

    def test_post_body_and_key(self):
        session = gemini_session("[COMMAND: HSBCOLOR 1,2,3]")
        client = GeminiClient(session=session)
        config = ControllerConfig(api_key="secret", gemini_timeout=7)

        assert client.generate("hello", config) == "[COMMAND: HSBCOLOR 1,2,3]"

        args, kwargs = session.post.call_args
        assert kwargs["params"] == {"key": "secret"}
        assert kwargs["json"] == {"contents": [{"role": "user", "parts": [{"text": "hello"}]}]}
        assert kwargs["timeout"] == 7


class TestErrors:

    def setup_method(self):
        self.sleeps = []
        self.config = ControllerConfig(api_key="k")

    def make_client(self, session):
        return GeminiClient(session=session, sleep=self.sleeps.append)

    def test_missing_key_fails_before_network(self):
        session = MagicMock()
        client = self.make_client(session)

        with pytest.raises(ConfigurationError):
            client.generate("hi", ControllerConfig(api_key="   "))
        session.post.assert_not_called()

    def test_transport_failure_twice(self):
        session = failing_session(times=2)
        client = self.make_client(session)

        with pytest.raises(GeminiError):
            client.generate("hi", self.config)
        assert session.post.call_count == 2
        assert self.sleeps == [0.3]

    def test_retry_then_success(self):
        session = MagicMock()
        session.post.side_effect = [
            requests.exceptions.Timeout("slow"),
            fake_response(payload=gemini_payload("  ok  ")),
        ]
        client = self.make_client(session)

        assert client.generate("hi", self.config) == "ok"
        assert session.post.call_count == 2

    def test_http_error_status(self):
        session = MagicMock()
        session.post.return_value = fake_response(status_code=403, text="forbidden")
        client = self.make_client(session)

        with pytest.raises(GeminiError, match="HTTP 403"):
            client.generate("hi", self.config)
        assert session.post.call_count == 2

    @pytest.mark.parametrize("payload", [
        {},
        {"candidates": []},
        {"candidates": [{"content": {}}]},
        {"candidates": [{"content": {"parts": [{"text": "   "}]}}]},
        {"candidates": ["not a candidate"]},
        {"candidates": {"0": {}}},
        {"candidates": [{"content": "text"}]},
        {"candidates": [{"content": {"parts": ["text"]}}]},
        ["candidates"],
    ])
    def test_unusable_payload(self, payload):
        session = MagicMock()
        session.post.return_value = fake_response(payload=payload)
        client = self.make_client(session)

        with pytest.raises(GeminiError):
            client.generate("hi", self.config)
        assert session.post.call_count == 2

    def test_invalid_json(self):
        session = MagicMock()
        session.post.return_value = fake_response(payload=ValueError("bad json"))
        client = self.make_client(session)

        with pytest.raises(GeminiError, match="invalid JSON"):
            client.generate("hi", self.config)

    def test_attempts_configurable(self):
        session = failing_session(times=3)
        client = self.make_client(session)

        with pytest.raises(GeminiError):
            client.generate("hi", self.config.reconfigure(gemini_attempts=3))
        assert session.post.call_count == 3
