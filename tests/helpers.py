"""
Shared fakes for the test suite: inline executor and canned HTTP responses.
"""
from concurrent.futures import Executor, Future
from unittest.mock import MagicMock

import requests


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


def fake_response(status_code=200, payload=None, text=''):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


def gemini_payload(text):
    return {
        "candidates": [
            {"content": {"parts": [{"text": text}], "role": "model"}}
        ]
    }


def gemini_session(*texts):
    """Session whose post() answers with each text in turn."""
    session = MagicMock()
    session.post.side_effect = [fake_response(payload=gemini_payload(t)) for t in texts]
    return session


def failing_session(times=2):
    """Session whose post() and get() raise connection errors."""
    session = MagicMock()
    session.post.side_effect = [requests.exceptions.ConnectionError("connection refused")] * times
    session.get.side_effect = requests.exceptions.ConnectionError("connection refused")
    return session
