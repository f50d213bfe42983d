import numpy as np
import pytest
import requests

from gradient_studio.ai import AIConfig, ChatCompletionClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeSession:
    """Stands in for requests.Session: records posts, replays one outcome."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def completion(content):
    return FakeResponse(200, {"choices": [{"message": {"role": "assistant", "content": content}}]})


CONFIG = AIConfig(
    endpoint="https://example.openai.azure.com",
    deployment="gpt-4o",
    api_key="sk-test",
)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def unreachable_client():
    return ChatCompletionClient(CONFIG, session=FakeSession(error=requests.ConnectionError("down")))
