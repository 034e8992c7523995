import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from settings import Settings


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        OPENAI_API_KEY="sk-test",
        HUBSPOT_API_KEY="pat-test",
        KEYWORD_REPLY_DELAY=0,
    )


class FakeHubSpot:
    """Serves canned HubSpot responses by path and records every request."""

    def __init__(self):
        self.calls = []
        self._routes = {}

    def on(self, path, status=200, body=None, exc=None):
        self._routes[path] = (status, body, exc)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        status, body, exc = self._routes.get(request.url.path, (404, {"message": "not found"}, None))
        if exc is not None:
            raise exc
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body or "")

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    @property
    def paths(self):
        return [r.url.path for r in self.calls]

    def json_of(self, index):
        return json.loads(self.calls[index].content)


@pytest.fixture
def hubspot():
    return FakeHubSpot()


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion("Happy to help with internships!"))
    return client


@pytest.fixture
def make_completion():
    return completion
