import json
from urllib.parse import parse_qs

import httpx
import pytest

from teams_mcp.auth import TokenBroker
from teams_mcp.config import Settings


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class Recorder:
    """httpx.MockTransport handler that records requests and replays
    canned responses in order (the last one repeats)."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses) or [httpx.Response(200, json={})]
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        canned = self.responses[min(len(self.requests), len(self.responses)) - 1]
        return httpx.Response(canned.status_code, headers=canned.headers,
                              content=canned.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def json(self, i: int = -1):
        return json.loads(self.requests[i].content)

    def form(self, i: int = -1):
        return {k: v[0] for k, v in
                parse_qs(self.requests[i].content.decode()).items()}


def token_response(token="tok-1", expires_in=3600):
    return httpx.Response(200, json={
        "token_type": "Bearer", "expires_in": expires_in,
        "access_token": token})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def bot_settings():
    return Settings(
        app_id="app-id", app_password="app-secret",
        service_url="https://smba.example.com/amer",
        conversation_id="19:abc@thread.tacv2",
    )


@pytest.fixture
def graph_settings():
    return Settings(api_mode="graph", access_token="user-token",
                    graph_url="https://graph.example.com/v1.0")


@pytest.fixture
def broker(clock):
    recorder = Recorder(token_response())
    return TokenBroker("app-id", "app-secret", clock=clock,
                       transport=recorder.transport)


class FakeMCP:
    """Collects functions registered with ``@mcp.tool()``."""

    def __init__(self):
        self.tools = {}

    def tool(self, *args, **kwargs):
        def decorator(fn):
            self.tools[kwargs.get("name") or fn.__name__] = fn
            return fn
        return decorator


@pytest.fixture
def fake_mcp():
    return FakeMCP()
