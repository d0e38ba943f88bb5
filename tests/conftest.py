"""Shared pytest fixtures: settings snapshot and a fake Perplexica."""

import inspect

import httpx
import pytest

from perplexica.config import Settings

BASE_URL = "http://perplexica.test"


class FakePerplexica:
    """MockTransport handler that records every request it receives."""

    def __init__(self, responder):
        self.requests: list[httpx.Request] = []
        self._responder = responder

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responder(request)
        if inspect.isawaitable(response):
            response = await response
        return response


@pytest.fixture
def settings():
    return Settings(base_url=BASE_URL, default_timeout_ms=5000, log_level="debug")


@pytest.fixture
async def fake_upstream():
    """Factory: ``upstream, client = fake_upstream(responder)``."""
    clients = []

    def make(responder):
        upstream = FakePerplexica(responder)
        client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
        clients.append(client)
        return upstream, client

    yield make
    for client in clients:
        await client.aclose()
