"""Shared fixtures for fetch tests."""

import httpx
import pytest


@pytest.fixture
def mock_client():
    """Build an httpx client whose requests are answered by *handler*."""
    clients = []

    def _make(handler):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()
