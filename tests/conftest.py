#  Bankr App Kit - Test Fixtures
#
#  Shared fixtures for the test suite.
#  HTTP goes through httpx.MockTransport; time comes from a fake clock, so
#  window arithmetic is exact and no test sleeps through a rate-limit window.
#
#  Depends on: bankr_app/services/gateway.py, bankr_app/models/schemas.py
#  Used by:    all test files

from unittest.mock import AsyncMock

import httpx
import pytest

from bankr_app.models.schemas import GatewayConfig
from bankr_app.services.gateway import AgentGateway


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = 0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int):
        self.now += ms


def agent_reply(content: str, status_code: int = 200) -> httpx.Response:
    """A chat-completions style response carrying content."""
    return httpx.Response(
        status_code,
        json={"choices": [{"message": {"role": "assistant", "content": content}}]},
    )


# ---------------------------------------------------------------------------
# Gateway fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway_config():
    """Small window so limit behaviour is easy to reach."""
    return GatewayConfig(
        endpoint_base_url="https://agent.test",
        auth_token="test-token",
        max_requests_per_window=3,
        window_duration_ms=1000,
        request_timeout_s=5.0,
    )


@pytest.fixture
async def make_gateway(clock, gateway_config):
    """Factory: make_gateway(handler, **config_overrides) -> AgentGateway.

    handler receives the httpx.Request and returns an httpx.Response (sync or
    async). Clients created here are closed at teardown.
    """
    clients: list[httpx.AsyncClient] = []

    def _make(handler, **overrides) -> AgentGateway:
        config = gateway_config.model_copy(update=overrides) if overrides else gateway_config
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return AgentGateway(config, http_client=client, clock=clock)

    yield _make

    for client in clients:
        await client.aclose()


@pytest.fixture
def mock_gateway():
    """AsyncMock standing in for AgentGateway in client tests."""
    gateway = AsyncMock()
    gateway.submit = AsyncMock(return_value="ok")
    gateway.verify_connectivity = AsyncMock()
    return gateway
