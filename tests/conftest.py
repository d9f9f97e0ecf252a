"""
Shared fixtures: a test configuration and a scripted Amazon Q / OIDC upstream.
"""

from typing import Any, Dict

import httpx
import pytest
import pytest_asyncio

from config import GatewayConfig
from oauth import TokenLifecycleManager
from utils import MemoryCredentialStore

from tests.helpers import AMAZONQ_ENDPOINT, CREDENTIALS_KEY, OIDC_ENDPOINT, UpstreamStub, fixed_clock


@pytest.fixture
def gateway_config() -> GatewayConfig:
    return GatewayConfig(
        amazonq_endpoint=AMAZONQ_ENDPOINT,
        oidc_endpoint=OIDC_ENDPOINT,
        credentials_file=None,
        credentials_key=CREDENTIALS_KEY,
        stream_chunk_size=16,
    )


@pytest.fixture
def base_credentials() -> Dict[str, Any]:
    return {
        "refresh_token": "refresh-abc",
        "client_id": "client-123456789",
        "client_secret": "secret-xyz",
    }


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest_asyncio.fixture
async def http_client(upstream):
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    yield client
    await client.aclose()


@pytest.fixture
def make_manager(gateway_config, http_client):
    """Build a token manager over a memory store seeded with ``record``"""

    def _make(record=None, config=None, **kwargs) -> TokenLifecycleManager:
        initial = {CREDENTIALS_KEY: record} if record is not None else None
        store = kwargs.pop("store", None) or MemoryCredentialStore(initial)
        return TokenLifecycleManager(
            store,
            config or gateway_config,
            http_client=http_client,
            clock=kwargs.pop("clock", fixed_clock),
            **kwargs,
        )

    return _make
