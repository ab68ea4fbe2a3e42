"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - client_config: Configuration pointing at the test backend
    - query_request: A typical match query
    - scenario_body: Progress, result and sentinel records as bytes
    - stub_backend: FastAPI stand-in serving the scenario stream
    - stub_client: HTTPX client bound to the stub backend via ASGITransport
"""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.client.config import ClientConfig
from src.models.schemas import QueryRequest
from tests.streams import PROGRESS_FETCH, RESULT_TEAM_A, create_stub_backend, encode


@pytest.fixture
def client_config() -> ClientConfig:
    """Return configuration for the in-process test backend."""
    return ClientConfig(
        api_base_url="http://test",
        request_timeout=5.0,
        include_highlights=True,
        emphasize_order=True,
        audience="men",
    )


@pytest.fixture
def query_request() -> QueryRequest:
    """Return a typical query."""
    return QueryRequest(query="  How did Team A play last night?  ")


@pytest.fixture
def scenario_body() -> bytes:
    """Return one progress record, one result record and the sentinel."""
    return encode(PROGRESS_FETCH, RESULT_TEAM_A, "[DONE]")


@pytest.fixture
def stub_backend(scenario_body: bytes) -> FastAPI:
    """Return a stub backend that splits the scenario stream mid-record."""
    return create_stub_backend([scenario_body[:37], scenario_body[37:]])


@pytest.fixture
async def stub_client(stub_backend: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client wired to the stub backend.

    Yields:
        Configured AsyncClient for streaming test requests.
    """
    transport = ASGITransport(app=stub_backend)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
