"""Pytest configuration and fixtures."""

from typing import AsyncGenerator
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from food_image_enhancer.core.config import Settings
from food_image_enhancer.services.endpoint_registry import EndpointRegistry
from food_image_enhancer.services.enhancer import EnhancementService, get_enhancement_service
from food_image_enhancer.services.inference import InferenceClient


@pytest.fixture
def settings() -> Settings:
    """Settings with known model ids, independent of the environment."""
    return Settings(
        inference_base_url="https://inference.test/models",
        style_model="test/style",
        background_model="test/segment",
        quality_model="test/upscale",
        error_detail_max_length=160,
        max_upload_bytes=1024,
        _env_file=None,
    )


@pytest.fixture
def registry(settings: Settings) -> EndpointRegistry:
    return EndpointRegistry(settings)


@pytest.fixture
def inference_client(settings: Settings) -> InferenceClient:
    return InferenceClient(
        timeout=5.0,
        error_detail_max_length=settings.error_detail_max_length,
    )


@pytest.fixture
def mock_http(inference_client: InferenceClient):
    """
    Replace the underlying httpx client with an AsyncMock.

    Usage:
        mock_http.request.return_value = httpx.Response(200, content=b"...")
    """
    with patch.object(inference_client, "_get_client") as mock_get_client:
        mock_http_client = AsyncMock()
        mock_get_client.return_value = mock_http_client
        yield mock_http_client


@pytest.fixture
def service(
    inference_client: InferenceClient,
    registry: EndpointRegistry,
    settings: Settings,
) -> EnhancementService:
    return EnhancementService(client=inference_client, registry=registry, settings=settings)


@pytest.fixture
async def client(service: EnhancementService) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async test client wired to the test service.

    Usage:
        async def test_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from food_image_enhancer.main import app

    app.dependency_overrides[get_enhancement_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
