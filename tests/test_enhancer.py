"""Unit tests for the enhancement service."""

import base64
import json
from unittest.mock import patch

import httpx
import pytest

from food_image_enhancer.core.exceptions import ErrorKind
from food_image_enhancer.models.enhance import EditMode, EnhanceRequest, SourceImage
from food_image_enhancer.services.enhancer import (
    GENERIC_FAILURE_MESSAGE,
    MISSING_KEY_MESSAGE,
    EnhancementService,
)

# Sample test image (1x1 red pixel PNG)
TINY_PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8DwHwAFBQIAX8jx0gAAAABJRU5ErkJggg=="
)
TINY_PNG_BYTES = base64.b64decode(TINY_PNG_BASE64)


def photo() -> SourceImage:
    return SourceImage(data=TINY_PNG_BYTES, content_type="image/png", filename="pizza.png")


class TestValidation:
    """Tests for checks done before any network call."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("api_key", ["", "   ", "\n\t"])
    async def test_missing_api_key(self, service: EnhancementService, mock_http, api_key):
        """Test a blank key fails with no request issued."""
        outcome = await service.enhance(
            EnhanceRequest(api_key=api_key, food="Pizza", mode="Style")
        )

        assert outcome.status == "error"
        assert outcome.error_kind == ErrorKind.VALIDATION_ERROR
        assert outcome.message == MISSING_KEY_MESSAGE
        assert mock_http.request.call_count == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode", ["Background cleaning", "Quality improvement"])
    async def test_image_required(self, service: EnhancementService, mock_http, mode):
        """Test image modes without a photo fail with no request issued."""
        outcome = await service.enhance(
            EnhanceRequest(api_key="hf_key", food="Pizza", mode=mode)
        )

        assert outcome.error_kind == ErrorKind.VALIDATION_ERROR
        assert "photo" in outcome.message
        assert mock_http.request.call_count == 0

    @pytest.mark.asyncio
    async def test_photo_too_large(self, service: EnhancementService, mock_http):
        """Test photos above the configured limit are rejected."""
        big = SourceImage(data=b"\x00" * 2048, content_type="image/png")

        outcome = await service.enhance(
            EnhanceRequest(api_key="k", food="Pizza", mode="Quality improvement", image=big)
        )

        assert outcome.error_kind == ErrorKind.VALIDATION_ERROR
        mock_http.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_style_without_photo_proceeds(self, service: EnhancementService, mock_http):
        """Test Style needs no photo."""
        mock_http.request.return_value = httpx.Response(200, content=TINY_PNG_BYTES)

        outcome = await service.enhance(EnhanceRequest(api_key="k", food="Pizza", mode="Style"))

        assert outcome.status == "success"
        assert mock_http.request.call_count == 1


class TestEnhance:
    """Tests for full enhance actions."""

    @pytest.mark.asyncio
    async def test_style_end_to_end(self, service: EnhancementService, mock_http):
        """Test food=Pizza, mode=Style posts the prompt and returns the exact bytes."""
        mock_http.request.return_value = httpx.Response(
            200, content=TINY_PNG_BYTES, headers={"content-type": "image/png"}
        )

        outcome = await service.enhance(
            EnhanceRequest(api_key="  hf_key  ", food="Pizza", mode="Style")
        )

        mock_http.request.assert_called_once()
        call_args = mock_http.request.call_args
        assert call_args[0] == ("POST", "https://inference.test/models/test/style")
        assert call_args[1]["headers"]["Authorization"] == "Bearer hf_key"
        body = json.loads(call_args[1]["content"])
        assert body["inputs"].startswith("Pizza hero shot, ultra realistic, ")
        assert body["inputs"].endswith("sales landing page hero banner")

        assert outcome.status == "success"
        assert outcome.mode == EditMode.STYLE
        assert outcome.result_kind == "image"
        assert outcome.image_bytes == TINY_PNG_BYTES
        assert outcome.data_url == f"data:image/png;base64,{TINY_PNG_BASE64}"
        assert outcome.alt_text == f"Generated food image based on prompt: {body['inputs']}"

    @pytest.mark.asyncio
    async def test_style_ignores_photo(self, service: EnhancementService, mock_http):
        """Test a photo supplied in Style mode is not transmitted."""
        mock_http.request.return_value = httpx.Response(200, content=TINY_PNG_BYTES)

        await service.enhance(
            EnhanceRequest(api_key="k", food="Pizza", mode="Style", image=photo())
        )

        body = json.loads(mock_http.request.call_args[1]["content"])
        assert set(body) == {"inputs"}
        assert TINY_PNG_BASE64 not in body["inputs"]

    @pytest.mark.asyncio
    async def test_background_cleaning_returns_mask(self, service: EnhancementService, mock_http):
        """Test the best mask comes back as a PNG data URL."""
        mock_http.request.return_value = httpx.Response(
            200,
            json=[
                {"score": 0.4, "label": "plate", "mask": base64.b64encode(b"plate").decode()},
                {"score": 0.97, "label": "pizza", "mask": TINY_PNG_BASE64},
            ],
        )

        outcome = await service.enhance(
            EnhanceRequest(api_key="k", food="Pizza", mode="Background cleaning", image=photo())
        )

        sent = json.loads(mock_http.request.call_args[1]["content"])
        assert base64.b64decode(sent["inputs"]) == TINY_PNG_BYTES

        assert outcome.status == "success"
        assert outcome.result_kind == "mask"
        assert outcome.data_url == f"data:image/png;base64,{TINY_PNG_BASE64}"
        assert outcome.alt_text == "Background mask for Pizza photo (pizza, score 0.97)"

    @pytest.mark.asyncio
    async def test_quality_improvement(self, service: EnhancementService, mock_http):
        """Test the raw photo is posted and the upscaled image returned."""
        mock_http.request.return_value = httpx.Response(
            200, content=b"upscaled", headers={"content-type": "image/png"}
        )

        outcome = await service.enhance(
            EnhanceRequest(api_key="k", food="Sushi", mode="Quality improvement", image=photo())
        )

        assert mock_http.request.call_args[1]["content"] == TINY_PNG_BYTES
        assert outcome.image_bytes == b"upscaled"
        assert outcome.alt_text == "Quality-improved photo for Sushi"

    @pytest.mark.asyncio
    async def test_upstream_error_message(self, service: EnhancementService, mock_http):
        """Test HTTP failures surface the mode sentence and truncated detail."""
        mock_http.request.return_value = httpx.Response(503, text="d" * 500)

        outcome = await service.enhance(EnhanceRequest(api_key="k", food="Pizza", mode="Style"))

        assert outcome.status == "error"
        assert outcome.error_kind == ErrorKind.HTTP_ERROR
        assert outcome.message.startswith("Generation failed.")
        assert outcome.message.endswith("d" * 160 + "…")

    @pytest.mark.asyncio
    async def test_unknown_mode_uses_style(self, service: EnhancementService, mock_http):
        """Test an unknown mode is served by the Style endpoint."""
        mock_http.request.return_value = httpx.Response(200, content=TINY_PNG_BYTES)

        outcome = await service.enhance(EnhanceRequest(api_key="k", food="Pizza", mode="Vintage"))

        assert outcome.mode == EditMode.STYLE
        assert mock_http.request.call_args[0][1].endswith("/test/style")

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self, service: EnhancementService):
        """Test unexpected exceptions become the generic message."""
        with patch.object(service.client, "invoke", side_effect=RuntimeError("boom")):
            outcome = await service.enhance(
                EnhanceRequest(api_key="k", food="Pizza", mode="Style")
            )

        assert outcome.error_kind == ErrorKind.UNKNOWN_FAILURE
        assert outcome.message == GENERIC_FAILURE_MESSAGE


class TestDataUrlPhoto:
    """Tests for photos supplied as data URLs."""

    @pytest.mark.asyncio
    async def test_style_ignores_bad_data_url(self, service: EnhancementService, mock_http):
        """Test an undecodable data URL doesn't stop a Style generation."""
        mock_http.request.return_value = httpx.Response(200, content=TINY_PNG_BYTES)

        outcome = await service.enhance(
            EnhanceRequest(
                api_key="k",
                food="Pizza",
                mode="Style",
                image_data_url="data:image/png;base64,!!!",
            )
        )

        assert outcome.status == "success"
        assert outcome.image_bytes == TINY_PNG_BYTES

    @pytest.mark.asyncio
    async def test_missing_key_checked_before_data_url(
        self, service: EnhancementService, mock_http
    ):
        """Test a blank key is reported even when the data URL is also bad."""
        outcome = await service.enhance(
            EnhanceRequest(
                api_key="",
                food="Pizza",
                mode="Quality improvement",
                image_data_url="data:image/png;base64,!!!",
            )
        )

        assert outcome.error_kind == ErrorKind.VALIDATION_ERROR
        assert outcome.message == MISSING_KEY_MESSAGE
        mock_http.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_bad_data_url_for_image_mode(self, service: EnhancementService, mock_http):
        """Test an undecodable data URL fails image modes with ENCODING_ERROR."""
        outcome = await service.enhance(
            EnhanceRequest(
                api_key="k",
                food="Pizza",
                mode="Background cleaning",
                image_data_url="data:image/png;base64,!!!",
            )
        )

        assert outcome.error_kind == ErrorKind.ENCODING_ERROR
        mock_http.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_data_url_sent_for_image_mode(self, service: EnhancementService, mock_http):
        """Test a valid data URL is decoded and sent as the photo."""
        mock_http.request.return_value = httpx.Response(200, content=b"upscaled")

        outcome = await service.enhance(
            EnhanceRequest(
                api_key="k",
                food="Pizza",
                mode="Quality improvement",
                image_data_url=f"data:image/png;base64,{TINY_PNG_BASE64}",
            )
        )

        assert outcome.status == "success"
        assert mock_http.request.call_args[1]["content"] == TINY_PNG_BYTES
        assert mock_http.request.call_args[1]["headers"]["Content-Type"] == "image/png"
