"""HTTP client for the hosted inference models."""

import logging
from functools import lru_cache

import httpx

from food_image_enhancer.core.config import get_settings
from food_image_enhancer.core.exceptions import (
    EncodingError,
    EnhancerError,
    HttpError,
    UnknownFailure,
)
from food_image_enhancer.models.enhance import (
    EndpointDescriptor,
    ImageResult,
    InferenceFailure,
    InferenceRequest,
    InferenceResult,
    RequestBody,
    ResponseKind,
)
from food_image_enhancer.services.payload_codec import decode_segmentation_response

logger = logging.getLogger(__name__)

ELLIPSIS = "…"


def truncate_detail(detail: str, max_length: int) -> str:
    """Shorten an upstream error body to ``max_length`` characters plus an ellipsis."""
    if len(detail) > max_length:
        return f"{detail[:max_length]}{ELLIPSIS}"
    return detail


class InferenceClient:
    """Client that performs exactly one call to a hosted model per invocation."""

    def __init__(self, timeout: float = 120.0, error_detail_max_length: int = 160) -> None:
        """
        Initialize the inference client.

        Args:
            timeout: Request timeout in seconds
            error_detail_max_length: Characters of upstream error body kept in messages
        """
        self.timeout = timeout
        self.error_detail_max_length = error_detail_max_length
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def build_request(
        api_key: str,
        descriptor: EndpointDescriptor,
        body: RequestBody,
    ) -> InferenceRequest:
        """Assemble the outbound request for an endpoint."""
        return InferenceRequest(
            descriptor=descriptor,
            method=descriptor.method,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": body.content_type,
                "Accept": descriptor.accept,
            },
            body=body,
        )

    async def invoke(
        self,
        api_key: str,
        descriptor: EndpointDescriptor,
        body: RequestBody,
    ) -> InferenceResult:
        """
        Call a hosted model once and normalize the outcome.

        Args:
            api_key: Hugging Face token used as bearer credentials
            descriptor: Endpoint to call
            body: Encoded request body

        Returns:
            ImageResult, MaskResult or InferenceFailure. Never raises for
            HTTP, transport or payload problems.
        """
        request = self.build_request(api_key, descriptor, body)
        client = await self._get_client()

        logger.info(
            f"Calling {descriptor.model_id} for {descriptor.mode.value} "
            f"(body: {len(body.content)} bytes)"
        )

        try:
            response = await client.request(
                request.method,
                descriptor.url,
                content=body.content,
                headers=request.headers,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Request to {descriptor.model_id} failed: {e}")
            return InferenceFailure.from_error(
                UnknownFailure(f"{descriptor.failure_message} Could not reach the inference service.")
            )

        if not response.is_success:
            error = self._http_error(descriptor, response)
            logger.warning(
                f"{descriptor.model_id} returned {response.status_code}: {error.detail!r}"
            )
            return InferenceFailure.from_error(error)

        if descriptor.response_kind == ResponseKind.SEGMENTATION_JSON:
            try:
                payload = response.json()
            except ValueError as e:
                logger.warning(f"{descriptor.model_id} returned invalid JSON: {e}")
                return InferenceFailure.from_error(
                    EncodingError("The segmentation model returned a response that is not valid JSON.")
                )
            try:
                return decode_segmentation_response(payload)
            except EnhancerError as e:
                logger.warning(f"Unusable response from {descriptor.model_id}: {e.message}")
                return InferenceFailure.from_error(e)

        content_type = response.headers.get("content-type", "").split(";", 1)[0].strip()
        logger.info(f"{descriptor.model_id} returned {len(response.content)} bytes")
        return ImageResult(data=response.content, content_type=content_type or "image/png")

    def _http_error(self, descriptor: EndpointDescriptor, response: httpx.Response) -> HttpError:
        """Build an HttpError with a bounded, best-effort detail."""
        try:
            detail = response.text.strip()
        except Exception as e:
            logger.debug(f"Could not read error body: {e}")
            detail = ""

        short_detail = truncate_detail(detail, self.error_detail_max_length)
        message = descriptor.failure_message
        if short_detail:
            message = f"{message} Details: {short_detail}"

        return HttpError(message, upstream_status=response.status_code, detail=short_detail)


@lru_cache
def get_inference_client() -> InferenceClient:
    """
    Get a cached inference client instance.

    Returns:
        InferenceClient configured from settings
    """
    settings = get_settings()
    return InferenceClient(
        timeout=settings.inference_timeout,
        error_detail_max_length=settings.error_detail_max_length,
    )
