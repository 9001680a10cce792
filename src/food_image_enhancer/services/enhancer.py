"""
Enhancement service - the top-level action handler.

Runs one user action end to end:
validating -> dispatching -> awaiting response -> success | failed.
Every failure is turned into a user-facing message; nothing propagates.
"""

import logging
from functools import lru_cache

from food_image_enhancer.core.config import Settings, get_settings
from food_image_enhancer.core.exceptions import EnhancerError, ErrorKind, ValidationError
from food_image_enhancer.models.enhance import (
    EditMode,
    EndpointDescriptor,
    EnhanceRequest,
    EnhancementOutcome,
    ImageResult,
    InferenceFailure,
    MaskResult,
    SourceImage,
)
from food_image_enhancer.services.endpoint_registry import (
    EndpointRegistry,
    get_endpoint_registry,
)
from food_image_enhancer.services.inference import InferenceClient, get_inference_client
from food_image_enhancer.services.payload_codec import (
    encode_for_endpoint,
    source_image_from_data_url,
    to_data_url,
)
from food_image_enhancer.services.prompt_builder import build_prompt

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = (
    "Something went wrong while generating the image. "
    "Please check your API key, model access, and try again."
)
MISSING_KEY_MESSAGE = "Please paste your Hugging Face API key before generating."


class EnhancementService:
    """Orchestrates prompt, payload, endpoint and client for one action."""

    def __init__(
        self,
        client: InferenceClient,
        registry: EndpointRegistry,
        settings: Settings,
    ) -> None:
        self.client = client
        self.registry = registry
        self.settings = settings

    def validate(
        self, request: EnhanceRequest, descriptor: EndpointDescriptor
    ) -> tuple[str, SourceImage | None]:
        """
        Check the inputs before any network call.

        The API key is checked first. The photo is only looked at (and a data
        URL only decoded) for modes that send it; Style ignores it.

        Returns:
            The trimmed API key and the photo to send, if any

        Raises:
            ValidationError: If the key is missing or a required image is absent/too large
            EncodingError: If a required photo was given as an undecodable data URL
        """
        api_key = request.api_key.strip()
        if not api_key:
            raise ValidationError(MISSING_KEY_MESSAGE)

        if not descriptor.requires_image:
            return api_key, None

        image = request.image
        if image is None and request.image_data_url:
            image = source_image_from_data_url(request.image_data_url)

        if image is None:
            raise ValidationError(
                f"Please choose a photo to use for {descriptor.mode.value.lower()}.",
                details={"mode": descriptor.mode.value},
            )

        max_bytes = self.settings.max_upload_bytes
        if image.size > max_bytes:
            raise ValidationError(
                f"The photo exceeds the maximum size of {max_bytes // (1024 * 1024)} MB.",
                details={"size": image.size, "max_size": max_bytes},
            )

        return api_key, image

    async def enhance(self, request: EnhanceRequest) -> EnhancementOutcome:
        """
        Run one enhance action.

        Args:
            request: Form inputs for this action

        Returns:
            EnhancementOutcome with either an image or a user-facing error
        """
        descriptor = self.registry.resolve(request.mode)
        prompt = build_prompt(request.food, request.mode)

        try:
            logger.debug(f"Validating {descriptor.mode.value} request for {request.food!r}")
            api_key, image = self.validate(request, descriptor)

            if image is None:
                logger.info("No photo sent, using text prompt only")

            logger.debug(f"Dispatching to {descriptor.model_id}")
            body = encode_for_endpoint(descriptor.body_kind, image, prompt=prompt)

            logger.debug("Awaiting response")
            result = await self.client.invoke(api_key, descriptor, body)
        except EnhancerError as e:
            logger.info(f"{descriptor.mode.value} action failed: {e.message}")
            return self._error(descriptor, prompt, e.kind, e.message)
        except Exception:
            logger.exception("Unexpected error while enhancing image")
            return self._error(descriptor, prompt, ErrorKind.UNKNOWN_FAILURE, GENERIC_FAILURE_MESSAGE)

        if isinstance(result, InferenceFailure):
            logger.info(f"{descriptor.mode.value} action failed: {result.message}")
            return self._error(descriptor, prompt, result.error_kind, result.message)

        logger.info(f"{descriptor.mode.value} action succeeded ({result.kind})")
        return EnhancementOutcome(
            status="success",
            mode=descriptor.mode,
            prompt=prompt,
            result_kind=result.kind,
            content_type=result.content_type,
            data_url=to_data_url(result.data, result.content_type),
            image_bytes=result.data,
            alt_text=self._alt_text(descriptor, request.food, prompt, result),
        )

    @staticmethod
    def _alt_text(
        descriptor: EndpointDescriptor,
        food: str,
        prompt: str,
        result: ImageResult | MaskResult,
    ) -> str:
        if isinstance(result, MaskResult):
            parts = []
            if result.label:
                parts.append(result.label)
            if result.score is not None:
                parts.append(f"score {result.score:.2f}")
            suffix = f" ({', '.join(parts)})" if parts else ""
            return f"{descriptor.result_label} for {food} photo{suffix}"
        if descriptor.mode == EditMode.STYLE:
            return f"Generated food image based on prompt: {prompt}"
        return f"{descriptor.result_label} for {food}"

    @staticmethod
    def _error(
        descriptor: EndpointDescriptor,
        prompt: str,
        kind: ErrorKind,
        message: str,
    ) -> EnhancementOutcome:
        return EnhancementOutcome(
            status="error",
            mode=descriptor.mode,
            prompt=prompt,
            error_kind=kind,
            message=message or GENERIC_FAILURE_MESSAGE,
        )


@lru_cache
def get_enhancement_service() -> EnhancementService:
    """Get a cached service wired from settings."""
    return EnhancementService(
        client=get_inference_client(),
        registry=get_endpoint_registry(),
        settings=get_settings(),
    )
