"""Static mapping from edit mode to the hosted model that serves it."""

import logging
from functools import lru_cache

from food_image_enhancer.core.config import Settings, get_settings
from food_image_enhancer.models.enhance import (
    BodyKind,
    EditMode,
    EndpointDescriptor,
    ResponseKind,
)

logger = logging.getLogger(__name__)


class EndpointRegistry:
    """
    Lookup table of endpoint descriptors, one per edit mode.

    Unknown modes resolve to the Style entry, so ``resolve`` never raises.
    """

    def __init__(self, settings: Settings) -> None:
        base_url = settings.inference_base_url.rstrip("/")

        def url_for(model_id: str) -> str:
            return f"{base_url}/{model_id}"

        self._endpoints: dict[EditMode, EndpointDescriptor] = {
            EditMode.STYLE: EndpointDescriptor(
                mode=EditMode.STYLE,
                model_id=settings.style_model,
                url=url_for(settings.style_model),
                accept="image/png",
                body_kind=BodyKind.JSON_PROMPT,
                response_kind=ResponseKind.IMAGE,
                requires_image=False,
                failure_message=(
                    "Generation failed. The model may be loading or your key "
                    "may not have access."
                ),
                result_label="Generated food image",
            ),
            EditMode.BACKGROUND_CLEANING: EndpointDescriptor(
                mode=EditMode.BACKGROUND_CLEANING,
                model_id=settings.background_model,
                url=url_for(settings.background_model),
                accept="application/json",
                body_kind=BodyKind.JSON_BASE64,
                response_kind=ResponseKind.SEGMENTATION_JSON,
                requires_image=True,
                failure_message=(
                    "Background cleaning failed. The segmentation model may be "
                    "loading or your key may not have access."
                ),
                result_label="Background mask",
            ),
            EditMode.QUALITY_IMPROVEMENT: EndpointDescriptor(
                mode=EditMode.QUALITY_IMPROVEMENT,
                model_id=settings.quality_model,
                url=url_for(settings.quality_model),
                accept="image/png",
                body_kind=BodyKind.RAW_IMAGE,
                response_kind=ResponseKind.IMAGE,
                requires_image=True,
                failure_message=(
                    "Quality improvement failed. The upscaling model may be "
                    "loading or your key may not have access."
                ),
                result_label="Quality-improved photo",
            ),
        }

    def resolve(self, mode: str | EditMode) -> EndpointDescriptor:
        """
        Get the descriptor for an edit mode.

        Args:
            mode: Edit mode or its raw string value

        Returns:
            Descriptor for the mode, or the Style descriptor for unknown modes
        """
        try:
            edit_mode = EditMode(mode)
        except ValueError:
            logger.debug(f"Unknown edit mode {mode!r}, falling back to Style")
            edit_mode = EditMode.STYLE
        return self._endpoints[edit_mode]

    def all(self) -> list[EndpointDescriptor]:
        """All descriptors, in edit mode order."""
        return [self._endpoints[mode] for mode in EditMode]


@lru_cache
def get_endpoint_registry() -> EndpointRegistry:
    """
    Get a cached registry instance.

    Returns:
        EndpointRegistry configured from settings
    """
    return EndpointRegistry(get_settings())
