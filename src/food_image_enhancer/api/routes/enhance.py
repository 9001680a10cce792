"""Enhance API routes.

Accepts the same inputs as the browser form (API key, food, edit mode and an
optional photo) and returns the generated image or a user-facing error.
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, File, Form, Response, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from food_image_enhancer.api.dependencies import (
    EnhancementServiceDep,
    RegistryDep,
    SettingsDep,
)
from food_image_enhancer.core.exceptions import STATUS_CODES, EncodingError
from food_image_enhancer.models.enhance import EnhanceRequest, EnhancementOutcome, SourceImage
from food_image_enhancer.services.enhancer import EnhancementService

router = APIRouter()
logger = logging.getLogger(__name__)


# =============================================================================
# Response Models
# =============================================================================


class EditModeOption(BaseModel):
    """One selectable edit mode."""

    model_config = ConfigDict(protected_namespaces=())

    value: str = Field(..., description="Value to submit as `mode`")
    requires_image: bool = Field(..., description="Whether a photo must be uploaded")
    model_id: str = Field(..., description="Hosted model serving this mode")


class EnhanceOptions(BaseModel):
    """Choices offered by the form."""

    modes: list[EditModeOption]
    food_categories: list[str]


# =============================================================================
# Helpers
# =============================================================================


async def read_photo(photo: UploadFile | None) -> SourceImage | None:
    """
    Read an uploaded photo into a SourceImage.

    An empty file field (no file chosen) counts as no photo.

    Raises:
        EncodingError: If the upload can't be read
    """
    if photo is None or not photo.filename:
        return None

    try:
        data = await photo.read()
    except Exception as e:
        raise EncodingError(f"Failed to read the photo: {e}") from e

    if not data:
        return None

    logger.debug(f"Read photo {photo.filename!r} ({len(data)} bytes, {photo.content_type})")
    return SourceImage(data=data, content_type=photo.content_type, filename=photo.filename)


def outcome_response(outcome: EnhancementOutcome) -> JSONResponse:
    """JSON response for an outcome, with the error kind's status on failure."""
    status_code = 200 if outcome.is_success else STATUS_CODES[outcome.error_kind]
    return JSONResponse(status_code=status_code, content=outcome.model_dump(mode="json"))


async def run_enhance(
    service: EnhancementService,
    api_key: str,
    food: str,
    mode: str,
    photo: UploadFile | None,
    photo_data_url: str | None,
) -> EnhancementOutcome:
    image = await read_photo(photo)
    request = EnhanceRequest(
        api_key=api_key,
        food=food,
        mode=mode,
        image=image,
        image_data_url=photo_data_url,
    )
    return await service.enhance(request)


# =============================================================================
# Routes
# =============================================================================


@router.get("/options", response_model=EnhanceOptions)
async def get_options(settings: SettingsDep, registry: RegistryDep) -> EnhanceOptions:
    """List edit modes and suggested food categories."""
    return EnhanceOptions(
        modes=[
            EditModeOption(
                value=d.mode.value,
                requires_image=d.requires_image,
                model_id=d.model_id,
            )
            for d in registry.all()
        ],
        food_categories=settings.food_categories,
    )


@router.post(
    "",
    response_model=EnhancementOutcome,
    responses={
        422: {"model": EnhancementOutcome, "description": "Missing key or photo"},
        502: {"model": EnhancementOutcome, "description": "Hosted model failed"},
    },
)
async def enhance(
    service: EnhancementServiceDep,
    api_key: str = Form("", description="Hugging Face API token"),
    food: str = Form(..., description="Food category, e.g. 'Pizza'"),
    mode: str = Form(..., description="Edit mode, see /enhance/options"),
    photo: UploadFile | None = File(None, description="Source photo"),
    photo_data_url: str | None = Form(None, description="Source photo as a data: URL"),
):
    """
    Run one enhancement and return the result as a data URL.

    - **Style**: generates a new image from the prompt (photo not used)
    - **Background cleaning**: returns the best segmentation mask of the photo
    - **Quality improvement**: returns an upscaled version of the photo
    """
    outcome = await run_enhance(service, api_key, food, mode, photo, photo_data_url)
    return outcome_response(outcome)


@router.post("/image")
async def enhance_image(
    service: EnhancementServiceDep,
    api_key: str = Form("", description="Hugging Face API token"),
    food: str = Form(..., description="Food category, e.g. 'Pizza'"),
    mode: str = Form(..., description="Edit mode, see /enhance/options"),
    photo: UploadFile | None = File(None, description="Source photo"),
    photo_data_url: str | None = Form(None, description="Source photo as a data: URL"),
):
    """
    Run one enhancement and return the image bytes directly.

    Alt text is returned percent-encoded in the `X-Alt-Text` header. Errors
    come back as the same JSON body as `POST /enhance`.
    """
    outcome = await run_enhance(service, api_key, food, mode, photo, photo_data_url)
    if not outcome.is_success:
        return outcome_response(outcome)

    # Header values must be latin-1; percent-encode so non-ASCII food names survive
    alt_text = quote(outcome.alt_text or "", safe=" ,.:;()'-")
    return Response(
        content=outcome.image_bytes,
        media_type=outcome.content_type,
        headers={"X-Alt-Text": alt_text},
    )
