"""Payload encoding and decoding for the hosted model contracts.

Encoding turns the prompt or source image into the body an endpoint expects.
Decoding turns the segmentation endpoint's JSON candidates into a single mask.
"""

import base64
import binascii
import json
import logging
from typing import Any

from food_image_enhancer.core.exceptions import (
    EmptyResultError,
    EncodingError,
    MissingFieldError,
)
from food_image_enhancer.models.enhance import (
    BodyKind,
    EditMode,
    MaskResult,
    RequestBody,
    SourceImage,
)
from food_image_enhancer.services.endpoint_registry import get_endpoint_registry

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
FALLBACK_CONTENT_TYPE = "application/octet-stream"


# =============================================================================
# Base64 helpers
# =============================================================================


def strip_data_url_prefix(value: str) -> str:
    """Remove one leading ``data:...,`` prefix, if present."""
    if value.startswith("data:") and "," in value:
        return value.split(",", 1)[1]
    return value


def to_base64(source: bytes | str) -> str:
    """
    Get base64 text for an image.

    Args:
        source: Raw image bytes, or a data URL / base64 string

    Returns:
        Base64 text without any data URL prefix

    Raises:
        EncodingError: If the source is not bytes or text
    """
    if isinstance(source, str):
        return strip_data_url_prefix(source)
    if isinstance(source, (bytes, bytearray)):
        return base64.b64encode(source).decode("ascii")
    raise EncodingError(
        f"Unexpected image data of type {type(source).__name__}",
        details={"type": type(source).__name__},
    )


def to_data_url(data: bytes, content_type: str = "image/png") -> str:
    """Encode bytes as a ``data:`` URL."""
    return f"data:{content_type};base64,{to_base64(data)}"


def source_image_from_data_url(value: str, filename: str | None = None) -> SourceImage:
    """
    Build a SourceImage from a data URL (or bare base64 text).

    Raises:
        EncodingError: If the payload is not valid base64
    """
    content_type = None
    if value.startswith("data:") and "," in value:
        header = value[len("data:"):value.index(",")]
        content_type = header.split(";", 1)[0] or None
    try:
        data = base64.b64decode(strip_data_url_prefix(value), validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Could not read the image: {e}") from e
    return SourceImage(data=data, content_type=content_type, filename=filename)


# =============================================================================
# Encoding
# =============================================================================


def _require_image_bytes(image: SourceImage | None) -> bytes:
    if image is None:
        raise EncodingError("No image was supplied to encode")
    if not image.data:
        raise EncodingError(
            "The selected image could not be read (file is empty)",
            details={"filename": image.filename},
        )
    return image.data


def encode_for_endpoint(
    body_kind: BodyKind,
    image: SourceImage | None,
    *,
    prompt: str,
) -> RequestBody:
    """
    Encode the request body for an endpoint contract.

    Args:
        body_kind: Body shape the endpoint expects
        image: Source image; ignored for prompt-only bodies
        prompt: Text prompt for prompt-only bodies

    Returns:
        RequestBody with content bytes and content type

    Raises:
        EncodingError: If a required image is missing or unreadable
    """
    if body_kind == BodyKind.JSON_PROMPT:
        return RequestBody(
            content=json.dumps({"inputs": prompt}).encode("utf-8"),
            content_type=JSON_CONTENT_TYPE,
        )

    data = _require_image_bytes(image)

    if body_kind == BodyKind.JSON_BASE64:
        return RequestBody(
            content=json.dumps({"inputs": to_base64(data)}).encode("utf-8"),
            content_type=JSON_CONTENT_TYPE,
        )

    return RequestBody(
        content=data,
        content_type=image.content_type or FALLBACK_CONTENT_TYPE,
    )


def encode_for_mode(
    mode: str | EditMode,
    image: SourceImage | None,
    *,
    prompt: str,
) -> RequestBody:
    """Encode the request body for the endpoint registered for ``mode``."""
    descriptor = get_endpoint_registry().resolve(mode)
    return encode_for_endpoint(descriptor.body_kind, image, prompt=prompt)


# =============================================================================
# Decoding
# =============================================================================


def _score_of(candidate: Any) -> float:
    """Numeric score of a candidate; missing or non-numeric ranks lowest."""
    if not isinstance(candidate, dict):
        return float("-inf")
    score = candidate.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return float("-inf")
    return float(score)


def decode_segmentation_response(payload: Any) -> MaskResult:
    """
    Pick the best segmentation candidate and decode its mask.

    Args:
        payload: Parsed JSON body, expected to be a list of
            ``{"score": float, "mask": base64, "label": str}`` entries

    Returns:
        MaskResult for the highest-score candidate (first one wins on ties)

    Raises:
        EmptyResultError: If there are no candidates
        MissingFieldError: If the payload isn't a list or the best entry has no mask
        EncodingError: If the mask isn't valid base64
    """
    if not isinstance(payload, list):
        raise MissingFieldError(
            "candidates",
            message="Unexpected response from the segmentation model (expected a list of candidates)",
        )
    if not payload:
        raise EmptyResultError("The segmentation model returned no candidates")

    # max() keeps the first maximal element, which gives first-wins on ties
    best = max(payload, key=_score_of)

    mask = best.get("mask") if isinstance(best, dict) else None
    if not mask:
        raise MissingFieldError(
            "mask",
            message="The best segmentation candidate has no mask",
        )

    if not isinstance(mask, str):
        raise EncodingError("The segmentation mask is not base64 text")
    try:
        mask_bytes = base64.b64decode(strip_data_url_prefix(mask), validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Could not decode the segmentation mask: {e}") from e

    score = _score_of(best)
    label = best.get("label")
    logger.debug(f"Selected mask {label!r} with score {score} out of {len(payload)} candidates")

    return MaskResult(
        data=mask_bytes,
        score=score if score != float("-inf") else None,
        label=label if isinstance(label, str) else None,
    )
