"""Pydantic models for the enhancer."""

from .enhance import (
    BodyKind,
    EditMode,
    EndpointDescriptor,
    EnhanceRequest,
    EnhancementOutcome,
    ImageResult,
    InferenceFailure,
    InferenceRequest,
    InferenceResult,
    MaskResult,
    RequestBody,
    ResponseKind,
    SourceImage,
)

__all__ = [
    "BodyKind",
    "EditMode",
    "EndpointDescriptor",
    "EnhanceRequest",
    "EnhancementOutcome",
    "ImageResult",
    "InferenceFailure",
    "InferenceRequest",
    "InferenceResult",
    "MaskResult",
    "RequestBody",
    "ResponseKind",
    "SourceImage",
]
