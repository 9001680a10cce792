"""Pydantic models for the enhance flow.

Covers the per-request material (source image, request body, outbound
request), the static endpoint descriptors, the tagged inference result and
the outcome handed to the presentation layer.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from food_image_enhancer.core.exceptions import EnhancerError, ErrorKind

# =============================================================================
# Enums
# =============================================================================


class EditMode(str, Enum):
    """Edit mode selected by the user. Values match the form options."""

    STYLE = "Style"
    BACKGROUND_CLEANING = "Background cleaning"
    QUALITY_IMPROVEMENT = "Quality improvement"


class BodyKind(str, Enum):
    """Shape of the body a hosted model expects."""

    JSON_PROMPT = "json_prompt"  # {"inputs": "<prompt>"}
    JSON_BASE64 = "json_base64"  # {"inputs": "<base64 image>"}
    RAW_IMAGE = "raw_image"  # image bytes as-is


class ResponseKind(str, Enum):
    """How a successful response body is interpreted."""

    IMAGE = "image"
    SEGMENTATION_JSON = "segmentation_json"


# =============================================================================
# Request material
# =============================================================================


class SourceImage(BaseModel):
    """User-supplied photo. Only lives for the duration of one request."""

    data: bytes = Field(..., description="Raw image bytes")
    content_type: str | None = Field(None, description="Declared MIME type")
    filename: str | None = Field(None, description="Original filename")

    @property
    def size(self) -> int:
        return len(self.data)


class RequestBody(BaseModel):
    """Encoded body ready to be sent to an endpoint."""

    content: bytes
    content_type: str


class EndpointDescriptor(BaseModel):
    """Static record describing how to call one hosted model."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    mode: EditMode
    model_id: str
    url: str
    method: str = "POST"
    accept: str
    body_kind: BodyKind
    response_kind: ResponseKind
    requires_image: bool
    failure_message: str = Field(
        ..., description="Base sentence shown when the model returns an error"
    )
    result_label: str = Field(..., description="Short label used in alt text")


class InferenceRequest(BaseModel):
    """Outbound call assembled immediately before dispatch."""

    descriptor: EndpointDescriptor
    method: str
    headers: dict[str, str]
    body: RequestBody


class EnhanceRequest(BaseModel):
    """Inputs collected from the form for one user action."""

    api_key: str = ""
    food: str
    mode: str
    image: SourceImage | None = None
    image_data_url: str | None = Field(
        None, description="Photo as a data: URL, used when no file was uploaded"
    )


# =============================================================================
# Inference result (tagged union)
# =============================================================================


class ImageResult(BaseModel):
    """Binary image returned by an image-producing model."""

    kind: Literal["image"] = "image"
    data: bytes
    content_type: str = "image/png"


class MaskResult(BaseModel):
    """Mask decoded from the best segmentation candidate."""

    kind: Literal["mask"] = "mask"
    data: bytes
    score: float | None = None
    label: str | None = None
    content_type: str = "image/png"


class InferenceFailure(BaseModel):
    """Normalized failure of a single inference call."""

    kind: Literal["failure"] = "failure"
    error_kind: ErrorKind
    message: str
    status_code: int | None = Field(
        None, description="Upstream HTTP status, when the model answered"
    )

    @classmethod
    def from_error(cls, error: EnhancerError) -> "InferenceFailure":
        upstream_status = getattr(error, "upstream_status", None)
        return cls(error_kind=error.kind, message=error.message, status_code=upstream_status)


InferenceResult = Annotated[
    Union[ImageResult, MaskResult, InferenceFailure],
    Field(discriminator="kind"),
]


# =============================================================================
# Presentation output
# =============================================================================


class EnhancementOutcome(BaseModel):
    """What the presentation layer renders: an image or an error string."""

    status: Literal["success", "error"]
    mode: EditMode | None = None
    prompt: str | None = None

    # Success
    result_kind: Literal["image", "mask"] | None = None
    content_type: str | None = None
    data_url: str | None = Field(None, description="data: URL of the output image")
    alt_text: str | None = None
    image_bytes: bytes | None = Field(None, exclude=True, description="Raw output image")

    # Error
    error_kind: ErrorKind | None = None
    message: str | None = Field(None, description="User-facing error message")

    @property
    def is_success(self) -> bool:
        return self.status == "success"
