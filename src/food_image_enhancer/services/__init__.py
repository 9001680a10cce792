"""Service layer for the enhancer."""

from .endpoint_registry import EndpointRegistry, get_endpoint_registry
from .enhancer import EnhancementService, get_enhancement_service
from .inference import InferenceClient, get_inference_client
from .prompt_builder import build_prompt

__all__ = [
    "EndpointRegistry",
    "get_endpoint_registry",
    "EnhancementService",
    "get_enhancement_service",
    "InferenceClient",
    "get_inference_client",
    "build_prompt",
]
