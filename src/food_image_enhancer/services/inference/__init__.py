"""HTTP client for the hosted inference models."""

from .client import InferenceClient, get_inference_client, truncate_detail

__all__ = ["InferenceClient", "get_inference_client", "truncate_detail"]
