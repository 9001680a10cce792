"""Food Image Enhancer - orchestration layer for hosted food photo models."""

__version__ = "1.0.0"
