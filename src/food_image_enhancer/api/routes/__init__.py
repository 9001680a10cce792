"""API route modules."""

from . import enhance

__all__ = ["enhance"]
