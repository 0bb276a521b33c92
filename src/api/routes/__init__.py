"""API route registration helpers."""

from .tailer import get_router as get_tailer_router

__all__ = ["get_tailer_router"]
