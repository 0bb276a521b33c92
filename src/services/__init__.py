"""Service layer helpers for the log tailer."""

from .tailer_service import TailerService, TailerStatusRecord

__all__ = [
    "TailerService",
    "TailerStatusRecord",
]
