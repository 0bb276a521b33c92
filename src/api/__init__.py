"""API package exposing the FastAPI application factory."""

from .server import create_app

__all__ = ["create_app"]
