"""FastAPI application wiring for the log tailer."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from api.routes import get_tailer_router
from config import build_config
from services import TailerService


def create_app(service: Optional[TailerService] = None) -> FastAPI:
    """Instantiate the FastAPI application around a single tailer service."""

    app = FastAPI(
        title="Log Tailer API",
        version="0.1.0",
        description="HTTP interface for inspecting and stopping a running file tailer.",
    )

    tailer_service = service or TailerService(build_config({}))
    app.state.tailer_service = tailer_service
    app.include_router(get_tailer_router(tailer_service), prefix="/api")

    @app.get("/healthz", tags=["system"], summary="Liveness probe")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app
