"""Tailer status and control endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, status

from api.schemas import ErrorMessage, LineList, StopResult, TailerStatus
from services import TailerService


def get_router(service: TailerService) -> APIRouter:
    """Create a router bound to the provided tailer service."""

    router = APIRouter(prefix="/tailer", tags=["tailer"])

    @router.get(
        "",
        response_model=TailerStatus,
        summary="Report the tailer state and lifecycle events",
    )
    def get_status() -> TailerStatus:
        record = service.status()
        return TailerStatus(
            path=str(record.path) if record.path else None,
            state=record.state.value,
            exit_state=record.exit_state.value if record.exit_state else None,
            running=record.running,
            lines_read=record.lines_read,
            started_at=record.started_at,
            poll_interval_ms=record.poll_interval_ms,
            max_duration_hours=record.max_duration_hours,
            file_not_found=record.file_not_found,
            file_removed=record.file_removed,
            last_error=record.last_error,
        )

    @router.get(
        "/lines",
        response_model=LineList,
        summary="Return the most recently tailed lines",
    )
    def get_lines(
        limit: Optional[int] = Query(default=None, ge=1, le=10000),
    ) -> LineList:
        return LineList(
            items=service.recent_lines(limit),
            total_lines=service.buffer.total_lines,
        )

    @router.post(
        "/stop",
        response_model=StopResult,
        responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorMessage}},
        summary="Ask the tailer to stop and wait briefly for it to finish",
    )
    def stop_tailer(
        timeout: float = Query(default=5.0, gt=0, le=60),
    ) -> StopResult:
        stopped = service.stop(timeout=timeout)
        return StopResult(stopped=stopped, state=service.tailer.state.value)

    return router
