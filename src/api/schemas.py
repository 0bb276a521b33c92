"""Pydantic schemas used by the public FastAPI surface."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

TailerStateName = Literal[
    "new",
    "starting",
    "polling",
    "sleeping",
    "file_gone",
    "timed_out",
    "stopped",
    "error",
    "closed",
]


class TailerStatus(BaseModel):
    """Current state of the tailer and the lifecycle events it has reported."""

    path: Optional[str] = Field(default=None, description="File being tailed.")
    state: TailerStateName
    exit_state: Optional[TailerStateName] = Field(
        default=None,
        description="Terminal state the run ended in, once it has finished.",
    )
    running: bool
    lines_read: int = Field(ge=0)
    started_at: Optional[datetime] = None
    poll_interval_ms: int = Field(gt=0)
    max_duration_hours: float = Field(
        ge=0, description="Deadline in hours; 0 means unlimited."
    )
    file_not_found: bool
    file_removed: bool
    last_error: Optional[str] = None


class LineList(BaseModel):
    """Most recent lines, oldest first."""

    items: List[str]
    total_lines: int = Field(ge=0, description="Lines delivered since the tailer started.")


class StopResult(BaseModel):
    """Outcome of a stop request."""

    stopped: bool
    state: TailerStateName


class ErrorMessage(BaseModel):
    """Consistent error envelope for API responses."""

    detail: str
