"""Runs a single tailer on a background thread for the API and CLI."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List, Optional

from models import TailerConfig
from observers import BufferedObserver, TailerObserver
from tailer import LogTailer, TailerState

logger = logging.getLogger(__name__)


@dataclass
class TailerStatusRecord:
    """Snapshot of the tailer for status reporting."""

    path: Optional[Path]
    state: TailerState
    exit_state: Optional[TailerState]
    running: bool
    lines_read: int
    started_at: Optional[datetime]
    poll_interval_ms: int
    max_duration_hours: float
    file_not_found: bool
    file_removed: bool
    last_error: Optional[str]


class TailerService:
    """Owns one LogTailer, its daemon thread and a buffer of recent lines."""

    def __init__(
        self,
        config: TailerConfig,
        *,
        tailer_factory: Optional[Callable[[TailerConfig], LogTailer]] = None,
    ) -> None:
        self.config = config
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._started_at: Optional[datetime] = None

        factory = tailer_factory or LogTailer.from_config
        self.tailer = factory(config)
        self.buffer = BufferedObserver(max_lines=config.buffer_size)
        self.tailer.add_observer(self.buffer)

        logger.debug("TailerService initialised for %s", config.path)

    # Public API -----------------------------------------------------------------
    def add_observer(self, observer: TailerObserver) -> bool:
        return self.tailer.add_observer(observer)

    def remove_observer(self, observer: TailerObserver) -> bool:
        return self.tailer.remove_observer(observer)

    def start(self, timeout: float = 5.0) -> None:
        """Launch the tailer thread; a second call while running is a no-op."""

        with self._lock:
            if self._thread is not None:
                logger.debug("Tailer thread already started for %s", self.config.path)
                return
            self._thread = threading.Thread(
                target=self.tailer.run,
                name=f"tailer-{self.config.path.name if self.config.path else 'unset'}",
                daemon=True,
            )
            self._started_at = datetime.now(timezone.utc)
            self._thread.start()
        self.tailer.wait_started(timeout)
        logger.info("Started tailer thread for %s", self.config.path)

    def stop(self, timeout: float = 5.0) -> bool:
        """Request a stop and wait for the thread. Returns True if it has ended."""

        self.tailer.request_stop()
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout=timeout)
        stopped = not thread.is_alive()
        if stopped:
            logger.info("Stopped tailer thread for %s", self.config.path)
        else:
            logger.warning("Tailer thread for %s did not stop within %.1fs", self.config.path, timeout)
        return stopped

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def recent_lines(self, limit: Optional[int] = None) -> List[str]:
        return self.buffer.recent(limit)

    def status(self) -> TailerStatusRecord:
        last_error = self.buffer.last_error
        return TailerStatusRecord(
            path=self.tailer.watched_path,
            state=self.tailer.state,
            exit_state=self.tailer.exit_state,
            running=self.is_running,
            lines_read=self.tailer.lines_read,
            started_at=self._started_at,
            poll_interval_ms=self.tailer.poll_interval // timedelta(milliseconds=1),
            max_duration_hours=(
                self.tailer.max_duration.total_seconds() / 3600
                if self.tailer.max_duration
                else 0
            ),
            file_not_found=self.buffer.file_not_found,
            file_removed=self.buffer.file_removed,
            last_error=str(last_error) if last_error else None,
        )
