"""Observer interface for tailer notifications and a few ready-made observers."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable, List, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class TailerObserver(Protocol):
    """Capability set every tailer observer provides."""

    def on_line(self, line: str) -> None:
        """Called once per newly read line, in file order."""

    def on_file_not_found(self) -> None:
        """Called if the watched file cannot be opened when the tailer starts."""

    def on_file_removed(self) -> None:
        """Called if the watched file disappears while it is being tailed."""

    def on_exception(self, exc: Exception) -> None:
        """Called for any other failure (read, close, interrupted wait)."""


class BaseTailerObserver:
    """No-op implementation; override only the events you care about."""

    def on_line(self, line: str) -> None:
        pass

    def on_file_not_found(self) -> None:
        pass

    def on_file_removed(self) -> None:
        pass

    def on_exception(self, exc: Exception) -> None:
        pass


class CallbackObserver(BaseTailerObserver):
    """
    Forwards events to plain callables. Only `on_line` is required.
    """

    def __init__(
        self,
        on_line: Callable[[str], None],
        on_file_not_found: Optional[Callable[[], None]] = None,
        on_file_removed: Optional[Callable[[], None]] = None,
        on_exception: Optional[Callable[[Exception], None]] = None,
    ):
        self._on_line = on_line
        self._on_file_not_found = on_file_not_found
        self._on_file_removed = on_file_removed
        self._on_exception = on_exception

    def on_line(self, line: str) -> None:
        self._on_line(line)

    def on_file_not_found(self) -> None:
        if self._on_file_not_found:
            self._on_file_not_found()

    def on_file_removed(self) -> None:
        if self._on_file_removed:
            self._on_file_removed()

    def on_exception(self, exc: Exception) -> None:
        if self._on_exception:
            self._on_exception(exc)


class LoggingObserver(BaseTailerObserver):
    """Writes every tailer event to a logger."""

    def __init__(self, name: str = 'logtailer.lines', line_level: int = logging.INFO):
        self.log = logging.getLogger(name)
        self.line_level = line_level

    def on_line(self, line: str) -> None:
        self.log.log(self.line_level, "%s", line)

    def on_file_not_found(self) -> None:
        self.log.warning("Watched file not found")

    def on_file_removed(self) -> None:
        self.log.warning("Watched file was removed")

    def on_exception(self, exc: Exception) -> None:
        self.log.error("Tailer error: %s", exc)


class BufferedObserver(BaseTailerObserver):
    """
    Keeps the most recent lines and the lifecycle events seen so far.
    Safe to read from other threads while the tailer is running.
    """

    def __init__(self, max_lines: int = 500):
        if max_lines <= 0:
            raise ValueError("max_lines must be positive")
        self._lines: deque = deque(maxlen=max_lines)
        self._lock = threading.Lock()
        self.total_lines = 0
        self.file_not_found = False
        self.file_removed = False
        self.errors: List[Exception] = []

    def on_line(self, line: str) -> None:
        with self._lock:
            self._lines.append(line)
            self.total_lines += 1

    def on_file_not_found(self) -> None:
        self.file_not_found = True

    def on_file_removed(self) -> None:
        self.file_removed = True

    def on_exception(self, exc: Exception) -> None:
        with self._lock:
            self.errors.append(exc)

    def recent(self, limit: Optional[int] = None) -> List[str]:
        """Return up to `limit` most recent lines, oldest first."""
        with self._lock:
            lines = list(self._lines)
        if limit is not None:
            if limit <= 0:
                return []
            lines = lines[-limit:]
        return lines

    @property
    def last_error(self) -> Optional[Exception]:
        with self._lock:
            return self.errors[-1] if self.errors else None


__all__ = [
    "TailerObserver",
    "BaseTailerObserver",
    "CallbackObserver",
    "LoggingObserver",
    "BufferedObserver",
]
