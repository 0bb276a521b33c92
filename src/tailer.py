"""Polling tailer for a single growing text file."""

from __future__ import annotations

import codecs
import logging
import os
import threading
import time
from collections import deque
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Set, Union

from errors import (
    TailerCloseError,
    TailerError,
    TailerInterruptedError,
    TailerReadError,
    TailerStateError,
)
from models import TailerConfig
from observers import TailerObserver

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class TailerState(str, Enum):
    NEW = "new"
    STARTING = "starting"
    POLLING = "polling"
    SLEEPING = "sleeping"
    FILE_GONE = "file_gone"
    TIMED_OUT = "timed_out"
    STOPPED = "stopped"
    ERROR = "error"
    CLOSED = "closed"


class _LineCursor:
    """
    Read position inside the watched file.

    The file is only held open for the duration of a single read, so a
    running tailer never prevents the file from being deleted. Bytes are
    decoded incrementally as UTF-8 and split on ``\\n`` (a trailing ``\\r`` is
    dropped). A trailing fragment without a terminator is kept until the
    rest of the line arrives.
    """

    CHUNK_SIZE = 64 * 1024

    def __init__(self, path: Path, offset: int = 0):
        self.path = path
        self.offset = offset
        self.closed = False
        self.at_eof = False
        self._decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
        self._partial = ''
        self._lines: deque = deque()

    @classmethod
    def open(cls, path: Path, from_end: bool = False) -> "_LineCursor":
        # Raises OSError when the file is missing or unreadable.
        with open(path, 'rb') as fh:
            offset = fh.seek(0, os.SEEK_END) if from_end else 0
        return cls(path, offset)

    def read_line(self) -> Optional[str]:
        """Return the next complete line, or None if nothing new has been written."""
        if self.closed:
            raise ValueError("Cursor is closed")
        while not self._lines:
            if not self._fill():
                break
        if self._lines:
            return self._lines.popleft()
        return None

    def drain(self) -> List[str]:
        """
        Return every buffered line, plus the unterminated trailing fragment
        when the last read reached the end of the file. Short of the end, the
        fragment is only the start of a line cut at a chunk boundary.
        """
        lines = list(self._lines)
        self._lines.clear()
        tail = self._partial + self._decoder.decode(b'', final=True)
        self._partial = ''
        if tail and self.at_eof:
            lines.append(tail.rstrip('\r'))
        return lines

    def close(self) -> None:
        self._lines.clear()
        self._partial = ''
        self.closed = True

    def _fill(self) -> bool:
        """Read the next chunk; False once no new bytes are available."""
        with open(self.path, 'rb') as fh:
            fh.seek(self.offset)
            data = fh.read(self.CHUNK_SIZE)
        if not data:
            self.at_eof = True
            return False
        self.at_eof = len(data) < self.CHUNK_SIZE
        self.offset += len(data)
        parts = (self._partial + self._decoder.decode(data)).split('\n')
        self._partial = parts.pop()
        for part in parts:
            self._lines.append(part[:-1] if part.endswith('\r') else part)
        return True


class LogTailer:
    """
    Tails one file and reports new lines and lifecycle events to observers.

    Configure the tailer, register observers, then call `run` on a dedicated
    thread. `run` blocks until the file is removed, the max duration elapses
    while idle, `request_stop` is called, or reading fails. Failures never
    propagate out of `run`; they are delivered through `on_exception`.

    A tailer is single-use: calling `run` a second time raises
    TailerStateError, and so do the setters once the tailer has started.

    The default idle sleep waits on the stop event, so `request_stop` wakes a
    sleeping tailer early instead of letting the poll interval run out.
    """

    DEFAULT_POLL_INTERVAL = timedelta(milliseconds=1000)

    def __init__(
        self,
        path: Optional[PathLike] = None,
        *,
        poll_interval: Optional[timedelta] = None,
        max_duration: Optional[timedelta] = None,
        from_end: bool = False,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._watched_path = Path(path) if path is not None else None
        if poll_interval is not None and poll_interval <= timedelta(0):
            raise ValueError(f"Poll interval must be positive, got {poll_interval}")
        if max_duration is not None and max_duration < timedelta(0):
            raise ValueError(f"Max duration cannot be negative, got {max_duration}")
        self._poll_interval = poll_interval if poll_interval is not None else self.DEFAULT_POLL_INTERVAL
        self._max_duration = max_duration or None
        self._from_end = from_end
        self._sleep = sleep or self._wait
        self._clock = clock

        self._observers: Set[TailerObserver] = set()
        self._observers_lock = threading.RLock()
        self._state_lock = threading.Lock()
        self._stop = threading.Event()
        self._started = threading.Event()

        self._state = TailerState.NEW
        self.exit_state: Optional[TailerState] = None
        self.started_at: Optional[float] = None
        self.lines_read = 0

    @classmethod
    def from_config(cls, cfg: TailerConfig, **kwargs) -> "LogTailer":
        return cls(
            cfg.path,
            poll_interval=cfg.poll_interval,
            max_duration=cfg.max_duration,
            from_end=cfg.from_end,
            **kwargs,
        )

    # Configuration (before start only)

    @property
    def watched_path(self) -> Optional[Path]:
        return self._watched_path

    @property
    def poll_interval(self) -> timedelta:
        return self._poll_interval

    @property
    def max_duration(self) -> Optional[timedelta]:
        return self._max_duration

    @property
    def state(self) -> TailerState:
        return self._state

    def set_watched_path(self, path: PathLike) -> None:
        self._ensure_configurable()
        self._watched_path = Path(path)

    def set_max_duration(self, hours: float) -> None:
        """Stop tailing after `hours` of run time; 0 means unlimited."""
        self._ensure_configurable()
        if hours < 0:
            raise ValueError(f"Max duration cannot be negative, got {hours}")
        self._max_duration = timedelta(hours=hours) if hours else None

    def set_poll_interval(self, ms: int) -> None:
        self._ensure_configurable()
        if ms <= 0:
            raise ValueError(f"Poll interval must be positive, got {ms} ms")
        self._poll_interval = timedelta(milliseconds=ms)

    def _ensure_configurable(self) -> None:
        if self._state is not TailerState.NEW:
            raise TailerStateError(
                f"Tailer for {self._watched_path} is {self._state.value}; configure it before start"
            )

    # Observer registry

    def add_observer(self, observer: TailerObserver) -> bool:
        with self._observers_lock:
            if observer in self._observers:
                return False
            self._observers.add(observer)
            return True

    def remove_observer(self, observer: TailerObserver) -> bool:
        with self._observers_lock:
            if observer not in self._observers:
                return False
            self._observers.discard(observer)
            return True

    @property
    def observers(self) -> List[TailerObserver]:
        with self._observers_lock:
            return list(self._observers)

    # Lifecycle

    def request_stop(self) -> None:
        """Ask the run loop to finish; observed at the next loop iteration."""
        logger.debug("Stop requested for %s", self._watched_path)
        self._stop.set()

    def wait_started(self, timeout: Optional[float] = None) -> bool:
        """Block until `run` has begun, so a later `request_stop` is not lost."""
        return self._started.wait(timeout)

    @property
    def is_running(self) -> bool:
        return self._state in (TailerState.STARTING, TailerState.POLLING, TailerState.SLEEPING)

    def run(self) -> None:
        with self._state_lock:
            if self._state is not TailerState.NEW:
                raise TailerStateError(
                    f"Tailer for {self._watched_path} has already been started"
                )
            self._state = TailerState.STARTING

        self.started_at = self._clock()
        self._stop.clear()
        self._started.set()
        logger.info("Started tailing %s", self._watched_path)

        cursor = self._open_cursor()
        if cursor is None:
            self._finish(TailerState.FILE_GONE)
            self._notify('on_file_not_found')
            self._state = TailerState.CLOSED
            return

        exit_state = TailerState.ERROR
        try:
            exit_state = self._poll(cursor)
            if exit_state is TailerState.FILE_GONE:
                for line in cursor.drain():
                    self._dispatch_line(line)
                logger.info("Watched file %s was removed", self._watched_path)
                self._notify('on_file_removed')
        except Exception as e:
            logger.exception("Unexpected failure while tailing %s", self._watched_path)
            exit_state = TailerState.ERROR
            self._notify(
                'on_exception',
                TailerError(f"Unexpected failure while tailing {self._watched_path}", underlying=e),
            )
        finally:
            try:
                cursor.close()
            except OSError as e:
                logger.error("Could not close cursor for %s: %s", self._watched_path, e)
                self._notify(
                    'on_exception',
                    TailerCloseError(f"Could not close {self._watched_path}", underlying=e),
                )
            self._finish(exit_state)
            self._state = TailerState.CLOSED

    def _open_cursor(self) -> Optional[_LineCursor]:
        if self._watched_path is None:
            logger.warning("No watched path configured")
            return None
        try:
            return _LineCursor.open(self._watched_path, from_end=self._from_end)
        except OSError as e:
            logger.warning("Cannot open %s: %s", self._watched_path, e)
            return None

    def _poll(self, cursor: _LineCursor) -> TailerState:
        timed_out = False
        pending = False
        line: Optional[str] = None

        while not self._stop.is_set():
            if not self._watched_path.exists():
                return TailerState.FILE_GONE

            self._state = TailerState.POLLING
            try:
                line = cursor.read_line()
            except FileNotFoundError:
                return TailerState.FILE_GONE
            except OSError as e:
                logger.error("Failed reading %s: %s", self._watched_path, e)
                self._notify(
                    'on_exception',
                    TailerReadError(f"Failed reading {self._watched_path}", underlying=e),
                )
                return TailerState.ERROR

            if line is not None:
                pending = True
            else:
                self._state = TailerState.SLEEPING
                try:
                    self._sleep(self._poll_interval.total_seconds())
                except InterruptedError as e:
                    logger.warning("Idle wait interrupted for %s", self._watched_path)
                    self._notify(
                        'on_exception',
                        TailerInterruptedError("Idle wait interrupted", underlying=e),
                    )
                if self._deadline_passed():
                    logger.info(
                        "Max duration %s reached for %s", self._max_duration, self._watched_path
                    )
                    timed_out = True
                    self._stop.set()

            if pending:
                self._dispatch_line(line)
                pending = False

        return TailerState.TIMED_OUT if timed_out else TailerState.STOPPED

    def _deadline_passed(self) -> bool:
        if not self._max_duration:
            return False
        return self._clock() - self.started_at > self._max_duration.total_seconds()

    def _wait(self, seconds: float) -> None:
        self._stop.wait(seconds)

    def _finish(self, exit_state: TailerState) -> None:
        self.exit_state = exit_state
        self._state = exit_state
        logger.info(
            "Tailer for %s finished: %s after %d lines",
            self._watched_path, exit_state.value, self.lines_read,
        )

    # Notifications

    def _dispatch_line(self, line: str) -> None:
        self.lines_read += 1
        self._notify('on_line', line)

    def _notify(self, event: str, *args) -> None:
        for observer in self.observers:
            try:
                getattr(observer, event)(*args)
            except Exception:
                logger.exception("Observer %r failed handling %s", observer, event)


__all__ = ["LogTailer", "TailerState"]
