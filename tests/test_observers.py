import logging
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from errors import TailerReadError  # noqa: E402
from observers import (  # noqa: E402
    BaseTailerObserver,
    BufferedObserver,
    CallbackObserver,
    LoggingObserver,
    TailerObserver,
)


def test_provided_observers_satisfy_protocol():
    for observer in (
        BaseTailerObserver(),
        BufferedObserver(),
        CallbackObserver(on_line=lambda line: None),
        LoggingObserver(),
    ):
        assert isinstance(observer, TailerObserver)


def test_buffered_observer_keeps_most_recent_lines():
    buffer = BufferedObserver(max_lines=3)
    for n in range(5):
        buffer.on_line(f"line {n}")

    assert buffer.recent() == ["line 2", "line 3", "line 4"]
    assert buffer.recent(2) == ["line 3", "line 4"]
    assert buffer.recent(0) == []
    assert buffer.total_lines == 5


def test_buffered_observer_records_lifecycle_events():
    buffer = BufferedObserver()
    assert buffer.last_error is None

    error = TailerReadError("read failed", underlying=OSError("disk"))
    buffer.on_exception(error)
    buffer.on_file_removed()

    assert buffer.last_error is error
    assert buffer.file_removed is True
    assert buffer.file_not_found is False


def test_buffered_observer_rejects_empty_capacity():
    with pytest.raises(ValueError):
        BufferedObserver(max_lines=0)


def test_callback_observer_ignores_missing_handlers():
    lines = []
    removed = []
    observer = CallbackObserver(on_line=lines.append, on_file_removed=lambda: removed.append(True))

    observer.on_line("hello")
    observer.on_file_removed()
    observer.on_file_not_found()
    observer.on_exception(RuntimeError("ignored"))

    assert lines == ["hello"]
    assert removed == [True]


def test_logging_observer_writes_events(caplog):
    observer = LoggingObserver(name="test.lines")

    with caplog.at_level(logging.INFO, logger="test.lines"):
        observer.on_line("payload")
        observer.on_file_removed()
        observer.on_exception(TailerReadError("read failed", underlying=OSError("disk")))

    messages = [record.getMessage() for record in caplog.records]
    assert "payload" in messages
    assert "Watched file was removed" in messages
    assert "Tailer error: read failed (caused by disk)" in messages
