import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from models import TailerConfig  # noqa: E402
from observers import CallbackObserver  # noqa: E402
from services import TailerService  # noqa: E402
from tailer import TailerState  # noqa: E402


def _wait_for(predicate, timeout=3.0):
    end = time.monotonic() + timeout
    while time.monotonic() < end:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_service_buffers_lines_and_stops(tmp_path):
    log = tmp_path / "app.log"
    log.write_text("one\ntwo\nthree\n", encoding="utf-8")
    seen = []
    service = TailerService(TailerConfig(path=log, poll_interval_ms=10, buffer_size=2))
    service.add_observer(CallbackObserver(on_line=seen.append))

    service.start()
    service.start()
    assert _wait_for(lambda: service.buffer.total_lines == 3)

    status = service.status()
    assert status.running is True
    assert status.lines_read == 3
    assert status.poll_interval_ms == 10
    assert service.recent_lines() == ["two", "three"]

    assert service.stop(timeout=2) is True
    assert service.is_running is False
    assert seen == ["one", "two", "three"]
    assert service.status().exit_state is TailerState.STOPPED


def test_service_reports_missing_file(tmp_path):
    service = TailerService(TailerConfig(path=tmp_path / "missing.log", poll_interval_ms=10))

    service.start()
    service.join(timeout=2)

    status = service.status()
    assert status.running is False
    assert status.file_not_found is True
    assert status.file_removed is False
    assert status.exit_state is TailerState.FILE_GONE


def test_service_stop_before_start_is_harmless(tmp_path):
    service = TailerService(TailerConfig(path=tmp_path / "app.log"))

    assert service.stop() is True
    assert service.status().state is TailerState.NEW


def test_service_reports_removed_file(tmp_path):
    log = tmp_path / "app.log"
    log.write_text("only\n", encoding="utf-8")
    service = TailerService(TailerConfig(path=log, poll_interval_ms=10, max_duration_hours=1))

    service.start()
    assert _wait_for(lambda: service.buffer.total_lines == 1)
    log.unlink()
    service.join(timeout=3)

    status = service.status()
    assert status.file_removed is True
    assert status.max_duration_hours == 1
    assert status.exit_state is TailerState.FILE_GONE
