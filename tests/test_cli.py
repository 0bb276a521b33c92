import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import cli  # noqa: E402


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep the root logger untouched between tests."""

    calls = []
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: calls.append(kwargs))
    return calls


def test_prints_lines_until_max_duration(tmp_path, capsys, no_logging_setup):
    log = tmp_path / "app.log"
    log.write_text("x\ny\n", encoding="utf-8")

    code = cli.main([str(log), "--poll-interval", "10", "--max-hours", str(0.2 / 3600)])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out == "x\ny\n"
    assert no_logging_setup[0]["log_file"] is None


def test_missing_file_exits_with_error(tmp_path, capsys):
    missing = tmp_path / "missing.log"

    code = cli.main([str(missing), "--poll-interval", "10"])

    captured = capsys.readouterr()
    assert code == 1
    assert "File not found" in captured.err
    assert captured.out == ""


def test_reads_settings_from_config_file(tmp_path, capsys):
    log = tmp_path / "app.log"
    log.write_text("from config\n", encoding="utf-8")
    config_file = tmp_path / "logtailer.yaml"
    config_file.write_text(
        f"path: {log.as_posix()}\npoll_interval_ms: 10\nmax_duration_hours: {0.2 / 3600}\n",
        encoding="utf-8",
    )

    code = cli.main(["--config", str(config_file)])

    assert code == 0
    assert capsys.readouterr().out == "from config\n"


def test_requires_a_path(capsys):
    assert cli.main([]) == 2
    assert "No file to tail" in capsys.readouterr().err


def test_invalid_options_are_reported(tmp_path, capsys):
    code = cli.main([str(tmp_path / "app.log"), "--poll-interval", "0"])

    assert code == 2
    assert "Invalid configuration" in capsys.readouterr().err
