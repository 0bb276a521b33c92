# src/cli.py

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from config import build_config, load_config
from errors import ConfigBuildError
from logging_config import setup_logging
from observers import CallbackObserver
from paths import DEFAULT_CONFIG_FILE, DEFAULT_LOG_FILE
from services import TailerService
from tailer import TailerState

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="logtailer",
        description="Print lines appended to a file until it is removed or the tailer times out",
    )
    p.add_argument("path", nargs="?", type=Path, help="File to tail")
    p.add_argument("--config", type=Path,
                   help=f"YAML file with tailer settings (default {DEFAULT_CONFIG_FILE} when present)")
    p.add_argument("--poll-interval", dest="poll_interval_ms", type=int,
                   help="Delay in milliseconds between read attempts on an idle file")
    p.add_argument("--max-hours", dest="max_duration_hours", type=float,
                   help="Stop after this many hours (0 means unlimited)")
    p.add_argument("--from-end", action="store_true", default=None,
                   help="Skip content already in the file")
    p.add_argument("--log-file", type=Path, nargs="?", const=DEFAULT_LOG_FILE,
                   help=f"Also write diagnostics to this file ({DEFAULT_LOG_FILE} if no value is given)")
    p.add_argument("--log-level", help="Diagnostic log level (default INFO)")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    overrides = {
        "path": args.path,
        "poll_interval_ms": args.poll_interval_ms,
        "max_duration_hours": args.max_duration_hours,
        "from_end": args.from_end,
        "log_file": args.log_file,
        "log_level": args.log_level,
    }

    config_file = args.config
    if config_file is None and DEFAULT_CONFIG_FILE.is_file():
        config_file = DEFAULT_CONFIG_FILE

    try:
        if config_file:
            cfg = load_config(config_file, overrides)
        else:
            cfg = build_config({k: v for k, v in overrides.items() if v is not None})
    except ConfigBuildError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    if cfg.path is None:
        print("No file to tail: pass a path or set 'path' in the config file", file=sys.stderr)
        return 2

    setup_logging(log_file=cfg.log_file, level=cfg.level)

    service = TailerService(cfg)
    service.add_observer(CallbackObserver(
        on_line=lambda line: print(line, flush=True),
        on_file_not_found=lambda: print(f"File not found: {cfg.path}", file=sys.stderr),
        on_file_removed=lambda: print(f"File removed: {cfg.path}", file=sys.stderr),
        on_exception=lambda exc: print(f"Error: {exc}", file=sys.stderr),
    ))

    service.start()
    try:
        while service.is_running:
            service.join(timeout=0.5)
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping tailer")
        service.stop()

    exit_state = service.tailer.exit_state
    if exit_state is TailerState.ERROR:
        return 1
    if exit_state is TailerState.FILE_GONE and service.buffer.file_not_found:
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
