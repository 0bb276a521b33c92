import logging
import sys
from pathlib import Path
from typing import Optional, Union

DEFAULT_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'
DEFAULT_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logging(
    log_file: Optional[Path] = None,
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATEFMT,
    stream=None,
):
    """
    Configure root logger with a console handler (stderr by default, so tailed
    lines on stdout stay clean) and an optional file handler.
    Call this once at application startup.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    root = logging.getLogger()
    root.setLevel(level)

    formatter = logging.Formatter(fmt, datefmt=datefmt)

    # Console handler
    ch = logging.StreamHandler(stream or sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    # File handler
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding='utf-8')
        fh.setLevel(level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    return root
