import logging
from pathlib import Path
from dataclasses import dataclass
from datetime import timedelta
from typing import ClassVar, Optional


@dataclass
class TailerConfig:
    """Settings for a single tailer run, usually loaded from YAML or the CLI."""

    LOG_LEVELS: ClassVar[tuple] = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

    path: Optional[Path] = None
    poll_interval_ms: int = 1000
    max_duration_hours: float = 0
    from_end: bool = False
    buffer_size: int = 500
    log_file: Optional[Path] = None
    log_level: str = 'INFO'

    def validate(self) -> None:
        """
        Ensure intervals are usable and the log level is known.
        The watched file itself is not required to exist yet: a missing
        file is reported to observers when the tailer starts.
        """
        if self.poll_interval_ms <= 0:
            raise ValueError(
                f"Poll interval must be a positive number of milliseconds, got {self.poll_interval_ms}"
            )
        if self.max_duration_hours < 0:
            raise ValueError(
                f"Max duration cannot be negative, got {self.max_duration_hours} hours"
            )
        if self.buffer_size <= 0:
            raise ValueError(f"Buffer size must be positive, got {self.buffer_size}")
        if self.log_level.upper() not in self.LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{self.log_level}'. Expected one of {', '.join(self.LOG_LEVELS)}."
            )
        if self.path is not None and self.path.is_dir():
            raise ValueError(f"Watched path is a directory: {self.path}")

    @property
    def poll_interval(self) -> timedelta:
        return timedelta(milliseconds=self.poll_interval_ms)

    @property
    def max_duration(self) -> Optional[timedelta]:
        if not self.max_duration_hours:
            return None
        return timedelta(hours=self.max_duration_hours)

    @property
    def level(self) -> int:
        return logging.getLevelName(self.log_level.upper())

    def to_dict(self) -> dict:
        return {
            'path': str(self.path) if self.path else None,
            'poll_interval_ms': self.poll_interval_ms,
            'max_duration_hours': self.max_duration_hours,
            'from_end': self.from_end,
            'buffer_size': self.buffer_size,
            'log_file': str(self.log_file) if self.log_file else None,
            'log_level': self.log_level,
        }
