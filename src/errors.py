# src/errors.py

from typing import Optional

class AppError(Exception):
    """
    Base exception for the log tailer.
    All other exceptions should inherit from this.
    """
    def __init__(self, message: str, *, underlying: Optional[Exception] = None):
        super().__init__(message)
        self.underlying = underlying

    def __str__(self):
        if self.underlying:
            return f"{self.args[0]} (caused by {self.underlying})"
        return self.args[0]


class TailerError(AppError):
    """
    Base class for failures reported by a running tailer.
    """


class TailerStateError(TailerError):
    """
    Raised when a tailer is reconfigured after start or run a second time.
    """


class TailerReadError(TailerError):
    """
    Reported when reading the watched file fails for a reason other than removal.
    """


class TailerCloseError(TailerError):
    """
    Reported when the read cursor cannot be released.
    """


class TailerInterruptedError(TailerError):
    """
    Reported when the idle wait between polls is interrupted.
    """


class ConfigBuildError(AppError):
    """
    Raised when composing a tailer configuration from raw input fails validation.
    """
