"""Daily rotating file logger with a stdout mirror."""

from __future__ import annotations

import os
import sys
import threading
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Protocol, TextIO

from cherry.common.logging import get_logger

diag = get_logger(__name__)

LOG_PATH_ENV = "CHERRY_LOG_PATH"
DEFAULT_PREFIX = "cherry"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"


class Level(str, Enum):
    """Log levels written to the daily file."""

    INFO = "INFO"
    ERROR = "ERROR"
    DEBUG = "DEBUG"
    WARN = "WARN"


class LeveledLogger(Protocol):
    """Minimal leveled logging interface used by the service."""

    def info(self, fmt: str, *args: Any) -> None: ...
    def error(self, fmt: str, *args: Any) -> None: ...
    def debug(self, fmt: str, *args: Any) -> None: ...
    def warn(self, fmt: str, *args: Any) -> None: ...


class LoggerError(Exception):
    """Logger could not be created."""


class LogDirectoryError(LoggerError):
    """Log directory could not be created."""


class LogFileError(LoggerError):
    """Daily log file could not be opened."""


def resolve_log_path(override: str | None = None) -> str:
    """
    Resolve the log directory.

    Order: explicit override, then ``CHERRY_LOG_PATH``, then the
    platform default.
    """
    if override:
        return override
    env_path = os.environ.get(LOG_PATH_ENV)
    if env_path:
        return env_path
    if sys.platform == "win32":
        return os.path.join(".", "logs")
    return "/var/log/cherry"


def log_file_name(prefix: str, day: date) -> str:
    """File name for a given day, e.g. ``cherry-2024-01-31.log``."""
    return f"{prefix}-{day.strftime(DATE_FORMAT)}.log"


def render_message(fmt: str, args: tuple[Any, ...]) -> str:
    """Apply printf-style args the way stdlib logging does."""
    if not args:
        return fmt
    try:
        return fmt % args
    except (TypeError, ValueError) as e:
        diag.error("Malformed log format", fmt=fmt, error=str(e))
        return f"{fmt} {args!r}"


def format_line(level: Level | str, message: str, when: datetime) -> str:
    """Build a single log line including the trailing newline."""
    level_name = level.value if isinstance(level, Level) else level
    return f"[{when.strftime(TIMESTAMP_FORMAT)}] [{level_name}] {message}\n"


class _LevelMethods:
    """Leveled entry points shared by the concrete loggers."""

    def _log(self, level: Level, fmt: str, args: tuple[Any, ...]) -> None:
        raise NotImplementedError

    def info(self, fmt: str, *args: Any) -> None:
        """Log an informational message."""
        self._log(Level.INFO, fmt, args)

    def error(self, fmt: str, *args: Any) -> None:
        """Log an error message."""
        self._log(Level.ERROR, fmt, args)

    def debug(self, fmt: str, *args: Any) -> None:
        """Log a debug message."""
        self._log(Level.DEBUG, fmt, args)

    def warn(self, fmt: str, *args: Any) -> None:
        """Log a warning message."""
        self._log(Level.WARN, fmt, args)


class RotatingFileLogger(_LevelMethods):
    """
    Append leveled lines to one file per calendar day.

    Every line is also written to ``stream`` (stdout by default). The file
    for "today" is checked before each write and replaced when the date
    has changed. File errors after construction are reported to the
    diagnostic logger and never raised to the caller.
    """

    def __init__(
        self,
        base_path: str | os.PathLike[str] | None = None,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], datetime] | None = None,
        stream: TextIO | None = None,
    ):
        """
        Initialize the logger and open today's file.

        Args:
            base_path: Log directory (resolved via ``resolve_log_path`` if None)
            prefix: File name prefix
            clock: Returns the current local time; defaults to ``datetime.now``
            stream: Mirror target; ``sys.stdout`` at write time if None

        Raises:
            LogDirectoryError: If the directory cannot be created
            LogFileError: If today's file cannot be opened
        """
        self._base_path = Path(base_path) if base_path else Path(resolve_log_path())
        self._prefix = prefix
        self._clock = clock or datetime.now
        self._stream = stream
        self._lock = threading.Lock()
        self._file: TextIO | None = None
        self._date: date | None = None
        self._closed = False

        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LogDirectoryError(
                f"failed to create log directory {self._base_path}: {e}"
            ) from e

        with self._lock:
            try:
                self._rotate_if_needed(self._clock().date())
            except OSError as e:
                raise LogFileError(f"failed to open log file: {e}") from e

    @property
    def base_path(self) -> Path:
        """Directory holding the daily files."""
        return self._base_path

    @property
    def current_date(self) -> date | None:
        """Date of the open file, or None when no file is open."""
        return self._date

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    def path_for(self, day: date) -> Path:
        """Path of the file for ``day``."""
        return self._base_path / log_file_name(self._prefix, day)

    def _rotate_if_needed(self, today: date) -> TextIO:
        # Caller holds the lock.
        if self._file is not None and self._date == today:
            return self._file

        if self._file is not None:
            try:
                self._file.close()
            except OSError as e:
                diag.warning("Error closing stale log file", date=str(self._date), error=str(e))
            self._file = None
            self._date = None

        path = self.path_for(today)
        # Unencodable characters are escaped rather than failing the write.
        self._file = open(path, "a", encoding="utf-8", errors="backslashreplace")
        self._date = today
        return self._file

    def _log(self, level: Level, fmt: str, args: tuple[Any, ...]) -> None:
        with self._lock:
            now = self._clock()
            line = format_line(level, render_message(fmt, args), now)

            if self._closed:
                diag.warning("Log call after close", level=level.value)
            else:
                self._write_file(now.date(), line)

            stream = self._stream or sys.stdout
            try:
                stream.write(line)
                stream.flush()
            except (OSError, ValueError) as e:
                diag.error("Error writing log line to stream", error=str(e))

    def _write_file(self, today: date, line: str) -> None:
        try:
            handle = self._rotate_if_needed(today)
        except OSError as e:
            diag.error("Error rotating log file", path=str(self.path_for(today)), error=str(e))
            return

        try:
            handle.write(line)
            handle.flush()
        except (OSError, ValueError) as e:
            diag.error("Error writing to log file", path=str(self.path_for(today)), error=str(e))

    def close(self) -> None:
        """Close the open file. Safe to call more than once."""
        with self._lock:
            self._closed = True
            if self._file is None:
                return
            try:
                self._file.close()
            finally:
                self._file = None
                self._date = None

    def __enter__(self) -> "RotatingFileLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class MemoryLogger(_LevelMethods):
    """In-memory leveled logger for tests."""

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self._clock = clock or datetime.now
        self._lock = threading.Lock()
        self.records: list[tuple[Level, str]] = []
        self.lines: list[str] = []

    def _log(self, level: Level, fmt: str, args: tuple[Any, ...]) -> None:
        message = render_message(fmt, args)
        with self._lock:
            self.records.append((level, message))
            self.lines.append(format_line(level, message, self._clock()))

    def messages(self, level: Level | None = None) -> list[str]:
        """Recorded messages, optionally filtered by level."""
        return [m for lvl, m in self.records if level is None or lvl == level]

    def close(self) -> None:
        pass
