"""
Log adapters (output destinations).

One logger, any number of adapters. Every adapter pairs a formatter with a
destination, and every destination family writes through one shared
OutputChannel so that several loggers never hold separate handles to the
same stdout, file or Lambda backend. Channels can be swapped at runtime,
which is how the tests capture output.
"""

import json
import sys
import warnings
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any

from aws_lambda_powertools import Logger as PowertoolsLogger

from logtide.config import resolve_file_path
from logtide.formatters import (
    ColorfulFormatter,
    LogFormatter,
    PlainFormatter,
    StructuredFormatter,
)
from logtide.levels import LogLevel, LogRecord


class OutputChannel:
    """
    The current write function of one destination family.

    Shared by every adapter of that family. `replace()` swaps the writer
    and returns the previous one; `restore()` goes back to the default.
    """

    def __init__(self, name: str, default: Callable[..., None] | None):
        self.name = name
        self._default = default
        self._write = default

    @property
    def available(self) -> bool:
        return self._write is not None

    def replace(self, write: Callable[..., None] | None) -> Callable[..., None] | None:
        previous, self._write = self._write, write
        return previous

    def restore(self) -> None:
        self._write = self._default

    def __call__(self, *args: Any) -> None:
        if self._write is None:
            raise RuntimeError(f"No writer installed on channel '{self.name}'")
        self._write(*args)

    def __repr__(self) -> str:
        return f"OutputChannel({self.name!r}, available={self.available})"


# ── Default writers ───────────────────────────────────────────────

def _print_stdout(text: str) -> None:
    print(text, file=sys.stdout, flush=True)


def _append_file(path: str, content: str) -> None:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "a", encoding="utf-8") as f:
        f.write(content)


_POWERTOOLS_METHODS = {
    LogLevel.ERROR: "error",
    LogLevel.WARN: "warning",
    LogLevel.INFO: "info",
    LogLevel.DEBUG: "debug",
}
_powertools_logger = None


def _powertools_log(level: LogLevel, event: dict[str, Any]) -> None:
    # One backend logger for the process; levels are filtered before this point.
    global _powertools_logger
    if _powertools_logger is None:
        _powertools_logger = PowertoolsLogger(level="DEBUG")
    getattr(_powertools_logger, _POWERTOOLS_METHODS[level])(event)


STDOUT = OutputChannel("stdout", _print_stdout)
FILE_WRITER = OutputChannel("file", _append_file)
LAMBDA_BACKEND = OutputChannel("lambda", _powertools_log)


# ═══════════════════════════════════════════════════════════════════
#  Adapters
# ═══════════════════════════════════════════════════════════════════

class LogAdapter(ABC):
    """Base adapter. Formats records and hands them to a destination."""

    def __init__(self, name: str, formatter: LogFormatter | None = None):
        self.name = name
        self._formatter = formatter

    @property
    def formatter(self) -> LogFormatter:
        if self._formatter is None:
            self._formatter = self._default_formatter()
        return self._formatter

    @formatter.setter
    def formatter(self, value: LogFormatter) -> None:
        self._formatter = value

    def _default_formatter(self) -> LogFormatter:
        """Subclass-specific default."""
        return PlainFormatter()

    @abstractmethod
    def emit(self, record: LogRecord) -> None:
        """Render and write one record. Called only after the level gate passes."""
        ...


class ConsoleAdapter(LogAdapter):
    """Writes to stdout, plain or with ANSI colours and highlighting."""

    def __init__(
        self,
        name: str = "console",
        formatter: LogFormatter | None = None,
        color: bool = False,
    ):
        super().__init__(name, formatter)
        self.color = color

    def _default_formatter(self) -> LogFormatter:
        return ColorfulFormatter() if self.color else PlainFormatter()

    def emit(self, record: LogRecord) -> None:
        STDOUT(self.formatter.format(record))


class FileAdapter(LogAdapter):
    """
    Appends plain text to a log file, one newline-terminated unit per call.

    Without an explicit path the destination follows LOGTIDE_FILE (default
    latest.log), re-read on every write.
    """

    def __init__(
        self,
        name: str = "logfile",
        formatter: LogFormatter | None = None,
        path: str | Path | None = None,
    ):
        super().__init__(name, formatter)
        self._path = str(path) if path is not None else None

    @property
    def path(self) -> str:
        return self._path if self._path is not None else resolve_file_path()

    def emit(self, record: LogRecord) -> None:
        FILE_WRITER(self.path, self.formatter.format(record) + "\n")


class LambdaAdapter(LogAdapter):
    """
    Structured events for AWS Lambda / CloudWatch.

    Events go to the backend installed on the LAMBDA_BACKEND channel
    (Powertools by default). With the channel cleared, each event is
    printed as one compact JSON line and the missing backend is reported
    once per process.
    """

    _missing_backend_reported = False

    def __init__(self, name: str = "lambda", formatter: LogFormatter | None = None):
        super().__init__(name, formatter)

    def _default_formatter(self) -> LogFormatter:
        return StructuredFormatter()

    def emit(self, record: LogRecord) -> None:
        event = self.formatter.format(record)
        if LAMBDA_BACKEND.available:
            LAMBDA_BACKEND(record.level, event)
            return
        self._report_missing_backend()
        STDOUT(encode_event(event))

    @classmethod
    def _report_missing_backend(cls) -> None:
        if cls._missing_backend_reported:
            return
        cls._missing_backend_reported = True
        warnings.warn(
            "no structured backend on the lambda channel; "
            "writing structured events to stdout as JSON lines",
            RuntimeWarning,
            stacklevel=3,
        )


def encode_event(event: dict[str, Any]) -> str:
    """One-line JSON encoding used when no structured backend is present."""
    return json.dumps(event, default=str, ensure_ascii=False, separators=(",", ":"))
