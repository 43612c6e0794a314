"""
Log levels and records.

Four severities, ordered by priority: error (0) is the most severe,
debug (3) the most verbose. A message passes the gate when its priority
is less than or equal to the logger's threshold.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Severity levels. The value is the filter priority."""
    ERROR = 0
    WARN = 1
    INFO = 2
    DEBUG = 3

    @property
    def label(self) -> str:
        """Lowercase name, as used in env values and structured events."""
        return self.name.lower()

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Resolve level from string name, case-insensitive."""
        name_upper = name.strip().upper()
        try:
            return cls[name_upper]
        except KeyError:
            raise ValueError(
                f"Unknown log level '{name}'. "
                f"Valid levels: {', '.join(m.label for m in cls)}"
            )


DEFAULT_LEVEL = LogLevel.INFO


def should_emit(level: LogLevel, min_level: LogLevel) -> bool:
    """True if a message at `level` passes a logger whose threshold is `min_level`."""
    return level <= min_level


def parse_level(raw: str | None) -> LogLevel:
    """
    Permissive level parsing for environment input.

    Missing, blank or unrecognised values fall back to INFO.
    """
    if not raw:
        return DEFAULT_LEVEL
    try:
        return LogLevel.from_name(raw)
    except ValueError:
        return DEFAULT_LEVEL


def resolve_level(value: LogLevel | int | str | None) -> LogLevel:
    """Convert a level, priority int or name to a LogLevel. Unknown → INFO."""
    if isinstance(value, LogLevel):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return LogLevel(value)
        except ValueError:
            return DEFAULT_LEVEL
    if isinstance(value, str):
        return parse_level(value)
    return DEFAULT_LEVEL


@dataclass(frozen=True)
class LogRecord:
    """
    Immutable log record. Created by Logger.log() once the level gate has
    passed, handed to each adapter in turn and then dropped.

    `message` is usually text but may be any value; non-text messages are
    rendered as part of the metadata block under the `msg` key.
    """
    timestamp: datetime
    logger_name: str
    level: LogLevel
    message: Any
    metadata: Mapping[str, Any] | None = None

    @property
    def level_name(self) -> str:
        return self.level.name

    @property
    def has_text_message(self) -> bool:
        return isinstance(self.message, str)

    @classmethod
    def create(
        cls,
        logger_name: str,
        level: LogLevel,
        message: Any,
        metadata: Mapping[str, Any] | None = None,
        timestamp: datetime | None = None,
    ) -> "LogRecord":
        """Factory method with auto-timestamp (local wall clock)."""
        return cls(
            timestamp=timestamp if timestamp is not None else datetime.now(),
            logger_name=logger_name,
            level=level,
            message=message,
            metadata=metadata,
        )
