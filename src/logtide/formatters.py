"""
Log formatters.

Each adapter renders records with one formatter:
  - plain:      "[HH:MM:SS] [name/LEVEL] message" + YAML metadata block
  - colorful:   the same layout with ANSI colours and highlighted markup
  - structured: event dict for JSON / Lambda destinations
"""

from abc import ABC, abstractmethod
from typing import Any

from logtide.levels import LogRecord
from logtide.markup import StyledResolver, highlight_markup, strip_markup
from logtide.serialize import merge_message, prepare, serialize
from logtide.styles import LEVEL_STYLES, NAME_STYLE, TIME_STYLE


class LogFormatter(ABC):
    """Base formatter. Transforms LogRecord → output."""

    @abstractmethod
    def format(self, record: LogRecord) -> Any: ...


class TextFormatter(LogFormatter):
    """
    Shared layout of the text formatters.

    A text message goes on the header line; metadata, when present, follows
    as an indented YAML block. A non-text message is moved into the block
    under `msg` and the header stands alone.
    """

    def format(self, record: LogRecord) -> str:
        prefix = self.message_prefix(record)
        if not record.has_text_message:
            block = self.handle_metadata(merge_message(record.message, record.metadata))
            return f"{prefix}\n{block}"
        message = self.handle_message(record)
        if record.metadata is not None:
            return f"{prefix} {message}\n{self.handle_metadata(record.metadata)}"
        return f"{prefix} {message}"

    @abstractmethod
    def message_prefix(self, record: LogRecord) -> str: ...

    @abstractmethod
    def handle_message(self, record: LogRecord) -> str: ...

    @abstractmethod
    def handle_metadata(self, metadata: Any) -> str: ...


class PlainFormatter(TextFormatter):
    """
    Plain text for files and colourless terminals. Magic tags are stripped.
    Example: [14:32:05] [App/INFO] Starting
    """

    def message_prefix(self, record: LogRecord) -> str:
        ts = record.timestamp.strftime("%H:%M:%S")
        return f"[{ts}] [{record.logger_name}/{record.level_name}]"

    def handle_message(self, record: LogRecord) -> str:
        return strip_markup(record.message)

    def handle_metadata(self, metadata: Any) -> str:
        return serialize(metadata, render=strip_markup)


class ColorfulFormatter(TextFormatter):
    """
    ANSI-coloured text for capable terminals.

    The header fields are coloured individually, the message is wrapped in
    its level colour, and both message and metadata are YAML-highlighted
    with magic tags rendered in place.
    """

    def __init__(self, resolver: StyledResolver | None = None):
        self.resolver = resolver or StyledResolver()

    def message_prefix(self, record: LogRecord) -> str:
        ts = record.timestamp
        clock = ":".join(TIME_STYLE(f"{part:02d}") for part in (ts.hour, ts.minute, ts.second))
        level = LEVEL_STYLES[record.level](record.level_name)
        return f"[{clock}] [{NAME_STYLE(record.logger_name)}/{level}]"

    def render(self, text: str) -> str:
        return highlight_markup(text, self.resolver)

    def handle_message(self, record: LogRecord) -> str:
        return LEVEL_STYLES[record.level](self.render(record.message))

    def handle_metadata(self, metadata: Any) -> str:
        return serialize(metadata, render=self.render)


class StructuredFormatter(LogFormatter):
    """
    Structured event for machine parsing, tagged with the logger name.
    Values go through `prepare` like the text block. Markup is left
    untouched; the reserved `_logLevel` and `_tags` keys always come from
    the record.

    Example: {"_logLevel": "info", "_tags": ["App"], "msg": "Starting", "usage": 95}
    """

    def format(self, record: LogRecord) -> dict[str, Any]:
        event: dict[str, Any] = {
            "_logLevel": record.level.label,
            "_tags": [record.logger_name],
        }
        payload = prepare(merge_message(record.message, record.metadata))
        for key, value in payload.items():
            event.setdefault(key, value)
        return event
