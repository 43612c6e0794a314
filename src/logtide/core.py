"""
Logger: level gate, convenience methods and adapter fan-out.

The gate runs first: a call below the logger's threshold returns before a
record is built, so no formatting or metadata serialization happens. An
admitted call becomes one LogRecord, handed to every adapter in order.
"""

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from logtide.adapters import LogAdapter
from logtide.config import load_level
from logtide.levels import LogLevel, LogRecord, resolve_level, should_emit


class Logger:
    """
    Named logger over an ordered list of adapters.

    Usage:
        log = Logger("App", [ConsoleAdapter(color=True), FileAdapter()])
        log.info("Starting", {"usage": 95})
        log.error("Query failed", query="<hl sql>SELECT 1</hl>")

    The threshold comes from LOGTIDE_LEVEL at construction unless given.
    """

    # Re-export levels for convenience: Logger.DEBUG, etc.
    ERROR = LogLevel.ERROR
    WARN = LogLevel.WARN
    INFO = LogLevel.INFO
    DEBUG = LogLevel.DEBUG

    def __init__(
        self,
        name: str,
        adapters: Iterable[LogAdapter] = (),
        min_level: LogLevel | int | str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._name = name
        self._adapters: list[LogAdapter] = list(adapters)
        self._min_level = load_level() if min_level is None else resolve_level(min_level)
        self._clock = clock or datetime.now

    @property
    def name(self) -> str:
        return self._name

    @property
    def min_level(self) -> LogLevel:
        return self._min_level

    @property
    def adapters(self) -> tuple[LogAdapter, ...]:
        return tuple(self._adapters)

    def add_adapter(self, adapter: LogAdapter) -> None:
        self._adapters.append(adapter)

    # ── Core Logging ──────────────────────────────────────────────

    def log(
        self,
        level: LogLevel | int | str,
        msg: Any,
        meta: Mapping[str, Any] | None = None,
        /,
        **fields: Any,
    ) -> None:
        """
        Log `msg` at `level` with optional metadata.

        Keyword fields are merged over `meta`; any name is accepted as a
        field, including `msg`, `meta` and `level`. Never raises: a failing
        adapter is skipped and the remaining adapters still run.
        """
        level = resolve_level(level)
        if not should_emit(level, self._min_level):
            return

        if fields:
            meta = {**(meta or {}), **fields}

        record = LogRecord.create(
            logger_name=self._name,
            level=level,
            message=msg,
            metadata=meta,
            timestamp=self._clock(),
        )

        for adapter in self._adapters:
            try:
                adapter.emit(record)
            except Exception:
                # Never let adapter failure crash the caller
                pass

    # ── Convenience Methods ───────────────────────────────────────

    def error(self, msg: Any, meta: Mapping[str, Any] | None = None, /, **fields: Any) -> None:
        self.log(LogLevel.ERROR, msg, meta, **fields)

    def warn(self, msg: Any, meta: Mapping[str, Any] | None = None, /, **fields: Any) -> None:
        self.log(LogLevel.WARN, msg, meta, **fields)

    def info(self, msg: Any, meta: Mapping[str, Any] | None = None, /, **fields: Any) -> None:
        self.log(LogLevel.INFO, msg, meta, **fields)

    def debug(self, msg: Any, meta: Mapping[str, Any] | None = None, /, **fields: Any) -> None:
        self.log(LogLevel.DEBUG, msg, meta, **fields)

    def __repr__(self) -> str:
        names = ", ".join(adapter.name for adapter in self._adapters)
        return f"Logger({self._name!r}, min_level={self._min_level.label}, adapters=[{names}])"
