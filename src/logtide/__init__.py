"""
logtide: environment-aware structured logging.

One call site, three renderings: plain text, colourful terminal output with
inline magic tags, and structured events for AWS Lambda.
"""

from logtide.core import Logger
from logtide.levels import LogLevel, LogRecord, parse_level, should_emit
from logtide.adapters import (
    FILE_WRITER,
    LAMBDA_BACKEND,
    STDOUT,
    ConsoleAdapter,
    FileAdapter,
    LambdaAdapter,
    LogAdapter,
    OutputChannel,
)
from logtide.formatters import (
    ColorfulFormatter,
    LogFormatter,
    PlainFormatter,
    StructuredFormatter,
    TextFormatter,
)
from logtide.config import LoggerSettings, OutputMode
from logtide.selector import (
    create_colorful_console_logger,
    create_console_logger,
    create_file_logger,
    create_lambda_logger,
    create_multiplexed_logger,
    get_logger,
)

__all__ = [
    "Logger",
    "LogLevel",
    "LogRecord",
    "parse_level",
    "should_emit",
    "LogAdapter",
    "ConsoleAdapter",
    "FileAdapter",
    "LambdaAdapter",
    "OutputChannel",
    "STDOUT",
    "FILE_WRITER",
    "LAMBDA_BACKEND",
    "LogFormatter",
    "TextFormatter",
    "PlainFormatter",
    "ColorfulFormatter",
    "StructuredFormatter",
    "LoggerSettings",
    "OutputMode",
    "get_logger",
    "create_console_logger",
    "create_colorful_console_logger",
    "create_lambda_logger",
    "create_file_logger",
    "create_multiplexed_logger",
]
