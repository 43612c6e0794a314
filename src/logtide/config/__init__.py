"""
Pydantic settings for logtide, resolved from the process environment.

Environment:
    LOGTIDE_MODE              comma-separated output modes, e.g. "colorful,file"
    LOGTIDE_LEVEL             minimum level: error | warn | info | debug
    LOGTIDE_FILE              log file path; enables file output
    AWS_LAMBDA_FUNCTION_NAME  set by the Lambda runtime

Unrecognised values never raise: an unknown level means info, an unknown
mode means "pick a console logger by colour support".
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, TextIO

from pydantic import BaseModel, field_validator

from logtide.levels import DEFAULT_LEVEL, LogLevel, parse_level

MODE_ENV = "LOGTIDE_MODE"
LEVEL_ENV = "LOGTIDE_LEVEL"
FILE_ENV = "LOGTIDE_FILE"
LAMBDA_MARKER_ENV = "AWS_LAMBDA_FUNCTION_NAME"

DEFAULT_LOG_FILE = "latest.log"


# ═══════════════════════════════════════════════════════════════════
#  Modes
# ═══════════════════════════════════════════════════════════════════

class OutputMode(str, Enum):
    LAMBDA = "lambda"
    COLORFUL = "colorful"
    PLAIN = "plain"
    CONSOLE = "console"
    FILE = "file"


MODE_ALIASES: dict[str, OutputMode] = {
    "lambda": OutputMode.LAMBDA,
    "aws": OutputMode.LAMBDA,
    "cloudwatch": OutputMode.LAMBDA,
    "colorful": OutputMode.COLORFUL,
    "color": OutputMode.COLORFUL,
    "cli/colorful": OutputMode.COLORFUL,
    "cli/color": OutputMode.COLORFUL,
    "plain": OutputMode.PLAIN,
    "text": OutputMode.PLAIN,
    "plaintext": OutputMode.PLAIN,
    "cli/plain": OutputMode.PLAIN,
    "cli/text": OutputMode.PLAIN,
    "cli/plaintext": OutputMode.PLAIN,
    "cli": OutputMode.CONSOLE,
    "console": OutputMode.CONSOLE,
    "file": OutputMode.FILE,
}


def parse_modes(raw: str | None) -> list[str]:
    """Split a mode string into lowercase, trimmed, non-empty tokens."""
    if not raw:
        return []
    return [token.strip().lower() for token in raw.split(",") if token.strip()]


def mode_for(token: str) -> OutputMode:
    """Map a mode token to its OutputMode. Unknown tokens mean CONSOLE."""
    return MODE_ALIASES.get(token, OutputMode.CONSOLE)


# ═══════════════════════════════════════════════════════════════════
#  Terminal capability
# ═══════════════════════════════════════════════════════════════════

def supports_color(stream: Optional[TextIO] = None, environ: Optional[Mapping[str, str]] = None) -> bool:
    """
    Best-effort colour detection for `stream` (default: stdout).

    NO_COLOR disables, FORCE_COLOR forces (unless "0"/"false"),
    TERM=dumb disables, otherwise colour follows isatty().
    """
    environ = os.environ if environ is None else environ
    if "NO_COLOR" in environ:
        return False
    force = environ.get("FORCE_COLOR")
    if force is not None:
        return force.strip().lower() not in ("0", "false")
    if environ.get("TERM") == "dumb":
        return False
    stream = sys.stdout if stream is None else stream
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # closed stream
        return False


# ═══════════════════════════════════════════════════════════════════
#  Settings
# ═══════════════════════════════════════════════════════════════════

class LoggerSettings(BaseModel):
    """Resolved selection inputs. Build with `from_env()` or directly in tests."""
    modes: list[str] = []
    level: LogLevel = DEFAULT_LEVEL
    file_path: Optional[str] = None
    lambda_runtime: bool = False
    color: bool = False

    @field_validator("modes", mode="before")
    @classmethod
    def _split_modes(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return parse_modes(value)
        return [str(token).strip().lower() for token in value if str(token).strip()]

    @field_validator("level", mode="before")
    @classmethod
    def _permissive_level(cls, value: Any) -> Any:
        if isinstance(value, LogLevel):
            return value
        if value is None or isinstance(value, str):
            return parse_level(value)
        return value

    @property
    def file_enabled(self) -> bool:
        return self.file_path is not None or OutputMode.FILE.value in self.modes

    @property
    def console_modes(self) -> list[OutputMode]:
        return [mode_for(token) for token in self.modes if token != OutputMode.FILE.value]

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        stream: Optional[TextIO] = None,
    ) -> "LoggerSettings":
        """Read the settings from the environment (default: os.environ)."""
        environ = os.environ if environ is None else environ
        return cls(
            modes=environ.get(MODE_ENV),
            level=environ.get(LEVEL_ENV),
            file_path=environ.get(FILE_ENV),
            lambda_runtime=bool(environ.get(LAMBDA_MARKER_ENV)),
            color=supports_color(stream, environ),
        )


def load_level(environ: Optional[Mapping[str, str]] = None) -> LogLevel:
    """Minimum level from LOGTIDE_LEVEL, read at logger construction."""
    environ = os.environ if environ is None else environ
    return parse_level(environ.get(LEVEL_ENV))


def resolve_file_path(environ: Optional[Mapping[str, str]] = None) -> str:
    """Log file path, re-read on every call so late env changes apply."""
    environ = os.environ if environ is None else environ
    return environ.get(FILE_ENV) or DEFAULT_LOG_FILE
