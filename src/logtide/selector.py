"""
Environment-driven logger selection.

    get_logger("App")

picks the console strategy from LOGTIDE_MODE, the Lambda marker and colour
support, and adds a file adapter when LOGTIDE_MODE contains "file" or
LOGTIDE_FILE is set:

    LOGTIDE_MODE=plain                     plain stdout
    LOGTIDE_MODE=colorful,file             colorful stdout + latest.log
    LOGTIDE_FILE=app.log                   auto-detected console + app.log
    AWS_LAMBDA_FUNCTION_NAME=fn            structured events (no mode set)
"""

from logtide.adapters import ConsoleAdapter, FileAdapter, LambdaAdapter, LogAdapter
from logtide.config import LoggerSettings, OutputMode
from logtide.core import Logger


def _auto_console(settings: LoggerSettings) -> LogAdapter:
    return ConsoleAdapter(color=settings.color)


def adapter_for_mode(mode: OutputMode, settings: LoggerSettings) -> LogAdapter:
    """Console-side adapter for one mode. CONSOLE means auto-detect colour."""
    if mode is OutputMode.LAMBDA:
        return LambdaAdapter()
    if mode is OutputMode.COLORFUL:
        return ConsoleAdapter(color=True)
    if mode is OutputMode.PLAIN:
        return ConsoleAdapter(color=False)
    return _auto_console(settings)


def select_adapters(settings: LoggerSettings) -> list[LogAdapter]:
    """
    Adapters for the given settings, console first.

    The first non-file mode token decides the console strategy. Without
    mode tokens the Lambda marker selects structured output; otherwise
    colour support decides between colorful and plain.
    """
    console_modes = settings.console_modes
    if console_modes:
        console = adapter_for_mode(console_modes[0], settings)
    elif settings.modes:
        # only "file" was requested
        console = _auto_console(settings)
    elif settings.lambda_runtime:
        console = LambdaAdapter()
    else:
        console = _auto_console(settings)

    adapters = [console]
    if settings.file_enabled:
        adapters.append(FileAdapter())
    return adapters


# ═══════════════════════════════════════════════════════════════════
#  Factories
# ═══════════════════════════════════════════════════════════════════

def get_logger(name: str, settings: LoggerSettings | None = None) -> Logger:
    """Logger with adapters chosen from the environment."""
    settings = settings or LoggerSettings.from_env()
    return Logger(name, select_adapters(settings), min_level=settings.level)


def create_console_logger(name: str) -> Logger:
    """Plain text on stdout, magic tags stripped."""
    return Logger(name, [ConsoleAdapter(color=False)])


def create_colorful_console_logger(name: str) -> Logger:
    """
    Coloured stdout with YAML-highlighted metadata and magic tags:

        log = create_colorful_console_logger("Db")
        log.info("Query", {"sql": "<hl sql>SELECT * FROM users</hl>",
                           "status": "<chalk green>ok</chalk>"})
    """
    return Logger(name, [ConsoleAdapter(color=True)])


def create_lambda_logger(name: str) -> Logger:
    """Structured events tagged with `name`, for CloudWatch."""
    return Logger(name, [LambdaAdapter()])


def create_file_logger(name: str) -> Logger:
    """Plain text appended to LOGTIDE_FILE (default latest.log)."""
    return Logger(name, [FileAdapter()])


def create_multiplexed_logger(name: str, *adapters: LogAdapter) -> Logger:
    """One logger fanning every admitted call out to `adapters`, in order."""
    return Logger(name, adapters)
