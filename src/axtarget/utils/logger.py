"""Server logging — Rich console output, optional rotated file, uvicorn routed through both.

uvicorn runs with ``log_config=None``, so its loggers are reset here to
propagate into the root handlers instead of printing on their own.
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

console = Console()

DEFAULT_LOG_DIR = Path.home() / ".axtarget" / "logs"

_FILE_FORMAT = "%(asctime)s [%(levelname)-8s] [%(name)-28s] %(message)s"
_FILE_DATE_FMT = "%Y-%m-%d %H:%M:%S"

# Outbound HTTP clients log every request at INFO
_QUIET_LOGGERS = ("httpx", "httpcore")
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _console_handler(level: int, verbose: bool) -> RichHandler:
    handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_path=verbose,
        show_time=True,
    )
    handler.setLevel(level)
    return handler


def _file_handler(log_dir: Path) -> TimedRotatingFileHandler:
    """Daily rotation at midnight, 7 days kept, always at DEBUG."""
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=str(log_dir / "axtarget.log"),
        when="midnight",
        backupCount=7,
        encoding="utf-8",
    )
    handler.suffix = "%Y-%m-%d"
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATE_FMT))
    return handler


def _route_server_loggers(level: int, verbose: bool) -> None:
    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
        server_logger.setLevel(level)
    # One line per request is noise unless debugging
    if not verbose:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def setup_logging(
    verbose: bool = False,
    log_level: str = "INFO",
    log_to_file: bool = True,
    log_dir: Path | None = None,
) -> Path | None:
    """Install the console handler, the optional file handler and uvicorn routing.

    Args:
        verbose: If True, sets log level to DEBUG and keeps access logs.
        log_level: Console level name (e.g. "INFO", "WARNING").
        log_to_file: Write a rotated log file. Off for containers that
                     collect stdout.
        log_dir: Directory for the log file. Defaults to ~/.axtarget/logs/.

    Returns:
        Path of the active log file, or None when file logging is off.
    """
    level = logging.DEBUG if verbose else getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_console_handler(level, verbose))

    log_file: Path | None = None
    if log_to_file:
        directory = log_dir or DEFAULT_LOG_DIR
        root.addHandler(_file_handler(directory))
        log_file = directory / "axtarget.log"
        # The file handler wants DEBUG even when the console does not
        root.setLevel(logging.DEBUG)
    else:
        root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    _route_server_loggers(level, verbose)

    logging.getLogger(__name__).debug(
        "Logging configured: level=%s, file=%s", logging.getLevelName(level), log_file,
    )
    return log_file
