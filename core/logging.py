"""Logging utilities for probe results and remediation steps."""

from __future__ import annotations

import atexit
from enum import Enum
import importlib
import importlib.util
import logging
import logging.handlers
from pathlib import Path
import queue
from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from diagnostics.models import ProbeResult


def _rich_available() -> bool:
    return importlib.util.find_spec("rich") is not None


if _rich_available():
    rich_logging = importlib.import_module("rich.logging")
    rich_console = importlib.import_module("rich.console")
    rich_text = importlib.import_module("rich.text")
    RichHandler = rich_logging.RichHandler
    Console = rich_console.Console
    Text = rich_text.Text
    console = Console(stderr=True)
else:
    RichHandler = None
    Console = None
    Text = None
    console = None


class LogLevel(str, Enum):
    """Severity accepted by the event sink."""

    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"


_LEVELS = {
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}

_STYLES = {
    LogLevel.INFO: "bold white",
    LogLevel.WARNING: "bold yellow",
    LogLevel.ERROR: "bold red",
}


def setup_logging() -> logging.Logger:
    logger = logging.getLogger("netdiag")
    logger.setLevel(logging.INFO)

    if RichHandler is not None:
        if not any(isinstance(h, RichHandler) for h in logger.handlers):
            handler = RichHandler(rich_tracebacks=True, console=console, show_path=False)
            formatter = logging.Formatter("%(message)s", datefmt="[%X]")
            handler.setFormatter(formatter)
            logger.addHandler(handler)
    else:
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            logger.addHandler(handler)

    logger.propagate = False
    return logger


logger = setup_logging()

_queue_listener: logging.handlers.QueueListener | None = None
_queue_handlers: list[logging.Handler] = []
_file_log_path: Path | None = None
_atexit_registered = False


def set_level(level_name: str) -> None:
    """Set the netdiag logger level from a level name such as ``"DEBUG"``."""

    level = logging.getLevelName((level_name or "").upper())
    logger.setLevel(level if isinstance(level, int) else logging.INFO)


def _shutdown_file_logging() -> None:
    global _queue_listener

    if _queue_listener is not None:
        _queue_listener.stop()
        for handler in _queue_listener.handlers:
            handler.close()
        _queue_listener = None


def _remove_queue_handlers() -> None:
    for handler in _queue_handlers:
        if handler in logger.handlers:
            logger.removeHandler(handler)
    _queue_handlers.clear()


def enable_file_logging(log_path: Path) -> None:
    """Enable background file logging to the supplied log path."""

    global _queue_listener, _file_log_path, _atexit_registered

    log_path = Path(log_path).expanduser()
    if _file_log_path == log_path and _queue_listener is not None:
        return

    _shutdown_file_logging()
    _remove_queue_handlers()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    file_handler.setFormatter(formatter)

    log_queue: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    queue_handler = logging.handlers.QueueHandler(log_queue)
    queue_handler.setLevel(logging.INFO)

    logger.addHandler(queue_handler)
    _queue_handlers.append(queue_handler)

    _queue_listener = logging.handlers.QueueListener(
        log_queue,
        file_handler,
        respect_handler_level=True,
    )
    _queue_listener.start()

    _file_log_path = log_path

    if not _atexit_registered:
        atexit.register(_shutdown_file_logging)
        _atexit_registered = True


def disable_file_logging() -> None:
    """Flush and detach the background file handler, if any."""

    global _file_log_path

    _shutdown_file_logging()
    _remove_queue_handlers()
    _file_log_path = None


def _format_text(message: str, style: str) -> Any:
    if Text is None:
        return message
    return Text(message, style=style)


def format_result_line(result: "ProbeResult") -> str:
    return (
        f"[{result.status_label}] {result.category.value} "
        f"target={result.target}: {result.detail}"
    )


def log_event(
    message: str,
    level: LogLevel | str = LogLevel.INFO,
    results: Iterable["ProbeResult"] | None = None,
) -> None:
    """Record one event, optionally followed by one line per attached result."""

    level = LogLevel(level)
    log_level = _LEVELS[level]
    style = _STYLES[level]
    logger.log(log_level, _format_text(message, style))
    for result in results or ():
        line = format_result_line(result)
        result_level = logging.INFO if result.success else logging.WARNING
        logger.log(result_level, line)

