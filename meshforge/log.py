"""Logging subsystem: console/file output, stack dumps and assertions."""

from __future__ import annotations

import logging
import sys
import traceback
from dataclasses import dataclass

LOGGER_NAME = "meshforge"

_FORMAT = "[%(asctime)s] %(name)s %(levelname)s: %(message)s"
_DATE_FORMAT = "%H:%M:%S"

_logger = logging.getLogger(LOGGER_NAME)
_handlers: list[logging.Handler] = []


@dataclass
class LoggerSettings:
    """Where log output goes."""

    output_to_file: bool = False
    output_to_console: bool = True
    log_file_name: str = "logs.txt"


def _format(message: str, args: tuple) -> str:
    return message.format(*args) if args else message


def init_logging(settings: LoggerSettings | None = None) -> logging.Logger:
    """Configure the package logger; calling it again replaces the old setup."""
    settings = settings if settings is not None else LoggerSettings()
    uninitialize()

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)
    if settings.output_to_console:
        _handlers.append(logging.StreamHandler(sys.stdout))
    if settings.output_to_file:
        _handlers.append(logging.FileHandler(settings.log_file_name, mode="a", encoding="utf-8"))

    for handler in _handlers:
        handler.setFormatter(formatter)
        _logger.addHandler(handler)
    _logger.setLevel(logging.DEBUG)
    return _logger


def uninitialize() -> None:
    """Detach and close every handler installed by init_logging."""
    for handler in _handlers:
        _logger.removeHandler(handler)
        handler.close()
    _handlers.clear()
    _logger.setLevel(logging.NOTSET)


def get_logger() -> logging.Logger:
    """Return the package logger."""
    return _logger


def dump_stack_trace() -> str:
    """Return the caller's stack trace as text."""
    return "".join(traceback.format_stack()[:-1])


def log_error(message: str, *args: object) -> None:
    """Log an error followed by the location it was raised from."""
    _logger.error(_format(message, args))
    _logger.error("Location: \n%s", dump_stack_trace())


def log_assert(condition: object, message: str, *args: object) -> None:
    """Log and raise AssertionError when condition is false."""
    if not condition:
        text = _format(message, args)
        _logger.error(text)
        raise AssertionError(text)