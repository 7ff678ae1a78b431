"""Logging utilities for the margin simulator.

This module provides standardized logging functionality for solver, pricing
and reporting operations.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

# Type for log callback functions
LogCallback = Callable[[int, str, Dict[str, Any]], None]

# Root logger name for the package
LOGGER_NAME = "margin_simulator"

_callback: Optional[LogCallback] = None


class LogLevel(int, Enum):
    """Log levels for the simulator."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LogEvent(str, Enum):
    """Event types for simulator logging."""

    SOLVER = "solver"
    PRICING = "pricing"
    QUOTE = "quote"
    SCENARIO = "scenario"
    REPORTING = "reporting"

    def __str__(self) -> str:
        return self.value


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a package logger.

    Args:
        name: Optional child name (``solver`` yields ``margin_simulator.solver``)

    Returns:
        Logger instance
    """
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def set_log_callback(callback: Optional[LogCallback]) -> None:
    """Install a callback receiving every event logged through this module.

    Args:
        callback: Function called with ``(level, event, data)``, or None to remove
    """
    global _callback
    _callback = callback


def _log(
    callback: LogCallback,
    level: LogLevel,
    event: LogEvent,
    data: Dict[str, Any],
) -> None:
    """Log an event with the provided callback.

    Args:
        callback: Function to call with the log data
        level: Severity level
        event: Event type
        data: Dictionary of event data
    """
    try:
        callback(level, str(event), data)
    except Exception as e:
        # Fallback to standard logging if callback fails
        logging.error(
            f"Logging callback failed with error: {e}. Original log: "
            f"level={level}, event={event}, data={data}"
        )


def _emit(level: LogLevel, event: LogEvent, message: str, **data: Any) -> None:
    logger = get_logger(str(event))
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={"event": str(event), "data": data})
    if _callback is not None:
        _log(_callback, level, event, {"message": message, **data})


def log_debug(event: LogEvent, message: str, **data: Any) -> None:
    """Log a debug-level event."""
    _emit(LogLevel.DEBUG, event, message, **data)


def log_info(event: LogEvent, message: str, **data: Any) -> None:
    """Log an info-level event."""
    _emit(LogLevel.INFO, event, message, **data)


def log_warning(event: LogEvent, message: str, **data: Any) -> None:
    """Log a warning-level event."""
    _emit(LogLevel.WARNING, event, message, **data)


def log_error(event: LogEvent, message: str, **data: Any) -> None:
    """Log an error-level event."""
    _emit(LogLevel.ERROR, event, message, **data)


def configure_logging(level: str = "WARNING") -> None:
    """Attach a stream handler to the package logger.

    Any handler installed by a previous call is replaced, so the handler
    always writes to the current ``sys.stderr``.

    Args:
        level: Level name such as ``DEBUG`` or ``WARNING``
    """
    logger = get_logger()
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    for existing in [h for h in logger.handlers if getattr(h, "_margin_simulator", False)]:
        logger.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler._margin_simulator = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
