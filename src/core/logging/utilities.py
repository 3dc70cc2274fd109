"""Logging utility functions."""

import logging
from typing import Any

from core.errors.exceptions import classify_exception

# Reserved LogRecord attribute names that cannot be used in extra dict
_RESERVED_LOG_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "asctime",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


def log_with_context(
    logger: logging.Logger,
    level: int,
    msg: str,
    **kwargs: Any,
) -> None:
    """
    Log with structured context fields.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        msg: Log message
        **kwargs: Additional context fields (message_topic, fallback, etc.)
                  Note: exc_info=True is supported and handled specially.

    Example:
        log_with_context(
            logger, logging.ERROR, "Unable to parse timestamp column",
            fallback="timestamp",
            timestamp_index=3,
            message_offset=1042,
        )
    """
    # Handle exc_info specially - it's a direct parameter to log(), not extra
    exc_info = kwargs.pop("exc_info", None)

    # Filter out reserved keys to prevent LogRecord conflicts
    extra = {k: v for k, v in kwargs.items() if k not in _RESERVED_LOG_KEYS}

    logger.log(level, msg, exc_info=exc_info, extra=extra)


def log_exception(
    logger: logging.Logger,
    exc: Exception,
    msg: str,
    level: int = logging.ERROR,
    include_traceback: bool = True,
    **kwargs: Any,
) -> None:
    """
    Log exception with context and optional traceback.

    Sets error_category from PipelineError subclasses, or classifies other
    exceptions with classify_exception().

    Args:
        logger: Logger instance
        exc: Exception to log
        msg: Context message
        level: Log level (default: ERROR)
        include_traceback: Include full traceback (default: True)
        **kwargs: Additional context fields
    """
    if kwargs.get("error_category") is None:
        kwargs["error_category"] = classify_exception(exc).value

    error_msg = str(exc)
    if len(error_msg) > 500:
        error_msg = error_msg[:500] + "..."
    kwargs["error_message"] = error_msg
    kwargs.setdefault("error_type", type(exc).__name__)

    extra = {k: v for k, v in kwargs.items() if k not in _RESERVED_LOG_KEYS}

    if include_traceback:
        logger.log(level, msg, exc_info=exc, extra=extra)
    else:
        logger.log(level, msg, extra=extra)


def format_decode_summary(
    records_processed: int,
    records_defaulted: int,
    duration_ms: float | None = None,
) -> str:
    """
    Format a one-line summary of a decode run.

    Example:
        >>> format_decode_summary(1200, 34)
        'Decoded 1200 records (34 with default timestamp)'
        >>> format_decode_summary(10, 0, 250.0)
        'Decoded 10 records (0 with default timestamp) in 250.0 ms'
    """
    summary = f"Decoded {records_processed} records ({records_defaulted} with default timestamp)"
    if duration_ms is not None:
        summary = f"{summary} in {duration_ms:.1f} ms"
    return summary
