"""Logging setup and configuration."""

import logging
import sys
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.logging.context import set_log_context
from core.logging.formatters import ConsoleFormatter, JSONFormatter

# Default settings
DEFAULT_LOG_DIR = Path("logs")
DEFAULT_ROTATION_WHEN = "midnight"
DEFAULT_ROTATION_INTERVAL = 1
DEFAULT_BACKUP_COUNT = 7
DEFAULT_CONSOLE_LEVEL = logging.INFO
DEFAULT_FILE_LEVEL = logging.DEBUG


def get_log_file_path(
    log_dir: Path,
    stage: str | None = None,
    topic: str | None = None,
) -> Path:
    """
    Build log file path with a date subfolder.

    Structure: {log_dir}/{YYYY-MM-DD}/{stage}_{topic}_{MMDD}_{HHMM}.log

    Examples:
        logs/2026-01-05/decode_clicks_0105_1430.log
        logs/2026-01-05/coders_0105_0930.log
    """
    now = datetime.now()
    date_folder = now.strftime("%Y-%m-%d")
    stamp = now.strftime("%m%d_%H%M")

    parts = [p for p in (stage, topic) if p] or ["coders"]
    filename = f"{'_'.join(parts)}_{stamp}.log"

    return log_dir / date_folder / filename


def setup_logging(
    name: str = "coders",
    stage: str | None = None,
    topic: str | None = None,
    log_dir: Path | None = None,
    log_to_file: bool = False,
    json_format: bool = True,
    console_level: int = DEFAULT_CONSOLE_LEVEL,
    file_level: int = DEFAULT_FILE_LEVEL,
    rotation_when: str = DEFAULT_ROTATION_WHEN,
    rotation_interval: int = DEFAULT_ROTATION_INTERVAL,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> logging.Logger:
    """
    Configure logging with a console handler and an optional rotating file handler.

    Console output goes to stderr so stdout stays free for decoded records.

    Args:
        name: Logger name returned to the caller
        stage: Stage name for log context and file naming
        topic: Topic name for log context and file naming
        log_dir: Directory for log files (default: ./logs)
        log_to_file: Add a time-rotated file handler (default: False)
        json_format: Use JSON format for file logs (default: True)
        console_level: Console handler level (default: INFO)
        file_level: File handler level (default: DEBUG)
        rotation_when: When to rotate logs - 'midnight', 'H', 'M'
        rotation_interval: Interval for rotation (default: 1)
        backup_count: Number of backup files to keep (default: 7)

    Returns:
        Configured logger instance
    """
    if stage:
        set_log_context(stage=stage)
    if topic:
        set_log_context(topic=topic)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(ConsoleFormatter(stream=console_handler.stream))

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    log_file = None
    if log_to_file:
        log_file = get_log_file_path(log_dir or DEFAULT_LOG_DIR, stage=stage, topic=topic)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        if json_format:
            file_formatter = JSONFormatter()
        else:
            file_formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
            )

        file_handler = TimedRotatingFileHandler(
            log_file,
            when=rotation_when,
            interval=rotation_interval,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    logger = logging.getLogger(name)
    if log_file:
        logger.debug(f"Logging initialized: file={log_file}, json={json_format}")
    else:
        logger.debug("Logging initialized: console-only mode")

    return logger

