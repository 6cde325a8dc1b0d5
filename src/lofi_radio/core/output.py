"""
Logging setup using Loguru.
File sink always, console sink on request.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import LoggingConfig, get_data_dir


def get_log_file_path() -> Path:
    """Get the default path to the log file."""
    return get_data_dir() / "lofi-radio.log"


def setup_loguru(
    log_file: Optional[Path] = None,
    level: str = "INFO",
    console_output: bool = False,
) -> Path:
    """
    Configure loguru for file logging with optional console output.

    Args:
        log_file: Path to log file (default: ~/.local/share/lofi-radio/lofi-radio.log)
        level: Minimum level for logging (DEBUG, INFO, WARNING, ERROR)
        console_output: Whether to also log to stderr

    Returns:
        The log file path in use
    """
    log_path = log_file if log_file else get_log_file_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()

    logger.add(
        log_path,
        rotation="10 MB",
        retention=5,  # Keep 5 backup files
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        enqueue=False,
    )

    if console_output:
        logger.add(sys.stderr, level=level, format="{level}: {message}")

    logger.info(f"Loguru initialized: {log_path} (level={level})")
    return log_path


def setup_from_config(logging_config: LoggingConfig) -> Path:
    """Configure loguru from the [logging] config section."""
    log_file = Path(logging_config.log_file) if logging_config.log_file else None
    return setup_loguru(
        log_file,
        level=logging_config.level,
        console_output=logging_config.console_output,
    )
