"""Logging configuration with console and rotating file handlers"""
import glob
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Malformed analyzer lines are logged per word; on large corpora this
# logger can drown everything else on the console
AGGREGATOR_LOGGER = "src.trmorph.aggregator"


def cleanup_old_logs(log_path: Path, keep: int) -> int:
    """
    Delete session logs beyond the retention limit (newest kept).

    Returns:
        Number of files removed
    """
    log_pattern = str(log_path.parent / f"{log_path.stem}_*.log")
    existing_logs = sorted(glob.glob(log_pattern), reverse=True)  # Newest first

    removed = 0
    for old_log in existing_logs[max(keep - 1, 0):]:  # Leave room for the new session
        try:
            Path(old_log).unlink()
            removed += 1
        except OSError:
            pass  # Ignore deletion errors
    return removed


def setup_logging(
    log_file: str = "logs/trmorph-stem.log",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    keep_sessions: int = 5,
    aggregator_console_level: Optional[int] = None
) -> Path:
    """
    Configure logging with two destinations:
    - Console: Brief logs (INFO by default)
    - File: Detailed logs (DEBUG by default) with rotation

    Rotation policy:
    - New log file on each service start (timestamp-based naming)
    - Keep last `keep_sessions` log files (auto-cleanup on startup)
    - Auto-rotate when file reaches 10MB

    Args:
        log_file: Base path to log file (relative to project root)
        console_level: Console logging level (INFO = brief)
        file_level: File logging level (DEBUG = verbose)
        keep_sessions: Number of session log files to retain
        aggregator_console_level: If set, level for "unexpected line/stem"
            warnings; they still reach the file handler at file_level

    Returns:
        Path of the session log file
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    cleanup_old_logs(log_path, keep_sessions)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    session_log = log_path.parent / f"{log_path.stem}_{timestamp}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything, filter in handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    if aggregator_console_level is not None:
        def _aggregator_filter(record: logging.LogRecord) -> bool:
            if record.name == AGGREGATOR_LOGGER:
                return record.levelno >= aggregator_console_level
            return True
        console_handler.addFilter(_aggregator_filter)

    file_handler = RotatingFileHandler(
        session_log,
        mode='a',
        maxBytes=10*1024*1024,  # 10MB
        backupCount=10,
        encoding='utf-8'
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    # Suppress noisy third-party loggers in console (but keep in file)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.info(f"Logging configured: console={logging.getLevelName(console_level)}, file={session_log} ({logging.getLevelName(file_level)})")
    return session_log
