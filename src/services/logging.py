"""
Logging - Application logging configuration and disk persistence.

Provides:
- Python logging configuration with console and optional file output
- Log persistence to daily files: tetsuo-YYYY-MM-DD.log
- Automatic cleanup of old log files

Wallet code logs names, addresses and networks only. Passwords, phrases
and keys are never passed to a logger.
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional
import logging

from utils import get_logs_dir

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_FILE_PREFIX = "tetsuo-"

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO, log_dir: Optional[Path] = None,
                      retention_days: int = 0) -> None:
    """
    Configure Python logging for the application.

    Sets up a root logger with console output and, when retention_days
    is positive, a daily log file.

    Args:
        level: Logging level (default: INFO)
        log_dir: Directory for log files (default: the app logs dir)
        retention_days: If 0, don't save to disk
    """
    root_logger = logging.getLogger()

    # Only configure if not already configured
    if root_logger.handlers:
        return

    root_logger.setLevel(level)

    # Console handler with simple format
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
    root_logger.addHandler(console_handler)

    if retention_days > 0:
        file_handler = logging.FileHandler(get_log_file_path(log_dir=log_dir), encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        root_logger.addHandler(file_handler)


def get_log_file_path(date: Optional[datetime] = None, log_dir: Optional[Path] = None) -> Path:
    """Get the log file path for a specific date (defaults to today)."""
    if date is None:
        date = datetime.now()
    if log_dir is None:
        log_dir = get_logs_dir()
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / f"{LOG_FILE_PREFIX}{date.strftime('%Y-%m-%d')}.log"


def cleanup_old_logs(retention_days: int, log_dir: Optional[Path] = None) -> int:
    """
    Delete log files older than retention_days.

    Args:
        retention_days: Delete files older than this (0 = delete all)

    Returns:
        Number of files deleted
    """
    if retention_days < 0:
        return 0

    if log_dir is None:
        log_dir = get_logs_dir()
    log_dir = Path(log_dir)
    if not log_dir.exists():
        return 0

    cutoff = datetime.now() - timedelta(days=retention_days)
    deleted = 0

    for path in sorted(log_dir.glob(f"{LOG_FILE_PREFIX}*.log")):
        file_date = _log_file_date(path)
        if file_date is None or file_date >= cutoff:
            continue
        try:
            path.unlink()
        except OSError as e:
            logger.warning(f"Could not remove old log file {path.name}: {e}")
            continue
        deleted += 1

    if deleted:
        logger.debug(f"Removed {deleted} log file(s) older than {retention_days} days")
    return deleted


def _log_file_date(path: Path) -> Optional[datetime]:
    """Date encoded in a log file name, or None for unrelated files."""
    try:
        return datetime.strptime(path.stem[len(LOG_FILE_PREFIX):], "%Y-%m-%d")
    except ValueError:
        return None
