"""
Services package - Supporting services for the TETSUO wallet.

Contains:
- Logging: console and daily file logging, log cleanup
"""

from .logging import configure_logging, get_log_file_path, cleanup_old_logs

__all__ = [
    "configure_logging",
    "get_log_file_path",
    "cleanup_old_logs",
]
