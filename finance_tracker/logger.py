"""Logging infrastructure with user context."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from . import config


class UserContextFilter(logging.Filter):
    """Add user context to log records."""

    def __init__(self):
        super().__init__()
        self.user_id: Optional[str] = None

    def filter(self, record):
        """Add user_id to record."""
        record.user_id = self.user_id or "anonymous"
        return True


class FinanceTrackerLogger:
    """Centralized logging manager."""

    def __init__(self, log_level: str = "INFO"):
        self.user_filter = UserContextFilter()

        self.logger = logging.getLogger("finance_tracker")
        self.logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Remove existing handlers
        self.logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] [user:%(user_id)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        console_handler.addFilter(self.user_filter)
        self.logger.addHandler(console_handler)

    def set_user_context(self, user_id: Optional[str]):
        """Set current user context for logging."""
        self.user_filter.user_id = user_id

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """Get the configured logger, or one of its children."""
        logger = self.logger.getChild(name) if name else self.logger
        # Records propagate past parent filters, so each logger carries its own
        if self.user_filter not in logger.filters:
            logger.addFilter(self.user_filter)
        return logger


# Global logger instance
_logger_instance: Optional[FinanceTrackerLogger] = None


def get_logger(name: Optional[str] = None, log_level: Optional[str] = None) -> logging.Logger:
    """Get or create global logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = FinanceTrackerLogger(log_level or config.LOG_LEVEL)
    return _logger_instance.get_logger(name)


def set_user_context(user_id: Optional[str]):
    """Set user context for logging."""
    global _logger_instance
    if _logger_instance is None:
        get_logger()
    _logger_instance.set_user_context(user_id)
