"""Configuration management for the finance tracker.

This module centralizes all configuration values including reporting
defaults, thresholds and environment variable overrides.
"""

from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation

from .exceptions import ConfigError

# Week boundaries (ISO weeks start on Monday)
WEEK_START = os.getenv("FINTRACK_WEEK_START", "monday")
WEEKDAY_INDEX = {"monday": 0, "sunday": 6}

# Budget utilization at or above this percentage is a warning
BUDGET_WARNING_PERCENT = os.getenv("FINTRACK_BUDGET_WARNING_PERCENT", "80")

# Dashboard
WEEKLY_TRANSACTION_GOAL = os.getenv("FINTRACK_WEEKLY_GOAL", "20")
RECENT_TRANSACTION_LIMIT = os.getenv("FINTRACK_RECENT_LIMIT", "5")
CURRENCY_SYMBOL = os.getenv("FINTRACK_CURRENCY_SYMBOL", "$")

# Export
EXPORT_FILENAME = os.getenv("FINTRACK_EXPORT_FILENAME", "transactions.csv")

# Logging
LOG_LEVEL = os.getenv("FINTRACK_LOG_LEVEL", "INFO")


def get_week_start(value: str | None = None) -> int:
    """Return the configured first day of the week as a ``date.weekday()`` index.

    Args:
        value: Explicit day name; falls back to ``FINTRACK_WEEK_START``

    Returns:
        0 for Monday, 6 for Sunday

    Raises:
        ConfigError: If the day name is not supported

    Example:
        >>> get_week_start('sunday')
        6
    """
    name = (value or WEEK_START).strip().lower()
    if name not in WEEKDAY_INDEX:
        raise ConfigError(
            f"Unsupported week start '{name}'. Expected one of: {', '.join(sorted(WEEKDAY_INDEX))}"
        )
    return WEEKDAY_INDEX[name]


def get_budget_warning_percent() -> Decimal:
    """Get the budget warning threshold as a percentage (0-100)."""
    try:
        percent = Decimal(BUDGET_WARNING_PERCENT)
    except InvalidOperation as exc:
        raise ConfigError(f"Invalid budget warning percent: {BUDGET_WARNING_PERCENT!r}") from exc
    if not percent.is_finite() or percent < 0 or percent > 100:
        raise ConfigError(f"Budget warning percent must be between 0 and 100, got {percent}")
    return percent


def get_weekly_transaction_goal() -> int:
    """Get the weekly transaction count goal shown on the dashboard."""
    return _positive_int(WEEKLY_TRANSACTION_GOAL, "FINTRACK_WEEKLY_GOAL")


def get_recent_transaction_limit() -> int:
    """Get how many recent transactions the dashboard lists."""
    return _positive_int(RECENT_TRANSACTION_LIMIT, "FINTRACK_RECENT_LIMIT")


def _positive_int(raw: str, name: str) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value
