"""Custom exception classes for the finance tracker."""


class FinanceTrackerError(Exception):
    """Base exception for the finance tracker."""
    pass


class ConfigError(FinanceTrackerError):
    """Configuration-related errors."""
    pass


class InvalidInputError(FinanceTrackerError, ValueError):
    """A ledger record violates the record model invariants."""
    pass
