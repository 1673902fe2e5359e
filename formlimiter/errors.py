"""Error types."""

from __future__ import annotations


class FormLimiterError(Exception):
    """Base class for formlimiter errors."""


class ConfigurationError(FormLimiterError):
    """Invalid rule, limit, notify flag or config file."""


class CollaboratorError(FormLimiterError):
    """A trigger registry, form, notifier or identity call failed.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")
