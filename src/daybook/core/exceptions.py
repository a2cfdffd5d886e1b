"""
Daybook exception hierarchy.

All daybook exceptions inherit from DaybookError, making it easy for consumers
to catch library-level errors while still distinguishing specific failure modes.
Storage failures live in :mod:`daybook.core.storage.base`.
"""


class DaybookError(Exception):
    """Base exception class for all daybook errors."""


class ConfigurationError(DaybookError):
    """Raised for configuration errors (missing keys, invalid values)."""


class ValidationError(DaybookError, ValueError):
    """Raised when a value violates the data model (bad date key, field index, mood)."""


class ParseError(DaybookError, ValueError):
    """Raised when imported text (a CSV row, a date cell) cannot be parsed."""


class DocumentError(ParseError):
    """Raised when a persisted sync document is malformed or has an unknown version."""
