"""
Exception hierarchy.

The tools layer raises these; the store converts SheetError into a single
user-visible alert and never lets it reach the rendering code.
"""


class ExpenseTrackerError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(ExpenseTrackerError):
    pass


class SheetError(ExpenseTrackerError):
    """Reading a sheet failed. Carries the sheet name for logs and alerts."""

    def __init__(self, message: str, sheet: str | None = None):
        super().__init__(message)
        self.sheet = sheet


class SheetFetchError(SheetError):
    """Network error, timeout or non-2xx response."""


class SheetParseError(SheetError):
    """Payload wrapper did not match or the JSON inside is not a gviz table."""


class LedgerError(ExpenseTrackerError):
    """The local JSON ledger exists but cannot be read back."""
