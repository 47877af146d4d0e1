"""Exceptions raised by the ledger controller."""


class LedgerError(Exception):
    """Base class for every error the ledger reports to the user."""


class ValidationError(LedgerError, ValueError):
    """Raised when an amount, category or date fails validation."""

    def __init__(self, field, message):
        super().__init__(message)
        self.field = field
        self.message = message


class EmptyExportError(LedgerError):
    """Raised when an export is requested but there is nothing to export."""


class RecordNotFoundError(LedgerError, LookupError):
    """Raised when an update targets an expense id that does not exist."""

    def __init__(self, expense_id, message="Expense not found"):
        super().__init__(message)
        self.expense_id = expense_id
