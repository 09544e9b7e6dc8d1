"""Exceptions raised by duplicate detection and review."""


class DuplicateReviewError(Exception):
    """Base exception for duplicate detection and review errors."""

    pass


class ConfigurationError(DuplicateReviewError):
    """Error in detection configuration."""

    pass


class ScanFailure(DuplicateReviewError):
    """The ledger store could not be read during a scan. Safe to retry."""

    pass


class DeletionFailure(DuplicateReviewError):
    """The ledger store rejected a deletion batch. Nothing was deleted."""

    def __init__(self, message: str, transaction_ids: list[str] | None = None):
        super().__init__(message)
        self.transaction_ids = list(transaction_ids or [])


class InvariantViolation(DuplicateReviewError, ValueError):
    """A deletion request would break the at-least-one-survivor rule."""

    pass


class InvalidTransition(DuplicateReviewError):
    """The requested action is not valid in the session's current state."""

    pass


class SessionBusyError(InvalidTransition):
    """A scan or deletion is still in flight."""

    pass


class UnknownTransactionError(DuplicateReviewError, ValueError):
    """The transaction is not a remaining member of the current group."""

    pass


class TransactionNotFoundError(LookupError):
    """One or more transaction ids do not exist in the ledger store."""

    def __init__(self, missing_ids: list[str]):
        super().__init__(f"Transaction(s) not found: {', '.join(missing_ids)}")
        self.missing_ids = missing_ids


__all__ = [
    "DuplicateReviewError",
    "ConfigurationError",
    "ScanFailure",
    "DeletionFailure",
    "InvariantViolation",
    "InvalidTransition",
    "SessionBusyError",
    "UnknownTransactionError",
    "TransactionNotFoundError",
]
