"""
Service layer for duplicate detection and review.

Services hold the business logic separated from the imperative shell (CLI).

Principles:
- No UI framework imports (Rich, Typer)
- All dependencies injected through constructors
- Functions return data structures, not void
- Fully testable with simple unit tests
"""

from ledger_dupes.services.deletion_service import DeletionExecutor
from ledger_dupes.services.scan_service import DuplicateScanService
from ledger_dupes.services.duplicate_review_service import (
    Complete,
    Idle,
    ReviewSession,
    ReviewSummary,
    Reviewing,
    Scanning,
    SessionState,
    SessionStatus,
)

__all__ = [
    "DeletionExecutor",
    "DuplicateScanService",
    "ReviewSession",
    "ReviewSummary",
    "SessionState",
    "SessionStatus",
    "Idle",
    "Scanning",
    "Reviewing",
    "Complete",
]
