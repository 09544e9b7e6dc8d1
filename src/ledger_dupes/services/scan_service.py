"""
Duplicate scan service - the scan request behind the review workflow.

Fetches every transaction of the calling user from the ledger store, runs
duplicate detection over them, and reports either a ScanResult or a failure.
Nothing is mutated by a scan.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from ledger_dupes.detection.duplicate_detector import DuplicateDetector
from ledger_dupes.errors import ScanFailure
from ledger_dupes.model.duplicate import ScanResult, failure_response
from ledger_dupes.storage.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


class DuplicateScanService:
    """Runs duplicate detection against a user's ledger."""

    def __init__(self, store: LedgerStore, detector: DuplicateDetector | None = None):
        self.store = store
        self.detector = detector or DuplicateDetector()

    def scan(self, user_id: str) -> ScanResult:
        """
        Scan the user's ledger for duplicate groups.

        Args:
            user_id: Identity of the caller

        Returns:
            ScanResult (possibly empty)

        Raises:
            ScanFailure: if the user is missing or the store cannot be read
        """
        if not user_id:
            raise ScanFailure("Unauthorized: no user identity supplied")

        logger.info("Finding duplicates for user: %s", user_id)
        try:
            transactions = self.store.fetch_transactions(user_id)
        except Exception as exc:
            logger.exception("Error fetching transactions")
            raise ScanFailure(f"Could not load transactions: {exc}") from exc

        logger.info("Found %d transactions to analyze", len(transactions))
        try:
            return self.detector.scan_transactions(transactions)
        except Exception as exc:
            logger.exception("Error detecting duplicates")
            raise ScanFailure(f"Duplicate detection failed: {exc}") from exc

    def find_duplicates(self, user_id: str) -> Dict[str, Any]:
        """Scan and return the response payload, success or failure."""
        try:
            return self.scan(user_id).to_response()
        except ScanFailure as exc:
            return failure_response(str(exc))


__all__ = ["DuplicateScanService"]
