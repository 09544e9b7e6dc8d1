"""
Deletion executor - removes transactions chosen during duplicate review.

The batch is one logical operation: it either succeeds as a whole or raises
DeletionFailure, in which case no id may be assumed deleted. There is no
retry policy here; retries are replayed by the user through the review
session.
"""

from __future__ import annotations

import logging
from typing import Sequence

from ledger_dupes.errors import DeletionFailure
from ledger_dupes.storage.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


class DeletionExecutor:
    """Requests removal of transactions from the ledger store."""

    def __init__(self, store: LedgerStore):
        """
        Initialize the executor.

        Args:
            store: Ledger store that owns the transactions
        """
        self.store = store

    def execute(self, user_id: str, transaction_ids: Sequence[str]) -> int:
        """
        Delete a non-empty batch of transactions.

        Args:
            user_id: Identity of the caller, passed through to the store
            transaction_ids: Ids selected for deletion

        Returns:
            Number of transactions deleted (the batch size)

        Raises:
            ValueError: if transaction_ids is empty
            DeletionFailure: if the store rejects the batch
        """
        ids = list(transaction_ids)
        if not ids:
            raise ValueError("Nothing to delete: transaction_ids is empty")

        try:
            self.store.delete_transactions(user_id, ids)
        except Exception as exc:
            logger.error("Deleting %d transaction(s) failed: %s", len(ids), exc)
            raise DeletionFailure(f"Could not delete transactions: {exc}", ids) from exc

        logger.info("Deleted %d duplicate transaction(s)", len(ids))
        return len(ids)


__all__ = ["DeletionExecutor"]
