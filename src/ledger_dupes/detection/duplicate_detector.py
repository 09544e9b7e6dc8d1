from __future__ import annotations

"""
Duplicate transaction detection over one user's ledger.

The detector partitions transactions by account, clusters each partition
with the configured ClusteringStrategy, scores every cluster, and assembles
the resulting groups ranked by confidence (highest first, ties in discovery
order).

Transactions without an account are counted as scanned but never grouped.
"""

import logging
from typing import Iterable
from uuid import uuid4

from ledger_dupes.config import DEFAULT_ACCOUNT_NAME, DetectionSettings
from ledger_dupes.detection.clustering import ClusteringStrategy, build_strategy
from ledger_dupes.detection.confidence import calculate_confidence
from ledger_dupes.model.duplicate import DuplicateCandidateGroup, GroupMember, ScanResult
from ledger_dupes.model.transaction import Transaction

logger = logging.getLogger(__name__)


class DuplicateDetector:
    """Finds groups of transactions that look like the same event recorded twice."""

    def __init__(
        self,
        settings: DetectionSettings | None = None,
        strategy: ClusteringStrategy | None = None,
    ):
        """Initialize detector.

        Args:
            settings: Matching settings (defaults: 0.01 tolerance, 30 days, seed clustering)
            strategy: Explicit clustering strategy, overriding settings.clustering
        """
        self.settings = settings or DetectionSettings()
        self.strategy = strategy or build_strategy(self.settings)

    @staticmethod
    def partition_by_account(
        transactions: Iterable[Transaction],
    ) -> dict[str, list[Transaction]]:
        """Split transactions by account, keeping store order within each account."""
        by_account: dict[str, list[Transaction]] = {}
        for txn in transactions:
            if not txn.account_id:
                continue
            by_account.setdefault(txn.account_id, []).append(txn)
        return by_account

    def find_groups(self, account_id: str, transactions: list[Transaction]) -> list[DuplicateCandidateGroup]:
        """Cluster and score the transactions of a single account."""
        account_name = transactions[0].account_name or DEFAULT_ACCOUNT_NAME

        groups: list[DuplicateCandidateGroup] = []
        for members in self.strategy.cluster(transactions):
            score = calculate_confidence(members)
            groups.append(
                DuplicateCandidateGroup(
                    id=str(uuid4()),
                    account_id=account_id,
                    account_name=account_name,
                    transactions=[GroupMember.from_transaction(m) for m in members],
                    confidence=score.confidence,
                    days_apart=score.days_apart,
                )
            )
        return groups

    def scan_transactions(self, transactions: list[Transaction]) -> ScanResult:
        """Scan a user's transactions for duplicate groups.

        Args:
            transactions: All of one user's transactions in store order
                (event date descending is expected)

        Returns:
            ScanResult with groups sorted by confidence, highest first
        """
        by_account = self.partition_by_account(transactions)
        logger.info("Grouped %d transactions into %d accounts", len(transactions), len(by_account))

        groups: list[DuplicateCandidateGroup] = []
        for account_id, account_txns in by_account.items():
            groups.extend(self.find_groups(account_id, account_txns))

        # sorted() is stable, so equal confidences keep discovery order
        groups = sorted(groups, key=lambda g: g.confidence, reverse=True)

        result = ScanResult(duplicate_groups=groups, scanned_transactions=len(transactions))
        logger.info(
            "Found %d duplicate groups (%d duplicate transactions)",
            len(result.duplicate_groups),
            result.total_duplicates_found,
        )
        return result


__all__ = ["DuplicateDetector"]
