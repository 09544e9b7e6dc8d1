"""
Clustering strategies for duplicate candidates within one account.

Two transactions are candidates when their amounts differ by at most the
amount tolerance and their dates by at most the day window.

SeedClustering is the production behaviour: each unclaimed transaction seeds
a cluster and only transactions matching the seed directly join it. It is not
transitively closed: with T, U 20 days apart and U, V 10 days apart, V is left
out of T's cluster when T and V are 30+ days apart.

TransitiveClustering groups connected components of the same predicate. It
is available through DetectionSettings.clustering = "transitive".
"""
from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from ledger_dupes.config import AMOUNT_TOLERANCE, MAX_DAYS_APART, DetectionSettings
from ledger_dupes.model.transaction import Transaction


def days_between(a: Transaction, b: Transaction) -> int:
    return abs((a.event_date - b.event_date).days)


def is_candidate_match(
    a: Transaction,
    b: Transaction,
    amount_tolerance: Decimal = AMOUNT_TOLERANCE,
    max_days_apart: int = MAX_DAYS_APART,
) -> bool:
    """Pairwise duplicate predicate: same amount within tolerance, close dates."""
    if abs(a.amount - b.amount) > amount_tolerance:
        return False
    return days_between(a, b) <= max_days_apart


class ClusteringStrategy(Protocol):
    """Groups one account's transactions into clusters of 2+ members."""

    def cluster(self, transactions: list[Transaction]) -> list[list[Transaction]]: ...


class SeedClustering:
    """Seed-only clustering in store order.

    Clusters keep the scan order: the seed first, then joiners as found.
    Claimed transactions never seed or join another cluster.
    """

    def __init__(
        self,
        amount_tolerance: Decimal = AMOUNT_TOLERANCE,
        max_days_apart: int = MAX_DAYS_APART,
    ):
        self.amount_tolerance = amount_tolerance
        self.max_days_apart = max_days_apart

    def cluster(self, transactions: list[Transaction]) -> list[list[Transaction]]:
        clusters: list[list[Transaction]] = []
        claimed: set[int] = set()

        for i, seed in enumerate(transactions):
            if i in claimed:
                continue

            members = [seed]
            joined = [i]
            for j in range(i + 1, len(transactions)):
                if j in claimed:
                    continue
                if is_candidate_match(
                    seed, transactions[j], self.amount_tolerance, self.max_days_apart
                ):
                    members.append(transactions[j])
                    joined.append(j)

            if len(members) > 1:
                claimed.update(joined)
                clusters.append(members)

        return clusters


class TransitiveClustering:
    """Connected components of the pairwise predicate (union-find).

    Each cluster lists its members in store order and clusters are ordered by
    their first member.
    """

    def __init__(
        self,
        amount_tolerance: Decimal = AMOUNT_TOLERANCE,
        max_days_apart: int = MAX_DAYS_APART,
    ):
        self.amount_tolerance = amount_tolerance
        self.max_days_apart = max_days_apart

    def cluster(self, transactions: list[Transaction]) -> list[list[Transaction]]:
        parent = list(range(len(transactions)))

        def find(x: int) -> int:
            while parent[x] != x:
                parent[x] = parent[parent[x]]
                x = parent[x]
            return x

        for i in range(len(transactions)):
            for j in range(i + 1, len(transactions)):
                if is_candidate_match(
                    transactions[i], transactions[j], self.amount_tolerance, self.max_days_apart
                ):
                    root_i, root_j = find(i), find(j)
                    if root_i != root_j:
                        parent[max(root_i, root_j)] = min(root_i, root_j)

        components: dict[int, list[Transaction]] = {}
        for i, txn in enumerate(transactions):
            components.setdefault(find(i), []).append(txn)

        return [members for members in components.values() if len(members) > 1]


def build_strategy(settings: DetectionSettings) -> ClusteringStrategy:
    """Instantiate the clustering strategy named in settings."""
    if settings.clustering == "transitive":
        return TransitiveClustering(settings.amount_tolerance, settings.max_days_apart)
    return SeedClustering(settings.amount_tolerance, settings.max_days_apart)


__all__ = [
    "ClusteringStrategy",
    "SeedClustering",
    "TransitiveClustering",
    "build_strategy",
    "days_between",
    "is_candidate_match",
]
