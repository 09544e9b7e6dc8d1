from __future__ import annotations

"""
Duplicate detection models.

These models carry scan output from the detector to the review session and
define the wire shape returned by the scan request:

    { success, duplicate_groups, total_duplicates_found, scanned_transactions }

or, on failure, { success: false, error }.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field, field_serializer

from ledger_dupes.model.transaction import Transaction


class GroupMember(BaseModel):
    """A transaction as presented inside a duplicate group."""

    id: str
    description: str
    amount: Decimal
    event_date: date
    category_name: Optional[str] = None
    counterparty_name: Optional[str] = None

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> float:
        return float(value)

    @field_serializer("event_date")
    def serialize_event_date(self, value: date) -> str:
        return value.isoformat()

    @classmethod
    def from_transaction(cls, txn: Transaction) -> "GroupMember":
        return cls(
            id=txn.id,
            description=txn.description,
            amount=txn.amount,
            event_date=txn.event_date,
            category_name=txn.category_name,
            counterparty_name=txn.counterparty_name,
        )


class DuplicateCandidateGroup(BaseModel):
    """A cluster of 2+ transactions suspected to record the same event.

    Invariants (established by the detector):
    - all members share the same account
    - all members are within the amount tolerance of the cluster seed
    - confidence is an integer in [0, 100]
    """

    id: str
    account_id: str
    account_name: str
    transactions: List[GroupMember] = Field(min_length=2)
    confidence: int = Field(ge=0, le=100)
    days_apart: int = Field(ge=0)

    @property
    def member_ids(self) -> list[str]:
        return [m.id for m in self.transactions]

    @property
    def duplicate_count(self) -> int:
        """Members beyond the one presumed original."""
        return len(self.transactions) - 1


class ScanResult(BaseModel):
    """Assembled output of one scan."""

    duplicate_groups: List[DuplicateCandidateGroup] = Field(default_factory=list)
    scanned_transactions: int = 0

    @computed_field  # type: ignore[misc]
    @property
    def total_duplicates_found(self) -> int:
        return sum(g.duplicate_count for g in self.duplicate_groups)

    @property
    def is_empty(self) -> bool:
        return not self.duplicate_groups

    def with_min_confidence(self, min_confidence: int) -> "ScanResult":
        """Return a copy keeping only groups at or above min_confidence."""
        return ScanResult(
            duplicate_groups=[g for g in self.duplicate_groups if g.confidence >= min_confidence],
            scanned_transactions=self.scanned_transactions,
        )

    def to_response(self) -> Dict[str, Any]:
        """Success response for the scan request."""
        return {
            "success": True,
            "duplicate_groups": [g.model_dump(mode="json") for g in self.duplicate_groups],
            "total_duplicates_found": self.total_duplicates_found,
            "scanned_transactions": self.scanned_transactions,
        }


def failure_response(error: str) -> Dict[str, Any]:
    """Failure response for the scan request."""
    return {"success": False, "error": error}


__all__ = [
    "GroupMember",
    "DuplicateCandidateGroup",
    "ScanResult",
    "failure_response",
]
