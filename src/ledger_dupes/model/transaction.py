from __future__ import annotations

"""
Transaction model as seen by duplicate detection.

Scope
- Read-only view of a ledger row, denormalized with account, category and
  counterparty names by the store.
- Owned by the ledger store; this package only reads it and requests
  deletion by id.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Transaction(BaseModel):
    """One ledger transaction.

    category_id and counterparty_id are None when the row has none; the
    names are None whenever the join found nothing.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    description: str = ""
    amount: Decimal
    event_date: date
    account_id: Optional[str] = None
    account_name: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    counterparty_id: Optional[str] = None
    counterparty_name: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, value: Any) -> Decimal:
        """Parse amount from string or number without float artifacts."""
        if isinstance(value, Decimal):
            return value
        return Decimal(str(value))

    @field_validator("event_date", mode="before")
    @classmethod
    def parse_event_date(cls, value: Any) -> Any:
        """Accept ISO dates and ISO timestamps."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and len(value) > 10:
            return datetime.fromisoformat(value).date()
        return value

    @classmethod
    def from_store_row(cls, row: Mapping[str, Any]) -> "Transaction":
        """Construct a Transaction from a joined ledger store row.

        Store rows carry the join columns as account_name, category_name and
        counterparty_name. Missing keys and empty ids both map to None.

        Args:
            row: mapping with the store's column names

        Returns:
            Transaction with proper type conversions applied.
        """
        return cls(
            id=str(row["id"]),
            description=row.get("description") or "",
            amount=row["amount"],
            event_date=row["event_date"],
            account_id=row.get("account_id") or None,
            account_name=row.get("account_name"),
            category_id=row.get("category_id") or None,
            category_name=row.get("category_name"),
            counterparty_id=row.get("counterparty_id") or None,
            counterparty_name=row.get("counterparty_name"),
        )


__all__ = ["Transaction"]
