"""Shared fixtures for ledger_dupes specs."""

from __future__ import annotations

import sqlite3
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from ledger_dupes.model.transaction import Transaction
from ledger_dupes.storage.ledger_store import SqliteLedgerStore


@pytest.fixture
def make_txn():
    """Factory for Transaction models with sensible defaults."""
    counter = iter(range(1, 10_000))

    def _make(
        amount="150.00",
        event_date=date(2025, 3, 1),
        description="GROCERY STORE",
        account_id="acc-1",
        account_name="Checking",
        category_id=None,
        counterparty_id=None,
        id=None,
    ) -> Transaction:
        return Transaction(
            id=id or f"txn-{next(counter)}",
            description=description,
            amount=Decimal(str(amount)),
            event_date=event_date,
            account_id=account_id,
            account_name=account_name,
            category_id=category_id,
            category_name=f"Category {category_id}" if category_id else None,
            counterparty_id=counterparty_id,
            counterparty_name=f"Counterparty {counterparty_id}" if counterparty_id else None,
        )

    return _make


def seed_ledger(db_path: Path, user_id: str, rows: list[dict]) -> SqliteLedgerStore:
    """Create a ledger database and insert rows for user_id.

    Each row needs id, amount and event_date; account_id, category_id and
    counterparty_id reference lookup rows created on demand.
    """
    store = SqliteLedgerStore(db_path)
    conn = sqlite3.connect(db_path)
    try:
        for row in rows:
            for table, key in (
                ("accounts", "account_id"),
                ("categories", "category_id"),
                ("counterparties", "counterparty_id"),
            ):
                ref = row.get(key)
                if ref:
                    conn.execute(
                        f"INSERT OR IGNORE INTO {table} (id, user_id, name) VALUES (?, ?, ?)",
                        (ref, user_id, row.get(key.replace("_id", "_name"), ref.upper())),
                    )
            conn.execute(
                """
                INSERT INTO transactions
                    (id, user_id, description, amount, event_date,
                     account_id, category_id, counterparty_id)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    row["id"],
                    user_id,
                    row.get("description", ""),
                    str(row["amount"]),
                    row["event_date"],
                    row.get("account_id"),
                    row.get("category_id"),
                    row.get("counterparty_id"),
                ),
            )
        conn.commit()
    finally:
        conn.close()
    return store


@pytest.fixture
def ledger(tmp_path):
    """Factory: seed a ledger database under tmp_path and return its store."""

    def _ledger(rows: list[dict], user_id: str = "user-1") -> SqliteLedgerStore:
        return seed_ledger(tmp_path / "data" / "ledger.db", user_id, rows)

    return _ledger
