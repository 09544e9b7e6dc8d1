"""
Ledger store boundary for duplicate detection.

The ledger itself (accounts, categories, counterparties, transactions) is
owned elsewhere. Duplicate detection needs exactly two operations from it:

- fetch every transaction of a user, denormalized with account, category and
  counterparty names, newest first
- delete a batch of transactions by id, all-or-nothing

LedgerStore is that interface. SqliteLedgerStore implements it over a local
SQLite ledger database.

Privacy: SQLite is local-only. Never transmit ledger rows over networks.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Protocol, Sequence

from ledger_dupes.errors import TransactionNotFoundError
from ledger_dupes.model.transaction import Transaction

logger = logging.getLogger(__name__)


class LedgerStore(Protocol):
    """Operations duplicate detection needs from the ledger store."""

    def fetch_transactions(self, user_id: str) -> list[Transaction]: ...

    def delete_transactions(self, user_id: str, transaction_ids: Sequence[str]) -> int: ...


class SqliteLedgerStore:
    """Ledger store backed by a SQLite database.

    Usage:
        store = SqliteLedgerStore(Path("data/ledger.db"))
        txns = store.fetch_transactions("user-1")
        store.delete_transactions("user-1", ["txn-2"])
    """

    def __init__(self, db_path: Path):
        """Initialize store with database path. Creates the schema if missing.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        """Create ledger tables if they don't exist."""
        conn = sqlite3.connect(self.db_path)
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS accounts (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS categories (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS counterparties (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS transactions (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    amount TEXT NOT NULL,  -- decimal string, minor-unit precision
                    event_date TEXT NOT NULL,  -- ISO YYYY-MM-DD
                    account_id TEXT REFERENCES accounts(id),
                    category_id TEXT REFERENCES categories(id),
                    counterparty_id TEXT REFERENCES counterparties(id)
                );

                CREATE INDEX IF NOT EXISTS idx_transactions_user_date
                ON transactions(user_id, event_date);
            """)
            conn.commit()
        finally:
            conn.close()

    def fetch_transactions(self, user_id: str) -> list[Transaction]:
        """Retrieve all of a user's transactions, newest first.

        Args:
            user_id: Owner of the transactions

        Returns:
            Transactions with account, category and counterparty names joined in
        """
        conn = self._connect()
        try:
            cursor = conn.execute(
                """
                SELECT
                    t.id, t.description, t.amount, t.event_date,
                    t.account_id, t.category_id, t.counterparty_id,
                    a.name AS account_name,
                    c.name AS category_name,
                    p.name AS counterparty_name
                FROM transactions t
                LEFT JOIN accounts a ON a.id = t.account_id
                LEFT JOIN categories c ON c.id = t.category_id
                LEFT JOIN counterparties p ON p.id = t.counterparty_id
                WHERE t.user_id = ?
                ORDER BY t.event_date DESC, t.rowid
                """,
                (user_id,),
            )
            return [Transaction.from_store_row(dict(row)) for row in cursor.fetchall()]
        finally:
            conn.close()

    def delete_transactions(self, user_id: str, transaction_ids: Sequence[str]) -> int:
        """Delete a batch of the user's transactions in one database transaction.

        Either every id is deleted or none is.

        Args:
            user_id: Owner of the transactions
            transaction_ids: Ids to delete

        Returns:
            Number of transactions deleted

        Raises:
            TransactionNotFoundError: if any id does not exist for this user
        """
        ids = list(dict.fromkeys(transaction_ids))
        if not ids:
            return 0

        placeholders = ", ".join("?" for _ in ids)
        conn = self._connect()
        try:
            with conn:
                found = {
                    row["id"]
                    for row in conn.execute(
                        f"SELECT id FROM transactions WHERE user_id = ? AND id IN ({placeholders})",
                        (user_id, *ids),
                    )
                }
                missing = [i for i in ids if i not in found]
                if missing:
                    raise TransactionNotFoundError(missing)

                cursor = conn.execute(
                    f"DELETE FROM transactions WHERE user_id = ? AND id IN ({placeholders})",
                    (user_id, *ids),
                )
                deleted = cursor.rowcount
            logger.info("Deleted %d transaction(s) for user %s", deleted, user_id)
            return deleted
        finally:
            conn.close()


__all__ = ["LedgerStore", "SqliteLedgerStore"]
