"""Database storage layer using SQLite."""
import asyncio
import logging
import sqlite3
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, Optional
from finwise.config import settings
from finwise.errors import TransactionNotFoundError, TransactionWriteError, require_user
from finwise.models.chat import ChatMessage, ChatMessageCreate
from finwise.models.transaction import Transaction, TransactionCreate
from finwise.utils.timestamp import parse_timestamp, to_storage

logger = logging.getLogger(__name__)


class SQLiteStore(ABC):
    """Shared connection handling for the SQLite-backed stores."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or settings.database_path
        self._init_db()

    @abstractmethod
    def _init_db(self):
        """Create the store's tables if they do not exist."""
        pass

    @contextmanager
    def _get_conn(self):
        """Get database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()


class TransactionStore(SQLiteStore):
    """Storage for transactions. Every query is scoped to one user."""

    def _init_db(self):
        """Initialize database tables."""
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS transactions (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    type TEXT NOT NULL,
                    amount REAL NOT NULL,
                    category TEXT NOT NULL,
                    title TEXT NOT NULL,
                    note TEXT NOT NULL DEFAULT '',
                    date TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_user_date
                ON transactions(user_id, date)
            """)
            conn.commit()

    def write(self, tx: TransactionCreate) -> str:
        """
        Persist a transaction.

        Returns:
            The id assigned to the new record

        Raises:
            NotAuthenticatedError: No user id on the transaction
            TransactionWriteError: The database rejected the write
        """
        user_id = require_user(tx.user_id)
        tx_id = str(uuid.uuid4())
        try:
            with self._get_conn() as conn:
                conn.execute("""
                    INSERT INTO transactions
                    (id, user_id, type, amount, category, title, note, date, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    tx_id,
                    user_id,
                    tx.type.value,
                    tx.amount,
                    tx.category,
                    tx.title,
                    tx.note,
                    to_storage(tx.date),
                    to_storage(datetime.now(timezone.utc)),
                ))
                conn.commit()
        except sqlite3.Error as e:
            logger.exception("Transaction write failed", extra={"user_id": user_id})
            raise TransactionWriteError(f"Could not save {tx.type.value}: {e}") from e
        return tx_id

    def query(
        self,
        user_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[Transaction]:
        """Get a user's transactions within an inclusive date range, newest first."""
        user_id = require_user(user_id)
        with self._get_conn() as conn:
            query = "SELECT * FROM transactions WHERE user_id = ?"
            params = [user_id]

            if start_date:
                query += " AND date >= ?"
                params.append(to_storage(start_date))

            if end_date:
                query += " AND date <= ?"
                params.append(to_storage(end_date))

            query += " ORDER BY date DESC"

            rows = conn.execute(query, params).fetchall()
            return [self._row_to_transaction(row) for row in rows]

    def search(self, user_id: str, text: str) -> List[Transaction]:
        """Case-insensitive substring match on title or category."""
        user_id = require_user(user_id)
        needle = (text or "").strip().lower()
        if not needle:
            return []
        pattern = "%" + needle.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_") + "%"
        with self._get_conn() as conn:
            rows = conn.execute("""
                SELECT * FROM transactions
                WHERE user_id = ?
                AND (lower(title) LIKE ? ESCAPE '\\' OR lower(category) LIKE ? ESCAPE '\\')
                ORDER BY date DESC
            """, (user_id, pattern, pattern)).fetchall()
            return [self._row_to_transaction(row) for row in rows]

    def delete(self, user_id: str, tx_id: str) -> None:
        """
        Delete one of the user's transactions.

        Raises:
            TransactionNotFoundError: No such transaction for this user
        """
        user_id = require_user(user_id)
        with self._get_conn() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE id = ? AND user_id = ?",
                (tx_id, user_id),
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise TransactionNotFoundError(f"Transaction {tx_id} not found")

    @staticmethod
    def _row_to_transaction(row: sqlite3.Row) -> Transaction:
        return Transaction(
            id=row["id"],
            type=row["type"],
            amount=row["amount"],
            category=row["category"],
            title=row["title"],
            note=row["note"] or "",
            date=parse_timestamp(row["date"]),
            created_at=parse_timestamp(row["created_at"]),
            user_id=row["user_id"],
        )


class ChatStore(SQLiteStore):
    """Append-only chat log, ordered by creation time per user."""

    def _init_db(self):
        """Initialize database tables."""
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS chats (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    user_id TEXT NOT NULL,
                    sender TEXT NOT NULL,
                    text TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_user_created
                ON chats(user_id, created_at)
            """)
            conn.commit()

    def append(self, message: ChatMessageCreate) -> ChatMessage:
        """Append a message and return it with its id and timestamp."""
        user_id = require_user(message.user_id)
        created_at = message.created_at or datetime.now(timezone.utc)
        stored = ChatMessage(
            id=str(uuid.uuid4()),
            text=message.text,
            sender=message.sender,
            created_at=created_at,
            user_id=user_id,
        )
        with self._get_conn() as conn:
            conn.execute("""
                INSERT INTO chats (id, user_id, sender, text, created_at)
                VALUES (?, ?, ?, ?, ?)
            """, (
                stored.id,
                user_id,
                stored.sender.value,
                stored.text,
                to_storage(created_at),
            ))
            conn.commit()
        return stored

    def list_by_user(self, user_id: str) -> List[ChatMessage]:
        """All of a user's messages, oldest first."""
        return [message for _, message in self._fetch_after(require_user(user_id), 0)]

    async def stream_by_user(
        self,
        user_id: str,
        poll_interval: Optional[float] = None,
    ) -> AsyncIterator[ChatMessage]:
        """
        Yield a user's messages oldest first, then keep yielding new ones as they arrive.

        The store has no push notifications, so new rows are picked up by
        polling every ``poll_interval`` seconds. Stop by closing the iterator.
        """
        user_id = require_user(user_id)
        interval = settings.chat_poll_interval_seconds if poll_interval is None else poll_interval
        last_seq = 0
        while True:
            for seq, message in self._fetch_after(user_id, last_seq):
                last_seq = max(last_seq, seq)
                yield message
            await asyncio.sleep(interval)

    def delete_all_by_user(self, user_id: str) -> int:
        """Clear a user's chat history. Returns the number of deleted messages."""
        user_id = require_user(user_id)
        with self._get_conn() as conn:
            cursor = conn.execute("DELETE FROM chats WHERE user_id = ?", (user_id,))
            conn.commit()
            return cursor.rowcount

    def _fetch_after(self, user_id: str, seq: int) -> List[tuple]:
        with self._get_conn() as conn:
            rows = conn.execute("""
                SELECT * FROM chats
                WHERE user_id = ? AND seq > ?
                ORDER BY created_at ASC, seq ASC
            """, (user_id, seq)).fetchall()
        return [
            (
                row["seq"],
                ChatMessage(
                    id=row["id"],
                    text=row["text"],
                    sender=row["sender"],
                    created_at=parse_timestamp(row["created_at"]),
                    user_id=row["user_id"],
                ),
            )
            for row in rows
        ]


# Global instances
_transaction_store = None
_chat_store = None


def get_db():
    """Get database store instances."""
    global _transaction_store, _chat_store
    if _transaction_store is None:
        _transaction_store = TransactionStore()
    if _chat_store is None:
        _chat_store = ChatStore()
    return _transaction_store, _chat_store
