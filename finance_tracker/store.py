"""Ledger store and session seams.

The analytics never fetch data themselves.  Callers obtain a consistent
snapshot through a :class:`LedgerStore` for the user named by a
:class:`SessionContext` and run the engines on it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Protocol

from .logger import get_logger
from .models import Category, Transaction

logger = get_logger(__name__)


class LedgerStore(Protocol):
    def list_transactions(self, user_id: str) -> List[Transaction]:
        """User's transactions, newest first."""
        ...

    def list_categories(self, user_id: str) -> List[Category]:
        """User's categories plus the shared defaults."""
        ...


class SessionContext(Protocol):
    user_id: Optional[str]


@dataclass(frozen=True)
class LedgerSnapshot:
    user_id: str
    transactions: List[Transaction] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)


class RowLedgerStore:
    """In-memory ledger store over raw store rows (e.g. a JSON dump)."""

    def __init__(self, transaction_rows: Iterable[Mapping[str, Any]], category_rows: Iterable[Mapping[str, Any]]):
        self._transactions = [Transaction.from_row(row) for row in transaction_rows]
        self._categories = [Category.from_row(row) for row in category_rows]

    def list_transactions(self, user_id: str) -> List[Transaction]:
        owned = [txn for txn in self._transactions if txn.user_id == user_id]
        return sorted(owned, key=lambda txn: txn.date, reverse=True)

    def list_categories(self, user_id: str) -> List[Category]:
        return [c for c in self._categories if c.is_default or c.user_id == user_id]


def take_snapshot(store: LedgerStore, session: SessionContext) -> LedgerSnapshot:
    """Fetch one consistent snapshot of the session user's ledger.

    Rows that belong to another user are dropped even if the store returns
    them; default categories are kept.

    Raises:
        PermissionError: If the session has no user
    """
    user_id = session.user_id
    if not user_id:
        raise PermissionError("No signed-in user in the session context")

    transactions = store.list_transactions(user_id)
    categories = store.list_categories(user_id)
    owned_transactions = [txn for txn in transactions if txn.user_id == user_id]
    visible_categories = [c for c in categories if c.is_default or c.user_id == user_id]

    dropped = (len(transactions) - len(owned_transactions)) + (len(categories) - len(visible_categories))
    if dropped:
        logger.warning(f"Dropped {dropped} records not owned by the session user")

    return LedgerSnapshot(user_id=user_id, transactions=owned_transactions, categories=visible_categories)
