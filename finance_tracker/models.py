"""Ledger record model.

Transactions and categories as supplied by the ledger store. Both are
immutable values: a transaction is never edited in place (only deleted and
recreated) and a budget change produces a new ``Category``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional

import pandas as pd

from .exceptions import InvalidInputError


class TransactionKind(str, Enum):
    """Income/Expense discriminator shared by transactions and categories."""

    INCOME = "income"
    EXPENSE = "expense"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: Any) -> "TransactionKind":
        """Parse a kind from a store value such as ``'income'`` or ``'Expense'``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise InvalidInputError(f"Unknown transaction kind: {value!r}") from exc


@dataclass(frozen=True)
class Transaction:
    """One financial event. ``amount`` is unsigned; ``kind`` gives direction."""

    id: str
    user_id: str
    kind: TransactionKind
    amount: Decimal
    category_id: Optional[str]
    description: str
    date: datetime
    created_at: Optional[datetime] = None

    def __post_init__(self):
        _require_non_negative(self.amount, "Transaction amount")
        if not self.description or not self.description.strip():
            raise InvalidInputError(f"Transaction {self.id} has an empty description")
        # Stored naive; zone-aware values are converted to UTC
        object.__setattr__(self, "date", parse_timestamp(self.date))
        if self.created_at is not None:
            object.__setattr__(self, "created_at", parse_timestamp(self.created_at))

    @property
    def is_income(self) -> bool:
        return self.kind is TransactionKind.INCOME

    @property
    def is_expense(self) -> bool:
        return self.kind is TransactionKind.EXPENSE

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Transaction":
        """Build a transaction from a ledger store row.

        Args:
            row: Mapping with ``id, user_id, amount, type, category_id,
                description, date`` and optionally ``created_at``

        Returns:
            Parsed transaction

        Raises:
            InvalidInputError: If a required field is missing or malformed
        """
        try:
            return cls(
                id=str(row["id"]),
                user_id=str(row["user_id"]),
                kind=TransactionKind.parse(row["type"]),
                amount=parse_amount(row["amount"]),
                category_id=row.get("category_id") or None,
                description=str(row.get("description") or ""),
                date=parse_timestamp(row["date"]),
                created_at=parse_timestamp(row["created_at"]) if row.get("created_at") else None,
            )
        except KeyError as exc:
            raise InvalidInputError(f"Transaction row is missing field {exc.args[0]!r}") from exc


@dataclass(frozen=True)
class Category:
    """A named bucket for transactions, optionally carrying a monthly budget."""

    id: str
    name: str
    kind: TransactionKind
    user_id: Optional[str] = None
    is_default: bool = False
    budget: Optional[Decimal] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise InvalidInputError(f"Category {self.id} has an empty name")
        if self.budget is not None:
            _require_non_negative(self.budget, f"Budget for category {self.name!r}")

    @property
    def has_budget(self) -> bool:
        """True when the budget is set and positive, i.e. utilization is meaningful."""
        return self.budget is not None and self.budget > 0

    def with_budget(self, budget: Optional[Any]) -> "Category":
        """Return a copy with ``budget`` replaced; ``None`` makes it untracked."""
        return replace(self, budget=None if budget is None else parse_amount(budget))

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Category":
        """Build a category from a ledger store row."""
        try:
            budget = row.get("budget")
            return cls(
                id=str(row["id"]),
                name=str(row.get("name") or ""),
                kind=TransactionKind.parse(row["type"]),
                user_id=row.get("user_id") or None,
                is_default=bool(row.get("is_default") or False),
                budget=None if budget is None or budget == "" else parse_amount(budget),
            )
        except KeyError as exc:
            raise InvalidInputError(f"Category row is missing field {exc.args[0]!r}") from exc


def new_transaction(
    *,
    id: str,
    user_id: str,
    kind: TransactionKind,
    amount: Any,
    category: Optional[Category],
    description: str,
    date: Any,
    created_at: Optional[datetime] = None,
) -> Transaction:
    """Create a transaction, enforcing that its category has the same kind.

    This is the creation path; records already in the ledger are not
    re-validated retroactively.

    Raises:
        InvalidInputError: If the category is missing or of the other kind,
            the amount is negative or the description is empty
    """
    kind = TransactionKind.parse(kind)
    if category is None:
        raise InvalidInputError("A transaction must reference a category")
    if category.kind is not kind:
        raise InvalidInputError(
            f"Category {category.name!r} is an {category.kind.value} category "
            f"and cannot hold an {kind.value} transaction"
        )
    return Transaction(
        id=id,
        user_id=user_id,
        kind=kind,
        amount=parse_amount(amount),
        category_id=category.id,
        description=description,
        date=parse_timestamp(date),
        created_at=created_at or datetime.now(),
    )


def can_delete_category(category: Category, user_id: Optional[str]) -> bool:
    """Default categories are shared and undeletable; others only by their owner."""
    if category.is_default:
        return False
    return user_id is not None and category.user_id == user_id


def categories_for_kind(categories: Iterable[Category], kind: TransactionKind) -> List[Category]:
    """Categories a transaction of ``kind`` may reference, sorted by name."""
    kind = TransactionKind.parse(kind)
    matching = [category for category in categories if category.kind is kind]
    return sorted(matching, key=lambda c: c.name.lower())


def parse_amount(value: Any) -> Decimal:
    """Parse a money amount into a ``Decimal`` without float arithmetic.

    Example:
        >>> parse_amount(4.5)
        Decimal('4.5')
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise InvalidInputError(f"Invalid amount: {value!r}") from exc
    if not amount.is_finite():
        raise InvalidInputError(f"Invalid amount: {value!r}")
    return amount


def parse_timestamp(value: Any) -> datetime:
    """Parse a date or timestamp into a naive ``datetime`` (UTC if it had a zone)."""
    try:
        stamp = pd.Timestamp(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Invalid date: {value!r}") from exc
    if pd.isna(stamp):
        raise InvalidInputError(f"Invalid date: {value!r}")
    if stamp.tzinfo is not None:
        stamp = stamp.tz_convert(None)
    return stamp.to_pydatetime()


def _require_non_negative(value: Any, what: str) -> None:
    if not isinstance(value, Decimal):
        raise InvalidInputError(f"{what} must be a Decimal, got {type(value).__name__}")
    if not value.is_finite() or value < 0:
        raise InvalidInputError(f"{what} must be a non-negative number, got {value}")
