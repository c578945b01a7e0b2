"""Ledger analytics: totals, per-category spend and time-windowed counts.

``LedgerAnalytics`` wraps one consistent snapshot of a user's ledger.  It
never changes after construction; after any add/delete or budget change the
caller builds a new instance from a fresh snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Sequence

import pandas as pd

from .config import get_recent_transaction_limit, get_weekly_transaction_goal
from .data_processing import (
    LedgerIssue,
    TimeWindow,
    decimal_sum,
    find_ledger_issues,
    mark_resolved,
    month_window,
    transactions_to_frame,
    week_window,
)
from .exceptions import InvalidInputError
from .logger import get_logger
from .models import Category, Transaction, TransactionKind, parse_timestamp

logger = get_logger(__name__)


class BalanceDirection(str, Enum):
    SURPLUS = "surplus"
    DEFICIT = "deficit"


@dataclass(frozen=True)
class LedgerSummary:
    """Dashboard figures derived from one snapshot."""

    total_income: Decimal
    total_expenses: Decimal
    net_balance: Decimal
    direction: BalanceDirection
    weekly_transaction_count: int
    weekly_goal_progress: Decimal
    spend_by_category: Dict[str, Decimal] = field(default_factory=dict)
    recent_transactions: List[Transaction] = field(default_factory=list)
    unresolved_transaction_ids: List[str] = field(default_factory=list)

    @property
    def display_balance(self) -> Decimal:
        """Absolute net balance; the sign is carried by ``direction``."""
        return abs(self.net_balance)


class LedgerAnalytics:
    """Aggregations over a transaction snapshot."""

    def __init__(
        self,
        transactions: Sequence[Transaction],
        categories: Sequence[Category] = (),
        now: Optional[datetime] = None,
    ):
        """Initialize with a transaction snapshot and the user's categories.

        Args:
            transactions: Snapshot in ledger store order (newest first)
            categories: Categories visible to the user, defaults included
            now: Reference instant for the month and week windows
        """
        self.transactions = list(transactions)
        self.categories = list(categories)
        self.now = parse_timestamp(now) if now is not None else datetime.now()
        self.data = mark_resolved(transactions_to_frame(self.transactions), self.categories)

        unresolved = int((~self.data['resolved']).sum())
        if unresolved:
            logger.warning(
                f"{unresolved} of {len(self.data)} transactions reference a missing or "
                f"mismatched category and are left out of category groupings"
            )

    def _rows_of_kind(self, kind: TransactionKind) -> pd.DataFrame:
        return self.data[self.data['kind'] == kind.value]

    def total_income(self) -> Decimal:
        """Sum of all income amounts."""
        return decimal_sum(self._rows_of_kind(TransactionKind.INCOME)['amount'])

    def total_expenses(self) -> Decimal:
        """Sum of all expense amounts, including unresolved ones."""
        return decimal_sum(self._rows_of_kind(TransactionKind.EXPENSE)['amount'])

    def net_balance(self) -> Decimal:
        """Signed ``total_income - total_expenses``."""
        return self.total_income() - self.total_expenses()

    def balance_direction(self) -> BalanceDirection:
        return BalanceDirection.SURPLUS if self.net_balance() > 0 else BalanceDirection.DEFICIT

    def spend_by_category(self, window: Optional[TimeWindow] = None) -> Dict[str, Decimal]:
        """Calculate expense totals per category id within ``window``.

        Defaults to the current calendar month up to ``now``.  Transactions
        whose category is missing or of the other kind are skipped, and
        categories without spending are absent rather than zero.
        """
        window = window or month_window(self.now)
        expenses = self._rows_of_kind(TransactionKind.EXPENSE)
        scoped = expenses[expenses['resolved'] & window.mask(expenses['date'])]
        if scoped.empty:
            return {}

        spending = {
            str(category_id): decimal_sum(amounts)
            for category_id, amounts in scoped.groupby('category_id', sort=False)['amount']
        }
        logger.debug(
            f"Grouped {len(scoped)} expenses into {len(spending)} categories "
            f"for {window.start:%Y-%m-%d} to {window.end:%Y-%m-%d}"
        )
        return spending

    def weekly_transaction_count(self, week_start: Optional[str] = None) -> int:
        """Count transactions of any kind dated within the current week."""
        window = week_window(self.now, week_start)
        return int(window.mask(self.data['date']).sum())

    def weekly_goal_progress(self, goal: Optional[int] = None, week_start: Optional[str] = None) -> Decimal:
        """Percent of the weekly transaction goal reached, capped at 100."""
        if goal is None:
            goal = get_weekly_transaction_goal()
        if goal <= 0:
            raise InvalidInputError(f"Weekly transaction goal must be positive, got {goal}")
        count = self.weekly_transaction_count(week_start)
        return min(Decimal(count) / Decimal(goal) * 100, Decimal('100'))

    def recent_transactions(self, limit: Optional[int] = None) -> List[Transaction]:
        """The first ``limit`` transactions of the snapshot (newest first)."""
        if limit is None:
            limit = get_recent_transaction_limit()
        return self.transactions[:limit]

    def unresolved_transactions(self) -> List[LedgerIssue]:
        """Transactions excluded from category groupings, with the reason."""
        return find_ledger_issues(self.transactions, self.categories)

    def summary(self, week_start: Optional[str] = None) -> LedgerSummary:
        """Calculate every dashboard figure from the snapshot."""
        income = self.total_income()
        expenses = self.total_expenses()
        net = income - expenses
        summary = LedgerSummary(
            total_income=income,
            total_expenses=expenses,
            net_balance=net,
            direction=BalanceDirection.SURPLUS if net > 0 else BalanceDirection.DEFICIT,
            weekly_transaction_count=self.weekly_transaction_count(week_start),
            weekly_goal_progress=self.weekly_goal_progress(week_start=week_start),
            spend_by_category=self.spend_by_category(),
            recent_transactions=self.recent_transactions(),
            unresolved_transaction_ids=[issue.transaction_id for issue in self.unresolved_transactions()],
        )
        logger.info(
            f"Summarized {len(self.transactions)} transactions: "
            f"income {income}, expenses {expenses}, net {net}"
        )
        return summary
