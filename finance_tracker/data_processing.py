"""Ledger snapshot frames, exact sums and reporting windows.

This module contains pure helpers that turn record collections into pandas
DataFrames and define the time windows used for reporting.  They are
designed to operate independently of any user interface so that the
analytics, filter and export modules share one consistent view of a
snapshot.

Money stays ``Decimal`` throughout: the ``amount`` column is an object
column of ``Decimal`` values and every sum goes through :func:`decimal_sum`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from .config import get_week_start
from .models import Category, Transaction, parse_timestamp

FRAME_COLUMNS = ['id', 'user_id', 'kind', 'amount', 'category_id', 'description', 'date']

ISSUE_MISSING_CATEGORY = 'missing_category'
ISSUE_KIND_MISMATCH = 'kind_mismatch'


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------


def transactions_to_frame(transactions: Sequence[Transaction]) -> pd.DataFrame:
    """Build a DataFrame snapshot of ``transactions``.

    The frame index is the position of each transaction in the input so that
    filtered frames can be mapped back to the original records in order.
    """
    rows = [
        {
            'id': txn.id,
            'user_id': txn.user_id,
            'kind': txn.kind.value,
            'amount': txn.amount,
            'category_id': txn.category_id,
            'description': txn.description,
            'date': txn.date,
        }
        for txn in transactions
    ]
    frame = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    frame['amount'] = frame['amount'].astype(object)
    frame['description'] = frame['description'].fillna('').astype(str)
    frame['date'] = pd.to_datetime(frame['date'])
    frame['day'] = frame['date'].dt.normalize()
    return frame


def mark_resolved(frame: pd.DataFrame, categories: Iterable[Category]) -> pd.DataFrame:
    """Add a ``resolved`` column: the category exists and has the transaction's kind."""
    kind_by_id: Dict[str, str] = {category.id: category.kind.value for category in categories}
    marked = frame.copy()
    marked['category_kind'] = marked['category_id'].map(kind_by_id)
    marked['resolved'] = (marked['category_kind'] == marked['kind']).astype(bool)
    return marked


def decimal_sum(values: Iterable[Decimal]) -> Decimal:
    """Exact sum of Decimal amounts; an empty input sums to ``Decimal('0')``."""
    return sum(values, Decimal('0'))


# ---------------------------------------------------------------------------
# Reporting windows
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimeWindow:
    """Half-open reporting window ``[start, end)``."""

    start: datetime
    end: datetime

    def __post_init__(self):
        object.__setattr__(self, "start", parse_timestamp(self.start))
        object.__setattr__(self, "end", parse_timestamp(self.end))

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def mask(self, dates: pd.Series) -> pd.Series:
        """Boolean mask of ``dates`` that fall inside the window."""
        return (dates >= self.start) & (dates < self.end)


def month_window(now: datetime) -> TimeWindow:
    """Current calendar month so far: ``[first instant of the month, now)``."""
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return TimeWindow(start=start, end=now)


def week_window(now: datetime, week_start: Optional[str] = None) -> TimeWindow:
    """Calendar week containing ``now``.

    Spans from 00:00 on the first day of the week up to, but excluding,
    00:00 on the first day of the next week, which covers the whole last
    day of the week.  Monday-start (ISO) unless ``week_start`` or
    ``FINTRACK_WEEK_START`` says ``sunday``.
    """
    first_weekday = get_week_start(week_start)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    offset = (midnight.weekday() - first_weekday) % 7
    start = midnight - timedelta(days=offset)
    return TimeWindow(start=start, end=start + timedelta(days=7))


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LedgerIssue:
    """A transaction whose category reference cannot be used for grouping."""

    transaction_id: str
    category_id: Optional[str]
    reason: str


def find_ledger_issues(
    transactions: Sequence[Transaction],
    categories: Iterable[Category],
) -> List[LedgerIssue]:
    """Report transactions whose category is missing or of the other kind.

    Never raises: malformed records are reported, not rejected.
    """
    by_id = {category.id: category for category in categories}
    issues: List[LedgerIssue] = []
    for txn in transactions:
        category = by_id.get(txn.category_id) if txn.category_id else None
        if category is None:
            issues.append(LedgerIssue(txn.id, txn.category_id, ISSUE_MISSING_CATEGORY))
        elif category.kind is not txn.kind:
            issues.append(LedgerIssue(txn.id, txn.category_id, ISSUE_KIND_MISMATCH))
    return issues
