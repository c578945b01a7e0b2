"""Transaction filtering.

A :class:`TransactionFilter` combines search text, kind, category and date
range predicates with a logical AND.  Every dimension left at its neutral
value (empty text or ``None``) matches all transactions.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .data_processing import transactions_to_frame
from .models import Transaction, TransactionKind, parse_timestamp

DateLike = Union[date, datetime, str]


@dataclass(frozen=True)
class TransactionFilter:
    """Filter specification for the transactions list."""

    search_text: str = ''
    kind: Optional[TransactionKind] = None
    category_id: Optional[str] = None
    start: Optional[DateLike] = None
    end: Optional[DateLike] = None

    @property
    def is_neutral(self) -> bool:
        """True when no dimension narrows the result."""
        return (
            not self.search_text
            and self.kind is None
            and not self.category_id
            and self.start is None
            and self.end is None
        )

    def mask(self, frame: pd.DataFrame) -> pd.Series:
        """Boolean mask over a frame built by ``transactions_to_frame``."""
        masks = [np.ones(len(frame), dtype=bool)]

        if self.search_text:
            needle = self.search_text.lower()
            masks.append(
                frame['description'].str.lower().str.contains(needle, regex=False).to_numpy(dtype=bool)
            )
        if self.kind is not None:
            masks.append((frame['kind'] == TransactionKind.parse(self.kind).value).to_numpy())
        if self.category_id:
            masks.append((frame['category_id'] == self.category_id).to_numpy())
        if self.start is not None:
            masks.append((frame['day'] >= _as_day(self.start)).to_numpy())
        if self.end is not None:
            masks.append((frame['day'] <= _as_day(self.end)).to_numpy())

        return pd.Series(np.logical_and.reduce(masks), index=frame.index)


def filter_transactions(
    transactions: Sequence[Transaction],
    criteria: Optional[TransactionFilter] = None,
) -> List[Transaction]:
    """Return the transactions matching every active predicate of ``criteria``.

    Args:
        transactions: Snapshot in ledger store order (newest first)
        criteria: Filter specification; ``None`` behaves like an all-neutral filter

    Returns:
        New list with the matching transactions in their original order.
        The input is never modified; an empty list is a valid result.

    Example:
        >>> filter_transactions(txns, TransactionFilter(search_text='coffee'))
    """
    if criteria is None or criteria.is_neutral or not transactions:
        return list(transactions)

    frame = transactions_to_frame(transactions)
    selected = frame.index[criteria.mask(frame).to_numpy()]
    return [transactions[position] for position in selected]


def _as_day(value: DateLike) -> pd.Timestamp:
    return pd.Timestamp(parse_timestamp(value)).normalize()
