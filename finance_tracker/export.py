"""CSV export of transactions.

The formatter returns the CSV text only; delivering it (for example as a
``transactions.csv`` download) is up to the caller.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

import pandas as pd

from .config import EXPORT_FILENAME
from .formatting import format_amount
from .models import Category, Transaction

EXPORT_COLUMNS = ['Date', 'Type', 'Category', 'Description', 'Amount']

__all__ = ['EXPORT_COLUMNS', 'EXPORT_FILENAME', 'category_name_lookup', 'export_transactions_csv']


def category_name_lookup(categories: Iterable[Category]) -> dict:
    """Map category id to category name."""
    return {category.id: category.name for category in categories}


def export_transactions_csv(
    transactions: Sequence[Transaction],
    category_names: Mapping[str, str],
) -> str:
    """Serialize transactions to CSV text.

    Args:
        transactions: Transactions to export, in the order they should appear
        category_names: Mapping of category id to display name

    Returns:
        CSV text with the header ``Date,Type,Category,Description,Amount``.
        Dates are ISO ``YYYY-MM-DD``, the type is ``Income`` or ``Expense``,
        amounts are unsigned with two decimals and unknown categories are
        left blank.

    Example:
        >>> export_transactions_csv(txns, {'c1': 'Dining'})
        'Date,Type,Category,Description,Amount\\n2024-02-01,Expense,Dining,Coffee,4.50\\n'
    """
    rows = [
        {
            'Date': txn.date.strftime('%Y-%m-%d'),
            'Type': txn.kind.label,
            'Category': category_names.get(txn.category_id, '') if txn.category_id else '',
            'Description': txn.description,
            'Amount': format_amount(txn.amount),
        }
        for txn in transactions
    ]
    export_df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    return export_df.to_csv(index=False, lineterminator='\n')
