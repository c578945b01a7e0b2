#!/usr/bin/env python3
"""Print a ledger summary and budget overview from a JSON ledger dump.

The dump holds the rows a ledger store returns::

    {"transactions": [{"id": ..., "user_id": ..., "type": "expense", ...}],
     "categories": [{"id": ..., "name": ..., "type": "expense", "budget": 300}]}
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import List, Optional

import pandas as pd

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from finance_tracker import config
from finance_tracker.analytics import LedgerAnalytics
from finance_tracker.budgets import budget_overview_frame, total_budget
from finance_tracker.export import category_name_lookup, export_transactions_csv
from finance_tracker.filters import TransactionFilter, filter_transactions
from finance_tracker.formatting import (
    format_currency,
    format_display_date,
    format_transaction_amount,
)
from finance_tracker.logger import set_user_context
from finance_tracker.models import TransactionKind, parse_timestamp
from finance_tracker.store import RowLedgerStore, take_snapshot


def load_store(path: Path) -> RowLedgerStore:
    with path.open('r', encoding='utf-8') as handle:
        data = json.load(handle)
    return RowLedgerStore(data.get('transactions') or [], data.get('categories') or [])


def export_target(path: Path) -> Path:
    """Write into ``path`` itself, or ``path/transactions.csv`` for a directory."""
    return path / config.EXPORT_FILENAME if path.is_dir() else path


def build_filter(args: argparse.Namespace) -> TransactionFilter:
    return TransactionFilter(
        search_text=args.search or '',
        kind=TransactionKind.parse(args.type) if args.type else None,
        category_id=args.category,
        start=args.start,
        end=args.end,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Summarize a ledger dump.')
    parser.add_argument('ledger', type=Path, help='JSON file with transactions and categories')
    parser.add_argument('--user', required=True, help='User id whose ledger is reported')
    parser.add_argument('--as-of', help='Reference date for month/week windows (default: now)')
    parser.add_argument('--week-start', choices=sorted(config.WEEKDAY_INDEX), help='First day of the week')
    parser.add_argument('--search', help='Only transactions whose description contains this text')
    parser.add_argument('--type', choices=[kind.value for kind in TransactionKind], help='Only this kind')
    parser.add_argument('--category', help='Only this category id')
    parser.add_argument('--start', help='Only transactions on or after this date')
    parser.add_argument('--end', help='Only transactions on or before this date')
    parser.add_argument('--export', type=Path, help='Write the (filtered) transactions as CSV here')
    args = parser.parse_args(argv)

    if not args.ledger.exists():
        print(f"Ledger file not found: {args.ledger}")
        return 1

    set_user_context(args.user)
    snapshot = take_snapshot(load_store(args.ledger), SimpleNamespace(user_id=args.user))
    transactions = filter_transactions(snapshot.transactions, build_filter(args))
    now = parse_timestamp(args.as_of) if args.as_of else None

    analytics = LedgerAnalytics(transactions, snapshot.categories, now=now)
    summary = analytics.summary(week_start=args.week_start)

    print(f"Transactions: {len(transactions)} (this week: {summary.weekly_transaction_count})")
    print(f"Income:   {format_currency(summary.total_income)}")
    print(f"Expenses: {format_currency(summary.total_expenses)}")
    print(f"Balance:  {format_currency(summary.display_balance)} ({summary.direction.value})")
    if summary.unresolved_transaction_ids:
        print(f"Unresolved categories: {', '.join(summary.unresolved_transaction_ids)}")

    if summary.recent_transactions:
        print("\nRecent transactions:")
        for txn in summary.recent_transactions:
            print(f"  {format_display_date(txn.date)}  {txn.description:<30} {format_transaction_amount(txn)}")

    overview = budget_overview_frame(summary.spend_by_category, snapshot.categories)
    if not overview.empty:
        overview['Budget'] = overview['Budget'].map(format_currency)
        overview['Spent'] = overview['Spent'].map(format_currency)
        overview['Percent Used'] = overview['Percent Used'].map(
            lambda value: f"{value:.1f}%" if pd.notna(value) else '-'
        )
        overview['Status'] = overview['Status'].fillna('untracked')
        print(f"\nBudgets this month (total {format_currency(total_budget(snapshot.categories))}):")
        print(overview.to_string(index=False))

    if args.export:
        target = export_target(args.export)
        names = category_name_lookup(snapshot.categories)
        target.write_text(export_transactions_csv(transactions, names), encoding='utf-8')
        print(f"\nExported {len(transactions)} transactions to {target}")

    return 0


if __name__ == '__main__':
    raise SystemExit(main())
