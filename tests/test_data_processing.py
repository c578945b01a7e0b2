"""Unit tests for finance_tracker.data_processing."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from finance_tracker import data_processing as dp
from finance_tracker.exceptions import ConfigError
from finance_tracker.models import Category, Transaction, TransactionKind


def _txn(id, category_id='c1', kind=TransactionKind.EXPENSE):
    return Transaction(
        id=id, user_id='u1', kind=kind, amount=Decimal('1.10'),
        category_id=category_id, description='Item', date=datetime(2024, 3, 5, 14, 30),
    )


def test_frame_keeps_input_positions_and_decimal_amounts():
    frame = dp.transactions_to_frame([_txn('a'), _txn('b')])

    assert list(frame.index) == [0, 1]
    assert list(frame['id']) == ['a', 'b']
    assert isinstance(frame['amount'].iloc[0], Decimal)
    assert frame['day'].iloc[0] == datetime(2024, 3, 5)


def test_empty_frame_has_all_columns():
    frame = dp.transactions_to_frame([])
    assert frame.empty
    assert set(dp.FRAME_COLUMNS) <= set(frame.columns)


def test_decimal_sum_of_nothing_is_zero():
    assert dp.decimal_sum([]) == Decimal('0')
    assert dp.decimal_sum([Decimal('0.1')] * 3) == Decimal('0.3')


def test_month_window_runs_from_first_of_month_to_now():
    now = datetime(2024, 2, 29, 10, 15)
    window = dp.month_window(now)

    assert window.start == datetime(2024, 2, 1)
    assert window.end == now
    assert window.contains(datetime(2024, 2, 1))
    assert not window.contains(now)


def test_week_window_covers_the_whole_last_day():
    window = dp.week_window(datetime(2024, 1, 25, 12), 'monday')

    assert window.start == datetime(2024, 1, 22)
    assert window.contains(datetime(2024, 1, 28, 23, 59, 59))
    assert not window.contains(datetime(2024, 1, 29))


def test_sunday_week_window():
    window = dp.week_window(datetime(2024, 1, 21, 8), 'sunday')
    assert window.start == datetime(2024, 1, 21)
    assert window.end == datetime(2024, 1, 28)


def test_unknown_week_start_is_a_config_error():
    with pytest.raises(ConfigError):
        dp.week_window(datetime(2024, 1, 21), 'friday')


def test_find_ledger_issues():
    categories = [Category(id='c1', name='Dining', kind=TransactionKind.EXPENSE)]
    transactions = [
        _txn('ok'),
        _txn('missing', category_id='gone'),
        _txn('none', category_id=None),
        _txn('mismatch', kind=TransactionKind.INCOME),
    ]

    issues = dp.find_ledger_issues(transactions, categories)

    assert [(i.transaction_id, i.reason) for i in issues] == [
        ('missing', dp.ISSUE_MISSING_CATEGORY),
        ('none', dp.ISSUE_MISSING_CATEGORY),
        ('mismatch', dp.ISSUE_KIND_MISMATCH),
    ]


def test_mark_resolved_flags_only_matching_categories():
    categories = [Category(id='c1', name='Dining', kind=TransactionKind.EXPENSE)]
    frame = dp.transactions_to_frame([_txn('ok'), _txn('missing', category_id='gone')])
    marked = dp.mark_resolved(frame, categories)
    assert list(marked['resolved']) == [True, False]
