from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from finance_tracker.exceptions import InvalidInputError
from finance_tracker.models import (
    Category,
    Transaction,
    TransactionKind,
    can_delete_category,
    categories_for_kind,
    new_transaction,
    parse_amount,
    parse_timestamp,
)


def _groceries(**overrides):
    fields = dict(id='cat-groceries', name='Groceries', kind=TransactionKind.EXPENSE, user_id='u1')
    fields.update(overrides)
    return Category(**fields)


def test_transaction_from_store_row():
    txn = Transaction.from_row({
        'id': 't1',
        'user_id': 'u1',
        'amount': 4.5,
        'type': 'expense',
        'category_id': 'c1',
        'description': 'Coffee',
        'date': '2024-02-01',
        'created_at': '2024-02-01T08:30:00+00:00',
    })

    assert txn.kind is TransactionKind.EXPENSE
    assert txn.amount == Decimal('4.5')
    assert txn.date == datetime(2024, 2, 1)
    assert txn.created_at == datetime(2024, 2, 1, 8, 30)
    assert txn.is_expense and not txn.is_income


def test_transaction_row_missing_field_is_invalid_input():
    with pytest.raises(InvalidInputError, match='date'):
        Transaction.from_row({'id': 't1', 'user_id': 'u1', 'amount': 1, 'type': 'income', 'description': 'x'})


def test_negative_amount_rejected():
    with pytest.raises(InvalidInputError):
        Transaction(
            id='t1', user_id='u1', kind=TransactionKind.INCOME, amount=Decimal('-1'),
            category_id='c1', description='Refund', date=datetime(2024, 1, 1),
        )


def test_empty_description_rejected():
    with pytest.raises(InvalidInputError):
        Transaction(
            id='t1', user_id='u1', kind=TransactionKind.INCOME, amount=Decimal('1'),
            category_id='c1', description='   ', date=datetime(2024, 1, 1),
        )


def test_category_from_row_without_budget_is_untracked():
    category = Category.from_row({'id': 'c1', 'name': 'Salary', 'type': 'income', 'user_id': 'u1', 'budget': None})
    assert category.budget is None
    assert not category.has_budget
    assert category.kind is TransactionKind.INCOME


def test_with_budget_returns_new_category():
    category = _groceries()
    updated = category.with_budget('300')

    assert updated.budget == Decimal('300')
    assert category.budget is None
    assert updated.with_budget(None).budget is None


def test_negative_budget_rejected():
    with pytest.raises(InvalidInputError):
        _groceries().with_budget(-5)


def test_zero_budget_has_no_utilization():
    assert not _groceries(budget=Decimal('0')).has_budget


def test_new_transaction_requires_matching_category_kind():
    salary = Category(id='c-salary', name='Salary', kind=TransactionKind.INCOME, user_id='u1')
    with pytest.raises(InvalidInputError, match='Salary'):
        new_transaction(
            id='t1', user_id='u1', kind=TransactionKind.EXPENSE, amount='12.00',
            category=salary, description='Lunch', date='2024-03-01',
        )


def test_new_transaction_requires_a_category():
    with pytest.raises(InvalidInputError):
        new_transaction(
            id='t1', user_id='u1', kind='expense', amount='12.00',
            category=None, description='Lunch', date='2024-03-01',
        )


def test_new_transaction_links_category():
    txn = new_transaction(
        id='t1', user_id='u1', kind='expense', amount='12.00',
        category=_groceries(), description='Market', date='2024-03-01',
    )
    assert txn.category_id == 'cat-groceries'
    assert txn.amount == Decimal('12.00')
    assert txn.created_at is not None


def test_default_categories_cannot_be_deleted():
    default = _groceries(user_id=None, is_default=True)
    assert not can_delete_category(default, 'u1')
    assert can_delete_category(_groceries(), 'u1')
    assert not can_delete_category(_groceries(), 'someone-else')


def test_categories_for_kind_sorted_by_name():
    categories = [
        Category(id='1', name='rent', kind=TransactionKind.EXPENSE),
        Category(id='2', name='Salary', kind=TransactionKind.INCOME),
        Category(id='3', name='Dining', kind=TransactionKind.EXPENSE),
    ]
    names = [c.name for c in categories_for_kind(categories, 'expense')]
    assert names == ['Dining', 'rent']


def test_parse_amount_avoids_float_drift():
    assert parse_amount(0.1) + parse_amount(0.2) == Decimal('0.3')
    with pytest.raises(InvalidInputError):
        parse_amount('abc')
    with pytest.raises(InvalidInputError):
        parse_amount('NaN')


def test_parse_timestamp_rejects_garbage():
    with pytest.raises(InvalidInputError):
        parse_timestamp('not a date')


def test_kind_parse_is_case_insensitive():
    assert TransactionKind.parse('Income') is TransactionKind.INCOME
    assert TransactionKind.EXPENSE.label == 'Expense'
    with pytest.raises(InvalidInputError):
        TransactionKind.parse('transfer')


def test_zone_aware_dates_are_stored_as_naive_utc():
    eastern = timezone(timedelta(hours=-5))
    txn = Transaction(
        id='t1', user_id='u1', kind=TransactionKind.EXPENSE, amount=Decimal('1'),
        category_id='c1', description='Coffee', date=datetime(2024, 1, 10, 5, tzinfo=eastern),
        created_at=datetime(2024, 1, 10, 12, tzinfo=timezone.utc),
    )

    assert txn.date == datetime(2024, 1, 10, 10)
    assert txn.date.tzinfo is None
    assert txn.created_at == datetime(2024, 1, 10, 12)
