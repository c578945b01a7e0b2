"""Formatting utilities for money and date display.

Rounding to cents happens here and only here; analytics keep full
``Decimal`` precision.
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from . import config
from .models import Transaction

CENTS = Decimal('0.01')


def round_money(amount: Decimal) -> Decimal:
    """Round an amount to two decimal places (half up).

    Example:
        >>> round_money(Decimal('1.005'))
        Decimal('1.01')
    """
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal) -> str:
    """Plain two-decimal string without grouping or sign, e.g. ``'4.50'``."""
    return f"{round_money(abs(amount)):f}"


def format_currency(amount: Decimal, include_sign: bool = True, symbol: Optional[str] = None) -> str:
    """Format a currency amount with thousands separators.

    Example:
        >>> format_currency(Decimal('1234.5'))
        '$1,234.50'
        >>> format_currency(Decimal('1234.5'), include_sign=False)
        '1,234.50'
    """
    formatted = f"{round_money(amount):,.2f}"
    if not include_sign:
        return formatted
    symbol = config.CURRENCY_SYMBOL if symbol is None else symbol
    if formatted.startswith('-'):
        return f"-{symbol}{formatted[1:]}"
    return f"{symbol}{formatted}"


def format_transaction_amount(transaction: Transaction) -> str:
    """Signed display amount: ``+$10.00`` for income, ``-$4.50`` for expenses."""
    sign = '+' if transaction.is_income else '-'
    return f"{sign}{format_currency(transaction.amount)}"


def format_display_date(moment: datetime) -> str:
    """Human readable date such as ``'Jan 05, 2024'``."""
    return moment.strftime('%b %d, %Y')
