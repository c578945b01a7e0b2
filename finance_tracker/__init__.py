"""Top-level package for the finance tracker ledger engine.

This file makes the directory a Python package and exposes
convenient names.  The primary modules are:

* ``models`` – transaction and category records
* ``filters`` – the transactions list filter
* ``analytics`` – totals, per-category spend and weekly counts
* ``budgets`` – budget utilization and threshold status
* ``export`` – CSV export of transactions

Everything operates on an in-memory snapshot of one user's ledger; see
``store.take_snapshot``.  A command line report lives in
``scripts/ledger_report.py``.
"""

from .analytics import BalanceDirection, LedgerAnalytics, LedgerSummary
from .budgets import BudgetEvaluation, BudgetStatus, budget_status, evaluate_budgets
from .export import category_name_lookup, export_transactions_csv
from .filters import TransactionFilter, filter_transactions
from .models import Category, Transaction, TransactionKind

__all__ = [
    "BalanceDirection",
    "BudgetEvaluation",
    "BudgetStatus",
    "Category",
    "LedgerAnalytics",
    "LedgerSummary",
    "Transaction",
    "TransactionFilter",
    "TransactionKind",
    "budget_status",
    "category_name_lookup",
    "evaluate_budgets",
    "export_transactions_csv",
    "filter_transactions",
]
