"""Budget evaluation utilities.

This module turns per-category spending into budget utilization figures:
a utilization ratio and a threshold status for every expense category
with a positive monthly budget, plus a DataFrame view used for the
budget-vs-spent overview.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional

import pandas as pd

from .config import get_budget_warning_percent
from .data_processing import decimal_sum
from .logger import get_logger
from .models import Category, TransactionKind

logger = get_logger(__name__)

OVERVIEW_COLUMNS = ['Category', 'Budget', 'Spent', 'Percent Used', 'Status']


class BudgetStatus(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    EXCEEDED = "exceeded"


@dataclass(frozen=True)
class BudgetEvaluation:
    """Utilization of one category's monthly budget."""

    category_id: str
    name: str
    budget: Decimal
    spent: Decimal
    utilization_ratio: Decimal
    status: BudgetStatus

    @property
    def percent_used(self) -> Decimal:
        return self.utilization_ratio * 100

    @property
    def remaining(self) -> Decimal:
        return self.budget - self.spent


def budget_status(
    spent: Decimal,
    budget: Optional[Decimal],
    warning_percent: Optional[Decimal] = None,
) -> Optional[BudgetStatus]:
    """Classify spending against a budget.

    Args:
        spent: Amount spent in the period
        budget: Budget ceiling; ``None`` or zero means untracked
        warning_percent: Warning threshold in percent (defaults to config, 80)

    Returns:
        ``EXCEEDED`` above 100%, ``WARNING`` from the threshold up to and
        including 100%, ``NORMAL`` below the threshold, or ``None`` when the
        category has no positive budget

    Example:
        >>> budget_status(Decimal('80'), Decimal('100'))
        <BudgetStatus.WARNING: 'warning'>
    """
    if budget is None or budget <= 0:
        return None
    if warning_percent is None:
        warning_percent = get_budget_warning_percent()

    # Compared in whole percentages so the boundaries are exact
    if spent > budget:
        return BudgetStatus.EXCEEDED
    if spent * 100 >= budget * warning_percent:
        return BudgetStatus.WARNING
    return BudgetStatus.NORMAL


def evaluate_budgets(
    spend_by_category: Mapping[str, Decimal],
    categories: Iterable[Category],
    warning_percent: Optional[Decimal] = None,
) -> Dict[str, BudgetEvaluation]:
    """Evaluate every expense category that carries a positive budget.

    Args:
        spend_by_category: Mapping of category id to spend in the period
        categories: Categories visible to the user
        warning_percent: Warning threshold in percent (defaults to config)

    Returns:
        Mapping of category id to evaluation.  Categories without a budget
        (or with a zero budget) are absent.
    """
    if warning_percent is None:
        warning_percent = get_budget_warning_percent()

    evaluations: Dict[str, BudgetEvaluation] = {}
    for category in _expense_categories(categories):
        if not category.has_budget:
            continue
        spent = spend_by_category.get(category.id, Decimal('0'))
        evaluations[category.id] = BudgetEvaluation(
            category_id=category.id,
            name=category.name,
            budget=category.budget,
            spent=spent,
            utilization_ratio=spent / category.budget,
            status=budget_status(spent, category.budget, warning_percent),
        )

    exceeded = sum(1 for e in evaluations.values() if e.status is BudgetStatus.EXCEEDED)
    if exceeded:
        logger.info(f"{exceeded} of {len(evaluations)} budgets exceeded")
    return evaluations


def budget_overview_frame(
    spend_by_category: Mapping[str, Decimal],
    categories: Iterable[Category],
    warning_percent: Optional[Decimal] = None,
) -> pd.DataFrame:
    """Create DataFrame of budget vs spent for every expense category.

    Untracked categories appear with a zero budget and no status so the
    overview can list them next to tracked ones.

    Returns:
        DataFrame with columns: Category, Budget, Spent, Percent Used, Status
    """
    categories = _expense_categories(categories)
    evaluations = evaluate_budgets(spend_by_category, categories, warning_percent)

    rows = []
    for category in categories:
        evaluation = evaluations.get(category.id)
        rows.append({
            'Category': category.name,
            'Budget': category.budget or Decimal('0'),
            'Spent': spend_by_category.get(category.id, Decimal('0')),
            'Percent Used': evaluation.percent_used if evaluation else None,
            'Status': evaluation.status.value if evaluation else None,
        })

    # object dtype keeps None for untracked rows instead of NaN
    return pd.DataFrame(rows, columns=OVERVIEW_COLUMNS, dtype=object)


def total_budget(categories: Iterable[Category]) -> Decimal:
    """Sum of the monthly budgets defined on expense categories."""
    return decimal_sum(c.budget for c in _expense_categories(categories) if c.budget is not None)


def _expense_categories(categories: Iterable[Category]) -> List[Category]:
    return [c for c in categories if c.kind is TransactionKind.EXPENSE]
