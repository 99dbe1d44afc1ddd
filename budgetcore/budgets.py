from typing import Iterable, Mapping, Tuple

from budgetcore import config
from budgetcore.domain import (
    OK,
    OVER,
    WARNING,
    Budget,
    BudgetOverview,
    BudgetStatus,
)


def budgets_for_month(budgets: Iterable[Budget], month: str) -> Tuple[Budget, ...]:
    return tuple(b for b in budgets if b.month == month)


def classify_percentage(percentage: float) -> str:
    if percentage >= config.OVER_THRESHOLD:
        return OVER
    if percentage >= config.WARNING_THRESHOLD:
        return WARNING
    return OK


def budget_status(budget: Budget, spending: Mapping[str, float]) -> BudgetStatus:
    spent = spending.get(budget.category, 0.0)
    percentage = spent / budget.amount * 100 if budget.amount > 0 else 0.0
    return BudgetStatus(
        budget=budget,
        spent=spent,
        remaining=budget.amount - spent,
        percentage=percentage,
        status=classify_percentage(percentage),
    )


def compare_budgets(
    budgets: Iterable[Budget], spending: Mapping[str, float], month: str
) -> BudgetOverview:
    """Budget-vs-actual for every budget set for ``month``.

    ``spending`` is the month's expense per category; budgets for other
    months are ignored.
    """
    items = tuple(budget_status(b, spending) for b in budgets_for_month(budgets, month))
    total_budget = sum(item.budget.amount for item in items)
    total_spent = sum(item.spent for item in items)
    overall = total_spent / total_budget * 100 if total_budget > 0 else 0.0

    return BudgetOverview(
        month=month,
        items=items,
        total_budget=total_budget,
        total_spent=total_spent,
        overall_percentage=overall,
    )
