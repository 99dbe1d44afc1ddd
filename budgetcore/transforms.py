import json
from collections import defaultdict
from functools import reduce
from pathlib import Path
from typing import Iterable, Tuple, Union

from budgetcore import config
from budgetcore.dates import in_month, month_of, month_window
from budgetcore.domain import (
    EXPENSE,
    INCOME,
    Budget,
    CategoryTotal,
    MonthSummary,
    SpendingByCategory,
    Transaction,
    TransactionTotals,
)
from budgetcore.filters import all_of, by_month, by_type


def load_seed(
    path: Union[str, Path] = config.SEED_PATH,
) -> Tuple[Tuple[Transaction, ...], Tuple[Budget, ...]]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    transactions = tuple(Transaction(**t) for t in data["transactions"])
    budgets = tuple(Budget(**b) for b in data["budgets"])

    return transactions, budgets


def income_transactions(trans: Iterable[Transaction]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.type == INCOME, trans))


def expense_transactions(trans: Iterable[Transaction]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.type == EXPENSE, trans))


def _sum_amounts(trans: Iterable[Transaction]) -> float:
    return reduce(lambda acc, t: acc + t.amount, trans, 0.0)


def transaction_totals(trans: Iterable[Transaction]) -> TransactionTotals:
    trans = tuple(trans)
    income = _sum_amounts(income_transactions(trans))
    expense = _sum_amounts(expense_transactions(trans))
    return TransactionTotals(income=income, expense=expense, net=income - expense)


def month_total(trans: Iterable[Transaction], month: str, tx_type: str) -> float:
    return _sum_amounts(filter(all_of(by_type(tx_type), by_month(month)), trans))


def monthly_series(
    trans: Iterable[Transaction],
    window_end_month: str,
    window_size: int = config.TREND_WINDOW_MONTHS,
) -> Tuple[MonthSummary, ...]:
    """Income, expense and net for each month of the window, oldest first.

    Every month of the window is present, with zero totals when nothing
    happened in it. A transaction lands in the bucket named by its date's
    year and month; dates outside the window are ignored.
    """
    months = month_window(window_end_month, window_size)
    income: dict[str, float] = defaultdict(float)
    expense: dict[str, float] = defaultdict(float)

    for t in trans:
        month = month_of(t.date)
        if month not in months:
            continue
        if t.type == INCOME:
            income[month] += t.amount
        elif t.type == EXPENSE:
            expense[month] += t.amount

    return tuple(
        MonthSummary(
            month=m,
            income=income[m],
            expense=expense[m],
            net=income[m] - expense[m],
        )
        for m in months
    )


def category_totals(trans: Iterable[Transaction]) -> Tuple[CategoryTotal, ...]:
    """Expense totals per category, largest first, ties by category name."""
    totals: dict[str, float] = defaultdict(float)
    for t in expense_transactions(trans):
        totals[t.category] += t.amount

    ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return tuple(CategoryTotal(category=c, amount=a) for c, a in ordered)


def monthly_spending_by_category(
    trans: Iterable[Transaction], target_month: str
) -> SpendingByCategory:
    spending = SpendingByCategory()
    for t in trans:
        if t.type == EXPENSE and in_month(t.date, target_month):
            spending[t.category] = spending[t.category] + t.amount
    return spending
