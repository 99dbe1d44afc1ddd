import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Sequence

from budgetcore import config
from budgetcore.budgets import compare_budgets
from budgetcore.domain import Budget, Transaction
from budgetcore.functional import (
    Either,
    Left,
    Maybe,
    Nothing,
    Right,
    Some,
    validate_budget,
    validate_transaction,
)
from budgetcore.insights import generate_insights
from budgetcore.storage import RecordStore
from budgetcore.transforms import (
    category_totals,
    monthly_series,
    monthly_spending_by_category,
    transaction_totals,
)

logger = logging.getLogger(__name__)


def _not_found(kind: str, record_id: str) -> Left:
    return Left({
        "error": "not_found",
        "message": f"{kind} with ID {record_id} does not exist",
        "id": record_id,
    })


def _editable(record) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in ("id", "created_at")}


class TransactionService:
    """Validated create/update/delete of transactions against an injected store."""

    def __init__(self, store: RecordStore):
        self.store = store

    def add(self, fields: Mapping[str, Any]) -> Either[dict, Transaction]:
        return validate_transaction(fields).map(self.store.add_transaction)

    def update(self, transaction_id: str, updates: Mapping[str, Any]) -> Either[dict, Transaction]:
        current = next((t for t in self.store.list_transactions() if t.id == transaction_id), None)
        if current is None:
            return _not_found("Transaction", transaction_id)

        checked = validate_transaction({**_editable(current), **updates})
        if checked.is_left():
            return checked
        updated = self.store.update_transaction(transaction_id, checked.get_or_else({}))
        return Right(updated) if updated is not None else _not_found("Transaction", transaction_id)

    def delete(self, transaction_id: str) -> bool:
        deleted = self.store.delete_transaction(transaction_id)
        if not deleted:
            logger.info("Transaction %s was already gone", transaction_id)
        return deleted


class BudgetService:
    """Validated budget commands; setting a budget replaces the month's existing one."""

    def __init__(self, store: RecordStore):
        self.store = store

    def set_budget(self, fields: Mapping[str, Any]) -> Either[dict, Budget]:
        return validate_budget(fields).map(self.store.add_budget)

    def update(self, budget_id: str, updates: Mapping[str, Any]) -> Either[dict, Budget]:
        budgets = self.store.list_budgets()
        current = next((b for b in budgets if b.id == budget_id), None)
        if current is None:
            return _not_found("Budget", budget_id)

        checked = validate_budget({**_editable(current), **updates})
        if checked.is_left():
            return checked
        fields = checked.get_or_else({})
        taken = any(
            b.id != budget_id and b.category == fields["category"] and b.month == fields["month"]
            for b in budgets
        )
        if taken:
            return Left({
                "error": "duplicate_budget",
                "message": f"A {fields['category']} budget for {fields['month']} already exists",
                "id": budget_id,
            })
        updated = self.store.update_budget(budget_id, fields)
        return Right(updated) if updated is not None else _not_found("Budget", budget_id)

    def delete(self, budget_id: str) -> bool:
        return self.store.delete_budget(budget_id)

    def budget_for(self, category: str, month: str) -> Maybe[Budget]:
        for b in self.store.list_budgets():
            if b.category == category and b.month == month:
                return Some(b)
        return Nothing()


Calculator = Callable[[str, tuple, tuple, dict], Dict[str, Any]]


def calc_series(month, transactions, budgets, acc):
    return {"series": monthly_series(transactions, month, config.TREND_WINDOW_MONTHS)}


def calc_categories(month, transactions, budgets, acc):
    return {"categories": category_totals(transactions)}


def calc_spending(month, transactions, budgets, acc):
    return {"spending": monthly_spending_by_category(transactions, month)}


def calc_budgets(month, transactions, budgets, acc):
    spending = acc.get("spending")
    if spending is None:
        spending = monthly_spending_by_category(transactions, month)
    return {"budgets": compare_budgets(budgets, spending, month)}


def calc_insights(month, transactions, budgets, acc):
    return {"insights": generate_insights(transactions, budgets, month)}


def calc_totals(month, transactions, budgets, acc):
    return {"totals": transaction_totals(transactions)}


DEFAULT_CALCULATORS: Sequence[Calculator] = (
    calc_series,
    calc_categories,
    calc_spending,
    calc_budgets,
    calc_insights,
    calc_totals,
)


class ReportService:
    """Runs calculators over one snapshot and keeps every intermediate step.

    calculators: sequence of functions taking (month, transactions, budgets, acc) -> dict
    where acc holds the merged output of the calculators that ran before.
    """

    def __init__(self, calculators: Sequence[Calculator] = DEFAULT_CALCULATORS):
        self.calculators = calculators

    def monthly_report(self, month: str, transactions: Iterable[Transaction], budgets: Iterable[Budget]) -> Dict[str, Any]:
        transactions = tuple(transactions)
        budgets = tuple(budgets)
        report: Dict[str, Any] = {"month": month, "steps": [], "result": {}}

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(month, transactions, budgets, acc)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            acc.update(out)

        report["result"] = acc
        return report

    def report_for_store(self, store: RecordStore, month: str) -> Dict[str, Any]:
        return self.monthly_report(month, store.list_transactions(), store.list_budgets())
