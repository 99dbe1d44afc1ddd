import pytest

from budgetcore.budgets import budget_status, budgets_for_month, classify_percentage, compare_budgets
from budgetcore.domain import Budget, SpendingByCategory


def test_budget_over_when_spent_exceeds_amount():
    budget = Budget("b1", "Food", 400, "2024-01")
    status = budget_status(budget, SpendingByCategory({"Food": 500}))

    assert status.status == "over"
    assert status.percentage == 125
    assert status.spent == 500
    assert status.remaining == -100


def test_budget_warning_between_80_and_100():
    budget = Budget("b1", "Food", 1000, "2024-01")
    status = budget_status(budget, SpendingByCategory({"Food": 850}))

    assert status.status == "warning"
    assert status.percentage == pytest.approx(85)


def test_budget_without_spending_is_ok():
    budget = Budget("b1", "Travel", 1000, "2024-01")
    status = budget_status(budget, SpendingByCategory({"Food": 850}))

    assert status.spent == 0
    assert status.remaining == 1000
    assert status.percentage == 0
    assert status.status == "ok"


def test_budget_with_zero_amount_does_not_divide():
    budget = Budget("b1", "Food", 0, "2024-01")
    status = budget_status(budget, SpendingByCategory({"Food": 10}))
    assert status.percentage == 0
    assert status.status == "ok"


def test_classify_percentage_thresholds():
    assert classify_percentage(100) == "over"
    assert classify_percentage(99.99) == "warning"
    assert classify_percentage(80) == "warning"
    assert classify_percentage(79.9) == "ok"
    assert classify_percentage(0) == "ok"


def test_budgets_for_month():
    budgets = (
        Budget("b1", "Food", 100, "2024-01"),
        Budget("b2", "Food", 100, "2024-02"),
    )
    assert budgets_for_month(budgets, "2024-02") == (budgets[1],)


def test_compare_budgets_aggregates_month_only():
    budgets = (
        Budget("b1", "Food", 400, "2024-01"),
        Budget("b2", "Travel", 600, "2024-01"),
        Budget("b3", "Food", 9999, "2024-02"),
    )
    spending = SpendingByCategory({"Food": 500, "Shopping": 300})
    overview = compare_budgets(budgets, spending, "2024-01")

    assert [item.category for item in overview.items] == ["Food", "Travel"]
    assert overview.total_budget == 1000
    assert overview.total_spent == 500
    assert overview.overall_percentage == 50
    assert overview.remaining == 500
    assert [item.category for item in overview.with_status("over")] == ["Food"]


def test_compare_budgets_empty_month():
    overview = compare_budgets((), SpendingByCategory({"Food": 10}), "2024-01")
    assert overview.items == ()
    assert overview.total_budget == 0
    assert overview.overall_percentage == 0
