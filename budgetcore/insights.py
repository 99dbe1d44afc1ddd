"""Rule-based financial insights for one reference month.

Each rule looks at an :class:`InsightContext` and returns an
:class:`Insight` or ``None``. Rules do not see each other's output, and
``generate_insights`` keeps them in the order they are given.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, Tuple

from budgetcore import config
from budgetcore.budgets import compare_budgets
from budgetcore.dates import format_currency, previous_month
from budgetcore.domain import (
    EXPENSE,
    INCOME,
    INFO,
    OVER,
    SUCCESS,
    WARNING,
    Budget,
    BudgetOverview,
    Insight,
    SpendingByCategory,
    Transaction,
)
from budgetcore.transforms import month_total, monthly_spending_by_category


@dataclass(frozen=True)
class InsightContext:
    month: str
    spending: SpendingByCategory
    budgets: BudgetOverview
    expense: float
    prior_expense: float
    income: float


Rule = Callable[[InsightContext], Optional[Insight]]


def build_context(
    trans: Iterable[Transaction], budgets: Iterable[Budget], month: str
) -> InsightContext:
    trans = tuple(trans)
    spending = monthly_spending_by_category(trans, month)
    return InsightContext(
        month=month,
        spending=spending,
        budgets=compare_budgets(budgets, spending, month),
        expense=month_total(trans, month, EXPENSE),
        prior_expense=month_total(trans, previous_month(month), EXPENSE),
        income=month_total(trans, month, INCOME),
    )


def top_category_rule(ctx: InsightContext) -> Optional[Insight]:
    if not ctx.spending:
        return None
    # max keeps the first category seen among equal totals
    category, amount = max(ctx.spending.items(), key=lambda item: item[1])
    return Insight(
        severity=INFO,
        title="Top Spending Category",
        message=f"You've spent {format_currency(amount)} on {category} this month.",
    )


def over_budget_rule(ctx: InsightContext) -> Optional[Insight]:
    over = ctx.budgets.with_status(OVER)
    if not over:
        return None
    noun = "category" if len(over) == 1 else "categories"
    names = ", ".join(item.category for item in over)
    return Insight(
        severity=WARNING,
        title="Budget Exceeded",
        message=f"You're over budget in {len(over)} {noun}: {names}.",
    )


def near_budget_rule(ctx: InsightContext) -> Optional[Insight]:
    near = ctx.budgets.with_status(WARNING)
    if not near:
        return None
    names = ", ".join(item.category for item in near)
    return Insight(
        severity=WARNING,
        title="Approaching Budget Limit",
        message=f"You're close to your budget limit in {names}.",
    )


def spending_trend_rule(ctx: InsightContext) -> Optional[Insight]:
    if ctx.prior_expense == 0:
        return None
    change = (ctx.expense - ctx.prior_expense) / ctx.prior_expense * 100
    if abs(change) <= config.TREND_CHANGE_THRESHOLD:
        return None

    direction = "Increased" if change > 0 else "Decreased"
    return Insight(
        severity=WARNING if change > 0 else SUCCESS,
        title=f"Spending {direction}",
        message=(
            f"Your spending has {direction.lower()} by {abs(change):.1f}% "
            "compared to last month."
        ),
    )


def savings_rate(income: float, expense: float) -> Optional[float]:
    if income <= 0:
        return None
    return (income - expense) / income * 100


def savings_rate_rule(ctx: InsightContext) -> Optional[Insight]:
    rate = savings_rate(ctx.income, ctx.expense)
    if rate is None:
        return None
    if rate < config.LOW_SAVINGS_RATE:
        return Insight(
            severity=WARNING,
            title="Low Savings Rate",
            message=(
                f"You're saving only {rate:.1f}% of your income. Consider "
                f"increasing your savings rate to at least {config.GREAT_SAVINGS_RATE}%."
            ),
        )
    if rate >= config.GREAT_SAVINGS_RATE:
        return Insight(
            severity=SUCCESS,
            title="Great Savings Rate",
            message=f"Excellent! You're saving {rate:.1f}% of your income this month.",
        )
    return None


DEFAULT_RULES: Tuple[Rule, ...] = (
    top_category_rule,
    over_budget_rule,
    near_budget_rule,
    spending_trend_rule,
    savings_rate_rule,
)


def run_rules(ctx: InsightContext, rules: Sequence[Rule] = DEFAULT_RULES) -> Tuple[Insight, ...]:
    return tuple(insight for insight in (rule(ctx) for rule in rules) if insight is not None)


def generate_insights(
    trans: Iterable[Transaction],
    budgets: Iterable[Budget],
    month: str,
    rules: Sequence[Rule] = DEFAULT_RULES,
) -> Tuple[Insight, ...]:
    return run_rules(build_context(trans, budgets, month), rules)
