from dataclasses import dataclass
from typing import Tuple

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)

# budget status
OK = "ok"
WARNING = "warning"
OVER = "over"

# insight severity
INFO = "info"
SUCCESS = "success"

EXPENSE_CATEGORIES = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Travel",
    "Personal Care",
    "Groceries",
    "Rent/EMI",
    "Mobile/Internet",
    "Fuel",
    "Insurance",
    "Other",
)

INCOME_CATEGORIES = (
    "Salary",
    "Freelance",
    "Investment",
    "Business",
    "Rental Income",
    "Interest",
    "Dividend",
    "Gift",
    "Bonus",
    "Other",
)


def categories_for(tx_type: str) -> Tuple[str, ...]:
    if tx_type == INCOME:
        return INCOME_CATEGORIES
    if tx_type == EXPENSE:
        return EXPENSE_CATEGORIES
    return ()


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float
    date: str         # "YYYY-MM-DD"
    description: str
    type: str         # "income" or "expense"
    category: str
    created_at: str = ""


# A monthly spending cap for one category
@dataclass(frozen=True)
class Budget:
    id: str
    category: str
    amount: float
    month: str        # "YYYY-MM"
    created_at: str = ""


@dataclass(frozen=True)
class MonthSummary:
    month: str
    income: float
    expense: float
    net: float


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    amount: float


@dataclass(frozen=True)
class TransactionTotals:
    income: float
    expense: float
    net: float


class SpendingByCategory(dict):
    """Category -> spent amount for one month.

    Looking up a category with no spending gives 0.0, but the category
    is not inserted, so ``in`` still reports it as absent.
    """

    def __missing__(self, category: str) -> float:
        return 0.0

@dataclass(frozen=True)
class BudgetStatus:
    budget: Budget
    spent: float
    remaining: float
    percentage: float
    status: str       # "ok", "warning" or "over"

    @property
    def category(self) -> str:
        return self.budget.category


@dataclass(frozen=True)
class BudgetOverview:
    month: str
    items: Tuple[BudgetStatus, ...]
    total_budget: float
    total_spent: float
    overall_percentage: float

    @property
    def remaining(self) -> float:
        return self.total_budget - self.total_spent

    def with_status(self, status: str) -> Tuple[BudgetStatus, ...]:
        return tuple(item for item in self.items if item.status == status)


@dataclass(frozen=True)
class Insight:
    severity: str     # "info", "warning" or "success"
    title: str
    message: str
