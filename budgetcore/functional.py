from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Generic, Mapping, TypeVar, Union

from budgetcore import config
from budgetcore.domain import (
    EXPENSE_CATEGORIES,
    TRANSACTION_TYPES,
    categories_for,
)

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


@dataclass(frozen=True)
class Some(Generic[T]):
    value: T

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self.value))

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self.value)

    def get_or_else(self, default: T) -> T:
        return self.value

    def is_some(self) -> bool:
        return True

    def is_none(self) -> bool:
        return False


@dataclass(frozen=True)
class Nothing(Generic[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def is_none(self) -> bool:
        return True


Maybe = Union[Some[T], Nothing[T]]


@dataclass(frozen=True)
class Right(Generic[T]):
    value: T

    def map(self, f: Callable[[T], U]) -> 'Either[Any, U]':
        return Right(f(self.value))

    def bind(self, f: Callable[[T], 'Either[Any, U]']) -> 'Either[Any, U]':
        return f(self.value)

    def get_or_else(self, default: T) -> T:
        return self.value

    def is_right(self) -> bool:
        return True

    def is_left(self) -> bool:
        return False

    def get_error(self):
        raise ValueError("Cannot get error from Right")


@dataclass(frozen=True)
class Left(Generic[E]):
    error: E

    def map(self, f: Callable) -> 'Left[E]':
        return self

    def bind(self, f: Callable) -> 'Left[E]':
        return self

    def get_or_else(self, default):
        return default

    def is_right(self) -> bool:
        return False

    def is_left(self) -> bool:
        return True

    def get_error(self) -> E:
        return self.error


Either = Union[Left[E], Right[T]]


def pipe(x, *funcs):
    """Pipe a value through a series of functions.

    pipe(x, f, g, h) == h(g(f(x)))
    """
    res = x
    for f in funcs:
        res = f(res)
    return res


AMOUNT_MESSAGE = "Please enter a valid amount greater than 0"


def _positive_amount(value) -> Maybe[float]:
    if isinstance(value, bool):
        return Nothing()
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return Nothing()
    # NaN fails this comparison too
    if not amount > 0 or amount == float("inf"):
        return Nothing()
    return Some(amount)


def _iso_date(value) -> Maybe[str]:
    if isinstance(value, date):
        return Some(value.isoformat()[:10])
    try:
        return Some(date.fromisoformat(str(value)).isoformat())
    except ValueError:
        return Nothing()


def _iso_month(value) -> Maybe[str]:
    return _iso_date(f"{value}-01").map(lambda d: d[:7])


def validate_transaction(fields: Mapping[str, Any]) -> Either[dict, dict]:
    """Check a transaction's user-editable fields.

    Returns Right with normalized fields (float amount, ISO date, trimmed
    description) or Left with one message per failing field.
    """
    errors: dict = {}
    amount = _positive_amount(fields.get("amount"))
    if amount.is_none():
        errors["amount"] = AMOUNT_MESSAGE

    day = _iso_date(fields.get("date")) if fields.get("date") else Nothing()
    if day.is_none():
        errors["date"] = "Please select a date"

    description = str(fields.get("description") or "").strip()
    if not description:
        errors["description"] = "Please enter a description"
    elif len(description) > config.DESCRIPTION_MAX_LENGTH:
        errors["description"] = "Description must be at most 100 characters"

    tx_type = fields.get("type")
    if tx_type not in TRANSACTION_TYPES:
        errors["type"] = "Please select a transaction type"

    category = fields.get("category")
    if not category or category not in categories_for(tx_type):
        errors["category"] = "Please select a category"

    if errors:
        return Left({
            "error": "invalid_transaction",
            "message": f"Transaction has {len(errors)} invalid field(s)",
            "fields": errors,
        })

    return Right({
        "amount": amount.get_or_else(0.0),
        "date": day.get_or_else(""),
        "description": description,
        "type": tx_type,
        "category": category,
    })


def validate_budget(fields: Mapping[str, Any]) -> Either[dict, dict]:
    errors: dict = {}
    category = fields.get("category")
    if not category or category not in EXPENSE_CATEGORIES:
        errors["category"] = "Please select a category"

    amount = _positive_amount(fields.get("amount"))
    if amount.is_none():
        errors["amount"] = AMOUNT_MESSAGE

    month = _iso_month(fields.get("month")) if fields.get("month") else Nothing()
    if month.is_none():
        errors["month"] = "Please select a month"

    if errors:
        return Left({
            "error": "invalid_budget",
            "message": f"Budget has {len(errors)} invalid field(s)",
            "fields": errors,
        })

    return Right({
        "category": category,
        "amount": amount.get_or_else(0.0),
        "month": month.get_or_else(""),
    })
