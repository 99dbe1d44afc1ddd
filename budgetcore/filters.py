from typing import Callable

from budgetcore.dates import in_month
from budgetcore.domain import Transaction

Predicate = Callable[[Transaction], bool]


def by_type(tx_type: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.type == tx_type

    return _filter


def by_category(category: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.category == category

    return _filter


def by_month(month: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return in_month(t.date, month)

    return _filter


def matching_search(term: str) -> Predicate:
    needle = term.lower()

    def _filter(t: Transaction) -> bool:
        return needle in t.description.lower() or needle in t.category.lower()

    return _filter


def all_of(*preds: Predicate) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter
