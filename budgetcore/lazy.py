from typing import Callable, Iterable, Iterator, List

from budgetcore.domain import Transaction
from budgetcore.filters import all_of, by_category, by_type, matching_search
from budgetcore.functional import pipe

SORT_KEYS = ("date", "amount", "category", "description")


def iter_transactions(
    trans: Iterable[Transaction], pred: Callable[[Transaction], bool]
) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def list_categories(trans: Iterable[Transaction]) -> List[str]:
    return sorted({t.category for t in trans})


def sort_transactions(trans: Iterable[Transaction], sort_by: str = "date") -> List[Transaction]:
    """Newest and largest first; category and description alphabetical."""
    if sort_by == "date":
        return sorted(trans, key=lambda t: t.date, reverse=True)
    if sort_by == "amount":
        return sorted(trans, key=lambda t: t.amount, reverse=True)
    if sort_by == "category":
        return sorted(trans, key=lambda t: t.category.lower())
    if sort_by == "description":
        return sorted(trans, key=lambda t: t.description.lower())
    raise ValueError(f"Unknown sort key {sort_by!r}, expected one of {SORT_KEYS}")


def filter_transactions(
    trans: Iterable[Transaction],
    search: str = "",
    tx_type: str = "all",
    category: str = "all",
    sort_by: str = "date",
) -> List[Transaction]:
    preds = [matching_search(search)]
    if tx_type != "all":
        preds.append(by_type(tx_type))
    if category != "all":
        preds.append(by_category(category))

    return pipe(
        trans,
        lambda ts: iter_transactions(ts, all_of(*preds)),
        lambda ts: sort_transactions(ts, sort_by),
    )
