"""Record store for transactions and budgets.

Records are kept as JSON arrays under two keys of a small key-value
backend. The store never lets a backend failure escape: a failed read
gives an empty collection and a failed write is logged and dropped.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, fields, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type, TypeVar, Union
from uuid import uuid4

from budgetcore import config
from budgetcore.domain import Budget, Transaction

logger = logging.getLogger(__name__)

R = TypeVar("R", Transaction, Budget)

IMMUTABLE_FIELDS = ("id", "created_at")


class KeyValueBackend(ABC):
    """String key-value storage, the equivalent of browser local storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass


class MemoryBackend(KeyValueBackend):

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileBackend(KeyValueBackend):
    """All keys in a single JSON object on disk.

    The file is re-read on every access so that a second process sees
    the latest write; last writer wins.
    """

    def __init__(self, path: Union[str, Path] = config.STORE_PATH):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def _dump(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, sort_keys=True)

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def put(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)


def new_id() -> str:
    return uuid4().hex


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class RecordStore:
    """Transactions and budgets over a :class:`KeyValueBackend`.

    ``id_factory`` and ``clock`` default to random uuids and the UTC
    wall clock; tests inject their own.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], str] = utc_now,
    ):
        self.backend = backend
        self.id_factory = id_factory
        self.clock = clock

    # --- raw collection access

    def _read(self, key: str, record_type: Type[R]) -> Tuple[R, ...]:
        try:
            raw = self.backend.get(key)
            if not raw:
                return ()
            return tuple(record_type(**item) for item in json.loads(raw))
        except (OSError, ValueError, TypeError) as e:
            logger.error("Error loading %s: %s", key, e)
            return ()

    def _write(self, key: str, records: Tuple[R, ...]) -> None:
        try:
            self.backend.put(key, json.dumps([asdict(r) for r in records]))
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error saving %s: %s", key, e)

    def _create(self, record_type: Type[R], data: Mapping[str, Any]) -> R:
        allowed = {f.name for f in fields(record_type)} - set(IMMUTABLE_FIELDS)
        values = {k: v for k, v in data.items() if k in allowed}
        return record_type(id=self.id_factory(), created_at=self.clock(), **values)

    def _update(self, key: str, record_type: Type[R], record_id: str, updates: Mapping[str, Any]) -> Optional[R]:
        records = self._read(key, record_type)
        allowed = {f.name for f in fields(record_type)} - set(IMMUTABLE_FIELDS)
        changes = {k: v for k, v in updates.items() if k in allowed}

        for index, record in enumerate(records):
            if record.id == record_id:
                updated = replace(record, **changes)
                self._write(key, records[:index] + (updated,) + records[index + 1:])
                return updated

        logger.debug("No record %s under %s to update", record_id, key)
        return None

    def _delete(self, key: str, record_type: Type[R], record_id: str) -> bool:
        records = self._read(key, record_type)
        kept = tuple(r for r in records if r.id != record_id)
        if len(kept) == len(records):
            return False
        self._write(key, kept)
        return True

    # --- transactions

    def list_transactions(self) -> Tuple[Transaction, ...]:
        return self._read(config.TRANSACTIONS_KEY, Transaction)

    def add_transaction(self, data: Mapping[str, Any]) -> Transaction:
        transaction = self._create(Transaction, data)
        self._write(config.TRANSACTIONS_KEY, self.list_transactions() + (transaction,))
        logger.info("Added %s transaction %s", transaction.type, transaction.id)
        return transaction

    def update_transaction(self, transaction_id: str, updates: Mapping[str, Any]) -> Optional[Transaction]:
        return self._update(config.TRANSACTIONS_KEY, Transaction, transaction_id, updates)

    def delete_transaction(self, transaction_id: str) -> bool:
        return self._delete(config.TRANSACTIONS_KEY, Transaction, transaction_id)

    # --- budgets

    def list_budgets(self) -> Tuple[Budget, ...]:
        return self._read(config.BUDGETS_KEY, Budget)

    def add_budget(self, data: Mapping[str, Any]) -> Budget:
        """Insert a budget, replacing any budget for the same category and month.

        The replacement always gets a fresh id and timestamp.
        """
        budget = self._create(Budget, data)
        kept = tuple(
            b for b in self.list_budgets()
            if not (b.category == budget.category and b.month == budget.month)
        )
        self._write(config.BUDGETS_KEY, kept + (budget,))
        logger.info("Set budget %s for %s %s", budget.id, budget.category, budget.month)
        return budget

    def update_budget(self, budget_id: str, updates: Mapping[str, Any]) -> Optional[Budget]:
        return self._update(config.BUDGETS_KEY, Budget, budget_id, updates)

    def delete_budget(self, budget_id: str) -> bool:
        return self._delete(config.BUDGETS_KEY, Budget, budget_id)
