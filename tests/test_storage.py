import itertools
import json
import logging

from budgetcore import config
from budgetcore.storage import JsonFileBackend, KeyValueBackend, MemoryBackend, RecordStore


def make_store(backend=None):
    counter = itertools.count(1)
    return RecordStore(
        backend or MemoryBackend(),
        id_factory=lambda: f"id{next(counter)}",
        clock=lambda: "2024-01-01T00:00:00+00:00",
    )


def tx_fields(**overrides):
    fields = {
        "amount": 500.0,
        "date": "2024-01-10",
        "description": "Lunch",
        "type": "expense",
        "category": "Food & Dining",
    }
    fields.update(overrides)
    return fields


class BrokenBackend(KeyValueBackend):
    def get(self, key):
        raise OSError("storage unavailable")

    def put(self, key, value):
        raise OSError("quota exceeded")

    def delete(self, key):
        raise OSError("storage unavailable")


def test_add_transaction_assigns_id_and_timestamp():
    store = make_store()
    t = store.add_transaction(tx_fields(id="ignored", created_at="ignored"))

    assert t.id == "id1"
    assert t.created_at == "2024-01-01T00:00:00+00:00"
    assert store.list_transactions() == (t,)


def test_update_transaction_keeps_identity():
    store = make_store()
    t = store.add_transaction(tx_fields())
    updated = store.update_transaction(t.id, {"amount": 750.0, "id": "other", "created_at": "later"})

    assert updated.amount == 750.0
    assert updated.id == t.id
    assert updated.created_at == t.created_at
    assert store.list_transactions() == (updated,)


def test_update_unknown_transaction_returns_none():
    store = make_store()
    store.add_transaction(tx_fields())
    assert store.update_transaction("missing", {"amount": 1.0}) is None


def test_delete_transaction():
    store = make_store()
    t = store.add_transaction(tx_fields())

    assert store.delete_transaction(t.id) is True
    assert store.delete_transaction(t.id) is False
    assert store.list_transactions() == ()


def test_add_budget_replaces_same_category_and_month():
    store = make_store()
    first = store.add_budget({"category": "Food & Dining", "amount": 300.0, "month": "2024-02"})
    other = store.add_budget({"category": "Travel", "amount": 100.0, "month": "2024-02"})
    second = store.add_budget({"category": "Food & Dining", "amount": 350.0, "month": "2024-02"})

    food = [b for b in store.list_budgets() if b.category == "Food & Dining" and b.month == "2024-02"]
    assert food == [second]
    assert second.amount == 350.0
    assert second.id != first.id
    assert other in store.list_budgets()


def test_add_budget_keeps_other_months():
    store = make_store()
    store.add_budget({"category": "Fuel", "amount": 300.0, "month": "2024-01"})
    store.add_budget({"category": "Fuel", "amount": 350.0, "month": "2024-02"})
    assert len(store.list_budgets()) == 2


def test_update_and_delete_budget():
    store = make_store()
    b = store.add_budget({"category": "Fuel", "amount": 300.0, "month": "2024-01"})

    updated = store.update_budget(b.id, {"amount": 320.0})
    assert updated.id == b.id
    assert updated.amount == 320.0
    assert store.update_budget("missing", {"amount": 1.0}) is None
    assert store.delete_budget(b.id) is True
    assert store.delete_budget(b.id) is False


def test_broken_backend_degrades_to_empty():
    store = make_store(BrokenBackend())

    assert store.list_transactions() == ()
    assert store.list_budgets() == ()
    t = store.add_transaction(tx_fields())
    assert t.id == "id1"
    assert store.delete_transaction(t.id) is False


def test_corrupted_records_read_as_empty():
    backend = MemoryBackend({
        config.TRANSACTIONS_KEY: "{not json",
        config.BUDGETS_KEY: json.dumps([{"unexpected": 1}]),
    })
    store = make_store(backend)

    assert store.list_transactions() == ()
    assert store.list_budgets() == ()


def test_json_file_backend_round_trip(tmp_path):
    path = tmp_path / "store.json"
    store = make_store(JsonFileBackend(path))
    t = store.add_transaction(tx_fields())

    reopened = RecordStore(JsonFileBackend(path))
    assert reopened.list_transactions() == (t,)
    assert config.TRANSACTIONS_KEY in json.loads(path.read_text(encoding="utf-8"))


def test_json_file_backend_missing_and_corrupt_file(tmp_path):
    path = tmp_path / "store.json"
    backend = JsonFileBackend(path)
    assert backend.get("anything") is None

    path.write_text("[1, 2", encoding="utf-8")
    store = make_store(backend)
    assert store.list_transactions() == ()
    store.add_transaction(tx_fields())
    assert path.read_text(encoding="utf-8") == "[1, 2"


def test_memory_backend_delete():
    backend = MemoryBackend({"k": "v"})
    backend.delete("k")
    backend.delete("k")
    assert backend.get("k") is None


def test_default_ids_are_unique():
    store = RecordStore(MemoryBackend())
    ids = {store.add_transaction(tx_fields()).id for _ in range(20)}
    assert len(ids) == 20


def test_storage_failures_are_logged(caplog):
    store = make_store(BrokenBackend())
    with caplog.at_level(logging.ERROR, logger="budgetcore.storage"):
        store.list_budgets()
        store.add_budget({"category": "Fuel", "amount": 300.0, "month": "2024-01"})

    assert "Error loading personal-finance-budgets" in caplog.text
    assert "Error saving personal-finance-budgets" in caplog.text
