from datetime import date

from budgetcore.functional import (
    Left,
    Nothing,
    Right,
    Some,
    pipe,
    validate_budget,
    validate_transaction,
)


def valid_tx(**overrides):
    fields = {
        "amount": "250",
        "date": "2024-03-02",
        "description": "  Groceries run  ",
        "type": "expense",
        "category": "Groceries",
    }
    fields.update(overrides)
    return fields


def test_maybe_map_and_bind():
    assert Some(5).map(lambda x: x * 2) == Some(10)
    assert Nothing().map(lambda x: x * 2).is_none()
    assert Some(2).bind(lambda x: Some(10 // x)).get_or_else(0) == 5
    assert Some(0).bind(lambda x: Nothing() if x == 0 else Some(10 // x)).is_none()
    assert Nothing().get_or_else(7) == 7


def test_either_map_and_bind():
    assert Right(5).map(lambda x: x * 2).get_or_else(0) == 10
    left = Left("error").map(lambda x: x * 2)
    assert left.is_left()
    assert left.get_error() == "error"
    assert Right(0).bind(lambda x: Left("Division by zero")).get_error() == "Division by zero"


def test_pipe():
    assert pipe(3, lambda x: x + 1, lambda x: x * 2) == 8


def test_validate_transaction_normalizes():
    result = validate_transaction(valid_tx())

    assert result.is_right()
    assert result.get_or_else(None) == {
        "amount": 250.0,
        "date": "2024-03-02",
        "description": "Groceries run",
        "type": "expense",
        "category": "Groceries",
    }


def test_validate_transaction_accepts_date_objects():
    result = validate_transaction(valid_tx(date=date(2024, 3, 2)))
    assert result.get_or_else({})["date"] == "2024-03-02"


def test_validate_transaction_reports_every_field():
    result = validate_transaction({"amount": 0, "description": "   ", "type": "expense"})

    assert result.is_left()
    error = result.get_error()
    assert error["error"] == "invalid_transaction"
    assert error["fields"] == {
        "amount": "Please enter a valid amount greater than 0",
        "date": "Please select a date",
        "description": "Please enter a description",
        "category": "Please select a category",
    }


def test_validate_transaction_rejects_bad_amounts():
    for amount in (-5, "abc", None, float("nan"), float("inf"), True):
        assert validate_transaction(valid_tx(amount=amount)).is_left()


def test_validate_transaction_description_length():
    assert validate_transaction(valid_tx(description="x" * 100)).is_right()
    error = validate_transaction(valid_tx(description="x" * 101)).get_error()
    assert error["fields"]["description"] == "Description must be at most 100 characters"


def test_validate_transaction_category_must_match_type():
    error = validate_transaction(valid_tx(type="income", category="Groceries")).get_error()
    assert "category" in error["fields"]
    assert validate_transaction(valid_tx(type="income", category="Salary")).is_right()


def test_validate_transaction_bad_date_and_type():
    error = validate_transaction(valid_tx(date="2024-02-30", type="transfer")).get_error()
    assert set(error["fields"]) == {"date", "type", "category"}


def test_validate_budget():
    result = validate_budget({"category": "Fuel", "amount": 300, "month": "2024-02"})
    assert result == Right({"category": "Fuel", "amount": 300.0, "month": "2024-02"})


def test_validate_budget_errors():
    error = validate_budget({"category": "Salary", "amount": "", "month": "2024-13"}).get_error()
    assert error["error"] == "invalid_budget"
    assert error["fields"] == {
        "category": "Please select a category",
        "amount": "Please enter a valid amount greater than 0",
        "month": "Please select a month",
    }
