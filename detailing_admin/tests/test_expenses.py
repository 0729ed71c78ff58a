import pytest

from detailing_admin.schemas.expense import ExpenseIn
from detailing_admin.services.expenses import (
    DEFAULT_TAX_RATE,
    ExpenseValidationError,
    InMemoryExpenseSource,
    build_expense,
)


def _payload(**overrides):
    body = {"date": "2026-06-01", "amount": 10, "category": "other"}
    body.update(overrides)
    return ExpenseIn.model_validate(body)


@pytest.mark.unit
@pytest.mark.expenses
class TestBuildExpense:

    def test_minimal_expense(self):
        expense = build_expense(_payload())

        assert expense["date"] == "2026-06-01"
        assert expense["amount"] == 10.0
        assert expense["category"] == "other"
        assert expense["supplier"] == ""
        assert expense["productName"] == ""
        assert expense["note"] == ""
        assert expense["taxIncluded"] is False
        assert expense["taxRate"] == 0.0
        assert "baseAmount" not in expense
        assert expense["createdAt"]

    def test_category_is_lower_cased(self):
        assert build_expense(_payload(category="ONE-TIME"))["category"] == "one-time"

    def test_zero_amount_is_valid(self):
        assert build_expense(_payload(amount=0))["amount"] == 0.0

    def test_numeric_string_amount(self):
        assert build_expense(_payload(amount=" 19.99 "))["amount"] == 19.99

    def test_tax_included_defaults_rate(self):
        expense = build_expense(_payload(taxIncluded=True))
        assert expense["taxRate"] == DEFAULT_TAX_RATE

    def test_explicit_tax_rate_and_base_amount(self):
        expense = build_expense(_payload(taxIncluded=True, taxRate="0.2", baseAmount=8.5))
        assert expense["taxRate"] == 0.2
        assert expense["baseAmount"] == 8.5

    def test_snake_case_keys_are_ignored(self):
        expense = build_expense(_payload(product_name="Wax", tax_included=True))
        assert expense["productName"] == ""
        assert expense["taxIncluded"] is False

    @pytest.mark.parametrize("overrides,error", [
        ({"date": None}, "Invalid or missing date (YYYY-MM-DD)"),
        ({"date": "2026-6-1"}, "Invalid or missing date (YYYY-MM-DD)"),
        ({"date": 20260601}, "Invalid or missing date (YYYY-MM-DD)"),
        ({"amount": None}, "Invalid amount"),
        ({"amount": True}, "Invalid amount"),
        ({"amount": -0.01}, "Invalid amount"),
        ({"amount": float("nan")}, "Invalid amount"),
        ({"amount": "1e400"}, "Invalid amount"),
        ({"amount": [5]}, "Invalid amount"),
        ({"category": "fuel"}, "Invalid category"),
        ({"category": None}, "Invalid category"),
    ])
    def test_rejected(self, overrides, error):
        with pytest.raises(ExpenseValidationError) as exc_info:
            build_expense(_payload(**overrides))
        assert str(exc_info.value) == error


@pytest.mark.unit
@pytest.mark.expenses
class TestInMemoryExpenseSource:

    @pytest.mark.asyncio
    async def test_sorted_by_date_desc(self, expense_source):
        expenses = await expense_source.list_expenses()
        assert [e["_id"] for e in expenses] == ["e2", "e1"]

    @pytest.mark.asyncio
    async def test_same_day_latest_insert_first(self):
        source = InMemoryExpenseSource()
        first = await source.add_expense({"date": "2026-06-01", "amount": 1.0})
        second = await source.add_expense({"date": "2026-06-01", "amount": 2.0})

        assert [e["_id"] for e in await source.list_expenses()] == [second, first]

    @pytest.mark.asyncio
    async def test_listing_returns_copies(self, expense_source):
        expenses = await expense_source.list_expenses()
        expenses[0]["amount"] = 999

        assert (await expense_source.list_expenses())[0]["amount"] == 25.5
