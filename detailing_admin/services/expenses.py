"""Business expenses recorded from the dashboard.

Like bookings, expenses live in the external document database; handlers
only use the ``ExpenseSource`` contract.
"""
import copy
import logging
import math
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Protocol

from detailing_admin.schemas.expense import ExpenseIn

logger = logging.getLogger(__name__)

EXPENSE_CATEGORIES = ("one-time", "chemicals", "other")
DEFAULT_TAX_RATE = 0.15
_ISO_DATE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


class ExpenseValidationError(ValueError):
    pass


class ExpenseSource(Protocol):
    async def list_expenses(self) -> List[Dict[str, Any]]:
        ...

    async def add_expense(self, expense: Dict[str, Any]) -> str:
        ...


def _finite_number(value) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _text(value) -> str:
    return str(value).strip() if value else ""


def build_expense(payload: ExpenseIn) -> Dict[str, Any]:
    """Validate a posted expense and shape the stored document."""
    if not isinstance(payload.date, str) or not _ISO_DATE.match(payload.date):
        raise ExpenseValidationError("Invalid or missing date (YYYY-MM-DD)")

    amount = _finite_number(payload.amount)
    if amount is None or amount < 0:
        raise ExpenseValidationError("Invalid amount")

    category = str(payload.category or "").lower()
    if category not in EXPENSE_CATEGORIES:
        raise ExpenseValidationError("Invalid category")

    tax_included = bool(payload.tax_included)
    tax_rate = _finite_number(payload.tax_rate)
    expense = {
        "date": payload.date,
        "amount": amount,
        "category": category,
        "supplier": _text(payload.supplier),
        "productName": _text(payload.product_name),
        "note": str(payload.note) if payload.note else "",
        "taxIncluded": tax_included,
        "taxRate": tax_rate if tax_rate is not None else (DEFAULT_TAX_RATE if tax_included else 0.0),
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }
    base_amount = _finite_number(payload.base_amount)
    if base_amount is not None:
        expense["baseAmount"] = base_amount
    return expense


class InMemoryExpenseSource:
    def __init__(self, expenses: Optional[Iterable[Dict[str, Any]]] = None):
        self._expenses: List[Dict[str, Any]] = [copy.deepcopy(e) for e in expenses or []]

    async def list_expenses(self) -> List[Dict[str, Any]]:
        # newest date first, latest insert first within a day
        ordered = list(enumerate(self._expenses))
        ordered.sort(key=lambda pair: (str(pair[1].get("date") or ""), pair[0]), reverse=True)
        return [copy.deepcopy(expense) for _, expense in ordered]

    async def add_expense(self, expense: Dict[str, Any]) -> str:
        expense_id = uuid.uuid4().hex
        self._expenses.append({**expense, "_id": expense_id})
        logger.info(f"Expense {expense_id} recorded: {expense.get('category')} {expense.get('amount')}")
        return expense_id


_default_source = InMemoryExpenseSource()


def get_expense_source() -> ExpenseSource:
    return _default_source
