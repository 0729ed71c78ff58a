from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class ExpenseIn(BaseModel):
    """Expense as posted by the dashboard form; checked by ``build_expense``."""

    model_config = ConfigDict(extra="ignore")

    date: Optional[Any] = None
    amount: Optional[Any] = None
    category: Optional[Any] = None
    supplier: Optional[Any] = None
    product_name: Optional[Any] = Field(None, alias="productName")
    note: Optional[Any] = None
    tax_included: Optional[Any] = Field(None, alias="taxIncluded")
    tax_rate: Optional[Any] = Field(None, alias="taxRate")
    base_amount: Optional[Any] = Field(None, alias="baseAmount")


class ExpensesOut(BaseModel):
    success: bool = True
    items: List[Dict[str, Any]]


class ExpenseCreated(BaseModel):
    success: bool = True
    insertedId: str
    item: Dict[str, Any]
