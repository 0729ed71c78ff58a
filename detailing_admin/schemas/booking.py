from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Tuple

# Raw money value as delivered upstream: number, formatted string, null or junk.
MoneyInput = Any


class BookingRecord(BaseModel):
    """One booking as delivered by the bookings store.

    Nothing about the upstream shape is guaranteed, so every field is an
    explicit optional holding the raw value. Whether a key was present at all
    (even with ``null``) is available through ``model_fields_set``.
    """

    model_config = ConfigDict(extra="allow")

    amount: MoneyInput = None
    total: MoneyInput = None
    total_amount: MoneyInput = Field(None, alias="totalAmount")
    total_price: MoneyInput = Field(None, alias="totalPrice")
    final_amount: MoneyInput = Field(None, alias="finalAmount")
    grand_total: MoneyInput = Field(None, alias="grandTotal")
    due: MoneyInput = None
    invoice_total: MoneyInput = Field(None, alias="invoiceTotal")

    base_sum: MoneyInput = Field(None, alias="baseSum")
    travel_expense: MoneyInput = Field(None, alias="travelExpense")
    tip: MoneyInput = None
    discount: MoneyInput = None

    per_car_totals: Optional[Any] = Field(None, alias="perCarTotals")
    vehicles: Optional[Any] = None

    status: Optional[Any] = None
    date: Optional[Any] = None

    def primary_totals(self) -> List[Tuple[str, MoneyInput]]:
        """Direct total fields that are present, most authoritative first."""
        candidates = (
            ("amount", self.amount),
            ("total", self.total),
            ("total_amount", self.total_amount),
            ("total_price", self.total_price),
            ("final_amount", self.final_amount),
            ("grand_total", self.grand_total),
            ("due", self.due),
            ("invoice_total", self.invoice_total),
        )
        return [(name, value) for name, value in candidates if name in self.model_fields_set]

    def derived_components(self) -> Tuple[MoneyInput, MoneyInput, MoneyInput, MoneyInput]:
        return self.base_sum, self.travel_expense, self.tip, self.discount


class RevenueSummary(BaseModel):
    booking_count: int = 0
    completed_count: int = 0
    completed_revenue: float = 0.0
    outstanding_revenue: float = 0.0
    by_month: Dict[str, float] = Field(default_factory=dict)
    total_expenses: float = 0.0
    expenses_by_month: Dict[str, float] = Field(default_factory=dict)
    profit_by_month: Dict[str, float] = Field(default_factory=dict)
    total_profit: float = 0.0


class BookingsOut(BaseModel):
    success: bool = True
    bookings: List[Dict[str, Any]]
