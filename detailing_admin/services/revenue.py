import logging
import math
import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Iterable, Optional

from detailing_admin.core.enums import BookingStatus
from detailing_admin.schemas.booking import BookingRecord, MoneyInput, RevenueSummary

logger = logging.getLogger(__name__)

COMPLETED_STATUSES = frozenset({"complete", "completed", "paid", "settled"})
DEGENERATE_MONEY_STRINGS = frozenset({"", "-", ".", "-."})
_NON_MONEY_CHARS = re.compile(r"[^0-9.\-]")


def normalize_booking_status(value) -> str:
    return value.strip().lower() if isinstance(value, str) else ""


def is_completed_booking_status(value) -> bool:
    return normalize_booking_status(value) in COMPLETED_STATUSES


def coerce_money_value(value: MoneyInput) -> Optional[float]:
    """Normalize a raw money value to a finite float, or None when unusable.

    Strings such as ``"$1,250.00"`` are reduced to digits, dots and minus
    signs before parsing. Booleans are not money.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except (OverflowError, ValueError):
            return None
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        cleaned = _NON_MONEY_CHARS.sub("", value).strip()
        if cleaned in DEGENERATE_MONEY_STRINGS:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def as_booking_record(record) -> BookingRecord:
    if isinstance(record, BookingRecord):
        return record
    if isinstance(record, Mapping):
        return BookingRecord.model_validate(
            {key: value for key, value in record.items() if isinstance(key, str)}
        )
    return BookingRecord()


def _sum_money(values: Iterable[MoneyInput]) -> float:
    total = 0.0
    for value in values:
        parsed = coerce_money_value(value)
        if parsed is not None:
            total += parsed
    return total


def _line_totals(vehicles):
    for vehicle in vehicles:
        yield vehicle.get("lineTotal") if isinstance(vehicle, Mapping) else None


def _is_sequence(value) -> bool:
    return isinstance(value, (list, tuple))


def resolve_booking_revenue(record) -> float:
    """Resolve the single revenue figure of a booking.

    Strategies are tried in order and the first usable one wins:
    an explicit total field, the itemized components, the per-car totals and
    finally the vehicle line totals. A computed zero from any of the last
    three counts as "no signal", so a free booking resolves the same as an
    empty one.
    """
    if record is None:
        return 0.0
    booking = as_booking_record(record)

    for _, raw in booking.primary_totals():
        parsed = coerce_money_value(raw)
        if parsed is not None:
            return parsed

    base, travel, tip, discount = (coerce_money_value(v) for v in booking.derived_components())
    has_derived = any(v is not None for v in (base, travel, tip, discount))
    derived_total = (base or 0.0) + (travel or 0.0) + (tip or 0.0) - (discount or 0.0)
    if has_derived and math.isfinite(derived_total) and derived_total != 0:
        return derived_total

    if _is_sequence(booking.per_car_totals):
        per_car_sum = _sum_money(booking.per_car_totals)
        if per_car_sum and math.isfinite(per_car_sum):
            return per_car_sum

    if _is_sequence(booking.vehicles):
        vehicle_sum = _sum_money(_line_totals(booking.vehicles))
        if vehicle_sum and math.isfinite(vehicle_sum):
            return vehicle_sum

    return 0.0


def _month_key(value) -> Optional[str]:
    # bookings carry YYYY-MM-DD dates
    if not isinstance(value, str) or len(value) < 7:
        return None
    key = value[:7]
    year, _, month = key.partition("-")
    if not (year.isdigit() and month.isdigit()):
        return None
    return key


def summarize_revenue(records: Iterable, expenses: Iterable = ()) -> RevenueSummary:
    """Completed revenue per month, and profit once expenses are subtracted."""
    summary = RevenueSummary()
    for raw in records:
        booking = as_booking_record(raw)
        revenue = resolve_booking_revenue(booking)
        summary.booking_count += 1

        if is_completed_booking_status(booking.status):
            summary.completed_count += 1
            summary.completed_revenue += revenue
            month = _month_key(booking.date)
            if month is not None:
                summary.by_month[month] = summary.by_month.get(month, 0.0) + revenue
        elif normalize_booking_status(booking.status) != BookingStatus.CANCELLED.value:
            summary.outstanding_revenue += revenue

    summary.by_month = dict(sorted(summary.by_month.items()))

    for expense in expenses:
        if not isinstance(expense, Mapping):
            continue
        amount = coerce_money_value(expense.get("amount")) or 0.0
        summary.total_expenses += amount
        month = _month_key(expense.get("date"))
        if month is not None:
            summary.expenses_by_month[month] = summary.expenses_by_month.get(month, 0.0) + amount

    summary.expenses_by_month = dict(sorted(summary.expenses_by_month.items()))
    months = sorted(set(summary.by_month) | set(summary.expenses_by_month))
    summary.profit_by_month = {
        month: summary.by_month.get(month, 0.0) - summary.expenses_by_month.get(month, 0.0)
        for month in months
    }
    summary.total_profit = summary.completed_revenue - summary.total_expenses
    logger.debug(
        f"Summarized {summary.booking_count} bookings, "
        f"{summary.completed_count} completed, revenue {summary.completed_revenue}"
    )
    return summary
